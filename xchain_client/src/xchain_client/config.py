"""
Client parameters and environment settings.

ClientParams are immutable per-client configuration, created once when the
client is constructed. XChainSettings reads overrides from the environment
(XCHAIN_* variables or a .env file) for the command line tools.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from xchain_client.models import Network

# Standard P2PKH dust limit in Bitcoin Core
STANDARD_DUST_LIMIT = 546


class ExplorerUrls(BaseModel):
    """Block explorer (web UI) URL templates."""

    model_config = ConfigDict(frozen=True)

    url: str
    address_path: str = "/address/{address}"
    tx_path: str = "/tx/{txid}"

    def get_address_url(self, address: str) -> str:
        return self.url + self.address_path.format(address=address)

    def get_tx_url(self, txid: str) -> str:
        return self.url + self.tx_path.format(txid=txid)


class NodeAuth(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str
    password: str = Field(..., repr=False)


class ClientParams(BaseModel):
    """Chain-invariant configuration owned by one client for its whole life."""

    model_config = ConfigDict(frozen=True)

    network: Network = Network.MAINNET
    # BIP44-style template rendered with str.format(index=...)
    derivation_path: str
    explorer: ExplorerUrls
    # Zero-amount transfers are passed through unless disabled here
    allow_zero_amount: bool = True

    @field_validator("derivation_path")
    @classmethod
    def validate_derivation_path(cls, v: str) -> str:
        if "{index}" not in v:
            raise ValueError("derivation_path must contain an {index} placeholder")
        return v

    def get_full_derivation_path(self, index: int) -> str:
        return self.derivation_path.format(index=index)


class UTXOClientParams(ClientParams):
    """Endpoints and policy shared by UTXO-chain clients."""

    explorer_api_url: str
    fee_api_url: str
    node_url: str | None = None
    node_auth: NodeAuth | None = None
    dust_threshold: int = Field(default=STANDARD_DUST_LIMIT, ge=0)
    # Delay between sequential requests to rate-limited explorers
    request_delay: float = Field(default=0.0, ge=0.0)
    request_timeout: float = Field(default=30.0, gt=0.0)


class XChainSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="XCHAIN_", env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    network: Literal["mainnet", "testnet"] = "mainnet"
    phrase: str = Field(default="", repr=False)
    log_level: str = "INFO"

    explorer_api_url: str = ""
    fee_api_url: str = ""
    node_url: str = ""
    node_username: str = ""
    node_password: str = Field(default="", repr=False)
    request_delay: float | None = None

    def apply(self, params: UTXOClientParams) -> UTXOClientParams:
        """Return a copy of params with non-empty settings overrides applied."""
        update: dict[str, object] = {}
        if self.explorer_api_url:
            update["explorer_api_url"] = self.explorer_api_url
        if self.fee_api_url:
            update["fee_api_url"] = self.fee_api_url
        if self.node_url:
            update["node_url"] = self.node_url
        if self.node_username:
            update["node_auth"] = NodeAuth(
                username=self.node_username, password=self.node_password
            )
        if self.request_delay is not None:
            update["request_delay"] = self.request_delay
        if not update:
            return params
        return params.model_copy(update=update)


def get_settings() -> XChainSettings:
    return XChainSettings()
