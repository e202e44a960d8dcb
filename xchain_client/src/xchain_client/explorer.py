"""
Explorer and broadcaster collaborator interfaces.

Implementations provide read access to chain data (balances, UTXOs,
transactions, fee estimates) and transaction broadcast. Every failure is
surfaced as CollaboratorError (or BroadcastError); there are no retries at
this layer.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import httpx
from loguru import logger

from xchain_client.errors import CollaboratorError

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class UTXO:
    txid: str
    vout: int
    value: int
    script_pubkey: str = ""
    confirmed: bool = True
    address: str | None = None


@dataclass(frozen=True)
class TxIO:
    """One input or output of an explorer transaction (address is None for null-data)."""

    address: str | None
    value: int
    type: str = ""

    @property
    def is_null_data(self) -> bool:
        return self.type == "nulldata" or self.address is None


@dataclass(frozen=True)
class RawTx:
    txid: str
    time: int
    inputs: list[TxIO] = field(default_factory=list)
    outputs: list[TxIO] = field(default_factory=list)
    confirmed: bool = True


class Explorer(ABC):
    """
    Abstract explorer interface consumed by the UTXO clients.
    """

    @abstractmethod
    async def get_balance(self, address: str) -> int:
        """Confirmed plus unconfirmed balance in base units"""

    @abstractmethod
    async def get_unspent_outputs(self, address: str, include_pending: bool) -> list[UTXO]:
        """UTXOs of address; pending ones only if include_pending"""

    @abstractmethod
    async def get_transaction(self, txid: str) -> RawTx:
        """Get transaction by txid"""

    @abstractmethod
    async def get_transaction_history(
        self, address: str, offset: int, limit: int
    ) -> tuple[int, list[RawTx]]:
        """Total transaction count and one page of full transactions"""

    @abstractmethod
    async def get_suggested_fee_rate(self) -> float:
        """Next-block fee estimate in base units per byte"""

    async def close(self) -> None:
        """Close explorer connections"""
        pass


class Broadcaster(ABC):
    @abstractmethod
    async def broadcast(self, tx_hex: str) -> str:
        """Broadcast a signed transaction, returns txid"""

    async def close(self) -> None:
        pass


class HttpCollaborator:
    """
    Shared httpx plumbing for explorer and node clients.

    Requests are issued one at a time; paced() inserts request_delay between
    consecutive calls against rate-limited services.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        request_delay: float = 0.0,
        auth: tuple[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.request_delay = request_delay
        self.client = httpx.AsyncClient(timeout=timeout, auth=auth, transport=transport)
        self._requests_made = 0

    async def paced(self) -> None:
        """Sleep request_delay before every request but the first."""
        if self._requests_made and self.request_delay > 0:
            await asyncio.sleep(self.request_delay)
        self._requests_made += 1

    async def _request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
        content: str | None = None,
    ) -> httpx.Response:
        await self.paced()
        logger.debug(f"{method} {url}")
        try:
            response = await self.client.request(
                method, url, params=params, json=json, content=content
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Request failed: {method} {url} - HTTP {e.response.status_code}")
            raise CollaboratorError(
                f"{method} {url} returned HTTP {e.response.status_code}: {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Request failed: {method} {url} - {e}")
            raise CollaboratorError(f"{method} {url} failed: {e}") from e
        return response

    async def get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        response = await self._request("GET", url, params=params)
        try:
            return response.json()
        except ValueError as e:
            raise CollaboratorError(f"Malformed JSON from {url}") from e

    async def post_json(self, url: str, payload: Any) -> Any:
        response = await self._request("POST", url, json=payload)
        try:
            return response.json()
        except ValueError as e:
            raise CollaboratorError(f"Malformed JSON from {url}") from e

    async def post_text(self, url: str, body: str) -> str:
        response = await self._request("POST", url, content=body)
        return response.text

    async def close(self) -> None:
        await self.client.aclose()


def require(data: Any, *keys: str | int) -> Any:
    """
    Walk nested keys of a decoded payload, raising CollaboratorError on a
    missing key or unexpected shape.
    """
    current = data
    for key in keys:
        try:
            current = current[key]
        except (KeyError, IndexError, TypeError) as e:
            raise CollaboratorError(f"Unexpected response shape, missing {key!r}") from e
    return current
