"""
Haskoin Store explorer for Bitcoin Cash.

https://api.haskoin.com

Haskoin reports amounts in satoshis and addresses in prefixed CashAddr form.
Addresses are sent prefixed and returned prefix-stripped.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from xchain_client.address import AddressCodec, strip_prefix
from xchain_client.bitgo import BITGO_API_URL, BitgoFeeSource
from xchain_client.errors import CollaboratorError
from xchain_client.explorer import (
    DEFAULT_TIMEOUT,
    UTXO,
    Explorer,
    HttpCollaborator,
    RawTx,
    TxIO,
    require,
)

HASKOIN_API_URL = "https://api.haskoin.com/bch"


def _is_confirmed(item: dict[str, Any]) -> bool:
    block = item.get("block") or {}
    return isinstance(block, dict) and block.get("height") is not None


class HaskoinExplorer(HttpCollaborator, Explorer):
    def __init__(
        self,
        codec: AddressCodec,
        fee_coin: str,
        base_url: str = HASKOIN_API_URL,
        fee_api_url: str = BITGO_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        request_delay: float = 0.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(base_url, timeout=timeout, request_delay=request_delay, transport=transport)
        self.codec = codec
        self.fee_source = BitgoFeeSource(
            fee_coin, base_url=fee_api_url, timeout=timeout, transport=transport
        )

    def _address_path(self, address: str) -> str:
        return f"{self.base_url}/address/{self.codec.with_prefix(address)}"

    async def get_balance(self, address: str) -> int:
        data = await self.get_json(f"{self._address_path(address)}/balance")
        return int(require(data, "confirmed")) + int(require(data, "unconfirmed"))

    async def get_unspent_outputs(self, address: str, include_pending: bool) -> list[UTXO]:
        data = await self.get_json(f"{self._address_path(address)}/unspent")
        if not isinstance(data, list):
            raise CollaboratorError("Haskoin unspent response is not a list")

        utxos: list[UTXO] = []
        for item in data:
            confirmed = _is_confirmed(item)
            if not include_pending and not confirmed:
                continue
            utxos.append(
                UTXO(
                    txid=require(item, "txid"),
                    vout=int(require(item, "index")),
                    value=int(require(item, "value")),
                    script_pubkey=item.get("pkscript") or "",
                    confirmed=confirmed,
                    address=strip_prefix(item.get("address") or address),
                )
            )

        logger.debug(f"Found {len(utxos)} UTXOs for {address}")
        return utxos

    def _parse_io(self, items: list[dict[str, Any]]) -> list[TxIO]:
        result = []
        for item in items:
            address = item.get("address")
            result.append(
                TxIO(
                    address=strip_prefix(address) if address else None,
                    value=int(item.get("value") or 0),
                    type="" if address else "nulldata",
                )
            )
        return result

    def _parse_tx(self, data: Any) -> RawTx:
        return RawTx(
            txid=require(data, "txid"),
            time=int(require(data, "time")),
            inputs=self._parse_io(require(data, "inputs")),
            outputs=self._parse_io(require(data, "outputs")),
            confirmed=_is_confirmed(data),
        )

    async def get_transaction(self, txid: str) -> RawTx:
        return self._parse_tx(await self.get_json(f"{self.base_url}/transaction/{txid}"))

    async def get_transaction_history(
        self, address: str, offset: int, limit: int
    ) -> tuple[int, list[RawTx]]:
        account = await self.get_json(f"{self._address_path(address)}/balance")
        total = int(require(account, "txs"))

        data = await self.get_json(
            f"{self._address_path(address)}/transactions/full",
            params={"offset": offset, "limit": limit},
        )
        if not isinstance(data, list):
            raise CollaboratorError("Haskoin transactions response is not a list")
        return total, [self._parse_tx(item) for item in data]

    async def get_suggested_fee_rate(self) -> float:
        return await self.fee_source.get_fee_rate()

    async def close(self) -> None:
        await self.fee_source.close()
        await super().close()
