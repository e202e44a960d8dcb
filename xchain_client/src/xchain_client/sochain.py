"""
SoChain v2 explorer, used by the Bitcoin and Litecoin clients.

https://sochain.com/api

SoChain reports amounts as decimal coin strings; they are converted to base
units here. SoChain has no fee estimate, so fee samples come from BitGo.
SoChain is rate limited, so every multi-request operation (history pages,
UTXO pages, confirmation checks) runs sequentially with request_delay
between calls.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

import httpx
from loguru import logger

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

SOCHAIN_API_URL = "https://sochain.com/api/v2"

# get_tx_unspent returns at most this many entries per page
UNSPENT_PAGE_SIZE = 100

DEFAULT_REQUEST_DELAY = 0.3


def to_base_units(value: Any, decimals: int = 8) -> int:
    """Convert a decimal coin amount ("0.00050000") to integer base units."""
    try:
        amount = Decimal(str(value)).scaleb(decimals)
    except InvalidOperation as e:
        raise CollaboratorError(f"Invalid amount: {value!r}") from e
    if amount != amount.to_integral_value():
        raise CollaboratorError(f"Amount {value!r} has more than {decimals} decimals")
    return int(amount)


class SochainExplorer(HttpCollaborator, Explorer):
    def __init__(
        self,
        network_id: str,
        fee_coin: str,
        base_url: str = SOCHAIN_API_URL,
        fee_api_url: str = BITGO_API_URL,
        decimals: int = 8,
        timeout: float = DEFAULT_TIMEOUT,
        request_delay: float = DEFAULT_REQUEST_DELAY,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            network_id: SoChain network id (BTC, BTCTEST, LTC, LTCTEST)
            fee_coin: BitGo coin id used for fee samples (btc, tbtc, ltc, tltc)
        """
        super().__init__(base_url, timeout=timeout, request_delay=request_delay, transport=transport)
        self.network_id = network_id
        self.decimals = decimals
        self.fee_source = BitgoFeeSource(
            fee_coin, base_url=fee_api_url, timeout=timeout, transport=transport
        )

    async def _get(self, endpoint: str, *args: str) -> Any:
        path = "/".join(args)
        payload = await self.get_json(f"{self.base_url}/{endpoint}/{self.network_id}/{path}")
        if not isinstance(payload, dict) or payload.get("status") != "success":
            status = payload.get("status") if isinstance(payload, dict) else None
            raise CollaboratorError(f"SoChain {endpoint} failed with status {status!r}")
        return require(payload, "data")

    async def get_balance(self, address: str) -> int:
        data = await self._get("get_address_balance", address)
        confirmed = to_base_units(require(data, "confirmed_balance"), self.decimals)
        unconfirmed = to_base_units(require(data, "unconfirmed_balance"), self.decimals)
        return confirmed + unconfirmed

    async def _get_unspent_page(self, address: str, after_txid: str | None) -> list[dict[str, Any]]:
        args = [address, after_txid] if after_txid else [address]
        data = await self._get("get_tx_unspent", *args)
        txs = require(data, "txs")
        if not isinstance(txs, list):
            raise CollaboratorError("SoChain get_tx_unspent returned no tx list")
        return txs

    async def is_tx_confirmed(self, txid: str) -> bool:
        data = await self._get("is_tx_confirmed", txid)
        return bool(require(data, "is_confirmed"))

    async def get_unspent_outputs(self, address: str, include_pending: bool) -> list[UTXO]:
        entries: list[dict[str, Any]] = []
        after_txid: str | None = None
        while True:
            page = await self._get_unspent_page(address, after_txid)
            entries.extend(page)
            if len(page) < UNSPENT_PAGE_SIZE:
                break
            after_txid = require(page, -1, "txid")

        utxos: list[UTXO] = []
        for entry in entries:
            txid = require(entry, "txid")
            confirmed = int(entry.get("confirmations") or 0) > 0
            if not include_pending and not confirmed:
                # Unconfirmed by count, double check with is_tx_confirmed
                confirmed = await self.is_tx_confirmed(txid)
                if not confirmed:
                    logger.debug(f"Excluding pending UTXO {txid}:{entry.get('output_no')}")
                    continue
            utxos.append(
                UTXO(
                    txid=txid,
                    vout=int(require(entry, "output_no")),
                    value=to_base_units(require(entry, "value"), self.decimals),
                    script_pubkey=entry.get("script_hex") or "",
                    confirmed=confirmed,
                    address=address,
                )
            )

        logger.debug(f"Found {len(utxos)} UTXOs for {address}")
        return utxos

    def _parse_io(self, items: list[dict[str, Any]]) -> list[TxIO]:
        result = []
        for item in items:
            io_type = item.get("type") or ""
            address = item.get("address")
            if io_type == "nulldata":
                address = None
            result.append(
                TxIO(
                    address=address,
                    value=to_base_units(item.get("value") or "0", self.decimals),
                    type=io_type,
                )
            )
        return result

    async def get_transaction(self, txid: str) -> RawTx:
        data = await self._get("get_tx", txid)
        return RawTx(
            txid=require(data, "txid"),
            time=int(require(data, "time")),
            inputs=self._parse_io(require(data, "inputs")),
            outputs=self._parse_io(require(data, "outputs")),
            confirmed=int(data.get("confirmations") or 0) > 0,
        )

    async def get_transaction_history(
        self, address: str, offset: int, limit: int
    ) -> tuple[int, list[RawTx]]:
        # SoChain has no pagination, the page is cut client side
        data = await self._get("address", address)
        txs = require(data, "txs")
        total = len(txs)

        page: list[RawTx] = []
        for item in txs[offset : offset + limit]:
            page.append(await self.get_transaction(require(item, "txid")))
        return total, page

    async def get_suggested_fee_rate(self) -> float:
        return await self.fee_source.get_fee_rate()

    async def close(self) -> None:
        await self.fee_source.close()
        await super().close()
