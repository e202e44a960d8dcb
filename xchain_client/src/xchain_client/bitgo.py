"""
Fee-rate samples from the BitGo fee estimate API.

https://app.bitgo.com/docs/#operation/v2.tx.getfeeestimate
"""

from __future__ import annotations

import math

import httpx
from loguru import logger

from xchain_client.errors import CollaboratorError
from xchain_client.explorer import DEFAULT_TIMEOUT, HttpCollaborator, require

BITGO_API_URL = "https://app.bitgo.com/api/v2"


class BitgoFeeSource(HttpCollaborator):
    """Next-block fee estimate for one coin (btc, tbtc, ltc, tltc, bch, tbch)."""

    def __init__(
        self,
        coin: str,
        base_url: str = BITGO_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(base_url, timeout=timeout, transport=transport)
        self.coin = coin

    async def get_fee_rate(self) -> float:
        """Fee rate in base units per byte (feePerKb / 1000)."""
        data = await self.get_json(f"{self.base_url}/{self.coin}/tx/fee")
        fee_per_kb = require(data, "feePerKb")
        try:
            rate = float(fee_per_kb) / 1000
        except (TypeError, ValueError) as e:
            raise CollaboratorError(f"Invalid feePerKb from bitgo: {fee_per_kb!r}") from e
        if not math.isfinite(rate):
            raise CollaboratorError(f"Invalid feePerKb from bitgo: {fee_per_kb!r}")
        logger.debug(f"bitgo {self.coin} fee rate: {rate} per byte")
        return rate
