"""
Core data models using Pydantic for validation and serialization.

All amounts are integers in the chain's base unit (satoshi, litoshi, ...).
Fee rates are base units per (virtual) byte and may be fractional.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Largest integer exactly representable as a double (2**53 - 1)
MAX_SAFE_INTEGER = 9_007_199_254_740_991

# Largest non-hardened BIP32 child number; wallets derive the index unhardened
MAX_CHILD_INDEX = 2**31 - 1


class Network(str, Enum):
    MAINNET = "mainnet"
    TESTNET = "testnet"


class FeeOption(str, Enum):
    AVERAGE = "average"
    FAST = "fast"
    FASTEST = "fastest"


class FeeType(str, Enum):
    PER_BYTE = "byte"
    FLAT = "base"


class TxType(str, Enum):
    TRANSFER = "transfer"
    UNKNOWN = "unknown"


class Asset(BaseModel):
    model_config = ConfigDict(frozen=True)

    chain: str
    symbol: str
    decimals: int = Field(default=8, ge=0)

    def __str__(self) -> str:
        return f"{self.chain}.{self.symbol}"


class Balance(BaseModel):
    asset: Asset
    amount: int


class TxFrom(BaseModel):
    from_address: str
    amount: int


class TxTo(BaseModel):
    to: str
    amount: int


class Tx(BaseModel):
    asset: Asset
    from_: list[TxFrom] = Field(default_factory=list, alias="from")
    to: list[TxTo] = Field(default_factory=list)
    date: datetime
    type: TxType = TxType.TRANSFER
    hash: str

    model_config = ConfigDict(populate_by_name=True)


class TxsPage(BaseModel):
    total: int = Field(..., ge=0)
    txs: list[Tx] = Field(default_factory=list)


class FeeRates(BaseModel):
    """Three-tier fee-rate schedule (base units per byte)."""

    model_config = ConfigDict(frozen=True)

    average: float = Field(..., ge=0)
    fast: float = Field(..., ge=0)
    fastest: float = Field(..., ge=0)

    @model_validator(mode="after")
    def check_ordering(self) -> FeeRates:
        if not self.average <= self.fast <= self.fastest:
            raise ValueError("fee rates must satisfy average <= fast <= fastest")
        return self

    def __getitem__(self, option: FeeOption | str) -> float:
        return getattr(self, FeeOption(option).value)


class Fees(BaseModel):
    """Absolute fees per tier for a reference transaction."""

    type: FeeType = FeeType.PER_BYTE
    average: int = Field(..., ge=0)
    fast: int = Field(..., ge=0)
    fastest: int = Field(..., ge=0)

    def __getitem__(self, option: FeeOption | str) -> int:
        return getattr(self, FeeOption(option).value)


class FeesWithRates(BaseModel):
    rates: FeeRates
    fees: Fees


class TxParams(BaseModel):
    """Parameters of one transfer."""

    recipient: str = Field(..., min_length=1)
    amount: int = Field(..., ge=0, description="Amount in base units")
    memo: str | None = None
    # Index is validated by the client so that the error is an InvalidIndex
    wallet_index: int | float | bool = 0
    fee_rate: float | None = Field(default=None, ge=0, description="Base units per byte")


class TxHistoryParams(BaseModel):
    address: str = Field(..., min_length=1)
    offset: int = Field(default=0, ge=0)
    limit: int = Field(default=10, ge=1)
