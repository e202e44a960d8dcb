"""
Fee-rate engine for UTXO chains.

One "next block" fee-rate sample from the explorer is spread into a
three-tier schedule (average = 0.5x, fast = 1x, fastest = 5x). Absolute fees
are the rate times the serialized virtual size, rounded up to whole base
units.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from loguru import logger

from xchain_client.address import p2pkh_script, p2wpkh_script
from xchain_client.errors import CollaboratorError
from xchain_client.models import FeeRates, Fees, FeeType
from xchain_client.tx_builder import (
    OutputKind,
    ScriptType,
    TxInput,
    TxOutput,
    estimate_vsize,
    memo_script,
)

if TYPE_CHECKING:
    from xchain_client.explorer import Explorer

AVERAGE_MULTIPLIER = 0.5
FAST_MULTIPLIER = 1.0
FASTEST_MULTIPLIER = 5.0

# Floor for the reference fees reported by get_fees()
MIN_TX_FEE = 1000

# Reference transaction used for get_fees(): one wallet input, a recipient
# output and a change output, both paying to the wallet's own script type
_REFERENCE_TXID = "00" * 32


def schedule_from(sample: float) -> FeeRates:
    """Spread one fee-rate sample into the average/fast/fastest schedule."""
    if sample < 0:
        raise ValueError(f"Fee rate sample must be non-negative, got {sample}")
    return FeeRates(
        average=sample * AVERAGE_MULTIPLIER,
        fast=sample * FAST_MULTIPLIER,
        fastest=sample * FASTEST_MULTIPLIER,
    )


def fee_for(fee_rate: float, vsize: int) -> int:
    """Absolute fee in whole base units for vsize bytes at fee_rate."""
    if fee_rate < 0:
        raise ValueError(f"Fee rate must be non-negative, got {fee_rate}")
    return math.ceil(fee_rate * vsize)


async def sample_fee_rate(explorer: Explorer, fallback: float) -> float:
    """
    Ask the explorer for the current fee rate.

    Fee estimation is advisory: on collaborator failure the chain's fallback
    rate is returned instead of raising.
    """
    try:
        sample = await explorer.get_suggested_fee_rate()
    except CollaboratorError as e:
        logger.warning(f"Fee rate lookup failed, using fallback {fallback}: {e}")
        return fallback

    if not math.isfinite(sample) or sample < 0:
        logger.warning(f"Explorer returned unusable fee rate {sample}, using fallback {fallback}")
        return fallback

    logger.debug(f"Suggested fee rate: {sample}")
    return sample


def reference_outputs(script_type: ScriptType, memo: str | None = None) -> list[TxOutput]:
    script = _reference_script(script_type)
    outputs = [
        TxOutput(value=0, script_pubkey=script, kind=OutputKind.RECIPIENT),
        TxOutput(value=0, script_pubkey=script, kind=OutputKind.CHANGE),
    ]
    if memo:
        outputs.append(TxOutput(value=0, script_pubkey=memo_script(memo), kind=OutputKind.MEMO))
    return outputs


def fee_for_memo(fee_rate: float, script_type: ScriptType, memo: str | None = None) -> int:
    """
    Fee of a reference one-input, two-output transaction (plus memo output).

    The memo output is added before sizing, so its bytes are paid for.
    """
    inputs = [
        TxInput(
            txid=_REFERENCE_TXID,
            vout=0,
            value=0,
            script_pubkey=_reference_script(script_type),
        )
    ]
    vsize = estimate_vsize(inputs, reference_outputs(script_type, memo), script_type)
    return max(fee_for(fee_rate, vsize), MIN_TX_FEE)


def fees_from_rates(rates: FeeRates, script_type: ScriptType, memo: str | None = None) -> Fees:
    return Fees(
        type=FeeType.PER_BYTE,
        average=fee_for_memo(rates.average, script_type, memo),
        fast=fee_for_memo(rates.fast, script_type, memo),
        fastest=fee_for_memo(rates.fastest, script_type, memo),
    )


def _reference_script(script_type: ScriptType) -> bytes:
    if script_type == ScriptType.P2WPKH:
        return p2wpkh_script(bytes(20))
    return p2pkh_script(bytes(20))
