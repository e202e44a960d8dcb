"""
Accumulative coin selection and transaction planning.

Inputs are taken in the order the explorer returned them until they cover
the amount plus the fee of the transaction as it stands. The fee is
recomputed after every added input because each input grows the serialized
size.
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from xchain_client.errors import InsufficientFunds
from xchain_client.explorer import UTXO
from xchain_client.fees import fee_for
from xchain_client.tx_builder import (
    OutputKind,
    ScriptType,
    TxInput,
    TxOutput,
    TxPlan,
    estimate_vsize,
    memo_script,
)


def utxo_to_input(utxo: UTXO, default_script: bytes) -> TxInput:
    script = bytes.fromhex(utxo.script_pubkey) if utxo.script_pubkey else default_script
    return TxInput(txid=utxo.txid, vout=utxo.vout, value=utxo.value, script_pubkey=script)


def build_plan(
    utxos: Sequence[UTXO],
    recipient_script: bytes,
    amount: int,
    fee_rate: float,
    sender_script: bytes,
    script_type: ScriptType,
    dust_threshold: int,
    memo: str | None = None,
) -> TxPlan:
    """
    Select inputs and build the unsigned transaction plan.

    Args:
        utxos: Candidate UTXOs, already filtered for the pending policy
        recipient_script: scriptPubKey of the recipient
        amount: Amount to send in base units
        fee_rate: Base units per virtual byte
        sender_script: scriptPubKey of the sender, used for change
        script_type: Script type of the sender's inputs
        dust_threshold: Change below this value is folded into the fee
        memo: Optional memo, encoded as an OP_RETURN output

    Returns:
        TxPlan satisfying total_in == amount + fee + change

    Raises:
        InsufficientFunds: If no prefix of the candidates covers amount + fee
    """
    outputs = [TxOutput(value=amount, script_pubkey=recipient_script, kind=OutputKind.RECIPIENT)]
    if memo:
        outputs.append(TxOutput(value=0, script_pubkey=memo_script(memo), kind=OutputKind.MEMO))

    if not utxos:
        raise InsufficientFunds("No spendable UTXOs")

    selected: list[TxInput] = []
    total_in = 0
    fee = fee_for(fee_rate, estimate_vsize(selected, outputs, script_type))

    for utxo in utxos:
        candidate = utxo_to_input(utxo, sender_script)
        candidate_fee = fee_for(fee_rate, estimate_vsize([*selected, candidate], outputs, script_type))

        # Skip inputs that cost more to spend than they are worth
        if candidate_fee - fee > candidate.value:
            logger.debug(
                f"Skipping uneconomic UTXO {candidate.txid}:{candidate.vout} "
                f"({candidate.value} < {candidate_fee - fee})"
            )
            continue

        selected.append(candidate)
        total_in += candidate.value
        fee = candidate_fee

        if total_in >= amount + fee:
            return _finalize(
                selected, outputs, amount, total_in, fee_rate, sender_script, script_type,
                dust_threshold,
            )

    raise InsufficientFunds(f"Insufficient funds: need {amount + fee}, have {total_in}")


def _finalize(
    inputs: list[TxInput],
    outputs: list[TxOutput],
    amount: int,
    total_in: int,
    fee_rate: float,
    sender_script: bytes,
    script_type: ScriptType,
    dust_threshold: int,
) -> TxPlan:
    change_output = TxOutput(value=0, script_pubkey=sender_script, kind=OutputKind.CHANGE)
    vsize_with_change = estimate_vsize(inputs, [*outputs, change_output], script_type)
    fee_with_change = fee_for(fee_rate, vsize_with_change)
    change = total_in - amount - fee_with_change

    if change > 0 and change >= dust_threshold:
        outputs = [*outputs, TxOutput(value=change, script_pubkey=sender_script, kind=OutputKind.CHANGE)]
        vsize = vsize_with_change
        fee = fee_with_change
    else:
        if change > 0:
            logger.debug(f"Change {change} below dust threshold {dust_threshold}, adding to fee")
        change = 0
        vsize = estimate_vsize(inputs, outputs, script_type)
        fee = total_in - amount

    plan = TxPlan(
        inputs=tuple(inputs),
        outputs=tuple(outputs),
        script_type=script_type,
        fee_rate=fee_rate,
        vsize=vsize,
        fee=fee,
        change=change,
    )
    logger.debug(
        f"Built plan: {len(plan.inputs)} inputs, {len(plan.outputs)} outputs, "
        f"vsize={vsize}, fee={fee}, change={change}"
    )
    return plan
