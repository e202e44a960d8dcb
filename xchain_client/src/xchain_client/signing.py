"""
Transaction signing for the wallet's own inputs.

Both supported input types are signed over a BIP143 digest: P2WPKH inputs
with SIGHASH_ALL (BTC, LTC) and P2PKH inputs with SIGHASH_ALL|FORKID (BCH).
"""

from __future__ import annotations

import struct
from collections.abc import Sequence

from loguru import logger

from xchain_client.address import hash160, p2pkh_script, p2wpkh_script
from xchain_client.errors import TransactionSigningError
from xchain_client.tx_builder import (
    ScriptType,
    SignedTransaction,
    TxInput,
    TxOutput,
    TxPlan,
    get_txid,
    hash256,
    push_data,
    serialize_outpoint,
    serialize_output,
    serialize_tx,
    varint,
    virtual_size,
)
from xchain_client.wallet import SigningKey

SIGHASH_ALL = 0x01
SIGHASH_FORKID = 0x40


def compute_sighash_bip143(
    inputs: Sequence[TxInput],
    outputs: Sequence[TxOutput],
    input_index: int,
    script_code: bytes,
    sighash_type: int,
    version: int,
    locktime: int,
) -> bytes:
    if input_index >= len(inputs):
        raise TransactionSigningError("Input index out of range")

    hash_prevouts = hash256(b"".join(serialize_outpoint(inp.txid, inp.vout) for inp in inputs))
    hash_sequence = hash256(b"".join(struct.pack("<I", inp.sequence) for inp in inputs))
    hash_outputs = hash256(b"".join(serialize_output(out) for out in outputs))

    target = inputs[input_index]

    preimage = (
        struct.pack("<I", version)
        + hash_prevouts
        + hash_sequence
        + serialize_outpoint(target.txid, target.vout)
        + varint(len(script_code))
        + script_code
        + struct.pack("<Q", target.value)
        + struct.pack("<I", target.sequence)
        + hash_outputs
        + struct.pack("<I", locktime)
        + struct.pack("<I", sighash_type)
    )

    return hash256(preimage)


def expected_script(script_type: ScriptType, pubkey: bytes) -> bytes:
    """Locking script the wallet's own inputs carry for pubkey."""
    if script_type == ScriptType.P2WPKH:
        return p2wpkh_script(hash160(pubkey))
    return p2pkh_script(hash160(pubkey))


def sign_plan(plan: TxPlan, key: SigningKey, sighash_type: int = SIGHASH_ALL) -> SignedTransaction:
    """
    Sign every input of plan, in order, and serialize the result.

    Raises:
        TransactionSigningError: If an input does not belong to key, the plan
            does not balance, or the signed size exceeds the planned size
    """
    if plan.total_in != plan.total_out + plan.fee:
        raise TransactionSigningError(
            f"Plan does not balance: in={plan.total_in} out={plan.total_out} fee={plan.fee}"
        )

    own_script = expected_script(plan.script_type, key.public_key)
    # The scriptCode for P2WPKH is the equivalent P2PKH script
    script_code = p2pkh_script(hash160(key.public_key))

    script_sigs: list[bytes] = []
    witnesses: list[list[bytes]] = []

    for i, inp in enumerate(plan.inputs):
        if inp.script_pubkey != own_script:
            raise TransactionSigningError(
                f"Input {i} ({inp.txid}:{inp.vout}) is not spendable by the signing key"
            )

        sighash = compute_sighash_bip143(
            plan.inputs, plan.outputs, i, script_code, sighash_type, plan.version, plan.locktime
        )
        signature = key.sign_digest(sighash) + bytes([sighash_type])

        if plan.script_type == ScriptType.P2WPKH:
            script_sigs.append(b"")
            witnesses.append([signature, key.public_key])
        else:
            script_sigs.append(push_data(signature) + push_data(key.public_key))

    raw = serialize_tx(
        plan.inputs, plan.outputs, script_sigs, witnesses or None, plan.version, plan.locktime
    )
    base_size = len(serialize_tx(plan.inputs, plan.outputs, script_sigs, None, plan.version, plan.locktime))
    vsize = virtual_size(base_size, len(raw))

    if vsize > plan.vsize:
        raise TransactionSigningError(
            f"Signed transaction is larger than planned: {vsize} > {plan.vsize}"
        )

    txid = get_txid(plan.inputs, plan.outputs, script_sigs, plan.version, plan.locktime)
    logger.debug(f"Signed {len(plan.inputs)} inputs, txid={txid}, vsize={vsize}")
    return SignedTransaction(raw=raw, txid=txid, vsize=vsize, witnesses=witnesses)
