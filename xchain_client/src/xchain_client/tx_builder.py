"""
Transaction structures, serialization and size computation.

Sizes are always obtained by serializing the transaction being built with
worst-case placeholder signatures, so the size used for the fee is the size
of the exact structure that is later signed and broadcast.
"""

from __future__ import annotations

import hashlib
import math
import struct
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from xchain_client.errors import InvalidMemo


class ScriptType(str, Enum):
    """Locking script of the wallet's own inputs."""

    P2WPKH = "p2wpkh"
    P2PKH = "p2pkh"


class OutputKind(str, Enum):
    RECIPIENT = "recipient"
    MEMO = "memo"
    CHANGE = "change"


TX_VERSION = 2
SEQUENCE_FINAL = 0xFFFFFFFF

# Low-S DER signatures are at most 71 bytes, plus one sighash byte
MAX_SIGNATURE_SIZE = 72
COMPRESSED_PUBKEY_SIZE = 33

# Standardness limit for OP_RETURN payloads
MAX_MEMO_SIZE = 80

OP_RETURN = 0x6A
OP_PUSHDATA1 = 0x4C


@dataclass(frozen=True)
class TxInput:
    """Transaction input with the prevout data needed to sign it."""

    txid: str
    vout: int
    value: int
    script_pubkey: bytes
    sequence: int = SEQUENCE_FINAL


@dataclass(frozen=True)
class TxOutput:
    value: int
    script_pubkey: bytes
    kind: OutputKind = OutputKind.RECIPIENT


@dataclass(frozen=True)
class TxPlan:
    """
    Unsigned transaction plan.

    Invariant: total_in == amount + fee + change. When a change output is
    present, fee is exactly the fee of vsize at fee_rate; otherwise a
    sub-dust remainder is folded into the fee.
    """

    inputs: tuple[TxInput, ...]
    outputs: tuple[TxOutput, ...]
    script_type: ScriptType
    fee_rate: float
    vsize: int
    fee: int
    change: int = 0
    version: int = TX_VERSION
    locktime: int = 0

    @property
    def total_in(self) -> int:
        return sum(inp.value for inp in self.inputs)

    @property
    def total_out(self) -> int:
        return sum(out.value for out in self.outputs)

    @property
    def amount(self) -> int:
        return sum(out.value for out in self.outputs if out.kind == OutputKind.RECIPIENT)

    @property
    def has_change(self) -> bool:
        return any(out.kind == OutputKind.CHANGE for out in self.outputs)


@dataclass(frozen=True)
class SignedTransaction:
    raw: bytes
    txid: str
    vsize: int
    witnesses: list[list[bytes]] = field(default_factory=list, compare=False)

    @property
    def hex(self) -> str:
        return self.raw.hex()


def hash256(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def varint(n: int) -> bytes:
    """Encode integer as Bitcoin varint."""
    if n < 0xFD:
        return bytes([n])
    elif n <= 0xFFFF:
        return bytes([0xFD]) + struct.pack("<H", n)
    elif n <= 0xFFFFFFFF:
        return bytes([0xFE]) + struct.pack("<I", n)
    else:
        return bytes([0xFF]) + struct.pack("<Q", n)


def push_data(data: bytes) -> bytes:
    """Minimal script push of data (up to 255 bytes)."""
    if len(data) < OP_PUSHDATA1:
        return bytes([len(data)]) + data
    if len(data) <= 0xFF:
        return bytes([OP_PUSHDATA1, len(data)]) + data
    raise ValueError(f"Push too large: {len(data)} bytes")


def memo_script(memo: str) -> bytes:
    """OP_RETURN <utf-8 memo> null-data script."""
    data = memo.encode("utf-8")
    if not data:
        raise InvalidMemo("Memo must not be empty")
    if len(data) > MAX_MEMO_SIZE:
        raise InvalidMemo(f"Memo is {len(data)} bytes, maximum is {MAX_MEMO_SIZE}")
    return bytes([OP_RETURN]) + push_data(data)


def serialize_outpoint(txid: str, vout: int) -> bytes:
    """Serialize outpoint (txid:vout)."""
    # txid is in RPC format (big-endian), need to reverse for raw tx
    txid_bytes = bytes.fromhex(txid)[::-1]
    return txid_bytes + struct.pack("<I", vout)


def serialize_output(out: TxOutput) -> bytes:
    """Serialize a transaction output."""
    return struct.pack("<Q", out.value) + varint(len(out.script_pubkey)) + out.script_pubkey


def serialize_tx(
    inputs: Sequence[TxInput],
    outputs: Sequence[TxOutput],
    script_sigs: Sequence[bytes] | None = None,
    witnesses: Sequence[Sequence[bytes]] | None = None,
    version: int = TX_VERSION,
    locktime: int = 0,
) -> bytes:
    """
    Serialize a transaction.

    The segwit marker and witness section are only written when at least one
    input carries witness data.
    """
    script_sigs = script_sigs or [b""] * len(inputs)
    has_witness = bool(witnesses) and any(witnesses)

    result = struct.pack("<I", version)
    if has_witness:
        result += bytes([0x00, 0x01])

    result += varint(len(inputs))
    for inp, script_sig in zip(inputs, script_sigs, strict=True):
        result += serialize_outpoint(inp.txid, inp.vout)
        result += varint(len(script_sig)) + script_sig
        result += struct.pack("<I", inp.sequence)

    result += varint(len(outputs))
    for out in outputs:
        result += serialize_output(out)

    if has_witness:
        assert witnesses is not None
        for witness in witnesses:
            result += varint(len(witness))
            for item in witness:
                result += varint(len(item)) + item

    result += struct.pack("<I", locktime)
    return result


def get_txid(
    inputs: Sequence[TxInput],
    outputs: Sequence[TxOutput],
    script_sigs: Sequence[bytes] | None = None,
    version: int = TX_VERSION,
    locktime: int = 0,
) -> str:
    """Calculate txid (double SHA256 of non-witness data)."""
    data = serialize_tx(inputs, outputs, script_sigs, None, version, locktime)
    return hash256(data)[::-1].hex()


def virtual_size(base_size: int, total_size: int) -> int:
    """BIP141 virtual size from stripped and full serialized sizes."""
    weight = base_size * 3 + total_size
    return math.ceil(weight / 4)


def placeholder_unlocking_data(script_type: ScriptType) -> tuple[bytes, list[bytes]]:
    """Worst-case (scriptSig, witness) for one of the wallet's inputs."""
    signature = b"\x00" * MAX_SIGNATURE_SIZE
    pubkey = b"\x00" * COMPRESSED_PUBKEY_SIZE
    if script_type == ScriptType.P2WPKH:
        return b"", [signature, pubkey]
    return push_data(signature) + push_data(pubkey), []


def estimate_vsize(
    inputs: Sequence[TxInput],
    outputs: Sequence[TxOutput],
    script_type: ScriptType,
) -> int:
    """
    Virtual size of the transaction once every input is signed.

    Serializes the actual structure with maximum-length signatures.
    """
    script_sig, witness = placeholder_unlocking_data(script_type)
    script_sigs = [script_sig] * len(inputs)
    witnesses = [witness] * len(inputs) if witness else None

    base = len(serialize_tx(inputs, outputs, script_sigs, None))
    total = len(serialize_tx(inputs, outputs, script_sigs, witnesses)) if witnesses else base
    return virtual_size(base, total)
