"""
Address encoding, decoding and scriptPubKey construction.

Supports:
- Segwit v0 (P2WPKH, P2WSH) via bech32
- Legacy base58check (P2PKH, P2SH)
- CashAddr (P2PKH, P2SH) for Bitcoin Cash
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

import base58
import bech32

from xchain_client.errors import InvalidAddress

CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"

CASHADDR_TYPE_P2PKH = 0
CASHADDR_TYPE_P2SH = 1


def hash160(data: bytes) -> bytes:
    """RIPEMD160(SHA256(data))"""
    h = hashlib.new("ripemd160")
    h.update(hashlib.sha256(data).digest())
    return h.digest()


def convertbits(data: bytes | list[int], frombits: int, tobits: int, pad: bool = True) -> list[int]:
    """Convert between bit groups"""
    acc = 0
    bits = 0
    ret = []
    maxv = (1 << tobits) - 1
    max_acc = (1 << (frombits + tobits - 1)) - 1

    for value in data:
        if value < 0 or value >> frombits:
            raise ValueError("Invalid value for bit conversion")
        acc = ((acc << frombits) | value) & max_acc
        bits += frombits
        while bits >= tobits:
            bits -= tobits
            ret.append((acc >> bits) & maxv)

    if pad:
        if bits:
            ret.append((acc << (tobits - bits)) & maxv)
    elif bits >= frombits or ((acc << (tobits - bits)) & maxv):
        raise ValueError("Invalid bits")

    return ret


def p2pkh_script(pubkey_hash: bytes) -> bytes:
    """OP_DUP OP_HASH160 <20-byte-hash> OP_EQUALVERIFY OP_CHECKSIG"""
    return b"\x76\xa9\x14" + pubkey_hash + b"\x88\xac"


def p2sh_script(script_hash: bytes) -> bytes:
    """OP_HASH160 <20-byte-hash> OP_EQUAL"""
    return b"\xa9\x14" + script_hash + b"\x87"


def p2wpkh_script(pubkey_hash: bytes) -> bytes:
    """OP_0 <20-byte-hash>"""
    return b"\x00\x14" + pubkey_hash


def segwit_script(witver: int, witprog: bytes) -> bytes:
    opcode = 0x00 if witver == 0 else 0x50 + witver
    return bytes([opcode, len(witprog)]) + witprog


# CashAddr (https://github.com/bitcoincashorg/bitcoincash.org/blob/master/spec/cashaddr.md)


def cashaddr_polymod(values: list[int]) -> int:
    """CashAddr checksum polymod (40-bit BCH code)"""
    gen = [0x98F2BC8E61, 0x79B76D99E2, 0xF33E5FB3C4, 0xAE2EABE2A8, 0x1E4F43E470]
    chk = 1
    for v in values:
        b = chk >> 35
        chk = ((chk & 0x07FFFFFFFF) << 5) ^ v
        for i in range(5):
            chk ^= gen[i] if ((b >> i) & 1) else 0
    return chk ^ 1


def cashaddr_prefix_expand(prefix: str) -> list[int]:
    return [ord(x) & 0x1F for x in prefix] + [0]


def cashaddr_encode(prefix: str, addr_type: int, payload: bytes) -> str:
    """Encode a 20-byte hash as a CashAddr string (with prefix)."""
    if len(payload) != 20:
        raise ValueError(f"Unsupported CashAddr hash length: {len(payload)}")
    version_byte = addr_type << 3
    data = convertbits(bytes([version_byte]) + payload, 8, 5)
    polymod = cashaddr_polymod(cashaddr_prefix_expand(prefix) + data + [0] * 8)
    checksum = [(polymod >> 5 * (7 - i)) & 31 for i in range(8)]
    return prefix + ":" + "".join(CHARSET[d] for d in data + checksum)


def cashaddr_decode(address: str, default_prefix: str) -> tuple[str, int, bytes]:
    """
    Decode a CashAddr string, with or without its prefix.

    Returns:
        (prefix, address type, 20-byte hash)
    """
    if address.lower() != address and address.upper() != address:
        raise ValueError("Mixed case CashAddr")
    address = address.lower()

    if ":" in address:
        prefix, body = address.split(":", 1)
    else:
        prefix, body = default_prefix, address

    if not body or any(c not in CHARSET for c in body):
        raise ValueError("Invalid CashAddr characters")

    data = [CHARSET.index(c) for c in body]
    if cashaddr_polymod(cashaddr_prefix_expand(prefix) + data) != 0:
        raise ValueError("Invalid CashAddr checksum")

    decoded = bytes(convertbits(data[:-8], 5, 8, pad=False))
    version_byte, payload = decoded[0], decoded[1:]
    if version_byte & 0x07 != 0 or len(payload) != 20:
        raise ValueError("Unsupported CashAddr hash size")

    return prefix, version_byte >> 3, payload


@dataclass(frozen=True)
class AddressCodec:
    """
    Address formats accepted by one chain on one network.

    The first entry of p2pkh_versions is used when encoding legacy addresses.
    """

    p2pkh_versions: tuple[int, ...]
    p2sh_versions: tuple[int, ...]
    bech32_hrp: str | None = None
    cashaddr_prefix: str | None = None

    def encode_p2wpkh(self, pubkey: bytes) -> str:
        if self.bech32_hrp is None:
            raise ValueError("Chain does not support segwit addresses")
        address = bech32.encode(self.bech32_hrp, 0, hash160(pubkey))
        if address is None:
            raise ValueError(f"Failed to encode P2WPKH address for {pubkey.hex()}")
        return address

    def encode_p2pkh(self, pubkey: bytes) -> str:
        payload = bytes([self.p2pkh_versions[0]]) + hash160(pubkey)
        return base58.b58encode_check(payload).decode("ascii")

    def encode_cashaddr(self, pubkey: bytes) -> str:
        """CashAddr P2PKH address without its prefix."""
        if self.cashaddr_prefix is None:
            raise ValueError("Chain does not support CashAddr")
        address = cashaddr_encode(self.cashaddr_prefix, CASHADDR_TYPE_P2PKH, hash160(pubkey))
        return strip_prefix(address)

    def to_script_pubkey(self, address: str) -> bytes:
        """Decode an address into its locking script, raising InvalidAddress."""
        if not address:
            raise InvalidAddress("Empty address")

        if self.bech32_hrp is not None and address.lower().startswith(self.bech32_hrp + "1"):
            witver, witprog = bech32.decode(self.bech32_hrp, address)
            if witver is None or witprog is None:
                raise InvalidAddress(f"Invalid bech32 address: {address}")
            return segwit_script(witver, bytes(witprog))

        if self.cashaddr_prefix is not None and not _looks_like_base58(address):
            try:
                prefix, addr_type, payload = cashaddr_decode(address, self.cashaddr_prefix)
            except ValueError as e:
                raise InvalidAddress(f"Invalid CashAddr address: {address}") from e
            if prefix != self.cashaddr_prefix:
                raise InvalidAddress(f"Wrong network prefix: {prefix}")
            if addr_type == CASHADDR_TYPE_P2PKH:
                return p2pkh_script(payload)
            if addr_type == CASHADDR_TYPE_P2SH:
                return p2sh_script(payload)
            raise InvalidAddress(f"Unsupported CashAddr type: {addr_type}")

        try:
            decoded = base58.b58decode_check(address)
        except ValueError as e:
            raise InvalidAddress(f"Invalid address: {address}") from e

        if len(decoded) != 21:
            raise InvalidAddress(f"Invalid address payload length: {address}")

        version, payload = decoded[0], decoded[1:]
        if version in self.p2pkh_versions:
            return p2pkh_script(payload)
        if version in self.p2sh_versions:
            return p2sh_script(payload)

        raise InvalidAddress(f"Unknown address version {version} for {address}")

    def validate(self, address: str) -> bool:
        try:
            self.to_script_pubkey(address)
        except InvalidAddress:
            return False
        return True

    def normalize(self, address: str) -> str:
        """
        Canonical form of an address.

        Bech32 is lowercased; on CashAddr chains legacy addresses are
        converted and the prefix is stripped. Raises InvalidAddress.
        """
        script = self.to_script_pubkey(address)

        if self.cashaddr_prefix is not None:
            if script[:3] == b"\x76\xa9\x14":
                addr_type, payload = CASHADDR_TYPE_P2PKH, script[3:23]
            else:
                addr_type, payload = CASHADDR_TYPE_P2SH, script[2:22]
            return strip_prefix(cashaddr_encode(self.cashaddr_prefix, addr_type, payload))

        if self.bech32_hrp is not None and address.lower().startswith(self.bech32_hrp + "1"):
            return address.lower()

        return address

    def with_prefix(self, address: str) -> str:
        """Prefixed CashAddr form, as expected by CashAddr-aware explorers."""
        normalized = self.normalize(address)
        if self.cashaddr_prefix is None:
            return normalized
        return f"{self.cashaddr_prefix}:{normalized}"


def strip_prefix(address: str) -> str:
    return address.split(":", 1)[1] if ":" in address else address


def _looks_like_base58(address: str) -> bool:
    # CashAddr bodies always start with q (P2PKH) or p (P2SH); legacy never does
    body = strip_prefix(address).lower()
    return not body.startswith(("q", "p")) and ":" not in address
