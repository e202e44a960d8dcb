"""
Seed phrases and BIP32 key derivation for the UTXO-chain wallets.

Only private (parent secret to child secret) derivation is needed: every
wallet holds its own seed, so public-only derivation paths are never used.
"""

from __future__ import annotations

import hashlib
import hmac

from coincurve import PrivateKey
from mnemonic import Mnemonic

# Order of the secp256k1 group
CURVE_ORDER = int("FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141", 16)

HARDENED = 1 << 31

_ENGLISH = Mnemonic("english")


def validate_mnemonic(phrase: str) -> bool:
    """True when every word is on the English list and the checksum matches."""
    try:
        return _ENGLISH.check(phrase)
    except (ValueError, LookupError):
        return False


def mnemonic_to_seed(phrase: str, passphrase: str = "") -> bytes:
    return Mnemonic.to_seed(phrase, passphrase)


def parse_path(path: str) -> list[int]:
    """
    Child numbers of a derivation path, hardened ones offset by 2**31.

    The leading "m/" is optional; "'" or "h" marks a hardened step.
    Raises ValueError on a malformed or out-of-range step.
    """
    steps = [step for step in path.split("/") if step]
    if steps and steps[0] == "m":
        steps = steps[1:]

    numbers: list[int] = []
    for step in steps:
        hardened = step[-1] in "'h"
        digits = step[:-1] if hardened else step
        if not digits.isdigit():
            raise ValueError(f"Invalid path component: {step!r}")
        number = int(digits)
        if number >= HARDENED:
            raise ValueError(f"Path component out of range: {step!r}")
        numbers.append(number + HARDENED if hardened else number)
    return numbers


class HDKey:
    """Extended private key: a secp256k1 key plus its chain code."""

    def __init__(self, private_key: PrivateKey, chain_code: bytes, depth: int = 0):
        self.private_key = private_key
        self.chain_code = chain_code
        self.depth = depth

    @classmethod
    def from_seed(cls, seed: bytes) -> HDKey:
        digest = hmac.new(b"Bitcoin seed", seed, hashlib.sha512).digest()
        return cls(PrivateKey(digest[:32]), digest[32:])

    def derive(self, path: str) -> HDKey:
        key = self
        for number in parse_path(path):
            key = key.child(number)
        return key

    def child(self, number: int) -> HDKey:
        if number >= HARDENED:
            data = b"\x00" + self.private_key.secret
        else:
            data = self.get_public_key_bytes()
        digest = hmac.new(
            self.chain_code, data + number.to_bytes(4, "big"), hashlib.sha512
        ).digest()

        secret = (
            int.from_bytes(digest[:32], "big") + int.from_bytes(self.private_key.secret, "big")
        ) % CURVE_ORDER
        if secret == 0:
            raise ValueError(f"Child {number} yields an invalid key")

        return HDKey(PrivateKey(secret.to_bytes(32, "big")), digest[32:], self.depth + 1)

    def get_public_key_bytes(self) -> bytes:
        """Compressed SEC1 public key."""
        return self.private_key.public_key.format(compressed=True)
