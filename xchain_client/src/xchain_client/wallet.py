"""
Wallet capability: address and signing-key derivation from a seed phrase.

A wallet is built by a WalletFactory, an async callable that receives the
client's parameters. The phrase is checked when the factory runs, so a bad
phrase fails the unlock that uses it and nothing else.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from coincurve import PrivateKey
from loguru import logger

from xchain_client.bip32 import HDKey, mnemonic_to_seed, validate_mnemonic
from xchain_client.config import ClientParams
from xchain_client.errors import ClientLocked, InvalidPhrase

WalletFactory = Callable[[ClientParams], Awaitable["Wallet"]]


@dataclass(frozen=True)
class SigningKey:
    """Key material for signing the inputs at one wallet index."""

    private_key: PrivateKey = field(repr=False)
    public_key: bytes

    def sign_digest(self, digest: bytes) -> bytes:
        """DER signature over an already-hashed 32-byte digest."""
        return self.private_key.sign(digest, hasher=None)


class Wallet(ABC):
    @abstractmethod
    def get_address(self, index: int) -> str:
        """Address at wallet index"""

    @abstractmethod
    def purge(self) -> None:
        """Discard all key material; the wallet is unusable afterwards"""

    @property
    @abstractmethod
    def is_purged(self) -> bool: ...


class UTXOWallet(Wallet):
    @abstractmethod
    def get_signing_key(self, index: int) -> SigningKey:
        """Private key and compressed public key at wallet index"""


class HDWallet(UTXOWallet):
    """
    BIP32 wallet over a BIP39 seed.

    Subclasses supply encode_address() for their chain's address format.
    Derived keys are cached per index until purge().
    """

    def __init__(self, seed: bytes, params: ClientParams):
        self.params = params
        self._master: HDKey | None = HDKey.from_seed(seed)
        self._keys: dict[int, HDKey] = {}

    @classmethod
    def create(cls, phrase: str, passphrase: str = "") -> WalletFactory:
        """
        Wallet factory for phrase.

        Raises InvalidPhrase when the returned factory is awaited if the phrase
        fails the BIP39 word list or checksum check.
        """

        async def factory(params: ClientParams) -> HDWallet:
            if not validate_mnemonic(phrase):
                raise InvalidPhrase("Invalid BIP39 mnemonic phrase")
            return cls(mnemonic_to_seed(phrase, passphrase), params)

        return factory

    @abstractmethod
    def encode_address(self, pubkey: bytes) -> str:
        """Chain address for a compressed public key"""

    def _derive(self, index: int) -> HDKey:
        if self._master is None:
            raise ClientLocked("Wallet has been purged")
        key = self._keys.get(index)
        if key is None:
            key = self._master.derive(self.params.get_full_derivation_path(index))
            self._keys[index] = key
        return key

    def get_address(self, index: int) -> str:
        return self.encode_address(self._derive(index).get_public_key_bytes())

    def get_signing_key(self, index: int) -> SigningKey:
        key = self._derive(index)
        return SigningKey(private_key=key.private_key, public_key=key.get_public_key_bytes())

    def purge(self) -> None:
        if self._master is None:
            return
        self._master = None
        self._keys.clear()
        logger.debug("Wallet key material discarded")

    @property
    def is_purged(self) -> bool:
        return self._master is None
