"""
Client lifecycle shared by every chain client.

A client is constructed from immutable parameters, initialized once through
an ordered list of async setup steps, and optionally unlocked with a wallet.
The wallet is the only mutable state; it is replaced wholesale, so an
operation that already captured a wallet keeps that exact object, and a
purged or replaced wallet refuses to derive anything.
"""

from __future__ import annotations

from abc import ABC
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from loguru import logger

from xchain_client.config import ClientParams
from xchain_client.errors import ClientLocked, InvalidIndex
from xchain_client.models import MAX_CHILD_INDEX, MAX_SAFE_INTEGER, Network
from xchain_client.wallet import Wallet, WalletFactory

P = TypeVar("P", bound=ClientParams)
W = TypeVar("W", bound=Wallet)
C = TypeVar("C", bound="BaseClient[Any, Any]")

Initializer = Callable[[], Awaitable[None]]


@dataclass(frozen=True)
class Absent:
    pass


@dataclass(frozen=True)
class Unlocked(Generic[W]):
    wallet: W


WalletState = Absent | Unlocked


def validate_index(index: Any) -> int:
    """
    Check a wallet index before any I/O.

    Accepts non-negative integers (and integral floats such as 1.0) that a
    wallet can derive, i.e. up to 2**31 - 1. Raises InvalidIndex for anything
    else, including booleans.
    """
    if isinstance(index, bool):
        raise InvalidIndex(f"Index must be an integer, got {index!r}")
    if isinstance(index, float):
        if not index.is_integer():
            raise InvalidIndex(f"Index must be an integer, got {index!r}")
        index = int(index)
    if not isinstance(index, int):
        raise InvalidIndex(f"Index must be an integer, got {type(index).__name__}")
    if index < 0:
        raise InvalidIndex(f"Index must be non-negative, got {index}")
    if index > MAX_SAFE_INTEGER:
        raise InvalidIndex(f"Index {index} exceeds maximum {MAX_SAFE_INTEGER}")
    if index > MAX_CHILD_INDEX:
        raise InvalidIndex(f"Index {index} is not derivable, maximum is {MAX_CHILD_INDEX}")
    return index


class BaseClient(ABC, Generic[P, W]):
    """
    Chain-agnostic client lifecycle.

    Specializations that need async setup extend initializers():

        def initializers(self):
            return [*super().initializers(), self._connect]

    so the most general step always runs first.
    """

    def __init__(self, params: P):
        self.params = params
        self._state: WalletState = Absent()
        self._initialized = False

    @classmethod
    async def create(
        cls: type[C],
        params: Any,
        wallet_factory: WalletFactory | None = None,
        **kwargs: Any,
    ) -> C:
        """
        Construct, initialize and optionally unlock a client.

        Any failure closes the half-built client and propagates.
        """
        client = cls(params, **kwargs)
        try:
            await client.initialize()
            if wallet_factory is not None:
                await client.unlock(wallet_factory)
        except Exception:
            await client.close()
            raise
        logger.info(f"{cls.__name__} ready on {client.params.network.value}")
        return client

    def initializers(self) -> list[Initializer]:
        return []

    async def initialize(self) -> None:
        """Run every setup step once, in order."""
        if self._initialized:
            return
        for step in self.initializers():
            logger.debug(f"Running initializer {step.__name__}")
            await step()
        self._initialized = True

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def unlock(self, wallet_factory: WalletFactory) -> None:
        """
        Attach a new wallet built by wallet_factory.

        The new wallet is built before anything changes. If the factory
        fails, the current wallet stays attached and usable. On success the
        previous wallet is purged after the swap.
        """
        wallet = await wallet_factory(self.params)

        previous = self._state
        self._state = Unlocked(wallet)

        if isinstance(previous, Unlocked):
            if previous.wallet is wallet:
                logger.debug("Factory returned the attached wallet, nothing to purge")
                return
            previous.wallet.purge()
            logger.info("Wallet replaced, previous wallet purged")
        else:
            logger.info("Wallet unlocked")

    def purge_client(self) -> None:
        """Detach and purge the wallet. Safe to call when already locked."""
        previous = self._state
        self._state = Absent()
        if isinstance(previous, Unlocked):
            previous.wallet.purge()
            logger.info("Wallet purged")

    @property
    def is_unlocked(self) -> bool:
        return isinstance(self._state, Unlocked)

    def _require_wallet(self) -> W:
        state = self._state
        if not isinstance(state, Unlocked):
            raise ClientLocked("Client has no wallet, call unlock() first")
        return state.wallet

    async def get_address(self, index: Any = 0) -> str:
        wallet = self._require_wallet()
        return wallet.get_address(validate_index(index))

    def get_network(self) -> Network:
        return self.params.network

    def get_explorer_url(self) -> str:
        return self.params.explorer.url

    def get_explorer_address_url(self, address: str) -> str:
        return self.params.explorer.get_address_url(address)

    def get_explorer_tx_url(self, txid: str) -> str:
        return self.params.explorer.get_tx_url(txid)

    def get_full_derivation_path(self, index: Any = 0) -> str:
        return self.params.get_full_derivation_path(validate_index(index))

    async def close(self) -> None:
        """Release collaborator connections. The wallet is left attached."""
        pass

    async def __aenter__(self: C) -> C:
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.purge_client()
        await self.close()
