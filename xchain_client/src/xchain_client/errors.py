"""
Exception hierarchy shared by every chain client.

Validation errors (InvalidPhrase, InvalidIndex, InvalidAddress, InvalidMemo,
InvalidAmount) are raised before any network or signing work starts.
CollaboratorError wraps explorer/node failures and propagates unchanged,
except during fee sampling where a fallback rate is used instead.
"""

from __future__ import annotations


class XChainError(Exception):
    """Base class for all client errors."""

    pass


class InvalidPhrase(XChainError):
    """Mnemonic failed the BIP39 word list or checksum check."""

    pass


class ClientLocked(XChainError):
    """Operation needs a wallet but none is attached (or it was purged)."""

    pass


class InvalidIndex(XChainError):
    """Wallet index is negative, non-integral or not a safe integer."""

    pass


class InvalidAddress(XChainError):
    pass


class InvalidMemo(XChainError):
    pass


class InvalidAmount(XChainError):
    pass


class InsufficientFunds(XChainError):
    """No input set covers the amount plus the fee."""

    pass


class CollaboratorError(XChainError):
    """Explorer or node request failed (network, non-2xx or malformed payload)."""

    pass


class BroadcastError(CollaboratorError):
    """Node rejected the serialized transaction."""

    pass


class TransactionSigningError(XChainError):
    pass
