"""
xchain_client - Core library for the XChain wallet clients

Provides the client lifecycle, wallet capability, fee engine and UTXO
transaction assembly shared by the chain packages.
"""

__version__ = "0.1.0"

from xchain_client.address import AddressCodec
from xchain_client.client import Absent, BaseClient, Unlocked, validate_index
from xchain_client.config import (
    STANDARD_DUST_LIMIT,
    ClientParams,
    ExplorerUrls,
    NodeAuth,
    UTXOClientParams,
    XChainSettings,
)
from xchain_client.errors import (
    BroadcastError,
    ClientLocked,
    CollaboratorError,
    InsufficientFunds,
    InvalidAddress,
    InvalidAmount,
    InvalidIndex,
    InvalidMemo,
    InvalidPhrase,
    TransactionSigningError,
    XChainError,
)
from xchain_client.explorer import UTXO, Broadcaster, Explorer, RawTx, TxIO
from xchain_client.models import (
    MAX_CHILD_INDEX,
    MAX_SAFE_INTEGER,
    Asset,
    Balance,
    FeeOption,
    FeeRates,
    Fees,
    FeesWithRates,
    FeeType,
    Network,
    Tx,
    TxFrom,
    TxHistoryParams,
    TxParams,
    TxsPage,
    TxTo,
    TxType,
)
from xchain_client.utxo import UTXOClient
from xchain_client.wallet import HDWallet, SigningKey, UTXOWallet, Wallet, WalletFactory

__all__ = [
    "Absent",
    "AddressCodec",
    "Asset",
    "Balance",
    "BaseClient",
    "Broadcaster",
    "BroadcastError",
    "ClientLocked",
    "ClientParams",
    "CollaboratorError",
    "Explorer",
    "ExplorerUrls",
    "FeeOption",
    "FeeRates",
    "Fees",
    "FeesWithRates",
    "FeeType",
    "HDWallet",
    "InsufficientFunds",
    "InvalidAddress",
    "InvalidAmount",
    "InvalidIndex",
    "InvalidMemo",
    "InvalidPhrase",
    "MAX_CHILD_INDEX",
    "MAX_SAFE_INTEGER",
    "Network",
    "NodeAuth",
    "RawTx",
    "SigningKey",
    "STANDARD_DUST_LIMIT",
    "TransactionSigningError",
    "Tx",
    "TxFrom",
    "TxHistoryParams",
    "TxIO",
    "TxParams",
    "TxsPage",
    "TxTo",
    "TxType",
    "Unlocked",
    "UTXO",
    "UTXOClient",
    "UTXOClientParams",
    "UTXOWallet",
    "Wallet",
    "WalletFactory",
    "XChainError",
    "XChainSettings",
    "validate_index",
]
