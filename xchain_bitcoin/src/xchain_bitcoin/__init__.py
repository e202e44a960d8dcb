"""
xchain_bitcoin - Bitcoin client for XChain
"""

__version__ = "0.1.0"

from xchain_bitcoin.client import BitcoinClient
from xchain_bitcoin.params import ASSET_BTC, MAINNET_PARAMS, TESTNET_PARAMS, params_for
from xchain_bitcoin.wallet import BitcoinWallet

__all__ = [
    "ASSET_BTC",
    "BitcoinClient",
    "BitcoinWallet",
    "MAINNET_PARAMS",
    "TESTNET_PARAMS",
    "params_for",
]
