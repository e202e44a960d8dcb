"""
xchain_litecoin - Litecoin client for XChain
"""

__version__ = "0.1.0"

from xchain_litecoin.client import LitecoinClient
from xchain_litecoin.params import ASSET_LTC, MAINNET_PARAMS, TESTNET_PARAMS, params_for
from xchain_litecoin.wallet import LitecoinWallet

__all__ = [
    "ASSET_LTC",
    "LitecoinClient",
    "LitecoinWallet",
    "MAINNET_PARAMS",
    "TESTNET_PARAMS",
    "params_for",
]
