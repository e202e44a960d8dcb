"""
xchain_bitcoincash - Bitcoin Cash client for XChain
"""

__version__ = "0.1.0"

from xchain_bitcoincash.client import BitcoinCashClient
from xchain_bitcoincash.params import ASSET_BCH, MAINNET_PARAMS, TESTNET_PARAMS, params_for
from xchain_bitcoincash.wallet import BitcoinCashWallet

__all__ = [
    "ASSET_BCH",
    "BitcoinCashClient",
    "BitcoinCashWallet",
    "MAINNET_PARAMS",
    "TESTNET_PARAMS",
    "params_for",
]
