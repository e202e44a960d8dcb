"""
Bitcoin HD wallet (BIP84 native segwit addresses).
"""

from __future__ import annotations

from xchain_bitcoin.params import CODECS
from xchain_client.wallet import HDWallet


class BitcoinWallet(HDWallet):
    def encode_address(self, pubkey: bytes) -> str:
        return CODECS[self.params.network].encode_p2wpkh(pubkey)
