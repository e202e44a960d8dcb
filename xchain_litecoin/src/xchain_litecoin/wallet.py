"""
Litecoin HD wallet (native segwit ltc1/tltc1 addresses).
"""

from __future__ import annotations

from xchain_client.wallet import HDWallet
from xchain_litecoin.params import CODECS


class LitecoinWallet(HDWallet):
    def encode_address(self, pubkey: bytes) -> str:
        return CODECS[self.params.network].encode_p2wpkh(pubkey)
