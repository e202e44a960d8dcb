"""
Bitcoin Cash HD wallet (CashAddr P2PKH addresses, prefix stripped).
"""

from __future__ import annotations

from xchain_bitcoincash.params import CODECS
from xchain_client.wallet import HDWallet


class BitcoinCashWallet(HDWallet):
    def encode_address(self, pubkey: bytes) -> str:
        return CODECS[self.params.network].encode_cashaddr(pubkey)
