"""
Bitcoin Cash client: Haskoin explorer, BitGo fee samples, node broadcast.

Inputs are legacy P2PKH signed with SIGHASH_ALL | SIGHASH_FORKID.
"""

from __future__ import annotations

from xchain_bitcoincash.haskoin import HaskoinExplorer
from xchain_bitcoincash.params import ASSET_BCH, BITGO_COINS, CODECS, DEFAULT_FEE_RATE, MAINNET_PARAMS
from xchain_client.config import UTXOClientParams
from xchain_client.explorer import Broadcaster, Explorer
from xchain_client.node import NodeBroadcaster
from xchain_client.signing import SIGHASH_ALL, SIGHASH_FORKID
from xchain_client.tx_builder import ScriptType
from xchain_client.utxo import UTXOClient


class BitcoinCashClient(UTXOClient):
    asset = ASSET_BCH
    script_type = ScriptType.P2PKH
    fallback_fee_rate = DEFAULT_FEE_RATE
    codecs = CODECS
    sighash_type = SIGHASH_ALL | SIGHASH_FORKID

    def __init__(
        self,
        params: UTXOClientParams = MAINNET_PARAMS,
        explorer: Explorer | None = None,
        broadcaster: Broadcaster | None = None,
    ):
        super().__init__(params, explorer=explorer, broadcaster=broadcaster)

    def create_explorer(self) -> Explorer:
        return HaskoinExplorer(
            codec=self.codec,
            fee_coin=BITGO_COINS[self.params.network],
            base_url=self.params.explorer_api_url,
            fee_api_url=self.params.fee_api_url,
            timeout=self.params.request_timeout,
            request_delay=self.params.request_delay,
        )

    def create_broadcaster(self) -> Broadcaster:
        if not self.params.node_url:
            raise ValueError("Bitcoin Cash client requires node_url for broadcasting")
        return NodeBroadcaster(
            self.params.node_url, auth=self.params.node_auth, timeout=self.params.request_timeout
        )
