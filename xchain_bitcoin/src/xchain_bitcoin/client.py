"""
Bitcoin client: SoChain explorer, BitGo fee samples, Blockstream broadcast.
"""

from __future__ import annotations

from xchain_bitcoin.blockstream import BlockstreamBroadcaster
from xchain_bitcoin.params import (
    ASSET_BTC,
    BITGO_COINS,
    CODECS,
    DEFAULT_FEE_RATE,
    MAINNET_PARAMS,
    SOCHAIN_NETWORKS,
)
from xchain_client.config import UTXOClientParams
from xchain_client.explorer import Broadcaster, Explorer
from xchain_client.sochain import SochainExplorer
from xchain_client.tx_builder import ScriptType
from xchain_client.utxo import UTXOClient


class BitcoinClient(UTXOClient):
    asset = ASSET_BTC
    script_type = ScriptType.P2WPKH
    fallback_fee_rate = DEFAULT_FEE_RATE
    codecs = CODECS

    def __init__(
        self,
        params: UTXOClientParams = MAINNET_PARAMS,
        explorer: Explorer | None = None,
        broadcaster: Broadcaster | None = None,
    ):
        super().__init__(params, explorer=explorer, broadcaster=broadcaster)

    def create_explorer(self) -> Explorer:
        return SochainExplorer(
            network_id=SOCHAIN_NETWORKS[self.params.network],
            fee_coin=BITGO_COINS[self.params.network],
            base_url=self.params.explorer_api_url,
            fee_api_url=self.params.fee_api_url,
            decimals=self.asset.decimals,
            timeout=self.params.request_timeout,
            request_delay=self.params.request_delay,
        )

    def create_broadcaster(self) -> Broadcaster:
        return BlockstreamBroadcaster(
            self.params.node_url or self.params.explorer.url,
            timeout=self.params.request_timeout,
        )
