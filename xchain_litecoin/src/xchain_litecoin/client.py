"""
Litecoin client: SoChain explorer, BitGo fee samples, node broadcast.
"""

from __future__ import annotations

from xchain_client.config import UTXOClientParams
from xchain_client.explorer import Broadcaster, Explorer
from xchain_client.node import NodeBroadcaster
from xchain_client.sochain import SochainExplorer
from xchain_client.tx_builder import ScriptType
from xchain_client.utxo import UTXOClient
from xchain_litecoin.params import (
    ASSET_LTC,
    BITGO_COINS,
    CODECS,
    DEFAULT_FEE_RATE,
    MAINNET_PARAMS,
    SOCHAIN_NETWORKS,
)


class LitecoinClient(UTXOClient):
    asset = ASSET_LTC
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
        if not self.params.node_url:
            raise ValueError("Litecoin client requires node_url for broadcasting")
        return NodeBroadcaster(
            self.params.node_url, auth=self.params.node_auth, timeout=self.params.request_timeout
        )
