"""
Bitcoin Cash network constants and default client parameters.
"""

from __future__ import annotations

from xchain_client.address import AddressCodec
from xchain_client.config import ExplorerUrls, NodeAuth, UTXOClientParams
from xchain_client.models import Asset, Network

BCH_DECIMALS = 8

ASSET_BCH = Asset(chain="BCH", symbol="BCH", decimals=BCH_DECIMALS)

DEFAULT_FEE_RATE = 1.0

CODECS = {
    Network.MAINNET: AddressCodec(
        p2pkh_versions=(0x00,), p2sh_versions=(0x05,), cashaddr_prefix="bitcoincash"
    ),
    Network.TESTNET: AddressCodec(
        p2pkh_versions=(0x6F,), p2sh_versions=(0xC4,), cashaddr_prefix="bchtest"
    ),
}

BITGO_COINS = {Network.MAINNET: "bch", Network.TESTNET: "tbch"}

MAINNET_PARAMS = UTXOClientParams(
    network=Network.MAINNET,
    derivation_path="44'/145'/0'/0/{index}",
    explorer=ExplorerUrls(url="https://www.blockchain.com/bch"),
    explorer_api_url="https://api.haskoin.com/bch",
    fee_api_url="https://app.bitgo.com/api/v2",
    node_url="https://bch.thorchain.info",
    node_auth=NodeAuth(username="thorchain", password="password"),
)

TESTNET_PARAMS = MAINNET_PARAMS.model_copy(
    update={
        "network": Network.TESTNET,
        "derivation_path": "44'/1'/0'/0/{index}",
        "explorer": ExplorerUrls(url="https://www.blockchain.com/bch-testnet"),
        "explorer_api_url": "https://api.haskoin.com/bchtest",
        "node_url": "https://testnet.bch.thorchain.info",
    }
)


def params_for(network: Network) -> UTXOClientParams:
    return TESTNET_PARAMS if network == Network.TESTNET else MAINNET_PARAMS
