"""
Bitcoin network constants and default client parameters.
"""

from __future__ import annotations

from xchain_client.address import AddressCodec
from xchain_client.config import ExplorerUrls, UTXOClientParams
from xchain_client.models import Asset, Network

BTC_DECIMALS = 8

ASSET_BTC = Asset(chain="BTC", symbol="BTC", decimals=BTC_DECIMALS)

# bitgo suggestion is unavailable: use this rate (sat/vbyte)
DEFAULT_FEE_RATE = 127.0

CODECS = {
    Network.MAINNET: AddressCodec(p2pkh_versions=(0x00,), p2sh_versions=(0x05,), bech32_hrp="bc"),
    Network.TESTNET: AddressCodec(p2pkh_versions=(0x6F,), p2sh_versions=(0xC4,), bech32_hrp="tb"),
}

SOCHAIN_NETWORKS = {Network.MAINNET: "BTC", Network.TESTNET: "BTCTEST"}
BITGO_COINS = {Network.MAINNET: "btc", Network.TESTNET: "tbtc"}

MAINNET_PARAMS = UTXOClientParams(
    network=Network.MAINNET,
    derivation_path="84'/0'/0'/0/{index}",
    explorer=ExplorerUrls(url="https://blockstream.info"),
    explorer_api_url="https://sochain.com/api/v2",
    fee_api_url="https://app.bitgo.com/api/v2",
    node_url="https://blockstream.info",
    request_delay=0.3,
)

TESTNET_PARAMS = MAINNET_PARAMS.model_copy(
    update={
        "network": Network.TESTNET,
        "derivation_path": "84'/1'/0'/0/{index}",
        "explorer": ExplorerUrls(url="https://blockstream.info/testnet"),
        "node_url": "https://blockstream.info/testnet",
    }
)


def params_for(network: Network) -> UTXOClientParams:
    return TESTNET_PARAMS if network == Network.TESTNET else MAINNET_PARAMS
