"""
Litecoin network constants and default client parameters.
"""

from __future__ import annotations

from xchain_client.address import AddressCodec
from xchain_client.config import ExplorerUrls, NodeAuth, UTXOClientParams
from xchain_client.models import Asset, Network

LTC_DECIMALS = 8

ASSET_LTC = Asset(chain="LTC", symbol="LTC", decimals=LTC_DECIMALS)

DEFAULT_FEE_RATE = 1.0

# Legacy P2SH addresses may still use the Bitcoin version byte (3... / 2...)
CODECS = {
    Network.MAINNET: AddressCodec(
        p2pkh_versions=(0x30,), p2sh_versions=(0x32, 0x05), bech32_hrp="ltc"
    ),
    Network.TESTNET: AddressCodec(
        p2pkh_versions=(0x6F,), p2sh_versions=(0x3A, 0xC4), bech32_hrp="tltc"
    ),
}

SOCHAIN_NETWORKS = {Network.MAINNET: "LTC", Network.TESTNET: "LTCTEST"}
BITGO_COINS = {Network.MAINNET: "ltc", Network.TESTNET: "tltc"}

MAINNET_PARAMS = UTXOClientParams(
    network=Network.MAINNET,
    derivation_path="84'/2'/0'/0/{index}",
    explorer=ExplorerUrls(
        url="https://ltc.bitaps.com", address_path="/{address}", tx_path="/{txid}"
    ),
    explorer_api_url="https://sochain.com/api/v2",
    fee_api_url="https://app.bitgo.com/api/v2",
    node_url="https://ltc.thorchain.info",
    node_auth=NodeAuth(username="thorchain", password="password"),
    request_delay=0.3,
)

TESTNET_PARAMS = MAINNET_PARAMS.model_copy(
    update={
        "network": Network.TESTNET,
        "derivation_path": "84'/1'/0'/0/{index}",
        "explorer": ExplorerUrls(
            url="https://tltc.bitaps.com", address_path="/{address}", tx_path="/{txid}"
        ),
        "node_url": "https://testnet.ltc.thorchain.info",
    }
)


def params_for(network: Network) -> UTXOClientParams:
    return TESTNET_PARAMS if network == Network.TESTNET else MAINNET_PARAMS
