"""
Pytest configuration and fixtures for xchain_client tests.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from xchain_client.address import AddressCodec
from xchain_client.config import ExplorerUrls, UTXOClientParams
from xchain_client.explorer import Broadcaster, Explorer
from xchain_client.models import Asset, Network
from xchain_client.tx_builder import ScriptType
from xchain_client.utxo import UTXOClient
from xchain_client.wallet import HDWallet

SEGWIT_CODECS = {
    Network.MAINNET: AddressCodec(p2pkh_versions=(0x00,), p2sh_versions=(0x05,), bech32_hrp="bc"),
    Network.TESTNET: AddressCodec(p2pkh_versions=(0x6F,), p2sh_versions=(0xC4,), bech32_hrp="tb"),
}


class SegwitWallet(HDWallet):
    def encode_address(self, pubkey: bytes) -> str:
        return SEGWIT_CODECS[self.params.network].encode_p2wpkh(pubkey)


class SegwitClient(UTXOClient):
    asset = Asset(chain="BTC", symbol="BTC")
    script_type = ScriptType.P2WPKH
    fallback_fee_rate = 127.0
    codecs = SEGWIT_CODECS

    def create_explorer(self) -> Explorer:
        raise NotImplementedError("tests inject an explorer")

    def create_broadcaster(self) -> Broadcaster:
        raise NotImplementedError("tests inject a broadcaster")


@pytest.fixture
def test_mnemonic() -> str:
    """Test mnemonic (BIP39 test vector)"""
    return (
        "abandon abandon abandon abandon abandon abandon "
        "abandon abandon abandon abandon abandon about"
    )


@pytest.fixture
def other_mnemonic() -> str:
    """Second valid mnemonic (BIP39 test vector)"""
    return "legal winner thank year wave sausage worth useful legal winner thank yellow"


@pytest.fixture
def params() -> UTXOClientParams:
    return UTXOClientParams(
        network=Network.MAINNET,
        derivation_path="84'/0'/0'/0/{index}",
        explorer=ExplorerUrls(url="https://explorer.test"),
        explorer_api_url="https://api.explorer.test",
        fee_api_url="https://fees.test",
    )


@pytest.fixture
def wallet_cls() -> type[SegwitWallet]:
    return SegwitWallet


@pytest.fixture
def client_cls() -> type[SegwitClient]:
    return SegwitClient


@pytest.fixture
def explorer() -> AsyncMock:
    """Explorer mock with a 10 sat/vbyte fee sample and no UTXOs."""
    mock = AsyncMock(spec=Explorer)
    mock.get_suggested_fee_rate.return_value = 10.0
    mock.get_unspent_outputs.return_value = []
    return mock


@pytest.fixture
def broadcaster() -> AsyncMock:
    mock = AsyncMock(spec=Broadcaster)
    mock.broadcast.return_value = "ff" * 32
    return mock


@pytest_asyncio.fixture
async def client(params, explorer, broadcaster, test_mnemonic):
    """Initialized and unlocked client with mocked collaborators."""
    c = await SegwitClient.create(
        params,
        SegwitWallet.create(test_mnemonic),
        explorer=explorer,
        broadcaster=broadcaster,
    )
    yield c
    await c.close()


@pytest_asyncio.fixture
async def locked_client(params, explorer, broadcaster):
    c = await SegwitClient.create(params, explorer=explorer, broadcaster=broadcaster)
    yield c
    await c.close()
