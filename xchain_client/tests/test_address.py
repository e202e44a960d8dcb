"""
Tests for address codecs.
"""

from __future__ import annotations

import pytest

from xchain_client.address import (
    AddressCodec,
    cashaddr_decode,
    cashaddr_encode,
    hash160,
    p2pkh_script,
    p2sh_script,
    p2wpkh_script,
    strip_prefix,
)
from xchain_client.errors import InvalidAddress

BTC = AddressCodec(p2pkh_versions=(0x00,), p2sh_versions=(0x05,), bech32_hrp="bc")
BTC_TESTNET = AddressCodec(p2pkh_versions=(0x6F,), p2sh_versions=(0xC4,), bech32_hrp="tb")
BCH = AddressCodec(p2pkh_versions=(0x00,), p2sh_versions=(0x05,), cashaddr_prefix="bitcoincash")

SEGWIT_ADDRESS = "bc1qcr8te4kr609gcawutmrza0j4xv80jy8z306fyu"
LEGACY_ADDRESS = "1LqBGSKuX5yYUonjxT5qGfpUsXKYYWeabA"
P2SH_ADDRESS = "3J98t1WpEZ73CNmQviecrnyiWrnqRhWNLy"
TESTNET_ADDRESS = "tb1q6rz28mcfaxtmd6v789l9rrlrusdprr9pqcpvkl"

BCH_LEGACY = "1BpEi6DfDAUFd7GtittLSdBeYJvcoaVggu"
BCH_CASHADDR = "qpm2qsznhks23z7629mms6s4cwef74vcwvy22gdx6a"


class TestScripts:
    def test_script_templates(self):
        h = bytes(range(20))
        assert p2pkh_script(h) == b"\x76\xa9\x14" + h + b"\x88\xac"
        assert p2sh_script(h) == b"\xa9\x14" + h + b"\x87"
        assert p2wpkh_script(h) == b"\x00\x14" + h

    def test_hash160(self):
        assert hash160(b"").hex() == "b472a266d0bd89c13706a4132ccfb16f7c3b9fcb"


class TestSegwitCodec:
    def test_segwit_address(self):
        script = BTC.to_script_pubkey(SEGWIT_ADDRESS)
        assert script[:2] == b"\x00\x14"
        assert len(script) == 22

    def test_legacy_addresses(self):
        assert BTC.to_script_pubkey(LEGACY_ADDRESS)[:3] == b"\x76\xa9\x14"
        assert BTC.to_script_pubkey(P2SH_ADDRESS)[:2] == b"\xa9\x14"

    def test_uppercase_segwit_normalized(self):
        assert BTC.validate(SEGWIT_ADDRESS.upper())
        assert BTC.normalize(SEGWIT_ADDRESS.upper()) == SEGWIT_ADDRESS

    def test_encode_matches_decode(self):
        pubkey = bytes.fromhex(
            "0330d54fd0dd420a6e5f8d3624f5f3482cae350f79d5f0753bf5beef9c2d91af3c"
        )
        assert BTC.encode_p2wpkh(pubkey) == SEGWIT_ADDRESS
        assert BTC.to_script_pubkey(SEGWIT_ADDRESS) == p2wpkh_script(hash160(pubkey))

    @pytest.mark.parametrize(
        "address",
        [
            "",
            "bc1qcr8te4kr609gcawutmrza0j4xv80jy8z306fyv",
            "1LqBGSKuX5yYUonjxT5qGfpUsXKYYWeabB",
            "not an address",
        ],
    )
    def test_invalid(self, address):
        assert not BTC.validate(address)
        with pytest.raises(InvalidAddress):
            BTC.to_script_pubkey(address)

    def test_wrong_network(self):
        assert not BTC.validate(TESTNET_ADDRESS)
        assert BTC_TESTNET.validate(TESTNET_ADDRESS)
        assert not BTC_TESTNET.validate(SEGWIT_ADDRESS)
        assert not BTC_TESTNET.validate(LEGACY_ADDRESS)

    def test_no_cashaddr_on_segwit_chain(self):
        with pytest.raises(ValueError):
            BTC.encode_cashaddr(bytes(33))


class TestCashAddrCodec:
    def test_legacy_converts_to_cashaddr(self):
        assert BCH.normalize(BCH_LEGACY) == BCH_CASHADDR

    def test_prefixed_and_bare_are_equivalent(self):
        prefixed = f"bitcoincash:{BCH_CASHADDR}"
        assert BCH.to_script_pubkey(prefixed) == BCH.to_script_pubkey(BCH_CASHADDR)
        assert BCH.to_script_pubkey(BCH_LEGACY) == BCH.to_script_pubkey(BCH_CASHADDR)
        assert BCH.normalize(prefixed) == BCH_CASHADDR

    def test_with_prefix(self):
        assert BCH.with_prefix(BCH_LEGACY) == f"bitcoincash:{BCH_CASHADDR}"
        assert BTC.with_prefix(SEGWIT_ADDRESS.upper()) == SEGWIT_ADDRESS

    def test_uppercase_accepted(self):
        assert BCH.normalize(BCH_CASHADDR.upper()) == BCH_CASHADDR

    def test_mixed_case_rejected(self):
        mixed = BCH_CASHADDR[:5].upper() + BCH_CASHADDR[5:]
        assert not BCH.validate(mixed)

    def test_bad_checksum(self):
        assert not BCH.validate(BCH_CASHADDR[:-1] + "q")

    def test_wrong_prefix(self):
        testnet_form = cashaddr_encode("bchtest", 0, bytes(20))
        assert not BCH.validate(testnet_form)

    def test_encode_decode(self):
        payload = bytes(range(20))
        address = cashaddr_encode("bitcoincash", 1, payload)
        assert address.startswith("bitcoincash:p")
        assert cashaddr_decode(address, "bitcoincash") == ("bitcoincash", 1, payload)
        assert BCH.normalize(address) == strip_prefix(address)

    def test_segwit_rejected_on_cashaddr_chain(self):
        assert not BCH.validate(SEGWIT_ADDRESS)

    def test_strip_prefix(self):
        assert strip_prefix("bitcoincash:qabc") == "qabc"
        assert strip_prefix("qabc") == "qabc"
