"""
Tests for transaction signing and serialization.
"""

from __future__ import annotations

import pytest
from coincurve import PublicKey

from xchain_client.address import hash160, p2pkh_script, p2wpkh_script
from xchain_client.bip32 import HDKey, mnemonic_to_seed
from xchain_client.coin_selection import build_plan
from xchain_client.errors import TransactionSigningError
from xchain_client.explorer import UTXO
from xchain_client.signing import (
    SIGHASH_ALL,
    SIGHASH_FORKID,
    compute_sighash_bip143,
    expected_script,
    sign_plan,
)
from xchain_client.tx_builder import (
    ScriptType,
    get_txid,
    hash256,
    push_data,
    serialize_tx,
    varint,
)
from xchain_client.wallet import SigningKey

RECIPIENT = p2wpkh_script(bytes.fromhex("22" * 20))


@pytest.fixture
def signing_key(test_mnemonic) -> SigningKey:
    key = HDKey.from_seed(mnemonic_to_seed(test_mnemonic)).derive("m/84'/0'/0'/0/0")
    return SigningKey(private_key=key.private_key, public_key=key.get_public_key_bytes())


def make_plan(key: SigningKey, script_type: ScriptType, values=(50_000, 30_000), amount=70_000):
    sender = expected_script(script_type, key.public_key)
    utxos = [
        UTXO(txid=f"{i + 1:02x}" * 32, vout=i, value=value) for i, value in enumerate(values)
    ]
    return build_plan(
        utxos,
        recipient_script=RECIPIENT,
        amount=amount,
        fee_rate=5.0,
        sender_script=sender,
        script_type=script_type,
        dust_threshold=546,
    )


class TestHelpers:
    def test_hash256_empty(self):
        expected = bytes.fromhex("5df6e0e2761359d30a8275058e299fcc0381534545f55cf43e41983f5d4c9456")
        assert hash256(b"") == expected

    def test_varint(self):
        assert varint(5) == bytes([5])
        assert varint(0xFD) == bytes([0xFD, 0xFD, 0x00])
        assert varint(0x10000) == bytes([0xFE, 0x00, 0x00, 0x01, 0x00])

    def test_push_data(self):
        assert push_data(b"\x01" * 20) == bytes([20]) + b"\x01" * 20
        assert push_data(b"\x01" * 80) == bytes([0x4C, 80]) + b"\x01" * 80

    def test_expected_script(self, signing_key):
        pkh = hash160(signing_key.public_key)
        assert expected_script(ScriptType.P2WPKH, signing_key.public_key) == p2wpkh_script(pkh)
        assert expected_script(ScriptType.P2PKH, signing_key.public_key) == p2pkh_script(pkh)


class TestSegwitSigning:
    def test_sign_plan(self, signing_key):
        plan = make_plan(signing_key, ScriptType.P2WPKH)
        signed = sign_plan(plan, signing_key)

        # version 2, segwit marker and flag
        assert signed.raw[:4] == bytes.fromhex("02000000")
        assert signed.raw[4:6] == b"\x00\x01"
        assert signed.vsize <= plan.vsize
        assert len(signed.witnesses) == len(plan.inputs)

    def test_signatures_verify(self, signing_key):
        plan = make_plan(signing_key, ScriptType.P2WPKH)
        signed = sign_plan(plan, signing_key)
        pubkey = PublicKey(signing_key.public_key)
        script_code = p2pkh_script(hash160(signing_key.public_key))

        for i, (signature, witness_pubkey) in enumerate(signed.witnesses):
            assert witness_pubkey == signing_key.public_key
            assert signature[-1] == SIGHASH_ALL
            sighash = compute_sighash_bip143(
                plan.inputs, plan.outputs, i, script_code, SIGHASH_ALL, plan.version, plan.locktime
            )
            assert pubkey.verify(signature[:-1], sighash, hasher=None)

    def test_txid_excludes_witness(self, signing_key):
        plan = make_plan(signing_key, ScriptType.P2WPKH)
        signed = sign_plan(plan, signing_key)
        assert signed.txid == get_txid(plan.inputs, plan.outputs)
        stripped = serialize_tx(plan.inputs, plan.outputs)
        assert signed.txid == hash256(stripped)[::-1].hex()

    def test_deterministic(self, signing_key):
        """RFC6979 nonces: signing the same plan twice gives the same bytes."""
        plan = make_plan(signing_key, ScriptType.P2WPKH)
        assert sign_plan(plan, signing_key).raw == sign_plan(plan, signing_key).raw

    def test_foreign_input_rejected(self, signing_key):
        plan = make_plan(signing_key, ScriptType.P2WPKH)
        other = UTXO(
            txid="ab" * 32,
            vout=0,
            value=100_000,
            script_pubkey=p2wpkh_script(bytes(20)).hex(),
        )
        foreign_plan = build_plan(
            [other],
            recipient_script=RECIPIENT,
            amount=10_000,
            fee_rate=5.0,
            sender_script=plan.inputs[0].script_pubkey,
            script_type=ScriptType.P2WPKH,
            dust_threshold=546,
        )
        with pytest.raises(TransactionSigningError):
            sign_plan(foreign_plan, signing_key)


class TestLegacyForkIdSigning:
    def test_sign_plan(self, signing_key):
        plan = make_plan(signing_key, ScriptType.P2PKH)
        sighash_type = SIGHASH_ALL | SIGHASH_FORKID
        signed = sign_plan(plan, signing_key, sighash_type)

        # No segwit marker, txid covers the whole serialization
        assert signed.raw[4:6] != b"\x00\x01"
        assert signed.txid == hash256(signed.raw)[::-1].hex()
        assert signed.vsize == len(signed.raw)
        assert signed.vsize <= plan.vsize
        assert signed.witnesses == []

    def test_signature_verifies(self, signing_key):
        plan = make_plan(signing_key, ScriptType.P2PKH, values=(50_000,), amount=20_000)
        sighash_type = SIGHASH_ALL | SIGHASH_FORKID
        signed = sign_plan(plan, signing_key, sighash_type)

        # version(4) + input count(1) + outpoint(36) + script length(1)
        script_sig_len = signed.raw[41]
        script_sig = signed.raw[42 : 42 + script_sig_len]
        sig_len = script_sig[0]
        signature = script_sig[1 : 1 + sig_len]
        assert signature[-1] == 0x41
        assert script_sig[1 + sig_len] == 33
        assert script_sig[2 + sig_len :] == signing_key.public_key

        script_code = p2pkh_script(hash160(signing_key.public_key))
        sighash = compute_sighash_bip143(
            plan.inputs, plan.outputs, 0, script_code, sighash_type, plan.version, plan.locktime
        )
        assert PublicKey(signing_key.public_key).verify(signature[:-1], sighash, hasher=None)


class TestPlanChecks:
    def test_unbalanced_plan_rejected(self, signing_key):
        plan = make_plan(signing_key, ScriptType.P2WPKH)
        broken = type(plan)(
            inputs=plan.inputs,
            outputs=plan.outputs,
            script_type=plan.script_type,
            fee_rate=plan.fee_rate,
            vsize=plan.vsize,
            fee=plan.fee + 1,
            change=plan.change,
        )
        with pytest.raises(TransactionSigningError):
            sign_plan(broken, signing_key)

    def test_sighash_index_out_of_range(self, signing_key):
        plan = make_plan(signing_key, ScriptType.P2WPKH)
        with pytest.raises(TransactionSigningError):
            compute_sighash_bip143(
                plan.inputs, plan.outputs, 5, b"", SIGHASH_ALL, plan.version, plan.locktime
            )
