"""
Tests for accumulative coin selection and plan construction.
"""

from __future__ import annotations

import pytest

from xchain_client.address import p2pkh_script, p2wpkh_script
from xchain_client.coin_selection import build_plan
from xchain_client.errors import InsufficientFunds, InvalidMemo
from xchain_client.explorer import UTXO
from xchain_client.fees import fee_for
from xchain_client.tx_builder import OutputKind, ScriptType, estimate_vsize

SENDER = p2wpkh_script(bytes.fromhex("11" * 20))
RECIPIENT = p2wpkh_script(bytes.fromhex("22" * 20))


def make_utxo(n: int, value: int, confirmed: bool = True) -> UTXO:
    return UTXO(txid=f"{n:02x}" * 32, vout=n, value=value, confirmed=confirmed)


def plan_for(
    utxos,
    amount,
    fee_rate=10.0,
    memo=None,
    dust_threshold=546,
    script_type=ScriptType.P2WPKH,
    sender=SENDER,
):
    return build_plan(
        utxos,
        recipient_script=RECIPIENT,
        amount=amount,
        fee_rate=fee_rate,
        sender_script=sender,
        script_type=script_type,
        dust_threshold=dust_threshold,
        memo=memo,
    )


def assert_balanced(plan, amount):
    assert plan.total_in == amount + plan.fee + plan.change
    assert plan.total_in == plan.total_out + plan.fee
    assert plan.fee >= fee_for(plan.fee_rate, plan.vsize)
    assert plan.vsize == estimate_vsize(plan.inputs, plan.outputs, plan.script_type)


class TestScenario:
    def test_single_input_covers(self):
        """50,000 and 30,000 available, send 40,000 at 10 sat/vbyte."""
        utxos = [make_utxo(1, 50_000), make_utxo(2, 30_000)]
        plan = plan_for(utxos, 40_000)

        assert [inp.value for inp in plan.inputs] == [50_000]
        assert plan.vsize == 141
        assert plan.fee == 1410
        assert plan.change == 8590
        assert [out.kind for out in plan.outputs] == [OutputKind.RECIPIENT, OutputKind.CHANGE]
        assert plan.outputs[0].script_pubkey == RECIPIENT
        assert plan.outputs[1].script_pubkey == SENDER
        assert plan.fee == fee_for(10, plan.vsize)
        assert_balanced(plan, 40_000)

    def test_accumulates_in_explorer_order(self):
        utxos = [make_utxo(1, 30_000), make_utxo(2, 50_000)]
        plan = plan_for(utxos, 40_000)

        assert [inp.value for inp in plan.inputs] == [30_000, 50_000]
        assert plan.has_change
        assert plan.fee == fee_for(10, plan.vsize)
        assert_balanced(plan, 40_000)


class TestDust:
    def test_sub_dust_change_folded_into_fee(self):
        """Change of 100 sats is below dust: no change output, fee absorbs it."""
        plan = plan_for([make_utxo(1, 50_000)], 48_490)

        assert not plan.has_change
        assert plan.change == 0
        assert len(plan.outputs) == 1
        assert plan.vsize == 110
        assert plan.fee == 1510
        assert_balanced(plan, 48_490)

    def test_exact_amount_no_change(self):
        plan = plan_for([make_utxo(1, 50_000)], 48_900)
        assert not plan.has_change
        assert plan.fee == 1100
        assert_balanced(plan, 48_900)

    def test_zero_dust_threshold_keeps_small_change(self):
        plan = plan_for([make_utxo(1, 50_000)], 48_490, dust_threshold=0)
        assert plan.has_change
        assert plan.change == 100
        assert_balanced(plan, 48_490)


class TestInsufficientFunds:
    def test_no_utxos(self):
        with pytest.raises(InsufficientFunds):
            plan_for([], 1_000)

    def test_not_enough(self):
        utxos = [make_utxo(1, 50_000), make_utxo(2, 30_000)]
        with pytest.raises(InsufficientFunds):
            plan_for(utxos, 79_000)

    def test_fee_pushes_over(self):
        with pytest.raises(InsufficientFunds):
            plan_for([make_utxo(1, 50_000)], 49_000)


class TestSelection:
    def test_skips_uneconomic_inputs(self):
        """A 500 sat input costs more than it adds at 10 sat/vbyte."""
        utxos = [make_utxo(1, 500), make_utxo(2, 50_000)]
        plan = plan_for(utxos, 40_000)
        assert [inp.value for inp in plan.inputs] == [50_000]

    def test_input_script_defaults_to_sender(self):
        plan = plan_for([make_utxo(1, 50_000)], 40_000)
        assert plan.inputs[0].script_pubkey == SENDER

    def test_input_script_from_explorer(self):
        other = p2wpkh_script(bytes.fromhex("33" * 20))
        utxo = UTXO(txid="aa" * 32, vout=0, value=50_000, script_pubkey=other.hex())
        plan = plan_for([utxo], 40_000)
        assert plan.inputs[0].script_pubkey == other

    def test_zero_amount(self):
        plan = plan_for([make_utxo(1, 50_000)], 0)
        assert plan.amount == 0
        assert_balanced(plan, 0)

    def test_fractional_rate(self):
        plan = plan_for([make_utxo(1, 50_000)], 40_000, fee_rate=1.5)
        assert plan.fee == 212
        assert_balanced(plan, 40_000)


class TestMemo:
    def test_memo_output(self):
        plan = plan_for([make_utxo(1, 50_000)], 40_000, memo="=:BTC.BTC:bc1qxyz")
        kinds = [out.kind for out in plan.outputs]
        assert kinds == [OutputKind.RECIPIENT, OutputKind.MEMO, OutputKind.CHANGE]

        memo_out = plan.outputs[1]
        assert memo_out.value == 0
        assert memo_out.script_pubkey[0] == 0x6A
        assert memo_out.script_pubkey[2:] == b"=:BTC.BTC:bc1qxyz"
        assert_balanced(plan, 40_000)

    def test_memo_increases_fee(self):
        without = plan_for([make_utxo(1, 50_000)], 40_000)
        with_memo = plan_for([make_utxo(1, 50_000)], 40_000, memo="hello")
        # 8 value + 1 length + OP_RETURN + push + 5 bytes
        assert with_memo.vsize - without.vsize == 16
        assert with_memo.fee - without.fee == 160

    def test_memo_too_long(self):
        with pytest.raises(InvalidMemo):
            plan_for([make_utxo(1, 50_000)], 40_000, memo="m" * 81)


class TestLegacyInputs:
    def test_p2pkh_sizes(self):
        sender = p2pkh_script(bytes.fromhex("11" * 20))
        plan = plan_for(
            [make_utxo(1, 50_000)], 40_000, script_type=ScriptType.P2PKH, sender=sender
        )
        # 1 P2PKH input, P2WPKH recipient (31) and P2PKH change (34)
        assert plan.vsize == 4 + 1 + 148 + 1 + 31 + 34 + 4
        assert plan.fee == 10 * plan.vsize
        assert_balanced(plan, 40_000)
