"""Tests for dutchx/core/exclusivity.py."""

import pytest

from dutchx.core.errors import ExclusivityViolationError, OrderErrorKind
from dutchx.core.exclusivity import (
    BPS,
    DEFAULT_POLICY,
    ExclusivityPolicy,
    PenaltyTarget,
    discount_down,
    penalize_up,
)
from dutchx.state.canonical import ZERO_ADDRESS
from dutchx.state.orders import CosignerData

AMOUNT = 10**18
T = 1_700_000_000
EXCLUSIVE = "0x" + "66" * 20
OTHER = "0x" + "77" * 20


def _data(filler=EXCLUSIVE, bps=0):
    return CosignerData(
        decay_start_time=T,
        decay_end_time=T + 100,
        exclusive_filler=filler,
        exclusivity_override_bps=bps,
    )


class TestPenaltyMath:
    def test_penalize_up_exact(self):
        assert penalize_up(AMOUNT, 100) == AMOUNT * 101 // 100

    def test_penalize_up_rounds_up(self):
        # 3 * 10001 / 10000 = 3.0003
        assert penalize_up(3, 1) == 4

    def test_discount_down_rounds_down(self):
        assert discount_down(10_100, 100) == 10_000
        assert discount_down(3, 1) == 2

    def test_zero_bps_is_identity(self):
        assert penalize_up(12345, 0) == 12345
        assert discount_down(12345, 0) == 12345


class TestFillingRights:
    def test_open_order(self):
        assert DEFAULT_POLICY.has_filling_rights(_data(filler=ZERO_ADDRESS), OTHER, T - 10)
        assert DEFAULT_POLICY.has_filling_rights(_data(filler=ZERO_ADDRESS), None, T - 10)

    def test_exclusive_filler_always_has_rights(self):
        assert DEFAULT_POLICY.has_filling_rights(_data(), EXCLUSIVE, T - 10)
        assert DEFAULT_POLICY.has_filling_rights(_data(), EXCLUSIVE.lower(), T)

    def test_window_ends_at_decay_start(self):
        assert not DEFAULT_POLICY.has_filling_rights(_data(), OTHER, T)
        assert DEFAULT_POLICY.has_filling_rights(_data(), OTHER, T + 1)

    def test_unknown_filler_inside_window(self):
        assert not DEFAULT_POLICY.has_filling_rights(_data(), None, T - 1)

    def test_period_extends_window(self):
        policy = ExclusivityPolicy(period=30)
        assert policy.exclusivity_end(_data()) == T + 30
        assert not policy.has_filling_rights(_data(), OTHER, T + 30)
        assert policy.has_filling_rights(_data(), OTHER, T + 31)

    def test_negative_period_rejected(self):
        with pytest.raises(ValueError):
            ExclusivityPolicy(period=-1)


class TestApply:
    def test_rights_leave_amounts_alone(self):
        out = DEFAULT_POLICY.apply(_data(bps=100), EXCLUSIVE, T, AMOUNT, (AMOUNT, 5))
        assert out == (AMOUNT, (AMOUNT, 5), False)

    def test_zero_bps_rejects(self):
        with pytest.raises(ExclusivityViolationError) as excinfo:
            DEFAULT_POLICY.apply(_data(bps=0), OTHER, T, AMOUNT, (AMOUNT,))
        assert excinfo.value.kind == OrderErrorKind.EXCLUSIVITY_VIOLATION

    def test_outputs_scaled_up(self):
        input_amount, outputs, penalized = DEFAULT_POLICY.apply(_data(bps=100), OTHER, T, AMOUNT, (AMOUNT, 3))
        assert penalized
        assert input_amount == AMOUNT
        assert outputs == (AMOUNT * 101 // 100, 4)

    def test_input_target_discounts_input(self):
        policy = ExclusivityPolicy(target=PenaltyTarget.INPUT)
        input_amount, outputs, penalized = policy.apply(_data(bps=100), OTHER, T, 10_100, (AMOUNT,))
        assert penalized
        assert input_amount == 10_000
        assert outputs == (AMOUNT,)

    def test_custom_penalty_function(self):
        policy = ExclusivityPolicy(penalty=lambda amount, bps: amount + bps)
        _, outputs, _ = policy.apply(_data(bps=7), OTHER, T, AMOUNT, (1, 2))
        assert outputs == (8, 9)

    def test_max_bps_doubles_outputs(self):
        _, outputs, _ = DEFAULT_POLICY.apply(_data(bps=BPS), OTHER, T, AMOUNT, (AMOUNT,))
        assert outputs == (2 * AMOUNT,)
