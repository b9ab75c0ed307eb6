"""Tests for dutchx/core/decay.py: integer-only linear decay."""

import importlib.util

import pytest

from dutchx.core.decay import decay, decay_input, decay_output, mul_div_down, mul_div_up
from dutchx.core.errors import DecayWindowError, OrderErrorKind
from dutchx.state.canonical import UINT256_MAX
from dutchx.state.orders import DutchInput, DutchOutput

AMOUNT = 10**18
T = 1_700_000_000
TOKEN = "0x" + "22" * 20
RECIPIENT = "0x" + "33" * 20


class TestMulDiv:
    def test_down(self):
        assert mul_div_down(10, 1, 3) == 3

    def test_up(self):
        assert mul_div_up(10, 1, 3) == 4
        assert mul_div_up(9, 1, 3) == 3
        assert mul_div_up(0, 5, 3) == 0


class TestBoundaries:
    def test_degenerate_window_returns_end(self):
        assert decay(AMOUNT, 9 * 10**17, T, T, T) == 9 * 10**17

    def test_degenerate_window_after_start(self):
        assert decay(AMOUNT, 9 * 10**17, T, T, T + 5) == 9 * 10**17

    def test_degenerate_window_before_start(self):
        assert decay(AMOUNT, 9 * 10**17, T, T, T - 1) == AMOUNT

    @pytest.mark.parametrize("now", [0, T - 100, T, T + 50, T + 100, T + 10**6])
    def test_no_decay_when_amounts_equal(self, now):
        assert decay(AMOUNT, AMOUNT, T, T + 100, now) == AMOUNT

    def test_at_start(self):
        assert decay(AMOUNT, 9 * 10**17, T, T + 100, T) == AMOUNT

    def test_before_start(self):
        assert decay(AMOUNT, 9 * 10**17, T, T + 100, T - 1_000) == AMOUNT

    def test_at_end(self):
        assert decay(AMOUNT, 9 * 10**17, T, T + 100, T + 100) == 9 * 10**17

    def test_after_end(self):
        assert decay(AMOUNT, 9 * 10**17, T, T + 100, T + 10_000) == 9 * 10**17

    def test_midpoint(self):
        assert decay(AMOUNT, 9 * 10**17, T, T + 100, T + 50) == (AMOUNT + 9 * 10**17) // 2

    def test_inverted_window_raises(self):
        with pytest.raises(DecayWindowError) as excinfo:
            decay(AMOUNT, 9 * 10**17, T + 1, T, T)
        assert excinfo.value.kind == OrderErrorKind.DECAY_WINDOW

    def test_inverted_window_raises_even_without_decay(self):
        with pytest.raises(DecayWindowError):
            decay(AMOUNT, AMOUNT, T + 1, T, T)


class TestRounding:
    def test_decreasing_rounds_delta_down(self):
        # 10 - floor(10 * 1 / 3) = 7
        assert decay(10, 0, 0, 3, 1) == 7

    def test_increasing_rounds_delta_up(self):
        # 0 + ceil(10 * 1 / 3) = 4
        assert decay(0, 10, 0, 3, 1) == 4

    def test_uint256_scale_has_no_precision_loss(self):
        assert decay(UINT256_MAX, 0, 0, 2, 1) == 2**255
        assert decay(0, UINT256_MAX, 0, 2, 1) == 2**255

    def test_one_second_step(self):
        # 1e18 -> 5e17 over 1000s: exactly 5e14 per second
        assert decay(AMOUNT, AMOUNT // 2, T, T + 1000, T + 1) == AMOUNT - 5 * 10**14
        assert decay(AMOUNT, AMOUNT // 2, T, T + 1000, T + 999) == AMOUNT // 2 + 5 * 10**14


class TestLegs:
    def test_input_leg(self):
        leg = DutchInput(TOKEN, AMOUNT, 2 * AMOUNT)
        assert decay_input(leg, T, T + 100, T + 50) == AMOUNT + AMOUNT // 2

    def test_outputs_decay_independently(self):
        a = DutchOutput(TOKEN, AMOUNT, 0, RECIPIENT)
        b = DutchOutput(TOKEN, 100, 100, RECIPIENT)
        assert decay_output(a, T, T + 4, T + 1) == 3 * AMOUNT // 4
        assert decay_output(b, T, T + 4, T + 1) == 100


# ---------------------------------------------------------------------------
# Property checks
# ---------------------------------------------------------------------------

if importlib.util.find_spec("hypothesis") is not None:
    import hypothesis.strategies as st
    from hypothesis import given, settings

    amounts = st.integers(min_value=0, max_value=UINT256_MAX)
    times = st.integers(min_value=0, max_value=2**40)

    @settings(max_examples=300, deadline=None)
    @given(start=amounts, end=amounts, t0=times, duration=st.integers(0, 10**6), offset=st.integers(-10**6, 2 * 10**6))
    def test_decay_stays_between_endpoints(start, end, t0, duration, offset):
        now = max(0, t0 + offset)
        out = decay(start, end, t0, t0 + duration, now)
        assert min(start, end) <= out <= max(start, end)

    @settings(max_examples=300, deadline=None)
    @given(start=amounts, end=amounts, t0=times, duration=st.integers(1, 10**6), a=st.integers(0, 10**6), b=st.integers(0, 10**6))
    def test_decay_is_monotone_in_time(start, end, t0, duration, a, b):
        lo, hi = sorted((a, b))
        x = decay(start, end, t0, t0 + duration, t0 + lo)
        y = decay(start, end, t0, t0 + duration, t0 + hi)
        if end <= start:
            assert y <= x
        else:
            assert y >= x
