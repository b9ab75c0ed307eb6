"""Linear decay of order amounts.

Every function is stateless and operates on plain Python ints; there is no
floating point anywhere. Rounding follows the reactor's ``DutchDecayLib``:

- decreasing legs round the decayed delta down (``mulDivDown``),
- increasing legs round the decayed delta up (``mulDivUp``).

The engine does not care which direction a leg moves; it only interpolates.
"""

from __future__ import annotations

from .errors import DecayWindowError
from ..state.orders import DutchInput, DutchOutput


def mul_div_down(x: int, y: int, denominator: int) -> int:
    """``floor(x * y / denominator)``."""
    return (x * y) // denominator


def mul_div_up(x: int, y: int, denominator: int) -> int:
    """``ceil(x * y / denominator)``."""
    return -((-(x * y)) // denominator)


def decay(
    start_amount: int,
    end_amount: int,
    decay_start_time: int,
    decay_end_time: int,
    now: int,
) -> int:
    """Amount in effect at ``now`` for one leg.

    Raises:
        DecayWindowError: ``decay_end_time < decay_start_time``.
    """
    if decay_end_time < decay_start_time:
        raise DecayWindowError(decay_start_time, decay_end_time)

    if start_amount == end_amount:
        return start_amount
    # Checked before the start bound so a zero-length window steps straight to the end amount.
    if now >= decay_end_time:
        return end_amount
    if now <= decay_start_time:
        return start_amount

    elapsed = now - decay_start_time
    duration = decay_end_time - decay_start_time
    if end_amount < start_amount:
        return start_amount - mul_div_down(start_amount - end_amount, elapsed, duration)
    return start_amount + mul_div_up(end_amount - start_amount, elapsed, duration)


def decay_input(value: DutchInput, decay_start_time: int, decay_end_time: int, now: int) -> int:
    return decay(value.start_amount, value.end_amount, decay_start_time, decay_end_time, now)


def decay_output(value: DutchOutput, decay_start_time: int, decay_end_time: int, now: int) -> int:
    return decay(value.start_amount, value.end_amount, decay_start_time, decay_end_time, now)
