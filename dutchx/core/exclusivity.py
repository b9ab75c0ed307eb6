"""Exclusive-filler handling.

During the exclusivity window only ``exclusive_filler`` fills at the decayed
amounts. Anyone else either gets rejected (``exclusivity_override_bps == 0``)
or pays a multiplicative penalty on the decayed amounts.

The window is ``[decay_start_time, decay_start_time + period]``; with the
default ``period=0`` exclusivity lapses as soon as decay begins, which is the
reactor's behavior.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Callable, Optional, Tuple

from .decay import mul_div_down, mul_div_up
from .errors import ExclusivityViolationError
from ..state.canonical import same_address
from ..state.orders import CosignerData

BPS: int = 10_000

PenaltyFn = Callable[[int, int], int]


def penalize_up(amount: int, override_bps: int) -> int:
    """``ceil(amount * (BPS + bps) / BPS)``: filler owes more."""
    return mul_div_up(amount, BPS + override_bps, BPS)


def discount_down(amount: int, override_bps: int) -> int:
    """``floor(amount * BPS / (BPS + bps))``: filler is credited less."""
    return mul_div_down(amount, BPS, BPS + override_bps)


@unique
class PenaltyTarget(Enum):
    OUTPUTS = "outputs"
    INPUT = "input"


@dataclass(frozen=True)
class ExclusivityPolicy:
    """
    Attributes:
        period: Seconds after ``decay_start_time`` during which exclusivity still holds
        target: Which leg the penalty applies to
        penalty: ``(decayed_amount, override_bps) -> penalized_amount``
    """

    period: int = 0
    target: PenaltyTarget = PenaltyTarget.OUTPUTS
    penalty: Optional[PenaltyFn] = None

    def __post_init__(self) -> None:
        if not isinstance(self.period, int) or isinstance(self.period, bool) or self.period < 0:
            raise ValueError("period must be a non-negative int")

    def exclusivity_end(self, cosigner_data: CosignerData) -> int:
        return cosigner_data.decay_start_time + self.period

    def has_filling_rights(self, cosigner_data: CosignerData, filler: Optional[str], now: int) -> bool:
        if not cosigner_data.has_exclusive_filler:
            return True
        if now > self.exclusivity_end(cosigner_data):
            return True
        return filler is not None and same_address(filler, cosigner_data.exclusive_filler)

    def _penalty_fn(self) -> PenaltyFn:
        if self.penalty is not None:
            return self.penalty
        return penalize_up if self.target is PenaltyTarget.OUTPUTS else discount_down

    def apply(
        self,
        cosigner_data: CosignerData,
        filler: Optional[str],
        now: int,
        input_amount: int,
        output_amounts: Tuple[int, ...],
    ) -> Tuple[int, Tuple[int, ...], bool]:
        """Return ``(input_amount, output_amounts, penalized)`` after exclusivity.

        Raises:
            ExclusivityViolationError: no filling rights and no override allowed.
        """
        if self.has_filling_rights(cosigner_data, filler, now):
            return input_amount, output_amounts, False

        bps = cosigner_data.exclusivity_override_bps
        if bps == 0:
            raise ExclusivityViolationError(
                f"filler {filler} has no exclusive rights until {self.exclusivity_end(cosigner_data)}",
                field="exclusive_filler",
            )

        fn = self._penalty_fn()
        if self.target is PenaltyTarget.OUTPUTS:
            return input_amount, tuple(fn(a, bps) for a in output_amounts), True
        return fn(input_amount, bps), output_amounts, True


DEFAULT_POLICY = ExclusivityPolicy()
