"""Order resolution: the amounts a filler owes / receives at one timestamp.

``resolve(order, timestamp, filler)`` mirrors what the reactor does when it
executes a cosigned order:

1. Checks the cosigner data against the order (window ordering, deadline vs
   decay end, override count).
2. Applies the cosigner's amount overrides to the start amounts.
3. Decays every leg at ``timestamp``.
4. Applies the exclusivity policy for ``filler``.

Only one timestamp is read per evaluation; callers pass it in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Optional, Tuple

from .decay import decay_input, decay_output
from .errors import (
    DeadlineBeforeEndTimeError,
    DecayWindowError,
    InvalidCosignerInputError,
    InvalidCosignerOutputError,
    InvalidCosignerOutputsError,
    MissingCosignatureError,
    MissingCosignerDataError,
)
from .exclusivity import DEFAULT_POLICY, ExclusivityPolicy
from ..state.orders import CosignerData, DutchInput, DutchOutput, OrderInfo

if TYPE_CHECKING:
    from .orders import FullOrder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedInput:
    token: str
    amount: int
    max_amount: int


@dataclass(frozen=True)
class ResolvedOutput:
    token: str
    amount: int
    recipient: str


@dataclass(frozen=True)
class ResolvedOrder:
    input: ResolvedInput
    outputs: Tuple[ResolvedOutput, ...]
    timestamp: int
    filler: Optional[str] = None
    exclusivity_penalized: bool = False


def check_cosigner_data(info: OrderInfo, cosigner_data: CosignerData) -> None:
    """Cross-field checks shared by ``build()`` and ``resolve()``."""
    if cosigner_data.decay_start_time > cosigner_data.decay_end_time:
        raise DecayWindowError(cosigner_data.decay_start_time, cosigner_data.decay_end_time)
    if info.deadline < cosigner_data.decay_end_time:
        raise DeadlineBeforeEndTimeError(info.deadline, cosigner_data.decay_end_time)
    n_overrides = len(cosigner_data.output_overrides)
    if n_overrides != 0 and n_overrides != len(info.outputs):
        raise InvalidCosignerOutputsError(
            f"outputOverrides length {n_overrides} does not match outputs length {len(info.outputs)}",
            field="output_overrides",
        )


def apply_overrides(info: OrderInfo, cosigner_data: CosignerData) -> Tuple[DutchInput, Tuple[DutchOutput, ...]]:
    """Replace start amounts with the cosigner's non-zero overrides.

    The input may only improve for the swapper (override <= start) and each
    output likewise (override >= start).
    """
    base_input = info.input
    if cosigner_data.input_override != 0:
        if cosigner_data.input_override > base_input.start_amount:
            raise InvalidCosignerInputError(
                f"inputOverride {cosigner_data.input_override} exceeds input startAmount {base_input.start_amount}",
                field="input_override",
            )
        base_input = replace(base_input, start_amount=cosigner_data.input_override)

    outputs = list(info.outputs)
    for i, amount in enumerate(cosigner_data.output_overrides):
        if amount == 0:
            continue
        if amount < outputs[i].start_amount:
            raise InvalidCosignerOutputError(
                f"outputOverrides[{i}] {amount} is below output startAmount {outputs[i].start_amount}",
                field=f"output_overrides[{i}]",
            )
        outputs[i] = replace(outputs[i], start_amount=amount)
    return base_input, tuple(outputs)


def resolve(
    order: "FullOrder",
    timestamp: int,
    filler: Optional[str] = None,
    policy: ExclusivityPolicy = DEFAULT_POLICY,
) -> ResolvedOrder:
    info = order.info
    cosigner_data = info.cosigner_data
    if cosigner_data is None:
        raise MissingCosignerDataError()
    if info.cosignature is None:
        raise MissingCosignatureError()

    check_cosigner_data(info, cosigner_data)
    base_input, base_outputs = apply_overrides(info, cosigner_data)

    start, end = cosigner_data.decay_start_time, cosigner_data.decay_end_time
    input_amount = decay_input(base_input, start, end, timestamp)
    output_amounts = tuple(decay_output(o, start, end, timestamp) for o in base_outputs)

    input_amount, output_amounts, penalized = policy.apply(
        cosigner_data, filler, timestamp, input_amount, output_amounts
    )
    if penalized:
        logger.debug(
            "exclusivity override applied: filler=%s exclusive=%s bps=%d",
            filler,
            cosigner_data.exclusive_filler,
            cosigner_data.exclusivity_override_bps,
        )

    return ResolvedOrder(
        input=ResolvedInput(token=base_input.token, amount=input_amount, max_amount=base_input.end_amount),
        outputs=tuple(
            ResolvedOutput(token=o.token, amount=amount, recipient=o.recipient)
            for o, amount in zip(base_outputs, output_amounts)
        ),
        timestamp=timestamp,
        filler=filler,
        exclusivity_penalized=penalized,
    )
