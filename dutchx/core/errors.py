"""Exception types for order building, cosigning and resolution.

Every error carries an ``OrderErrorKind`` so callers (and tests) can match on
the kind instead of on message text. ``BuildResult`` wraps the same errors as
values for callers that prefer ``try_build()`` over exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Generic, Optional, TypeVar


@unique
class OrderErrorKind(Enum):
    INVALID_FIELD = "invalid_field"
    INCOMPLETE_ORDER = "incomplete_order"
    INVALID_ARGUMENT = "invalid_argument"
    MISSING_COSIGNER_DATA = "missing_cosigner_data"
    MISSING_COSIGNATURE = "missing_cosignature"
    INVALID_COSIGNATURE = "invalid_cosignature"
    DECAY_WINDOW = "decay_window"
    DEADLINE_BEFORE_END_TIME = "deadline_before_end_time"
    INVALID_COSIGNER_INPUT = "invalid_cosigner_input"
    INVALID_COSIGNER_OUTPUT = "invalid_cosigner_output"
    INVALID_COSIGNER_OUTPUTS = "invalid_cosigner_outputs"
    EXCLUSIVITY_VIOLATION = "exclusivity_violation"
    DECODE = "decode"
    MISSING_CONFIGURATION = "missing_configuration"


class OrderError(Exception):
    """Base class; ``kind`` identifies the failure, ``field`` the offending field if any."""

    kind: OrderErrorKind = OrderErrorKind.INVALID_ARGUMENT

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        self.field = field
        super().__init__(message)


class InvalidFieldError(OrderError):
    """A single mutator argument violates its local constraint."""

    kind = OrderErrorKind.INVALID_FIELD

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"invalid {field}: {reason}", field=field)


class IncompleteOrderError(OrderError):
    """A required field was never set."""

    kind = OrderErrorKind.INCOMPLETE_ORDER

    def __init__(self, field: str) -> None:
        super().__init__(f"{field} not set", field=field)


class InvalidArgumentError(OrderError):
    kind = OrderErrorKind.INVALID_ARGUMENT


class MissingCosignerDataError(OrderError):
    kind = OrderErrorKind.MISSING_COSIGNER_DATA

    def __init__(self) -> None:
        super().__init__("cosignerData not set", field="cosigner_data")


class MissingCosignatureError(OrderError):
    kind = OrderErrorKind.MISSING_COSIGNATURE

    def __init__(self) -> None:
        super().__init__("cosignature not set", field="cosignature")


class InvalidCosignatureError(OrderError):
    kind = OrderErrorKind.INVALID_COSIGNATURE


class DecayWindowError(OrderError):
    """``decay_start_time > decay_end_time``; raised when the window is used."""

    kind = OrderErrorKind.DECAY_WINDOW

    def __init__(self, decay_start_time: int, decay_end_time: int) -> None:
        self.decay_start_time = decay_start_time
        self.decay_end_time = decay_end_time
        super().__init__(
            f"decayStartTime must be before or same as decayEndTime: {decay_start_time} > {decay_end_time}",
            field="decay_end_time",
        )


class DeadlineBeforeEndTimeError(OrderError):
    kind = OrderErrorKind.DEADLINE_BEFORE_END_TIME

    def __init__(self, deadline: int, decay_end_time: int) -> None:
        super().__init__(
            f"deadline must be at or after decayEndTime: {deadline} < {decay_end_time}",
            field="deadline",
        )


class InvalidCosignerInputError(OrderError):
    kind = OrderErrorKind.INVALID_COSIGNER_INPUT


class InvalidCosignerOutputError(OrderError):
    kind = OrderErrorKind.INVALID_COSIGNER_OUTPUT


class InvalidCosignerOutputsError(OrderError):
    kind = OrderErrorKind.INVALID_COSIGNER_OUTPUTS


class ExclusivityViolationError(OrderError):
    """Non-exclusive filler inside the exclusivity window with no override allowed."""

    kind = OrderErrorKind.EXCLUSIVITY_VIOLATION


class OrderDecodeError(OrderError):
    kind = OrderErrorKind.DECODE


class MissingConfigurationError(OrderError):
    kind = OrderErrorKind.MISSING_CONFIGURATION


T = TypeVar("T")


@dataclass(frozen=True)
class BuildResult(Generic[T]):
    """Result of a build attempt: either ``order`` or ``error`` is set."""

    ok: bool
    order: Optional[T] = None
    error: Optional[OrderError] = None

    @property
    def kind(self) -> Optional[OrderErrorKind]:
        return None if self.error is None else self.error.kind

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        assert self.order is not None
        return self.order
