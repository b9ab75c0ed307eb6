"""
Order data models.

All models are frozen dataclasses. Constructors normalize addresses to their
checksummed form and reject values that cannot be ABI-encoded (negative or
oversized integers, malformed addresses) with `ValueError` / `TypeError`.

Cross-field rules (decay window ordering, override counts, deadline vs decay
end) are *not* checked here; they belong to build and resolve time.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional, Sequence, Tuple

from .canonical import (
    SIGNATURE_LENGTH,
    ZERO_ADDRESS,
    bytes_to_hex,
    canonical_address,
    coerce_bytes,
    hex_to_bytes,
    require_uint,
)


@dataclass(frozen=True)
class DutchInput:
    """Token the swapper sells; amount decays from start to end."""

    token: str
    start_amount: int
    end_amount: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "token", canonical_address(self.token, name="input.token"))
        require_uint(self.start_amount, name="input.start_amount")
        require_uint(self.end_amount, name="input.end_amount")


@dataclass(frozen=True)
class DutchOutput:
    """Token the swapper receives at `recipient`."""

    token: str
    start_amount: int
    end_amount: int
    recipient: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "token", canonical_address(self.token, name="output.token"))
        object.__setattr__(self, "recipient", canonical_address(self.recipient, name="output.recipient"))
        require_uint(self.start_amount, name="output.start_amount")
        require_uint(self.end_amount, name="output.end_amount")

    def with_recipient(self, recipient: str) -> "DutchOutput":
        return replace(self, recipient=recipient)


@dataclass(frozen=True)
class CosignerDataOverrides:
    """
    Typed partial update for `CosignerData`.

    `None` means "keep the base value".
    """

    decay_start_time: Optional[int] = None
    decay_end_time: Optional[int] = None
    exclusive_filler: Optional[str] = None
    exclusivity_override_bps: Optional[int] = None
    input_override: Optional[int] = None
    output_overrides: Optional[Sequence[int]] = None


@dataclass(frozen=True)
class CosignerData:
    """
    Pricing and exclusivity parameters fixed by the cosigner at dispatch time.

    Attributes:
        decay_start_time: Unix timestamp where decay begins (and exclusivity ends)
        decay_end_time: Unix timestamp where amounts reach their end values
        exclusive_filler: Filler with exclusive rights; zero address = open order
        exclusivity_override_bps: Penalty for non-exclusive fillers (1/10_000)
        input_override: Replaces the input start amount; 0 = no override
        output_overrides: One entry per output, same order; 0 = no override
    """

    decay_start_time: int
    decay_end_time: int
    exclusive_filler: str = ZERO_ADDRESS
    exclusivity_override_bps: int = 0
    input_override: int = 0
    output_overrides: Tuple[int, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        require_uint(self.decay_start_time, name="cosigner_data.decay_start_time")
        require_uint(self.decay_end_time, name="cosigner_data.decay_end_time")
        object.__setattr__(
            self,
            "exclusive_filler",
            canonical_address(self.exclusive_filler, name="cosigner_data.exclusive_filler"),
        )
        require_uint(self.exclusivity_override_bps, name="cosigner_data.exclusivity_override_bps")
        require_uint(self.input_override, name="cosigner_data.input_override")
        if isinstance(self.output_overrides, (str, bytes)):
            raise TypeError("cosigner_data.output_overrides must be a sequence of ints")
        overrides = tuple(self.output_overrides)
        for i, amount in enumerate(overrides):
            require_uint(amount, name=f"cosigner_data.output_overrides[{i}]")
        object.__setattr__(self, "output_overrides", overrides)

    @classmethod
    def default(cls, deadline: int, decay_duration: int = 0) -> "CosignerData":
        """No exclusivity, no overrides, decay ending at `deadline`."""
        start = max(0, deadline - decay_duration)
        return cls(decay_start_time=start, decay_end_time=deadline)

    def with_overrides(self, overrides: CosignerDataOverrides) -> "CosignerData":
        return CosignerData(
            decay_start_time=(
                self.decay_start_time if overrides.decay_start_time is None else overrides.decay_start_time
            ),
            decay_end_time=(
                self.decay_end_time if overrides.decay_end_time is None else overrides.decay_end_time
            ),
            exclusive_filler=(
                self.exclusive_filler if overrides.exclusive_filler is None else overrides.exclusive_filler
            ),
            exclusivity_override_bps=(
                self.exclusivity_override_bps
                if overrides.exclusivity_override_bps is None
                else overrides.exclusivity_override_bps
            ),
            input_override=(
                self.input_override if overrides.input_override is None else overrides.input_override
            ),
            output_overrides=(
                self.output_overrides if overrides.output_overrides is None else tuple(overrides.output_overrides)
            ),
        )

    @property
    def has_exclusive_filler(self) -> bool:
        return self.exclusive_filler != ZERO_ADDRESS


@dataclass(frozen=True)
class OrderInfo:
    """
    Order fields shared by partial and full orders.

    `cosigner_data` and `cosignature` are `None` on a partial order and set on
    a full (cosigned) order.
    """

    reactor: str
    swapper: str
    nonce: int
    deadline: int
    cosigner: str
    input: DutchInput
    outputs: Tuple[DutchOutput, ...]
    additional_validation_contract: str = ZERO_ADDRESS
    additional_validation_data: bytes = b""
    cosigner_data: Optional[CosignerData] = None
    cosignature: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "reactor", canonical_address(self.reactor, name="reactor"))
        object.__setattr__(self, "swapper", canonical_address(self.swapper, name="swapper"))
        object.__setattr__(self, "cosigner", canonical_address(self.cosigner, name="cosigner"))
        object.__setattr__(
            self,
            "additional_validation_contract",
            canonical_address(self.additional_validation_contract, name="additional_validation_contract"),
        )
        object.__setattr__(
            self,
            "additional_validation_data",
            coerce_bytes(self.additional_validation_data, name="additional_validation_data"),
        )
        require_uint(self.nonce, name="nonce")
        if require_uint(self.deadline, name="deadline") == 0:
            raise ValueError("deadline must be a positive timestamp")
        if not isinstance(self.input, DutchInput):
            raise TypeError("input must be a DutchInput")
        outputs = tuple(self.outputs)
        if not outputs:
            raise ValueError("outputs must not be empty")
        for output in outputs:
            if not isinstance(output, DutchOutput):
                raise TypeError("outputs must contain DutchOutput values")
        object.__setattr__(self, "outputs", outputs)
        if self.cosigner_data is not None and not isinstance(self.cosigner_data, CosignerData):
            raise TypeError("cosigner_data must be a CosignerData")
        if self.cosignature is not None:
            raw = hex_to_bytes(self.cosignature, name="cosignature", nbytes=SIGNATURE_LENGTH)
            object.__setattr__(self, "cosignature", bytes_to_hex(raw))

    @property
    def is_cosigned(self) -> bool:
        return self.cosigner_data is not None and self.cosignature is not None

    def without_cosignature(self) -> "OrderInfo":
        return replace(self, cosigner_data=None, cosignature=None)
