"""
Fluent builder for V2 Dutch orders.

The builder owns a mutable draft. Mutators validate only their own argument
(`InvalidFieldError`); everything that relates two fields is checked when a
snapshot is taken:

    partial = (
        OrderBuilder(chain_id, reactor)
        .cosigner(cosigner)
        .deadline(deadline)
        .swapper(swapper)
        .nonce(100)
        .input(DutchInput(token_in, amount, amount))
        .output(DutchOutput(token_out, amount, amount * 9 // 10, swapper))
        .build_partial()
    )
    full = (
        OrderBuilder.from_order(partial)
        .cosigner_data(cosigner_data)
        .cosignature(cosignature)
        .build()
    )

Builders are plain data and hold no locks; sharing one between concurrent
callers is last-writer-wins.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, TypeVar, Union

from .errors import (
    BuildResult,
    IncompleteOrderError,
    InvalidArgumentError,
    InvalidFieldError,
    MissingCosignatureError,
    MissingCosignerDataError,
    OrderError,
)
from .cosigning import SIGNATURE_LENGTH
from .orders import FullOrder, PartialOrder
from ..config import DeploymentRegistry
from ..state.canonical import (
    ZERO_ADDRESS,
    bytes_to_hex,
    canonical_address,
    coerce_bytes,
    hex_to_bytes,
    require_uint,
    same_address,
)
from ..state.orders import CosignerData, CosignerDataOverrides, DutchInput, DutchOutput, OrderInfo

logger = logging.getLogger(__name__)

T = TypeVar("T")

_BASE_COSIGNER_DATA = CosignerData(decay_start_time=0, decay_end_time=0)


def _checked(field: str, fn: Callable[[], T]) -> T:
    try:
        return fn()
    except (TypeError, ValueError) as exc:
        raise InvalidFieldError(field, str(exc)) from exc


def _fields(value: Mapping[str, Any], keys: Sequence[str], *, name: str) -> Dict[str, Any]:
    missing = [k for k in keys if k not in value]
    if missing:
        raise ValueError(f"{name} is missing {', '.join(missing)}")
    return {k: value[k] for k in keys}


def _as_input(value: Union[DutchInput, Mapping[str, Any]]) -> DutchInput:
    if isinstance(value, DutchInput):
        return value
    if not isinstance(value, Mapping):
        raise TypeError("input must be a DutchInput or a mapping")
    return DutchInput(**_fields(value, ("token", "start_amount", "end_amount"), name="input"))


def _as_output(value: Union[DutchOutput, Mapping[str, Any]]) -> DutchOutput:
    if isinstance(value, DutchOutput):
        return value
    if not isinstance(value, Mapping):
        raise TypeError("output must be a DutchOutput or a mapping")
    return DutchOutput(**_fields(value, ("token", "start_amount", "end_amount", "recipient"), name="output"))


class OrderBuilder:
    def __init__(
        self,
        chain_id: int,
        reactor: Optional[str] = None,
        permit2_address: Optional[str] = None,
        *,
        deployments: Optional[DeploymentRegistry] = None,
    ) -> None:
        self._chain_id = _checked("chain_id", lambda: require_uint(chain_id, name="chain_id"))
        registry = deployments
        if registry is None and (reactor is None or permit2_address is None):
            registry = DeploymentRegistry.from_env()

        if reactor is None:
            assert registry is not None
            reactor = registry.reactor_for(self._chain_id)
        self._reactor: Optional[str] = _checked("reactor", lambda: canonical_address(reactor, name="reactor"))
        if permit2_address is None:
            assert registry is not None
            permit2_address = registry.permit2_for(self._chain_id)
        self._permit2_address = _checked(
            "permit2_address", lambda: canonical_address(permit2_address, name="permit2_address")
        )

        self._swapper: Optional[str] = None
        self._nonce: Optional[int] = None
        self._deadline: Optional[int] = None
        self._cosigner: Optional[str] = None
        self._input: Optional[DutchInput] = None
        self._outputs: List[DutchOutput] = []
        self._additional_validation_contract: str = ZERO_ADDRESS
        self._additional_validation_data: bytes = b""
        self._cosigner_data: Optional[CosignerData] = None
        self._cosignature: Optional[str] = None

    # -- identity fields ----------------------------------------------------

    @property
    def chain_id(self) -> int:
        return self._chain_id

    def reactor(self, reactor: str) -> "OrderBuilder":
        self._reactor = _checked("reactor", lambda: canonical_address(reactor, name="reactor"))
        return self

    def swapper(self, swapper: str) -> "OrderBuilder":
        self._swapper = _checked("swapper", lambda: canonical_address(swapper, name="swapper"))
        return self

    def nonce(self, nonce: int) -> "OrderBuilder":
        self._nonce = _checked("nonce", lambda: require_uint(nonce, name="nonce"))
        return self

    def deadline(self, deadline: int) -> "OrderBuilder":
        value = _checked("deadline", lambda: require_uint(deadline, name="deadline"))
        if value == 0:
            raise InvalidFieldError("deadline", "must be a positive timestamp")
        self._deadline = value
        return self

    def cosigner(self, cosigner: str) -> "OrderBuilder":
        self._cosigner = _checked("cosigner", lambda: canonical_address(cosigner, name="cosigner"))
        return self

    def validation(self, contract: str, data: Union[bytes, str] = b"") -> "OrderBuilder":
        """Set the optional additional-validation contract and its calldata."""
        self._additional_validation_contract = _checked(
            "additional_validation_contract",
            lambda: canonical_address(contract, name="additional_validation_contract"),
        )
        self._additional_validation_data = _checked(
            "additional_validation_data",
            lambda: coerce_bytes(data, name="additional_validation_data"),
        )
        return self

    # -- amounts ------------------------------------------------------------

    def input(self, value: Union[DutchInput, Mapping[str, Any]]) -> "OrderBuilder":
        self._input = _checked("input", lambda: _as_input(value))
        return self

    def output(self, value: Union[DutchOutput, Mapping[str, Any]]) -> "OrderBuilder":
        """Append one output; outputs keep insertion order."""
        self._outputs.append(_checked("output", lambda: _as_output(value)))
        return self

    def non_fee_recipient(self, new_recipient: str, fee_recipient: Optional[str] = None) -> "OrderBuilder":
        """
        Point every non-fee output at `new_recipient`.

        Outputs paying `fee_recipient` are left alone; with no `fee_recipient`
        every output is rewritten.

        Raises:
            InvalidArgumentError: `new_recipient` equals `fee_recipient`.
        """
        if fee_recipient is not None and isinstance(new_recipient, str) and isinstance(fee_recipient, str):
            if same_address(new_recipient, fee_recipient):
                raise InvalidArgumentError(
                    f"newRecipient must be different from feeRecipient: {new_recipient}",
                    field="recipient",
                )
        recipient = _checked("recipient", lambda: canonical_address(new_recipient, name="recipient"))
        fee = None
        if fee_recipient is not None:
            fee = _checked("fee_recipient", lambda: canonical_address(fee_recipient, name="fee_recipient"))

        self._outputs = [
            o if (fee is not None and same_address(o.recipient, fee)) else o.with_recipient(recipient)
            for o in self._outputs
        ]
        return self

    # -- cosigner fields ----------------------------------------------------

    def _merge_cosigner_data(self, field: str, value: Any) -> "OrderBuilder":
        # None would read as "keep the base value" in CosignerDataOverrides
        if value is None:
            raise InvalidFieldError(field, "must not be None")
        overrides = CosignerDataOverrides(**{field: value})
        base = self._cosigner_data or _BASE_COSIGNER_DATA
        self._cosigner_data = _checked(field, lambda: base.with_overrides(overrides))
        return self

    def decay_start_time(self, decay_start_time: int) -> "OrderBuilder":
        return self._merge_cosigner_data("decay_start_time", decay_start_time)

    def decay_end_time(self, decay_end_time: int) -> "OrderBuilder":
        return self._merge_cosigner_data("decay_end_time", decay_end_time)

    def exclusive_filler(self, filler: str) -> "OrderBuilder":
        return self._merge_cosigner_data("exclusive_filler", filler)

    def exclusivity_override_bps(self, bps: int) -> "OrderBuilder":
        return self._merge_cosigner_data("exclusivity_override_bps", bps)

    def input_override(self, amount: int) -> "OrderBuilder":
        return self._merge_cosigner_data("input_override", amount)

    def output_overrides(self, amounts: Sequence[int]) -> "OrderBuilder":
        return self._merge_cosigner_data("output_overrides", amounts)

    def cosigner_data(self, cosigner_data: CosignerData) -> "OrderBuilder":
        """Replace the whole cosigner data draft."""
        if not isinstance(cosigner_data, CosignerData):
            raise InvalidFieldError("cosigner_data", "must be a CosignerData")
        self._cosigner_data = cosigner_data
        return self

    def cosignature(self, cosignature: Union[str, bytes]) -> "OrderBuilder":
        if isinstance(cosignature, (bytes, bytearray)):
            raw = bytes(cosignature)
        else:
            raw = _checked("cosignature", lambda: hex_to_bytes(cosignature, name="cosignature"))
        if len(raw) != SIGNATURE_LENGTH:
            raise InvalidFieldError("cosignature", f"must be {SIGNATURE_LENGTH} bytes, got {len(raw)}")
        self._cosignature = bytes_to_hex(raw)
        return self

    # -- snapshots ----------------------------------------------------------

    def _require(self, field: str, value: Optional[T]) -> T:
        if value is None:
            raise IncompleteOrderError(field)
        return value

    def _info(self, now: Optional[int]) -> OrderInfo:
        reactor = self._require("reactor", self._reactor)
        swapper = self._require("swapper", self._swapper)
        nonce = self._require("nonce", self._nonce)
        deadline = self._require("deadline", self._deadline)
        cosigner = self._require("cosigner", self._cosigner)
        base_input = self._require("input", self._input)
        if not self._outputs:
            raise IncompleteOrderError("outputs")
        if now is not None and deadline <= now:
            raise InvalidFieldError("deadline", f"deadline {deadline} must be after now {now}")
        return OrderInfo(
            reactor=reactor,
            swapper=swapper,
            nonce=nonce,
            deadline=deadline,
            cosigner=cosigner,
            input=base_input,
            outputs=tuple(self._outputs),
            additional_validation_contract=self._additional_validation_contract,
            additional_validation_data=self._additional_validation_data,
        )

    def build_partial(self, now: Optional[int] = None) -> PartialOrder:
        """Snapshot without cosigner data; `now`, if given, must be before the deadline."""
        info = self._info(now)
        order = PartialOrder(info=info, chain_id=self._chain_id, permit2_address=self._permit2_address)
        logger.debug("built partial order swapper=%s nonce=%d", info.swapper, info.nonce)
        return order

    def build(self, now: Optional[int] = None) -> FullOrder:
        info = self._info(now)
        if self._cosigner_data is None:
            raise MissingCosignerDataError()
        if self._cosignature is None:
            raise MissingCosignatureError()
        order = FullOrder(
            info=OrderInfo(
                reactor=info.reactor,
                swapper=info.swapper,
                nonce=info.nonce,
                deadline=info.deadline,
                cosigner=info.cosigner,
                input=info.input,
                outputs=info.outputs,
                additional_validation_contract=info.additional_validation_contract,
                additional_validation_data=info.additional_validation_data,
                cosigner_data=self._cosigner_data,
                cosignature=self._cosignature,
            ),
            chain_id=self._chain_id,
            permit2_address=self._permit2_address,
        )
        logger.debug("built cosigned order swapper=%s nonce=%d", info.swapper, info.nonce)
        return order

    def try_build_partial(self, now: Optional[int] = None) -> BuildResult[PartialOrder]:
        try:
            return BuildResult(ok=True, order=self.build_partial(now))
        except OrderError as exc:
            return BuildResult(ok=False, error=exc)

    def try_build(self, now: Optional[int] = None) -> BuildResult[FullOrder]:
        try:
            return BuildResult(ok=True, order=self.build(now))
        except OrderError as exc:
            return BuildResult(ok=False, error=exc)

    @classmethod
    def from_order(cls, order: Union[PartialOrder, FullOrder]) -> "OrderBuilder":
        """Builder pre-populated from a partial or full order, field for field."""
        if not isinstance(order, (PartialOrder, FullOrder)):
            raise InvalidArgumentError("from_order expects a PartialOrder or FullOrder")
        info = order.info
        builder = (
            cls(order.chain_id, info.reactor, order.permit2_address)
            .swapper(info.swapper)
            .nonce(info.nonce)
            .deadline(info.deadline)
            .cosigner(info.cosigner)
            .input(info.input)
            .validation(info.additional_validation_contract, info.additional_validation_data)
        )
        for output in info.outputs:
            builder.output(output)
        if info.cosigner_data is not None:
            builder.cosigner_data(info.cosigner_data)
        if info.cosignature is not None:
            builder.cosignature(info.cosignature)
        return builder
