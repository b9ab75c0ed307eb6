"""`core`: order lifecycle engine.

- `OrderBuilder` -> `PartialOrder` -> (cosigner signs) -> `FullOrder`
- `decay()` prices one leg at a timestamp; `FullOrder.resolve()` prices the order
- `order_hash()` / `cosignature_hash()` are the digests swapper and cosigner sign
- `serialize()` / `parse_order()` are the reactor wire format

All computations are pure and integer-only.
"""

from .builder import OrderBuilder
from .cosigning import recover_signer, sign_digest, verify_cosignature
from .decay import decay
from .errors import (
    BuildResult,
    DeadlineBeforeEndTimeError,
    DecayWindowError,
    ExclusivityViolationError,
    IncompleteOrderError,
    InvalidArgumentError,
    InvalidCosignatureError,
    InvalidCosignerInputError,
    InvalidCosignerOutputError,
    InvalidCosignerOutputsError,
    InvalidFieldError,
    MissingConfigurationError,
    MissingCosignatureError,
    MissingCosignerDataError,
    OrderDecodeError,
    OrderError,
    OrderErrorKind,
)
from .exclusivity import DEFAULT_POLICY, ExclusivityPolicy, PenaltyTarget
from .hashing import cosignature_hash, order_hash
from .orders import FullOrder, PartialOrder
from .resolver import ResolvedInput, ResolvedOrder, ResolvedOutput, resolve
from .serializer import deserialize, parse_order, serialize

__all__ = [
    "OrderBuilder",
    "PartialOrder",
    "FullOrder",
    "ResolvedInput",
    "ResolvedOutput",
    "ResolvedOrder",
    "decay",
    "resolve",
    "order_hash",
    "cosignature_hash",
    "sign_digest",
    "recover_signer",
    "verify_cosignature",
    "serialize",
    "deserialize",
    "parse_order",
    "ExclusivityPolicy",
    "PenaltyTarget",
    "DEFAULT_POLICY",
    "BuildResult",
    "OrderError",
    "OrderErrorKind",
    "InvalidFieldError",
    "IncompleteOrderError",
    "InvalidArgumentError",
    "MissingCosignerDataError",
    "MissingCosignatureError",
    "InvalidCosignatureError",
    "DecayWindowError",
    "DeadlineBeforeEndTimeError",
    "InvalidCosignerInputError",
    "InvalidCosignerOutputError",
    "InvalidCosignerOutputsError",
    "ExclusivityViolationError",
    "OrderDecodeError",
    "MissingConfigurationError",
]
