"""
dutchx: build, cosign, price and encode V2 Dutch orders
"""

from .core import (
    FullOrder,
    OrderBuilder,
    OrderError,
    OrderErrorKind,
    PartialOrder,
    decay,
    parse_order,
    serialize,
)
from .config import DeploymentRegistry
from .state import CosignerData, CosignerDataOverrides, DutchInput, DutchOutput, OrderInfo

__version__ = "0.1.0"

__all__ = [
    "OrderBuilder",
    "PartialOrder",
    "FullOrder",
    "OrderError",
    "OrderErrorKind",
    "decay",
    "serialize",
    "parse_order",
    "DeploymentRegistry",
    "CosignerData",
    "CosignerDataOverrides",
    "DutchInput",
    "DutchOutput",
    "OrderInfo",
]
