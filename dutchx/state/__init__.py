"""
Order value types and canonical encodings
"""

from .canonical import UINT256_MAX, ZERO_ADDRESS
from .orders import CosignerData, CosignerDataOverrides, DutchInput, DutchOutput, OrderInfo

__all__ = [
    "UINT256_MAX",
    "ZERO_ADDRESS",
    "CosignerData",
    "CosignerDataOverrides",
    "DutchInput",
    "DutchOutput",
    "OrderInfo",
]
