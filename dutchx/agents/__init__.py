"""
Off-chain actors around an order: cosigner, swapper signer, relayer
"""

from .cosigner import Cosigner
from .order_signer import sign_order
from .relayer import (
    SignedOrder,
    batch_signed_orders,
    create_signed_order,
    execute_batch_payload,
    execute_payload,
)

__all__ = [
    "Cosigner",
    "sign_order",
    "SignedOrder",
    "create_signed_order",
    "execute_payload",
    "batch_signed_orders",
    "execute_batch_payload",
]
