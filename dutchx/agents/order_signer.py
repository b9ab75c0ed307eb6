"""
Swapper-side signing of the Permit2 witness transfer.
"""

from typing import Union

from ..core.cosigning import sign_digest
from ..core.orders import FullOrder, PartialOrder


def sign_order(order: Union[PartialOrder, FullOrder], private_key: bytes) -> str:
    """
    Sign the order's Permit2 EIP-712 digest.

    The digest does not cover cosigner data, so the same signature is valid
    for the partial order and for any full order built from it.

    Args:
        order: Partial or full order
        private_key: Swapper's 32-byte secp256k1 key

    Returns:
        65-byte signature as 0x-hex
    """
    return sign_digest(order.permit_digest(), private_key)
