"""
Settlement call shapes and batching for fillers.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence
from collections import defaultdict

from ..core.cosigning import SIGNATURE_LENGTH
from ..core.errors import InvalidArgumentError
from ..core.orders import FullOrder
from ..state.canonical import bytes_to_hex, hex_to_bytes


@dataclass(frozen=True)
class SignedOrder:
    """
    Reactor `SignedOrder` struct.

    Attributes:
        order: `abi.encode(V2DutchOrder)` bytes
        sig: Swapper's Permit2 signature (0x-hex)
        reactor: Reactor the order must be sent to
    """
    order: bytes
    sig: str
    reactor: str


def create_signed_order(full_order: FullOrder, signature: str) -> SignedOrder:
    """
    Pair a cosigned order with the swapper's Permit2 signature.

    Args:
        full_order: Cosigned order
        signature: Swapper signature over `full_order.permit_digest()`

    Returns:
        SignedOrder ready for `execute`
    """
    try:
        hex_to_bytes(signature, name="sig", nbytes=SIGNATURE_LENGTH)
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(f"invalid swapper signature: {exc}", field="sig") from exc

    return SignedOrder(
        order=full_order.serialize(),
        sig=signature.lower(),
        reactor=full_order.info.reactor,
    )


def execute_payload(signed: SignedOrder) -> Dict[str, Any]:
    """Argument of `reactor.execute(SignedOrder)` as JSON-friendly hex."""
    return {
        "order": bytes_to_hex(signed.order),
        "sig": signed.sig,
    }


def batch_signed_orders(
    signed_orders: Sequence[SignedOrder],
    max_batch_size: int = 20,
) -> List[List[SignedOrder]]:
    """
    Group signed orders into `executeBatch` calls.

    Orders for different reactors never share a batch. Input order is kept
    within each reactor.

    Args:
        signed_orders: Orders to submit
        max_batch_size: Maximum orders per batch

    Returns:
        List of batches
    """
    if max_batch_size <= 0:
        raise InvalidArgumentError("max_batch_size must be positive", field="max_batch_size")

    by_reactor: Dict[str, List[SignedOrder]] = defaultdict(list)
    for signed in signed_orders:
        by_reactor[signed.reactor].append(signed)

    batches: List[List[SignedOrder]] = []
    for reactor_orders in by_reactor.values():
        for i in range(0, len(reactor_orders), max_batch_size):
            batches.append(reactor_orders[i:i + max_batch_size])
    return batches


def execute_batch_payload(batch: Sequence[SignedOrder]) -> Dict[str, Any]:
    """Call description for `reactor.executeBatch(SignedOrder[])`."""
    if not batch:
        raise InvalidArgumentError("batch must not be empty", field="batch")
    reactor = batch[0].reactor
    if any(s.reactor != reactor for s in batch):
        raise InvalidArgumentError("batch mixes reactors", field="batch")
    return {
        "reactor": reactor,
        "orders": [execute_payload(s) for s in batch],
    }
