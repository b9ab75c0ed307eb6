"""
Wire encoding of cosigned orders.

`serialize` produces `abi.encode(V2DutchOrder)`, the bytes handed to the
reactor's `execute`. `parse_order` / `deserialize` invert it; for anything
`serialize` produced, `serialize(parse_order(serialize(o))) == serialize(o)`.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from eth_abi.exceptions import DecodingError

from .builder import OrderBuilder
from .errors import OrderDecodeError, OrderError
from .orders import FullOrder
from ..state.abi import decode_order
from ..state.canonical import bytes_to_hex, hex_to_bytes
from ..state.orders import CosignerData, DutchInput, DutchOutput

logger = logging.getLogger(__name__)


def serialize(order: FullOrder) -> bytes:
    if not isinstance(order, FullOrder):
        raise TypeError("only FullOrder values can be serialized")
    data = order.serialize()
    logger.debug("serialized order %s (%d bytes)", order.hash_hex(), len(data))
    return data


def _to_bytes(data: Union[bytes, str]) -> bytes:
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    try:
        return hex_to_bytes(data, name="order")
    except (TypeError, ValueError) as exc:
        raise OrderDecodeError(f"order bytes: {exc}", field="order") from exc


def deserialize(
    data: Union[bytes, str],
    chain_id: int,
    permit2_address: Optional[str] = None,
) -> OrderBuilder:
    """Decode wire bytes into a builder holding every field of the order."""
    raw = _to_bytes(data)
    try:
        info_t, cosigner, input_t, outputs_t, cosigner_data_t, cosignature = decode_order(raw)
    except DecodingError as exc:
        raise OrderDecodeError(f"malformed V2 Dutch order: {exc}", field="order") from exc

    reactor, swapper, nonce, deadline, validation_contract, validation_data = info_t
    try:
        cosigner_data = CosignerData(
            decay_start_time=cosigner_data_t[0],
            decay_end_time=cosigner_data_t[1],
            exclusive_filler=cosigner_data_t[2],
            exclusivity_override_bps=cosigner_data_t[3],
            input_override=cosigner_data_t[4],
            output_overrides=tuple(cosigner_data_t[5]),
        )
        builder = (
            OrderBuilder(chain_id, reactor, permit2_address)
            .swapper(swapper)
            .nonce(nonce)
            .deadline(deadline)
            .cosigner(cosigner)
            .input(DutchInput(token=input_t[0], start_amount=input_t[1], end_amount=input_t[2]))
            .validation(validation_contract, validation_data)
            .cosigner_data(cosigner_data)
            .cosignature(bytes_to_hex(cosignature))
        )
        for token, start_amount, end_amount, recipient in outputs_t:
            builder.output(DutchOutput(token=token, start_amount=start_amount, end_amount=end_amount, recipient=recipient))
    except OrderError as exc:
        raise OrderDecodeError(f"decoded order has invalid field: {exc}", field=exc.field) from exc
    except (TypeError, ValueError) as exc:
        raise OrderDecodeError(f"decoded order has invalid field: {exc}", field="order") from exc
    return builder


def parse_order(
    data: Union[bytes, str],
    chain_id: int,
    permit2_address: Optional[str] = None,
) -> FullOrder:
    builder = deserialize(data, chain_id, permit2_address)
    try:
        order = builder.build()
    except OrderDecodeError:
        raise
    except OrderError as exc:
        raise OrderDecodeError(f"decoded order is not a valid cosigned order: {exc}", field=exc.field) from exc
    logger.debug("parsed order %s", order.hash_hex())
    return order
