"""
Solidity ABI shapes of the V2 Dutch order.

The reactor decodes orders with

    abi.decode(order, (V2DutchOrder))

so the wire layout is a single tuple with the fields below, in this order.
Field order and widths are fixed; outputs and output overrides are dynamic
arrays and keep insertion order.
"""

from __future__ import annotations

from typing import Any, Tuple

from eth_abi import decode, encode

from .canonical import hex_to_bytes
from .orders import CosignerData, DutchInput, DutchOutput, OrderInfo


ORDER_INFO_ABI = "(address,address,uint256,uint256,address,bytes)"
DUTCH_INPUT_ABI = "(address,uint256,uint256)"
DUTCH_OUTPUT_ABI = "(address,uint256,uint256,address)"
COSIGNER_DATA_ABI = "(uint256,uint256,address,uint256,uint256,uint256[])"

V2_DUTCH_ORDER_ABI = (
    "("
    + ORDER_INFO_ABI
    + ",address,"
    + DUTCH_INPUT_ABI
    + ","
    + DUTCH_OUTPUT_ABI
    + "[],"
    + COSIGNER_DATA_ABI
    + ",bytes)"
)


def order_info_tuple(info: OrderInfo) -> Tuple[Any, ...]:
    return (
        info.reactor,
        info.swapper,
        info.nonce,
        info.deadline,
        info.additional_validation_contract,
        info.additional_validation_data,
    )


def input_tuple(value: DutchInput) -> Tuple[Any, ...]:
    return (value.token, value.start_amount, value.end_amount)


def output_tuple(value: DutchOutput) -> Tuple[Any, ...]:
    return (value.token, value.start_amount, value.end_amount, value.recipient)


def cosigner_data_tuple(data: CosignerData) -> Tuple[Any, ...]:
    return (
        data.decay_start_time,
        data.decay_end_time,
        data.exclusive_filler,
        data.exclusivity_override_bps,
        data.input_override,
        list(data.output_overrides),
    )


def encode_cosigner_data(data: CosignerData) -> bytes:
    """`abi.encode(cosignerData)` (struct with a dynamic member, so head-offset prefixed)."""
    return encode([COSIGNER_DATA_ABI], [cosigner_data_tuple(data)])


def encode_order(info: OrderInfo) -> bytes:
    """Encode a cosigned `OrderInfo` as `abi.encode(V2DutchOrder)`."""
    if info.cosigner_data is None or info.cosignature is None:
        raise ValueError("only cosigned orders have a wire encoding")
    value = (
        order_info_tuple(info),
        info.cosigner,
        input_tuple(info.input),
        [output_tuple(o) for o in info.outputs],
        cosigner_data_tuple(info.cosigner_data),
        hex_to_bytes(info.cosignature, name="cosignature"),
    )
    return encode([V2_DUTCH_ORDER_ABI], [value])


def decode_order(data: bytes) -> Tuple[Any, ...]:
    """Inverse of `encode_order` at the tuple level (raw eth_abi values)."""
    (value,) = decode([V2_DUTCH_ORDER_ABI], bytes(data))
    return value
