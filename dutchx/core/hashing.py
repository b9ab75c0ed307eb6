"""
Order identity and cosignature digests.

`order_hash` is the EIP-712 struct hash of the `V2DutchOrder` witness. It is
what Permit2 signs over (as the witness) and what the reactor uses as the order
id, so it covers every order field except the cosigner's data and signature.

`cosignature_hash` binds the cosigner's pricing data to that identity and to
the chain:

    keccak256(abi.encodePacked(orderHash, chainId, abi.encode(cosignerData)))
"""

from __future__ import annotations

from typing import Sequence

from eth_abi import encode
from eth_abi.packed import encode_packed

from ..state.abi import encode_cosigner_data
from ..state.canonical import keccak256, type_hash
from ..state.orders import CosignerData, DutchOutput, OrderInfo


ORDER_INFO_TYPE = (
    "OrderInfo(address reactor,address swapper,uint256 nonce,uint256 deadline,"
    "address additionalValidationContract,bytes additionalValidationData)"
)
DUTCH_OUTPUT_TYPE = "DutchOutput(address token,uint256 startAmount,uint256 endAmount,address recipient)"
V2_DUTCH_ORDER_TYPE = (
    "V2DutchOrder(OrderInfo info,address cosigner,address baseInputToken,uint256 baseInputStartAmount,"
    "uint256 baseInputEndAmount,DutchOutput[] baseOutputs)"
)

# Referenced struct types are appended in alphabetical order (EIP-712 encodeType).
ORDER_TYPE = V2_DUTCH_ORDER_TYPE + DUTCH_OUTPUT_TYPE + ORDER_INFO_TYPE

ORDER_INFO_TYPEHASH = type_hash(ORDER_INFO_TYPE)
DUTCH_OUTPUT_TYPEHASH = type_hash(DUTCH_OUTPUT_TYPE)
ORDER_TYPEHASH = type_hash(ORDER_TYPE)


def order_info_hash(info: OrderInfo) -> bytes:
    return keccak256(
        encode(
            ["bytes32", "address", "address", "uint256", "uint256", "address", "bytes32"],
            [
                ORDER_INFO_TYPEHASH,
                info.reactor,
                info.swapper,
                info.nonce,
                info.deadline,
                info.additional_validation_contract,
                keccak256(info.additional_validation_data),
            ],
        )
    )


def output_hash(output: DutchOutput) -> bytes:
    return keccak256(
        encode(
            ["bytes32", "address", "uint256", "uint256", "address"],
            [DUTCH_OUTPUT_TYPEHASH, output.token, output.start_amount, output.end_amount, output.recipient],
        )
    )


def outputs_hash(outputs: Sequence[DutchOutput]) -> bytes:
    return keccak256(b"".join(output_hash(o) for o in outputs))


def order_hash(info: OrderInfo) -> bytes:
    """32-byte order identity; independent of cosigner data and cosignature."""
    return keccak256(
        encode(
            ["bytes32", "bytes32", "address", "address", "uint256", "uint256", "bytes32"],
            [
                ORDER_TYPEHASH,
                order_info_hash(info),
                info.cosigner,
                info.input.token,
                info.input.start_amount,
                info.input.end_amount,
                outputs_hash(info.outputs),
            ],
        )
    )


def cosignature_hash(info: OrderInfo, chain_id: int, cosigner_data: CosignerData) -> bytes:
    """Digest the cosigner signs over (raw, no message prefix)."""
    return keccak256(
        encode_packed(
            ["bytes32", "uint256", "bytes"],
            [order_hash(info), chain_id, encode_cosigner_data(cosigner_data)],
        )
    )
