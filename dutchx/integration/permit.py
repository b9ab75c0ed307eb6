"""
Permit2 structured data for the swapper's authorization signature.

The swapper signs a `PermitWitnessTransferFrom` whose witness is the order
itself. This module only *produces* the `(domain, types, values)` triple and
the EIP-712 digest; verifying the signature is the reactor's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from eth_abi import encode

from ..core.hashing import DUTCH_OUTPUT_TYPE, ORDER_INFO_TYPE, V2_DUTCH_ORDER_TYPE, order_hash
from ..state.canonical import bytes_to_hex, keccak256, type_hash
from ..state.orders import OrderInfo


PERMIT2_DOMAIN_NAME = "Permit2"

EIP712_DOMAIN_TYPE = "EIP712Domain(string name,uint256 chainId,address verifyingContract)"
TOKEN_PERMISSIONS_TYPE = "TokenPermissions(address token,uint256 amount)"
PERMIT_WITNESS_TRANSFER_FROM_TYPE = (
    "PermitWitnessTransferFrom(TokenPermissions permitted,address spender,uint256 nonce,uint256 deadline,"
    "V2DutchOrder witness)"
    + DUTCH_OUTPUT_TYPE
    + ORDER_INFO_TYPE
    + TOKEN_PERMISSIONS_TYPE
    + V2_DUTCH_ORDER_TYPE
)

EIP712_DOMAIN_TYPEHASH = type_hash(EIP712_DOMAIN_TYPE)
TOKEN_PERMISSIONS_TYPEHASH = type_hash(TOKEN_PERMISSIONS_TYPE)
PERMIT_WITNESS_TRANSFER_FROM_TYPEHASH = type_hash(PERMIT_WITNESS_TRANSFER_FROM_TYPE)

PERMIT_TYPES: Dict[str, List[Dict[str, str]]] = {
    "PermitWitnessTransferFrom": [
        {"name": "permitted", "type": "TokenPermissions"},
        {"name": "spender", "type": "address"},
        {"name": "nonce", "type": "uint256"},
        {"name": "deadline", "type": "uint256"},
        {"name": "witness", "type": "V2DutchOrder"},
    ],
    "TokenPermissions": [
        {"name": "token", "type": "address"},
        {"name": "amount", "type": "uint256"},
    ],
    "V2DutchOrder": [
        {"name": "info", "type": "OrderInfo"},
        {"name": "cosigner", "type": "address"},
        {"name": "baseInputToken", "type": "address"},
        {"name": "baseInputStartAmount", "type": "uint256"},
        {"name": "baseInputEndAmount", "type": "uint256"},
        {"name": "baseOutputs", "type": "DutchOutput[]"},
    ],
    "OrderInfo": [
        {"name": "reactor", "type": "address"},
        {"name": "swapper", "type": "address"},
        {"name": "nonce", "type": "uint256"},
        {"name": "deadline", "type": "uint256"},
        {"name": "additionalValidationContract", "type": "address"},
        {"name": "additionalValidationData", "type": "bytes"},
    ],
    "DutchOutput": [
        {"name": "token", "type": "address"},
        {"name": "startAmount", "type": "uint256"},
        {"name": "endAmount", "type": "uint256"},
        {"name": "recipient", "type": "address"},
    ],
}


@dataclass(frozen=True)
class PermitData:
    """`(domain, types, values)` ready for an external typed-data signer."""

    domain: Dict[str, Any]
    types: Dict[str, List[Dict[str, str]]]
    values: Dict[str, Any]


def permit_domain(chain_id: int, permit2_address: str) -> Dict[str, Any]:
    return {"name": PERMIT2_DOMAIN_NAME, "chainId": chain_id, "verifyingContract": permit2_address}


def witness_values(info: OrderInfo) -> Dict[str, Any]:
    return {
        "info": {
            "reactor": info.reactor,
            "swapper": info.swapper,
            "nonce": info.nonce,
            "deadline": info.deadline,
            "additionalValidationContract": info.additional_validation_contract,
            "additionalValidationData": bytes_to_hex(info.additional_validation_data),
        },
        "cosigner": info.cosigner,
        "baseInputToken": info.input.token,
        "baseInputStartAmount": info.input.start_amount,
        "baseInputEndAmount": info.input.end_amount,
        "baseOutputs": [
            {
                "token": o.token,
                "startAmount": o.start_amount,
                "endAmount": o.end_amount,
                "recipient": o.recipient,
            }
            for o in info.outputs
        ],
    }


def permit_data(info: OrderInfo, chain_id: int, permit2_address: str) -> PermitData:
    # The swapper authorizes up to the input end amount (the most it can ever pay).
    values = {
        "permitted": {"token": info.input.token, "amount": info.input.end_amount},
        "spender": info.reactor,
        "nonce": info.nonce,
        "deadline": info.deadline,
        "witness": witness_values(info),
    }
    types = {name: [dict(f) for f in fields] for name, fields in PERMIT_TYPES.items()}
    return PermitData(domain=permit_domain(chain_id, permit2_address), types=types, values=values)


def domain_separator(chain_id: int, permit2_address: str) -> bytes:
    return keccak256(
        encode(
            ["bytes32", "bytes32", "uint256", "address"],
            [EIP712_DOMAIN_TYPEHASH, keccak256(PERMIT2_DOMAIN_NAME.encode("ascii")), chain_id, permit2_address],
        )
    )


def permit_struct_hash(info: OrderInfo) -> bytes:
    token_permissions = keccak256(
        encode(["bytes32", "address", "uint256"], [TOKEN_PERMISSIONS_TYPEHASH, info.input.token, info.input.end_amount])
    )
    return keccak256(
        encode(
            ["bytes32", "bytes32", "address", "uint256", "uint256", "bytes32"],
            [
                PERMIT_WITNESS_TRANSFER_FROM_TYPEHASH,
                token_permissions,
                info.reactor,
                info.nonce,
                info.deadline,
                order_hash(info),
            ],
        )
    )


def permit_digest(info: OrderInfo, chain_id: int, permit2_address: str) -> bytes:
    """EIP-712 digest the swapper signs: `keccak(0x1901 || domainSeparator || structHash)`."""
    return keccak256(b"\x19\x01" + domain_separator(chain_id, permit2_address) + permit_struct_hash(info))
