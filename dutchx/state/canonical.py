"""
Deterministic canonical primitives for order fields.

Every value that ends up hashed, signed or ABI-encoded passes through one of
these helpers first, so that two callers holding "the same" order always
produce the same bytes.
"""

from __future__ import annotations

import re
from typing import Any

from eth_utils import is_address, keccak, to_checksum_address


UINT256_MAX = 2**256 - 1

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# r || s || v
SIGNATURE_LENGTH = 65

_HEX_CHARS_RE = re.compile(r"^[0-9a-fA-F]*$")


def is_uint(value: Any, *, bits: int = 256) -> bool:
    if not isinstance(value, int) or isinstance(value, bool):
        return False
    return 0 <= value < (1 << bits)


def require_uint(value: Any, *, name: str, bits: int = 256) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    if value >= (1 << bits):
        raise ValueError(f"{name} must fit in uint{bits}")
    return int(value)


def canonical_address(value: Any, *, name: str) -> str:
    """
    Canonicalize an address to its EIP-55 checksummed form.

    Accepts any-case `0x`-prefixed 20-byte hex. Mixed-case input with a wrong
    checksum is rejected rather than silently "fixed".
    """
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a str")
    s = value.strip()
    if not s:
        raise ValueError(f"{name} must not be empty")
    if not is_address(s):
        raise ValueError(f"{name} must be a 0x-prefixed 20-byte address: {value!r}")
    return to_checksum_address(s)


def same_address(a: str, b: str) -> bool:
    return a.lower() == b.lower()


def hex_to_bytes(hex_str: Any, *, name: str, nbytes: int | None = None) -> bytes:
    if not isinstance(hex_str, str):
        raise TypeError(f"{name} must be a str")
    if not hex_str.startswith("0x"):
        raise ValueError(f"{name} must be 0x-prefixed hex")
    body = hex_str[2:]
    if len(body) % 2 != 0 or not _HEX_CHARS_RE.fullmatch(body):
        raise ValueError(f"{name} must be valid hex")
    out = bytes.fromhex(body)
    if nbytes is not None and len(out) != nbytes:
        raise ValueError(f"{name} must decode to exactly {nbytes} bytes")
    return out


def bytes_to_hex(value: bytes) -> str:
    return "0x" + bytes(value).hex()


def coerce_bytes(value: Any, *, name: str) -> bytes:
    """Accept raw bytes or 0x-hex and return bytes."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        return hex_to_bytes(value, name=name)
    raise TypeError(f"{name} must be bytes or 0x-hex str")


def keccak256(data: bytes) -> bytes:
    return keccak(primitive=bytes(data))


def type_hash(type_string: str) -> bytes:
    """EIP-712 type hash of a full encoded type string."""
    return keccak256(type_string.encode("ascii"))
