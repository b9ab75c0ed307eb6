"""
secp256k1 signing and recovery over raw 32-byte digests.

Signatures use the 65-byte `r || s || v` layout the reactor splits before
calling `ecrecover`, with `v` in {27, 28}. `v` in {0, 1} is accepted on input
and normalized.
"""

from __future__ import annotations

import logging
from typing import Tuple

from eth_utils import to_checksum_address
from py_ecc.secp256k1.secp256k1 import N as SECP256K1_N
from py_ecc.secp256k1.secp256k1 import ecdsa_raw_recover, ecdsa_raw_sign, privtopub

from .errors import InvalidCosignatureError
from ..state.canonical import (
    SIGNATURE_LENGTH,
    bytes_to_hex,
    canonical_address,
    hex_to_bytes,
    keccak256,
    same_address,
)

logger = logging.getLogger(__name__)


def split_signature(signature: str) -> Tuple[int, int, int]:
    """Return `(v, r, s)` from a 0x-hex 65-byte signature."""
    try:
        raw = hex_to_bytes(signature, name="signature", nbytes=SIGNATURE_LENGTH)
    except (TypeError, ValueError) as exc:
        raise InvalidCosignatureError(f"malformed signature: {exc}", field="cosignature") from exc
    r = int.from_bytes(raw[0:32], "big")
    s = int.from_bytes(raw[32:64], "big")
    v = raw[64]
    if v < 27:
        v += 27
    if v not in (27, 28):
        raise InvalidCosignatureError(f"invalid signature v value: {raw[64]}", field="cosignature")
    return v, r, s


def join_signature(v: int, r: int, s: int) -> str:
    return bytes_to_hex(r.to_bytes(32, "big") + s.to_bytes(32, "big") + bytes([v]))


def public_key_to_address(pubkey: Tuple[int, int]) -> str:
    x, y = pubkey
    return to_checksum_address(keccak256(x.to_bytes(32, "big") + y.to_bytes(32, "big"))[-20:])


def private_key_to_address(private_key: bytes) -> str:
    return public_key_to_address(privtopub(_require_private_key(private_key)))


def _require_private_key(private_key: bytes) -> bytes:
    if not isinstance(private_key, (bytes, bytearray)) or len(private_key) != 32:
        raise ValueError("private_key must be 32 bytes")
    k = int.from_bytes(private_key, "big")
    if not (0 < k < SECP256K1_N):
        raise ValueError("private_key out of range for secp256k1")
    return bytes(private_key)


def _require_digest(digest: bytes) -> bytes:
    if not isinstance(digest, (bytes, bytearray)) or len(digest) != 32:
        raise ValueError("digest must be 32 bytes")
    return bytes(digest)


def sign_digest(digest: bytes, private_key: bytes) -> str:
    """Sign a raw digest (no EIP-191 prefix); returns the 65-byte signature as 0x-hex."""
    v, r, s = ecdsa_raw_sign(_require_digest(digest), _require_private_key(private_key))
    return join_signature(v, r, s)


def recover_signer(digest: bytes, signature: str) -> str:
    """
    Recover the checksummed signer address.

    Raises:
        InvalidCosignatureError: malformed signature or no recoverable key.
    """
    v, r, s = split_signature(signature)
    if not (0 < r < SECP256K1_N and 0 < s < SECP256K1_N):
        raise InvalidCosignatureError("signature r/s out of range", field="cosignature")
    pubkey = ecdsa_raw_recover(_require_digest(digest), (v, r, s))
    if not pubkey:
        raise InvalidCosignatureError("signature does not recover to a public key", field="cosignature")
    return public_key_to_address(pubkey)


def verify_cosignature(cosigner: str, digest: bytes, signature: str) -> str:
    """
    Check that `signature` over `digest` was produced by `cosigner`.

    Returns the recovered address.

    Raises:
        InvalidCosignatureError: signature invalid or signed by someone else.
    """
    expected = canonical_address(cosigner, name="cosigner")
    recovered = recover_signer(digest, signature)
    if not same_address(recovered, expected):
        logger.debug("cosignature mismatch: expected %s, recovered %s", expected, recovered)
        raise InvalidCosignatureError(
            f"cosignature signed by {recovered}, expected {expected}",
            field="cosignature",
        )
    return recovered
