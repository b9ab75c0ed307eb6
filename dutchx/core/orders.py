"""
Staged order snapshots.

`PartialOrder` is an order without cosigner attestation; it exists to be
hashed, signed by the swapper (Permit2) and cosigned. `FullOrder` carries the
cosigner data and cosignature and is what gets serialized for the reactor.

Both are frozen; the only way from one to the other is through the builder
(`OrderBuilder.from_order(partial).cosigner_data(...).cosignature(...).build()`).
A `FullOrder` also runs the cosigner-data checks `build()` relies on, so any
instance that exists serializes to bytes `parse_order` accepts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .cosigning import recover_signer, verify_cosignature
from .errors import MissingCosignatureError, MissingCosignerDataError
from .exclusivity import DEFAULT_POLICY, ExclusivityPolicy
from .hashing import cosignature_hash, order_hash
from .resolver import ResolvedOrder, check_cosigner_data, resolve
from ..integration.permit import PermitData, permit_data, permit_digest
from ..state.abi import encode_order
from ..state.canonical import bytes_to_hex, canonical_address, require_uint
from ..state.orders import CosignerData, OrderInfo


@dataclass(frozen=True)
class _OrderBase:
    info: OrderInfo
    chain_id: int
    permit2_address: str

    def __post_init__(self) -> None:
        require_uint(self.chain_id, name="chain_id")
        object.__setattr__(self, "permit2_address", canonical_address(self.permit2_address, name="permit2_address"))

    def hash(self) -> bytes:
        """Order identity (EIP-712 witness struct hash)."""
        return order_hash(self.info)

    def hash_hex(self) -> str:
        return bytes_to_hex(self.hash())

    def cosignature_hash(self, cosigner_data: CosignerData) -> bytes:
        return cosignature_hash(self.info, self.chain_id, cosigner_data)

    def permit_data(self) -> PermitData:
        return permit_data(self.info, self.chain_id, self.permit2_address)

    def permit_digest(self) -> bytes:
        return permit_digest(self.info, self.chain_id, self.permit2_address)

    def recover_swapper(self, signature: str) -> str:
        """Address that produced a Permit2 signature over this order."""
        return recover_signer(self.permit_digest(), signature)


@dataclass(frozen=True)
class PartialOrder(_OrderBase):
    def __post_init__(self) -> None:
        super().__post_init__()
        if self.info.cosigner_data is not None or self.info.cosignature is not None:
            raise ValueError("partial orders carry no cosigner data or cosignature")


@dataclass(frozen=True)
class FullOrder(_OrderBase):
    def __post_init__(self) -> None:
        super().__post_init__()
        if self.info.cosigner_data is None:
            raise MissingCosignerDataError()
        if self.info.cosignature is None:
            raise MissingCosignatureError()
        check_cosigner_data(self.info, self.info.cosigner_data)

    @property
    def cosigner_data(self) -> CosignerData:
        assert self.info.cosigner_data is not None
        return self.info.cosigner_data

    @property
    def cosignature(self) -> str:
        assert self.info.cosignature is not None
        return self.info.cosignature

    def own_cosignature_hash(self) -> bytes:
        return self.cosignature_hash(self.cosigner_data)

    def recover_cosigner(self) -> str:
        return recover_signer(self.own_cosignature_hash(), self.cosignature)

    def verify_cosignature(self) -> str:
        """Raise `InvalidCosignatureError` unless `info.cosigner` signed the cosigner data."""
        return verify_cosignature(self.info.cosigner, self.own_cosignature_hash(), self.cosignature)

    def serialize(self) -> bytes:
        return encode_order(self.info)

    def serialize_hex(self) -> str:
        return bytes_to_hex(self.serialize())

    def resolve(
        self,
        timestamp: int,
        filler: Optional[str] = None,
        policy: ExclusivityPolicy = DEFAULT_POLICY,
    ) -> ResolvedOrder:
        return resolve(self, timestamp, filler=filler, policy=policy)

    def to_partial(self) -> PartialOrder:
        return PartialOrder(
            info=self.info.without_cosignature(),
            chain_id=self.chain_id,
            permit2_address=self.permit2_address,
        )
