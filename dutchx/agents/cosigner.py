"""
Cosigner agent.

Holds the cosigner's secp256k1 key, signs `cosignature_hash(partial, data)`
and hands back either the raw signature or the finished `FullOrder`.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..core.builder import OrderBuilder
from ..core.cosigning import private_key_to_address, sign_digest
from ..core.errors import InvalidArgumentError
from ..core.orders import FullOrder, PartialOrder
from ..state.canonical import same_address
from ..state.orders import CosignerData

logger = logging.getLogger(__name__)


class Cosigner:
    def __init__(self, private_key: bytes) -> None:
        self._private_key = bytes(private_key)
        self._address = private_key_to_address(self._private_key)

    @property
    def address(self) -> str:
        return self._address

    def sign(self, order: PartialOrder, cosigner_data: CosignerData) -> str:
        """
        Sign the cosignature digest for `order` + `cosigner_data`.

        Args:
            order: Partial order naming this cosigner
            cosigner_data: Pricing/exclusivity parameters being attested

        Returns:
            65-byte signature as 0x-hex

        Raises:
            InvalidArgumentError: The order names a different cosigner
        """
        if not same_address(order.info.cosigner, self._address):
            raise InvalidArgumentError(
                f"order cosigner {order.info.cosigner} is not {self._address}",
                field="cosigner",
            )
        digest = order.cosignature_hash(cosigner_data)
        logger.debug("cosigning order %s", order.hash_hex())
        return sign_digest(digest, self._private_key)

    def cosign(
        self,
        order: PartialOrder,
        cosigner_data: CosignerData,
        now: Optional[int] = None,
    ) -> FullOrder:
        signature = self.sign(order, cosigner_data)
        return (
            OrderBuilder.from_order(order)
            .cosigner_data(cosigner_data)
            .cosignature(signature)
            .build(now)
        )
