"""
Boundary with the external Permit2 / reactor contracts
"""

from .permit import PermitData, domain_separator, permit_data, permit_digest

__all__ = [
    "PermitData",
    "domain_separator",
    "permit_data",
    "permit_digest",
]
