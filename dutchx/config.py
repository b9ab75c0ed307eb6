"""
Deployment configuration: which reactor / Permit2 contract to use per chain.

Built-in defaults cover the canonical Permit2 deployment and known V2 Dutch
reactors. A YAML file can add or replace chains:

    deployments:
      - chain_id: 31337
        reactor: "0x..."
        permit2: "0x..."     # optional, defaults to the canonical Permit2

Environment:
    DUTCHX_DEPLOYMENTS_FILE  path to such a YAML file (merged over defaults)
    DUTCHX_PERMIT2_ADDRESS   Permit2 address used when a chain entry has none
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .core.errors import MissingConfigurationError
from .state.canonical import canonical_address


PERMIT2_ADDRESS = canonical_address("0x000000000022d473030f116ddee9f6b43ac78ba3", name="permit2")

_DEFAULT_REACTORS: Dict[int, str] = {
    1: "0x00000011f84b9aa48e5f8aa8b9897600006289be",
    42161: "0x1bd1aadc9e230626c44a139d7e70d842749351eb",
}


@dataclass(frozen=True)
class Deployment:
    chain_id: int
    reactor: Optional[str]
    permit2: str


def _env_str(name: str, default: str) -> str:
    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def default_permit2_address() -> str:
    return canonical_address(_env_str("DUTCHX_PERMIT2_ADDRESS", PERMIT2_ADDRESS), name="DUTCHX_PERMIT2_ADDRESS")


def _parse_chain_id(raw: Any) -> int:
    if not isinstance(raw, int) or isinstance(raw, bool) or raw <= 0:
        raise ValueError(f"chain_id must be a positive int, got {raw!r}")
    return int(raw)


def parse_deployments(obj: Any, *, permit2_default: str) -> Dict[int, Deployment]:
    """Parse the `deployments:` mapping loaded from YAML (fail-closed on bad entries)."""
    if not isinstance(obj, Mapping):
        raise ValueError("deployments file must contain a mapping")
    entries = obj.get("deployments", [])
    if not isinstance(entries, list):
        raise ValueError("deployments must be a list")

    out: Dict[int, Deployment] = {}
    for i, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            raise ValueError(f"deployments[{i}] must be a mapping")
        chain_id = _parse_chain_id(entry.get("chain_id"))
        if chain_id in out:
            raise ValueError(f"duplicate deployment for chain {chain_id}")
        reactor = entry.get("reactor")
        permit2 = entry.get("permit2") or permit2_default
        out[chain_id] = Deployment(
            chain_id=chain_id,
            reactor=None if reactor is None else canonical_address(reactor, name=f"deployments[{i}].reactor"),
            permit2=canonical_address(permit2, name=f"deployments[{i}].permit2"),
        )
    return out


class DeploymentRegistry:
    """Chain id -> `Deployment` lookup."""

    def __init__(self, deployments: Mapping[int, Deployment], *, permit2_default: Optional[str] = None) -> None:
        self._deployments = dict(deployments)
        self._permit2_default = permit2_default or PERMIT2_ADDRESS

    @classmethod
    def defaults(cls) -> "DeploymentRegistry":
        permit2 = default_permit2_address()
        deployments = {
            chain_id: Deployment(
                chain_id=chain_id,
                reactor=canonical_address(reactor, name="reactor"),
                permit2=permit2,
            )
            for chain_id, reactor in _DEFAULT_REACTORS.items()
        }
        return cls(deployments, permit2_default=permit2)

    @classmethod
    def from_yaml(cls, path: Path, *, base: Optional["DeploymentRegistry"] = None) -> "DeploymentRegistry":
        base = base or cls.defaults()
        obj = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        loaded = parse_deployments(obj, permit2_default=base.permit2_default)
        merged = dict(base._deployments)
        merged.update(loaded)
        return cls(merged, permit2_default=base.permit2_default)

    @classmethod
    def from_env(cls) -> "DeploymentRegistry":
        path = _env_str("DUTCHX_DEPLOYMENTS_FILE", "")
        if not path:
            return cls.defaults()
        return cls.from_yaml(Path(path))

    @property
    def permit2_default(self) -> str:
        return self._permit2_default

    def get(self, chain_id: int) -> Optional[Deployment]:
        return self._deployments.get(chain_id)

    def reactor_for(self, chain_id: int) -> str:
        deployment = self._deployments.get(chain_id)
        if deployment is None or deployment.reactor is None:
            raise MissingConfigurationError(f"no V2 Dutch reactor configured for chain {chain_id}", field="reactor")
        return deployment.reactor

    def permit2_for(self, chain_id: int) -> str:
        deployment = self._deployments.get(chain_id)
        if deployment is None:
            return self._permit2_default
        return deployment.permit2
