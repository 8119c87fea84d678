"""
Node configuration persisted on disk.

Only the keys owned by the swarm are modelled. Every other key of the file is
carried through unchanged, so rewriting the filter list never loses settings
written by other components::

    {
      "Swarm": {
        "AddrFilters": ["/ip4/10.0.0.0/ipcidr/8"]
      },
      "Identity": {...}
    }
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import Field, field_validator

from peerswarm.types import ConfigModel


class SwarmConfig(ConfigModel):
    """Settings of the swarm (connection layer)."""

    addr_filters: list[str] = Field(default_factory=list)
    """
    Deny filters in multiaddr mask form, unique by value.

    Order is kept stable across rewrites so that persisted output is
    deterministic; it carries no matching semantics.
    """

    @field_validator("addr_filters", mode="before")
    @classmethod
    def _null_means_empty(cls, v: Any) -> Any:
        """Read an explicit `null` list, as written by other tools, as empty."""
        return [] if v is None else v


class NodeConfig(ConfigModel):
    """Top-level node configuration."""

    swarm: SwarmConfig = Field(default_factory=SwarmConfig)
    """Swarm settings, stored under `Swarm`."""

    def with_addr_filters(self, filters: Iterable[str]) -> NodeConfig:
        """Return a copy whose persisted filter list is `filters`."""
        return self.copy(swarm=self.swarm.copy(addr_filters=list(filters)))
