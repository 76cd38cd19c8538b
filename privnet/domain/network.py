"""Typed domain object for provider private networks."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Network:
    """Snapshot of one private network as reported by the provider.

    Instances are never mutated or cached; each operation returns fresh
    snapshots decoded from the provider response.
    """

    network_id: str
    region_id: str
    description: str = ""
    v4_subnet: str = ""
    v4_subnet_mask: int = 0
    date_created: str = ""

    @property
    def has_subnet(self) -> bool:
        """Return whether the network carries an IPv4 subnet assignment."""
        return bool(self.v4_subnet)


__all__ = ["Network"]
