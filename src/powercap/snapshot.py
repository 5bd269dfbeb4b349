"""Immutable point-in-time copies of the RAPL entity tree.

Snapshots hold plain values only, so they can be handed to any
serialization layer through :meth:`to_dict`.  Domain and socket order
inside a snapshot follows the owning mapping and carries no meaning.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class DomainSnapshot:
    """Metric values of one power domain."""

    id: int
    name: str
    enabled: bool
    energy: int  # micro-joules
    max_energy_range: int  # micro-joules

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SocketSnapshot:
    """Metric values of one CPU package and all of its domains."""

    id: int
    enabled: bool
    energy: int  # micro-joules
    max_energy_range: int  # micro-joules
    domains: tuple[DomainSnapshot, ...] = ()

    @property
    def total_energy(self) -> int:
        """Socket energy plus the energy of every captured domain."""
        return self.energy + sum(d.energy for d in self.domains)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "enabled": self.enabled,
            "energy": self.energy,
            "max_energy_range": self.max_energy_range,
            "domains": [d.to_dict() for d in self.domains],
        }


@dataclass(frozen=True)
class IntelRaplSnapshot:
    """Metric values of every socket under ``intel-rapl``."""

    sockets: tuple[SocketSnapshot, ...] = ()

    @property
    def total_energy(self) -> int:
        return sum(s.total_energy for s in self.sockets)

    def to_dict(self) -> dict[str, Any]:
        return {"sockets": [s.to_dict() for s in self.sockets]}
