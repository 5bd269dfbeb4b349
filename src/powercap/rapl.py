"""RAPL entity model over the sysfs powercap interface.

The tree is ``PowerCap -> IntelRapl -> Socket -> Domain``.  Discovery runs
once, when the tree is built; afterwards the structure never changes.  Only
file paths are kept, so every accessor and every snapshot reads the current
hardware counters.  Energy values are cumulative micro-joules that wrap at
``max_energy_range``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from .discovery import discover_domains, discover_sockets
from .errors import BuildIOError
from .reader import FileReader
from .snapshot import DomainSnapshot, IntelRaplSnapshot, SocketSnapshot

log = logging.getLogger(__name__)

DEFAULT_POWERCAP_ROOT = Path("/sys/class/powercap")


class _Zone:
    """Metric files shared by sockets and domains."""

    def __init__(self, zone_id: int, path: Path) -> None:
        self._id = zone_id
        self._path = Path(path)
        self._name = FileReader(self._path / "name")
        self._enabled = FileReader(self._path / "enabled")
        self._energy = FileReader(self._path / "energy_uj")
        self._max_energy_range = FileReader(self._path / "max_energy_range_uj")

    @property
    def id(self) -> int:
        """Identifier parsed from the zone's directory name."""
        return self._id

    @property
    def path(self) -> Path:
        return self._path

    def name(self) -> str:
        """Return the zone name (e.g. ``package-0``, ``core``, ``dram``)."""
        return self._name.read_str()

    def enabled(self) -> bool:
        return self._enabled.read_bool()

    def energy(self) -> int:
        """Return the energy counter in micro-joules."""
        return self._energy.read_u64()

    def max_energy_range(self) -> int:
        """Return the value at which the energy counter wraps, in micro-joules."""
        return self._max_energy_range.read_u64()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self._id}, path={str(self._path)!r})"


class Domain(_Zone):
    """A power sub-zone of a socket (core, uncore, dram, ...)."""

    def snapshot(self) -> DomainSnapshot:
        """Read every metric of this domain.

        Raises:
            ReadError: On the first metric that cannot be read.
        """
        return DomainSnapshot(
            id=self._id,
            name=self.name(),
            enabled=self.enabled(),
            energy=self.energy(),
            max_energy_range=self.max_energy_range(),
        )


class Socket(_Zone):
    """One CPU package and the domains beneath it."""

    def __init__(
        self, socket_id: int, path: Path, domains: Mapping[int, Domain] | None = None
    ) -> None:
        super().__init__(socket_id, path)
        self._domains = MappingProxyType(dict(domains or {}))

    @classmethod
    def from_path(cls, socket_id: int, path: Path) -> Socket:
        """Build a socket and discover its domains.

        Raises:
            BuildIOError: If *path* cannot be listed.
        """
        path = Path(path)
        return cls(socket_id, path, discover_domains(path, socket_id))

    @property
    def domains(self) -> Mapping[int, Domain]:
        """Read-only mapping of domain id to domain."""
        return self._domains

    def total_energy(self) -> int:
        """Return the socket energy plus the energy of all its domains."""
        total = self.energy()
        for domain in self._domains.values():
            total += domain.energy()
        return total

    def snapshot(self) -> SocketSnapshot:
        """Read the socket metrics and snapshot every domain.

        Raises:
            ReadError: On the first metric that cannot be read.
        """
        return SocketSnapshot(
            id=self._id,
            enabled=self.enabled(),
            energy=self.energy(),
            max_energy_range=self.max_energy_range(),
            domains=tuple(d.snapshot() for d in self._domains.values()),
        )


class IntelRapl:
    """The ``intel-rapl`` control type: every RAPL socket of the machine."""

    def __init__(self, sockets: Mapping[int, Socket] | None = None) -> None:
        self._sockets = MappingProxyType(dict(sockets or {}))

    @classmethod
    def from_path(cls, path: Path) -> IntelRapl:
        """Discover all sockets under the ``intel-rapl`` directory *path*.

        Raises:
            BuildIOError: If *path* or a socket directory cannot be listed.
        """
        return cls(discover_sockets(Path(path)))

    @property
    def sockets(self) -> Mapping[int, Socket]:
        """Read-only mapping of socket id to socket."""
        return self._sockets

    def total_energy(self) -> int:
        """Return the summed energy of every socket and domain, in micro-joules."""
        return sum(socket.total_energy() for socket in self._sockets.values())

    def snapshot(self) -> IntelRaplSnapshot:
        return IntelRaplSnapshot(
            sockets=tuple(s.snapshot() for s in self._sockets.values())
        )

    def __repr__(self) -> str:
        return f"IntelRapl(sockets={sorted(self._sockets)})"


class PowerCap:
    """The powercap sysfs class directory."""

    def __init__(self, intel_rapl: IntelRapl) -> None:
        self._intel_rapl = intel_rapl

    @classmethod
    def from_path(cls, root: Path | str) -> PowerCap:
        """Build the entity tree rooted at the powercap directory *root*.

        A readable *root* without an ``intel-rapl`` directory yields an
        empty tree.

        Raises:
            BuildIOError: If *root* or any RAPL directory cannot be listed.
        """
        root = Path(root)
        try:
            entries = {entry.name for entry in root.iterdir()}
        except OSError as err:
            raise BuildIOError(root, err) from err

        rapl_dir = root / "intel-rapl"
        if "intel-rapl" not in entries or not rapl_dir.is_dir():
            log.debug("No intel-rapl directory under %s", root)
            return cls(IntelRapl())
        return cls(IntelRapl.from_path(rapl_dir))

    @classmethod
    def default(cls) -> PowerCap:
        """Build the entity tree from ``/sys/class/powercap``."""
        return cls.from_path(DEFAULT_POWERCAP_ROOT)

    @property
    def intel_rapl(self) -> IntelRapl:
        return self._intel_rapl

    def total_energy(self) -> int:
        return self._intel_rapl.total_energy()

    def snapshot(self) -> IntelRaplSnapshot:
        return self._intel_rapl.snapshot()
