"""Build a fake powercap tree on disk.

The tree follows the kernel naming convention, so :class:`PowerCap` can be
built from it on machines without RAPL (tests, demos, CI).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path


def _default_socket_value(socket: int) -> int:
    return 1234


def _default_domain_value(socket: int, domain: int) -> int:
    return 1234


@dataclass
class MockBuilder:
    """Description of a fake ``intel-rapl`` tree.

    Energy values come from generator callables so tests can give every
    socket and domain a distinct, predictable counter.
    """

    enabled: bool = True
    sockets: int = 1
    domain_names: tuple[str, ...] = ("core", "uncore", "dram")
    socket_energy: Callable[[int], int] = _default_socket_value
    socket_max_energy_range: Callable[[int], int] = _default_socket_value
    domain_energy: Callable[[int, int], int] = _default_domain_value
    domain_max_energy_range: Callable[[int, int], int] = _default_domain_value
    extra_entries: list[str] = field(default_factory=lambda: ["power"])

    def _write_zone(
        self, path: Path, name: str, energy: int, max_energy_range: int
    ) -> None:
        path.mkdir(parents=True, exist_ok=True)
        (path / "name").write_text(f"{name}\n")
        (path / "enabled").write_text("1\n" if self.enabled else "0\n")
        (path / "energy_uj").write_text(f"{energy}\n")
        (path / "max_energy_range_uj").write_text(f"{max_energy_range}\n")
        for extra in self.extra_entries:
            (path / extra).mkdir(exist_ok=True)

    def _build_socket(self, path: Path, socket: int) -> None:
        self._write_zone(
            path,
            f"package-{socket}",
            self.socket_energy(socket),
            self.socket_max_energy_range(socket),
        )
        for index, name in enumerate(self.domain_names):
            self._write_zone(
                path / f"intel-rapl:{socket}:{index}",
                name,
                self.domain_energy(socket, index),
                self.domain_max_energy_range(socket, index),
            )

    def build(self, root: Path | str) -> Path:
        """Write the tree under *root* and return the ``intel-rapl`` path."""
        rapl_dir = Path(root) / "intel-rapl"
        rapl_dir.mkdir(parents=True, exist_ok=True)
        (rapl_dir / "enabled").write_text("1\n" if self.enabled else "0\n")
        for socket in range(self.sockets):
            self._build_socket(rapl_dir / f"intel-rapl:{socket}", socket)
        return rapl_dir
