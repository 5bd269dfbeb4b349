"""Configuration for the powercap command-line tool."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .rapl import DEFAULT_POWERCAP_ROOT


@dataclass
class PowercapConfig:
    """Runtime configuration for the powercap CLI."""

    # Subcommand to run: snapshot, total, modules or mock
    command: str = "snapshot"

    # Powercap class directory (contains intel-rapl/)
    sysfs_root: Path = DEFAULT_POWERCAP_ROOT

    # procfs mount point, used for the kernel module check
    proc_root: Path = Path("/proc")

    # Warn when the RAPL kernel modules are not loaded
    check_modules: bool = True

    # JSON indentation for snapshot output (None = single line)
    indent: int | None = 2

    # Enable debug logging
    verbose: bool = False

    # mock: target directory, socket count and enabled flag
    mock_dir: Path | None = None
    mock_sockets: int = 1
    mock_enabled: bool = True

    # mock: domain names written under each socket
    mock_domains: list[str] = field(
        default_factory=lambda: ["core", "uncore", "dram"]
    )

    def __post_init__(self) -> None:
        self.sysfs_root = Path(self.sysfs_root)
        self.proc_root = Path(self.proc_root)
        if self.mock_dir is not None:
            self.mock_dir = Path(self.mock_dir)
