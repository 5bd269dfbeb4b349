"""Check whether the RAPL kernel modules are loaded.

Parses ``/proc/modules``.  The answer is advisory: discovery and reads do
not depend on it, but an empty tree on a machine without the modules is
expected rather than surprising.
"""

from __future__ import annotations

from pathlib import Path

# Older kernels ship a single module; newer ones split it in two.
_LEGACY_MODULE = "intel_rapl"
_SPLIT_MODULES = frozenset({"intel_rapl_msr", "intel_rapl_common"})


def parse_modules(text: str) -> set[str]:
    """Return the module names listed in ``/proc/modules`` content.

    Each line starts with the module name, e.g.
    ``intel_rapl_msr 20480 0 - Live 0x0000000000000000``.
    """
    names: set[str] = set()
    for line in text.splitlines():
        parts = line.split()
        if parts:
            names.add(parts[0])
    return names


def rapl_modules_present(names: set[str]) -> bool:
    """Return True if *names* contains the modules RAPL needs."""
    return _LEGACY_MODULE in names or _SPLIT_MODULES <= names


def modules_loaded(proc_root: Path | str = "/proc") -> bool:
    """Return True if the RAPL kernel modules are loaded.

    Raises:
        OSError: If ``/proc/modules`` cannot be read.
    """
    text = (Path(proc_root) / "modules").read_text()
    return rapl_modules_present(parse_modules(text))
