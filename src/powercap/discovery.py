"""Discover RAPL sockets and domains in the powercap sysfs class.

The kernel names every RAPL zone after its position in the hierarchy::

    /sys/class/powercap/intel-rapl/
        intel-rapl:0/            socket 0
            intel-rapl:0:0/      domain 0 of socket 0
            intel-rapl:0:1/
        intel-rapl:1/

Identifiers are taken from those names.  Entries that do not follow the
convention (``power``, ``subsystem``, ...) or whose identifier does not fit
in 0-255 are skipped.  Only a directory that cannot be listed is an error.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import BuildIOError
from .reader import parse_u8

if TYPE_CHECKING:
    from .rapl import Domain, Socket

log = logging.getLogger(__name__)

SOCKET_PATTERN = re.compile(r"intel-rapl:([0-9]+)$")
DOMAIN_PATTERN = re.compile(r"intel-rapl:([0-9]+):([0-9]+)$")


def _parse_id(raw: str) -> int | None:
    try:
        return parse_u8(raw)
    except ValueError:
        return None


def match_socket_id(path: Path) -> int | None:
    """Return the socket identifier encoded in *path*, if any."""
    match = SOCKET_PATTERN.search(str(path))
    if match is None:
        return None
    return _parse_id(match.group(1))


def match_domain_id(path: Path, socket_id: int) -> int | None:
    """Return the domain identifier encoded in *path*, if any.

    The socket part of the name must refer to *socket_id*.
    """
    match = DOMAIN_PATTERN.search(str(path))
    if match is None:
        return None
    if _parse_id(match.group(1)) != socket_id:
        return None
    return _parse_id(match.group(2))


def list_entity_dirs(path: Path) -> list[Path]:
    """List the subdirectories of *path* in name order.

    Plain files are metric files of the entity at *path* and are left out.

    Raises:
        BuildIOError: If *path* cannot be listed.
    """
    try:
        entries = sorted(path.iterdir())
    except OSError as err:
        raise BuildIOError(path, err) from err
    return [entry for entry in entries if entry.is_dir()]


def discover_domains(path: Path, socket_id: int) -> dict[int, Domain]:
    """Build the domains found directly under the socket directory *path*.

    Raises:
        BuildIOError: If *path* cannot be listed.
    """
    from .rapl import Domain

    domains: dict[int, Domain] = {}
    for entry in list_entity_dirs(path):
        domain_id = match_domain_id(entry, socket_id)
        if domain_id is None:
            log.debug("Skipping %s: not a domain of socket %d", entry, socket_id)
            continue
        # Duplicate identifiers: the later entry replaces the earlier one
        domains[domain_id] = Domain(domain_id, entry)
    return domains


def discover_sockets(path: Path) -> dict[int, Socket]:
    """Build the sockets (and their domains) found under ``intel-rapl``.

    Raises:
        BuildIOError: If *path* or any matched socket directory cannot be
            listed.
    """
    from .rapl import Socket

    sockets: dict[int, Socket] = {}
    for entry in list_entity_dirs(path):
        socket_id = match_socket_id(entry)
        if socket_id is None:
            log.debug("Skipping %s: not a RAPL socket", entry)
            continue
        socket = Socket.from_path(socket_id, entry)
        log.debug(
            "Discovered socket %d at %s with %d domain(s)",
            socket_id,
            entry,
            len(socket.domains),
        )
        sockets[socket_id] = socket
    return sockets
