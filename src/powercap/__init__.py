"""Intel RAPL energy counters from the Linux powercap sysfs interface."""

from .errors import (
    BuildError,
    BuildIOError,
    PowercapError,
    ReadError,
    ReadIOError,
    ReadParseError,
)
from .rapl import Domain, IntelRapl, PowerCap, Socket
from .snapshot import DomainSnapshot, IntelRaplSnapshot, SocketSnapshot

__all__ = [
    "BuildError",
    "BuildIOError",
    "Domain",
    "DomainSnapshot",
    "IntelRapl",
    "IntelRaplSnapshot",
    "PowerCap",
    "PowercapError",
    "ReadError",
    "ReadIOError",
    "ReadParseError",
    "Socket",
    "SocketSnapshot",
]
