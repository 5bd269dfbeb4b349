"""Exception hierarchy for powercap.

Two families of errors exist.  ``ReadError`` is raised when a single metric
file cannot be read or parsed; ``BuildError`` is raised when the entity tree
cannot be discovered.  Each family has an I/O flavour that keeps the
underlying ``OSError`` on ``cause`` (and ``__cause__``).
"""

from __future__ import annotations

from pathlib import Path


class PowercapError(Exception):
    """Base class for every error raised by this package."""


class ReadError(PowercapError):
    """A metric file could not be turned into a value."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class ReadIOError(ReadError):
    """The metric file could not be read from the filesystem."""

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(path, cause.strerror or str(cause))
        self.cause = cause


class ReadParseError(ReadError):
    """The metric file was read but its content is malformed."""

    def __init__(self, path: Path, text: str, description: str) -> None:
        super().__init__(path, description)
        self.text = text
        self.description = description


class BuildError(PowercapError):
    """The entity tree could not be discovered."""


class BuildIOError(BuildError):
    """A directory that must be listed during discovery is not accessible."""

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"{path}: {cause.strerror or cause}")
        self.path = path
        self.cause = cause
