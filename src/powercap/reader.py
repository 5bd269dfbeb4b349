"""Typed reads of sysfs pseudo-files.

A pseudo-file holds a single value as text.  :class:`FileReader` captures
the path of one such file and re-reads it on every call, since the kernel
updates the value continuously.  Parsing is done by one plain function per
semantic type so callers pick the interpretation explicitly.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, TypeVar

from .errors import ReadIOError, ReadParseError

U8_MAX = 0xFF
U64_MAX = 0xFFFF_FFFF_FFFF_FFFF

_UNSIGNED = re.compile(r"\+?[0-9]+")

T = TypeVar("T")


def parse_str(text: str) -> str:
    """Return *text* with surrounding whitespace removed."""
    return text.strip()


def _parse_unsigned(text: str, maximum: int) -> int:
    value = text.strip()
    if not value:
        raise ValueError("cannot parse integer from empty string")
    if _UNSIGNED.fullmatch(value) is None:
        raise ValueError(f"invalid digit found in string {value!r}")
    number = int(value)
    if number > maximum:
        raise ValueError(f"number too large to fit in target type: {value!r}")
    return number


def parse_u8(text: str) -> int:
    """Parse a base-10 integer in the range 0-255.

    Raises:
        ValueError: If the stripped text is not a valid literal in range.
    """
    return _parse_unsigned(text, U8_MAX)


def parse_u64(text: str) -> int:
    """Parse a base-10 integer in the range 0 to 2**64 - 1.

    Raises:
        ValueError: If the stripped text is not a valid literal in range.
    """
    return _parse_unsigned(text, U64_MAX)


def parse_bool(text: str) -> bool:
    """Interpret an 8-bit flag: any value above zero is true."""
    return parse_u8(text) > 0


@dataclass(frozen=True)
class FileReader:
    """Reader bound to a single pseudo-file."""

    path: Path

    def read_text(self) -> str:
        """Read the raw file content with a single OS call.

        Raises:
            ReadIOError: If the file cannot be opened or read.
            ReadParseError: If the content is not valid text.
        """
        try:
            raw = self.path.read_bytes()
        except OSError as err:
            raise ReadIOError(self.path, err) from err
        try:
            return raw.decode()
        except UnicodeDecodeError as err:
            raise ReadParseError(self.path, repr(raw), str(err)) from err

    def _read_parsed(self, parse: Callable[[str], T]) -> T:
        text = self.read_text()
        try:
            return parse(text)
        except ValueError as err:
            raise ReadParseError(self.path, text, str(err)) from err

    def read_str(self) -> str:
        """Read the file as trimmed text (possibly empty)."""
        return parse_str(self.read_text())

    def read_u8(self) -> int:
        """Read the file as an unsigned 8-bit integer."""
        return self._read_parsed(parse_u8)

    def read_u64(self) -> int:
        """Read the file as an unsigned 64-bit integer."""
        return self._read_parsed(parse_u64)

    def read_bool(self) -> bool:
        """Read the file as a flag (``0`` false, anything above zero true)."""
        return self._read_parsed(parse_bool)
