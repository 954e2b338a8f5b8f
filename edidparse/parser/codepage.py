"""Byte to character rendering for descriptor text.

Display descriptors store their text as 13 raw bytes. Monitors mostly
use ASCII, but vendors occasionally put other byte values in there, so
every byte is rendered through a full 256-entry table. The default table
is IBM code page 437; any callable mapping ``int -> str`` for all byte
values can be passed to the decoders instead.
"""

from __future__ import annotations

from typing import Callable, Tuple

Renderer = Callable[[int], str]

# Built once from the codec, one entry per byte value.
CP437_TABLE: Tuple[str, ...] = tuple(
    bytes([value]).decode("cp437") for value in range(256)
)


def cp437_char(value: int) -> str:
    """Return the code page 437 character for byte ``value``."""
    return CP437_TABLE[value]


def latin1_char(value: int) -> str:
    """Return the ISO-8859-1 character for byte ``value``."""
    return chr(value)


__all__ = ["CP437_TABLE", "Renderer", "cp437_char", "latin1_char"]
