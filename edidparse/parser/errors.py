"""Exceptions raised while decoding an EDID base block.

Only two structural failures exist:

- :class:`MagicMismatch` when the 8-byte header tag is not
  ``00 FF FF FF FF FF FF 00``;
- :class:`Incomplete` when a step needs more bytes than remain.

Both derive from :class:`EdidError`, itself a ``ValueError``, so callers
that only care about "bad input" can catch ``ValueError``.
"""

from __future__ import annotations

from typing import Optional


class EdidError(ValueError):
    """Base class for EDID decode failures.

    Attributes:
        offset: Byte offset where the problem was detected, if known.
    """

    def __init__(self, message: str, offset: Optional[int] = None) -> None:
        super().__init__(message)
        self.offset = offset


class MagicMismatch(EdidError):
    """The block does not start with the fixed EDID header tag."""

    def __init__(self, found: bytes, offset: int = 0) -> None:
        super().__init__(
            "Invalid EDID header tag at %d: %s" % (offset, found.hex(" ")),
            offset,
        )
        self.found = found


class Incomplete(EdidError):
    """Fewer bytes remain than the current step requires.

    Attributes:
        needed: Number of bytes the step asked for.
        available: Number of bytes left at ``offset``.
    """

    def __init__(self, needed: int, available: int, offset: int) -> None:
        super().__init__(
            "Need %d byte(s) at offset %d, only %d available"
            % (needed, offset, available),
            offset,
        )
        self.needed = needed
        self.available = available


__all__ = ["EdidError", "Incomplete", "MagicMismatch"]
