"""Forward-only reader over an in-memory byte buffer.

Every decoder in :mod:`edidparse.parser` receives the same
:class:`ByteCursor` and pulls its fields from it in order. The cursor
never moves backwards, so a step that consumes the wrong number of bytes
shows up as a wrong value in the next step instead of a silent re-read.

All reads raise :class:`~edidparse.parser.errors.Incomplete` when the
buffer is too short; nothing is consumed in that case.
"""

from __future__ import annotations

import struct
from typing import Union

from attrs import define, field

from edidparse.parser.errors import Incomplete

BytesLike = Union[bytes, bytearray, memoryview]

#
# Fixed-width integer formats.
#
_U8_STRUCT = struct.Struct("<B")
_U16_LE_STRUCT = struct.Struct("<H")
_U16_BE_STRUCT = struct.Struct(">H")
_U32_LE_STRUCT = struct.Struct("<I")


@define
class ByteCursor:
    """Read-only view over ``data`` with a moving position.

    Attributes:
        data: The borrowed input buffer. It is never modified.
        position: Offset of the next unread byte.
    """

    data: BytesLike = field(converter=memoryview)
    position: int = 0

    @property
    def remaining(self) -> int:
        """Number of bytes not consumed yet."""
        return len(self.data) - self.position

    def _require(self, size: int) -> None:
        if size < 0:
            raise ValueError("Negative read size: %d" % size)
        if self.remaining < size:
            raise Incomplete(size, self.remaining, self.position)

    def take(self, size: int) -> bytes:
        """Return the next ``size`` bytes as an independent copy and advance.

        Args:
            size: Number of bytes to consume.

        Returns:
            A ``bytes`` object of length ``size``.

        Raises:
            Incomplete: If fewer than ``size`` bytes remain.
        """

        self._require(size)
        start = self.position
        self.position += size
        return bytes(self.data[start : self.position])

    def skip(self, size: int) -> None:
        """Advance by ``size`` bytes without copying them."""
        self._require(size)
        self.position += size

    def _unpack(self, fmt: struct.Struct, advance: bool = True) -> int:
        self._require(fmt.size)
        (value,) = fmt.unpack_from(self.data, self.position)
        if advance:
            self.position += fmt.size
        return value

    def peek_u16_le(self) -> int:
        """Read a little-endian ``u16`` without advancing."""
        return self._unpack(_U16_LE_STRUCT, advance=False)

    def read_u8(self) -> int:
        return self._unpack(_U8_STRUCT)

    def read_u16_le(self) -> int:
        return self._unpack(_U16_LE_STRUCT)

    def read_u16_be(self) -> int:
        return self._unpack(_U16_BE_STRUCT)

    def read_u32_le(self) -> int:
        return self._unpack(_U32_LE_STRUCT)


__all__ = ["BytesLike", "ByteCursor"]
