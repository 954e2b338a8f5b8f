"""EDID base block decoder.

The 128-byte base block is read front to back in a single pass:

- header (20 bytes)
- basic display parameters (5 bytes)
- chromaticity (10 bytes, raw)
- established timings (3 bytes, raw)
- standard timings (16 bytes, raw)
- 4 descriptor slots (4 x 18 bytes)
- extension block count (1 byte)
- checksum (1 byte, not validated)

Anything after the base block (usually extension blocks) is left alone
and reported as the number of remaining bytes.

The decoder never validates the checksum. :func:`verify_checksum` is
available for callers that want that check.
"""

from __future__ import annotations

import logging
from typing import Tuple

from attrs import field, frozen

from edidparse.parser.codepage import Renderer, cp437_char
from edidparse.parser.cursor import ByteCursor, BytesLike
from edidparse.parser.descriptor import Descriptor, parse_descriptor
from edidparse.parser.display import DisplayParameters, parse_display
from edidparse.parser.errors import Incomplete
from edidparse.parser.header import Header, parse_header
from edidparse.parser.opaque import (
    Chromaticity,
    EstablishedTiming,
    StandardTiming,
    parse_chromaticity,
    parse_established_timing,
    parse_standard_timing,
)

logger = logging.getLogger(__name__)

BLOCK_SIZE = 128
DESCRIPTOR_COUNT = 4


@frozen
class Edid:
    """Decoded EDID base block.

    Attributes:
        header: Vendor, product and version information.
        display: Basic display parameters.
        chromaticity: Raw chromaticity coordinates.
        established_timing: Raw established timing bitmap.
        standard_timing: Raw standard timing slots.
        descriptors: The four descriptor slots in block order.
        extension_count: Number of extension blocks announced.
        checksum: Stored checksum byte.
    """

    header: Header
    display: DisplayParameters
    chromaticity: Chromaticity
    established_timing: EstablishedTiming
    standard_timing: StandardTiming
    descriptors: Tuple[Descriptor, ...] = field(converter=tuple)
    extension_count: int = 0
    checksum: int = 0

    def find(self, kind: type) -> list:
        """Return the descriptors that are instances of ``kind``."""
        return [d for d in self.descriptors if isinstance(d, kind)]


def parse_edid(
    data: BytesLike, render: Renderer = cp437_char
) -> Tuple[Edid, int]:
    """Decode the base block at the start of ``data``.

    Args:
        data: Buffer starting with the EDID header tag. It may be longer
            than one block.
        render: Byte to character mapping used for descriptor text.

    Returns:
        Tuple of (``Edid``, number of bytes left after the base block).

    Raises:
        MagicMismatch: If the header tag is wrong.
        Incomplete: If the buffer ends before the base block does.
    """

    cursor = ByteCursor(data)

    header = parse_header(cursor)
    display = parse_display(cursor)
    chromaticity = parse_chromaticity(cursor)
    established_timing = parse_established_timing(cursor)
    standard_timing = parse_standard_timing(cursor)
    descriptors = [
        parse_descriptor(cursor, render) for _ in range(DESCRIPTOR_COUNT)
    ]
    extension_count = cursor.read_u8()
    checksum = cursor.read_u8()

    remaining = cursor.remaining
    if remaining:
        logger.debug(
            "%d byte(s) after the base block, %d extension(s) announced",
            remaining,
            extension_count,
        )

    edid = Edid(
        header=header,
        display=display,
        chromaticity=chromaticity,
        established_timing=established_timing,
        standard_timing=standard_timing,
        descriptors=descriptors,
        extension_count=extension_count,
        checksum=checksum,
    )
    return edid, remaining


def block_checksum(data: BytesLike) -> int:
    """Return the 8-bit sum of the first :data:`BLOCK_SIZE` bytes.

    Raises:
        Incomplete: If ``data`` is shorter than one block.
    """

    if len(data) < BLOCK_SIZE:
        raise Incomplete(BLOCK_SIZE, len(data), 0)
    return sum(bytes(data[:BLOCK_SIZE])) & 0xFF


def verify_checksum(data: BytesLike) -> bool:
    """Return True when the base block bytes sum to zero modulo 256."""
    return block_checksum(data) == 0


__all__ = [
    "BLOCK_SIZE",
    "Edid",
    "block_checksum",
    "parse_edid",
    "verify_checksum",
]
