"""EDID header: tag, vendor, product and manufacture date.

Layout of the first 20 bytes:

- tag: 8 bytes, must be ``00 FF FF FF FF FF FF 00``
- vendor: ``u16`` big-endian, three 5-bit letters (1 = ``A``)
- product: ``u16`` little-endian
- serial: ``u32`` little-endian
- week: ``u8``
- year: ``u8`` (years since 1990)
- version: ``u8``
- revision: ``u8``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from edidparse.parser.cursor import ByteCursor
from edidparse.parser.errors import MagicMismatch

logger = logging.getLogger(__name__)

HEADER_TAG = b"\x00\xff\xff\xff\xff\xff\xff\x00"
YEAR_BASE = 1990

# Each vendor letter is 5 bits wide; 0b00001 is "A".
_LETTER_MASK = 0x1F
_LETTER_BASE = ord("A") - 1
_LETTER_SHIFTS = (10, 5, 0)

VendorLetters = Tuple[str, str, str]


def decode_vendor(value: int) -> VendorLetters:
    """Unpack the three 5-bit letters of the big-endian vendor field.

    Values outside ``1..26`` are not rejected; they map to the neighbouring
    characters of ``A..Z`` (e.g. ``0`` becomes ``@``).

    Args:
        value: The vendor field read as a big-endian ``u16``.

    Returns:
        Tuple of three single-character strings.
    """

    a, b, c = (
        chr(((value >> shift) & _LETTER_MASK) + _LETTER_BASE)
        for shift in _LETTER_SHIFTS
    )
    return a, b, c


def encode_vendor(letters: str) -> int:
    """Pack three letters ``A..Z`` into the 16-bit vendor value.

    Args:
        letters: Exactly three upper-case ASCII letters.

    Returns:
        The value to store big-endian at offset 8.

    Raises:
        ValueError: If ``letters`` is not three letters in ``A..Z``.
    """

    if len(letters) != 3 or not all("A" <= ch <= "Z" for ch in letters):
        raise ValueError("Vendor must be three letters A..Z: %r" % letters)
    value = 0
    for ch, shift in zip(letters, _LETTER_SHIFTS):
        value |= (ord(ch) - _LETTER_BASE) << shift
    return value


@dataclass(frozen=True)
class Header:
    """Identification section of the base block.

    Attributes:
        vendor: Three-letter manufacturer code.
        product: Manufacturer product code.
        serial: Binary serial number (0 when unused).
        week: Week of manufacture (0 or 0xFF have special meanings).
        year: Year of manufacture as an offset from 1990.
        version: EDID structure version.
        revision: EDID structure revision.
    """

    vendor: VendorLetters
    product: int
    serial: int
    week: int
    year: int
    version: int
    revision: int

    @property
    def vendor_id(self) -> str:
        return "".join(self.vendor)

    @property
    def full_year(self) -> int:
        return YEAR_BASE + self.year


def parse_header(cursor: ByteCursor) -> Header:
    """Consume the tag and the 12 identification bytes.

    Args:
        cursor: Cursor positioned at the start of the block.

    Returns:
        The decoded ``Header``.

    Raises:
        MagicMismatch: If the tag differs from :data:`HEADER_TAG`.
        Incomplete: If the buffer ends inside the header.
    """

    start = cursor.position
    # Bytes already present must match the tag even when the buffer is
    # too short to hold all of it.
    head = bytes(cursor.data[start : start + len(HEADER_TAG)])
    if head != HEADER_TAG[: len(head)]:
        raise MagicMismatch(head, start)
    cursor.skip(len(HEADER_TAG))

    vendor = decode_vendor(cursor.read_u16_be())
    product = cursor.read_u16_le()
    serial = cursor.read_u32_le()
    week = cursor.read_u8()
    year = cursor.read_u8()
    version = cursor.read_u8()
    revision = cursor.read_u8()

    logger.debug(
        "EDID %d.%d header for %s product %d",
        version,
        revision,
        "".join(vendor),
        product,
    )
    return Header(
        vendor=vendor,
        product=product,
        serial=serial,
        week=week,
        year=year,
        version=version,
        revision=revision,
    )


__all__ = [
    "HEADER_TAG",
    "Header",
    "YEAR_BASE",
    "decode_vendor",
    "encode_vendor",
    "parse_header",
]
