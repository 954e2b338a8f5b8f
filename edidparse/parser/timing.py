"""Detailed timing descriptor (18-byte descriptor slot).

Byte layout inside the slot (all offsets relative to the slot start):

- 0..1: pixel clock, ``u16`` little-endian, in units of 10 kHz
- 2: horizontal active, low 8 bits
- 3: horizontal blanking, low 8 bits
- 4: high nibble = horizontal active bits 11..8,
  low nibble = horizontal blanking bits 11..8
- 5: vertical active, low 8 bits
- 6: vertical blanking, low 8 bits
- 7: high nibble = vertical active bits 11..8,
  low nibble = vertical blanking bits 11..8
- 8: horizontal front porch, low 8 bits
- 9: horizontal sync width, low 8 bits
- 10: high nibble = vertical front porch low 4 bits,
  low nibble = vertical sync width low 4 bits
- 11: bits 7..6 horizontal front porch, 5..4 horizontal sync width,
  3..2 vertical front porch, 1..0 vertical sync width (upper bits)
- 12: horizontal image size in mm, low 8 bits
- 13: vertical image size in mm, low 8 bits
- 14: high nibble = horizontal size bits 11..8,
  low nibble = vertical size bits 11..8
- 15: horizontal border, pixels on one side
- 16: vertical border, lines on one side
- 17: features bitmap (interlace, stereo, sync type)

Every split value is rebuilt as ``low | (high << 8)``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from edidparse.parser.cursor import ByteCursor

logger = logging.getLogger(__name__)

DETAILED_TIMING_SIZE = 18
PIXEL_CLOCK_UNIT_KHZ = 10


def _join(low: int, high: int) -> int:
    """Combine a low byte with the already-extracted upper bits."""
    return low | (high << 8)


def _high_nibble(value: int) -> int:
    return (value >> 4) & 0x0F


def _low_nibble(value: int) -> int:
    return value & 0x0F


def _bit_pair(value: int, shift: int) -> int:
    return (value >> shift) & 0x03


@dataclass(frozen=True)
class DetailedTiming:
    """One detailed timing record.

    Attributes:
        pixel_clock: Pixel clock in kHz.
        horizontal_active: Visible pixels per line.
        horizontal_blanking: Blanking pixels per line.
        vertical_active: Visible lines per frame.
        vertical_blanking: Blanking lines per frame.
        horizontal_front_porch: Pixels between active area and sync.
        horizontal_sync_width: Horizontal sync pulse width in pixels.
        vertical_front_porch: Lines between active area and sync.
        vertical_sync_width: Vertical sync pulse width in lines.
        horizontal_size: Image width in millimetres.
        vertical_size: Image height in millimetres.
        horizontal_border: Border pixels on one side (total is twice this).
        vertical_border: Border lines on one side (total is twice this).
        features: Raw features bitmap.
    """

    pixel_clock: int
    horizontal_active: int
    horizontal_blanking: int
    vertical_active: int
    vertical_blanking: int
    horizontal_front_porch: int
    horizontal_sync_width: int
    vertical_front_porch: int
    vertical_sync_width: int
    horizontal_size: int
    vertical_size: int
    horizontal_border: int
    vertical_border: int
    features: int

    @property
    def horizontal_total(self) -> int:
        return self.horizontal_active + self.horizontal_blanking

    @property
    def vertical_total(self) -> int:
        return self.vertical_active + self.vertical_blanking

    def refresh_rate(self) -> Optional[float]:
        """Return the vertical refresh rate in Hz.

        Returns:
            ``pixel_clock / (horizontal_total * vertical_total)``, or
            ``None`` when either total is zero.
        """

        total = self.horizontal_total * self.vertical_total
        if total == 0:
            return None
        return self.pixel_clock * 1000 / total


def unpack_detailed_timing(record: bytes) -> DetailedTiming:
    """Rebuild the timing fields from one 18-byte record.

    Args:
        record: Exactly :data:`DETAILED_TIMING_SIZE` bytes.

    Returns:
        The decoded ``DetailedTiming``.

    Raises:
        ValueError: If ``record`` has the wrong length.
    """

    if len(record) != DETAILED_TIMING_SIZE:
        raise ValueError(
            "Detailed timing record must be %d bytes, got %d"
            % (DETAILED_TIMING_SIZE, len(record))
        )

    b = record
    pixel_clock_raw = b[0] | (b[1] << 8)
    porch_sync_high = b[11]

    return DetailedTiming(
        pixel_clock=pixel_clock_raw * PIXEL_CLOCK_UNIT_KHZ,
        horizontal_active=_join(b[2], _high_nibble(b[4])),
        horizontal_blanking=_join(b[3], _low_nibble(b[4])),
        vertical_active=_join(b[5], _high_nibble(b[7])),
        vertical_blanking=_join(b[6], _low_nibble(b[7])),
        horizontal_front_porch=_join(b[8], _bit_pair(porch_sync_high, 6)),
        horizontal_sync_width=_join(b[9], _bit_pair(porch_sync_high, 4)),
        vertical_front_porch=_join(
            _high_nibble(b[10]), _bit_pair(porch_sync_high, 2)
        ),
        vertical_sync_width=_join(
            _low_nibble(b[10]), _bit_pair(porch_sync_high, 0)
        ),
        horizontal_size=_join(b[12], _high_nibble(b[14])),
        vertical_size=_join(b[13], _low_nibble(b[14])),
        horizontal_border=b[15],
        vertical_border=b[16],
        features=b[17],
    )


def parse_detailed_timing(cursor: ByteCursor) -> DetailedTiming:
    """Consume a full 18-byte descriptor slot as a detailed timing."""

    start = cursor.position
    timing = unpack_detailed_timing(cursor.take(DETAILED_TIMING_SIZE))
    logger.debug(
        "Detailed timing at %d: %dx%d, %d kHz",
        start,
        timing.horizontal_active,
        timing.vertical_active,
        timing.pixel_clock,
    )
    return timing


__all__ = [
    "DETAILED_TIMING_SIZE",
    "DetailedTiming",
    "parse_detailed_timing",
    "unpack_detailed_timing",
]
