"""Fixed-size EDID sections kept as raw bytes.

Chromaticity coordinates (offsets 25..34), the established timing bitmap
(35..37) and the eight standard timing slots (38..53) are consumed and
captured unchanged. They are not decoded into fields yet; the capture
keeps the bytes so a decoder can be added without moving any offsets.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Type, TypeVar

from edidparse.parser.cursor import ByteCursor

CHROMATICITY_SIZE = 10
ESTABLISHED_TIMING_SIZE = 3
STANDARD_TIMING_SIZE = 16


@dataclass(frozen=True)
class Unparsed:
    """Raw capture of a fixed-size section.

    Attributes:
        data: The section bytes, copied out of the input buffer.
    """

    size: ClassVar[int] = 0

    data: bytes

    def __post_init__(self) -> None:
        if len(self.data) != self.size:
            raise ValueError(
                "%s expects %d bytes, got %d"
                % (type(self).__name__, self.size, len(self.data))
            )


@dataclass(frozen=True)
class Chromaticity(Unparsed):
    size: ClassVar[int] = CHROMATICITY_SIZE


@dataclass(frozen=True)
class EstablishedTiming(Unparsed):
    size: ClassVar[int] = ESTABLISHED_TIMING_SIZE


@dataclass(frozen=True)
class StandardTiming(Unparsed):
    size: ClassVar[int] = STANDARD_TIMING_SIZE


_U = TypeVar("_U", bound=Unparsed)


def skip_unparsed(cursor: ByteCursor, kind: Type[_U]) -> _U:
    """Consume ``kind.size`` bytes and wrap them in ``kind``."""
    return kind(cursor.take(kind.size))


def parse_chromaticity(cursor: ByteCursor) -> Chromaticity:
    return skip_unparsed(cursor, Chromaticity)


def parse_established_timing(cursor: ByteCursor) -> EstablishedTiming:
    return skip_unparsed(cursor, EstablishedTiming)


def parse_standard_timing(cursor: ByteCursor) -> StandardTiming:
    return skip_unparsed(cursor, StandardTiming)


__all__ = [
    "CHROMATICITY_SIZE",
    "ESTABLISHED_TIMING_SIZE",
    "STANDARD_TIMING_SIZE",
    "Chromaticity",
    "EstablishedTiming",
    "StandardTiming",
    "Unparsed",
    "parse_chromaticity",
    "parse_established_timing",
    "parse_standard_timing",
]
