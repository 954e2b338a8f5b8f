"""The four 18-byte descriptor slots (offsets 54..125).

A slot whose first two bytes are non-zero holds a detailed timing. Any
other slot is a display descriptor:

- 0..1: ``00 00``
- 2: reserved
- 3: discriminator (see ``TAG_*`` constants)
- 4: reserved
- 5..17: 13 payload bytes

Text payloads (serial number, unspecified text, product name) are
rendered byte by byte, line feeds dropped and surrounding whitespace
trimmed. Payloads of the other known discriminators are kept as raw
bytes. Unrecognised discriminators produce :class:`Unknown` with the
payload preserved as-is; they are never treated as errors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import ClassVar, Dict, Type

from edidparse.parser.codepage import Renderer, cp437_char
from edidparse.parser.cursor import ByteCursor
from edidparse.parser.timing import DetailedTiming, parse_detailed_timing

logger = logging.getLogger(__name__)

DESCRIPTOR_SIZE = 18
PAYLOAD_SIZE = 13
LINE_FEED = 0x0A

#
# Display descriptor discriminators.
#
TAG_SERIAL_NUMBER = 0xFF
TAG_UNSPECIFIED_TEXT = 0xFE
TAG_RANGE_LIMITS = 0xFD
TAG_PRODUCT_NAME = 0xFC
TAG_WHITE_POINT = 0xFB
TAG_STANDARD_TIMING = 0xFA
TAG_COLOR_MANAGEMENT = 0xF9
TAG_TIMING_CODES = 0xF8
TAG_ESTABLISHED_TIMINGS = 0xF7
TAG_DUMMY = 0x10


@dataclass(frozen=True)
class Descriptor:
    """Base class of all descriptor slot values."""

    kind: ClassVar[str] = "descriptor"


@dataclass(frozen=True)
class DetailedTimingDescriptor(Descriptor):
    kind: ClassVar[str] = "detailed_timing"

    timing: DetailedTiming


@dataclass(frozen=True)
class TextDescriptor(Descriptor):
    """Display descriptor carrying rendered text."""

    text: str


@dataclass(frozen=True)
class SerialNumber(TextDescriptor):
    kind: ClassVar[str] = "serial_number"


@dataclass(frozen=True)
class UnspecifiedText(TextDescriptor):
    kind: ClassVar[str] = "unspecified_text"


@dataclass(frozen=True)
class ProductName(TextDescriptor):
    kind: ClassVar[str] = "product_name"


@dataclass(frozen=True)
class OpaqueDescriptor(Descriptor):
    """Display descriptor whose 13 payload bytes are not decoded yet."""

    data: bytes


@dataclass(frozen=True)
class RangeLimits(OpaqueDescriptor):
    kind: ClassVar[str] = "range_limits"


@dataclass(frozen=True)
class WhitePoint(OpaqueDescriptor):
    kind: ClassVar[str] = "white_point"


@dataclass(frozen=True)
class StandardTimingDescriptor(OpaqueDescriptor):
    kind: ClassVar[str] = "standard_timing"


@dataclass(frozen=True)
class ColorManagement(OpaqueDescriptor):
    kind: ClassVar[str] = "color_management"


@dataclass(frozen=True)
class TimingCodes(OpaqueDescriptor):
    kind: ClassVar[str] = "timing_codes"


@dataclass(frozen=True)
class EstablishedTimingsDescriptor(OpaqueDescriptor):
    kind: ClassVar[str] = "established_timings"


@dataclass(frozen=True)
class Dummy(Descriptor):
    kind: ClassVar[str] = "dummy"


@dataclass(frozen=True)
class Unknown(Descriptor):
    """Display descriptor with an unrecognised discriminator.

    Attributes:
        data: The 13 payload bytes exactly as stored.
        tag: The discriminator byte.
    """

    kind: ClassVar[str] = "unknown"

    data: bytes
    tag: int


TEXT_DESCRIPTORS: Dict[int, Type[TextDescriptor]] = {
    TAG_SERIAL_NUMBER: SerialNumber,
    TAG_UNSPECIFIED_TEXT: UnspecifiedText,
    TAG_PRODUCT_NAME: ProductName,
}

OPAQUE_DESCRIPTORS: Dict[int, Type[OpaqueDescriptor]] = {
    TAG_RANGE_LIMITS: RangeLimits,
    TAG_WHITE_POINT: WhitePoint,
    TAG_STANDARD_TIMING: StandardTimingDescriptor,
    TAG_COLOR_MANAGEMENT: ColorManagement,
    TAG_TIMING_CODES: TimingCodes,
    TAG_ESTABLISHED_TIMINGS: EstablishedTimingsDescriptor,
}


def decode_descriptor_text(
    payload: bytes, render: Renderer = cp437_char
) -> str:
    """Render a text payload.

    Args:
        payload: Raw payload bytes.
        render: Byte to character mapping used for every kept byte.

    Returns:
        The rendered text without line feeds and surrounding whitespace.
    """

    return "".join(render(b) for b in payload if b != LINE_FEED).strip()


def make_display_descriptor(
    tag: int, payload: bytes, render: Renderer = cp437_char
) -> Descriptor:
    """Build the descriptor variant selected by ``tag``.

    Total over all 256 discriminator values: anything not listed in the
    tables becomes :class:`Unknown`.
    """

    text_cls = TEXT_DESCRIPTORS.get(tag)
    if text_cls is not None:
        return text_cls(decode_descriptor_text(payload, render))

    opaque_cls = OPAQUE_DESCRIPTORS.get(tag)
    if opaque_cls is not None:
        return opaque_cls(payload)

    if tag == TAG_DUMMY:
        return Dummy()

    logger.debug("Unknown display descriptor tag 0x%02X", tag)
    return Unknown(data=payload, tag=tag)


def parse_descriptor(
    cursor: ByteCursor, render: Renderer = cp437_char
) -> Descriptor:
    """Consume one 18-byte descriptor slot.

    Args:
        cursor: Cursor positioned at the start of the slot.
        render: Byte to character mapping for text payloads.

    Returns:
        The decoded descriptor variant.

    Raises:
        Incomplete: If the slot is truncated.
    """

    if cursor.peek_u16_le() != 0:
        return DetailedTimingDescriptor(parse_detailed_timing(cursor))

    cursor.skip(2)
    cursor.skip(1)
    tag = cursor.read_u8()
    cursor.skip(1)
    payload = cursor.take(PAYLOAD_SIZE)
    return make_display_descriptor(tag, payload, render)


__all__ = [
    "DESCRIPTOR_SIZE",
    "ColorManagement",
    "Descriptor",
    "DetailedTimingDescriptor",
    "Dummy",
    "EstablishedTimingsDescriptor",
    "OPAQUE_DESCRIPTORS",
    "OpaqueDescriptor",
    "ProductName",
    "RangeLimits",
    "SerialNumber",
    "StandardTimingDescriptor",
    "TEXT_DESCRIPTORS",
    "TextDescriptor",
    "TimingCodes",
    "Unknown",
    "UnspecifiedText",
    "WhitePoint",
    "decode_descriptor_text",
    "make_display_descriptor",
    "parse_descriptor",
]
