"""Tests for descriptor slot dispatch and text rendering."""

from __future__ import annotations

import pytest

from edidparse.parser.codepage import CP437_TABLE, cp437_char, latin1_char
from edidparse.parser.cursor import ByteCursor
from edidparse.parser.descriptor import (
    OPAQUE_DESCRIPTORS,
    TEXT_DESCRIPTORS,
    ColorManagement,
    DetailedTimingDescriptor,
    Dummy,
    EstablishedTimingsDescriptor,
    ProductName,
    RangeLimits,
    SerialNumber,
    StandardTimingDescriptor,
    TimingCodes,
    Unknown,
    UnspecifiedText,
    WhitePoint,
    decode_descriptor_text,
    parse_descriptor,
)
from edidparse.parser.errors import Incomplete

PAYLOAD = bytes(range(0x41, 0x41 + 13))


def _display_descriptor(tag: int, payload: bytes = PAYLOAD) -> bytes:
    assert len(payload) == 13
    return b"\x00\x00\x00" + bytes([tag]) + b"\x00" + payload


def _parse(slot: bytes, **kwargs):
    cursor = ByteCursor(slot)
    desc = parse_descriptor(cursor, **kwargs)
    assert cursor.position == 18
    return desc


@pytest.mark.parametrize(
    "tag, cls",
    [
        (0xFF, SerialNumber),
        (0xFE, UnspecifiedText),
        (0xFC, ProductName),
    ],
)
def test_text_descriptors(tag: int, cls: type) -> None:
    payload = b"SyncMaster\n  "
    desc = _parse(_display_descriptor(tag, payload))
    assert desc == cls("SyncMaster")


@pytest.mark.parametrize(
    "tag, cls",
    [
        (0xFD, RangeLimits),
        (0xFB, WhitePoint),
        (0xFA, StandardTimingDescriptor),
        (0xF9, ColorManagement),
        (0xF8, TimingCodes),
        (0xF7, EstablishedTimingsDescriptor),
    ],
)
def test_opaque_descriptors_keep_payload(tag: int, cls: type) -> None:
    desc = _parse(_display_descriptor(tag))
    assert desc == cls(PAYLOAD)


def test_dummy_descriptor() -> None:
    assert _parse(_display_descriptor(0x10)) == Dummy()


def test_every_other_tag_is_unknown_with_raw_payload() -> None:
    known = set(TEXT_DESCRIPTORS) | set(OPAQUE_DESCRIPTORS) | {0x10}
    assert len(known) == 10
    for tag in range(256):
        if tag in known:
            continue
        desc = _parse(_display_descriptor(tag))
        assert desc == Unknown(data=PAYLOAD, tag=tag)
        assert desc.data == PAYLOAD


def test_unknown_keeps_line_feeds_and_spaces() -> None:
    payload = bytes([2, 65, 3, 40, 0, 18, 0, 0, 11, 1, 10, 32, 32])
    desc = _parse(_display_descriptor(0x00, payload))
    assert desc == Unknown(data=payload, tag=0)


def test_nonzero_first_bytes_select_detailed_timing() -> None:
    slot = bytes.fromhex("01 00") + bytes(16)
    desc = _parse(slot)
    assert isinstance(desc, DetailedTimingDescriptor)
    assert desc.timing.pixel_clock == 10

    # Only the second byte set is still a timing.
    desc = _parse(bytes.fromhex("00 01") + bytes(16))
    assert isinstance(desc, DetailedTimingDescriptor)
    assert desc.timing.pixel_clock == 2560


def test_text_drops_line_feed_and_trims() -> None:
    assert decode_descriptor_text(b"  HS3P\n70\n1105 ") == "HS3P701105"
    assert decode_descriptor_text(b"\n\n\n") == ""


def test_text_uses_supplied_renderer() -> None:
    payload = b"DJCP6\x80LQ133M1"
    assert decode_descriptor_text(payload) == "DJCP6ÇLQ133M1"
    assert decode_descriptor_text(payload, latin1_char) == "DJCP6\x80LQ133M1"

    desc = _parse(_display_descriptor(0xFE, payload), render=lambda b: "*")
    assert desc == UnspecifiedText("*" * 13)


def test_cp437_table_is_total() -> None:
    assert len(CP437_TABLE) == 256
    assert all(len(ch) == 1 for ch in CP437_TABLE)
    assert cp437_char(0x41) == "A"
    assert cp437_char(0xE1) == "ß"


def test_truncated_display_descriptor_raises() -> None:
    with pytest.raises(Incomplete):
        parse_descriptor(ByteCursor(_display_descriptor(0xFC)[:17]))


def test_unknown_requires_its_tag() -> None:
    with pytest.raises(TypeError):
        Unknown(data=PAYLOAD)  # type: ignore[call-arg]
