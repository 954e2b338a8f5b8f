"""Shared EDID base blocks used across the test modules.

Both blocks are written out byte by byte; only the trailing checksum is
computed so the blocks also pass the optional checksum check.
"""

from __future__ import annotations

import pytest


def _with_checksum(hex_text: str) -> bytes:
    body = bytes.fromhex(hex_text)
    assert len(body) == 127, len(body)
    return body + bytes([(-sum(body)) & 0xFF])


# 22" Samsung SyncMaster on a VGA connector.
SYNCMASTER_HEX = """
00 FF FF FF FF FF FF 00  4C 2D 54 02 32 32 50 44  1B 11 01 03
0E 2F 1E 78 2A
EE 91 A3 54 4C 99 26 0F 50 54
BF EF 80
71 4F 81 00 81 40 81 80 95 00 95 0F B3 00 01 01
21 39 90 30 62 1A 27 40 68 B0 36 00 DA 28 11 00 00 1C
00 00 00 FD 00 38 4B 1E 51 11 00 0A 20 20 20 20 20 20
00 00 00 FC 00 53 79 6E 63 4D 61 73 74 65 72 0A 20 20
00 00 00 FF 00 48 53 33 50 37 30 31 31 30 35 0A 20 20
00
"""

# Sharp laptop panel on an eDP connector.
SHARP_PANEL_HEX = """
00 FF FF FF FF FF FF 00  4D 10 49 14 00 00 00 00  20 19 01 04
A5 1D 11 78 0E
DE 50 A3 54 4C 99 26 0F 50 54
00 00 00
01 01 01 01 01 01 01 01 01 01 01 01 01 01 01 01
1A 36 80 A0 70 38 1F 40 30 20 35 00 26 A5 10 00 00 18
00 00 00 10 00 00 00 00 00 00 00 00 00 00 00 00 00 00
00 00 00 FE 00 44 4A 43 50 36 80 4C 51 31 33 33 4D 31
00 00 00 00 00 02 41 03 28 00 12 00 00 0B 01 0A 20 20
00
"""

SYNCMASTER_EDID = _with_checksum(SYNCMASTER_HEX)
SHARP_PANEL_EDID = _with_checksum(SHARP_PANEL_HEX)


@pytest.fixture
def syncmaster_edid() -> bytes:
    return SYNCMASTER_EDID


@pytest.fixture
def sharp_panel_edid() -> bytes:
    return SHARP_PANEL_EDID


@pytest.fixture
def drm_root(tmp_path):
    """A fake ``/sys/class/drm`` with one connected and one idle output."""

    root = tmp_path / "drm"
    connected = root / "card0-VGA-1"
    connected.mkdir(parents=True)
    (connected / "edid").write_bytes(SYNCMASTER_EDID)

    idle = root / "card0-HDMI-A-1"
    idle.mkdir()
    (idle / "edid").write_bytes(b"")

    # Not a connector directory.
    (root / "version").write_text("drm 1.1.0\n")
    return root
