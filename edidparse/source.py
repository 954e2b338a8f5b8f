"""Loading EDID dumps from files and DRM sysfs.

The decoders in :mod:`edidparse.parser` only work on bytes that are
already in memory. This module is the thin layer that gets them there:

- :meth:`EdidSource.create` reads one dump (raw binary or a hex text dump)
  and decodes it.
- :func:`discover_connectors` walks a DRM sysfs directory (normally
  ``/sys/class/drm``) and lists the connectors that expose an ``edid``
  file. Disconnected outputs expose an empty one, for which
  :meth:`EdidSource.create` returns ``None``.

Decode failures are not caught here; they propagate to the caller, which
decides whether to skip the source or abort.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Tuple

from attrs import define, field

from edidparse.parser.edid import Edid, parse_edid, verify_checksum

logger = logging.getLogger(__name__)

DEFAULT_DRM_ROOT = Path("/sys/class/drm")

# Tokens are separated by whitespace or commas; each holds one or more
# hex byte pairs with an optional '0x' prefix.
_HEX_SEPARATOR_RE = re.compile(r"[\s,]+")
_HEX_TOKEN_RE = re.compile(
    r"""
    (?:0[xX])?             # optional '0x'
    ((?:[0-9A-Fa-f]{2})+)  # whole hex byte pairs
    """,
    re.VERBOSE,
)


def parse_hex_dump(text: str) -> bytes:
    """Convert a textual hex dump into bytes.

    The text is split on whitespace and commas; every token must be one or
    more pairs of hex digits, optionally prefixed with ``0x``. Offset
    columns (as printed by ``xxd``) are not supported.

    Args:
        text: The dump content.

    Returns:
        The decoded bytes.

    Raises:
        ValueError: If a token is not hex or no hex byte is found.
    """

    data = bytearray()
    for token in _HEX_SEPARATOR_RE.split(text):
        if not token:
            continue
        match = _HEX_TOKEN_RE.fullmatch(token)
        if match is None:
            raise ValueError("Not a hex byte sequence: %r" % token)
        data += bytes.fromhex(match.group(1))
    if not data:
        raise ValueError("No hex bytes found in dump")
    return bytes(data)


@define
class EdidSource:
    """A decoded EDID dump and where it came from.

    Attributes:
        name: Display name (connector name or file name).
        path: File the bytes were read from.
        data: Raw bytes as read.
        edid: The decoded base block.
        remaining: Bytes following the base block (extension blocks).
    """

    name: str
    path: Path
    data: bytes = field(repr=False)
    edid: Edid
    remaining: int = 0

    @property
    def checksum_ok(self) -> bool:
        return verify_checksum(self.data)

    @property
    def extension_blocks(self) -> int:
        """Number of complete 128-byte blocks after the base block."""
        return self.remaining // 128

    @classmethod
    def from_bytes(
        cls, data: bytes, name: str, path: Path = Path()
    ) -> "EdidSource":
        """Decode ``data`` and wrap the result.

        Raises:
            EdidError: If ``data`` is not a valid base block.
        """

        edid, remaining = parse_edid(data)
        return cls(
            name=name, path=path, data=data, edid=edid, remaining=remaining
        )

    @classmethod
    def create(
        cls, path: Path, name: str | None = None, hex_text: bool = False
    ) -> "EdidSource | None":
        """Read and decode the dump stored at ``path``.

        Args:
            path: File holding the dump.
            name: Display name; defaults to the file name.
            hex_text: Read the file as a text hex dump instead of binary.

        Returns:
            The decoded source, or ``None`` if the file is empty.

        Raises:
            EdidError: If the content is not a valid base block.
            ValueError: If ``hex_text`` is set and the file holds no hex.
        """

        if hex_text:
            text = path.read_text(encoding="utf-8")
            if not text.strip():
                logger.debug("Skipping empty EDID: %s", path)
                return None
            data = parse_hex_dump(text)
        else:
            data = path.read_bytes()
            if len(data) == 0:
                logger.debug("Skipping empty EDID: %s", path)
                return None

        logger.debug("Read %d bytes from %s", len(data), path)
        return cls.from_bytes(data, name or path.name, path)


def discover_connectors(
    root: Path = DEFAULT_DRM_ROOT,
) -> List[Tuple[str, Path]]:
    """List DRM connectors with an ``edid`` file under ``root``.

    Connector directories are named ``card<N>-<connector>`` (for example
    ``card0-eDP-1``). The files are not read here: sysfs reports size 0
    for every attribute, so emptiness is only known once
    :meth:`EdidSource.create` reads them.

    Args:
        root: DRM sysfs directory.

    Returns:
        Sorted list of (connector name, path to the ``edid`` file).
    """

    found: List[Tuple[str, Path]] = []
    for connector in sorted(root.glob("card*-*")):
        edid_path = connector / "edid"
        if edid_path.is_file():
            found.append((connector.name, edid_path))
    logger.debug("Found %d connector(s) under %s", len(found), root)
    return found


__all__ = [
    "DEFAULT_DRM_ROOT",
    "EdidSource",
    "discover_connectors",
    "parse_hex_dump",
]
