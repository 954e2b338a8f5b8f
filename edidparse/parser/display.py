"""Basic display parameters (offsets 20..24)."""

from __future__ import annotations

from dataclasses import dataclass

from edidparse.parser.cursor import ByteCursor


@dataclass(frozen=True)
class DisplayParameters:
    """Five single-byte display parameters, stored as read.

    Attributes:
        video_input: Video input definition bitmap.
        width_cm: Maximum horizontal image size in centimetres.
        height_cm: Maximum vertical image size in centimetres.
        gamma: Raw gamma byte, ``(gamma * 100) - 100``.
        features: Feature support bitmap.
    """

    video_input: int
    width_cm: int
    height_cm: int
    gamma: int
    features: int

    def gamma_value(self) -> float:
        """Return the transfer characteristic encoded by ``gamma``.

        Returns:
            ``gamma / 100 + 1``, i.e. a value between 1.00 and 3.55.
        """

        return self.gamma / 100 + 1


def parse_display(cursor: ByteCursor) -> DisplayParameters:
    """Consume the five display parameter bytes in order."""

    return DisplayParameters(
        video_input=cursor.read_u8(),
        width_cm=cursor.read_u8(),
        height_cm=cursor.read_u8(),
        gamma=cursor.read_u8(),
        features=cursor.read_u8(),
    )


__all__ = ["DisplayParameters", "parse_display"]
