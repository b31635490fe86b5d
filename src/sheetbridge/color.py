from __future__ import annotations

import re
from typing import Final

from pydantic import BaseModel, ConfigDict, field_validator

_HEX_COLOR_PATTERN = re.compile(r"^#?(?:[0-9A-Fa-f]{6}|[0-9A-Fa-f]{8})$")

_NAMED_COLORS: Final[dict[str, str]] = {
    "black": "000000",
    "blue": "0000FF",
    "brown": "800000",
    "cyan": "00FFFF",
    "gray": "808080",
    "green": "008000",
    "lime": "00FF00",
    "magenta": "FF00FF",
    "navy": "000080",
    "orange": "FF6600",
    "pink": "FF00FF",
    "purple": "800080",
    "red": "FF0000",
    "silver": "C0C0C0",
    "white": "FFFFFF",
    "yellow": "FFFF00",
}


def _normalize_hex_input(value: str) -> str:
    """Normalize RRGGBB/AARRGGBB (with optional '#') to AARRGGBB."""
    candidate = value.strip()
    if not _HEX_COLOR_PATTERN.match(candidate):
        raise ValueError(f"Invalid color: {value}. Use RRGGBB or AARRGGBB.")
    digits = candidate.lstrip("#").upper()
    if len(digits) == 6:
        return f"FF{digits}"
    return digits


class Color(BaseModel):
    """An ARGB color value."""

    model_config = ConfigDict(frozen=True)

    argb: str

    @field_validator("argb")
    @classmethod
    def _validate_argb(cls, value: str) -> str:
        return _normalize_hex_input(value)

    @classmethod
    def from_hex(cls, value: str) -> Color:
        return cls(argb=value)

    @classmethod
    def from_rgb(cls, value: int) -> Color:
        """Build a color from an integer such as 0xFF0000."""
        if value < 0 or value > 0xFFFFFF:
            raise ValueError(f"RGB value out of range: {value:#x}")
        return cls(argb=f"{value:06X}")

    @classmethod
    def from_name(cls, name: str) -> Color:
        key = name.strip().lower()
        if key not in _NAMED_COLORS:
            raise ValueError(f"Unknown color name: {name}")
        return cls(argb=_NAMED_COLORS[key])

    @property
    def rgb(self) -> str:
        """Return the color as RRGGBB."""
        return self.argb[2:]


ColorLike = Color | str | int


def to_color(value: ColorLike) -> Color:
    """Coerce a hex string, color name, RGB integer or Color into a Color."""
    if isinstance(value, Color):
        return value
    if isinstance(value, bool):
        raise TypeError("Color must be a Color, hex string, name or RGB integer.")
    if isinstance(value, int):
        return Color.from_rgb(value)
    if value.strip().lower() in _NAMED_COLORS:
        return Color.from_name(value)
    return Color.from_hex(value)

