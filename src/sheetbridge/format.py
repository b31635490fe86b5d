from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from typing_extensions import Self

from .color import Color, ColorLike, to_color
from .errors import XlsxError
from .sync import ValueHandle
from .types import (
    FormatBorderType,
    FormatPatternType,
    FormatScriptType,
    FormatUnderlineType,
    HorizontalAlignType,
    VerticalAlignType,
)


class FormatSpec(BaseModel):
    """Frozen cell format value. ``None`` means "not set"."""

    model_config = ConfigDict(frozen=True)

    font_name: str | None = None
    font_size: float | None = None
    font_color: Color | None = None
    bold: bool | None = None
    italic: bool | None = None
    underline: FormatUnderlineType | None = None
    strikethrough: bool | None = None
    font_script: FormatScriptType | None = None
    num_format: str | None = None
    align: HorizontalAlignType | None = None
    valign: VerticalAlignType | None = None
    text_wrap: bool | None = None
    indent: int | None = None
    rotation: int | None = None
    shrink: bool | None = None
    pattern: FormatPatternType | None = None
    background_color: Color | None = None
    foreground_color: Color | None = None
    border_top: FormatBorderType | None = None
    border_bottom: FormatBorderType | None = None
    border_left: FormatBorderType | None = None
    border_right: FormatBorderType | None = None
    border_top_color: Color | None = None
    border_bottom_color: Color | None = None
    border_left_color: Color | None = None
    border_right_color: Color | None = None
    locked: bool | None = None
    hidden: bool | None = None

    def has_font(self) -> bool:
        return any(
            value is not None
            for value in (
                self.font_name,
                self.font_size,
                self.font_color,
                self.bold,
                self.italic,
                self.underline,
                self.strikethrough,
                self.font_script,
            )
        )

    def has_fill(self) -> bool:
        return (
            self.pattern is not None
            or self.background_color is not None
            or self.foreground_color is not None
        )

    def has_border(self) -> bool:
        return any(
            value is not None
            for value in (
                self.border_top,
                self.border_bottom,
                self.border_left,
                self.border_right,
            )
        )

    def has_alignment(self) -> bool:
        return any(
            value is not None
            for value in (
                self.align,
                self.valign,
                self.text_wrap,
                self.indent,
                self.rotation,
                self.shrink,
            )
        )

    def has_protection(self) -> bool:
        return self.locked is not None or self.hidden is not None

    def merged_with(self, other: FormatSpec) -> FormatSpec:
        """Return this value overlaid with the fields set on ``other``."""
        changes = other.model_dump(exclude_none=True)
        return self.model_copy(
            update={name: getattr(other, name) for name in changes}
        )

    def perimeter_border(
        self, border: FormatSpec, *, top: bool, bottom: bool, left: bool, right: bool
    ) -> FormatSpec:
        """Overlay the sides of ``border`` selected by the edge flags."""
        changes: dict[str, object] = {}
        for side, enabled in (
            ("top", top),
            ("bottom", bottom),
            ("left", left),
            ("right", right),
        ):
            if not enabled:
                continue
            style = getattr(border, f"border_{side}")
            if style is not None:
                changes[f"border_{side}"] = style
                changes[f"border_{side}_color"] = getattr(border, f"border_{side}_color")
        return self.model_copy(update=changes)


class Format(ValueHandle[FormatSpec]):
    """Cell format handle.

    Mutators replace the wrapped ``FormatSpec`` under the handle's lock and
    return the handle itself, so calls chain:

        header = Format().set_bold().set_background_color("#DDEBF7")
    """

    def __init__(self) -> None:
        self._init_value(FormatSpec())

    def set_font_name(self, name: str) -> Self:
        return self._update(font_name=name)

    def set_font_size(self, size: float) -> Self:
        return self._update(font_size=float(size))

    def set_font_color(self, color: ColorLike) -> Self:
        return self._update(font_color=to_color(color))

    def set_bold(self, enable: bool = True) -> Self:
        return self._update(bold=enable)

    def set_italic(self, enable: bool = True) -> Self:
        return self._update(italic=enable)

    def set_underline(self, underline: FormatUnderlineType | None = "single") -> Self:
        return self._update(underline=underline)

    def set_font_strikethrough(self, enable: bool = True) -> Self:
        return self._update(strikethrough=enable)

    def set_font_script(self, script: FormatScriptType | None) -> Self:
        return self._update(font_script=script)

    def set_num_format(self, num_format: str) -> Self:
        return self._update(num_format=num_format)

    def set_align(self, align: HorizontalAlignType) -> Self:
        return self._update(align=align)

    def set_valign(self, valign: VerticalAlignType) -> Self:
        return self._update(valign=valign)

    def set_text_wrap(self, enable: bool = True) -> Self:
        return self._update(text_wrap=enable)

    def set_indent(self, level: int) -> Self:
        return self._update(indent=level)

    def set_rotation(self, rotation: int) -> Self:
        """Set text rotation in degrees (-90..90, or 270 for stacked text)."""
        if rotation == 270:
            return self._update(rotation=255)
        if not -90 <= rotation <= 90:
            raise XlsxError.from_code(
                "ParameterError", f"Rotation must be in -90..90 or 270: {rotation}"
            )
        if rotation < 0:
            rotation = 90 - rotation
        return self._update(rotation=rotation)

    def set_shrink(self, enable: bool = True) -> Self:
        return self._update(shrink=enable)

    def set_pattern(self, pattern: FormatPatternType) -> Self:
        return self._update(pattern=pattern)

    def set_background_color(self, color: ColorLike) -> Self:
        return self._update(background_color=to_color(color))

    def set_foreground_color(self, color: ColorLike) -> Self:
        return self._update(foreground_color=to_color(color))

    def set_border(self, border: FormatBorderType) -> Self:
        return self._update(
            border_top=border,
            border_bottom=border,
            border_left=border,
            border_right=border,
        )

    def set_border_color(self, color: ColorLike) -> Self:
        value = to_color(color)
        return self._update(
            border_top_color=value,
            border_bottom_color=value,
            border_left_color=value,
            border_right_color=value,
        )

    def set_border_top(self, border: FormatBorderType) -> Self:
        return self._update(border_top=border)

    def set_border_bottom(self, border: FormatBorderType) -> Self:
        return self._update(border_bottom=border)

    def set_border_left(self, border: FormatBorderType) -> Self:
        return self._update(border_left=border)

    def set_border_right(self, border: FormatBorderType) -> Self:
        return self._update(border_right=border)

    def set_border_top_color(self, color: ColorLike) -> Self:
        return self._update(border_top_color=to_color(color))

    def set_border_bottom_color(self, color: ColorLike) -> Self:
        return self._update(border_bottom_color=to_color(color))

    def set_border_left_color(self, color: ColorLike) -> Self:
        return self._update(border_left_color=to_color(color))

    def set_border_right_color(self, color: ColorLike) -> Self:
        return self._update(border_right_color=to_color(color))

    def set_locked(self) -> Self:
        return self._update(locked=True)

    def set_unlocked(self) -> Self:
        return self._update(locked=False)

    def set_hidden(self) -> Self:
        return self._update(hidden=True)
