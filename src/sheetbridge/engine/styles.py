"""Render frozen ``FormatSpec`` values into openpyxl style objects."""

from __future__ import annotations

from openpyxl.cell.text import InlineFont
from openpyxl.styles import Alignment, Border, Font, PatternFill, Protection, Side
from openpyxl.styles.differential import DifferentialStyle

from ..color import Color
from ..format import FormatSpec

_DEFAULT_FONT_NAME = "Calibri"
_DEFAULT_FONT_SIZE = 11.0
_SCRIPT_TO_VERT_ALIGN = {"superscript": "superscript", "subscript": "subscript"}


def _rgb(color: Color | None) -> str | None:
    return color.argb if color is not None else None


def build_font(spec: FormatSpec) -> Font:
    return Font(
        name=spec.font_name or _DEFAULT_FONT_NAME,
        size=spec.font_size or _DEFAULT_FONT_SIZE,
        bold=bool(spec.bold),
        italic=bool(spec.italic),
        underline=spec.underline,
        strike=bool(spec.strikethrough),
        vertAlign=_SCRIPT_TO_VERT_ALIGN.get(spec.font_script or ""),
        color=_rgb(spec.font_color),
    )


def build_inline_font(spec: FormatSpec) -> InlineFont:
    """Build the run font used by rich text fragments."""
    return InlineFont(
        rFont=spec.font_name,
        sz=spec.font_size,
        b=spec.bold,
        i=spec.italic,
        u=spec.underline,
        strike=spec.strikethrough,
        vertAlign=_SCRIPT_TO_VERT_ALIGN.get(spec.font_script or ""),
        color=_rgb(spec.font_color),
    )


def build_fill(spec: FormatSpec) -> PatternFill:
    """Build a cell fill.

    A solid fill shows its foreground colour, so ``background_color`` is
    stored there unless a foreground colour is set explicitly.
    """
    pattern = spec.pattern or "solid"
    if pattern == "solid":
        color = spec.foreground_color or spec.background_color
        if color is None:
            return PatternFill(fill_type="solid")
        return PatternFill(fill_type="solid", fgColor=color.argb)
    fill = PatternFill(fill_type=pattern)
    if spec.foreground_color is not None:
        fill.fgColor = _rgb(spec.foreground_color)
    if spec.background_color is not None:
        fill.bgColor = _rgb(spec.background_color)
    return fill


def _side(style: str | None, color: Color | None) -> Side:
    if style is None or style == "none":
        return Side()
    return Side(style=style, color=_rgb(color))


def build_border(spec: FormatSpec) -> Border:
    return Border(
        left=_side(spec.border_left, spec.border_left_color),
        right=_side(spec.border_right, spec.border_right_color),
        top=_side(spec.border_top, spec.border_top_color),
        bottom=_side(spec.border_bottom, spec.border_bottom_color),
    )


def build_alignment(spec: FormatSpec) -> Alignment:
    return Alignment(
        horizontal=spec.align,
        vertical=spec.valign,
        wrap_text=spec.text_wrap,
        indent=spec.indent or 0,
        text_rotation=spec.rotation or 0,
        shrink_to_fit=spec.shrink,
    )


def build_protection(spec: FormatSpec) -> Protection:
    locked = True if spec.locked is None else spec.locked
    return Protection(locked=locked, hidden=bool(spec.hidden))


def build_styles(spec: FormatSpec | None) -> dict[str, object]:
    """Build the openpyxl style attributes for every set field of ``spec``.

    Nothing is assigned here, so a failure leaves the target untouched.
    """
    if spec is None:
        return {}
    styles: dict[str, object] = {}
    if spec.has_font():
        styles["font"] = build_font(spec)
    if spec.has_fill():
        styles["fill"] = build_fill(spec)
    if spec.has_border():
        styles["border"] = build_border(spec)
    if spec.has_alignment():
        styles["alignment"] = build_alignment(spec)
    if spec.has_protection():
        styles["protection"] = build_protection(spec)
    if spec.num_format is not None:
        styles["number_format"] = spec.num_format
    return styles


def assign_styles(target: object, styles: dict[str, object]) -> None:
    for name, value in styles.items():
        setattr(target, name, value)


def apply_format(cell: object, spec: FormatSpec | None) -> None:
    """Apply every set field of ``spec`` to an openpyxl cell.

    Args:
        cell: openpyxl ``Cell``, ``MergedCell`` or row/column dimension.
        spec: Format value, or ``None`` to leave the cell style alone.
    """
    assign_styles(cell, build_styles(spec))


def build_differential_style(spec: FormatSpec | None) -> DifferentialStyle:
    """Build the DXF style used by conditional formatting rules.

    DXF fills show the background colour for solid patterns, so both colours
    are filled in.
    """
    if spec is None:
        return DifferentialStyle()
    font = None
    if spec.has_font():
        font = Font(
            name=spec.font_name,
            size=spec.font_size,
            bold=spec.bold,
            italic=spec.italic,
            underline=spec.underline,
            strike=spec.strikethrough,
            color=_rgb(spec.font_color),
        )
    fill = None
    if spec.has_fill():
        fill = PatternFill(fill_type=spec.pattern or "solid")
        color = spec.background_color or spec.foreground_color
        if color is not None:
            fill.fgColor = color.argb
            fill.bgColor = color.argb
    border = build_border(spec) if spec.has_border() else None
    alignment = build_alignment(spec) if spec.has_alignment() else None
    return DifferentialStyle(
        font=font,
        fill=fill,
        border=border,
        alignment=alignment,
        numFmt=None,
    )
