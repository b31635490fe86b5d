"""Chart formatting values: lines, fills, fonts, markers, labels and layout.

Each value is a frozen model behind a handle, like cell formats. Setting a
formatting handle on a chart element stores a snapshot, so later changes to
the handle do not reach the chart.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import Self

from ..color import Color, ColorLike, to_color
from ..errors import XlsxError
from ..sync import ValueHandle
from ..types import (
    DataLabelPositionType,
    GradientFillType,
    LineDashType,
    MarkerType,
    PatternFillType,
)


class _ChartValue(BaseModel):
    model_config = ConfigDict(frozen=True)


def _check_transparency(value: int) -> int:
    if not 0 <= value <= 100:
        raise XlsxError.from_code(
            "ParameterError", f"Transparency must be 0..100: {value}"
        )
    return value


class LineSpec(_ChartValue):
    color: Color | None = None
    width: float | None = None
    dash_type: LineDashType | None = None
    transparency: int = 0
    hidden: bool = False


class SolidFillSpec(_ChartValue):
    color: Color | None = None
    transparency: int = 0


class PatternFillSpec(_ChartValue):
    pattern: PatternFillType = "pct50"
    foreground_color: Color | None = None
    background_color: Color | None = None


class ChartGradientStop(_ChartValue):
    """One gradient stop: a colour at a position between 0 and 100 percent."""

    color: Color
    position: int = Field(ge=0, le=100)

    @classmethod
    def new(cls, color: ColorLike, position: int) -> ChartGradientStop:
        if not 0 <= position <= 100:
            raise XlsxError.from_code(
                "ParameterError", f"Gradient stop position must be 0..100: {position}"
            )
        return cls(color=to_color(color), position=position)


class GradientFillSpec(_ChartValue):
    gradient_type: GradientFillType = "linear"
    stops: tuple[ChartGradientStop, ...] = ()
    angle: float = 90.0


class FontSpec(_ChartValue):
    name: str | None = None
    size: float | None = None
    bold: bool | None = None
    italic: bool | None = None
    underline: bool | None = None
    color: Color | None = None
    rotation: int | None = None


class ChartFormatSpec(_ChartValue):
    line: LineSpec | None = None
    solid_fill: SolidFillSpec | None = None
    pattern_fill: PatternFillSpec | None = None
    gradient_fill: GradientFillSpec | None = None
    no_fill: bool = False
    no_line: bool = False


class MarkerSpec(_ChartValue):
    marker_type: MarkerType = "automatic"
    size: int | None = None
    format: ChartFormatSpec | None = None


class DataLabelSpec(_ChartValue):
    show_value: bool = False
    show_category_name: bool = False
    show_series_name: bool = False
    show_percentage: bool = False
    show_leader_lines: bool = False
    position: DataLabelPositionType | None = None
    num_format: str | None = None
    font: FontSpec | None = None
    format: ChartFormatSpec | None = None

    def shows_anything(self) -> bool:
        return (
            self.show_value
            or self.show_category_name
            or self.show_series_name
            or self.show_percentage
        )


class PointSpec(_ChartValue):
    format: ChartFormatSpec | None = None


class LayoutSpec(_ChartValue):
    """Manual layout as fractions (0..1) of the chart area."""

    x: float | None = None
    y: float | None = None
    width: float | None = None
    height: float | None = None


class ChartLine(ValueHandle[LineSpec]):
    def __init__(self) -> None:
        self._init_value(LineSpec())

    def set_color(self, color: ColorLike) -> Self:
        return self._update(color=to_color(color))

    def set_width(self, width: float) -> Self:
        """Set the line width in points."""
        return self._update(width=float(width))

    def set_dash_type(self, dash_type: LineDashType) -> Self:
        return self._update(dash_type=dash_type)

    def set_transparency(self, transparency: int) -> Self:
        return self._update(transparency=_check_transparency(transparency))

    def set_hidden(self, enable: bool = True) -> Self:
        return self._update(hidden=enable)


class ChartSolidFill(ValueHandle[SolidFillSpec]):
    def __init__(self) -> None:
        self._init_value(SolidFillSpec())

    def set_color(self, color: ColorLike) -> Self:
        return self._update(color=to_color(color))

    def set_transparency(self, transparency: int) -> Self:
        return self._update(transparency=_check_transparency(transparency))


class ChartPatternFill(ValueHandle[PatternFillSpec]):
    def __init__(self) -> None:
        self._init_value(PatternFillSpec())

    def set_pattern(self, pattern: PatternFillType) -> Self:
        return self._update(pattern=pattern)

    def set_foreground_color(self, color: ColorLike) -> Self:
        return self._update(foreground_color=to_color(color))

    def set_background_color(self, color: ColorLike) -> Self:
        return self._update(background_color=to_color(color))


class ChartGradientFill(ValueHandle[GradientFillSpec]):
    def __init__(self) -> None:
        self._init_value(GradientFillSpec())

    def set_type(self, gradient_type: GradientFillType) -> Self:
        return self._update(gradient_type=gradient_type)

    def set_gradient_stops(self, stops: list[ChartGradientStop]) -> Self:
        """Set 2 to 10 stops; Excel ignores gradients outside that range."""
        if not 2 <= len(stops) <= 10:
            raise XlsxError.from_code(
                "ParameterError", f"Gradient fill needs 2..10 stops, got {len(stops)}."
            )
        ordered = tuple(sorted(stops, key=lambda stop: stop.position))
        return self._update(stops=ordered)

    def set_angle(self, angle: float) -> Self:
        if not 0 <= angle < 360:
            raise XlsxError.from_code(
                "ParameterError", f"Gradient angle must be 0..359: {angle}"
            )
        return self._update(angle=float(angle))


class ChartFont(ValueHandle[FontSpec]):
    def __init__(self) -> None:
        self._init_value(FontSpec())

    def set_name(self, name: str) -> Self:
        return self._update(name=name)

    def set_size(self, size: float) -> Self:
        return self._update(size=float(size))

    def set_bold(self, enable: bool = True) -> Self:
        return self._update(bold=enable)

    def set_italic(self, enable: bool = True) -> Self:
        return self._update(italic=enable)

    def set_underline(self, enable: bool = True) -> Self:
        return self._update(underline=enable)

    def set_color(self, color: ColorLike) -> Self:
        return self._update(color=to_color(color))

    def set_rotation(self, rotation: int) -> Self:
        if not -90 <= rotation <= 90:
            raise XlsxError.from_code(
                "ParameterError", f"Font rotation must be -90..90: {rotation}"
            )
        return self._update(rotation=rotation)


class ChartFormat(ValueHandle[ChartFormatSpec]):
    """Line and fill settings for a chart element.

    Only one fill kind is kept: setting a solid, pattern or gradient fill
    clears the others.
    """

    def __init__(self) -> None:
        self._init_value(ChartFormatSpec())

    def set_line(self, line: ChartLine) -> Self:
        return self._update(line=line.snapshot(), no_line=False)

    def set_no_line(self) -> Self:
        return self._update(line=None, no_line=True)

    def set_solid_fill(self, fill: ChartSolidFill) -> Self:
        return self._update(
            solid_fill=fill.snapshot(),
            pattern_fill=None,
            gradient_fill=None,
            no_fill=False,
        )

    def set_pattern_fill(self, fill: ChartPatternFill) -> Self:
        return self._update(
            solid_fill=None,
            pattern_fill=fill.snapshot(),
            gradient_fill=None,
            no_fill=False,
        )

    def set_gradient_fill(self, fill: ChartGradientFill) -> Self:
        return self._update(
            solid_fill=None,
            pattern_fill=None,
            gradient_fill=fill.snapshot(),
            no_fill=False,
        )

    def set_no_fill(self) -> Self:
        return self._update(
            solid_fill=None, pattern_fill=None, gradient_fill=None, no_fill=True
        )


class ChartMarker(ValueHandle[MarkerSpec]):
    def __init__(self) -> None:
        self._init_value(MarkerSpec())

    def set_type(self, marker_type: MarkerType) -> Self:
        return self._update(marker_type=marker_type)

    def set_none(self) -> Self:
        return self._update(marker_type="none")

    def set_automatic(self) -> Self:
        return self._update(marker_type="automatic")

    def set_size(self, size: int) -> Self:
        if not 2 <= size <= 72:
            raise XlsxError.from_code(
                "ParameterError", f"Marker size must be 2..72: {size}"
            )
        return self._update(size=size)

    def set_format(self, format: ChartFormat) -> Self:
        return self._update(format=format.snapshot())


class ChartDataLabel(ValueHandle[DataLabelSpec]):
    def __init__(self) -> None:
        self._init_value(DataLabelSpec())

    def show_value(self, enable: bool = True) -> Self:
        return self._update(show_value=enable)

    def show_category_name(self, enable: bool = True) -> Self:
        return self._update(show_category_name=enable)

    def show_series_name(self, enable: bool = True) -> Self:
        return self._update(show_series_name=enable)

    def show_percentage(self, enable: bool = True) -> Self:
        return self._update(show_percentage=enable)

    def show_leader_lines(self, enable: bool = True) -> Self:
        return self._update(show_leader_lines=enable)

    def set_position(self, position: DataLabelPositionType) -> Self:
        return self._update(position=position)

    def set_num_format(self, num_format: str) -> Self:
        return self._update(num_format=num_format)

    def set_font(self, font: ChartFont) -> Self:
        return self._update(font=font.snapshot())

    def set_format(self, format: ChartFormat) -> Self:
        return self._update(format=format.snapshot())


class ChartPoint(ValueHandle[PointSpec]):
    """Formatting for a single data point, e.g. one pie slice."""

    def __init__(self) -> None:
        self._init_value(PointSpec())

    def set_format(self, format: ChartFormat) -> Self:
        return self._update(format=format.snapshot())


class ChartLayout(ValueHandle[LayoutSpec]):
    def __init__(self) -> None:
        self._init_value(LayoutSpec())

    def set_offset(self, x: float, y: float) -> Self:
        return self._update(x=_fraction(x), y=_fraction(y))

    def set_dimensions(self, width: float, height: float) -> Self:
        return self._update(width=_fraction(width), height=_fraction(height))


def _fraction(value: float) -> float:
    if not 0.0 <= value <= 1.0:
        raise XlsxError.from_code(
            "ParameterError", f"Layout values are fractions in 0..1: {value}"
        )
    return float(value)
