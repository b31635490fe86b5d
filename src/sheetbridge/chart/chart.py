"""Chart handle and its locator handles (title, axes, legend, embedded series).

A ``Chart`` owns one ``SharedValue[ChartSpec]``. ``title()``, ``x_axis()`` and
friends return handles that project a nested part of that value through a
``SharedField``; each of their setters takes the chart's lock once and stores
a new ``ChartSpec``.

Inserting a chart into a worksheet renders the current value into fresh
openpyxl objects. The ``Chart`` handle stays usable afterwards, but its later
changes do not reach charts already inserted.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict
from typing_extensions import Self

from ..errors import XlsxError
from ..sync import SharedField, ValueHandle
from ..types import AxisLabelPositionType, AxisTickMarkType, LegendPositionType
from .formatting import (
    ChartFont,
    ChartFormat,
    ChartFormatSpec,
    ChartLayout,
    ChartLine,
    FontSpec,
    LayoutSpec,
    LineSpec,
)
from .range import ChartRange, to_chart_range
from .series import ChartSeries, SeriesSpec
from .types import ChartType, SUPPORTED_CHART_TYPES_CSV, normalize_chart_type

AxisSelector = Literal["x", "y", "x2", "y2"]

DEFAULT_CHART_WIDTH = 480
DEFAULT_CHART_HEIGHT = 288


class TitleSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str | None = None
    name_range: ChartRange | None = None
    font: FontSpec | None = None
    format: ChartFormatSpec | None = None
    layout: LayoutSpec | None = None
    overlay: bool = False
    hidden: bool = False


class AxisSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: TitleSpec = TitleSpec()
    min: float | None = None
    max: float | None = None
    major_unit: float | None = None
    minor_unit: float | None = None
    reverse: bool = False
    log_base: float | None = None
    num_format: str | None = None
    major_gridlines: bool | None = None
    major_gridlines_line: LineSpec | None = None
    minor_gridlines: bool = False
    major_tick_mark: AxisTickMarkType | None = None
    minor_tick_mark: AxisTickMarkType | None = None
    label_position: AxisLabelPositionType | None = None
    font: FontSpec | None = None
    format: ChartFormatSpec | None = None
    hidden: bool = False


class LegendSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    position: LegendPositionType = "right"
    hidden: bool = False
    overlay: bool = False
    font: FontSpec | None = None
    format: ChartFormatSpec | None = None
    layout: LayoutSpec | None = None
    deleted_entries: tuple[int, ...] = ()


class ChartSpec(BaseModel):
    """Frozen chart value."""

    model_config = ConfigDict(frozen=True)

    chart_type: ChartType
    series: tuple[SeriesSpec, ...] = ()
    title: TitleSpec = TitleSpec()
    x_axis: AxisSpec = AxisSpec()
    y_axis: AxisSpec = AxisSpec()
    x2_axis: AxisSpec = AxisSpec()
    y2_axis: AxisSpec = AxisSpec()
    legend: LegendSpec = LegendSpec()
    name: str | None = None
    alt_text: str | None = None
    width: int = DEFAULT_CHART_WIDTH
    height: int = DEFAULT_CHART_HEIGHT
    style: int = 2
    combined: ChartSpec | None = None

    def validate_for_insert(self) -> None:
        """Raise ``ChartError`` when the chart cannot be drawn."""
        for chart in (self, self.combined):
            if chart is None:
                continue
            if not chart.series:
                raise XlsxError.from_code(
                    "ChartError",
                    f"Chart of type {chart.chart_type} must contain at least one series.",
                )
            for index, series in enumerate(chart.series):
                if series.values is None:
                    raise XlsxError.from_code(
                        "ChartError",
                        f"Series {index} of the {chart.chart_type} chart has no values.",
                        hint="Call ChartSeries.set_values().",
                    )


def _axis_field(selector: AxisSelector) -> str:
    return f"{selector}_axis"


class ChartTitle(ValueHandle[TitleSpec]):
    """Locator for a chart title (or an axis title)."""

    def set_name(self, name: str | ChartRange) -> Self:
        """Set literal title text, or a ``ChartRange``/``=Sheet1!$A$1`` reference."""
        if isinstance(name, ChartRange):
            return self._update(name=None, name_range=name)
        if name.startswith("="):
            return self._update(name=None, name_range=to_chart_range(name[1:]))
        return self._update(name=name, name_range=None)

    def set_font(self, font: ChartFont) -> Self:
        return self._update(font=font.snapshot())

    def set_format(self, format: ChartFormat) -> Self:
        return self._update(format=format.snapshot())

    def set_layout(self, layout: ChartLayout) -> Self:
        return self._update(layout=layout.snapshot())

    def set_overlay(self, enable: bool = True) -> Self:
        return self._update(overlay=enable)

    def set_hidden(self, enable: bool = True) -> Self:
        return self._update(hidden=enable)


class ChartAxis(ValueHandle[AxisSpec]):
    """Locator for one of the chart's four axes."""

    def title(self) -> ChartTitle:
        return ChartTitle._from_shared(
            SharedField(
                self._shared,
                lambda axis: axis.title,
                lambda axis, title: axis.model_copy(update={"title": title}),
            )
        )

    def set_name(self, name: str | ChartRange) -> Self:
        self.title().set_name(name)
        return self

    def set_name_font(self, font: ChartFont) -> Self:
        self.title().set_font(font)
        return self

    def set_min(self, value: float) -> Self:
        return self._update(min=float(value))

    def set_max(self, value: float) -> Self:
        return self._update(max=float(value))

    def set_major_unit(self, value: float) -> Self:
        return self._update(major_unit=float(value))

    def set_minor_unit(self, value: float) -> Self:
        return self._update(minor_unit=float(value))

    def set_reverse(self, enable: bool = True) -> Self:
        return self._update(reverse=enable)

    def set_log_base(self, base: float) -> Self:
        if not 2 <= base <= 1000:
            raise XlsxError.from_code(
                "ParameterError", f"Axis log base must be 2..1000: {base}"
            )
        return self._update(log_base=float(base))

    def set_num_format(self, num_format: str) -> Self:
        return self._update(num_format=num_format)

    def set_major_gridlines(self, enable: bool = True) -> Self:
        return self._update(major_gridlines=enable)

    def set_major_gridlines_line(self, line: ChartLine) -> Self:
        return self._update(major_gridlines=True, major_gridlines_line=line.snapshot())

    def set_minor_gridlines(self, enable: bool = True) -> Self:
        return self._update(minor_gridlines=enable)

    def set_major_tick_type(self, tick: AxisTickMarkType) -> Self:
        return self._update(major_tick_mark=tick)

    def set_minor_tick_type(self, tick: AxisTickMarkType) -> Self:
        return self._update(minor_tick_mark=tick)

    def set_label_position(self, position: AxisLabelPositionType) -> Self:
        return self._update(label_position=position)

    def set_font(self, font: ChartFont) -> Self:
        return self._update(font=font.snapshot())

    def set_format(self, format: ChartFormat) -> Self:
        return self._update(format=format.snapshot())

    def set_hidden(self, enable: bool = True) -> Self:
        return self._update(hidden=enable)


class ChartLegend(ValueHandle[LegendSpec]):
    def set_position(self, position: LegendPositionType) -> Self:
        return self._update(position=position)

    def set_hidden(self, enable: bool = True) -> Self:
        return self._update(hidden=enable)

    def set_overlay(self, enable: bool = True) -> Self:
        return self._update(overlay=enable)

    def set_font(self, font: ChartFont) -> Self:
        return self._update(font=font.snapshot())

    def set_format(self, format: ChartFormat) -> Self:
        return self._update(format=format.snapshot())

    def set_layout(self, layout: ChartLayout) -> Self:
        return self._update(layout=layout.snapshot())

    def delete_entries(self, entries: list[int]) -> Self:
        """Hide the legend entries at the given zero-based series indexes."""
        return self._update(deleted_entries=tuple(sorted(set(entries))))


class Chart(ValueHandle[ChartSpec]):
    """Chart handle.

    Mutators return the same handle, so ``copy.copy(chart)`` and the value
    returned by any setter alias one chart value. ``combine`` stores a
    snapshot of the other chart.
    """

    def __init__(self, chart_type: ChartType | str) -> None:
        normalized = normalize_chart_type(chart_type)
        if normalized is None:
            raise XlsxError.from_code(
                "ParameterError",
                f"Unsupported chart type: {chart_type}",
                hint=f"Supported types: {SUPPORTED_CHART_TYPES_CSV}",
            )
        self._init_value(ChartSpec(chart_type=normalized))

    @classmethod
    def new_area(cls) -> Chart:
        return cls("area")

    @classmethod
    def new_bar(cls) -> Chart:
        return cls("bar")

    @classmethod
    def new_column(cls) -> Chart:
        return cls("column")

    @classmethod
    def new_doughnut(cls) -> Chart:
        return cls("doughnut")

    @classmethod
    def new_line(cls) -> Chart:
        return cls("line")

    @classmethod
    def new_pie(cls) -> Chart:
        return cls("pie")

    @classmethod
    def new_radar(cls) -> Chart:
        return cls("radar")

    @classmethod
    def new_scatter(cls) -> Chart:
        return cls("scatter")

    @classmethod
    def new_stock(cls) -> Chart:
        return cls("stock")

    @property
    def chart_type(self) -> ChartType:
        return self.snapshot().chart_type

    def push_series(self, series: ChartSeries) -> Self:
        """Append a snapshot of ``series``."""
        value = series.snapshot()
        return self._transform(
            lambda chart: chart.model_copy(update={"series": (*chart.series, value)})
        )

    def add_series(self) -> ChartSeries:
        """Append an empty series and return a handle editing it in place."""
        stored = self._shared.replace(
            lambda chart: chart.model_copy(
                update={"series": (*chart.series, SeriesSpec())}
            )
        )
        return self.series_at(len(stored.series) - 1)

    def series_at(self, index: int) -> ChartSeries:
        """Return a handle editing the stored series at ``index``."""
        count = len(self.snapshot().series)
        if not 0 <= index < count:
            raise XlsxError.from_code(
                "ParameterError", f"Series index {index} out of range (0..{count - 1})."
            )
        return ChartSeries._from_shared(
            SharedField(
                self._shared,
                lambda chart: chart.series[index],
                lambda chart, series: chart.model_copy(
                    update={
                        "series": (
                            *chart.series[:index],
                            series,
                            *chart.series[index + 1 :],
                        )
                    }
                ),
            )
        )

    def title(self) -> ChartTitle:
        return ChartTitle._from_shared(
            SharedField(
                self._shared,
                lambda chart: chart.title,
                lambda chart, title: chart.model_copy(update={"title": title}),
            )
        )

    def _axis(self, selector: AxisSelector) -> ChartAxis:
        field = _axis_field(selector)
        return ChartAxis._from_shared(
            SharedField(
                self._shared,
                lambda chart: getattr(chart, field),
                lambda chart, axis: chart.model_copy(update={field: axis}),
            )
        )

    def x_axis(self) -> ChartAxis:
        return self._axis("x")

    def y_axis(self) -> ChartAxis:
        return self._axis("y")

    def x2_axis(self) -> ChartAxis:
        return self._axis("x2")

    def y2_axis(self) -> ChartAxis:
        return self._axis("y2")

    def legend(self) -> ChartLegend:
        return ChartLegend._from_shared(
            SharedField(
                self._shared,
                lambda chart: chart.legend,
                lambda chart, legend: chart.model_copy(update={"legend": legend}),
            )
        )

    def set_name(self, name: str) -> Self:
        return self._update(name=name)

    def set_alt_text(self, alt_text: str) -> Self:
        return self._update(alt_text=alt_text)

    def set_width(self, width: int) -> Self:
        """Set the chart width in pixels."""
        if width <= 0:
            raise XlsxError.from_code("ParameterError", f"Chart width must be positive: {width}")
        return self._update(width=width)

    def set_height(self, height: int) -> Self:
        """Set the chart height in pixels."""
        if height <= 0:
            raise XlsxError.from_code(
                "ParameterError", f"Chart height must be positive: {height}"
            )
        return self._update(height=height)

    def set_style(self, style: int) -> Self:
        """Set one of Excel's 48 built-in chart styles."""
        if not 1 <= style <= 48:
            raise XlsxError.from_code("ParameterError", f"Chart style must be 1..48: {style}")
        return self._update(style=style)

    def combine(self, other: Chart) -> Self:
        """Overlay ``other``'s series on this chart, e.g. a line over columns.

        The other chart is snapshotted first, so combining a chart with itself
        does not deadlock.
        """
        value = other.snapshot()
        if value.combined is not None:
            raise XlsxError.from_code(
                "ChartError", "A combined chart cannot itself contain a combined chart."
            )
        return self._update(combined=value)
