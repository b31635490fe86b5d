from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from typing_extensions import Self

from ..sync import ValueHandle
from .formatting import (
    ChartDataLabel,
    ChartFormat,
    ChartFormatSpec,
    ChartMarker,
    ChartPoint,
    DataLabelSpec,
    MarkerSpec,
    PointSpec,
)
from .range import ChartRange, ChartRangeLike, to_chart_range


class SeriesSpec(BaseModel):
    """Frozen chart series value."""

    model_config = ConfigDict(frozen=True)

    values: ChartRange | None = None
    categories: ChartRange | None = None
    name: str | None = None
    name_range: ChartRange | None = None
    format: ChartFormatSpec | None = None
    marker: MarkerSpec | None = None
    data_label: DataLabelSpec | None = None
    points: tuple[PointSpec | None, ...] = ()
    smooth: bool | None = None
    secondary_axis: bool = False
    invert_if_negative: bool = False


class ChartSeries(ValueHandle[SeriesSpec]):
    """A chart data series.

    A series built with ``ChartSeries()`` is independent: ``Chart.push_series``
    stores a snapshot, and later changes to this handle do not reach the chart.
    ``Chart.add_series`` instead returns a series handle that edits the value
    stored inside the chart.
    """

    def __init__(self) -> None:
        self._init_value(SeriesSpec())

    def set_values(self, values: ChartRangeLike) -> Self:
        return self._update(values=to_chart_range(values))

    def set_categories(self, categories: ChartRangeLike) -> Self:
        return self._update(categories=to_chart_range(categories))

    def set_name(self, name: str | ChartRange) -> Self:
        """Set the series name from literal text or a ``ChartRange``.

        Strings starting with ``=`` are read as a cell reference.
        """
        if isinstance(name, ChartRange):
            return self._update(name=None, name_range=name)
        if name.startswith("="):
            return self._update(name=None, name_range=to_chart_range(name[1:]))
        return self._update(name=name, name_range=None)

    def set_format(self, format: ChartFormat) -> Self:
        return self._update(format=format.snapshot())

    def set_marker(self, marker: ChartMarker) -> Self:
        return self._update(marker=marker.snapshot())

    def set_data_label(self, data_label: ChartDataLabel) -> Self:
        return self._update(data_label=data_label.snapshot())

    def set_points(self, points: list[ChartPoint | None]) -> Self:
        """Format individual points in order; ``None`` keeps a point's default."""
        return self._update(
            points=tuple(point.snapshot() if point is not None else None for point in points)
        )

    def set_smooth(self, enable: bool = True) -> Self:
        return self._update(smooth=enable)

    def set_secondary_axis(self, enable: bool = True) -> Self:
        return self._update(secondary_axis=enable)

    def set_invert_if_negative(self, enable: bool = True) -> Self:
        return self._update(invert_if_negative=enable)
