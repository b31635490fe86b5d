from __future__ import annotations

from .chart import (
    AxisSpec,
    Chart,
    ChartAxis,
    ChartLegend,
    ChartSpec,
    ChartTitle,
    LegendSpec,
    TitleSpec,
)
from .formatting import (
    ChartDataLabel,
    ChartFont,
    ChartFormat,
    ChartGradientFill,
    ChartGradientStop,
    ChartLayout,
    ChartLine,
    ChartMarker,
    ChartPatternFill,
    ChartPoint,
    ChartSolidFill,
)
from .range import ChartRange
from .series import ChartSeries, SeriesSpec
from .types import ChartType, SUPPORTED_CHART_TYPES, normalize_chart_type

__all__ = [
    "AxisSpec",
    "Chart",
    "ChartAxis",
    "ChartDataLabel",
    "ChartFont",
    "ChartFormat",
    "ChartGradientFill",
    "ChartGradientStop",
    "ChartLayout",
    "ChartLegend",
    "ChartLine",
    "ChartMarker",
    "ChartPatternFill",
    "ChartPoint",
    "ChartRange",
    "ChartSeries",
    "ChartSolidFill",
    "ChartSpec",
    "ChartTitle",
    "ChartType",
    "LegendSpec",
    "SUPPORTED_CHART_TYPES",
    "SeriesSpec",
    "TitleSpec",
    "normalize_chart_type",
]
