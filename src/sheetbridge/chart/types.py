from __future__ import annotations

from typing import Final, Literal

ChartType = Literal[
    "area",
    "areaStacked",
    "areaPercentStacked",
    "bar",
    "barStacked",
    "barPercentStacked",
    "column",
    "columnStacked",
    "columnPercentStacked",
    "doughnut",
    "line",
    "lineStacked",
    "linePercentStacked",
    "pie",
    "radar",
    "radarWithMarkers",
    "radarFilled",
    "scatter",
    "scatterStraight",
    "scatterStraightWithMarkers",
    "scatterSmooth",
    "scatterSmoothWithMarkers",
    "stock",
]
ChartFamily = Literal[
    "area", "bar", "column", "doughnut", "line", "pie", "radar", "scatter", "stock"
]

# Ordered (chart_type, family, variant) triples. The variant is the openpyxl
# grouping for area/bar/column/line, the radar style for radar and the
# line/marker/smooth combination for scatter.
_CHART_TYPE_ENTRIES: Final[tuple[tuple[ChartType, ChartFamily, str], ...]] = (
    ("area", "area", "standard"),
    ("areaStacked", "area", "stacked"),
    ("areaPercentStacked", "area", "percentStacked"),
    ("bar", "bar", "clustered"),
    ("barStacked", "bar", "stacked"),
    ("barPercentStacked", "bar", "percentStacked"),
    ("column", "column", "clustered"),
    ("columnStacked", "column", "stacked"),
    ("columnPercentStacked", "column", "percentStacked"),
    ("doughnut", "doughnut", "standard"),
    ("line", "line", "standard"),
    ("lineStacked", "line", "stacked"),
    ("linePercentStacked", "line", "percentStacked"),
    ("pie", "pie", "standard"),
    ("radar", "radar", "standard"),
    ("radarWithMarkers", "radar", "marker"),
    ("radarFilled", "radar", "filled"),
    ("scatter", "scatter", "markers"),
    ("scatterStraight", "scatter", "lines"),
    ("scatterStraightWithMarkers", "scatter", "linesMarkers"),
    ("scatterSmooth", "scatter", "smooth"),
    ("scatterSmoothWithMarkers", "scatter", "smoothMarkers"),
    ("stock", "stock", "standard"),
)

SUPPORTED_CHART_TYPES: Final[tuple[ChartType, ...]] = tuple(
    entry[0] for entry in _CHART_TYPE_ENTRIES
)
CHART_TYPE_TO_FAMILY: Final[dict[ChartType, ChartFamily]] = {
    name: family for name, family, _ in _CHART_TYPE_ENTRIES
}
CHART_TYPE_TO_VARIANT: Final[dict[ChartType, str]] = {
    name: variant for name, _, variant in _CHART_TYPE_ENTRIES
}

CHART_TYPE_ALIASES: Final[dict[str, ChartType]] = {
    "donut": "doughnut",
}

_LOWER_TO_CHART_TYPE: Final[dict[str, ChartType]] = {
    name.lower(): name for name in SUPPORTED_CHART_TYPES
}
SUPPORTED_CHART_TYPES_CSV: Final[str] = ", ".join(SUPPORTED_CHART_TYPES)

# Families drawn without category/value axes.
AXISLESS_FAMILIES: Final[frozenset[ChartFamily]] = frozenset({"pie", "doughnut"})


def normalize_chart_type(chart_type: str) -> ChartType | None:
    """Normalize chart type input to a canonical key.

    Args:
        chart_type: Raw chart type value, case-insensitive.

    Returns:
        Canonical chart type key when supported; otherwise ``None``.
    """
    candidate = chart_type.strip()
    alias = CHART_TYPE_ALIASES.get(candidate.lower())
    if alias is not None:
        return alias
    return _LOWER_TO_CHART_TYPE.get(candidate.lower())


def chart_family(chart_type: ChartType) -> ChartFamily:
    return CHART_TYPE_TO_FAMILY[chart_type]
