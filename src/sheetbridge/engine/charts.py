"""Render frozen ``ChartSpec`` values into openpyxl chart objects."""

from __future__ import annotations

import logging
from typing import Final

from openpyxl.chart import (
    AreaChart,
    BarChart,
    DoughnutChart,
    LineChart,
    PieChart,
    RadarChart,
    ScatterChart,
    StockChart,
)
from openpyxl.chart._chart import ChartBase
from openpyxl.chart.axis import ChartLines
from openpyxl.chart.data_source import (
    AxDataSource,
    NumDataSource,
    NumFmt,
    NumRef,
    StrRef,
)
from openpyxl.chart.label import DataLabelList
from openpyxl.chart.layout import Layout, ManualLayout
from openpyxl.chart.legend import LegendEntry
from openpyxl.chart.marker import DataPoint, Marker
from openpyxl.chart.series import Series, SeriesLabel, XYSeries
from openpyxl.chart.shapes import GraphicalProperties
from openpyxl.chart.text import RichText, Text
from openpyxl.chart.title import Title
from openpyxl.drawing.colors import ColorChoice
from openpyxl.drawing.fill import (
    GradientFillProperties,
    GradientStop,
    LinearShadeProperties,
    PathShadeProperties,
    PatternFillProperties,
)
from openpyxl.drawing.line import LineProperties
from openpyxl.drawing.text import (
    CharacterProperties,
    Font as DrawingFont,
    Paragraph,
    ParagraphProperties,
    RegularTextRun,
    RichTextProperties,
)

from ..chart.chart import AxisSpec, ChartSpec, LegendSpec, TitleSpec
from ..chart.formatting import (
    ChartFormatSpec,
    DataLabelSpec,
    FontSpec,
    LayoutSpec,
    LineSpec,
    MarkerSpec,
)
from ..chart.series import SeriesSpec
from ..chart.types import (
    AXISLESS_FAMILIES,
    CHART_TYPE_TO_VARIANT,
    ChartFamily,
    chart_family,
)
from ..color import Color
from ..errors import XlsxError
from ..utils import warn_once

logger = logging.getLogger(__name__)

_EMU_PER_POINT: Final[int] = 12_700
_SECONDARY_Y_AXIS_ID: Final[int] = 200
_DASH_TYPES: Final[dict[str, str]] = {
    "solid": "solid",
    "roundDot": "sysDot",
    "squareDot": "sysDash",
    "dash": "dash",
    "dashDot": "dashDot",
    "longDash": "lgDash",
    "longDashDot": "lgDashDot",
    "longDashDotDot": "lgDashDotDot",
}
_MARKER_SYMBOLS: Final[dict[str, str]] = {
    "automatic": "auto",
    "none": "none",
    "square": "square",
    "diamond": "diamond",
    "triangle": "triangle",
    "x": "x",
    "star": "star",
    "shortDash": "dash",
    "longDash": "dash",
    "circle": "circle",
    "plusSign": "plus",
}
_LABEL_POSITIONS: Final[dict[str, str]] = {
    "center": "ctr",
    "right": "r",
    "left": "l",
    "above": "t",
    "below": "b",
    "insideBase": "inBase",
    "insideEnd": "inEnd",
    "outsideEnd": "outEnd",
    "bestFit": "bestFit",
}
_LEGEND_POSITIONS: Final[dict[str, str]] = {
    "right": "r",
    "left": "l",
    "top": "t",
    "bottom": "b",
    "topRight": "tr",
}
_TICK_MARKS: Final[dict[str, str | None]] = {
    "none": None,
    "inside": "in",
    "outside": "out",
    "cross": "cross",
}
_GRADIENT_PATHS: Final[dict[str, str]] = {
    "radial": "circle",
    "rectangular": "rect",
    "path": "shape",
}
_MARKER_FAMILIES: Final[frozenset[ChartFamily]] = frozenset(
    {"line", "scatter", "radar", "stock"}
)


def pixels_to_cm(pixels: int) -> float:
    return pixels * 2.54 / 96


def render_chart(spec: ChartSpec) -> ChartBase:
    """Build an openpyxl chart for ``spec``.

    Args:
        spec: Chart value. It must pass ``ChartSpec.validate_for_insert``.

    Returns:
        A new openpyxl chart. Secondary-axis series and the combined chart are
        rendered as extra layers merged into it with ``+=``.
    """
    spec.validate_for_insert()
    _warn_unsupported(spec)
    layers = _render_layers(spec, spec.y2_axis)
    if spec.combined is not None:
        layers += _render_layers(spec.combined, spec.y2_axis, overlay=True)
    chart = layers[0]
    chart.width = pixels_to_cm(spec.width)
    chart.height = pixels_to_cm(spec.height)
    chart.style = spec.style
    _apply_title(chart, spec.title)
    _apply_legend(chart, spec.legend)
    # openpyxl only writes layers added directly to the outer chart.
    for layer in layers[1:]:
        chart += layer
    logger.debug(
        "Rendered %s chart with %d layers and %d series.",
        spec.chart_type,
        len(layers),
        len(spec.series),
    )
    return chart


def _warn_unsupported(spec: ChartSpec) -> None:
    if spec.name is not None:
        warn_once("chart-name", "openpyxl does not write chart names; name ignored.")
    if spec.alt_text is not None:
        warn_once("chart-alt-text", "openpyxl does not write chart alt text; ignored.")


def _render_layers(
    spec: ChartSpec, y2_axis: AxisSpec, *, overlay: bool = False
) -> list[ChartBase]:
    """Render one chart value as a primary-axis layer and a secondary-axis layer.

    An overlay shares the primary axes of the chart it is combined into, and
    its secondary-axis series use that chart's ``y2_axis``. A layer without
    series is omitted, except the primary layer of a non-overlay chart.
    """
    family = chart_family(spec.chart_type)
    variant = CHART_TYPE_TO_VARIANT[spec.chart_type]
    primary_series = [series for series in spec.series if not series.secondary_axis]
    secondary_series = [series for series in spec.series if series.secondary_axis]
    if family in AXISLESS_FAMILIES or (not primary_series and not overlay):
        primary_series, secondary_series = primary_series + secondary_series, []
    layers: list[ChartBase] = []
    if primary_series or not overlay:
        chart = _new_chart(family, variant)
        for series in primary_series:
            chart.series.append(_build_series(series, family, variant))
        if family not in AXISLESS_FAMILIES and not overlay:
            _apply_axis(chart.x_axis, spec.x_axis)
            _apply_axis(chart.y_axis, spec.y_axis)
        layers.append(chart)
    if secondary_series:
        secondary = _new_chart(family, variant)
        for series in secondary_series:
            secondary.series.append(_build_series(series, family, variant))
        secondary.y_axis.axId = _SECONDARY_Y_AXIS_ID
        secondary.y_axis.crosses = "max"
        _apply_axis(secondary.y_axis, y2_axis)
        layers.append(secondary)
    return layers


def _new_chart(family: ChartFamily, variant: str) -> ChartBase:
    chart: ChartBase
    if family == "area":
        chart = AreaChart()
        chart.grouping = variant
    elif family in ("bar", "column"):
        chart = BarChart()
        chart.type = "bar" if family == "bar" else "col"
        chart.grouping = variant
        if variant != "clustered":
            chart.overlap = 100
    elif family == "line":
        chart = LineChart()
        chart.grouping = variant
    elif family == "pie":
        chart = PieChart()
    elif family == "doughnut":
        chart = DoughnutChart()
    elif family == "radar":
        chart = RadarChart()
        chart.type = variant
    elif family == "scatter":
        chart = ScatterChart()
        chart.scatterStyle = "lineMarker"
    else:
        chart = StockChart()
        chart.hiLowLines = ChartLines()
    return chart


def _build_series(spec: SeriesSpec, family: ChartFamily, variant: str) -> Series:
    if spec.values is None:
        raise XlsxError.from_code("ChartError", "Chart series must have a values range.")
    values = NumDataSource(numRef=NumRef(f=spec.values.formula()))
    series: Series
    if family == "scatter":
        series = XYSeries()
        series.yVal = values
        if spec.categories is not None:
            series.xVal = AxDataSource(numRef=NumRef(f=spec.categories.formula()))
    else:
        series = Series()
        series.val = values
        if spec.categories is not None:
            series.cat = AxDataSource(numRef=NumRef(f=spec.categories.formula()))
    if spec.name is not None:
        series.tx = SeriesLabel(v=spec.name)
    elif spec.name_range is not None:
        series.tx = SeriesLabel(strRef=StrRef(f=spec.name_range.formula()))

    graphical = _graphical_properties(spec.format)
    if graphical is None and family in ("scatter", "stock"):
        if family == "stock" or variant == "markers":
            graphical = GraphicalProperties(ln=LineProperties(noFill=True))
    if graphical is not None:
        series.spPr = graphical

    marker = spec.marker
    if marker is None and family == "scatter" and variant in ("lines", "smooth"):
        marker = MarkerSpec(marker_type="none")
    if marker is not None and family in _MARKER_FAMILIES:
        series.marker = _build_marker(marker)

    if spec.data_label is not None:
        series.dLbls = _build_data_labels(spec.data_label)
    points = [
        DataPoint(idx=index, spPr=_graphical_properties(point.format))
        for index, point in enumerate(spec.points)
        if point is not None and point.format is not None
    ]
    if points:
        series.dPt = points

    smooth = spec.smooth
    if smooth is None and family == "scatter":
        smooth = variant.startswith("smooth")
    if smooth is not None and family in ("line", "scatter"):
        series.smooth = smooth
    if spec.invert_if_negative and family in ("bar", "column"):
        series.invertIfNegative = True
    return series


def _color_choice(color: Color | None) -> ColorChoice | None:
    if color is None:
        return None
    return ColorChoice(srgbClr=color.rgb)


def _line_properties(line: LineSpec) -> LineProperties:
    if line.hidden:
        return LineProperties(noFill=True)
    properties = LineProperties()
    if line.color is not None:
        properties.solidFill = line.color.rgb
    if line.width is not None:
        properties.w = int(line.width * _EMU_PER_POINT)
    if line.dash_type is not None:
        properties.prstDash = _DASH_TYPES[line.dash_type]
    if line.transparency:
        warn_once("chart-transparency", "openpyxl does not write chart transparency.")
    return properties


def _graphical_properties(spec: ChartFormatSpec | None) -> GraphicalProperties | None:
    if spec is None:
        return None
    properties = GraphicalProperties()
    if spec.no_fill:
        properties.noFill = True
    elif spec.solid_fill is not None:
        if spec.solid_fill.color is not None:
            properties.solidFill = spec.solid_fill.color.rgb
        if spec.solid_fill.transparency:
            warn_once("chart-transparency", "openpyxl does not write chart transparency.")
    elif spec.pattern_fill is not None:
        pattern = spec.pattern_fill
        properties.pattFill = PatternFillProperties(
            prst=pattern.pattern,
            fgClr=_color_choice(pattern.foreground_color),
            bgClr=_color_choice(pattern.background_color),
        )
    elif spec.gradient_fill is not None:
        gradient = spec.gradient_fill
        fill = GradientFillProperties(
            gsLst=[
                GradientStop(pos=stop.position * 1000, srgbClr=stop.color.rgb)
                for stop in gradient.stops
            ]
        )
        if gradient.gradient_type == "linear":
            fill.lin = LinearShadeProperties(ang=int(gradient.angle * 60_000), scaled=False)
        else:
            fill.path = PathShadeProperties(path=_GRADIENT_PATHS[gradient.gradient_type])
        properties.gradFill = fill
    if spec.no_line:
        properties.ln = LineProperties(noFill=True)
    elif spec.line is not None:
        properties.ln = _line_properties(spec.line)
    return properties


def _build_marker(spec: MarkerSpec) -> Marker:
    marker = Marker(symbol=_MARKER_SYMBOLS[spec.marker_type])
    if spec.size is not None:
        marker.size = spec.size
    graphical = _graphical_properties(spec.format)
    if graphical is not None:
        marker.spPr = graphical
    return marker


def _build_data_labels(spec: DataLabelSpec) -> DataLabelList:
    labels = DataLabelList()
    labels.showVal = spec.show_value
    labels.showCatName = spec.show_category_name
    labels.showSerName = spec.show_series_name
    labels.showPercent = spec.show_percentage
    labels.showLeaderLines = spec.show_leader_lines
    labels.showLegendKey = False
    if not spec.shows_anything():
        labels.showVal = True
    if spec.position is not None:
        labels.dLblPos = _LABEL_POSITIONS[spec.position]
    if spec.num_format is not None:
        labels.numFmt = spec.num_format
    if spec.font is not None:
        labels.txPr = _rich_text_properties(spec.font)
    graphical = _graphical_properties(spec.format)
    if graphical is not None:
        labels.spPr = graphical
    return labels


def _character_properties(font: FontSpec | None) -> CharacterProperties:
    properties = CharacterProperties()
    if font is None:
        return properties
    if font.size is not None:
        properties.sz = int(font.size * 100)
    if font.bold is not None:
        properties.b = font.bold
    if font.italic is not None:
        properties.i = font.italic
    if font.underline:
        properties.u = "sng"
    if font.color is not None:
        properties.solidFill = _color_choice(font.color)
    if font.name is not None:
        properties.latin = DrawingFont(typeface=font.name)
    return properties


def _body_properties(font: FontSpec | None) -> RichTextProperties:
    if font is not None and font.rotation is not None:
        return RichTextProperties(rot=font.rotation * 60_000, vert="horz")
    return RichTextProperties()


def _rich_text_properties(font: FontSpec) -> RichText:
    characters = _character_properties(font)
    return RichText(
        bodyPr=_body_properties(font),
        p=[Paragraph(pPr=ParagraphProperties(defRPr=characters), endParaRPr=characters)],
    )


def _manual_layout(spec: LayoutSpec | None) -> Layout | None:
    if spec is None:
        return None
    return Layout(
        manualLayout=ManualLayout(
            x=spec.x,
            y=spec.y,
            w=spec.width,
            h=spec.height,
            xMode="edge",
            yMode="edge",
        )
    )


def _build_title(spec: TitleSpec) -> Title | None:
    if spec.hidden:
        return None
    if spec.name_range is not None:
        text = Text(strRef=StrRef(f=spec.name_range.formula()))
    elif spec.name is not None:
        characters = _character_properties(spec.font)
        paragraph = Paragraph(
            pPr=ParagraphProperties(defRPr=characters),
            r=[RegularTextRun(rPr=characters, t=spec.name)],
        )
        text = Text(rich=RichText(bodyPr=_body_properties(spec.font), p=[paragraph]))
    else:
        return None
    title = Title(tx=text, overlay=spec.overlay)
    layout = _manual_layout(spec.layout)
    if layout is not None:
        title.layout = layout
    graphical = _graphical_properties(spec.format)
    if graphical is not None:
        title.spPr = graphical
    return title


def _apply_title(chart: ChartBase, spec: TitleSpec) -> None:
    title = _build_title(spec)
    if title is not None:
        chart.title = title


def _apply_axis(axis: object, spec: AxisSpec) -> None:
    axis.delete = spec.hidden  # type: ignore[attr-defined]
    title = _build_title(spec.title)
    if title is not None:
        axis.title = title  # type: ignore[attr-defined]
    scaling = axis.scaling  # type: ignore[attr-defined]
    if spec.min is not None:
        scaling.min = spec.min
    if spec.max is not None:
        scaling.max = spec.max
    if spec.reverse:
        scaling.orientation = "maxMin"
    if spec.log_base is not None:
        scaling.logBase = spec.log_base
    if spec.major_unit is not None and hasattr(axis, "majorUnit"):
        axis.majorUnit = spec.major_unit
    if spec.minor_unit is not None and hasattr(axis, "minorUnit"):
        axis.minorUnit = spec.minor_unit
    if spec.num_format is not None:
        axis.numFmt = NumFmt(formatCode=spec.num_format, sourceLinked=False)  # type: ignore[attr-defined]
    if spec.major_gridlines is not None:
        if spec.major_gridlines:
            gridlines = ChartLines()
            if spec.major_gridlines_line is not None:
                gridlines.spPr = GraphicalProperties(
                    ln=_line_properties(spec.major_gridlines_line)
                )
            axis.majorGridlines = gridlines  # type: ignore[attr-defined]
        else:
            axis.majorGridlines = None  # type: ignore[attr-defined]
    if spec.minor_gridlines:
        axis.minorGridlines = ChartLines()  # type: ignore[attr-defined]
    if spec.major_tick_mark is not None:
        axis.majorTickMark = _TICK_MARKS[spec.major_tick_mark]  # type: ignore[attr-defined]
    if spec.minor_tick_mark is not None:
        axis.minorTickMark = _TICK_MARKS[spec.minor_tick_mark]  # type: ignore[attr-defined]
    if spec.label_position is not None:
        if spec.label_position == "none":
            warn_once(
                "axis-label-none", "openpyxl cannot write hidden axis labels; ignored."
            )
        else:
            axis.tickLblPos = spec.label_position  # type: ignore[attr-defined]
    if spec.font is not None:
        axis.txPr = _rich_text_properties(spec.font)  # type: ignore[attr-defined]
    graphical = _graphical_properties(spec.format)
    if graphical is not None:
        axis.spPr = graphical  # type: ignore[attr-defined]


def _apply_legend(chart: ChartBase, spec: LegendSpec) -> None:
    if spec.hidden:
        chart.legend = None
        return
    legend = chart.legend
    legend.position = _LEGEND_POSITIONS[spec.position]
    legend.overlay = spec.overlay
    if spec.font is not None:
        legend.txPr = _rich_text_properties(spec.font)
    graphical = _graphical_properties(spec.format)
    if graphical is not None:
        legend.spPr = graphical
    layout = _manual_layout(spec.layout)
    if layout is not None:
        legend.layout = layout
    if spec.deleted_entries:
        legend.legendEntry = [
            LegendEntry(idx=index, delete=True) for index in spec.deleted_entries
        ]
