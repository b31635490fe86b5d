from __future__ import annotations

from collections.abc import Callable
import copy

from openpyxl.workbook.workbook import Workbook as OpenpyxlWorkbook
import pytest

from sheetbridge import Chart, ChartRange, ChartSeries, Workbook, Worksheet, XlsxError
from sheetbridge.chart import normalize_chart_type
from sheetbridge.engine.charts import render_chart


def _series(values: str = "Sheet1!$B$1:$B$5") -> ChartSeries:
    return (
        ChartSeries()
        .set_values(values)
        .set_categories("Sheet1!$A$1:$A$5")
        .set_name("Sales")
    )


def test_push_series_stores_a_snapshot() -> None:
    series = _series()
    chart = Chart.new_column().push_series(series)

    series.set_name("Changed").set_values("Sheet1!$C$1:$C$5")

    (stored,) = chart.snapshot().series
    assert stored.name == "Sales"
    assert stored.values is not None
    assert stored.values.formula() == "Sheet1!$B$1:$B$5"


def test_add_series_edits_the_chart_in_place() -> None:
    chart = Chart.new_line()
    series = chart.add_series()
    series.set_values("Sheet1!$A$1:$A$3").set_smooth()

    (stored,) = chart.snapshot().series
    assert stored.values is not None
    assert stored.values.point_count == 3
    assert stored.smooth is True
    assert chart.series_at(0).snapshot() == stored


def test_series_at_out_of_range() -> None:
    with pytest.raises(XlsxError) as excinfo:
        Chart.new_pie().series_at(0)
    assert excinfo.value.code == "ParameterError"


def test_locators_write_through_to_chart() -> None:
    chart = Chart.new_column()
    chart.title().set_name("Quarterly")
    chart.y_axis().set_min(0).set_max(100).title().set_name("Units")
    chart.legend().set_position("bottom")

    spec = chart.snapshot()
    assert spec.title.name == "Quarterly"
    assert (spec.y_axis.min, spec.y_axis.max) == (0, 100)
    assert spec.y_axis.title.name == "Units"
    assert spec.x_axis.min is None
    assert spec.legend.position == "bottom"


def test_chart_copy_aliases_and_deepcopy_detaches() -> None:
    chart = Chart.new_bar()
    alias = copy.copy(chart)
    detached = copy.deepcopy(chart)

    alias.set_width(640)
    detached.set_width(320)

    assert chart.snapshot().width == 640
    assert detached.snapshot().width == 320


def test_title_accepts_cell_reference() -> None:
    chart = Chart.new_pie()
    chart.title().set_name("='My Data'!$A$1")

    title = chart.snapshot().title
    assert title.name is None
    assert title.name_range == ChartRange.new_from_range("My Data", 0, 0, 0, 0)


def test_unknown_chart_type_is_rejected() -> None:
    with pytest.raises(XlsxError) as excinfo:
        Chart("funnel")
    assert excinfo.value.code == "ParameterError"
    assert excinfo.value.detail.hint is not None


@pytest.mark.parametrize(
    ("value", "message"),
    [
        ("A1:A5", "sheet name"),
        ("Sheet1!nonsense", "Invalid chart range"),
    ],
)
def test_chart_range_parse_errors(value: str, message: str) -> None:
    with pytest.raises(XlsxError, match=message):
        ChartRange.new_from_string(value)


def test_chart_range_bounds_are_checked() -> None:
    with pytest.raises(XlsxError) as excinfo:
        ChartRange.new_from_range("Sheet1", 5, 0, 1, 0)
    assert excinfo.value.code == "RowColumnOrderError"


def test_chart_without_series_cannot_be_inserted(sheet: Worksheet) -> None:
    with pytest.raises(XlsxError) as excinfo:
        sheet.insert_chart(0, 3, Chart.new_column())
    assert excinfo.value.code == "ChartError"


def test_series_without_values_cannot_be_inserted(sheet: Worksheet) -> None:
    chart = Chart.new_column()
    chart.add_series().set_name("Empty")
    with pytest.raises(XlsxError) as excinfo:
        sheet.insert_chart(0, 3, chart)
    assert excinfo.value.code == "ChartError"


def test_render_applies_series_and_axes() -> None:
    chart = Chart.new_column().push_series(_series())
    chart.y_axis().set_min(0).set_max(50).set_reverse()

    rendered = render_chart(chart.snapshot())

    (series,) = rendered.series
    assert series.val.numRef.f == "Sheet1!$B$1:$B$5"
    assert series.cat.numRef.f == "Sheet1!$A$1:$A$5"
    assert series.tx.v == "Sales"
    assert rendered.type == "col"
    assert rendered.y_axis.scaling.min == 0
    assert rendered.y_axis.scaling.max == 50
    assert rendered.y_axis.scaling.orientation == "maxMin"


def test_combine_overlays_second_chart() -> None:
    columns = Chart.new_column().push_series(_series())
    line = Chart.new_line().push_series(_series("Sheet1!$C$1:$C$5"))

    columns.combine(line)
    line.set_width(100)

    spec = columns.snapshot()
    assert spec.combined is not None
    assert spec.combined.width != 100
    rendered = render_chart(spec)
    assert len(rendered._charts) == 2


def test_combined_chart_cannot_nest() -> None:
    inner = Chart.new_line().push_series(_series())
    middle = Chart.new_column().push_series(_series()).combine(inner)
    with pytest.raises(XlsxError) as excinfo:
        Chart.new_area().combine(middle)
    assert excinfo.value.code == "ChartError"


def test_inserted_chart_ignores_later_changes(
    workbook: Workbook,
    sheet: Worksheet,
    reopen: Callable[[Workbook], OpenpyxlWorkbook],
) -> None:
    sheet.write_column(0, 0, ["a", "b", "c", "d", "e"])
    sheet.write_column(0, 1, [1, 2, 3, 4, 5])
    chart = Chart.new_column().push_series(_series())
    sheet.insert_chart(0, 3, chart)

    chart.series_at(0).set_values("Sheet1!$C$1:$C$5")
    chart.push_series(_series("Sheet1!$D$1:$D$5"))

    loaded = reopen(workbook).active
    (stored,) = loaded._charts
    assert len(stored.series) == 1
    assert stored.series[0].val.numRef.f == "Sheet1!$B$1:$B$5"


def test_combined_secondary_series_get_their_own_value_axis(
    workbook: Workbook,
    sheet: Worksheet,
    reopen: Callable[[Workbook], OpenpyxlWorkbook],
) -> None:
    columns = Chart.new_column().push_series(_series())
    columns.y2_axis().set_min(0).set_max(1)
    line = Chart.new_line().push_series(_series("Sheet1!$C$1:$C$5").set_secondary_axis())
    columns.combine(line)

    rendered = render_chart(columns.snapshot())

    assert len(rendered._charts) == 2
    primary, overlay = rendered._charts
    assert primary.y_axis.axId == 100
    assert overlay.y_axis.axId == 200
    assert overlay.y_axis.crosses == "max"
    assert overlay.y_axis.scaling.max == 1
    assert overlay.series[0].val.numRef.f == "Sheet1!$C$1:$C$5"

    sheet.write_column(0, 0, ["a", "b", "c", "d", "e"])
    sheet.insert_chart(0, 3, columns)
    (stored,) = reopen(workbook).active._charts
    assert [layer.y_axis.axId for layer in stored._charts] == [100, 200]


def test_combined_primary_and_secondary_series_are_split() -> None:
    columns = Chart.new_column().push_series(_series())
    line = (
        Chart.new_line()
        .push_series(_series("Sheet1!$C$1:$C$5"))
        .push_series(_series("Sheet1!$D$1:$D$5").set_secondary_axis())
    )
    columns.combine(line)

    rendered = render_chart(columns.snapshot())

    assert [layer.y_axis.axId for layer in rendered._charts] == [100, 100, 200]


def test_secondary_series_without_primary_series_use_primary_axis() -> None:
    chart = Chart.new_column().push_series(_series().set_secondary_axis())

    rendered = render_chart(chart.snapshot())

    assert len(rendered._charts) == 1
    assert rendered.y_axis.axId == 100


def test_rendering_a_series_without_values_raises_chart_error() -> None:
    spec = Chart.new_column().push_series(_series()).snapshot()
    broken = spec.model_copy(
        update={"series": (spec.series[0].model_copy(update={"values": None}),)}
    )

    with pytest.raises(XlsxError) as excinfo:
        render_chart(broken)
    assert excinfo.value.code == "ChartError"


def test_chart_type_names_are_canonical() -> None:
    assert normalize_chart_type("Donut") == "doughnut"
    assert normalize_chart_type(" Column ") == "column"
    assert normalize_chart_type("xy_scatter") is None
    assert normalize_chart_type("column_clustered") is None


def test_legend_rejects_unknown_position() -> None:
    chart = Chart.new_column().push_series(_series())
    chart.legend().set_position("top")

    with pytest.raises(XlsxError) as excinfo:
        chart.legend().set_position("middle")  # type: ignore[arg-type]

    assert excinfo.value.code == "ParameterError"
    assert chart.snapshot().legend.position == "top"
