from __future__ import annotations

from collections.abc import Callable
import datetime as dt
import math

from openpyxl.cell.rich_text import CellRichText
from openpyxl.workbook.workbook import Workbook as OpenpyxlWorkbook
from openpyxl.worksheet.formula import ArrayFormula
from openpyxl.worksheet.worksheet import Worksheet as OpenpyxlWorksheet
import pytest

from sheetbridge import (
    Format,
    Formula,
    RichString,
    Url,
    Workbook,
    Worksheet,
    XlsxError,
)


def test_merge_single_cell_is_rejected(sheet: Worksheet) -> None:
    with pytest.raises(XlsxError) as excinfo:
        sheet.merge_range(2, 2, 2, 2, "x")
    assert excinfo.value.code == "MergeRangeSingleCell"


def test_overlapping_merge_is_rejected(sheet: Worksheet) -> None:
    sheet.merge_range(0, 0, 1, 1, "first")
    with pytest.raises(XlsxError) as excinfo:
        sheet.merge_range(1, 1, 2, 2, "second")
    assert excinfo.value.code == "MergeRangeOverlaps"
    assert "A1:B2" in str(excinfo.value)


def test_merge_writes_value_and_format(
    workbook: Workbook,
    sheet: Worksheet,
    reopen: Callable[[Workbook], OpenpyxlWorkbook],
) -> None:
    centered = Format().set_align("center").set_bold()
    sheet.merge_range(0, 0, 0, 3, "Title", centered)

    loaded = reopen(workbook).active
    assert [str(merged) for merged in loaded.merged_cells.ranges] == ["A1:D1"]
    assert loaded["A1"].value == "Title"
    assert loaded["A1"].font.bold is True
    assert loaded["A1"].alignment.horizontal == "center"


def test_write_into_merged_cell_is_rejected(sheet: Worksheet) -> None:
    sheet.merge_range(0, 0, 1, 1, "merged")
    with pytest.raises(XlsxError) as excinfo:
        sheet.write(1, 1, "inside")
    assert excinfo.value.code == "ParameterError"


def test_failed_merge_leaves_sheet_unchanged(sheet: Worksheet) -> None:
    sheet.merge_range(0, 0, 1, 1, "kept")
    with pytest.raises(XlsxError):
        sheet.merge_range(1, 0, 3, 0, "rejected")
    assert sheet.read_value(0, 0) == "kept"
    assert sheet.read_value(2, 0) is None


def test_typed_writes_roundtrip(
    workbook: Workbook,
    sheet: Worksheet,
    reopen: Callable[[Workbook], OpenpyxlWorkbook],
) -> None:
    (
        sheet.write_string(0, 0, "=not a formula")
        .write_number(0, 1, 3.5)
        .write_boolean(0, 2, True)
        .write_datetime(0, 3, dt.date(2024, 3, 1))
        .write_formula(0, 4, "=B1*2")
        .write(0, 5, None)
        .write(0, 6, "plain")
    )

    loaded = reopen(workbook).active
    assert loaded["A1"].value == "=not a formula"
    assert loaded["A1"].data_type == "s"
    assert loaded["B1"].value == 3.5
    assert loaded["C1"].value is True
    assert loaded["D1"].value == dt.datetime(2024, 3, 1)
    assert loaded["E1"].value == "=B1*2"
    assert loaded["F1"].value is None
    assert loaded["G1"].value == "plain"


def test_write_datetime_rejects_non_dates(sheet: Worksheet) -> None:
    with pytest.raises(XlsxError) as excinfo:
        sheet.write_datetime(0, 0, "2024-01-01")  # type: ignore[arg-type]
    assert excinfo.value.code == "InvalidDate"


def test_write_with_format_applies_number_format(
    workbook: Workbook,
    sheet: Worksheet,
    reopen: Callable[[Workbook], OpenpyxlWorkbook],
) -> None:
    money = Format().set_num_format("#,##0.00").set_font_color("#FF0000")
    sheet.write_with_format(0, 0, 1234.5, money)

    cell = reopen(workbook).active["A1"]
    assert cell.number_format == "#,##0.00"
    assert cell.font.color.rgb == "FFFF0000"


def test_format_snapshot_is_taken_at_write_time(
    workbook: Workbook,
    sheet: Worksheet,
    reopen: Callable[[Workbook], OpenpyxlWorkbook],
) -> None:
    fmt = Format().set_bold()
    sheet.write_with_format(0, 0, "bold", fmt)
    fmt.set_italic()
    sheet.write_with_format(0, 1, "bold italic", fmt)

    loaded = reopen(workbook).active
    assert loaded["A1"].font.italic is False
    assert loaded["B1"].font.italic is True


def test_write_limits(sheet: Worksheet) -> None:
    with pytest.raises(XlsxError) as row_limit:
        sheet.write(1_048_576, 0, 1)
    assert row_limit.value.code == "RowColumnLimitError"

    with pytest.raises(XlsxError) as col_limit:
        sheet.write(0, 16_384, 1)
    assert col_limit.value.code == "RowColumnLimitError"

    with pytest.raises(XlsxError) as too_long:
        sheet.write(0, 0, "x" * 32_768)
    assert too_long.value.code == "MaxStringLengthExceeded"

    with pytest.raises(XlsxError) as not_finite:
        sheet.write(0, 0, math.inf)
    assert not_finite.value.code == "ParameterError"


def test_write_row_and_column(sheet: Worksheet) -> None:
    sheet.write_row(0, 0, ["a", 1, None])
    sheet.write_column(1, 0, [2, 3])

    assert [sheet.read_value(0, col) for col in range(3)] == ["a", 1, None]
    assert [sheet.read_value(row, 0) for row in (1, 2)] == [2, 3]


def test_write_row_validates_whole_block_first(sheet: Worksheet) -> None:
    with pytest.raises(XlsxError) as excinfo:
        sheet.write_row(0, 16_382, [1, 2, 3])
    assert excinfo.value.code == "RowColumnLimitError"
    assert sheet.read_value(0, 16_382) is None


def test_write_matrices(sheet: Worksheet) -> None:
    sheet.write_row_matrix(0, 0, [[1, 2], [3, 4]])
    sheet.write_column_matrix(0, 3, [[5, 6], [7]])

    assert sheet.read_value(1, 1) == 4
    assert sheet.read_value(1, 3) == 6
    assert sheet.read_value(0, 4) == 7
    assert sheet.read_value(1, 4) is None


def test_array_and_dynamic_formulas(
    workbook: Workbook,
    sheet: Worksheet,
    reopen: Callable[[Workbook], OpenpyxlWorkbook],
) -> None:
    sheet.write_column(0, 0, [1, 2, 3])
    sheet.write_array_formula(0, 1, 2, 1, "{=A1:A3*2}")
    sheet.write_dynamic_formula(0, 2, Formula("=LEN(A1:A3)"))

    stored = sheet.read_value(0, 1)
    assert isinstance(stored, ArrayFormula)
    assert stored.ref == "B1:B3"
    assert stored.text == "=A1:A3*2"

    loaded = reopen(workbook).active
    assert isinstance(loaded["B1"].value, ArrayFormula)


def test_write_url_variants(
    workbook: Workbook,
    sheet: Worksheet,
    reopen: Callable[[Workbook], OpenpyxlWorkbook],
) -> None:
    workbook.add_worksheet("Other")
    sheet.write_url(0, 0, "https://example.com")
    sheet.write_url_with_text(1, 0, "https://example.com/docs", "Docs")
    sheet.write(2, 0, Url("internal:Other!A1").set_text("Jump").set_tip("Go there"))

    loaded = reopen(workbook)["Sheet1"]
    assert loaded["A1"].value == "https://example.com"
    assert loaded["A1"].hyperlink.target == "https://example.com"
    assert loaded["A2"].value == "Docs"
    assert loaded["A3"].value == "Jump"
    assert loaded["A3"].hyperlink.location == "Other!A1"
    assert loaded["A3"].hyperlink.tooltip == "Go there"


def test_url_length_limit(sheet: Worksheet) -> None:
    with pytest.raises(XlsxError) as excinfo:
        sheet.write_url(0, 0, "https://example.com/" + "a" * 2_100)
    assert excinfo.value.code == "MaxUrlLengthExceeded"


def test_rich_string(sheet: Worksheet) -> None:
    bold = Format().set_bold()
    rich = RichString().append_plain("This is ").append(bold, "bold")
    sheet.write_rich_string(0, 0, rich)

    stored = sheet.read_value(0, 0)
    assert isinstance(stored, CellRichText)
    assert str(stored) == "This is bold"


def test_empty_rich_string_is_rejected(sheet: Worksheet) -> None:
    with pytest.raises(XlsxError) as excinfo:
        sheet.write_rich_string(0, 0, RichString())
    assert excinfo.value.code == "ParameterError"


def test_clear_cell(sheet: Worksheet) -> None:
    sheet.write_with_format(0, 0, "gone", Format().set_bold())
    sheet.clear_cell(0, 0)
    assert sheet.read_value(0, 0) is None


def test_column_and_row_dimensions(
    workbook: Workbook,
    sheet: Worksheet,
    reopen: Callable[[Workbook], OpenpyxlWorkbook],
) -> None:
    sheet.set_column_width(0, 20)
    sheet.set_column_width_pixels(1, 75)
    sheet.set_column_range_width(2, 3, 12)
    sheet.set_row_height(0, 30)
    sheet.set_row_height_pixels(1, 40)

    loaded = reopen(workbook).active
    assert loaded.column_dimensions["A"].width == 20
    assert loaded.column_dimensions["B"].width == pytest.approx(10.0)
    assert loaded.column_dimensions["C"].width == 12
    assert loaded.row_dimensions[1].height == 30
    assert loaded.row_dimensions[2].height == 30


def test_dimension_limits(sheet: Worksheet) -> None:
    with pytest.raises(XlsxError) as width:
        sheet.set_column_width(0, 256)
    assert width.value.code == "ParameterError"

    with pytest.raises(XlsxError) as height:
        sheet.set_row_height(0, 410)
    assert height.value.code == "ParameterError"

    with pytest.raises(XlsxError) as order:
        sheet.set_column_range_width(3, 2, 10)
    assert order.value.code == "RowColumnOrderError"


def test_autofit_uses_longest_line(
    workbook: Workbook,
    sheet: Worksheet,
    reopen: Callable[[Workbook], OpenpyxlWorkbook],
) -> None:
    sheet.write(0, 0, "a")
    sheet.write(0, 1, "twenty characters!!!")
    sheet.write(1, 1, "short\nlines")
    sheet.autofit()

    loaded = reopen(workbook).active
    assert loaded.column_dimensions["A"].width == pytest.approx(8.43)
    assert loaded.column_dimensions["B"].width == pytest.approx(22.0)


def test_range_format_with_border(
    workbook: Workbook,
    sheet: Worksheet,
    reopen: Callable[[Workbook], OpenpyxlWorkbook],
) -> None:
    fill = Format().set_background_color("#DDEBF7")
    border = Format().set_border("thin")
    sheet.set_range_format_with_border(0, 0, 2, 2, fill, border)

    loaded = reopen(workbook).active
    corner = loaded["A1"]
    middle = loaded["B2"]
    assert corner.border.top.style == "thin"
    assert corner.border.left.style == "thin"
    assert corner.border.right.style is None
    assert middle.border.top.style is None
    assert middle.fill.fgColor.rgb == "FFDDEBF7"


def test_freeze_panes_and_grouping(
    workbook: Workbook,
    sheet: Worksheet,
    reopen: Callable[[Workbook], OpenpyxlWorkbook],
) -> None:
    sheet.set_freeze_panes(1, 0)
    sheet.group_rows(1, 4)
    sheet.group_rows(2, 3, hidden=True)
    sheet.group_columns(1, 2)

    loaded = reopen(workbook).active
    assert loaded.freeze_panes == "A2"
    assert loaded.row_dimensions[2].outline_level == 1
    assert loaded.row_dimensions[3].outline_level == 2
    assert loaded.row_dimensions[3].hidden is True
    assert loaded.column_dimensions["B"].outline_level == 1


def test_sheet_state_and_page_setup(
    workbook: Workbook,
    reopen: Callable[[Workbook], OpenpyxlWorkbook],
) -> None:
    visible = workbook.add_worksheet("Visible")
    hidden = workbook.add_worksheet("Hidden")
    hidden.set_hidden()
    (
        visible.set_tab_color("red")
        .set_zoom(150)
        .set_landscape()
        .set_paper_size(9)
        .set_print_scale(80)
        .set_print_gridlines()
        .set_print_area(0, 0, 9, 3)
        .set_repeat_rows(0, 0)
        .set_header("&LLeft&RRight")
        .set_footer("Page &P")
        .set_margins(0.5, 0.5, 1.0, 1.0, -1, -1)
        .set_screen_gridlines(False)
        .protect()
    )

    loaded = reopen(workbook)
    sheet = loaded["Visible"]
    assert loaded["Hidden"].sheet_state == "hidden"
    assert sheet.sheet_properties.tabColor.rgb == "FFFF0000"
    assert sheet.sheet_view.zoomScale == 150
    assert sheet.page_setup.orientation == "landscape"
    assert int(sheet.page_setup.paperSize) == 9
    assert int(sheet.page_setup.scale) == 80
    assert sheet.print_options.gridLines is True
    assert "$A$1:$D$10" in str(sheet.print_area)
    assert sheet.oddHeader.left.text == "Left"
    assert sheet.oddFooter.center.text == "Page &P"
    assert sheet.page_margins.left == 0.5
    assert sheet.sheet_view.showGridLines is False
    assert sheet.protection.sheet is True


def test_page_setup_limits(sheet: Worksheet) -> None:
    with pytest.raises(XlsxError):
        sheet.set_zoom(5)
    with pytest.raises(XlsxError):
        sheet.set_print_scale(401)


def _openpyxl_sheet(workbook: Workbook) -> OpenpyxlWorksheet:
    return workbook.document.run_on_sheet(0, lambda sheet: sheet.sheet)


def test_header_and_footer_sections(
    workbook: Workbook,
    sheet: Worksheet,
    reopen: Callable[[Workbook], OpenpyxlWorkbook],
) -> None:
    sheet.set_header("Title").set_footer("&LLeft&CPage &P&RRight")

    loaded = reopen(workbook).active
    assert loaded.oddHeader.center.text == "Title"
    assert loaded.oddHeader.left.text is None
    assert loaded.oddFooter.left.text == "Left"
    assert loaded.oddFooter.center.text == "Page &P"
    assert loaded.oddFooter.right.text == "Right"


def test_header_replaces_previous_sections(sheet: Worksheet, workbook: Workbook) -> None:
    sheet.set_header("&LOld&ROld")
    sheet.set_header("&CNew")

    header = _openpyxl_sheet(workbook).oddHeader
    assert header.left.text is None
    assert header.center.text == "New"
    assert header.right.text is None


def test_header_named_placeholders_become_codes(
    workbook: Workbook, sheet: Worksheet
) -> None:
    sheet.set_footer("&CPage &[Page] of &[Pages]&R&[Date]")

    footer = _openpyxl_sheet(workbook).oddFooter
    assert footer.center.text == "Page &P of &N"
    assert footer.right.text == "&D"


def test_header_length_limit(sheet: Worksheet) -> None:
    with pytest.raises(XlsxError) as excinfo:
        sheet.set_header("x" * 256)
    assert excinfo.value.code == "ParameterError"


def test_write_row_over_merged_cell_writes_nothing(sheet: Worksheet) -> None:
    sheet.merge_range(0, 2, 1, 3, "merged")

    with pytest.raises(XlsxError) as excinfo:
        sheet.write_row(1, 0, ["a", "b", "c"])

    assert excinfo.value.code == "ParameterError"
    assert sheet.read_value(1, 0) is None
    assert sheet.read_value(1, 1) is None


def test_write_row_with_long_url_writes_nothing(sheet: Worksheet) -> None:
    with pytest.raises(XlsxError) as excinfo:
        sheet.write_row(0, 0, ["a", Url("https://x/" + "a" * 3_000)])

    assert excinfo.value.code == "MaxUrlLengthExceeded"
    assert sheet.read_value(0, 0) is None


def test_write_column_with_long_formula_writes_nothing(sheet: Worksheet) -> None:
    long_formula = Formula("=" + "+".join(["A1"] * 11_000))

    with pytest.raises(XlsxError) as excinfo:
        sheet.write_column(0, 1, [1, 2, long_formula])

    assert excinfo.value.code == "MaxStringLengthExceeded"
    assert [sheet.read_value(row, 1) for row in range(3)] == [None, None, None]


def test_write_matrices_check_every_row_first(sheet: Worksheet) -> None:
    sheet.merge_range(5, 0, 5, 1, "merged")

    with pytest.raises(XlsxError):
        sheet.write_row_matrix(4, 0, [[1, 2], [3, 4]])
    with pytest.raises(XlsxError):
        sheet.write_column_matrix(0, 5, [[1, 2], [math.nan]])

    assert sheet.read_value(4, 0) is None
    assert sheet.read_value(4, 1) is None
    assert sheet.read_value(0, 5) is None


def test_column_range_width_out_of_grid_sets_nothing(
    workbook: Workbook, sheet: Worksheet
) -> None:
    with pytest.raises(XlsxError) as excinfo:
        sheet.set_column_range_width(16_382, 16_390, 20)
    assert excinfo.value.code == "RowColumnLimitError"

    with pytest.raises(XlsxError):
        sheet.set_column_range_width(0, 3, 300)

    dimensions = _openpyxl_sheet(workbook).column_dimensions
    assert "XFC" not in dimensions
    assert "A" not in dimensions


def test_invalid_alignment_is_rejected_by_the_setter(sheet: Worksheet) -> None:
    fmt = Format().set_bold()

    with pytest.raises(XlsxError) as excinfo:
        fmt.set_align("bogus")  # type: ignore[arg-type]

    assert excinfo.value.code == "ParameterError"
    assert fmt.snapshot().align is None
    sheet.write_with_format(0, 0, "x", fmt)
    assert sheet.read_value(0, 0) == "x"
