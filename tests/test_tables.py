from __future__ import annotations

from collections.abc import Callable

from openpyxl.workbook.workbook import Workbook as OpenpyxlWorkbook
import pytest

from sheetbridge import Table, TableColumn, Workbook, Worksheet, XlsxError


def _write_sales(sheet: Worksheet) -> None:
    sheet.write_row_matrix(
        0,
        0,
        [
            ["Region", "Sales"],
            ["North", 10],
            ["South", 20],
        ],
    )


def test_add_table_uses_existing_headers(
    workbook: Workbook,
    sheet: Worksheet,
    reopen: Callable[[Workbook], OpenpyxlWorkbook],
) -> None:
    _write_sales(sheet)
    sheet.add_table(0, 0, 2, 1)

    loaded = reopen(workbook).active
    table = loaded.tables["Table1"]
    assert table.ref == "A1:B3"
    assert [column.name for column in table.tableColumns] == ["Region", "Sales"]
    assert table.tableStyleInfo.name == "TableStyleMedium9"
    assert table.autoFilter.ref == "A1:B3"


def test_table_total_row_and_named_columns(
    workbook: Workbook,
    sheet: Worksheet,
    reopen: Callable[[Workbook], OpenpyxlWorkbook],
) -> None:
    _write_sales(sheet)
    table = (
        Table()
        .set_name("Sales")
        .set_style("TableStyleLight1")
        .set_total_row()
        .set_columns(
            [
                TableColumn(header="Region", total_label="Total"),
                TableColumn(header="Sales").set_total_function("sum"),
            ]
        )
    )
    sheet.add_table(0, 0, 3, 1, table)

    loaded = reopen(workbook).active
    stored = loaded.tables["Sales"]
    assert stored.totalsRowCount == 1
    assert stored.tableColumns[1].totalsRowFunction == "sum"
    assert stored.autoFilter.ref == "A1:B3"
    assert loaded["A4"].value == "Total"
    assert loaded["B4"].value == "=SUBTOTAL(109,Sales[Sales])"


def test_table_handle_changes_after_add_do_not_leak(
    workbook: Workbook,
    sheet: Worksheet,
    reopen: Callable[[Workbook], OpenpyxlWorkbook],
) -> None:
    _write_sales(sheet)
    table = Table().set_name("First")
    sheet.add_table(0, 0, 2, 1, table)
    table.set_name("Renamed").set_style("TableStyleDark1")

    loaded = reopen(workbook).active
    assert list(loaded.tables.keys()) == ["First"]
    assert loaded.tables["First"].tableStyleInfo.name == "TableStyleMedium9"


def test_overlapping_tables_are_rejected(sheet: Worksheet) -> None:
    _write_sales(sheet)
    sheet.add_table(0, 0, 2, 1)
    with pytest.raises(XlsxError) as excinfo:
        sheet.add_table(2, 1, 4, 3)
    assert excinfo.value.code == "TableRangeOverlaps"


def test_duplicate_table_name_across_sheets(workbook: Workbook) -> None:
    first = workbook.add_worksheet()
    second = workbook.add_worksheet()
    first.add_table(0, 0, 2, 1, Table().set_name("Data"))
    with pytest.raises(XlsxError) as excinfo:
        second.add_table(0, 0, 2, 1, Table().set_name("data"))
    assert excinfo.value.code == "TableNameReused"


def test_table_without_data_rows_is_rejected(sheet: Worksheet) -> None:
    with pytest.raises(XlsxError) as excinfo:
        sheet.add_table(0, 0, 0, 2)
    assert excinfo.value.code == "TableError"


def test_duplicate_headers_are_rejected(sheet: Worksheet) -> None:
    columns = [TableColumn(header="Name"), TableColumn(header="name")]
    with pytest.raises(XlsxError) as excinfo:
        sheet.add_table(0, 0, 3, 1, Table().set_columns(columns))
    assert excinfo.value.code == "TableError"


def test_default_headers_fill_blank_columns(sheet: Worksheet) -> None:
    sheet.add_table(0, 0, 2, 2)
    assert [sheet.read_value(0, col) for col in range(3)] == [
        "Column1",
        "Column2",
        "Column3",
    ]


@pytest.mark.parametrize(
    ("mutate", "message"),
    [
        (lambda table: table.set_name("has space"), "Invalid table name"),
        (lambda table: table.set_name("C"), "Invalid table name"),
        (lambda table: table.set_name("AB12"), "cell reference"),
        (lambda table: table.set_style("TableStyleMedium99"), "Unknown table style"),
    ],
)
def test_invalid_table_name_and_style(mutate: object, message: str) -> None:
    table = Table()
    with pytest.raises(XlsxError, match=message) as excinfo:
        mutate(table)  # type: ignore[operator]
    assert excinfo.value.code == "TableError"
    assert table.snapshot() == Table().snapshot()
