from __future__ import annotations

from collections.abc import Callable
import copy
import threading

from openpyxl.workbook.workbook import Workbook as OpenpyxlWorkbook
import pytest

from sheetbridge import DocProperties, SharedDocument, Workbook, Worksheet, XlsxError


def test_workbook_copy_shares_document(workbook: Workbook) -> None:
    alias = copy.copy(workbook)
    alias.add_worksheet("Added")

    assert workbook.sheet_names() == ["Added"]
    assert alias == workbook
    assert alias.document is workbook.document


def test_sheet_handle_copy_writes_are_visible_through_original(
    workbook: Workbook,
) -> None:
    original = workbook.add_worksheet()
    clone = copy.copy(original)

    clone.write(0, 0, "through clone")

    assert original.read_value(0, 0) == "through clone"
    assert clone == original


def test_resolve_sheet_is_idempotent(workbook: Workbook) -> None:
    workbook.add_worksheet("First")
    document = workbook.document
    first = document.resolve_sheet(0)
    second = document.resolve_sheet(0)

    first.write(0, 0, 1)
    second.write(0, 1, 2)

    assert first == second
    assert hash(first) == hash(second)
    assert first.name == second.name == "First"
    assert [first.read_value(0, 0), first.read_value(0, 1)] == [1, 2]
    assert [second.read_value(0, 0), second.read_value(0, 1)] == [1, 2]


def test_resolve_sheet_out_of_range_raises_not_found(workbook: Workbook) -> None:
    with pytest.raises(XlsxError) as excinfo:
        workbook.document.resolve_sheet(0)
    assert excinfo.value.code == "SheetNotFound"

    with pytest.raises(XlsxError) as by_name:
        workbook.worksheet_from_name("Missing")
    assert by_name.value.code == "SheetNotFound"


def test_stale_locator_reports_not_found() -> None:
    document = SharedDocument()
    ghost = Worksheet(document, 3)
    with pytest.raises(XlsxError) as excinfo:
        ghost.write(0, 0, "x")
    assert excinfo.value.code == "SheetNotFound"


def test_name_and_index_lookup_agree(workbook: Workbook) -> None:
    workbook.add_worksheet("Alpha")
    workbook.add_worksheet("Beta")

    by_name = workbook.worksheet_from_name("Beta")
    by_index = workbook.worksheet_from_index(1)

    assert by_name == by_index
    assert by_name.index == 1
    assert workbook.worksheets() == [workbook.worksheet_from_index(0), by_index]


def test_sheet_handle_observes_current_document_state(workbook: Workbook) -> None:
    sheet = workbook.add_worksheet("Before")
    other = workbook.worksheet_from_index(0)

    other.set_name("After")

    assert sheet.name == "After"
    assert workbook.sheet_names() == ["After"]


def test_writes_preserve_issue_order(sheet: Worksheet) -> None:
    sheet.write(0, 0, "a").write(0, 1, "b").write(1, 0, "c")

    assert sheet.read_value(0, 0) == "a"
    assert sheet.read_value(0, 1) == "b"
    assert sheet.read_value(1, 0) == "c"
    assert sheet.read_value(1, 1) is None


def test_default_sheet_names_and_prefix(workbook: Workbook) -> None:
    workbook.add_worksheet()
    workbook.add_worksheet("Custom")
    workbook.add_worksheet()
    assert workbook.sheet_names() == ["Sheet1", "Custom", "Sheet3"]


@pytest.mark.parametrize(
    ("name", "code"),
    [
        ("", "SheetnameCannotBeBlank"),
        ("x" * 32, "SheetnameLengthExceeded"),
        ("bad/name", "SheetnameContainsInvalidCharacter"),
        ("what?", "SheetnameContainsInvalidCharacter"),
        ("'quoted", "SheetnameStartsOrEndsWithApostrophe"),
        ("History", "SheetnameReserved"),
    ],
)
def test_invalid_sheet_names(workbook: Workbook, name: str, code: str) -> None:
    sheet = workbook.add_worksheet()
    with pytest.raises(XlsxError) as excinfo:
        sheet.set_name(name)
    assert excinfo.value.code == code
    assert sheet.name == "Sheet1"


def test_duplicate_sheet_name_is_rejected_case_insensitively(workbook: Workbook) -> None:
    workbook.add_worksheet("Data")
    second = workbook.add_worksheet()
    with pytest.raises(XlsxError) as excinfo:
        second.set_name("DATA")
    assert excinfo.value.code == "SheetnameReused"

    with pytest.raises(XlsxError):
        workbook.add_worksheet("data")


def test_thirty_one_character_name_is_accepted(workbook: Workbook) -> None:
    sheet = workbook.add_worksheet("x" * 31)
    assert sheet.name == "x" * 31


def test_rename_changing_only_case(workbook: Workbook) -> None:
    sheet = workbook.add_worksheet("data")
    sheet.set_name("Data")
    assert sheet.name == "Data"


def test_concurrent_writers_serialize_on_document_lock(workbook: Workbook) -> None:
    sheet = workbook.add_worksheet()

    def _writer(column: int) -> None:
        handle = copy.copy(sheet)
        for row in range(200):
            handle.write(row, column, row * 10 + column)

    threads = [threading.Thread(target=_writer, args=(column,)) for column in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    for column in range(4):
        assert [sheet.read_value(row, column) for row in range(200)] == [
            row * 10 + column for row in range(200)
        ]


def test_save_empty_workbook_adds_sheet(
    workbook: Workbook, reopen: Callable[[Workbook], OpenpyxlWorkbook]
) -> None:
    loaded = reopen(workbook)
    assert loaded.sheetnames == ["Sheet1"]


def test_save_to_buffer_returns_zip_bytes(sheet: Worksheet, workbook: Workbook) -> None:
    sheet.write(0, 0, "hello")
    payload = workbook.save_to_buffer()
    assert payload[:2] == b"PK"


def test_properties_and_defined_names(
    workbook: Workbook, reopen: Callable[[Workbook], OpenpyxlWorkbook]
) -> None:
    workbook.add_worksheet("Data").write_row(0, 0, [1, 2, 3])
    properties = (
        DocProperties()
        .set_title("Quarterly")
        .set_author("Finance")
        .set_keywords("q1, report")
    )
    workbook.set_properties(properties)
    workbook.define_name("Totals", "=Data!$A$1:$C$1")

    loaded = reopen(workbook)

    assert loaded.properties.title == "Quarterly"
    assert loaded.properties.creator == "Finance"
    assert loaded.properties.keywords == "q1, report"
    assert loaded.defined_names["Totals"].attr_text == "Data!$A$1:$C$1"


def test_sheet_scoped_defined_name(
    workbook: Workbook, reopen: Callable[[Workbook], OpenpyxlWorkbook]
) -> None:
    workbook.add_worksheet("My Data")
    workbook.define_name("'My Data'!Rate", "=0.5")

    loaded = reopen(workbook)
    assert "Rate" not in loaded.defined_names
    assert loaded["My Data"].defined_names["Rate"].attr_text == "0.5"


def test_define_name_rejects_invalid_name(workbook: Workbook) -> None:
    with pytest.raises(XlsxError) as excinfo:
        workbook.define_name("1bad name", "=1")
    assert excinfo.value.code == "ParameterError"


def test_define_name_rejects_unknown_sheet_scope(workbook: Workbook) -> None:
    workbook.add_worksheet("Data")
    with pytest.raises(XlsxError) as excinfo:
        workbook.define_name("Other!Rate", "=0.5")
    assert excinfo.value.code == "SheetNotFound"


def test_set_active_worksheet(
    workbook: Workbook, reopen: Callable[[Workbook], OpenpyxlWorkbook]
) -> None:
    workbook.add_worksheet("One")
    workbook.add_worksheet("Two")
    workbook.set_active_worksheet(1)

    assert reopen(workbook).active.title == "Two"
