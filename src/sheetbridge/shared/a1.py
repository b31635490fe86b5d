from __future__ import annotations

import re
from typing import Final

from ..errors import XlsxError

ROW_MAX: Final[int] = 1_048_576
COL_MAX: Final[int] = 16_384
MAX_STRING_LENGTH: Final[int] = 32_767
MAX_URL_LENGTH: Final[int] = 2_079
MAX_COLUMN_WIDTH: Final[float] = 255.0
MAX_ROW_HEIGHT: Final[float] = 409.0

_A1_PATTERN = re.compile(r"^\$?([A-Za-z]{1,3})\$?([1-9][0-9]*)$")
_SHEET_QUALIFIED_A1_RANGE_PATTERN = re.compile(
    r"^=?(?P<sheet>(?:'(?:(?:[^']|'')+)'|[^!]+)!)?"
    r"(?P<start>\$?[A-Za-z]{1,3}\$?[1-9][0-9]*)(?::(?P<end>\$?[A-Za-z]{1,3}\$?[1-9][0-9]*))?$"
)
_COLUMN_LABEL_PATTERN = re.compile(r"^[A-Za-z]{1,3}$")
_PLAIN_SHEET_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_.]*$")


def column_label_to_index(label: str) -> int:
    """Convert Excel-style column label (A/AA) to a zero-based index."""
    normalized = label.strip().upper()
    if not _COLUMN_LABEL_PATTERN.match(normalized):
        raise ValueError(f"Invalid column label: {label}")
    index = 0
    for char in normalized:
        index = index * 26 + (ord(char) - ord("A") + 1)
    return index - 1


def column_index_to_label(index: int) -> str:
    """Convert a zero-based column index to an Excel-style column label."""
    if index < 0:
        raise ValueError("Column index must not be negative.")
    chunks: list[str] = []
    current = index + 1
    while current > 0:
        current -= 1
        chunks.append(chr(ord("A") + (current % 26)))
        current //= 26
    return "".join(reversed(chunks))


def cell_to_a1(row: int, col: int, *, absolute: bool = False) -> str:
    """Convert zero-based (row, col) to A1 notation."""
    label = column_index_to_label(col)
    if absolute:
        return f"${label}${row + 1}"
    return f"{label}{row + 1}"


def range_to_a1(
    first_row: int, first_col: int, last_row: int, last_col: int, *, absolute: bool = False
) -> str:
    """Convert a zero-based cell range to A1 notation."""
    start = cell_to_a1(first_row, first_col, absolute=absolute)
    end = cell_to_a1(last_row, last_col, absolute=absolute)
    if start == end:
        return start
    return f"{start}:{end}"


def a1_to_cell(value: str) -> tuple[int, int]:
    """Split A1 notation into zero-based (row, col)."""
    match = _A1_PATTERN.match(value.strip())
    if match is None:
        raise ValueError(f"Invalid cell reference: {value}")
    column, row = match.groups()
    return int(row) - 1, column_label_to_index(column)


def split_sheet_range(value: str) -> tuple[str | None, tuple[int, int, int, int]]:
    """Split a sheet-qualified range into sheet name and zero-based bounds."""
    match = _SHEET_QUALIFIED_A1_RANGE_PATTERN.match(value.strip())
    if match is None:
        raise ValueError(f"Invalid range reference: {value}")
    sheet_token = match.group("sheet")
    sheet: str | None = None
    if sheet_token is not None:
        sheet = sheet_token[:-1]
        if sheet.startswith("'") and sheet.endswith("'"):
            sheet = sheet[1:-1].replace("''", "'")
    first_row, first_col = a1_to_cell(match.group("start"))
    end_token = match.group("end")
    if end_token is None:
        return sheet, (first_row, first_col, first_row, first_col)
    last_row, last_col = a1_to_cell(end_token)
    return sheet, (first_row, first_col, last_row, last_col)


def quote_sheet_name(sheet: str) -> str:
    """Quote a sheet name for use in a formula when Excel requires it."""
    if _PLAIN_SHEET_NAME_PATTERN.match(sheet) and not _A1_PATTERN.match(sheet):
        return sheet
    escaped = sheet.replace("'", "''")
    return f"'{escaped}'"


def sheet_range_formula(
    sheet: str, first_row: int, first_col: int, last_row: int, last_col: int
) -> str:
    """Build an absolute sheet-qualified range such as 'Sheet 1'!$A$1:$A$5."""
    target = range_to_a1(first_row, first_col, last_row, last_col, absolute=True)
    return f"{quote_sheet_name(sheet)}!{target}"


def check_cell(row: int, col: int) -> None:
    """Raise when a zero-based cell lies outside the worksheet grid."""
    if row < 0 or col < 0 or row >= ROW_MAX or col >= COL_MAX:
        raise XlsxError.from_code(
            "RowColumnLimitError",
            f"Row or column exceeds worksheet limits: row={row}, col={col}.",
            row=row,
            col=col,
        )


def check_row(row: int) -> None:
    """Raise when a zero-based row lies outside the worksheet grid."""
    check_cell(row, 0)


def check_col(col: int) -> None:
    """Raise when a zero-based column lies outside the worksheet grid."""
    check_cell(0, col)


def check_range(first_row: int, first_col: int, last_row: int, last_col: int) -> None:
    """Validate grid limits and ordering for a zero-based range."""
    check_cell(first_row, first_col)
    check_cell(last_row, last_col)
    if first_row > last_row or first_col > last_col:
        raise XlsxError.from_code(
            "RowColumnOrderError",
            "First row/column must not be greater than last row/column: "
            f"({first_row}, {first_col}) > ({last_row}, {last_col}).",
            row=first_row,
            col=first_col,
        )


def ranges_overlap(
    left: tuple[int, int, int, int], right: tuple[int, int, int, int]
) -> bool:
    """Return True if two (first_row, first_col, last_row, last_col) ranges overlap."""
    left_first_row, left_first_col, left_last_row, left_last_col = left
    right_first_row, right_first_col, right_last_row, right_last_col = right
    return not (
        left_last_col < right_first_col
        or right_last_col < left_first_col
        or left_last_row < right_first_row
        or right_last_row < left_first_row
    )
