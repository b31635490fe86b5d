"""openpyxl worksheet adapter.

``EngineWorksheet`` exposes zero-based operations over one openpyxl
worksheet. It validates every argument before touching openpyxl, so a failed
call leaves the sheet unchanged, and reports failures as ``XlsxError``.
"""

from __future__ import annotations

from collections.abc import Iterator
import io
import logging
import math
import re
from typing import TYPE_CHECKING, Final

from openpyxl.cell.cell import Cell, MergedCell
from openpyxl.cell.rich_text import CellRichText, TextBlock
from openpyxl.comments import Comment
from openpyxl.drawing.image import Image as OpenpyxlImage
from openpyxl.drawing.spreadsheet_drawing import AnchorMarker, OneCellAnchor
from openpyxl.drawing.xdr import XDRPositiveSize2D
from openpyxl.utils.cell import range_boundaries
from openpyxl.utils.units import pixels_to_EMU
from openpyxl.workbook.defined_name import DefinedName
from openpyxl.worksheet.dimensions import ColumnDimension, RowDimension
from openpyxl.worksheet.filters import AutoFilter
from openpyxl.worksheet.formula import ArrayFormula
from openpyxl.worksheet.header_footer import HeaderFooterItem
from openpyxl.worksheet.hyperlink import Hyperlink
from openpyxl.worksheet.page import PageMargins
from openpyxl.worksheet.properties import PageSetupProperties
from openpyxl.worksheet.table import Table, TableColumn, TableStyleInfo
from openpyxl.worksheet.worksheet import Worksheet

from ..chart.chart import ChartSpec
from ..color import Color
from ..conditional_format import ConditionalRuleSpec
from ..errors import XlsxError
from ..excel_datetime import ExcelDateTime
from ..format import FormatSpec
from ..formula import FormulaSpec
from ..image import ImageSpec
from ..note import NoteSpec
from ..rich_string import RichStringSpec
from ..shared import (
    MAX_STRING_LENGTH,
    MAX_URL_LENGTH,
    cell_to_a1,
    check_cell,
    check_col,
    check_range,
    check_row,
    column_index_to_label,
    range_to_a1,
    ranges_overlap,
)
from ..shared.a1 import MAX_COLUMN_WIDTH, MAX_ROW_HEIGHT
from ..table import TableSpec
from ..types import HeaderImagePosition
from ..url import UrlSpec
from ..utils import warn_once
from ..values import CellValue
from .charts import render_chart
from .styles import apply_format, assign_styles, build_inline_font, build_styles

if TYPE_CHECKING:
    from .workbook import EngineWorkbook

logger = logging.getLogger(__name__)

Bounds = tuple[int, int, int, int]

_DEFAULT_COLUMN_WIDTH: Final[float] = 8.43
_DEFAULT_ROW_HEIGHT: Final[float] = 15.0
_SECTION_CODE: Final = re.compile(r"(?<!&)&([LCR])")
_SECTION_NAMES: Final[dict[str, str]] = {"L": "left", "C": "center", "R": "right"}
_HEADER_PLACEHOLDERS: Final[dict[str, str]] = {
    "&[Page]": "&P",
    "&[Pages]": "&N",
    "&[Date]": "&D",
    "&[Time]": "&T",
    "&[File]": "&F",
    "&[Tab]": "&A",
    "&[Path]": "&Z",
    "&[Picture]": "&G",
}
_SUBTOTAL_CODES: Final[dict[str, int]] = {
    "average": 101,
    "countNums": 102,
    "count": 103,
    "max": 104,
    "min": 105,
    "stdDev": 107,
    "sum": 109,
    "var": 110,
}


def column_pixels_to_width(pixels: int) -> float:
    """Convert a column width in pixels to Excel character units."""
    if pixels <= 12:
        return pixels / 12
    return (pixels - 5) / 7


def column_width_to_pixels(width: float) -> int:
    if width < 1:
        return int(width * 12 + 0.5)
    return int(width * 7 + 0.5) + 5


def row_pixels_to_height(pixels: int) -> float:
    """Convert a row height in pixels to points."""
    return pixels * 0.75


def _text_display_length(value: object) -> int:
    """Estimate visible text length for one cell value."""
    text = str(value)
    lines = text.splitlines() or [text]
    return max(len(line) for line in lines)


def _check_string(text: str, row: int, col: int) -> None:
    if len(text) > MAX_STRING_LENGTH:
        raise XlsxError.from_code(
            "MaxStringLengthExceeded",
            f"String of {len(text)} characters exceeds Excel's {MAX_STRING_LENGTH} limit.",
            row=row,
            col=col,
        )


def _check_number(number: float, row: int, col: int) -> float:
    value = float(number)
    if not math.isfinite(value):
        raise XlsxError.from_code(
            "ParameterError",
            f"Excel cannot store non-finite numbers: {number}",
            row=row,
            col=col,
        )
    return value


def _anchor(
    row: int, col: int, x_offset: int, y_offset: int, width: float, height: float
) -> OneCellAnchor:
    marker = AnchorMarker(
        col=col,
        colOff=pixels_to_EMU(x_offset),
        row=row,
        rowOff=pixels_to_EMU(y_offset),
    )
    size = XDRPositiveSize2D(pixels_to_EMU(int(width)), pixels_to_EMU(int(height)))
    return OneCellAnchor(_from=marker, ext=size)


class EngineWorksheet:
    """Zero-based, validating facade over one openpyxl worksheet."""

    def __init__(self, workbook: EngineWorkbook, sheet: Worksheet) -> None:
        self.workbook = workbook
        self.sheet = sheet

    @property
    def name(self) -> str:
        return self.sheet.title

    # Cells

    def _check_writable(self, row: int, col: int) -> None:
        """Reject cells covered by a merged range, other than its top-left cell."""
        check_cell(row, col)
        for first_row, first_col, last_row, last_col in self.merged_ranges():
            if (row, col) == (first_row, first_col):
                continue
            if first_row <= row <= last_row and first_col <= col <= last_col:
                raise XlsxError.from_code(
                    "ParameterError",
                    f"Cell {cell_to_a1(row, col)} is inside a merged range; "
                    "write to its top-left cell.",
                    sheet=self.name,
                    row=row,
                    col=col,
                )

    def _cell(self, row: int, col: int) -> Cell:
        self._check_writable(row, col)
        return self.sheet.cell(row=row + 1, column=col + 1)

    def _check_url(self, url: UrlSpec, row: int, col: int) -> str:
        target = url.target
        if target is not None and len(target) > MAX_URL_LENGTH:
            raise XlsxError.from_code(
                "MaxUrlLengthExceeded",
                f"URL of {len(target)} characters exceeds Excel's {MAX_URL_LENGTH} limit.",
                sheet=self.name,
                row=row,
                col=col,
            )
        text = url.display_text()
        _check_string(text, row, col)
        return text

    def _check_value(self, row: int, col: int, value: CellValue) -> None:
        """Run every check ``write_value`` would run, without writing."""
        self._check_writable(row, col)
        if value.kind == "number":
            _check_number(value.value, row, col)
        elif value.kind == "text":
            _check_string(value.value, row, col)
        elif value.kind == "formula":
            _check_string(value.value.expand(), row, col)
        elif value.kind == "hyperlink":
            self._check_url(value.value, row, col)

    def write_value(
        self, row: int, col: int, value: CellValue, fmt: FormatSpec | None = None
    ) -> None:
        """Write one classified cell value."""
        if value.kind == "number":
            self.write_number(row, col, value.value, fmt)
        elif value.kind == "text":
            self.write_string(row, col, value.value, fmt)
        elif value.kind == "boolean":
            self.write_boolean(row, col, value.value, fmt)
        elif value.kind == "empty":
            self.write_blank(row, col, fmt)
        elif value.kind == "datetime":
            self.write_datetime(row, col, value.value, fmt)
        elif value.kind == "formula":
            self.write_formula(row, col, value.value, fmt)
        else:
            self.write_url(row, col, value.value, fmt)

    def write_block(
        self,
        row: int,
        col: int,
        rows: list[list[CellValue]],
        fmt: FormatSpec | None = None,
    ) -> None:
        """Write a rectangular block of values with its top-left cell at (row, col).

        Every cell of the block is checked before the first one is written.
        """
        if not rows or not any(rows):
            return
        height = len(rows)
        width = max(len(values) for values in rows)
        check_range(row, col, row + height - 1, col + width - 1)
        build_styles(fmt)
        for row_offset, values in enumerate(rows):
            for col_offset, value in enumerate(values):
                self._check_value(row + row_offset, col + col_offset, value)
        for row_offset, values in enumerate(rows):
            for col_offset, value in enumerate(values):
                self.write_value(row + row_offset, col + col_offset, value, fmt)

    def write_number(
        self, row: int, col: int, number: float, fmt: FormatSpec | None = None
    ) -> None:
        number = _check_number(number, row, col)
        styles = build_styles(fmt)
        cell = self._cell(row, col)
        cell.value = number
        assign_styles(cell, styles)

    def write_string(
        self, row: int, col: int, text: str, fmt: FormatSpec | None = None
    ) -> None:
        _check_string(text, row, col)
        styles = build_styles(fmt)
        cell = self._cell(row, col)
        cell.value = text
        # openpyxl treats strings starting with "=" as formulas.
        cell.data_type = "s"
        assign_styles(cell, styles)

    def write_boolean(
        self, row: int, col: int, value: bool, fmt: FormatSpec | None = None
    ) -> None:
        styles = build_styles(fmt)
        cell = self._cell(row, col)
        cell.value = bool(value)
        assign_styles(cell, styles)

    def write_blank(self, row: int, col: int, fmt: FormatSpec | None = None) -> None:
        styles = build_styles(fmt)
        cell = self._cell(row, col)
        cell.value = None
        assign_styles(cell, styles)

    def write_datetime(
        self, row: int, col: int, value: ExcelDateTime, fmt: FormatSpec | None = None
    ) -> None:
        styles = build_styles(fmt)
        cell = self._cell(row, col)
        cell.value = value.to_python()
        assign_styles(cell, styles)

    def write_formula(
        self, row: int, col: int, formula: FormulaSpec, fmt: FormatSpec | None = None
    ) -> None:
        text = formula.expand()
        _check_string(text, row, col)
        styles = build_styles(fmt)
        cell = self._cell(row, col)
        self._warn_formula_result(formula)
        cell.value = text
        assign_styles(cell, styles)

    def write_array_formula(
        self,
        first_row: int,
        first_col: int,
        last_row: int,
        last_col: int,
        formula: FormulaSpec,
        fmt: FormatSpec | None = None,
        *,
        dynamic: bool = False,
    ) -> None:
        """Write a (legacy or dynamic) array formula anchored at the first cell."""
        check_range(first_row, first_col, last_row, last_col)
        text = formula.expand()
        _check_string(text, first_row, first_col)
        styles = build_styles(fmt)
        cell = self._cell(first_row, first_col)
        if dynamic:
            warn_once(
                "dynamic-array-formula",
                "openpyxl writes dynamic array formulas as legacy array formulas.",
            )
        self._warn_formula_result(formula)
        ref = range_to_a1(first_row, first_col, last_row, last_col)
        cell.value = ArrayFormula(ref=ref, text=text)
        for row in range(first_row, last_row + 1):
            for col in range(first_col, last_col + 1):
                assign_styles(self.sheet.cell(row=row + 1, column=col + 1), styles)

    def _warn_formula_result(self, formula: FormulaSpec) -> None:
        if formula.result is not None:
            warn_once(
                "formula-result",
                "openpyxl does not store cached formula results; result ignored.",
            )

    def write_url(
        self, row: int, col: int, url: UrlSpec, fmt: FormatSpec | None = None
    ) -> None:
        text = self._check_url(url, row, col)
        styles = build_styles(fmt)
        cell = self._cell(row, col)
        cell.hyperlink = Hyperlink(
            ref=cell.coordinate,
            target=url.target,
            location=url.location,
            tooltip=url.tip,
            display=text,
        )
        cell.value = text
        cell.data_type = "s"
        if fmt is None:
            cell.style = "Hyperlink"
        else:
            assign_styles(cell, styles)

    def write_rich_string(
        self, row: int, col: int, rich: RichStringSpec, fmt: FormatSpec | None = None
    ) -> None:
        if not rich.fragments:
            raise XlsxError.from_code(
                "ParameterError", "Rich string must contain at least one fragment."
            )
        _check_string(rich.plain_text(), row, col)
        styles = build_styles(fmt)
        parts: list[str | TextBlock] = []
        for fragment in rich.fragments:
            if fragment.format is None:
                parts.append(fragment.text)
            else:
                parts.append(TextBlock(build_inline_font(fragment.format), fragment.text))
        cell = self._cell(row, col)
        cell.value = CellRichText(parts)
        assign_styles(cell, styles)

    def clear_cell(self, row: int, col: int) -> None:
        """Remove the value, format, hyperlink and note of one cell."""
        check_cell(row, col)
        cell = self.sheet.cell(row=row + 1, column=col + 1)
        if isinstance(cell, MergedCell):
            return
        cell.value = None
        cell.hyperlink = None
        cell.comment = None
        cell.style = "Normal"

    def clear_cell_format(self, row: int, col: int) -> None:
        check_cell(row, col)
        self.sheet.cell(row=row + 1, column=col + 1).style = "Normal"

    def read_value(self, row: int, col: int) -> object:
        """Return the stored openpyxl value of one cell."""
        check_cell(row, col)
        return self.sheet.cell(row=row + 1, column=col + 1).value

    # Layout

    def set_column_width(self, col: int, width: float) -> None:
        self.set_column_range_width(col, col, width)

    def set_column_range_width(self, first_col: int, last_col: int, width: float) -> None:
        """Set the same width on every column of an inclusive range."""
        check_range(0, first_col, 0, last_col)
        if not 0 <= width <= MAX_COLUMN_WIDTH:
            raise XlsxError.from_code(
                "ParameterError",
                f"Column width must be 0..{MAX_COLUMN_WIDTH}: {width}",
                sheet=self.name,
                col=first_col,
            )
        for col in range(first_col, last_col + 1):
            self.sheet.column_dimensions[column_index_to_label(col)].width = float(width)

    def set_column_format(self, col: int, fmt: FormatSpec) -> None:
        check_col(col)
        apply_format(self.sheet.column_dimensions[column_index_to_label(col)], fmt)

    def set_row_height(self, row: int, height: float) -> None:
        check_row(row)
        if not 0 <= height <= MAX_ROW_HEIGHT:
            raise XlsxError.from_code(
                "ParameterError",
                f"Row height must be 0..{MAX_ROW_HEIGHT}: {height}",
                row=row,
            )
        self.sheet.row_dimensions[row + 1].height = float(height)

    def set_row_format(self, row: int, fmt: FormatSpec) -> None:
        check_row(row)
        apply_format(self.sheet.row_dimensions[row + 1], fmt)

    def merged_ranges(self) -> list[Bounds]:
        return [
            (merged.min_row - 1, merged.min_col - 1, merged.max_row - 1, merged.max_col - 1)
            for merged in self.sheet.merged_cells.ranges
        ]

    def merge_range(
        self,
        first_row: int,
        first_col: int,
        last_row: int,
        last_col: int,
        value: CellValue,
        fmt: FormatSpec | None = None,
    ) -> None:
        check_range(first_row, first_col, last_row, last_col)
        bounds = (first_row, first_col, last_row, last_col)
        if first_row == last_row and first_col == last_col:
            raise XlsxError.from_code(
                "MergeRangeSingleCell",
                f"Cannot merge a single cell: {range_to_a1(*bounds)}.",
                sheet=self.name,
                row=first_row,
                col=first_col,
            )
        overlapped = [
            range_to_a1(*existing)
            for existing in self.merged_ranges()
            if ranges_overlap(bounds, existing)
        ]
        if overlapped:
            raise XlsxError.from_code(
                "MergeRangeOverlaps",
                f"Merge range {range_to_a1(*bounds)} overlaps existing merged ranges: "
                + ", ".join(overlapped)
                + ".",
                sheet=self.name,
                row=first_row,
                col=first_col,
            )
        self.write_value(first_row, first_col, value, fmt)
        self.sheet.merge_cells(
            start_row=first_row + 1,
            start_column=first_col + 1,
            end_row=last_row + 1,
            end_column=last_col + 1,
        )
        for cell in self._iter_cells(bounds):
            apply_format(cell, fmt)

    def _iter_cells(self, bounds: Bounds) -> Iterator[Cell | MergedCell]:
        first_row, first_col, last_row, last_col = bounds
        for row in range(first_row, last_row + 1):
            for col in range(first_col, last_col + 1):
                yield self.sheet.cell(row=row + 1, column=col + 1)

    def set_range_format(self, bounds: Bounds, fmt: FormatSpec) -> None:
        """Overlay ``fmt`` on every cell in the range, keeping values."""
        check_range(*bounds)
        for cell in self._iter_cells(bounds):
            apply_format(cell, fmt)

    def set_range_format_with_border(
        self, bounds: Bounds, fmt: FormatSpec, border: FormatSpec
    ) -> None:
        """Format the range and draw ``border``'s sides around its perimeter."""
        check_range(*bounds)
        first_row, first_col, last_row, last_col = bounds
        for cell in self._iter_cells(bounds):
            row = cell.row - 1
            col = cell.column - 1
            cell_format = fmt.perimeter_border(
                border,
                top=row == first_row,
                bottom=row == last_row,
                left=col == first_col,
                right=col == last_col,
            )
            apply_format(cell, cell_format)

    def autofit(self) -> None:
        """Estimate column widths from the longest text in each used column."""
        max_lengths: dict[int, int] = {}
        for row in self.sheet.iter_rows():
            for cell in row:
                value = cell.value
                if value is None or value == "":
                    continue
                length = _text_display_length(value)
                column = cell.column
                if length > max_lengths.get(column, 0):
                    max_lengths[column] = length
        for column, max_len in max_lengths.items():
            width = min(float(max_len + 2), MAX_COLUMN_WIDTH)
            self.sheet.column_dimensions[column_index_to_label(column - 1)].width = max(
                width, _DEFAULT_COLUMN_WIDTH
            )

    def group_rows(self, first_row: int, last_row: int, *, hidden: bool = False) -> None:
        """Add one outline level to the rows, optionally collapsing them."""
        check_range(first_row, 0, last_row, 0)
        dimensions = [
            self.sheet.row_dimensions[row + 1] for row in range(first_row, last_row + 1)
        ]
        self._group(dimensions, hidden)

    def group_columns(
        self, first_col: int, last_col: int, *, hidden: bool = False
    ) -> None:
        check_range(0, first_col, 0, last_col)
        dimensions = [
            self.sheet.column_dimensions[column_index_to_label(col)]
            for col in range(first_col, last_col + 1)
        ]
        self._group(dimensions, hidden)

    @staticmethod
    def _group(dimensions: list[RowDimension] | list[ColumnDimension], hidden: bool) -> None:
        level = max((dimension.outline_level or 0) for dimension in dimensions) + 1
        if level > 7:
            raise XlsxError.from_code(
                "ParameterError", "Excel supports at most 7 outline levels."
            )
        for dimension in dimensions:
            dimension.outline_level = level
            if hidden:
                dimension.hidden = True

    def set_freeze_panes(self, row: int, col: int) -> None:
        check_cell(row, col)
        self.sheet.freeze_panes = cell_to_a1(row, col) if (row or col) else None

    def set_freeze_panes_top_cell(self, row: int, col: int) -> None:
        """Set the first visible cell of the scrolling pane."""
        check_cell(row, col)
        pane = self.sheet.sheet_view.pane
        if pane is None:
            raise XlsxError.from_code(
                "ParameterError", "set_freeze_panes must be called before the top cell."
            )
        pane.topLeftCell = cell_to_a1(row, col)

    # Objects

    def add_table(self, bounds: Bounds, spec: TableSpec) -> str:
        """Add a worksheet table and return its name."""
        check_range(*bounds)
        first_row, first_col, last_row, last_col = bounds
        data_first_row = first_row + (1 if spec.header_row else 0)
        data_last_row = last_row - (1 if spec.total_row else 0)
        if data_last_row < data_first_row:
            raise XlsxError.from_code(
                "TableError",
                f"Table range {range_to_a1(*bounds)} has no data rows.",
                sheet=self.name,
            )
        width = last_col - first_col + 1
        if len(spec.columns) > width:
            raise XlsxError.from_code(
                "TableError",
                f"Table has {len(spec.columns)} column definitions for {width} columns.",
                sheet=self.name,
            )
        headers = self._table_headers(bounds, spec)
        lowered = [header.lower() for header in headers]
        duplicates = sorted({h for h in headers if lowered.count(h.lower()) > 1})
        if duplicates:
            raise XlsxError.from_code(
                "TableError",
                "Table column headers must be unique: " + ", ".join(duplicates),
                sheet=self.name,
            )
        for name, existing in self.table_ranges():
            if ranges_overlap(bounds, existing):
                raise XlsxError.from_code(
                    "TableRangeOverlaps",
                    f"Table range {range_to_a1(*bounds)} overlaps table "
                    f"'{name}' ({range_to_a1(*existing)}).",
                    sheet=self.name,
                )
        table_name = spec.name or self.workbook.next_table_name()
        if table_name.lower() in {name.lower() for name in self.workbook.table_names()}:
            raise XlsxError.from_code(
                "TableNameReused",
                f"Table name already exists: {table_name}",
                sheet=self.name,
            )

        ref = range_to_a1(*bounds)
        table = Table(displayName=table_name, ref=ref)
        table.headerRowCount = 1 if spec.header_row else 0
        if spec.total_row:
            table.totalsRowCount = 1
        table.tableStyleInfo = TableStyleInfo(
            name=spec.style if spec.style != "None" else None,
            showFirstColumn=spec.first_column,
            showLastColumn=spec.last_column,
            showRowStripes=spec.banded_rows,
            showColumnStripes=spec.banded_columns,
        )
        for index, header in enumerate(headers):
            column_spec = spec.columns[index] if index < len(spec.columns) else None
            column = TableColumn(id=index + 1, name=header)
            if column_spec is not None and spec.total_row:
                if column_spec.total_function not in (None, "none"):
                    column.totalsRowFunction = column_spec.total_function
                elif column_spec.total_label is not None:
                    column.totalsRowLabel = column_spec.total_label
            table.tableColumns.append(column)
        if spec.autofilter and spec.header_row:
            filter_last_row = last_row - (1 if spec.total_row else 0)
            table.autoFilter = AutoFilter(
                ref=range_to_a1(first_row, first_col, filter_last_row, last_col)
            )

        if spec.header_row:
            for index, header in enumerate(headers):
                self.write_string(first_row, first_col + index, header)
        for index, column_spec in enumerate(spec.columns):
            if column_spec.formula is None:
                continue
            for row in range(data_first_row, data_last_row + 1):
                self.sheet.cell(row=row + 1, column=first_col + index + 1).value = (
                    f"={column_spec.formula}"
                )
        if spec.total_row:
            self._write_total_row(last_row, first_col, headers, spec, table_name)
        self.sheet.add_table(table)
        logger.debug("Added table %s at %s!%s.", table_name, self.name, ref)
        return table_name

    def _table_headers(self, bounds: Bounds, spec: TableSpec) -> list[str]:
        first_row, first_col, _, last_col = bounds
        headers: list[str] = []
        for index in range(last_col - first_col + 1):
            column_spec = spec.columns[index] if index < len(spec.columns) else None
            header = column_spec.header if column_spec is not None else None
            if header is None and spec.header_row:
                existing = self.sheet.cell(row=first_row + 1, column=first_col + index + 1).value
                if isinstance(existing, str) and existing:
                    header = existing
            headers.append(header or f"Column{index + 1}")
        return headers

    def _write_total_row(
        self,
        row: int,
        first_col: int,
        headers: list[str],
        spec: TableSpec,
        table_name: str,
    ) -> None:
        for index, column_spec in enumerate(spec.columns):
            cell = self.sheet.cell(row=row + 1, column=first_col + index + 1)
            function = column_spec.total_function
            if function not in (None, "none"):
                header = headers[index].replace("'", "''").replace("[", "'[").replace("]", "']")
                cell.value = f"=SUBTOTAL({_SUBTOTAL_CODES[function]},{table_name}[{header}])"
            elif column_spec.total_label is not None:
                cell.value = column_spec.total_label
                cell.data_type = "s"

    def table_ranges(self) -> list[tuple[str, Bounds]]:
        """Collect (table_name, bounds) pairs from worksheet tables."""
        pairs: list[tuple[str, Bounds]] = []
        for table in self.sheet.tables.values():
            min_col, min_row, max_col, max_row = _table_bounds(table.ref)
            pairs.append((table.displayName, (min_row, min_col, max_row, max_col)))
        return pairs

    def insert_image(
        self,
        row: int,
        col: int,
        image: ImageSpec,
        *,
        x_offset: int = 0,
        y_offset: int = 0,
        width: float | None = None,
        height: float | None = None,
    ) -> None:
        check_cell(row, col)
        if x_offset < 0 or y_offset < 0:
            raise XlsxError.from_code("ParameterError", "Image offsets must not be negative.")
        if image.alt_text is not None:
            warn_once("image-alt-text", "openpyxl does not write image alt text; ignored.")
        drawn_width = width if width is not None else image.scaled_width
        drawn_height = height if height is not None else image.scaled_height
        picture = OpenpyxlImage(io.BytesIO(image.data))
        picture.width = drawn_width
        picture.height = drawn_height
        self.sheet.add_image(
            picture, _anchor(row, col, x_offset, y_offset, drawn_width, drawn_height)
        )

    def insert_image_fit_to_cell(
        self, row: int, col: int, image: ImageSpec, keep_aspect_ratio: bool
    ) -> None:
        check_cell(row, col)
        cell_width, cell_height = self.cell_pixel_size(row, col)
        if keep_aspect_ratio:
            scale = min(cell_width / image.width, cell_height / image.height)
            width, height = image.width * scale, image.height * scale
        else:
            width, height = float(cell_width), float(cell_height)
        self.insert_image(row, col, image, width=width, height=height)

    def embed_image(
        self, row: int, col: int, image: ImageSpec, fmt: FormatSpec | None = None
    ) -> None:
        """Place ``image`` over one cell, scaled to fit it.

        openpyxl has no in-cell picture support, so the image floats over the
        cell instead of becoming its value.
        """
        self._check_writable(row, col)
        styles = build_styles(fmt)
        warn_once(
            "embed-image",
            "openpyxl cannot embed images in cells; image placed over the cell.",
        )
        self.insert_image_fit_to_cell(row, col, image, True)
        if styles:
            assign_styles(self._cell(row, col), styles)

    def set_header_image(self, image: ImageSpec, position: HeaderImagePosition) -> None:
        self._check_header_image(self.sheet.oddHeader, position, "header")

    def set_footer_image(self, image: ImageSpec, position: HeaderImagePosition) -> None:
        self._check_header_image(self.sheet.oddFooter, position, "footer")

    def _check_header_image(
        self, item: HeaderFooterItem, position: HeaderImagePosition, kind: str
    ) -> None:
        if position not in _SECTION_NAMES.values():
            raise XlsxError.from_code(
                "ParameterError",
                f"Unknown {kind} image position: {position}",
                sheet=self.name,
            )
        if "&G" not in (getattr(item, position).text or ""):
            raise XlsxError.from_code(
                "ParameterError",
                f"The {position} {kind} section has no picture placeholder.",
                sheet=self.name,
                hint=f"Add &[Picture] to the {position} section of the {kind} first.",
            )
        warn_once(
            f"{kind}-image",
            f"openpyxl does not write {kind} images; image ignored.",
        )

    def cell_pixel_size(self, row: int, col: int) -> tuple[int, int]:
        column = self.sheet.column_dimensions.get(column_index_to_label(col))
        width = column.width if column is not None and column.width else _DEFAULT_COLUMN_WIDTH
        row_dimension = self.sheet.row_dimensions.get(row + 1)
        height = (
            row_dimension.height
            if row_dimension is not None and row_dimension.height
            else _DEFAULT_ROW_HEIGHT
        )
        return column_width_to_pixels(width), int(height / 0.75 + 0.5)

    def insert_chart(
        self, row: int, col: int, chart: ChartSpec, *, x_offset: int = 0, y_offset: int = 0
    ) -> None:
        check_cell(row, col)
        if x_offset < 0 or y_offset < 0:
            raise XlsxError.from_code("ParameterError", "Chart offsets must not be negative.")
        rendered = render_chart(chart)
        self.sheet.add_chart(
            rendered, _anchor(row, col, x_offset, y_offset, chart.width, chart.height)
        )
        logger.debug("Inserted %s chart at %s!%s.", chart.chart_type, self.name, cell_to_a1(row, col))

    def insert_note(self, row: int, col: int, note: NoteSpec) -> None:
        text = note.display_text()
        _check_string(text, row, col)
        cell = self._cell(row, col)
        if note.visible or note.background_color is not None:
            warn_once(
                "note-display",
                "openpyxl does not write note visibility or background colour.",
            )
        if note.font_name is not None or note.font_size is not None:
            warn_once("note-font", "openpyxl does not write note fonts; ignored.")
        cell.comment = Comment(text, note.author or "", width=note.width, height=note.height)

    def add_conditional_format(self, bounds: Bounds, rule: ConditionalRuleSpec) -> None:
        check_range(*bounds)
        rendered = rule.render(cell_to_a1(bounds[0], bounds[1]))
        self.sheet.conditional_formatting.add(range_to_a1(*bounds), rendered)

    def autofilter(self, bounds: Bounds) -> None:
        check_range(*bounds)
        self.sheet.auto_filter.ref = range_to_a1(*bounds)

    # Sheet state

    def set_hidden(self, enable: bool) -> None:
        self.sheet.sheet_state = "hidden" if enable else "visible"

    def protect(self, password: str | None = None) -> None:
        self.sheet.protection.sheet = True
        if password:
            self.sheet.protection.password = password

    def set_tab_color(self, color: Color) -> None:
        self.sheet.sheet_properties.tabColor = color.argb

    def set_zoom(self, zoom: int) -> None:
        if not 10 <= zoom <= 400:
            raise XlsxError.from_code("ParameterError", f"Zoom must be 10..400: {zoom}")
        self.sheet.sheet_view.zoomScale = zoom

    # Page setup

    def set_header(self, text: str) -> None:
        _assign_header_footer(self.sheet.oddHeader, text)

    def set_footer(self, text: str) -> None:
        _assign_header_footer(self.sheet.oddFooter, text)

    def set_orientation(self, orientation: str) -> None:
        self.sheet.page_setup.orientation = orientation

    def set_paper_size(self, paper_size: int) -> None:
        if paper_size < 0:
            raise XlsxError.from_code("ParameterError", f"Invalid paper size: {paper_size}")
        self.sheet.page_setup.paperSize = paper_size

    def set_print_first_page_number(self, number: int) -> None:
        self.sheet.page_setup.firstPageNumber = number
        self.sheet.page_setup.useFirstPageNumber = True

    def set_print_scale(self, scale: int) -> None:
        if not 10 <= scale <= 400:
            raise XlsxError.from_code("ParameterError", f"Print scale must be 10..400: {scale}")
        self.sheet.page_setup.scale = scale

    def set_print_fit_to_pages(self, width: int, height: int) -> None:
        properties = self.sheet.sheet_properties
        if properties.pageSetUpPr is None:
            properties.pageSetUpPr = PageSetupProperties()
        properties.pageSetUpPr.fitToPage = True
        self.sheet.page_setup.fitToWidth = width
        self.sheet.page_setup.fitToHeight = height

    def set_print_center_horizontally(self, enable: bool) -> None:
        self.sheet.print_options.horizontalCentered = enable

    def set_print_center_vertically(self, enable: bool) -> None:
        self.sheet.print_options.verticalCentered = enable

    def set_screen_gridlines(self, enable: bool) -> None:
        self.sheet.sheet_view.showGridLines = enable

    def set_print_gridlines(self, enable: bool) -> None:
        self.sheet.print_options.gridLines = enable

    def set_print_black_and_white(self, enable: bool) -> None:
        self.sheet.page_setup.blackAndWhite = enable

    def set_print_draft(self, enable: bool) -> None:
        self.sheet.page_setup.draft = enable

    def set_print_headings(self, enable: bool) -> None:
        self.sheet.print_options.headings = enable

    def set_print_area(self, bounds: Bounds) -> None:
        check_range(*bounds)
        self.sheet.print_area = range_to_a1(*bounds, absolute=True)

    def set_repeat_rows(self, first_row: int, last_row: int) -> None:
        check_range(first_row, 0, last_row, 0)
        self.sheet.print_title_rows = f"{first_row + 1}:{last_row + 1}"

    def set_repeat_columns(self, first_col: int, last_col: int) -> None:
        check_range(0, first_col, 0, last_col)
        first = column_index_to_label(first_col)
        last = column_index_to_label(last_col)
        self.sheet.print_title_cols = f"{first}:{last}"

    def set_margins(
        self,
        left: float,
        right: float,
        top: float,
        bottom: float,
        header: float,
        footer: float,
    ) -> None:
        """Set page margins in inches; negative values keep Excel's default."""
        defaults = PageMargins()
        self.sheet.page_margins = PageMargins(
            left=left if left >= 0 else defaults.left,
            right=right if right >= 0 else defaults.right,
            top=top if top >= 0 else defaults.top,
            bottom=bottom if bottom >= 0 else defaults.bottom,
            header=header if header >= 0 else defaults.header,
            footer=footer if footer >= 0 else defaults.footer,
        )

    def define_local_name(self, name: str, formula: str) -> None:
        self.sheet.defined_names[name] = DefinedName(name, attr_text=formula.lstrip("="))


def _table_bounds(ref: str) -> tuple[int, int, int, int]:
    """Return zero-based (min_col, min_row, max_col, max_row) for a table ref."""
    min_col, min_row, max_col, max_row = range_boundaries(ref)
    return min_col - 1, min_row - 1, max_col - 1, max_row - 1


def _header_footer_sections(text: str) -> dict[str, str | None]:
    """Split header or footer text on its ``&L``/``&C``/``&R`` section codes.

    Text before the first code, or text without codes, is centred.
    Named placeholders such as ``&[Page]`` are replaced by their short codes.
    """
    if len(text) > 255:
        raise XlsxError.from_code(
            "ParameterError", "Header and footer text must be at most 255 characters."
        )
    for placeholder, code in _HEADER_PLACEHOLDERS.items():
        text = text.replace(placeholder, code)
    parts = _SECTION_CODE.split(text)
    sections: dict[str, str | None] = {"left": None, "center": None, "right": None}
    if parts[0]:
        sections["center"] = parts[0]
    for code, body in zip(parts[1::2], parts[2::2]):
        sections[_SECTION_NAMES[code]] = body or None
    return sections


def _assign_header_footer(item: HeaderFooterItem, text: str) -> None:
    for name, value in _header_footer_sections(text).items():
        getattr(item, name).text = value
