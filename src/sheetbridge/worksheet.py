"""Positional worksheet handle.

A ``Worksheet`` is a locator: ``(SharedDocument, index)``. It holds no sheet
object, so every call looks the sheet up again under the document lock and
observes the current document state. Two handles with the same document and
index compare equal and are interchangeable.

Host values and sub-object handles are snapshotted *before* the document lock
is taken; the lock is then held for one engine call.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from typing_extensions import Self

from .chart import Chart
from .color import ColorLike, to_color
from .conditional_format import ConditionalFormatRule, ConditionalRuleSpec
from .engine.worksheet import (
    EngineWorksheet,
    column_pixels_to_width,
    row_pixels_to_height,
)
from .errors import XlsxError
from .format import Format
from .formula import Formula, FormulaSpec
from .image import Image
from .note import Note
from .rich_string import RichString
from .sync import snapshot_of
from .table import Table, TableSpec
from .types import HeaderImagePosition
from .url import Url, UrlSpec
from .values import DateLike, classify, classify_many, classify_matrix, coerce_datetime

if TYPE_CHECKING:
    from .document import SharedDocument


def _formula_spec(formula: Formula | str) -> FormulaSpec:
    if isinstance(formula, Formula):
        return formula.snapshot()
    return Formula(formula).snapshot()


def _url_spec(url: Url | str) -> UrlSpec:
    if isinstance(url, Url):
        return url.snapshot()
    return UrlSpec(link=url)


def _transpose(columns: list[list[object]]) -> list[list[object]]:
    height = max((len(column) for column in columns), default=0)
    rows: list[list[object]] = [[] for _ in range(height)]
    for column in columns:
        for index in range(height):
            rows[index].append(column[index] if index < len(column) else None)
    return rows


class Worksheet:
    """Handle for the worksheet at one position of a shared document.

    Obtain handles from ``Workbook.add_worksheet``,
    ``Workbook.worksheet_from_index`` or ``Workbook.worksheet_from_name``.
    Mutators return ``self`` so calls chain; failures raise ``XlsxError``.
    """

    __slots__ = ("_document", "_index")

    def __init__(self, document: SharedDocument, index: int) -> None:
        self._document = document
        self._index = index

    def _run(self, operation: Callable[[EngineWorksheet], object]) -> Self:
        self._document.run_on_sheet(self._index, operation)
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Worksheet):
            return NotImplemented
        return self._document is other._document and self._index == other._index

    def __hash__(self) -> int:
        return hash((id(self._document), self._index))

    def __repr__(self) -> str:
        return f"Worksheet(index={self._index})"

    # Identity

    @property
    def index(self) -> int:
        return self._index

    @property
    def name(self) -> str:
        return self._document.run_on_sheet(self._index, lambda sheet: sheet.name)

    def set_name(self, name: str) -> Self:
        """Rename the sheet. Raises the ``Sheetname*`` errors on invalid names."""

        def _rename(sheet: EngineWorksheet) -> None:
            sheet.workbook.rename_sheet(sheet, name)

        return self._run(_rename)

    # Writes

    def write(self, row: int, col: int, value: object) -> Self:
        """Classify ``value`` and write it. See ``sheetbridge.values.classify``."""
        cell_value = classify(value)
        return self._run(lambda sheet: sheet.write_value(row, col, cell_value))

    def write_with_format(self, row: int, col: int, value: object, format: Format) -> Self:
        cell_value = classify(value)
        fmt = format.snapshot()
        return self._run(lambda sheet: sheet.write_value(row, col, cell_value, fmt))

    def write_blank(self, row: int, col: int, format: Format | None = None) -> Self:
        fmt = snapshot_of(format)
        return self._run(lambda sheet: sheet.write_blank(row, col, fmt))

    def write_string(self, row: int, col: int, text: str) -> Self:
        return self.write_string_with_format(row, col, text, None)

    def write_string_with_format(
        self, row: int, col: int, text: str, format: Format | None
    ) -> Self:
        fmt = snapshot_of(format)
        return self._run(lambda sheet: sheet.write_string(row, col, str(text), fmt))

    def write_number(self, row: int, col: int, number: float) -> Self:
        return self.write_number_with_format(row, col, number, None)

    def write_number_with_format(
        self, row: int, col: int, number: float, format: Format | None
    ) -> Self:
        fmt = snapshot_of(format)
        return self._run(lambda sheet: sheet.write_number(row, col, number, fmt))

    def write_boolean(self, row: int, col: int, value: bool) -> Self:
        return self.write_boolean_with_format(row, col, value, None)

    def write_boolean_with_format(
        self, row: int, col: int, value: bool, format: Format | None
    ) -> Self:
        fmt = snapshot_of(format)
        return self._run(lambda sheet: sheet.write_boolean(row, col, value, fmt))

    def write_datetime(self, row: int, col: int, value: DateLike) -> Self:
        return self.write_datetime_with_format(row, col, value, None)

    def write_datetime_with_format(
        self, row: int, col: int, value: DateLike, format: Format | None
    ) -> Self:
        """Write a date/time. Raises ``InvalidDate`` for non-date arguments."""
        date = coerce_datetime(value)
        fmt = snapshot_of(format)
        return self._run(lambda sheet: sheet.write_datetime(row, col, date, fmt))

    def write_formula(self, row: int, col: int, formula: Formula | str) -> Self:
        return self.write_formula_with_format(row, col, formula, None)

    def write_formula_with_format(
        self, row: int, col: int, formula: Formula | str, format: Format | None
    ) -> Self:
        spec = _formula_spec(formula)
        fmt = snapshot_of(format)
        return self._run(lambda sheet: sheet.write_formula(row, col, spec, fmt))

    def write_array_formula(
        self,
        first_row: int,
        first_col: int,
        last_row: int,
        last_col: int,
        formula: Formula | str,
    ) -> Self:
        return self.write_array_formula_with_format(
            first_row, first_col, last_row, last_col, formula, None
        )

    def write_array_formula_with_format(
        self,
        first_row: int,
        first_col: int,
        last_row: int,
        last_col: int,
        formula: Formula | str,
        format: Format | None,
    ) -> Self:
        spec = _formula_spec(formula)
        fmt = snapshot_of(format)
        return self._run(
            lambda sheet: sheet.write_array_formula(
                first_row, first_col, last_row, last_col, spec, fmt
            )
        )

    def write_dynamic_array_formula(
        self,
        first_row: int,
        first_col: int,
        last_row: int,
        last_col: int,
        formula: Formula | str,
    ) -> Self:
        return self.write_dynamic_array_formula_with_format(
            first_row, first_col, last_row, last_col, formula, None
        )

    def write_dynamic_array_formula_with_format(
        self,
        first_row: int,
        first_col: int,
        last_row: int,
        last_col: int,
        formula: Formula | str,
        format: Format | None,
    ) -> Self:
        spec = _formula_spec(formula)
        fmt = snapshot_of(format)
        return self._run(
            lambda sheet: sheet.write_array_formula(
                first_row, first_col, last_row, last_col, spec, fmt, dynamic=True
            )
        )

    def write_dynamic_formula(self, row: int, col: int, formula: Formula | str) -> Self:
        return self.write_dynamic_formula_with_format(row, col, formula, None)

    def write_dynamic_formula_with_format(
        self, row: int, col: int, formula: Formula | str, format: Format | None
    ) -> Self:
        """Write a single-cell dynamic array formula such as ``=LEN(A1:A3)``."""
        return self.write_dynamic_array_formula_with_format(
            row, col, row, col, formula, format
        )

    def write_url(self, row: int, col: int, url: Url | str) -> Self:
        return self.write_url_with_format(row, col, url, None)

    def write_url_with_format(
        self, row: int, col: int, url: Url | str, format: Format | None
    ) -> Self:
        spec = _url_spec(url)
        fmt = snapshot_of(format)
        return self._run(lambda sheet: sheet.write_url(row, col, spec, fmt))

    def write_url_with_text(self, row: int, col: int, link: str, text: str) -> Self:
        return self.write_url_with_format(row, col, Url(link).set_text(text), None)

    def write_url_with_options(
        self,
        row: int,
        col: int,
        link: str,
        text: str | None = None,
        tip: str | None = None,
        format: Format | None = None,
    ) -> Self:
        spec = UrlSpec(link=link, text=text, tip=tip)
        fmt = snapshot_of(format)
        return self._run(lambda sheet: sheet.write_url(row, col, spec, fmt))

    def write_rich_string(self, row: int, col: int, rich_string: RichString) -> Self:
        return self.write_rich_string_with_format(row, col, rich_string, None)

    def write_rich_string_with_format(
        self, row: int, col: int, rich_string: RichString, format: Format | None
    ) -> Self:
        spec = rich_string.snapshot()
        fmt = snapshot_of(format)
        return self._run(lambda sheet: sheet.write_rich_string(row, col, spec, fmt))

    def write_row(self, row: int, col: int, values: Iterable[object]) -> Self:
        return self.write_row_with_format(row, col, values, None)

    def write_row_with_format(
        self, row: int, col: int, values: Iterable[object], format: Format | None
    ) -> Self:
        """Write ``values`` left to right starting at (row, col)."""
        block = [classify_many(values)]
        fmt = snapshot_of(format)
        return self._run(lambda sheet: sheet.write_block(row, col, block, fmt))

    def write_column(self, row: int, col: int, values: Iterable[object]) -> Self:
        return self.write_column_with_format(row, col, values, None)

    def write_column_with_format(
        self, row: int, col: int, values: Iterable[object], format: Format | None
    ) -> Self:
        """Write ``values`` top to bottom starting at (row, col)."""
        block = [[value] for value in classify_many(values)]
        fmt = snapshot_of(format)
        return self._run(lambda sheet: sheet.write_block(row, col, block, fmt))

    def write_row_matrix(
        self, row: int, col: int, rows: Iterable[Iterable[object]]
    ) -> Self:
        """Write each inner iterable as one row."""
        block = classify_matrix(rows)
        return self._run(lambda sheet: sheet.write_block(row, col, block))

    def write_column_matrix(
        self, row: int, col: int, columns: Iterable[Iterable[object]]
    ) -> Self:
        """Write each inner iterable as one column; short columns are padded blank."""
        block = classify_matrix(_transpose([list(column) for column in columns]))
        return self._run(lambda sheet: sheet.write_block(row, col, block))

    def clear_cell(self, row: int, col: int) -> Self:
        return self._run(lambda sheet: sheet.clear_cell(row, col))

    def clear_cell_format(self, row: int, col: int) -> Self:
        return self._run(lambda sheet: sheet.clear_cell_format(row, col))

    def read_value(self, row: int, col: int) -> object:
        """Return the value currently stored at (row, col), as openpyxl holds it."""
        return self._document.run_on_sheet(
            self._index, lambda sheet: sheet.read_value(row, col)
        )

    # Layout

    def set_column_width(self, col: int, width: float) -> Self:
        """Set a column width in character units."""
        return self._run(lambda sheet: sheet.set_column_width(col, width))

    def set_column_width_pixels(self, col: int, width: int) -> Self:
        return self.set_column_width(col, column_pixels_to_width(width))

    def set_column_range_width(self, first_col: int, last_col: int, width: float) -> Self:
        return self._run(lambda sheet: sheet.set_column_range_width(first_col, last_col, width))

    def set_column_format(self, col: int, format: Format) -> Self:
        fmt = format.snapshot()
        return self._run(lambda sheet: sheet.set_column_format(col, fmt))

    def set_row_height(self, row: int, height: float) -> Self:
        """Set a row height in points."""
        return self._run(lambda sheet: sheet.set_row_height(row, height))

    def set_row_height_pixels(self, row: int, height: int) -> Self:
        return self.set_row_height(row, row_pixels_to_height(height))

    def set_row_format(self, row: int, format: Format) -> Self:
        fmt = format.snapshot()
        return self._run(lambda sheet: sheet.set_row_format(row, fmt))

    def merge_range(
        self,
        first_row: int,
        first_col: int,
        last_row: int,
        last_col: int,
        value: object,
        format: Format | None = None,
    ) -> Self:
        """Merge a range and write ``value`` into it.

        Raises:
            XlsxError: ``MergeRangeSingleCell`` for a one-cell range,
                ``MergeRangeOverlaps`` when it intersects an existing merge.
        """
        cell_value = classify(value)
        fmt = snapshot_of(format)
        return self._run(
            lambda sheet: sheet.merge_range(
                first_row, first_col, last_row, last_col, cell_value, fmt
            )
        )

    def set_range_format(
        self, first_row: int, first_col: int, last_row: int, last_col: int, format: Format
    ) -> Self:
        fmt = format.snapshot()
        return self._run(
            lambda sheet: sheet.set_range_format((first_row, first_col, last_row, last_col), fmt)
        )

    def set_range_format_with_border(
        self,
        first_row: int,
        first_col: int,
        last_row: int,
        last_col: int,
        format: Format,
        border_format: Format,
    ) -> Self:
        fmt = format.snapshot()
        border = border_format.snapshot()
        return self._run(
            lambda sheet: sheet.set_range_format_with_border(
                (first_row, first_col, last_row, last_col), fmt, border
            )
        )

    def autofit(self) -> Self:
        return self._run(lambda sheet: sheet.autofit())

    def group_rows(self, first_row: int, last_row: int, hidden: bool = False) -> Self:
        return self._run(lambda sheet: sheet.group_rows(first_row, last_row, hidden=hidden))

    def group_columns(self, first_col: int, last_col: int, hidden: bool = False) -> Self:
        return self._run(
            lambda sheet: sheet.group_columns(first_col, last_col, hidden=hidden)
        )

    def set_freeze_panes(self, row: int, col: int) -> Self:
        return self._run(lambda sheet: sheet.set_freeze_panes(row, col))

    def set_freeze_panes_top_cell(self, row: int, col: int) -> Self:
        return self._run(lambda sheet: sheet.set_freeze_panes_top_cell(row, col))

    # Objects

    def add_table(
        self,
        first_row: int,
        first_col: int,
        last_row: int,
        last_col: int,
        table: Table | None = None,
    ) -> Self:
        spec = table.snapshot() if table is not None else TableSpec()
        return self._run(
            lambda sheet: sheet.add_table((first_row, first_col, last_row, last_col), spec)
        )

    def insert_image(self, row: int, col: int, image: Image) -> Self:
        spec = image.snapshot()
        return self._run(lambda sheet: sheet.insert_image(row, col, spec))

    def insert_image_with_offset(
        self, row: int, col: int, image: Image, x_offset: int, y_offset: int
    ) -> Self:
        spec = image.snapshot()
        return self._run(
            lambda sheet: sheet.insert_image(
                row, col, spec, x_offset=x_offset, y_offset=y_offset
            )
        )

    def insert_image_fit_to_cell(
        self, row: int, col: int, image: Image, keep_aspect_ratio: bool = True
    ) -> Self:
        spec = image.snapshot()
        return self._run(
            lambda sheet: sheet.insert_image_fit_to_cell(row, col, spec, keep_aspect_ratio)
        )

    def embed_image(self, row: int, col: int, image: Image) -> Self:
        """Place an image over one cell, scaled to fit it."""
        spec = image.snapshot()
        return self._run(lambda sheet: sheet.embed_image(row, col, spec))

    def embed_image_with_format(
        self, row: int, col: int, image: Image, format: Format
    ) -> Self:
        spec = image.snapshot()
        fmt = format.snapshot()
        return self._run(lambda sheet: sheet.embed_image(row, col, spec, fmt))

    def insert_chart(self, row: int, col: int, chart: Chart) -> Self:
        """Render the chart's current value into the sheet.

        The sheet keeps its own copy: later changes to ``chart`` (or to series
        handles obtained from it) do not reach the inserted chart.
        """
        spec = chart.snapshot()
        return self._run(lambda sheet: sheet.insert_chart(row, col, spec))

    def insert_chart_with_offset(
        self, row: int, col: int, chart: Chart, x_offset: int, y_offset: int
    ) -> Self:
        spec = chart.snapshot()
        return self._run(
            lambda sheet: sheet.insert_chart(
                row, col, spec, x_offset=x_offset, y_offset=y_offset
            )
        )

    def insert_note(self, row: int, col: int, note: Note) -> Self:
        spec = note.snapshot()
        return self._run(lambda sheet: sheet.insert_note(row, col, spec))

    def add_conditional_format(
        self,
        first_row: int,
        first_col: int,
        last_row: int,
        last_col: int,
        rule: ConditionalFormatRule,
    ) -> Self:
        """Attach any conditional format rule handle to a range."""
        spec = rule.snapshot() if isinstance(rule, ConditionalFormatRule) else None
        if not isinstance(spec, ConditionalRuleSpec):
            raise XlsxError.from_code(
                "ParameterError",
                f"Expected a conditional format rule, got {type(rule).__name__}.",
            )
        return self._run(
            lambda sheet: sheet.add_conditional_format(
                (first_row, first_col, last_row, last_col), spec
            )
        )

    def autofilter(self, first_row: int, first_col: int, last_row: int, last_col: int) -> Self:
        return self._run(
            lambda sheet: sheet.autofilter((first_row, first_col, last_row, last_col))
        )

    # Sheet state

    def set_active(self) -> Self:
        index = self._index

        def _activate(sheet: EngineWorksheet) -> None:
            sheet.workbook.set_active(index)

        return self._run(_activate)

    def set_hidden(self, enable: bool = True) -> Self:
        return self._run(lambda sheet: sheet.set_hidden(enable))

    def protect(self, password: str | None = None) -> Self:
        return self._run(lambda sheet: sheet.protect(password))

    def set_tab_color(self, color: ColorLike) -> Self:
        resolved = to_color(color)
        return self._run(lambda sheet: sheet.set_tab_color(resolved))

    def set_zoom(self, zoom: int) -> Self:
        return self._run(lambda sheet: sheet.set_zoom(zoom))

    # Page setup

    def set_header(self, header: str) -> Self:
        """Set the page header; ``&L``/``&C``/``&R`` select sections, default centre."""
        return self._run(lambda sheet: sheet.set_header(header))

    def set_footer(self, footer: str) -> Self:
        return self._run(lambda sheet: sheet.set_footer(footer))

    def set_header_image(self, image: Image, position: HeaderImagePosition) -> Self:
        """Attach an image to a header section that contains ``&[Picture]``.

        openpyxl does not write header images: the placeholder is checked and
        the image is dropped with a warning.
        """
        spec = image.snapshot()
        return self._run(lambda sheet: sheet.set_header_image(spec, position))

    def set_footer_image(self, image: Image, position: HeaderImagePosition) -> Self:
        spec = image.snapshot()
        return self._run(lambda sheet: sheet.set_footer_image(spec, position))

    def set_landscape(self) -> Self:
        return self._run(lambda sheet: sheet.set_orientation("landscape"))

    def set_portrait(self) -> Self:
        return self._run(lambda sheet: sheet.set_orientation("portrait"))

    def set_paper_size(self, paper_size: int) -> Self:
        return self._run(lambda sheet: sheet.set_paper_size(paper_size))

    def set_print_first_page_number(self, page_number: int) -> Self:
        return self._run(lambda sheet: sheet.set_print_first_page_number(page_number))

    def set_print_scale(self, scale: int) -> Self:
        return self._run(lambda sheet: sheet.set_print_scale(scale))

    def set_print_fit_to_pages(self, width: int, height: int) -> Self:
        """Fit the printout to pages; 0 leaves that direction unconstrained."""
        return self._run(lambda sheet: sheet.set_print_fit_to_pages(width, height))

    def set_print_center_horizontally(self, enable: bool = True) -> Self:
        return self._run(lambda sheet: sheet.set_print_center_horizontally(enable))

    def set_print_center_vertically(self, enable: bool = True) -> Self:
        return self._run(lambda sheet: sheet.set_print_center_vertically(enable))

    def set_screen_gridlines(self, enable: bool) -> Self:
        return self._run(lambda sheet: sheet.set_screen_gridlines(enable))

    def set_print_gridlines(self, enable: bool = True) -> Self:
        return self._run(lambda sheet: sheet.set_print_gridlines(enable))

    def set_print_black_and_white(self, enable: bool = True) -> Self:
        return self._run(lambda sheet: sheet.set_print_black_and_white(enable))

    def set_print_draft(self, enable: bool = True) -> Self:
        return self._run(lambda sheet: sheet.set_print_draft(enable))

    def set_print_headings(self, enable: bool = True) -> Self:
        return self._run(lambda sheet: sheet.set_print_headings(enable))

    def set_print_area(
        self, first_row: int, first_col: int, last_row: int, last_col: int
    ) -> Self:
        return self._run(
            lambda sheet: sheet.set_print_area((first_row, first_col, last_row, last_col))
        )

    def set_repeat_rows(self, first_row: int, last_row: int) -> Self:
        return self._run(lambda sheet: sheet.set_repeat_rows(first_row, last_row))

    def set_repeat_columns(self, first_col: int, last_col: int) -> Self:
        return self._run(lambda sheet: sheet.set_repeat_columns(first_col, last_col))

    def set_margins(
        self,
        left: float,
        right: float,
        top: float,
        bottom: float,
        header: float,
        footer: float,
    ) -> Self:
        """Set page margins in inches. Negative values keep Excel's defaults."""
        return self._run(
            lambda sheet: sheet.set_margins(left, right, top, bottom, header, footer)
        )
