from __future__ import annotations

from .a1 import (
    COL_MAX,
    MAX_STRING_LENGTH,
    MAX_URL_LENGTH,
    ROW_MAX,
    a1_to_cell,
    cell_to_a1,
    check_cell,
    check_col,
    check_range,
    check_row,
    column_index_to_label,
    column_label_to_index,
    quote_sheet_name,
    range_to_a1,
    ranges_overlap,
    sheet_range_formula,
    split_sheet_range,
)

__all__ = [
    "COL_MAX",
    "MAX_STRING_LENGTH",
    "MAX_URL_LENGTH",
    "ROW_MAX",
    "a1_to_cell",
    "cell_to_a1",
    "check_cell",
    "check_col",
    "check_range",
    "check_row",
    "column_index_to_label",
    "column_label_to_index",
    "quote_sheet_name",
    "range_to_a1",
    "ranges_overlap",
    "sheet_range_formula",
    "split_sheet_range",
]
