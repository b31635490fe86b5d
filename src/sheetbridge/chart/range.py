from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from ..errors import XlsxError
from ..shared import check_range, sheet_range_formula, split_sheet_range


class ChartRange(BaseModel):
    """A sheet-qualified cell range feeding a chart (zero-based bounds)."""

    model_config = ConfigDict(frozen=True)

    sheet: str
    first_row: int
    first_col: int
    last_row: int
    last_col: int

    @classmethod
    def new_from_range(
        cls, sheet: str, first_row: int, first_col: int, last_row: int, last_col: int
    ) -> ChartRange:
        check_range(first_row, first_col, last_row, last_col)
        return cls(
            sheet=sheet,
            first_row=first_row,
            first_col=first_col,
            last_row=last_row,
            last_col=last_col,
        )

    @classmethod
    def new_from_string(cls, value: str) -> ChartRange:
        """Parse ``Sheet1!$A$1:$A$5`` or ``'My Sheet'!A1:A5``."""
        try:
            sheet, bounds = split_sheet_range(value)
        except ValueError as exc:
            raise XlsxError.from_code(
                "ParameterError", f"Invalid chart range: {value}"
            ) from exc
        if sheet is None:
            raise XlsxError.from_code(
                "ParameterError",
                f"Chart range must include a sheet name: {value}",
                hint="Use the form Sheet1!$A$1:$A$5.",
            )
        return cls.new_from_range(sheet, *bounds)

    def formula(self) -> str:
        """Return the absolute reference, e.g. ``'My Sheet'!$A$1:$A$5``."""
        return sheet_range_formula(
            self.sheet, self.first_row, self.first_col, self.last_row, self.last_col
        )

    @property
    def point_count(self) -> int:
        rows = self.last_row - self.first_row + 1
        cols = self.last_col - self.first_col + 1
        return max(rows, cols)


ChartRangeLike = ChartRange | str


def to_chart_range(value: ChartRangeLike) -> ChartRange:
    if isinstance(value, ChartRange):
        return value
    return ChartRange.new_from_string(value)
