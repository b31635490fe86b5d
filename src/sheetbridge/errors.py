from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

XlsxErrorCode = Literal[
    "RowColumnLimitError",
    "RowColumnOrderError",
    "SheetnameCannotBeBlank",
    "SheetnameLengthExceeded",
    "SheetnameContainsInvalidCharacter",
    "SheetnameStartsOrEndsWithApostrophe",
    "SheetnameReused",
    "SheetnameReserved",
    "MaxStringLengthExceeded",
    "MaxUrlLengthExceeded",
    "MergeRangeSingleCell",
    "MergeRangeOverlaps",
    "TableError",
    "TableNameReused",
    "TableRangeOverlaps",
    "ChartError",
    "ImageError",
    "DateTimeRangeError",
    "DateTimeParseError",
    "ParameterError",
    "SheetNotFound",
    "UnsupportedValueType",
    "InvalidDate",
]


class XlsxErrorDetail(BaseModel):
    """Structured details for a failed workbook operation."""

    code: XlsxErrorCode
    message: str
    sheet: str | None = None
    row: int | None = None
    col: int | None = None
    hint: str | None = None


class XlsxError(ValueError):
    """Workbook operation error with structured detail."""

    def __init__(self, detail: XlsxErrorDetail) -> None:
        super().__init__(detail.message)
        self.detail = detail

    @property
    def code(self) -> XlsxErrorCode:
        return self.detail.code

    @classmethod
    def from_code(
        cls,
        code: XlsxErrorCode,
        message: str,
        *,
        sheet: str | None = None,
        row: int | None = None,
        col: int | None = None,
        hint: str | None = None,
    ) -> XlsxError:
        """Build an XlsxError from an error code and message."""
        return cls(
            XlsxErrorDetail(
                code=code,
                message=message,
                sheet=sheet,
                row=row,
                col=col,
                hint=hint,
            )
        )

    def __repr__(self) -> str:
        return f"XlsxError(code={self.detail.code!r}, message={self.detail.message!r})"


__all__ = ["XlsxError", "XlsxErrorCode", "XlsxErrorDetail"]
