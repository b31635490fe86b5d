"""Classification of dynamically-typed host values into cell values.

``classify`` checks, in order, date/time values, ``Formula`` handles, ``Url``
handles, booleans, numbers, strings and ``None``; the first match wins and
anything else raises ``UnsupportedValueType``. Values are never coerced across
kinds, so ``"42"`` stays text.
"""

from __future__ import annotations

from collections.abc import Iterable
import datetime as dt
import decimal
import numbers
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from .errors import XlsxError
from .excel_datetime import ExcelDateTime
from .formula import Formula, FormulaSpec
from .url import Url, UrlSpec


class _CellValueBase(BaseModel):
    model_config = ConfigDict(frozen=True)


class NumberValue(_CellValueBase):
    kind: Literal["number"] = "number"
    value: float


class TextValue(_CellValueBase):
    kind: Literal["text"] = "text"
    value: str


class BooleanValue(_CellValueBase):
    kind: Literal["boolean"] = "boolean"
    value: bool


class EmptyValue(_CellValueBase):
    kind: Literal["empty"] = "empty"


class DateTimeValue(_CellValueBase):
    kind: Literal["datetime"] = "datetime"
    value: ExcelDateTime


class FormulaValue(_CellValueBase):
    kind: Literal["formula"] = "formula"
    value: FormulaSpec


class HyperlinkValue(_CellValueBase):
    kind: Literal["hyperlink"] = "hyperlink"
    value: UrlSpec


CellValue = Annotated[
    NumberValue
    | TextValue
    | BooleanValue
    | EmptyValue
    | DateTimeValue
    | FormulaValue
    | HyperlinkValue,
    Field(discriminator="kind"),
]

DateLike = dt.datetime | dt.date | dt.time | ExcelDateTime


def coerce_datetime(value: object) -> ExcelDateTime:
    """Convert a native date/time or ``ExcelDateTime`` into ``ExcelDateTime``.

    Raises:
        XlsxError: ``InvalidDate`` for any other value.
    """
    if isinstance(value, ExcelDateTime):
        return value
    if isinstance(value, (dt.datetime, dt.date, dt.time)):
        if isinstance(value, (dt.datetime, dt.time)) and value.tzinfo is not None:
            raise XlsxError.from_code(
                "InvalidDate",
                f"Timezone-aware values are not supported: {value!r}",
                hint="Convert to a naive local time first.",
            )
        return ExcelDateTime.from_python(value)
    raise XlsxError.from_code(
        "InvalidDate",
        f"Expected a date, time, datetime or ExcelDateTime, got {type(value).__name__}.",
    )


def classify(value: object) -> CellValue:
    """Classify one host value.

    Args:
        value: Any host value.

    Returns:
        Exactly one cell value variant.

    Raises:
        XlsxError: ``UnsupportedValueType`` when no variant matches.
    """
    if isinstance(value, (dt.datetime, dt.date, dt.time, ExcelDateTime)):
        if isinstance(value, (dt.datetime, dt.time)) and value.tzinfo is not None:
            raise XlsxError.from_code(
                "UnsupportedValueType",
                f"Timezone-aware date/time values are not supported: {value!r}",
            )
        return DateTimeValue(value=coerce_datetime(value))
    if isinstance(value, Formula):
        return FormulaValue(value=value.snapshot())
    if isinstance(value, Url):
        return HyperlinkValue(value=value.snapshot())
    # bool is a numbers.Real subclass; it must be checked first.
    if isinstance(value, bool):
        return BooleanValue(value=value)
    if isinstance(value, (numbers.Real, decimal.Decimal)):
        return NumberValue(value=float(value))
    if isinstance(value, str):
        return TextValue(value=value)
    if value is None:
        return EmptyValue()
    raise XlsxError.from_code(
        "UnsupportedValueType",
        f"Unsupported cell value type: {type(value).__name__}",
        hint="Use a number, str, bool, None, date/time, Formula or Url.",
    )


def classify_many(values: Iterable[object]) -> list[CellValue]:
    """Classify a row or column of values, failing on the first unsupported one."""
    return [classify(value) for value in values]


def classify_matrix(rows: Iterable[Iterable[object]]) -> list[list[CellValue]]:
    return [classify_many(row) for row in rows]


__all__ = [
    "BooleanValue",
    "CellValue",
    "DateLike",
    "DateTimeValue",
    "EmptyValue",
    "FormulaValue",
    "HyperlinkValue",
    "NumberValue",
    "TextValue",
    "classify",
    "classify_many",
    "classify_matrix",
    "coerce_datetime",
]
