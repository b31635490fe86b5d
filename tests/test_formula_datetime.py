from __future__ import annotations

import copy
import datetime as dt

import pytest

from sheetbridge import Color, ExcelDateTime, Formula, XlsxError
from sheetbridge.color import to_color


def test_formula_strips_leading_equals_and_braces() -> None:
    assert Formula("=SUM(A1:A3)").snapshot().text == "SUM(A1:A3)"
    assert Formula("{=SUM(A1:A3*B1:B3)}").snapshot().text == "SUM(A1:A3*B1:B3)"
    assert Formula("A1+1").expand() == "=A1+1"


def test_future_functions_get_prefixes() -> None:
    formula = Formula("=XLOOKUP(A1,B:B,C:C)+LEN(FILTER(A1:A9,A1:A9>0))")
    assert formula.expand() == "=XLOOKUP(A1,B:B,C:C)+LEN(FILTER(A1:A9,A1:A9>0))"

    formula.use_future_functions()
    assert formula.expand() == (
        "=_xlfn.XLOOKUP(A1,B:B,C:C)+LEN(_xlfn._xlws.FILTER(A1:A9,A1:A9>0))"
    )


def test_table_functions_expand_this_row() -> None:
    formula = Formula("=[@Price]*2").use_table_functions()
    assert formula.expand() == "=[[#This Row],Price]*2"


def test_formula_copy_aliases_and_deepcopy_detaches() -> None:
    formula = Formula("=A1")
    alias = copy.copy(formula)
    detached = copy.deepcopy(formula)

    alias.set_result("5")

    assert formula.snapshot().result == "5"
    assert detached.snapshot().result is None
    assert alias.is_alias_of(formula)
    assert not detached.is_alias_of(formula)


def test_excel_datetime_serial_roundtrip() -> None:
    value = ExcelDateTime.from_ymd(2024, 1, 1)
    assert value.to_excel() == 45292.0
    assert ExcelDateTime.from_serial_datetime(45292.5).to_python() == dt.datetime(
        2024, 1, 1, 12, 0
    )


def test_excel_datetime_parse_from_str() -> None:
    parsed = ExcelDateTime.parse_from_str("2023-07-08T09:10:11")
    assert parsed.to_python() == dt.datetime(2023, 7, 8, 9, 10, 11)
    assert ExcelDateTime.parse_from_str("12:30").to_python() == dt.time(12, 30)


def test_excel_datetime_and_hms_returns_new_value() -> None:
    date_only = ExcelDateTime.from_ymd(2020, 2, 29)
    with_time = date_only.and_hms(6, 30, 15.5)
    assert date_only.time is None
    assert with_time.to_python() == dt.datetime(2020, 2, 29, 6, 30, 15, 500000)


@pytest.mark.parametrize(
    ("factory", "code"),
    [
        (lambda: ExcelDateTime.from_ymd(1899, 12, 31), "DateTimeRangeError"),
        (lambda: ExcelDateTime.from_ymd(2023, 2, 30), "DateTimeRangeError"),
        (lambda: ExcelDateTime.from_hms(24, 0, 0), "DateTimeRangeError"),
        (lambda: ExcelDateTime.from_serial_datetime(-1), "DateTimeRangeError"),
        (lambda: ExcelDateTime.parse_from_str("next tuesday"), "DateTimeParseError"),
    ],
)
def test_excel_datetime_errors(factory: object, code: str) -> None:
    with pytest.raises(XlsxError) as excinfo:
        factory()  # type: ignore[operator]
    assert excinfo.value.code == code


def test_excel_datetime_from_timestamp_is_utc() -> None:
    value = ExcelDateTime.from_timestamp(1_704_067_200 + 6 * 3600)
    assert value.to_python() == dt.datetime(2024, 1, 1, 6, 0)
    assert value.to_excel() == 45292.25


def test_color_inputs_normalize_to_argb() -> None:
    assert to_color("#ff0000").argb == "FFFF0000"
    assert to_color(0x00FF00).argb == "FF00FF00"
    assert to_color("navy").rgb == "000080"
    assert Color.from_hex("80112233").argb == "80112233"


def test_color_rejects_invalid_hex() -> None:
    with pytest.raises(ValueError, match="Invalid color"):
        to_color("#12345")
