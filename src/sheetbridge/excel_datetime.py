from __future__ import annotations

import datetime as dt
import re

from openpyxl.utils.datetime import from_excel, to_excel
from pydantic import BaseModel, ConfigDict

from .errors import XlsxError

_MIN_DATE = dt.date(1900, 1, 1)
_MAX_DATE = dt.date(9999, 12, 31)
_MAX_SERIAL = 2_958_466.0
_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
_TIME_PATTERN = re.compile(r"(\d{1,2}):(\d{2})(?::(\d{2}(?:\.\d+)?))?Z?$")


class ExcelDateTime(BaseModel):
    """Date and/or time value in Excel's supported range.

    The value is immutable: ``and_hms`` returns a new instance.
    """

    model_config = ConfigDict(frozen=True)

    date: dt.date | None = None
    time: dt.time | None = None

    @classmethod
    def from_ymd(cls, year: int, month: int, day: int) -> ExcelDateTime:
        try:
            value = dt.date(year, month, day)
        except ValueError as exc:
            raise XlsxError.from_code(
                "DateTimeRangeError", f"Invalid date {year}-{month}-{day}: {exc}"
            ) from exc
        _check_date(value)
        return cls(date=value)

    @classmethod
    def from_hms(cls, hour: int, minute: int, second: float) -> ExcelDateTime:
        return cls(time=_build_time(hour, minute, second))

    def and_hms(self, hour: int, minute: int, second: float) -> ExcelDateTime:
        return self.model_copy(update={"time": _build_time(hour, minute, second)})

    @classmethod
    def parse_from_str(cls, text: str) -> ExcelDateTime:
        """Parse ``YYYY-MM-DD``, ``hh:mm[:ss[.sss]]`` or both joined by ``T``/space."""
        candidate = text.strip()
        date_match = _DATE_PATTERN.match(candidate)
        date_value: dt.date | None = None
        rest = candidate
        if date_match is not None:
            year, month, day = (int(part) for part in date_match.groups())
            date_value = cls.from_ymd(year, month, day).date
            rest = candidate[date_match.end() :].lstrip("T ").strip()
        time_value: dt.time | None = None
        if rest:
            time_match = _TIME_PATTERN.match(rest)
            if time_match is None:
                raise XlsxError.from_code(
                    "DateTimeParseError", f"Unable to parse date/time string: {text}"
                )
            hour, minute, second = time_match.groups()
            time_value = _build_time(int(hour), int(minute), float(second or 0))
        if date_value is None and time_value is None:
            raise XlsxError.from_code(
                "DateTimeParseError", f"Unable to parse date/time string: {text}"
            )
        return cls(date=date_value, time=time_value)

    @classmethod
    def from_serial_datetime(cls, number: float) -> ExcelDateTime:
        if not 0 <= number < _MAX_SERIAL:
            raise XlsxError.from_code(
                "DateTimeRangeError", f"Serial date out of Excel range: {number}"
            )
        converted = from_excel(number)
        if isinstance(converted, dt.time):
            return cls(time=converted)
        if isinstance(converted, dt.datetime):
            return cls(date=converted.date(), time=converted.time())
        return cls(date=converted)

    @classmethod
    def from_timestamp(cls, timestamp: int | float) -> ExcelDateTime:
        """Build from Unix seconds, interpreted as UTC."""
        moment = dt.datetime.fromtimestamp(timestamp, tz=dt.timezone.utc)
        naive = moment.replace(tzinfo=None)
        _check_date(naive.date())
        return cls(date=naive.date(), time=naive.time())

    @classmethod
    def from_python(cls, value: dt.datetime | dt.date | dt.time) -> ExcelDateTime:
        if isinstance(value, dt.datetime):
            _check_date(value.date())
            return cls(date=value.date(), time=value.time())
        if isinstance(value, dt.date):
            _check_date(value)
            return cls(date=value)
        return cls(time=value)

    def to_python(self) -> dt.datetime | dt.date | dt.time:
        if self.date is not None and self.time is not None:
            return dt.datetime.combine(self.date, self.time)
        if self.date is not None:
            return self.date
        if self.time is not None:
            return self.time
        return dt.time(0, 0)

    def to_excel(self) -> float:
        """Return the Excel 1900-epoch serial number."""
        return float(to_excel(self.to_python()))


def _build_time(hour: int, minute: int, second: float) -> dt.time:
    if not (0 <= hour < 24 and 0 <= minute < 60 and 0 <= second < 60):
        raise XlsxError.from_code(
            "DateTimeRangeError", f"Invalid time {hour}:{minute}:{second}"
        )
    whole = int(second)
    micro = int(round((second - whole) * 1_000_000))
    if micro >= 1_000_000:
        micro = 999_999
    return dt.time(hour, minute, whole, micro)


def _check_date(value: dt.date) -> None:
    if not _MIN_DATE <= value <= _MAX_DATE:
        raise XlsxError.from_code(
            "DateTimeRangeError", f"Date outside Excel range 1900-01-01..9999-12-31: {value}"
        )
