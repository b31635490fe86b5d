from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, field_validator
from typing_extensions import Self

from .errors import XlsxError
from .sync import ValueHandle
from .types import TableFunctionType

_TABLE_STYLE_PATTERN = re.compile(
    r"^TableStyle(?:Light(?:[1-9]|1[0-9]|2[01])|Medium(?:[1-9]|1[0-9]|2[0-8])|Dark(?:[1-9]|1[01]))$"
)
_TABLE_NAME_PATTERN = re.compile(r"^[A-Za-z_\\][A-Za-z0-9_.]{0,254}$")
_RESERVED_TABLE_NAMES = frozenset({"C", "R", "c", "r"})

DEFAULT_TABLE_STYLE = "TableStyleMedium9"


def validate_table_style(value: str) -> str:
    """Accept ``"None"`` or a built-in name such as ``TableStyleLight1``."""
    if value == "None" or _TABLE_STYLE_PATTERN.match(value):
        return value
    raise XlsxError.from_code("TableError", f"Unknown table style: {value}")


def validate_table_name(value: str) -> str:
    if value in _RESERVED_TABLE_NAMES or not _TABLE_NAME_PATTERN.match(value):
        raise XlsxError.from_code("TableError", f"Invalid table name: {value}")
    if re.match(r"^[A-Za-z]{1,3}[0-9]+$", value):
        raise XlsxError.from_code(
            "TableError", f"Table name must not look like a cell reference: {value}"
        )
    return value


class TableColumn(BaseModel):
    """One table column: header text and optional total row function."""

    model_config = ConfigDict(frozen=True)

    header: str | None = None
    total_function: TableFunctionType | None = None
    total_label: str | None = None
    formula: str | None = None

    def set_header(self, header: str) -> TableColumn:
        return self.model_copy(update={"header": header})

    def set_total_function(self, function: TableFunctionType) -> TableColumn:
        return self.model_copy(update={"total_function": function})

    def set_total_label(self, label: str) -> TableColumn:
        return self.model_copy(update={"total_label": label})

    def set_formula(self, formula: str) -> TableColumn:
        return self.model_copy(update={"formula": formula.lstrip("=")})


class TableSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str | None = None
    style: str = DEFAULT_TABLE_STYLE
    header_row: bool = True
    total_row: bool = False
    banded_rows: bool = True
    banded_columns: bool = False
    first_column: bool = False
    last_column: bool = False
    autofilter: bool = True
    columns: tuple[TableColumn, ...] = ()

    @field_validator("style")
    @classmethod
    def _validate_style(cls, value: str) -> str:
        return validate_table_style(value)

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return validate_table_name(value)


class Table(ValueHandle[TableSpec]):
    """Worksheet table (list object) handle."""

    def __init__(self) -> None:
        self._init_value(TableSpec())

    def set_name(self, name: str) -> Self:
        return self._update(name=validate_table_name(name))

    def set_style(self, style: str) -> Self:
        return self._update(style=validate_table_style(style))

    def set_header_row(self, enable: bool = True) -> Self:
        return self._update(header_row=enable)

    def set_total_row(self, enable: bool = True) -> Self:
        return self._update(total_row=enable)

    def set_banded_rows(self, enable: bool = True) -> Self:
        return self._update(banded_rows=enable)

    def set_banded_columns(self, enable: bool = True) -> Self:
        return self._update(banded_columns=enable)

    def set_first_column(self, enable: bool = True) -> Self:
        return self._update(first_column=enable)

    def set_last_column(self, enable: bool = True) -> Self:
        return self._update(last_column=enable)

    def set_autofilter(self, enable: bool = True) -> Self:
        return self._update(autofilter=enable)

    def set_columns(self, columns: list[TableColumn]) -> Self:
        return self._update(columns=tuple(columns))
