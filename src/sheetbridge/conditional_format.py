"""Conditional formatting rules.

Every rule handle wraps a frozen ``*Spec`` value and satisfies the
``ConditionalFormatRule`` protocol, so ``Worksheet.add_conditional_format``
accepts any of them. Rule values render to a fresh openpyxl ``Rule`` for the
target range on each attachment.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import math
from typing import Protocol, runtime_checkable

from openpyxl.formatting.rule import DataBar, FormatObject, Rule
from openpyxl.styles.colors import Color as OpenpyxlColor
from pydantic import BaseModel, ConfigDict
from typing_extensions import Self

from .color import Color, ColorLike, to_color
from .engine.styles import build_differential_style
from .errors import XlsxError
from .format import Format, FormatSpec
from .formula import Formula
from .sync import ValueHandle
from .types import (
    ConditionalFormatCellOperator,
    ConditionalFormatType,
    DataBarAxisPosition,
    DataBarDirection,
)
from .utils import warn_once
from .values import DateLike, coerce_datetime

_DEFAULT_BAR_COLOR = Color(argb="FF638EC6")
_CFVO_TYPES: dict[ConditionalFormatType, str] = {
    "lowest": "min",
    "highest": "max",
    "number": "num",
    "percent": "percent",
    "formula": "formula",
    "percentile": "percentile",
}


class ConditionalFormatValue(BaseModel):
    """A rule operand: number, text, formula, boolean or date serial."""

    model_config = ConfigDict(frozen=True)

    text: str
    is_number: bool = False
    is_formula: bool = False

    @classmethod
    def from_string(cls, value: str) -> ConditionalFormatValue:
        """Text operand. A leading ``=`` marks a formula or cell reference."""
        if value.startswith("="):
            return cls(text=value[1:], is_formula=True)
        return cls(text=value)

    @classmethod
    def from_number(cls, value: float) -> ConditionalFormatValue:
        number = float(value)
        if not math.isfinite(number):
            raise XlsxError.from_code(
                "ParameterError", f"Conditional format value must be finite: {value}"
            )
        return cls(text=_format_number(number), is_number=True)

    @classmethod
    def from_bool(cls, value: bool) -> ConditionalFormatValue:
        return cls(text="TRUE" if value else "FALSE", is_formula=True)

    @classmethod
    def from_formula(cls, formula: Formula) -> ConditionalFormatValue:
        return cls(text=formula.snapshot().expand()[1:], is_formula=True)

    @classmethod
    def from_datetime(cls, value: DateLike) -> ConditionalFormatValue:
        serial = coerce_datetime(value).to_excel()
        return cls(text=_format_number(serial), is_number=True)

    def as_operand(self) -> str:
        """Render as a formula operand; plain text is quoted."""
        if self.is_number or self.is_formula:
            return self.text
        escaped = self.text.replace('"', '""')
        return f'"{escaped}"'

    def as_cfvo_value(self) -> float | str:
        if self.is_number:
            return float(self.text)
        return self.text


def _format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


class ConditionalRuleSpec(BaseModel, ABC):
    """Frozen rule value shared by every conditional format kind."""

    model_config = ConfigDict(frozen=True)

    @abstractmethod
    def render(self, first_cell: str) -> Rule:
        """Build an openpyxl rule.

        Args:
            first_cell: Relative A1 reference of the range's top-left cell,
                used by rules whose formula is written relative to it.
        """


@runtime_checkable
class ConditionalFormatRule(Protocol):
    def snapshot(self) -> ConditionalRuleSpec: ...


class FormulaRuleSpec(ConditionalRuleSpec):
    rule: str | None = None
    format: FormatSpec | None = None
    stop_if_true: bool = False

    def render(self, first_cell: str) -> Rule:
        if not self.rule:
            raise XlsxError.from_code(
                "ParameterError", "Formula conditional format requires a rule."
            )
        return Rule(
            type="expression",
            formula=[self.rule],
            dxf=build_differential_style(self.format),
            stopIfTrue=self.stop_if_true or None,
        )


class BlankRuleSpec(ConditionalRuleSpec):
    format: FormatSpec | None = None
    invert: bool = False
    stop_if_true: bool = False

    def render(self, first_cell: str) -> Rule:
        if self.invert:
            rule_type = "notContainsBlanks"
            formula = f"LEN(TRIM({first_cell}))>0"
        else:
            rule_type = "containsBlanks"
            formula = f"LEN(TRIM({first_cell}))=0"
        return Rule(
            type=rule_type,
            formula=[formula],
            dxf=build_differential_style(self.format),
            stopIfTrue=self.stop_if_true or None,
        )


class CellRuleSpec(ConditionalRuleSpec):
    operator: ConditionalFormatCellOperator | None = None
    values: tuple[ConditionalFormatValue, ...] = ()
    format: FormatSpec | None = None
    stop_if_true: bool = False

    def render(self, first_cell: str) -> Rule:
        if self.operator is None or not self.values:
            raise XlsxError.from_code(
                "ParameterError", "Cell conditional format requires a rule."
            )
        return Rule(
            type="cellIs",
            operator=self.operator,
            formula=[value.as_operand() for value in self.values],
            dxf=build_differential_style(self.format),
            stopIfTrue=self.stop_if_true or None,
        )


class DataBarBound(BaseModel):
    model_config = ConfigDict(frozen=True)

    rule_type: ConditionalFormatType = "automatic"
    value: ConditionalFormatValue | None = None


class DataBarSpec(ConditionalRuleSpec):
    """Data bar rule.

    openpyxl writes the Excel 2007 data bar only. The Excel 2010 extension
    fields (borders, negative colours, solid fill, direction, axis) are kept
    on the value but not serialised.
    """

    minimum: DataBarBound = DataBarBound()
    maximum: DataBarBound = DataBarBound()
    fill_color: Color = _DEFAULT_BAR_COLOR
    border_color: Color | None = None
    negative_fill_color: Color | None = None
    negative_border_color: Color | None = None
    solid_fill: bool = False
    border_off: bool = False
    direction: DataBarDirection = "context"
    bar_only: bool = False
    axis_position: DataBarAxisPosition = "automatic"
    axis_color: Color | None = None

    def has_extensions(self) -> bool:
        return (
            self.border_color is not None
            or self.negative_fill_color is not None
            or self.negative_border_color is not None
            or self.solid_fill
            or self.border_off
            or self.direction != "context"
            or self.axis_position != "automatic"
            or self.axis_color is not None
        )

    def render(self, first_cell: str) -> Rule:
        if self.has_extensions():
            warn_once(
                "databar-x14",
                "Data bar border, negative, solid fill, direction and axis "
                "settings are not written by openpyxl.",
            )
        data_bar = DataBar(
            cfvo=[
                _cfvo(self.minimum, default="min"),
                _cfvo(self.maximum, default="max"),
            ],
            color=OpenpyxlColor(rgb=self.fill_color.argb),
            showValue=False if self.bar_only else None,
        )
        return Rule(type="dataBar", dataBar=data_bar)


def _cfvo(bound: DataBarBound, *, default: str) -> FormatObject:
    if bound.rule_type in ("automatic", "lowest", "highest"):
        cfvo_type = default if bound.rule_type == "automatic" else _CFVO_TYPES[bound.rule_type]
        return FormatObject(type=cfvo_type)
    if bound.value is None:
        raise XlsxError.from_code(
            "ParameterError", f"Data bar bound of type {bound.rule_type} needs a value."
        )
    try:
        return FormatObject(
            type=_CFVO_TYPES[bound.rule_type], val=bound.value.as_cfvo_value()
        )
    except (TypeError, ValueError) as exc:
        raise XlsxError.from_code(
            "ParameterError", f"Invalid data bar bound value: {bound.value.text}"
        ) from exc


class ConditionalFormatFormula(ValueHandle[FormulaRuleSpec]):
    """Formula-triggered rule: the format applies where the formula is true."""

    def __init__(self) -> None:
        self._init_value(FormulaRuleSpec())

    def set_rule(self, rule: Formula | str) -> Self:
        if isinstance(rule, Formula):
            text = rule.snapshot().expand()[1:]
        else:
            text = rule.strip().lstrip("=")
        return self._update(rule=text)

    def set_format(self, format: Format) -> Self:
        return self._update(format=format.snapshot())

    def set_stop_if_true(self, enable: bool = True) -> Self:
        return self._update(stop_if_true=enable)


class ConditionalFormatBlank(ValueHandle[BlankRuleSpec]):
    def __init__(self) -> None:
        self._init_value(BlankRuleSpec())

    def set_format(self, format: Format) -> Self:
        return self._update(format=format.snapshot())

    def invert(self, enable: bool = True) -> Self:
        """Match non-blank cells instead of blank ones."""
        return self._update(invert=enable)

    def set_stop_if_true(self, enable: bool = True) -> Self:
        return self._update(stop_if_true=enable)


class ConditionalFormatCell(ValueHandle[CellRuleSpec]):
    """Cell-value comparison rule such as ``greaterThan 5`` or ``between 1 and 9``."""

    def __init__(self) -> None:
        self._init_value(CellRuleSpec())

    def set_rule(
        self,
        operator: ConditionalFormatCellOperator,
        value: ConditionalFormatValue,
        second: ConditionalFormatValue | None = None,
    ) -> Self:
        ranged = operator in ("between", "notBetween")
        if ranged and second is None:
            raise XlsxError.from_code(
                "ParameterError", f"Operator {operator} requires two values."
            )
        if not ranged and second is not None:
            raise XlsxError.from_code(
                "ParameterError", f"Operator {operator} takes a single value."
            )
        values = (value,) if second is None else (value, second)
        return self._update(operator=operator, values=values)

    def set_format(self, format: Format) -> Self:
        return self._update(format=format.snapshot())

    def set_stop_if_true(self, enable: bool = True) -> Self:
        return self._update(stop_if_true=enable)


class ConditionalFormatDataBar(ValueHandle[DataBarSpec]):
    def __init__(self) -> None:
        self._init_value(DataBarSpec())

    def set_minimum(
        self,
        rule_type: ConditionalFormatType,
        value: ConditionalFormatValue | None = None,
    ) -> Self:
        return self._update(minimum=DataBarBound(rule_type=rule_type, value=value))

    def set_maximum(
        self,
        rule_type: ConditionalFormatType,
        value: ConditionalFormatValue | None = None,
    ) -> Self:
        return self._update(maximum=DataBarBound(rule_type=rule_type, value=value))

    def set_fill_color(self, color: ColorLike) -> Self:
        return self._update(fill_color=to_color(color))

    def set_border_color(self, color: ColorLike) -> Self:
        return self._update(border_color=to_color(color))

    def set_negative_fill_color(self, color: ColorLike) -> Self:
        return self._update(negative_fill_color=to_color(color))

    def set_negative_border_color(self, color: ColorLike) -> Self:
        return self._update(negative_border_color=to_color(color))

    def set_solid_fill(self, enable: bool = True) -> Self:
        return self._update(solid_fill=enable)

    def set_border_off(self, enable: bool = True) -> Self:
        return self._update(border_off=enable)

    def set_direction(self, direction: DataBarDirection) -> Self:
        return self._update(direction=direction)

    def set_bar_only(self, enable: bool = True) -> Self:
        return self._update(bar_only=enable)

    def set_axis_position(self, position: DataBarAxisPosition) -> Self:
        return self._update(axis_position=position)

    def set_axis_color(self, color: ColorLike) -> Self:
        return self._update(axis_color=to_color(color))


__all__ = [
    "BlankRuleSpec",
    "CellRuleSpec",
    "ConditionalFormatBlank",
    "ConditionalFormatCell",
    "ConditionalFormatDataBar",
    "ConditionalFormatFormula",
    "ConditionalFormatRule",
    "ConditionalFormatValue",
    "ConditionalRuleSpec",
    "DataBarBound",
    "DataBarSpec",
    "FormulaRuleSpec",
]
