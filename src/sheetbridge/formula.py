from __future__ import annotations

import re
from typing import Final

from pydantic import BaseModel, ConfigDict
from typing_extensions import Self

from .sync import ValueHandle

# Functions added after Excel 2010 must be stored with the "_xlfn." prefix.
_FUTURE_FUNCTIONS: Final[tuple[str, ...]] = (
    "ACOT",
    "ACOTH",
    "AGGREGATE",
    "ARABIC",
    "ARRAYTOTEXT",
    "BASE",
    "BETA.DIST",
    "BETA.INV",
    "BINOM.DIST",
    "BINOM.DIST.RANGE",
    "BINOM.INV",
    "BITAND",
    "BITLSHIFT",
    "BITOR",
    "BITRSHIFT",
    "BITXOR",
    "CEILING.MATH",
    "CEILING.PRECISE",
    "CHISQ.DIST",
    "CHISQ.DIST.RT",
    "CHISQ.INV",
    "CHISQ.INV.RT",
    "CHISQ.TEST",
    "CHOOSECOLS",
    "CHOOSEROWS",
    "COMBINA",
    "CONCAT",
    "CONFIDENCE.NORM",
    "CONFIDENCE.T",
    "COT",
    "COTH",
    "COVARIANCE.P",
    "COVARIANCE.S",
    "CSC",
    "CSCH",
    "DAYS",
    "DECIMAL",
    "DROP",
    "ERF.PRECISE",
    "ERFC.PRECISE",
    "EXPAND",
    "EXPON.DIST",
    "F.DIST",
    "F.DIST.RT",
    "F.INV",
    "F.INV.RT",
    "F.TEST",
    "FILTERXML",
    "FLOOR.MATH",
    "FLOOR.PRECISE",
    "FORECAST.ETS",
    "FORECAST.LINEAR",
    "FORMULATEXT",
    "GAMMA",
    "GAMMA.DIST",
    "GAMMA.INV",
    "GAMMALN.PRECISE",
    "GAUSS",
    "HSTACK",
    "HYPGEOM.DIST",
    "IFNA",
    "IFS",
    "IMAGE",
    "IMCOSH",
    "IMCOT",
    "IMCSC",
    "IMCSCH",
    "IMSEC",
    "IMSECH",
    "IMSINH",
    "IMTAN",
    "ISFORMULA",
    "ISOMITTED",
    "ISOWEEKNUM",
    "LAMBDA",
    "LET",
    "LOGNORM.DIST",
    "LOGNORM.INV",
    "MAKEARRAY",
    "MAP",
    "MAXIFS",
    "MINIFS",
    "MODE.MULT",
    "MODE.SNGL",
    "MUNIT",
    "NEGBINOM.DIST",
    "NORM.DIST",
    "NORM.INV",
    "NORM.S.DIST",
    "NORM.S.INV",
    "NUMBERVALUE",
    "PDURATION",
    "PERCENTILE.EXC",
    "PERCENTILE.INC",
    "PERCENTRANK.EXC",
    "PERCENTRANK.INC",
    "PERMUTATIONA",
    "PHI",
    "POISSON.DIST",
    "QUARTILE.EXC",
    "QUARTILE.INC",
    "RANDARRAY",
    "RANK.AVG",
    "RANK.EQ",
    "REDUCE",
    "RRI",
    "SCAN",
    "SEC",
    "SECH",
    "SEQUENCE",
    "SHEET",
    "SHEETS",
    "SKEW.P",
    "SORTBY",
    "STDEV.P",
    "STDEV.S",
    "SWITCH",
    "T.DIST",
    "T.DIST.2T",
    "T.DIST.RT",
    "T.INV",
    "T.INV.2T",
    "T.TEST",
    "TAKE",
    "TEXTAFTER",
    "TEXTBEFORE",
    "TEXTJOIN",
    "TEXTSPLIT",
    "TOCOL",
    "TOROW",
    "UNICHAR",
    "UNICODE",
    "UNIQUE",
    "VALUETOTEXT",
    "VAR.P",
    "VAR.S",
    "VSTACK",
    "WEIBULL.DIST",
    "WRAPCOLS",
    "WRAPROWS",
    "XLOOKUP",
    "XMATCH",
    "XOR",
    "Z.TEST",
)
_WORKSHEET_FUNCTIONS: Final[tuple[str, ...]] = ("FILTER", "SORT")


def _function_pattern(names: tuple[str, ...]) -> re.Pattern[str]:
    ordered = sorted(names, key=len, reverse=True)
    alternatives = "|".join(re.escape(name) for name in ordered)
    return re.compile(rf"(?<![\w.])({alternatives})\(")


_FUTURE_PATTERN = _function_pattern(_FUTURE_FUNCTIONS)
_WORKSHEET_PATTERN = _function_pattern(_WORKSHEET_FUNCTIONS)


def _strip_formula(text: str) -> str:
    candidate = text.strip()
    if candidate.startswith("{") and candidate.endswith("}"):
        candidate = candidate[1:-1]
    if candidate.startswith("="):
        candidate = candidate[1:]
    return candidate


class FormulaSpec(BaseModel):
    """Frozen formula value as stored in the workbook (without '=')."""

    model_config = ConfigDict(frozen=True)

    text: str
    result: str | None = None
    future_functions: bool = False
    table_functions: bool = False

    def expand(self) -> str:
        """Return the formula as written to a cell, with a leading '='."""
        text = self.text
        if self.future_functions:
            text = _WORKSHEET_PATTERN.sub(r"_xlfn._xlws.\1(", text)
            text = _FUTURE_PATTERN.sub(r"_xlfn.\1(", text)
        if self.table_functions:
            text = text.replace("@", "[#This Row],")
        return f"={text}"


class Formula(ValueHandle[FormulaSpec]):
    """Formula handle. Accepts ``"=SUM(A1:A3)"``, ``"SUM(A1:A3)"`` or ``"{=...}"``."""

    def __init__(self, formula: str) -> None:
        self._init_value(FormulaSpec(text=_strip_formula(formula)))

    def set_result(self, result: str) -> Self:
        """Set the cached result. openpyxl does not store it; see ``warn_once``."""
        return self._update(result=result)

    def use_future_functions(self, enable: bool = True) -> Self:
        return self._update(future_functions=enable)

    def use_table_functions(self, enable: bool = True) -> Self:
        return self._update(table_functions=enable)

    def expand(self) -> str:
        return self.snapshot().expand()
