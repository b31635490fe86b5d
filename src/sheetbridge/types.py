from __future__ import annotations

from typing import Literal

HorizontalAlignType = Literal[
    "general",
    "left",
    "center",
    "right",
    "fill",
    "justify",
    "centerContinuous",
    "distributed",
]
VerticalAlignType = Literal["top", "center", "bottom", "justify", "distributed"]
FormatBorderType = Literal[
    "none",
    "thin",
    "medium",
    "dashed",
    "dotted",
    "thick",
    "double",
    "hair",
    "mediumDashed",
    "dashDot",
    "mediumDashDot",
    "dashDotDot",
    "mediumDashDotDot",
    "slantDashDot",
]
FormatUnderlineType = Literal["single", "double", "singleAccounting", "doubleAccounting"]
FormatScriptType = Literal["superscript", "subscript"]
FormatPatternType = Literal[
    "solid",
    "mediumGray",
    "darkGray",
    "lightGray",
    "darkHorizontal",
    "darkVertical",
    "darkDown",
    "darkUp",
    "darkGrid",
    "darkTrellis",
    "lightHorizontal",
    "lightVertical",
    "lightDown",
    "lightUp",
    "lightGrid",
    "lightTrellis",
    "gray125",
    "gray0625",
]

ConditionalFormatType = Literal[
    "automatic",
    "lowest",
    "number",
    "percent",
    "formula",
    "percentile",
    "highest",
]
ConditionalFormatCellOperator = Literal[
    "equal",
    "notEqual",
    "greaterThan",
    "greaterThanOrEqual",
    "lessThan",
    "lessThanOrEqual",
    "between",
    "notBetween",
]
DataBarDirection = Literal["context", "leftToRight", "rightToLeft"]
DataBarAxisPosition = Literal["automatic", "midpoint", "none"]

TableFunctionType = Literal[
    "none",
    "average",
    "count",
    "countNums",
    "max",
    "min",
    "stdDev",
    "sum",
    "var",
]

HeaderImagePosition = Literal["left", "center", "right"]
LegendPositionType = Literal["right", "left", "top", "bottom", "topRight"]
DataLabelPositionType = Literal[
    "center",
    "right",
    "left",
    "above",
    "below",
    "insideBase",
    "insideEnd",
    "outsideEnd",
    "bestFit",
]
MarkerType = Literal[
    "automatic",
    "none",
    "square",
    "diamond",
    "triangle",
    "x",
    "star",
    "shortDash",
    "longDash",
    "circle",
    "plusSign",
]
LineDashType = Literal[
    "solid",
    "roundDot",
    "squareDot",
    "dash",
    "dashDot",
    "longDash",
    "longDashDot",
    "longDashDotDot",
]
GradientFillType = Literal["linear", "radial", "rectangular", "path"]
AxisTickMarkType = Literal["none", "inside", "outside", "cross"]
AxisLabelPositionType = Literal["nextTo", "high", "low", "none"]
PatternFillType = Literal[
    "pct5",
    "pct10",
    "pct20",
    "pct25",
    "pct30",
    "pct40",
    "pct50",
    "pct60",
    "pct70",
    "pct75",
    "pct80",
    "pct90",
    "horz",
    "vert",
    "ltHorz",
    "ltVert",
    "dkHorz",
    "dkVert",
    "narHorz",
    "narVert",
    "dashHorz",
    "dashVert",
    "cross",
    "dnDiag",
    "upDiag",
    "ltDnDiag",
    "ltUpDiag",
    "dkDnDiag",
    "dkUpDiag",
    "wdDnDiag",
    "wdUpDiag",
    "dashDnDiag",
    "dashUpDiag",
    "diagCross",
    "smCheck",
    "lgCheck",
    "smGrid",
    "lgGrid",
    "dotGrid",
    "smConfetti",
    "lgConfetti",
    "horzBrick",
    "diagBrick",
    "solidDmnd",
    "openDmnd",
    "dotDmnd",
    "plaid",
    "sphere",
    "weave",
    "divot",
    "shingle",
    "wave",
    "trellis",
    "zigZag",
]
