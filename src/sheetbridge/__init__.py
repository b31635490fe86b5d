"""Thread-safe handle layer for building xlsx workbooks with openpyxl."""

from __future__ import annotations

from .chart import (
    Chart,
    ChartAxis,
    ChartDataLabel,
    ChartFont,
    ChartFormat,
    ChartGradientFill,
    ChartGradientStop,
    ChartLayout,
    ChartLegend,
    ChartLine,
    ChartMarker,
    ChartPatternFill,
    ChartPoint,
    ChartRange,
    ChartSeries,
    ChartSolidFill,
    ChartTitle,
    ChartType,
)
from .color import Color
from .conditional_format import (
    ConditionalFormatBlank,
    ConditionalFormatCell,
    ConditionalFormatDataBar,
    ConditionalFormatFormula,
    ConditionalFormatRule,
    ConditionalFormatValue,
)
from .config import BridgeConfig
from .doc_properties import DocProperties
from .document import SharedDocument
from .errors import XlsxError, XlsxErrorCode, XlsxErrorDetail
from .excel_datetime import ExcelDateTime
from .format import Format
from .formula import Formula
from .hooks import start
from .image import Image
from .note import Note
from .rich_string import RichString
from .table import Table, TableColumn
from .url import Url
from .values import CellValue, classify
from .workbook import Workbook
from .worksheet import Worksheet

__all__ = [
    "BridgeConfig",
    "CellValue",
    "Chart",
    "ChartAxis",
    "ChartDataLabel",
    "ChartFont",
    "ChartFormat",
    "ChartGradientFill",
    "ChartGradientStop",
    "ChartLayout",
    "ChartLegend",
    "ChartLine",
    "ChartMarker",
    "ChartPatternFill",
    "ChartPoint",
    "ChartRange",
    "ChartSeries",
    "ChartSolidFill",
    "ChartTitle",
    "ChartType",
    "Color",
    "ConditionalFormatBlank",
    "ConditionalFormatCell",
    "ConditionalFormatDataBar",
    "ConditionalFormatFormula",
    "ConditionalFormatRule",
    "ConditionalFormatValue",
    "DocProperties",
    "ExcelDateTime",
    "Format",
    "Formula",
    "Image",
    "Note",
    "RichString",
    "SharedDocument",
    "Table",
    "TableColumn",
    "Url",
    "Workbook",
    "Worksheet",
    "XlsxError",
    "XlsxErrorCode",
    "XlsxErrorDetail",
    "classify",
    "start",
]
