"""openpyxl workbook adapter."""

from __future__ import annotations

import io
import logging
from pathlib import Path
import re
from typing import Final

from openpyxl import Workbook as OpenpyxlWorkbook
from openpyxl.workbook.defined_name import DefinedName

from ..doc_properties import DocPropertiesSpec
from ..errors import XlsxError
from ..utils import warn_once
from .worksheet import EngineWorksheet

logger = logging.getLogger(__name__)

_MAX_SHEET_NAME_LENGTH: Final[int] = 31
_INVALID_SHEET_NAME_CHARS: Final[frozenset[str]] = frozenset("[]:*?/\\")
_RESERVED_SHEET_NAMES: Final[frozenset[str]] = frozenset({"history"})
_DEFINED_NAME_PATTERN = re.compile(r"^[A-Za-z_\\][A-Za-z0-9_.\\]*$")


class EngineWorkbook:
    """Ordered collection of ``EngineWorksheet`` objects over one openpyxl workbook.

    openpyxl creates a default sheet; it is removed so the sheet list starts
    empty and positions are assigned in creation order.
    """

    def __init__(self, default_sheet_prefix: str = "Sheet") -> None:
        self.book = OpenpyxlWorkbook()
        self.book.remove(self.book.active)
        self.default_sheet_prefix = default_sheet_prefix
        self.sheets: list[EngineWorksheet] = []

    # Sheets

    def add_sheet(self, name: str | None = None) -> EngineWorksheet:
        """Append a worksheet, naming it ``Sheet{n}`` when no name is given."""
        if name is None:
            name = f"{self.default_sheet_prefix}{len(self.sheets) + 1}"
        self.validate_sheet_name(name)
        sheet = EngineWorksheet(self, self.book.create_sheet(title=name))
        self.sheets.append(sheet)
        logger.debug("Added worksheet %s at index %s.", name, len(self.sheets) - 1)
        return sheet

    def sheet_at(self, index: int) -> EngineWorksheet | None:
        if 0 <= index < len(self.sheets):
            return self.sheets[index]
        return None

    def index_of(self, name: str) -> int | None:
        for index, sheet in enumerate(self.sheets):
            if sheet.name == name:
                return index
        return None

    def sheet_names(self) -> list[str]:
        return [sheet.name for sheet in self.sheets]

    def validate_sheet_name(self, name: str, *, current: EngineWorksheet | None = None) -> None:
        """Raise when ``name`` breaks Excel's worksheet naming rules.

        Args:
            name: Proposed worksheet name.
            current: Sheet being renamed; its own name does not count as a clash.

        Raises:
            XlsxError: With one of the ``Sheetname*`` codes.
        """
        if not name.strip():
            raise XlsxError.from_code(
                "SheetnameCannotBeBlank", "Worksheet name cannot be blank."
            )
        if len(name) > _MAX_SHEET_NAME_LENGTH:
            raise XlsxError.from_code(
                "SheetnameLengthExceeded",
                f"Worksheet name exceeds {_MAX_SHEET_NAME_LENGTH} characters: {name}",
            )
        invalid = sorted({char for char in name if char in _INVALID_SHEET_NAME_CHARS})
        if invalid:
            raise XlsxError.from_code(
                "SheetnameContainsInvalidCharacter",
                f"Worksheet name contains invalid characters {''.join(invalid)}: {name}",
            )
        if name.startswith("'") or name.endswith("'"):
            raise XlsxError.from_code(
                "SheetnameStartsOrEndsWithApostrophe",
                f"Worksheet name cannot start or end with an apostrophe: {name}",
            )
        if name.lower() in _RESERVED_SHEET_NAMES:
            raise XlsxError.from_code(
                "SheetnameReserved", f"Worksheet name is reserved by Excel: {name}"
            )
        for sheet in self.sheets:
            if sheet is not current and sheet.name.lower() == name.lower():
                raise XlsxError.from_code(
                    "SheetnameReused",
                    f"Worksheet name already in use (case-insensitive): {name}",
                    sheet=sheet.name,
                )

    def rename_sheet(self, sheet: EngineWorksheet, name: str) -> None:
        self.validate_sheet_name(name, current=sheet)
        if sheet.name == name:
            return
        if sheet.name.lower() == name.lower():
            # openpyxl de-duplicates titles case-insensitively against itself.
            sheet.sheet.title = f"_{len(self.sheets)}_{id(sheet)}"[:_MAX_SHEET_NAME_LENGTH]
        sheet.sheet.title = name

    def set_active(self, index: int) -> None:
        self.book.active = index

    # Workbook objects

    def table_names(self) -> list[str]:
        return [name for sheet in self.sheets for name, _ in sheet.table_ranges()]

    def next_table_name(self) -> str:
        """Return the next free ``Table{n}`` name across all sheets."""
        existing = {name.lower() for name in self.table_names()}
        index = 1
        while f"table{index}" in existing:
            index += 1
        return f"Table{index}"

    def define_name(self, name: str, formula: str) -> None:
        """Add a workbook-level or ``Sheet!Name`` sheet-scoped defined name."""
        scope: EngineWorksheet | None = None
        local_name = name
        if "!" in name:
            sheet_name, local_name = name.rsplit("!", 1)
            sheet_name = sheet_name.strip("'").replace("''", "'")
            index = self.index_of(sheet_name)
            if index is None:
                raise XlsxError.from_code(
                    "SheetNotFound", f"Worksheet not found for defined name: {sheet_name}"
                )
            scope = self.sheets[index]
        if not _DEFINED_NAME_PATTERN.match(local_name):
            raise XlsxError.from_code("ParameterError", f"Invalid defined name: {name}")
        if scope is not None:
            scope.define_local_name(local_name, formula)
            return
        self.book.defined_names[local_name] = DefinedName(
            local_name, attr_text=formula.lstrip("=")
        )

    def set_properties(self, properties: DocPropertiesSpec) -> None:
        target = self.book.properties
        target.title = properties.title
        target.subject = properties.subject
        target.creator = properties.author
        target.category = properties.category
        target.keywords = properties.keywords
        target.description = properties.comment
        target.contentStatus = properties.status
        if properties.creation_datetime is not None:
            target.created = properties.creation_datetime
        if (
            properties.manager is not None
            or properties.company is not None
            or properties.hyperlink_base is not None
        ):
            warn_once(
                "doc-properties-extended",
                "openpyxl does not write manager, company or hyperlink base properties.",
            )

    # Output

    def _prepare_for_save(self) -> None:
        if not self.sheets:
            self.add_sheet()
        active = self.book.active
        if active is not None and active.sheet_state != "visible":
            for index, sheet in enumerate(self.sheets):
                if sheet.sheet.sheet_state == "visible":
                    self.book.active = index
                    break

    def save(self, path: str | Path) -> None:
        self._prepare_for_save()
        self.book.save(str(path))
        logger.debug("Saved workbook to %s.", path)

    def save_to_buffer(self) -> bytes:
        self._prepare_for_save()
        buffer = io.BytesIO()
        self.book.save(buffer)
        return buffer.getvalue()
