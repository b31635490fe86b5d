"""Host-facing workbook handle."""

from __future__ import annotations

import logging
from pathlib import Path

from typing_extensions import Self

from .doc_properties import DocProperties
from .document import SharedDocument
from .engine.workbook import EngineWorkbook
from .errors import XlsxError
from .worksheet import Worksheet

logger = logging.getLogger(__name__)


class Workbook:
    """Handle for one workbook under construction.

    Copies of a ``Workbook`` (``copy.copy`` or simply passing it around) share
    the same ``SharedDocument``: a sheet added through one copy is visible
    through all of them.

    Example:
        >>> workbook = Workbook()
        >>> sheet = workbook.add_worksheet("Data")
        >>> sheet.write(0, 0, "Hello").write(0, 1, 42)
        Worksheet(index=0)
        >>> payload = workbook.save_to_buffer()
    """

    __slots__ = ("_document",)

    def __init__(self, document: SharedDocument | None = None) -> None:
        self._document = document or SharedDocument()

    @property
    def document(self) -> SharedDocument:
        return self._document

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Workbook):
            return NotImplemented
        return self._document is other._document

    def __hash__(self) -> int:
        return id(self._document)

    def __repr__(self) -> str:
        return f"Workbook(sheets={self._document.sheet_count()})"

    def add_worksheet(self, name: str | None = None) -> Worksheet:
        """Append a worksheet and return its handle.

        Args:
            name: Sheet name. Defaults to ``Sheet{n}`` (prefix configurable
                via ``BridgeConfig.default_sheet_prefix``).

        Raises:
            XlsxError: ``Sheetname*`` codes when the name is invalid or taken.
        """

        def _add(engine: EngineWorkbook) -> int:
            engine.add_sheet(name)
            return len(engine.sheets) - 1

        return Worksheet(self._document, self._document.run(_add))

    def worksheet_from_index(self, index: int) -> Worksheet:
        """Return the handle for position ``index``; raises ``SheetNotFound``."""
        return self._document.resolve_sheet(index)

    def worksheet_from_name(self, name: str) -> Worksheet:
        index = self._document.run(lambda engine: engine.index_of(name))
        if index is None:
            raise XlsxError.from_code("SheetNotFound", f"Worksheet not found: {name}")
        return Worksheet(self._document, index)

    def worksheets(self) -> list[Worksheet]:
        count = self._document.sheet_count()
        return [Worksheet(self._document, index) for index in range(count)]

    def sheet_names(self) -> list[str]:
        return self._document.run(lambda engine: engine.sheet_names())

    def set_properties(self, properties: DocProperties) -> Self:
        spec = properties.snapshot()
        self._document.run(lambda engine: engine.set_properties(spec))
        return self

    def define_name(self, name: str, formula: str) -> Self:
        """Define a workbook name, or a sheet-scoped one written ``Sheet1!Name``."""
        self._document.run(lambda engine: engine.define_name(name, formula))
        return self

    def set_active_worksheet(self, index: int) -> Self:
        self._document.resolve_sheet(index).set_active()
        return self

    def save(self, path: str | Path) -> None:
        """Write the workbook to ``path``. An empty workbook gets one blank sheet."""
        self._document.run(lambda engine: engine.save(path))
        logger.info("Workbook saved: %s", path)

    def save_to_buffer(self) -> bytes:
        return self._document.run(lambda engine: engine.save_to_buffer())
