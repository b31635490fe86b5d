"""Shared document: the one engine workbook behind one lock.

Every ``Workbook`` and ``Worksheet`` handle created in a session reaches the
engine workbook through the same ``SharedDocument``. Each operation holds the
lock for exactly one read-modify-write and never calls back into host code
while holding it.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
import threading
from typing import TYPE_CHECKING, TypeVar

from .config import get_config
from .engine.workbook import EngineWorkbook
from .engine.worksheet import EngineWorksheet
from .errors import XlsxError

if TYPE_CHECKING:
    from .worksheet import Worksheet

T = TypeVar("T")


class SharedDocument:
    """Lock-protected owner of one ``EngineWorkbook``."""

    __slots__ = ("_engine", "_lock", "__weakref__")

    def __init__(self, engine: EngineWorkbook | None = None) -> None:
        self._lock = threading.Lock()
        self._engine = engine or EngineWorkbook(get_config().default_sheet_prefix)

    @contextmanager
    def locked(self) -> Iterator[EngineWorkbook]:
        """Hold the document lock and yield the engine workbook."""
        with self._lock:
            yield self._engine

    def run(self, operation: Callable[[EngineWorkbook], T]) -> T:
        """Apply one operation to the engine workbook under the lock."""
        with self._lock:
            return operation(self._engine)

    def run_on_sheet(self, index: int, operation: Callable[[EngineWorksheet], T]) -> T:
        """Look up sheet ``index`` and apply one operation, both under the lock.

        Raises:
            XlsxError: ``SheetNotFound`` when ``index`` is not a live position.
        """
        with self._lock:
            return operation(_sheet_at(self._engine, index))

    def sheet_count(self) -> int:
        with self._lock:
            return len(self._engine.sheets)

    def resolve_sheet(self, index: int) -> Worksheet:
        """Return a ``Worksheet`` locator for position ``index``.

        Raises:
            XlsxError: ``SheetNotFound`` when ``index`` is out of range.
        """
        from .worksheet import Worksheet

        with self._lock:
            _sheet_at(self._engine, index)
        return Worksheet(self, index)


def _sheet_at(engine: EngineWorkbook, index: int) -> EngineWorksheet:
    sheet = engine.sheet_at(index)
    if sheet is None:
        raise XlsxError.from_code(
            "SheetNotFound",
            f"No worksheet at index {index}; the workbook has {len(engine.sheets)}.",
        )
    return sheet
