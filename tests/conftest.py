from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

from openpyxl import load_workbook
from openpyxl.workbook.workbook import Workbook as OpenpyxlWorkbook
import pytest

from sheetbridge import Workbook, Worksheet
from sheetbridge.utils import reset_warnings


@pytest.fixture(autouse=True)  # type: ignore[misc]
def _reset_warn_once() -> Iterator[None]:
    """Give each test a fresh ``warn_once`` registry."""
    reset_warnings()
    yield
    reset_warnings()


@pytest.fixture  # type: ignore[misc]
def workbook() -> Workbook:
    return Workbook()


@pytest.fixture  # type: ignore[misc]
def sheet(workbook: Workbook) -> Worksheet:
    return workbook.add_worksheet()


@pytest.fixture  # type: ignore[misc]
def reopen(tmp_path: Path) -> Callable[[Workbook], OpenpyxlWorkbook]:
    """Save a workbook and load it back with openpyxl."""

    def _reopen(book: Workbook) -> OpenpyxlWorkbook:
        path = tmp_path / "book.xlsx"
        book.save(path)
        return load_workbook(path)

    return _reopen
