"""
Workbook to dataset.

A SpreadsheetEngine opens workbooks and reports, per sheet, the values of its
used range. This module turns those ranges into tables and assembles them into
datasets; it never touches a workbook file itself.

Used-range convention: a one-cell range is reported as the bare cell value.
Anything larger is a row-major matrix that extends one row and one column past
the last used cell. Flattening drops that trailing row and column.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Collection, Iterator, List, Sequence, Union

from .errors import SpreadsheetError, SpreadsheetErrorKind
from .models import Cell, Column, Dataset, Table, TableBuilder
from .rules import FIRST_COLUMN_NAME

logger = logging.getLogger(__name__)

UsedRange = Union[Cell, Sequence[Sequence[Cell]]]


class SpreadsheetEngine(ABC):
    """Session-based access to a spreadsheet application or library."""

    @abstractmethod
    def open(self, data: bytes) -> Any:
        """Open a workbook from its binary content and return a session handle."""
        ...

    @abstractmethod
    def visible_sheet_names(self, session: Any) -> List[str]:
        """Names of the sheets shown to a user, in workbook order."""
        ...

    @abstractmethod
    def used_range(self, session: Any, sheet_name: str) -> UsedRange:
        ...

    @abstractmethod
    def close(self, session: Any) -> None:
        ...


def _is_matrix(used_range: UsedRange) -> bool:
    return isinstance(used_range, (list, tuple))


def flatten_range(sheet_name: str, used_range: UsedRange) -> Table:
    if not _is_matrix(used_range):
        return Table(
            name=sheet_name,
            columns=(Column(name=FIRST_COLUMN_NAME),),
            rows=((used_range,),),
        )

    height = len(used_range)
    width = len(used_range[0]) if height else 0

    builder = TableBuilder(sheet_name)
    builder.grow_to(width - 1)
    for r in range(height - 1):
        source = used_range[r]
        # short rows read as empty past their end
        builder.add_row(source[c] if c < len(source) else None for c in range(width - 1))
    return builder.build()


def select_tables(dataset: Dataset, names: Collection[str]) -> Dataset:
    """
    Copy the tables whose name is in `names`, keeping dataset order.

    Names with no matching table are ignored.
    """
    wanted = set(names)
    return Dataset(tables=tuple(t.model_copy(deep=True) for t in dataset.tables if t.name in wanted))


class WorkbookReader:
    """
    Reads workbooks through one engine.

    A reader runs one engine session at a time; use one reader per thread.
    """

    def __init__(self, engine: SpreadsheetEngine):
        self.engine = engine
        self._busy = threading.Lock()

    @contextmanager
    def session(self, data: bytes) -> Iterator[Any]:
        if not self._busy.acquire(blocking=False):
            raise RuntimeError("workbook reader already has an open session")
        try:
            handle = self._call(self.engine.open, data)
            try:
                yield handle
            finally:
                self._call(self.engine.close, handle)
        finally:
            self._busy.release()

    def _call(self, fn, *args):
        try:
            return fn(*args)
        except SpreadsheetError as exc:
            logger.warning("spreadsheet engine failed (%s): %s", exc.kind.value, exc.detail)
            raise
        except Exception as exc:
            logger.warning("spreadsheet engine failed: %r", exc)
            raise SpreadsheetError(SpreadsheetErrorKind.OTHER, str(exc)) from exc

    def _flatten(self, handle: Any, sheet_name: str) -> Table:
        used = self._call(self.engine.used_range, handle, sheet_name)
        return flatten_range(sheet_name, used)

    def read_workbook(self, data: bytes) -> Dataset:
        """Flatten every visible sheet into one dataset, in workbook order."""
        with self.session(data) as handle:
            names = self._call(self.engine.visible_sheet_names, handle)
            tables = [self._flatten(handle, name) for name in names]
        logger.info("read workbook: %d visible sheets", len(tables))
        return Dataset(tables=tuple(tables))

    def read_sheet(self, data: bytes, sheet_name: str) -> Table:
        with self.session(data) as handle:
            return self._flatten(handle, sheet_name)

    def read_sheets(self, data: bytes, names: Collection[str]) -> Dataset:
        return select_tables(self.read_workbook(data), names)
