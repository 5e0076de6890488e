"""
openpyxl-backed spreadsheet engine for .xlsx / .xlsm workbooks.

Workbooks are loaded from memory with cached values only (formulas are not
evaluated), so nothing is written to disk.
"""

from __future__ import annotations

import datetime as dt
import io
import logging
import zipfile
from typing import List

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.workbook.workbook import Workbook

from .errors import SpreadsheetError, SpreadsheetErrorKind
from .models import Cell
from .spreadsheet import SpreadsheetEngine, UsedRange

logger = logging.getLogger(__name__)


def coerce_cell(value: object) -> Cell:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, (dt.datetime, dt.date, dt.time)):
        return value.isoformat()
    return str(value)


class OpenpyxlEngine(SpreadsheetEngine):
    def open(self, data: bytes) -> Workbook:
        try:
            return load_workbook(io.BytesIO(data), data_only=True)
        except PermissionError as exc:
            raise SpreadsheetError(SpreadsheetErrorKind.AUTHORIZATION, str(exc)) from exc
        except (zipfile.BadZipFile, InvalidFileException, OSError) as exc:
            raise SpreadsheetError(SpreadsheetErrorKind.IO, str(exc)) from exc
        except Exception as exc:
            raise SpreadsheetError(SpreadsheetErrorKind.OTHER, str(exc)) from exc

    def visible_sheet_names(self, session: Workbook) -> List[str]:
        names = [ws.title for ws in session.worksheets if ws.sheet_state == "visible"]
        logger.debug("visible sheets: %s", names)
        return names

    def used_range(self, session: Workbook, sheet_name: str) -> UsedRange:
        if sheet_name not in session.sheetnames:
            raise SpreadsheetError(SpreadsheetErrorKind.OTHER, f"Worksheet {sheet_name!r} does not exist")
        ws = session[sheet_name]

        height, width = ws.max_row, ws.max_column
        if height == 1 and width == 1:
            return coerce_cell(ws.cell(row=1, column=1).value)

        # one boundary row and column past the last used cell
        matrix = [
            [coerce_cell(v) for v in row] + [None]
            for row in ws.iter_rows(min_row=1, max_row=height, min_col=1, max_col=width, values_only=True)
        ]
        matrix.append([None] * (width + 1))
        return matrix

    def close(self, session: Workbook) -> None:
        session.close()
