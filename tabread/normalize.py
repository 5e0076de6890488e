"""
Upload entry point: route raw bytes to the delimited or workbook reader and
build the response envelope.

The report is diagnostic only. It never changes what ends up in the dataset.
"""

from __future__ import annotations

import codecs
import logging
from typing import Any, Dict, List, Optional, Sequence

from charset_normalizer import from_bytes

from .delimited import parse_delimited
from .models import Dataset
from .rules import DELIMITED_EXTENSIONS, WORKBOOK_EXTENSIONS
from .settings import settings
from .spreadsheet import WorkbookReader, select_tables
from .xlsx_engine import OpenpyxlEngine

logger = logging.getLogger(__name__)


class UnsupportedFileType(ValueError):
    pass


def source_format(filename: str) -> str:
    name = filename.lower()
    if name.endswith(DELIMITED_EXTENSIONS):
        return "delimited"
    if name.endswith(WORKBOOK_EXTENSIONS):
        return "workbook"
    raise UnsupportedFileType(filename)


def _same_codec(a: str, b: str) -> bool:
    try:
        return codecs.lookup(a).name == codecs.lookup(b).name
    except LookupError:
        return False


def guess_encoding(raw: bytes) -> Optional[str]:
    """Best-effort charset guess, reported next to the byte-order-mark result."""
    if not raw:
        return None
    match = from_bytes(raw).best()
    return match.encoding if match is not None else None


def _read_delimited(raw: bytes) -> tuple[Dataset, Dict[str, Any], List[dict]]:
    result = parse_delimited(raw, default_encoding=settings.DEFAULT_ENCODING)
    warnings: List[dict] = []

    guess = None
    if not result.encoding.preamble:
        guess = guess_encoding(raw)
        if guess and not raw.isascii() and not _same_codec(guess, result.encoding.name):
            warnings.append({
                "table": None,
                "issue": "encoding_mismatch",
                "value": guess,
                "action": f"decoded_as_{result.encoding.name}",
            })

    detection = {
        "encoding": {
            "resolved": result.encoding.name,
            "bom": bool(result.encoding.preamble),
            "guess": guess,
        },
        "separator": result.separator,
        "lines": result.lines,
    }
    return result.dataset, detection, warnings


def _read_workbook(raw: bytes, tables: Optional[Sequence[str]]) -> tuple[Dataset, Dict[str, Any], List[dict]]:
    reader = WorkbookReader(OpenpyxlEngine())
    if tables:
        dataset = reader.read_sheets(raw, tables)
    else:
        dataset = reader.read_workbook(raw)
    return dataset, {"engine": "openpyxl"}, []


def read_upload_bytes(raw: bytes, filename: str, tables: Optional[Sequence[str]] = None) -> Dict[str, Any]:
    """
    Read an uploaded file into a dataset.
    Returns a dict matching the API's response envelope.
    """
    fmt = source_format(filename)
    if fmt == "delimited":
        dataset, detection, warnings = _read_delimited(raw)
        if tables:
            dataset = select_tables(dataset, tables)
    else:
        dataset, detection, warnings = _read_workbook(raw, tables)

    return {
        "dataset": dataset,
        "report": {
            "summary": {
                "source": fmt,
                "tables": len(dataset.tables),
                "rows": sum(len(t.rows) for t in dataset.tables),
                "columns": max((len(t.columns) for t in dataset.tables), default=0),
                "warnings": len(warnings),
            },
            "detection": detection,
            "warnings": warnings,
        },
    }
