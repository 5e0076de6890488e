from __future__ import annotations

from enum import Enum


class SpreadsheetErrorKind(str, Enum):
    ENGINE_UNAVAILABLE = "engine_unavailable"
    AUTHORIZATION = "authorization"
    MISSING_PERIPHERAL = "missing_peripheral"
    IO = "io"
    OTHER = "other"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    SpreadsheetErrorKind.ENGINE_UNAVAILABLE: "Error while creating spreadsheet engine object",
    SpreadsheetErrorKind.AUTHORIZATION: "User authorization error",
    SpreadsheetErrorKind.MISSING_PERIPHERAL: "Printer not found",
    SpreadsheetErrorKind.IO: "Error IO File",
    SpreadsheetErrorKind.OTHER: "Generic spreadsheet application error",
}


class SpreadsheetError(Exception):
    """
    Failure reported by a spreadsheet engine.

    The kind is set by the engine that raised it; str() gives the category
    message followed by the engine's own diagnostic on the next line.
    """

    def __init__(self, kind: SpreadsheetErrorKind, detail: str = ""):
        self.kind = kind
        self.detail = detail
        super().__init__(f"{kind.message}\n{detail}" if detail else kind.message)
