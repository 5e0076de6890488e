"""
Spreadsheet-style column names.

Columns are named A..Z, AA..AZ, BA.. and so on: a bijective base-26 numeral
with no digit for zero. Both ingestion paths name columns through here so
delimited-text and workbook tables line up.
"""

from __future__ import annotations

import string

LETTERS = string.ascii_uppercase
BASE = len(LETTERS)


def column_name(index: int) -> str:
    """
    Return the letter name of a zero-based column index.

    0 -> "A", 25 -> "Z", 26 -> "AA", 701 -> "ZZ", 702 -> "AAA".
    """
    if index < 0:
        raise ValueError(f"column index must be >= 0, got {index}")

    name = ""
    correction = 0
    while True:
        # every position past the first has no zero digit, hence the offset
        index -= correction
        name = LETTERS[index % BASE] + name
        index //= BASE
        correction = 1
        if index == 0:
            return name


def column_index(name: str) -> int:
    """Inverse of column_name()."""
    if not name or any(ch not in LETTERS for ch in name):
        raise ValueError(f"not a column name: {name!r}")

    value = 0
    for ch in name:
        value = value * BASE + LETTERS.index(ch) + 1
    return value - 1
