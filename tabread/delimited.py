"""
Delimited text (CSV / semicolon CSV / TSV) to dataset.

Responsibilities:
- encoding resolution (see encoding.py)
- separator detection
- quote-aware tokenizing, one line at a time
- schema growth: a wider row appends columns, rows are never padded
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .encoding import TextEncoding, decode_text
from .models import Dataset, TableBuilder
from .rules import CANDIDATE_SEPARATORS, DEFAULT_SEPARATOR, DEFAULT_TABLE_NAME, QUOTE

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"[\r\n]")


@dataclass(frozen=True)
class DelimitedResult:
    dataset: Dataset
    encoding: TextEncoding
    separator: str
    lines: int


def split_lines(text: str) -> List[str]:
    """Split on CR and LF, dropping empty lines."""
    return [line for line in _LINE_BREAK.split(text) if line]


def _count_unquoted(line: str, ch: str) -> int:
    count = 0
    quoted = False
    for current in line:
        if current == QUOTE:
            quoted = not quoted
        elif current == ch and not quoted:
            count += 1
    return count


def detect_separator(
    lines: Sequence[str],
    candidates: Iterable[str] = CANDIDATE_SEPARATORS,
    fallback: str = DEFAULT_SEPARATOR,
) -> str:
    """
    Pick the separator whose unquoted occurrence count repeats between two
    consecutive lines.

    Only candidates present in the first line are considered. Candidates keep
    their priority order, so on a tie the earlier one wins. Falls back to
    `fallback` when nothing qualifies.
    """
    if not lines:
        return fallback

    first = lines[0]
    seps = [s for s in dict.fromkeys(candidates) if s in first]
    if not seps:
        return fallback
    if len(seps) == 1:
        return seps[0]

    previous: Optional[List[int]] = None
    for line in lines:
        counts = [_count_unquoted(line, s) for s in seps]
        if previous is not None:
            for sep, before, now in zip(seps, previous, counts):
                if before == now:
                    return sep
        previous = counts
    return fallback


def tokenize_line(line: str, separator: str) -> List[str]:
    """
    Split one line into values.

    A quoted field may contain the separator; a doubled quote inside a quoted
    field yields one literal quote. Unbalanced quoting never raises, but an
    unterminated quoted field swallows the rest of the line and is dropped.
    """
    chars = line + separator
    last = len(chars) - 1
    values: List[str] = []
    buf: List[str] = []
    quoted = False

    for i, current in enumerate(chars):
        if current == separator:
            if quoted:
                buf.append(current)
            else:
                values.append("".join(buf))
                buf.clear()
        elif current == QUOTE:
            quoted = not quoted
            # closing quote right before a separator is structural
            if not quoted and i < last and chars[i + 1] == separator:
                continue
            if i > 0 and chars[i - 1] == QUOTE:
                buf.append(QUOTE)
        else:
            buf.append(current)

    return values


def parse_delimited(
    raw: bytes,
    table_name: str = DEFAULT_TABLE_NAME,
    default_encoding: Optional[str] = None,
) -> DelimitedResult:
    text, enc = decode_text(raw, default_encoding)
    lines = split_lines(text)
    sep = detect_separator(lines)
    logger.debug("separator %r detected over %d lines", sep, len(lines))

    builder = TableBuilder(table_name)
    for line in lines:
        values = tokenize_line(line, sep)
        if len(values) > len(builder.columns):
            builder.grow_to(len(values))
        builder.add_row(values)

    table = builder.build()
    logger.info(
        "read delimited table %r: %d rows x %d columns (%s, sep=%r)",
        table.name, len(table.rows), len(table.columns), enc.name, sep,
    )
    return DelimitedResult(
        dataset=Dataset(tables=(table,)),
        encoding=enc,
        separator=sep,
        lines=len(lines),
    )


def read_delimited(raw: bytes, table_name: str = DEFAULT_TABLE_NAME) -> Dataset:
    """Read delimited text bytes into a one-table dataset."""
    return parse_delimited(raw, table_name).dataset
