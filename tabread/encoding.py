"""
Byte-order-mark based encoding resolution.

Only the preamble is inspected. Files without one are assumed to be in the
default 8-bit code page, which is what spreadsheet programs do when they open
a bare CSV.
"""

from __future__ import annotations

import codecs
import logging
from typing import NamedTuple, Optional, Tuple

from .rules import DEFAULT_ENCODING

logger = logging.getLogger(__name__)


class TextEncoding(NamedTuple):
    name: str
    preamble: bytes = b""


# Order matters: the UTF-32 LE mark starts with the UTF-16 LE mark.
KNOWN_ENCODINGS: Tuple[TextEncoding, ...] = (
    TextEncoding("utf-8", codecs.BOM_UTF8),
    TextEncoding("utf-32-le", codecs.BOM_UTF32_LE),
    TextEncoding("utf-32-be", codecs.BOM_UTF32_BE),
    TextEncoding("utf-16-le", codecs.BOM_UTF16_LE),
    TextEncoding("utf-16-be", codecs.BOM_UTF16_BE),
)


def resolve_encoding(raw: bytes, default: Optional[str] = None) -> TextEncoding:
    """Return the first known encoding whose preamble prefixes raw, else the default."""
    for enc in KNOWN_ENCODINGS:
        if enc.preamble and len(enc.preamble) <= len(raw) and raw.startswith(enc.preamble):
            return enc
    return TextEncoding(default or DEFAULT_ENCODING)


def decode_text(raw: bytes, default: Optional[str] = None) -> Tuple[str, TextEncoding]:
    """
    Decode raw bytes using the resolved encoding.

    The preamble is stripped. Undecodable bytes become U+FFFD instead of
    raising, so a CSV read never fails on encoding alone.
    """
    enc = resolve_encoding(raw, default)
    text = raw[len(enc.preamble):].decode(enc.name, errors="replace")
    logger.debug("decoded %d bytes as %s (bom=%s)", len(raw), enc.name, bool(enc.preamble))
    return text, enc
