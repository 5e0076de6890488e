"""
Fixed ingestion rules.

These are not configuration: changing any of them changes the shape of every
dataset this package produces.
"""

DEFAULT_TABLE_NAME = "Sheet1"
FIRST_COLUMN_NAME = "A"

DEFAULT_SEPARATOR = ","  # RFC-4180
CANDIDATE_SEPARATORS = (DEFAULT_SEPARATOR, ";", "\t")  # US, European, tab
QUOTE = '"'

DEFAULT_ENCODING = "cp1252"  # Windows 8-bit code page

DELIMITED_EXTENSIONS = (".csv", ".txt", ".tsv")
WORKBOOK_EXTENSIONS = (".xlsx", ".xlsm")
