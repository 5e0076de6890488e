from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .columns import column_name


# Weakly-typed cell: text, number or empty.
Cell = Optional[Union[int, float, str]]


class Column(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str


class Table(BaseModel):
    """
    A named table of columns and rows.

    Rows are positional and may be shorter than the column list; the missing
    trailing cells read as empty.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    columns: Tuple[Column, ...] = ()
    rows: Tuple[Tuple[Cell, ...], ...] = ()

    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    def cell(self, row: int, col: int) -> Cell:
        if col >= len(self.columns):
            raise IndexError(f"table {self.name!r} has no column {col}")
        values = self.rows[row]
        return values[col] if col < len(values) else None


class TableBuilder:
    """Append-only table under construction. Columns never shrink."""

    def __init__(self, name: str):
        self.name = name
        self.columns: List[Column] = []
        self.rows: List[Tuple[Cell, ...]] = []

    def grow_to(self, width: int) -> None:
        for idx in range(len(self.columns), width):
            self.columns.append(Column(name=column_name(idx)))

    def add_row(self, values) -> None:
        self.rows.append(tuple(values))

    def build(self) -> Table:
        return Table(name=self.name, columns=tuple(self.columns), rows=tuple(self.rows))


class Dataset(BaseModel):
    """Ordered collection of uniquely named tables."""

    model_config = ConfigDict(frozen=True)

    tables: Tuple[Table, ...] = ()

    @model_validator(mode="after")
    def _unique_names(self) -> "Dataset":
        seen = set()
        for t in self.tables:
            if t.name in seen:
                raise ValueError(f"duplicate table name: {t.name!r}")
            seen.add(t.name)
        return self

    def names(self) -> List[str]:
        return [t.name for t in self.tables]

    def get(self, name: str) -> Optional[Table]:
        for t in self.tables:
            if t.name == name:
                return t
        return None

    def __getitem__(self, name: str) -> Table:
        table = self.get(name)
        if table is None:
            raise KeyError(name)
        return table

    def __contains__(self, name: object) -> bool:
        return any(t.name == name for t in self.tables)

    def __len__(self) -> int:
        return len(self.tables)


# --- HTTP envelope ---


class ReportSummary(BaseModel):
    source: str
    tables: int = 0
    rows: int = 0
    columns: int = 0
    warnings: int = 0


class ReportItem(BaseModel):
    table: Optional[str] = None
    issue: str
    value: Optional[str] = None
    action: str


class ReadReport(BaseModel):
    summary: ReportSummary
    detection: Dict[str, Any] = Field(default_factory=dict)
    warnings: List[ReportItem] = Field(default_factory=list)


class ReadResponse(BaseModel):
    dataset: Dataset
    report: ReadReport


class HealthResponse(BaseModel):
    ok: bool = True
