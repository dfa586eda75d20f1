"""
Tabular Row Sets.

`QueryResult` is the shape in which the store hands rows back to the
workflows and the console: a tuple of column names plus a tuple of row
tuples. It holds plain values only, so it stays valid after the session that
produced it has been closed.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.engine import Result


@dataclass(frozen=True)
class QueryResult:
    """Column names and rows of one query."""

    columns: tuple[str, ...]
    rows: tuple[tuple[Any, ...], ...] = field(default_factory=tuple)

    @classmethod
    def from_result(cls, result: Result[Any]) -> QueryResult:
        """Drains a SQLAlchemy `Result` into a detached `QueryResult`."""
        columns = tuple(result.keys())
        rows = tuple(tuple(row) for row in result.all())
        return cls(columns=columns, rows=rows)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[tuple[Any, ...]]:
        return iter(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def column(self, name: str) -> list[Any]:
        """Returns every value of the named column, in row order."""
        index = self.columns.index(name)
        return [row[index] for row in self.rows]

    def as_dicts(self) -> list[dict[str, Any]]:
        return [dict(zip(self.columns, row, strict=True)) for row in self.rows]
