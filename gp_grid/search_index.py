"""Search Index: lowercase cell text per row, built once per load."""

from __future__ import annotations

from typing import Any, Iterator, Sequence, overload

from gp_grid.models import Row
from gp_grid.row_store import RowStore

# Query tokens are split on whitespace, so no token can match across a newline.
ENTRY_SEPARATOR = "\n"


def stringify(value: Any) -> str:
    """Render a cell value as text; ``None`` becomes the empty string."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def index_cells(row: Row, columns: Sequence[str]) -> tuple[str, ...]:
    return tuple(stringify(row.get(column)).lower() for column in columns)


def index_entry(row: Row, columns: Sequence[str]) -> str:
    return ENTRY_SEPARATOR.join(index_cells(row, columns))


class SearchIndex(Sequence[str]):
    """Read-only sequence of per-row search entries aligned with the dataset.

    Each entry joins the row's cells; ``cells(position)`` keeps them apart for
    column filters.
    """

    __slots__ = ("_cells", "_entries", "columns")

    def __init__(
        self,
        cells: Sequence[Sequence[str]],
        columns: Sequence[str] = (),
    ) -> None:
        self._cells = tuple(tuple(row) for row in cells)
        self._entries = tuple(ENTRY_SEPARATOR.join(row) for row in self._cells)
        self.columns = tuple(columns)

    @classmethod
    def build(cls, rows: Sequence[Row], columns: Sequence[str]) -> "SearchIndex":
        return cls([index_cells(row, columns) for row in rows], columns)

    def cells(self, position: int) -> tuple[str, ...]:
        return self._cells[position]

    @overload
    def __getitem__(self, position: int) -> str: ...

    @overload
    def __getitem__(self, position: slice) -> Sequence[str]: ...

    def __getitem__(self, position: int | slice) -> str | Sequence[str]:
        return self._entries[position]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)


def build_index(store: RowStore) -> SearchIndex:
    return SearchIndex.build(store.rows, store.columns)
