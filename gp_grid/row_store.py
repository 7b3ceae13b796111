"""Row Store: the session's full, unfiltered dataset."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Mapping, Sequence

from gp_common.errors import ConfigurationError
from gp_grid.models import Row


def _validate_columns(columns: Sequence[str] | None) -> tuple[str, ...]:
    if columns is None or isinstance(columns, (str, bytes)):
        raise ConfigurationError(
            "Column list must be a sequence of column names",
            context={"columns": columns},
        )
    resolved = tuple(columns)
    if not resolved:
        raise ConfigurationError("Column list must not be empty")
    seen: set[str] = set()
    for name in resolved:
        if not isinstance(name, str) or not name:
            raise ConfigurationError(
                "Column names must be non-empty strings",
                context={"column": name},
            )
        if name in seen:
            raise ConfigurationError(
                f"Duplicate column name: {name}",
                context={"column": name},
            )
        seen.add(name)
    return resolved


def _as_rows(rows: Iterable[Row | Mapping[str, Any]]) -> Sequence[Row]:
    if not isinstance(rows, Sequence):
        try:
            rows = list(rows)
        except TypeError as exc:
            raise ConfigurationError(
                "Dataset must be a sequence of rows",
                context={"type": type(rows).__name__},
                cause=exc,
            ) from exc
    if all(isinstance(row, Row) for row in rows):
        return rows  # type: ignore[return-value]
    wrapped: list[Row] = []
    for position, row in enumerate(rows):
        if isinstance(row, Row):
            wrapped.append(row)
        elif isinstance(row, Mapping):
            wrapped.append(Row(values=row))
        else:
            raise ConfigurationError(
                "Rows must be Row objects or mappings",
                context={"position": position, "type": type(row).__name__},
            )
    return wrapped


class RowStore:
    """Holds the dataset and the column list for one picking session.

    A sequence made only of ``Row`` objects is kept by reference; other
    iterables (generators) are read once into a list. Plain mappings
    are wrapped in ``Row`` without copying their values. Nothing here ever
    mutates the dataset after loading.
    """

    def __init__(self, rows: Sequence[Row], columns: tuple[str, ...]) -> None:
        self._rows = rows
        self._columns = columns

    @classmethod
    def load(
        cls,
        rows: Iterable[Row | Mapping[str, Any]] | None,
        columns: Sequence[str] | None,
    ) -> "RowStore":
        if rows is None:
            raise ConfigurationError("Dataset must not be None")
        if isinstance(rows, (str, bytes, Mapping)):
            raise ConfigurationError(
                "Dataset must be a sequence of rows",
                context={"type": type(rows).__name__},
            )
        resolved_columns = _validate_columns(columns)
        return cls(_as_rows(rows), resolved_columns)

    @property
    def rows(self) -> Sequence[Row]:
        return self._rows

    @property
    def columns(self) -> tuple[str, ...]:
        return self._columns

    def row(self, position: int) -> Row:
        return self._rows[position]

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)
