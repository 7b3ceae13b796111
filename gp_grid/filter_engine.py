"""Filter Engine: derives the visible row positions from the live query."""

from __future__ import annotations

import time
from typing import Iterable, Sequence

import structlog

from gp_grid.query import Query, RowPredicate, parse_query
from gp_grid.search_index import SearchIndex

logger = structlog.get_logger(__name__)


def _scan(index: SearchIndex, positions: Iterable[int], predicate: RowPredicate) -> list[int]:
    return [pos for pos in positions if predicate(index[pos], index.cells(pos))]


def filter_rows(index: SearchIndex, query: str | Query) -> list[int]:
    """Return dataset positions whose index entry matches ``query``, in order."""
    parsed = query if isinstance(query, Query) else parse_query(query)
    if parsed.unfiltered:
        return list(range(len(index)))
    return _scan(index, range(len(index)), parsed.compile(index.columns))


class FilterEngine:
    """Keeps the current query and its filtered view for one session.

    When the new query can only narrow the previous one (the user kept typing),
    only the previous view is rescanned.
    """

    def __init__(
        self,
        index: SearchIndex,
        *,
        incremental: bool = True,
        budget_ms: float = 50.0,
    ) -> None:
        self._index = index
        self._incremental = incremental
        self._budget_ms = budget_ms
        self._query = parse_query("")
        self._view: list[int] = list(range(len(index)))
        self._visible_columns = tuple(range(len(index.columns)))
        self.last_pass_incremental = False
        self.last_duration_ms = 0.0

    @property
    def query(self) -> str:
        return self._query.text

    @property
    def filtered(self) -> bool:
        """True when the current query can hide rows."""
        return not self._query.unfiltered

    @property
    def view(self) -> Sequence[int]:
        return self._view

    @property
    def visible_columns(self) -> tuple[int, ...]:
        """Declared-column positions left on screen by ``$column`` tokens."""
        return self._visible_columns

    def __len__(self) -> int:
        return len(self._view)

    def position(self, filtered_position: int) -> int | None:
        """Map a filtered-view position to its dataset position."""
        if 0 <= filtered_position < len(self._view):
            return self._view[filtered_position]
        return None

    def apply(self, query: str) -> Sequence[int]:
        parsed = parse_query(query)
        started = time.perf_counter()

        incremental = (
            self._incremental
            and not parsed.unfiltered
            and not self._query.unfiltered
            and parsed.narrows(self._query)
        )
        if parsed.unfiltered:
            view = list(range(len(self._index)))
        else:
            predicate = parsed.compile(self._index.columns)
            positions = self._view if incremental else range(len(self._index))
            view = _scan(self._index, positions, predicate)

        self._query = parsed
        self._view = view
        self._visible_columns = parsed.visible_columns(self._index.columns)
        self.last_pass_incremental = incremental
        self.last_duration_ms = (time.perf_counter() - started) * 1000.0

        if self.last_duration_ms > self._budget_ms:
            logger.warning(
                "filter pass over budget",
                rows=len(self._index),
                matches=len(view),
                duration_ms=round(self.last_duration_ms, 2),
                budget_ms=self._budget_ms,
                incremental=incremental,
            )
        else:
            logger.debug(
                "filter pass",
                groups=len(parsed.groups),
                terms=len(parsed.terms),
                matches=len(view),
                duration_ms=round(self.last_duration_ms, 2),
                incremental=incremental,
            )
        return self._view
