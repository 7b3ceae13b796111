"""Virtual Render Bridge: on-demand cell values for the host grid widget.

Hosts ask for the current row count and for individual cells; nothing is
materialized for rows that are filtered out or scrolled off screen. Lookups
sit on the repaint path, so bad indices return an empty value instead of
raising.
"""

from __future__ import annotations

from typing import Any, Callable

from gp_grid.filter_engine import FilterEngine
from gp_grid.models import Row
from gp_grid.row_store import RowStore
from gp_grid.search_index import stringify
from gp_grid.selection import SelectionTracker

RESET = "reset"
SELECTION = "selection"

BridgeListener = Callable[[str], None]


class VirtualRenderBridge:
    def __init__(
        self,
        store: RowStore,
        engine: FilterEngine,
        selection: SelectionTracker,
    ) -> None:
        self._store = store
        self._engine = engine
        self._selection = selection
        self._column_positions = {name: i for i, name in enumerate(store.columns)}
        self._listeners: list[BridgeListener] = []
        self.generation = 0

    @property
    def declared_columns(self) -> tuple[str, ...]:
        return self._store.columns

    @property
    def visible_positions(self) -> tuple[int, ...]:
        """Declared-column positions currently on screen, in declared order."""
        return self._engine.visible_columns

    @property
    def columns(self) -> tuple[str, ...]:
        """Names of the visible columns; integer column arguments index this."""
        declared = self._store.columns
        return tuple(declared[pos] for pos in self.visible_positions)

    def row_count(self) -> int:
        return len(self._engine)

    def column_count(self) -> int:
        return len(self.visible_positions)

    def column_name(self, column: int) -> str:
        positions = self.visible_positions
        if isinstance(column, int) and 0 <= column < len(positions):
            return self._store.columns[positions[column]]
        return ""

    def row_at(self, row: int) -> Row | None:
        if not isinstance(row, int):
            return None
        position = self._engine.position(row)
        if position is None:
            return None
        return self._store.row(position)

    def cell_value(self, row: int, column: str | int) -> Any:
        if isinstance(column, int):
            name = self.column_name(column)
        elif isinstance(column, str):
            name = column
        else:
            return ""
        if name not in self._column_positions:
            return ""
        record = self.row_at(row)
        if record is None:
            return ""
        return record.get(name, "")

    def cell_text(self, row: int, column: str | int) -> str:
        text = stringify(self.cell_value(row, column))
        if "\n" in text or "\r" in text:
            text = " ".join(text.split())
        return text

    def is_selected(self, row: int) -> bool:
        return self._selection.is_selected_at(row)

    def visible_range(self, top: int, height: int) -> range:
        """Clamp a viewport to the rows that actually exist."""
        count = self.row_count()
        if count == 0 or height <= 0:
            return range(0)
        start = max(0, min(top, count - 1))
        return range(start, min(count, start + height))

    def subscribe(self, listener: BridgeListener) -> Callable[[], None]:
        """Register a repaint callback; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def invalidate(self, reason: str = RESET) -> None:
        self.generation += 1
        for listener in list(self._listeners):
            listener(reason)
