"""Selection Tracker: selected rows keyed by dataset position, not view position."""

from __future__ import annotations

from typing import Iterable

import structlog

from gp_grid.filter_engine import FilterEngine
from gp_grid.models import Row
from gp_grid.row_store import RowStore

logger = structlog.get_logger(__name__)


class SelectionTracker:
    """Maps user interactions onto a set of dataset positions.

    Positions passed in are filtered-view positions and are resolved through the
    engine's current view. Stale or out-of-range positions are ignored; they are
    expected when a click races a repaint.
    """

    def __init__(
        self,
        store: RowStore,
        engine: FilterEngine,
        *,
        multi_select: bool = True,
    ) -> None:
        self._store = store
        self._engine = engine
        self._multi_select = multi_select
        self._selected: set[int] = set()

    @property
    def multi_select(self) -> bool:
        return self._multi_select

    @property
    def count(self) -> int:
        return len(self._selected)

    def __len__(self) -> int:
        return len(self._selected)

    def seed(self, positions: Iterable[int]) -> None:
        for position in positions:
            target = self._engine.position(position)
            if target is None:
                logger.debug("ignored initial selection", position=position)
                continue
            if not self._multi_select:
                self._selected.clear()
            self._selected.add(target)

    def toggle(self, filtered_position: int) -> bool:
        target = self._engine.position(filtered_position)
        if target is None:
            logger.debug("ignored toggle", position=filtered_position, visible=len(self._engine))
            return False
        if target in self._selected:
            self._selected.discard(target)
        else:
            if not self._multi_select:
                self._selected.clear()
            self._selected.add(target)
        return True

    def select_visible(self) -> int:
        """Select every row of the current view; returns how many were added."""
        if not self._multi_select:
            return 0
        before = len(self._selected)
        self._selected.update(self._engine.view)
        return len(self._selected) - before

    def clear(self) -> None:
        self._selected.clear()

    def is_selected(self, dataset_position: int) -> bool:
        return dataset_position in self._selected

    def is_selected_at(self, filtered_position: int) -> bool:
        target = self._engine.position(filtered_position)
        return target is not None and target in self._selected

    def selected_positions(self) -> list[int]:
        return sorted(self._selected)

    def selected_rows(self) -> list[Row]:
        return [self._store.row(position) for position in sorted(self._selected)]
