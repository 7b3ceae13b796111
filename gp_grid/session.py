"""Picker Controller: one modal picking session and its state machine.

``IDLE -> LOADED -> FILTERING -> (CONFIRMED | CANCELLED)``. Front-ends feed
user events into the session and stop their loop once ``state.terminal`` is
set; the caller then reads ``result``.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, Mapping, Sequence

import structlog
from pydantic import ValidationError

from gp_common.errors import ConfigurationError, SessionStateError
from gp_grid.export import write_visible_csv
from gp_grid.filter_engine import FilterEngine
from gp_grid.models import PickerOptions, PickerState, PickResult, PickStatus, Row
from gp_grid.render_bridge import RESET, SELECTION, VirtualRenderBridge
from gp_grid.row_store import RowStore
from gp_grid.search_index import SearchIndex, build_index
from gp_grid.selection import SelectionTracker
from gp_grid.settings import GridSettings

logger = structlog.get_logger(__name__)

StateListener = Callable[[PickerState, PickerState], None]


class PickerSession:
    """Owns the store, index, filter, selection and bridge of one picker."""

    def __init__(self, settings: GridSettings | None = None) -> None:
        self.settings = settings or GridSettings()
        self._state = PickerState.IDLE
        self._options = PickerOptions()
        self._store: RowStore | None = None
        self._index: SearchIndex | None = None
        self._engine: FilterEngine | None = None
        self._selection: SelectionTracker | None = None
        self._bridge: VirtualRenderBridge | None = None
        self._result: PickResult | None = None
        self._state_listeners: list[StateListener] = []

    # -- lifecycle ---------------------------------------------------------

    def load(
        self,
        rows: Iterable[Row | Mapping[str, Any]] | None,
        columns: Sequence[str] | None,
        options: PickerOptions | Mapping[str, Any] | None = None,
    ) -> "PickerSession":
        if self._state is not PickerState.IDLE:
            raise SessionStateError(
                "Session already loaded",
                context={"state": self._state.value},
            )
        try:
            resolved = PickerOptions.coerce(options)
        except ValidationError as exc:
            raise ConfigurationError(
                "Invalid picker options",
                context={"errors": [err["msg"] for err in exc.errors()]},
                cause=exc,
            ) from exc

        store = RowStore.load(rows, columns)
        index = build_index(store)
        engine = FilterEngine(
            index,
            incremental=self.settings.incremental_filter,
            budget_ms=self.settings.filter_budget_ms,
        )
        selection = SelectionTracker(store, engine, multi_select=resolved.multi_select)
        selection.seed(resolved.initial_selection)

        self._options = resolved
        self._store = store
        self._index = index
        self._engine = engine
        self._selection = selection
        self._bridge = VirtualRenderBridge(store, engine, selection)
        self._transition(PickerState.LOADED)
        logger.info(
            "picker loaded",
            rows=len(store),
            columns=len(store.columns),
            seeded=selection.count,
        )
        if resolved.query:
            self.set_query(resolved.query)
        return self

    def set_query(self, query: str) -> None:
        if self._state not in (PickerState.LOADED, PickerState.FILTERING):
            return
        with self.guard():
            self._require(self._engine).apply(query)
            self._transition(PickerState.FILTERING)
            self._require(self._bridge).invalidate(RESET)

    def toggle(self, filtered_position: int) -> bool:
        if not self.active:
            return False
        with self.guard():
            changed = self._require(self._selection).toggle(filtered_position)
            if changed:
                self._require(self._bridge).invalidate(SELECTION)
            return changed
        return False

    def select_visible(self) -> None:
        if not self.active:
            return
        with self.guard():
            if self._require(self._selection).select_visible():
                self._require(self._bridge).invalidate(SELECTION)

    def clear_selection(self) -> None:
        if not self.active:
            return
        with self.guard():
            self._require(self._selection).clear()
            self._require(self._bridge).invalidate(SELECTION)

    def confirm(self) -> bool:
        """Finish the session with the current selection.

        Returns False, leaving the session open, when nothing is selected and
        the options do not allow an empty selection.
        """
        if not self.active:
            return False
        if not self.can_confirm:
            logger.info("confirmation rejected", reason="empty selection")
            return False
        rows = tuple(self._require(self._selection).selected_rows())
        self._result = PickResult(status=PickStatus.CONFIRMED, rows=rows)
        self._transition(PickerState.CONFIRMED)
        logger.info("picker confirmed", selected=len(rows))
        return True

    def cancel(self) -> None:
        if self._state.terminal:
            return
        self._result = PickResult(status=PickStatus.CANCELLED)
        self._transition(PickerState.CANCELLED)
        logger.info("picker cancelled")

    def export_csv(self, output_path: str | Path) -> int:
        """Write the rows and columns on screen to ``output_path``."""
        return write_visible_csv(self.bridge, Path(output_path))

    @contextmanager
    def guard(self) -> Iterator[None]:
        """Close the session as cancelled if an event handler fails unexpectedly."""
        try:
            yield
        except Exception:
            logger.exception("picker event handler failed", state=self._state.value)
            self.cancel()

    # -- observers ---------------------------------------------------------

    def on_state_change(self, listener: StateListener) -> None:
        self._state_listeners.append(listener)

    def _transition(self, new_state: PickerState) -> None:
        old_state = self._state
        if old_state is new_state:
            return
        self._state = new_state
        logger.debug("picker state", old=old_state.value, new=new_state.value)
        for listener in list(self._state_listeners):
            try:
                listener(old_state, new_state)
            except Exception:
                logger.exception(
                    "state listener failed",
                    old=old_state.value,
                    new=new_state.value,
                )

    # -- accessors ---------------------------------------------------------

    @staticmethod
    def _require(component: Any) -> Any:
        if component is None:
            raise SessionStateError("Session not loaded")
        return component

    @property
    def state(self) -> PickerState:
        return self._state

    @property
    def active(self) -> bool:
        return self._state in (PickerState.LOADED, PickerState.FILTERING)

    @property
    def options(self) -> PickerOptions:
        return self._options

    @property
    def title(self) -> str:
        engine = self.engine
        visible = len(engine) if engine.filtered else None
        return self._options.resolved_title(len(self.store), visible)

    @property
    def query(self) -> str:
        return self.engine.query

    @property
    def can_confirm(self) -> bool:
        if self._selection is None:
            return False
        return self._options.allow_empty_selection or self._selection.count > 0

    @property
    def result(self) -> PickResult | None:
        return self._result

    @property
    def store(self) -> RowStore:
        return self._require(self._store)

    @property
    def index(self) -> SearchIndex:
        return self._require(self._index)

    @property
    def engine(self) -> FilterEngine:
        return self._require(self._engine)

    @property
    def selection(self) -> SelectionTracker:
        return self._require(self._selection)

    @property
    def bridge(self) -> VirtualRenderBridge:
        return self._require(self._bridge)

    def selected_rows(self) -> list[Row]:
        return self.selection.selected_rows()
