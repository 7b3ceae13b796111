"""Tests for selection persistence across filtering."""

from __future__ import annotations

import pytest

from gp_grid.filter_engine import FilterEngine
from gp_grid.row_store import RowStore
from gp_grid.search_index import build_index
from gp_grid.selection import SelectionTracker


pytestmark = pytest.mark.unit_grid


def _tracker(multi_select: bool = True) -> tuple[RowStore, FilterEngine, SelectionTracker]:
    store = RowStore.load(
        [{"Title": t} for t in ["Alpha", "Beta", "Gamma", "Delta", "Epsilon"]],
        ["Title"],
    )
    engine = FilterEngine(build_index(store))
    return store, engine, SelectionTracker(store, engine, multi_select=multi_select)


def test_selection_survives_filter_changes() -> None:
    store, engine, tracker = _tracker()
    tracker.toggle(0)
    tracker.toggle(3)
    engine.apply("delta")
    assert tracker.is_selected_at(0)
    engine.apply("zzz")
    assert len(engine) == 0
    engine.apply("")
    assert tracker.selected_rows() == [store.row(0), store.row(3)]


def test_toggle_through_filtered_view_hits_dataset_row() -> None:
    store, engine, tracker = _tracker()
    tracker.toggle(0)
    tracker.toggle(3)
    engine.apply("delta")
    assert tracker.toggle(0) is True
    engine.apply("")
    assert tracker.selected_rows() == [store.row(0)]


def test_out_of_range_toggle_is_ignored() -> None:
    _store, _engine, tracker = _tracker()
    assert tracker.toggle(99) is False
    assert tracker.toggle(-1) is False
    assert tracker.count == 0


def test_seed_ignores_out_of_range_positions() -> None:
    store, _engine, tracker = _tracker()
    tracker.seed([4, 9, -2, 1])
    assert tracker.selected_positions() == [1, 4]
    assert tracker.selected_rows() == [store.row(1), store.row(4)]


def test_select_visible_adds_only_the_view() -> None:
    _store, engine, tracker = _tracker()
    tracker.toggle(0)
    engine.apply("ta")
    added = tracker.select_visible()
    assert added == 2
    assert tracker.selected_positions() == [0, 1, 3]


def test_single_select_replaces_previous_choice() -> None:
    store, _engine, tracker = _tracker(multi_select=False)
    tracker.toggle(1)
    tracker.toggle(2)
    assert tracker.selected_rows() == [store.row(2)]
    assert tracker.select_visible() == 0
    tracker.toggle(2)
    assert tracker.count == 0


def test_results_come_back_in_dataset_order() -> None:
    store, _engine, tracker = _tracker()
    for position in (4, 0, 2):
        tracker.toggle(position)
    assert tracker.selected_rows() == [store.row(0), store.row(2), store.row(4)]
    tracker.clear()
    assert tracker.selected_rows() == []
