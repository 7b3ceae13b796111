"""Tests for the scripted picker and the open_picker entry point."""

from __future__ import annotations

import io

import pytest

from gp_common.errors import ConfigurationError
from gp_grid.models import PickerState, Row
from gp_grid.session import PickerSession
from gp_grid.settings import GridSettings
from gp_ui.api import open_picker, resolve_picker
from gp_ui.tui.system.components.picker import TerminalGridPicker
from gp_ui.tui.system.headless import HeadlessGridPicker, HeadlessUI
from gp_ui.tui.system.models import TableModel


pytestmark = pytest.mark.unit_ui

COLUMNS = ["Number", "Name"]


def _rows() -> list[Row]:
    names = ["Level 1 Plan", "Level 2 Plan", "Site Plan", "Section A", "Roof Plan"]
    return [Row({"Number": f"A-{101 + i}", "Name": name}, payload=i) for i, name in enumerate(names)]


def test_open_picker_returns_confirmed_rows_in_dataset_order() -> None:
    rows = _rows()
    picker = HeadlessGridPicker(
        [("toggle", 4), ("query", "level"), ("toggle", 1), ("query", ""), ("confirm",)]
    )
    assert open_picker(rows, COLUMNS, picker=picker) == [rows[1], rows[4]]


def test_open_picker_returns_none_on_cancel() -> None:
    picker = HeadlessGridPicker([("toggle", 0), ("cancel",)])
    assert open_picker(_rows(), COLUMNS, picker=picker) is None


def test_script_ending_without_decision_cancels() -> None:
    picker = HeadlessGridPicker([("toggle", 0)])
    assert open_picker(_rows(), COLUMNS, picker=picker) is None


def test_rejected_confirmation_keeps_session_open() -> None:
    rows = _rows()
    picker = HeadlessGridPicker([("confirm",), ("select_visible",), ("confirm",)])
    assert open_picker(rows, COLUMNS, picker=picker) == rows
    assert picker.rejected_confirmations == 1


def test_empty_selection_allowed_returns_empty_list() -> None:
    picker = HeadlessGridPicker([("clear",), ("confirm",)])
    result = open_picker(
        _rows(),
        COLUMNS,
        {"allowEmptySelection": True, "initialSelection": [0]},
        picker=picker,
    )
    assert result == []


def test_unknown_action_cancels_session() -> None:
    picker = HeadlessGridPicker([("dance",), ("confirm",)])
    assert open_picker(_rows(), COLUMNS, {"initialSelection": [0]}, picker=picker) is None


def test_invalid_input_fails_before_any_ui() -> None:
    class ExplodingPicker:
        def run(self, session: PickerSession) -> None:
            raise AssertionError("picker must not run")

    with pytest.raises(ConfigurationError):
        open_picker(_rows(), ["Number", "Number"], picker=ExplodingPicker())
    with pytest.raises(ConfigurationError):
        open_picker(None, COLUMNS, picker=ExplodingPicker())


def test_front_end_fault_is_reported_as_cancel() -> None:
    class BrokenPicker:
        def run(self, session: PickerSession) -> None:
            session.toggle(0)
            raise RuntimeError("widget crashed")

    assert open_picker(_rows(), COLUMNS, picker=BrokenPicker()) is None


def test_picker_that_returns_early_leaves_no_open_session() -> None:
    sessions: list[PickerSession] = []

    class LazyPicker:
        def run(self, session: PickerSession) -> None:
            sessions.append(session)

    assert open_picker(_rows(), COLUMNS, picker=LazyPicker()) is None
    assert sessions[0].state is PickerState.CANCELLED


def test_resolve_picker_backends() -> None:
    assert isinstance(resolve_picker("headless"), HeadlessGridPicker)
    assert isinstance(resolve_picker("tui"), TerminalGridPicker)
    assert isinstance(resolve_picker(settings=GridSettings(backend="headless")), HeadlessGridPicker)
    with pytest.raises(ConfigurationError):
        resolve_picker("gtk")


def test_default_backend_comes_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GP_PICKER_BACKEND", "headless")
    rows = _rows()
    assert open_picker(rows, COLUMNS, {"initialSelection": [2]}) == [rows[2]]


def test_terminal_picker_without_tty_cancels(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO())
    session = PickerSession().load(_rows(), COLUMNS, {"initialSelection": [0]})
    TerminalGridPicker().run(session)
    assert session.state is PickerState.CANCELLED


def test_headless_ui_records_tables_and_messages() -> None:
    ui = HeadlessUI()
    ui.tables.show(TableModel(title="Selected", columns=["A"], rows=[["1"]]))
    ui.present.warning("careful")
    assert ui.recorded_tables[0].title == "Selected"
    assert ui.recorded_messages == [("warning", "careful")]
    assert isinstance(ui.picker, HeadlessGridPicker)
