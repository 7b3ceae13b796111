from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

import structlog

from gp_grid.session import PickerSession
from gp_ui.tui.system.components.output import LevelPresenter
from gp_ui.tui.system.models import TableModel
from gp_ui.tui.system.protocols import GridPicker, TablePresenter

logger = structlog.get_logger(__name__)

Action = tuple[Any, ...]


class HeadlessGridPicker(GridPicker):
    """Replays a scripted list of user actions against a session.

    Actions: ``("query", text)``, ``("toggle", position)``,
    ``("select_visible",)``, ``("clear",)``, ``("confirm",)``, ``("cancel",)``.
    A script that ends without reaching a terminal state cancels the session,
    the same as closing the window.
    """

    def __init__(self, actions: Sequence[Action] = ()) -> None:
        self.actions: list[Action] = [tuple(action) for action in actions]
        self.rejected_confirmations = 0

    def run(self, session: PickerSession) -> None:
        with session.guard():
            for action in self.actions:
                if session.state.terminal:
                    break
                logger.debug("Replaying picker action", action=action[0], args=list(action[1:]))
                self._apply(session, action)
        if not session.state.terminal:
            session.cancel()

    def _apply(self, session: PickerSession, action: Action) -> None:
        name, args = action[0], action[1:]
        if name == "query":
            session.set_query(str(args[0]) if args else "")
        elif name == "toggle":
            session.toggle(int(args[0]))
        elif name == "select_visible":
            session.select_visible()
        elif name == "clear":
            session.clear_selection()
        elif name == "confirm":
            if not session.confirm():
                self.rejected_confirmations += 1
        elif name == "cancel":
            session.cancel()
        else:
            raise ValueError(f"Unknown headless picker action: {name}")


class _RecordingTablePresenter(TablePresenter):
    def __init__(self, sink: list[TableModel]) -> None:
        self._sink = sink

    def show(self, table: TableModel) -> None:
        self._sink.append(table)


class _RecordingPresenter(LevelPresenter):
    def __init__(self, sink: list[tuple[str, str]]) -> None:
        self._sink = sink

    def emit(self, level: str, message: str) -> None:
        self._sink.append((level, message))


@dataclass
class HeadlessUI:
    """UI bundle for tests and CI: scripted picker, output kept in memory."""

    recorded_tables: list[TableModel] = field(default_factory=list)
    recorded_messages: list[tuple[str, str]] = field(default_factory=list)
    actions: list[Action] = field(default_factory=lambda: [("confirm",)])

    def __post_init__(self) -> None:
        self.picker = HeadlessGridPicker(self.actions)
        self.tables = _RecordingTablePresenter(self.recorded_tables)
        self.present = _RecordingPresenter(self.recorded_messages)
