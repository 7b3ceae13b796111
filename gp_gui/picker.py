"""Qt front-end for picker sessions."""

from __future__ import annotations

import sys
from typing import Sequence

import structlog
from PySide6.QtWidgets import QApplication

from gp_grid.layout import Screen
from gp_grid.session import PickerSession
from gp_gui.dialogs.picker_dialog import PickerDialog
from gp_ui.tui.system.protocols import GridPicker

logger = structlog.get_logger(__name__)


def ensure_application() -> QApplication:
    """Return the running QApplication, creating one when needed."""
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv[:1])
        app.setApplicationName("gridpick")
    return app


class QtGridPicker(GridPicker):
    """Modal picker dialog; blocks in ``exec()`` until confirm or cancel."""

    def __init__(self, *, screens: Sequence[Screen] | None = None) -> None:
        self._screens = screens

    def create_dialog(self, session: PickerSession) -> PickerDialog:
        ensure_application()
        return PickerDialog(session, screens=self._screens)

    def run(self, session: PickerSession) -> None:
        with session.guard():
            dialog = self.create_dialog(session)
            dialog.exec()
        if not session.state.terminal:
            logger.debug("picker dialog closed without a decision, cancelling")
            session.cancel()
