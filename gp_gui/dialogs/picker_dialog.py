"""Modal picker dialog: search box over a virtual, checkable table."""

from __future__ import annotations

from typing import Sequence

import structlog
from pathlib import Path

from PySide6.QtCore import QEvent, QModelIndex, QObject, Qt
from PySide6.QtGui import QKeyEvent
from PySide6.QtWidgets import (
    QAbstractItemView,
    QDialog,
    QDialogButtonBox,
    QFileDialog,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QPushButton,
    QTableView,
    QVBoxLayout,
    QWidget,
)

from gp_grid.layout import Rect, Screen, measure_columns, target_rect
from gp_grid.models import PickerState
from gp_grid.render_bridge import RESET
from gp_grid.session import PickerSession
from gp_gui.models.grid_table_model import CHECK_COLUMN, GridTableModel
from gp_gui.utils.qt import screens_from_qt, set_widget_role

logger = structlog.get_logger(__name__)

_CHECK_COLUMN_WIDTH = 28
_CHROME_HEIGHT = 120
_CHROME_WIDTH = 40


class PickerDialog(QDialog):
    """Dialog driving one loaded session until it is confirmed or cancelled."""

    def __init__(
        self,
        session: PickerSession,
        *,
        screens: Sequence[Screen] | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._session = session
        self._model = GridTableModel(session, self)
        self._screens = list(screens) if screens is not None else None

        self.setWindowTitle(session.title)
        self.setModal(True)
        self._setup_ui()
        self._connect_signals()
        self._refresh_status()
        self._apply_geometry()

    # -- construction ------------------------------------------------------

    def _setup_ui(self) -> None:
        """Set up the UI layout."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(8)

        self._search = QLineEdit()
        self._search.setPlaceholderText(
            "Filter rows (space = AND, || = OR, !x = NOT, $col:value, >N)"
        )
        self._search.setClearButtonEnabled(True)
        self._search.setText(self._session.query)
        self._search.installEventFilter(self)
        layout.addWidget(self._search)

        self._table = QTableView()
        self._table.setModel(self._model)
        self._table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self._table.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self._table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self._table.verticalHeader().setVisible(False)
        self._table.setAlternatingRowColors(True)
        self._table.setShowGrid(False)
        self._table.setWordWrap(False)
        header = self._table.horizontalHeader()
        header.setSectionResizeMode(CHECK_COLUMN, QHeaderView.ResizeMode.Fixed)
        header.resizeSection(CHECK_COLUMN, _CHECK_COLUMN_WIDTH)
        header.setStretchLastSection(True)
        self._table.installEventFilter(self)
        layout.addWidget(self._table, 1)

        footer = QHBoxLayout()
        self._status_label = QLabel("")
        self._status_label.setProperty("role", "muted")
        footer.addWidget(self._status_label, 1)

        self._select_all_btn = QPushButton("Select Visible")
        footer.addWidget(self._select_all_btn)
        self._clear_btn = QPushButton("Clear")
        footer.addWidget(self._clear_btn)

        self._buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel
        )
        self._ok_btn = self._buttons.button(QDialogButtonBox.StandardButton.Ok)
        self._ok_btn.setAutoDefault(False)
        self._ok_btn.setDefault(False)
        footer.addWidget(self._buttons)
        layout.addLayout(footer)

        self._column_widths = measure_columns(
            self._session.bridge,
            sample_rows=self._session.settings.measure_sample_rows,
        )
        self._apply_column_widths()

    def _connect_signals(self) -> None:
        """Wire widgets and session callbacks."""
        self._search.textChanged.connect(self._on_query_changed)
        self._table.doubleClicked.connect(self._on_double_click)
        self._select_all_btn.clicked.connect(self._on_select_visible)
        self._clear_btn.clicked.connect(self._on_clear)
        self._buttons.accepted.connect(self.confirm)
        self._buttons.rejected.connect(self.reject)
        self._unsubscribe = self._session.bridge.subscribe(self._on_bridge_changed)
        self._session.on_state_change(self._on_state_change)

    def _apply_column_widths(self) -> None:
        char_width = max(1, self.fontMetrics().averageCharWidth())
        header = self._table.horizontalHeader()
        positions = self._session.bridge.visible_positions
        for section, position in enumerate(positions, start=1):
            width = self._column_widths[position]
            header.resizeSection(section, (width + 2) * char_width)

    def required_size(self) -> tuple[int, int]:
        """Size the content would like: every column and every row visible."""
        header = self._table.horizontalHeader()
        width = sum(header.sectionSize(c) for c in range(self._model.columnCount()))
        row_height = self._table.verticalHeader().defaultSectionSize()
        height = row_height * max(1, self._model.rowCount()) + header.height()
        return width + _CHROME_WIDTH, height + _CHROME_HEIGHT

    def target_geometry(self) -> Rect:
        screens = self._screens if self._screens is not None else screens_from_qt()
        return target_rect(
            screens,
            span_all_screens=self._session.options.span_all_screens,
            required=self.required_size(),
            padding=self._session.settings.layout_padding,
        )

    def _apply_geometry(self) -> None:
        rect = self.target_geometry()
        self.setGeometry(rect.x, rect.y, rect.width, rect.height)

    # -- state -------------------------------------------------------------

    @property
    def model(self) -> GridTableModel:
        return self._model

    @property
    def search(self) -> QLineEdit:
        return self._search

    @property
    def table(self) -> QTableView:
        return self._table

    @property
    def confirm_button(self) -> QPushButton:
        return self._ok_btn

    @property
    def status_text(self) -> str:
        return self._status_label.text()

    def current_row(self) -> int:
        index = self._table.currentIndex()
        if index.isValid():
            return index.row()
        return 0 if self._model.rowCount() > 0 else -1

    def set_current_row(self, row: int) -> None:
        count = self._model.rowCount()
        if count == 0:
            return
        row = max(0, min(row, count - 1))
        self._table.setCurrentIndex(self._model.index(row, 1 if self._model.columnCount() > 1 else 0))

    # -- actions -----------------------------------------------------------

    def toggle_current(self) -> None:
        row = self.current_row()
        if row < 0:
            return
        with self._session.guard():
            self._session.toggle(row)

    def confirm(self) -> bool:
        """Confirm, taking the highlighted row when the selection would be rejected."""
        session = self._session
        row = self.current_row()
        with session.guard():
            if row >= 0:
                if not session.options.multi_select:
                    if not session.bridge.is_selected(row):
                        session.toggle(row)
                elif session.selection.count == 0 and not session.options.allow_empty_selection:
                    session.toggle(row)
            if session.confirm():
                return True
        self._refresh_status(notice="Select at least one row")
        return False

    def export_visible(self, output_path: str) -> bool:
        """Write the rows and columns on screen to ``output_path`` as CSV."""
        try:
            count = self._session.export_csv(output_path)
        except OSError as exc:
            logger.warning("export failed", path=output_path, error=str(exc))
            self._refresh_status(notice=f"Export failed: {exc.strerror or exc}")
            return False
        self._refresh_status(notice=f"Exported {count} rows to {Path(output_path).name}")
        return True

    def _prompt_export(self) -> None:
        path, _filter = QFileDialog.getSaveFileName(
            self, "Export visible rows", "", "CSV files (*.csv)"
        )
        if path:
            self.export_visible(path)

    def reject(self) -> None:
        if self._session.state.terminal:
            self._close(QDialog.DialogCode.Rejected)
            return
        self._session.cancel()

    def _close(self, code: QDialog.DialogCode) -> None:
        if getattr(self, "_unsubscribe", None) is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._model.detach()
        super().done(int(code.value))

    # -- slots -------------------------------------------------------------

    def _on_query_changed(self, text: str) -> None:
        with self._session.guard():
            self._session.set_query(text)
        self.set_current_row(0)

    def _on_double_click(self, index: QModelIndex) -> None:
        if not index.isValid() or index.column() == CHECK_COLUMN:
            return
        with self._session.guard():
            if not self._session.bridge.is_selected(index.row()):
                self._session.toggle(index.row())
        self.confirm()

    def _on_select_visible(self) -> None:
        with self._session.guard():
            self._session.select_visible()

    def _on_clear(self) -> None:
        with self._session.guard():
            self._session.clear_selection()

    def _on_bridge_changed(self, reason: str) -> None:
        if reason == RESET:
            self.setWindowTitle(self._session.title)
            self._apply_column_widths()
        self._refresh_status()

    def _on_state_change(self, _old: PickerState, new: PickerState) -> None:
        if not new.terminal:
            return
        logger.debug("picker dialog closing", state=new.value)
        code = (
            QDialog.DialogCode.Accepted
            if new is PickerState.CONFIRMED
            else QDialog.DialogCode.Rejected
        )
        self._close(code)

    def _refresh_status(self, notice: str = "") -> None:
        session = self._session
        text = (
            f"{session.bridge.row_count()}/{len(session.store)} rows"
            f" | {session.selection.count} selected"
        )
        if notice:
            text = f"{text} | {notice}"
        self._status_label.setText(text)
        set_widget_role(self._status_label, "warning" if notice else "muted")
        self._ok_btn.setEnabled(session.can_confirm)

    # -- keyboard ----------------------------------------------------------

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if event.type() != QEvent.Type.KeyPress or not isinstance(event, QKeyEvent):
            return super().eventFilter(watched, event)
        key = event.key()
        if watched is self._search and key in (Qt.Key.Key_Down, Qt.Key.Key_Up):
            self._table.setFocus()
            step = 1 if key == Qt.Key.Key_Down else -1
            current = self._table.currentIndex()
            self.set_current_row(current.row() + step if current.isValid() else 0)
            return True
        if (
            key == Qt.Key.Key_E
            and event.modifiers() & Qt.KeyboardModifier.ControlModifier
            and watched in (self._search, self._table)
        ):
            self._prompt_export()
            return True
        if watched is self._table and key == Qt.Key.Key_Tab:
            self._search.setFocus()
            return True
        if watched is self._table and key == Qt.Key.Key_Space:
            self.toggle_current()
            return True
        if key in (Qt.Key.Key_Return, Qt.Key.Key_Enter) and watched in (self._search, self._table):
            self.confirm()
            return True
        return super().eventFilter(watched, event)
