"""Qt table model reading cells on demand from a picker session's bridge."""

from __future__ import annotations

from typing import Any, Callable

from PySide6.QtCore import QAbstractTableModel, QModelIndex, QObject, Qt

from gp_grid.models import Row
from gp_grid.render_bridge import RESET
from gp_grid.session import PickerSession

CHECK_COLUMN = 0


class GridTableModel(QAbstractTableModel):
    """Column 0 carries the check state; the rest mirror the session columns.

    The row count is the size of the filtered view, so Qt only ever asks for
    the handful of cells currently on screen.
    """

    def __init__(self, session: PickerSession, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._session = session
        self._bridge = session.bridge
        self._unsubscribe: Callable[[], None] | None = self._bridge.subscribe(
            self._on_bridge_changed
        )

    def detach(self) -> None:
        """Stop listening to the bridge (the dialog calls this on close)."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return self._bridge.row_count()

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return self._bridge.column_count() + 1

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if not index.isValid():
            return None
        row = index.row()
        if index.column() == CHECK_COLUMN:
            if role == Qt.ItemDataRole.CheckStateRole:
                checked = self._bridge.is_selected(row)
                return Qt.CheckState.Checked if checked else Qt.CheckState.Unchecked
            return None
        column = index.column() - 1
        if role in (Qt.ItemDataRole.DisplayRole, Qt.ItemDataRole.ToolTipRole):
            return self._bridge.cell_text(row, column)
        return None

    def setData(self, index: QModelIndex, value: Any, role: int = Qt.ItemDataRole.EditRole) -> bool:
        if not index.isValid() or index.column() != CHECK_COLUMN:
            return False
        if role != Qt.ItemDataRole.CheckStateRole:
            return False
        wanted = Qt.CheckState(value) == Qt.CheckState.Checked
        if wanted == self._bridge.is_selected(index.row()):
            return True
        self._session.toggle(index.row())
        return True

    def headerData(
        self,
        section: int,
        orientation: Qt.Orientation,
        role: int = Qt.ItemDataRole.DisplayRole,
    ) -> Any:
        if orientation != Qt.Orientation.Horizontal or role != Qt.ItemDataRole.DisplayRole:
            return None
        if section == CHECK_COLUMN:
            return ""
        return self._bridge.column_name(section - 1)

    def flags(self, index: QModelIndex) -> Qt.ItemFlag:
        if not index.isValid():
            return Qt.ItemFlag.NoItemFlags
        base_flags = Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsSelectable
        if index.column() == CHECK_COLUMN:
            base_flags |= Qt.ItemFlag.ItemIsUserCheckable
        return base_flags

    def row_at(self, row: int) -> Row | None:
        return self._bridge.row_at(row)

    def _on_bridge_changed(self, reason: str) -> None:
        if reason == RESET:
            self.beginResetModel()
            self.endResetModel()
            return
        count = self.rowCount()
        if count == 0:
            return
        top_left = self.index(0, CHECK_COLUMN)
        bottom_right = self.index(count - 1, CHECK_COLUMN)
        self.dataChanged.emit(top_left, bottom_right, [Qt.ItemDataRole.CheckStateRole])
