from typing import Protocol

from gp_grid.session import PickerSession
from gp_ui.tui.system.models import TableModel


class TablePresenter(Protocol):
    def show(self, table: TableModel) -> None: ...


class GridPicker(Protocol):
    """Front-end that drives a loaded session until it is confirmed or cancelled."""

    def run(self, session: PickerSession) -> None: ...


class Presenter(Protocol):
    def info(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...


class UI(Protocol):
    picker: GridPicker
    tables: TablePresenter
    present: Presenter
