from rich.console import Console

from gp_ui.tui.system.components.output import RichPresenter, RichTablePresenter
from gp_ui.tui.system.components.picker import TerminalGridPicker
from gp_ui.tui.system.protocols import UI, GridPicker, Presenter, TablePresenter


class TUI(UI):
    """Terminal front-end: prompt_toolkit picker, rich tables and messages on one console."""

    def __init__(self, console: Console | None = None, picker: GridPicker | None = None):
        self.console = console or Console()
        self.picker: GridPicker = picker or TerminalGridPicker()
        self.tables: TablePresenter = RichTablePresenter(self.console)
        self.present: Presenter = RichPresenter(self.console)
