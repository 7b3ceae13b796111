"""Rich renderers for what the CLI prints after the picker closes."""

from __future__ import annotations

from typing import Iterable

from rich.console import Console
from rich.table import Table
from rich.text import Text

from gp_grid.layout import fit_column_widths
from gp_ui.tui.core import theme
from gp_ui.tui.system.models import TableModel
from gp_ui.tui.system.protocols import Presenter, TablePresenter

MIN_TABLE_WIDTH = 40
MIN_COLUMN_WIDTH = 4
# Left edge, padding and right border per column, plus the closing edge.
CELL_OVERHEAD = 3


def _widest(header: str, cells: Iterable[str]) -> int:
    lines = [header, *(line for cell in cells for line in cell.splitlines())]
    return max(len(line) for line in lines)


def build_rich_table(model: TableModel, *, console: Console, show_lines: bool = False) -> Table:
    """Lay out ``model`` as single-line columns shrunk to the console width."""
    width = max(MIN_TABLE_WIDTH, console.size.width - 2)
    desired = [
        _widest(name, (row[idx] for row in model.rows if idx < len(row)))
        for idx, name in enumerate(model.columns)
    ]
    widths = fit_column_widths(
        desired,
        width - CELL_OVERHEAD * len(desired) - 1,
        min_width=MIN_COLUMN_WIDTH,
        separator=0,
    )

    title = Text(model.title, no_wrap=True, overflow="ellipsis")
    table = Table(
        title=title,
        width=width,
        box=theme.RICH_BOX,
        show_lines=show_lines,
        border_style=theme.RICH_BORDER_STYLE,
        header_style=theme.RICH_ACCENT_BOLD,
        title_style=theme.RICH_ACCENT_BOLD,
    )
    for name, col_width in zip(model.columns, widths):
        table.add_column(
            Text(name),
            no_wrap=True,
            overflow="ellipsis",
            min_width=MIN_COLUMN_WIDTH,
            max_width=col_width,
        )
    for row in model.rows:
        table.add_row(*(Text(cell) for cell in row[: len(model.columns)]))
    return table


class RichTablePresenter(TablePresenter):
    def __init__(self, console: Console) -> None:
        self._console = console

    def show(self, table: TableModel) -> None:
        self._console.print(build_rich_table(table, console=self._console))


class LevelPresenter(Presenter):
    """Routes the four message levels through a single ``emit`` hook."""

    def emit(self, level: str, message: str) -> None:
        raise NotImplementedError

    def info(self, message: str) -> None:
        self.emit("info", message)

    def warning(self, message: str) -> None:
        self.emit("warning", message)

    def error(self, message: str) -> None:
        self.emit("error", message)

    def success(self, message: str) -> None:
        self.emit("success", message)


class RichPresenter(LevelPresenter):
    def __init__(self, console: Console) -> None:
        self._console = console

    def emit(self, level: str, message: str) -> None:
        self._console.print(theme.presenter_message(level, message))
