"""Reusable grid panel (search + virtual grid + preview + status) for prompt_toolkit UIs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

import structlog
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.widgets import TextArea
from rich.console import Console
from rich.table import Table
from rich.text import Text

from gp_grid.layout import fit_column_widths, measure_columns
from gp_grid.models import Row
from gp_grid.search_index import stringify
from gp_grid.session import PickerSession
from gp_ui.tui.core import theme
from gp_ui.tui.system.components.grid_control import VirtualGridControl

logger = structlog.get_logger(__name__)

Fragment: TypeAlias = tuple[str, str]

COLUMN_GAP = "  "
ROW_PREFIX_WIDTH = 6  # "▸ [x] "
MIN_COLUMN_WIDTH = 4


@dataclass(frozen=True)
class GridPanelConfig:
    """Configuration for GridPanel behavior."""

    wrap_navigation: bool = False
    max_column_width: int = 40
    sample_rows: int = 200


def _fit(text: str, width: int) -> str:
    if len(text) > width:
        return text[: max(0, width - 1)] + theme.ELLIPSIS
    return text.ljust(width)


class GridPanel:
    """Owns the cursor and horizontal scroll of a picker over one session.

    Filtering and selection live in the session; this panel only maps keys and
    clicks to session calls and renders what the bridge reports. It does not own
    an Application; callers wire keybindings and invalidation.
    """

    def __init__(
        self,
        session: PickerSession,
        *,
        search_prompt: str = "Search: ",
        search_style: str = "class:search",
        config: GridPanelConfig | None = None,
    ) -> None:
        self._config = config or GridPanelConfig()
        self._session = session
        self._bridge = session.bridge
        self._console = Console(force_terminal=True)

        self.search = TextArea(
            height=1,
            prompt=search_prompt,
            style=search_style,
            multiline=False,
        )
        self.search.text = session.query

        self._cursor = 0
        self._column_offset = 0
        self._viewport = (80, 20)
        self.notice = ""
        self._desired_widths = measure_columns(
            self._bridge,
            sample_rows=self._config.sample_rows,
            max_width=self._config.max_column_width,
        )

        self.grid_control = VirtualGridControl(self)
        self.header_control = FormattedTextControl(self._render_header)
        self.preview_control = FormattedTextControl(self._render_preview)
        self.status_control = FormattedTextControl(self._render_status)

    # -- state -------------------------------------------------------------

    @property
    def session(self) -> PickerSession:
        return self._session

    @property
    def row_count(self) -> int:
        return self._bridge.row_count()

    @property
    def cursor(self) -> int:
        return self._clamp(self._cursor)

    @cursor.setter
    def cursor(self, value: int) -> None:
        self._cursor = self._clamp(value)

    @property
    def column_offset(self) -> int:
        last = max(0, len(self._bridge.visible_positions) - 1)
        return min(self._column_offset, last)

    @property
    def current_row(self) -> Row | None:
        if self.row_count == 0:
            return None
        return self._bridge.row_at(self.cursor)

    def set_viewport(self, width: int, height: int) -> None:
        self._viewport = (width, height)

    def _clamp(self, value: int) -> int:
        count = self.row_count
        if count == 0:
            return 0
        return max(0, min(value, count - 1))

    # -- actions -----------------------------------------------------------

    def apply_filter(self) -> None:
        """Push the search box text into the session and reset the cursor."""
        self._session.set_query(self.search.text)
        self._cursor = 0
        self.notice = ""

    def reset_filter(self) -> None:
        self.search.text = ""
        self.apply_filter()

    def move(self, delta: int) -> None:
        count = self.row_count
        if count == 0:
            return
        if self._config.wrap_navigation:
            self._cursor = (self.cursor + delta) % count
            return
        self._cursor = self._clamp(self.cursor + delta)

    def page(self, direction: int) -> None:
        height = max(1, self._viewport[1] - 1)
        self.move(direction * height)

    def jump(self, to_end: bool) -> None:
        self._cursor = self._clamp(self.row_count - 1 if to_end else 0)

    def toggle_current(self, advance: int = 0) -> None:
        if self.row_count == 0:
            return
        self._session.toggle(self.cursor)
        self.notice = ""
        if advance:
            self.move(advance)

    def click(self, row: int) -> None:
        if not 0 <= row < self.row_count:
            return
        self._cursor = row
        self._session.toggle(row)
        self.notice = ""

    def scroll_columns(self, delta: int) -> None:
        last = max(0, len(self._bridge.visible_positions) - 1)
        self._column_offset = max(0, min(self.column_offset + delta, last))

    def export(self, output_path: str) -> bool:
        """Write the rows and columns on screen to ``output_path`` as CSV."""
        try:
            count = self._session.export_csv(output_path)
        except OSError as exc:
            logger.warning("export failed", path=output_path, error=str(exc))
            self.notice = f"Export failed: {exc.strerror or exc}"
            return False
        self.notice = f"Exported {count} rows to {output_path}"
        return True

    def confirm(self) -> bool:
        """Confirm the session, picking the highlighted row when nothing is selected.

        The highlighted row is only taken when the options forbid an empty
        result; with an empty selection allowed, Enter confirms zero rows. In
        single-select mode Enter always picks the highlighted row.
        """
        session = self._session
        if self.row_count > 0:
            if not session.options.multi_select:
                if not self._bridge.is_selected(self.cursor):
                    session.toggle(self.cursor)
            elif (
                session.selection.count == 0
                and not session.options.allow_empty_selection
            ):
                session.toggle(self.cursor)
        if session.confirm():
            return True
        self.notice = "Select at least one row (Tab or click to toggle)"
        return False

    # -- rendering ---------------------------------------------------------

    def _visible_columns(self, width: int) -> list[tuple[str, int]]:
        available = max(MIN_COLUMN_WIDTH, width - ROW_PREFIX_WIDTH)
        positions = self._bridge.visible_positions[self.column_offset :]
        declared = self._bridge.declared_columns
        widths = fit_column_widths(
            [self._desired_widths[pos] for pos in positions],
            available,
            min_width=MIN_COLUMN_WIDTH,
            separator=len(COLUMN_GAP),
        )
        return list(zip((declared[pos] for pos in positions), widths))

    def row_fragments(self, row: int, width: int) -> list[Fragment]:
        is_cursor = row == self.cursor
        checked = self._bridge.is_selected(row)
        marker = theme.CURSOR_MARK if is_cursor else " "
        check = theme.CHECKED_MARK if checked else theme.UNCHECKED_MARK
        cells = COLUMN_GAP.join(
            _fit(self._bridge.cell_text(row, col), col_width)
            for col, col_width in self._visible_columns(width)
        )
        style = ""
        if is_cursor:
            style = "class:selected"
        elif checked:
            style = "class:checked"
        return [(style, f"{marker} {check} {cells}"[:width])]

    def _render_header(self) -> list[Fragment]:
        width = self._viewport[0]
        names = COLUMN_GAP.join(
            _fit(col, col_width)
            for col, col_width in self._visible_columns(width)
        )
        prefix = " " * ROW_PREFIX_WIDTH
        if self.column_offset:
            prefix = f"{theme.ELLIPSIS}".ljust(ROW_PREFIX_WIDTH)
        return [("class:header", f"{prefix}{names}"[:width])]

    def _render_preview(self) -> ANSI:
        row = self.current_row
        if row is None:
            return ANSI("")
        table = Table(show_header=False, box=None, pad_edge=False)
        table.add_column(style=theme.RICH_ACCENT_BOLD, no_wrap=True)
        table.add_column()
        for column in row:
            table.add_row(Text(str(column)), Text(stringify(row.get(column))))
        with self._console.capture() as cap:
            self._console.print(table)
        return ANSI(cap.get())

    def _render_status(self) -> list[Fragment]:
        session = self._session
        summary = (
            f" {self.row_count}/{len(session.store)} rows"
            f" | {session.selection.count} selected"
            " | Tab toggle  Ctrl+A all  Ctrl+D none  Ctrl+E export  Enter confirm  Esc cancel"
        )
        fragments: list[Fragment] = [("class:status", summary)]
        if self.notice:
            fragments.append(("class:status.warning", f"  {self.notice}"))
        return fragments
