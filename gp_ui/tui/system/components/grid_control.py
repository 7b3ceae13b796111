"""prompt_toolkit control that paints grid rows on demand."""

from __future__ import annotations

from typing import TYPE_CHECKING

from prompt_toolkit.data_structures import Point
from prompt_toolkit.layout.controls import UIContent, UIControl
from prompt_toolkit.mouse_events import MouseEvent, MouseEventType

if TYPE_CHECKING:
    from gp_ui.tui.system.components.grid_panel import GridPanel

EMPTY_MESSAGE = "  No matching rows"


class VirtualGridControl(UIControl):
    """Hands the window a lazy ``get_line`` over the filtered view.

    The window only asks for the lines it scrolls into view, so the cost of a
    repaint depends on the viewport height, not on the dataset size.
    """

    def __init__(self, panel: "GridPanel") -> None:
        self._panel = panel

    def is_focusable(self) -> bool:
        return False

    def create_content(self, width: int, height: int) -> UIContent:
        self._panel.set_viewport(width, height)
        count = self._panel.row_count
        if count == 0:
            return UIContent(
                get_line=lambda _: [("class:empty", EMPTY_MESSAGE)],
                line_count=1,
                show_cursor=False,
            )
        return UIContent(
            get_line=lambda lineno: self._panel.row_fragments(lineno, width),
            line_count=count,
            cursor_position=Point(x=0, y=self._panel.cursor),
            show_cursor=False,
        )

    def mouse_handler(self, mouse_event: MouseEvent) -> object:
        kind = mouse_event.event_type
        if kind == MouseEventType.MOUSE_UP:
            self._panel.click(mouse_event.position.y)
            return None
        if kind == MouseEventType.SCROLL_DOWN:
            self._panel.move(1)
            return None
        if kind == MouseEventType.SCROLL_UP:
            self._panel.move(-1)
            return None
        return NotImplemented
