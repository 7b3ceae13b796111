from __future__ import annotations

import sys
from typing import Any

import structlog
from prompt_toolkit.application import Application
from prompt_toolkit.input import Input
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import HSplit, Layout, VSplit, Window
from prompt_toolkit.layout.dimension import Dimension
from prompt_toolkit.output import Output
from prompt_toolkit.styles import Style
from prompt_toolkit.widgets import Frame

from gp_grid.models import PickerState
from gp_grid.session import PickerSession
from gp_ui.tui.core import theme
from gp_ui.tui.system.components.grid_panel import GridPanel, GridPanelConfig
from gp_ui.tui.system.protocols import GridPicker

logger = structlog.get_logger(__name__)


class _GridPickerApp:
    """Full-screen prompt_toolkit picker bound to one loaded session."""

    def __init__(
        self,
        session: PickerSession,
        *,
        input: Input | None = None,
        output: Output | None = None,
        config: GridPanelConfig | None = None,
    ) -> None:
        self.session = session
        self._panel = GridPanel(
            session,
            config=config
            or GridPanelConfig(sample_rows=session.settings.measure_sample_rows),
        )
        self.search = self._panel.search

        inner_layout = HSplit(
            [
                self.search,
                Window(height=1, char="-", style="class:separator"),
                Window(self._panel.header_control, height=1),
                VSplit(
                    [
                        Window(
                            self._panel.grid_control,
                            width=Dimension(weight=3),
                            always_hide_cursor=True,
                            wrap_lines=False,
                        ),
                        Window(width=1, char="|", style="class:separator"),
                        Window(self._panel.preview_control, width=Dimension(weight=1)),
                    ],
                    padding=1,
                ),
                Window(self._panel.status_control, height=1),
            ]
        )

        self.frame = Frame(inner_layout, title=lambda: self.session.title)
        self.app: Application = Application(
            layout=Layout(self.frame, focused_element=self.search),
            key_bindings=self._keybindings(),
            style=Style.from_dict(dict(theme.prompt_toolkit_picker_style())),
            full_screen=True,
            mouse_support=True,
            input=input,
            output=output,
        )

        self.search.buffer.on_text_changed += lambda _: self._apply_filter()
        session.bridge.subscribe(lambda _reason: self.app.invalidate())
        session.on_state_change(self._on_state_change)

    @property
    def panel(self) -> GridPanel:
        return self._panel

    def _apply_filter(self) -> None:
        self._panel.apply_filter()
        self.app.invalidate()

    def _on_state_change(self, _old: PickerState, new: PickerState) -> None:
        if new.terminal:
            self._exit()

    def _exit(self) -> None:
        """Leave the event loop once; later terminal transitions are no-ops."""
        if self.app.is_running and not self.app.is_done:
            self.app.exit()

    def _keybindings(self) -> KeyBindings:
        kb = KeyBindings()
        panel = self._panel

        @kb.add("down")
        def _(e: Any) -> None:
            panel.move(1)

        @kb.add("up")
        def _(e: Any) -> None:
            panel.move(-1)

        @kb.add("pagedown")
        def _(e: Any) -> None:
            panel.page(1)

        @kb.add("pageup")
        def _(e: Any) -> None:
            panel.page(-1)

        @kb.add("c-home")
        def _(e: Any) -> None:
            panel.jump(to_end=False)

        @kb.add("c-end")
        def _(e: Any) -> None:
            panel.jump(to_end=True)

        @kb.add("right")
        def _(e: Any) -> None:
            panel.scroll_columns(1)

        @kb.add("left")
        def _(e: Any) -> None:
            panel.scroll_columns(-1)

        @kb.add("s-right")
        def _(e: Any) -> None:
            panel.scroll_columns(len(self.session.store.columns))

        @kb.add("s-left")
        def _(e: Any) -> None:
            panel.scroll_columns(-len(self.session.store.columns))

        @kb.add("tab")
        def _(e: Any) -> None:
            panel.toggle_current(advance=1)

        @kb.add("s-tab")
        def _(e: Any) -> None:
            panel.toggle_current(advance=-1)

        @kb.add("c-space")
        def _(e: Any) -> None:
            panel.toggle_current()

        @kb.add("c-a")
        def _(e: Any) -> None:
            self.session.select_visible()

        @kb.add("c-d")
        def _(e: Any) -> None:
            self.session.clear_selection()

        @kb.add("c-r")
        def _(e: Any) -> None:
            panel.reset_filter()

        @kb.add("c-e")
        def _(e: Any) -> None:
            panel.export(self.session.settings.export_path)

        @kb.add("enter")
        def _(e: Any) -> None:
            panel.confirm()

        @kb.add("escape")
        @kb.add("c-c")
        def _(e: Any) -> None:
            self.session.cancel()

        return kb

    def run(self) -> None:
        self.app.run()


class TerminalGridPicker(GridPicker):
    """Modal full-screen picker for terminals."""

    def __init__(
        self,
        *,
        input: Input | None = None,
        output: Output | None = None,
        config: GridPanelConfig | None = None,
    ) -> None:
        self._input = input
        self._output = output
        self._config = config

    def _interactive(self) -> bool:
        if self._input is not None or self._output is not None:
            return True
        return sys.stdin.isatty() and sys.stdout.isatty()

    def run(self, session: PickerSession) -> None:
        if not self._interactive():
            logger.warning("terminal picker needs a tty, cancelling")
            session.cancel()
            return
        app = _GridPickerApp(
            session,
            input=self._input,
            output=self._output,
            config=self._config,
        )
        with session.guard():
            app.run()
        if not session.state.terminal:
            session.cancel()
