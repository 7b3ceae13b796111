"""
UI adapter package providing prompt_toolkit/Rich-based and headless renderers.
"""

from gp_ui.tui.system.facade import TUI
from gp_ui.tui.system.headless import HeadlessGridPicker, HeadlessUI
from gp_ui.tui.system.components.picker import TerminalGridPicker
from gp_ui.tui.system.protocols import UI, GridPicker, Presenter, TablePresenter

__all__ = [
    "UI",
    "TUI",
    "HeadlessUI",
    "HeadlessGridPicker",
    "GridPicker",
    "TerminalGridPicker",
    "TablePresenter",
    "Presenter",
]
