"""Front-ends for the selection grid: terminal, headless and the command line."""

from gp_ui.api import open_picker, resolve_picker

__all__ = ["open_picker", "resolve_picker"]
