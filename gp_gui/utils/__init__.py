"""Qt utilities and helpers."""

from gp_gui.utils.qt import rect_from_qt, screens_from_qt, set_widget_role

__all__ = [
    "rect_from_qt",
    "screens_from_qt",
    "set_widget_role",
]
