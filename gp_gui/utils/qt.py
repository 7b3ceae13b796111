"""Qt helper utilities."""

from __future__ import annotations

from PySide6.QtCore import QRect
from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QWidget

from gp_grid.layout import Rect, Screen


def rect_from_qt(rect: QRect) -> Rect:
    return Rect(rect.x(), rect.y(), rect.width(), rect.height())


def screens_from_qt() -> list[Screen]:
    """Describe every connected monitor in toolkit-free terms."""
    primary = QGuiApplication.primaryScreen()
    primary_name = primary.name() if primary is not None else None
    return [
        Screen(
            bounds=rect_from_qt(screen.geometry()),
            work_area=rect_from_qt(screen.availableGeometry()),
            primary=screen.name() == primary_name,
        )
        for screen in QGuiApplication.screens()
    ]


def set_widget_role(widget: QWidget, role: str | None) -> None:
    """Set a role dynamic property and refresh style."""
    widget.setProperty("role", role)
    widget.style().unpolish(widget)
    widget.style().polish(widget)
