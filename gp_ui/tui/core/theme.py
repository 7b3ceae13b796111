from __future__ import annotations

from typing import Mapping

from rich import box
from rich.markup import escape

# Rich side (result tables, preview, messages).
RICH_ACCENT = "cyan"
RICH_ACCENT_BOLD = f"bold {RICH_ACCENT}"
RICH_BORDER_STYLE = "dim cyan"
RICH_BOX = box.SIMPLE_HEAVY

LEVEL_STYLES: dict[str, tuple[str, str]] = {
    "info": ("cyan", "ℹ"),
    "warning": ("yellow", "⚠"),
    "error": ("bold red", "✖"),
    "success": ("green", "✔"),
}

# Grid rows.
CHECKED_MARK = "[x]"
UNCHECKED_MARK = "[ ]"
CURSOR_MARK = "▸"
ELLIPSIS = "…"

# prompt_toolkit side; keys are the class names used by the grid panel.
PICKER_PALETTE: dict[str, str] = {
    "selected": "bg:#005f87 fg:#ffffff bold",
    "checked": "fg:#5fd75f bold",
    "separator": "fg:#005f87",
    "frame.border": "fg:#005f87",
    "frame.label": "fg:#00afd7 bold",
    "search": "bg:#303030 fg:#ffffff",
    "header": "fg:#00afd7 bold underline",
    "status": "fg:#8a8a8a",
    "status.warning": "fg:#d75f5f bold",
    "empty": "fg:#8a8a8a italic",
}


def presenter_message(level: str, message: str) -> str:
    """Rich markup for a CLI message; unknown levels are escaped but unstyled."""
    if level not in LEVEL_STYLES:
        return escape(message)
    style, icon = LEVEL_STYLES[level]
    return f"[{style}]{icon} {escape(message)}[/{style}]"


def prompt_toolkit_picker_style() -> Mapping[str, str]:
    return dict(PICKER_PALETTE)
