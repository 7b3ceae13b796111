"""Stable entry point used by commands: open a picker and get the chosen rows."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

import structlog

from gp_common.errors import ConfigurationError
from gp_grid.models import PickerOptions, Row
from gp_grid.session import PickerSession
from gp_grid.settings import BACKENDS, GridSettings
from gp_ui.tui.system.components.picker import TerminalGridPicker
from gp_ui.tui.system.headless import HeadlessGridPicker, HeadlessUI
from gp_ui.tui.system.protocols import GridPicker

logger = structlog.get_logger(__name__)


def resolve_picker(
    backend: str | None = None,
    *,
    settings: GridSettings | None = None,
) -> GridPicker:
    """Return the front-end for ``backend`` (falls back to the configured default)."""
    name = (backend or (settings or GridSettings.from_env()).backend).lower()
    if name not in BACKENDS:
        raise ConfigurationError(
            f"Unknown picker backend: {name}",
            context={"backend": name, "choices": sorted(BACKENDS)},
        )
    if name == "headless":
        return HeadlessGridPicker([("confirm",)])
    if name == "qt":
        try:
            from gp_gui.picker import QtGridPicker
        except ImportError as exc:
            raise ConfigurationError(
                "The qt backend requires PySide6 (install gridpick[gui])",
                context={"backend": name},
                cause=exc,
            ) from exc
        return QtGridPicker()
    return TerminalGridPicker()


def open_picker(
    rows: Sequence[Row | Mapping[str, Any]] | None,
    columns: Sequence[str] | None,
    options: PickerOptions | Mapping[str, Any] | None = None,
    *,
    picker: GridPicker | None = None,
    settings: GridSettings | None = None,
) -> list[Row] | None:
    """Show a modal picker and block until the user confirms or cancels.

    Returns the selected rows in dataset order on confirmation (an empty list is
    possible when ``allow_empty_selection`` is set) and ``None`` on cancel.
    Invalid rows, columns or options raise ``ConfigurationError`` before any UI
    is shown.
    """
    resolved_settings = settings or GridSettings.from_env()
    session = PickerSession(resolved_settings).load(rows, columns, options)
    front_end = picker or resolve_picker(settings=resolved_settings)
    logger.debug("opening picker", picker=type(front_end).__name__, title=session.title)

    with session.guard():
        front_end.run(session)
    if not session.state.terminal:
        session.cancel()

    result = session.result
    if result is None or result.cancelled:
        return None
    return list(result.rows)


__all__ = [
    "HeadlessGridPicker",
    "HeadlessUI",
    "TerminalGridPicker",
    "open_picker",
    "resolve_picker",
]
