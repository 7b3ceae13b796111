"""Typed failures raised by the picker core and its front-ends."""

from __future__ import annotations

from pathlib import PurePath
from typing import Any, Mapping

_SCALARS = (str, int, float, bool, type(None))


def _plain(value: Any) -> Any:
    if isinstance(value, _SCALARS):
        return value
    if isinstance(value, Mapping):
        return normalize_context(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_plain(item) for item in value]
    if isinstance(value, PurePath):
        return value.as_posix()
    return str(value)


def normalize_context(context: Mapping[str, Any]) -> dict[str, Any]:
    """Copy ``context`` keeping only JSON-compatible values."""
    return {str(key): _plain(val) for key, val in context.items()}


class GPError(Exception):
    """Base class; ``context`` carries the offending values for logs and the CLI."""

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.context = normalize_context(context or {})
        if cause is not None:
            self.__cause__ = cause

    @property
    def error_type(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.error_type, "message": str(self), "context": self.context}


class ConfigurationError(GPError):
    """Columns, rows, options or backend rejected before the picker is shown."""


class RowFileError(ConfigurationError):
    """A row file is missing, unreadable or not a list of records."""

    def __init__(
        self,
        message: str,
        *,
        path: str | PurePath,
        context: Mapping[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, context={"path": path, **(context or {})}, cause=cause)
        self.path = self.context["path"]


class SessionStateError(GPError):
    """A session operation was called in a state that does not allow it."""


def error_to_payload(error: GPError) -> dict[str, Any]:
    """Flatten ``error`` into the shape printed by ``gridpick --json``."""
    return {
        "error_type": error.error_type,
        "error": str(error),
        "error_context": error.context,
    }
