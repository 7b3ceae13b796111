"""Public API surface for gp_common."""

from gp_common.errors import (
    ConfigurationError,
    GPError,
    RowFileError,
    SessionStateError,
    error_to_payload,
)
from gp_common.logging import configure_logging

__all__ = [
    "configure_logging",
    "ConfigurationError",
    "GPError",
    "RowFileError",
    "SessionStateError",
    "error_to_payload",
]
