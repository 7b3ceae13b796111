"""structlog setup shared by the picker core, the front-ends and the CLI."""

from __future__ import annotations

import logging
import os
import sys

import structlog

from gp_common.config.env import parse_bool_env

SHARED_PROCESSORS: tuple[structlog.types.Processor, ...] = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
)


def resolve_level(value: str | int | None, *, debug: bool = False) -> int:
    """Map a level name or number to a stdlib level; unknown names mean INFO."""
    if debug:
        return logging.DEBUG
    if isinstance(value, int):
        return value
    if not value:
        return logging.INFO
    text = value.strip()
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text.upper())
    return level if isinstance(level, int) else logging.INFO


def _handlers(formatter: logging.Formatter, log_file: str | None) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure_logging(
    *,
    level: str | int | None = None,
    debug: bool = False,
    log_file: str | None = None,
    json: bool | None = None,
    force: bool = False,
) -> None:
    """Route structlog through stdlib logging with one formatter.

    Unset arguments fall back to ``GP_LOG_LEVEL``, ``GP_LOG_JSON`` and
    ``GP_LOG_FILE``. Handlers already on the root logger (pytest, a host
    application) are left alone unless ``force`` is set.
    """
    structlog.configure(
        processors=[
            *SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    if root.handlers and not force:
        return

    as_json = parse_bool_env(os.environ.get("GP_LOG_JSON")) if json is None else json
    renderer = (
        structlog.processors.JSONRenderer()
        if as_json
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=list(SHARED_PROCESSORS),
    )

    root.handlers.clear()
    for handler in _handlers(formatter, log_file or os.environ.get("GP_LOG_FILE")):
        root.addHandler(handler)
    root.setLevel(resolve_level(level or os.environ.get("GP_LOG_LEVEL"), debug=debug))
