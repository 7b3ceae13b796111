"""Tests for the shared structlog configuration."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
import structlog

from gp_common.logging import configure_logging, resolve_level


pytestmark = pytest.mark.unit_common


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def test_configure_logging_writes_json_file(
    restore_root_logger: logging.Logger, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("GP_LOG_LEVEL", raising=False)
    log_file = tmp_path / "picker.log"
    configure_logging(level="INFO", json=True, log_file=str(log_file), force=True)

    structlog.get_logger("gp.test").info("picker loaded", rows=3)
    for handler in restore_root_logger.handlers:
        handler.flush()

    lines = [line for line in log_file.read_text().splitlines() if line.strip()]
    payload = json.loads(lines[-1])
    assert payload["event"] == "picker loaded"
    assert payload["rows"] == 3
    assert payload["level"] == "info"


def test_configure_logging_reads_level_from_env(
    restore_root_logger: logging.Logger, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("GP_LOG_LEVEL", "warning")
    configure_logging(force=True)
    assert restore_root_logger.level == logging.WARNING


def test_debug_flag_wins_over_level(restore_root_logger: logging.Logger) -> None:
    configure_logging(level="ERROR", debug=True, force=True)
    assert restore_root_logger.level == logging.DEBUG


def test_existing_handlers_are_kept_without_force(
    restore_root_logger: logging.Logger,
) -> None:
    sentinel = logging.NullHandler()
    restore_root_logger.addHandler(sentinel)
    configure_logging(level="DEBUG")
    assert sentinel in restore_root_logger.handlers


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("warning", logging.WARNING),
        (" Error ", logging.ERROR),
        ("15", 15),
        (logging.DEBUG, logging.DEBUG),
        ("loud", logging.INFO),
        (None, logging.INFO),
    ],
)
def test_resolve_level(value, expected) -> None:
    assert resolve_level(value) == expected
