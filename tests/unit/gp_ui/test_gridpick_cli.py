"""CLI round-trips through the headless backend."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
import structlog
from typer.testing import CliRunner

from gp_ui import cli


pytestmark = pytest.mark.unit_ui

ROWS = [
    {"Number": "A-101", "Name": "Level 1 Plan", "Discipline": "Architectural"},
    {"Number": "A-102", "Name": "Level 2 Plan", "Discipline": "Architectural"},
    {"Number": "S-201", "Name": "Foundation Plan", "Discipline": "Structural"},
]


@pytest.fixture(autouse=True)
def restore_logging(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("GP_PICKER_BACKEND", raising=False)
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def rows_file(tmp_path: Path) -> Path:
    path = tmp_path / "sheets.json"
    path.write_text(json.dumps(ROWS))
    return path


def test_pick_headless_prints_json_selection(rows_file: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        cli.app,
        ["pick", str(rows_file), "--headless", "--select", "2", "--select", "0", "--json"],
    )
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert [row["Number"] for row in payload] == ["A-101", "S-201"]
    assert payload[0]["Discipline"] == "Architectural"


def test_pick_headless_renders_table(rows_file: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        cli.app,
        ["pick", str(rows_file), "--headless", "--select", "1", "-c", "Number", "-c", "Name"],
    )
    assert result.exit_code == 0, result.output
    assert "Selected Rows: 1" in result.stdout
    assert "Level 2 Plan" in result.stdout
    assert "Architectural" not in result.stdout


def test_pick_without_selection_is_cancelled(rows_file: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli.app, ["pick", str(rows_file), "--headless"])
    assert result.exit_code == cli.EXIT_CANCELLED
    assert "cancelled" in result.stdout.lower()


def test_pick_allow_empty_confirms_nothing(rows_file: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        cli.app, ["pick", str(rows_file), "--headless", "--allow-empty", "--json"]
    )
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == []


def test_pick_reads_yaml_and_csv(tmp_path: Path) -> None:
    yaml_file = tmp_path / "rows.yaml"
    yaml_file.write_text("- Number: A-101\n  Name: Plan\n- Number: A-102\n  Name: Section\n")
    csv_file = tmp_path / "rows.csv"
    csv_file.write_text("Number,Name\nA-101,Plan\nA-102,Section\n")

    runner = CliRunner()
    for path in (yaml_file, csv_file):
        result = runner.invoke(
            cli.app, ["pick", str(path), "--headless", "--select", "1", "--json"]
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == [{"Number": "A-102", "Name": "Section"}]


def test_pick_invalid_input_exits_with_code_2(tmp_path: Path, rows_file: Path) -> None:
    runner = CliRunner()
    missing = runner.invoke(cli.app, ["pick", str(tmp_path / "missing.json"), "--headless"])
    assert missing.exit_code == cli.EXIT_INVALID

    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    result = runner.invoke(cli.app, ["pick", str(broken), "--headless"])
    assert result.exit_code == cli.EXIT_INVALID

    duplicate = runner.invoke(
        cli.app, ["pick", str(rows_file), "--headless", "-c", "Name", "-c", "Name"]
    )
    assert duplicate.exit_code == cli.EXIT_INVALID

    backend = runner.invoke(cli.app, ["pick", str(rows_file), "--backend", "gtk"])
    assert backend.exit_code == cli.EXIT_INVALID


def test_demo_headless() -> None:
    runner = CliRunner()
    result = runner.invoke(cli.app, ["demo", "--rows", "25", "--headless"])
    assert result.exit_code == 0, result.output
    assert "no rows selected" in result.stdout.lower()


def test_pick_json_errors_are_machine_readable(tmp_path: Path) -> None:
    runner = CliRunner()
    missing = tmp_path / "missing.json"
    result = runner.invoke(cli.app, ["pick", str(missing), "--headless", "--json"])
    assert result.exit_code == cli.EXIT_INVALID
    payload = json.loads(result.stdout)
    assert payload["error_type"] == "RowFileError"
    assert payload["error_context"]["path"] == missing.as_posix()


def test_pick_empty_file_with_allow_empty_prints_empty_list(tmp_path: Path) -> None:
    empty = tmp_path / "empty.json"
    empty.write_text("[]")
    runner = CliRunner()
    result = runner.invoke(cli.app, ["pick", str(empty), "--allow-empty", "--headless", "--json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == []

    plain = runner.invoke(cli.app, ["pick", str(empty), "--allow-empty", "--headless"])
    assert plain.exit_code == 0, plain.output
    assert "no rows selected" in plain.stdout.lower()


def test_pick_empty_file_without_allow_empty_has_nothing_to_select(tmp_path: Path) -> None:
    empty = tmp_path / "empty.json"
    empty.write_text("[]")
    runner = CliRunner()
    result = runner.invoke(cli.app, ["pick", str(empty), "--headless"])
    assert result.exit_code == cli.EXIT_CANCELLED
    assert "no rows to select" in result.stdout.lower()


def test_pick_renders_markup_characters_literally(tmp_path: Path) -> None:
    path = tmp_path / "markup.json"
    path.write_text(json.dumps([{"Title": "x [/] y"}, {"Title": "[b]x[/b]"}]))
    runner = CliRunner()
    result = runner.invoke(
        cli.app, ["pick", str(path), "--select", "0", "--select", "1", "--headless"]
    )
    assert result.exit_code == 0, result.output
    assert "x [/] y" in result.stdout
    assert "[b]x[/b]" in result.stdout


def test_pick_error_message_keeps_brackets(rows_file: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        cli.app, ["pick", str(rows_file), "--headless", "-c", "[/]", "-c", "[/]"]
    )
    assert result.exit_code == cli.EXIT_INVALID
    assert "Duplicate column name: [/]" in result.stdout
