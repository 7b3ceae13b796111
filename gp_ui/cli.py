"""
Command-line interface for gridpick.

Loads rows from a JSON, YAML or CSV file, opens a selection grid over them and
prints the rows the user confirmed.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, List, NoReturn, Optional

import typer
from rich.console import Console

from gp_common.errors import ConfigurationError, GPError, error_to_payload
from gp_common.logging import configure_logging
from gp_grid.models import PickerOptions, Row
from gp_grid.settings import GridSettings
from gp_ui.api import open_picker, resolve_picker
from gp_ui.loaders import demo_rows, infer_columns, load_rows
from gp_ui.tui.system.facade import TUI
from gp_ui.tui.system.models import TableModel
from gp_ui.tui.system.protocols import UI

EXIT_CANCELLED = 1
EXIT_INVALID = 2

app = typer.Typer(
    help="Pick rows from a tabular dataset with an interactive filterable grid.",
    no_args_is_help=True,
)


def _create_ui() -> UI:
    return TUI(console=Console())


def _fail(ui: UI, exc: GPError, *, as_json: bool = False) -> NoReturn:
    if as_json:
        typer.echo(json.dumps(error_to_payload(exc), indent=2))
    else:
        ui.present.error(str(exc))
    raise typer.Exit(EXIT_INVALID)


def _emit_result(
    ui: UI,
    rows: Optional[list[Row]],
    columns: list[str],
    *,
    as_json: bool,
) -> None:
    if rows is None:
        ui.present.warning("Selection cancelled.")
        raise typer.Exit(EXIT_CANCELLED)
    if as_json:
        typer.echo(json.dumps([row.to_dict() for row in rows], default=str, indent=2))
        return
    if not rows:
        ui.present.info("Confirmed with no rows selected.")
        return
    ui.tables.show(TableModel.from_rows(f"Selected Rows: {len(rows)}", columns, rows))


def _run_picker(
    ui: UI,
    records: list[dict[str, Any]],
    columns: list[str],
    options: PickerOptions,
    *,
    backend: Optional[str],
    headless: bool,
    as_json: bool = False,
) -> Optional[list[Row]]:
    settings = GridSettings.from_env()
    try:
        picker = resolve_picker("headless" if headless else backend, settings=settings)
        return open_picker(records, columns, options, picker=picker, settings=settings)
    except ConfigurationError as exc:
        _fail(ui, exc, as_json=as_json)


@app.callback()
def entry(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
) -> None:
    """Global entry point configuring logging."""
    configure_logging(
        level=os.environ.get("GP_LOG_LEVEL", "WARNING"), debug=debug, force=True
    )


@app.command("pick")
def pick(
    file: Path = typer.Argument(..., help="JSON, YAML or CSV file holding the rows."),
    column: Optional[List[str]] = typer.Option(
        None,
        "--column",
        "-c",
        help="Column to display (repeatable). Defaults to every key of the first row.",
    ),
    select: Optional[List[int]] = typer.Option(
        None, "--select", help="Row position to pre-select (repeatable)."
    ),
    allow_empty: bool = typer.Option(
        False, "--allow-empty", help="Accept confirmation with nothing selected."
    ),
    single: bool = typer.Option(False, "--single", help="Allow only one selected row."),
    span_all_screens: bool = typer.Option(
        False, "--span-all-screens", help="Spread the window across every monitor (qt)."
    ),
    title: Optional[str] = typer.Option(None, "--title", help="Window title."),
    query: str = typer.Option("", "--query", "-q", help="Initial filter query."),
    backend: Optional[str] = typer.Option(
        None, "--backend", help="Picker backend: tui, qt or headless."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the selection as JSON."),
    headless: bool = typer.Option(
        False,
        "--headless",
        help="Confirm the pre-selected rows without showing a UI (useful in CI).",
    ),
) -> None:
    """Open a picker over the rows of FILE and print the confirmed selection."""
    ui = _create_ui()
    try:
        records = load_rows(file)
        options = PickerOptions(
            span_all_screens=span_all_screens,
            initial_selection=list(select or []),
            allow_empty_selection=allow_empty,
            title=title,
            query=query,
            multi_select=not single,
        )
    except GPError as exc:
        _fail(ui, exc, as_json=as_json)
    if not records and not column:
        if not allow_empty:
            ui.present.warning("No rows to select.")
            raise typer.Exit(EXIT_CANCELLED)
        _emit_result(ui, [], [], as_json=as_json)
        return
    columns = list(column) if column else infer_columns(records)

    chosen = _run_picker(
        ui, records, columns, options, backend=backend, headless=headless, as_json=as_json
    )
    _emit_result(ui, chosen, columns, as_json=as_json)


@app.command("demo")
def demo(
    rows: int = typer.Option(5000, "--rows", "-n", min=1, help="Number of synthetic rows."),
    backend: Optional[str] = typer.Option(
        None, "--backend", help="Picker backend: tui, qt or headless."
    ),
    headless: bool = typer.Option(False, "--headless", help="Skip the interactive UI."),
) -> None:
    """Open a picker over a synthetic sheet list."""
    ui = _create_ui()
    records = demo_rows(rows)
    columns = infer_columns(records)
    options = PickerOptions(allow_empty_selection=headless)
    chosen = _run_picker(ui, records, columns, options, backend=backend, headless=headless)
    _emit_result(ui, chosen, columns, as_json=False)


def main() -> None:
    """Console script entrypoint (Typer app)."""
    app()


if __name__ == "__main__":
    main()
