from collections import Counter

from rich.console import Console
from rich.table import Table

# Markers declared in pyproject.toml
KNOWN_MARKERS = ("unit_common", "unit_grid", "unit_ui", "unit_gui", "slow")
OUTCOMES = ("passed", "failed", "skipped")


def _counted(report) -> bool:
    # Skips raised by fixtures or collection are reported during setup.
    return report.when == "call" or (report.when == "setup" and report.skipped)


def pytest_terminal_summary(terminalreporter, exitstatus, config):
    """Print a per-marker outcome table after the run."""
    _ = (exitstatus, config)
    counts: Counter = Counter()
    durations: Counter = Counter()
    for outcome in OUTCOMES:
        for report in terminalreporter.stats.get(outcome, []):
            if not _counted(report):
                continue
            for marker in KNOWN_MARKERS:
                if marker in report.keywords:
                    counts[marker, outcome] += 1
                    durations[marker] += getattr(report, "duration", 0.0)

    markers = [m for m in KNOWN_MARKERS if any(counts[m, o] for o in OUTCOMES)]
    if not markers:
        return

    table = Table(title="Tests by marker", header_style="bold cyan")
    table.add_column("Marker", style="cyan")
    for outcome, style in zip(OUTCOMES, ("green", "red", "yellow")):
        table.add_column(outcome.capitalize(), justify="right", style=style)
    table.add_column("Time (s)", justify="right")
    for marker in markers:
        table.add_row(
            marker,
            *(str(counts[marker, outcome]) for outcome in OUTCOMES),
            f"{durations[marker]:.2f}",
        )
    Console().print(table)
