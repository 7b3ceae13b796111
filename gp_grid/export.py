"""CSV export of what the picker currently shows."""

from __future__ import annotations

import csv
from pathlib import Path

import structlog

from gp_grid.render_bridge import VirtualRenderBridge

logger = structlog.get_logger(__name__)


def write_visible_csv(bridge: VirtualRenderBridge, output_path: Path) -> int:
    """Write the filtered rows and visible columns to CSV; returns the row count."""
    columns = list(bridge.columns)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    count = bridge.row_count()
    with output_path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=columns)
        writer.writeheader()
        for row in range(count):
            writer.writerow({col: bridge.cell_text(row, col) for col in columns})
    logger.info("rows exported", path=str(output_path), rows=count, columns=len(columns))
    return count
