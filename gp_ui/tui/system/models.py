from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from gp_grid.models import Row


@dataclass
class TableModel:
    title: str
    columns: list[str]
    rows: list[list[str]]

    @classmethod
    def from_rows(cls, title: str, columns: Sequence[str], rows: Sequence[Row]) -> "TableModel":
        """Tabulate picked rows as display strings; missing cells become blank."""
        return cls(
            title=title,
            columns=list(columns),
            rows=[
                ["" if row.get(col) is None else str(row.get(col)) for col in columns]
                for row in rows
            ],
        )
