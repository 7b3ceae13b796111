"""Load picker rows from JSON, YAML or CSV files."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Mapping

import yaml

from gp_common.errors import RowFileError

JSON_SUFFIXES = frozenset({".json"})
YAML_SUFFIXES = frozenset({".yaml", ".yml"})
CSV_SUFFIXES = frozenset({".csv", ".tsv"})


def _ensure_records(data: Any, path: Path) -> list[dict[str, Any]]:
    if isinstance(data, Mapping) and isinstance(data.get("rows"), list):
        data = data["rows"]
    if not isinstance(data, list):
        raise RowFileError(
            "Row file must contain a list of records",
            path=path,
            context={"type": type(data).__name__},
        )
    records: list[dict[str, Any]] = []
    for idx, item in enumerate(data):
        if not isinstance(item, Mapping):
            raise RowFileError(
                "Every record in a row file must be a mapping",
                path=path,
                context={"index": idx, "type": type(item).__name__},
            )
        records.append({str(key): value for key, value in item.items()})
    return records


def _load_csv(path: Path) -> list[dict[str, Any]]:
    delimiter = "\t" if path.suffix.lower() == ".tsv" else ","
    with path.open(newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle, delimiter=delimiter)
        return [dict(record) for record in reader]


def load_rows(path: Path) -> list[dict[str, Any]]:
    """Read a list of records from ``path``, picking the format from its suffix.

    JSON and YAML files hold a list of mappings (or a mapping with a ``rows``
    list); CSV/TSV files use their header line as keys. Unknown suffixes are
    parsed as YAML, which also accepts JSON.
    """
    if not path.is_file():
        raise RowFileError("Row file not found", path=path)
    suffix = path.suffix.lower()
    try:
        if suffix in CSV_SUFFIXES:
            return _load_csv(path)
        text = path.read_text(encoding="utf-8")
        if suffix in JSON_SUFFIXES:
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError, csv.Error, UnicodeDecodeError) as exc:
        raise RowFileError(
            f"Could not parse row file: {exc}",
            path=path,
            cause=exc,
        ) from exc
    return _ensure_records(data, path)


def infer_columns(records: list[Mapping[str, Any]]) -> list[str]:
    """Columns default to the keys of the first record, in file order."""
    if not records:
        return []
    return list(records[0].keys())


def demo_rows(count: int) -> list[dict[str, Any]]:
    """Synthetic sheet list used by ``gridpick demo``."""
    disciplines = ("Architectural", "Structural", "Mechanical", "Electrical", "Plumbing")
    statuses = ("Issued", "Draft", "For Review", "Superseded")
    rows: list[dict[str, Any]] = []
    for idx in range(count):
        discipline = disciplines[idx % len(disciplines)]
        rows.append(
            {
                "Sheet Number": f"{discipline[0]}-{100 + idx:04d}",
                "Sheet Name": f"{discipline} Level {idx % 12 + 1} Plan",
                "Discipline": discipline,
                "Revision": idx % 7,
                "Status": statuses[idx % len(statuses)],
            }
        )
    return rows
