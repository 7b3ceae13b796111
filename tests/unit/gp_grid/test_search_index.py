import pytest

from gp_grid.models import Row
from gp_grid.row_store import RowStore
from gp_grid.search_index import ENTRY_SEPARATOR, build_index, index_entry, stringify

pytestmark = pytest.mark.unit_grid


def test_index_has_one_entry_per_row() -> None:
    store = RowStore.load([{"A": "x"}, {"A": "y"}, {"A": "z"}], ["A"])
    index = build_index(store)
    assert len(index) == len(store)
    assert list(index) == ["x", "y", "z"]


def test_entry_is_lowercase_and_joins_declared_columns_only() -> None:
    row = Row({"Number": "A-101", "Name": "Level 1 PLAN", "Hidden": "secret"}, payload="handle")
    entry = index_entry(row, ["Number", "Name"])
    assert entry == f"a-101{ENTRY_SEPARATOR}level 1 plan"
    assert "secret" not in entry
    assert "handle" not in entry


def test_missing_and_none_values_index_as_empty() -> None:
    row = Row({"Number": None})
    assert index_entry(row, ["Number", "Name"]) == ENTRY_SEPARATOR


def test_stringify() -> None:
    assert stringify(None) == ""
    assert stringify(12) == "12"
    assert stringify("Plan") == "Plan"


def test_cells_are_kept_per_column() -> None:
    store = RowStore.load([{"Number": "A-101", "Name": "Level 1 PLAN"}], ["Number", "Name"])
    index = build_index(store)
    assert index.columns == ("Number", "Name")
    assert index.cells(0) == ("a-101", "level 1 plan")
    assert index[0] == ENTRY_SEPARATOR.join(index.cells(0))
