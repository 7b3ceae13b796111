"""Stable API surface of the selection grid core."""

from __future__ import annotations

from gp_grid.export import write_visible_csv
from gp_grid.filter_engine import FilterEngine, filter_rows
from gp_grid.layout import Rect, Screen, fit_column_widths, measure_columns, target_rect
from gp_grid.models import PickerOptions, PickerState, PickResult, PickStatus, Row
from gp_grid.query import ComparisonTerm, Query, QueryGroup, QueryTerm, parse_query
from gp_grid.render_bridge import RESET, SELECTION, VirtualRenderBridge
from gp_grid.row_store import RowStore
from gp_grid.search_index import SearchIndex, build_index
from gp_grid.selection import SelectionTracker
from gp_grid.session import PickerSession
from gp_grid.settings import GridSettings

__all__ = [
    "ComparisonTerm",
    "FilterEngine",
    "GridSettings",
    "PickerOptions",
    "PickerSession",
    "PickerState",
    "PickResult",
    "PickStatus",
    "Query",
    "QueryGroup",
    "QueryTerm",
    "RESET",
    "Rect",
    "Row",
    "RowStore",
    "SELECTION",
    "Screen",
    "SearchIndex",
    "SelectionTracker",
    "VirtualRenderBridge",
    "build_index",
    "filter_rows",
    "fit_column_widths",
    "measure_columns",
    "parse_query",
    "target_rect",
    "write_visible_csv",
]
