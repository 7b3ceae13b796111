"""Qt item models over picker sessions."""

from gp_gui.models.grid_table_model import CHECK_COLUMN, GridTableModel

__all__ = ["CHECK_COLUMN", "GridTableModel"]
