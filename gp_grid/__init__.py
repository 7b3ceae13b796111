"""Selection grid core: row store, search, filtering, selection and session state."""

from gp_grid.models import PickerOptions, PickResult, Row
from gp_grid.session import PickerSession

__all__ = ["PickerOptions", "PickerSession", "PickResult", "Row"]
