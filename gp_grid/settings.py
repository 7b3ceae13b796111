"""Process-level tuning knobs for the picker, overridable from the environment."""

from __future__ import annotations

import os
from typing import Literal, Mapping

from pydantic import BaseModel, Field

from gp_common.config import (
    parse_bool_env,
    parse_choice_env,
    parse_float_env,
    parse_int_env,
)

Backend = Literal["tui", "qt", "headless"]
BACKENDS: frozenset[str] = frozenset({"tui", "qt", "headless"})


class GridSettings(BaseModel):
    """Tuning shared by every session created in this process."""

    incremental_filter: bool = Field(
        default=True,
        description="Re-filter the previous view when the new query only narrows it",
    )
    filter_budget_ms: float = Field(
        default=50.0,
        gt=0,
        description="Filter passes slower than this are logged as warnings",
    )
    measure_sample_rows: int = Field(
        default=200,
        ge=1,
        description="Rows sampled when sizing columns",
    )
    layout_padding: int = Field(
        default=20,
        ge=0,
        description="Margin kept between the picker window and the screen edge",
    )
    backend: Backend = Field(default="tui", description="Default front-end")
    export_path: str = Field(
        default="gridpick-export.csv",
        min_length=1,
        description="Where the terminal picker writes Ctrl+E exports",
    )

    model_config = {"extra": "ignore"}

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "GridSettings":
        """Build settings from ``GP_*`` variables; unparsable values keep defaults."""
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}

        incremental = parse_bool_env(env.get("GP_FILTER_INCREMENTAL"))
        if incremental is not None:
            values["incremental_filter"] = incremental
        budget = parse_float_env(env.get("GP_FILTER_BUDGET_MS"), minimum=0.001)
        if budget is not None:
            values["filter_budget_ms"] = budget
        sample = parse_int_env(env.get("GP_MEASURE_SAMPLE_ROWS"), minimum=1)
        if sample is not None:
            values["measure_sample_rows"] = sample
        padding = parse_int_env(env.get("GP_LAYOUT_PADDING"), minimum=0)
        if padding is not None:
            values["layout_padding"] = padding
        backend = parse_choice_env(env.get("GP_PICKER_BACKEND"), BACKENDS)
        if backend is not None:
            values["backend"] = backend
        export_path = (env.get("GP_EXPORT_PATH") or "").strip()
        if export_path:
            values["export_path"] = export_path
        return cls(**values)
