"""Data model shared by every picker component."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Iterator, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


@dataclass(frozen=True, eq=False)
class Row:
    """One selectable record: column values plus an opaque payload.

    Rows compare by identity. Two rows holding equal values are still two
    distinct rows for selection purposes.
    """

    values: Mapping[str, Any]
    payload: Any = None

    def get(self, column: str, default: Any = None) -> Any:
        return self.values.get(column, default)

    def __getitem__(self, column: str) -> Any:
        return self.values[column]

    def __contains__(self, column: object) -> bool:
        return column in self.values

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def to_dict(self) -> dict[str, Any]:
        """Return a plain copy of the column values (payload excluded)."""
        return dict(self.values)


class PickerState(str, Enum):
    IDLE = "idle"
    LOADED = "loaded"
    FILTERING = "filtering"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"

    @property
    def terminal(self) -> bool:
        return self in (PickerState.CONFIRMED, PickerState.CANCELLED)


class PickStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class PickResult:
    status: PickStatus
    rows: tuple[Row, ...] = field(default_factory=tuple)

    @property
    def cancelled(self) -> bool:
        return self.status is PickStatus.CANCELLED

    @property
    def confirmed(self) -> bool:
        return self.status is PickStatus.CONFIRMED


class PickerOptions(BaseModel):
    """Per-session picker options supplied by the caller."""

    span_all_screens: bool = Field(
        default=False,
        description="Lay the window across every monitor instead of the primary one",
    )
    initial_selection: list[int] = Field(
        default_factory=list,
        description="Pre-checked positions in the initially unfiltered view",
    )
    allow_empty_selection: bool = Field(
        default=False,
        description="Accept confirmation with zero selected rows",
    )
    title: str | None = Field(default=None, description="Window title")
    query: str = Field(default="", description="Query pre-filled when the picker opens")
    multi_select: bool = Field(default=True, description="Allow more than one row")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("initial_selection", mode="before")
    @classmethod
    def _drop_malformed_positions(cls, value: Any) -> list[int]:
        if value is None:
            return []
        if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
            value = [value]
        positions: list[int] = []
        for item in value:
            if isinstance(item, bool):
                continue
            try:
                positions.append(int(item))
            except (TypeError, ValueError):
                continue
        return positions

    @classmethod
    def coerce(cls, value: "PickerOptions | Mapping[str, Any] | None") -> "PickerOptions":
        """Accept an options instance, a plain mapping or None."""
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        return cls.model_validate(dict(value))

    def resolved_title(self, row_count: int, visible: int | None = None) -> str:
        """Window title; ``visible`` is the filtered count while a filter is active."""
        counts = str(row_count) if visible is None else f"{visible} / {row_count}"
        if self.title:
            return self.title if visible is None else f"{self.title} ({counts})"
        return f"Total Entries: {counts}"
