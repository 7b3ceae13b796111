"""Parsers for ``GP_*`` environment variables.

Every parser maps ``None`` (variable unset) and unusable text to ``None`` so the
caller keeps its default.
"""

from __future__ import annotations

from typing import Callable, TypeVar

N = TypeVar("N", int, float)

TRUTHY = frozenset({"1", "true", "yes", "on"})


def parse_bool_env(value: str | None) -> bool | None:
    """True for 1/true/yes/on (any case), False for any other text."""
    if value is None:
        return None
    return value.strip().lower() in TRUTHY


def _parse_number(value: str | None, kind: Callable[[str], N], minimum: N | None) -> N | None:
    if value is None:
        return None
    try:
        number = kind(value.strip())
    except ValueError:
        return None
    if minimum is not None and not number >= minimum:
        return None
    return number


def parse_int_env(value: str | None, *, minimum: int | None = None) -> int | None:
    return _parse_number(value, int, minimum)


def parse_float_env(value: str | None, *, minimum: float | None = None) -> float | None:
    return _parse_number(value, float, minimum)


def parse_choice_env(value: str | None, choices: set[str] | frozenset[str]) -> str | None:
    """Lowercased ``value`` when it names one of ``choices``."""
    if value is None:
        return None
    normalized = value.strip().lower()
    return normalized if normalized in choices else None
