"""Window placement and column sizing, free of any UI toolkit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from gp_grid.render_bridge import VirtualRenderBridge

DEFAULT_SIZE = (800, 600)


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height


@dataclass(frozen=True)
class Screen:
    bounds: Rect
    work_area: Rect
    primary: bool = False


def _primary(screens: Sequence[Screen]) -> Screen:
    for screen in screens:
        if screen.primary:
            return screen
    return screens[0]


def bounding_rect(rects: Sequence[Rect]) -> Rect:
    left = min(r.x for r in rects)
    top = min(r.y for r in rects)
    right = max(r.right for r in rects)
    bottom = max(r.bottom for r in rects)
    return Rect(left, top, right - left, bottom - top)


def target_rect(
    screens: Sequence[Screen],
    *,
    span_all_screens: bool,
    required: tuple[int, int] | None = None,
    padding: int = 20,
) -> Rect:
    """Pick the picker window rectangle.

    ``required`` is the (width, height) the content would like; ``None`` asks
    for as much room as allowed. Spanning covers the bounding rectangle of every
    work area horizontally and stays vertically centred on the primary screen.
    """
    if not screens:
        width, height = required or DEFAULT_SIZE
        return Rect(0, 0, max(1, width), max(1, height))

    work = _primary(screens).work_area
    max_height = max(1, work.height - 2 * padding)
    height = max_height if required is None else max(1, min(required[1], max_height))
    y = work.y + (work.height - height) // 2

    if span_all_screens:
        span = bounding_rect([screen.work_area for screen in screens])
        return Rect(span.x, y, span.width, height)

    max_width = max(1, work.width - 2 * padding)
    width = max_width if required is None else max(1, min(required[0], max_width))
    x = work.x + (work.width - width) // 2
    return Rect(x, y, width, height)


def fit_column_widths(
    desired: Sequence[int],
    max_total: int,
    *,
    min_width: int = 4,
    separator: int = 1,
) -> list[int]:
    """Shrink the widest columns until the row fits in ``max_total`` cells."""
    widths = [max(min_width, w) for w in desired]
    if not widths:
        return widths
    overhead = separator * (len(widths) - 1)
    while sum(widths) + overhead > max_total:
        widest = max(range(len(widths)), key=lambda i: widths[i])
        if widths[widest] <= min_width:
            break
        widths[widest] -= 1
    return widths


def measure_columns(
    bridge: VirtualRenderBridge,
    *,
    sample_rows: int = 200,
    max_width: int = 60,
) -> list[int]:
    """Estimate declared-column widths (in characters) from headers and the first rows."""
    columns = bridge.declared_columns
    desired = [len(name) for name in columns]
    for row in bridge.visible_range(0, sample_rows):
        for col, name in enumerate(columns):
            desired[col] = max(desired[col], len(bridge.cell_text(row, name)))
    return [min(width, max_width) for width in desired]
