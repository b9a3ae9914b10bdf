"""Placement of the floating change panel next to its anchor.

This is the second pass of a measure-then-position layout: the caller measures
the anchor, the scroll container and the (invisible) panel, then asks
:func:`solve_position` where to show it. All rectangles share one coordinate
space; the result is expressed relative to the anchor's origin because the
panel is positioned inside its anchor.
"""

from __future__ import annotations

from dataclasses import dataclass

PANEL_MARGIN = 12.0
ARROW_HALF_WIDTH = 10.0
ARROW_MIN_OFFSET = 8.0
ARROW_END_PADDING = 28.0


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center_x(self) -> float:
        return self.left + self.width / 2


@dataclass(frozen=True)
class PanelSize:
    width: float
    height: float

    @property
    def is_measured(self) -> bool:
        return self.width > 0 and self.height > 0


@dataclass(frozen=True)
class Placement:
    top: float
    left: float
    arrow_left: float
    place_above: bool

    @property
    def arrow_edge(self) -> str:
        """Panel edge the arrow sits on: it points down from the bottom when above."""
        return "bottom" if self.place_above else "top"


def _clamp(value: float, low: float, high: float) -> float:
    # Upper bound wins when the range is empty (panel larger than container).
    return min(high, max(low, value))


def solve_position(
    anchor_rect: Rect,
    container_rect: Rect,
    panel_size: PanelSize,
    margin: float = PANEL_MARGIN,
) -> Placement | None:
    if not panel_size.is_measured:
        return None

    space_below = container_rect.bottom - anchor_rect.bottom
    space_above = anchor_rect.top - container_rect.top
    needed = panel_size.height + margin
    place_above = space_below < needed and space_above > needed

    if place_above:
        top = anchor_rect.top - panel_size.height - margin
    else:
        top = anchor_rect.bottom + margin
    left = anchor_rect.center_x - panel_size.width / 2

    top = _clamp(top, container_rect.top, container_rect.bottom - panel_size.height)
    left = _clamp(left, container_rect.left, container_rect.right - panel_size.width)

    arrow_left = _clamp(
        anchor_rect.center_x - left - ARROW_HALF_WIDTH,
        ARROW_MIN_OFFSET,
        panel_size.width - ARROW_END_PADDING,
    )

    return Placement(
        top=top - anchor_rect.top,
        left=left - anchor_rect.left,
        arrow_left=arrow_left,
        place_above=place_above,
    )
