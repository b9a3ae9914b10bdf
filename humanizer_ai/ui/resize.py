from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

DEFAULT_PANE_HEIGHT = 320
MIN_PANE_HEIGHT = 200

RESIZE_CURSOR = "ns-resize"


@dataclass
class PointerOverrides:
    """Global cursor and text-selection styles changed while dragging."""

    cursor: str = ""
    user_select: str = ""

    @property
    def active(self) -> bool:
        return bool(self.cursor or self.user_select)

    def acquire(self) -> None:
        self.cursor = RESIZE_CURSOR
        self.user_select = "none"

    def release(self) -> None:
        self.cursor = ""
        self.user_select = ""


class ResizeDrag:
    """One press -> move* -> release drag of the text panes.

    The pointer overrides are held from construction until :meth:`release`,
    which is idempotent and also runs when the drag is used as a context
    manager or torn down by its owner.
    """

    def __init__(
        self,
        start_y: float,
        start_height: int,
        on_height: Callable[[int], None],
        overrides: PointerOverrides,
        min_height: int = MIN_PANE_HEIGHT,
    ) -> None:
        self.start_y = start_y
        self.start_height = start_height
        self.min_height = min_height
        self._on_height = on_height
        self._overrides = overrides
        self._overrides.acquire()
        self.active = True

    def move(self, y: float) -> int | None:
        if not self.active:
            return None
        height = max(self.min_height, int(round(self.start_height + (y - self.start_y))))
        self._on_height(height)
        return height

    def release(self) -> None:
        if self.active:
            self.active = False
            self._overrides.release()

    def __enter__(self) -> "ResizeDrag":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
