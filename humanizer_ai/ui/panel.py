from __future__ import annotations

from enum import Enum

from humanizer_ai.ui.geometry import PANEL_MARGIN, PanelSize, Placement, Rect, solve_position


class PanelState(str, Enum):
    HIDDEN = "hidden"
    PENDING = "pending"
    POSITIONED = "positioned"


class PanelController:
    """Tracks which change panel is visible and where it sits.

    Only one panel is active at a time; entering another anchor replaces the
    previous one.
    """

    def __init__(self, margin: float = PANEL_MARGIN) -> None:
        self.margin = margin
        self.active_index: int | None = None
        self.placement: Placement | None = None

    def state_of(self, index: int) -> PanelState:
        if index != self.active_index:
            return PanelState.HIDDEN
        if self.placement is None:
            return PanelState.PENDING
        return PanelState.POSITIONED

    @property
    def state(self) -> PanelState:
        if self.active_index is None:
            return PanelState.HIDDEN
        return self.state_of(self.active_index)

    def enter(self, index: int) -> None:
        self.active_index = index
        self.placement = None

    def leave(self, index: int | None = None) -> None:
        if index is None or index == self.active_index:
            self.active_index = None
            self.placement = None

    def content_changed(self) -> None:
        self.placement = None

    def reset(self) -> None:
        self.leave()

    def measure(
        self,
        anchor_rect: Rect | None,
        container_rect: Rect | None,
        panel_size: PanelSize,
    ) -> Placement | None:
        if self.active_index is None or anchor_rect is None or container_rect is None:
            return None
        placement = solve_position(anchor_rect, container_rect, panel_size, self.margin)
        if placement is not None:
            self.placement = placement
        return placement
