from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

PanelAxis = Literal["side", "bottom"]


@dataclass(frozen=True)
class PanelBounds:
    default: int
    minimum: int
    maximum: int
    # panels resized by dragging their leading edge toward the origin (bottom panel, top edge)
    trailing: bool = False

    def __post_init__(self) -> None:
        if not self.minimum <= self.default <= self.maximum:
            raise ValueError(f"panel default {self.default} outside [{self.minimum}, {self.maximum}]")


SIDE_PANEL = PanelBounds(default=250, minimum=150, maximum=500)
BOTTOM_PANEL = PanelBounds(default=200, minimum=100, maximum=500, trailing=True)


def clamp(value: int, minimum: int, maximum: int) -> int:
    return max(minimum, min(value, maximum))


def resized(current: int, raw_delta: int, bounds: PanelBounds) -> int:
    delta = -raw_delta if bounds.trailing else raw_delta
    return clamp(int(current) + int(delta), bounds.minimum, bounds.maximum)


class LayoutController:
    def __init__(self, side: PanelBounds = SIDE_PANEL, bottom: PanelBounds = BOTTOM_PANEL):
        self._bounds: dict[str, PanelBounds] = {"side": side, "bottom": bottom}
        self._sizes: dict[str, int] = {}
        self.reset()

    @property
    def side_panel_size(self) -> int:
        return self._sizes["side"]

    @property
    def bottom_panel_size(self) -> int:
        return self._sizes["bottom"]

    def bounds(self, axis: PanelAxis) -> PanelBounds:
        if axis not in self._bounds:
            raise ValueError(f"Unknown panel axis: {axis!r}")
        return self._bounds[axis]

    def resize(self, axis: PanelAxis, raw_delta: int) -> int:
        bounds = self.bounds(axis)
        size = resized(self._sizes[axis], raw_delta, bounds)
        self._sizes[axis] = size
        return size

    def reset(self) -> None:
        self._sizes = {axis: bounds.default for axis, bounds in self._bounds.items()}

    def snapshot(self) -> dict[str, int]:
        return {"side_panel_size": self.side_panel_size, "bottom_panel_size": self.bottom_panel_size}
