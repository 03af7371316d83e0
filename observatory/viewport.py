"""
Pan / zoom view over the layout.

The transform is applied at draw time only: translate to the canvas center,
pan, scale, translate back. Nothing in here touches node positions, so the
simulation keeps its own coordinate frame however the user is looking at it.
"""

from dataclasses import dataclass, replace
from typing import Iterable, Tuple

from observatory.constants import (
    FIT_SCALE, LABEL_MIN_SCALE, MAX_SCALE, MIN_SCALE, PADDING,
    WHEEL_SENSITIVITY, ZOOM_STEP,
)

Point = Tuple[float, float]


def clamp_scale(k: float) -> float:
    return max(MIN_SCALE, min(MAX_SCALE, k))


@dataclass(frozen=True)
class Viewport:
    """pan offset (x, y), scale k and the canvas it is centered on"""

    x: float = 0.0
    y: float = 0.0
    k: float = 1.0
    width: float = 800.0
    height: float = 600.0

    def __post_init__(self):
        # frozen, so the clamped scale goes in through object.__setattr__
        object.__setattr__(self, 'k', clamp_scale(self.k))

    @property
    def center(self) -> Point:
        return self.width / 2, self.height / 2

    def to_screen(self, point: Point) -> Point:
        cx, cy = self.center
        px, py = point
        return cx + self.x + self.k * (px - cx), cy + self.y + self.k * (py - cy)

    def to_world(self, point: Point) -> Point:
        cx, cy = self.center
        sx, sy = point
        return cx + (sx - cx - self.x) / self.k, cy + (sy - cy - self.y) / self.k

    # sizes given in screen pixels, divided so they survive the zoom unchanged

    def stroke_width(self, base: float) -> float:
        return base / self.k

    def font_size(self, base: float) -> float:
        return base / self.k

    def labels_visible(self) -> bool:
        return self.k > LABEL_MIN_SCALE


class ViewController:
    """
    mouse / toolbar handling for one view. holds the current Viewport and
    swaps it for a new one on every interaction
    """

    def __init__(self, viewport: Viewport = None):
        self.viewport = viewport or Viewport()
        self.dragging = False
        self._last = (0.0, 0.0)

    def press(self, x: float, y: float):
        self.dragging = True
        self._last = (x, y)

    def move(self, x: float, y: float):
        if not self.dragging:
            return self.viewport
        dx, dy = x - self._last[0], y - self._last[1]
        self._last = (x, y)
        return self.pan_by(dx, dy)

    def release(self):
        self.dragging = False

    def pan_by(self, dx: float, dy: float) -> Viewport:
        v = self.viewport
        self.viewport = replace(v, x=v.x + dx, y=v.y + dy)
        return self.viewport

    def wheel(self, delta_y: float) -> Viewport:
        # scroll up (negative delta) zooms in
        k = self.viewport.k * (1 - delta_y * WHEEL_SENSITIVITY)
        return self.set_scale(k)

    def zoom_in(self) -> Viewport:
        return self.set_scale(self.viewport.k * ZOOM_STEP)

    def zoom_out(self) -> Viewport:
        return self.set_scale(self.viewport.k / ZOOM_STEP)

    def set_scale(self, k: float) -> Viewport:
        self.viewport = replace(self.viewport, k=clamp_scale(k))
        return self.viewport

    def reset(self) -> Viewport:
        self.viewport = replace(self.viewport, x=0.0, y=0.0, k=1.0)
        return self.viewport

    def resize(self, width: float, height: float) -> Viewport:
        self.viewport = replace(self.viewport, width=float(width), height=float(height))
        return self.viewport

    def fit(self, positions: Iterable[Point], margin: float = PADDING) -> Viewport:
        """scale and pan so every position lands inside the canvas"""

        pts = list(positions)
        v = self.viewport
        if not pts:
            self.viewport = replace(v, x=0.0, y=0.0, k=FIT_SCALE)
            return self.viewport

        xs = [p[0] for p in pts]
        ys = [p[1] for p in pts]
        box_w = max(max(xs) - min(xs), 1.0)
        box_h = max(max(ys) - min(ys), 1.0)
        avail_w = max(v.width - 2 * margin, 1.0)
        avail_h = max(v.height - 2 * margin, 1.0)

        k = clamp_scale(min(avail_w / box_w, avail_h / box_h))
        cx, cy = v.center
        bx = (max(xs) + min(xs)) / 2
        by = (max(ys) + min(ys)) / 2

        # bounding box center -> canvas center
        self.viewport = replace(v, x=-k * (bx - cx), y=-k * (by - cy), k=k)
        return self.viewport
