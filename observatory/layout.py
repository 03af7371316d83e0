# force directed layout that keeps running while the data changes under it.
# positions live for the whole session - a new month or threshold only changes
# the springs, the nodes then relax into the new shape instead of jumping.

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np # pyright: ignore[reportMissingImports]

from observatory.centrality import as_square_matrix
from observatory.constants import (
    CENTER_FORCE, DAMPING, INITIAL_CENTER, INITIAL_SPREAD, PADDING,
    REPULSION, REST_LENGTH, SPRING_K,
)
from observatory.thresholds import edge_list, edge_mask
from observatory.viewport import Viewport

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


@dataclass
class LayoutParams:
    repulsion: float = REPULSION
    spring_k: float = SPRING_K
    rest_length: float = REST_LENGTH
    damping: float = DAMPING
    center_force: float = CENTER_FORCE
    padding: float = PADDING


class LayoutSimulator:
    """
    one (position, velocity) row per node, advanced one euler step per frame.

    forces per tick:
      - repulsion between every pair, K / (d^2 + 1)
      - springs on edges above the threshold, pulling toward rest_length,
        scaled by the edge weight
      - a weak pull to the canvas center
    then v = (v + F) * damping, x += v, and x is clamped into the padded canvas.
    """

    def __init__(self, n_nodes: int, params: Optional[LayoutParams] = None,
                 seed: Optional[int] = None, center: Point = INITIAL_CENTER,
                 spread: float = INITIAL_SPREAD):

        self.n = int(n_nodes)
        self.params = params or LayoutParams()

        rng = np.random.default_rng(seed)
        self.pos = np.asarray(center, dtype=float) + (rng.random((self.n, 2)) - 0.5) * spread
        self.vel = np.zeros((self.n, 2))
        self.tick_count = 0

        # (matrix, threshold, spring weights) - swapped as one reference
        self._graph = (np.zeros((self.n, self.n)), 0.0, np.zeros((self.n, self.n)))

    def set_graph(self, matrix, threshold: float = 0.0):
        """swap in the matrix/threshold the next tick uses. positions are kept"""

        m = as_square_matrix(matrix)
        if m.shape != (self.n, self.n):
            raise ValueError(f"matrix is {m.shape}, simulator has {self.n} nodes")

        springs = np.where(edge_mask(m, threshold), m, 0.0)
        self._graph = (m, float(threshold), springs)
        logger.debug(f"layout graph: {int(np.count_nonzero(springs)) // 2} springs at threshold {threshold}")

    @property
    def matrix(self) -> np.ndarray:
        return self._graph[0]

    @property
    def threshold(self) -> float:
        return self._graph[1]

    def tick(self, width: float, height: float):

        if self.n == 0:
            return

        _, _, springs = self._graph
        p = self.params
        pos = self.pos

        # pairwise offsets from the previous frame, [i, j] = j - i
        ox = pos[None, :, 0] - pos[:, None, 0]
        oy = pos[None, :, 1] - pos[:, None, 1]

        # repulsion pushes i away from j
        rx = pos[:, None, 0] - pos[None, :, 0]
        ry = pos[:, None, 1] - pos[None, :, 1]
        push = p.repulsion / (rx * rx + ry * ry + 1)
        np.fill_diagonal(push, 0.0)
        away = np.arctan2(ry, rx)

        # arctan2(0, 0) is 0 both ways round, stacked nodes would move as one.
        # give each stacked pair a fixed axis, opposite for i and j
        stacked = (rx == 0) & (ry == 0)
        np.fill_diagonal(stacked, False)
        if stacked.any():
            i, j = np.indices((self.n, self.n))
            axis = np.pi * (i + j) / self.n + np.pi * (i > j)
            away = np.where(stacked, axis, away)

        fx = (np.cos(away) * push).sum(axis=1)
        fy = (np.sin(away) * push).sum(axis=1)

        # springs pull i toward j (or push, when closer than rest_length)
        dist = np.hypot(ox, oy)
        pull = (dist - p.rest_length) * p.spring_k * springs
        toward = np.arctan2(oy, ox)
        fx += (np.cos(toward) * pull).sum(axis=1)
        fy += (np.sin(toward) * pull).sum(axis=1)

        fx += (width / 2 - pos[:, 0]) * p.center_force
        fy += (height / 2 - pos[:, 1]) * p.center_force

        self.vel = (self.vel + np.column_stack([fx, fy])) * p.damping
        new = pos + self.vel
        new[:, 0] = np.maximum(p.padding, np.minimum(width - p.padding, new[:, 0]))
        new[:, 1] = np.maximum(p.padding, np.minimum(height - p.padding, new[:, 1]))

        self.pos = new
        self.tick_count += 1

    def run(self, ticks: int, width: float, height: float):
        for _ in range(ticks):
            self.tick(width, height)

    def positions(self) -> List[Point]:
        return [(float(x), float(y)) for x, y in self.pos]

    def velocities(self) -> List[Point]:
        return [(float(x), float(y)) for x, y in self.vel]

    def kinetic_energy(self) -> float:
        if self.n == 0:
            return 0.0
        return float((self.vel ** 2).sum(axis=1).mean())

    def edges(self) -> List[Tuple[int, int, float]]:
        m, threshold, _ = self._graph
        return edge_list(m, threshold)

    def to_screen(self, point: Point, viewport: Viewport) -> Point:
        return viewport.to_screen(point)

    def screen_positions(self, viewport: Viewport) -> List[Point]:
        return [viewport.to_screen(pt) for pt in self.positions()]
