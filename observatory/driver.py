"""
Observatory driver.

Holds the current month, threshold and weighting method. Whenever one of them
changes it filters the month's matrix, recomputes centrality and hands the
filtered matrix to the layout simulator. The simulator itself can free-run on
a FrameScheduler independent of those changes.
"""

import logging
import threading
from typing import Dict, List, Optional, Tuple

import numpy as np

from observatory import config
from observatory.centrality import CentralityResult, compute_centrality
from observatory.data_source import GraphSeries
from observatory.layout import LayoutParams, LayoutSimulator
from observatory.scheduler import FrameScheduler
from observatory.thresholds import apply_threshold, clamp_threshold, similarity_stats
from observatory.weighting import WeightingMethod, composite_scores

logger = logging.getLogger(__name__)


class ObservatoryDriver:

    def __init__(self, series: GraphSeries, threshold: float = 0.0,
                 method: WeightingMethod = WeightingMethod.EQUAL,
                 params: Optional[LayoutParams] = None, seed: Optional[int] = None,
                 width: float = 800.0, height: float = 600.0):

        self.series = series
        self.time_index = 0
        self.threshold = clamp_threshold(threshold)
        self.method = method
        self.custom_weights: Optional[Dict[str, float]] = None
        self.width = float(width)
        self.height = float(height)

        self.simulator = LayoutSimulator(series.node_count, params=params, seed=seed)
        self.metrics: Optional[CentralityResult] = None
        self.filtered = np.zeros((series.node_count, series.node_count))

        self._lock = threading.Lock()
        self._scheduler: Optional[FrameScheduler] = None
        self._refresh()

    @property
    def month(self) -> str:
        return self.series.month_at(self.time_index)

    @property
    def labels(self) -> List[str]:
        return self.series.labels

    def set_time_index(self, index: int):
        if len(self.series) == 0:
            return
        self.time_index = index % len(self.series)
        self._refresh()

    def step_time(self):
        self.set_time_index(self.time_index + 1)

    def set_threshold(self, threshold: float):
        self.threshold = clamp_threshold(threshold)
        self._refresh()

    def set_method(self, method: WeightingMethod, weights: Optional[Dict[str, float]] = None):
        # composite only, the graph doesn't change
        self.method = method
        self.custom_weights = weights

    def _refresh(self):

        raw = self.series.matrix(self.month)
        filtered = apply_threshold(raw, self.threshold)
        metrics = compute_centrality(filtered)

        with self._lock:
            self.filtered = filtered
            self.metrics = metrics
            self.simulator.set_graph(filtered, self.threshold)

        logger.debug(f"refreshed {self.month or '<no data>'} at threshold {self.threshold:.2f}")

    def composite(self) -> np.ndarray:
        return composite_scores(self.metrics, self.method, self.custom_weights)

    def ranking(self) -> List[Tuple[str, float]]:
        scores = self.composite()
        ranked = sorted(zip(self.labels, scores.tolist()), key=lambda x: x[1], reverse=True)
        return ranked

    def similarity_stats(self) -> Dict[str, float]:
        return similarity_stats(self.series.matrix(self.month))

    # simulation loop

    def resize(self, width: float, height: float):
        with self._lock:
            self.width = float(width)
            self.height = float(height)

    def tick(self):
        with self._lock:
            self.simulator.tick(self.width, self.height)

    def positions(self):
        with self._lock:
            return self.simulator.positions()

    def start(self, interval: Optional[float] = None):
        if self._scheduler is not None and self._scheduler.running:
            return
        self._scheduler = FrameScheduler(self.tick, interval or config.frame_interval(),
                                         name="layout")
        self._scheduler.start()

    def stop(self):
        if self._scheduler is not None:
            self._scheduler.stop()
            self._scheduler = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running
