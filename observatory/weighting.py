# composite score = weighted sum of the four centralities.
# the sidebar still hands us display labels, everything past from_label is the enum.

from enum import Enum
from typing import Dict, Optional

import numpy as np

from observatory.centrality import CentralityResult
from observatory.constants import CORRELATION_WEIGHTS, METRICS


class WeightingMethod(Enum):

    EQUAL = "Equal Weighting"
    CORRELATION = "Correlation-Based"
    ENTROPY = "Entropy-Based"
    CATEGORY_IMPORTANCE = "Category Importance"
    INTERACTIVE = "Interactive"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label: str) -> "WeightingMethod":
        for method in cls:
            if method.value == label or method.name == label:
                return method
        raise ValueError(f"unknown weighting method: {label}")

    @classmethod
    def labels(cls):
        return [m.value for m in cls]

    def weights(self, result: CentralityResult,
                custom: Optional[Dict[str, float]] = None) -> Dict[str, float]:

        if self is WeightingMethod.CORRELATION:
            return dict(CORRELATION_WEIGHTS)
        if self is WeightingMethod.ENTROPY:
            return entropy_weights(result)
        if self is WeightingMethod.INTERACTIVE:
            return normalise_weights(custom or {})
        # category importance has no per-category table yet, same as equal
        return equal_weights()


def equal_weights() -> Dict[str, float]:
    return {name: 1.0 / len(METRICS) for name in METRICS}


def normalise_weights(weights: Dict[str, float]) -> Dict[str, float]:

    unknown = set(weights) - set(METRICS)
    if unknown:
        raise ValueError(f"unknown metrics in weights: {sorted(unknown)}")
    if any(w < 0 for w in weights.values()):
        raise ValueError("weights must be non-negative")

    total = sum(weights.values())
    if total <= 0:
        return equal_weights()
    return {name: weights.get(name, 0.0) / total for name in METRICS}


def entropy_weights(result: CentralityResult) -> Dict[str, float]:
    """
    entropy weight method: each metric column becomes a distribution over
    nodes, low-entropy (more discriminating) columns get more weight
    """
    n = len(result)
    if n <= 1:
        return equal_weights()

    divergence = {}
    for name in METRICS:
        col = np.clip(result.metric(name), 0.0, None)
        total = col.sum()
        if total <= 0:
            divergence[name] = 0.0
            continue
        p = col / total
        nz = p[p > 0]
        entropy = -(nz * np.log(nz)).sum() / np.log(n)
        divergence[name] = max(0.0, 1.0 - entropy)

    if sum(divergence.values()) <= 0:
        return equal_weights()
    return normalise_weights(divergence)


def composite_scores(result: CentralityResult,
                     method: WeightingMethod = WeightingMethod.EQUAL,
                     weights: Optional[Dict[str, float]] = None) -> np.ndarray:

    w = method.weights(result, weights)
    score = np.zeros(len(result))
    for name in METRICS:
        score = score + w[name] * result.metric(name)
    return score
