# similarity threshold handling, shared by the centrality input and the layout

import logging
from typing import Dict, List, Tuple

import numpy as np

from observatory.centrality import as_square_matrix

logger = logging.getLogger(__name__)


def clamp_threshold(threshold: float) -> float:

    t = float(threshold)
    if t < 0.0 or t > 1.0:
        clamped = min(1.0, max(0.0, t))
        logger.warning(f"threshold {t} outside [0, 1], using {clamped}")
        return clamped
    return t


def apply_threshold(matrix, threshold: float) -> np.ndarray:
    """new matrix with every weight below threshold forced to 0"""

    m = as_square_matrix(matrix)
    t = clamp_threshold(threshold)
    return np.where(m < t, 0.0, m)


def edge_mask(matrix, threshold: float) -> np.ndarray:

    # edges the layout pulls on / the renderer draws. strictly above threshold,
    # never the diagonal. raising the threshold can only shrink this set

    m = as_square_matrix(matrix)
    mask = m > threshold
    np.fill_diagonal(mask, False)
    return mask


def edge_list(matrix, threshold: float) -> List[Tuple[int, int, float]]:

    m = as_square_matrix(matrix)
    rows, cols = np.nonzero(np.triu(edge_mask(m, threshold), 1))
    return [(int(i), int(j), float(m[i, j])) for i, j in zip(rows, cols)]


def similarity_stats(matrix) -> Dict[str, float]:

    # ignore self loops (1.0) and missing edges (0)

    m = as_square_matrix(matrix)
    values = m[(m > 0) & (m < 1)]
    if values.size == 0:
        return {'min': 0.0, 'max': 0.0, 'avg': 0.0, 'count': 0}

    return {
        'min': float(values.min()),
        'max': float(values.max()),
        'avg': float(values.mean()),
        'count': int(values.size),
    }
