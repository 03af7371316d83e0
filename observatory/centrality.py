# centrality for one month of the similarity network.
# n is tiny (17 cities) so the O(n^3) floyd-warshall is fine here,
# anything much bigger should be pushed off the render thread.

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np # pyright: ignore[reportMissingImports]
import pandas as pd # pyright: ignore[reportMissingModuleSource]

from observatory.constants import EIGENVECTOR_ITERATIONS, METRICS

logger = logging.getLogger(__name__)


@dataclass
class CentralityResult:
    """four parallel per-node score arrays, index i = node i"""

    degree: np.ndarray
    closeness: np.ndarray
    betweenness: np.ndarray
    eigenvector: np.ndarray

    def __len__(self):
        return len(self.degree)

    def metric(self, name: str) -> np.ndarray:
        if name not in METRICS:
            raise ValueError(f"unknown metric: {name}")
        return getattr(self, name)

    def as_dict(self) -> Dict[str, List[float]]:
        return {name: self.metric(name).tolist() for name in METRICS}

    def to_frame(self, labels=None) -> pd.DataFrame:

        frame = pd.DataFrame({name.title(): self.metric(name) for name in METRICS})
        if labels is not None:
            frame.insert(0, 'Node', list(labels))
        return frame


def as_square_matrix(matrix) -> np.ndarray:

    # always a float copy, callers keep ownership of what they passed in

    m = np.array(matrix, dtype=float)
    if m.size == 0:
        return np.zeros((0, 0))
    if m.ndim != 2 or m.shape[0] != m.shape[1]:
        raise ValueError(f"expected a square matrix, got shape {m.shape}")
    return m


def weighted_degree(m: np.ndarray, include_self_weight: bool = False) -> np.ndarray:
    """
    mean edge weight per row, divided by n-1.

    include_self_weight=True keeps m[i][i] in the sum (old dashboard behaviour,
    still divided by n-1).
    """
    n = len(m)
    if n <= 1:
        return np.zeros(n)

    totals = m.sum(axis=1)
    if not include_self_weight:
        totals = totals - np.diag(m)
    return totals / (n - 1)


def distance_matrix(m: np.ndarray) -> np.ndarray:

    # strong similarity = short hop. no edge = inf

    with np.errstate(divide='ignore'):
        dist = np.where(m > 0, 1.0 / m, np.inf)
    np.fill_diagonal(dist, 0.0)
    return dist


def all_pairs_shortest_paths(matrix) -> Tuple[np.ndarray, np.ndarray]:
    """
    floyd-warshall on 1/weight costs.

    returns (dist, nxt) where nxt[i][j] is the first hop on the i -> j path
    (-1 when j is unreachable). relaxation runs k, then i, then j ascending
    and only replaces on a strictly shorter path, so on ties the first path
    found is kept.
    """
    m = as_square_matrix(matrix)
    n = len(m)

    dist = distance_matrix(m)
    nxt = np.where(np.isfinite(dist), np.arange(n)[None, :], -1)

    for k in range(n):
        # row k / column k can't improve during round k (costs are >= 0),
        # so updating the whole plane at once matches the nested loop
        via = dist[:, k, None] + dist[None, k, :]
        better = via < dist
        dist = np.where(better, via, dist)
        nxt = np.where(better, nxt[:, k, None], nxt)

    return dist, nxt


def reconstruct_path(nxt: np.ndarray, source: int, target: int) -> List[int]:

    if source == target:
        return [source]
    if nxt[source][target] == -1:
        return []

    path = [source]
    curr = source
    for _ in range(len(nxt)):
        curr = int(nxt[curr][target])
        if curr == -1:
            return []
        path.append(curr)
        if curr == target:
            return path

    # a consistent next-hop table never gets here
    logger.warning(f"next-hop table loops between {source} and {target}")
    return []


def harmonic_closeness(dist: np.ndarray) -> np.ndarray:

    # unreachable pairs add 0 but still count in the n-1 denominator

    n = len(dist)
    if n <= 1:
        return np.zeros(n)

    with np.errstate(divide='ignore'):
        inv = np.where(np.isfinite(dist) & (dist > 0), 1.0 / dist, 0.0)
    np.fill_diagonal(inv, 0.0)
    return inv.sum(axis=1) / (n - 1)


def path_betweenness(nxt: np.ndarray) -> np.ndarray:
    """
    proxy betweenness: walk the one stored shortest path for every ordered
    pair and count the interior nodes. not brandes - ties aren't split.
    scaled so the busiest node is 1.0
    """
    n = len(nxt)
    counts = np.zeros(n)

    for i in range(n):
        for j in range(n):
            if i == j:
                continue
            for k in reconstruct_path(nxt, i, j)[1:-1]:
                counts[k] += 1

    top = counts.max() if n else 0.0
    return counts / (top or 1.0)


def eigenvector_centrality(matrix, max_iter: int = EIGENVECTOR_ITERATIONS,
                           tol: Optional[float] = None) -> np.ndarray:
    """
    power iteration from the uniform vector, L2 normalised every round.

    default is a fixed number of rounds. pass tol to stop early once the
    L1 change drops under n * tol. a zero iterate leaves the vector as is.
    """
    m = as_square_matrix(matrix)
    n = len(m)
    if n == 0:
        return np.zeros(0)

    v = np.full(n, 1.0 / np.sqrt(n))

    for _ in range(max_iter):
        new = m @ v
        norm = np.linalg.norm(new)
        if norm == 0:
            continue
        new = new / norm
        converged = tol is not None and np.abs(new - v).sum() < n * tol
        v = new
        if converged:
            break

    return v


def compute_centrality(matrix, include_self_weight: bool = False,
                       max_iter: int = EIGENVECTOR_ITERATIONS,
                       tol: Optional[float] = None) -> CentralityResult:
    """
    degree, closeness, betweenness and eigenvector centrality for one
    (already thresholded) similarity matrix.

    never raises on numeric edge cases - empty graphs, isolated nodes and
    zero matrices come back as zeros / the uniform vector.
    """
    m = as_square_matrix(matrix)
    n = len(m)

    if n <= 1:
        return CentralityResult(
            degree=np.zeros(n),
            closeness=np.zeros(n),
            betweenness=np.zeros(n),
            eigenvector=np.full(n, 1.0 / np.sqrt(n)) if n else np.zeros(0),
        )

    dist, nxt = all_pairs_shortest_paths(m)

    result = CentralityResult(
        degree=weighted_degree(m, include_self_weight),
        closeness=harmonic_closeness(dist),
        betweenness=path_betweenness(nxt),
        eigenvector=eigenvector_centrality(m, max_iter=max_iter, tol=tol),
    )

    logger.debug(f"centrality for {n} nodes, {int(np.count_nonzero(np.triu(m, 1)))} edges")
    return result
