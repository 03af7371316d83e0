# where the monthly similarity matrices come from:
# local json file -> backend endpoint -> synthetic data, first one that works wins

import json
import logging
from typing import Dict, List, Optional, Sequence

import httpx
import numpy as np # pyright: ignore[reportMissingImports]

from observatory import config
from observatory.centrality import as_square_matrix
from observatory.constants import CITIES, MONTHS

logger = logging.getLogger(__name__)


class DataSourceError(RuntimeError):
    pass


class GraphSeries:
    """labels + one n x n matrix per month key. months are kept sorted"""

    def __init__(self, labels: Sequence[str], matrices: Dict[str, object], source: str = 'mock'):

        self.labels = list(labels)
        self.matrices = {month: as_square_matrix(m) for month, m in matrices.items()}
        self.months = sorted(self.matrices)
        self.source = source

    def __len__(self):
        return len(self.months)

    @property
    def node_count(self) -> int:
        return len(self.labels)

    def matrix(self, month: str) -> np.ndarray:
        if month not in self.matrices:
            return np.zeros((self.node_count, self.node_count))
        return self.matrices[month]

    def month_at(self, index: int) -> str:
        return self.months[index % len(self.months)] if self.months else ""


def check_symmetry(month: str, m: np.ndarray, atol: float = 1e-9) -> bool:

    # not enforced, asymmetric input just gives lopsided layouts and paths

    ok = bool(np.allclose(m, m.T, atol=atol))
    if not ok:
        logger.warning(f"matrix for {month} is not symmetric")
    return ok


def parse_payload(payload, labels: Optional[Sequence[str]] = None, source: str = 'api') -> GraphSeries:
    """
    accepts either {month: matrix} or {"nodes": [...], "graphs": {month: matrix}}
    """
    if not isinstance(payload, dict) or not payload:
        raise DataSourceError("empty or non-object payload")

    if 'graphs' in payload:
        labels = payload.get('nodes') or labels
        graphs = payload['graphs']
    else:
        graphs = payload

    if not isinstance(graphs, dict) or not graphs:
        raise DataSourceError("payload has no graphs")

    matrices = {}
    size = None
    for month, raw in graphs.items():
        try:
            m = as_square_matrix(raw)
        except (TypeError, ValueError) as e:
            raise DataSourceError(f"bad matrix for {month}: {e}") from e
        # json null comes through as nan and would poison every metric
        if not np.all(np.isfinite(m)):
            raise DataSourceError(f"matrix for {month} has missing or non-finite weights")
        if np.any(m < 0):
            raise DataSourceError(f"matrix for {month} has negative weights")
        if size is None:
            size = len(m)
        elif len(m) != size:
            raise DataSourceError(f"matrix for {month} is {len(m)}x{len(m)}, expected {size}x{size}")
        check_symmetry(month, m)
        matrices[str(month)] = m

    if labels is None:
        labels = CITIES if size == len(CITIES) else [f"node{i}" for i in range(size)]
    if len(labels) != size:
        raise DataSourceError(f"{len(labels)} labels for {size} nodes")

    return GraphSeries(labels, matrices, source=source)


def fetch_series(url: str, timeout: float = 2.0, client: Optional[httpx.Client] = None,
                 labels: Optional[Sequence[str]] = None) -> GraphSeries:

    try:
        if client is None:
            response = httpx.get(url, timeout=timeout)
        else:
            response = client.get(url, timeout=timeout)
    except httpx.HTTPError as e:
        raise DataSourceError(f"could not reach {url}: {e}") from e

    if response.status_code != 200:
        raise DataSourceError(f"{url} answered HTTP {response.status_code}")

    try:
        payload = response.json()
    except ValueError as e:
        raise DataSourceError(f"{url} did not return json: {e}") from e

    series = parse_payload(payload, labels, source='api')
    logger.info(f"fetched {len(series)} months x {series.node_count} nodes from {url}")
    return series


def load_series_file(path: str, labels: Optional[Sequence[str]] = None) -> GraphSeries:

    try:
        with open(path, 'r') as f:
            payload = json.load(f)
    except (OSError, ValueError) as e:
        raise DataSourceError(f"could not read {path}: {e}") from e

    series = parse_payload(payload, labels, source='file')
    logger.info(f"loaded {len(series)} months x {series.node_count} nodes from {path}")
    return series


def generate_mock_series(labels: Sequence[str] = CITIES, months: List[str] = MONTHS,
                         seed: Optional[int] = None) -> GraphSeries:
    """
    synthetic market integration data. cities close in the list count as
    the same region, the first five are the big hubs, and integration
    creeps up over the months
    """
    rng = np.random.default_rng(seed)
    n = len(labels)
    matrices = {}

    for t, month in enumerate(months):
        integration = 0.3 + (t / len(months)) * 0.4
        m = np.zeros((n, n))

        for i in range(n):
            for j in range(i + 1, n):
                prob = 0.1
                if j - i < 3:
                    prob += 0.5  # same region
                if i < 5 and j < 5:
                    prob += 0.3  # hubs trade with each other
                if rng.random() < prob * integration:
                    weight = 0.3 + rng.random() * 0.7
                    m[i, j] = weight
                    m[j, i] = weight

        matrices[month] = m

    return GraphSeries(labels, matrices, source='mock')


def load_series(url: Optional[str] = None, timeout: Optional[float] = None,
                path: Optional[str] = None, client: Optional[httpx.Client] = None,
                seed: Optional[int] = None) -> GraphSeries:

    path = path or config.data_path()
    url = url or config.api_url()
    timeout = config.fetch_timeout() if timeout is None else timeout

    if path:
        try:
            return load_series_file(path)
        except DataSourceError as e:
            logger.warning(f"data file unusable, trying backend ({e})")

    try:
        return fetch_series(url, timeout=timeout, client=client)
    except DataSourceError as e:
        logger.warning(f"backend not reachable, using mock data ({e})")

    return generate_mock_series(seed=seed)
