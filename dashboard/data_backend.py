import networkx as nx
import pandas as pd
import logging
import os
import sys

# add parent dir to path so we can import observatory modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from observatory.centrality import compute_centrality
from observatory.data_source import GraphSeries, load_series
from observatory.thresholds import apply_threshold, edge_list, similarity_stats
from observatory.weighting import WeightingMethod, composite_scores

logger = logging.getLogger(__name__)


class DashboardData:
    """
    handles all data loading and provides clean interfaces for dashboard
    """

    def __init__(self):
        self.series = None
        self.labels = []
        self.months = []

        # (month, threshold) -> CentralityResult
        self._centralities = {}

    def load(self, url=None, path=None, timeout=None, seed=None):
        """load series, falls back to mock data when nothing else works"""

        return self.use_series(load_series(url=url, path=path, timeout=timeout, seed=seed))

    def use_series(self, series: GraphSeries):

        self.series = series
        self.labels = series.labels
        self.months = series.months
        self._centralities = {}
        return self

    @property
    def source(self) -> str:
        return self.series.source if self.series else 'none'

    def get_raw_matrix(self, month: str):
        return self.series.matrix(month)

    def get_matrix(self, month: str, threshold: float = 0.0):
        return apply_threshold(self.series.matrix(month), threshold)

    def get_centralities(self, month: str, threshold: float = 0.0, force_recompute=False):
        """compute and cache centrality measures"""

        key = (month, round(float(threshold), 4))
        if key in self._centralities and not force_recompute:
            return self._centralities[key]

        result = compute_centrality(self.get_matrix(month, threshold))
        self._centralities[key] = result
        return result

    def get_ranking(self, month: str, threshold: float = 0.0,
                    method: WeightingMethod = WeightingMethod.EQUAL, weights=None) -> pd.DataFrame:
        """one row per city with the four metrics + composite, best first"""

        result = self.get_centralities(month, threshold)
        df = result.to_frame(self.labels).rename(columns={'Node': 'City'})
        df['Composite'] = composite_scores(result, method, weights)
        return df.sort_values('Composite', ascending=False).reset_index(drop=True)

    def ranking_csv(self, month: str, threshold: float = 0.0,
                    method: WeightingMethod = WeightingMethod.EQUAL, weights=None) -> str:

        df = self.get_ranking(month, threshold, method, weights)
        return df[['City', 'Composite']].rename(columns={'Composite': 'Composite Score'}).to_csv(index=False)

    def get_similarity_stats(self, month: str) -> dict:
        return similarity_stats(self.series.matrix(month))

    def to_networkx(self, month: str, threshold: float = 0.0) -> nx.Graph:
        """undirected weighted graph of the edges above threshold"""

        G = nx.Graph()
        G.add_nodes_from(self.labels)
        for i, j, w in edge_list(self.series.matrix(month), threshold):
            G.add_edge(self.labels[i], self.labels[j], weight=w)
        return G

    def get_graph_stats(self, month: str, threshold: float = 0.0) -> dict:
        """compute stats for one month"""

        G = self.to_networkx(month, threshold)
        components = sorted(nx.connected_components(G), key=len, reverse=True)
        degrees = [d for _, d in G.degree()]

        return {
            'num_nodes': G.number_of_nodes(),
            'num_edges': G.number_of_edges(),
            'density': nx.density(G) if G.number_of_nodes() > 1 else 0.0,
            'num_components': len(components),
            'largest_component': len(components[0]) if components else 0,
            'isolated': [n for n in G.nodes if G.degree(n) == 0],
            'avg_degree': sum(degrees) / len(degrees) if degrees else 0,
        }

    def get_metric_history(self, city: str, threshold: float = 0.0) -> pd.DataFrame:
        """one city's four metrics across every month"""

        idx = self.labels.index(city)
        rows = []
        for month in self.months:
            result = self.get_centralities(month, threshold)
            row = {'Month': month}
            for name, values in result.as_dict().items():
                row[name.title()] = values[idx]
            rows.append(row)
        return pd.DataFrame(rows)
