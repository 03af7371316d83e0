"""
Centrality Engine Tests
=======================

Degree, harmonic closeness, path-proxy betweenness and power-iteration
eigenvector centrality on small hand-checked graphs plus the synthetic months.
"""

import numpy as np
import pytest

from observatory.centrality import (
    CentralityResult,
    all_pairs_shortest_paths,
    compute_centrality,
    eigenvector_centrality,
    reconstruct_path,
)


def complete_matrix(n, w, diagonal=1.0):
    m = np.full((n, n), w)
    np.fill_diagonal(m, diagonal)
    return m


class TestDegenerateGraphs:

    @pytest.mark.parametrize("diagonal", [0.0, 1.0])
    def test_no_edges(self, diagonal):
        """Zero off-diagonal weights give zero scores and a uniform eigenvector."""
        m = np.eye(5) * diagonal
        result = compute_centrality(m)

        assert np.all(result.degree == 0)
        assert np.all(result.closeness == 0)
        assert np.all(result.betweenness == 0)
        assert result.eigenvector == pytest.approx(np.full(5, 1 / np.sqrt(5)))

    def test_empty_matrix(self):
        """An empty graph returns empty arrays instead of failing."""
        result = compute_centrality([])
        assert len(result) == 0
        assert result.eigenvector.shape == (0,)

    def test_single_node(self):
        """One node has no neighbours to divide by."""
        result = compute_centrality([[1.0]])
        assert result.degree.tolist() == [0.0]
        assert result.closeness.tolist() == [0.0]
        assert result.betweenness.tolist() == [0.0]
        assert result.eigenvector.tolist() == [1.0]

    def test_non_square_rejected(self):
        """Caller misuse with a ragged shape is reported."""
        with pytest.raises(ValueError):
            compute_centrality(np.zeros((2, 3)))

    def test_input_not_mutated(self, path_matrix):
        """The caller's matrix is left exactly as passed."""
        before = path_matrix.copy()
        compute_centrality(path_matrix)
        assert np.array_equal(path_matrix, before)


class TestSymmetry:

    @pytest.mark.parametrize("w", [0.3, 0.75, 1.0])
    def test_complete_graph_is_uniform(self, w):
        """Equal weights everywhere give equal scores for every node."""
        result = compute_centrality(complete_matrix(6, w))
        for name in ('degree', 'closeness', 'betweenness', 'eigenvector'):
            values = result.metric(name)
            assert values == pytest.approx(np.full(6, values[0]))

    @pytest.mark.parametrize("diagonal", [0.0, 1.0])
    def test_power_iteration_on_k4(self, diagonal):
        """K4 with 0.5 weights converges to the uniform unit vector."""
        ev = compute_centrality(complete_matrix(4, 0.5, diagonal)).eigenvector
        assert ev == pytest.approx([0.5, 0.5, 0.5, 0.5])


class TestPathGraph:

    def test_middle_node_carries_all_paths(self, path_matrix):
        """Node 1 is the only bridge between 0 and 2."""
        result = compute_centrality(path_matrix)
        assert result.betweenness.tolist() == [0.0, 1.0, 0.0]

    def test_closeness_values(self, path_matrix):
        """Harmonic closeness over 1/weight distances, divided by n-1."""
        closeness = compute_centrality(path_matrix).closeness
        # d(0,1)=1.25, d(1,2)=2, d(0,2)=3.25
        assert closeness[0] == pytest.approx((1 / 1.25 + 1 / 3.25) / 2)
        assert closeness[1] == pytest.approx((1 / 1.25 + 1 / 2) / 2)
        assert closeness[2] == pytest.approx((1 / 2 + 1 / 3.25) / 2)
        assert closeness.argmax() == 1
        # the weakly attached end (0.5 edge) is the least central
        assert closeness.argmin() == 2

    def test_degree_excludes_self_weight(self, path_matrix):
        """Default degree skips m[i][i]."""
        degree = compute_centrality(path_matrix).degree
        assert degree == pytest.approx([0.4, 0.65, 0.25])

    def test_degree_with_self_weight(self, path_matrix):
        """The old convention keeps m[i][i] but still divides by n-1."""
        degree = compute_centrality(path_matrix, include_self_weight=True).degree
        assert degree == pytest.approx([0.9, 1.15, 0.75])

    def test_shortest_paths(self, path_matrix):
        """Distances are sums of 1/weight and paths can be rebuilt."""
        dist, nxt = all_pairs_shortest_paths(path_matrix)
        assert dist[0][2] == pytest.approx(3.25)
        assert np.all(np.diag(dist) == 0)
        assert reconstruct_path(nxt, 0, 2) == [0, 1, 2]
        assert reconstruct_path(nxt, 2, 0) == [2, 1, 0]
        assert reconstruct_path(nxt, 1, 1) == [1]


class TestDisconnected:

    def test_unreachable_pairs(self):
        """Two separate pairs: infinite distance, no path, closeness still over n-1."""
        m = np.array([
            [0, 1, 0, 0],
            [1, 0, 0, 0],
            [0, 0, 0, 1],
            [0, 0, 1, 0],
        ], dtype=float)
        dist, nxt = all_pairs_shortest_paths(m)
        assert np.isinf(dist[0][2])
        assert reconstruct_path(nxt, 0, 3) == []

        result = compute_centrality(m)
        assert result.closeness == pytest.approx(np.full(4, 1 / 3))
        assert np.all(result.betweenness == 0)


class TestTieBreaking:

    def test_first_path_found_wins(self):
        """On a 4-cycle the lower intermediate index is kept for every tie."""
        m = np.zeros((4, 4))
        for i, j in [(0, 1), (1, 2), (2, 3), (3, 0)]:
            m[i, j] = m[j, i] = 1.0

        _, nxt = all_pairs_shortest_paths(m)
        assert reconstruct_path(nxt, 0, 2) == [0, 1, 2]
        assert reconstruct_path(nxt, 1, 3) == [1, 0, 3]

        betweenness = compute_centrality(m).betweenness
        assert betweenness.tolist() == [1.0, 1.0, 0.0, 0.0]

    def test_repeatable(self, mock_series):
        """Same matrix in, same numbers out."""
        m = mock_series.matrix(mock_series.months[5])
        a = compute_centrality(m)
        b = compute_centrality(m.copy())
        for name in ('degree', 'closeness', 'betweenness', 'eigenvector'):
            assert np.array_equal(a.metric(name), b.metric(name))


class TestSyntheticMonths:

    def test_betweenness_normalised(self, mock_series):
        """Betweenness stays in [0, 1] and the busiest node sits at exactly 1."""
        for month in mock_series.months:
            b = compute_centrality(mock_series.matrix(month)).betweenness
            assert b.min() >= 0.0
            assert b.max() <= 1.0
            if b.max() > 0:
                assert b.max() == 1.0

    def test_eigenvector_unit_norm(self, mock_series):
        """Eigenvector output always has euclidean norm 1."""
        for month in mock_series.months:
            ev = compute_centrality(mock_series.matrix(month)).eigenvector
            assert np.linalg.norm(ev) == pytest.approx(1.0)


class TestEigenvector:

    def test_matches_dominant_eigenvector(self, path_matrix):
        """Power iteration lands on numpy's dominant eigenvector."""
        values, vectors = np.linalg.eigh(path_matrix)
        expected = np.abs(vectors[:, values.argmax()])
        assert eigenvector_centrality(path_matrix) == pytest.approx(expected, abs=1e-9)

    def test_tolerance_stop(self, path_matrix):
        """Early stopping gives the same vector as the fixed budget."""
        fixed = eigenvector_centrality(path_matrix)
        early = eigenvector_centrality(path_matrix, max_iter=500, tol=1e-12)
        assert early == pytest.approx(fixed, abs=1e-9)


class TestResultHelpers:

    def test_frame_and_dict(self, path_matrix):
        """Results convert to a labelled DataFrame and plain lists."""
        result = compute_centrality(path_matrix)
        frame = result.to_frame(['a', 'b', 'c'])
        assert list(frame.columns) == ['Node', 'Degree', 'Closeness', 'Betweenness', 'Eigenvector']
        assert frame.loc[1, 'Betweenness'] == 1.0

        as_dict = result.as_dict()
        assert set(as_dict) == {'degree', 'closeness', 'betweenness', 'eigenvector'}
        assert as_dict['betweenness'] == [0.0, 1.0, 0.0]

    def test_unknown_metric(self):
        result = CentralityResult(*(np.zeros(2) for _ in range(4)))
        with pytest.raises(ValueError):
            result.metric('pagerank')
