"""
Tests for silhouette scoring and the optimal-k search.
"""

import pytest

from src.agnes import (
    AgglomerativeClusterer,
    DistanceMatrix,
    InvalidParameterError,
    cluster,
)
from src.evaluation import (
    OptimalKResult,
    find_optimal_k,
    silhouette,
    silhouette_per_cluster,
)


@pytest.fixture
def line_points():
    return [[0], [1], [10], [11]]


def test_silhouette_hand_computed(line_points):
    result = cluster(line_points, stop=2)
    # Points 0 and 3: (10.5 - 1) / 10.5; points 1 and 2: (9.5 - 1) / 9.5
    expected = ((10.5 - 1) / 10.5 + (9.5 - 1) / 9.5) / 2
    assert silhouette(result) == pytest.approx(expected)


def test_silhouette_matches_sklearn(random_vectors):
    from sklearn.metrics import silhouette_score

    result = cluster(random_vectors, "cosine", "average", 3)
    expected = silhouette_score(result.matrix.as_array(), result.labels, metric="precomputed")
    assert silhouette(result) == pytest.approx(expected)


@pytest.mark.parametrize("k", [1, 4])
def test_silhouette_undefined(k, line_points):
    result = cluster(line_points, stop=k)
    assert silhouette(result) is None
    assert silhouette_per_cluster(result) == {}


def test_silhouette_needs_matrix(line_points):
    result = cluster(line_points, stop=2)
    result.matrix = None
    with pytest.raises(InvalidParameterError):
        silhouette(result)

    matrix = DistanceMatrix.build(line_points)
    assert silhouette(result, matrix) is not None


def test_silhouette_per_cluster(line_points):
    result = cluster(line_points, stop=2)
    scores = silhouette_per_cluster(result)
    assert set(scores) == {0, 1}
    assert scores[0] == scores[1]
    assert 0.89 < scores[0] < 0.91


def test_find_optimal_k(three_blobs):
    search = find_optimal_k(three_blobs, k_values=[2, 3, 4, 5])

    assert isinstance(search, OptimalKResult)
    assert search.best_k == 3
    assert search.best_score == max(s for s in search.scores.values() if s is not None)
    assert search.best_result().n_clusters == 3
    assert search.best_result().silhouette_score == search.best_score


def test_find_optimal_k_with_shared_matrix(three_blobs):
    matrix = DistanceMatrix.build(three_blobs)
    ids = [f"freelancer_{i}" for i in range(len(three_blobs))]
    search = find_optimal_k(k_values=[2, 3], matrix=matrix, ids=ids)

    assert search.best_k == 3
    for result in search.results.values():
        assert result.matrix is matrix
        assert result.ids == ids


def test_find_optimal_k_undefined_scores(line_points):
    search = find_optimal_k(line_points, k_values=[1, 4, 10])
    assert search.best_k is None
    assert search.best_result() is None
    assert search.scores == {1: None, 4: None, 10: None}


def test_find_optimal_k_uses_clusterer_guards(three_blobs):
    clusterer = AgglomerativeClusterer(max_iterations=1)
    from src.agnes import ResourceExceededError

    with pytest.raises(ResourceExceededError):
        find_optimal_k(three_blobs, k_values=[2], clusterer=clusterer)


def test_find_optimal_k_arguments(three_blobs):
    with pytest.raises(InvalidParameterError):
        find_optimal_k(three_blobs, k_values=[])
    with pytest.raises(InvalidParameterError):
        find_optimal_k(k_values=[2])


def test_optimal_k_to_dict(three_blobs):
    data = find_optimal_k(three_blobs, k_values=[2, 3]).to_dict()
    assert data["best_k"] == 3
    assert set(data["scores"]) == {2, 3}
