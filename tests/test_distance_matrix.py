"""
Tests for the precomputed distance matrix.
"""

import numpy as np
import pytest

from src.agnes import (
    DistanceComputationError,
    DistanceMatrix,
    EuclideanDistance,
    InvalidInputError,
    ShapeMismatchError,
)


class CountingMetric(EuclideanDistance):
    """Euclidean distance that counts its calls."""

    def __init__(self):
        self.calls = 0

    def _distance(self, a, b):
        self.calls += 1
        return super()._distance(a, b)


def test_symmetric_with_zero_diagonal(random_vectors):
    for metric in ("euclidean", "cosine"):
        matrix = DistanceMatrix.build(random_vectors, metric)
        n = len(random_vectors)
        for i in range(n):
            assert matrix.at(i, i) == 0
            for j in range(n):
                assert matrix.at(i, j) == matrix.at(j, i)
                assert matrix.at(i, j) >= 0


def test_values():
    matrix = DistanceMatrix.build([[0, 0], [3, 4], [6, 8]])
    assert matrix.at(0, 1) == 5.0
    assert matrix.at(0, 2) == 10.0
    assert matrix.at(2, 1) == 5.0
    assert matrix.size == 3
    assert len(matrix) == 3
    assert matrix.metric_name == "euclidean"


def test_only_upper_triangle_is_computed(random_vectors):
    metric = CountingMetric()
    DistanceMatrix.build(random_vectors, metric)
    n = len(random_vectors)
    assert metric.calls == n * (n - 1) // 2


def test_read_only(two_pairs):
    matrix = DistanceMatrix.build(two_pairs)
    with pytest.raises(ValueError):
        matrix.as_array()[0, 1] = 100.0


def test_empty_input():
    with pytest.raises(InvalidInputError):
        DistanceMatrix.build([])


def test_ragged_input():
    with pytest.raises(ShapeMismatchError):
        DistanceMatrix.build([[0, 0], [1, 2, 3]])


@pytest.mark.parametrize("metric", ["euclidean", "cosine"])
@pytest.mark.parametrize("bad", [float("nan"), float("inf")])
def test_non_finite_vector_raises(metric, bad):
    with pytest.raises(DistanceComputationError):
        DistanceMatrix.build([[1, 0], [bad, 1]], metric)


def test_zero_length_vectors_rejected():
    with pytest.raises(ShapeMismatchError):
        DistanceMatrix.build([[], []])


def test_single_point():
    matrix = DistanceMatrix.build([[1, 2, 3]])
    assert matrix.size == 1
    assert matrix.at(0, 0) == 0
    assert matrix.stats() == {"n_points": 1, "min": 0.0, "max": 0.0, "mean": 0.0}


def test_stats():
    matrix = DistanceMatrix.build([[0, 0], [3, 4], [6, 8]])
    stats = matrix.stats()
    assert stats["min"] == 5.0
    assert stats["max"] == 10.0
    assert stats["mean"] == pytest.approx(6.6667, abs=1e-4)


def test_to_dataframe():
    matrix = DistanceMatrix.build([[0, 0], [3, 4]])
    df = matrix.to_dataframe(["ana", "ben"])
    assert list(df.columns) == ["ana", "ben"]
    assert df.loc["ana", "ben"] == 5.0

    with pytest.raises(ShapeMismatchError):
        matrix.to_dataframe(["only_one"])


def test_from_array():
    matrix = DistanceMatrix.from_array([[0, 2], [2, 0]])
    assert matrix.at(0, 1) == 2.0
    assert matrix.metric_name == "precomputed"


@pytest.mark.parametrize(
    "values, error",
    [
        ([[0, 1, 2], [1, 0, 3]], ShapeMismatchError),
        ([[0, 1], [2, 0]], ShapeMismatchError),
        ([[1, 1], [1, 0]], ShapeMismatchError),
        ([[0, -1], [-1, 0]], DistanceComputationError),
        ([[0, np.inf], [np.inf, 0]], DistanceComputationError),
        ([], InvalidInputError),
    ],
)
def test_from_array_validation(values, error):
    with pytest.raises(error):
        DistanceMatrix.from_array(values)
