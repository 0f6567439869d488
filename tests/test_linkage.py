"""
Tests for linkage strategies.
"""

import pytest

from src.agnes import (
    AverageLinkage,
    CompleteLinkage,
    DistanceMatrix,
    InvalidParameterError,
    Linkage,
    get_linkage,
)


@pytest.fixture
def line_matrix():
    """Points at 0, 1, 4 and 10 on a line."""
    return DistanceMatrix.build([[0], [1], [4], [10]])


@pytest.mark.parametrize("strategy", [CompleteLinkage(), AverageLinkage()])
def test_singletons_match_raw_matrix(strategy, random_vectors):
    matrix = DistanceMatrix.build(random_vectors, "cosine")
    for i in range(matrix.size):
        for j in range(matrix.size):
            if i != j:
                assert strategy.inter_cluster_distance([i], [j], matrix) == matrix.at(i, j)


def test_complete_is_max(line_matrix):
    assert CompleteLinkage().inter_cluster_distance([0, 1], [2, 3], line_matrix) == 10.0


def test_average_is_mean(line_matrix):
    # 4, 10, 3, 9
    assert AverageLinkage().inter_cluster_distance([0, 1], [2, 3], line_matrix) == 6.5


class RecordingMatrix(DistanceMatrix):
    """DistanceMatrix that records which cells were read."""

    def __init__(self, values):
        super().__init__(values)
        self.reads = []

    def at(self, i, j):
        self.reads.append((i, j))
        return super().at(i, j)


@pytest.mark.parametrize("strategy", [CompleteLinkage(), AverageLinkage()])
def test_reads_cross_pairs_through_at(strategy, line_matrix):
    matrix = RecordingMatrix(line_matrix.as_array().copy())
    strategy.inter_cluster_distance([0, 1], [2, 3], matrix)
    assert sorted(matrix.reads) == [(0, 2), (0, 3), (1, 2), (1, 3)]


def test_symmetric_in_cluster_order(line_matrix):
    for strategy in (CompleteLinkage(), AverageLinkage()):
        forward = strategy.inter_cluster_distance([0], [2, 3], line_matrix)
        backward = strategy.inter_cluster_distance([2, 3], [0], line_matrix)
        assert forward == backward


def test_get_linkage():
    assert isinstance(get_linkage("complete"), CompleteLinkage)
    assert isinstance(get_linkage("AVERAGE"), AverageLinkage)
    assert isinstance(get_linkage(Linkage.AVERAGE), AverageLinkage)

    strategy = CompleteLinkage()
    assert get_linkage(strategy) is strategy
    assert strategy.name == "complete"


@pytest.mark.parametrize("mode", ["single", "ward", ""])
def test_unknown_linkage(mode):
    with pytest.raises(InvalidParameterError, match="Unknown linkage"):
        get_linkage(mode)
