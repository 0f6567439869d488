"""Shared fixtures for AGNES tests."""

import numpy as np
import pytest


@pytest.fixture
def two_pairs():
    """Two tight pairs far apart."""
    return [[0, 0], [0, 1], [5, 5], [5, 6]]


@pytest.fixture
def three_blobs():
    """Nine points in three well-separated groups of three."""
    return [
        [0, 0], [0, 1], [1, 0],
        [10, 10], [10, 11], [11, 10],
        [20, 0], [20, 1], [21, 0],
    ]


@pytest.fixture
def random_vectors():
    """Reproducible random skill scores (12 freelancers, 5 skills)."""
    rng = np.random.default_rng(42)
    return rng.random((12, 5)).tolist()
