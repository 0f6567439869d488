"""
Pairwise distance metrics over fixed-length skill vectors.

Metrics are plain strategy objects: the clusterer never branches on a
metric name, it just calls `distance(a, b)`.
"""

from abc import ABC, abstractmethod
from typing import Dict, Sequence, Union

import numpy as np

from .exceptions import (
    DegenerateVectorError,
    InvalidParameterError,
    ShapeMismatchError,
)


def as_vector(values: Sequence[float]) -> np.ndarray:
    """Convert a sequence of numbers to a 1-D float array."""
    vector = np.asarray(values, dtype=float)
    if vector.ndim != 1:
        raise ShapeMismatchError(f"Expected a 1-D vector, got shape {vector.shape}")
    return vector


def _check_shapes(a: np.ndarray, b: np.ndarray) -> None:
    if a.shape != b.shape:
        raise ShapeMismatchError(
            f"Vector length mismatch: {a.shape[0]} vs {b.shape[0]}"
        )


class DistanceMetric(ABC):
    """
    Symmetric, non-negative distance between two vectors of equal length.

    Subclasses must implement:
        - _distance(): distance between two validated arrays
    """

    name: str = ""

    def distance(self, a: Sequence[float], b: Sequence[float]) -> float:
        """
        Distance between two vectors.

        Raises:
            ShapeMismatchError: if the vectors differ in length
        """
        a = as_vector(a)
        b = as_vector(b)
        _check_shapes(a, b)
        return self._distance(a, b)

    @abstractmethod
    def _distance(self, a: np.ndarray, b: np.ndarray) -> float:
        pass

    def __call__(self, a: Sequence[float], b: Sequence[float]) -> float:
        return self.distance(a, b)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class EuclideanDistance(DistanceMetric):
    """sqrt(sum((a_i - b_i)^2))"""

    name = "euclidean"

    def _distance(self, a: np.ndarray, b: np.ndarray) -> float:
        return float(np.linalg.norm(a - b))


class CosineDistance(DistanceMetric):
    """
    Cosine similarity turned into a distance: 1 - (a.b) / (|a| |b|).

    Cosine similarity is undefined for zero-magnitude vectors. By default
    such a vector is treated as unrelated to every other vector (distance
    1.0, i.e. orthogonal) so no NaN reaches the clusterer. Two identical
    vectors are always at distance 0.0.
    """

    name = "cosine"

    def __init__(self, strict: bool = False):
        """
        Args:
            strict: Raise DegenerateVectorError on zero-magnitude vectors
                    instead of returning 1.0
        """
        self.strict = strict

    def _distance(self, a: np.ndarray, b: np.ndarray) -> float:
        # NaN or inf components have no direction; let callers see a NaN
        if not (np.isfinite(a).all() and np.isfinite(b).all()):
            return float("nan")

        norm_a = np.linalg.norm(a)
        norm_b = np.linalg.norm(b)

        if norm_a == 0 or norm_b == 0:
            if self.strict:
                raise DegenerateVectorError(
                    "Cosine distance is undefined for a zero-magnitude vector"
                )
            return 0.0 if np.array_equal(a, b) else 1.0

        if np.array_equal(a, b):
            return 0.0

        similarity = float(np.dot(a, b) / (norm_a * norm_b))
        # Round-off can push |similarity| slightly past 1
        similarity = min(1.0, max(-1.0, similarity))
        return 1.0 - similarity

    def __repr__(self) -> str:
        return f"CosineDistance(strict={self.strict})"


METRICS: Dict[str, type] = {
    EuclideanDistance.name: EuclideanDistance,
    CosineDistance.name: CosineDistance,
}


def get_metric(metric: Union[str, DistanceMetric]) -> DistanceMetric:
    """
    Resolve a metric name (or pass through a metric instance).

    Args:
        metric: "euclidean", "cosine", or a DistanceMetric

    Returns:
        DistanceMetric instance
    """
    if isinstance(metric, DistanceMetric):
        return metric

    key = str(metric).lower()
    if key not in METRICS:
        raise InvalidParameterError(
            f"Unknown metric: {metric}. Available: {sorted(METRICS)}"
        )
    return METRICS[key]()
