"""
Precomputed pairwise distance matrix.

Built once per run from a metric and a vector set, then shared read-only
by the clusterer and by evaluation (silhouette) so both see exactly the
same distances.
"""

from typing import Dict, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .exceptions import (
    DistanceComputationError,
    InvalidInputError,
    ShapeMismatchError,
)
from .metrics import DistanceMetric, get_metric


def stack_vectors(vectors: Sequence[Sequence[float]]) -> np.ndarray:
    """
    Stack vectors into a read-only (n, d) float array.

    Raises:
        InvalidInputError: if there are no vectors
        ShapeMismatchError: if the vectors differ in length
    """
    if len(vectors) == 0:
        raise InvalidInputError("No vectors to cluster")

    rows = [np.asarray(v, dtype=float) for v in vectors]
    first = rows[0]
    if first.ndim != 1:
        raise ShapeMismatchError(f"Expected 1-D vectors, got shape {first.shape}")

    if first.size == 0:
        raise ShapeMismatchError("Vectors must have at least one component")

    for i, row in enumerate(rows):
        if row.shape != first.shape:
            raise ShapeMismatchError(
                f"Vector {i} has length {row.size}, expected {first.size}"
            )

    stacked = np.vstack(rows)
    stacked.setflags(write=False)
    return stacked


class DistanceMatrix:
    """
    Symmetric n x n table of non-negative distances with a zero diagonal.

    The triangle inequality is not assumed (cosine distance can violate it).
    """

    def __init__(self, values: np.ndarray, metric_name: Optional[str] = None):
        """
        Wrap an already validated square array. Use `build` or `from_array`.

        Args:
            values: (n, n) symmetric array with zero diagonal
            metric_name: Name of the metric that produced it (informational)
        """
        self._values = values
        self._values.setflags(write=False)
        self.metric_name = metric_name

    @classmethod
    def build(
        cls,
        vectors: Sequence[Sequence[float]],
        metric: Union[str, DistanceMetric] = "euclidean",
    ) -> "DistanceMatrix":
        """
        Compute all pairwise distances.

        Only the upper triangle (i < j) is evaluated; each value is mirrored
        into (j, i), so symmetry and the zero diagonal hold by construction.

        Args:
            vectors: n vectors of equal length
            metric: Metric name or DistanceMetric instance

        Returns:
            DistanceMatrix
        """
        metric = get_metric(metric)
        data = stack_vectors(vectors)
        n = data.shape[0]

        values = np.zeros((n, n), dtype=float)
        for i in range(n):
            for j in range(i + 1, n):
                d = metric.distance(data[i], data[j])
                if not np.isfinite(d):
                    raise DistanceComputationError(
                        f"Non-finite {metric.name} distance between points {i} and {j}: {d}"
                    )
                values[i, j] = d
                values[j, i] = d

        return cls(values, metric_name=metric.name)

    @classmethod
    def from_array(
        cls,
        values: Union[np.ndarray, Sequence[Sequence[float]]],
        metric_name: Optional[str] = "precomputed",
    ) -> "DistanceMatrix":
        """
        Validate and wrap a caller-supplied matrix.

        Raises:
            InvalidInputError: empty matrix
            ShapeMismatchError: not square, not symmetric, or non-zero diagonal
            DistanceComputationError: NaN, infinite or negative entries
        """
        array = np.array(values, dtype=float)
        if array.size == 0:
            raise InvalidInputError("Empty distance matrix")
        if array.ndim != 2 or array.shape[0] != array.shape[1]:
            raise ShapeMismatchError(f"Distance matrix must be square, got {array.shape}")
        if not np.all(np.isfinite(array)):
            raise DistanceComputationError("Distance matrix contains NaN or infinite values")
        if np.any(array < 0):
            raise DistanceComputationError("Distance matrix contains negative values")
        if not np.array_equal(array, array.T):
            raise ShapeMismatchError("Distance matrix is not symmetric")
        if np.any(np.diag(array) != 0):
            raise ShapeMismatchError("Distance matrix diagonal must be zero")

        return cls(array, metric_name=metric_name)

    @property
    def size(self) -> int:
        """Number of points."""
        return self._values.shape[0]

    def __len__(self) -> int:
        return self.size

    def at(self, i: int, j: int) -> float:
        """Distance between points i and j."""
        return float(self._values[i, j])

    def as_array(self) -> np.ndarray:
        """Read-only view of the underlying array."""
        return self._values

    def upper_triangle(self) -> np.ndarray:
        """Distances for all pairs i < j."""
        return self._values[np.triu_indices(self.size, k=1)]

    def stats(self) -> Dict[str, float]:
        """Min / max / mean distance over distinct pairs."""
        pairs = self.upper_triangle()
        if pairs.size == 0:
            return {"n_points": self.size, "min": 0.0, "max": 0.0, "mean": 0.0}

        return {
            "n_points": self.size,
            "min": round(float(pairs.min()), 4),
            "max": round(float(pairs.max()), 4),
            "mean": round(float(pairs.mean()), 4),
        }

    def to_dataframe(self, ids: Optional[List[str]] = None) -> pd.DataFrame:
        """Matrix as a DataFrame labelled with point identifiers."""
        if ids is None:
            ids = [str(i) for i in range(self.size)]
        if len(ids) != self.size:
            raise ShapeMismatchError(
                f"Got {len(ids)} ids for a {self.size}x{self.size} matrix"
            )
        return pd.DataFrame(self._values, index=ids, columns=ids)

    def __repr__(self) -> str:
        return f"DistanceMatrix(size={self.size}, metric={self.metric_name!r})"
