"""
Cluster quality evaluation for AGNES results.

The silhouette score is computed on the same DistanceMatrix the clusterer
used, so clustering and evaluation always agree on the metric and no
distance is computed twice.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np

from ..agnes import (
    AgglomerativeClusterer,
    ClusteringResult,
    DistanceMatrix,
    DistanceMetric,
    InvalidParameterError,
    Linkage,
    LinkageStrategy,
)


def _silhouette_defined(n_points: int, n_clusters: int) -> bool:
    return 2 <= n_clusters <= n_points - 1


def silhouette(
    result: ClusteringResult,
    matrix: Optional[DistanceMatrix] = None,
) -> Optional[float]:
    """
    Mean silhouette coefficient of a clustering result.

    Args:
        result: ClusteringResult from AgglomerativeClusterer
        matrix: Distance matrix to score against (defaults to result.matrix)

    Returns:
        Score in [-1, 1], or None when the score is undefined
        (fewer than 2 clusters, or every point in its own cluster)
    """
    try:
        from sklearn.metrics import silhouette_score
    except ImportError:
        raise ImportError("scikit-learn required. Install with: pip install scikit-learn")

    matrix = matrix if matrix is not None else result.matrix
    if matrix is None:
        raise InvalidParameterError("No distance matrix to score against")

    if not _silhouette_defined(matrix.size, result.n_clusters):
        return None

    return float(silhouette_score(matrix.as_array(), result.labels, metric="precomputed"))


def silhouette_per_cluster(
    result: ClusteringResult,
    matrix: Optional[DistanceMatrix] = None,
) -> Dict[int, float]:
    """Mean silhouette coefficient of each cluster's members."""
    try:
        from sklearn.metrics import silhouette_samples
    except ImportError:
        raise ImportError("scikit-learn required. Install with: pip install scikit-learn")

    matrix = matrix if matrix is not None else result.matrix
    if matrix is None:
        raise InvalidParameterError("No distance matrix to score against")

    if not _silhouette_defined(matrix.size, result.n_clusters):
        return {}

    samples = silhouette_samples(matrix.as_array(), result.labels, metric="precomputed")
    return {
        label: round(float(np.mean(samples[members])), 4)
        for label, members in enumerate(result.clusters)
    }


@dataclass
class OptimalKResult:
    """Outcome of a silhouette-driven search over k."""

    best_k: Optional[int]
    best_score: Optional[float]

    # k -> silhouette (None where undefined)
    scores: Dict[int, Optional[float]] = field(default_factory=dict)

    results: Dict[int, ClusteringResult] = field(default_factory=dict)

    def best_result(self) -> Optional[ClusteringResult]:
        return self.results.get(self.best_k) if self.best_k is not None else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "best_k": self.best_k,
            "best_score": round(self.best_score, 4) if self.best_score is not None else None,
            "scores": {
                k: round(s, 4) if s is not None else None
                for k, s in self.scores.items()
            },
        }


def find_optimal_k(
    vectors: Optional[Sequence[Sequence[float]]] = None,
    k_values: Sequence[int] = (2, 3, 4, 5),
    metric: Union[str, DistanceMetric] = "euclidean",
    linkage: Union[str, Linkage, LinkageStrategy] = Linkage.COMPLETE,
    ids: Optional[Sequence[str]] = None,
    matrix: Optional[DistanceMatrix] = None,
    clusterer: Optional[AgglomerativeClusterer] = None,
    show_progress: bool = False,
) -> OptimalKResult:
    """
    Cluster once per candidate k and keep the k with the best silhouette.

    The distance matrix is built once and shared by every run. Ties keep
    the first k in `k_values` order.

    Args:
        vectors: Vectors to cluster (ignored when `matrix` is given)
        k_values: Candidate cluster counts
        metric: Metric used to build the matrix
        linkage: Linkage strategy
        ids: Identifier per vector
        matrix: Prebuilt distance matrix
        clusterer: Clusterer to use (carries iteration/deadline guards)
        show_progress: Print each k and its score

    Returns:
        OptimalKResult
    """
    if not k_values:
        raise InvalidParameterError("k_values must not be empty")

    if matrix is None:
        if vectors is None:
            raise InvalidParameterError("Pass either vectors or a distance matrix")
        matrix = DistanceMatrix.build(vectors, metric)

    clusterer = clusterer or AgglomerativeClusterer()

    scores: Dict[int, Optional[float]] = {}
    results: Dict[int, ClusteringResult] = {}
    best_k, best_score = None, None

    for k in k_values:
        result = clusterer.cluster_matrix(matrix, linkage, k, ids=ids)
        score = silhouette(result, matrix)
        result.silhouette_score = score

        scores[k] = score
        results[k] = result

        if show_progress:
            shown = f"{score:.4f}" if score is not None else "N/A"
            print(f"  k={k}: {result.n_clusters} clusters, silhouette={shown}")

        if score is not None and (best_score is None or score > best_score):
            best_k, best_score = k, score

    return OptimalKResult(
        best_k=best_k,
        best_score=best_score,
        scores=scores,
        results=results,
    )
