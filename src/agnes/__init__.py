"""
AGNES Clustering Engine

This module provides:
- Distance metrics (Euclidean, cosine-as-distance)
- A shared, read-only pairwise DistanceMatrix
- Linkage strategies (complete, average)
- The agglomerative clusterer with target-k / single-cluster stopping
"""

from .exceptions import (
    AgnesError,
    ShapeMismatchError,
    DegenerateVectorError,
    InvalidInputError,
    InvalidParameterError,
    DistanceComputationError,
    ResourceExceededError,
)
from .metrics import DistanceMetric, EuclideanDistance, CosineDistance, get_metric
from .distance_matrix import DistanceMatrix
from .linkage import Linkage, LinkageStrategy, CompleteLinkage, AverageLinkage, get_linkage
from .clusterer import (
    AgglomerativeClusterer,
    ClusteringConfig,
    ClusteringResult,
    MergeStep,
    StopCriterion,
    cluster,
)

__all__ = [
    # Errors
    "AgnesError",
    "ShapeMismatchError",
    "DegenerateVectorError",
    "InvalidInputError",
    "InvalidParameterError",
    "DistanceComputationError",
    "ResourceExceededError",
    # Metrics
    "DistanceMetric",
    "EuclideanDistance",
    "CosineDistance",
    "get_metric",
    # Matrix
    "DistanceMatrix",
    # Linkage
    "Linkage",
    "LinkageStrategy",
    "CompleteLinkage",
    "AverageLinkage",
    "get_linkage",
    # Clustering
    "AgglomerativeClusterer",
    "ClusteringConfig",
    "ClusteringResult",
    "MergeStep",
    "StopCriterion",
    "cluster",
]
