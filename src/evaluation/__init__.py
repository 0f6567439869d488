"""
Evaluation of AGNES clustering results.

- Silhouette scoring on the clusterer's own distance matrix
- Silhouette-driven search for the number of clusters
"""

from .silhouette import (
    silhouette,
    silhouette_per_cluster,
    find_optimal_k,
    OptimalKResult,
)

__all__ = [
    "silhouette",
    "silhouette_per_cluster",
    "find_optimal_k",
    "OptimalKResult",
]
