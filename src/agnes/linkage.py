"""
Linkage strategies: distance between two clusters of points.

Both strategies read point-to-point distances from a shared
DistanceMatrix and cost O(|A| * |B|) per call. This is where the
clusterer spends most of its time.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Sequence, Union

from .distance_matrix import DistanceMatrix
from .exceptions import InvalidParameterError


class Linkage(str, Enum):
    """Supported linkage modes."""

    COMPLETE = "complete"
    AVERAGE = "average"


class LinkageStrategy(ABC):
    """Inter-cluster distance computed from a DistanceMatrix."""

    linkage: Linkage

    @abstractmethod
    def inter_cluster_distance(
        self,
        cluster_a: Sequence[int],
        cluster_b: Sequence[int],
        matrix: DistanceMatrix,
    ) -> float:
        pass

    @property
    def name(self) -> str:
        return self.linkage.value

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class CompleteLinkage(LinkageStrategy):
    """Maximum distance over all cross-cluster pairs."""

    linkage = Linkage.COMPLETE

    def inter_cluster_distance(self, cluster_a, cluster_b, matrix):
        return max(matrix.at(i, j) for i in cluster_a for j in cluster_b)


class AverageLinkage(LinkageStrategy):
    """Arithmetic mean over all cross-cluster pairs."""

    linkage = Linkage.AVERAGE

    def inter_cluster_distance(self, cluster_a, cluster_b, matrix):
        total = sum(matrix.at(i, j) for i in cluster_a for j in cluster_b)
        return float(total / (len(cluster_a) * len(cluster_b)))


LINKAGES: Dict[Linkage, type] = {
    Linkage.COMPLETE: CompleteLinkage,
    Linkage.AVERAGE: AverageLinkage,
}


def get_linkage(linkage: Union[str, Linkage, LinkageStrategy]) -> LinkageStrategy:
    """
    Resolve a linkage mode (or pass through a strategy instance).

    Args:
        linkage: "complete", "average", a Linkage, or a LinkageStrategy

    Returns:
        LinkageStrategy instance
    """
    if isinstance(linkage, LinkageStrategy):
        return linkage

    value = linkage.value if isinstance(linkage, Linkage) else str(linkage).lower()
    try:
        mode = Linkage(value)
    except ValueError:
        raise InvalidParameterError(
            f"Unknown linkage: {linkage}. Use one of {[m.value for m in Linkage]}"
        )
    return LINKAGES[mode]()
