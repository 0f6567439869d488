"""
AGNES: agglomerative (bottom-up) hierarchical clustering.

One engine covers every variant of the freelancer clustering runs: the
distance metric, the linkage strategy and the stopping rule are injected,
never selected by branching on a string inside the loop.

Algorithm:
1. Start with one singleton cluster per point, in index order.
2. Scan every unordered pair of clusters (ascending first slot, then
   ascending second slot) and keep the strictly closest pair. On exact
   ties the first pair scanned wins, so runs are reproducible.
3. Merge the second slot into the first; the first keeps its position.
4. Repeat until the partition has k clusters.
"""

import json
import math
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .distance_matrix import DistanceMatrix
from .exceptions import (
    DistanceComputationError,
    InvalidInputError,
    InvalidParameterError,
    ResourceExceededError,
    ShapeMismatchError,
)
from .linkage import Linkage, LinkageStrategy, get_linkage
from .metrics import CosineDistance, DistanceMetric, get_metric


SINGLE = "single"


@dataclass(frozen=True)
class StopCriterion:
    """Stop merging once the partition has `k` clusters."""

    k: int = 1

    def __post_init__(self):
        if isinstance(self.k, bool) or not isinstance(self.k, (int, np.integer)):
            raise InvalidParameterError(f"k must be an integer, got {self.k!r}")
        if self.k < 1:
            raise InvalidParameterError(f"k must be >= 1, got {self.k}")

    @classmethod
    def target(cls, k: int) -> "StopCriterion":
        return cls(k=k)

    @classmethod
    def single(cls) -> "StopCriterion":
        return cls(k=1)

    @classmethod
    def from_value(cls, value: Union[int, str, "StopCriterion", None]) -> "StopCriterion":
        """Accept a StopCriterion, an integer k, "single", or None (single)."""
        if isinstance(value, StopCriterion):
            return value
        if value is None or value == SINGLE:
            return cls.single()
        return cls(k=value)

    @property
    def is_single(self) -> bool:
        return self.k == 1

    def is_met(self, n_clusters: int) -> bool:
        return n_clusters <= self.k

    def __str__(self) -> str:
        return SINGLE if self.is_single else f"k={self.k}"


@dataclass
class ClusteringConfig:
    """Configuration for one AGNES run."""

    linkage: str = Linkage.COMPLETE.value
    metric: str = "euclidean"

    # Target cluster count; None merges down to a single cluster
    n_clusters: Optional[int] = None

    # Raise on zero-magnitude vectors instead of treating them as orthogonal
    strict_cosine: bool = False

    # Optional guards
    max_iterations: Optional[int] = None
    deadline_seconds: Optional[float] = None

    # Experiment metadata
    experiment_id: Optional[str] = None
    description: Optional[str] = None

    def stop_criterion(self) -> StopCriterion:
        return StopCriterion.from_value(self.n_clusters)

    def get_metric(self) -> DistanceMetric:
        if str(self.metric).lower() == CosineDistance.name:
            return CosineDistance(strict=self.strict_cosine)
        return get_metric(self.metric)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClusteringConfig":
        return cls(**data)


@dataclass
class MergeStep:
    """One merge performed by the clusterer."""

    iteration: int
    slot_a: int
    slot_b: int
    cluster_a: List[int]
    cluster_b: List[int]
    distance: float
    n_clusters_after: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ClusteringResult:
    """Final partition plus merge history of an AGNES run."""

    # Index lists, in partition (merge history) order
    clusters: List[List[int]]

    # Identifiers in the same order as the input vectors
    ids: List[str]

    merges: List[MergeStep] = field(default_factory=list)
    linkage: str = Linkage.COMPLETE.value
    stop: str = SINGLE

    # Shared with evaluation so both use the same distances
    matrix: Optional[DistanceMatrix] = None

    silhouette_score: Optional[float] = None
    config: Optional[ClusteringConfig] = None
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def n_clusters(self) -> int:
        return len(self.clusters)

    @property
    def n_points(self) -> int:
        return sum(len(c) for c in self.clusters)

    @property
    def labels(self) -> np.ndarray:
        """Cluster label per point: the position of its cluster in the partition."""
        labels = np.full(self.n_points, -1, dtype=int)
        for label, members in enumerate(self.clusters):
            labels[members] = label
        return labels

    @property
    def cluster_sizes(self) -> Dict[int, int]:
        return {label: len(members) for label, members in enumerate(self.clusters)}

    @property
    def merge_distances(self) -> List[float]:
        return [m.distance for m in self.merges]

    def as_sets(self) -> List[frozenset]:
        return [frozenset(c) for c in self.clusters]

    def get_cluster_ids(self, cluster_label: int) -> List[str]:
        """Identifiers of the points in one cluster."""
        return [self.ids[i] for i in self.clusters[cluster_label]]

    def get_assignments_df(self) -> pd.DataFrame:
        """Cluster assignments as DataFrame, in input order."""
        return pd.DataFrame({
            "id": self.ids,
            "cluster": self.labels,
        })

    def to_dict(self) -> Dict[str, Any]:
        return {
            "n_clusters": self.n_clusters,
            "n_points": self.n_points,
            "linkage": self.linkage,
            "stop": self.stop,
            "silhouette_score": self.silhouette_score,
            "cluster_sizes": self.cluster_sizes,
            "config": self.config.to_dict() if self.config else None,
            "timestamp": self.timestamp,
        }

    def save(self, output_dir: str) -> None:
        """Save clustering results to files."""
        path = Path(output_dir)
        path.mkdir(parents=True, exist_ok=True)

        self.get_assignments_df().to_csv(path / "cluster_assignments.csv", index=False)

        with open(path / "clusters.json", "w") as f:
            json.dump({
                "clusters": self.clusters,
                "merges": [m.to_dict() for m in self.merges],
            }, f, indent=2)

        if self.matrix is not None:
            np.save(path / "distance_matrix.npy", self.matrix.as_array())

        with open(path / "clustering_metadata.json", "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, output_dir: str) -> "ClusteringResult":
        """Load clustering results from files."""
        path = Path(output_dir)

        assignments_df = pd.read_csv(
            path / "cluster_assignments.csv",
            dtype={"id": str},
            keep_default_na=False,
        )
        ids = assignments_df["id"].tolist()

        with open(path / "clusters.json", "r") as f:
            partition = json.load(f)

        with open(path / "clustering_metadata.json", "r") as f:
            metadata = json.load(f)

        matrix = None
        if (path / "distance_matrix.npy").exists():
            matrix = DistanceMatrix.from_array(
                np.load(path / "distance_matrix.npy"),
                metric_name=(metadata.get("config") or {}).get("metric"),
            )

        config = None
        if metadata.get("config"):
            config = ClusteringConfig.from_dict(metadata["config"])

        return cls(
            clusters=partition["clusters"],
            ids=ids,
            merges=[MergeStep(**m) for m in partition.get("merges", [])],
            linkage=metadata.get("linkage", Linkage.COMPLETE.value),
            stop=metadata.get("stop", SINGLE),
            matrix=matrix,
            silhouette_score=metadata.get("silhouette_score"),
            config=config,
            timestamp=metadata.get("timestamp", ""),
        )


MergeCallback = Callable[[MergeStep, List[List[int]]], None]


class AgglomerativeClusterer:
    """
    Bottom-up hierarchical clustering over a shared DistanceMatrix.

    Each iteration evaluates O(m^2) cluster pairs (m = current cluster
    count), each pair up to O(n^2) matrix reads, so the worst case is
    O(n^4). That is fine for tens to low hundreds of freelancers; larger
    inputs should set `max_iterations` or `deadline_seconds`.
    """

    def __init__(
        self,
        max_iterations: Optional[int] = None,
        deadline_seconds: Optional[float] = None,
    ):
        """
        Args:
            max_iterations: Abort with ResourceExceededError after this many merges
            deadline_seconds: Abort with ResourceExceededError after this much wall time
        """
        if max_iterations is not None and max_iterations < 0:
            raise InvalidParameterError(f"max_iterations must be >= 0, got {max_iterations}")
        if deadline_seconds is not None and deadline_seconds <= 0:
            raise InvalidParameterError(f"deadline_seconds must be > 0, got {deadline_seconds}")

        self.max_iterations = max_iterations
        self.deadline_seconds = deadline_seconds

    @classmethod
    def from_config(cls, config: ClusteringConfig) -> "AgglomerativeClusterer":
        return cls(
            max_iterations=config.max_iterations,
            deadline_seconds=config.deadline_seconds,
        )

    def cluster(
        self,
        vectors: Sequence[Sequence[float]],
        metric: Union[str, DistanceMetric] = "euclidean",
        linkage: Union[str, Linkage, LinkageStrategy] = Linkage.COMPLETE,
        stop: Union[int, str, StopCriterion, None] = None,
        ids: Optional[Sequence[str]] = None,
        on_merge: Optional[MergeCallback] = None,
    ) -> ClusteringResult:
        """
        Build the distance matrix and cluster the vectors.

        Args:
            vectors: n vectors of equal length
            metric: Metric name or DistanceMetric
            linkage: "complete", "average", or a LinkageStrategy
            stop: Target k, "single"/None, or a StopCriterion
            ids: Identifier per vector (defaults to "0".."n-1")
            on_merge: Called after every merge with the step and a copy of the partition

        Returns:
            ClusteringResult (the matrix is attached for reuse by evaluation)
        """
        strategy = get_linkage(linkage)
        criterion = StopCriterion.from_value(stop)
        matrix = DistanceMatrix.build(vectors, get_metric(metric))
        return self.cluster_matrix(matrix, strategy, criterion, ids=ids, on_merge=on_merge)

    def cluster_matrix(
        self,
        matrix: DistanceMatrix,
        linkage: Union[str, Linkage, LinkageStrategy] = Linkage.COMPLETE,
        stop: Union[int, str, StopCriterion, None] = None,
        ids: Optional[Sequence[str]] = None,
        on_merge: Optional[MergeCallback] = None,
    ) -> ClusteringResult:
        """Cluster a prebuilt DistanceMatrix. Same arguments as `cluster`."""
        strategy = get_linkage(linkage)
        criterion = StopCriterion.from_value(stop)

        n = matrix.size
        if n == 0:
            raise InvalidInputError("No vectors to cluster")
        if ids is None:
            ids = [str(i) for i in range(n)]
        ids = [str(i) for i in ids]
        if len(ids) != n:
            raise ShapeMismatchError(f"Got {len(ids)} ids for {n} vectors")

        clusters: List[List[int]] = [[i] for i in range(n)]
        merges: List[MergeStep] = []
        started = time.monotonic()

        while not criterion.is_met(len(clusters)):
            iteration = len(merges) + 1
            self._check_guards(iteration, started)

            slot_a, slot_b, distance = self._closest_pair(clusters, matrix, strategy)

            step = MergeStep(
                iteration=iteration,
                slot_a=slot_a,
                slot_b=slot_b,
                cluster_a=list(clusters[slot_a]),
                cluster_b=list(clusters[slot_b]),
                distance=distance,
                n_clusters_after=len(clusters) - 1,
            )
            clusters[slot_a] = clusters[slot_a] + clusters[slot_b]
            del clusters[slot_b]
            merges.append(step)

            if on_merge is not None:
                on_merge(step, [list(c) for c in clusters])

        return ClusteringResult(
            clusters=clusters,
            ids=ids,
            merges=merges,
            linkage=strategy.name,
            stop=str(criterion),
            matrix=matrix,
        )

    def run(
        self,
        vectors: Sequence[Sequence[float]],
        ids: Optional[Sequence[str]] = None,
        config: Optional[ClusteringConfig] = None,
    ) -> ClusteringResult:
        """Cluster using a ClusteringConfig."""
        if config is None:
            config = ClusteringConfig()

        result = self.cluster(
            vectors,
            metric=config.get_metric(),
            linkage=config.linkage,
            stop=config.stop_criterion(),
            ids=ids,
        )
        result.config = config
        return result

    def _check_guards(self, iteration: int, started: float) -> None:
        if self.max_iterations is not None and iteration > self.max_iterations:
            raise ResourceExceededError(
                f"Stop criterion not reached after {self.max_iterations} merges"
            )
        if self.deadline_seconds is not None:
            elapsed = time.monotonic() - started
            if elapsed > self.deadline_seconds:
                raise ResourceExceededError(
                    f"Deadline of {self.deadline_seconds}s exceeded after {iteration - 1} merges"
                )

    @staticmethod
    def _closest_pair(clusters, matrix, strategy):
        best_a, best_b = -1, -1
        best_distance = math.inf

        for i in range(len(clusters)):
            for j in range(i + 1, len(clusters)):
                d = strategy.inter_cluster_distance(clusters[i], clusters[j], matrix)
                if not math.isfinite(d):
                    raise DistanceComputationError(
                        f"Non-finite {strategy.name} linkage distance between clusters {i} and {j}"
                    )
                # Strict: the first pair scanned wins ties
                if d < best_distance:
                    best_distance = d
                    best_a, best_b = i, j

        return best_a, best_b, best_distance


def cluster(
    vectors: Sequence[Sequence[float]],
    metric: Union[str, DistanceMetric] = "euclidean",
    linkage: Union[str, Linkage, LinkageStrategy] = Linkage.COMPLETE,
    stop: Union[int, str, StopCriterion, None] = None,
    ids: Optional[Sequence[str]] = None,
) -> ClusteringResult:
    """
    Cluster vectors with AGNES.

    Example:
        result = cluster([[0, 0], [0, 1], [5, 5], [5, 6]], stop=2)
        result.clusters  # [[0, 1], [2, 3]]
    """
    return AgglomerativeClusterer().cluster(vectors, metric, linkage, stop, ids=ids)
