"""
Configuration for Freelancer Skill Clustering

This file has THREE parts:
1. FREELANCER_MAPPING - Which spreadsheet columns hold name, vector, skills
2. AGNES_SETTINGS - Default clustering settings for run_clustering.py
3. OUTPUT_CONFIG - Where results are written

WORKFLOW:
1. Put the freelancer spreadsheet at DATA_CONFIG["data_path"]
2. Edit FREELANCER_MAPPING below if your columns differ
3. Run: python run_clustering.py --k 3
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from src.agnes import ClusteringConfig
from src.data_loaders import SpreadsheetMapping


# =============================================================================
# PART 1: COLUMN MAPPING
# =============================================================================
# Column names, or 0-based column positions.

FREELANCER_MAPPING = SpreadsheetMapping(
    name=0,        # Freelancer name
    vector=1,      # Comma-separated skill scores
    skills=2,      # Comma-separated skill keywords (optional)
)

DATA_CONFIG = {
    "data_path": "Freelancers.xlsx",
    "sheet_name": 0,
    "encoding": "utf-8",
}


# =============================================================================
# PART 2: CLUSTERING SETTINGS
# =============================================================================

@dataclass
class AgnesSettings:
    """Default settings for a clustering run."""

    # "complete" or "average"
    linkage: str = "complete"

    # "euclidean" or "cosine"
    metric: str = "euclidean"

    # Target cluster count; None merges down to one cluster
    k: Optional[int] = 3

    # Candidate k values for --optimal-k
    k_values: List[int] = field(default_factory=lambda: [2, 3, 4, 5])

    # Scale vectors to unit length before clustering
    normalize: bool = False

    # Keep only vectors of this length (None: first valid row decides)
    expected_dimension: Optional[int] = None

    # Zero vectors raise instead of counting as orthogonal (cosine only)
    strict_cosine: bool = False

    # Guards against runaway runs on large inputs
    max_iterations: Optional[int] = None
    deadline_seconds: Optional[float] = None

    def to_clustering_config(self, **overrides: Any) -> ClusteringConfig:
        """Build the per-run ClusteringConfig, applying overrides."""
        values = {
            "linkage": self.linkage,
            "metric": self.metric,
            "n_clusters": self.k,
            "strict_cosine": self.strict_cosine,
            "max_iterations": self.max_iterations,
            "deadline_seconds": self.deadline_seconds,
        }
        values.update(overrides)
        return ClusteringConfig(**values)

    def validate(self) -> Dict[str, List[str]]:
        """Validate settings without running anything."""
        errors = []
        warnings = []

        if self.linkage not in ("complete", "average"):
            errors.append(f"linkage '{self.linkage}' must be 'complete' or 'average'")

        if self.metric not in ("euclidean", "cosine"):
            errors.append(f"metric '{self.metric}' must be 'euclidean' or 'cosine'")

        if self.k is not None and self.k < 1:
            errors.append(f"k must be >= 1, got {self.k}")

        bad_k = [k for k in self.k_values if k < 1]
        if bad_k:
            errors.append(f"k_values must all be >= 1, got {bad_k}")

        if self.metric == "euclidean" and self.strict_cosine:
            warnings.append("strict_cosine has no effect with the euclidean metric")

        if self.normalize and self.metric == "cosine":
            warnings.append("normalize has no effect on cosine distances")

        return {"errors": errors, "warnings": warnings}


# ----- YOUR CLUSTERING SETTINGS -----

AGNES_SETTINGS = AgnesSettings(
    linkage="complete",
    metric="euclidean",
    k=3,
    k_values=[2, 3, 4, 5],
    normalize=True,
    expected_dimension=25,
)


# =============================================================================
# PART 3: OUTPUT CONFIGURATION
# =============================================================================

OUTPUT_CONFIG = {
    "root_dir": "clustering_output",
    "clustering": "agnes",
    "optimal_k": "optimal_k",
}


def get_output_path(*subdirs: str) -> Path:
    """
    Get output path relative to the configured root directory.

    Usage:
        from config import get_output_path

        root = get_output_path()
        run_dir = get_output_path("agnes", "k3_complete")
    """
    root = Path(OUTPUT_CONFIG["root_dir"])

    if subdirs:
        return root.joinpath(*subdirs)
    return root
