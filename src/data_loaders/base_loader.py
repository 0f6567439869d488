"""
Base class for freelancer data loaders with column mapping and vector validation.
"""

from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Generator, List, Optional, Union

import numpy as np
import pandas as pd

from .utils import normalize_vector, parse_skills, parse_vector


Column = Union[str, int]


@dataclass
class SpreadsheetMapping:
    """Which columns hold the freelancer name, skill vector and skill keywords."""

    # Column name, or 0-based column position
    name: Column = 0
    vector: Optional[Column] = 1
    skills: Optional[Column] = 2

    # Separators inside a cell
    vector_separator: str = ","
    skills_separator: str = ","

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, excluding unmapped columns."""
        result = {
            "name": self.name,
            "vector": self.vector,
            "skills": self.skills,
        }
        return {k: v for k, v in result.items() if v is not None}


@dataclass
class FreelancerRecord:
    """One freelancer row after mapping."""

    name: str
    vector: Optional[List[float]] = None
    skills: List[str] = field(default_factory=list)
    row: int = 0


@dataclass
class LoadStats:
    """Statistics collected while loading freelancer rows."""

    total_rows: int = 0
    loaded: int = 0
    dimension: Optional[int] = None
    skipped_reasons: Counter = field(default_factory=Counter)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_rows": self.total_rows,
            "loaded": self.loaded,
            "dimension": self.dimension,
            "skipped": dict(self.skipped_reasons),
        }

    def print_report(self) -> str:
        """Generate a human-readable report."""
        lines = [
            "=" * 60,
            "FREELANCER LOAD REPORT",
            "=" * 60,
            f"  Rows read: {self.total_rows}",
            f"  Rows loaded: {self.loaded}",
            f"  Vector dimension: {self.dimension}",
        ]
        if self.skipped_reasons:
            lines.append("")
            lines.append("SKIPPED ROWS")
            lines.append("-" * 40)
            for reason, count in self.skipped_reasons.most_common():
                lines.append(f"  {reason}: {count}")
        return "\n".join(lines)


@dataclass
class FreelancerDataset:
    """Vectors ready for clustering, with names in the same order."""

    ids: List[str]
    vectors: np.ndarray
    records: List[FreelancerRecord] = field(default_factory=list)
    stats: LoadStats = field(default_factory=LoadStats)

    def __len__(self) -> int:
        return len(self.ids)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame({
            "id": self.ids,
            "vector": [list(v) for v in self.vectors],
        })


class BaseFreelancerLoader(ABC):
    """
    Abstract base class for loading freelancer rows from various sources.

    Subclasses must implement:
        - _load_frame(): Load the raw table as a DataFrame
    """

    def __init__(
        self,
        mapping: Optional[SpreadsheetMapping] = None,
        expected_dimension: Optional[int] = None,
        normalize: bool = False,
    ):
        """
        Initialize the loader.

        Args:
            mapping: Column mapping (defaults to name, vector, skills in columns 0-2)
            expected_dimension: Keep only vectors of this length. If None, the
                                first valid vector fixes the dimension.
            normalize: Scale every vector to unit length
        """
        self.mapping = mapping or SpreadsheetMapping()
        self.expected_dimension = expected_dimension
        self.normalize = normalize

    @abstractmethod
    def _load_frame(self) -> pd.DataFrame:
        """Load the raw table. Must be implemented by subclasses."""
        pass

    def _cell(self, row: pd.Series, column: Optional[Column]) -> Any:
        if column is None:
            return None
        if isinstance(column, int):
            return row.iloc[column] if column < len(row) else None
        return row.get(column)

    def _iterate_records(self, frame: pd.DataFrame) -> Generator[FreelancerRecord, None, None]:
        """Map every row to a FreelancerRecord (vector may be None)."""
        for position, (_, row) in enumerate(frame.iterrows()):
            name = self._cell(row, self.mapping.name)
            name = "" if name is None or pd.isna(name) else str(name).strip()

            yield FreelancerRecord(
                name=name,
                vector=parse_vector(
                    self._cell(row, self.mapping.vector),
                    self.mapping.vector_separator,
                ),
                skills=parse_skills(
                    self._cell(row, self.mapping.skills),
                    self.mapping.skills_separator,
                ),
                row=position,
            )

    def load(self) -> List[FreelancerRecord]:
        """Load all rows, with or without a valid vector."""
        return list(self._iterate_records(self._load_frame()))

    def load_vectors(self) -> FreelancerDataset:
        """
        Load rows that have a usable vector.

        Rows without a name, without a parseable vector, or whose vector
        length differs from the run's dimension are skipped and counted.
        """
        stats = LoadStats(dimension=self.expected_dimension)
        kept: List[FreelancerRecord] = []

        for record in self.load():
            stats.total_rows += 1

            if not record.name:
                stats.skipped_reasons["missing_name"] += 1
                continue
            if record.vector is None:
                stats.skipped_reasons["missing_or_invalid_vector"] += 1
                continue
            if stats.dimension is None:
                stats.dimension = len(record.vector)
            if len(record.vector) != stats.dimension:
                stats.skipped_reasons["wrong_dimension"] += 1
                continue

            if self.normalize:
                record.vector = normalize_vector(record.vector)
            kept.append(record)

        stats.loaded = len(kept)
        if stats.skipped_reasons:
            skipped = sum(stats.skipped_reasons.values())
            print(f"Warning: skipped {skipped} of {stats.total_rows} rows: {dict(stats.skipped_reasons)}")

        vectors = np.array([r.vector for r in kept], dtype=float)
        if not kept:
            vectors = np.zeros((0, stats.dimension or 0))

        return FreelancerDataset(
            ids=[r.name for r in kept],
            vectors=vectors,
            records=kept,
            stats=stats,
        )

    def load_skills(self) -> Dict[str, List[str]]:
        """Freelancer name -> skill keywords, for rows that list any skills."""
        return {
            record.name: record.skills
            for record in self.load()
            if record.name and record.skills
        }

    def load_as_dataframe(self) -> pd.DataFrame:
        """Load mapped rows as a pandas DataFrame."""
        records = self.load()
        return pd.DataFrame([
            {"name": r.name, "vector": r.vector, "skills": r.skills}
            for r in records
        ])

    def sample(self, n: int = 5) -> List[FreelancerRecord]:
        """Load a sample of rows for inspection."""
        records = []
        for i, record in enumerate(self._iterate_records(self._load_frame())):
            if i >= n:
                break
            records.append(record)
        return records

    def count_records(self) -> int:
        """Count total number of rows."""
        return len(self._load_frame())
