"""
Utility functions for turning spreadsheet cells into vectors and skill lists.
"""

import math
from typing import Any, List, Optional

import numpy as np


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def parse_vector(value: Any, separator: str = ",") -> Optional[List[float]]:
    """
    Parse a vector cell.

    Args:
        value: "0.5, 1, 0" string, a list of numbers, or a single number
        separator: Separator between numbers in string cells

    Returns:
        List of floats, or None if the cell is empty or not numeric

    Example:
        >>> parse_vector("1, 0.5,2")
        [1.0, 0.5, 2.0]
    """
    if _is_missing(value):
        return None

    if isinstance(value, (list, tuple, np.ndarray)):
        parts = list(value)
    elif isinstance(value, str):
        parts = [p.strip() for p in value.split(separator)]
    else:
        parts = [value]

    try:
        vector = [float(p) for p in parts]
    except (TypeError, ValueError):
        return None

    if not all(math.isfinite(v) for v in vector):
        return None
    return vector


def parse_skills(value: Any, separator: str = ",") -> List[str]:
    """
    Parse a skills cell into lowercase, de-duplicated skill names.

    List cells may hold plain strings or objects with a "name" key
    (e.g. [{"name": "Logo"}, {"name": "Web"}] from a linked-record field).

    Example:
        >>> parse_skills("Web Design, logo, Logo")
        ["web design", "logo"]
    """
    if _is_missing(value):
        return []

    if isinstance(value, (list, tuple)):
        parts = [str(p.get("name") or "") if isinstance(p, dict) else str(p) for p in value]
    else:
        parts = str(value).split(separator)

    skills = []
    for part in parts:
        skill = part.strip().lower()
        if skill and skill not in skills:
            skills.append(skill)
    return skills


def normalize_vector(vector: List[float]) -> List[float]:
    """
    Scale a vector to unit length.

    A zero vector is returned unchanged; it has no direction to keep.
    """
    norm = float(np.linalg.norm(vector))
    if norm == 0:
        return list(vector)
    return [v / norm for v in vector]
