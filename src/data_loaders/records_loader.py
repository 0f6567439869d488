"""
Loader for freelancer records already in memory.

Used for rows fetched from an external table or API: the caller does the
fetching, this loader only maps and validates.
"""

from typing import Any, Callable, Dict, List, Optional

import pandas as pd

from .base_loader import BaseFreelancerLoader, SpreadsheetMapping


class RecordsLoader(BaseFreelancerLoader):
    """
    Load freelancer rows from a list of dicts.

    Skill cells may be lists of strings or lists of {"name": ...} objects.

    Example:
        loader = RecordsLoader(
            records=[{
                "preferredName": "Ana",
                "skillSets": [{"name": "Logo"}, {"name": "Web"}],
                "isFromClient": False,
            }],
            mapping=SpreadsheetMapping(name="preferredName", vector=None, skills="skillSets"),
            row_filter=lambda record: not record.get("isFromClient"),
        )
        skills = loader.load_skills()
    """

    def __init__(
        self,
        records: List[Dict[str, Any]],
        mapping: Optional[SpreadsheetMapping] = None,
        expected_dimension: Optional[int] = None,
        normalize: bool = False,
        row_filter: Optional[Callable[[Dict[str, Any]], bool]] = None,
    ):
        """
        Args:
            records: One dict per freelancer
            mapping: Column mapping; use key names, not positions
            expected_dimension: Keep only vectors of this length
            normalize: Scale every vector to unit length
            row_filter: Keep only records for which this returns True
        """
        super().__init__(mapping, expected_dimension, normalize)
        self.records = records
        self.row_filter = row_filter

    def _load_frame(self) -> pd.DataFrame:
        records = self.records
        if self.row_filter is not None:
            records = [r for r in records if self.row_filter(r)]
        return pd.DataFrame(records)
