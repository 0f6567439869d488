"""
Spreadsheet loader for reading freelancer rows from Excel or CSV files.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import pandas as pd

from .base_loader import BaseFreelancerLoader, SpreadsheetMapping


EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls"}
CSV_SUFFIXES = {".csv", ".txt"}


class SpreadsheetLoader(BaseFreelancerLoader):
    """
    Load freelancer rows from a spreadsheet.

    Expected layout (one row per freelancer, first row is the header):
    - name column, e.g. "Ana Lopez"
    - vector column, comma-separated scores, e.g. "0, 1, 0.5, ..."
    - skills column, comma-separated keywords, e.g. "logo, web design"
    """

    def __init__(
        self,
        data_path: Union[str, Path],
        sheet_name: Union[str, int] = 0,
        mapping: Optional[SpreadsheetMapping] = None,
        expected_dimension: Optional[int] = None,
        normalize: bool = False,
        encoding: str = "utf-8",
    ):
        """
        Initialize the spreadsheet loader.

        Args:
            data_path: Path to an .xlsx/.xls or .csv file
            sheet_name: Sheet name or position (Excel only, default: first sheet)
            mapping: Column mapping
            expected_dimension: Keep only vectors of this length
            normalize: Scale every vector to unit length
            encoding: File encoding (CSV only, default: "utf-8")
        """
        super().__init__(mapping, expected_dimension, normalize)
        self.data_path = Path(data_path)
        self.sheet_name = sheet_name
        self.encoding = encoding

        if not self.data_path.exists():
            raise FileNotFoundError(f"Data path does not exist: {self.data_path}")

        suffix = self.data_path.suffix.lower()
        if suffix not in EXCEL_SUFFIXES | CSV_SUFFIXES:
            raise ValueError(
                f"Unsupported file type '{suffix}'. Use one of "
                f"{sorted(EXCEL_SUFFIXES | CSV_SUFFIXES)}"
            )

    def _load_frame(self) -> pd.DataFrame:
        """Read the sheet with every cell as text."""
        if self.data_path.suffix.lower() in EXCEL_SUFFIXES:
            return pd.read_excel(self.data_path, sheet_name=self.sheet_name, dtype=str)
        return pd.read_csv(self.data_path, dtype=str, encoding=self.encoding)

    def get_file_stats(self) -> Dict[str, Any]:
        """Get statistics about the spreadsheet."""
        frame = self._load_frame()
        return {
            "file": self.data_path.name,
            "size_kb": round(self.data_path.stat().st_size / 1024, 2),
            "n_rows": len(frame),
            "columns": [str(c) for c in frame.columns],
        }
