from .base_loader import (
    BaseFreelancerLoader,
    FreelancerDataset,
    FreelancerRecord,
    LoadStats,
    SpreadsheetMapping,
)
from .spreadsheet_loader import SpreadsheetLoader
from .records_loader import RecordsLoader
from .skill_encoder import SkillEncoder
from .utils import normalize_vector, parse_skills, parse_vector

__all__ = [
    "BaseFreelancerLoader",
    "FreelancerDataset",
    "FreelancerRecord",
    "LoadStats",
    "SpreadsheetMapping",
    "SpreadsheetLoader",
    "RecordsLoader",
    "SkillEncoder",
    "normalize_vector",
    "parse_skills",
    "parse_vector",
]
