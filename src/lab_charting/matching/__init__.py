"""
Patient name matching: normalization, similarity scoring, match decisions.
"""

from .name_normalizer import NameTokenTables, DEFAULT_NAME_TABLES, normalize_name
from .similarity import levenshtein_distance, align_part_counts, similarity_score
from .patient_matcher import PatientMatcher

__all__ = [
    "NameTokenTables",
    "DEFAULT_NAME_TABLES",
    "normalize_name",
    "levenshtein_distance",
    "align_part_counts",
    "similarity_score",
    "PatientMatcher",
]
