# ============================================================================
# src/lab_charting/constants/name_tokens.py
# ============================================================================
"""
Name Normalization Tables

Tokens stripped from patient names before fuzzy comparison. Neonatal
registries name babies after the mother ("B/O Priya Sharma") and mark
multiples with an ordinal ("Baby of Priya (2)"), so both must be removed
and the ordinal kept as a separate field.
"""

from typing import Tuple

# Subject lines often carry the report title
NOISE_PHRASES: Tuple[str, ...] = ("laboratory report",)

# Scanned in this order; the first token found wins
ORDINAL_TOKENS: Tuple[Tuple[str, int], ...] = (
    ("first", 1),
    ("1st", 1),
    ("(1)", 1),
    ("second", 2),
    ("2nd", 2),
    ("(2)", 2),
    ("third", 3),
    ("3rd", 3),
    ("(3)", 3),
)

# Removed wherever they occur (before symbol stripping, so "b/o" still matches)
RELATIONAL_PREFIXES: Tuple[str, ...] = ("b/o", "baby of")

# Removed only as whole words
STANDALONE_TOKENS: Tuple[str, ...] = ("baby", "mast", "miss")
