# ============================================================================
# src/lab_charting/constants/__init__.py
# ============================================================================
"""
Fixed lookup tables: parameter aliases, key sets, name tokens, chart defaults.
"""

from .lab_parameters import (
    METADATA_KEYS,
    STATIC_FIELD_ALIASES,
    JUNK_KEYS,
    JUNK_KEY_FRAGMENTS,
    INVALID_VALUE_PHRASES,
    INVALID_VALUES,
    NUMERIC_KEYS,
    PARAMETER_ALIASES,
    CULTURE_KEYS,
    GENERAL_KEYS,
    IGNORED_KEYS,
)
from .name_tokens import (
    NOISE_PHRASES,
    ORDINAL_TOKENS,
    RELATIONAL_PREFIXES,
    STANDALONE_TOKENS,
)
from .chart_defaults import (
    DEFAULT_CATEGORY,
    DEFAULT_ROW_LABELS,
    BLANK_STATIC_VALUES,
    ALTERNATE_COLUMN_START,
)
