# ============================================================================
# src/lab_charting/matching/name_normalizer.py
# ============================================================================
"""
Patient Name Normalization

Reduces a raw name (mail subject, attachment filename, or the name the
extraction model read off the report) to a canonical lower-case string
plus an optional multiples ordinal:

    "Baby of Mast. John (2nd)"  ->  NormalizedName("john", 2)
    "B/O Priya Sharma Twin 1st" ->  NormalizedName("priya sharma twin", 1)
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from ..constants import (
    NOISE_PHRASES,
    ORDINAL_TOKENS,
    RELATIONAL_PREFIXES,
    STANDALONE_TOKENS,
)
from ..core.context import NormalizedName

_NON_ALPHA = re.compile(r"[^a-z\s]")


@dataclass(frozen=True)
class NameTokenTables:
    noise_phrases: Tuple[str, ...] = NOISE_PHRASES
    ordinal_tokens: Tuple[Tuple[str, int], ...] = ORDINAL_TOKENS
    relational_prefixes: Tuple[str, ...] = RELATIONAL_PREFIXES
    standalone_tokens: Tuple[str, ...] = STANDALONE_TOKENS

    def standalone_pattern(self) -> re.Pattern:
        alternation = "|".join(re.escape(t) for t in self.standalone_tokens)
        return re.compile(rf"\b(?:{alternation})\b")


DEFAULT_NAME_TABLES = NameTokenTables()


def normalize_name(
    raw: Optional[str],
    tables: NameTokenTables = DEFAULT_NAME_TABLES
) -> NormalizedName:
    """
    Canonicalize a raw name and pull out its ordinal marker.

    Never raises; None or empty input gives NormalizedName("", None).
    """
    if not raw:
        return NormalizedName(canonical="", ordinal=None)

    s = raw.strip().lower()

    for phrase in tables.noise_phrases:
        s = s.replace(phrase, "")

    # At most one ordinal; only its first occurrence is removed
    ordinal = None
    for token, value in tables.ordinal_tokens:
        if token in s:
            ordinal = value
            s = s.replace(token, "", 1)
            break

    # Prefixes go before symbol stripping so "b/o" is still intact
    for prefix in tables.relational_prefixes:
        s = s.replace(prefix, "")
    if tables.standalone_tokens:
        s = tables.standalone_pattern().sub("", s)

    # Replace with a space so "john.smith" does not become "johnsmith"
    s = _NON_ALPHA.sub(" ", s)

    return NormalizedName(canonical=" ".join(s.split()), ordinal=ordinal)
