"""
Per-patient chart merging with date-column collision handling.
"""

from .date_keys import suffixed_date_key, has_conflict, resolve_date_key
from .chart_codec import ChartCodec
from .chart_merger import ChartMerger, MergeOutcome, is_blank_static

__all__ = [
    "suffixed_date_key",
    "has_conflict",
    "resolve_date_key",
    "ChartCodec",
    "ChartMerger",
    "MergeOutcome",
    "is_blank_static",
]
