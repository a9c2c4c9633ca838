# ============================================================================
# src/lab_charting/charting/date_keys.py
# ============================================================================
"""
Date-key collision resolution

A chart column is keyed by the report date. When a second report for the
same day carries a *different* value for a parameter already charted on
that day, it goes to an alternate column "<date> (2)", "<date> (3)", ...
instead of silently overwriting. Re-applying identical values never
allocates a new column.
"""

from typing import Any, Mapping

from ..constants import ALTERNATE_COLUMN_START
from ..core.context import ChartDocument


def suffixed_date_key(base_date: str, n: int) -> str:
    return f"{base_date} ({n})"


def has_conflict(chart: ChartDocument, values: Mapping[str, Any], date_key: str) -> bool:
    """True if any incoming value would overwrite a different non-blank cell."""
    for label, value in values.items():
        existing = chart.cell(label, date_key)
        if existing is None or not str(existing).strip():
            continue
        if existing != value:
            return True
    return False


def resolve_date_key(chart: ChartDocument, values: Mapping[str, Any], base_date: str) -> str:
    """
    Pick the column the incoming values are written to.

    The base date is used unless it already exists and conflicts; then the
    first suffixed candidate that is new or conflict-free is taken.
    """
    if base_date not in chart.dates or not has_conflict(chart, values, base_date):
        return base_date

    n = ALTERNATE_COLUMN_START
    while True:
        candidate = suffixed_date_key(base_date, n)
        if candidate not in chart.dates or not has_conflict(chart, values, candidate):
            return candidate
        n += 1
