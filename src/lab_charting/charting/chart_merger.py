# ============================================================================
# src/lab_charting/charting/chart_merger.py
# ============================================================================
"""
Chart Merger

Writes one batch of same-date values into a patient's chart:

1. Load the chart (new charts start with the default rows)
2. Resolve the target column, allocating "<date> (n)" on conflict
3. Add the column to the sorted dates (only if something is written)
4. Find or create each row and set its cell
5. Apply static updates, never overwriting with blanks or "-"
6. Save the whole document in one upsert

Read-modify-write without a transaction: the orchestrator's run lock is
what keeps concurrent writers out.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional
import logging

from ..constants import BLANK_STATIC_VALUES
from ..core.context import ChartDocument
from ..utils.exceptions import ChartMergeError, StoreError
from .date_keys import resolve_date_key

logger = logging.getLogger(__name__)


@dataclass
class MergeOutcome:
    patient_id: str
    date_key: str
    created_chart: bool = False
    new_rows: List[str] = field(default_factory=list)
    written: Dict[str, str] = field(default_factory=dict)
    static_written: Dict[str, str] = field(default_factory=dict)


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def is_blank_static(value: Any) -> bool:
    if value is None:
        return True
    return _as_text(value).strip() in BLANK_STATIC_VALUES


class ChartMerger:
    """Merges dated values into ChartDocuments held by a ChartRepository."""

    def __init__(self, charts):
        # charts: stores.repositories.ChartRepository (load / save)
        self.charts = charts

    def merge(
        self,
        patient_id: str,
        values: Mapping[str, Any],
        base_date: str,
        static_updates: Optional[Mapping[str, Any]] = None
    ) -> MergeOutcome:
        """
        Merge values at base_date into the patient's chart.

        Raises:
            ChartMergeError: if the chart cannot be loaded or saved
        """
        incoming = {label: _as_text(value) for label, value in values.items()}

        try:
            chart = self.charts.load(patient_id)
        except StoreError as e:
            raise ChartMergeError(f"Could not load chart for {patient_id}: {e}") from e

        created = chart is None
        if created:
            chart = ChartDocument.with_default_rows()

        date_key = resolve_date_key(chart, incoming, base_date)
        if date_key != base_date:
            logger.info(f"[CHART] Conflict on {base_date} for {patient_id}; writing to '{date_key}'")

        outcome = MergeOutcome(patient_id=patient_id, date_key=date_key, created_chart=created)

        if incoming:
            chart.add_date(date_key)

        for label, value in incoming.items():
            if chart.find_row(label) is None:
                outcome.new_rows.append(label)
            chart.ensure_row(label).data[date_key] = value
            outcome.written[label] = value

        for key, value in (static_updates or {}).items():
            if is_blank_static(value):
                continue
            chart.static[key] = _as_text(value)
            outcome.static_written[key] = chart.static[key]

        try:
            self.charts.save(patient_id, chart)
        except StoreError as e:
            raise ChartMergeError(f"Could not save chart for {patient_id}: {e}") from e

        return outcome
