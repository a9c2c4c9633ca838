# ============================================================================
# src/lab_charting/core/context/chart.py
# ============================================================================
"""
Patient chart: a row x date matrix plus static fields
- dates: sorted column keys ("2024-03-01", "2024-03-01 (2)", ...)
- rows: one per parameter label, cells keyed by date-key
- static: single-valued fields (blood group, G6PD)
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ...constants import DEFAULT_CATEGORY, DEFAULT_ROW_LABELS


@dataclass
class ChartRow:
    label: str
    category: str = DEFAULT_CATEGORY
    data: Dict[str, str] = field(default_factory=dict)


@dataclass
class ChartDocument:
    dates: List[str] = field(default_factory=list)
    rows: List[ChartRow] = field(default_factory=list)
    static: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def with_default_rows(cls) -> "ChartDocument":
        return cls(rows=[ChartRow(label=label) for label in DEFAULT_ROW_LABELS])

    def find_row(self, label: str) -> Optional[ChartRow]:
        for row in self.rows:
            if row.label == label:
                return row
        return None

    def ensure_row(self, label: str) -> ChartRow:
        row = self.find_row(label)
        if row is None:
            row = ChartRow(label=label)
            self.rows.append(row)
        return row

    def cell(self, label: str, date_key: str) -> Optional[str]:
        row = self.find_row(label)
        if row is None:
            return None
        return row.data.get(date_key)

    def add_date(self, date_key: str) -> bool:
        """Insert a column keeping dates sorted. Returns False if already present."""
        if date_key in self.dates:
            return False
        self.dates.append(date_key)
        self.dates.sort()
        return True
