# ============================================================================
# src/lab_charting/processors/parameter_classifier.py
# ============================================================================
"""
Parameter Classifier

Splits sanitized values into chart buckets:
- culture: culture & sensitivity reports (charted on the report date)
- general: the routine NICU panel (charted on the collection date)
- novel:   anything unfamiliar, routed to the review queue
- ignored: hemogram indices nobody charts, dropped

The four buckets are disjoint and together cover every input key.
"""

from typing import Any, Dict

from ..core.context import ClassifiedValues
from .tables import DEFAULT_PARAMETER_TABLES, ParameterTables


class ParameterClassifier:

    def __init__(self, tables: ParameterTables = DEFAULT_PARAMETER_TABLES):
        self.tables = tables

    def classify(self, values: Dict[str, Any]) -> ClassifiedValues:
        buckets = ClassifiedValues()
        for key, value in values.items():
            if key in self.tables.culture_keys:
                buckets.culture[key] = value
            elif key in self.tables.general_keys:
                buckets.general[key] = value
            elif key in self.tables.ignored_keys:
                buckets.ignored.append(key)
            else:
                buckets.novel[key] = value
        return buckets
