# ============================================================================
# src/lab_charting/processors/value_sanitizer.py
# ============================================================================
"""
Value Sanitizer

The extraction model returns a loose key -> text map. Before anything is
charted it is cleaned in a fixed order:

1. Drop metadata keys (sample type, specimen)
2. Move blood group / G6PD into static updates
3. Drop placeholder keys copied from the prompt schema
4. Drop "not found" / "pending" style values; strip units off numeric fields
5. Resolve aliases (WBC -> TLC, HGB -> Hb, ...)

Step 5 runs last because steps 1-4 key off the names the model produced.
Sanitizing an already sanitized report changes nothing.
"""

import re
from dataclasses import replace
from typing import Any, Dict, Optional
import logging

from ..core.context import ExtractedReport
from .tables import DEFAULT_PARAMETER_TABLES, ParameterTables

logger = logging.getLogger(__name__)

# First number in the value: "12.5 g/dL" -> "12.5", "5.2 x10^3" -> "5.2"
_NUMBER = re.compile(r"[\d.,]*\d[\d.,]*")


class ValueSanitizer:
    """Cleans ExtractedReport.values; never mutates its input."""

    def __init__(self, tables: ParameterTables = DEFAULT_PARAMETER_TABLES):
        self.tables = tables

    def sanitize(self, report: ExtractedReport) -> ExtractedReport:
        values = self._strip_keys(report.values)
        static_updates = dict(report.static_updates)

        values = self._drop_metadata(values)
        values = self._relocate_static(values, static_updates)
        values = self._drop_junk_keys(values)
        values = self._clean_values(values)
        values = self._resolve_aliases(values)

        return replace(report, values=values, static_updates=static_updates)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------
    @staticmethod
    def _strip_keys(values: Dict[str, Any]) -> Dict[str, Any]:
        return {key.strip(): value for key, value in values.items()}

    def _drop_metadata(self, values: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in values.items() if k not in self.tables.metadata_keys}

    def _relocate_static(
        self,
        values: Dict[str, Any],
        static_updates: Dict[str, Any]
    ) -> Dict[str, Any]:
        values = dict(values)
        for static_key, aliases in self.tables.static_field_aliases.items():
            for alias in aliases:
                if alias not in values:
                    continue
                value = values.pop(alias)
                if value:
                    logger.debug(f"Relocating '{alias}' to static field '{static_key}'")
                    static_updates[static_key] = value
        return values

    def _drop_junk_keys(self, values: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in values.items() if not self.tables.is_junk_key(k)}

    def _clean_values(self, values: Dict[str, Any]) -> Dict[str, Any]:
        cleaned = {}
        for key, value in values.items():
            if not isinstance(value, str):
                cleaned[key] = value
                continue

            if self.tables.is_invalid_value(value):
                logger.debug(f"Dropping '{key}': placeholder value '{value}'")
                continue

            if self.tables.is_numeric(key):
                value = self._strip_units(value)
            cleaned[key] = value
        return cleaned

    @staticmethod
    def _strip_units(value: str) -> str:
        """Keep the number only; qualitative results ("Positive") stay as they are."""
        match = _NUMBER.search(value)
        if match is None:
            return value
        return match.group(0)

    def _resolve_aliases(self, values: Dict[str, Any]) -> Dict[str, Any]:
        resolved = {}
        for key, value in values.items():
            canonical = self.tables.canonical_key(key)
            if canonical in resolved:
                logger.debug(f"Alias collision on '{canonical}': '{key}' overrides earlier value")
            resolved[canonical] = value
        return resolved


def sanitize_report(
    report: ExtractedReport,
    tables: Optional[ParameterTables] = None
) -> ExtractedReport:
    """Convenience function for one-off sanitization."""
    return ValueSanitizer(tables or DEFAULT_PARAMETER_TABLES).sanitize(report)
