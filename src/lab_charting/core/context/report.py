# ============================================================================
# src/lab_charting/core/context/report.py
# ============================================================================
"""
Extracted lab report representation
- One ExtractedReport per source document, as returned by the extraction service
- SanitizedReport carries the cleaned values split into chart buckets
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


def _coerce_text(value: Any) -> Optional[str]:
    """Model output is loosely typed; keep scalars as text, drop the rest."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, bool)):
        return str(value)
    return None


def _coerce_map(raw: Any) -> Dict[str, str]:
    if not isinstance(raw, dict):
        return {}
    result = {}
    for key, value in raw.items():
        text = _coerce_text(value)
        if text is None:
            logger.debug(f"Dropping non-scalar value for '{key}'")
            continue
        result[str(key)] = text
    return result


@dataclass
class ReportDates:
    collection: Optional[str] = None
    report: Optional[str] = None


@dataclass
class ExtractedReport:
    filename: str
    patient_name_hint: Optional[str] = None
    dates: ReportDates = field(default_factory=ReportDates)
    force_inbox: bool = False   # fluid/tissue samples always go to review
    values: Dict[str, Any] = field(default_factory=dict)
    static_updates: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExtractedReport":
        """
        Build from one element of the extraction service's JSON array.

        Expected shape:
            {
                "filename": str,
                "patientName": str,
                "dates": {"collection": "YYYY-MM-DD", "report": "YYYY-MM-DD"},
                "forceInbox": bool,
                "values": {param: value},
                "staticUpdates": {"bloodGroup": ..., "g6pd": ...}
            }
        """
        dates = data.get("dates") if isinstance(data.get("dates"), dict) else {}
        return cls(
            filename=_coerce_text(data.get("filename")) or "",
            patient_name_hint=_coerce_text(data.get("patientName")),
            dates=ReportDates(
                collection=_coerce_text(dates.get("collection")) or None,
                report=_coerce_text(dates.get("report")) or None,
            ),
            force_inbox=data.get("forceInbox") is True,
            values=_coerce_map(data.get("values")),
            static_updates=_coerce_map(data.get("staticUpdates")),
        )


@dataclass
class ClassifiedValues:
    general: Dict[str, Any] = field(default_factory=dict)
    culture: Dict[str, Any] = field(default_factory=dict)
    novel: Dict[str, Any] = field(default_factory=dict)
    ignored: List[str] = field(default_factory=list)


@dataclass
class SanitizedReport:
    """Cleaned report plus its classifier buckets."""
    report: ExtractedReport
    buckets: ClassifiedValues

    @property
    def filename(self) -> str:
        return self.report.filename

    @property
    def patient_name_hint(self) -> Optional[str]:
        return self.report.patient_name_hint

    @property
    def values(self) -> Dict[str, Any]:
        return self.report.values

    @property
    def static_updates(self) -> Dict[str, Any]:
        return self.report.static_updates

    @property
    def general(self) -> Dict[str, Any]:
        return self.buckets.general

    @property
    def culture(self) -> Dict[str, Any]:
        return self.buckets.culture

    @property
    def novel(self) -> Dict[str, Any]:
        return self.buckets.novel
