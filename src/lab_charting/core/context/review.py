# ============================================================================
# src/lab_charting/core/context/review.py
# ============================================================================
"""
Payloads handed to the review queue and the notification feed
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .enums import MatchAction


@dataclass
class ReviewItem:
    patient_name_hint: Optional[str]
    received_at: str
    report_date: str
    values: Dict[str, Any] = field(default_factory=dict)
    static_updates: Dict[str, Any] = field(default_factory=dict)
    suggested_match_id: Optional[str] = None
    match_score: float = 0.0
    reason: str = ""
    status: str = "Pending"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "patientName": self.patient_name_hint,
            "receivedAt": self.received_at,
            "reportDate": self.report_date,
            "data": dict(self.values),
            "staticUpdates": dict(self.static_updates),
            "suggestedMatchId": self.suggested_match_id,
            "matchScore": self.match_score,
            "status": self.status,
            "reason": self.reason,
        }


@dataclass
class Notification:
    patient_name: str
    type: MatchAction
    details: str
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "patientName": self.patient_name,
            "type": self.type.value,
            "details": self.details,
            "timestamp": self.timestamp,
        }
