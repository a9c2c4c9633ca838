# ============================================================================
# src/lab_charting/core/context/patient.py
# ============================================================================
"""
Patient registry entries and match decisions
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .enums import MatchAction


@dataclass(frozen=True)
class Patient:
    id: str
    name: str
    ward: str = ""
    serial: str = ""

    @classmethod
    def from_dict(cls, patient_id: str, data: Dict[str, Any]) -> "Patient":
        """Build from a registry document (serial is stored as customSerial)."""
        serial = data.get("customSerial", data.get("serial", ""))
        return cls(
            id=patient_id,
            name=data.get("name") or "",
            ward=data.get("ward") or "",
            serial="" if serial is None else str(serial),
        )


@dataclass(frozen=True)
class NormalizedName:
    canonical: str
    ordinal: Optional[int] = None   # 1, 2 or 3 for multiples


@dataclass(frozen=True)
class MatchResult:
    action: MatchAction
    patient: Optional[Patient]
    score: float

    @classmethod
    def no_match(cls) -> "MatchResult":
        return cls(action=MatchAction.INBOX, patient=None, score=0.0)

    @property
    def is_auto_save(self) -> bool:
        return self.action == MatchAction.AUTO_SAVE
