"""
Typed in-memory models passed between pipeline stages
"""

from .enums import MatchAction, RunState
from .patient import Patient, NormalizedName, MatchResult
from .report import ReportDates, ExtractedReport, ClassifiedValues, SanitizedReport
from .chart import ChartRow, ChartDocument
from .review import ReviewItem, Notification

__all__ = [
    "MatchAction",
    "RunState",
    "Patient",
    "NormalizedName",
    "MatchResult",
    "ReportDates",
    "ExtractedReport",
    "ClassifiedValues",
    "SanitizedReport",
    "ChartRow",
    "ChartDocument",
    "ReviewItem",
    "Notification",
]
