# ============================================================================
# src/lab_charting/core/router.py
# ============================================================================
"""
Report Router

Takes one extraction result for one queued document and decides where its
values go:

1. Sanitize and classify the values
2. Content-name pass, only if the subject / filename passes found nobody
3. AUTO_SAVE (and not force_inbox):
     general + static -> chart at the collection date
     culture          -> chart at the report date
     novel            -> review queue ("New Parameters")
   Any chart failure sends the whole sanitized payload to review
   ("Auto-save Failed").
4. Everything else -> review queue ("Low Score" or the fluid/tissue reason)

hand_off() sends a report whose routing raised to the review queue whole
("Processing Failed").
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Callable, List, Optional, Sequence
import logging

from ..charting.chart_merger import ChartMerger, is_blank_static
from ..matching.patient_matcher import PatientMatcher
from ..processors.parameter_classifier import ParameterClassifier
from ..processors.value_sanitizer import ValueSanitizer
from ..stores.repositories import NotificationSink, ReviewQueue
from ..utils.exceptions import ChartMergeError
from .audit import RunAuditLogger
from .context import (
    ExtractedReport,
    MatchAction,
    MatchResult,
    Notification,
    Patient,
    ReviewItem,
    SanitizedReport,
)

logger = logging.getLogger(__name__)

REASON_FORCED = "Sample Type (Fluid/Tissue)"
REASON_LOW_SCORE = "Low Score"
REASON_NEW_PARAMETERS = "New Parameters"
REASON_AUTO_SAVE_FAILED = "Auto-save Failed"
REASON_PROCESSING_FAILED = "Processing Failed"


@dataclass
class RoutingOutcome:
    filename: str
    match: MatchResult
    saved: List[str] = field(default_factory=list)   # "General", "Culture"
    inbox_reasons: List[str] = field(default_factory=list)
    fallback: bool = False

    @property
    def auto_saved(self) -> bool:
        return bool(self.saved) and not self.fallback


def _today() -> str:
    return date.today().isoformat()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ReportRouter:
    """Routes one extracted report to the chart, the review queue, or both."""

    def __init__(
        self,
        matcher: PatientMatcher,
        merger: ChartMerger,
        review_queue: ReviewQueue,
        notifications: NotificationSink,
        sanitizer: Optional[ValueSanitizer] = None,
        classifier: Optional[ParameterClassifier] = None,
        audit: Optional[RunAuditLogger] = None,
        today: Callable[[], str] = _today,
        now: Callable[[], str] = _now
    ):
        self.matcher = matcher
        self.merger = merger
        self.review_queue = review_queue
        self.notifications = notifications
        self.sanitizer = sanitizer or ValueSanitizer()
        self.classifier = classifier or ParameterClassifier()
        self.audit = audit
        self.today = today
        self.now = now

    def prepare(self, report: ExtractedReport) -> SanitizedReport:
        cleaned = self.sanitizer.sanitize(report)
        return SanitizedReport(report=cleaned, buckets=self.classifier.classify(cleaned.values))

    def route(
        self,
        report: ExtractedReport,
        pre_match: Optional[MatchResult],
        patients: Sequence[Patient],
        run_id: str = ""
    ) -> RoutingOutcome:
        sanitized = self.prepare(report)

        match = pre_match
        if match is None:
            match = self.matcher.match_content(sanitized.patient_name_hint, patients)
        if match is None:
            match = MatchResult.no_match()

        collection_date = report.dates.collection or self.today()
        culture_date = report.dates.report or collection_date

        outcome = RoutingOutcome(filename=report.filename, match=match)

        if match.is_auto_save and not report.force_inbox:
            self._auto_save(sanitized, match, collection_date, culture_date, outcome, run_id)
        else:
            self._send_to_inbox(sanitized, match, collection_date, outcome, run_id)
        return outcome

    def hand_off(
        self,
        report: ExtractedReport,
        pre_match: Optional[MatchResult],
        run_id: str = ""
    ) -> RoutingOutcome:
        """
        Send the whole sanitized payload to the review queue. Used when
        route() raised part way through, so nothing is lost.
        """
        sanitized = self.prepare(report)
        match = pre_match or MatchResult.no_match()
        collection_date = report.dates.collection or self.today()

        outcome = RoutingOutcome(filename=report.filename, match=match, fallback=True)
        self._submit(
            sanitized, match, collection_date, REASON_PROCESSING_FAILED,
            values=sanitized.values, static_updates=sanitized.static_updates
        )
        outcome.inbox_reasons.append(REASON_PROCESSING_FAILED)
        self._audit(run_id, "FALLBACK", outcome, REASON_PROCESSING_FAILED, None)
        return outcome

    # ------------------------------------------------------------------
    # Auto-save path
    # ------------------------------------------------------------------
    def _auto_save(
        self,
        sanitized: SanitizedReport,
        match: MatchResult,
        collection_date: str,
        culture_date: str,
        outcome: RoutingOutcome,
        run_id: str
    ):
        patient = match.patient
        try:
            static_updates = {
                key: value for key, value in sanitized.static_updates.items()
                if not is_blank_static(value)
            }
            if sanitized.general or static_updates:
                logger.info(f"[AUTO-SAVE] General params for {patient.name}")
                merged = self.merger.merge(
                    patient.id, sanitized.general, collection_date, static_updates
                )
                if merged.written or merged.static_written:
                    outcome.saved.append("General")

            if sanitized.culture:
                logger.info(f"[AUTO-SAVE] Culture params for {patient.name}")
                self.merger.merge(patient.id, sanitized.culture, culture_date)
                outcome.saved.append("Culture")
        except ChartMergeError as e:
            logger.error(f"[AUTO-SAVE FAILED] {e}. Redirecting all data to inbox.")
            outcome.fallback = True
            self._submit(
                sanitized, match, collection_date, REASON_AUTO_SAVE_FAILED,
                values=sanitized.values, static_updates=sanitized.static_updates
            )
            outcome.inbox_reasons.append(REASON_AUTO_SAVE_FAILED)
            self._audit(run_id, "FALLBACK", outcome, REASON_AUTO_SAVE_FAILED, {"error": str(e)})
            return

        if outcome.saved:
            self.notifications.notify(Notification(
                patient_name=patient.name,
                type=MatchAction.AUTO_SAVE,
                details=f"Auto-saved: {', '.join(outcome.saved)}",
                timestamp=self.now(),
            ))
            self._audit(run_id, "AUTO_SAVE", outcome, None, {"saved": outcome.saved})

        if sanitized.novel:
            logger.info(f"[INBOX] New parameters for {patient.name}")
            self._submit(
                sanitized, match, collection_date, REASON_NEW_PARAMETERS,
                values=sanitized.novel, static_updates={}
            )
            outcome.inbox_reasons.append(REASON_NEW_PARAMETERS)
            self._audit(
                run_id, "INBOX", outcome, REASON_NEW_PARAMETERS,
                {"parameters": sorted(sanitized.novel)}
            )

    # ------------------------------------------------------------------
    # Review path
    # ------------------------------------------------------------------
    def _send_to_inbox(
        self,
        sanitized: SanitizedReport,
        match: MatchResult,
        collection_date: str,
        outcome: RoutingOutcome,
        run_id: str
    ):
        reason = REASON_FORCED if sanitized.report.force_inbox else REASON_LOW_SCORE
        display_name = (
            match.patient.name if match.patient is not None
            else (sanitized.patient_name_hint or "Unknown")
        )
        logger.info(f"[INBOX] {display_name} (reason: {reason})")

        self._submit(
            sanitized, match, collection_date, reason,
            values=sanitized.values, static_updates=sanitized.static_updates
        )
        outcome.inbox_reasons.append(reason)

        self.notifications.notify(Notification(
            patient_name=display_name,
            type=MatchAction.INBOX,
            details=f"Sent to Inbox: {reason}",
            timestamp=self.now(),
        ))
        self._audit(run_id, "INBOX", outcome, reason, None)

    def _submit(self, sanitized, match, report_date, reason, values, static_updates):
        self.review_queue.submit(ReviewItem(
            patient_name_hint=sanitized.patient_name_hint,
            received_at=self.now(),
            report_date=report_date,
            values=dict(values),
            static_updates=dict(static_updates),
            suggested_match_id=match.patient.id if match.patient is not None else None,
            match_score=match.score,
            reason=reason,
        ))

    def _audit(self, run_id, event_type, outcome, reason, details):
        if self.audit is None:
            return
        patient = outcome.match.patient
        self.audit.log_event(
            run_id,
            event_type,
            filename=outcome.filename,
            patient_id=patient.id if patient is not None else None,
            score=outcome.match.score,
            reason=reason,
            details=details,
        )
