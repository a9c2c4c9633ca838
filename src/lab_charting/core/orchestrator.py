# ============================================================================
# src/lab_charting/core/orchestrator.py
# ============================================================================
"""
Lab Report Orchestrator

One run:
    IDLE -> LOCKED -> SCANNING -> QUEUED -> BATCH_PROCESSING -> DONE
with SKIPPED when another run holds the lock and FAILED on an unhandled
error. The run lock is always released.

SCANNING walks the unlabeled threads until the wall-clock budget runs out.
Per message only the smallest PDF is queued (letterhead copies of the
same report are larger), and a file already queued this run (same
name and size, e.g. re-attached in a reply) is skipped.

BATCH_PROCESSING sends the queue to the extraction service in sub-batches.
A thread is labeled right after the sub-batch that routes its last queued
document, so a run cut short never re-charts it. A thread with a document
in a failed sub-batch, without an extraction result, or whose routing and
review hand-off both failed stays unlabeled and is picked up by the next run.
"""

from collections import Counter
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence
import asyncio
import logging
import time
import uuid

from ..charting.chart_merger import ChartMerger
from ..config import AppSettings
from ..extraction.base import BaseExtractionClient, ExtractionDocument
from ..matching.patient_matcher import PatientMatcher
from ..sources.base import Attachment, DocumentSource, MailThread, PDF_CONTENT_TYPE
from ..stores.base import DocumentStore
from ..stores.repositories import (
    ChartRepository,
    InstructionStore,
    NotificationSink,
    PatientRegistry,
    ReviewQueue,
)
from ..utils.exceptions import ExtractionError, LockError
from ..utils.logging import LogContext, log_performance
from .audit import RunAuditLogger
from .context import ExtractedReport, MatchResult, Patient, RunState
from .locks import RunLock
from .router import ReportRouter, RoutingOutcome
from .scheduling import DispatchSchedule, RunBudget, Sleeper

logger = logging.getLogger(__name__)


@dataclass
class QueuedDocument:
    attachment: Attachment
    filename: str
    pre_match: Optional[MatchResult]
    thread: MailThread


@dataclass
class RunSummary:
    run_id: str = ""
    state: RunState = RunState.IDLE
    threads_scanned: int = 0
    documents_queued: int = 0
    duplicates_skipped: int = 0
    batches_dispatched: int = 0
    batches_failed: int = 0
    auto_saved: int = 0
    sent_to_inbox: int = 0
    fallbacks: int = 0
    documents_failed: int = 0
    labeled_threads: int = 0
    timed_out: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["state"] = self.state.value
        return data


class LabReportOrchestrator:
    """
    Drives one batch run over the document source.

    Collaborators are injected; nothing here reads the environment.
    """

    def __init__(
        self,
        settings: AppSettings,
        source: DocumentSource,
        extractor: BaseExtractionClient,
        store: DocumentStore,
        lock: RunLock,
        audit: Optional[RunAuditLogger] = None,
        sleeper: Sleeper = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
        router: Optional[ReportRouter] = None
    ):
        self.settings = settings
        self.pipeline = settings.pipeline
        self.source = source
        self.extractor = extractor
        self.lock = lock
        self.audit = audit
        self.clock = clock
        self.schedule = DispatchSchedule(self.pipeline.BATCH_PAUSE_SECONDS, sleeper)

        self.patients = PatientRegistry(store, settings.store)
        self.instructions = InstructionStore(store, settings.store)
        self.matcher = PatientMatcher(settings.thresholds)
        self.router = router or ReportRouter(
            matcher=self.matcher,
            merger=ChartMerger(ChartRepository(store, settings.store)),
            review_queue=ReviewQueue(store, settings.store),
            notifications=NotificationSink(store, settings.store),
            audit=audit,
        )

        self.state = RunState.IDLE

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------
    async def run(self) -> RunSummary:
        summary = RunSummary(run_id=uuid.uuid4().hex[:12])
        self._set_state(summary, RunState.IDLE)

        try:
            acquired = self.lock.acquire(self.pipeline.LOCK_TIMEOUT_SECONDS)
        except LockError as e:
            logger.error(f"Run lock unavailable: {e}")
            self._set_state(summary, RunState.FAILED)
            return summary

        if not acquired:
            logger.info("Process is already running. Skipping.")
            self._set_state(summary, RunState.SKIPPED)
            return summary

        try:
            with LogContext(run_id=summary.run_id):
                self._set_state(summary, RunState.LOCKED)
                if self.audit:
                    self.audit.log_run_start(summary.run_id)
                await self._run_locked(summary)
                self._set_state(summary, RunState.DONE)
        except Exception as e:
            logger.error(f"Critical execution error: {e}", exc_info=True)
            self._set_state(summary, RunState.FAILED)
        finally:
            self._release_lock()
            self._audit_completion(summary)

        logger.info(f"Run {summary.run_id} finished: {summary.to_dict()}")
        return summary

    def _set_state(self, summary: RunSummary, state: RunState):
        self.state = state
        summary.state = state

    def _release_lock(self):
        try:
            self.lock.release()
        except Exception as e:
            logger.error(f"Failed to release run lock: {e}", exc_info=True)

    def _audit_completion(self, summary: RunSummary):
        if self.audit is None:
            return
        try:
            self.audit.log_run_complete(summary.run_id, summary.state.value, summary.to_dict())
        except Exception as e:
            logger.error(f"Failed to record run completion: {e}", exc_info=True)

    async def _run_locked(self, summary: RunSummary):
        budget = RunBudget(self.pipeline.MAX_EXECUTION_SECONDS, self.clock)

        self._set_state(summary, RunState.SCANNING)
        self.source.ensure_label(self.pipeline.COMPLETION_LABEL)

        threads = self.source.search(self.pipeline.EMAIL_QUERY, self.pipeline.EMAIL_BATCH_SIZE)
        if not threads:
            logger.info("No unprocessed threads found.")
            return

        instructions = self.instructions.load_instructions()
        patients = self.patients.list_patients()
        logger.info(f"Scanning {len(threads)} threads against {len(patients)} patients")

        queue = self.scan_threads(threads, patients, budget, summary)
        self._set_state(summary, RunState.QUEUED)
        summary.documents_queued = len(queue)
        if not queue:
            return

        self._set_state(summary, RunState.BATCH_PROCESSING)
        await self.process_queue(queue, instructions, patients, summary)

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------
    def scan_threads(
        self,
        threads: Sequence[MailThread],
        patients: Sequence[Patient],
        budget: RunBudget,
        summary: RunSummary
    ) -> List[QueuedDocument]:
        queue: List[QueuedDocument] = []
        seen = set()

        for thread in threads:
            if budget.exhausted():
                logger.info(
                    "Time limit approaching. Stopping scan; remaining threads wait for the next run."
                )
                summary.timed_out = True
                break
            summary.threads_scanned += 1

            subject_match = self.matcher.match_header(thread.subject, patients)

            for message in thread.messages:
                pdfs = message.pdf_attachments()
                if not pdfs:
                    continue

                # min() keeps the first of equal sizes
                attachment = min(pdfs, key=lambda a: a.size)
                if len(pdfs) > 1:
                    logger.info(
                        f"[SMART SELECT] Selected smallest PDF '{attachment.name}' "
                        f"({attachment.size} bytes), ignored {len(pdfs) - 1} larger variant(s)"
                    )

                if attachment.signature in seen:
                    logger.info(f"[DUPLICATE] Skipping '{attachment.name}' (already queued)")
                    summary.duplicates_skipped += 1
                    continue
                seen.add(attachment.signature)

                pre_match = subject_match or self.matcher.match_header(attachment.name, patients)
                queue.append(QueuedDocument(
                    attachment=attachment,
                    filename=attachment.name,
                    pre_match=pre_match,
                    thread=thread,
                ))

        logger.info(
            f"Queued {len(queue)} PDFs; processing in batches of "
            f"{self.pipeline.EXTRACTION_BATCH_SIZE}"
        )
        return queue

    # ------------------------------------------------------------------
    # Batch processing
    # ------------------------------------------------------------------
    @log_performance(logger, "Batch processing")
    async def process_queue(
        self,
        queue: Sequence[QueuedDocument],
        instructions: str,
        patients: Sequence[Patient],
        summary: RunSummary
    ):
        size = self.pipeline.EXTRACTION_BATCH_SIZE
        chunks = [list(queue[i:i + size]) for i in range(0, len(queue), size)]
        # Queued documents per thread still waiting to be routed
        pending = Counter(doc.thread.thread_id for doc in queue)
        labeled = set()

        for index, chunk in enumerate(chunks):
            with LogContext(run_id=summary.run_id, batch=index + 1):
                await self._process_chunk(
                    index, chunk, instructions, patients, summary, pending, labeled
                )
            await self.schedule.after_batch(index, len(chunks))

        summary.labeled_threads = len(labeled)

    async def _process_chunk(
        self,
        index: int,
        chunk: List[QueuedDocument],
        instructions: str,
        patients: Sequence[Patient],
        summary: RunSummary,
        pending: Counter,
        labeled: set
    ):
        logger.info(f"Sending batch {index + 1} ({len(chunk)} files) for extraction")
        summary.batches_dispatched += 1

        try:
            results = await self.extractor.extract_batch(
                [
                    ExtractionDocument(
                        filename=doc.filename,
                        content=doc.attachment.content,
                        mime_type=PDF_CONTENT_TYPE,
                    )
                    for doc in chunk
                ],
                instructions
            )
        except ExtractionError as e:
            logger.error(f"Batch {index + 1} failed: {e}. Threads left unlabeled.")
            summary.batches_failed += 1
            self._audit_batch_failure(summary.run_id, index, chunk, str(e))
            return

        completed: Dict[str, MailThread] = {}
        remaining = list(results)

        for doc in chunk:
            result = take_result(remaining, doc.filename)
            if result is None:
                logger.warning(f"No extraction result for '{doc.filename}'; thread left unlabeled")
                continue

            logger.info(f"Processing result for: {doc.filename}")
            if not self._route_document(doc, result, patients, summary):
                continue

            thread_id = doc.thread.thread_id
            pending[thread_id] -= 1
            if pending[thread_id] == 0:
                completed[thread_id] = doc.thread

        # Label right away so a run cut short never re-charts these threads.
        # A thread with any document not yet routed stays unlabeled.
        for thread in completed.values():
            try:
                self.source.add_label(thread, self.pipeline.COMPLETION_LABEL)
                if self.pipeline.LEGACY_LABEL:
                    self.source.remove_label(thread, self.pipeline.LEGACY_LABEL)
            except Exception as e:
                logger.error(f"Could not label thread {thread.thread_id}: {e}", exc_info=True)
                continue
            labeled.add(thread.thread_id)

    def _route_document(
        self,
        doc: QueuedDocument,
        result: Dict[str, Any],
        patients: Sequence[Patient],
        summary: RunSummary
    ) -> bool:
        """
        Route one extraction result. A routing error hands the whole
        payload to the review queue instead; if that fails too the
        document counts as not routed and its thread stays unlabeled.
        """
        report = ExtractedReport.from_dict(result)
        try:
            outcome = self.router.route(report, doc.pre_match, patients, summary.run_id)
        except Exception as e:
            logger.error(f"Routing failed for '{doc.filename}': {e}", exc_info=True)
            try:
                outcome = self.router.hand_off(report, doc.pre_match, summary.run_id)
            except Exception as e:
                logger.error(
                    f"Review hand-off failed for '{doc.filename}': {e}. Thread left unlabeled.",
                    exc_info=True
                )
                summary.documents_failed += 1
                return False

        self._tally(outcome, summary)
        return True

    @staticmethod
    def _tally(outcome: RoutingOutcome, summary: RunSummary):
        if outcome.auto_saved:
            summary.auto_saved += 1
        if outcome.fallback:
            summary.fallbacks += 1
        summary.sent_to_inbox += len(outcome.inbox_reasons)

    def _audit_batch_failure(self, run_id: str, index: int, chunk: List[QueuedDocument], error: str):
        if self.audit is None:
            return
        self.audit.log_event(
            run_id,
            "BATCH_FAILED",
            reason=error,
            details={"batch": index + 1, "files": [doc.filename for doc in chunk]},
        )


def take_result(results: List[Dict[str, Any]], filename: str) -> Optional[Dict[str, Any]]:
    """
    Remove and return the result for filename: exact match first, then
    case-insensitive. The first match wins and is consumed, so two queued
    documents never share one result.
    """
    for i, result in enumerate(results):
        if result.get("filename") == filename:
            return results.pop(i)

    lowered = filename.lower()
    for i, result in enumerate(results):
        candidate = result.get("filename")
        if isinstance(candidate, str) and candidate.lower() == lowered:
            return results.pop(i)
    return None
