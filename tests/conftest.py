# ============================================================================
# FILE: tests/conftest.py
# ============================================================================
"""
Pytest configuration and shared fixtures for testing.
"""

import pytest
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional, Sequence

from src.lab_charting.config import (
    AppSettings,
    PipelineSettings,
    StoreSettings,
    ThresholdSettings,
    ExtractionSettings,
    LoggingSettings,
)
from src.lab_charting.core.context import Patient
from src.lab_charting.extraction.base import BaseExtractionClient, ExtractionDocument
from src.lab_charting.sources.base import Attachment, DocumentSource, MailMessage, MailThread
from src.lab_charting.stores import InMemoryDocumentStore, encode_fields
from src.lab_charting.utils.exceptions import ExtractionError


# ----------------------------------------------------------------------------
# Fakes
# ----------------------------------------------------------------------------

class FakeDocumentSource(DocumentSource):
    """In-memory threads; the query only honours -label:<name>."""

    def __init__(self, threads: Optional[List[MailThread]] = None):
        self.threads = list(threads or [])
        self.labels_created: List[str] = []
        self.added: List[tuple] = []
        self.removed: List[tuple] = []
        self.queries: List[tuple] = []

    def search(self, query: str, limit: int) -> List[MailThread]:
        self.queries.append((query, limit))
        excluded = [t[len("-label:"):] for t in query.split() if t.startswith("-label:")]
        matches = [t for t in self.threads if not any(label in t.labels for label in excluded)]
        return matches[:limit]

    def ensure_label(self, name: str) -> None:
        if name not in self.labels_created:
            self.labels_created.append(name)

    def add_label(self, thread: MailThread, label: str) -> None:
        thread.labels.add(label)
        self.added.append((thread.thread_id, label))

    def remove_label(self, thread: MailThread, label: str) -> None:
        thread.labels.discard(label)
        self.removed.append((thread.thread_id, label))


class FakeExtractionClient(BaseExtractionClient):
    """
    Answers each batch through a responder(filenames) -> list of report dicts.
    A responder may raise to simulate a failed call.
    """

    def __init__(self, responder: Callable[[List[str]], List[Dict[str, Any]]]):
        super().__init__()
        self.responder = responder
        self.calls: List[List[str]] = []
        self.instructions: List[str] = []

    @property
    def model_name(self) -> str:
        return "fake-model"

    async def extract_batch(
        self,
        documents: Sequence[ExtractionDocument],
        instructions: str = ""
    ) -> List[Dict[str, Any]]:
        filenames = [d.filename for d in documents]
        self.calls.append(filenames)
        self.instructions.append(instructions)
        return self.responder(filenames)

    async def health_check(self) -> Dict[str, Any]:
        return {"healthy": True, "model": self.model_name, "details": "fake", "models": []}


class RecordingSleeper:
    """Async sleeper that records requested pauses instead of sleeping."""

    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def failing_responder(filenames):
    raise ExtractionError("service unavailable")


def make_pdf(name: str, size: int = 100) -> Attachment:
    return Attachment(name=name, size=size, content_type="application/pdf", content=b"%" * size)


def make_thread(thread_id: str, subject: str, *attachment_lists, labels=None) -> MailThread:
    """One message per attachment list."""
    return MailThread(
        thread_id=thread_id,
        subject=subject,
        messages=[MailMessage(attachments=list(atts)) for atts in attachment_lists],
        labels=set(labels or []),
    )


def report(filename: str, patient_name: Optional[str] = None, values=None,
           collection: Optional[str] = "2024-03-01", report_date: Optional[str] = None,
           force_inbox: bool = False, static_updates=None) -> Dict[str, Any]:
    return {
        "filename": filename,
        "patientName": patient_name,
        "dates": {"collection": collection, "report": report_date},
        "forceInbox": force_inbox,
        "values": values or {},
        "staticUpdates": static_updates or {},
    }


# ----------------------------------------------------------------------------
# Fixtures
# ----------------------------------------------------------------------------

@pytest.fixture
def thresholds():
    return ThresholdSettings()


@pytest.fixture
def settings(tmp_path):
    """Settings with no lock wait, independent of the environment's paths."""
    return AppSettings(
        store=StoreSettings(
            DB_PATH=tmp_path / "store.db",
            AUDIT_DB_PATH=tmp_path / "audit.db",
        ),
        pipeline=PipelineSettings(
            LOCK_TIMEOUT_SECONDS=0,
            BATCH_PAUSE_SECONDS=30,
            EXTRACTION_BATCH_SIZE=10,
            EMAIL_BATCH_SIZE=15,
            MAX_EXECUTION_SECONDS=240,
        ),
        extraction=ExtractionSettings(GEMINI_API_KEY="test-key"),
        thresholds=ThresholdSettings(),
        logging=LoggingSettings(),
    )


@pytest.fixture
def patients():
    return [
        Patient(id="p1", name="Baby of Priya Sharma", ward="NICU", serial="12"),
        Patient(id="p2", name="B/O Anjali Verma (1)", ward="NICU", serial="13"),
        Patient(id="p3", name="B/O Anjali Verma (2)", ward="NICU", serial="14"),
        Patient(id="p4", name="Rahul Mehta", ward="PICU", serial="15"),
    ]


@pytest.fixture
def memory_store(settings, patients):
    """Document store seeded with the patient registry."""
    store = InMemoryDocumentStore()
    for patient in patients:
        store.upsert(
            f"{settings.store.PATIENTS_PATH}/{patient.id}",
            encode_fields({
                "name": patient.name,
                "ward": patient.ward,
                "customSerial": int(patient.serial),
            })
        )
    return store


@pytest.fixture
def sleeper():
    return RecordingSleeper()


@pytest.fixture
def factories():
    """Builders for threads, attachments, reports and fakes."""
    return SimpleNamespace(
        pdf=make_pdf,
        thread=make_thread,
        report=report,
        source=FakeDocumentSource,
        client=FakeExtractionClient,
        failing=failing_responder,
    )
