# ============================================================================
# src/lab_charting/stores/repositories.py
# ============================================================================
"""
Domain views over the document store

- PatientRegistry:   patients collection -> Patient
- ChartRepository:   one ChartDocument per patient id
- ReviewQueue:       inbox items awaiting human confirmation
- NotificationSink:  best-effort activity feed
- InstructionStore:  optional extraction prompt override
"""

from typing import List, Optional
import logging

from ..charting.chart_codec import ChartCodec
from ..config import StoreSettings
from ..core.context import ChartDocument, Notification, Patient, ReviewItem
from ..utils.exceptions import DocumentNotFoundError
from .base import DocumentStore, split_path
from .field_codec import decode_fields, encode_fields

logger = logging.getLogger(__name__)


class PatientRegistry:

    def __init__(self, store: DocumentStore, settings: StoreSettings):
        self.store = store
        self.collection = settings.PATIENTS_PATH

    def list_patients(self) -> List[Patient]:
        patients = []
        for path, document in self.store.list(self.collection):
            _, patient_id = split_path(path)
            patients.append(Patient.from_dict(patient_id, decode_fields(document)))
        return patients


class ChartRepository:

    def __init__(self, store: DocumentStore, settings: StoreSettings):
        self.store = store
        self.settings = settings

    def load(self, patient_id: str) -> Optional[ChartDocument]:
        """None if the patient has no chart yet; other store errors propagate."""
        try:
            document = self.store.get(self.settings.chart_path(patient_id))
        except DocumentNotFoundError:
            return None
        return ChartCodec.decode(document)

    def save(self, patient_id: str, chart: ChartDocument) -> None:
        self.store.upsert(self.settings.chart_path(patient_id), ChartCodec.encode(chart))


class ReviewQueue:

    def __init__(self, store: DocumentStore, settings: StoreSettings):
        self.store = store
        self.collection = settings.INBOX_PATH

    def submit(self, item: ReviewItem) -> str:
        path = self.store.create(self.collection, encode_fields(item.to_dict()))
        logger.info(f"[INBOX] Queued review item {path} (reason: {item.reason})")
        return path


class NotificationSink:
    """Failures are logged and swallowed; notifications never block charting."""

    def __init__(self, store: DocumentStore, settings: StoreSettings):
        self.store = store
        self.collection = settings.NOTIFICATIONS_PATH

    def notify(self, notification: Notification) -> Optional[str]:
        try:
            return self.store.create(self.collection, encode_fields(notification.to_dict()))
        except Exception as e:
            logger.error(f"Failed to save notification: {e}")
            return None


class InstructionStore:

    def __init__(self, store: DocumentStore, settings: StoreSettings):
        self.store = store
        self.path = settings.INSTRUCTIONS_PATH

    def load_instructions(self) -> str:
        """Override text for the extraction prompt; "" when absent or unreadable."""
        try:
            fields = decode_fields(self.store.get(self.path))
        except DocumentNotFoundError:
            logger.info("No custom extraction instructions found")
            return ""
        except Exception as e:
            logger.warning(f"Could not load extraction instructions: {e}")
            return ""

        instructions = fields.get("instructions")
        if isinstance(instructions, str) and instructions.strip():
            logger.info("Loaded custom extraction instructions")
            return instructions.strip()
        return ""
