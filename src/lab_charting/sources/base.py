# ============================================================================
# src/lab_charting/sources/base.py
# ============================================================================
"""
Document Source Interface

A document source is a mail store seen through threads: each thread has a
subject, messages carrying attachments, and a set of labels. Completed
threads are labeled so the next search skips them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Set

PDF_CONTENT_TYPE = "application/pdf"


@dataclass(frozen=True)
class Attachment:
    name: str
    size: int
    content_type: str = PDF_CONTENT_TYPE
    content: bytes = field(default=b"", repr=False)

    @property
    def is_pdf(self) -> bool:
        return (
            self.content_type.lower() == PDF_CONTENT_TYPE
            or self.name.lower().endswith(".pdf")
        )

    @property
    def signature(self) -> str:
        """name_size key used to spot the same file re-attached in a reply chain"""
        return f"{self.name}_{self.size}"


@dataclass
class MailMessage:
    attachments: List[Attachment] = field(default_factory=list)

    def pdf_attachments(self) -> List[Attachment]:
        return [a for a in self.attachments if a.is_pdf]


@dataclass
class MailThread:
    thread_id: str
    subject: str = ""
    messages: List[MailMessage] = field(default_factory=list)
    labels: Set[str] = field(default_factory=set)

    def __hash__(self):
        return hash(self.thread_id)

    def __eq__(self, other):
        return isinstance(other, MailThread) and other.thread_id == self.thread_id


class DocumentSource(ABC):
    """
    All sources must implement:
    - search(): threads matching a query in the backend's listing order, capped at limit
    - ensure_label(): create the label if it does not exist
    - add_label() / remove_label(): tag or untag a thread

    Raises SourceError on backend failures.
    """

    @abstractmethod
    def search(self, query: str, limit: int) -> List[MailThread]:
        pass

    @abstractmethod
    def ensure_label(self, name: str) -> None:
        pass

    @abstractmethod
    def add_label(self, thread: MailThread, label: str) -> None:
        pass

    @abstractmethod
    def remove_label(self, thread: MailThread, label: str) -> None:
        pass
