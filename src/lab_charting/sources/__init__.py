"""
Document sources (mail threads with PDF attachments).
"""

from .base import Attachment, MailMessage, MailThread, DocumentSource
from .directory_source import DirectoryDocumentSource

__all__ = [
    "Attachment",
    "MailMessage",
    "MailThread",
    "DocumentSource",
    "DirectoryDocumentSource",
]
