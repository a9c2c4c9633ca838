# ============================================================================
# src/lab_charting/sources/directory_source.py
# ============================================================================
"""
Directory-backed Document Source

Layout:
    <root>/
        labels.json                 # known labels (created on demand)
        <thread id>/
            thread.json             # manifest
            report.pdf              # attachment files

thread.json:
    {
        "subject": "Baby of Priya lab report",
        "messages": [{"attachments": ["report.pdf", "report_letterhead.pdf"]}],
        "labels": ["Charted"]
    }

Supported query terms (space separated, all must hold):
    has:attachment      thread has at least one attachment
    label:<name>        thread carries the label
    -label:<name>       thread does not carry the label
    <word>              case-insensitive subject substring
"""

import json
import logging
import mimetypes
from pathlib import Path
from typing import Any, Callable, Dict, List

from ..utils.exceptions import SourceError
from .base import Attachment, DocumentSource, MailMessage, MailThread

logger = logging.getLogger(__name__)

MANIFEST_NAME = "thread.json"
LABELS_NAME = "labels.json"


def _compile_query(query: str) -> List[Callable[[Dict[str, Any]], bool]]:
    """Predicates over a thread manifest, so attachments are only read for matches."""
    predicates: List[Callable[[Dict[str, Any]], bool]] = []
    for term in query.split():
        lowered = term.lower()
        if lowered == "has:attachment":
            predicates.append(lambda m: any(msg.get("attachments") for msg in _messages(m)))
        elif lowered.startswith("-label:"):
            name = term[len("-label:"):]
            predicates.append(lambda m, name=name: name not in _labels(m))
        elif lowered.startswith("label:"):
            name = term[len("label:"):]
            predicates.append(lambda m, name=name: name in _labels(m))
        else:
            predicates.append(lambda m, word=lowered: word in str(m.get("subject", "")).lower())
    return predicates


def _messages(manifest: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [msg for msg in manifest.get("messages", []) if isinstance(msg, dict)]


def _labels(manifest: Dict[str, Any]) -> set:
    return set(manifest.get("labels", []))


class DirectoryDocumentSource(DocumentSource):
    """Threads stored as sub-directories of a root folder."""

    def __init__(self, root: Path):
        self.root = Path(root)
        if not self.root.is_dir():
            raise SourceError(f"Document source directory not found: {self.root}")

    # ------------------------------------------------------------------
    # Manifest I/O
    # ------------------------------------------------------------------
    def _read_json(self, path: Path) -> Dict[str, Any]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise SourceError(f"Cannot read {path}: {e}") from e

    def _write_json(self, path: Path, data: Any) -> None:
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise SourceError(f"Cannot write {path}: {e}") from e

    def _load_attachment(self, thread_dir: Path, name: str) -> Attachment:
        path = thread_dir / name
        try:
            content = path.read_bytes()
        except OSError as e:
            raise SourceError(f"Cannot read attachment {path}: {e}") from e
        content_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
        return Attachment(name=name, size=len(content), content_type=content_type, content=content)

    def _load_thread(self, thread_dir: Path, manifest: Dict[str, Any]) -> MailThread:
        messages = [
            MailMessage(attachments=[
                self._load_attachment(thread_dir, name)
                for name in message.get("attachments", [])
            ])
            for message in _messages(manifest)
        ]
        return MailThread(
            thread_id=thread_dir.name,
            subject=manifest.get("subject", ""),
            messages=messages,
            labels=_labels(manifest),
        )

    # ------------------------------------------------------------------
    # DocumentSource
    # ------------------------------------------------------------------
    def search(self, query: str, limit: int) -> List[MailThread]:
        """
        Threads in thread-id order. Unreadable threads are logged and
        skipped so one bad directory does not block the rest.
        """
        predicates = _compile_query(query)
        threads = []
        for thread_dir in sorted(p for p in self.root.iterdir() if p.is_dir()):
            if not (thread_dir / MANIFEST_NAME).exists():
                continue
            try:
                manifest = self._read_json(thread_dir / MANIFEST_NAME)
                if not isinstance(manifest, dict):
                    raise SourceError(f"Manifest of {thread_dir.name} is not an object")
                if not all(predicate(manifest) for predicate in predicates):
                    continue
                thread = self._load_thread(thread_dir, manifest)
            except SourceError as e:
                logger.warning(f"Skipping thread {thread_dir.name}: {e}")
                continue

            threads.append(thread)
            if len(threads) >= limit:
                break
        logger.debug(f"Query '{query}' matched {len(threads)} thread(s)")
        return threads

    def known_labels(self) -> List[str]:
        path = self.root / LABELS_NAME
        if not path.exists():
            return []
        return list(self._read_json(path))

    def ensure_label(self, name: str) -> None:
        labels = self.known_labels()
        if name not in labels:
            labels.append(name)
            self._write_json(self.root / LABELS_NAME, labels)
            logger.info(f"Created label '{name}'")

    def _update_labels(self, thread: MailThread, update: Callable[[set], None]) -> None:
        manifest_path = self.root / thread.thread_id / MANIFEST_NAME
        manifest = self._read_json(manifest_path)
        labels = set(manifest.get("labels", []))
        update(labels)
        manifest["labels"] = sorted(labels)
        self._write_json(manifest_path, manifest)
        thread.labels = labels

    def add_label(self, thread: MailThread, label: str) -> None:
        self._update_labels(thread, lambda labels: labels.add(label))

    def remove_label(self, thread: MailThread, label: str) -> None:
        self._update_labels(thread, lambda labels: labels.discard(label))
