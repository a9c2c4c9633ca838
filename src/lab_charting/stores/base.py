# ============================================================================
# src/lab_charting/stores/base.py
# ============================================================================
"""
Document Store Interface

Path-addressed document database: a document lives at
"<collection>/<document id>", collections may be nested
("public/data/medical_charts/<patient id>"). Documents are stored in the
typed-field wire format (see field_codec.py).
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Tuple
import uuid

from ..utils.exceptions import DocumentNotFoundError


def split_path(path: str) -> Tuple[str, str]:
    """'a/b/c' -> ('a/b', 'c')"""
    path = path.strip("/")
    if "/" not in path:
        return "", path
    collection, doc_id = path.rsplit("/", 1)
    return collection, doc_id


def join_path(collection: str, doc_id: str) -> str:
    return f"{collection.strip('/')}/{doc_id}"


class DocumentStore(ABC):
    """
    All backends must implement:
    - get(): read one document (DocumentNotFoundError if absent)
    - upsert(): create or fully replace the document at a path
    - list(): direct children of a collection
    create() is built on upsert() with a generated id.
    """

    @abstractmethod
    def get(self, path: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    def upsert(self, path: str, document: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    def list(self, collection: str) -> List[Tuple[str, Dict[str, Any]]]:
        """Return (path, document) pairs, oldest first."""
        pass

    def exists(self, path: str) -> bool:
        try:
            self.get(path)
            return True
        except DocumentNotFoundError:
            return False

    def create(self, collection: str, document: Dict[str, Any]) -> str:
        """Store under a new random id and return the document path."""
        path = join_path(collection, uuid.uuid4().hex)
        self.upsert(path, document)
        return path
