# ============================================================================
# src/lab_charting/stores/memory_store.py
# ============================================================================
"""
In-memory document store for tests and dry runs.
"""

import copy
from typing import Any, Dict, List, Tuple

from .base import DocumentStore, split_path
from ..utils.exceptions import DocumentNotFoundError


class InMemoryDocumentStore(DocumentStore):

    def __init__(self):
        # Insertion-ordered: list() returns oldest first
        self._documents: Dict[str, Dict[str, Any]] = {}

    def get(self, path: str) -> Dict[str, Any]:
        path = path.strip("/")
        if path not in self._documents:
            raise DocumentNotFoundError(path)
        return copy.deepcopy(self._documents[path])

    def upsert(self, path: str, document: Dict[str, Any]) -> None:
        self._documents[path.strip("/")] = copy.deepcopy(document)

    def list(self, collection: str) -> List[Tuple[str, Dict[str, Any]]]:
        collection = collection.strip("/")
        return [
            (path, copy.deepcopy(doc))
            for path, doc in self._documents.items()
            if split_path(path)[0] == collection
        ]
