# ============================================================================
# src/lab_charting/stores/sqlite_store.py
# ============================================================================
"""
SQLite Document Store

Persists path-addressed documents to SQLite with raw sqlite3. One JSON
column per document, one short-lived connection per operation.
"""

import sqlite3
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple
from datetime import datetime, timezone

from .base import DocumentStore, split_path
from ..utils.exceptions import DocumentNotFoundError, StoreError

logger = logging.getLogger(__name__)


class SQLiteDocumentStore(DocumentStore):
    """
    SQLite-backed document store.

    Stores the full wire-format document so it can be served back without
    any transformation.
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._init_database()

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------
    def _connect(self) -> sqlite3.Connection:
        try:
            return sqlite3.connect(str(self.db_path))
        except sqlite3.Error as e:
            raise StoreError(f"Cannot open document store {self.db_path}: {e}") from e

    def _init_database(self):
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = self._connect()
        cur = conn.cursor()

        cur.execute("""
            CREATE TABLE IF NOT EXISTS documents (
                path        TEXT PRIMARY KEY,
                collection  TEXT NOT NULL,
                created_at  TEXT NOT NULL,
                updated_at  TEXT NOT NULL,
                -- Full typed-field document as JSON
                data        TEXT NOT NULL
            )
        """)

        cur.execute("""
            CREATE INDEX IF NOT EXISTS idx_documents_collection
            ON documents (collection, created_at)
        """)

        conn.commit()
        conn.close()
        logger.info(f"Document store initialized: {self.db_path}")

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------
    def get(self, path: str) -> Dict[str, Any]:
        path = path.strip("/")
        conn = self._connect()
        try:
            cur = conn.cursor()
            cur.execute("SELECT data FROM documents WHERE path = ?", (path,))
            row = cur.fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read {path}: {e}") from e
        finally:
            conn.close()

        if row is None:
            raise DocumentNotFoundError(path)
        return json.loads(row[0])

    def list(self, collection: str) -> List[Tuple[str, Dict[str, Any]]]:
        collection = collection.strip("/")
        conn = self._connect()
        try:
            cur = conn.cursor()
            cur.execute(
                "SELECT path, data FROM documents WHERE collection = ? "
                "ORDER BY created_at, rowid",
                (collection,)
            )
            rows = cur.fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to list {collection}: {e}") from e
        finally:
            conn.close()

        return [(path, json.loads(data)) for path, data in rows]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------
    def upsert(self, path: str, document: Dict[str, Any]) -> None:
        path = path.strip("/")
        collection, _ = split_path(path)
        now = datetime.now(timezone.utc).isoformat()

        conn = self._connect()
        try:
            cur = conn.cursor()
            cur.execute("""
                INSERT INTO documents (path, collection, created_at, updated_at, data)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(path) DO UPDATE SET
                    data = excluded.data,
                    updated_at = excluded.updated_at
            """, (path, collection, now, now, json.dumps(document)))
            conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to write {path}: {e}") from e
        finally:
            conn.close()

        logger.debug(f"Saved document {path}")
