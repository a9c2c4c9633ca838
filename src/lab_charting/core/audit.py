# ============================================================================
# src/lab_charting/core/audit.py
# ============================================================================
"""
Run Audit Trail

Every routing decision touches a patient's record, so each one is kept:

- Run start / completion with the run summary
- AUTO_SAVE, INBOX and FALLBACK decisions per document
- Batch failures and skipped documents

All audit data stored locally in SQLite database.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional
import json
import logging
import sqlite3
from datetime import datetime, timezone


class RunAuditLogger:
    """
    Audit trail of orchestration runs.

    Stores:
    - One row per run (state, timings, summary counters)
    - One row per event within a run
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.logger = logging.getLogger(__name__)

        self._init_database()

    def _init_database(self):
        """Create audit database schema if not exists"""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(str(self.db_path))
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS runs (
                run_id TEXT PRIMARY KEY,
                started_at TEXT NOT NULL,
                finished_at TEXT,
                state TEXT,
                summary TEXT
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS run_events (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                run_id TEXT NOT NULL,
                timestamp TEXT NOT NULL,
                event_type TEXT NOT NULL,
                filename TEXT,
                patient_id TEXT,
                score REAL,
                reason TEXT,
                details TEXT,
                FOREIGN KEY (run_id) REFERENCES runs (run_id)
            )
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_run_events_run
            ON run_events (run_id, id)
        """)

        conn.commit()
        conn.close()

        self.logger.info(f"Audit database initialized: {self.db_path}")

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()

    def log_run_start(self, run_id: str):
        conn = sqlite3.connect(str(self.db_path))
        conn.execute(
            "INSERT OR REPLACE INTO runs (run_id, started_at) VALUES (?, ?)",
            (run_id, self._now())
        )
        conn.commit()
        conn.close()

    def log_run_complete(self, run_id: str, state: str, summary: Dict[str, Any]):
        conn = sqlite3.connect(str(self.db_path))
        conn.execute(
            "UPDATE runs SET finished_at = ?, state = ?, summary = ? WHERE run_id = ?",
            (self._now(), state, json.dumps(summary), run_id)
        )
        conn.commit()
        conn.close()

    def log_event(
        self,
        run_id: str,
        event_type: str,
        filename: Optional[str] = None,
        patient_id: Optional[str] = None,
        score: Optional[float] = None,
        reason: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """Record one routing decision or failure."""
        conn = sqlite3.connect(str(self.db_path))
        conn.execute("""
            INSERT INTO run_events (
                run_id, timestamp, event_type, filename,
                patient_id, score, reason, details
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """, (
            run_id,
            self._now(),
            event_type,
            filename,
            patient_id,
            score,
            reason,
            json.dumps(details or {})
        ))
        conn.commit()
        conn.close()

    def get_trail(self, run_id: str) -> List[Dict[str, Any]]:
        """Retrieve every event of a run in insertion order"""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        cursor = conn.cursor()

        cursor.execute("""
            SELECT * FROM run_events
            WHERE run_id = ?
            ORDER BY id
        """, (run_id,))

        trail = []
        for row in cursor.fetchall():
            event = dict(row)
            event["details"] = json.loads(event["details"]) if event["details"] else {}
            trail.append(event)

        conn.close()

        return trail

    def get_run(self, run_id: str) -> Optional[Dict[str, Any]]:
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        row = conn.execute("SELECT * FROM runs WHERE run_id = ?", (run_id,)).fetchone()
        conn.close()

        if row is None:
            return None
        run = dict(row)
        run["summary"] = json.loads(run["summary"]) if run["summary"] else None
        return run
