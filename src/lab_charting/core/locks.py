# ============================================================================
# src/lab_charting/core/locks.py
# ============================================================================
"""
Run Lock

At most one orchestration run may be active at a time. A run that cannot
take the lock within its bounded wait is skipped, not failed.

- SQLiteRunLock: lease row in a SQLite database, shared across processes.
  A lease older than lease_seconds belongs to a crashed run and is taken over.
- InProcessRunLock: threading.Lock, for single-process deployments and tests.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable
import logging
import sqlite3
import threading
import time
import uuid

from ..utils.exceptions import LockError

logger = logging.getLogger(__name__)


class RunLock(ABC):

    @abstractmethod
    def acquire(self, timeout: float) -> bool:
        """Wait up to timeout seconds; True if the lock is now held."""
        pass

    @abstractmethod
    def release(self) -> None:
        pass


class InProcessRunLock(RunLock):

    def __init__(self):
        self._lock = threading.Lock()

    def acquire(self, timeout: float) -> bool:
        if timeout <= 0:
            return self._lock.acquire(blocking=False)
        return self._lock.acquire(timeout=timeout)

    def release(self) -> None:
        if self._lock.locked():
            self._lock.release()


class SQLiteRunLock(RunLock):
    """
    Lease-based lock on a single row of the run_lock table.

    The check-and-take happens inside BEGIN IMMEDIATE so two processes
    can never both see the row as free.
    """

    def __init__(
        self,
        db_path: Path,
        name: str = "lab_charting",
        lease_seconds: float = 600.0,
        poll_interval: float = 0.5,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.db_path = Path(db_path)
        self.name = name
        self.lease_seconds = lease_seconds
        self.poll_interval = poll_interval
        self.clock = clock
        self.sleep = sleep
        self.owner = uuid.uuid4().hex
        self._held = False
        self._init_database()

    def _connect(self) -> sqlite3.Connection:
        # Autocommit mode so BEGIN IMMEDIATE is issued explicitly
        return sqlite3.connect(str(self.db_path), isolation_level=None, timeout=5.0)

    def _init_database(self):
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = self._connect()
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS run_lock (
                    name        TEXT PRIMARY KEY,
                    owner       TEXT NOT NULL,
                    acquired_at REAL NOT NULL
                )
            """)
        except sqlite3.Error as e:
            raise LockError(f"Cannot initialize run lock table: {e}") from e
        finally:
            conn.close()

    def _try_acquire(self) -> bool:
        now = self.clock()
        conn = self._connect()
        try:
            conn.execute("BEGIN IMMEDIATE")
            row = conn.execute(
                "SELECT owner, acquired_at FROM run_lock WHERE name = ?", (self.name,)
            ).fetchone()

            if row is not None:
                owner, acquired_at = row
                if now - acquired_at < self.lease_seconds:
                    conn.execute("ROLLBACK")
                    return False
                logger.warning(
                    f"Taking over stale run lock held by {owner} "
                    f"({now - acquired_at:.0f}s old)"
                )

            conn.execute(
                "INSERT OR REPLACE INTO run_lock (name, owner, acquired_at) VALUES (?, ?, ?)",
                (self.name, self.owner, now)
            )
            conn.execute("COMMIT")
            return True
        except sqlite3.OperationalError as e:
            # Another process holds the write lock right now
            logger.debug(f"Run lock busy: {e}")
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            return False
        except sqlite3.Error as e:
            raise LockError(f"Run lock acquisition failed: {e}") from e
        finally:
            conn.close()

    def acquire(self, timeout: float) -> bool:
        deadline = self.clock() + max(timeout, 0.0)
        while True:
            if self._try_acquire():
                self._held = True
                return True
            if self.clock() >= deadline:
                return False
            self.sleep(self.poll_interval)

    def release(self) -> None:
        if not self._held:
            return
        conn = self._connect()
        try:
            conn.execute(
                "DELETE FROM run_lock WHERE name = ? AND owner = ?", (self.name, self.owner)
            )
        except sqlite3.Error as e:
            raise LockError(f"Run lock release failed: {e}") from e
        finally:
            conn.close()
            self._held = False
