# ============================================================================
# src/lab_charting/core/context/enums.py
# ============================================================================
"""
Processing Enums
- Match classification
- Orchestrator run states
"""

from enum import Enum


class MatchAction(str, Enum):
    AUTO_SAVE = "AUTO_SAVE"   # score >= auto-save threshold
    INBOX = "INBOX"           # needs human confirmation


class RunState(str, Enum):
    IDLE = "idle"
    LOCKED = "locked"
    SCANNING = "scanning"
    QUEUED = "queued"
    BATCH_PROCESSING = "batch_processing"
    DONE = "done"
    SKIPPED = "skipped"       # another run holds the lock
    FAILED = "failed"         # unhandled error, run aborted
