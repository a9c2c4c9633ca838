# ============================================================================
# src/lab_charting/core/scheduling.py
# ============================================================================
"""
Run pacing: the wall-clock budget and the pause between extraction batches.

Both take their time source as a parameter so tests can drive them
without real time passing.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

Sleeper = Callable[[float], Awaitable[None]]


class RunBudget:
    """Wall-clock budget for one run, checked before each thread is scanned."""

    def __init__(self, max_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.max_seconds = max_seconds
        self.clock = clock
        self.started_at = clock()

    def elapsed(self) -> float:
        return self.clock() - self.started_at

    def exhausted(self) -> bool:
        return self.elapsed() > self.max_seconds


class DispatchSchedule:
    """Mandatory pause between sub-batches; never after the last one."""

    def __init__(self, pause_seconds: float, sleeper: Sleeper = asyncio.sleep):
        self.pause_seconds = pause_seconds
        self.sleeper = sleeper
        self.pauses = 0

    async def after_batch(self, index: int, total: int) -> None:
        if index >= total - 1 or self.pause_seconds <= 0:
            return
        logger.info(f"Pausing {self.pause_seconds:.0f}s before next batch")
        self.pauses += 1
        await self.sleeper(self.pause_seconds)
