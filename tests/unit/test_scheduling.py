# ============================================================================
# FILE: tests/unit/test_scheduling.py
# ============================================================================
"""
Unit tests for run pacing
"""

import pytest

from src.lab_charting.core.scheduling import DispatchSchedule, RunBudget


def test_budget_exhausted_only_past_limit():
    now = [0.0]
    budget = RunBudget(240, clock=lambda: now[0])

    now[0] = 240.0
    assert not budget.exhausted()
    now[0] = 240.5
    assert budget.exhausted()
    assert budget.elapsed() == 240.5


@pytest.mark.asyncio
async def test_pause_skipped_after_last_batch(sleeper):
    schedule = DispatchSchedule(30, sleeper)
    for index in range(3):
        await schedule.after_batch(index, 3)
    assert sleeper.calls == [30, 30]
    assert schedule.pauses == 2


@pytest.mark.asyncio
async def test_zero_pause_never_sleeps(sleeper):
    schedule = DispatchSchedule(0, sleeper)
    await schedule.after_batch(0, 2)
    assert sleeper.calls == []
