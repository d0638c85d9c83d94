"""
Unit tests for Token Sweeper scheduling
"""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock

from src.adapter.services.token_sweeper import TokenSweeper


@pytest.mark.asyncio
async def test_sweeper_runs_immediately_and_stops():
    """Test the sweep runs once on start and the task is cancelled on stop"""
    sweeper = TokenSweeper(MagicMock(), interval_seconds=3600)
    sweeper.run_once = AsyncMock(return_value=2)

    sweeper.start()
    await asyncio.sleep(0.05)

    assert sweeper.running
    sweeper.run_once.assert_awaited_once()

    await sweeper.stop()
    await asyncio.sleep(0.05)
    assert not sweeper.running


@pytest.mark.asyncio
async def test_sweeper_survives_failed_run():
    """Test a failing sweep is logged and the loop keeps going"""
    calls = []

    async def run_once():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("db down")
        return 0

    sweeper = TokenSweeper(MagicMock(), interval_seconds=0.01)
    sweeper.run_once = run_once

    sweeper.start()
    await asyncio.sleep(0.1)
    await sweeper.stop()
    await asyncio.sleep(0.01)

    assert len(calls) >= 2
    assert not sweeper.running


@pytest.mark.asyncio
async def test_sweeper_start_is_idempotent():
    """Test starting twice keeps a single task"""
    sweeper = TokenSweeper(MagicMock(), interval_seconds=3600)
    sweeper.run_once = AsyncMock(return_value=0)

    sweeper.start()
    first_task = sweeper._task
    sweeper.start()

    assert sweeper._task is first_task
    await sweeper.stop()
    await asyncio.sleep(0.01)


@pytest.mark.asyncio
async def test_stop_waits_for_task_to_finish():
    """Test stop returns only once the task is done, even mid-run"""
    started = asyncio.Event()

    async def slow_run_once():
        started.set()
        await asyncio.sleep(3600)
        return 0

    sweeper = TokenSweeper(MagicMock(), interval_seconds=3600)
    sweeper.run_once = slow_run_once

    sweeper.start()
    await started.wait()
    task = sweeper._task
    await sweeper.stop()

    assert task.done()
    assert not sweeper.running


@pytest.mark.asyncio
async def test_stop_without_start_is_noop():
    """Test stopping a sweeper that never started does nothing"""
    sweeper = TokenSweeper(MagicMock())

    await sweeper.stop()

    assert not sweeper.running
