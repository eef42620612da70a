"""Tests for the board maintenance scheduler."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from ptv_departures.adapters.config import AppConfig
from ptv_departures.adapters.web.schedulers import BoardScheduler


@pytest.fixture
def board_manager() -> MagicMock:
    """Board manager double."""
    manager = MagicMock()
    manager.full_refresh = AsyncMock(return_value=True)
    manager.minute_tick = AsyncMock(return_value=[])
    return manager


def test_when_created_then_daily_refresh_and_minute_tick_are_scheduled(
    board_manager: MagicMock,
) -> None:
    """Given a config, when the scheduler is created, then both jobs are registered."""
    config = AppConfig(refresh_hour=3, refresh_minute=30)

    scheduler = BoardScheduler(board_manager, config)
    info = scheduler.get_job_info()

    assert info["scheduler_running"] is False
    jobs = {job["id"]: job for job in info["jobs"]}
    assert set(jobs) == {"daily_refresh", "minute_tick"}
    assert "hour='3'" in jobs["daily_refresh"]["trigger"]
    assert "minute='30'" in jobs["daily_refresh"]["trigger"]
    assert "minute='*'" in jobs["minute_tick"]["trigger"]


@pytest.mark.asyncio
async def test_when_daily_job_fires_then_full_refresh_runs(board_manager: MagicMock) -> None:
    """Given the daily job, when it fires, then the board is fully refreshed."""
    scheduler = BoardScheduler(board_manager, AppConfig())

    await scheduler._daily_refresh()

    board_manager.full_refresh.assert_awaited_once()


@pytest.mark.asyncio
async def test_when_minute_job_fires_then_tick_runs(board_manager: MagicMock) -> None:
    """Given the minute job, when it fires, then the queues are advanced."""
    scheduler = BoardScheduler(board_manager, AppConfig())

    await scheduler._minute_tick()

    board_manager.minute_tick.assert_awaited_once()


@pytest.mark.asyncio
async def test_when_started_and_stopped_then_scheduler_runs_in_between(
    board_manager: MagicMock,
) -> None:
    """Given a scheduler, when started and stopped, then its running flag follows."""
    scheduler = BoardScheduler(board_manager, AppConfig())

    await scheduler.start()
    assert scheduler.get_job_info()["scheduler_running"] is True
    assert all(job["next_run"] for job in scheduler.get_job_info()["jobs"])

    await scheduler.stop()
    assert scheduler.scheduler.running is False
    assert scheduler.get_job_info()["scheduler_running"] is False
