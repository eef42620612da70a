"""Scheduler firing the daily full refresh and the minute tick."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from ptv_departures.domain.contracts.board_scheduler import BoardSchedulerProtocol

if TYPE_CHECKING:
    from ptv_departures.adapters.config.app_config import AppConfig
    from ptv_departures.application.services.board_manager import BoardManager

logger = logging.getLogger(__name__)


class BoardScheduler(BoardSchedulerProtocol):
    """Runs board maintenance jobs at fixed wall-clock times."""

    def __init__(self, board_manager: BoardManager, config: AppConfig) -> None:
        """Initialize the scheduler.

        Args:
            board_manager: The board manager whose jobs are scheduled.
            config: Application configuration (timezone and refresh time).
        """
        self.board_manager = board_manager
        self.config = config
        self.scheduler = AsyncIOScheduler(timezone=config.timezone)
        self._setup_jobs()

    def _setup_jobs(self) -> None:
        """Setup scheduled jobs."""
        # Full refresh for the new service day
        self.scheduler.add_job(
            func=self._daily_refresh,
            trigger=CronTrigger(
                hour=self.config.refresh_hour,
                minute=self.config.refresh_minute,
                timezone=self.config.timezone,
            ),
            id="daily_refresh",
            name="Daily full board refresh",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self.scheduler.add_job(
            func=self._minute_tick,
            trigger=CronTrigger(minute="*", timezone=self.config.timezone),
            id="minute_tick",
            name="Advance platform queues",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )

    async def start(self) -> None:
        """Start the scheduler."""
        logger.info(
            f"Starting board scheduler (daily refresh at "
            f"{self.config.refresh_hour:02d}:{self.config.refresh_minute:02d} "
            f"{self.config.timezone})"
        )
        self.scheduler.start()

    async def stop(self) -> None:
        """Stop the scheduler."""
        logger.info("Stopping board scheduler")
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            # Shutdown completes in a callback on the event loop
            await asyncio.sleep(0)

    async def _daily_refresh(self) -> None:
        logger.info("Starting scheduled full refresh")
        await self.board_manager.full_refresh()

    async def _minute_tick(self) -> None:
        tasks = await self.board_manager.minute_tick()
        if tasks:
            logger.debug(f"Minute tick started {len(tasks)} enrichment(s)")

    def get_job_info(self) -> dict[str, Any]:
        """Get information about scheduled jobs."""
        jobs = []
        for job in self.scheduler.get_jobs():
            # Jobs of a scheduler that has not started have no next run time yet
            next_run = getattr(job, "next_run_time", None)
            jobs.append(
                {
                    "id": job.id,
                    "name": job.name,
                    "next_run": next_run.isoformat() if next_run else None,
                    "trigger": str(job.trigger),
                }
            )

        return {
            "scheduler_running": self.scheduler.running,
            "jobs": jobs,
        }
