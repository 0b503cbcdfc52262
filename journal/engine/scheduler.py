"""APScheduler integration for FastAPI.

Runs trade refreshes: a one-shot refresh shortly after each remote write
(the sheet needs a moment before reads reflect it) and an optional
periodic refresh.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)

REFRESH_AFTER_WRITE_JOB = "refresh_after_write"
PERIODIC_REFRESH_JOB = "periodic_refresh"


class RefreshScheduler:
    def __init__(self, refresh: Callable[[], Awaitable], delay_seconds: float = 2.0):
        self.refresh = refresh
        self.delay_seconds = delay_seconds
        self.scheduler = AsyncIOScheduler()

    async def _run_refresh(self):
        await self.refresh()

    def schedule_refresh(self, delay_seconds: float | None = None):
        """Queue a one-shot refresh. Writes in quick succession share one job."""
        delay = self.delay_seconds if delay_seconds is None else delay_seconds
        run_at = datetime.now(timezone.utc) + timedelta(seconds=delay)
        self.scheduler.add_job(
            self._run_refresh,
            trigger=DateTrigger(run_date=run_at),
            id=REFRESH_AFTER_WRITE_JOB,
            name="Refresh after write",
            replace_existing=True,
            misfire_grace_time=30,
        )
        logger.debug(f"Refresh scheduled in {delay:g}s")

    def start(self, interval_minutes: int = 0):
        """Start the scheduler, with a periodic refresh when interval_minutes > 0."""
        if interval_minutes > 0:
            self.scheduler.add_job(
                self._run_refresh,
                trigger=IntervalTrigger(minutes=interval_minutes),
                id=PERIODIC_REFRESH_JOB,
                name="Periodic refresh",
                replace_existing=True,
                max_instances=1,
                coalesce=True,
                misfire_grace_time=60,
            )
            logger.info(f"Periodic refresh every {interval_minutes}m")

        self.scheduler.start()
        logger.info(f"Scheduler started with {len(self.scheduler.get_jobs())} jobs")

    def stop(self):
        """Shut down the scheduler."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Scheduler stopped")

    def status(self) -> dict:
        """Return current scheduler state for the API."""
        jobs = self.scheduler.get_jobs()
        return {
            "running": self.scheduler.running,
            "job_count": len(jobs),
            "jobs": [
                {
                    "id": j.id,
                    "name": j.name,
                    "next_run": str(j.next_run_time) if getattr(j, "next_run_time", None) else None,
                    "trigger": str(j.trigger),
                }
                for j in jobs
            ],
        }
