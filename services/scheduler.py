"""
Polling Scheduler Module

Owns the single interval job that refreshes a live session. The job is
always removed before a new one is added, so there is never more than one
timer, and APScheduler's max_instances=1 keeps ticks from overlapping.
"""

from typing import Any, Awaitable, Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from config import settings
from utils.logger import get_logger

logger = get_logger(__name__)


class PollingScheduler:
    """Interval timer for live-mode polling."""

    def __init__(self, callback: Callable[[], Awaitable[Any]],
                 interval_seconds: Optional[int] = None,
                 scheduler: Optional[AsyncIOScheduler] = None,
                 job_id: str = settings.POLL_JOB_ID):
        """
        Args:
            callback: Coroutine function run on every tick
            interval_seconds: Tick period (defaults to settings.POLL_INTERVAL_SECONDS)
            scheduler: APScheduler instance to use; a new AsyncIOScheduler if omitted
            job_id: Identifier of the polling job
        """
        self.callback = callback
        self.interval_seconds = interval_seconds or settings.POLL_INTERVAL_SECONDS
        self.scheduler = scheduler or AsyncIOScheduler()
        self.job_id = job_id

    @property
    def is_armed(self) -> bool:
        return self.scheduler.get_job(self.job_id) is not None

    def arm(self) -> None:
        """Cancel any pending timer and start a fresh one."""
        self.disarm()

        if not self.scheduler.running:
            # Needs a running event loop
            self.scheduler.start()

        self.scheduler.add_job(
            self.callback,
            IntervalTrigger(seconds=self.interval_seconds),
            id=self.job_id,
            name='Poll provider for new brand mentions',
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        logger.debug(f"Polling armed (every {self.interval_seconds}s)")

    def disarm(self) -> None:
        """Cancel the pending timer, if any."""
        if self.scheduler.get_job(self.job_id) is not None:
            self.scheduler.remove_job(self.job_id)
            logger.debug("Polling disarmed")

    def shutdown(self) -> None:
        """Cancel the timer and stop the underlying scheduler."""
        self.disarm()
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Polling scheduler stopped")
