"""Periodic day-change polling for expiry notifications."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .config import MAX_POLL_INTERVAL

if TYPE_CHECKING:
    from .notifier import ExpiryNotifier

logger = logging.getLogger(__name__)

_JOB_ID = "check_day"


class ExpiryScheduler:
    """Polls the clock and tells the notifier when the calendar day changes.

    Uses an APScheduler interval job on the running asyncio loop. Can be used
    as an async context manager so the polling job is always stopped on exit.
    """

    def __init__(
        self, notifier: ExpiryNotifier, poll_interval: int = MAX_POLL_INTERVAL
    ) -> None:
        """Initialize the scheduler for a notifier.

        Args:
            notifier: The ExpiryNotifier to poll.
            poll_interval: Seconds between checks, 1 to 60.

        Raises:
            ImportError: If apscheduler is not installed.
            ValueError: If poll_interval is out of range.
        """
        try:
            from apscheduler.schedulers.asyncio import AsyncIOScheduler
            from apscheduler.triggers.interval import IntervalTrigger
        except ImportError:
            raise ImportError(
                "apscheduler is required: pip install 'freshtrack[scheduler]'"
            )

        if not 1 <= poll_interval <= MAX_POLL_INTERVAL:
            raise ValueError(
                f"poll_interval must be between 1 and {MAX_POLL_INTERVAL} "
                f"seconds, got {poll_interval}"
            )

        self._notifier = notifier
        self._poll_interval = poll_interval
        self._scheduler = AsyncIOScheduler()
        self._IntervalTrigger = IntervalTrigger
        self._running = False

    def setup_jobs(self) -> None:
        """Register the day-change polling job."""
        self._scheduler.add_job(
            self._job_check_day,
            trigger=self._IntervalTrigger(seconds=self._poll_interval),
            id=_JOB_ID,
            name="Day change check",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        logger.info("Registered day change check every %ds", self._poll_interval)

    def start(self) -> None:
        """Start polling. Must be called from within a running event loop."""
        if self._running:
            return
        self.setup_jobs()
        self._scheduler.start()
        self._running = True
        logger.info("Scheduler started")

    def stop(self) -> None:
        """Stop polling."""
        if self._running:
            self._scheduler.shutdown(wait=False)
            self._running = False
            logger.info("Scheduler stopped")

    @property
    def running(self) -> bool:
        return self._running

    def get_jobs(self) -> list[dict]:
        """Return info about scheduled jobs."""
        jobs = []
        for job in self._scheduler.get_jobs():
            next_run = getattr(job, "next_run_time", None)
            jobs.append({
                "id": job.id,
                "name": job.name,
                "next_run": str(next_run) if next_run else None,
            })
        return jobs

    async def __aenter__(self) -> ExpiryScheduler:
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.stop()

    async def _job_check_day(self) -> None:
        # A coroutine job runs on the event loop thread, not in a worker
        try:
            self._notifier.check_day()
        except Exception:
            logger.exception("Day change check failed")
