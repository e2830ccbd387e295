"""Scheduler service for periodic aggregation runs."""

import threading
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from apscheduler.events import EVENT_JOB_ERROR, JobExecutionEvent
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from prospector.logging import get_logger

logger = get_logger(__name__, component="scheduler")

JOB_ID = "aggregation-run"


class SchedulerService:
    """
    Wraps APScheduler to trigger aggregation runs at a fixed interval.

    Runs on a BackgroundScheduler so the main thread stays free for signal
    handling. At most one run is in flight; missed runs are coalesced.
    """

    def __init__(
        self,
        run_callable: Callable[[], Any],
        interval_seconds: int,
        shutdown_event: Optional[threading.Event] = None,
    ):
        """
        Args:
            run_callable: Called on each tick (e.g. a closure around Aggregator.run_once)
            interval_seconds: Interval between runs in seconds
            shutdown_event: Set when the scheduler shuts down
        """
        self.run_callable = run_callable
        self.interval_seconds = interval_seconds
        self.shutdown_event = shutdown_event

        self.scheduler = BackgroundScheduler(
            job_defaults={
                "max_instances": 1,
                "coalesce": True,
                "misfire_grace_time": interval_seconds,
            },
            timezone=timezone.utc,
        )
        self.scheduler.add_listener(self._on_job_error, EVENT_JOB_ERROR)

    def start(self) -> None:
        """Register the run job and start the scheduler; the first run fires immediately."""
        next_run = datetime.now(timezone.utc)
        self.scheduler.add_job(
            func=self.run_callable,
            trigger=IntervalTrigger(seconds=self.interval_seconds, timezone=timezone.utc),
            id=JOB_ID,
            name="Opportunity aggregation run",
            replace_existing=True,
            next_run_time=next_run,
        )
        self.scheduler.start()

        logger.info(
            f"Scheduler started with interval: {self.interval_seconds} seconds",
            extra={
                "event": "scheduler.started",
                "interval_seconds": self.interval_seconds,
                "next_run_time": next_run.isoformat(),
            },
        )

    def shutdown(self, wait: bool = False) -> None:
        """
        Stop the scheduler and signal the shutdown event.

        Args:
            wait: If True, wait for a running job to complete
        """
        logger.info(
            "Shutting down scheduler",
            extra={"event": "scheduler.stopping", "wait_for_jobs": wait},
        )

        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)

        if self.shutdown_event:
            self.shutdown_event.set()

        logger.info("Scheduler shutdown complete", extra={"event": "scheduler.stopped"})

    def trigger_now(self) -> None:
        """Run the callable synchronously on the current thread."""
        logger.info("Triggering immediate aggregation run", extra={"event": "scheduler.trigger_now"})
        self.run_callable()

    def is_running(self) -> bool:
        return self.scheduler.running

    def get_next_run_time(self) -> Optional[datetime]:
        job = self.scheduler.get_job(JOB_ID)
        return job.next_run_time if job else None

    def _on_job_error(self, event: JobExecutionEvent) -> None:
        # The next tick still fires; a failed output write should not stop the service
        logger.error(
            f"Scheduled run failed: {event.exception}",
            extra={"event": "scheduler.job.failed", "job_id": event.job_id},
        )
