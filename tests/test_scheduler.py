"""Unit tests for the scheduler service.

Tests the SchedulerService including:
- Job defaults (max_instances=1, coalesce=True)
- Immediate first run
- Start/shutdown lifecycle and shutdown event
- Job failures do not stop the schedule
"""

import threading
import time
from datetime import datetime
from unittest.mock import Mock

from prospector.scheduler import SchedulerService


class TestSchedulerService:
    """Test suite for SchedulerService."""

    def test_scheduler_initialization(self):
        """Test that scheduler initializes with correct parameters."""
        mock_callable = Mock()
        shutdown_event = threading.Event()

        scheduler = SchedulerService(
            run_callable=mock_callable,
            interval_seconds=3600,
            shutdown_event=shutdown_event,
        )

        assert scheduler.interval_seconds == 3600
        assert scheduler.run_callable is mock_callable
        assert not scheduler.is_running()

    def test_job_defaults(self):
        """Test that runs never overlap and missed runs are coalesced."""
        scheduler = SchedulerService(run_callable=Mock(), interval_seconds=900)

        assert scheduler.scheduler._job_defaults["max_instances"] == 1
        assert scheduler.scheduler._job_defaults["coalesce"] is True
        assert scheduler.scheduler._job_defaults["misfire_grace_time"] == 900

    def test_start_and_shutdown(self):
        """Test the lifecycle and that shutdown sets the event."""
        shutdown_event = threading.Event()
        scheduler = SchedulerService(
            run_callable=Mock(), interval_seconds=3600, shutdown_event=shutdown_event
        )

        scheduler.start()
        assert scheduler.is_running()
        assert isinstance(scheduler.get_next_run_time(), datetime)

        scheduler.shutdown(wait=False)
        assert not scheduler.is_running()
        assert shutdown_event.is_set()

    def test_immediate_first_run(self):
        """Test that the first run fires right after start."""
        ran = threading.Event()
        scheduler = SchedulerService(run_callable=ran.set, interval_seconds=3600)

        scheduler.start()
        try:
            assert ran.wait(timeout=5)
        finally:
            scheduler.shutdown(wait=True)

    def test_failed_run_keeps_scheduler_alive(self):
        """Test that an exception in a run is logged and the scheduler keeps running."""
        attempted = threading.Event()

        def failing_run():
            attempted.set()
            raise RuntimeError("disk full")

        scheduler = SchedulerService(run_callable=failing_run, interval_seconds=3600)
        scheduler.start()
        try:
            assert attempted.wait(timeout=5)
            time.sleep(0.1)
            assert scheduler.is_running()
        finally:
            scheduler.shutdown(wait=True)

    def test_trigger_now_runs_synchronously(self):
        """Test that trigger_now calls the callable on the current thread."""
        mock_callable = Mock()
        scheduler = SchedulerService(run_callable=mock_callable, interval_seconds=3600)

        scheduler.trigger_now()

        mock_callable.assert_called_once_with()

    def test_shutdown_without_start(self):
        """Test that shutting down an idle scheduler is safe."""
        scheduler = SchedulerService(run_callable=Mock(), interval_seconds=3600, shutdown_event=None)

        scheduler.shutdown()

        assert not scheduler.is_running()
