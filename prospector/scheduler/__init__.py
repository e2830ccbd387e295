"""Scheduling of periodic aggregation runs."""

from .service import SchedulerService

__all__ = [
    "SchedulerService",
]
