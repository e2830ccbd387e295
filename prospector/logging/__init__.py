"""Structured logging helpers for the opportunity prospector."""

import logging
from typing import Optional


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges a default component into every record's extras."""

    def process(self, msg, kwargs):
        # Fields passed on the call override the adapter defaults
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(name: str, component: Optional[str] = None):
    """Get a logger, optionally tagging every record with a ``component`` field.

    Args:
        name: Logger name (typically __name__)
        component: Component identifier injected into all records
            (e.g. "connector", "aggregator", "scheduler")

    Returns:
        Logger or ComponentLoggerAdapter instance

    Example:
        >>> logger = get_logger(__name__, component="aggregator")
        >>> logger.info("Run started", extra={"event": "aggregation.run.started"})
    """
    logger = logging.getLogger(name)

    if component:
        return ComponentLoggerAdapter(logger, {"component": component})

    return logger
