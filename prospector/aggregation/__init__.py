"""Aggregation of connector output into one deduplicated, ordered sequence."""

from .dedupe import deduplicate_by_url
from .models import AggregationRunResult, ConnectorRunStats
from .runner import Aggregator

__all__ = [
    "Aggregator",
    "AggregationRunResult",
    "ConnectorRunStats",
    "deduplicate_by_url",
]
