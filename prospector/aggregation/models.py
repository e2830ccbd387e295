"""Data models for aggregation run tracking and reporting."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from prospector.domain.models import Opportunity


@dataclass
class ConnectorRunStats:
    """
    Outcome of a single connector within an aggregation run.

    Attributes:
        connector: Connector name (its type)
        position: Declaration index; lower positions win deduplication ties
        fetched_count: Opportunities the connector returned
        duration_seconds: Wall time until the connector finished or timed out
        timed_out: Whether the connector missed its deadline
        had_errors: Whether the aggregator had to substitute an empty result
        error_message: Reason for the substitution, if any
    """

    connector: str
    position: int
    fetched_count: int = 0
    duration_seconds: float = 0.0
    timed_out: bool = False
    had_errors: bool = False
    error_message: Optional[str] = None


@dataclass
class AggregationRunResult:
    """
    Result of one aggregation run.

    Attributes:
        run_id: Identifier attached to every log record of the run
        run_started_at: UTC timestamp when the run began
        run_finished_at: UTC timestamp when the run completed
        opportunities: Deduplicated opportunities in precedence order
        source_stats: Per-connector statistics in declaration order
        total_fetched: Opportunities returned across all connectors
        duplicates_dropped: Records removed by URL deduplication
        total_duration_seconds: Wall time of the entire run
        had_errors: Whether any connector timed out or broke its contract
    """

    run_id: str
    run_started_at: datetime
    run_finished_at: datetime
    opportunities: List[Opportunity] = field(default_factory=list)
    source_stats: List[ConnectorRunStats] = field(default_factory=list)
    total_fetched: int = 0
    duplicates_dropped: int = 0
    total_duration_seconds: float = 0.0
    had_errors: bool = False

    def __post_init__(self):
        """Derive aggregates from the per-connector stats."""
        if self.source_stats and self.total_fetched == 0:
            self.total_fetched = sum(s.fetched_count for s in self.source_stats)
        if self.total_fetched:
            self.duplicates_dropped = self.total_fetched - len(self.opportunities)
        self.had_errors = self.had_errors or any(s.had_errors for s in self.source_stats)

        if self.total_duration_seconds == 0.0:
            self.total_duration_seconds = (self.run_finished_at - self.run_started_at).total_seconds()

    @property
    def timed_out_connectors(self) -> List[str]:
        """Names of connectors that missed their deadline."""
        return [s.connector for s in self.source_stats if s.timed_out]
