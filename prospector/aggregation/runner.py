"""Aggregation run orchestration: concurrent fetch, ordered merge, deduplication."""

import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import List, Optional, Tuple
from uuid import uuid4

from prospector.config.models import AppConfig, ConnectorConfig
from prospector.connectors.base import BaseConnector
from prospector.connectors.exceptions import ConnectorError
from prospector.connectors.factory import get_connector
from prospector.domain.models import Opportunity
from prospector.logging import get_logger
from prospector.logging.context import bind_log_context, log_context
from prospector.utils.timestamps import format_timestamp_for_log, utc_now

from .dedupe import deduplicate_by_url
from .models import AggregationRunResult, ConnectorRunStats

logger = get_logger(__name__, component="aggregator")

# (connector config, future or None when the connector could not be built, stats)
_InFlight = Tuple[ConnectorConfig, Optional[Future], ConnectorRunStats]


class Aggregator:
    """
    Runs every enabled connector concurrently and merges their output.

    A run moves through Idle -> Fetching -> Merging -> Done. During Fetching
    each connector runs on its own worker thread with its own deadline; a
    connector that misses it contributes an empty result, exactly as if it had
    failed. Merging concatenates results in declaration order and keeps the
    first record for each URL, so earlier-declared connectors win ties.
    """

    def __init__(self, app_config: AppConfig):
        """
        Args:
            app_config: Application configuration; its enabled connectors, in
                order, define the run
        """
        self.app_config = app_config

    def run(self) -> List[Opportunity]:
        """Execute one aggregation run and return the deduplicated opportunities."""
        return self.run_once().opportunities

    def run_once(self) -> AggregationRunResult:
        """
        Execute one aggregation run with full statistics.

        Never raises because of a source: failing, hanging or misbehaving
        connectors only shrink the result.

        Returns:
            AggregationRunResult with opportunities and per-connector stats
        """
        run_started_at = utc_now()
        run_id = uuid4().hex
        connector_configs = self.app_config.get_enabled_connectors()

        with log_context(run_id=run_id):
            logger.info(
                "Aggregation run started",
                extra={
                    "event": "aggregation.run.started",
                    "connector_count": len(connector_configs),
                    "connectors": [c.name for c in connector_configs],
                    "run_started_at": format_timestamp_for_log(run_started_at),
                },
            )

            results, source_stats = self._fetch_all(connector_configs)

            merged = [opportunity for batch in results for opportunity in batch]
            opportunities = deduplicate_by_url(merged)

            logger.debug(
                "Merged connector results",
                extra={
                    "event": "aggregation.merge.completed",
                    "merged_count": len(merged),
                    "unique_count": len(opportunities),
                },
            )

            result = AggregationRunResult(
                run_id=run_id,
                run_started_at=run_started_at,
                run_finished_at=utc_now(),
                opportunities=opportunities,
                source_stats=source_stats,
            )

            logger.info(
                "Aggregation run completed",
                extra={
                    "event": "aggregation.run.completed",
                    "duration_ms": int(result.total_duration_seconds * 1000),
                    "total_fetched": result.total_fetched,
                    "unique_count": len(result.opportunities),
                    "duplicates_dropped": result.duplicates_dropped,
                    "timed_out": result.timed_out_connectors,
                    "had_errors": result.had_errors,
                },
            )

        return result

    def _fetch_all(
        self, connector_configs: List[ConnectorConfig]
    ) -> Tuple[List[List[Opportunity]], List[ConnectorRunStats]]:
        """Fan out all connectors, then join them in declaration order.

        Returns:
            Per-connector results and stats, both in declaration order
        """
        if not connector_configs:
            return [], []

        executor = ThreadPoolExecutor(
            max_workers=len(connector_configs), thread_name_prefix="connector"
        )
        fan_out_started = time.monotonic()

        try:
            in_flight = [
                self._submit(executor, position, connector_config)
                for position, connector_config in enumerate(connector_configs)
            ]

            results = [
                self._join(connector_config, future, stats, fan_out_started)
                for connector_config, future, stats in in_flight
            ]
        finally:
            # Workers still blocked on a timed-out connector are abandoned, not awaited
            executor.shutdown(wait=False, cancel_futures=True)

        return results, [stats for _, _, stats in in_flight]

    def _submit(
        self, executor: ThreadPoolExecutor, position: int, connector_config: ConnectorConfig
    ) -> _InFlight:
        stats = ConnectorRunStats(connector=connector_config.name, position=position)

        try:
            connector = get_connector(connector_config, self.app_config.advanced)
        except ConnectorError as e:
            stats.had_errors = True
            stats.error_message = str(e)
            logger.error(
                f"Could not create {connector_config.name} connector: {e}",
                extra={
                    "event": "connector.create.failed",
                    "connector": connector_config.name,
                    "error_type": type(e).__name__,
                },
            )
            return connector_config, None, stats

        task = bind_log_context(_timed_fetch, connector=connector_config.name)
        future = executor.submit(task, connector, connector_config)
        future.add_done_callback(lambda _f, c=connector: c.close())
        return connector_config, future, stats

    def _join(
        self,
        connector_config: ConnectorConfig,
        future: Optional[Future],
        stats: ConnectorRunStats,
        fan_out_started: float,
    ) -> List[Opportunity]:
        """Wait for one connector until its deadline and record the outcome."""
        if future is None:
            return []

        timeout = connector_config.timeout or self.app_config.advanced.connector_timeout
        remaining = max(0.0, fan_out_started + timeout - time.monotonic())

        try:
            opportunities, stats.duration_seconds = future.result(timeout=remaining)
        except FuturesTimeoutError:
            future.cancel()
            stats.timed_out = True
            stats.had_errors = True
            stats.duration_seconds = time.monotonic() - fan_out_started
            stats.error_message = f"Timed out after {timeout} seconds"
            logger.warning(
                f"{connector_config.name} connector timed out after {timeout} seconds",
                extra={
                    "event": "connector.fetch.timed_out",
                    "connector": connector_config.name,
                    "timeout_seconds": timeout,
                },
            )
            return []
        except Exception as e:
            # fetch() contains its own errors; this only fires for a broken connector
            stats.had_errors = True
            stats.duration_seconds = time.monotonic() - fan_out_started
            stats.error_message = str(e)
            logger.error(
                f"{connector_config.name} connector raised out of fetch(): {e}",
                extra={
                    "event": "connector.fetch.failed",
                    "connector": connector_config.name,
                    "error_type": type(e).__name__,
                },
                exc_info=True,
            )
            return []

        opportunities = list(opportunities)
        stats.fetched_count = len(opportunities)
        return opportunities


def _timed_fetch(
    connector: BaseConnector, connector_config: ConnectorConfig
) -> Tuple[List[Opportunity], float]:
    started = time.monotonic()
    opportunities = connector.fetch(connector_config)
    return opportunities, time.monotonic() - started
