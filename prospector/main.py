"""Command-line entry point for the opportunity prospector."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import signal
import sys
import threading
import time
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from prospector.aggregation import AggregationRunResult, Aggregator
from prospector.config.environment import EnvironmentConfig
from prospector.config.exceptions import ConfigurationError
from prospector.config.loader import load_config
from prospector.config.models import AppConfig
from prospector.domain.models import Opportunity
from prospector.logging import get_logger
from prospector.logging.config import configure_logging
from prospector.output import OUTPUT_FORMATS, serialize_opportunities, write_opportunities
from prospector.scheduler import SchedulerService

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and settle the effective log level.

    Log level priority: CLI > LOG_LEVEL environment variable > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level or "INFO"

    return app_config, env_config


def emit_opportunities(
    opportunities: List[Opportunity],
    output_path: Optional[Path],
    format_type: str,
) -> None:
    """Write results to ``output_path``, or to stdout when no path is given."""
    if output_path is not None:
        write_opportunities(opportunities, output_path, format_type)
        return

    sys.stdout.write(serialize_opportunities(opportunities, format_type))
    sys.stdout.flush()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Opportunity Prospector - aggregate leads from GitHub, Reddit, "
        "Hacker News and syndication feeds into one deduplicated list"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml if present)",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help=(
            "Run a single aggregation, print the results and exit. Results are written "
            "on time, but a connector that timed out can keep the process alive until "
            "its HTTP request times out"
        ),
    )
    parser.add_argument(
        "--format",
        dest="format_type",
        default="json",
        choices=OUTPUT_FORMATS,
        help="Output format (default: json)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write results to this file instead of stdout (rewritten on every run)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, non-zero for failure). Upstream source
        failures do not affect the exit code; they only shrink the output.
    """
    start_time = time.time()
    args = build_parser().parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        enabled = app_config.get_enabled_connectors()
        logger.info(
            "Opportunity Prospector starting",
            extra={
                "event": "service.starting",
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
                "once": args.once,
                "connectors": [c.name for c in enabled],
                "scan_interval_seconds": app_config.scan_interval_seconds,
            },
        )

        aggregator = Aggregator(app_config)

        def run_and_emit() -> AggregationRunResult:
            result = aggregator.run_once()
            emit_opportunities(result.opportunities, args.output, args.format_type)
            return result

        if args.once:
            result = run_and_emit()
            logger.info(
                f"Aggregation completed: {len(result.opportunities)} opportunities "
                f"from {result.total_fetched} fetched",
                extra={
                    "event": "service.once.completed",
                    "duration_seconds": result.total_duration_seconds,
                    "had_errors": result.had_errors,
                },
            )
            return 0

        return _run_daemon(run_and_emit, app_config.scan_interval_seconds, start_time)

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error",
            extra={"event": "service.failed", "error_type": type(e).__name__},
            exc_info=True,
        )
        return 1


def _run_daemon(run_callable, interval_seconds: int, start_time: float) -> int:
    """Run aggregation on a schedule until SIGINT/SIGTERM."""
    shutdown_event = threading.Event()
    scheduler_service = SchedulerService(
        run_callable=run_callable,
        interval_seconds=interval_seconds,
        shutdown_event=shutdown_event,
    )

    def signal_handler(signum, frame):
        logger.info(
            f"Received signal {signum}, shutting down",
            extra={"event": "service.signal_received", "signal": signum},
        )
        scheduler_service.shutdown(wait=False)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    scheduler_service.start()
    logger.info("Scheduler started. Press Ctrl+C to stop", extra={"event": "service.daemon_mode.started"})

    try:
        shutdown_event.wait()
    except KeyboardInterrupt:
        scheduler_service.shutdown(wait=False)

    logger.info(
        "Opportunity Prospector stopped",
        extra={"event": "service.stopping", "uptime_seconds": round(time.time() - start_time, 2)},
    )
    return 0


def cli() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
