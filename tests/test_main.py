"""Unit tests for the main entry point.

Tests the main() function including:
- CLI argument parsing
- Log level priority (CLI > env > config)
- Single-run mode output to stdout or file
- Daemon mode wiring
- Exit code handling
"""

import json
from unittest.mock import Mock, patch

import pytest

from prospector.aggregation import AggregationRunResult, ConnectorRunStats
from prospector.config.environment import EnvironmentConfig
from prospector.config.exceptions import ConfigurationError
from prospector.config.models import AppConfig, LoggingConfig
from prospector.domain.models import Opportunity
from prospector.main import build_parser, load_runtime_config, main
from prospector.utils.timestamps import utc_now


@pytest.fixture
def run_result():
    """Aggregation result with one record and one failed connector."""
    now = utc_now()
    return AggregationRunResult(
        run_id="abc123",
        run_started_at=now,
        run_finished_at=now,
        opportunities=[
            Opportunity(source="github", title="Issue", url="https://github.com/a/b/issues/1")
        ],
        source_stats=[
            ConnectorRunStats(connector="github", position=0, fetched_count=1),
            ConnectorRunStats(connector="reddit", position=1, timed_out=True, had_errors=True),
        ],
    )


@pytest.fixture
def runtime_config():
    """Configuration pair as returned by load_runtime_config."""
    return AppConfig(), EnvironmentConfig(log_level="INFO")


class TestLoadRuntimeConfig:
    """Test suite for load_runtime_config helper."""

    def test_cli_level_wins(self):
        """Test that the CLI flag overrides env and config."""
        with patch("prospector.main.load_config") as mock_load:
            mock_load.return_value = (
                AppConfig(logging=LoggingConfig(level="ERROR")),
                EnvironmentConfig(log_level="WARNING"),
            )

            _, env_config = load_runtime_config(None, "DEBUG")

        assert env_config.log_level == "DEBUG"

    def test_env_level_beats_config(self):
        """Test that LOG_LEVEL overrides the config file."""
        with patch("prospector.main.load_config") as mock_load:
            mock_load.return_value = (
                AppConfig(logging=LoggingConfig(level="ERROR")),
                EnvironmentConfig(log_level="WARNING"),
            )

            _, env_config = load_runtime_config(None, None)

        assert env_config.log_level == "WARNING"

    def test_config_level_used_last(self):
        """Test that the config file level applies when nothing overrides it."""
        with patch("prospector.main.load_config") as mock_load:
            mock_load.return_value = (
                AppConfig(logging=LoggingConfig(level="ERROR")),
                EnvironmentConfig(),
            )

            _, env_config = load_runtime_config(None, None)

        assert env_config.log_level == "ERROR"

    def test_real_config_file(self, clean_env, tmp_path):
        """Test loading through the real loader."""
        config_file = tmp_path / "custom.yaml"
        config_file.write_text('connectors:\n  - type: hackernews\nscan_interval: "PT30M"\n')

        app_config, env_config = load_runtime_config(config_file, None)

        assert app_config.scan_interval_seconds == 1800
        assert env_config.log_level == "INFO"


class TestArgumentParser:
    """Tests for CLI argument parsing."""

    def test_defaults(self):
        """Test default argument values."""
        args = build_parser().parse_args([])

        assert args.config is None
        assert args.once is False
        assert args.format_type == "json"
        assert args.output is None
        assert args.log_level is None

    def test_rejects_unknown_format(self):
        """Test that only json and jsonl are accepted."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--format", "csv"])

    def test_once_help_mentions_lingering_exit(self):
        """Test that --once help warns an abandoned connector can delay exit."""
        help_text = " ".join(build_parser().format_help().split())

        assert "connector that timed out can keep the process alive" in help_text


class TestMain:
    """Test suite for main()."""

    @patch("prospector.main.Aggregator")
    @patch("prospector.main.configure_logging")
    @patch("prospector.main.load_runtime_config")
    def test_once_prints_results(
        self, mock_load_config, mock_configure_logging, mock_aggregator_class,
        runtime_config, run_result, capsys,
    ):
        """Test that --once prints JSON to stdout and exits 0 despite source errors."""
        mock_load_config.return_value = runtime_config
        mock_aggregator_class.return_value.run_once.return_value = run_result

        exit_code = main(["--once"])

        assert exit_code == 0
        records = json.loads(capsys.readouterr().out)
        assert records == [
            {
                "source": "github",
                "title": "Issue",
                "url": "https://github.com/a/b/issues/1",
                "description": None,
                "priority": 1,
            }
        ]
        mock_configure_logging.assert_called_once_with(
            level="INFO", format_type="key-value", environment="local"
        )

    @patch("prospector.main.Aggregator")
    @patch("prospector.main.configure_logging")
    @patch("prospector.main.load_runtime_config")
    def test_once_writes_output_file(
        self, mock_load_config, mock_configure_logging, mock_aggregator_class,
        runtime_config, run_result, tmp_path, capsys,
    ):
        """Test that --output writes the file instead of stdout."""
        mock_load_config.return_value = runtime_config
        mock_aggregator_class.return_value.run_once.return_value = run_result
        output = tmp_path / "leads.jsonl"

        exit_code = main(["--once", "--format", "jsonl", "--output", str(output)])

        assert exit_code == 0
        assert capsys.readouterr().out == ""
        assert json.loads(output.read_text().strip())["url"] == "https://github.com/a/b/issues/1"

    @patch("prospector.main.SchedulerService")
    @patch("prospector.main.Aggregator")
    @patch("prospector.main.configure_logging")
    @patch("prospector.main.load_runtime_config")
    @patch("signal.signal")
    def test_daemon_mode(
        self, mock_signal, mock_load_config, mock_configure_logging,
        mock_aggregator_class, mock_scheduler_class, runtime_config,
    ):
        """Test that daemon mode schedules runs at the configured interval."""
        mock_load_config.return_value = runtime_config
        scheduler_instance = Mock()

        def build_scheduler(run_callable, interval_seconds, shutdown_event):
            # Stop immediately so main() returns
            scheduler_instance.start.side_effect = shutdown_event.set
            return scheduler_instance

        mock_scheduler_class.side_effect = build_scheduler

        exit_code = main([])

        assert exit_code == 0
        kwargs = mock_scheduler_class.call_args.kwargs
        assert kwargs["interval_seconds"] == 3600
        assert callable(kwargs["run_callable"])
        scheduler_instance.start.assert_called_once()
        assert mock_signal.call_count == 2

    @patch("prospector.main.SchedulerService")
    @patch("prospector.main.Aggregator")
    @patch("prospector.main.configure_logging")
    @patch("prospector.main.load_runtime_config")
    @patch("signal.signal")
    def test_daemon_run_callable_writes_output(
        self, mock_signal, mock_load_config, mock_configure_logging,
        mock_aggregator_class, mock_scheduler_class, runtime_config, run_result, tmp_path,
    ):
        """Test that each scheduled run rewrites the output file."""
        mock_load_config.return_value = runtime_config
        mock_aggregator_class.return_value.run_once.return_value = run_result
        output = tmp_path / "leads.json"

        def build_scheduler(run_callable, interval_seconds, shutdown_event):
            instance = Mock()
            instance.start.side_effect = lambda: (run_callable(), shutdown_event.set())
            return instance

        mock_scheduler_class.side_effect = build_scheduler

        assert main(["--output", str(output)]) == 0
        assert len(json.loads(output.read_text())) == 1

    @patch("prospector.main.load_runtime_config")
    def test_configuration_error(self, mock_load_config, capsys):
        """Test that configuration errors exit with code 1."""
        mock_load_config.side_effect = ConfigurationError(
            "Configuration validation failed", errors=["scan_interval: too short"]
        )

        exit_code = main(["--config", "nonexistent.yaml"])

        assert exit_code == 1
        assert "Configuration Error" in capsys.readouterr().err

    @patch("prospector.main.load_runtime_config")
    def test_keyboard_interrupt(self, mock_load_config):
        """Test that Ctrl+C during startup exits cleanly."""
        mock_load_config.side_effect = KeyboardInterrupt()

        assert main(["--once"]) == 0

    @patch("prospector.main.Aggregator")
    @patch("prospector.main.configure_logging")
    @patch("prospector.main.load_runtime_config")
    def test_unexpected_error(
        self, mock_load_config, mock_configure_logging, mock_aggregator_class, runtime_config
    ):
        """Test that unexpected failures exit with code 1."""
        mock_load_config.return_value = runtime_config
        mock_aggregator_class.return_value.run_once.side_effect = OSError("disk full")

        assert main(["--once"]) == 1

    @patch("prospector.main.Aggregator")
    @patch("prospector.main.configure_logging")
    @patch("prospector.main.load_runtime_config")
    def test_log_level_flag_forwarded(
        self, mock_load_config, mock_configure_logging, mock_aggregator_class,
        runtime_config, run_result,
    ):
        """Test that --log-level reaches load_runtime_config."""
        mock_load_config.return_value = runtime_config
        mock_aggregator_class.return_value.run_once.return_value = run_result

        main(["--once", "--log-level", "DEBUG"])

        args = mock_load_config.call_args.args
        assert args[1] == "DEBUG"
