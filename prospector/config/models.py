"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .duration import DurationParseError, parse_duration, validate_duration_range


class ConnectorType(str, Enum):
    """Supported source connector families."""

    GITHUB = "github"
    REDDIT = "reddit"
    HACKER_NEWS = "hackernews"
    FEED = "feed"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class ConnectorConfig(BaseModel):
    """Settings for one source connector.

    Unset fields fall back to connector defaults (see each connector's
    DEFAULT_QUERY, DEFAULT_LIMIT and DEFAULT_PRIORITY).
    """

    type: ConnectorType = Field(..., description="Connector family")
    enabled: bool = Field(True, description="Whether to include this connector in runs")
    query: Optional[str] = Field(
        None, description="Search text, or subreddit name for the reddit connector"
    )
    limit: Optional[int] = Field(
        None, ge=1, description="Result cap; clamped to the connector's maximum"
    )
    feed_url: Optional[str] = Field(None, description="Syndication feed URL (feed connector)")
    token: Optional[str] = Field(None, description="Optional bearer credential")
    priority: Optional[int] = Field(
        None, ge=0, le=3, description="Override for the connector's default priority"
    )
    timeout: Optional[int] = Field(
        None, ge=1, le=600, description="Per-connector aggregation timeout (seconds)"
    )

    @field_validator("query", "feed_url", "token")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Strip whitespace; blank strings count as unset."""
        if v is None:
            return None
        stripped = v.strip()
        return stripped or None

    model_config = {"use_enum_values": True}

    @property
    def name(self) -> str:
        """Display name used in logs and run statistics."""
        return str(self.type)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AdvancedConfig(BaseModel):
    """Advanced runtime settings."""

    http_request_timeout: int = Field(
        15, ge=1, le=300, description="Transport timeout for each HTTP request (seconds)"
    )
    connector_timeout: int = Field(
        45, ge=1, le=600, description="Default deadline for a connector within one run (seconds)"
    )
    user_agent: str = Field(
        "OpportunityProspector/1.0",
        min_length=1,
        description="User-Agent string for HTTP requests",
    )

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        """Strip whitespace from user agent."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped


def default_connectors() -> List[ConnectorConfig]:
    """Connector set used when the configuration names none, in precedence order."""
    return [ConnectorConfig(type=connector_type) for connector_type in ConnectorType]


class AppConfig(BaseModel):
    """Root configuration object for the opportunity prospector."""

    connectors: List[ConnectorConfig] = Field(
        default_factory=default_connectors,
        min_length=1,
        description="Connectors to run; declaration order is deduplication precedence",
    )
    scan_interval: str = Field("1h", description="Interval between scheduled aggregation runs")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    advanced: AdvancedConfig = Field(
        default_factory=AdvancedConfig, description="Advanced runtime settings"
    )

    # Computed field
    scan_interval_seconds: Optional[int] = None

    @field_validator("scan_interval")
    @classmethod
    def validate_scan_interval(cls, v: str) -> str:
        """Validate that the scan interval parses and lies in 5 minutes to 24 hours."""
        try:
            validate_duration_range(parse_duration(v), min_seconds=300, max_seconds=86400)
        except DurationParseError as e:
            raise ValueError(str(e)) from e
        return v

    @model_validator(mode="after")
    def validate_connectors_and_compute_fields(self):
        """Require an enabled connector, reject exact duplicates, compute derived fields."""
        if not self.get_enabled_connectors():
            raise ValueError(
                "At least one connector must be enabled. All connectors have enabled=false."
            )

        seen = set()
        for connector in self.connectors:
            key = (connector.type, connector.query, connector.feed_url)
            if key in seen:
                target = connector.query or connector.feed_url or "defaults"
                raise ValueError(
                    f"Duplicate connector: {connector.type} ({target}) appears multiple times"
                )
            seen.add(key)

        self.scan_interval_seconds = parse_duration(self.scan_interval)
        return self

    def get_enabled_connectors(self) -> List[ConnectorConfig]:
        """Enabled connectors in declaration order."""
        return [connector for connector in self.connectors if connector.enabled]

    def get_connectors_by_type(self, connector_type: str) -> List[ConnectorConfig]:
        """All connectors (enabled or not) of the given family."""
        return [connector for connector in self.connectors if connector.type == connector_type]
