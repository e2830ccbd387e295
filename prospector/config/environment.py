"""Environment variable loading and validation."""

import os
from typing import Dict, Optional

from .exceptions import ConfigurationError
from .models import AppConfig, ConnectorType

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        github_token: Optional[str] = None,
        github_search_query: Optional[str] = None,
        reddit_subreddit: Optional[str] = None,
        hn_query: Optional[str] = None,
        feed_url: Optional[str] = None,
        log_level: Optional[str] = None,
        environment: Optional[str] = None,
    ):
        self.github_token = github_token
        self.github_search_query = github_search_query
        self.reddit_subreddit = reddit_subreddit
        self.hn_query = hn_query
        self.feed_url = feed_url
        self.log_level = log_level
        self.environment = environment or "local"

    def connector_defaults(self, connector_type: str) -> Dict[str, str]:
        """Settings the environment supplies for one connector family.

        Only variables that are actually set are returned.
        """
        candidates = {
            ConnectorType.GITHUB.value: {
                "query": self.github_search_query,
                "token": self.github_token,
            },
            ConnectorType.REDDIT.value: {"query": self.reddit_subreddit},
            ConnectorType.HACKER_NEWS.value: {"query": self.hn_query},
            ConnectorType.FEED.value: {"feed_url": self.feed_url},
        }.get(str(connector_type), {})
        return {key: value for key, value in candidates.items() if value}


def _getenv(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip() or None


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    All variables are optional:
    - GITHUB_TOKEN: Bearer token for the GitHub search API
    - GITHUB_SEARCH_QUERY: Issue search query (default: label:help-wanted)
    - REDDIT_SUBREDDIT: Subreddit to list (default: Entrepreneur)
    - HN_QUERY: Hacker News search text (default: Who is hiring)
    - PH_FEED: Syndication feed URL (default: Product Hunt feed)
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - ENVIRONMENT: Environment label attached to log records

    Returns:
        EnvironmentConfig with validated values

    Raises:
        ConfigurationError: If a variable has an invalid value
    """
    errors = []

    log_level = _getenv("LOG_LEVEL")
    if log_level:
        if log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )
        else:
            log_level = log_level.upper()

    feed_url = _getenv("PH_FEED")
    if feed_url and not feed_url.lower().startswith(("http://", "https://")):
        errors.append(f"Invalid PH_FEED: '{feed_url}'. Must be an http(s) URL.")

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and adjust the values",
                "Unset variables you do not need; all of them are optional",
            ],
        )

    return EnvironmentConfig(
        github_token=_getenv("GITHUB_TOKEN"),
        github_search_query=_getenv("GITHUB_SEARCH_QUERY"),
        reddit_subreddit=_getenv("REDDIT_SUBREDDIT"),
        hn_query=_getenv("HN_QUERY"),
        feed_url=feed_url,
        log_level=log_level,
        environment=_getenv("ENVIRONMENT"),
    )


def apply_environment_defaults(app_config: AppConfig, env_config: EnvironmentConfig) -> AppConfig:
    """Fill connector settings left unset in the file from the environment.

    Values from the configuration file always win. Returns a new AppConfig;
    the input is not modified.
    """
    connectors = []
    for connector in app_config.connectors:
        updates = {
            key: value
            for key, value in env_config.connector_defaults(connector.type).items()
            if getattr(connector, key) is None
        }
        connectors.append(connector.model_copy(update=updates) if updates else connector)

    return app_config.model_copy(update={"connectors": connectors})
