"""Source connectors that fetch and normalize opportunities.

Connectors:
- GitHub issue search: github.GitHubIssuesConnector
- Reddit new-posts listing: reddit.RedditConnector
- Hacker News search: hackernews.HackerNewsConnector
- RSS/Atom feeds: feed.FeedConnector

Use the factory to build one from configuration:
    from prospector.connectors import get_connector
    connector = get_connector(connector_config, advanced_config)
    opportunities = connector.fetch(connector_config)

fetch() never raises; the exceptions below only travel inside a connector.
"""

from .base import BaseConnector
from .exceptions import (
    ConnectorConfigurationError,
    ConnectorError,
    ConnectorHTTPError,
    ConnectorResponseError,
    ConnectorTimeoutError,
)
from .factory import CONNECTOR_CLASSES, get_connector
from .feed import FeedConnector
from .github import GitHubIssuesConnector
from .hackernews import HackerNewsConnector
from .reddit import RedditConnector

__all__ = [
    # Base and factory
    "BaseConnector",
    "get_connector",
    "CONNECTOR_CLASSES",
    # Connectors
    "GitHubIssuesConnector",
    "RedditConnector",
    "HackerNewsConnector",
    "FeedConnector",
    # Exceptions
    "ConnectorError",
    "ConnectorHTTPError",
    "ConnectorTimeoutError",
    "ConnectorResponseError",
    "ConnectorConfigurationError",
]
