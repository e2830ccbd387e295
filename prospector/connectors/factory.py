"""Factory function for instantiating source connectors."""

from typing import Dict, Type

from prospector.config.models import AdvancedConfig, ConnectorConfig
from prospector.logging import get_logger

from .base import BaseConnector
from .exceptions import ConnectorConfigurationError
from .feed import FeedConnector
from .github import GitHubIssuesConnector
from .hackernews import HackerNewsConnector
from .reddit import RedditConnector

logger = get_logger(__name__, component="connector")

CONNECTOR_CLASSES: Dict[str, Type[BaseConnector]] = {
    "github": GitHubIssuesConnector,
    "reddit": RedditConnector,
    "hackernews": HackerNewsConnector,
    "feed": FeedConnector,
}


def get_connector(connector_config: ConnectorConfig, advanced_config: AdvancedConfig) -> BaseConnector:
    """Instantiate the connector for ``connector_config.type``.

    Args:
        connector_config: Connector settings (type selects the class)
        advanced_config: Transport timeout and User-Agent

    Returns:
        Connector instance

    Raises:
        ConnectorConfigurationError: If the type is unknown or construction fails

    Example:
        >>> connector = get_connector(ConnectorConfig(type="github"), AdvancedConfig())
        >>> opportunities = connector.fetch(ConnectorConfig(type="github"))
    """
    connector_type = str(getattr(connector_config.type, "value", connector_config.type)).lower()
    connector_class = CONNECTOR_CLASSES.get(connector_type)

    if connector_class is None:
        supported = ", ".join(sorted(CONNECTOR_CLASSES))
        raise ConnectorConfigurationError(
            f"Unknown connector type: {connector_config.type}. Supported types: {supported}"
        )

    logger.debug(
        "Creating connector instance",
        extra={"connector": connector_type, "connector_class": connector_class.__name__},
    )

    try:
        return connector_class(
            timeout=advanced_config.http_request_timeout,
            user_agent=advanced_config.user_agent,
        )
    except ConnectorConfigurationError:
        raise
    except Exception as e:
        raise ConnectorConfigurationError(f"Failed to create {connector_type} connector: {e}") from e
