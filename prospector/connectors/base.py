"""Base connector class with shared functionality for all source connectors.

Every connector fetches from one upstream, maps the payload to Opportunity
records, and contains its own failures: ``fetch()`` never raises. Subclasses
implement ``_fetch_opportunities()`` and may raise ConnectorError (or hit an
unexpected payload shape); ``fetch()`` turns any of that into ``[]``.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, List, Optional

import requests

from prospector.config.models import ConnectorConfig
from prospector.domain.models import Opportunity, OpportunitySource
from prospector.logging import get_logger

from .exceptions import (
    ConnectorConfigurationError,
    ConnectorError,
    ConnectorHTTPError,
    ConnectorResponseError,
    ConnectorTimeoutError,
)

logger = get_logger(__name__, component="connector")


class BaseConnector(ABC):
    """Base class for all source connectors.

    Class attributes describe the connector family:
        CONNECTOR_NAME: identifier used in logs and statistics
        SOURCE: tag stamped on every produced Opportunity
        DEFAULT_QUERY: query used when the config sets none
        DEFAULT_LIMIT: result cap used when the config sets none
        MAX_LIMIT: hard cap applied to any configured limit
        DEFAULT_PRIORITY: priority used when the config sets none

    Attributes:
        timeout: Transport timeout for each HTTP request in seconds
        user_agent: User-Agent header for HTTP requests
    """

    CONNECTOR_NAME: str = ""
    SOURCE: OpportunitySource
    DEFAULT_QUERY: Optional[str] = None
    DEFAULT_LIMIT: int = 10
    MAX_LIMIT: int = 50
    DEFAULT_PRIORITY: int = 1

    def __init__(self, timeout: int = 15, user_agent: str = "OpportunityProspector/1.0") -> None:
        """Initialize connector.

        Args:
            timeout: HTTP request timeout in seconds (1-300)
            user_agent: User-Agent header for requests

        Raises:
            ConnectorConfigurationError: If timeout is out of range or user_agent is empty
        """
        if not 1 <= timeout <= 300:
            raise ConnectorConfigurationError(
                f"Timeout must be between 1 and 300 seconds, got: {timeout}"
            )
        if not user_agent or not user_agent.strip():
            raise ConnectorConfigurationError("user_agent cannot be empty")

        self.timeout = timeout
        self.user_agent = user_agent.strip()

        self._session = requests.Session()
        self._session.headers.update({"User-Agent": self.user_agent})

    def fetch(self, config: ConnectorConfig) -> List[Opportunity]:
        """Fetch and normalize opportunities, containing every failure.

        Transport errors, non-success statuses, timeouts and malformed
        payloads are logged and produce an empty list.

        Args:
            config: Settings for this connector

        Returns:
            Opportunities in upstream order; empty on any failure
        """
        logger.debug(
            f"Fetching opportunities from {self.CONNECTOR_NAME}",
            extra={"event": "connector.fetch.started", "connector": self.CONNECTOR_NAME},
        )

        try:
            opportunities = self._fetch_opportunities(config)
        except ConnectorError as e:
            logger.warning(
                f"{self.CONNECTOR_NAME} fetch failed: {e}",
                extra={
                    "event": "connector.fetch.failed",
                    "connector": self.CONNECTOR_NAME,
                    "error_type": type(e).__name__,
                    "status_code": getattr(e, "status_code", None),
                },
            )
            return []
        except Exception as e:
            logger.error(
                f"Unexpected error in {self.CONNECTOR_NAME} connector: {e}",
                extra={
                    "event": "connector.fetch.failed",
                    "connector": self.CONNECTOR_NAME,
                    "error_type": type(e).__name__,
                },
                exc_info=True,
            )
            return []

        logger.info(
            f"Fetched {len(opportunities)} opportunities from {self.CONNECTOR_NAME}",
            extra={
                "event": "connector.fetch.succeeded",
                "connector": self.CONNECTOR_NAME,
                "count": len(opportunities),
            },
        )
        return opportunities

    @abstractmethod
    def _fetch_opportunities(self, config: ConnectorConfig) -> List[Opportunity]:
        """Fetch from the upstream and map the payload to Opportunity records.

        Implementations may raise ConnectorError subclasses; fetch() handles them.
        """

    def close(self) -> None:
        """Release pooled HTTP connections."""
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # ------------------------------------------------------------------
    # Config resolution
    # ------------------------------------------------------------------

    def _resolve_query(self, config: ConnectorConfig) -> Optional[str]:
        return config.query or self.DEFAULT_QUERY

    def _resolve_limit(self, config: ConnectorConfig) -> int:
        """Configured limit (or the default), capped at MAX_LIMIT."""
        return min(config.limit or self.DEFAULT_LIMIT, self.MAX_LIMIT)

    def _resolve_priority(self, config: ConnectorConfig) -> int:
        return self.DEFAULT_PRIORITY if config.priority is None else config.priority

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    def _send(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """Perform a GET request and require a 2xx response.

        Raises:
            ConnectorHTTPError: On connection failure or non-2xx status
            ConnectorTimeoutError: On request timeout
        """
        logger.debug(
            f"HTTP GET {url}",
            extra={
                "event": "connector.http.request",
                "connector": self.CONNECTOR_NAME,
                "url": url,
                "timeout": self.timeout,
            },
        )

        try:
            response = self._session.get(url, params=params, headers=headers, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise ConnectorTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds", url=url
            ) from e
        except requests.exceptions.RequestException as e:
            raise ConnectorHTTPError(f"Request to {url} failed: {e}", status_code=0, url=url) from e

        if not 200 <= response.status_code < 300:
            # 5xx and 429 are usually transient; anything else points at configuration
            transient = response.status_code >= 500 or response.status_code == 429
            logger.log(
                logging.WARNING if transient else logging.ERROR,
                f"HTTP {response.status_code} from {url}",
                extra={
                    "event": "connector.http.error",
                    "connector": self.CONNECTOR_NAME,
                    "status_code": response.status_code,
                    "transient": transient,
                    "url": url,
                },
            )
            raise ConnectorHTTPError(
                f"HTTP {response.status_code}: {response.reason}",
                status_code=response.status_code,
                url=url,
            )

        return response

    def _make_request(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """GET a JSON document.

        Returns:
            Parsed JSON body

        Raises:
            ConnectorHTTPError, ConnectorTimeoutError: From _send()
            ConnectorResponseError: If the body is not valid JSON
        """
        response = self._send(url, params=params, headers=headers)
        try:
            return response.json()
        except ValueError as e:
            raise ConnectorResponseError(f"Failed to parse JSON response from {url}: {e}") from e

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    def _map_items(
        self,
        items: Iterable[Any],
        transform: Callable[[Any], Opportunity],
    ) -> List[Opportunity]:
        """Apply ``transform`` to each item, skipping items that do not fit.

        An item is skipped when the transform hits a missing key, wrong type
        or fails Opportunity validation; the rest of the payload is kept.
        """
        opportunities = []
        for index, item in enumerate(items):
            try:
                opportunities.append(transform(item))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(
                    f"Skipping malformed {self.CONNECTOR_NAME} item",
                    extra={
                        "event": "connector.item.skipped",
                        "connector": self.CONNECTOR_NAME,
                        "index": index,
                        "error": str(e),
                    },
                )
        return opportunities

    @staticmethod
    def _require_list(value: Any, field: str) -> list:
        """Return ``value`` if it is a list, else raise ConnectorResponseError."""
        if not isinstance(value, list):
            raise ConnectorResponseError(
                f"Expected '{field}' to be an array, got {type(value).__name__}"
            )
        return value
