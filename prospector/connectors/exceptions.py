"""Exceptions raised inside source connectors.

These never escape BaseConnector.fetch(); they carry failure details from the
HTTP and parsing helpers up to the point where a connector converts them into
an empty result and a log event.
"""

from typing import Optional


class ConnectorError(Exception):
    """Base exception for all connector errors."""


class ConnectorHTTPError(ConnectorError):
    """Transport failure or non-success HTTP status.

    ``status_code`` is 0 when no response was received (DNS failure,
    connection refused, TLS error, ...).
    """

    def __init__(self, message: str, status_code: int, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class ConnectorTimeoutError(ConnectorError):
    """Request did not complete within the transport timeout."""

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class ConnectorResponseError(ConnectorError):
    """Response body could not be parsed or had an unexpected shape."""


class ConnectorConfigurationError(ConnectorError):
    """Connector was given invalid settings (unknown type, bad timeout, ...)."""
