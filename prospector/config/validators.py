"""Non-fatal configuration checks."""

import warnings
from typing import Any, Dict, List

# Per-family result caps, mirrored from the connector classes so the check
# can run on the raw dictionary before validation
_LIMIT_CAPS = {"github": 50, "reddit": 50, "hackernews": 50, "feed": 10}


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Inspect the raw configuration and return warnings for suspicious settings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    connectors = config_dict.get("connectors") or []
    for idx, connector in enumerate(connectors):
        if not isinstance(connector, dict):
            continue

        connector_type = str(connector.get("type", "unknown"))
        label = f"Connector {idx} ({connector_type})"

        if not connector.get("enabled", True):
            warning_messages.append(f"{label} is disabled and will be skipped")

        if connector.get("feed_url") and connector_type != "feed":
            warning_messages.append(f"{label} sets feed_url, which only feed connectors use")

        if connector.get("token") and connector_type != "github":
            warning_messages.append(f"{label} sets token, which only github connectors send")

        limit = connector.get("limit")
        cap = _LIMIT_CAPS.get(connector_type)
        if isinstance(limit, int) and cap is not None and limit > cap:
            warning_messages.append(f"{label} limit {limit} exceeds the maximum and will be capped at {cap}")

    advanced = config_dict.get("advanced") or {}
    if isinstance(advanced, dict):
        http_timeout = advanced.get("http_request_timeout")
        connector_timeout = advanced.get("connector_timeout")
        if (
            isinstance(http_timeout, int)
            and isinstance(connector_timeout, int)
            and http_timeout > connector_timeout
        ):
            warning_messages.append(
                f"http_request_timeout ({http_timeout}s) exceeds connector_timeout "
                f"({connector_timeout}s); slow requests will be cut off by the aggregator"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit each message through Python's warnings module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
