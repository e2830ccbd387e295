"""Configuration management for the opportunity prospector."""

from .environment import EnvironmentConfig, apply_environment_defaults, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config, validate_config_file
from .models import (
    AdvancedConfig,
    AppConfig,
    ConnectorConfig,
    ConnectorType,
    LogFormat,
    LogLevel,
    LoggingConfig,
    default_connectors,
)

__all__ = [
    # Loader functions
    "load_config",
    "validate_config_file",
    "load_environment_config",
    "apply_environment_defaults",
    # Configuration models
    "AppConfig",
    "ConnectorConfig",
    "LoggingConfig",
    "AdvancedConfig",
    "EnvironmentConfig",
    "default_connectors",
    # Enums
    "ConnectorType",
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
