"""Configuration management module for Volunteer Matcher."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config, validate_config_file
from .models import (
    AppConfig,
    EmailConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
    NotificationsConfig,
    StorageBackend,
    StorageConfig,
)

__all__ = [
    # Main loader functions
    "load_config",
    "validate_config_file",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "StorageConfig",
    "NotificationsConfig",
    "EmailConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    # Enums
    "StorageBackend",
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
