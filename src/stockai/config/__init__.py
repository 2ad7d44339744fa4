"""Application configuration (YAML files + environment overrides)."""

from .state import (
    ConfigLoader,
    ConfigState,
    LoggingConfig,
    ServerConfig,
    YahooConfig,
    get_config,
)

__all__ = [
    "ConfigLoader",
    "ConfigState",
    "LoggingConfig",
    "ServerConfig",
    "YahooConfig",
    "get_config",
]
