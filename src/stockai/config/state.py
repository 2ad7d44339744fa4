"""
Unified configuration state for the gateway.

Single source of truth for application configuration, combining YAML files
with environment overrides, type validation, and sensible defaults.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


# =============================================================================
# PYDANTIC MODELS - Type-Safe Configuration
# =============================================================================


class YahooConfig(BaseModel):
    """Upstream provider endpoints, identity and timeouts."""

    model_config = ConfigDict(extra="allow")

    landing_url: str = Field(default="https://finance.yahoo.com/")
    crumb_url: str = Field(default="https://query1.finance.yahoo.com/v1/test/getcrumb")
    query_base_url: str = Field(default="https://query1.finance.yahoo.com")
    page_base_url: str = Field(default="https://finance.yahoo.com")
    user_agent: str = Field(default=DEFAULT_USER_AGENT)

    crumb_ttl: float = Field(default=3600.0, gt=0)
    landing_timeout: float = Field(default=15.0, gt=0)
    crumb_timeout: float = Field(default=10.0, gt=0)
    data_timeout: float = Field(default=15.0, gt=0)
    page_timeout: float = Field(default=12.0, gt=0)
    max_redirects: int = Field(default=5, ge=0)
    max_header_size: int = Field(default=32768, ge=8190)

    @field_validator("landing_url", "crumb_url", "query_base_url", "page_base_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("Upstream URLs must start with http:// or https://")
        return v


class ServerConfig(BaseModel):
    """HTTP service binding."""

    model_config = ConfigDict(extra="allow")

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)
    warm_credentials: bool = Field(default=True)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(extra="allow")

    level: str = Field(default="INFO")
    json_logs: bool = Field(default=True)


class ConfigState(BaseModel):
    """
    Root configuration state - single source of truth for all app config.
    """

    model_config = ConfigDict(extra="allow")

    yahoo: YahooConfig = Field(default_factory=YahooConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    env: str = Field(default="dev")
    config_dir: str = Field(default="./config")


# =============================================================================
# CONFIG LOADER
# =============================================================================


class ConfigLoader:
    """
    Load and validate configuration from YAML files.

    Merges:
      1. Global defaults (hardcoded)
      2. YAML files from config_dir
      3. Environment-specific YAML (env/<env>.yaml)
      4. Environment variable overrides
    """

    CONFIG_FILES = ("yahoo.yaml", "server.yaml", "logging.yaml")

    def __init__(self, config_dir: str = "./config"):
        self.config_dir = Path(config_dir)
        self._yaml_cache: dict[Path, Any] = {}
        self.env = os.getenv("STOCKAI_ENV", "dev")

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        """Load YAML file with caching."""
        if path in self._yaml_cache:
            return self._yaml_cache[path]

        if not path.exists():
            logger.debug(f"Config file not found (using defaults): {path}")
            return {}

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load {path}: {e}")
            return {}

        self._yaml_cache[path] = data
        logger.debug(f"Loaded config: {path}")
        return data

    def _apply_env_overrides(self, config: dict[str, Any]) -> dict[str, Any]:
        """Apply environment variable overrides to config."""
        if port := os.getenv("PORT"):
            config.setdefault("server", {})["port"] = port

        if host := os.getenv("HOST"):
            config.setdefault("server", {})["host"] = host

        if log_level := os.getenv("LOG_LEVEL"):
            config.setdefault("logging", {})["level"] = log_level

        if ttl := os.getenv("STOCKAI_CRUMB_TTL"):
            config.setdefault("yahoo", {})["crumb_ttl"] = ttl

        if user_agent := os.getenv("STOCKAI_USER_AGENT"):
            config.setdefault("yahoo", {})["user_agent"] = user_agent

        return config

    def _merge_dicts(self, base: dict, override: dict) -> dict:
        """Deep merge override into base dict."""
        result = base.copy()
        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._merge_dicts(result[key], value)
            else:
                result[key] = value
        return result

    def load(self) -> ConfigState:
        """
        Load complete configuration state.

        Raises:
            pydantic.ValidationError: If configuration is invalid
        """
        logger.info(f"Loading configuration from {self.config_dir} (env: {self.env})")

        config: dict[str, Any] = {}

        for config_file in self.CONFIG_FILES:
            file_config = self._load_yaml(self.config_dir / config_file)
            config = self._merge_dicts(config, file_config)

        env_config = self._load_yaml(self.config_dir / "env" / f"{self.env}.yaml")
        config = self._merge_dicts(config, env_config)

        config = self._apply_env_overrides(config)

        state = ConfigState(env=self.env, config_dir=str(self.config_dir), **config)
        logger.info(
            f"Configuration loaded: crumb_ttl={state.yahoo.crumb_ttl}s, "
            f"port={state.server.port}"
        )
        return state


def get_config(config_dir: str | None = None) -> ConfigState:
    """
    Load and return the configuration state.

    Args:
        config_dir: Override config directory. Defaults to $STOCKAI_CONFIG_DIR or ./config
    """
    if config_dir is None:
        config_dir = os.getenv("STOCKAI_CONFIG_DIR", "./config")
        if not Path(config_dir).exists():
            logger.warning(f"Config directory not found at {config_dir}, using defaults")

    loader = ConfigLoader(config_dir=config_dir)
    return loader.load()


__all__ = [
    "ConfigLoader",
    "ConfigState",
    "LoggingConfig",
    "ServerConfig",
    "YahooConfig",
    "get_config",
]
