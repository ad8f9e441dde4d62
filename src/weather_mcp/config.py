"""
Configuration management for the Weather MCP Server.

Configuration is loaded from multiple sources with layered precedence:
1. Built-in defaults (Pydantic model defaults)
2. YAML config file (/etc/weather-mcp/config.yml or --config path)
3. Environment variables (WEATHER_MCP_* prefix, __ for nesting)
4. BEARER_TOKEN environment variable (credential shortcut)
5. Command-line arguments (highest precedence)

The resulting AppConfig is frozen: it is built once at startup and handed to
the components that need it.
"""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_BEARER_TOKEN = "my-secret-token-12345"
DEFAULT_CONFIG_PATH = Path("/etc/weather-mcp/config.yml")
ENV_PREFIX = "WEATHER_MCP_"
BEARER_TOKEN_ENV = "BEARER_TOKEN"

_VALID_LOG_LEVELS = {"debug", "info", "warn", "warning", "error", "critical"}


def _normalize_log_level(v: str) -> str:
    v_lower = v.lower()
    if v_lower not in _VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level: {v}. Must be one of: {', '.join(sorted(_VALID_LOG_LEVELS))}"
        )
    if v_lower == "warn":
        return "warning"
    return v_lower


# =============================================================================
# Server Configuration
# =============================================================================


class ServerConfig(BaseModel):
    """HTTP listener settings.

    Attributes:
        host: Interface to bind.
        port: TCP port to listen on.
        path: The single MCP endpoint path.
        log_level: Application log level.
    """

    model_config = ConfigDict(frozen=True)

    host: str = Field(default="0.0.0.0", description="Interface to bind")
    port: int = Field(default=5555, ge=1, le=65535, description="Listening port")
    path: str = Field(default="/mcp", description="MCP endpoint path")
    log_level: str = Field(
        default="info",
        description="Log level: debug, info, warn, error",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        return _normalize_log_level(v)

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Require an absolute endpoint path."""
        if not v.startswith("/"):
            raise ValueError(f"Endpoint path must start with '/': {v}")
        return v


# =============================================================================
# Security Configuration
# =============================================================================


class SecurityConfig(BaseModel):
    """Bearer-token authentication settings.

    Attributes:
        bearer_token: The single credential every request must present.
    """

    model_config = ConfigDict(frozen=True)

    bearer_token: str = Field(
        default=DEFAULT_BEARER_TOKEN,
        min_length=1,
        description="Bearer token expected in the Authorization header",
    )


# =============================================================================
# Upstream Configuration
# =============================================================================


class UpstreamConfig(BaseModel):
    """Weather data provider settings.

    Attributes:
        base_url: Provider base URL (no trailing slash).
        user_agent: Identification header sent with every provider call.
        accept: Accepted content type sent with every provider call.
        timeout_seconds: Per-call timeout for provider requests.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(
        default="https://api.weather.gov",
        description="National Weather Service API base URL",
    )
    user_agent: str = Field(
        default="weather-app/1.0",
        description="User-Agent sent to the provider",
    )
    accept: str = Field(
        default="application/geo+json",
        description="Accept header sent to the provider",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Timeout for each provider request in seconds",
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Store the base URL without a trailing slash."""
        return v.rstrip("/")


class LivenessConfig(BaseModel):
    """Website liveness probe settings.

    Attributes:
        timeout_seconds: Total time limit for a single probe.
    """

    model_config = ConfigDict(frozen=True)

    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="Total timeout for a liveness probe in seconds",
    )


# =============================================================================
# Logging Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging and audit configuration.

    Attributes:
        level: Log level.
        log_to_stdout: Log to stdout instead of stderr.
        json_format: Emit JSON lines instead of plain text.
        audit_log_path: Optional file that also receives audit events.
    """

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="info", description="Log level")
    log_to_stdout: bool = Field(default=False, description="Log to stdout")
    json_format: bool = Field(default=True, description="Use JSON log lines")
    audit_log_path: str | None = Field(
        default=None,
        description="Audit log file path (audit events are always logged)",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        return _normalize_log_level(v)


# =============================================================================
# Main Application Configuration
# =============================================================================


class AppConfig(BaseModel):
    """
    Main application configuration model.

    Attributes:
        server: HTTP listener settings.
        security: Authentication settings.
        upstream: Weather provider settings.
        liveness: Website probe settings.
        logging: Logging configuration.
    """

    model_config = ConfigDict(frozen=True)

    server: ServerConfig = Field(default_factory=ServerConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    upstream: UpstreamConfig = Field(default_factory=UpstreamConfig)
    liveness: LivenessConfig = Field(default_factory=LivenessConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading Functions
# =============================================================================


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Args:
        base: The base dictionary.
        override: The dictionary with values to override.

    Returns:
        A new dictionary with merged values.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    """
    Load configuration from a YAML file.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        yaml.YAMLError: If the YAML is invalid.
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def _parse_env_value(value: str) -> Any:
    """
    Parse an environment variable value to an appropriate Python type.

    Only booleans and numbers are converted; everything else stays a string
    so tokens and URLs pass through untouched.
    """
    if value.lower() in ("true", "yes", "on"):
        return True
    if value.lower() in ("false", "no", "off"):
        return False

    try:
        return int(value)
    except ValueError:
        pass

    try:
        return float(value)
    except ValueError:
        pass

    return value


def _load_env_config(prefix: str = ENV_PREFIX) -> dict[str, Any]:
    """
    Load configuration from environment variables.

    - Prefix: WEATHER_MCP_ (configurable)
    - Nested keys: double underscore (__) separator
    - Example: WEATHER_MCP_UPSTREAM__TIMEOUT_SECONDS=15

    The bare BEARER_TOKEN variable is honoured as a shortcut for
    WEATHER_MCP_SECURITY__BEARER_TOKEN and wins over it.
    """
    result: dict[str, Any] = {}

    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue

        parts = key[len(prefix) :].lower().split("__")

        current = result
        for part in parts[:-1]:
            current = current.setdefault(part, {})

        if parts[-1] == "bearer_token":
            current[parts[-1]] = value
        else:
            current[parts[-1]] = _parse_env_value(value)

    token = os.environ.get(BEARER_TOKEN_ENV)
    if token:
        result.setdefault("security", {})["bearer_token"] = token

    return result


def _parse_cli_args(args: list[str] | None = None) -> dict[str, Any]:
    """
    Parse command-line arguments into a config override dictionary.

    Args:
        args: Command-line arguments. If None, uses sys.argv.
    """
    parser = argparse.ArgumentParser(
        description="Weather MCP Server",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--config", "-c", type=str, help="Path to configuration file")
    parser.add_argument("--host", type=str, help="Override listen host")
    parser.add_argument("--port", type=int, help="Override listen port")
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        help="Override log level",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    parsed = parser.parse_args(args)

    result: dict[str, Any] = {}

    if parsed.config:
        result["_config_path"] = parsed.config
    if parsed.host:
        result.setdefault("server", {})["host"] = parsed.host
    if parsed.port:
        result.setdefault("server", {})["port"] = parsed.port
    if parsed.log_level:
        result.setdefault("server", {})["log_level"] = parsed.log_level
        result.setdefault("logging", {})["level"] = parsed.log_level
    if parsed.debug:
        result.setdefault("server", {})["log_level"] = "debug"
        result.setdefault("logging", {})["level"] = "debug"

    return result


def load_config(
    config_path: Path | str | None = None,
    env_prefix: str = ENV_PREFIX,
    cli_args: list[str] | None = None,
) -> AppConfig:
    """
    Load configuration from all sources with layered precedence.

    Args:
        config_path: Path to YAML configuration file. If None, uses the
            --config argument or the default path when it exists.
        env_prefix: Prefix for environment variables.
        cli_args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Fully configured, frozen AppConfig instance.

    Raises:
        FileNotFoundError: If a specified config file doesn't exist.
        ValidationError: If configuration is invalid.

    Example:
        >>> config = load_config(cli_args=[])
        >>> config.server.port
        5555
    """
    config_dict: dict[str, Any] = {}

    cli_config = _parse_cli_args(cli_args)

    if config_path is None:
        if "_config_path" in cli_config:
            config_path = Path(cli_config.pop("_config_path"))
        elif DEFAULT_CONFIG_PATH.exists():
            config_path = DEFAULT_CONFIG_PATH
    else:
        cli_config.pop("_config_path", None)
        config_path = Path(config_path)

    if config_path is not None:
        config_dict = _deep_merge(config_dict, _load_yaml_config(config_path))

    config_dict = _deep_merge(config_dict, _load_env_config(env_prefix))
    config_dict = _deep_merge(config_dict, cli_config)

    return AppConfig(**config_dict)
