"""
Structured logging for the Weather MCP Server.

All diagnostics go to an operator-facing stream as one JSON object per line.
The bearer token is never written to the log; auth failures record only the
rejection reason and the client address.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from weather_mcp.config import LoggingConfig

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Attributes present on every LogRecord; anything else came in via `extra`
_RESERVED_RECORD_KEYS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
    }
)


class JSONFormatter(logging.Formatter):
    """
    A logging formatter that outputs log records as JSON objects.

    Each record carries timestamp (UTC, ISO 8601), level, logger and message,
    plus any fields passed through the ``extra`` argument.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record as a JSON string.

        Args:
            record: The log record to format.

        Returns:
            JSON-formatted string representation of the log record.
        """
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key in set(record.__dict__) - _RESERVED_RECORD_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


def setup_logging(
    config: LoggingConfig | None = None,
    *,
    level: str = "INFO",
    json_format: bool = True,
    log_to_stdout: bool = False,
) -> logging.Logger:
    """
    Configure the ``weather_mcp`` logger tree.

    Diagnostics go to stderr by default so stdout stays free for whatever
    process supervisor is wrapping the server.

    Args:
        config: Optional LoggingConfig; overrides the keyword arguments.
        level: Log level if no config is provided.
        json_format: Whether to use JSON formatting.
        log_to_stdout: Log to stdout instead of stderr.

    Returns:
        The package root logger.

    Example:
        >>> logger = setup_logging(level="DEBUG")
        >>> logger.info("Server started", extra={"port": 5555})
    """
    if config is not None:
        log_level = config.level.upper()
        json_format = config.json_format
        log_to_stdout = config.log_to_stdout
    else:
        log_level = level.upper()

    logger = logging.getLogger("weather_mcp")
    logger.setLevel(getattr(logging, log_level, logging.INFO))
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout if log_to_stdout else sys.stderr)
    handler.setLevel(getattr(logging, log_level, logging.INFO))
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))
    logger.addHandler(handler)

    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the ``weather_mcp`` hierarchy.

    Args:
        name: Typically ``__name__`` of the calling module. The
            "weather_mcp." prefix is added when missing.

    Returns:
        A logger instance.
    """
    if not name.startswith("weather_mcp"):
        name = f"weather_mcp.{name}"

    return logging.getLogger(name)
