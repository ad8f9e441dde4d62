"""
Audit logging for the Weather MCP Server.

Audit entries record:
- Every tool invocation, with outcome and duration
- Every request rejected by the bearer-token gate

Entries never contain the presented token; argument keys that look like
credentials are masked.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from weather_mcp.config import LoggingConfig
    from weather_mcp.context import ToolContext

logger = logging.getLogger("weather_mcp.security.audit_logger")


class AuditLogger:
    """
    Structured audit logger.

    Audit log format (JSON):
    {
        "timestamp": "2025-01-15T14:30:00+00:00",
        "event_type": "tool_call",
        "action": "get_forecast",
        "result": "success",
        "duration_ms": 412.7,
        "source_ip": "192.168.1.100",
        "request_id": 7
    }

    Example:
        >>> audit_logger = AuditLogger.from_config(config.logging)
        >>> audit_logger.log_tool_call(ctx, status="success")
    """

    SENSITIVE_FIELD_PATTERNS = [
        "token",
        "password",
        "secret",
        "api_key",
        "apikey",
        "credential",
        "auth",
    ]

    def __init__(
        self,
        audit_log_path: str | None = None,
        log_to_logger: bool = True,
    ) -> None:
        """
        Initialize the audit logger.

        Args:
            audit_log_path: Optional file that receives one JSON line per entry.
            log_to_logger: Whether to also emit entries on the diagnostic logger.
        """
        self._audit_log_path = audit_log_path
        self._log_to_logger = log_to_logger
        self._file_logger: logging.Logger | None = None

        if audit_log_path:
            self._setup_file_logger(audit_log_path)

    @classmethod
    def from_config(cls, config: LoggingConfig) -> AuditLogger:
        """Create an AuditLogger from configuration."""
        return cls(audit_log_path=config.audit_log_path, log_to_logger=True)

    def _setup_file_logger(self, path: str) -> None:
        """
        Set up file logging for audit entries.

        Args:
            path: Path to the audit log file.
        """
        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)

            self._file_logger = logging.getLogger("weather_mcp.audit")
            self._file_logger.setLevel(logging.INFO)
            self._file_logger.propagate = False
            self._file_logger.handlers.clear()

            handler = logging.FileHandler(path, mode="a", encoding="utf-8")
            handler.setFormatter(logging.Formatter("%(message)s"))
            self._file_logger.addHandler(handler)

            logger.info("Audit logging initialized to %s", path)
        except OSError as e:
            logger.error("Failed to setup audit file logging: %s", str(e))
            self._file_logger = None

    def log_tool_call(
        self,
        ctx: ToolContext,
        status: str,
        error_code: str | None = None,
        params: dict[str, Any] | None = None,
        duration_ms: float | None = None,
    ) -> None:
        """
        Log a tool invocation.

        Args:
            ctx: Tool context with caller and request information.
            status: Result status ("success" or "error").
            error_code: Error code if status is "error".
            params: Tool arguments (sensitive fields will be masked).
            duration_ms: Execution duration in milliseconds.
        """
        entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "event_type": "tool_call",
            "action": ctx.tool_name,
            "result": status,
            "request_id": ctx.request_id,
        }

        if ctx.caller.ip_address:
            entry["source_ip"] = ctx.caller.ip_address
        if error_code:
            entry["error_code"] = error_code
        if params:
            entry["params"] = self._mask_sensitive_fields(params)
        if duration_ms is not None:
            entry["duration_ms"] = round(duration_ms, 2)

        self._write_entry(entry)

    def log_auth_failure(
        self,
        reason: str,
        source_ip: str | None = None,
        path: str | None = None,
    ) -> None:
        """
        Log a request rejected by the authentication gate.

        Args:
            reason: Machine-readable rejection reason (e.g., "invalid_token").
            source_ip: Client IP address.
            path: Request path.
        """
        entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "event_type": "auth_failure",
            "success": False,
            "reason": reason,
            "source_ip": source_ip,
        }
        if path:
            entry["path"] = path

        self._write_entry(entry)

    def _mask_sensitive_fields(self, data: dict[str, Any]) -> dict[str, Any]:
        """Replace values of credential-like keys with '<masked>'."""
        masked: dict[str, Any] = {}
        for key, value in data.items():
            key_lower = key.lower()
            if any(pattern in key_lower for pattern in self.SENSITIVE_FIELD_PATTERNS):
                masked[key] = "<masked>"
            elif isinstance(value, dict):
                masked[key] = self._mask_sensitive_fields(value)
            else:
                masked[key] = value
        return masked

    def _write_entry(self, entry: dict[str, Any]) -> None:
        """Write an audit entry to the configured sinks."""
        json_line = json.dumps(entry, default=str)

        if self._file_logger:
            self._file_logger.info(json_line)

        if self._log_to_logger:
            logger.info("AUDIT: %s", json_line)


_audit_logger: AuditLogger | None = None


def get_audit_logger() -> AuditLogger:
    """
    Get the process audit logger.

    Returns a logger-only instance when none was installed at startup.
    """
    if _audit_logger is None:
        return AuditLogger(log_to_logger=True)
    return _audit_logger


def set_audit_logger(audit_logger: AuditLogger | None) -> None:
    """
    Install the process audit logger (called once during startup).

    Args:
        audit_logger: The AuditLogger to use, or None to reset to the default.
    """
    global _audit_logger
    _audit_logger = audit_logger
