"""
Tests for the audit logger.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from weather_mcp.config import LoggingConfig
from weather_mcp.context import CallerInfo, ToolContext
from weather_mcp.security.audit_logger import (
    AuditLogger,
    get_audit_logger,
    set_audit_logger,
)


@pytest.fixture
def ctx() -> ToolContext:
    """A tool context for audit entries."""
    return ToolContext(
        tool_name="get_alerts",
        caller=CallerInfo(ip_address="192.168.1.5", auth_method="bearer"),
        request_id="req-1",
    )


def _read_entries(path: Path) -> list[dict]:
    return [json.loads(line) for line in path.read_text().splitlines() if line]


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_tool_call_written_to_file(self, tmp_path: Path, ctx: ToolContext) -> None:
        """Test that a tool call is written as one JSON line."""
        path = tmp_path / "audit" / "audit.log"
        audit = AuditLogger(audit_log_path=str(path), log_to_logger=False)

        audit.log_tool_call(
            ctx, status="success", params={"state": "CA"}, duration_ms=12.3456
        )

        (entry,) = _read_entries(path)
        assert entry["event_type"] == "tool_call"
        assert entry["action"] == "get_alerts"
        assert entry["result"] == "success"
        assert entry["request_id"] == "req-1"
        assert entry["source_ip"] == "192.168.1.5"
        assert entry["params"] == {"state": "CA"}
        assert entry["duration_ms"] == 12.35

    def test_error_code_recorded(self, tmp_path: Path, ctx: ToolContext) -> None:
        """Test that failed calls carry their error code."""
        path = tmp_path / "audit.log"
        audit = AuditLogger(audit_log_path=str(path), log_to_logger=False)

        audit.log_tool_call(ctx, status="error", error_code="invalid_argument")

        (entry,) = _read_entries(path)
        assert entry["result"] == "error"
        assert entry["error_code"] == "invalid_argument"

    def test_sensitive_params_masked(self, tmp_path: Path, ctx: ToolContext) -> None:
        """Test that credential-like argument keys are masked."""
        path = tmp_path / "audit.log"
        audit = AuditLogger(audit_log_path=str(path), log_to_logger=False)

        audit.log_tool_call(
            ctx,
            status="success",
            params={"url": "https://x", "auth": {"api_key": "abc"}, "token": "t"},
        )

        (entry,) = _read_entries(path)
        assert entry["params"]["url"] == "https://x"
        assert entry["params"]["auth"] == "<masked>"
        assert entry["params"]["token"] == "<masked>"

    def test_auth_failure(self, tmp_path: Path) -> None:
        """Test that auth failures are recorded with reason and address."""
        path = tmp_path / "audit.log"
        audit = AuditLogger(audit_log_path=str(path), log_to_logger=False)

        audit.log_auth_failure("invalid_token", source_ip="10.0.0.9", path="/mcp")

        (entry,) = _read_entries(path)
        assert entry == {
            "timestamp": entry["timestamp"],
            "event_type": "auth_failure",
            "success": False,
            "reason": "invalid_token",
            "source_ip": "10.0.0.9",
            "path": "/mcp",
        }

    def test_logger_sink(
        self, ctx: ToolContext, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that entries are mirrored on the diagnostic logger."""
        audit = AuditLogger(log_to_logger=True)
        with caplog.at_level(logging.INFO, logger="weather_mcp.security.audit_logger"):
            audit.log_tool_call(ctx, status="success")
        assert any("AUDIT:" in record.getMessage() for record in caplog.records)

    def test_from_config(self, tmp_path: Path) -> None:
        """Test construction from LoggingConfig."""
        path = tmp_path / "a.log"
        audit = AuditLogger.from_config(LoggingConfig(audit_log_path=str(path)))
        audit.log_auth_failure("missing_header")
        assert _read_entries(path)[0]["reason"] == "missing_header"


class TestGlobalAuditLogger:
    """Tests for the process audit logger accessors."""

    def test_default_instance(self) -> None:
        """Test that a default instance is returned when none is installed."""
        assert isinstance(get_audit_logger(), AuditLogger)

    def test_set_audit_logger(self) -> None:
        """Test installing a process audit logger."""
        audit = AuditLogger(log_to_logger=False)
        set_audit_logger(audit)
        assert get_audit_logger() is audit
