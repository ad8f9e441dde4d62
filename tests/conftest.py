"""
Pytest configuration for the Weather MCP Server tests.
"""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest

from weather_mcp.context import CallerInfo
from weather_mcp.security.audit_logger import set_audit_logger
from weather_mcp.upstream.client import UpstreamClient

# Configure pytest-asyncio mode
pytest_plugins = ["pytest_asyncio"]


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (deselect with '-m \"not integration\"')",
    )


@pytest.fixture(autouse=True)
def _reset_audit_logger() -> Iterator[None]:
    """Make sure no test leaks an installed audit logger (autouse fixture)."""
    yield
    set_audit_logger(None)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep credential and config variables from the host out of tests."""
    monkeypatch.delenv("BEARER_TOKEN", raising=False)
    for key in list(os.environ):
        if key.startswith("WEATHER_MCP_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def upstream() -> UpstreamClient:
    """Provider client pointed at the public NWS base URL."""
    return UpstreamClient(base_url="https://api.weather.gov")


@pytest.fixture
def caller() -> CallerInfo:
    """An authenticated caller."""
    return CallerInfo(ip_address="127.0.0.1", auth_method="bearer")
