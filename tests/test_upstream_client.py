"""
Tests for the weather provider client.

Tests cover:
- Fixed identification and accept headers
- Endpoint URL construction
- Collapse of every failure mode into None
"""

from __future__ import annotations

import json
from typing import Any
from unittest import mock

import httpx
import pytest

from weather_mcp.config import UpstreamConfig
from weather_mcp.upstream.client import UpstreamClient

URL = "https://api.weather.gov/alerts?area=CA"


def _patched_client(
    response: Any = None, side_effect: Exception | None = None
) -> tuple[Any, mock.AsyncMock]:
    """Patch httpx.AsyncClient and return (patcher, inner client mock)."""
    patcher = mock.patch("httpx.AsyncClient")
    mock_client_class = patcher.start()
    mock_client = mock.AsyncMock()
    if side_effect is not None:
        mock_client.get.side_effect = side_effect
    else:
        mock_client.get.return_value = response
    mock_client_class.return_value.__aenter__.return_value = mock_client
    return patcher, mock_client


def _json_response(data: Any) -> mock.MagicMock:
    response = mock.MagicMock()  # json() and raise_for_status() are sync
    response.json.return_value = data
    response.raise_for_status = mock.Mock()
    return response


# =============================================================================
# Tests for Construction
# =============================================================================


class TestUpstreamClientInit:
    """Tests for UpstreamClient construction and URL helpers."""

    def test_defaults(self) -> None:
        """Test default headers and base URL."""
        client = UpstreamClient()
        assert client.base_url == "https://api.weather.gov"
        assert client.headers == {
            "User-Agent": "weather-app/1.0",
            "Accept": "application/geo+json",
        }

    def test_from_config(self) -> None:
        """Test construction from UpstreamConfig."""
        client = UpstreamClient.from_config(
            UpstreamConfig(base_url="https://nws.test/", user_agent="ua/2")
        )
        assert client.base_url == "https://nws.test"
        assert client.headers["User-Agent"] == "ua/2"

    def test_alerts_url(self, upstream: UpstreamClient) -> None:
        """Test the alerts endpoint."""
        assert upstream.alerts_url("NY") == "https://api.weather.gov/alerts?area=NY"

    def test_points_url_rounds_to_four_decimals(self, upstream: UpstreamClient) -> None:
        """Test coordinate rounding in the points endpoint."""
        assert upstream.points_url(39.74561234, -97.08923) == (
            "https://api.weather.gov/points/39.7456,-97.0892"
        )
        assert upstream.points_url(40, -100) == (
            "https://api.weather.gov/points/40.0000,-100.0000"
        )


# =============================================================================
# Tests for fetch_json
# =============================================================================


class TestFetchJson:
    """Tests for UpstreamClient.fetch_json."""

    @pytest.mark.asyncio
    async def test_success(self, upstream: UpstreamClient) -> None:
        """Test a successful fetch with the fixed headers."""
        patcher, mock_client = _patched_client(_json_response({"features": []}))
        try:
            data = await upstream.fetch_json(URL)
        finally:
            patcher.stop()

        assert data == {"features": []}
        mock_client.get.assert_awaited_once_with(
            URL,
            headers={"User-Agent": "weather-app/1.0", "Accept": "application/geo+json"},
        )

    @pytest.mark.asyncio
    async def test_timeout_applied(self) -> None:
        """Test that the configured timeout bounds each call."""
        client = UpstreamClient(timeout_seconds=7.5)
        with mock.patch("httpx.AsyncClient") as mock_client_class:
            inner = mock.AsyncMock()
            inner.get.return_value = _json_response({})
            mock_client_class.return_value.__aenter__.return_value = inner

            await client.fetch_json(URL)

            mock_client_class.assert_called_once_with(timeout=7.5)

    @pytest.mark.asyncio
    async def test_http_status_error(self, upstream: UpstreamClient) -> None:
        """Test that a non-2xx status yields None."""
        response = mock.MagicMock()
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "404 Not Found",
            request=httpx.Request("GET", URL),
            response=httpx.Response(404),
        )
        patcher, _ = _patched_client(response)
        try:
            assert await upstream.fetch_json(URL) is None
        finally:
            patcher.stop()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            httpx.ConnectError("Connection refused"),
            httpx.ReadTimeout("timed out"),
        ],
    )
    async def test_network_errors(
        self, upstream: UpstreamClient, error: Exception
    ) -> None:
        """Test that network failures yield None."""
        patcher, _ = _patched_client(side_effect=error)
        try:
            assert await upstream.fetch_json(URL) is None
        finally:
            patcher.stop()

    @pytest.mark.asyncio
    async def test_invalid_json(self, upstream: UpstreamClient) -> None:
        """Test that an undecodable body yields None."""
        response = mock.MagicMock()
        response.raise_for_status = mock.Mock()
        response.json.side_effect = json.JSONDecodeError("Expecting value", "", 0)
        patcher, _ = _patched_client(response)
        try:
            assert await upstream.fetch_json(URL) is None
        finally:
            patcher.stop()

    @pytest.mark.asyncio
    async def test_single_attempt(self, upstream: UpstreamClient) -> None:
        """Test that a failed call is not retried."""
        patcher, mock_client = _patched_client(
            side_effect=httpx.ConnectError("Connection refused")
        )
        try:
            await upstream.fetch_json(URL)
        finally:
            patcher.stop()
        assert mock_client.get.await_count == 1
