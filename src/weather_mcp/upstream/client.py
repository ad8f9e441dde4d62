"""
Weather provider client.

Every call is a single attempt on a fresh connection pool. Failures of any
kind (network, timeout, non-2xx, undecodable body) are logged and collapse
into ``None``; callers supply their own user-facing message.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx

from weather_mcp.logging import get_logger

if TYPE_CHECKING:
    from weather_mcp.config import UpstreamConfig

logger = get_logger(__name__)


class UpstreamClient:
    """
    Fetches JSON documents from the National Weather Service API.

    Example:
        >>> client = UpstreamClient(base_url="https://api.weather.gov")
        >>> data = await client.fetch_json(client.alerts_url("CA"))
    """

    def __init__(
        self,
        base_url: str = "https://api.weather.gov",
        user_agent: str = "weather-app/1.0",
        accept: str = "application/geo+json",
        timeout_seconds: float = 30.0,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Provider base URL.
            user_agent: Identification header sent with every request.
            accept: Accept header sent with every request.
            timeout_seconds: Timeout applied to each request.
        """
        self._base_url = base_url.rstrip("/")
        self._headers = {"User-Agent": user_agent, "Accept": accept}
        self._timeout = timeout_seconds

    @classmethod
    def from_config(cls, config: UpstreamConfig) -> UpstreamClient:
        """Create an UpstreamClient from configuration."""
        return cls(
            base_url=config.base_url,
            user_agent=config.user_agent,
            accept=config.accept,
            timeout_seconds=config.timeout_seconds,
        )

    @property
    def base_url(self) -> str:
        """Return the provider base URL."""
        return self._base_url

    @property
    def headers(self) -> dict[str, str]:
        """Return a copy of the fixed request headers."""
        return dict(self._headers)

    def alerts_url(self, state_code: str) -> str:
        """URL of the alerts-by-area endpoint for a state code."""
        return f"{self._base_url}/alerts?area={state_code}"

    def points_url(self, latitude: float, longitude: float) -> str:
        """URL of the grid point lookup, coordinates rounded to 4 decimals."""
        return f"{self._base_url}/points/{latitude:.4f},{longitude:.4f}"

    async def fetch_json(self, url: str) -> Any | None:
        """
        GET a URL and decode its JSON body.

        Args:
            url: Absolute URL to fetch.

        Returns:
            The decoded JSON value, or None if the provider is unavailable.
        """
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(url, headers=self._headers)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Provider returned an error status",
                extra={"url": url, "status_code": e.response.status_code},
            )
        except httpx.HTTPError as e:
            logger.error(
                "Provider request failed",
                extra={"url": url, "error": str(e) or type(e).__name__},
            )
        except ValueError as e:
            logger.error(
                "Provider returned an invalid JSON body",
                extra={"url": url, "error": str(e)},
            )
        return None
