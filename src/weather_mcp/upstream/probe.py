"""
Website liveness probing.

A probe is a single HEAD request (no body transfer) under a hard total time
limit. It never raises: an unreachable site is a result, not an error.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

import httpx

from weather_mcp.logging import get_logger
from weather_mcp.models import LivenessResult

if TYPE_CHECKING:
    from weather_mcp.config import LivenessConfig

logger = get_logger(__name__)


def _elapsed_ms(start: float) -> int:
    return max(0, int((time.monotonic() - start) * 1000))


class WebsiteProbe:
    """Checks whether a URL answers HTTP requests."""

    def __init__(self, timeout_seconds: float = 10.0) -> None:
        self._timeout = timeout_seconds

    @classmethod
    def from_config(cls, config: LivenessConfig) -> WebsiteProbe:
        """Create a WebsiteProbe from configuration."""
        return cls(timeout_seconds=config.timeout_seconds)

    @property
    def timeout_seconds(self) -> float:
        """Return the total probe time limit in seconds."""
        return self._timeout

    async def check(self, url: str) -> LivenessResult:
        """
        Probe a URL.

        Redirects are followed. The whole exchange, connection setup included,
        must finish within the time limit or the site is reported DOWN.

        Args:
            url: Absolute URL to probe.

        Returns:
            LivenessResult describing the outcome.
        """
        start = time.monotonic()
        try:
            async with httpx.AsyncClient(
                follow_redirects=True, timeout=self._timeout
            ) as client:
                response = await asyncio.wait_for(client.head(url), self._timeout)
        except TimeoutError:
            error = f"Request timed out after {self._timeout:g} seconds"
        except httpx.TimeoutException as e:
            error = f"Request timed out: {e}" if str(e) else "Request timed out"
        except (httpx.HTTPError, httpx.InvalidURL, OSError, ValueError) as e:
            error = str(e) or type(e).__name__
        else:
            return LivenessResult(
                url=url,
                reachable=True,
                response_time_ms=_elapsed_ms(start),
                status_code=response.status_code,
                status_text=response.reason_phrase,
                server=response.headers.get("server"),
                content_type=response.headers.get("content-type"),
            )

        elapsed = _elapsed_ms(start)
        logger.info(
            "Website unreachable",
            extra={"url": url, "error": error, "response_time_ms": elapsed},
        )
        return LivenessResult(
            url=url,
            reachable=False,
            response_time_ms=elapsed,
            error=error,
        )
