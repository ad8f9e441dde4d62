"""
MCP tools exposed by the Weather MCP Server.

Modules:
- weather: get_alerts and get_forecast (National Weather Service)
- website: check_website (HEAD liveness probe)
- schemas: pydantic argument models for all three tools
"""

from __future__ import annotations

from functools import partial

from weather_mcp.routing import ToolRegistry, ToolSpec
from weather_mcp.tools.schemas import AlertsArgs, ForecastArgs, WebsiteArgs
from weather_mcp.tools.weather import handle_get_alerts, handle_get_forecast
from weather_mcp.tools.website import handle_check_website
from weather_mcp.upstream.client import UpstreamClient
from weather_mcp.upstream.probe import WebsiteProbe


def build_registry(
    client: UpstreamClient | None = None,
    probe: WebsiteProbe | None = None,
) -> ToolRegistry:
    """
    Build the fixed registry of the three tools.

    Args:
        client: Provider client (defaults to the public NWS API).
        probe: Liveness probe (defaults to a 10 second limit).

    Returns:
        ToolRegistry with get_alerts, get_forecast and check_website.
    """
    client = client if client is not None else UpstreamClient()
    probe = probe if probe is not None else WebsiteProbe()

    registry = ToolRegistry()
    registry.register(
        ToolSpec(
            name="get_alerts",
            description="Get weather alerts for a state",
            arguments=AlertsArgs,
            handler=partial(handle_get_alerts, client=client),
        )
    )
    registry.register(
        ToolSpec(
            name="get_forecast",
            description="Get weather forecast for a location",
            arguments=ForecastArgs,
            handler=partial(handle_get_forecast, client=client),
        )
    )
    registry.register(
        ToolSpec(
            name="check_website",
            description="Check if a website is up or down",
            arguments=WebsiteArgs,
            handler=partial(handle_check_website, probe=probe),
        )
    )
    return registry


__all__ = [
    "build_registry",
    "handle_check_website",
    "handle_get_alerts",
    "handle_get_forecast",
]
