"""
Weather tools backed by the National Weather Service API.

- get_alerts: active alerts for a two-letter state/area code
- get_forecast: forecast periods for a coordinate (points lookup, then forecast)

Provider outages are reported as ordinary text results.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from weather_mcp.formatting import (
    format_alerts_report,
    format_forecast_report,
    format_number,
)
from weather_mcp.logging import get_logger
from weather_mcp.models import (
    GridPoint,
    ToolResponse,
    alerts_from_payload,
    periods_from_payload,
)

if TYPE_CHECKING:
    from weather_mcp.context import ToolContext
    from weather_mcp.tools.schemas import AlertsArgs, ForecastArgs
    from weather_mcp.upstream.client import UpstreamClient

logger = get_logger(__name__)

ALERTS_UNAVAILABLE = "Failed to retrieve alerts data"
FORECAST_URL_MISSING = "Failed to get forecast URL from grid point data"
FORECAST_UNAVAILABLE = "Failed to retrieve forecast data"
NO_FORECAST_PERIODS = "No forecast periods available"


# =============================================================================
# get_alerts
# =============================================================================


async def handle_get_alerts(
    ctx: ToolContext,
    args: AlertsArgs,
    *,
    client: UpstreamClient,
) -> ToolResponse:
    """
    Handle the get_alerts tool call.

    Args:
        ctx: The ToolContext for this request.
        args: Validated arguments; ``state`` is a two-character code in any case.
        client: Provider client.

    Returns:
        ToolResponse listing the active alerts, or explaining why there are none.
    """
    state_code = args.state.upper()

    data = await client.fetch_json(client.alerts_url(state_code))
    if data is None:
        return ToolResponse.text(ALERTS_UNAVAILABLE)

    alerts = alerts_from_payload(data)
    if not alerts:
        return ToolResponse.text(f"No active alerts for {state_code}")

    logger.debug(
        "Alerts retrieved",
        extra={"request_id": ctx.request_id, "state": state_code, "count": len(alerts)},
    )
    return ToolResponse.text(format_alerts_report(state_code, alerts))


# =============================================================================
# get_forecast
# =============================================================================


async def handle_get_forecast(
    ctx: ToolContext,
    args: ForecastArgs,
    *,
    client: UpstreamClient,
) -> ToolResponse:
    """
    Handle the get_forecast tool call.

    Two dependent provider calls: the points lookup yields the forecast URL,
    which is then fetched. Each failure short-circuits with its own message.

    Args:
        ctx: The ToolContext for this request.
        args: Validated coordinates.
        client: Provider client.

    Returns:
        ToolResponse with one block per forecast period, in provider order.
    """
    latitude, longitude = args.latitude, args.longitude

    points = await client.fetch_json(client.points_url(latitude, longitude))
    if points is None:
        return ToolResponse.text(
            "Failed to retrieve grid point data for coordinates: "
            f"{format_number(latitude)}, {format_number(longitude)}. "
            "This location may not be supported by the NWS API "
            "(only US locations are supported)."
        )

    grid_point = GridPoint.from_payload(points)
    if grid_point.forecast_url is None:
        return ToolResponse.text(FORECAST_URL_MISSING)

    forecast = await client.fetch_json(grid_point.forecast_url)
    if forecast is None:
        return ToolResponse.text(FORECAST_UNAVAILABLE)

    periods = periods_from_payload(forecast)
    if not periods:
        return ToolResponse.text(NO_FORECAST_PERIODS)

    logger.debug(
        "Forecast retrieved",
        extra={"request_id": ctx.request_id, "periods": len(periods)},
    )
    return ToolResponse.text(format_forecast_report(latitude, longitude, periods))
