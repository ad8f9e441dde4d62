"""
Text rendering of provider records.

Every field goes through ``_or_placeholder``: a value that is None or an
empty string renders as the placeholder for that slot.
"""

from __future__ import annotations

from collections.abc import Iterable

from weather_mcp.models import AlertRecord, ForecastPeriod, LivenessResult

UNKNOWN = "Unknown"
NO_HEADLINE = "No headline"
NO_FORECAST = "No forecast available"
DEFAULT_TEMPERATURE_UNIT = "F"
SEPARATOR = "---"


def format_number(value: int | float) -> str:
    """Render a number without a trailing ``.0`` when it is integral."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _or_placeholder(value: str | int | float | None, placeholder: str) -> str:
    if value is None or value == "":
        return placeholder
    if isinstance(value, (int, float)):
        return format_number(value)
    return value


def format_alert(alert: AlertRecord) -> str:
    """Render one alert as a block terminated by the separator line."""
    return "\n".join(
        [
            f"Event: {_or_placeholder(alert.event, UNKNOWN)}",
            f"Area: {_or_placeholder(alert.area_desc, UNKNOWN)}",
            f"Severity: {_or_placeholder(alert.severity, UNKNOWN)}",
            f"Status: {_or_placeholder(alert.status, UNKNOWN)}",
            f"Headline: {_or_placeholder(alert.headline, NO_HEADLINE)}",
            SEPARATOR,
        ]
    )


def format_forecast_period(period: ForecastPeriod) -> str:
    """Render one forecast period as a block terminated by the separator line."""
    temperature = _or_placeholder(period.temperature, UNKNOWN)
    unit = _or_placeholder(period.temperature_unit, DEFAULT_TEMPERATURE_UNIT)
    return "\n".join(
        [
            f"{_or_placeholder(period.name, UNKNOWN)}:",
            f"Temperature: {temperature}°{unit}",
            f"Wind: {_or_placeholder(period.wind_speed, UNKNOWN)} "
            f"{_or_placeholder(period.wind_direction, '')}",
            _or_placeholder(period.short_forecast, NO_FORECAST),
            SEPARATOR,
        ]
    )


def format_alerts_report(state_code: str, alerts: Iterable[AlertRecord]) -> str:
    blocks = "\n".join(format_alert(alert) for alert in alerts)
    return f"Active alerts for {state_code}:\n\n{blocks}"


def format_forecast_report(
    latitude: float, longitude: float, periods: Iterable[ForecastPeriod]
) -> str:
    blocks = "\n".join(format_forecast_period(period) for period in periods)
    return (
        f"Forecast for {format_number(latitude)}, {format_number(longitude)}:"
        f"\n\n{blocks}"
    )


def format_liveness(result: LivenessResult) -> str:
    """
    Render a liveness probe result.

    DOWN results carry the error description and timing only; the HTTP code
    and header lines appear only when a response was received.
    """
    lines = [
        f"Website Status Check: {result.url}",
        f"Status: {result.status}",
    ]
    if not result.reachable:
        lines.append(f"Error: {_or_placeholder(result.error, 'Unknown error')}")
        lines.append(f"Response Time: {result.response_time_ms}ms")
        return "\n".join(lines)

    status_line = f"HTTP Code: {result.status_code}"
    if result.status_text:
        status_line = f"{status_line} {result.status_text}"
    lines.extend(
        [
            status_line,
            f"Response Time: {result.response_time_ms}ms",
            f"Server: {_or_placeholder(result.server, UNKNOWN)}",
            f"Content-Type: {_or_placeholder(result.content_type, UNKNOWN)}",
        ]
    )
    return "\n".join(lines)
