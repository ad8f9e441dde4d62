"""
Request-scoped data records for the Weather MCP Server.

Provider payloads are duck-typed JSON; the records below pin every field as
optional so the formatter can apply one placeholder rule to all of them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def _str_or_none(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _number_or_none(value: Any) -> int | float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _properties(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        return {}
    props = payload.get("properties")
    return props if isinstance(props, dict) else {}


@dataclass(frozen=True)
class AlertRecord:
    """One active alert as reported by the provider."""

    event: str | None = None
    area_desc: str | None = None
    severity: str | None = None
    status: str | None = None
    headline: str | None = None

    @classmethod
    def from_feature(cls, feature: Any) -> AlertRecord:
        """Build a record from a GeoJSON alert feature."""
        props = _properties(feature)
        return cls(
            event=_str_or_none(props.get("event")),
            area_desc=_str_or_none(props.get("areaDesc")),
            severity=_str_or_none(props.get("severity")),
            status=_str_or_none(props.get("status")),
            headline=_str_or_none(props.get("headline")),
        )


@dataclass(frozen=True)
class ForecastPeriod:
    """One forecast period (e.g., "Tonight") as reported by the provider."""

    name: str | None = None
    temperature: int | float | None = None
    temperature_unit: str | None = None
    wind_speed: str | None = None
    wind_direction: str | None = None
    short_forecast: str | None = None

    @classmethod
    def from_dict(cls, period: Any) -> ForecastPeriod:
        if not isinstance(period, dict):
            return cls()
        return cls(
            name=_str_or_none(period.get("name")),
            temperature=_number_or_none(period.get("temperature")),
            temperature_unit=_str_or_none(period.get("temperatureUnit")),
            wind_speed=_str_or_none(period.get("windSpeed")),
            wind_direction=_str_or_none(period.get("windDirection")),
            short_forecast=_str_or_none(period.get("shortForecast")),
        )


@dataclass(frozen=True)
class GridPoint:
    """Result of a points lookup: where the forecast for a coordinate lives."""

    forecast_url: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> GridPoint:
        url = _properties(payload).get("forecast")
        return cls(forecast_url=url if isinstance(url, str) and url else None)


def alerts_from_payload(payload: Any) -> list[AlertRecord]:
    """Extract alert records from an alerts FeatureCollection."""
    features = payload.get("features") if isinstance(payload, dict) else None
    if not isinstance(features, list):
        return []
    return [AlertRecord.from_feature(feature) for feature in features]


def periods_from_payload(payload: Any) -> list[ForecastPeriod]:
    """Extract forecast periods, in provider order, from a forecast payload."""
    periods = _properties(payload).get("periods")
    if not isinstance(periods, list):
        return []
    return [ForecastPeriod.from_dict(period) for period in periods]


@dataclass(frozen=True)
class LivenessResult:
    """
    Outcome of a website liveness probe.

    Attributes:
        url: The URL as supplied by the caller.
        reachable: Whether any HTTP response was received.
        response_time_ms: Elapsed time until response or failure.
        status_code: HTTP status code (reachable only).
        status_text: HTTP reason phrase (reachable only).
        server: ``Server`` response header (reachable only).
        content_type: ``Content-Type`` response header (reachable only).
        error: Human-readable failure description (unreachable only).
    """

    url: str
    reachable: bool
    response_time_ms: int
    status_code: int | None = None
    status_text: str | None = None
    server: str | None = None
    content_type: str | None = None
    error: str | None = None

    @property
    def status(self) -> str:
        """Classify the probe as UP, DEGRADED or DOWN."""
        if not self.reachable:
            return "DOWN"
        if self.status_code is not None and 200 <= self.status_code < 300:
            return "UP"
        return "DEGRADED"


@dataclass(frozen=True)
class TextContent:
    """A single text block of a tool result."""

    text: str
    type: str = "text"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class ToolResponse:
    """
    The result envelope every tool handler returns.

    Recoverable failures (provider down, no data) are ToolResponses too; only
    protocol faults become JSON-RPC errors.
    """

    content: tuple[TextContent, ...] = field(default_factory=tuple)

    @classmethod
    def text(cls, text: str) -> ToolResponse:
        """Build a response holding a single text block."""
        return cls(content=(TextContent(text=text),))

    def to_dict(self) -> dict[str, Any]:
        return {"content": [block.to_dict() for block in self.content]}
