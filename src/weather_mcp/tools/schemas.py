"""
Argument models for the weather and website tools.

The JSON Schemas advertised by ``tools/list`` are generated from these models,
and ``tools/call`` arguments are validated against them before dispatch.
"""

from __future__ import annotations

from pydantic import AnyUrl, BaseModel, Field, TypeAdapter, ValidationError, field_validator

_URL_ADAPTER = TypeAdapter(AnyUrl)


class AlertsArgs(BaseModel):
    """Arguments of ``get_alerts``."""

    state: str = Field(
        strict=True,
        min_length=2,
        max_length=2,
        description="Two-letter state code (e.g. CA, NY)",
    )


class ForecastArgs(BaseModel):
    """Arguments of ``get_forecast``."""

    latitude: float = Field(
        strict=True, ge=-90, le=90, description="Latitude of the location"
    )
    longitude: float = Field(
        strict=True, ge=-180, le=180, description="Longitude of the location"
    )


class WebsiteArgs(BaseModel):
    """Arguments of ``check_website``."""

    url: str = Field(
        strict=True,
        description="The website URL to check (e.g., https://example.com)",
        json_schema_extra={"format": "uri"},
    )

    @field_validator("url")
    @classmethod
    def validate_absolute_url(cls, v: str) -> str:
        """Require a well-formed absolute URL; keep the caller's spelling."""
        try:
            _URL_ADAPTER.validate_python(v)
        except ValidationError as e:
            raise ValueError("Invalid url") from e
        return v
