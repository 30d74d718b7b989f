"""Pydantic v2 configuration schema with strict validation."""

from datetime import timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator

NWS_BASE_URL = "https://api.weather.gov"
DEFAULT_USER_AGENT = "skycover/0.1.0"


class ApiConfig(BaseModel):
    model_config = {"extra": "forbid"}

    host: str = NWS_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    timeout_seconds: float = Field(default=30.0, gt=0.0)
    max_retries: int = Field(default=0, ge=0)
    retry_base_delay: float = Field(default=5.0, ge=0.0)


class ForecastConfig(BaseModel):
    model_config = {"extra": "forbid"}

    refresh_interval_minutes: int = Field(default=60, ge=1)

    @property
    def refresh_interval(self) -> timedelta:
        return timedelta(minutes=self.refresh_interval_minutes)


class LocationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    latitude: float = Field(default=39.7456, ge=-90.0, le=90.0)
    longitude: float = Field(default=-97.0892, ge=-180.0, le=180.0)
    time_zone: str = "UTC"

    @field_validator("time_zone")
    @classmethod
    def _known_zone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown time zone: {v!r}") from e
        return v

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.time_zone)


class ServiceConfig(BaseModel):
    model_config = {"extra": "forbid"}

    api: ApiConfig = ApiConfig()
    forecast: ForecastConfig = ForecastConfig()
    location: LocationConfig = LocationConfig()
