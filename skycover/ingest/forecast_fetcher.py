"""Forecast fetcher: retrieves the ordered forecast periods for a grid cell."""

import logging
from datetime import UTC, datetime

from pydantic import BaseModel, Field, ValidationError, field_validator

from skycover.errors import ParseError
from skycover.ingest.nws_client import NwsClient
from skycover.models.forecast import ForecastPeriod

logger = logging.getLogger(__name__)


class _Period(BaseModel):
    name: str = ""
    start_time: datetime = Field(alias="startTime")
    end_time: datetime = Field(alias="endTime")
    short_forecast: str = Field(default="", alias="shortForecast")

    @field_validator("start_time", "end_time")
    @classmethod
    def _assume_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v


class _ForecastProperties(BaseModel):
    periods: list[_Period]


class _ForecastResponse(BaseModel):
    properties: _ForecastProperties


class ForecastFetcher:
    def __init__(self, client: NwsClient):
        self.client = client

    def fetch(self, forecast_url: str, deadline: float | None = None) -> list[ForecastPeriod]:
        """Fetch forecast periods in document order.

        Periods are returned unclassified and are never re-sorted.
        """
        raw = self.client.get_json(forecast_url, deadline=deadline)
        try:
            resp = _ForecastResponse.model_validate(raw)
        except ValidationError as e:
            raise ParseError(f"unexpected forecast response: {e}", forecast_url) from e

        periods = [
            ForecastPeriod(
                name=p.name,
                start_time=p.start_time,
                end_time=p.end_time,
                short_forecast=p.short_forecast,
            )
            for p in resp.properties.periods
        ]
        _warn_on_gaps(forecast_url, periods)
        return periods


def _warn_on_gaps(forecast_url: str, periods: list[ForecastPeriod]) -> None:
    for prev, cur in zip(periods, periods[1:]):
        if cur.start_time != prev.end_time:
            logger.warning(
                "Forecast %s: period %r starts at %s but %r ends at %s",
                forecast_url, cur.name, cur.start_time.isoformat(),
                prev.name, prev.end_time.isoformat(),
            )
