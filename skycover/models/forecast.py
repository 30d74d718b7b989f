"""Forecast data models: coordinates, grid cells, periods and cloud coverage."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import IntEnum
from typing import Any


class CloudCoverage(IntEnum):
    """Opaque cloud coverage, ordered from clear to cloudy.

    See https://www.weather.gov/bgm/forecast_terms. RAIN and SNOW sort above
    CLOUDY even though they are not "more cloudy".
    """

    UNKNOWN = 0
    CLEAR_OR_SUNNY = 1  # 0 to 1/8
    MOSTLY_CLEAR_OR_SUNNY = 2  # 1/8 to 3/8
    PARTLY_CLOUDY_OR_SUNNY = 3  # 3/8 to 5/8
    MOSTLY_CLOUDY = 4  # 5/8 to 7/8
    CLOUDY = 5  # 8/8
    RAIN = 6
    SNOW = 7


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def __str__(self) -> str:
        return f"({self.latitude}, {self.longitude})"


@dataclass(frozen=True)
class GridCell:
    x: int
    y: int
    forecast_url: str
    hourly_forecast_url: str = ""


@dataclass(frozen=True)
class ForecastPeriod:
    name: str
    start_time: datetime
    end_time: datetime
    short_forecast: str
    cloud_coverage: CloudCoverage = CloudCoverage.UNKNOWN

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "short_forecast": self.short_forecast,
            "cloud_coverage": self.cloud_coverage.name,
        }


@dataclass(frozen=True)
class ClassifiedForecast:
    coordinate: Coordinate
    grid: GridCell
    periods: tuple[ForecastPeriod, ...]

    def period_for(self, when: datetime) -> ForecastPeriod | None:
        """Return the period strictly containing ``when``.

        An instant equal to a period's start or end time does not match
        that period.
        """
        for period in self.periods:
            if period.start_time < when < period.end_time:
                return period
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "latitude": self.coordinate.latitude,
            "longitude": self.coordinate.longitude,
            "grid": {
                "x": self.grid.x,
                "y": self.grid.y,
                "forecast_url": self.grid.forecast_url,
                "hourly_forecast_url": self.grid.hourly_forecast_url,
            },
            "periods": [p.to_dict() for p in self.periods],
        }


@dataclass(frozen=True)
class CacheEntry:
    forecast: ClassifiedForecast
    fetched_at: datetime
    ttl: timedelta

    def is_stale(self, now: datetime) -> bool:
        # Exactly at fetched_at + ttl is still fresh
        return now > self.fetched_at + self.ttl
