"""Test helpers: canned forecasts and sources."""

import json
from datetime import UTC, datetime, timedelta
from pathlib import Path

from skycover.classify.cloud_cover import classify
from skycover.models.forecast import ClassifiedForecast, Coordinate, ForecastPeriod, GridCell

TEST_HOST = "https://test-nws.example.com"
TEST_COORDINATE = Coordinate(latitude=39.7456, longitude=-97.0892)
POINTS_URL = f"{TEST_HOST}/points/39.7456,-97.0892"
FORECAST_URL = f"{TEST_HOST}/gridpoints/TOP/32,81/forecast"
FIXTURE_DIR = Path(__file__).parent / "fixtures"
START = datetime(2026, 2, 10, 12, 0, tzinfo=UTC)


def load_fixture(name: str) -> dict:
    with open(FIXTURE_DIR / name) as f:
        return json.load(f)


def make_forecast(
    short_forecasts: list[str],
    start: datetime = START,
    hours: int = 12,
    coordinate: Coordinate = TEST_COORDINATE,
) -> ClassifiedForecast:
    """Build a contiguous forecast with one period per short forecast."""
    periods = []
    for i, text in enumerate(short_forecasts):
        period_start = start + timedelta(hours=hours * i)
        periods.append(
            ForecastPeriod(
                name=f"Period {i + 1}",
                start_time=period_start,
                end_time=period_start + timedelta(hours=hours),
                short_forecast=text,
                cloud_coverage=classify(text),
            )
        )
    return ClassifiedForecast(
        coordinate=coordinate,
        grid=GridCell(x=32, y=81, forecast_url=FORECAST_URL),
        periods=tuple(periods),
    )


class StaticSource:
    """ForecastSource returning a fixed forecast and counting calls."""

    def __init__(self, forecast: ClassifiedForecast):
        self.forecast = forecast
        self.calls = 0

    def forecasts(self, coordinate: Coordinate, deadline: float | None = None):
        self.calls += 1
        return self.forecast
