"""Cloud cover conditions evaluated against the forecast period covering a time."""

import logging
import operator
from collections.abc import Callable
from datetime import datetime, tzinfo
from typing import Protocol, TextIO

from skycover.classify.cloud_cover import ARG_VALUES, classify
from skycover.errors import InvalidArgument, NoForecastForTime, UnknownCategoryInForecast
from skycover.ingest.forecast_source import ForecastSource
from skycover.models.forecast import CloudCoverage, Coordinate
from skycover.registry import Registry

logger = logging.getLogger(__name__)


class Condition(Protocol):
    def __call__(
        self,
        when: datetime | None,
        arg: str | None = None,
        *,
        writer: TextIO | None = None,
        deadline: float | None = None,
    ) -> bool: ...


class CloudCoverConditions:
    def __init__(self, source: ForecastSource, coordinate: Coordinate, tz: tzinfo):
        self.source = source
        self.coordinate = coordinate
        self.tz = tz
        self.registry: Registry[Condition] = Registry("condition")
        self.registry.register(
            "cloud-cover", self.equal,
            f"returns true if the cloud coverage is exactly one of {ARG_VALUES}",
        )
        self.registry.register(
            "max-cloud-cover", self.at_most,
            f"returns true if the cloud coverage is at most one of {ARG_VALUES}",
        )
        self.registry.register(
            "min-cloud-cover", self.at_least,
            f"returns true if the cloud coverage is at least one of {ARG_VALUES}",
        )
        self.registry.register(
            "mostly-sunny", self.mostly_sunny,
            "returns true if the cloud coverage is at most mostly sunny",
        )
        self.registry.register(
            "partly-cloudy", self.partly_cloudy,
            "returns true if the cloud coverage is exactly partly sunny/cloudy",
        )
        self.registry.register(
            "partly-sunny", self.partly_cloudy,
            "returns true if the cloud coverage is exactly partly sunny/cloudy",
        )
        self.registry.register(
            "mostly-cloudy", self.mostly_cloudy,
            "returns true if the cloud coverage is at least mostly cloudy",
        )

    def equal(
        self,
        when: datetime | None,
        arg: str | None = None,
        *,
        writer: TextIO | None = None,
        deadline: float | None = None,
    ) -> bool:
        """True if the cloud coverage at ``when`` is exactly ``arg``."""
        return self._compare("equal", operator.eq, "==", when, arg, writer, deadline)

    def at_most(
        self,
        when: datetime | None,
        arg: str | None = None,
        *,
        writer: TextIO | None = None,
        deadline: float | None = None,
    ) -> bool:
        """True if the cloud coverage at ``when`` is at most ``arg``."""
        return self._compare("at_most", operator.le, "<=", when, arg, writer, deadline)

    def at_least(
        self,
        when: datetime | None,
        arg: str | None = None,
        *,
        writer: TextIO | None = None,
        deadline: float | None = None,
    ) -> bool:
        """True if the cloud coverage at ``when`` is at least ``arg``."""
        return self._compare("at_least", operator.ge, ">=", when, arg, writer, deadline)

    def mostly_sunny(
        self,
        when: datetime | None,
        arg: str | None = None,
        *,
        writer: TextIO | None = None,
        deadline: float | None = None,
    ) -> bool:
        return self.at_most(when, "Mostly Sunny", writer=writer, deadline=deadline)

    def partly_cloudy(
        self,
        when: datetime | None,
        arg: str | None = None,
        *,
        writer: TextIO | None = None,
        deadline: float | None = None,
    ) -> bool:
        return self.equal(when, "Partly Sunny", writer=writer, deadline=deadline)

    def mostly_cloudy(
        self,
        when: datetime | None,
        arg: str | None = None,
        *,
        writer: TextIO | None = None,
        deadline: float | None = None,
    ) -> bool:
        return self.at_least(when, "Mostly Cloudy", writer=writer, deadline=deadline)

    def _compare(
        self,
        name: str,
        op: Callable[[CloudCoverage, CloudCoverage], bool],
        symbol: str,
        when: datetime | None,
        arg: str | None,
        writer: TextIO | None,
        deadline: float | None,
    ) -> bool:
        forecast, wanted = self._coverage(when, arg, deadline)
        result = op(forecast, wanted)
        msg = f"{name}: forecast {forecast.name} {symbol} {wanted.name}: {result}"
        logger.debug("%s", msg)
        if writer is not None:
            writer.write(msg + "\n")
        return result

    def _coverage(
        self, when: datetime | None, arg: str | None, deadline: float | None
    ) -> tuple[CloudCoverage, CloudCoverage]:
        if not arg:
            raise InvalidArgument(
                f"expected an argument for cloud cover: one of {ARG_VALUES}", arg
            )
        wanted = classify(arg)
        if wanted == CloudCoverage.UNKNOWN:
            raise InvalidArgument(
                f"unknown cloud cover: {arg!r} not one of {ARG_VALUES}", arg
            )

        fc = self.source.forecasts(self.coordinate, deadline=deadline)

        if when is None:
            when = datetime.now(self.tz)
        elif when.tzinfo is None:
            when = when.replace(tzinfo=self.tz)
        period = fc.period_for(when)
        if period is None:
            raise NoForecastForTime(when)
        if period.cloud_coverage == CloudCoverage.UNKNOWN:
            raise UnknownCategoryInForecast(period.short_forecast, period.name)
        return period.cloud_coverage, wanted
