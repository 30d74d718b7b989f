"""Weather service: forecasts for the configured location and its operations."""

import json
import logging
import threading
from collections.abc import Callable
from typing import TextIO

from skycover.cache.forecast_cache import ForecastCache
from skycover.conditions.cloud_cover import CloudCoverConditions
from skycover.config.schema import ServiceConfig
from skycover.ingest.forecast_source import ForecastSource, NwsForecastSource
from skycover.ingest.nws_client import NwsClient
from skycover.models.forecast import ClassifiedForecast, Coordinate
from skycover.registry import Registry

logger = logging.getLogger(__name__)

Operation = Callable[..., None]


class WeatherService:
    """Serves cached, classified forecasts for one location.

    The forecast cache is built on first use from ``config.api``; tests can
    substitute the upstream source with ``set_source`` before that.
    """

    def __init__(self, config: ServiceConfig):
        self.config = config
        self.coordinate = Coordinate(
            latitude=config.location.latitude,
            longitude=config.location.longitude,
        )
        self._lock = threading.Lock()
        self._source: ForecastSource | None = None
        self._cache: ForecastCache | None = None
        self.operations: Registry[Operation] = Registry("operation")
        self.operations.register(
            "forecast", self.write_forecast,
            "get the weather forecast for the configured location",
        )

    def set_source(self, source: ForecastSource) -> None:
        with self._lock:
            self._source = source
            self._cache = None

    def cache(self) -> ForecastCache:
        with self._lock:
            if self._cache is None:
                source = self._source
                if source is None:
                    source = NwsForecastSource(NwsClient.from_config(self.config.api))
                self._cache = ForecastCache(
                    source, ttl=self.config.forecast.refresh_interval
                )
                logger.debug(
                    "Created forecast cache for %s with refresh interval %s",
                    self.coordinate, self.config.forecast.refresh_interval,
                )
            return self._cache

    def forecasts(
        self, coordinate: Coordinate | None = None, deadline: float | None = None
    ) -> ClassifiedForecast:
        return self.cache().forecasts(coordinate or self.coordinate, deadline=deadline)

    def write_forecast(self, writer: TextIO, deadline: float | None = None) -> None:
        fc = self.forecasts(deadline=deadline)
        writer.write(json.dumps(fc.to_dict(), indent=2))
        writer.write("\n")

    def conditions(self) -> CloudCoverConditions:
        return CloudCoverConditions(
            self, self.coordinate, self.config.location.tzinfo
        )
