"""TTL cache of classified forecasts with single-flight refresh per coordinate.

Concurrent callers asking for the same missing or stale coordinate share one
upstream fetch: the first caller fetches, the others wait on its future and
receive the same forecast or the same exception. Failed or cancelled fetches
leave nothing behind in the cache.
"""

import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import datetime, timedelta

from skycover.errors import DeadlineExceeded
from skycover.ingest.forecast_source import ForecastSource
from skycover.models.common import utc_now
from skycover.models.forecast import CacheEntry, ClassifiedForecast, Coordinate

logger = logging.getLogger(__name__)


class ForecastCache:
    def __init__(
        self,
        source: ForecastSource,
        ttl: timedelta,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.source = source
        self.ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[Coordinate, CacheEntry] = {}
        self._inflight: dict[Coordinate, Future] = {}

    def forecasts(
        self, coordinate: Coordinate, deadline: float | None = None
    ) -> ClassifiedForecast:
        return self.get_or_fetch(coordinate, self.ttl, deadline=deadline)

    def get_or_fetch(
        self,
        coordinate: Coordinate,
        ttl: timedelta,
        deadline: float | None = None,
    ) -> ClassifiedForecast:
        with self._lock:
            entry = self._entries.get(coordinate)
            if entry is not None:
                if not entry.is_stale(self._clock()):
                    logger.debug("Forecast cache hit for %s", coordinate)
                    return entry.forecast
                logger.debug("Forecast cache entry for %s is stale", coordinate)
                del self._entries[coordinate]
            future = self._inflight.get(coordinate)
            leader = future is None
            if leader:
                future = Future()
                self._inflight[coordinate] = future

        if not leader:
            return self._wait(coordinate, future, deadline)

        try:
            forecast = self.source.forecasts(coordinate, deadline=deadline)
        except BaseException as e:
            with self._lock:
                del self._inflight[coordinate]
            future.set_exception(e)
            raise

        with self._lock:
            self._entries[coordinate] = CacheEntry(
                forecast=forecast, fetched_at=self._clock(), ttl=ttl
            )
            del self._inflight[coordinate]
        future.set_result(forecast)
        return forecast

    def _wait(
        self, coordinate: Coordinate, future: Future, deadline: float | None
    ) -> ClassifiedForecast:
        logger.debug("Waiting on in-flight forecast fetch for %s", coordinate)
        timeout = None
        if deadline is not None:
            timeout = max(0.0, deadline - time.monotonic())
        try:
            return future.result(timeout=timeout)
        except FutureTimeoutError as e:
            raise DeadlineExceeded(
                "deadline exceeded waiting for forecast", f"forecast {coordinate}"
            ) from e

    def invalidate(self, coordinate: Coordinate) -> None:
        with self._lock:
            self._entries.pop(coordinate, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
