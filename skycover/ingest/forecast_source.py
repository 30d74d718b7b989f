"""Forecast sources: resolve, fetch and classify forecasts for a coordinate."""

import logging
import threading
from dataclasses import replace
from typing import Protocol

from skycover.classify.cloud_cover import classify
from skycover.ingest.forecast_fetcher import ForecastFetcher
from skycover.ingest.grid_resolver import GridResolver
from skycover.ingest.nws_client import NwsClient
from skycover.models.forecast import ClassifiedForecast, Coordinate, GridCell

logger = logging.getLogger(__name__)


class ForecastSource(Protocol):
    def forecasts(
        self, coordinate: Coordinate, deadline: float | None = None
    ) -> ClassifiedForecast: ...


class NwsForecastSource:
    """Uncached NWS source. Grid cells are memoised since they never move."""

    def __init__(self, client: NwsClient):
        self.resolver = GridResolver(client)
        self.fetcher = ForecastFetcher(client)
        self._grids: dict[Coordinate, GridCell] = {}
        self._lock = threading.Lock()

    def grid_for(self, coordinate: Coordinate, deadline: float | None = None) -> GridCell:
        with self._lock:
            grid = self._grids.get(coordinate)
        if grid is None:
            grid = self.resolver.resolve(coordinate, deadline=deadline)
            with self._lock:
                self._grids[coordinate] = grid
        return grid

    def forecasts(
        self, coordinate: Coordinate, deadline: float | None = None
    ) -> ClassifiedForecast:
        grid = self.grid_for(coordinate, deadline=deadline)
        periods = self.fetcher.fetch(grid.forecast_url, deadline=deadline)
        classified = tuple(
            replace(p, cloud_coverage=classify(p.short_forecast)) for p in periods
        )
        logger.info(
            "NWS forecast fetched for %s via grid %d,%d: %d periods",
            coordinate, grid.x, grid.y, len(classified),
        )
        return ClassifiedForecast(coordinate=coordinate, grid=grid, periods=classified)
