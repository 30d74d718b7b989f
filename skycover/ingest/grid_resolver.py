"""Resolves a latitude/longitude to an NWS grid cell via the /points endpoint."""

import logging

from pydantic import BaseModel, Field, ValidationError

from skycover.errors import ParseError
from skycover.ingest.nws_client import NwsClient
from skycover.models.forecast import Coordinate, GridCell

logger = logging.getLogger(__name__)


class _GridPointProperties(BaseModel):
    grid_x: int = Field(alias="gridX")
    grid_y: int = Field(alias="gridY")
    forecast: str
    forecast_hourly: str = Field(default="", alias="forecastHourly")


class _GridPointResponse(BaseModel):
    properties: _GridPointProperties


def points_url(host: str, coordinate: Coordinate) -> str:
    # NWS redirects anything more precise than four decimals
    return f"{host}/points/{coordinate.latitude:.4f},{coordinate.longitude:.4f}"


class GridResolver:
    def __init__(self, client: NwsClient):
        self.client = client

    def resolve(self, coordinate: Coordinate, deadline: float | None = None) -> GridCell:
        url = points_url(self.client.base_url, coordinate)
        raw = self.client.get_json(url, deadline=deadline)
        try:
            props = _GridPointResponse.model_validate(raw).properties
        except ValidationError as e:
            raise ParseError(f"unexpected grid point response for {coordinate}: {e}", url) from e

        logger.debug(
            "Resolved %s to grid %d,%d (%s)",
            coordinate, props.grid_x, props.grid_y, props.forecast,
        )
        return GridCell(
            x=props.grid_x,
            y=props.grid_y,
            forecast_url=props.forecast,
            hourly_forecast_url=props.forecast_hourly,
        )
