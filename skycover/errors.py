"""Error taxonomy for forecast lookup, classification and condition checks."""

from datetime import datetime


class SkycoverError(Exception):
    """Base class for all errors raised by skycover."""


class UpstreamError(SkycoverError):
    """Raised on transport failure or a non-success status from the NWS API."""

    def __init__(self, message: str, url: str, status_code: int | None = None):
        super().__init__(f"{url}: {message}")
        self.url = url
        self.status_code = status_code


class DeadlineExceeded(UpstreamError):
    """Raised when the caller's deadline passes before a request completes."""


class ParseError(SkycoverError):
    """Raised when a response body does not have the expected shape."""

    def __init__(self, message: str, url: str):
        super().__init__(f"{url}: {message}")
        self.url = url


class InvalidArgument(SkycoverError):
    def __init__(self, message: str, argument: str | None):
        super().__init__(message)
        self.argument = argument


class NoForecastForTime(SkycoverError):
    def __init__(self, when: datetime):
        super().__init__(f"no forecast available for time: {when.isoformat()}")
        self.when = when


class UnknownCategoryInForecast(SkycoverError):
    def __init__(self, short_forecast: str, period_name: str):
        super().__init__(
            f"unknown cloud cover in forecast period {period_name!r}: {short_forecast!r}"
        )
        self.short_forecast = short_forecast
        self.period_name = period_name
