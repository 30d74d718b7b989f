"""Maps NWS short forecast text to an ordered cloud coverage category."""

from skycover.models.forecast import CloudCoverage

# Case-sensitive, matched before any substring heuristics.
EXACT_LABELS: dict[str, CloudCoverage] = {
    "Clear": CloudCoverage.CLEAR_OR_SUNNY,
    "Sunny": CloudCoverage.CLEAR_OR_SUNNY,
    "Mostly Clear": CloudCoverage.MOSTLY_CLEAR_OR_SUNNY,
    "Mostly Sunny": CloudCoverage.MOSTLY_CLEAR_OR_SUNNY,
    "Partly Cloudy": CloudCoverage.PARTLY_CLOUDY_OR_SUNNY,
    "Partly Sunny": CloudCoverage.PARTLY_CLOUDY_OR_SUNNY,
    "Mostly Cloudy": CloudCoverage.MOSTLY_CLOUDY,
    "Cloudy": CloudCoverage.CLOUDY,
}

ARG_VALUES = ", ".join(EXACT_LABELS)


def classify(short_forecast: str) -> CloudCoverage:
    """Classify a short forecast such as "Partly Sunny" or "Chance Rain Showers".

    Exact labels win; otherwise "rain" is checked before "snow", so
    "Rain And Snow" is RAIN. Anything else is UNKNOWN.
    """
    coverage = EXACT_LABELS.get(short_forecast)
    if coverage is not None:
        return coverage
    return _estimate(short_forecast)


def _estimate(short_forecast: str) -> CloudCoverage:
    text = short_forecast.lower()
    if "rain" in text:
        return CloudCoverage.RAIN
    if "snow" in text:
        return CloudCoverage.SNOW
    return CloudCoverage.UNKNOWN
