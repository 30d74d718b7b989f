"""Tests for cloud cover conditions."""

import io
from datetime import UTC, datetime, timedelta
from itertools import product
from unittest.mock import MagicMock
from zoneinfo import ZoneInfo

import pytest

from skycover.classify.cloud_cover import EXACT_LABELS, classify
from skycover.conditions.cloud_cover import CloudCoverConditions
from skycover.errors import InvalidArgument, NoForecastForTime, UnknownCategoryInForecast
from skycover.models.forecast import CloudCoverage
from skycover.tests.helpers import START, TEST_COORDINATE, StaticSource, make_forecast

LABELS = list(EXACT_LABELS)
SKY = [
    CloudCoverage.CLEAR_OR_SUNNY,
    CloudCoverage.MOSTLY_CLEAR_OR_SUNNY,
    CloudCoverage.PARTLY_CLOUDY_OR_SUNNY,
    CloudCoverage.MOSTLY_CLOUDY,
    CloudCoverage.CLOUDY,
]


def _conditions(short_forecasts: list[str], tz=UTC) -> tuple[CloudCoverConditions, StaticSource]:
    source = StaticSource(make_forecast(short_forecasts))
    return CloudCoverConditions(source, TEST_COORDINATE, tz), source


def _mid(i: int) -> datetime:
    return START + timedelta(hours=12 * i + 6)


class TestOrderingLaws:
    def test_at_most_at_least_equal(self):
        conds, _ = _conditions(LABELS)
        for period_label, arg in product(LABELS, LABELS):
            idx = LABELS.index(period_label)
            a, b = classify(period_label), classify(arg)
            at_most = conds.at_most(_mid(idx), arg)
            at_least = conds.at_least(_mid(idx), arg)
            equal = conds.equal(_mid(idx), arg)
            assert at_most == (a <= b), (period_label, arg)
            assert at_least == (a >= b), (period_label, arg)
            assert equal == (at_most and at_least), (period_label, arg)

    def test_mostly_sunny(self):
        conds, _ = _conditions(["Sunny", "Mostly Clear", "Partly Sunny", "Cloudy"])
        assert [conds.mostly_sunny(_mid(i)) for i in range(4)] == [True, True, False, False]

    def test_mostly_cloudy(self):
        conds, _ = _conditions(["Sunny", "Partly Cloudy", "Mostly Cloudy", "Cloudy"])
        assert [conds.mostly_cloudy(_mid(i)) for i in range(4)] == [False, False, True, True]

    def test_partly_cloudy_ignores_arg(self):
        conds, _ = _conditions(["Partly Cloudy"])
        assert conds.partly_cloudy(_mid(0), "Cloudy") is True

    def test_rain_counts_as_more_than_cloudy(self):
        conds, _ = _conditions(["Rain Showers Likely"])
        assert conds.at_least(_mid(0), "Cloudy") is True
        assert conds.mostly_cloudy(_mid(0)) is True
        assert conds.at_most(_mid(0), "Cloudy") is False

    def test_rain_argument_accepted(self):
        conds, _ = _conditions(["Light Rain"])
        assert conds.equal(_mid(0), "Rain") is True


class TestAliases:
    def test_partly_cloudy_and_partly_sunny_agree(self):
        conds, _ = _conditions(LABELS + ["Chance Rain", "Snow Likely"])
        cloudy = conds.registry["partly-cloudy"]
        sunny = conds.registry["partly-sunny"]
        for i in range(len(LABELS) + 2):
            for arg in [None, *LABELS]:
                assert cloudy(_mid(i), arg) == sunny(_mid(i), arg)

    def test_registry_names(self):
        conds, _ = _conditions(["Sunny"])
        assert conds.registry.names() == sorted([
            "cloud-cover", "max-cloud-cover", "min-cloud-cover", "mostly-sunny",
            "partly-cloudy", "partly-sunny", "mostly-cloudy",
        ])

    def test_registry_dispatch(self):
        conds, _ = _conditions(["Mostly Cloudy"])
        assert conds.registry["cloud-cover"](_mid(0), "Mostly Cloudy") is True
        assert conds.registry["max-cloud-cover"](_mid(0), "Partly Sunny") is False
        assert conds.registry["min-cloud-cover"](_mid(0), "Partly Sunny") is True
        assert conds.registry["mostly-cloudy"](_mid(0)) is True
        assert conds.registry["mostly-sunny"](_mid(0)) is False

    def test_help_mentions_values(self):
        conds, _ = _conditions(["Sunny"])
        assert "Mostly Sunny" in conds.registry.help()["max-cloud-cover"]


class TestErrors:
    def test_unknown_argument_no_fetch(self):
        conds, source = _conditions(["Sunny"])
        with pytest.raises(InvalidArgument) as exc:
            conds.at_most(_mid(0), "Blustery")
        assert exc.value.argument == "Blustery"
        assert source.calls == 0

    def test_case_altered_argument_rejected(self):
        conds, source = _conditions(["Sunny"])
        with pytest.raises(InvalidArgument):
            conds.equal(_mid(0), "sunny")
        assert source.calls == 0

    def test_missing_argument(self):
        conds, _ = _conditions(["Sunny"])
        with pytest.raises(InvalidArgument):
            conds.at_least(_mid(0))

    def test_no_forecast_for_time(self):
        conds, _ = _conditions(["Sunny"])
        with pytest.raises(NoForecastForTime):
            conds.equal(START - timedelta(days=1), "Sunny")

    def test_boundary_has_no_forecast(self):
        conds, _ = _conditions(["Sunny", "Cloudy"])
        with pytest.raises(NoForecastForTime):
            conds.equal(START + timedelta(hours=12), "Sunny")
        assert conds.equal(START + timedelta(hours=12, microseconds=1), "Cloudy") is True

    def test_unknown_in_forecast(self):
        conds, _ = _conditions(["Blustery"])
        assert classify("Blustery") == CloudCoverage.UNKNOWN
        for name in conds.registry:
            with pytest.raises(UnknownCategoryInForecast) as exc:
                conds.registry[name](_mid(0), "Partly Sunny")
            assert exc.value.short_forecast == "Blustery"

    def test_source_error_propagates(self):
        source = MagicMock()
        source.forecasts.side_effect = RuntimeError("down")
        conds = CloudCoverConditions(source, TEST_COORDINATE, UTC)
        with pytest.raises(RuntimeError):
            conds.equal(_mid(0), "Sunny")


class TestWhen:
    def test_none_uses_now(self):
        now = datetime.now(UTC)
        start = now - timedelta(hours=1)
        source = StaticSource(make_forecast(["Cloudy"], start=start))
        conds = CloudCoverConditions(source, TEST_COORDINATE, ZoneInfo("America/Chicago"))
        assert conds.equal(None, "Cloudy") is True

    def test_none_outside_forecast(self):
        source = StaticSource(make_forecast(["Cloudy"], start=datetime(2000, 1, 1, tzinfo=UTC)))
        conds = CloudCoverConditions(source, TEST_COORDINATE, UTC)
        with pytest.raises(NoForecastForTime):
            conds.equal(None, "Cloudy")

    def test_naive_interpreted_in_zone(self):
        # 12:00-00:00 UTC is 06:00-18:00 in Chicago
        tz = ZoneInfo("America/Chicago")
        conds, _ = _conditions(["Sunny", "Cloudy"], tz=tz)
        assert conds.equal(datetime(2026, 2, 10, 17, 0), "Sunny") is True
        assert conds.equal(datetime(2026, 2, 10, 19, 0), "Cloudy") is True

    def test_deadline_passed_to_source(self):
        source = MagicMock()
        source.forecasts.return_value = make_forecast(["Sunny"])
        conds = CloudCoverConditions(source, TEST_COORDINATE, UTC)
        conds.mostly_sunny(_mid(0), deadline=123.0)
        source.forecasts.assert_called_once_with(TEST_COORDINATE, deadline=123.0)


class TestWriter:
    def test_trace_written(self):
        conds, _ = _conditions(["Mostly Cloudy"])
        out = io.StringIO()
        assert conds.at_most(_mid(0), "Cloudy", writer=out) is True
        assert out.getvalue() == "at_most: forecast MOSTLY_CLOUDY <= CLOUDY: True\n"

    def test_no_writer(self):
        conds, _ = _conditions(["Sunny"])
        assert conds.equal(_mid(0), "Sunny", writer=None) is True
