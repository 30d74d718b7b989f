"""Shared test fixtures."""

from pathlib import Path

import pytest
import yaml

from skycover.tests.helpers import FIXTURE_DIR, TEST_COORDINATE, TEST_HOST, load_fixture


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURE_DIR


@pytest.fixture
def gridpoint_json() -> dict:
    return load_fixture("gridpoint.json")


@pytest.fixture
def forecast_json() -> dict:
    return load_fixture("forecast.json")


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML pointing at the test host."""
    data = {
        "api": {"host": TEST_HOST, "timeout_seconds": 5.0},
        "forecast": {"refresh_interval_minutes": 30},
        "location": {
            "latitude": TEST_COORDINATE.latitude,
            "longitude": TEST_COORDINATE.longitude,
            "time_zone": "America/Chicago",
        },
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
