"""Shared test fixtures."""

import sqlite3
from pathlib import Path

import pytest
import yaml

from weatherboard.config.defaults import DEFAULT_CITIES
from weatherboard.config.schema import DashboardConfig, ProviderConfig
from weatherboard.ingest.weather_client import (
    parse_air_quality,
    parse_current,
    parse_forecast,
    parse_uv_index,
)
from weatherboard.storage.database import connect, run_migrations
from weatherboard.tests.helpers import FIXTURE_DIR, load_fixture


@pytest.fixture(autouse=True)
def _no_api_key_env(monkeypatch):
    """Keep a developer's real API key out of config tests."""
    monkeypatch.delenv("OPENWEATHER_API_KEY", raising=False)


@pytest.fixture
def db(tmp_path: Path) -> sqlite3.Connection:
    conn = connect(tmp_path / "test.db", check_same_thread=False)
    run_migrations(conn)
    yield conn
    conn.close()


@pytest.fixture
def default_config() -> DashboardConfig:
    """Default config with the built-in cities, English messages and a test key."""
    return DashboardConfig(
        provider=ProviderConfig(api_key="test-key", base_url="https://owm.test/data/2.5"),
        language="en",
        cities=DEFAULT_CITIES,
    )


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "provider": {"api_key": "yaml-key"},
        "refresh": {"current_interval_seconds": 300},
        "storage": {"db_path": str(tmp_path / "wb.db")},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURE_DIR


@pytest.fixture
def current_weather():
    return parse_current(load_fixture("owm_current_seoul.json"))


@pytest.fixture
def forecast_samples():
    return parse_forecast(load_fixture("owm_forecast_seoul.json"))


@pytest.fixture
def air_quality():
    return parse_air_quality(load_fixture("owm_air_pollution_seoul.json"))


@pytest.fixture
def uv_index():
    return parse_uv_index(load_fixture("owm_uvi_seoul.json"))
