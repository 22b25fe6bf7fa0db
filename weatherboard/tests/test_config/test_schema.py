"""Tests for config schema validation."""

import pytest
from pydantic import ValidationError

from weatherboard.config.schema import (
    CityConfig,
    DashboardConfig,
    Language,
    ProviderConfig,
    RefreshConfig,
)


class TestDashboardConfig:
    def test_defaults(self):
        config = DashboardConfig()
        assert config.provider.units == "metric"
        assert config.provider.language == "kr"
        assert config.language == Language.KO
        assert config.storage.favorites_owner == "default"

    def test_extra_fields_rejected(self):
        with pytest.raises(ValidationError, match="Extra inputs are not permitted"):
            DashboardConfig(unknown_field="bad")

    def test_nested_extra_fields_rejected(self):
        with pytest.raises(ValidationError, match="Extra inputs are not permitted"):
            ProviderConfig(api_key="k", bogus=True)


class TestRefreshConfig:
    def test_default_intervals(self):
        config = RefreshConfig()
        assert config.current_interval_seconds == 600
        assert config.forecast_interval_seconds == 1800
        assert config.geolocation_timeout_seconds == 10.0

    def test_interval_must_be_positive(self):
        with pytest.raises(ValidationError):
            RefreshConfig(current_interval_seconds=0)


class TestCityConfig:
    def test_coordinates(self):
        city = CityConfig(name="Seoul", latitude=37.5665, longitude=126.978)
        assert city.coordinates == (37.5665, 126.978)

    def test_latitude_bounds(self):
        with pytest.raises(ValidationError):
            CityConfig(name="Nowhere", latitude=91.0, longitude=0.0)

    def test_immutable(self):
        city = CityConfig(name="Seoul", latitude=37.5665, longitude=126.978)
        with pytest.raises(ValidationError):
            city.name = "Busan"
