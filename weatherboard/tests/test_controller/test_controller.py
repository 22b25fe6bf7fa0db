"""Tests for the dashboard controller state machine."""

import dataclasses
import threading
from datetime import UTC
from unittest.mock import MagicMock

import pytest

from weatherboard.config.schema import DashboardConfig, Language
from weatherboard.controller import DashboardController, ForecastPanel
from weatherboard.errors import (
    GeolocationError,
    NetworkError,
    ProviderError,
    UnknownCityError,
)
from weatherboard.favorites import FavoritesStore, MemoryFavoritesBackend
from weatherboard.ingest.geolocation import StaticLocator
from weatherboard.ingest.weather_client import WeatherClient
from weatherboard.models.common import StreamName, StreamStatus, View
from weatherboard.models.weather import DetailedWeather


@pytest.fixture
def client(current_weather, forecast_samples, air_quality, uv_index):
    mock = MagicMock(spec=WeatherClient)
    mock.fetch_current.return_value = current_weather
    mock.fetch_forecast.return_value = forecast_samples
    mock.fetch_detailed.return_value = DetailedWeather(
        current=current_weather, air_quality=air_quality, uv_index=uv_index
    )
    return mock


@pytest.fixture
def favorites():
    return FavoritesStore(MemoryFavoritesBackend())


@pytest.fixture
def controller(default_config: DashboardConfig, client, favorites):
    ctrl = DashboardController(default_config, client, favorites, tz=UTC)
    yield ctrl
    ctrl.close()


class TestInitialState:
    def test_defaults(self, controller: DashboardController):
        assert controller.state.selected_city.name == "Seoul"
        assert controller.state.view == View.CURRENT
        assert not controller.state.dropdown_open
        assert not controller.mounted
        for name in StreamName:
            assert controller.stream(name).status == StreamStatus.IDLE

    def test_requires_cities(self, default_config, client, favorites):
        with pytest.raises(ValueError):
            DashboardController(default_config.model_copy(update={"cities": []}), client, favorites)


class TestSelectCity:
    def test_loads_current_and_forecast(self, controller: DashboardController, client):
        controller.select_city("Busan")

        client.fetch_current.assert_called_once_with(35.1796, 129.0756)
        client.fetch_forecast.assert_called_once_with(35.1796, 129.0756)
        client.fetch_detailed.assert_not_called()

        current = controller.stream(StreamName.CURRENT)
        assert current.status == StreamStatus.READY
        assert current.city == "Busan"
        assert current.updated_at is not None

        forecast = controller.stream(StreamName.FORECAST)
        assert isinstance(forecast.data, ForecastPanel)
        assert [d.date for d in forecast.data.daily] == ["2026-02-11", "2026-02-12"]
        assert forecast.data.daily[0].temp == 6.2
        assert len(forecast.data.hourly) == 5

    def test_closes_dropdown(self, controller: DashboardController):
        assert controller.toggle_dropdown() is True
        controller.select_city("Daegu")
        assert controller.state.dropdown_open is False

    def test_unknown_city(self, controller: DashboardController, client):
        with pytest.raises(UnknownCityError):
            controller.select_city("Atlantis")
        client.fetch_current.assert_not_called()
        assert controller.state.selected_city.name == "Seoul"

    def test_detailed_view_also_loads_details(self, controller: DashboardController, client):
        controller.state.view = View.DETAILED
        controller.select_city("Ulsan")
        client.fetch_detailed.assert_called_once_with(35.5384, 129.3114)
        assert controller.stream(StreamName.DETAILED).status == StreamStatus.READY


class TestFailures:
    def test_forecast_fails_independently(self, controller: DashboardController, client):
        client.fetch_forecast.side_effect = ProviderError("HTTP 500", status_code=500)

        controller.select_city("Seoul")

        assert controller.stream(StreamName.CURRENT).status == StreamStatus.READY
        forecast = controller.stream(StreamName.FORECAST)
        assert forecast.status == StreamStatus.FAILED
        assert forecast.error == "Failed to load the forecast."

    def test_current_fails_independently(self, controller: DashboardController, client):
        client.fetch_current.side_effect = NetworkError("connection refused")

        controller.select_city("Seoul")

        assert controller.stream(StreamName.CURRENT).status == StreamStatus.FAILED
        assert controller.stream(StreamName.FORECAST).status == StreamStatus.READY

    def test_no_retry_after_failure(self, controller: DashboardController, client):
        client.fetch_current.side_effect = NetworkError("down")
        controller.refresh_current()
        assert client.fetch_current.call_count == 1

    def test_success_clears_previous_error(self, controller: DashboardController, client, current_weather):
        client.fetch_current.side_effect = NetworkError("down")
        controller.refresh_current()
        client.fetch_current.side_effect = None
        client.fetch_current.return_value = current_weather

        state = controller.refresh_current()
        assert state.status == StreamStatus.READY
        assert state.error is None

    def test_failure_for_new_city_drops_previous_data(
        self, controller: DashboardController, client
    ):
        controller.select_city("Seoul")
        client.fetch_current.side_effect = NetworkError("down")

        controller.select_city("Busan")

        current = controller.stream(StreamName.CURRENT)
        assert current.status == StreamStatus.FAILED
        assert current.city == "Busan"
        assert current.data is None

    def test_loading_new_city_clears_data(self, controller: DashboardController):
        controller.select_city("Seoul")
        loading = []

        def _capture(what):
            s = controller.stream(StreamName.CURRENT)
            if what == "current" and s.status == StreamStatus.LOADING:
                loading.append(s)

        controller.add_listener(_capture)
        controller.select_city("Busan")

        (state,) = loading
        assert state.city == "Busan"
        assert state.data is None
        assert controller.stream(StreamName.CURRENT).data is not None

    def test_same_city_refresh_keeps_data_while_loading(self, controller: DashboardController):
        controller.refresh_current()
        loading = []

        def _capture(what):
            s = controller.stream(StreamName.CURRENT)
            if s.status == StreamStatus.LOADING:
                loading.append(s)

        controller.add_listener(_capture)
        controller.refresh_current()

        assert loading[0].data is not None

    def test_korean_messages(self, default_config, client, favorites):
        config = default_config.model_copy(update={"language": Language.KO})
        ctrl = DashboardController(config, client, favorites)
        client.fetch_current.side_effect = NetworkError("down")
        try:
            assert ctrl.refresh_current().error == "날씨 정보를 불러오는데 실패했습니다."
        finally:
            ctrl.close()


class TestStaleResponses:
    def test_slow_response_for_previous_city_is_discarded(
        self, controller: DashboardController, client, current_weather
    ):
        busan_weather = dataclasses.replace(current_weather, temp=20.0)
        started = threading.Event()
        release = threading.Event()

        def _fetch_current(lat, lon):
            if lat == 37.5665:  # Seoul
                started.set()
                release.wait(5)
                return current_weather
            return busan_weather

        client.fetch_current.side_effect = _fetch_current

        slow = controller._executor.submit(controller.refresh_current)
        assert started.wait(5)
        controller.select_city("Busan")
        release.set()
        slow.result(5)

        current = controller.stream(StreamName.CURRENT)
        assert current.city == "Busan"
        assert current.data.temp == 20.0


class TestViews:
    def test_toggle_favorites_view_changes_city_list(self, controller: DashboardController):
        assert len(controller.display_cities()) == 10
        controller.toggle_favorite("Busan")
        assert controller.toggle_favorites_view() is True
        assert [c.name for c in controller.display_cities()] == ["Busan"]

    def test_set_view_detailed_fetches_details(self, controller: DashboardController, client):
        controller.set_view("detailed")
        controller.close()
        client.fetch_detailed.assert_called_once()
        assert controller.stream(StreamName.DETAILED).status == StreamStatus.READY

    def test_failed_details_refetched_when_shown_again(
        self, controller: DashboardController, client
    ):
        client.fetch_detailed.side_effect = ProviderError("HTTP 500", status_code=500)
        controller.state.view = View.DETAILED
        assert controller.refresh_detailed().status == StreamStatus.FAILED

        controller.set_view("current")
        client.fetch_detailed.side_effect = None
        controller.set_view("detailed")
        controller.close()

        assert client.fetch_detailed.call_count == 2
        assert controller.stream(StreamName.DETAILED).status == StreamStatus.READY

    def test_set_view_invalid(self, controller: DashboardController):
        with pytest.raises(ValueError):
            controller.set_view("radar")

    def test_favorites_view_shows_details_for_favorite(self, controller: DashboardController):
        assert controller.panel_view() == View.CURRENT
        controller.toggle_favorites_view()
        assert controller.panel_view() == View.CURRENT
        controller.toggle_favorite()
        assert controller.panel_view() == View.DETAILED


class TestFavorites:
    def test_toggle_selected_city(self, controller: DashboardController, favorites):
        assert controller.toggle_favorite() is True
        assert favorites.contains("Seoul")
        assert controller.is_favorite()
        assert controller.toggle_favorite() is False
        assert not controller.is_favorite()

    def test_toggle_unknown_city(self, controller: DashboardController):
        with pytest.raises(UnknownCityError):
            controller.toggle_favorite("Atlantis")

    def test_listener_notified(self, controller: DashboardController):
        seen = []
        controller.add_listener(seen.append)
        controller.toggle_favorite("Incheon")
        assert "favorites" in seen


class TestLifecycle:
    def test_mount_starts_timers_and_fetches(self, controller: DashboardController, client):
        controller.mount()
        try:
            assert controller.mounted
            tasks = controller._scheduler.tasks
            assert tasks["current"].interval == 600
            assert tasks["forecast"].interval == 1800
            assert all(t.running for t in tasks.values())
            client.fetch_current.assert_called_once()
            client.fetch_forecast.assert_called_once()
        finally:
            controller.unmount()

    def test_unmount_cancels_both_timers(self, controller: DashboardController):
        controller.mount(initial_fetch=False)
        scheduler = controller._scheduler
        controller.unmount()
        assert not controller.mounted
        assert not scheduler.running

    def test_mount_twice_keeps_one_scheduler(self, controller: DashboardController):
        controller.mount(initial_fetch=False)
        first = controller._scheduler
        controller.mount(initial_fetch=False)
        assert controller._scheduler is first
        controller.unmount()

    def test_unmount_when_not_mounted(self, controller: DashboardController):
        controller.unmount()
        assert not controller.mounted


class TestListeners:
    def test_stream_transitions_notified(self, controller: DashboardController):
        seen = []
        controller.add_listener(seen.append)
        controller.refresh_current()
        # loading, then ready
        assert seen == ["current", "current"]

    def test_failing_listener_is_isolated(self, controller: DashboardController):
        def _boom(what):
            raise RuntimeError("render failed")

        controller.add_listener(_boom)
        assert controller.refresh_current().status == StreamStatus.READY


class TestCurrentLocation:
    def test_selects_nearest_city(self, controller: DashboardController):
        city = controller.use_current_location(StaticLocator(35.54, 129.31))
        assert city is not None
        assert city.name == "Ulsan"
        assert controller.state.selected_city.name == "Ulsan"
        assert controller.state.location_error is None

    def test_denied_sets_message(self, controller: DashboardController):
        class Denied:
            def locate(self):
                raise GeolocationError("denied")

        assert controller.use_current_location(Denied()) is None
        assert controller.state.location_error == "Could not determine your location."
        assert controller.state.selected_city.name == "Seoul"


class TestSnapshot:
    def test_plain_data(self, controller: DashboardController):
        controller.select_city("Seoul")
        snap = controller.snapshot()
        assert snap["selected_city"]["name"] == "Seoul"
        assert snap["streams"]["current"]["status"] == "ready"
        assert snap["streams"]["current"]["data"]["condition"]["icon"] == "01d"
        assert snap["streams"]["forecast"]["data"]["daily"][1]["temp_min"] == -1.8
        assert snap["streams"]["detailed"]["data"] is None
        assert snap["panel_view"] == "current"
