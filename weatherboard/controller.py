"""Dashboard controller: selected city, view flags, and per-stream fetch state."""

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import asdict, dataclass, field
from datetime import tzinfo
from typing import Any

from weatherboard.config.loader import find_city
from weatherboard.config.schema import CityConfig, DashboardConfig
from weatherboard.errors import GeolocationError
from weatherboard.favorites import FavoritesStore
from weatherboard.forecast.aggregator import group_by_day, hourly_slice
from weatherboard.ingest.geolocation import Locator, locate, nearest_city
from weatherboard.ingest.weather_client import WeatherClient
from weatherboard.models.common import StreamName, StreamStatus, View, utc_now_iso
from weatherboard.models.weather import DailySummary, ForecastSample
from weatherboard.scheduler import RefreshScheduler

logger = logging.getLogger(__name__)

ERROR_MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        StreamName.CURRENT: "Failed to load weather information.",
        StreamName.FORECAST: "Failed to load the forecast.",
        StreamName.DETAILED: "Failed to load weather information.",
        "location": "Could not determine your location.",
    },
    "ko": {
        StreamName.CURRENT: "날씨 정보를 불러오는데 실패했습니다.",
        StreamName.FORECAST: "예보 정보를 불러오는데 실패했습니다.",
        StreamName.DETAILED: "날씨 정보를 불러오는데 실패했습니다.",
        "location": "위치 정보를 가져올 수 없습니다.",
    },
}

ChangeListener = Callable[[str], None]


@dataclass(frozen=True)
class ForecastPanel:
    samples: list[ForecastSample]
    daily: list[DailySummary]
    hourly: list[ForecastSample]


@dataclass
class StreamState:
    status: StreamStatus = StreamStatus.IDLE
    data: Any = None
    error: str | None = None
    city: str | None = None
    updated_at: str | None = None


@dataclass
class DashboardState:
    selected_city: CityConfig
    view: View = View.CURRENT
    dropdown_open: bool = False
    show_favorites: bool = False
    location_error: str | None = None
    streams: dict[StreamName, StreamState] = field(
        default_factory=lambda: {name: StreamState() for name in StreamName}
    )


class DashboardController:
    """Owns DashboardState and drives the weather client.

    Fetches run on a thread pool. Each stream keeps a generation counter; a
    response is applied only if no newer request for that stream was issued
    since, so a slow answer for a previously selected city never overwrites the
    current one.
    """

    def __init__(
        self,
        config: DashboardConfig,
        client: WeatherClient,
        favorites: FavoritesStore,
        tz: tzinfo | None = None,
    ):
        if not config.cities:
            raise ValueError("At least one city must be configured")
        self.config = config
        self.client = client
        self.favorites = favorites
        self.tz = tz
        self.language = config.language.value
        self.state = DashboardState(selected_city=config.cities[0])
        self._lock = threading.RLock()
        self._generations: dict[StreamName, int] = {name: 0 for name in StreamName}
        self._listeners: list[ChangeListener] = []
        self._executor = ThreadPoolExecutor(
            max_workers=config.refresh.max_workers, thread_name_prefix="fetch"
        )
        self._scheduler: RefreshScheduler | None = None
        self._unsubscribe_favorites = favorites.subscribe(self._on_favorites_changed)

    # --- Lifecycle ---

    @property
    def mounted(self) -> bool:
        return self._scheduler is not None

    def mount(self, initial_fetch: bool = True) -> None:
        """Start the refresh timers and optionally load the selected city."""
        with self._lock:
            if self._scheduler is not None:
                return
            scheduler = RefreshScheduler()
            scheduler.add(
                StreamName.CURRENT,
                self.config.refresh.current_interval_seconds,
                self.refresh_current,
            )
            scheduler.add(
                StreamName.FORECAST,
                self.config.refresh.forecast_interval_seconds,
                self.refresh_forecast,
            )
            self._scheduler = scheduler
        scheduler.start()
        logger.info("Dashboard mounted on %s", self.state.selected_city.name)
        if initial_fetch:
            self.refresh_all()

    def unmount(self) -> None:
        """Cancel both refresh timers together."""
        with self._lock:
            scheduler, self._scheduler = self._scheduler, None
        if scheduler is not None:
            scheduler.stop()
            logger.info("Dashboard unmounted")

    def close(self) -> None:
        self.unmount()
        self._unsubscribe_favorites()
        self._executor.shutdown(wait=True)

    def add_listener(self, listener: ChangeListener) -> None:
        """Register a callback invoked with the name of whatever changed."""
        self._listeners.append(listener)

    # --- User actions ---

    def select_city(self, name: str, wait_for_results: bool = True) -> list[Future]:
        """Switch the selected city and refresh its panels."""
        city = self._lookup_city(name)
        with self._lock:
            self.state.selected_city = city
            self.state.dropdown_open = False
        logger.info("Selected city %s", city.name)
        self._notify("selection")
        return self.refresh_all(wait_for_results=wait_for_results)

    def toggle_dropdown(self) -> bool:
        with self._lock:
            self.state.dropdown_open = not self.state.dropdown_open
            return self.state.dropdown_open

    def toggle_favorites_view(self) -> bool:
        with self._lock:
            self.state.show_favorites = not self.state.show_favorites
            shown = self.state.show_favorites
        self._notify("view")
        return shown

    def set_view(self, view: View | str) -> View:
        view = View(view)
        with self._lock:
            self.state.view = view
        self._notify("view")
        if view == View.DETAILED and self._needs_detailed():
            self._executor.submit(self.refresh_detailed)
        return view

    def toggle_favorite(self, name: str | None = None) -> bool:
        """Toggle favorite membership of a city (the selected one by default)."""
        city = self._lookup_city(name) if name else self.state.selected_city
        return self.favorites.toggle(city)

    def is_favorite(self, name: str | None = None) -> bool:
        return self.favorites.contains(name or self.state.selected_city.name)

    def display_cities(self) -> list[CityConfig]:
        """Cities offered by the selector: favorites when that view is on."""
        if self.state.show_favorites:
            return self.favorites.cities()
        return list(self.config.cities)

    def panel_view(self) -> View:
        """The view the detail panel shows.

        The favorites view shows details for a selected favorite city.
        """
        favorite = self.is_favorite()
        with self._lock:
            if self.state.view == View.DETAILED:
                return View.DETAILED
            if self.state.show_favorites and favorite:
                return View.DETAILED
            return View.CURRENT

    def use_current_location(self, locator: Locator) -> CityConfig | None:
        """Select the configured city nearest to the user's position."""
        try:
            lat, lon = locate(locator, self.config.refresh.geolocation_timeout_seconds)
            city = nearest_city(lat, lon, list(self.config.cities))
        except GeolocationError as e:
            logger.warning("Could not use current location: %s", e)
            with self._lock:
                self.state.location_error = self._message("location")
            self._notify("location")
            return None
        with self._lock:
            self.state.location_error = None
        self.select_city(city.name)
        return city

    # --- Fetching ---

    def refresh_all(self, wait_for_results: bool = True) -> list[Future]:
        """Refresh current and forecast concurrently, plus details when shown."""
        futures = [
            self._executor.submit(self.refresh_current),
            self._executor.submit(self.refresh_forecast),
        ]
        if self.panel_view() == View.DETAILED:
            futures.append(self._executor.submit(self.refresh_detailed))
        if wait_for_results:
            wait(futures)
        return futures

    def refresh_current(self) -> StreamState:
        return self._refresh(
            StreamName.CURRENT,
            lambda city: self.client.fetch_current(city.latitude, city.longitude),
        )

    def refresh_forecast(self) -> StreamState:
        return self._refresh(StreamName.FORECAST, self._load_forecast)

    def refresh_detailed(self) -> StreamState:
        return self._refresh(
            StreamName.DETAILED,
            lambda city: self.client.fetch_detailed(city.latitude, city.longitude),
        )

    def stream(self, name: StreamName | str) -> StreamState:
        with self._lock:
            s = self.state.streams[StreamName(name)]
            return StreamState(s.status, s.data, s.error, s.city, s.updated_at)

    def snapshot(self) -> dict:
        """Plain-data view of the dashboard state."""
        panel_view = self.panel_view()
        favorite = self.is_favorite()
        with self._lock:
            streams = {
                name.value: {
                    "status": s.status.value,
                    "city": s.city,
                    "error": s.error,
                    "updated_at": s.updated_at,
                    "data": _plain(s.data),
                }
                for name, s in self.state.streams.items()
            }
            return {
                "selected_city": self.state.selected_city.model_dump(),
                "view": self.state.view.value,
                "panel_view": panel_view.value,
                "dropdown_open": self.state.dropdown_open,
                "show_favorites": self.state.show_favorites,
                "is_favorite": favorite,
                "location_error": self.state.location_error,
                "mounted": self.mounted,
                "streams": streams,
            }

    def _load_forecast(self, city: CityConfig) -> ForecastPanel:
        samples = self.client.fetch_forecast(city.latitude, city.longitude)
        return ForecastPanel(
            samples=samples,
            daily=group_by_day(samples, self.tz),
            hourly=hourly_slice(samples),
        )

    def _refresh(
        self, name: StreamName, fetch: Callable[[CityConfig], Any]
    ) -> StreamState:
        with self._lock:
            self._generations[name] += 1
            generation = self._generations[name]
            city = self.state.selected_city
            stream = self.state.streams[name]
            if stream.city != city.name:
                stream.data = None
            stream.status = StreamStatus.LOADING
            stream.error = None
            stream.city = city.name
        self._notify(name)

        try:
            data = fetch(city)
        except Exception:
            logger.exception("Failed to fetch %s for %s", name.value, city.name)
            self._apply(name, generation, city, error=self._message(name))
        else:
            self._apply(name, generation, city, data=data)
        return self.stream(name)

    def _apply(
        self,
        name: StreamName,
        generation: int,
        city: CityConfig,
        data: Any = None,
        error: str | None = None,
    ) -> None:
        with self._lock:
            if generation != self._generations[name]:
                logger.info(
                    "Discarding stale %s response for %s", name.value, city.name
                )
                return
            stream = self.state.streams[name]
            if error is not None:
                stream.status = StreamStatus.FAILED
                stream.data = None
                stream.error = error
            else:
                stream.status = StreamStatus.READY
                stream.data = data
                stream.error = None
            stream.city = city.name
            stream.updated_at = utc_now_iso()
        self._notify(name)

    def _needs_detailed(self) -> bool:
        s = self.stream(StreamName.DETAILED)
        if s.status in (StreamStatus.IDLE, StreamStatus.FAILED):
            return True
        return s.city != self.state.selected_city.name

    def _on_favorites_changed(self, cities: list[CityConfig]) -> None:
        logger.info("Favorites changed: %d cities", len(cities))
        self._notify("favorites")
        if self.mounted and self.panel_view() == View.DETAILED and self._needs_detailed():
            self._executor.submit(self.refresh_detailed)

    def _lookup_city(self, name: str) -> CityConfig:
        for city in self.favorites.cities():
            if city.name == name:
                return city
        return find_city(self.config, name)

    def _message(self, key: str) -> str:
        table = ERROR_MESSAGES.get(self.language, ERROR_MESSAGES["en"])
        return table[key]

    def _notify(self, what: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(str(what))
            except Exception:
                logger.exception("Dashboard listener failed")


def _plain(data: Any) -> Any:
    if data is None:
        return None
    if isinstance(data, list):
        return [_plain(d) for d in data]
    return asdict(data)
