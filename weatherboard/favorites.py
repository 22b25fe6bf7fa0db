"""Favorites store: an ordered, persisted set of cities with change notification."""

import logging
import sqlite3
import threading
from collections.abc import Callable
from typing import Protocol

from weatherboard.config.schema import CityConfig
from weatherboard.storage import favorites_repo

logger = logging.getLogger(__name__)

FavoritesListener = Callable[[list[CityConfig]], None]


class FavoritesBackend(Protocol):
    def load(self, owner: str) -> list[CityConfig]: ...

    def save(self, owner: str, cities: list[CityConfig]) -> None: ...


class MemoryFavoritesBackend:
    """Process-local backend; state lives as long as the backend object."""

    def __init__(self) -> None:
        self._data: dict[str, list[CityConfig]] = {}

    def load(self, owner: str) -> list[CityConfig]:
        return list(self._data.get(owner, []))

    def save(self, owner: str, cities: list[CityConfig]) -> None:
        self._data[owner] = list(cities)


class SqliteFavoritesBackend:
    """Durable backend on the favorite_cities table."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def load(self, owner: str) -> list[CityConfig]:
        return favorites_repo.load_favorites(self.conn, owner)

    def save(self, owner: str, cities: list[CityConfig]) -> None:
        favorites_repo.replace_favorites(self.conn, owner, cities)


class FavoritesStore:
    """Ordered favorites for one owner, unique by city name.

    Loaded once from the backend on construction; every effective mutation is
    written back immediately and then announced to subscribers.
    """

    def __init__(self, backend: FavoritesBackend, owner: str = "default"):
        self.backend = backend
        self.owner = owner
        self._lock = threading.RLock()
        self._listeners: list[FavoritesListener] = []
        self._cities: list[CityConfig] = backend.load(owner)
        logger.info("Loaded %d favorites for %s", len(self._cities), owner)

    def cities(self) -> list[CityConfig]:
        with self._lock:
            return list(self._cities)

    def contains(self, name: str) -> bool:
        with self._lock:
            return any(c.name == name for c in self._cities)

    def add(self, city: CityConfig) -> None:
        with self._lock:
            if self.contains(city.name):
                return
            self._commit([*self._cities, city])
        self._announce()

    def remove(self, name: str) -> None:
        with self._lock:
            remaining = [c for c in self._cities if c.name != name]
            if len(remaining) == len(self._cities):
                return
            self._commit(remaining)
        self._announce()

    def toggle(self, city: CityConfig) -> bool:
        """Add the city if absent, remove it if present. Returns new membership."""
        with self._lock:
            present = self.contains(city.name)
            if present:
                self._commit([c for c in self._cities if c.name != city.name])
            else:
                self._commit([*self._cities, city])
        self._announce()
        return not present

    def subscribe(self, listener: FavoritesListener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unsubscribes it."""
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def _commit(self, cities: list[CityConfig]) -> None:
        # Persist before updating memory
        self.backend.save(self.owner, cities)
        self._cities = cities

    def _announce(self) -> None:
        # Listeners run outside the lock; they may call back into the store
        with self._lock:
            snapshot = list(self._cities)
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Favorites listener failed")
