"""Wiring: build the client, favorites store and controller from config."""

import sqlite3

from weatherboard.config.schema import DashboardConfig
from weatherboard.controller import DashboardController
from weatherboard.errors import WeatherboardError
from weatherboard.favorites import FavoritesStore, SqliteFavoritesBackend
from weatherboard.ingest.weather_client import WeatherClient
from weatherboard.storage.database import open_database


def build_client(config: DashboardConfig) -> WeatherClient:
    provider = config.provider
    if not provider.api_key:
        raise WeatherboardError("OPENWEATHER_API_KEY not set")
    return WeatherClient(
        api_key=provider.api_key,
        base_url=provider.base_url,
        units=provider.units,
        language=provider.language,
        timeout=provider.timeout_seconds,
    )


def build_favorites(
    config: DashboardConfig, conn: sqlite3.Connection | None = None
) -> FavoritesStore:
    if conn is None:
        # Shared with fetch threads and API workers; the store serializes access
        conn = open_database(config.storage.db_path, check_same_thread=False)
    return FavoritesStore(
        SqliteFavoritesBackend(conn), owner=config.storage.favorites_owner
    )


def build_controller(
    config: DashboardConfig, conn: sqlite3.Connection | None = None
) -> DashboardController:
    return DashboardController(
        config, build_client(config), build_favorites(config, conn)
    )
