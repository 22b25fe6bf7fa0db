"""Weather dashboard HTTP API: a FastAPI backend over the dashboard controller."""

import logging
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from weatherboard import bootstrap
from weatherboard.config.loader import find_city, load_config
from weatherboard.config.schema import DashboardConfig
from weatherboard.controller import DashboardController
from weatherboard.errors import NetworkError, ProviderError, UnknownCityError
from weatherboard.forecast.aggregator import group_by_day, hourly_slice
from weatherboard.ingest.descriptions import describe_aqi, describe_uvi, icon_url
from weatherboard.models.common import View

logger = logging.getLogger(__name__)


class SelectRequest(BaseModel):
    city: str


class ViewRequest(BaseModel):
    """Partial view update; only provided fields are changed."""
    view: View | None = None
    show_favorites: bool | None = None
    dropdown_open: bool | None = None


class FavoriteRequest(BaseModel):
    city: str


def create_app(
    config: DashboardConfig | None = None,
    controller: DashboardController | None = None,
    mount: bool = True,
) -> FastAPI:
    """Build the API around a controller; the controller is mounted for the app's lifetime."""
    config = config or load_config()
    ctrl = controller or bootstrap.build_controller(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if mount:
            ctrl.mount(initial_fetch=False)
            ctrl.refresh_all(wait_for_results=False)
        try:
            yield
        finally:
            ctrl.close()

    app = FastAPI(title="Weather Dashboard", version="0.1.0", lifespan=lifespan)
    app.state.controller = ctrl
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def _city(name: str):
        try:
            return find_city(ctrl.config, name)
        except UnknownCityError as e:
            raise HTTPException(404, str(e)) from e

    def _fetch(fn, *args):
        try:
            return fn(*args)
        except (NetworkError, ProviderError) as e:
            logger.error("Upstream weather request failed: %s", e)
            raise HTTPException(502, str(e)) from e

    # ── State endpoints ─────────────────────────────────────────

    @app.get("/api/cities")
    def get_cities():
        """Cities offered by the selector, with favorite flags."""
        return [
            {**c.model_dump(), "is_favorite": ctrl.is_favorite(c.name)}
            for c in ctrl.display_cities()
        ]

    @app.get("/api/state")
    def get_state():
        return ctrl.snapshot()

    @app.post("/api/select")
    def select_city(req: SelectRequest):
        _city(req.city)
        ctrl.select_city(req.city)
        return ctrl.snapshot()

    @app.post("/api/view")
    def update_view(req: ViewRequest):
        if req.view is not None:
            ctrl.set_view(req.view)
        if req.show_favorites is not None and req.show_favorites != ctrl.state.show_favorites:
            ctrl.toggle_favorites_view()
        if req.dropdown_open is not None and req.dropdown_open != ctrl.state.dropdown_open:
            ctrl.toggle_dropdown()
        return ctrl.snapshot()

    @app.post("/api/refresh")
    def refresh():
        ctrl.refresh_all()
        return ctrl.snapshot()

    # ── Direct weather endpoints ────────────────────────────────

    @app.get("/api/weather/current")
    def get_current(city: str):
        c = _city(city)
        w = _fetch(ctrl.client.fetch_current, c.latitude, c.longitude)
        return {
            "city": c.name,
            **asdict(w),
            "icon_url": icon_url(w.condition.icon),
        }

    @app.get("/api/weather/forecast")
    def get_forecast(city: str):
        c = _city(city)
        samples = _fetch(ctrl.client.fetch_forecast, c.latitude, c.longitude)
        return {
            "city": c.name,
            "hourly": [asdict(s) for s in hourly_slice(samples)],
            "daily": [asdict(d) for d in group_by_day(samples, ctrl.tz)],
        }

    @app.get("/api/weather/detailed")
    def get_detailed(city: str):
        c = _city(city)
        d = _fetch(ctrl.client.fetch_detailed, c.latitude, c.longitude)
        return {
            "city": c.name,
            **asdict(d),
            "aqi_description": describe_aqi(d.air_quality.aqi, ctrl.language),
            "uvi_description": describe_uvi(d.uv_index.value, ctrl.language),
            "icon_url": icon_url(d.current.condition.icon),
        }

    # ── Favorites ───────────────────────────────────────────────

    @app.get("/api/favorites")
    def get_favorites():
        return [c.model_dump() for c in ctrl.favorites.cities()]

    @app.post("/api/favorites")
    def add_favorite(req: FavoriteRequest):
        ctrl.favorites.add(_city(req.city))
        return [c.model_dump() for c in ctrl.favorites.cities()]

    @app.delete("/api/favorites/{name}")
    def remove_favorite(name: str):
        ctrl.favorites.remove(name)
        return [c.model_dump() for c in ctrl.favorites.cities()]

    @app.get("/api/health")
    def get_health():
        return {
            "mounted": ctrl.mounted,
            "selected_city": ctrl.state.selected_city.name,
            "favorites": len(ctrl.favorites.cities()),
        }

    return app
