"""YAML config loader with environment overrides and runtime get/set."""

import json
import os
from pathlib import Path
from typing import Any

import yaml

from weatherboard.config.defaults import DEFAULT_CITIES
from weatherboard.config.schema import CityConfig, DashboardConfig
from weatherboard.errors import UnknownCityError

API_KEY_ENV = "OPENWEATHER_API_KEY"


def load_config(path: str | Path | None = None) -> DashboardConfig:
    """Load and validate config from a YAML file.

    A missing path yields the defaults. If no cities are specified, injects
    DEFAULT_CITIES. An empty provider API key is filled from OPENWEATHER_API_KEY.
    """
    raw: dict[str, Any] = {}
    if path is not None and Path(path).exists():
        with open(path) as f:
            raw = yaml.safe_load(f) or {}

    if "cities" not in raw or not raw["cities"]:
        raw["cities"] = [c.model_dump() for c in DEFAULT_CITIES]

    config = DashboardConfig(**raw)
    _check_unique_names(config.cities)

    if not config.provider.api_key and os.environ.get(API_KEY_ENV):
        config = config.model_copy(
            update={
                "provider": config.provider.model_copy(
                    update={"api_key": os.environ[API_KEY_ENV]}
                )
            }
        )
    return config


def find_city(config: DashboardConfig, name: str) -> CityConfig:
    """Look up a configured city by name."""
    for city in config.cities:
        if city.name == name:
            return city
    raise UnknownCityError(name)


def get_config_value(config: DashboardConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'refresh.current_interval_seconds'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if isinstance(obj, list):
            obj = obj[int(part)]
        elif hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict):
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj


def set_config_value(
    config: DashboardConfig, dotted_key: str, value: Any
) -> DashboardConfig:
    """Set a config value by dotted key path and re-validate.

    Returns a new DashboardConfig instance.
    """
    data = json.loads(config.model_dump_json())
    parts = dotted_key.split(".")
    target = data
    for part in parts[:-1]:
        target = target[part]
    old_value = target.get(parts[-1])
    if isinstance(old_value, bool) and isinstance(value, str):
        value = value.lower() in ("1", "true", "yes", "on")
    elif isinstance(old_value, int) and isinstance(value, str):
        value = int(value)
    elif isinstance(old_value, float) and isinstance(value, str):
        value = float(value)
    target[parts[-1]] = value
    return DashboardConfig(**data)


def _check_unique_names(cities: list[CityConfig]) -> None:
    seen: set[str] = set()
    for city in cities:
        if city.name in seen:
            raise ValueError(f"Duplicate city name in config: {city.name}")
        seen.add(city.name)
