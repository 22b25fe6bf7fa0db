"""CLI entry point for the weather dashboard."""

import argparse
import logging

import yaml

from weatherboard import bootstrap
from weatherboard.config.loader import (
    find_city,
    get_config_value,
    load_config,
    set_config_value,
)
from weatherboard.config.schema import DashboardConfig
from weatherboard.controller import ForecastPanel
from weatherboard.errors import WeatherboardError
from weatherboard.forecast.aggregator import group_by_day, hourly_slice
from weatherboard.models.common import View
from weatherboard.render.formatters import (
    format_current_text,
    format_detailed_text,
    format_forecast_text,
)
from weatherboard.storage.database import open_database

DEFAULT_CONFIG = "configs/default.yaml"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="weatherboard",
        description="Weather dashboard for major Korean cities",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument("--db", default=None, help="SQLite DB path (overrides config)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("cities", help="List configured cities")

    for name, help_text in (
        ("current", "Show current conditions"),
        ("forecast", "Show the hourly and 5-day forecast"),
        ("detailed", "Show conditions with air quality and UV index"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("city", help="City name")

    fav_p = sub.add_parser("favorites", help="Favorite cities")
    fav_sub = fav_p.add_subparsers(dest="favorites_command")
    fav_sub.add_parser("list", help="List favorites")
    add_p = fav_sub.add_parser("add", help="Add a favorite")
    add_p.add_argument("city")
    rm_p = fav_sub.add_parser("remove", help="Remove a favorite")
    rm_p.add_argument("city")

    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    set_p = config_sub.add_parser("set", help="Set a config value")
    set_p.add_argument("keyvalue", help="key=value to set")

    watch_p = sub.add_parser("watch", help="Keep the dashboard open and refresh on timers")
    watch_p.add_argument("--city", default=None, help="Initial city")
    watch_p.add_argument(
        "--detailed", action="store_true", help="Include air quality and UV index"
    )
    watch_p.add_argument(
        "--json", action="store_true", help="Print the full state as JSON on each update"
    )

    serve_p = sub.add_parser("serve", help="Run the HTTP API")
    serve_p.add_argument("--host", default="127.0.0.1")
    serve_p.add_argument("--port", type=int, default=8777)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        if args.db:
            config = set_config_value(config, "storage.db_path", args.db)
    except (ValueError, yaml.YAMLError) as e:
        # pydantic ValidationError is a ValueError
        print(f"Error: invalid config {args.config}: {e}")
        return 1

    try:
        if args.command == "cities":
            return _cmd_cities(config)
        elif args.command in ("current", "forecast", "detailed"):
            return _cmd_weather(config, args)
        elif args.command == "favorites":
            return _cmd_favorites(config, args)
        elif args.command == "config":
            return _cmd_config(config, args)
        elif args.command == "watch":
            return _cmd_watch(config, args)
        elif args.command == "serve":
            return _cmd_serve(config, args)
        else:
            parser.print_help()
            return 1
    except WeatherboardError as e:
        print(f"Error: {e}")
        return 1


def _cmd_cities(config: DashboardConfig) -> int:
    for city in config.cities:
        print(f"{city.name}: {city.latitude:.4f}, {city.longitude:.4f}")
    return 0


def _cmd_weather(config: DashboardConfig, args) -> int:
    city = find_city(config, args.city)
    client = bootstrap.build_client(config)
    lat, lon = city.coordinates
    language = config.language.value

    if args.command == "current":
        print(format_current_text(city.name, client.fetch_current(lat, lon)))
    elif args.command == "forecast":
        samples = client.fetch_forecast(lat, lon)
        panel = ForecastPanel(
            samples=samples, daily=group_by_day(samples), hourly=hourly_slice(samples)
        )
        print(f"=== {city.name} ===")
        print(format_forecast_text(panel))
    else:
        print(format_detailed_text(city.name, client.fetch_detailed(lat, lon), language))
    return 0


def _cmd_favorites(config: DashboardConfig, args) -> int:
    conn = open_database(config.storage.db_path)
    try:
        store = bootstrap.build_favorites(config, conn)
        if args.favorites_command == "add":
            store.add(find_city(config, args.city))
            print(f"Added {args.city}")
        elif args.favorites_command == "remove":
            store.remove(args.city)
            print(f"Removed {args.city}")
        elif args.favorites_command == "list":
            cities = store.cities()
            if not cities:
                print("No favorites")
            for city in cities:
                print(f"★ {city.name}")
        else:
            print("Use: favorites list | add CITY | remove CITY")
            return 1
        return 0
    finally:
        conn.close()


def _cmd_config(config: DashboardConfig, args) -> int:
    if args.config_command == "show":
        shown = config.model_copy(
            update={
                "provider": config.provider.model_copy(
                    update={"api_key": "***" if config.provider.api_key else ""}
                )
            }
        )
        print(shown.model_dump_json(indent=2))
        return 0
    elif args.config_command == "set":
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = kv.split("=", 1)
        try:
            new_config = set_config_value(config, key.strip(), value.strip())
            print(f"Set {key} = {get_config_value(new_config, key.strip())}")
            return 0
        except Exception as e:
            print(f"Error: {e}")
            return 1
    else:
        print("Use: config show | config set key=value")
        return 1


def _cmd_watch(config: DashboardConfig, args) -> int:
    from weatherboard.watcher import DashboardWatcher

    controller = bootstrap.build_controller(config)
    if args.city:
        controller.state.selected_city = find_city(config, args.city)
    if args.detailed:
        controller.state.view = View.DETAILED
    DashboardWatcher(controller, as_json=args.json).start()
    return 0


def _cmd_serve(config: DashboardConfig, args) -> int:
    import uvicorn

    from weatherboard.api import create_app

    uvicorn.run(create_app(config), host=args.host, port=args.port)
    return 0
