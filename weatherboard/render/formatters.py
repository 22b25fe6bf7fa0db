"""Output formatters for dashboard panels."""

import json
from datetime import datetime, tzinfo

from weatherboard.controller import ForecastPanel
from weatherboard.ingest.descriptions import describe_aqi, describe_uvi, icon_symbol
from weatherboard.models.weather import CurrentWeather, DetailedWeather


def format_clock(timestamp: int, tz: tzinfo | None = None) -> str:
    """HH:MM of a unix timestamp in ``tz`` (host local time when None)."""
    return datetime.fromtimestamp(timestamp, tz).strftime("%H:%M")


def format_current_text(city: str, w: CurrentWeather) -> str:
    """Plain text current-conditions panel."""
    c = w.condition
    return "\n".join([
        f"=== {city} ===",
        f"{icon_symbol(c.icon)} {round(w.temp)}°C  {c.description}",
        f"Humidity: {w.humidity}% | Wind: {w.wind_speed} m/s | "
        f"Pressure: {w.pressure} hPa",
    ])


def format_detailed_text(
    city: str, d: DetailedWeather, language: str = "en", tz: tzinfo | None = None
) -> str:
    w = d.current
    lines = [
        format_current_text(city, w),
        f"Feels like: {round(w.feels_like)}°C",
        f"Air quality: {describe_aqi(d.air_quality.aqi, language)} "
        f"(AQI {d.air_quality.aqi}, PM2.5 {d.air_quality.pm2_5}, "
        f"PM10 {d.air_quality.pm10})",
        f"UV index: {describe_uvi(d.uv_index.value, language)} "
        f"({d.uv_index.value:.1f})",
        f"Sunrise: {format_clock(w.sunrise, tz)} | Sunset: {format_clock(w.sunset, tz)}",
    ]
    return "\n".join(lines)


def format_forecast_text(panel: ForecastPanel, tz: tzinfo | None = None) -> str:
    """Hourly strip followed by one line per day."""
    lines = ["Hourly:"]
    for s in panel.hourly:
        lines.append(
            f"  {format_clock(s.timestamp, tz)} {icon_symbol(s.weather.icon)} "
            f"{round(s.temp)}°C"
        )
    lines.append("Daily:")
    for d in panel.daily:
        lines.append(
            f"  {d.date} {icon_symbol(d.weather.icon)} {round(d.temp)}°C "
            f"(min {round(d.temp_min)}° / max {round(d.temp_max)}°) "
            f"{d.weather.description}"
        )
    return "\n".join(lines)


def format_state_json(snapshot: dict) -> str:
    """JSON dashboard state for programmatic consumption."""
    return json.dumps(snapshot, indent=2, ensure_ascii=False)
