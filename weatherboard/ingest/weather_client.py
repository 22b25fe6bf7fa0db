"""OpenWeatherMap API client: current, forecast, air quality and UV index."""

import logging
from concurrent.futures import ThreadPoolExecutor

import httpx

from weatherboard.errors import NetworkError, ProviderError
from weatherboard.models.weather import (
    AirQuality,
    CurrentWeather,
    DetailedWeather,
    ForecastSample,
    UVIndex,
    WeatherCondition,
)

logger = logging.getLogger(__name__)

OPENWEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"
DEFAULT_USER_AGENT = "weatherboard/0.1.0"


class WeatherClient:
    """Stateless reads against the provider.

    No retries and no caching: every failure propagates to the caller as
    NetworkError or ProviderError.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = OPENWEATHER_BASE_URL,
        units: str = "metric",
        language: str = "kr",
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.units = units
        self.language = language
        self.timeout = timeout
        self.user_agent = user_agent

    def fetch_current(self, lat: float, lon: float) -> CurrentWeather:
        raw = self._get("/weather", lat, lon, localized=True)
        return parse_current(raw)

    def fetch_forecast(self, lat: float, lon: float) -> list[ForecastSample]:
        """Fetch the 5-day / 3-hour forecast as a chronological sample list."""
        raw = self._get("/forecast", lat, lon, localized=True)
        return parse_forecast(raw)

    def fetch_air_quality(self, lat: float, lon: float) -> AirQuality:
        raw = self._get("/air_pollution", lat, lon)
        return parse_air_quality(raw)

    def fetch_uv_index(self, lat: float, lon: float) -> UVIndex:
        raw = self._get("/uvi", lat, lon)
        return parse_uv_index(raw)

    def fetch_detailed(self, lat: float, lon: float) -> DetailedWeather:
        """Fetch current conditions, air quality and UV index concurrently.

        All-or-nothing: if any of the three calls fails, the first failure
        (in submission order) is raised.
        """
        with ThreadPoolExecutor(max_workers=3) as pool:
            current = pool.submit(self.fetch_current, lat, lon)
            air = pool.submit(self.fetch_air_quality, lat, lon)
            uvi = pool.submit(self.fetch_uv_index, lat, lon)
            return DetailedWeather(
                current=current.result(),
                air_quality=air.result(),
                uv_index=uvi.result(),
            )

    def _get(self, path: str, lat: float, lon: float, localized: bool = False) -> dict:
        url = f"{self.base_url}{path}"
        params: dict[str, str | float] = {"lat": lat, "lon": lon, "appid": self.api_key}
        if localized:
            params["units"] = self.units
            params["lang"] = self.language
        headers = {"User-Agent": self.user_agent}

        try:
            resp = httpx.get(url, params=params, headers=headers, timeout=self.timeout)
        except httpx.RequestError as e:
            logger.error("Weather provider request failed for %s: %s", path, e)
            raise NetworkError(f"Request to {path} failed: {e}") from e

        if resp.status_code >= 400:
            snippet = (resp.text or "")[:300]
            logger.error(
                "Weather provider %d for %s (lat=%s lon=%s): %s",
                resp.status_code, path, lat, lon, snippet,
            )
            raise ProviderError(
                f"HTTP {resp.status_code} from {path}: {snippet}",
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as e:
            logger.error("Invalid JSON from weather provider for %s", path)
            raise ProviderError(f"Invalid JSON from {path}: {e}") from e
        if not isinstance(data, dict):
            raise ProviderError(f"Unexpected payload from {path}: {type(data).__name__}")
        return data


def parse_current(raw: dict) -> CurrentWeather:
    """Map a /weather response into CurrentWeather."""
    try:
        main = raw["main"]
        return CurrentWeather(
            temp=float(main["temp"]),
            feels_like=float(main["feels_like"]),
            humidity=int(main["humidity"]),
            wind_speed=float(raw.get("wind", {}).get("speed", 0.0)),
            pressure=int(main["pressure"]),
            condition=_parse_condition(raw),
            sunrise=int(raw["sys"]["sunrise"]),
            sunset=int(raw["sys"]["sunset"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ProviderError(f"Unexpected current weather shape: {e}") from e


def parse_forecast(raw: dict) -> list[ForecastSample]:
    """Map a /forecast response into a list of ForecastSample, preserving order."""
    try:
        items = raw["list"]
        samples = []
        for item in items:
            main = item["main"]
            samples.append(
                ForecastSample(
                    timestamp=int(item["dt"]),
                    temp=float(main["temp"]),
                    temp_min=float(main["temp_min"]),
                    temp_max=float(main["temp_max"]),
                    humidity=int(main["humidity"]),
                    weather=_parse_condition(item),
                    time_text=item.get("dt_txt", ""),
                )
            )
        return samples
    except (KeyError, TypeError, ValueError) as e:
        raise ProviderError(f"Unexpected forecast shape: {e}") from e


def parse_air_quality(raw: dict) -> AirQuality:
    """Map an /air_pollution response (first list entry) into AirQuality."""
    try:
        entry = raw["list"][0]
        components = entry.get("components", {})
        return AirQuality(
            aqi=int(entry["main"]["aqi"]),
            pm2_5=float(components.get("pm2_5", 0.0)),
            pm10=float(components.get("pm10", 0.0)),
            co=float(components.get("co", 0.0)),
            no2=float(components.get("no2", 0.0)),
            o3=float(components.get("o3", 0.0)),
        )
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise ProviderError(f"Unexpected air quality shape: {e}") from e


def parse_uv_index(raw: dict) -> UVIndex:
    try:
        return UVIndex(value=float(raw["value"]))
    except (KeyError, TypeError, ValueError) as e:
        raise ProviderError(f"Unexpected UV index shape: {e}") from e


def _parse_condition(raw: dict) -> WeatherCondition:
    weather = raw.get("weather") or [{}]
    first = weather[0]
    return WeatherCondition(
        main=first.get("main", ""),
        description=first.get("description", ""),
        icon=first.get("icon", ""),
    )
