"""Typed weather data shapes mapped from provider responses."""

from dataclasses import dataclass


@dataclass(frozen=True)
class WeatherCondition:
    main: str
    description: str
    icon: str


@dataclass(frozen=True)
class CurrentWeather:
    temp: float
    feels_like: float
    humidity: int
    wind_speed: float
    pressure: int
    condition: WeatherCondition
    sunrise: int  # unix seconds
    sunset: int  # unix seconds


@dataclass(frozen=True)
class ForecastSample:
    timestamp: int  # unix seconds
    temp: float
    temp_min: float
    temp_max: float
    humidity: int
    weather: WeatherCondition
    time_text: str


@dataclass(frozen=True)
class DailySummary:
    date: str  # YYYY-MM-DD (UTC)
    timestamp: int
    temp: float
    temp_min: float
    temp_max: float
    humidity: int
    weather: WeatherCondition
    time_text: str


@dataclass(frozen=True)
class AirQuality:
    aqi: int  # 1 (best) .. 5 (worst)
    pm2_5: float
    pm10: float
    co: float = 0.0
    no2: float = 0.0
    o3: float = 0.0


@dataclass(frozen=True)
class UVIndex:
    value: float


@dataclass(frozen=True)
class DetailedWeather:
    current: CurrentWeather
    air_quality: AirQuality
    uv_index: UVIndex
