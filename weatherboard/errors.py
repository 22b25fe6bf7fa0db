"""Error kinds raised by the weather client, geolocation and city lookups."""


class WeatherboardError(Exception):
    """Base class for all weatherboard errors."""


class NetworkError(WeatherboardError):
    """Transport failure talking to the weather provider."""


class ProviderError(WeatherboardError):
    """Non-success or malformed response from the weather provider."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GeolocationError(WeatherboardError):
    """Location permission denied, unavailable, or timed out."""


class UnknownCityError(WeatherboardError, KeyError):
    """City name is not in the configured table."""

    def __init__(self, name: str):
        super().__init__(f"Unknown city: {name}")
        self.name = name

    def __str__(self) -> str:
        return self.args[0]
