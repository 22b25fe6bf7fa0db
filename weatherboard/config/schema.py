"""Pydantic v2 configuration schema with strict validation."""

from enum import StrEnum

from pydantic import BaseModel, Field


class Language(StrEnum):
    EN = "en"
    KO = "ko"


class CityConfig(BaseModel):
    model_config = {"extra": "forbid", "frozen": True}

    name: str
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)

    @property
    def coordinates(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


class ProviderConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "https://api.openweathermap.org/data/2.5"
    api_key: str = ""
    units: str = "metric"
    # Provider locale code; OpenWeatherMap uses "kr" for Korean
    language: str = "kr"
    timeout_seconds: float = Field(default=10.0, gt=0.0)


class RefreshConfig(BaseModel):
    model_config = {"extra": "forbid"}

    current_interval_seconds: int = Field(default=600, ge=1)
    forecast_interval_seconds: int = Field(default=1800, ge=1)
    geolocation_timeout_seconds: float = Field(default=10.0, gt=0.0)
    max_workers: int = Field(default=4, ge=1)


class StorageConfig(BaseModel):
    model_config = {"extra": "forbid"}

    db_path: str = "data/weatherboard.db"
    favorites_owner: str = "default"


class DashboardConfig(BaseModel):
    model_config = {"extra": "forbid"}

    provider: ProviderConfig = ProviderConfig()
    refresh: RefreshConfig = RefreshConfig()
    storage: StorageConfig = StorageConfig()
    # Language of user-facing messages and descriptions
    language: Language = Language.KO
    cities: list[CityConfig] = []
