"""Resolve the user's position through a pluggable locator, with a timeout."""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Protocol

from weatherboard.config.schema import CityConfig
from weatherboard.errors import GeolocationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
EARTH_RADIUS_KM = 6371.0


class Locator(Protocol):
    def locate(self) -> tuple[float, float]:
        """Return (latitude, longitude) or raise GeolocationError if denied."""
        ...


class StaticLocator:
    """Locator that always reports a fixed position."""

    def __init__(self, latitude: float, longitude: float):
        self.latitude = latitude
        self.longitude = longitude

    def locate(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


def locate(locator: Locator, timeout: float = DEFAULT_TIMEOUT) -> tuple[float, float]:
    """Run the locator, raising GeolocationError on denial, failure or timeout."""
    pool = ThreadPoolExecutor(max_workers=1)
    future = pool.submit(locator.locate)
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError as e:
        logger.warning("Geolocation timed out after %.1fs", timeout)
        raise GeolocationError(f"Location request timed out after {timeout:.0f}s") from e
    except GeolocationError:
        logger.warning("Geolocation denied or unavailable")
        raise
    except Exception as e:
        logger.exception("Geolocation failed")
        raise GeolocationError(f"Location unavailable: {e}") from e
    finally:
        # Do not block on a locator that is still waiting for permission
        pool.shutdown(wait=False)


def nearest_city(
    latitude: float, longitude: float, cities: list[CityConfig]
) -> CityConfig:
    """Return the configured city closest to the given position."""
    if not cities:
        raise GeolocationError("No cities configured")
    return min(
        cities,
        key=lambda c: haversine_km(latitude, longitude, c.latitude, c.longitude),
    )


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))
