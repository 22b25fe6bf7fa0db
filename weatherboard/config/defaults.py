"""Default city table: ten major Korean cities."""

from weatherboard.config.schema import CityConfig

DEFAULT_CITIES: list[CityConfig] = [
    CityConfig(name="Seoul", latitude=37.5665, longitude=126.978),
    CityConfig(name="Busan", latitude=35.1796, longitude=129.0756),
    CityConfig(name="Incheon", latitude=37.4563, longitude=126.7052),
    CityConfig(name="Daegu", latitude=35.8714, longitude=128.6014),
    CityConfig(name="Daejeon", latitude=36.3504, longitude=127.3845),
    CityConfig(name="Gwangju", latitude=35.1595, longitude=126.8526),
    CityConfig(name="Suwon", latitude=37.2636, longitude=127.0286),
    CityConfig(name="Ulsan", latitude=35.5384, longitude=129.3114),
    CityConfig(name="Changwon", latitude=35.2322, longitude=128.6811),
    CityConfig(name="Goyang", latitude=37.6583, longitude=126.832),
]
