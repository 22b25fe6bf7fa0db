"""Total lookup tables: AQI / UV index descriptions and weather icon symbols."""

AQI_DESCRIPTIONS: dict[str, dict[int, str]] = {
    "en": {
        1: "very good",
        2: "good",
        3: "moderate",
        4: "poor",
        5: "very poor",
    },
    "ko": {
        1: "매우 좋음",
        2: "좋음",
        3: "보통",
        4: "나쁨",
        5: "매우 나쁨",
    },
}

AQI_UNKNOWN = {"en": "unknown", "ko": "정보 없음"}

# (upper bound inclusive, label) checked in order; above the last bound is extreme
UVI_BANDS: dict[str, list[tuple[float, str]]] = {
    "en": [(2, "low"), (5, "moderate"), (7, "high"), (10, "very high")],
    "ko": [(2, "낮음"), (5, "보통"), (7, "높음"), (10, "매우 높음")],
}

UVI_EXTREME = {"en": "extreme", "ko": "위험"}

ICON_SYMBOLS: dict[str, str] = {
    "01d": "☀️",
    "01n": "🌙",
    "02d": "🌤️",
    "02n": "☁️",
    "03d": "☁️",
    "03n": "☁️",
    "04d": "☁️",
    "04n": "☁️",
    "09d": "🌧️",
    "09n": "🌧️",
    "10d": "🌦️",
    "10n": "🌧️",
    "11d": "⛈️",
    "11n": "⛈️",
    "13d": "🌨️",
    "13n": "🌨️",
    "50d": "🌫️",
    "50n": "🌫️",
}

DEFAULT_ICON_SYMBOL = "🌡️"

ICON_URL_TEMPLATE = "https://openweathermap.org/img/wn/{code}@2x.png"


def describe_aqi(aqi: int, language: str = "en") -> str:
    """Describe an AQI category. Anything outside 1..5 is unknown."""
    table = AQI_DESCRIPTIONS.get(language, AQI_DESCRIPTIONS["en"])
    return table.get(aqi, AQI_UNKNOWN.get(language, AQI_UNKNOWN["en"]))


def describe_uvi(uvi: float, language: str = "en") -> str:
    """Describe a UV index value; band boundaries belong to the lower band."""
    bands = UVI_BANDS.get(language, UVI_BANDS["en"])
    for upper, label in bands:
        if uvi <= upper:
            return label
    return UVI_EXTREME.get(language, UVI_EXTREME["en"])


def icon_symbol(code: str) -> str:
    return ICON_SYMBOLS.get(code, DEFAULT_ICON_SYMBOL)


def icon_url(code: str) -> str:
    return ICON_URL_TEMPLATE.format(code=code)
