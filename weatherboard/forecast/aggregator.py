"""Forecast aggregation: 3-hour samples into one summary per calendar day."""

from datetime import UTC, datetime, tzinfo

from weatherboard.models.weather import DailySummary, ForecastSample

REPRESENTATIVE_HOURS = range(11, 14)  # 11:00..13:00 inclusive
DEFAULT_HOURLY_COUNT = 5


def group_by_day(
    samples: list[ForecastSample], tz: tzinfo | None = None
) -> list[DailySummary]:
    """Group chronological 3-hour samples into daily summaries.

    Days are keyed by the UTC calendar date of each timestamp and emitted in
    first-seen order. The representative sample of a day is the first one whose
    hour in ``tz`` (host local time when None) is between 11 and 13; otherwise
    the day's first sample. temp_min / temp_max are extremes across the whole
    day, so temp is not guaranteed to lie between them.
    """
    buckets: dict[str, list[ForecastSample]] = {}
    for sample in samples:
        buckets.setdefault(utc_date(sample.timestamp), []).append(sample)

    return [_summarize(day, bucket, tz) for day, bucket in buckets.items()]


def hourly_slice(
    samples: list[ForecastSample], count: int = DEFAULT_HOURLY_COUNT
) -> list[ForecastSample]:
    """The next ``count`` samples, for the hourly panel."""
    return list(samples[:count])


def utc_date(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, UTC).strftime("%Y-%m-%d")


def local_hour(timestamp: int, tz: tzinfo | None = None) -> int:
    if tz is None:
        return datetime.fromtimestamp(timestamp).hour
    return datetime.fromtimestamp(timestamp, tz).hour


def _summarize(
    day: str, bucket: list[ForecastSample], tz: tzinfo | None
) -> DailySummary:
    rep = next(
        (s for s in bucket if local_hour(s.timestamp, tz) in REPRESENTATIVE_HOURS),
        bucket[0],
    )
    return DailySummary(
        date=day,
        timestamp=rep.timestamp,
        temp=rep.temp,
        temp_min=min(s.temp_min for s in bucket),
        temp_max=max(s.temp_max for s in bucket),
        humidity=rep.humidity,
        weather=rep.weather,
        time_text=rep.time_text,
    )
