"""Common types and helpers shared across models."""

from datetime import UTC, datetime
from enum import StrEnum


class StreamStatus(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class StreamName(StrEnum):
    CURRENT = "current"
    FORECAST = "forecast"
    DETAILED = "detailed"


class View(StrEnum):
    CURRENT = "current"
    DETAILED = "detailed"


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_now_iso() -> str:
    return utc_now().isoformat()
