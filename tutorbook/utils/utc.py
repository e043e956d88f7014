from datetime import datetime, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo

from tutorbook.settings import settings


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@lru_cache
def local_timezone(name: str | None = None) -> ZoneInfo:
    return ZoneInfo(name or settings.timezone)


def iso_instant(dt: datetime) -> str:
    """Format an aware datetime as a UTC ISO-8601 instant with millisecond precision, e.g. 2026-10-19T07:00:00.000Z"""

    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def parse_instant(value: str) -> datetime:
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Interpret naive datetimes as UTC."""

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
