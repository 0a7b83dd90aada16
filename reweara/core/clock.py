# reweara/core/clock.py
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """
    Normalize a timestamp to aware UTC.

    SQLite drops tzinfo on round-trip, so naive values are treated as UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def within_window(
    start: datetime | None,
    end: datetime | None,
    now: datetime,
) -> bool:
    """
    True unless `start` is still in the future or `end` already passed.
    Open-ended on either side when the bound is None.
    """
    now = as_utc(now)
    if start is not None and as_utc(start) > now:
        return False
    if end is not None and as_utc(end) < now:
        return False
    return True
