"""
Datetime helpers shared by storage, statistics and display code.

SQLite returns naive datetimes even for timezone-aware columns, so values
read back from the database are treated as UTC.
"""

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a datetime to aware UTC (naive values are assumed UTC)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def start_of_day(now: datetime) -> datetime:
    """Midnight of ``now``'s calendar day, in ``now``'s timezone."""
    return datetime.combine(now.date(), time.min, tzinfo=now.tzinfo or timezone.utc)


def day_bounds(now: datetime) -> tuple[datetime, datetime]:
    """Half-open [start of day, start of next day) around ``now``."""
    start = start_of_day(now)
    return start, start + timedelta(days=1)


def local_date(value: datetime, tz: tzinfo) -> date:
    """Calendar date of a stored datetime in the given timezone."""
    return as_utc(value).astimezone(tz).date()
