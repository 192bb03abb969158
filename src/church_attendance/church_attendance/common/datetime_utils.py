from __future__ import annotations

from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local(timezone: str) -> datetime:
    """Current wall-clock time in the church timezone, as a naive datetime."""
    return datetime.now(ZoneInfo(timezone)).replace(tzinfo=None)


def to_local(dt: datetime, timezone: str) -> datetime:
    """Normalize `dt` to naive church-local time.

    Naive values are assumed to already be church-local; aware values are converted.
    """
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(ZoneInfo(timezone)).replace(tzinfo=None)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """[00:00 of `day`, 00:00 of the next day)."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)
