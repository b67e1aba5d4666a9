# core/timeutil.py

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_utc_iso(value) -> str:
    """
    Normalise a datetime or ISO-8601 string to 'YYYY-MM-DDTHH:MM:SS+00:00'
    so stored timestamps compare correctly as text.
    Naive values are taken as UTC.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="seconds")


def utc_day_bounds(now: datetime) -> tuple[str, str]:
    """[start, end) of the UTC calendar day containing `now`, as ISO strings."""
    day = datetime.fromisoformat(to_utc_iso(now)).date()
    start = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    return to_utc_iso(start), to_utc_iso(start + timedelta(days=1))


def months_ago(now: datetime, months: int = 1) -> datetime:
    """Same day-of-month `months` earlier, clamped to the month's last day."""
    month_index = now.year * 12 + (now.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(now.day, calendar.monthrange(year, month)[1])
    return now.replace(year=year, month=month, day=day)


def iso_date(value) -> date:
    return datetime.fromisoformat(to_utc_iso(value)).date()


def round_minutes(seconds: int) -> int:
    """Seconds to whole minutes, halves rounded up."""
    return (int(seconds) + 30) // 60
