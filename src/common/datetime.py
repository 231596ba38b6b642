"""Datetime utilities."""

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo


def get_timezone(name: str) -> tzinfo:
    """Resolve a timezone name, treating "UTC" as the fixed UTC offset."""
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def parse_datetime(value, tz: tzinfo = timezone.utc) -> datetime:
    """Parse datetime from ISO string or return as-is if already datetime.

    Naive values are interpreted in ``tz``.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def start_of_day(d: date, tz: tzinfo) -> datetime:
    """Midnight at the start of ``d`` in ``tz``."""
    return datetime.combine(d, time.min, tzinfo=tz)


def end_of_day(d: date, tz: tzinfo) -> datetime:
    """Last representable instant of ``d`` in ``tz``."""
    return datetime.combine(d, time.max, tzinfo=tz)


def today(tz: tzinfo) -> date:
    return datetime.now(tz).date()


def previous_day(tz: tzinfo) -> date:
    """Yesterday's date in ``tz``."""
    return today(tz) - timedelta(days=1)
