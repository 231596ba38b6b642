"""Calendar window generation for day, week and month period keys."""

from __future__ import annotations

from datetime import date, timedelta

from common.errors import InvalidArgument

DAY = "day"
WEEK = "week"
MONTH = "month"
UNITS = (DAY, WEEK, MONTH)


def generate_keys(unit: str, target_date: date, range_: int) -> list[str]:
    """Return the period keys for a unit, oldest first.

    Args:
        unit: One of "day", "week" or "month".
        target_date: The date whose period is the most recent key.
        range_: Number of periods to return, must be positive.

    Returns:
        Keys formatted as:
            "day":   ["YYYY-MM-DD", ...]
            "week":  ["YYYY-MM-DD", ...] (Monday of each week)
            "month": ["YYYY-MM", ...]

    Raises:
        InvalidArgument: If range_ is not a positive integer or the unit is unsupported.
    """
    if isinstance(range_, bool) or not isinstance(range_, int) or range_ <= 0:
        raise InvalidArgument(f"Range must be a positive integer, got {range_!r}")

    try:
        if unit == DAY:
            return day_keys(target_date, range_)
        if unit == WEEK:
            return week_keys(target_date, range_)
        if unit == MONTH:
            return month_keys(target_date, range_)
    except OverflowError as exc:
        raise InvalidArgument(f"Range {range_} reaches before year 1") from exc
    raise InvalidArgument(f"Unsupported unit: {unit}")


def day_keys(target_date: date, range_: int) -> list[str]:
    """Consecutive days ending at target_date, inclusive."""
    start = target_date - timedelta(days=range_ - 1)
    return [(start + timedelta(days=n)).isoformat() for n in range(range_)]


def week_start(target_date: date) -> date:
    """Monday of the week containing target_date."""
    return target_date - timedelta(days=target_date.weekday())


def week_keys(target_date: date, range_: int) -> list[str]:
    """Week-start Mondays ending at the Monday of target_date's week."""
    start = week_start(target_date) - timedelta(weeks=range_ - 1)
    return [(start + timedelta(weeks=n)).isoformat() for n in range(range_)]


def month_keys(target_date: date, range_: int) -> list[str]:
    """Calendar months ending at target_date's month.

    Works on a month index so the day of month never matters.
    """
    last = target_date.year * 12 + (target_date.month - 1)
    if last - range_ + 1 < 12:
        raise OverflowError("month index out of range")
    keys = []
    for index in range(last - range_ + 1, last + 1):
        year, month = divmod(index, 12)
        keys.append(f"{year:04d}-{month + 1:02d}")
    return keys
