"""Business day calculator for claim cycle times.

Counts Mon-Fri calendar days between two instants, both ends inclusive.
Optionally skips US federal holidays. Day-by-day iteration keeps the count
exact; claim intervals span weeks, not years.
"""

from datetime import date, datetime, timedelta
from functools import lru_cache
from zoneinfo import ZoneInfo

import holidays


@lru_cache(maxsize=10)
def get_us_holidays(year: int) -> frozenset[date]:
    """Cache holiday sets per year for performance."""
    return frozenset(holidays.US(years=year).keys())


def to_business_date(value: datetime | date, timezone: str | None = None) -> date:
    """
    Calendar date an instant falls on.

    Aware datetimes are converted into `timezone` first (when given).
    Naive datetimes are taken as local wall-clock time.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None and timezone:
            return value.astimezone(ZoneInfo(timezone)).date()
        return value.date()
    return value


def is_business_day(day: date, *, exclude_holidays: bool = False) -> bool:
    """Check if date is a business day (Mon-Fri, optionally not a holiday)."""
    if day.weekday() >= 5:  # Weekend
        return False
    if exclude_holidays and day in get_us_holidays(day.year):
        return False
    return True


def business_days_between(
    start: datetime | date,
    end: datetime | date,
    *,
    timezone: str | None = None,
    exclude_holidays: bool = False,
) -> int:
    """
    Count business days from start to end, inclusive of both.

    Args:
        start: Interval start (datetime or date)
        end: Interval end (datetime or date)
        timezone: IANA zone used to bucket aware datetimes into dates
        exclude_holidays: Also skip US federal holidays

    Returns:
        Day count; negative when end falls before start. Callers drop
        negative intervals rather than clamping them.
    """
    start_day = to_business_date(start, timezone)
    end_day = to_business_date(end, timezone)

    if end_day < start_day:
        return -business_days_between(start=end_day, end=start_day, exclude_holidays=exclude_holidays)

    count = 0
    current = start_day
    while current <= end_day:
        if is_business_day(current, exclude_holidays=exclude_holidays):
            count += 1
        current += timedelta(days=1)
    return count
