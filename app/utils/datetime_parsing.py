"""Datetime parsing helpers for claim records and imports."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_TIMEZONE = "America/Los_Angeles"

DATETIME_FORMATS: list[str] = [
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %I:%M %p",
    "%m-%d-%Y %H:%M:%S",
    "%m-%d-%Y %H:%M",
    "%m-%d-%Y %I:%M %p",
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m-%d-%Y",
]

DATE_ONLY_FORMATS = {"%Y-%m-%d", "%Y/%m/%d", "%m/%d/%Y", "%m-%d-%Y"}

DateLike = datetime | date | str


@dataclass
class ParsedDatetime:
    value: datetime | None
    warnings: list[str] = field(default_factory=list)
    date_only: bool = False
    used_fallback_timezone: bool = False


def parse_datetime(raw_value: str, default_timezone: str | None = None) -> ParsedDatetime:
    """
    Parse a datetime string.

    Values without an offset stay naive (local wall-clock time) unless
    `default_timezone` is given, in which case that zone is attached.
    Date-only values resolve to 12:00.
    """
    value = raw_value.strip()
    if not value:
        return ParsedDatetime(value=None)

    warnings: list[str] = []
    tz: ZoneInfo | None = None
    used_fallback = False
    if default_timezone:
        tz, used_fallback = _resolve_timezone(default_timezone, warnings)

    # Epoch timestamps (seconds or milliseconds)
    if re.fullmatch(r"\d{10,13}", value):
        ts = int(value)
        if len(value) == 13:
            ts = ts / 1000
        try:
            dt = datetime.fromtimestamp(ts, tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            warnings.append(f"Timestamp out of range: {value}")
            return ParsedDatetime(value=None, warnings=warnings, used_fallback_timezone=used_fallback)
        return ParsedDatetime(value=dt, warnings=warnings, used_fallback_timezone=used_fallback)

    # ISO 8601 timestamps (bare dates fall through to the date-only formats)
    if not re.fullmatch(r"\d{4}-\d{2}-\d{2}", value):
        try:
            dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
            if dt.tzinfo is None and tz is not None:
                dt = dt.replace(tzinfo=tz)
            return ParsedDatetime(value=dt, warnings=warnings, used_fallback_timezone=used_fallback)
        except ValueError:
            pass

    for fmt in DATETIME_FORMATS:
        try:
            dt = datetime.strptime(value, fmt)
            date_only = fmt in DATE_ONLY_FORMATS
            if date_only:
                warnings.append("Date-only value; assuming 12:00 local time.")
                dt = dt.replace(hour=12, minute=0, second=0)
            if tz is not None:
                dt = dt.replace(tzinfo=tz)
            return ParsedDatetime(
                value=dt,
                warnings=warnings,
                date_only=date_only,
                used_fallback_timezone=used_fallback,
            )
        except ValueError:
            continue

    warnings.append(f"Unrecognized datetime format: {value}")
    return ParsedDatetime(value=None, warnings=warnings, used_fallback_timezone=used_fallback)


def coerce_datetime(value: DateLike | None, default_timezone: str | None = None) -> ParsedDatetime:
    """Normalize a stored date-ish value (datetime, date, string) to a datetime."""
    if value is None:
        return ParsedDatetime(value=None)
    if isinstance(value, datetime):
        return ParsedDatetime(value=value)
    if isinstance(value, date):
        return ParsedDatetime(value=datetime.combine(value, time(12, 0)), date_only=True)
    if isinstance(value, str):
        return parse_datetime(value, default_timezone)
    return ParsedDatetime(value=None, warnings=[f"Unsupported datetime value: {type(value).__name__}"])


def _resolve_timezone(tz_name: str, warnings: list[str]) -> tuple[ZoneInfo, bool]:
    try:
        return ZoneInfo(tz_name), False
    except ZoneInfoNotFoundError:
        warnings.append(f"Unknown timezone '{tz_name}', defaulting to {DEFAULT_TIMEZONE}.")
        return ZoneInfo(DEFAULT_TIMEZONE), True
