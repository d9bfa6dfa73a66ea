"""Utility modules."""

from app.utils.business_days import business_days_between, is_business_day
from app.utils.datetime_parsing import coerce_datetime, parse_datetime
from app.utils.normalization import normalize_email, normalize_phone, normalize_text

__all__ = [
    # Calendar
    "business_days_between",
    "is_business_day",
    # Dates
    "coerce_datetime",
    "parse_datetime",
    # Normalization
    "normalize_email",
    "normalize_phone",
    "normalize_text",
]
