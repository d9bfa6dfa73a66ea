"""Tests for datetime parsing helpers."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from app.utils.datetime_parsing import coerce_datetime, parse_datetime


def test_iso_with_offset_is_aware():
    parsed = parse_datetime("2024-01-03T15:30:00Z")
    assert parsed.value == datetime(2024, 1, 3, 15, 30, tzinfo=timezone.utc)
    assert parsed.warnings == []


def test_naive_value_stays_naive_without_timezone():
    parsed = parse_datetime("2024-01-03 09:15")
    assert parsed.value == datetime(2024, 1, 3, 9, 15)
    assert parsed.value.tzinfo is None


def test_default_timezone_is_attached_to_naive_values():
    parsed = parse_datetime("2024-01-03T09:15:00", default_timezone="America/Denver")
    assert parsed.value.tzinfo == ZoneInfo("America/Denver")


def test_date_only_resolves_to_noon():
    for raw in ("2024-01-03", "01/03/2024"):
        parsed = parse_datetime(raw)
        assert parsed.value == datetime(2024, 1, 3, 12, 0)
        assert parsed.date_only is True


def test_epoch_seconds_and_millis_are_utc():
    assert parse_datetime("1704067200").value == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert parse_datetime("1704067200000").value == datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_out_of_range_epoch_is_none_with_warning():
    parsed = parse_datetime("999999999999")
    assert parsed.value is None
    assert any("out of range" in w for w in parsed.warnings)


def test_unknown_timezone_falls_back_with_warning():
    parsed = parse_datetime("2024-01-03 09:15", default_timezone="Mars/Olympus")
    assert parsed.used_fallback_timezone is True
    assert parsed.value is not None
    assert any("Unknown timezone" in w for w in parsed.warnings)


def test_garbage_is_none_with_warning():
    parsed = parse_datetime("next tuesday-ish")
    assert parsed.value is None
    assert parsed.warnings


def test_coerce_handles_each_stored_shape():
    aware = datetime(2024, 1, 3, 12, tzinfo=timezone.utc)
    assert coerce_datetime(aware).value is aware
    assert coerce_datetime(date(2024, 1, 3)).value == datetime(2024, 1, 3, 12, 0)
    assert coerce_datetime("2024-01-03T12:00:00+00:00").value == aware
    assert coerce_datetime(None).value is None
    assert coerce_datetime("").value is None


def test_coerce_rejects_unsupported_types():
    parsed = coerce_datetime(20240103)
    assert parsed.value is None
    assert parsed.warnings
