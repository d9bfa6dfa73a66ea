"""Tests for claim message correlation."""

from datetime import datetime, timezone

import pytest

from app.db.enums import ClaimMessageType
from app.services.claim_correlation_service import (
    MessageOrder,
    find_first_subcontractor_contact,
    find_service_order_date,
    find_service_order_messages,
    find_subcontractor_messages,
    group_messages_by_claim,
)
from app.services.claim_records import ClaimMessageRecord


def _msg(message_id, claim_id, subject, timestamp, message_type=ClaimMessageType.SUBCONTRACTOR):
    return ClaimMessageRecord(
        id=message_id,
        claim_id=claim_id,
        type=message_type,
        subject=subject,
        timestamp=timestamp,
    )


@pytest.fixture
def messages():
    return [
        _msg("m1", "c1", "Service Order #12", datetime(2024, 1, 5, 12, tzinfo=timezone.utc)),
        _msg("m2", "c1", "Quick question", datetime(2024, 1, 3, 12, tzinfo=timezone.utc)),
        _msg("m3", "c1", "Revised SERVICE ORDER", datetime(2024, 1, 9, 12, tzinfo=timezone.utc)),
        _msg(
            "m4", "c1", "service order copy", datetime(2024, 1, 2, 12, tzinfo=timezone.utc),
            message_type=ClaimMessageType.HOMEOWNER,
        ),
        _msg("m5", "c2", "Service order", datetime(2024, 1, 1, 12, tzinfo=timezone.utc)),
        _msg("m6", "c1", "Service order (bad date)", "not a date"),
    ]


def test_service_order_messages_latest_first(messages):
    result = find_service_order_messages("c1", messages, order=MessageOrder.LATEST_FIRST)
    assert [m.id for m in result] == ["m3", "m1"]


def test_service_order_messages_earliest_first(messages):
    result = find_service_order_messages("c1", messages, order=MessageOrder.EARLIEST_FIRST)
    assert [m.id for m in result] == ["m1", "m3"]


def test_input_order_does_not_matter(messages):
    forward = find_service_order_messages("c1", messages, order="latest_first")
    backward = find_service_order_messages("c1", list(reversed(messages)), order="latest_first")
    assert [m.id for m in forward] == [m.id for m in backward]


def test_no_match_is_empty(messages):
    assert find_service_order_messages("missing", messages, order=MessageOrder.LATEST_FIRST) == []


def test_subcontractor_messages_include_any_subject(messages):
    result = find_subcontractor_messages("c1", messages, order=MessageOrder.EARLIEST_FIRST)
    assert [m.id for m in result] == ["m2", "m1", "m3"]


def test_first_contact_respects_service_orders_only(messages):
    assert find_first_subcontractor_contact("c1", messages) == datetime(
        2024, 1, 3, 12, tzinfo=timezone.utc
    )
    assert find_first_subcontractor_contact("c1", messages, service_orders_only=True) == datetime(
        2024, 1, 5, 12, tzinfo=timezone.utc
    )
    assert find_first_subcontractor_contact("c3", messages) is None


def test_latest_service_order_date(messages):
    assert find_service_order_date("c1", messages) == datetime(2024, 1, 9, 12, tzinfo=timezone.utc)
    assert find_service_order_date("c3", messages) is None


def test_naive_and_aware_timestamps_sort_together():
    mixed = [
        _msg("a", "c1", "service order", datetime(2024, 1, 4, 9, 0)),
        _msg("b", "c1", "service order", datetime(2024, 1, 4, 16, 0, tzinfo=timezone.utc)),
    ]
    # 16:00 UTC is 08:00 in Los Angeles, before the naive 09:00 local entry
    result = find_service_order_messages(
        "c1", mixed, order=MessageOrder.EARLIEST_FIRST, timezone="America/Los_Angeles"
    )
    assert [m.id for m in result] == ["b", "a"]


def test_group_messages_by_claim(messages):
    grouped = group_messages_by_claim(messages)
    assert set(grouped) == {"c1", "c2"}
    assert len(grouped["c1"]) == 5


def test_unknown_message_type_is_rejected():
    with pytest.raises(ValueError):
        _msg("x", "c1", "hi", "2024-01-01", message_type="CARRIER_PIGEON")


def test_out_of_range_timestamps_are_skipped():
    edge = [
        _msg("a", "c1", "service order", "0001-01-01T00:00:00+05:00"),
        _msg("b", "c1", "service order", "999999999999"),
        _msg("c", "c1", "service order", datetime(2024, 1, 4, 12, tzinfo=timezone.utc)),
    ]
    result = find_service_order_messages(
        "c1", edge, order=MessageOrder.EARLIEST_FIRST, timezone="UTC"
    )
    assert [m.id for m in result] == ["c"]
