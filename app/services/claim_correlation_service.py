"""Correlate tracked claim messages to claims.

Messages arrive in no guaranteed order across types, so every query sorts
explicitly. Callers pick the ordering: latest-first answers "most recent
service order", earliest-first answers "first subcontractor contact".
Messages whose timestamp cannot be read are left out of the result.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime, timezone as dt_timezone
from enum import Enum
from typing import Iterable
from zoneinfo import ZoneInfo

from app.db.enums import ClaimMessageType
from app.services.claim_records import ClaimMessageRecord
from app.utils.datetime_parsing import coerce_datetime

logger = logging.getLogger(__name__)

SERVICE_ORDER_MARKER = "service order"


class MessageOrder(str, Enum):
    LATEST_FIRST = "latest_first"
    EARLIEST_FIRST = "earliest_first"


def _sort_key(value: datetime, tz_name: str | None) -> datetime:
    # Aware timestamps become wall-clock time in the business zone so they
    # compare with naive (already local) ones.
    if value.tzinfo is None:
        return value
    zone = ZoneInfo(tz_name) if tz_name else dt_timezone.utc
    return value.astimezone(zone).replace(tzinfo=None)


def message_timestamp(message: ClaimMessageRecord) -> datetime | None:
    """Parsed timestamp of a message, or None when unreadable."""
    return coerce_datetime(message.timestamp).value


def group_messages_by_claim(
    messages: Iterable[ClaimMessageRecord],
) -> dict[str, list[ClaimMessageRecord]]:
    grouped: dict[str, list[ClaimMessageRecord]] = defaultdict(list)
    for message in messages:
        grouped[message.claim_id].append(message)
    return dict(grouped)


def find_subcontractor_messages(
    claim_id: str,
    messages: Iterable[ClaimMessageRecord],
    *,
    order: MessageOrder,
    service_orders_only: bool = False,
    timezone: str | None = None,
) -> list[ClaimMessageRecord]:
    """
    Subcontractor messages for one claim, sorted by timestamp.

    Args:
        claim_id: Claim to match
        messages: Any set of tracked messages (other claims are skipped)
        order: Required sort direction
        service_orders_only: Keep only subjects mentioning "service order"
        timezone: Business zone used to compare aware and naive timestamps

    Returns:
        Matching messages; empty when there is no data for the claim.
    """
    order = MessageOrder(order)
    claim_id = str(claim_id)

    dated: list[tuple[datetime, ClaimMessageRecord]] = []
    for message in messages:
        if message.claim_id != claim_id or message.type != ClaimMessageType.SUBCONTRACTOR:
            continue
        if service_orders_only and SERVICE_ORDER_MARKER not in (message.subject or "").lower():
            continue
        sent_at = message_timestamp(message)
        try:
            key = _sort_key(sent_at, timezone) if sent_at is not None else None
        except (OverflowError, ValueError):
            key = None
        if key is None:
            logger.debug(
                "Skipping claim message with unreadable timestamp",
                extra={"claim_id": claim_id, "message_id": message.id},
            )
            continue
        dated.append((key, message))

    dated.sort(key=lambda item: item[0], reverse=order == MessageOrder.LATEST_FIRST)
    return [message for _, message in dated]


def find_service_order_messages(
    claim_id: str,
    messages: Iterable[ClaimMessageRecord],
    *,
    order: MessageOrder,
    timezone: str | None = None,
) -> list[ClaimMessageRecord]:
    """Subcontractor messages whose subject contains "service order" (any case)."""
    return find_subcontractor_messages(
        claim_id,
        messages,
        order=order,
        service_orders_only=True,
        timezone=timezone,
    )


def find_first_subcontractor_contact(
    claim_id: str,
    messages: Iterable[ClaimMessageRecord],
    *,
    service_orders_only: bool = False,
    timezone: str | None = None,
) -> datetime | None:
    """Timestamp of the earliest subcontractor message, the cycle-time pivot."""
    ordered = find_subcontractor_messages(
        claim_id,
        messages,
        order=MessageOrder.EARLIEST_FIRST,
        service_orders_only=service_orders_only,
        timezone=timezone,
    )
    if not ordered:
        return None
    return message_timestamp(ordered[0])


def find_service_order_date(
    claim_id: str,
    messages: Iterable[ClaimMessageRecord],
    *,
    timezone: str | None = None,
) -> datetime | None:
    """Timestamp of the most recent service order sent for a claim."""
    ordered = find_service_order_messages(
        claim_id, messages, order=MessageOrder.LATEST_FIRST, timezone=timezone
    )
    if not ordered:
        return None
    return message_timestamp(ordered[0])
