"""Attribute claims to homeowners and scope both by builder group.

Claims carry the homeowner name and address captured at submission, not a
foreign key. Attribution re-joins that snapshot against the live homeowner
list by exact (name, address) match. No match is a normal outcome (the
homeowner was renamed or deleted), so every lookup returns an optional.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Sequence

from app.services.claim_lifecycle import (
    claim_needs_attention,
    is_claim_approved,
    is_claim_in_process_or_new,
)
from app.services.claim_records import ClaimRecord, HomeownerRecord
from app.utils.business_days import to_business_date
from app.utils.datetime_parsing import coerce_datetime

ALL_BUILDER_GROUPS = "all"

DEFAULT_ACTIVE_WINDOW_DAYS = 365

HomeownerKey = tuple[str, str]


def is_all_builder_groups(builder_group_id: str | None) -> bool:
    return builder_group_id is None or str(builder_group_id) == ALL_BUILDER_GROUPS


class HomeownerIndex:
    """(name, address) → homeowner lookup. The first homeowner listed wins on duplicates."""

    def __init__(self, homeowners: Iterable[HomeownerRecord]):
        self._by_key: dict[HomeownerKey, HomeownerRecord] = {}
        for homeowner in homeowners:
            self._by_key.setdefault((homeowner.name, homeowner.address), homeowner)

    def __len__(self) -> int:
        return len(self._by_key)

    def resolve(self, claim: ClaimRecord) -> HomeownerRecord | None:
        return self._by_key.get((claim.homeowner_name, claim.address))


def resolve_claim_homeowner(
    claim: ClaimRecord,
    homeowners: Iterable[HomeownerRecord],
) -> HomeownerRecord | None:
    """Homeowner whose name and address both match the claim snapshot, if any."""
    for homeowner in homeowners:
        if homeowner.name == claim.homeowner_name and homeowner.address == claim.address:
            return homeowner
    return None


def filter_homeowners_by_builder(
    homeowners: Sequence[HomeownerRecord],
    builder_group_id: str | None,
) -> list[HomeownerRecord]:
    if is_all_builder_groups(builder_group_id):
        return list(homeowners)
    target = str(builder_group_id)
    return [h for h in homeowners if h.builder_id == target]


def filter_claims_by_builder(
    claims: Sequence[ClaimRecord],
    homeowners: Sequence[HomeownerRecord],
    builder_group_id: str | None,
) -> list[ClaimRecord]:
    """
    Claims whose snapshot matches a homeowner in the builder group.

    For "all" every claim passes, attributed or not. Order is preserved.
    """
    if is_all_builder_groups(builder_group_id):
        return list(claims)
    index = HomeownerIndex(filter_homeowners_by_builder(homeowners, builder_group_id))
    return [c for c in claims if index.resolve(c) is not None]


def _closing_day(value) -> date | None:
    parsed = coerce_datetime(value).value
    if parsed is None:
        return None
    return to_business_date(parsed)


def count_active_homeowners(
    homeowners: Iterable[HomeownerRecord],
    *,
    as_of: datetime | None = None,
    window_days: int = DEFAULT_ACTIVE_WINDOW_DAYS,
) -> int:
    """Homeowners whose closing date falls within the last `window_days` days."""
    now = as_of or datetime.now(timezone.utc)
    cutoff = (now - timedelta(days=window_days)).date()
    count = 0
    for homeowner in homeowners:
        closing = _closing_day(homeowner.closing_date)
        if closing is not None and closing >= cutoff:
            count += 1
    return count


def claimant_ids(
    claims: Iterable[ClaimRecord],
    homeowners: Iterable[HomeownerRecord],
) -> set[str]:
    """Distinct homeowner ids with at least one attributed claim."""
    index = HomeownerIndex(homeowners)
    ids: set[str] = set()
    for claim in claims:
        homeowner = index.resolve(claim)
        if homeowner is not None:
            ids.add(homeowner.id)
    return ids


def approved_claimant_ids(
    claims: Iterable[ClaimRecord],
    homeowners: Iterable[HomeownerRecord],
) -> set[str]:
    """Claimants restricted to approved claims (open, past intake, classified)."""
    return claimant_ids((c for c in claims if is_claim_approved(c)), homeowners)


def needs_attention_claims(claims: Iterable[ClaimRecord]) -> list[ClaimRecord]:
    return [c for c in claims if claim_needs_attention(c)]


def in_process_and_new_claims(claims: Iterable[ClaimRecord]) -> list[ClaimRecord]:
    return [c for c in claims if is_claim_in_process_or_new(c)]
