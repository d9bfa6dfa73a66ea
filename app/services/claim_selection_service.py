"""Claim list filtering, multi-select state and bulk delete.

Selection state belongs to the caller: a frozenset of claim ids threaded
through pure toggle/clear/prune helpers. Bulk delete is the only operation
with side effects, and it goes through an injected `delete_claim`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Sequence

from app.core.claim_states import status_is_open
from app.services.claim_records import ClaimRecord

logger = logging.getLogger(__name__)

ClaimSelection = frozenset[str]


class ClaimsFilter(str, Enum):
    OPEN = "Open"
    CLOSED = "Closed"
    ALL = "All"


@dataclass(frozen=True)
class ClaimCounts:
    open: int
    closed: int
    total: int


@dataclass(frozen=True)
class BulkDeleteFailure:
    claim_id: str
    reason: str


@dataclass
class BulkDeleteResult:
    requested: int = 0
    deleted: list[str] = field(default_factory=list)
    failed: list[BulkDeleteFailure] = field(default_factory=list)


def apply_filter(claims: Sequence[ClaimRecord], claims_filter: ClaimsFilter | str) -> list[ClaimRecord]:
    """Open / Closed / All partition; input order is preserved."""
    claims_filter = ClaimsFilter(claims_filter)
    if claims_filter == ClaimsFilter.OPEN:
        return [c for c in claims if status_is_open(c.status)]
    if claims_filter == ClaimsFilter.CLOSED:
        return [c for c in claims if not status_is_open(c.status)]
    return list(claims)


def calculate_claim_counts(claims: Sequence[ClaimRecord]) -> ClaimCounts:
    open_count = sum(1 for c in claims if status_is_open(c.status))
    return ClaimCounts(open=open_count, closed=len(claims) - open_count, total=len(claims))


def toggle_selection(selection: ClaimSelection, claim_id: str) -> ClaimSelection:
    """Add the id if absent, remove it if present."""
    claim_id = str(claim_id)
    if claim_id in selection:
        return selection - {claim_id}
    return selection | {claim_id}


def clear_selection() -> ClaimSelection:
    return frozenset()


def prune_selection(selection: ClaimSelection, removed_ids: Iterable[str]) -> ClaimSelection:
    """Drop ids that no longer exist (e.g. after a delete)."""
    return selection - {str(claim_id) for claim_id in removed_ids}


def bulk_delete(
    selected_ids: Iterable[str],
    delete_claim: Callable[[str], bool],
) -> BulkDeleteResult:
    """
    Delete claims one at a time through `delete_claim`.

    Not atomic: a failure on one id leaves earlier deletions in place.
    `delete_claim` returns False (or raises) to report a failure. No retries.
    Duplicate ids are attempted once, in first-seen order.
    """
    ordered: list[str] = []
    seen: set[str] = set()
    for claim_id in selected_ids:
        claim_id = str(claim_id)
        if claim_id not in seen:
            seen.add(claim_id)
            ordered.append(claim_id)

    result = BulkDeleteResult(requested=len(ordered))
    for claim_id in ordered:
        try:
            deleted = delete_claim(claim_id)
        except Exception as exc:
            logger.warning("Claim delete failed", extra={"claim_id": claim_id}, exc_info=True)
            result.failed.append(BulkDeleteFailure(claim_id=claim_id, reason=str(exc) or type(exc).__name__))
            continue
        if deleted:
            result.deleted.append(claim_id)
        else:
            result.failed.append(BulkDeleteFailure(claim_id=claim_id, reason="Claim not found"))
    return result
