"""Claim lifecycle: creation, staff transitions, scheduling responses.

Every function takes a ClaimRecord and returns a new one; nothing is
mutated in place. Status and classification can be set to any valid value
at any time. The only guarded fields are `date_evaluated` (set once) and
proposed-date responses (must address an existing, still-proposed entry).
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone

from app.core.claim_states import (
    classification_needs_attention,
    is_approval_eligible,
    status_is_in_process_or_new,
    status_is_open,
)
from app.db.enums import (
    ClaimClassification,
    ClaimStatus,
    CommentRole,
    ProposedDateStatus,
    TimeSlot,
)
from app.services.claim_records import ClaimComment, ClaimRecord, ProposedDate
from app.utils.datetime_parsing import DateLike


class ClaimTransitionError(ValueError):
    """Raised when a lifecycle change is not allowed for the claim's current state."""


# =============================================================================
# Derived categories
# =============================================================================


def is_claim_open(claim: ClaimRecord) -> bool:
    return status_is_open(claim.status)


def is_claim_completed(claim: ClaimRecord) -> bool:
    return claim.status == ClaimStatus.COMPLETED


def is_claim_reviewed(claim: ClaimRecord) -> bool:
    return bool(claim.reviewed)


def is_claim_approved(claim: ClaimRecord) -> bool:
    """Open, no longer new, and classified (Unclassified never counts)."""
    return is_approval_eligible(claim.status, claim.classification)


def claim_needs_attention(claim: ClaimRecord) -> bool:
    return classification_needs_attention(claim.classification)


def is_claim_in_process_or_new(claim: ClaimRecord) -> bool:
    return status_is_in_process_or_new(claim.status)


def format_claim_number(claim: ClaimRecord) -> str:
    """Human-readable claim number, or the first 8 id characters upper-cased."""
    return claim.claim_number or claim.id[:8].upper()


def find_accepted_scheduled_date(claim: ClaimRecord) -> ProposedDate | None:
    for proposed in claim.proposed_dates:
        if proposed.status == ProposedDateStatus.ACCEPTED:
            return proposed
    return None


# =============================================================================
# Creation and staff transitions
# =============================================================================


def submit_claim(
    claim_id: str,
    *,
    homeowner_name: str,
    address: str,
    submitted_at: datetime | None = None,
    **fields,
) -> ClaimRecord:
    """Build a freshly submitted claim (Submitted / Unclassified)."""
    fields.pop("status", None)
    fields.pop("classification", None)
    return ClaimRecord(
        id=claim_id,
        homeowner_name=homeowner_name,
        address=address,
        date_submitted=submitted_at or datetime.now(timezone.utc),
        status=ClaimStatus.SUBMITTED,
        classification=ClaimClassification.UNCLASSIFIED,
        **fields,
    )


def change_status(claim: ClaimRecord, status: ClaimStatus | str) -> ClaimRecord:
    """Set workflow status. Raises ValueError for an unknown status."""
    return replace(claim, status=ClaimStatus.parse(status))


def classify(claim: ClaimRecord, classification: ClaimClassification | str | None) -> ClaimRecord:
    """Set classification; unknown labels become Unclassified."""
    return replace(claim, classification=ClaimClassification.coerce(classification))


def mark_evaluated(claim: ClaimRecord, evaluated_at: DateLike) -> ClaimRecord:
    """Record when staff finished the initial review. Set once."""
    if claim.date_evaluated is not None:
        raise ClaimTransitionError("Claim already has an evaluation date")
    return replace(claim, date_evaluated=evaluated_at)


def mark_reviewed(claim: ClaimRecord, reviewed: bool = True) -> ClaimRecord:
    return replace(claim, reviewed=reviewed)


def add_comment(
    claim: ClaimRecord,
    *,
    author: str,
    role: CommentRole | str,
    text: str,
    timestamp: datetime | None = None,
) -> ClaimRecord:
    comment = ClaimComment(
        author=author,
        role=role,
        text=text,
        timestamp=timestamp or datetime.now(timezone.utc),
    )
    return replace(claim, comments=claim.comments + (comment,))


# =============================================================================
# Scheduling negotiation
# =============================================================================


def propose_date(
    claim: ClaimRecord,
    when: DateLike,
    time_slot: TimeSlot | str = TimeSlot.ALL_DAY,
) -> ClaimRecord:
    proposed = ProposedDate(date=when, time_slot=time_slot, status=ProposedDateStatus.PROPOSED)
    return replace(claim, proposed_dates=claim.proposed_dates + (proposed,))


def respond_to_proposed_date(claim: ClaimRecord, index: int, *, accept: bool) -> ClaimRecord:
    """
    Apply a homeowner/contractor answer to one proposed date.

    Accepting moves the claim to Scheduled. Rejecting only marks the entry.
    """
    if index < 0 or index >= len(claim.proposed_dates):
        raise ClaimTransitionError(f"No proposed date at position {index}")
    target = claim.proposed_dates[index]
    if target.status != ProposedDateStatus.PROPOSED:
        raise ClaimTransitionError(f"Proposed date already {target.status.value.lower()}")

    answered = replace(
        target,
        status=ProposedDateStatus.ACCEPTED if accept else ProposedDateStatus.REJECTED,
    )
    proposed_dates = claim.proposed_dates[:index] + (answered,) + claim.proposed_dates[index + 1 :]
    if accept:
        return replace(claim, proposed_dates=proposed_dates, status=ClaimStatus.SCHEDULED)
    return replace(claim, proposed_dates=proposed_dates)


def confirm_schedule(
    claim: ClaimRecord,
    when: DateLike,
    time_slot: TimeSlot | str = TimeSlot.ALL_DAY,
) -> ClaimRecord:
    """Staff confirm a date directly: the single accepted date replaces the history."""
    accepted = ProposedDate(date=when, time_slot=time_slot, status=ProposedDateStatus.ACCEPTED)
    return replace(claim, status=ClaimStatus.SCHEDULED, proposed_dates=(accepted,))


def reschedule(claim: ClaimRecord) -> ClaimRecord:
    """Drop the schedule and reopen negotiation."""
    return replace(claim, status=ClaimStatus.SCHEDULING, proposed_dates=())
