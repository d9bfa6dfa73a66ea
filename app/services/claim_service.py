"""Claim service - persistence for claims and their messages.

Lifecycle rules live in claim_lifecycle and operate on ClaimRecord
snapshots. This module converts ORM rows to records, runs the lifecycle
function, and writes the result back in one commit.
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Callable, Iterable
from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from app.db.enums import DEFAULT_PROPOSED_DATE_STATUS, DEFAULT_TIME_SLOT, CommentRole
from app.db.models import Claim, ClaimMessage, Homeowner
from app.schemas.claim import (
    ClaimCommentRead,
    ClaimCreate,
    ClaimMessageCreate,
    ClaimRead,
    ClaimSummary,
    ClaimUpdate,
    ProposedDateRead,
)
from app.services import claim_lifecycle
from app.services.claim_correlation_service import find_service_order_date
from app.services.claim_records import (
    ClaimComment,
    ClaimMessageRecord,
    ClaimRecord,
    HomeownerRecord,
    ProposedDate,
)
from app.services.claim_selection_service import (
    BulkDeleteResult,
    ClaimsFilter,
    apply_filter,
    bulk_delete,
)
from app.services.homeowner_service import homeowner_to_record
from app.utils.datetime_parsing import DateLike, coerce_datetime
from app.utils.normalization import normalize_email, normalize_text

logger = logging.getLogger(__name__)


# =============================================================================
# JSON column (de)serialization
# =============================================================================

def _dump_date(value: DateLike | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _dump_proposed_dates(proposed_dates: tuple[ProposedDate, ...]) -> list[dict[str, Any]]:
    return [
        {
            "date": _dump_date(p.date),
            "time_slot": p.time_slot.value,
            "status": p.status.value,
        }
        for p in proposed_dates
    ]


def _load_proposed_dates(raw: list | None) -> tuple[ProposedDate, ...]:
    return tuple(
        ProposedDate(
            date=item.get("date"),
            time_slot=item.get("time_slot") or DEFAULT_TIME_SLOT,
            status=item.get("status") or DEFAULT_PROPOSED_DATE_STATUS,
        )
        for item in raw or []
    )


def _dump_comments(comments: tuple[ClaimComment, ...]) -> list[dict[str, Any]]:
    return [
        {
            "author": c.author,
            "role": c.role.value,
            "text": c.text,
            "timestamp": _dump_date(c.timestamp),
        }
        for c in comments
    ]


def _load_comments(raw: list | None) -> tuple[ClaimComment, ...]:
    return tuple(
        ClaimComment(
            author=item.get("author") or "",
            role=item.get("role") or CommentRole.ADMIN,
            text=item.get("text") or "",
            timestamp=item.get("timestamp"),
        )
        for item in raw or []
    )


# =============================================================================
# ORM <-> record
# =============================================================================

def claim_to_record(claim: Claim) -> ClaimRecord:
    return ClaimRecord(
        id=str(claim.id),
        homeowner_name=claim.homeowner_name,
        address=claim.address,
        date_submitted=claim.date_submitted,
        status=claim.status,
        classification=claim.classification,
        claim_number=claim.claim_number,
        title=claim.title,
        description=claim.description or "",
        homeowner_email=claim.homeowner_email,
        contractor_name=claim.contractor_name,
        date_evaluated=claim.date_evaluated,
        reviewed=bool(claim.reviewed),
        proposed_dates=_load_proposed_dates(claim.proposed_dates),
        comments=_load_comments(claim.comments),
        attachment_count=len(claim.attachments or []),
    )


def _apply_record(claim: Claim, record: ClaimRecord) -> None:
    """Copy the lifecycle-managed fields of a record back onto the row."""
    claim.status = record.status.value
    claim.classification = record.classification.value
    claim.reviewed = record.reviewed
    claim.date_evaluated = coerce_datetime(record.date_evaluated).value
    claim.proposed_dates = _dump_proposed_dates(record.proposed_dates)
    claim.comments = _dump_comments(record.comments)


def message_to_record(message: ClaimMessage) -> ClaimMessageRecord:
    return ClaimMessageRecord(
        id=str(message.id),
        claim_id=str(message.claim_id),
        type=message.message_type,
        subject=message.subject,
        timestamp=message.sent_at,
        recipient=message.recipient,
        sender_name=message.sender_name,
    )


def to_claim_read(claim: Claim) -> ClaimRead:
    record = claim_to_record(claim)
    scheduled = claim_lifecycle.find_accepted_scheduled_date(record)
    return ClaimRead(
        id=claim.id,
        claim_number=claim_lifecycle.format_claim_number(record),
        title=claim.title,
        description=claim.description or "",
        category=claim.category,
        homeowner_name=claim.homeowner_name,
        homeowner_email=claim.homeowner_email,
        address=claim.address,
        builder_name=claim.builder_name,
        contractor_name=claim.contractor_name,
        contractor_email=claim.contractor_email,
        status=record.status,
        classification=record.classification,
        reviewed=record.reviewed,
        is_open=claim_lifecycle.is_claim_open(record),
        date_submitted=claim.date_submitted,
        date_evaluated=claim.date_evaluated,
        scheduled_date=_proposed_date_read(scheduled) if scheduled else None,
        proposed_dates=[_proposed_date_read(p) for p in record.proposed_dates],
        comments=[
            ClaimCommentRead(
                author=c.author,
                role=c.role,
                text=c.text,
                timestamp=coerce_datetime(c.timestamp).value,
            )
            for c in record.comments
        ],
        attachment_count=record.attachment_count,
        internal_notes=claim.internal_notes,
        updated_at=claim.updated_at,
    )


def _proposed_date_read(proposed: ProposedDate) -> ProposedDateRead:
    return ProposedDateRead(
        date=coerce_datetime(proposed.date).value,
        time_slot=proposed.time_slot,
        status=proposed.status,
    )


def to_claim_summary(record: ClaimRecord) -> ClaimSummary:
    return ClaimSummary(
        id=UUID(record.id),
        claim_number=claim_lifecycle.format_claim_number(record),
        title=record.title,
        homeowner_name=record.homeowner_name,
        status=record.status,
        classification=record.classification,
    )


# =============================================================================
# Claims CRUD
# =============================================================================

def next_claim_number(db: Session, homeowner_name: str, address: str) -> str:
    """Sequential per homeowner snapshot: "1", "2", ... (max existing + 1)."""
    rows = (
        db.query(Claim.claim_number)
        .filter(Claim.homeowner_name == homeowner_name, Claim.address == address)
        .all()
    )
    numbers = [int(row[0]) for row in rows if row[0] and row[0].isdigit()]
    return str(max(numbers, default=0) + 1)


def create_claim(db: Session, data: ClaimCreate) -> Claim:
    """Create a claim as Submitted / Unclassified."""
    homeowner_name = normalize_text(data.homeowner_name)
    address = normalize_text(data.address)
    submitted_at = data.date_submitted or datetime.now(timezone.utc)

    claim_id = uuid4()
    record = claim_lifecycle.submit_claim(
        str(claim_id),
        homeowner_name=homeowner_name,
        address=address,
        submitted_at=submitted_at,
    )
    claim = Claim(
        id=claim_id,
        claim_number=next_claim_number(db, homeowner_name, address),
        title=normalize_text(data.title),
        description=data.description or "",
        category=data.category,
        homeowner_name=homeowner_name,
        homeowner_email=normalize_email(data.homeowner_email),
        address=address,
        builder_name=normalize_text(data.builder_name),
        contractor_name=normalize_text(data.contractor_name),
        contractor_email=normalize_email(data.contractor_email),
        date_submitted=submitted_at,
        attachments=list(data.attachments),
    )
    _apply_record(claim, record)
    db.add(claim)
    db.commit()
    db.refresh(claim)
    logger.info("Claim created", extra={"claim_id": str(claim.id)})
    return claim


def get_claim(db: Session, claim_id: UUID) -> Claim | None:
    return db.query(Claim).filter(Claim.id == claim_id).first()


def list_claims(db: Session) -> list[Claim]:
    """All claims, newest submission first."""
    return (
        db.query(Claim)
        .order_by(Claim.date_submitted.desc(), Claim.id.asc())
        .all()
    )


def readable_claim_records(claims: Iterable[Claim]) -> list[ClaimRecord]:
    """
    Snapshots for the claims that can be represented.

    Rows with an unknown status are skipped with a warning so one bad row
    does not fail a whole listing.
    """
    records: list[ClaimRecord] = []
    for claim in claims:
        try:
            records.append(claim_to_record(claim))
        except ValueError:
            logger.warning("Skipping unreadable claim", extra={"claim_id": str(claim.id)})
    return records


def list_claim_records(
    db: Session, claims_filter: ClaimsFilter | str = ClaimsFilter.ALL
) -> list[ClaimRecord]:
    return apply_filter(readable_claim_records(list_claims(db)), claims_filter)


def apply_transition(
    db: Session,
    claim: Claim,
    transition: Callable[[ClaimRecord], ClaimRecord],
) -> Claim:
    """
    Run a lifecycle function against the claim and persist the result.

    Raises whatever the transition raises (ClaimTransitionError for
    lifecycle conflicts); nothing is written in that case.
    """
    updated = transition(claim_to_record(claim))
    _apply_record(claim, updated)
    db.commit()
    db.refresh(claim)
    return claim


def update_claim(db: Session, claim: Claim, data: ClaimUpdate) -> Claim:
    """
    Apply a staff update. Only fields present in the request are touched.

    Raises:
        ClaimTransitionError: date_evaluated is already set
        ValueError: status explicitly set to null
    """
    changes = data.model_dump(exclude_unset=True)

    def transition(record: ClaimRecord) -> ClaimRecord:
        if "status" in changes:
            if changes["status"] is None:
                raise ValueError("Status cannot be cleared")
            record = claim_lifecycle.change_status(record, changes["status"])
        if "classification" in changes:
            record = claim_lifecycle.classify(record, changes["classification"])
        if changes.get("reviewed") is not None:
            record = claim_lifecycle.mark_reviewed(record, changes["reviewed"])
        if changes.get("date_evaluated") is not None:
            record = claim_lifecycle.mark_evaluated(record, changes["date_evaluated"])
        return record

    if "contractor_name" in changes:
        claim.contractor_name = normalize_text(changes["contractor_name"])
    if "contractor_email" in changes:
        claim.contractor_email = normalize_email(changes["contractor_email"])
    if "internal_notes" in changes:
        claim.internal_notes = changes["internal_notes"]

    try:
        return apply_transition(db, claim, transition)
    except ValueError:
        db.rollback()
        raise


def delete_claim(db: Session, claim_id: UUID) -> bool:
    """Hard delete a claim and its messages. False when it does not exist."""
    claim = get_claim(db, claim_id)
    if not claim:
        return False
    try:
        db.delete(claim)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Claim deleted", extra={"claim_id": str(claim_id)})
    return True


def bulk_delete_claims(db: Session, claim_ids: list[UUID]) -> BulkDeleteResult:
    """Delete claims one by one; each success is committed on its own."""
    return bulk_delete(
        [str(claim_id) for claim_id in claim_ids],
        lambda claim_id: delete_claim(db, UUID(claim_id)),
    )


# =============================================================================
# Messages
# =============================================================================

def record_message(db: Session, claim: Claim, data: ClaimMessageCreate) -> ClaimMessage:
    message = ClaimMessage(
        claim_id=claim.id,
        message_type=data.type.value,
        subject=data.subject,
        content=data.content or "",
        recipient=normalize_text(data.recipient),
        recipient_email=normalize_email(data.recipient_email),
        sender_name=normalize_text(data.sender_name),
        sent_at=data.sent_at or datetime.now(timezone.utc),
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    return message


def list_messages(db: Session, claim_id: UUID) -> list[ClaimMessage]:
    return (
        db.query(ClaimMessage)
        .filter(ClaimMessage.claim_id == claim_id)
        .order_by(ClaimMessage.sent_at.asc(), ClaimMessage.id.asc())
        .all()
    )


def get_service_order_date(
    db: Session, claim: Claim, timezone_name: str | None = None
) -> datetime | None:
    """Timestamp of the latest service-order message sent for the claim."""
    records = [message_to_record(m) for m in list_messages(db, claim.id)]
    return find_service_order_date(str(claim.id), records, timezone=timezone_name)


# =============================================================================
# Analytics inputs
# =============================================================================

def load_analytics_inputs(
    db: Session,
) -> tuple[list[ClaimRecord], list[HomeownerRecord], list[ClaimMessageRecord]]:
    """
    Load every claim, homeowner and message as engine snapshots.

    Rows that cannot be represented (unknown status or message type) are
    skipped with a warning instead of failing the whole computation.
    """
    claims = readable_claim_records(list_claims(db))

    homeowners = [
        homeowner_to_record(h)
        for h in db.query(Homeowner).order_by(Homeowner.created_at.asc(), Homeowner.id.asc()).all()
    ]

    messages: list[ClaimMessageRecord] = []
    for message in db.query(ClaimMessage).all():
        try:
            messages.append(message_to_record(message))
        except ValueError:
            logger.warning(
                "Skipping unreadable claim message",
                extra={"claim_id": str(message.claim_id)},
            )
    return claims, homeowners, messages
