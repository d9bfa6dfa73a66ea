"""Claims router - warranty claim lifecycle, messages, export and bulk delete."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.deps import get_db
from app.core.rate_limit import limiter
from app.core.structured_logging import build_log_context
from app.db.models import Claim
from app.schemas.claim import (
    BulkDeleteFailureRead,
    BulkDeleteRequest,
    BulkDeleteResponse,
    ClaimCountsRead,
    ClaimCreate,
    ClaimListResponse,
    ClaimMessageCreate,
    ClaimMessageRead,
    ClaimRead,
    ClaimUpdate,
    CommentCreate,
    ProposedDateCreate,
    ProposedDateRespond,
    ScheduleConfirm,
    ServiceOrderDateResponse,
)
from app.services import claim_lifecycle, claim_service
from app.services.claim_export_service import export_claims_csv, generate_export_filename
from app.services.claim_lifecycle import ClaimTransitionError
from app.services.claim_selection_service import ClaimsFilter, apply_filter, calculate_claim_counts

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/claims", tags=["claims"])


def _get_claim_or_404(db: Session, claim_id: UUID) -> Claim:
    claim = claim_service.get_claim(db, claim_id)
    if not claim:
        raise HTTPException(status_code=404, detail="Claim not found")
    return claim


def _transition(db: Session, claim: Claim, transition) -> ClaimRead:
    """Apply a lifecycle change; conflicts are 409, other bad input 400."""
    try:
        claim = claim_service.apply_transition(db, claim, transition)
    except ClaimTransitionError as exc:
        db.rollback()
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ValueError as exc:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return claim_service.to_claim_read(claim)


# =============================================================================
# Collection
# =============================================================================

@router.get("", response_model=ClaimListResponse)
def list_claims(
    claims_filter: ClaimsFilter = Query(ClaimsFilter.ALL, alias="filter"),
    db: Session = Depends(get_db),
):
    """List claims (newest first) with Open/Closed/All counts over every claim."""
    claims = claim_service.list_claims(db)
    records = claim_service.readable_claim_records(claims)
    visible = {r.id for r in apply_filter(records, claims_filter)}
    counts = calculate_claim_counts(records)
    return ClaimListResponse(
        items=[claim_service.to_claim_read(c) for c in claims if str(c.id) in visible],
        counts=ClaimCountsRead(open=counts.open, closed=counts.closed, total=counts.total),
    )


@router.post("", response_model=ClaimRead, status_code=201)
def create_claim(data: ClaimCreate, db: Session = Depends(get_db)):
    claim = claim_service.create_claim(db, data)
    return claim_service.to_claim_read(claim)


@router.get("/export")
@limiter.limit(settings.RATE_LIMIT_BULK)
def export_claims(
    request: Request,
    claims_filter: ClaimsFilter = Query(ClaimsFilter.ALL, alias="filter"),
    db: Session = Depends(get_db),
) -> Response:
    """Export the filtered claim list (CSV)."""
    records = claim_service.list_claim_records(db)
    payload = export_claims_csv(records, claims_filter)
    filename = generate_export_filename(claims_filter)
    logger.info(
        "Claims exported",
        extra=build_log_context(route="/claims/export", method="GET"),
    )
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return Response(content=payload, media_type="text/csv", headers=headers)


@router.post("/bulk-delete", response_model=BulkDeleteResponse)
@limiter.limit(settings.RATE_LIMIT_BULK)
def bulk_delete_claims(
    request: Request,
    data: BulkDeleteRequest,
    db: Session = Depends(get_db),
):
    """
    Hard delete the selected claims.

    Deletions are independent: a failure on one id does not undo the
    others. Failed ids come back with a reason.
    """
    if not data.confirm:
        raise HTTPException(status_code=400, detail="Bulk delete requires confirm=true")
    if len(data.claim_ids) > settings.BULK_DELETE_MAX:
        raise HTTPException(
            status_code=400,
            detail=f"Too many claims selected ({len(data.claim_ids)}). Max {settings.BULK_DELETE_MAX}.",
        )

    result = claim_service.bulk_delete_claims(db, data.claim_ids)
    logger.info(
        "Bulk delete finished: %d deleted, %d failed",
        len(result.deleted),
        len(result.failed),
        extra=build_log_context(route="/claims/bulk-delete", method="POST"),
    )
    return BulkDeleteResponse(
        requested=result.requested,
        deleted=result.deleted,
        failed=[BulkDeleteFailureRead(claim_id=f.claim_id, reason=f.reason) for f in result.failed],
    )


# =============================================================================
# Single claim
# =============================================================================

@router.get("/{claim_id}", response_model=ClaimRead)
def get_claim(claim_id: UUID, db: Session = Depends(get_db)):
    return claim_service.to_claim_read(_get_claim_or_404(db, claim_id))


@router.patch("/{claim_id}", response_model=ClaimRead)
def update_claim(claim_id: UUID, data: ClaimUpdate, db: Session = Depends(get_db)):
    """Staff update: status, classification, reviewed flag, evaluation date."""
    claim = _get_claim_or_404(db, claim_id)
    try:
        claim = claim_service.update_claim(db, claim, data)
    except ClaimTransitionError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return claim_service.to_claim_read(claim)


@router.post("/{claim_id}/comments", response_model=ClaimRead, status_code=201)
def add_comment(claim_id: UUID, data: CommentCreate, db: Session = Depends(get_db)):
    claim = _get_claim_or_404(db, claim_id)
    return _transition(
        db,
        claim,
        lambda record: claim_lifecycle.add_comment(
            record,
            author=data.author,
            role=data.role,
            text=data.text,
            timestamp=data.timestamp,
        ),
    )


@router.post("/{claim_id}/proposed-dates", response_model=ClaimRead, status_code=201)
def propose_date(claim_id: UUID, data: ProposedDateCreate, db: Session = Depends(get_db)):
    claim = _get_claim_or_404(db, claim_id)
    return _transition(
        db, claim, lambda record: claim_lifecycle.propose_date(record, data.date, data.time_slot)
    )


@router.post("/{claim_id}/proposed-dates/{index}/respond", response_model=ClaimRead)
def respond_to_proposed_date(
    claim_id: UUID,
    index: int,
    data: ProposedDateRespond,
    db: Session = Depends(get_db),
):
    """Accept (claim becomes Scheduled) or reject one proposed date."""
    claim = _get_claim_or_404(db, claim_id)
    return _transition(
        db,
        claim,
        lambda record: claim_lifecycle.respond_to_proposed_date(record, index, accept=data.accept),
    )


@router.post("/{claim_id}/schedule", response_model=ClaimRead)
def confirm_schedule(claim_id: UUID, data: ScheduleConfirm, db: Session = Depends(get_db)):
    claim = _get_claim_or_404(db, claim_id)
    return _transition(
        db, claim, lambda record: claim_lifecycle.confirm_schedule(record, data.date, data.time_slot)
    )


@router.post("/{claim_id}/reschedule", response_model=ClaimRead)
def reschedule(claim_id: UUID, db: Session = Depends(get_db)):
    claim = _get_claim_or_404(db, claim_id)
    return _transition(db, claim, claim_lifecycle.reschedule)


# =============================================================================
# Messages
# =============================================================================

@router.get("/{claim_id}/messages", response_model=list[ClaimMessageRead])
def list_messages(claim_id: UUID, db: Session = Depends(get_db)):
    _get_claim_or_404(db, claim_id)
    return claim_service.list_messages(db, claim_id)


@router.post("/{claim_id}/messages", response_model=ClaimMessageRead, status_code=201)
def record_message(claim_id: UUID, data: ClaimMessageCreate, db: Session = Depends(get_db)):
    """Track a message sent about a claim (e.g. a subcontractor service order)."""
    claim = _get_claim_or_404(db, claim_id)
    message = claim_service.record_message(db, claim, data)
    logger.info(
        "Claim message recorded",
        extra=build_log_context(claim_id=str(claim_id), route="/claims/messages", method="POST"),
    )
    return message


@router.get("/{claim_id}/service-order", response_model=ServiceOrderDateResponse)
def get_service_order_date(claim_id: UUID, db: Session = Depends(get_db)):
    claim = _get_claim_or_404(db, claim_id)
    return ServiceOrderDateResponse(
        claim_id=claim.id,
        service_order_date=claim_service.get_service_order_date(
            db, claim, settings.BUSINESS_TIMEZONE
        ),
    )
