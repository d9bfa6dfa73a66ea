"""Homeowner service - builder groups and homeowner enrollment."""

from uuid import UUID

from sqlalchemy.orm import Session

from app.db.models import BuilderGroup, Homeowner
from app.schemas.homeowner import BuilderGroupCreate, HomeownerCreate
from app.services.claim_records import HomeownerRecord
from app.utils.normalization import normalize_email, normalize_phone, normalize_text


# =============================================================================
# Builder groups
# =============================================================================

def create_builder_group(db: Session, data: BuilderGroupCreate) -> BuilderGroup:
    group = BuilderGroup(
        name=normalize_text(data.name),
        email=normalize_email(data.email),
        primary_contact=normalize_text(data.primary_contact),
    )
    db.add(group)
    db.commit()
    db.refresh(group)
    return group


def get_builder_group(db: Session, builder_group_id: UUID) -> BuilderGroup | None:
    return db.query(BuilderGroup).filter(BuilderGroup.id == builder_group_id).first()


def list_builder_groups(db: Session) -> list[BuilderGroup]:
    return db.query(BuilderGroup).order_by(BuilderGroup.name.asc()).all()


# =============================================================================
# Homeowners
# =============================================================================

def create_homeowner(db: Session, data: HomeownerCreate) -> Homeowner:
    """
    Enroll a homeowner.

    Raises:
        ValueError: Unknown builder group or invalid phone number
    """
    if data.builder_group_id and not get_builder_group(db, data.builder_group_id):
        raise ValueError("Builder group not found")

    homeowner = Homeowner(
        builder_group_id=data.builder_group_id,
        name=normalize_text(data.name),
        address=normalize_text(data.address),
        email=normalize_email(data.email),
        phone=normalize_phone(data.phone),
        job_name=normalize_text(data.job_name),
        closing_date=data.closing_date,
    )
    db.add(homeowner)
    db.commit()
    db.refresh(homeowner)
    return homeowner


def list_homeowners(db: Session, builder_group_id: UUID | None = None) -> list[Homeowner]:
    """All homeowners in enrollment order, optionally for one builder group."""
    query = db.query(Homeowner)
    if builder_group_id:
        query = query.filter(Homeowner.builder_group_id == builder_group_id)
    return query.order_by(Homeowner.created_at.asc(), Homeowner.id.asc()).all()


def homeowner_to_record(homeowner: Homeowner) -> HomeownerRecord:
    return HomeownerRecord(
        id=str(homeowner.id),
        name=homeowner.name,
        address=homeowner.address,
        closing_date=homeowner.closing_date,
        builder_id=str(homeowner.builder_group_id) if homeowner.builder_group_id else None,
    )
