"""SQLAlchemy ORM models for builder groups, homeowners, claims and claim messages."""

import uuid
from datetime import date, datetime

from sqlalchemy import (
    JSON, Boolean, Date, ForeignKey, Index, String, Text, Uuid, func, text
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.db.enums import DEFAULT_CLAIM_CLASSIFICATION, DEFAULT_CLAIM_STATUS


# =============================================================================
# Tenancy
# =============================================================================

class BuilderGroup(Base):
    """
    A builder company. Scopes homeowners (and, through attribution, claims).
    """
    __tablename__ = "builder_groups"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    primary_contact: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)

    homeowners: Mapped[list["Homeowner"]] = relationship(back_populates="builder_group")


class Homeowner(Base):
    """
    Property owner enrolled for warranty service.

    Claims do not reference this table; they keep a copy of name/address.
    """
    __tablename__ = "homeowners"
    __table_args__ = (
        Index("idx_homeowners_builder_group", "builder_group_id"),
        Index("idx_homeowners_name_address", "name", "address"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    builder_group_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("builder_groups.id", ondelete="SET NULL"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    job_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    closing_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)

    builder_group: Mapped[BuilderGroup | None] = relationship(back_populates="homeowners")


# =============================================================================
# Claims
# =============================================================================

class Claim(Base):
    """
    Warranty service request.

    - status / classification: independent axes (see app.core.claim_states)
    - date_evaluated: set once by staff after the initial review
    - proposed_dates / comments: JSON arrays, append-ordered
    - Hard delete only; messages cascade.
    """
    __tablename__ = "claims"
    __table_args__ = (
        Index("idx_claims_status", "status"),
        Index("idx_claims_homeowner_snapshot", "homeowner_name", "address"),
        Index("idx_claims_submitted", "date_submitted"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    claim_number: Mapped[str | None] = mapped_column(String(30), nullable=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="General")

    # Homeowner snapshot (captured at submission)
    homeowner_name: Mapped[str] = mapped_column(String(255), nullable=False)
    homeowner_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    builder_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Assignment
    contractor_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contractor_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DEFAULT_CLAIM_STATUS.value
    )
    classification: Mapped[str] = mapped_column(
        String(50), nullable=False, default=DEFAULT_CLAIM_CLASSIFICATION.value
    )
    reviewed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )

    date_submitted: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    date_evaluated: Mapped[datetime | None] = mapped_column(nullable=True)

    proposed_dates: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    comments: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    attachments: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    internal_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )

    messages: Mapped[list["ClaimMessage"]] = relationship(
        back_populates="claim",
        cascade="all, delete-orphan",
    )


class ClaimMessage(Base):
    """Tracked outbound/inbound communication about a claim."""
    __tablename__ = "claim_messages"
    __table_args__ = (
        Index("idx_claim_messages_claim_type", "claim_id", "message_type"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    claim_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("claims.id", ondelete="CASCADE"), nullable=False
    )
    message_type: Mapped[str] = mapped_column(String(20), nullable=False)
    subject: Mapped[str] = mapped_column(String(500), nullable=False)
    recipient: Mapped[str | None] = mapped_column(String(255), nullable=True)
    recipient_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    sender_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    sent_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)

    claim: Mapped[Claim] = relationship(back_populates="messages")
