"""Pydantic schemas for warranty claims."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.db.enums import (
    ClaimClassification,
    ClaimMessageType,
    ClaimStatus,
    CommentRole,
    ProposedDateStatus,
    TimeSlot,
)


# =============================================================================
# Requests
# =============================================================================


class ClaimCreate(BaseModel):
    """Homeowner submission. Status and classification are always defaulted."""
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field("", max_length=5000)
    category: str = Field("General", min_length=1, max_length=100)
    homeowner_name: str = Field(..., min_length=1, max_length=255)
    homeowner_email: EmailStr | None = None
    address: str = Field(..., min_length=1, max_length=1000)
    builder_name: str | None = Field(None, max_length=255)
    contractor_name: str | None = Field(None, max_length=255)
    contractor_email: EmailStr | None = None
    attachments: list[str] = Field(default_factory=list, max_length=50)
    date_submitted: datetime | None = None


class ClaimUpdate(BaseModel):
    """Staff update (partial). Only fields that are sent are applied."""
    model_config = ConfigDict(extra="forbid")

    status: ClaimStatus | None = None
    classification: ClaimClassification | None = None
    reviewed: bool | None = None
    date_evaluated: datetime | None = None
    contractor_name: str | None = Field(None, max_length=255)
    contractor_email: EmailStr | None = None
    internal_notes: str | None = Field(None, max_length=5000)


class CommentCreate(BaseModel):
    author: str = Field(..., min_length=1, max_length=255)
    role: CommentRole = CommentRole.ADMIN
    text: str = Field(..., min_length=1, max_length=5000)
    timestamp: datetime | None = None


class ProposedDateCreate(BaseModel):
    date: datetime
    time_slot: TimeSlot = TimeSlot.ALL_DAY


class ProposedDateRespond(BaseModel):
    accept: bool


class ScheduleConfirm(BaseModel):
    date: datetime
    time_slot: TimeSlot = TimeSlot.ALL_DAY


class BulkDeleteRequest(BaseModel):
    """Admin bulk delete. `confirm` must be true; the UI asks first."""
    claim_ids: list[UUID] = Field(..., min_length=1)
    confirm: bool = False


class ClaimMessageCreate(BaseModel):
    type: ClaimMessageType
    subject: str = Field(..., min_length=1, max_length=500)
    content: str = Field("", max_length=20000)
    recipient: str | None = Field(None, max_length=255)
    recipient_email: EmailStr | None = None
    sender_name: str | None = Field(None, max_length=255)
    sent_at: datetime | None = None


# =============================================================================
# Responses
# =============================================================================


class ProposedDateRead(BaseModel):
    date: datetime | None
    time_slot: TimeSlot
    status: ProposedDateStatus


class ClaimCommentRead(BaseModel):
    author: str
    role: CommentRole
    text: str
    timestamp: datetime | None


class ClaimRead(BaseModel):
    """Full claim response."""
    id: UUID
    claim_number: str  # Formatted; falls back to the short id
    title: str
    description: str
    category: str
    homeowner_name: str
    homeowner_email: str | None
    address: str
    builder_name: str | None
    contractor_name: str | None
    contractor_email: str | None
    status: ClaimStatus
    classification: ClaimClassification
    reviewed: bool
    is_open: bool
    date_submitted: datetime
    date_evaluated: datetime | None
    scheduled_date: ProposedDateRead | None = None
    proposed_dates: list[ProposedDateRead] = Field(default_factory=list)
    comments: list[ClaimCommentRead] = Field(default_factory=list)
    attachment_count: int = 0
    internal_notes: str | None = None
    updated_at: datetime


class ClaimSummary(BaseModel):
    """Compact claim for analytics lists."""
    id: UUID
    claim_number: str
    title: str
    homeowner_name: str
    status: ClaimStatus
    classification: ClaimClassification


class ClaimCountsRead(BaseModel):
    open: int
    closed: int
    total: int


class ClaimListResponse(BaseModel):
    items: list[ClaimRead]
    counts: ClaimCountsRead


class BulkDeleteFailureRead(BaseModel):
    claim_id: str
    reason: str


class BulkDeleteResponse(BaseModel):
    requested: int
    deleted: list[str]
    failed: list[BulkDeleteFailureRead]


class ClaimMessageRead(BaseModel):
    id: UUID
    claim_id: UUID
    type: ClaimMessageType = Field(validation_alias="message_type")
    subject: str
    content: str
    recipient: str | None
    recipient_email: str | None
    sender_name: str | None
    sent_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class ServiceOrderDateResponse(BaseModel):
    """Latest service-order message time; null when none was sent."""
    claim_id: UUID
    service_order_date: datetime | None
