"""In-memory claim, homeowner and message snapshots consumed by the engine.

These are frozen values built from ORM rows (or test fixtures). Date fields
accept datetimes, dates or raw strings; unparseable values are tolerated
here and excluded later by the metric that needs them.
"""

from __future__ import annotations

from dataclasses import dataclass

from app.db.enums import (
    ClaimClassification,
    ClaimMessageType,
    ClaimStatus,
    CommentRole,
    ProposedDateStatus,
    TimeSlot,
)
from app.utils.datetime_parsing import DateLike


@dataclass(frozen=True)
class ProposedDate:
    date: DateLike
    time_slot: TimeSlot = TimeSlot.ALL_DAY
    status: ProposedDateStatus = ProposedDateStatus.PROPOSED

    def __post_init__(self) -> None:
        object.__setattr__(self, "time_slot", TimeSlot(self.time_slot))
        object.__setattr__(self, "status", ProposedDateStatus(self.status))


@dataclass(frozen=True)
class ClaimComment:
    author: str
    role: CommentRole
    text: str
    timestamp: DateLike

    def __post_init__(self) -> None:
        object.__setattr__(self, "role", CommentRole(self.role))


@dataclass(frozen=True)
class ClaimRecord:
    """
    A warranty claim as of one read.

    `homeowner_name` and `address` are the values captured at submission.
    They are not a link to a homeowner row; see homeowner_attribution_service.
    """

    id: str
    homeowner_name: str
    address: str
    date_submitted: DateLike
    status: ClaimStatus = ClaimStatus.SUBMITTED
    classification: ClaimClassification = ClaimClassification.UNCLASSIFIED
    claim_number: str | None = None
    title: str = ""
    description: str = ""
    homeowner_email: str | None = None
    contractor_name: str | None = None
    date_evaluated: DateLike | None = None
    reviewed: bool = False
    proposed_dates: tuple[ProposedDate, ...] = ()
    comments: tuple[ClaimComment, ...] = ()
    attachment_count: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(self, "status", ClaimStatus.parse(self.status))
        object.__setattr__(self, "classification", ClaimClassification.coerce(self.classification))
        object.__setattr__(self, "proposed_dates", tuple(self.proposed_dates))
        object.__setattr__(self, "comments", tuple(self.comments))


@dataclass(frozen=True)
class HomeownerRecord:
    id: str
    name: str
    address: str
    closing_date: DateLike | None = None
    builder_id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", str(self.id))
        if self.builder_id is not None:
            object.__setattr__(self, "builder_id", str(self.builder_id))


@dataclass(frozen=True)
class ClaimMessageRecord:
    """A tracked communication linked to a claim by id."""

    id: str
    claim_id: str
    type: ClaimMessageType
    subject: str
    timestamp: DateLike
    recipient: str | None = None
    sender_name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(self, "claim_id", str(self.claim_id))
        object.__setattr__(self, "type", ClaimMessageType(self.type))
