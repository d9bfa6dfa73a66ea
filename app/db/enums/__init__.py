"""Enum definitions for application constants."""

from app.db.enums.claims import (
    ClaimClassification,
    ClaimMessageType,
    ClaimStatus,
    CommentRole,
    ProposedDateStatus,
    TimeSlot,
)
from app.db.enums.defaults import (
    DEFAULT_CLAIM_CLASSIFICATION,
    DEFAULT_CLAIM_STATUS,
    DEFAULT_PROPOSED_DATE_STATUS,
    DEFAULT_TIME_SLOT,
)

__all__ = [
    "ClaimClassification",
    "ClaimMessageType",
    "ClaimStatus",
    "CommentRole",
    "ProposedDateStatus",
    "TimeSlot",
    "DEFAULT_CLAIM_CLASSIFICATION",
    "DEFAULT_CLAIM_STATUS",
    "DEFAULT_PROPOSED_DATE_STATUS",
    "DEFAULT_TIME_SLOT",
]
