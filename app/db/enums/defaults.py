"""Centralized defaults for enums."""

from app.db.enums.claims import (
    ClaimClassification,
    ClaimStatus,
    ProposedDateStatus,
    TimeSlot,
)


DEFAULT_CLAIM_STATUS: ClaimStatus = ClaimStatus.SUBMITTED
DEFAULT_CLAIM_CLASSIFICATION: ClaimClassification = ClaimClassification.UNCLASSIFIED
DEFAULT_PROPOSED_DATE_STATUS: ProposedDateStatus = ProposedDateStatus.PROPOSED
DEFAULT_TIME_SLOT: TimeSlot = TimeSlot.ALL_DAY
