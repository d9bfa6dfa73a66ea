"""Warranty claim enums."""

from enum import Enum


class ClaimStatus(str, Enum):
    """
    Workflow position of a warranty claim.

    Typical flow:
        submitted → reviewing → scheduling → scheduled → completed

    `closed` is set by staff for claims that leave the workflow without
    service. It is not `completed`, so it still counts as open.
    """

    SUBMITTED = "SUBMITTED"
    REVIEWING = "REVIEWING"
    SCHEDULING = "SCHEDULING"
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CLOSED = "CLOSED"

    @classmethod
    def parse(cls, value: "ClaimStatus | str") -> "ClaimStatus":
        """Resolve a status from its value or label; raise on unknown input."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper()
            for member in cls:
                if member.value == key:
                    return member
        raise ValueError(f"Unknown claim status: {value!r}")


class ClaimClassification(str, Enum):
    """Staff-assigned warranty disposition. Independent of status."""

    SIXTY_DAY = "60 Day"
    ELEVEN_MONTH = "11 Month"
    NON_WARRANTY = "Non-Warranty"
    COURTESY_REPAIR = "Courtesy Repair (Non-Warranty)"
    HOLD_FOR_ELEVEN_MONTH = "Hold for 11 Month"
    NEEDS_ATTENTION = "Needs Attention"
    OTHER = "Other"
    SERVICE_COMPLETE = "Service Complete"
    DUPLICATE = "Duplicate"
    UNCLASSIFIED = "Unclassified"

    @classmethod
    def coerce(cls, value: "ClaimClassification | str | None") -> "ClaimClassification":
        """Resolve a classification, falling back to UNCLASSIFIED.

        Matching is case-insensitive on the value; "Courtesy Repair" is
        accepted as a short form of the courtesy repair label.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str) or not value.strip():
            return cls.UNCLASSIFIED
        key = value.strip().lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        if key == "courtesy repair":
            return cls.COURTESY_REPAIR
        return cls.UNCLASSIFIED


class ClaimMessageType(str, Enum):
    """Who a tracked claim communication was exchanged with."""

    HOMEOWNER = "HOMEOWNER"
    SUBCONTRACTOR = "SUBCONTRACTOR"
    INTERNAL = "INTERNAL"


class ProposedDateStatus(str, Enum):
    """Negotiation state of a proposed service date."""

    PROPOSED = "PROPOSED"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class TimeSlot(str, Enum):
    AM = "AM"
    PM = "PM"
    ALL_DAY = "All Day"


class CommentRole(str, Enum):
    """Role of a comment author."""

    HOMEOWNER = "HOMEOWNER"
    ADMIN = "ADMIN"
    BUILDER = "BUILDER"
