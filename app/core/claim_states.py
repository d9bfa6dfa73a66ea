"""Claim status and classification category tables.

Status and classification are independent axes with no enforced transition
graph. Every aggregate category (open, new, in process, approved, needs
attention) is read from these tables, so each table must list every enum
member. Adding a member without extending the tables fails at import.
"""

from __future__ import annotations

from typing import NamedTuple

from app.db.enums import ClaimClassification, ClaimStatus


class StatusRule(NamedTuple):
    is_open: bool
    is_new: bool
    in_process: bool


class ClassificationRule(NamedTuple):
    is_assigned: bool
    needs_attention: bool


STATUS_RULES: dict[ClaimStatus, StatusRule] = {
    ClaimStatus.SUBMITTED: StatusRule(is_open=True, is_new=True, in_process=False),
    ClaimStatus.REVIEWING: StatusRule(is_open=True, is_new=False, in_process=False),
    ClaimStatus.SCHEDULING: StatusRule(is_open=True, is_new=False, in_process=True),
    ClaimStatus.SCHEDULED: StatusRule(is_open=True, is_new=False, in_process=True),
    ClaimStatus.COMPLETED: StatusRule(is_open=False, is_new=False, in_process=False),
    # Closed is not completed, so it stays in the open partition.
    ClaimStatus.CLOSED: StatusRule(is_open=True, is_new=False, in_process=False),
}

CLASSIFICATION_RULES: dict[ClaimClassification, ClassificationRule] = {
    ClaimClassification.SIXTY_DAY: ClassificationRule(is_assigned=True, needs_attention=False),
    ClaimClassification.ELEVEN_MONTH: ClassificationRule(is_assigned=True, needs_attention=False),
    ClaimClassification.NON_WARRANTY: ClassificationRule(is_assigned=True, needs_attention=False),
    ClaimClassification.COURTESY_REPAIR: ClassificationRule(is_assigned=True, needs_attention=False),
    ClaimClassification.HOLD_FOR_ELEVEN_MONTH: ClassificationRule(
        is_assigned=True, needs_attention=False
    ),
    ClaimClassification.NEEDS_ATTENTION: ClassificationRule(is_assigned=True, needs_attention=True),
    ClaimClassification.OTHER: ClassificationRule(is_assigned=True, needs_attention=False),
    ClaimClassification.SERVICE_COMPLETE: ClassificationRule(is_assigned=True, needs_attention=False),
    ClaimClassification.DUPLICATE: ClassificationRule(is_assigned=True, needs_attention=False),
    ClaimClassification.UNCLASSIFIED: ClassificationRule(is_assigned=False, needs_attention=False),
}


def _check_exhaustive() -> None:
    missing_status = set(ClaimStatus) - set(STATUS_RULES)
    if missing_status:
        raise RuntimeError(f"STATUS_RULES missing: {sorted(s.value for s in missing_status)}")
    missing_classification = set(ClaimClassification) - set(CLASSIFICATION_RULES)
    if missing_classification:
        raise RuntimeError(
            "CLASSIFICATION_RULES missing: "
            f"{sorted(c.value for c in missing_classification)}"
        )


_check_exhaustive()


def status_is_open(status: ClaimStatus) -> bool:
    return STATUS_RULES[status].is_open


def status_is_in_process_or_new(status: ClaimStatus) -> bool:
    rule = STATUS_RULES[status]
    return rule.in_process or rule.is_new


def is_approval_eligible(status: ClaimStatus, classification: ClaimClassification | None) -> bool:
    """Open, past intake, and carrying a real classification."""
    if classification is None:
        return False
    rule = STATUS_RULES[status]
    return rule.is_open and not rule.is_new and CLASSIFICATION_RULES[classification].is_assigned


def classification_needs_attention(classification: ClaimClassification | None) -> bool:
    if classification is None:
        return False
    return CLASSIFICATION_RULES[classification].needs_attention
