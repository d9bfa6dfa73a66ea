"""Tests for claim status/classification category tables."""

import pytest

from app.core.claim_states import (
    CLASSIFICATION_RULES,
    STATUS_RULES,
    classification_needs_attention,
    is_approval_eligible,
    status_is_in_process_or_new,
    status_is_open,
)
from app.db.enums import ClaimClassification, ClaimStatus


def test_tables_cover_every_member():
    assert set(STATUS_RULES) == set(ClaimStatus)
    assert set(CLASSIFICATION_RULES) == set(ClaimClassification)


def test_open_means_not_completed():
    for status in ClaimStatus:
        assert status_is_open(status) is (status != ClaimStatus.COMPLETED)


def test_in_process_and_new_statuses():
    expected = {ClaimStatus.SCHEDULING, ClaimStatus.SCHEDULED, ClaimStatus.SUBMITTED}
    assert {s for s in ClaimStatus if status_is_in_process_or_new(s)} == expected


def test_unclassified_is_never_approval_eligible():
    for status in ClaimStatus:
        assert not is_approval_eligible(status, ClaimClassification.UNCLASSIFIED)
        assert not is_approval_eligible(status, None)


@pytest.mark.parametrize(
    "status,expected",
    [
        (ClaimStatus.SUBMITTED, False),
        (ClaimStatus.REVIEWING, True),
        (ClaimStatus.SCHEDULING, True),
        (ClaimStatus.SCHEDULED, True),
        (ClaimStatus.COMPLETED, False),
        (ClaimStatus.CLOSED, True),
    ],
)
def test_approval_eligibility_by_status(status, expected):
    assert is_approval_eligible(status, ClaimClassification.SIXTY_DAY) is expected


def test_only_needs_attention_classification_flags():
    flagged = {c for c in ClaimClassification if classification_needs_attention(c)}
    assert flagged == {ClaimClassification.NEEDS_ATTENTION}
    assert classification_needs_attention(None) is False


def test_status_parse_is_case_insensitive_and_strict():
    assert ClaimStatus.parse("scheduled") == ClaimStatus.SCHEDULED
    assert ClaimStatus.parse(" Completed ") == ClaimStatus.COMPLETED
    with pytest.raises(ValueError):
        ClaimStatus.parse("ARCHIVED")


def test_classification_coerce_falls_back_to_unclassified():
    assert ClaimClassification.coerce("11 month") == ClaimClassification.ELEVEN_MONTH
    assert ClaimClassification.coerce("Courtesy Repair") == ClaimClassification.COURTESY_REPAIR
    assert ClaimClassification.coerce("Warranty-ish") == ClaimClassification.UNCLASSIFIED
    assert ClaimClassification.coerce(None) == ClaimClassification.UNCLASSIFIED
    assert ClaimClassification.coerce("") == ClaimClassification.UNCLASSIFIED
