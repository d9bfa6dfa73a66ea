"""Tests for claim-to-homeowner attribution and builder-group scoping."""

from datetime import date, datetime, timedelta, timezone

from app.db.enums import ClaimClassification, ClaimStatus
from app.services.claim_records import ClaimRecord, HomeownerRecord
from app.services.homeowner_attribution_service import (
    HomeownerIndex,
    approved_claimant_ids,
    claimant_ids,
    count_active_homeowners,
    filter_claims_by_builder,
    filter_homeowners_by_builder,
    in_process_and_new_claims,
    needs_attention_claims,
    resolve_claim_homeowner,
)

AS_OF = datetime(2024, 6, 30, 12, tzinfo=timezone.utc)


def _claim(claim_id, name, address, **fields):
    return ClaimRecord(
        id=claim_id,
        homeowner_name=name,
        address=address,
        date_submitted=datetime(2024, 1, 1, 12, tzinfo=timezone.utc),
        **fields,
    )


HOMEOWNERS = [
    HomeownerRecord(id="h1", name="Dana Smith", address="12 Oak Lane", builder_id="b1"),
    HomeownerRecord(id="h2", name="Lee Park", address="9 Elm Court", builder_id="b2"),
    HomeownerRecord(id="h3", name="Sam Reyes", address="4 Pine Road", builder_id="b1"),
]


def test_resolve_requires_exact_name_and_address():
    assert resolve_claim_homeowner(_claim("c1", "Dana Smith", "12 Oak Lane"), HOMEOWNERS).id == "h1"
    assert resolve_claim_homeowner(_claim("c2", "Dana Smith", "12 Oak Ln"), HOMEOWNERS) is None
    assert resolve_claim_homeowner(_claim("c3", "dana smith", "12 Oak Lane"), HOMEOWNERS) is None


def test_index_keeps_first_duplicate():
    duplicate = HomeownerRecord(id="h9", name="Dana Smith", address="12 Oak Lane")
    index = HomeownerIndex(HOMEOWNERS + [duplicate])
    assert index.resolve(_claim("c1", "Dana Smith", "12 Oak Lane")).id == "h1"
    assert len(index) == 3


def test_builder_scoping():
    assert [h.id for h in filter_homeowners_by_builder(HOMEOWNERS, "b1")] == ["h1", "h3"]
    assert len(filter_homeowners_by_builder(HOMEOWNERS, "all")) == 3
    assert len(filter_homeowners_by_builder(HOMEOWNERS, None)) == 3
    assert filter_homeowners_by_builder(HOMEOWNERS, "unknown") == []

    claims = [
        _claim("c1", "Dana Smith", "12 Oak Lane"),
        _claim("c2", "Lee Park", "9 Elm Court"),
        _claim("c3", "Nobody", "Nowhere"),
    ]
    assert [c.id for c in filter_claims_by_builder(claims, HOMEOWNERS, "b1")] == ["c1"]
    assert [c.id for c in filter_claims_by_builder(claims, HOMEOWNERS, "all")] == ["c1", "c2", "c3"]


def test_active_homeowner_window():
    homeowners = [
        HomeownerRecord(id="old", name="A", address="1", closing_date=(AS_OF - timedelta(days=400)).date()),
        HomeownerRecord(id="new", name="B", address="2", closing_date=(AS_OF - timedelta(days=300)).date()),
        HomeownerRecord(id="none", name="C", address="3"),
        HomeownerRecord(id="bad", name="D", address="4", closing_date="sometime"),
        HomeownerRecord(id="epoch", name="F", address="6", closing_date="999999999999"),
        HomeownerRecord(id="edge", name="E", address="5", closing_date=date(2023, 7, 1)),
    ]
    # Cutoff is 2023-07-01; the boundary day counts.
    assert count_active_homeowners(homeowners, as_of=AS_OF) == 2
    assert count_active_homeowners(homeowners, as_of=AS_OF, window_days=30) == 0


def test_two_claims_same_homeowner_count_once():
    claims = [
        _claim("c1", "Dana Smith", "12 Oak Lane"),
        _claim("c2", "Dana Smith", "12 Oak Lane"),
    ]
    assert claimant_ids(claims, HOMEOWNERS) == {"h1"}


def test_unattributed_claims_are_not_claimants():
    assert claimant_ids([_claim("c1", "Ghost", "Nowhere")], HOMEOWNERS) == set()


def test_approved_claimants_subset_of_claimants():
    claims = [
        _claim("c1", "Dana Smith", "12 Oak Lane", status=ClaimStatus.SCHEDULING,
               classification=ClaimClassification.SIXTY_DAY),
        _claim("c2", "Lee Park", "9 Elm Court", status=ClaimStatus.SCHEDULING),
        _claim("c3", "Sam Reyes", "4 Pine Road", status=ClaimStatus.COMPLETED,
               classification=ClaimClassification.ELEVEN_MONTH),
    ]
    approved = approved_claimant_ids(claims, HOMEOWNERS)
    assert approved == {"h1"}
    assert approved <= claimant_ids(claims, HOMEOWNERS)


def test_category_lists_preserve_order():
    claims = [
        _claim("c1", "A", "1", status=ClaimStatus.REVIEWING,
               classification=ClaimClassification.NEEDS_ATTENTION),
        _claim("c2", "B", "2", status=ClaimStatus.SCHEDULED),
        _claim("c3", "C", "3", status=ClaimStatus.SUBMITTED,
               classification=ClaimClassification.NEEDS_ATTENTION),
        _claim("c4", "D", "4", status=ClaimStatus.COMPLETED),
    ]
    assert [c.id for c in needs_attention_claims(claims)] == ["c1", "c3"]
    assert [c.id for c in in_process_and_new_claims(claims)] == ["c2", "c3"]
