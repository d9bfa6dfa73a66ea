"""Tests for the claims API."""

import uuid

import pytest
from httpx import AsyncClient

from app.db.models import Claim, ClaimMessage


async def _create_claim(client: AsyncClient, **overrides) -> dict:
    payload = {
        "title": "Cracked tile in kitchen",
        "description": "Two tiles cracked near the dishwasher",
        "homeowner_name": "Dana Smith",
        "homeowner_email": "Dana@Example.com",
        "address": "12 Oak Lane",
        "date_submitted": "2024-01-01T12:00:00Z",
    }
    payload.update(overrides)
    response = await client.post("/claims", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


# =============================================================================
# Create / read / list
# =============================================================================

@pytest.mark.asyncio
async def test_create_claim_defaults(client: AsyncClient):
    claim = await _create_claim(client)
    assert claim["status"] == "SUBMITTED"
    assert claim["classification"] == "Unclassified"
    assert claim["reviewed"] is False
    assert claim["is_open"] is True
    assert claim["claim_number"] == "1"
    assert claim["homeowner_email"] == "dana@example.com"
    assert claim["date_evaluated"] is None
    assert claim["proposed_dates"] == []
    assert claim["comments"] == []


@pytest.mark.asyncio
async def test_claim_numbers_are_sequential_per_homeowner(client: AsyncClient):
    first = await _create_claim(client)
    second = await _create_claim(client, title="Sticky door")
    other = await _create_claim(client, homeowner_name="Lee Park", address="9 Elm Court")
    assert [first["claim_number"], second["claim_number"], other["claim_number"]] == ["1", "2", "1"]


@pytest.mark.asyncio
async def test_create_claim_validation(client: AsyncClient):
    response = await client.post("/claims", json={"title": "", "homeowner_name": "A", "address": "B"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_get_claim_not_found(client: AsyncClient):
    response = await client.get(f"/claims/{uuid.uuid4()}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_claims_filter_and_counts(client: AsyncClient):
    open_claim = await _create_claim(client)
    done = await _create_claim(client, title="Fixed already")
    await client.patch(f"/claims/{done['id']}", json={"status": "COMPLETED"})

    response = await client.get("/claims", params={"filter": "Open"})
    assert response.status_code == 200
    data = response.json()
    assert [c["id"] for c in data["items"]] == [open_claim["id"]]
    assert data["counts"] == {"open": 1, "closed": 1, "total": 2}

    response = await client.get("/claims", params={"filter": "Closed"})
    assert [c["id"] for c in response.json()["items"]] == [done["id"]]

    response = await client.get("/claims")
    assert len(response.json()["items"]) == 2

    response = await client.get("/claims", params={"filter": "Archived"})
    assert response.status_code == 422


# =============================================================================
# Staff updates
# =============================================================================

@pytest.mark.asyncio
async def test_update_status_and_classification(client: AsyncClient):
    claim = await _create_claim(client)
    response = await client.patch(
        f"/claims/{claim['id']}",
        json={"status": "SCHEDULING", "classification": "11 Month", "reviewed": True},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "SCHEDULING"
    assert data["classification"] == "11 Month"
    assert data["reviewed"] is True

    # Classification can be cleared back to Unclassified
    response = await client.patch(f"/claims/{claim['id']}", json={"classification": None})
    assert response.json()["classification"] == "Unclassified"


@pytest.mark.asyncio
async def test_update_rejects_unknown_values(client: AsyncClient):
    claim = await _create_claim(client)
    response = await client.patch(f"/claims/{claim['id']}", json={"status": "ARCHIVED"})
    assert response.status_code == 422
    response = await client.patch(f"/claims/{claim['id']}", json={"homeowner_name": "Someone"})
    assert response.status_code == 422
    response = await client.patch(f"/claims/{claim['id']}", json={"status": None})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_evaluation_date_is_set_once(client: AsyncClient):
    claim = await _create_claim(client)
    response = await client.patch(
        f"/claims/{claim['id']}", json={"date_evaluated": "2024-01-02T12:00:00Z"}
    )
    assert response.status_code == 200
    assert response.json()["date_evaluated"].startswith("2024-01-02T12:00:00")

    response = await client.patch(
        f"/claims/{claim['id']}",
        json={"date_evaluated": "2024-01-05T12:00:00Z", "status": "REVIEWING"},
    )
    assert response.status_code == 409

    # Nothing from the rejected request was applied
    response = await client.get(f"/claims/{claim['id']}")
    assert response.json()["status"] == "SUBMITTED"
    assert response.json()["date_evaluated"].startswith("2024-01-02T12:00:00")


@pytest.mark.asyncio
async def test_comments_append(client: AsyncClient):
    claim = await _create_claim(client)
    for text in ("Inspected", "Parts ordered"):
        response = await client.post(
            f"/claims/{claim['id']}/comments",
            json={"author": "Staff", "role": "ADMIN", "text": text},
        )
        assert response.status_code == 201
    comments = response.json()["comments"]
    assert [c["text"] for c in comments] == ["Inspected", "Parts ordered"]
    assert all(c["timestamp"] for c in comments)


# =============================================================================
# Scheduling
# =============================================================================

@pytest.mark.asyncio
async def test_propose_and_accept_date(client: AsyncClient):
    claim = await _create_claim(client)
    await client.patch(f"/claims/{claim['id']}", json={"status": "SCHEDULING"})
    for day in ("2024-01-10T12:00:00Z", "2024-01-11T12:00:00Z"):
        response = await client.post(
            f"/claims/{claim['id']}/proposed-dates", json={"date": day, "time_slot": "AM"}
        )
        assert response.status_code == 201

    response = await client.post(
        f"/claims/{claim['id']}/proposed-dates/0/respond", json={"accept": False}
    )
    assert response.status_code == 200
    assert response.json()["status"] == "SCHEDULING"

    response = await client.post(
        f"/claims/{claim['id']}/proposed-dates/1/respond", json={"accept": True}
    )
    data = response.json()
    assert data["status"] == "SCHEDULED"
    assert [p["status"] for p in data["proposed_dates"]] == ["REJECTED", "ACCEPTED"]
    assert data["scheduled_date"]["date"].startswith("2024-01-11")

    response = await client.post(
        f"/claims/{claim['id']}/proposed-dates/1/respond", json={"accept": False}
    )
    assert response.status_code == 409
    response = await client.post(
        f"/claims/{claim['id']}/proposed-dates/7/respond", json={"accept": True}
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_confirm_schedule_and_reschedule(client: AsyncClient):
    claim = await _create_claim(client)
    await client.post(
        f"/claims/{claim['id']}/proposed-dates", json={"date": "2024-01-10T12:00:00Z"}
    )
    response = await client.post(
        f"/claims/{claim['id']}/schedule",
        json={"date": "2024-01-12T12:00:00Z", "time_slot": "PM"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "SCHEDULED"
    assert len(data["proposed_dates"]) == 1
    assert data["proposed_dates"][0]["status"] == "ACCEPTED"
    assert data["proposed_dates"][0]["time_slot"] == "PM"

    response = await client.post(f"/claims/{claim['id']}/reschedule")
    data = response.json()
    assert data["status"] == "SCHEDULING"
    assert data["proposed_dates"] == []
    assert data["scheduled_date"] is None


# =============================================================================
# Messages
# =============================================================================

@pytest.mark.asyncio
async def test_messages_and_service_order_date(client: AsyncClient):
    claim = await _create_claim(client)
    response = await client.get(f"/claims/{claim['id']}/service-order")
    assert response.json()["service_order_date"] is None

    messages = [
        {"type": "SUBCONTRACTOR", "subject": "Service Order #1", "sent_at": "2024-01-03T12:00:00Z"},
        {"type": "SUBCONTRACTOR", "subject": "Revised service order", "sent_at": "2024-01-08T12:00:00Z"},
        {"type": "HOMEOWNER", "subject": "Service order copy", "sent_at": "2024-01-09T12:00:00Z"},
        {"type": "SUBCONTRACTOR", "subject": "Running late", "sent_at": "2024-01-10T12:00:00Z"},
    ]
    for message in messages:
        response = await client.post(f"/claims/{claim['id']}/messages", json=message)
        assert response.status_code == 201
        assert response.json()["type"] == message["type"]

    response = await client.get(f"/claims/{claim['id']}/messages")
    assert [m["subject"] for m in response.json()] == [m["subject"] for m in messages]

    response = await client.get(f"/claims/{claim['id']}/service-order")
    assert response.status_code == 200
    assert response.json()["service_order_date"].startswith("2024-01-08T12:00:00")


@pytest.mark.asyncio
async def test_message_type_is_validated(client: AsyncClient):
    claim = await _create_claim(client)
    response = await client.post(
        f"/claims/{claim['id']}/messages", json={"type": "FAX", "subject": "Hi"}
    )
    assert response.status_code == 422
    response = await client.post(
        f"/claims/{uuid.uuid4()}/messages", json={"type": "INTERNAL", "subject": "Hi"}
    )
    assert response.status_code == 404


# =============================================================================
# Export
# =============================================================================

@pytest.mark.asyncio
async def test_export_csv(client: AsyncClient):
    await _create_claim(client, title="Open claim")
    done = await _create_claim(client, title="Closed claim")
    await client.patch(f"/claims/{done['id']}", json={"status": "COMPLETED"})

    response = await client.get("/claims/export", params={"filter": "Closed"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "Warranty_Claims_Closed_" in response.headers["content-disposition"]
    lines = response.text.strip().splitlines()
    assert lines[0].startswith("Claim #,Status,Title")
    assert len(lines) == 2
    assert "Closed claim" in lines[1]


# =============================================================================
# Bulk delete
# =============================================================================

@pytest.mark.asyncio
async def test_bulk_delete_requires_confirmation(client: AsyncClient):
    claim = await _create_claim(client)
    response = await client.post("/claims/bulk-delete", json={"claim_ids": [claim["id"]]})
    assert response.status_code == 400
    response = await client.post("/claims/bulk-delete", json={"claim_ids": [], "confirm": True})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_bulk_delete_reports_partial_failure(client: AsyncClient, db):
    first = await _create_claim(client)
    second = await _create_claim(client, title="Second")
    await client.post(
        f"/claims/{first['id']}/messages", json={"type": "SUBCONTRACTOR", "subject": "Service order"}
    )
    missing = str(uuid.uuid4())

    response = await client.post(
        "/claims/bulk-delete",
        json={"claim_ids": [first["id"], missing, second["id"]], "confirm": True},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["requested"] == 3
    assert data["deleted"] == [first["id"], second["id"]]
    assert data["failed"] == [{"claim_id": missing, "reason": "Claim not found"}]

    assert db.query(Claim).count() == 0
    assert db.query(ClaimMessage).count() == 0


@pytest.mark.asyncio
async def test_bulk_delete_enforces_max(client: AsyncClient, monkeypatch):
    from app.core.config import settings

    monkeypatch.setattr(settings, "BULK_DELETE_MAX", 2)
    ids = [str(uuid.uuid4()) for _ in range(3)]
    response = await client.post("/claims/bulk-delete", json={"claim_ids": ids, "confirm": True})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_unreadable_claim_rows_are_skipped_in_list_and_export(client: AsyncClient, db):
    good = await _create_claim(client)
    db.add(
        Claim(
            title="Legacy row",
            homeowner_name="Dana Smith",
            address="12 Oak Lane",
            status="Open",
            classification="Unclassified",
        )
    )
    db.commit()

    response = await client.get("/claims")
    assert response.status_code == 200
    data = response.json()
    assert [c["id"] for c in data["items"]] == [good["id"]]
    assert data["counts"] == {"open": 1, "closed": 0, "total": 1}

    response = await client.get("/claims/export")
    assert response.status_code == 200
    lines = response.text.strip().splitlines()
    assert len(lines) == 2
    assert "Legacy row" not in response.text

    response = await client.get("/analytics/warranty")
    assert response.status_code == 200
