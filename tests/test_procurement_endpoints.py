from datetime import datetime, timezone

import pytest

from db_models.procurement import PurchaseOrder

BASE = "/api/v1/procurement-requests"


def today() -> str:
    return f"{datetime.now(timezone.utc):%Y%m%d}"


async def create_request(async_client, seed, **extra):
    payload = {
        "requested_by_id": seed.requester.id,
        "notes": "New laptops for the sales team",
        "items": [
            {"category_id": seed.category.id, "description": "14in laptop", "quantity": 3, "estimated_price": 1200},
        ],
        **extra,
    }
    resp = await async_client.post(BASE, json=payload, headers=seed.headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.mark.anyio
async def test_procurement_approval_flow(async_client, seed):
    created = await create_request(async_client, seed)
    assert created["status"] == "draft"
    assert created["request_number"] == f"PR-{today()}-001"
    assert len(created["items"]) == 1
    assert created["items"][0]["status"] == "pending"
    url = f"{BASE}/{created['id']}"

    resp = await async_client.put(url, json={"status": "submitted"}, headers=seed.headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "submitted"

    resp = await async_client.put(url, json={"status": "approved"}, headers=seed.headers)
    assert resp.status_code == 400, resp.text
    assert "Approved by ID is required" in resp.json()["detail"]

    resp = await async_client.put(
        url, json={"status": "approved", "approved_by_id": seed.approver.id}, headers=seed.headers,
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["status"] == "approved"
    assert body["approved_by_id"] == seed.approver.id
    assert body["approval_date"] is not None

    # Approved requests are locked
    resp = await async_client.put(url, json={"notes": "too late"}, headers=seed.headers)
    assert resp.status_code == 409, resp.text


@pytest.mark.anyio
async def test_request_numbers_increment(async_client, seed):
    first = await create_request(async_client, seed)
    second = await create_request(async_client, seed)

    assert first["request_number"] == f"PR-{today()}-001"
    assert second["request_number"] == f"PR-{today()}-002"


@pytest.mark.anyio
async def test_requester_defaults_to_acting_person(async_client, seed):
    headers = {**seed.headers, "X-Person-ID": str(seed.approver.id)}
    resp = await async_client.post(BASE, json={"items": []}, headers=headers)
    assert resp.status_code == 201, resp.text
    assert resp.json()["requested_by_id"] == seed.approver.id

    resp = await async_client.post(BASE, json={"items": []}, headers=seed.headers)
    assert resp.status_code == 400, resp.text
    assert resp.json()["detail"] == "Requested by ID is required"


@pytest.mark.anyio
async def test_invalid_item_category(async_client, seed, other_seed):
    payload = {
        "requested_by_id": seed.requester.id,
        "items": [{"category_id": other_seed.category.id, "description": "x", "quantity": 1}],
    }
    resp = await async_client.post(BASE, json=payload, headers=seed.headers)
    assert resp.status_code == 400, resp.text
    assert resp.json()["detail"] == "Invalid category ID in item 1"


@pytest.mark.anyio
async def test_illegal_transition_is_conflict(async_client, seed):
    created = await create_request(async_client, seed)

    resp = await async_client.put(
        f"{BASE}/{created['id']}", json={"status": "approved", "approved_by_id": seed.approver.id},
        headers=seed.headers,
    )
    assert resp.status_code == 409, resp.text
    assert "draft -> approved" in resp.json()["detail"]


@pytest.mark.anyio
async def test_delete_only_drafts(async_client, seed):
    created = await create_request(async_client, seed)
    url = f"{BASE}/{created['id']}"

    resp = await async_client.put(url, json={"status": "submitted"}, headers=seed.headers)
    assert resp.status_code == 200
    resp = await async_client.delete(url, headers=seed.headers)
    assert resp.status_code == 409, resp.text

    draft = await create_request(async_client, seed)
    resp = await async_client.delete(f"{BASE}/{draft['id']}", headers=seed.headers)
    assert resp.status_code == 204, resp.text
    resp = await async_client.get(f"{BASE}/{draft['id']}", headers=seed.headers)
    assert resp.status_code == 404

    # The deleted request keeps its number
    third = await create_request(async_client, seed)
    assert third["request_number"] == f"PR-{today()}-003"


@pytest.mark.anyio
async def test_delete_blocked_by_purchase_order(async_client, seed, db_session):
    created = await create_request(async_client, seed)
    db_session.add(PurchaseOrder(
        tenant_id=seed.tenant.id,
        order_number="PO-0001",
        procurement_id=created["id"],
        vendor_id=seed.vendor.id,
        order_date=datetime.now(timezone.utc),
        created_by_id=seed.requester.id,
    ))
    await db_session.commit()

    resp = await async_client.delete(f"{BASE}/{created['id']}", headers=seed.headers)
    assert resp.status_code == 409, resp.text
    assert "purchase order" in resp.json()["detail"]


@pytest.mark.anyio
async def test_requests_are_tenant_scoped(async_client, seed, other_seed):
    created = await create_request(async_client, seed)

    resp = await async_client.get(f"{BASE}/{created['id']}", headers=other_seed.headers)
    assert resp.status_code == 404

    resp = await async_client.get(BASE, headers=other_seed.headers)
    assert resp.status_code == 200
    assert resp.json() == []

    resp = await async_client.get(BASE, params={"status": "draft"}, headers=seed.headers)
    assert [r["id"] for r in resp.json()] == [created["id"]]


@pytest.mark.anyio
async def test_taken_number_is_retried(async_client, seed, monkeypatch):
    from api.procurement import db_manager

    first = await create_request(async_client, seed)
    real_next = db_manager.next_request_number
    calls = []

    async def racing_next(db, tenant_id, on_date):
        # First call hands out a number another request already holds
        calls.append(on_date)
        if len(calls) == 1:
            return first["request_number"]
        return await real_next(db, tenant_id, on_date)

    monkeypatch.setattr(db_manager, "next_request_number", racing_next)

    second = await create_request(async_client, seed)
    assert second["request_number"] == f"PR-{today()}-002"
    assert len(calls) == 2


@pytest.mark.anyio
async def test_gives_up_after_max_retries(async_client, seed, monkeypatch):
    from api.procurement import db_manager

    first = await create_request(async_client, seed)

    async def always_taken(db, tenant_id, on_date):
        return first["request_number"]

    monkeypatch.setattr(db_manager, "next_request_number", always_taken)

    resp = await async_client.post(
        BASE, json={"requested_by_id": seed.requester.id}, headers=seed.headers,
    )
    assert resp.status_code == 409, resp.text
