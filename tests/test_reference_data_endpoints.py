import pytest


@pytest.mark.anyio
async def test_category_delete_guarded_by_assets(async_client, seed):
    resp = await async_client.delete(f"/api/v1/asset-categories/{seed.category.id}", headers=seed.headers)
    assert resp.status_code == 409, resp.text
    assert "1 asset" in resp.json()["detail"]

    resp = await async_client.post("/api/v1/asset-categories", json={"name": "Monitors"}, headers=seed.headers)
    assert resp.status_code == 201, resp.text
    unused = resp.json()

    resp = await async_client.delete(f"/api/v1/asset-categories/{unused['id']}", headers=seed.headers)
    assert resp.status_code == 204, resp.text
    resp = await async_client.get(f"/api/v1/asset-categories/{unused['id']}", headers=seed.headers)
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_category_hierarchy(async_client, seed, other_seed):
    resp = await async_client.post(
        "/api/v1/asset-categories",
        json={"name": "Ultrabooks", "parent_id": seed.category.id},
        headers=seed.headers,
    )
    assert resp.status_code == 201, resp.text
    child = resp.json()

    resp = await async_client.get(
        "/api/v1/asset-categories", params={"parent_id": seed.category.id}, headers=seed.headers,
    )
    assert [c["id"] for c in resp.json()] == [child["id"]]

    # Moving the parent under its own child would create a cycle
    resp = await async_client.put(
        f"/api/v1/asset-categories/{seed.category.id}", json={"parent_id": child["id"]}, headers=seed.headers,
    )
    assert resp.status_code == 400, resp.text

    resp = await async_client.post(
        "/api/v1/asset-categories",
        json={"name": "Foreign", "parent_id": other_seed.category.id},
        headers=seed.headers,
    )
    assert resp.status_code == 400, resp.text


@pytest.mark.anyio
async def test_location_cannot_be_its_own_parent(async_client, seed):
    resp = await async_client.put(
        f"/api/v1/locations/{seed.location.id}", json={"parent_id": seed.location.id}, headers=seed.headers,
    )
    assert resp.status_code == 400, resp.text
    assert resp.json()["detail"] == "Location cannot be its own parent"


@pytest.mark.anyio
async def test_location_filters_and_delete(async_client, seed):
    resp = await async_client.post(
        "/api/v1/locations",
        json={"name": "Warehouse A", "type": "warehouse", "address": "1 Dock Rd", "parent_id": seed.location.id},
        headers=seed.headers,
    )
    assert resp.status_code == 201, resp.text
    warehouse = resp.json()

    resp = await async_client.get("/api/v1/locations", params={"type": "warehouse"}, headers=seed.headers)
    assert [loc["id"] for loc in resp.json()] == [warehouse["id"]]

    # HQ has a child location and an asset
    resp = await async_client.delete(f"/api/v1/locations/{seed.location.id}", headers=seed.headers)
    assert resp.status_code == 409, resp.text

    resp = await async_client.delete(f"/api/v1/locations/{warehouse['id']}", headers=seed.headers)
    assert resp.status_code == 204, resp.text


@pytest.mark.anyio
async def test_vendor_crud(async_client, seed):
    resp = await async_client.post(
        "/api/v1/vendors",
        json={"name": "Globex", "contact_email": "sales@globex.example.com"},
        headers=seed.headers,
    )
    assert resp.status_code == 201, resp.text
    vendor = resp.json()

    resp = await async_client.put(
        f"/api/v1/vendors/{vendor['id']}", json={"website": "https://globex.example.com"}, headers=seed.headers,
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["website"] == "https://globex.example.com"
    assert resp.json()["name"] == "Globex"

    resp = await async_client.get("/api/v1/vendors", params={"search": "glob"}, headers=seed.headers)
    assert [v["id"] for v in resp.json()] == [vendor["id"]]

    resp = await async_client.delete(f"/api/v1/vendors/{vendor['id']}", headers=seed.headers)
    assert resp.status_code == 204, resp.text


@pytest.mark.anyio
async def test_asset_create_and_direct_status_changes(async_client, seed):
    resp = await async_client.post(
        "/api/v1/assets",
        json={"name": "Projector", "category_id": seed.category.id, "status": "procurement"},
        headers=seed.headers,
    )
    assert resp.status_code == 201, resp.text
    asset = resp.json()
    url = f"/api/v1/assets/{asset['id']}"

    resp = await async_client.put(url, json={"status": "in_stock", "serial_number": "SN-1"}, headers=seed.headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "in_stock"
    assert resp.json()["serial_number"] == "SN-1"

    resp = await async_client.put(url, json={"status": "assigned"}, headers=seed.headers)
    assert resp.status_code == 409, resp.text

    resp = await async_client.post(
        "/api/v1/assets",
        json={"name": "Printer", "category_id": seed.category.id, "status": "assigned"},
        headers=seed.headers,
    )
    assert resp.status_code == 400, resp.text

    resp = await async_client.get("/api/v1/assets", params={"status": "in_stock"}, headers=seed.headers)
    assert {a["id"] for a in resp.json()} == {seed.asset.id, asset["id"]}


@pytest.mark.anyio
async def test_required_fields_cannot_be_nulled(async_client, seed):
    for url, body in (
        (f"/api/v1/assets/{seed.asset.id}", {"name": None}),
        (f"/api/v1/assets/{seed.asset.id}", {"category_id": None}),
        (f"/api/v1/asset-categories/{seed.category.id}", {"name": None}),
        (f"/api/v1/locations/{seed.location.id}", {"name": None}),
        (f"/api/v1/vendors/{seed.vendor.id}", {"name": None}),
    ):
        resp = await async_client.put(url, json=body, headers=seed.headers)
        assert resp.status_code == 422, (url, resp.text)

    # Nullable fields still clear
    resp = await async_client.put(
        f"/api/v1/assets/{seed.asset.id}", json={"location_id": None}, headers=seed.headers,
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["location_id"] is None
    assert resp.json()["name"] == seed.asset.name
