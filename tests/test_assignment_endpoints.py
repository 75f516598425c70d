import pytest

BASE = "/api/v1/asset-assignments"


async def get_asset(async_client, seed):
    resp = await async_client.get(f"/api/v1/assets/{seed.asset.id}", headers=seed.headers)
    assert resp.status_code == 200, resp.text
    return resp.json()


async def assign(async_client, seed, person_id):
    return await async_client.post(
        BASE,
        json={
            "asset_id": seed.asset.id,
            "assigned_to_id": person_id,
            "assigned_by_id": seed.assigner.id,
        },
        headers=seed.headers,
    )


@pytest.mark.anyio
async def test_assign_then_return(async_client, seed):
    resp = await assign(async_client, seed, seed.assignee.id)
    assert resp.status_code == 201, resp.text
    assignment = resp.json()
    assert assignment["status"] == "active"

    asset = await get_asset(async_client, seed)
    assert asset["status"] == "assigned"
    assert asset["current_assignee_id"] == seed.assignee.id

    resp = await assign(async_client, seed, seed.other.id)
    assert resp.status_code == 409, resp.text
    assert resp.json()["detail"] == "Asset is already assigned to someone else"

    resp = await async_client.put(
        f"{BASE}/{assignment['id']}", json={"status": "returned"}, headers=seed.headers,
    )
    assert resp.status_code == 200, resp.text
    returned = resp.json()
    assert returned["status"] == "returned"
    assert returned["return_date"] is not None

    asset = await get_asset(async_client, seed)
    assert asset["status"] == "in_stock"
    assert asset["current_assignee_id"] is None

    # Returned is terminal
    resp = await async_client.put(
        f"{BASE}/{assignment['id']}", json={"status": "active"}, headers=seed.headers,
    )
    assert resp.status_code == 409, resp.text


@pytest.mark.anyio
async def test_asset_can_be_reassigned_after_return(async_client, seed):
    first = (await assign(async_client, seed, seed.assignee.id)).json()
    await async_client.put(f"{BASE}/{first['id']}", json={"status": "returned"}, headers=seed.headers)

    resp = await assign(async_client, seed, seed.other.id)
    assert resp.status_code == 201, resp.text
    asset = await get_asset(async_client, seed)
    assert asset["current_assignee_id"] == seed.other.id


@pytest.mark.anyio
async def test_unknown_assignee_is_bad_request(async_client, seed, other_seed):
    resp = await assign(async_client, seed, other_seed.assignee.id)
    assert resp.status_code == 400, resp.text
    assert resp.json()["detail"].startswith("Invalid assignee ID")


@pytest.mark.anyio
async def test_assigner_from_person_header(async_client, seed):
    headers = {**seed.headers, "X-Person-ID": str(seed.assigner.id)}
    resp = await async_client.post(
        BASE, json={"asset_id": seed.asset.id, "assigned_to_id": seed.assignee.id}, headers=headers,
    )
    assert resp.status_code == 201, resp.text
    assert resp.json()["assigned_by_id"] == seed.assigner.id


@pytest.mark.anyio
async def test_delete_active_assignment_reverts_asset(async_client, seed):
    assignment = (await assign(async_client, seed, seed.assignee.id)).json()

    resp = await async_client.delete(f"{BASE}/{assignment['id']}", headers=seed.headers)
    assert resp.status_code == 204, resp.text

    asset = await get_asset(async_client, seed)
    assert asset["status"] == "in_stock"
    assert asset["current_assignee_id"] is None


@pytest.mark.anyio
async def test_returned_assignment_cannot_be_deleted(async_client, seed):
    assignment = (await assign(async_client, seed, seed.assignee.id)).json()
    await async_client.put(f"{BASE}/{assignment['id']}", json={"status": "returned"}, headers=seed.headers)

    resp = await async_client.delete(f"{BASE}/{assignment['id']}", headers=seed.headers)
    assert resp.status_code == 409, resp.text


@pytest.mark.anyio
async def test_assigned_asset_and_holder_are_protected(async_client, seed):
    await assign(async_client, seed, seed.assignee.id)

    resp = await async_client.delete(f"/api/v1/assets/{seed.asset.id}", headers=seed.headers)
    assert resp.status_code == 409, resp.text

    resp = await async_client.delete(f"/api/v1/people/{seed.assignee.id}", headers=seed.headers)
    assert resp.status_code == 409, resp.text

    # Cannot retire an assigned asset directly
    resp = await async_client.put(
        f"/api/v1/assets/{seed.asset.id}", json={"status": "retired"}, headers=seed.headers,
    )
    assert resp.status_code == 409, resp.text


@pytest.mark.anyio
async def test_list_filters(async_client, seed):
    assignment = (await assign(async_client, seed, seed.assignee.id)).json()

    resp = await async_client.get(BASE, params={"assigned_to": seed.assignee.id}, headers=seed.headers)
    assert [a["id"] for a in resp.json()] == [assignment["id"]]

    resp = await async_client.get(BASE, params={"status": "returned"}, headers=seed.headers)
    assert resp.json() == []


@pytest.mark.anyio
async def test_return_date_only_with_the_return(async_client, seed):
    assignment = (await assign(async_client, seed, seed.assignee.id)).json()
    url = f"{BASE}/{assignment['id']}"

    resp = await async_client.put(url, json={"return_date": "2024-06-01T12:00:00Z"}, headers=seed.headers)
    assert resp.status_code == 409, resp.text
    assert (await get_asset(async_client, seed))["status"] == "assigned"

    resp = await async_client.put(
        url, json={"status": "returned", "return_date": "2024-06-01T12:00:00Z"}, headers=seed.headers,
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["return_date"].startswith("2024-06-01")

    # Correcting the date of a finished assignment is fine
    resp = await async_client.put(url, json={"return_date": "2024-06-02T09:00:00Z"}, headers=seed.headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["return_date"].startswith("2024-06-02")
