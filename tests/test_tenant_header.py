import pytest


@pytest.mark.anyio
async def test_tenant_header_required(async_client):
    resp = await async_client.get("/api/v1/assets")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Tenant ID is required"


@pytest.mark.anyio
async def test_tenant_header_format(async_client):
    resp = await async_client.get("/api/v1/assets", headers={"X-Tenant-ID": "acme"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid tenant ID format"


@pytest.mark.anyio
async def test_unknown_tenant(async_client):
    resp = await async_client.get("/api/v1/assets", headers={"X-Tenant-ID": "987654"})
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_tenant_fallbacks(async_client, seed):
    resp = await async_client.get("/api/v1/people", headers={"tenant_id": str(seed.tenant.id)})
    assert resp.status_code == 200, resp.text
    assert len(resp.json()) == 5

    resp = await async_client.get("/api/v1/people", params={"tenant_id": seed.tenant.id})
    assert resp.status_code == 200, resp.text
    assert len(resp.json()) == 5


@pytest.mark.anyio
async def test_person_header_must_belong_to_tenant(async_client, seed, other_seed):
    headers = {**seed.headers, "X-Person-ID": str(other_seed.requester.id)}
    resp = await async_client.get("/api/v1/people", headers=headers)
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_tenant_and_people_crud(async_client):
    resp = await async_client.post("/api/v1/tenants", json={"name": "Initech", "domain": "initech.example.com"})
    assert resp.status_code == 201, resp.text
    tenant = resp.json()
    assert tenant["plan"] == "free"

    resp = await async_client.post("/api/v1/tenants", json={"name": "Copycat", "domain": "initech.example.com"})
    assert resp.status_code == 409, resp.text

    headers = {"X-Tenant-ID": str(tenant["id"])}
    person = {"name": "Peter Gibbons", "email": "peter@initech.example.com", "role": "engineer"}
    resp = await async_client.post("/api/v1/people", json=person, headers=headers)
    assert resp.status_code == 201, resp.text
    person_id = resp.json()["id"]

    resp = await async_client.post("/api/v1/people", json=person, headers=headers)
    assert resp.status_code == 409, resp.text

    resp = await async_client.put(f"/api/v1/people/{person_id}", json={"position": "Programmer"}, headers=headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["position"] == "Programmer"

    resp = await async_client.delete(f"/api/v1/people/{person_id}", headers=headers)
    assert resp.status_code == 204, resp.text
    resp = await async_client.get(f"/api/v1/people/{person_id}", headers=headers)
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_health_needs_no_tenant(async_client):
    resp = await async_client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy"}


@pytest.mark.anyio
async def test_non_ascii_digit_ids_are_rejected(async_client, seed):
    # "\xb2" decodes to a superscript two, which str.isdigit() accepts
    resp = await async_client.get("/api/v1/assets", headers=[(b"X-Tenant-ID", b"\xb2")])
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid tenant ID format"

    headers = [(b"X-Tenant-ID", str(seed.tenant.id).encode()), (b"X-Person-ID", b"\xb2")]
    resp = await async_client.get("/api/v1/assets", headers=headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid person ID format"


@pytest.mark.anyio
async def test_people_required_fields_and_reused_email(async_client, seed):
    resp = await async_client.put(
        f"/api/v1/people/{seed.other.id}", json={"email": None}, headers=seed.headers,
    )
    assert resp.status_code == 422, resp.text

    resp = await async_client.put(f"/api/v1/tenants/{seed.tenant.id}", json={"name": None})
    assert resp.status_code == 422, resp.text

    # A deleted person's email can go to a new person
    resp = await async_client.delete(f"/api/v1/people/{seed.other.id}", headers=seed.headers)
    assert resp.status_code == 204, resp.text
    person = {"name": "Replacement", "email": seed.other.email, "role": "engineer"}
    resp = await async_client.post("/api/v1/people", json=person, headers=seed.headers)
    assert resp.status_code == 201, resp.text
    assert resp.json()["email"] == seed.other.email
