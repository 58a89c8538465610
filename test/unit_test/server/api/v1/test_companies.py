import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/companies"


async def test_create_company(client: AsyncClient, make_user, auth_headers):
    owner = await make_user("acme", role="company")

    response = await client.post(
        BASE, json={"name": "Acme AI Labs", "benefits": ["Remote stipend"]}, headers=auth_headers(owner)
    )

    assert response.status_code == 201
    data = response.json()
    assert data["slug"] == "acme-ai-labs"
    assert data["owner_id"] == owner.id
    assert data["verified"] is False


async def test_slug_collision_gets_suffix(client: AsyncClient, make_user, auth_headers):
    owner = await make_user("acme", role="company")
    headers = auth_headers(owner)

    await client.post(BASE, json={"name": "Acme"}, headers=headers)
    second = await client.post(BASE, json={"name": "ACME!"}, headers=headers)

    assert second.json()["slug"] == "acme-2"


async def test_members_cannot_create_companies(client: AsyncClient, make_user, auth_headers):
    member = await make_user("alice")

    response = await client.post(BASE, json={"name": "Side Project"}, headers=auth_headers(member))

    assert response.status_code == 403


async def test_list_and_get(client: AsyncClient, make_user, make_company):
    owner = await make_user("acme", role="company")
    await make_company(owner, "Beta")
    await make_company(owner, "Alpha")

    page = (await client.get(f"{BASE}?page=1&limit=1")).json()
    assert page["total"] == 2
    assert page["limit"] == 1
    assert [c["name"] for c in page["items"]] == ["Alpha"]

    fetched = await client.get(f"{BASE}/beta")
    assert fetched.status_code == 200
    assert fetched.json()["name"] == "Beta"
    assert (await client.get(f"{BASE}/missing")).status_code == 404


async def test_pagination_bounds(client: AsyncClient):
    assert (await client.get(f"{BASE}?page=0")).status_code == 422
    assert (await client.get(f"{BASE}?limit=101")).status_code == 422


async def test_update_owner_and_admin_only(client: AsyncClient, make_user, make_company, auth_headers):
    owner = await make_user("acme", role="company")
    other = await make_user("other", role="company")
    admin = await make_user("root", role="admin")
    company = await make_company(owner)

    forbidden = await client.put(f"{BASE}/{company.id}", json={"industry": "AI"}, headers=auth_headers(other))
    assert forbidden.status_code == 403

    updated = await client.put(f"{BASE}/{company.id}", json={"industry": "AI"}, headers=auth_headers(owner))
    assert updated.json()["industry"] == "AI"

    by_admin = await client.put(f"{BASE}/{company.id}", json={"location": "Berlin"}, headers=auth_headers(admin))
    assert by_admin.json()["location"] == "Berlin"
    assert by_admin.json()["industry"] == "AI"


async def test_verify_is_admin_only(client: AsyncClient, make_user, make_company, auth_headers):
    owner = await make_user("acme", role="company")
    admin = await make_user("root", role="admin")
    company = await make_company(owner, verified=False)

    assert (await client.post(f"{BASE}/{company.id}/verify", headers=auth_headers(owner))).status_code == 403

    response = await client.post(f"{BASE}/{company.id}/verify", headers=auth_headers(admin))
    assert response.status_code == 200
    assert response.json()["verified"] is True
