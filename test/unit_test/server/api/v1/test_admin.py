import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

OVERVIEW = "/api/v1/admin/analytics/overview"


async def test_overview(client: AsyncClient, make_user, make_company, make_job, make_article, make_topic, auth_headers):
    admin = await make_user("root", role="admin")
    owner = await make_user("acme", role="company")
    member = await make_user("alice")
    company = await make_company(owner)
    job = await make_job(company)
    await make_job(company, "Old role", status="closed")
    await make_article(admin, "Launch day")
    await make_article(admin, "Draft note", status="draft")
    await make_topic(member)
    await client.post(f"/api/v1/jobs/{job.id}/apply", json={}, headers=auth_headers(member))

    response = await client.get(OVERVIEW, headers=auth_headers(admin))

    assert response.status_code == 200
    data = response.json()
    assert data["days"] == 30
    assert data["total_users"] == 3
    assert data["new_users"] == 3
    assert data["users_by_role"] == {"admin": 1, "company": 1, "user": 1}
    assert data["active_jobs"] == 1
    assert data["applications_by_status"] == {"pending": 1}
    assert data["total_applications"] == 1
    assert data["published_articles"] == 1
    assert data["open_topics"] == 1
    assert data["application_conversion_rate"] == 0.0


async def test_overview_is_admin_only(client: AsyncClient, make_user, auth_headers):
    moderator = await make_user("mod", role="moderator")
    assert (await client.get(OVERVIEW, headers=auth_headers(moderator))).status_code == 403


async def test_days_bounds(client: AsyncClient, make_user, auth_headers):
    admin = await make_user("root", role="admin")
    assert (await client.get(f"{OVERVIEW}?days=0", headers=auth_headers(admin))).status_code == 422
