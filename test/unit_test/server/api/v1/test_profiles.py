import pytest
from httpx import AsyncClient

from neurmatic.core.cache import get_cache
from neurmatic.matching.service import match_cache_key

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/profiles"


async def test_update_profile_creates_then_patches(client: AsyncClient, make_user, auth_headers):
    user = await make_user("alice")
    headers = auth_headers(user)

    created = await client.put(f"{BASE}/me", json={"headline": "LLM engineer", "years_experience": 5}, headers=headers)
    assert created.status_code == 200
    assert created.json()["headline"] == "LLM engineer"

    patched = await client.put(f"{BASE}/me", json={"bio": "Hi"}, headers=headers)
    data = patched.json()
    assert data["bio"] == "Hi"
    assert data["headline"] == "LLM engineer"
    assert data["years_experience"] == 5


async def test_update_profile_validation(client: AsyncClient, make_user, auth_headers):
    user = await make_user("alice")

    response = await client.put(f"{BASE}/me", json={"availability_status": "sleeping"}, headers=auth_headers(user))

    assert response.status_code == 422


async def test_profile_write_requires_auth(client: AsyncClient):
    assert (await client.put(f"{BASE}/me", json={})).status_code == 401


async def test_skills(client: AsyncClient, make_user, auth_headers):
    user = await make_user("alice")
    headers = auth_headers(user)

    created = await client.post(f"{BASE}/me/skills", json={"skill_name": " PyTorch ", "proficiency": 4}, headers=headers)
    assert created.status_code == 201
    skill = created.json()
    assert skill["skill_name"] == "PyTorch"

    duplicate = await client.post(f"{BASE}/me/skills", json={"skill_name": "pytorch"}, headers=headers)
    assert duplicate.status_code == 409

    invalid = await client.post(f"{BASE}/me/skills", json={"skill_name": "JAX", "proficiency": 6}, headers=headers)
    assert invalid.status_code == 422

    deleted = await client.delete(f"{BASE}/me/skills/{skill['id']}", headers=headers)
    assert deleted.status_code == 204
    again = await client.delete(f"{BASE}/me/skills/{skill['id']}", headers=headers)
    assert again.status_code == 404


async def test_cannot_delete_someone_elses_skill(client: AsyncClient, make_user, auth_headers):
    alice = await make_user("alice")
    bob = await make_user("bob")
    skill = (await client.post(f"{BASE}/me/skills", json={"skill_name": "Go"}, headers=auth_headers(alice))).json()

    response = await client.delete(f"{BASE}/me/skills/{skill['id']}", headers=auth_headers(bob))

    assert response.status_code == 404


async def test_experience(client: AsyncClient, make_user, auth_headers):
    user = await make_user("alice")
    headers = auth_headers(user)
    payload = {
        "company_name": "Prev",
        "title": "ML Engineer",
        "start_date": "2020-01-01T00:00:00Z",
        "end_date": "2022-01-01T00:00:00Z",
        "tech_stack": {"frameworks": ["LangChain"], "languages": ["Python"]},
    }

    created = await client.post(f"{BASE}/me/experiences", json=payload, headers=headers)
    assert created.status_code == 201
    assert created.json()["tech_stack"] == {"frameworks": ["LangChain"], "languages": ["Python"]}

    bad_dates = await client.post(
        f"{BASE}/me/experiences", json={**payload, "end_date": "2019-01-01T00:00:00Z"}, headers=headers
    )
    assert bad_dates.status_code == 422

    deleted = await client.delete(f"{BASE}/me/experiences/{created.json()['id']}", headers=headers)
    assert deleted.status_code == 204


async def test_models(client: AsyncClient, make_user, auth_headers):
    user = await make_user("alice")

    response = await client.put(
        f"{BASE}/me/models", json={"models": ["gpt-4", "GPT-4", "claude"]}, headers=auth_headers(user)
    )

    assert response.status_code == 200
    assert response.json() == {"models": ["gpt-4", "claude"]}


async def test_preferences(client: AsyncClient, make_user, auth_headers):
    user = await make_user("alice")
    headers = auth_headers(user)

    assert (await client.get(f"{BASE}/me/preferences", headers=headers)).status_code == 404

    response = await client.put(
        f"{BASE}/me/preferences",
        json={"work_locations": ["remote"], "salary_expectation_min": 100, "salary_expectation_max": 150},
        headers=headers,
    )
    assert response.status_code == 200

    fetched = await client.get(f"{BASE}/me/preferences", headers=headers)
    assert fetched.json()["work_locations"] == ["remote"]
    assert fetched.json()["salary_expectation_max"] == 150


async def test_preferences_salary_order(client: AsyncClient, make_user, auth_headers):
    user = await make_user("alice")

    response = await client.put(
        f"{BASE}/me/preferences",
        json={"salary_expectation_min": 200, "salary_expectation_max": 100},
        headers=auth_headers(user),
    )

    assert response.status_code == 422


async def test_profile_writes_drop_cached_match_scores(client: AsyncClient, make_user, auth_headers):
    user = await make_user("alice")
    cache = get_cache()
    await cache.set(match_cache_key(user.id, "job-1"), {"score": 1})
    await cache.set(match_cache_key("someone-else", "job-1"), {"score": 1})

    await client.post(f"{BASE}/me/skills", json={"skill_name": "Rust"}, headers=auth_headers(user))

    assert not await cache.has(match_cache_key(user.id, "job-1"))
    assert await cache.has(match_cache_key("someone-else", "job-1"))


async def test_public_profile_and_views(client: AsyncClient, make_user, auth_headers):
    owner = await make_user("owner")
    viewer = await make_user("viewer")
    await client.post(f"{BASE}/me/skills", json={"skill_name": "Python"}, headers=auth_headers(owner))

    public = await client.get(f"{BASE}/owner", headers=auth_headers(viewer))
    assert public.status_code == 200
    data = public.json()
    assert data["username"] == "owner"
    assert data["profile"] is None
    assert [s["skill_name"] for s in data["skills"]] == ["Python"]

    await client.get(f"{BASE}/owner")
    await client.get(f"{BASE}/owner", headers=auth_headers(owner))

    stats = (await client.get(f"{BASE}/me/views", headers=auth_headers(owner))).json()
    assert stats["days"] == 30
    assert stats["total_views"] == 2
    assert stats["unique_viewers"] == 1
    assert [v["username"] for v in stats["recent_viewers"]] == ["viewer"]


async def test_public_profile_unknown_or_inactive(client: AsyncClient, make_user):
    await make_user("gone", status="deleted")

    assert (await client.get(f"{BASE}/nobody")).status_code == 404
    assert (await client.get(f"{BASE}/gone")).status_code == 404


async def test_view_stats_days_bounds(client: AsyncClient, make_user, auth_headers):
    user = await make_user("alice")
    assert (await client.get(f"{BASE}/me/views?days=0", headers=auth_headers(user))).status_code == 422
