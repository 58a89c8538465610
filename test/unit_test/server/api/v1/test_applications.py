from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

APPLICATIONS = "/api/v1/applications"


@pytest_asyncio.fixture
async def owner(make_user):
    return await make_user("acme", role="company")


@pytest_asyncio.fixture
async def job(owner, make_company, make_job):
    return await make_job(await make_company(owner))


@pytest_asyncio.fixture
async def alice(make_user):
    return await make_user("alice")


async def apply(client: AsyncClient, job_id: str, headers: dict, **body):
    return await client.post(f"/api/v1/jobs/{job_id}/apply", json=body, headers=headers)


class TestApply:
    async def test_apply_notifies_company_owner(self, client: AsyncClient, job, owner, alice, auth_headers):
        response = await apply(client, job.id, auth_headers(alice), cover_letter="Hire me")

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["cover_letter"] == "Hire me"

        job_data = (await client.get(f"/api/v1/jobs/{job.id}")).json()
        assert job_data["application_count"] == 1

        inbox = (await client.get("/api/v1/notifications", headers=auth_headers(owner))).json()
        assert inbox["total"] == 1
        assert inbox["items"][0]["type"] == "application_received"
        assert inbox["items"][0]["message"] == f"alice applied to {job.title}."

    async def test_duplicate_application(self, client: AsyncClient, job, alice, auth_headers):
        await apply(client, job.id, auth_headers(alice))
        assert (await apply(client, job.id, auth_headers(alice))).status_code == 409

    async def test_inactive_job(self, client: AsyncClient, owner, make_company, make_job, alice, auth_headers):
        draft = await make_job(await make_company(owner, "Drafty"), status="draft")
        assert (await apply(client, draft.id, auth_headers(alice))).status_code == 400

    async def test_expired_job(self, client: AsyncClient, owner, make_company, make_job, alice, auth_headers):
        past = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(hours=1)
        expired = await make_job(await make_company(owner, "Late"), expires_at=past)

        response = await apply(client, expired.id, auth_headers(alice))

        assert response.status_code == 400
        assert response.json()["detail"] == "Job posting has expired"

    async def test_unknown_job(self, client: AsyncClient, alice, auth_headers):
        assert (await apply(client, "missing", auth_headers(alice))).status_code == 404


class TestViewing:
    async def test_my_applications_with_status_filter(self, client: AsyncClient, job, alice, auth_headers):
        headers = auth_headers(alice)
        await apply(client, job.id, headers)

        assert len((await client.get(f"{APPLICATIONS}/me", headers=headers)).json()) == 1
        assert (await client.get(f"{APPLICATIONS}/me?status=rejected", headers=headers)).json() == []

    async def test_job_applications_for_owner_only(self, client: AsyncClient, job, owner, alice, auth_headers):
        await apply(client, job.id, auth_headers(alice))

        listed = await client.get(f"/api/v1/jobs/{job.id}/applications", headers=auth_headers(owner))
        assert [a["user_id"] for a in listed.json()] == [alice.id]

        forbidden = await client.get(f"/api/v1/jobs/{job.id}/applications", headers=auth_headers(alice))
        assert forbidden.status_code == 403

    async def test_get_application_access(self, client: AsyncClient, job, owner, alice, make_user, auth_headers):
        application_id = (await apply(client, job.id, auth_headers(alice))).json()["id"]
        bob = await make_user("bob")

        assert (await client.get(f"{APPLICATIONS}/{application_id}", headers=auth_headers(alice))).status_code == 200
        assert (await client.get(f"{APPLICATIONS}/{application_id}", headers=auth_headers(owner))).status_code == 200
        assert (await client.get(f"{APPLICATIONS}/{application_id}", headers=auth_headers(bob))).status_code == 403
        assert (await client.get(f"{APPLICATIONS}/missing", headers=auth_headers(alice))).status_code == 404


class TestStatusPipeline:
    async def test_full_pipeline_notifies_applicant(self, client: AsyncClient, job, owner, alice, auth_headers):
        application_id = (await apply(client, job.id, auth_headers(alice))).json()["id"]
        owner_headers = auth_headers(owner)

        for target in ("reviewed", "shortlisted", "interviewed", "offered", "accepted"):
            response = await client.put(
                f"{APPLICATIONS}/{application_id}/status", json={"status": target}, headers=owner_headers
            )
            assert response.status_code == 200
            assert response.json()["status"] == target

        assert response.json()["reviewed_at"] is not None
        inbox = (await client.get("/api/v1/notifications", headers=auth_headers(alice))).json()
        assert inbox["total"] == 5
        assert inbox["items"][0]["type"] == "application_status"

    @pytest.mark.parametrize("target", ["shortlisted", "accepted", "pending", "withdrawn"])
    async def test_skipping_stages_is_rejected(self, client: AsyncClient, job, owner, alice, auth_headers, target):
        application_id = (await apply(client, job.id, auth_headers(alice))).json()["id"]

        response = await client.put(
            f"{APPLICATIONS}/{application_id}/status", json={"status": target}, headers=auth_headers(owner)
        )

        assert response.status_code == 400

    async def test_rejection_is_final(self, client: AsyncClient, job, owner, alice, auth_headers):
        application_id = (await apply(client, job.id, auth_headers(alice))).json()["id"]
        url = f"{APPLICATIONS}/{application_id}/status"

        await client.put(url, json={"status": "rejected"}, headers=auth_headers(owner))
        response = await client.put(url, json={"status": "reviewed"}, headers=auth_headers(owner))

        assert response.status_code == 400

    async def test_only_company_manager_changes_status(self, client: AsyncClient, job, alice, auth_headers):
        application_id = (await apply(client, job.id, auth_headers(alice))).json()["id"]

        response = await client.put(
            f"{APPLICATIONS}/{application_id}/status", json={"status": "reviewed"}, headers=auth_headers(alice)
        )

        assert response.status_code == 403

    async def test_unknown_status_value(self, client: AsyncClient, job, owner, alice, auth_headers):
        application_id = (await apply(client, job.id, auth_headers(alice))).json()["id"]

        response = await client.put(
            f"{APPLICATIONS}/{application_id}/status", json={"status": "hired"}, headers=auth_headers(owner)
        )

        assert response.status_code == 422


class TestWithdraw:
    async def test_withdraw(self, client: AsyncClient, job, alice, auth_headers):
        headers = auth_headers(alice)
        application_id = (await apply(client, job.id, headers)).json()["id"]

        response = await client.post(f"{APPLICATIONS}/{application_id}/withdraw", headers=headers)
        assert response.status_code == 200
        assert response.json()["status"] == "withdrawn"

        again = await client.post(f"{APPLICATIONS}/{application_id}/withdraw", headers=headers)
        assert again.status_code == 400

    async def test_cannot_withdraw_after_offer(self, client: AsyncClient, job, owner, alice, auth_headers):
        application_id = (await apply(client, job.id, auth_headers(alice))).json()["id"]
        for target in ("reviewed", "shortlisted", "interviewed", "offered"):
            await client.put(
                f"{APPLICATIONS}/{application_id}/status", json={"status": target}, headers=auth_headers(owner)
            )

        response = await client.post(f"{APPLICATIONS}/{application_id}/withdraw", headers=auth_headers(alice))

        assert response.status_code == 400

    async def test_only_applicant_withdraws(self, client: AsyncClient, job, owner, alice, auth_headers):
        application_id = (await apply(client, job.id, auth_headers(alice))).json()["id"]

        response = await client.post(f"{APPLICATIONS}/{application_id}/withdraw", headers=auth_headers(owner))

        assert response.status_code == 403
