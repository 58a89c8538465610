import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

USERS = "/api/v1/users"
NOTIFICATIONS = "/api/v1/notifications"


class TestFollows:
    async def test_follow_and_lists(self, client: AsyncClient, make_user, auth_headers):
        alice = await make_user("alice")
        bob = await make_user("bob")

        response = await client.post(f"{USERS}/{bob.id}/follow", headers=auth_headers(alice))

        assert response.status_code == 201
        assert response.json()["following_id"] == bob.id
        followers = (await client.get(f"{USERS}/{bob.id}/followers")).json()
        assert [(f["user_id"], f["username"]) for f in followers] == [(alice.id, "alice")]
        following = (await client.get(f"{USERS}/{alice.id}/following")).json()
        assert [f["username"] for f in following] == ["bob"]

    async def test_follow_rules(self, client: AsyncClient, make_user, auth_headers):
        alice = await make_user("alice")
        bob = await make_user("bob")
        banned = await make_user("spammer", status="banned")
        headers = auth_headers(alice)

        assert (await client.post(f"{USERS}/{alice.id}/follow", headers=headers)).status_code == 400
        assert (await client.post(f"{USERS}/{banned.id}/follow", headers=headers)).status_code == 404
        await client.post(f"{USERS}/{bob.id}/follow", headers=headers)
        assert (await client.post(f"{USERS}/{bob.id}/follow", headers=headers)).status_code == 409

    async def test_unfollow(self, client: AsyncClient, make_user, auth_headers):
        alice = await make_user("alice")
        bob = await make_user("bob")
        headers = auth_headers(alice)
        await client.post(f"{USERS}/{bob.id}/follow", headers=headers)

        assert (await client.delete(f"{USERS}/{bob.id}/follow", headers=headers)).status_code == 204
        assert (await client.delete(f"{USERS}/{bob.id}/follow", headers=headers)).status_code == 404
        assert (await client.get(f"{USERS}/{bob.id}/followers")).json() == []


class TestNotifications:
    async def test_inbox_flow(self, client: AsyncClient, make_user, auth_headers):
        bob = await make_user("bob")
        for name in ("alice", "carol"):
            follower = await make_user(name)
            await client.post(f"{USERS}/{bob.id}/follow", headers=auth_headers(follower))
        headers = auth_headers(bob)

        assert (await client.get(f"{NOTIFICATIONS}/unread-count", headers=headers)).json() == {"unread": 2}
        inbox = (await client.get(NOTIFICATIONS, headers=headers)).json()
        assert inbox["total"] == 2
        assert all(item["type"] == "new_follower" for item in inbox["items"])

        first = inbox["items"][0]["id"]
        marked = await client.post(f"{NOTIFICATIONS}/{first}/read", headers=headers)
        assert marked.json()["is_read"] is True
        assert (await client.get(f"{NOTIFICATIONS}?unread_only=true", headers=headers)).json()["total"] == 1

        assert (await client.post(f"{NOTIFICATIONS}/read-all", headers=headers)).json() == {"updated": 1}
        assert (await client.get(f"{NOTIFICATIONS}/unread-count", headers=headers)).json() == {"unread": 0}

    async def test_cannot_read_someone_elses_notification(self, client: AsyncClient, make_user, auth_headers):
        alice = await make_user("alice")
        bob = await make_user("bob")
        await client.post(f"{USERS}/{bob.id}/follow", headers=auth_headers(alice))
        notification_id = (await client.get(NOTIFICATIONS, headers=auth_headers(bob))).json()["items"][0]["id"]

        response = await client.post(f"{NOTIFICATIONS}/{notification_id}/read", headers=auth_headers(alice))

        assert response.status_code == 404

    async def test_requires_auth(self, client: AsyncClient):
        assert (await client.get(NOTIFICATIONS)).status_code == 401
