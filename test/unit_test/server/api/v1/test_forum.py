from datetime import timedelta

import pytest
import pytest_asyncio
from httpx import AsyncClient

from neurmatic.core.database.base import utc_now
from neurmatic.core.database.entities.forum import Reply

pytestmark = pytest.mark.asyncio

TOPICS = "/api/v1/forum/topics"


@pytest_asyncio.fixture
async def author(make_user):
    return await make_user("author")


class TestTopics:
    async def test_create_topic(self, client: AsyncClient, author, auth_headers):
        response = await client.post(
            TOPICS,
            json={"title": "Best vector DB?", "content": "Looking for advice", "category": "tools", "type": "question"},
            headers=auth_headers(author),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["slug"] == "best-vector-db"
        assert data["status"] == "open"
        assert data["vote_score"] == 0

    async def test_create_validation(self, client: AsyncClient, author, auth_headers):
        response = await client.post(
            TOPICS,
            json={"title": "Hi", "content": "short", "category": "tools"},
            headers=auth_headers(author),
        )
        assert response.status_code == 422

    async def test_list_filters_and_views(self, client: AsyncClient, author, make_topic):
        question = await make_topic(author, "How to fine-tune?", category="training", type="question")
        await make_topic(author, "Show: my agent", category="showcase", type="showcase")

        assert (await client.get(TOPICS)).json()["total"] == 2
        questions = (await client.get(f"{TOPICS}?type=question")).json()
        assert [t["id"] for t in questions["items"]] == [question.id]

        await client.get(f"{TOPICS}/{question.id}")
        assert (await client.get(f"{TOPICS}/{question.id}")).json()["view_count"] == 2


class TestModeration:
    async def test_author_edits_but_cannot_moderate(self, client: AsyncClient, author, make_topic, auth_headers):
        topic = await make_topic(author)
        headers = auth_headers(author)

        edited = await client.put(f"{TOPICS}/{topic.id}", json={"title": "Evaluating RAG pipelines"}, headers=headers)
        assert edited.json()["title"] == "Evaluating RAG pipelines"

        locked = await client.put(f"{TOPICS}/{topic.id}", json={"is_locked": True}, headers=headers)
        assert locked.status_code == 403

    async def test_moderator_locks_and_author_is_blocked(
        self, client: AsyncClient, author, make_user, make_topic, auth_headers
    ):
        topic = await make_topic(author)
        moderator = await make_user("mod", role="moderator")

        response = await client.put(
            f"{TOPICS}/{topic.id}", json={"is_locked": True, "status": "closed"}, headers=auth_headers(moderator)
        )
        assert response.json()["is_locked"] is True
        assert response.json()["status"] == "closed"

        blocked = await client.put(f"{TOPICS}/{topic.id}", json={"content": "Edited content"}, headers=auth_headers(author))
        assert blocked.status_code == 403

    async def test_strangers_cannot_edit_or_delete(self, client: AsyncClient, author, make_user, make_topic, auth_headers):
        topic = await make_topic(author)
        headers = auth_headers(await make_user("bob"))

        assert (await client.put(f"{TOPICS}/{topic.id}", json={"title": "Hijacked!"}, headers=headers)).status_code == 403
        assert (await client.delete(f"{TOPICS}/{topic.id}", headers=headers)).status_code == 403

    async def test_delete(self, client: AsyncClient, author, make_topic, auth_headers):
        topic = await make_topic(author)

        assert (await client.delete(f"{TOPICS}/{topic.id}", headers=auth_headers(author))).status_code == 204
        assert (await client.get(f"{TOPICS}/{topic.id}")).status_code == 404


class TestVoting:
    async def test_vote_change_and_clear(self, client: AsyncClient, author, make_user, make_topic, auth_headers):
        topic = await make_topic(author)
        alice = auth_headers(await make_user("alice"))
        bob = auth_headers(await make_user("bob"))
        url = f"{TOPICS}/{topic.id}/vote"

        await client.post(url, json={"value": 1}, headers=alice)
        result = (await client.post(url, json={"value": -1}, headers=bob)).json()
        assert (result["upvote_count"], result["downvote_count"], result["vote_score"]) == (1, 1, 0)

        result = (await client.post(url, json={"value": 1}, headers=bob)).json()
        assert (result["upvote_count"], result["downvote_count"], result["vote_score"]) == (2, 0, 2)

        result = (await client.post(url, json={"value": 1}, headers=bob)).json()
        assert result["vote_score"] == 2

        result = (await client.post(url, json={"value": 0}, headers=alice)).json()
        assert result == {"topic_id": topic.id, "user_vote": 0, "upvote_count": 1, "downvote_count": 0, "vote_score": 1}

    async def test_cannot_vote_on_own_topic(self, client: AsyncClient, author, make_topic, auth_headers):
        topic = await make_topic(author)

        response = await client.post(f"{TOPICS}/{topic.id}/vote", json={"value": 1}, headers=auth_headers(author))

        assert response.status_code == 400

    async def test_invalid_vote_value(self, client: AsyncClient, author, make_user, make_topic, auth_headers):
        topic = await make_topic(author)
        headers = auth_headers(await make_user("alice"))

        response = await client.post(f"{TOPICS}/{topic.id}/vote", json={"value": 2}, headers=headers)

        assert response.status_code == 422


class TestReplies:
    async def test_replies_count_and_list_oldest_first(
        self, client: AsyncClient, author, make_user, make_topic, auth_headers
    ):
        topic = await make_topic(author)
        headers = auth_headers(await make_user("bob"))

        first = await client.post(f"{TOPICS}/{topic.id}/replies", json={"content": "Try RAGAS"}, headers=headers)
        await client.post(f"{TOPICS}/{topic.id}/replies", json={"content": "Or build a golden set"}, headers=headers)

        assert first.status_code == 201
        assert first.json()["depth"] == 0
        assert (await client.get(f"{TOPICS}/{topic.id}")).json()["reply_count"] == 2

        listed = (await client.get(f"{TOPICS}/{topic.id}/replies")).json()
        assert listed["total"] == 2
        assert [r["content"] for r in listed["items"]] == ["Try RAGAS", "Or build a golden set"]

        paged = (await client.get(f"{TOPICS}/{topic.id}/replies?limit=1&page=2")).json()
        assert [r["content"] for r in paged["items"]] == ["Or build a golden set"]

    async def test_locked_topic_only_takes_moderator_replies(
        self, client: AsyncClient, author, make_user, make_topic, auth_headers
    ):
        topic = await make_topic(author, is_locked=True)
        member = auth_headers(await make_user("bob"))
        moderator = auth_headers(await make_user("mod", role="moderator"))

        blocked = await client.post(f"{TOPICS}/{topic.id}/replies", json={"content": "Me too"}, headers=member)
        allowed = await client.post(f"{TOPICS}/{topic.id}/replies", json={"content": "Locking this"}, headers=moderator)

        assert blocked.status_code == 403
        assert allowed.status_code == 201

    async def test_missing_or_deleted_topic(self, client: AsyncClient, repos, author, make_topic, auth_headers):
        topic = await make_topic(author)
        topic.is_deleted = True
        await repos.topics.update(topic)
        headers = auth_headers(author)

        assert (await client.post(f"{TOPICS}/missing/replies", json={"content": "Hello"}, headers=headers)).status_code == 404
        assert (await client.get(f"{TOPICS}/{topic.id}/replies")).status_code == 404

    async def test_validation_and_auth(self, client: AsyncClient, author, make_topic, auth_headers):
        topic = await make_topic(author)

        empty = await client.post(f"{TOPICS}/{topic.id}/replies", json={"content": ""}, headers=auth_headers(author))
        anonymous = await client.post(f"{TOPICS}/{topic.id}/replies", json={"content": "Hello"})

        assert empty.status_code == 422
        assert anonymous.status_code == 401

    async def test_threads_nest_three_levels(self, client: AsyncClient, author, make_topic, auth_headers):
        topic = await make_topic(author)
        other = await make_topic(author, "Which GPU to rent?")
        headers = auth_headers(author)
        url = f"{TOPICS}/{topic.id}/replies"

        parent_id = None
        for expected_depth in (0, 1, 2):
            response = await client.post(url, json={"content": "Nested", "parent_reply_id": parent_id}, headers=headers)
            assert response.json()["depth"] == expected_depth
            parent_id = response.json()["id"]

        too_deep = await client.post(url, json={"content": "Nested", "parent_reply_id": parent_id}, headers=headers)
        elsewhere = await client.post(
            f"{TOPICS}/{other.id}/replies", json={"content": "Wrong topic", "parent_reply_id": parent_id}, headers=headers
        )

        assert too_deep.status_code == 400
        assert elsewhere.status_code == 400

    async def test_delete_is_soft_and_decrements_count(
        self, client: AsyncClient, repos, author, make_user, make_topic, auth_headers
    ):
        topic = await make_topic(author)
        bob = await make_user("bob")
        reply = (
            await client.post(f"{TOPICS}/{topic.id}/replies", json={"content": "Try RAGAS"}, headers=auth_headers(bob))
        ).json()
        url = f"{TOPICS}/{topic.id}/replies/{reply['id']}"

        assert (await client.delete(url, headers=auth_headers(author))).status_code == 403
        assert (await client.delete(url, headers=auth_headers(bob))).status_code == 204
        assert (await client.delete(url, headers=auth_headers(bob))).status_code == 404

        assert (await client.get(f"{TOPICS}/{topic.id}/replies")).json()["total"] == 0
        assert (await client.get(f"{TOPICS}/{topic.id}")).json()["reply_count"] == 0
        assert (await repos.replies.get_by_id(reply["id"])).is_deleted is True

    async def test_edit_window(self, client: AsyncClient, repos, author, make_user, make_topic, auth_headers):
        topic = await make_topic(author)
        bob = await make_user("bob")
        moderator = await make_user("mod", role="moderator")
        fresh = await repos.replies.create(Reply(topic_id=topic.id, author_id=bob.id, content="Typo"))
        stale = await repos.replies.create(
            Reply(topic_id=topic.id, author_id=bob.id, content="Old", created_at=utc_now() - timedelta(minutes=20))
        )

        edited = await client.put(
            f"{TOPICS}/{topic.id}/replies/{fresh.id}", json={"content": "Fixed"}, headers=auth_headers(bob)
        )
        assert edited.json()["content"] == "Fixed"
        assert edited.json()["edited_at"] is not None

        stale_url = f"{TOPICS}/{topic.id}/replies/{stale.id}"
        assert (await client.put(stale_url, json={"content": "Late"}, headers=auth_headers(bob))).status_code == 403
        assert (await client.put(stale_url, json={"content": "Late"}, headers=auth_headers(author))).status_code == 403
        assert (await client.put(stale_url, json={"content": "Tidied"}, headers=auth_headers(moderator))).status_code == 200
