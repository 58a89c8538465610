"""
Tests for the member repositories against an in-memory SQLite database.
"""

from datetime import timedelta

import pytest

from neurmatic.core.database.base import utc_now
from neurmatic.core.database.entities.users import JobPreferences, Profile, UserSkill

pytestmark = pytest.mark.asyncio


class TestUserRepository:
    async def test_get_by_email_is_case_insensitive(self, repos, make_user):
        user = await make_user("alice", email="Alice@Example.com")

        found = await repos.users.get_by_email("alice@EXAMPLE.com")

        assert found is not None
        assert found.id == user.id

    async def test_get_by_username(self, repos, make_user):
        await make_user("bob")

        assert (await repos.users.get_by_username("bob")).username == "bob"
        assert await repos.users.get_by_username("nobody") is None

    async def test_get_many(self, repos, make_user):
        a = await make_user("a")
        b = await make_user("b")
        await make_user("c")

        found = await repos.users.get_many([a.id, b.id])

        assert {u.id for u in found} == {a.id, b.id}
        assert await repos.users.get_many([]) == []

    async def test_record_login(self, repos, make_user):
        user = await make_user()
        assert user.login_count == 0

        user = await repos.users.record_login(user)
        user = await repos.users.record_login(user)

        assert user.login_count == 2
        assert user.last_login_at is not None

    async def test_crud_defaults(self, repos, make_user):
        user = await make_user()

        assert user.id
        assert user.role == "user"
        assert user.email_verified is False
        assert await repos.users.delete(user.id) is True
        assert await repos.users.delete(user.id) is False


class TestProfileRepositories:
    async def test_profile_by_user(self, repos, make_user):
        user = await make_user()
        await repos.profiles.create(Profile(user_id=user.id, headline="LLM engineer"))

        profile = await repos.profiles.get_by_user_id(user.id)

        assert profile.headline == "LLM engineer"
        assert profile.availability_status == "not_looking"

    async def test_find_skill_by_name_ignores_case_and_spaces(self, repos, make_user):
        user = await make_user()
        await repos.skills.create(UserSkill(user_id=user.id, skill_name="PyTorch", proficiency=4))

        assert (await repos.skills.find_by_name(user.id, "  pytorch ")).proficiency == 4
        assert await repos.skills.find_by_name(user.id, "jax") is None

    async def test_list_for_users_groups_by_user(self, repos, make_user):
        a = await make_user("a")
        b = await make_user("b")
        await repos.skills.create(UserSkill(user_id=a.id, skill_name="Python"))
        await repos.skills.create(UserSkill(user_id=a.id, skill_name="RAG"))

        grouped = await repos.skills.list_for_users([a.id, b.id])

        assert sorted(s.skill_name for s in grouped[a.id]) == ["Python", "RAG"]
        assert grouped[b.id] == []

    async def test_users_with_skills_excludes_requester(self, repos, make_user):
        me = await make_user("me")
        other = await make_user("other")
        await repos.skills.create(UserSkill(user_id=me.id, skill_name="Python"))
        await repos.skills.create(UserSkill(user_id=other.id, skill_name="python"))
        await repos.skills.create(UserSkill(user_id=other.id, skill_name="Go"))

        grouped = await repos.skills.list_users_with_skills(["Python"], exclude_user_id=me.id)

        assert grouped == {other.id: ["python"]}
        assert await repos.skills.list_users_with_skills([], exclude_user_id=me.id) == {}

    async def test_replace_models_dedupes(self, repos, make_user):
        user = await make_user()
        await repos.models.replace_for_user(user.id, ["gpt-4"])

        await repos.models.replace_for_user(user.id, ["Claude", " claude ", "", "llama-3"])

        names = [m.model_name for m in await repos.models.list_for_user(user.id)]
        assert sorted(names) == ["Claude", "llama-3"]

    async def test_preferences(self, repos, make_user):
        user = await make_user()
        await repos.preferences.create(JobPreferences(user_id=user.id, work_locations=["remote"]))

        prefs = await repos.preferences.get_by_user_id(user.id)

        assert prefs.work_locations == ["remote"]
        assert prefs.open_to_relocation is False


class TestProfileViewRepository:
    async def test_counts(self, repos, make_user):
        owner = await make_user("owner")
        v1 = await make_user("v1")
        v2 = await make_user("v2")
        await repos.profile_views.record(owner.id, v1.id)
        await repos.profile_views.record(owner.id, v1.id)
        await repos.profile_views.record(owner.id, v2.id)
        await repos.profile_views.record(owner.id, None)

        since = utc_now() - timedelta(days=1)

        assert await repos.profile_views.count_since(owner.id, since) == 4
        assert await repos.profile_views.count_unique_viewers_since(owner.id, since) == 2
        recent = await repos.profile_views.recent_views(owner.id, since, limit=2)
        assert len(recent) == 2
        assert all(view.viewer_id is not None for view in recent)

    async def test_window_excludes_older_views(self, repos, make_user):
        owner = await make_user("owner")
        await repos.profile_views.record(owner.id, None)

        assert await repos.profile_views.count_since(owner.id, utc_now() + timedelta(minutes=1)) == 0
