"""
Profile service.

Every write to the candidate side of matching (profile, skills, work history,
LLM models, job preferences) drops the member's cached match scores.
"""

from datetime import timedelta
from typing import Optional

from neurmatic.core.database.base import to_naive_utc, utc_now
from neurmatic.core.database.entities.users import (
    JobPreferences,
    Profile,
    User,
    UserSkill,
    UserStatus,
    WorkExperience,
)
from neurmatic.core.database.repositories.bundle import SqlRepoBundle
from neurmatic.core.errors import ConflictError, NotFoundError
from neurmatic.core.logging_config import get_logger
from neurmatic.core.models.io.profiles import (
    ExperienceCreate,
    ExperienceRead,
    ModelsRead,
    PreferencesRead,
    PreferencesUpdate,
    ProfileRead,
    ProfileUpdate,
    ProfileViewerRead,
    ProfileViewStats,
    PublicProfileRead,
    SkillCreate,
    SkillRead,
)
from neurmatic.matching.service import MatchingService

logger = get_logger(__name__)


class ProfileService:
    def __init__(self, repos: SqlRepoBundle, matching: MatchingService) -> None:
        self.repos = repos
        self.matching = matching

    async def get_public_profile(self, username: str, viewer: Optional[User]) -> PublicProfileRead:
        """Public profile of ``username``. Views by anyone but the owner are recorded."""
        user = await self.repos.users.get_by_username(username)
        if user is None or user.status != UserStatus.ACTIVE:
            raise NotFoundError("Profile not found")

        if viewer is None or viewer.id != user.id:
            await self.repos.profile_views.record(user.id, viewer.id if viewer else None)

        profile = await self.repos.profiles.get_by_user_id(user.id)
        skills = await self.repos.skills.list_for_user(user.id)
        experiences = await self.repos.experiences.list_for_user(user.id)
        models = await self.repos.models.list_for_user(user.id)
        return PublicProfileRead(
            user_id=user.id,
            username=user.username,
            profile=ProfileRead.model_validate(profile) if profile else None,
            skills=[SkillRead.model_validate(skill) for skill in skills],
            experiences=[ExperienceRead.model_validate(exp) for exp in experiences],
            models=[model.model_name for model in models],
        )

    async def update_profile(self, user: User, data: ProfileUpdate) -> ProfileRead:
        profile = await self.repos.profiles.get_by_user_id(user.id)
        changes = data.model_dump(exclude_unset=True)
        if profile is None:
            profile = await self.repos.profiles.create(Profile(user_id=user.id, **changes))
        else:
            for field, value in changes.items():
                setattr(profile, field, value)
            profile = await self.repos.profiles.update(profile)

        await self.matching.invalidate_user_matches(user.id)
        return ProfileRead.model_validate(profile)

    async def add_skill(self, user: User, data: SkillCreate) -> SkillRead:
        name = data.skill_name.strip()
        if await self.repos.skills.find_by_name(user.id, name):
            raise ConflictError(f"Skill '{name}' already exists on your profile")

        skill = await self.repos.skills.create(
            UserSkill(user_id=user.id, skill_name=name, skill_type=data.skill_type, proficiency=data.proficiency)
        )
        await self.matching.invalidate_user_matches(user.id)
        return SkillRead.model_validate(skill)

    async def remove_skill(self, user: User, skill_id: str) -> None:
        skill = await self.repos.skills.get_by_id(skill_id)
        if skill is None or skill.user_id != user.id:
            raise NotFoundError("Skill not found")
        await self.repos.skills.delete(skill_id)
        await self.matching.invalidate_user_matches(user.id)

    async def add_experience(self, user: User, data: ExperienceCreate) -> ExperienceRead:
        experience = await self.repos.experiences.create(
            WorkExperience(
                user_id=user.id,
                company_name=data.company_name,
                title=data.title,
                description=data.description,
                start_date=to_naive_utc(data.start_date),
                end_date=to_naive_utc(data.end_date),
                is_current=data.is_current,
                tech_stack=data.tech_stack.model_dump(),
            )
        )
        await self.matching.invalidate_user_matches(user.id)
        return ExperienceRead.model_validate(experience)

    async def remove_experience(self, user: User, experience_id: str) -> None:
        experience = await self.repos.experiences.get_by_id(experience_id)
        if experience is None or experience.user_id != user.id:
            raise NotFoundError("Work experience not found")
        await self.repos.experiences.delete(experience_id)
        await self.matching.invalidate_user_matches(user.id)

    async def replace_models(self, user: User, models: list[str]) -> ModelsRead:
        rows = await self.repos.models.replace_for_user(user.id, models)
        await self.matching.invalidate_user_matches(user.id)
        return ModelsRead(models=[row.model_name for row in rows])

    async def update_preferences(self, user: User, data: PreferencesUpdate) -> PreferencesRead:
        values = data.model_dump()
        prefs = await self.repos.preferences.get_by_user_id(user.id)
        if prefs is None:
            prefs = await self.repos.preferences.create(JobPreferences(user_id=user.id, **values))
        else:
            for field, value in values.items():
                setattr(prefs, field, value)
            prefs = await self.repos.preferences.update(prefs)

        await self.matching.invalidate_user_matches(user.id)
        return PreferencesRead.model_validate(prefs)

    async def get_preferences(self, user: User) -> PreferencesRead:
        prefs = await self.repos.preferences.get_by_user_id(user.id)
        if prefs is None:
            raise NotFoundError("Job preferences not set")
        return PreferencesRead.model_validate(prefs)

    async def view_stats(self, user: User, days: int) -> ProfileViewStats:
        since = utc_now() - timedelta(days=days)
        views = self.repos.profile_views
        recent = await views.recent_views(user.id, since)
        viewers = {u.id: u for u in await self.repos.users.get_many([v.viewer_id for v in recent if v.viewer_id])}
        return ProfileViewStats(
            days=days,
            total_views=await views.count_since(user.id, since),
            unique_viewers=await views.count_unique_viewers_since(user.id, since),
            recent_viewers=[
                ProfileViewerRead(
                    viewer_id=view.viewer_id,
                    username=viewers[view.viewer_id].username if view.viewer_id in viewers else None,
                    viewed_at=view.viewed_at,
                )
                for view in recent
                if view.viewer_id
            ],
        )
