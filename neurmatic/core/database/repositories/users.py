"""
User and profile repositories.

This module provides data access for accounts and the candidate side of
matching: profiles, skills, LLM models, work history, job preferences and
profile views.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Sequence

from sqlalchemy import delete as sa_delete
from sqlalchemy import distinct, func
from sqlalchemy import select as sa_select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..base import utc_now
from ..entities.users import (
    JobPreferences,
    Profile,
    ProfileView,
    User,
    UserModel,
    UserSkill,
    WorkExperience,
)
from .base import QueryBuilder, SQLModelRepository


class UserRepository(SQLModelRepository[User]):
    """Repository for member accounts."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.email) == email.lower())
        return await self._first(stmt)

    async def get_by_username(self, username: str) -> Optional[User]:
        stmt = select(User).where(User.username == username)
        return await self._first(stmt)

    async def get_many(self, user_ids: Sequence[str]) -> List[User]:
        if not user_ids:
            return []
        stmt = QueryBuilder.apply_in(select(User), User.id, user_ids)
        return await self._all(stmt)

    async def record_login(self, user: User) -> User:
        """Stamp ``last_login_at`` and bump ``login_count``."""
        user.last_login_at = utc_now()
        user.login_count = (user.login_count or 0) + 1
        return await self.update(user)


class ProfileRepository(SQLModelRepository[Profile]):
    """Repository for public member profiles."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Profile)

    async def get_by_user_id(self, user_id: str) -> Optional[Profile]:
        stmt = select(Profile).where(Profile.user_id == user_id)
        return await self._first(stmt)


class UserSkillRepository(SQLModelRepository[UserSkill]):
    """Repository for member skills."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, UserSkill)

    async def list_for_user(self, user_id: str) -> List[UserSkill]:
        stmt = select(UserSkill).where(UserSkill.user_id == user_id).order_by(UserSkill.created_at)
        return await self._all(stmt)

    async def find_by_name(self, user_id: str, skill_name: str) -> Optional[UserSkill]:
        """Case-insensitive lookup of a member's skill by name."""
        stmt = select(UserSkill).where(
            (UserSkill.user_id == user_id) & (func.lower(UserSkill.skill_name) == skill_name.strip().lower())
        )
        return await self._first(stmt)

    async def list_for_users(self, user_ids: Sequence[str]) -> Dict[str, List[UserSkill]]:
        """Skills of several members keyed by user id."""
        grouped: Dict[str, List[UserSkill]] = {user_id: [] for user_id in user_ids}
        if not user_ids:
            return grouped
        stmt = QueryBuilder.apply_in(select(UserSkill), UserSkill.user_id, user_ids)
        for skill in await self._all(stmt):
            grouped.setdefault(skill.user_id, []).append(skill)
        return grouped

    async def list_users_with_skills(
        self, skill_names: Sequence[str], exclude_user_id: str, limit: int = 100
    ) -> Dict[str, List[str]]:
        """Members other than ``exclude_user_id`` holding any of the skills, with their skill names."""
        lowered = [name.lower() for name in skill_names]
        if not lowered:
            return {}
        stmt = (
            select(UserSkill)
            .where(func.lower(UserSkill.skill_name).in_(lowered))
            .where(UserSkill.user_id != exclude_user_id)
        )
        grouped: Dict[str, List[str]] = {}
        for skill in await self._all(stmt):
            if skill.user_id not in grouped and len(grouped) >= limit:
                continue
            grouped.setdefault(skill.user_id, []).append(skill.skill_name)
        return grouped


class UserModelRepository(SQLModelRepository[UserModel]):
    """Repository for the LLMs a member works with."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, UserModel)

    async def list_for_user(self, user_id: str) -> List[UserModel]:
        stmt = select(UserModel).where(UserModel.user_id == user_id).order_by(UserModel.created_at)
        return await self._all(stmt)

    async def replace_for_user(self, user_id: str, model_names: Sequence[str]) -> List[UserModel]:
        """Replace the member's model list, dropping blank and duplicate names."""
        await self.session.execute(sa_delete(UserModel).where(UserModel.user_id == user_id))
        seen: set[str] = set()
        rows: List[UserModel] = []
        for name in model_names:
            cleaned = name.strip()
            if not cleaned or cleaned.lower() in seen:
                continue
            seen.add(cleaned.lower())
            row = UserModel(user_id=user_id, model_name=cleaned)
            self.session.add(row)
            rows.append(row)
        await self.session.commit()
        return rows


class WorkExperienceRepository(SQLModelRepository[WorkExperience]):
    """Repository for member work history."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, WorkExperience)

    async def list_for_user(self, user_id: str) -> List[WorkExperience]:
        stmt = (
            select(WorkExperience)
            .where(WorkExperience.user_id == user_id)
            .order_by(WorkExperience.start_date.desc(), WorkExperience.created_at.desc())  # type: ignore[union-attr]
        )
        return await self._all(stmt)


class JobPreferencesRepository(SQLModelRepository[JobPreferences]):
    """Repository for member job-search preferences."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, JobPreferences)

    async def get_by_user_id(self, user_id: str) -> Optional[JobPreferences]:
        stmt = select(JobPreferences).where(JobPreferences.user_id == user_id)
        return await self._first(stmt)


class ProfileViewRepository(SQLModelRepository[ProfileView]):
    """Repository for profile view tracking."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ProfileView)

    async def record(self, profile_user_id: str, viewer_id: Optional[str]) -> ProfileView:
        return await self.create(ProfileView(profile_user_id=profile_user_id, viewer_id=viewer_id))

    async def count_since(self, profile_user_id: str, since: datetime) -> int:
        stmt = (
            sa_select(func.count(ProfileView.id))
            .where(ProfileView.profile_user_id == profile_user_id)
            .where(ProfileView.viewed_at >= since)
        )
        return int((await self.session.execute(stmt)).scalar_one())

    async def count_unique_viewers_since(self, profile_user_id: str, since: datetime) -> int:
        stmt = (
            sa_select(func.count(distinct(ProfileView.viewer_id)))
            .where(ProfileView.profile_user_id == profile_user_id)
            .where(ProfileView.viewed_at >= since)
            .where(ProfileView.viewer_id.is_not(None))  # type: ignore[union-attr]
        )
        return int((await self.session.execute(stmt)).scalar_one())

    async def recent_views(self, profile_user_id: str, since: datetime, limit: int = 10) -> List[ProfileView]:
        stmt = (
            select(ProfileView)
            .where(ProfileView.profile_user_id == profile_user_id)
            .where(ProfileView.viewed_at >= since)
            .where(ProfileView.viewer_id.is_not(None))  # type: ignore[union-attr]
            .order_by(ProfileView.viewed_at.desc())  # type: ignore[attr-defined]
            .limit(limit)
        )
        return await self._all(stmt)
