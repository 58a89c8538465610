"""
Social graph and notification service.
"""

from typing import List, Tuple

from neurmatic.core.database.base import utc_now
from neurmatic.core.database.entities.follows import Follow
from neurmatic.core.database.entities.notifications import Notification, NotificationType
from neurmatic.core.database.entities.users import User, UserStatus
from neurmatic.core.database.repositories.bundle import SqlRepoBundle
from neurmatic.core.errors import BadRequestError, ConflictError, NotFoundError
from neurmatic.core.models.io.social import FollowUserRead


class FollowService:
    def __init__(self, repos: SqlRepoBundle) -> None:
        self.repos = repos

    async def _get_active_user(self, user_id: str) -> User:
        user = await self.repos.users.get_by_id(user_id)
        if user is None or user.status != UserStatus.ACTIVE:
            raise NotFoundError("User not found")
        return user

    async def follow(self, follower: User, user_id: str) -> Follow:
        if follower.id == user_id:
            raise BadRequestError("You cannot follow yourself")
        target = await self._get_active_user(user_id)
        if await self.repos.follows.get_pair(follower.id, target.id):
            raise ConflictError("Already following this user")

        follow = await self.repos.follows.create(Follow(follower_id=follower.id, following_id=target.id))
        await self.repos.notifications.notify(
            target.id,
            NotificationType.NEW_FOLLOWER,
            "New follower",
            f"{follower.username} started following you.",
            action_url=f"/profiles/{follower.username}",
        )
        return follow

    async def unfollow(self, follower: User, user_id: str) -> None:
        follow = await self.repos.follows.get_pair(follower.id, user_id)
        if follow is None:
            raise NotFoundError("You are not following this user")
        await self.repos.follows.delete(follow.id)

    async def _with_usernames(self, follows: List[Follow], key: str) -> List[FollowUserRead]:
        ids = [getattr(follow, key) for follow in follows]
        users = {user.id: user for user in await self.repos.users.get_many(ids)}
        return [
            FollowUserRead(user_id=user_id, username=users[user_id].username, followed_at=follow.created_at)
            for follow, user_id in zip(follows, ids)
            if user_id in users
        ]

    async def followers(self, user_id: str) -> List[FollowUserRead]:
        await self._get_active_user(user_id)
        return await self._with_usernames(await self.repos.follows.list_followers(user_id), "follower_id")

    async def following(self, user_id: str) -> List[FollowUserRead]:
        await self._get_active_user(user_id)
        return await self._with_usernames(await self.repos.follows.list_following(user_id), "following_id")


class NotificationService:
    def __init__(self, repos: SqlRepoBundle) -> None:
        self.repos = repos

    async def list(self, user: User, limit: int, offset: int, unread_only: bool = False) -> Tuple[List[Notification], int]:
        return await self.repos.notifications.list_for_user(user.id, limit, offset, unread_only=unread_only)

    async def unread_count(self, user: User) -> int:
        return await self.repos.notifications.count_unread(user.id)

    async def mark_read(self, user: User, notification_id: str) -> Notification:
        notification = await self.repos.notifications.get_by_id(notification_id)
        if notification is None or notification.user_id != user.id:
            raise NotFoundError("Notification not found")
        if notification.read_at is None:
            notification.read_at = utc_now()
            notification = await self.repos.notifications.update(notification)
        return notification

    async def mark_all_read(self, user: User) -> int:
        return await self.repos.notifications.mark_all_read(user.id)
