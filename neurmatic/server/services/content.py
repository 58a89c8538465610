"""
Community content service: news articles, bookmarks, forum topics, votes and replies.
"""

from datetime import timedelta
from typing import List, Optional, Tuple

from neurmatic.core.database.base import utc_now
from neurmatic.core.database.entities.articles import Article, ArticleStatus, Bookmark
from neurmatic.core.database.entities.forum import Reply, Topic, TopicVote
from neurmatic.core.database.entities.users import User, UserRole
from neurmatic.core.database.repositories.bundle import SqlRepoBundle
from neurmatic.core.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from neurmatic.core.logging_config import get_logger
from neurmatic.core.models.io.articles import ArticleCreate, ArticleUpdate
from neurmatic.core.models.io.forum import ReplyCreate, ReplyUpdate, TopicCreate, TopicUpdate, VoteResult

from .slugs import unique_slug

logger = get_logger(__name__)

MODERATOR_ROLES = frozenset({UserRole.MODERATOR, UserRole.ADMIN})
MODERATOR_ONLY_TOPIC_FIELDS = frozenset({"status", "is_locked"})
# Replies nest at most three levels deep: depth 0, 1 and 2.
MAX_REPLY_DEPTH = 2
REPLY_EDIT_WINDOW = timedelta(minutes=15)


def is_moderator(user: User) -> bool:
    return user.role in MODERATOR_ROLES


class ArticleService:
    def __init__(self, repos: SqlRepoBundle) -> None:
        self.repos = repos

    async def _get(self, article_id: str) -> Article:
        article = await self.repos.articles.get_visible(article_id)
        if article is None:
            raise NotFoundError("Article not found")
        return article

    async def create(self, user: User, data: ArticleCreate) -> Article:
        slug = await unique_slug(data.title, self.repos.articles.slug_exists)
        article = Article(**data.model_dump(), slug=slug, author_id=user.id)
        if article.status == ArticleStatus.PUBLISHED:
            article.published_at = utc_now()
        article = await self.repos.articles.create(article)
        logger.info(f"Article created: id={article.id}, slug={article.slug}, status={article.status}")
        return article

    async def list_published(
        self, limit: int, offset: int, category: Optional[str] = None, tag: Optional[str] = None
    ) -> Tuple[List[Article], int]:
        return await self.repos.articles.list_published(limit, offset, category=category, tag=tag)

    async def get_by_slug(self, slug: str, viewer: Optional[User] = None) -> Article:
        """Published articles are public; drafts are visible to moderators only."""
        article = await self.repos.articles.get_by_slug(slug)
        if article is None:
            raise NotFoundError("Article not found")
        if article.status != ArticleStatus.PUBLISHED and (viewer is None or not is_moderator(viewer)):
            raise NotFoundError("Article not found")
        return await self.repos.articles.increment_view_count(article)

    async def update(self, article_id: str, data: ArticleUpdate) -> Article:
        article = await self._get(article_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(article, field, value)
        if article.status == ArticleStatus.PUBLISHED and article.published_at is None:
            article.published_at = utc_now()
        return await self.repos.articles.update(article)

    async def delete(self, article_id: str) -> None:
        article = await self._get(article_id)
        article.is_deleted = True
        await self.repos.articles.update(article)

    async def bookmark(self, user: User, article_id: str) -> Bookmark:
        article = await self._get(article_id)
        if await self.repos.bookmarks.get_for_user_and_article(user.id, article.id):
            raise ConflictError("Article already bookmarked")
        bookmark = await self.repos.bookmarks.create(Bookmark(user_id=user.id, article_id=article.id))
        await self.repos.articles.adjust_bookmark_count(article.id, 1)
        return bookmark

    async def remove_bookmark(self, user: User, article_id: str) -> None:
        bookmark = await self.repos.bookmarks.get_for_user_and_article(user.id, article_id)
        if bookmark is None:
            raise NotFoundError("Bookmark not found")
        await self.repos.bookmarks.delete(bookmark.id)
        await self.repos.articles.adjust_bookmark_count(article_id, -1)

    async def list_bookmarks(self, user: User) -> List[Bookmark]:
        return await self.repos.bookmarks.list_for_user(user.id)


class ForumService:
    def __init__(self, repos: SqlRepoBundle) -> None:
        self.repos = repos

    async def _get(self, topic_id: str) -> Topic:
        topic = await self.repos.topics.get_visible(topic_id)
        if topic is None:
            raise NotFoundError("Topic not found")
        return topic

    async def create(self, user: User, data: TopicCreate) -> Topic:
        slug = await unique_slug(data.title, self.repos.topics.slug_exists)
        topic = await self.repos.topics.create(Topic(**data.model_dump(), slug=slug, author_id=user.id))
        logger.info(f"Topic created: id={topic.id}, slug={topic.slug}, author={user.id}")
        return topic

    async def list(
        self,
        limit: int,
        offset: int,
        category: Optional[str] = None,
        topic_type: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Tuple[List[Topic], int]:
        return await self.repos.topics.list_page(limit, offset, category=category, topic_type=topic_type, status=status)

    async def get(self, topic_id: str) -> Topic:
        topic = await self._get(topic_id)
        return await self.repos.topics.increment_view_count(topic)

    async def update(self, user: User, topic_id: str, data: TopicUpdate) -> Topic:
        topic = await self._get(topic_id)
        changes = data.model_dump(exclude_unset=True)
        if not is_moderator(user):
            if topic.author_id != user.id:
                raise ForbiddenError("You cannot edit this topic")
            if topic.is_locked:
                raise ForbiddenError("Topic is locked")
            if MODERATOR_ONLY_TOPIC_FIELDS & changes.keys():
                raise ForbiddenError("Only moderators can change topic status or lock state")

        for field, value in changes.items():
            setattr(topic, field, value)
        return await self.repos.topics.update(topic)

    async def delete(self, user: User, topic_id: str) -> None:
        topic = await self._get(topic_id)
        if topic.author_id != user.id and not is_moderator(user):
            raise ForbiddenError("You cannot delete this topic")
        topic.is_deleted = True
        await self.repos.topics.update(topic)

    async def vote(self, user: User, topic_id: str, value: int) -> VoteResult:
        """
        Cast, change or remove (``value=0``) the user's vote.

        Counters are recomputed from the vote rows so they always agree with them.
        """
        topic = await self._get(topic_id)
        if topic.author_id == user.id:
            raise BadRequestError("You cannot vote on your own topic")

        votes = self.repos.topic_votes
        existing = await votes.get_for_topic_and_user(topic.id, user.id)
        if value == 0:
            if existing is not None:
                await votes.delete(existing.id)
        elif existing is None:
            await votes.create(TopicVote(topic_id=topic.id, user_id=user.id, value=value))
        elif existing.value != value:
            existing.value = value
            await votes.update(existing)

        all_votes = await votes.list_for_topic(topic.id)
        topic.upvote_count = sum(1 for vote in all_votes if vote.value > 0)
        topic.downvote_count = sum(1 for vote in all_votes if vote.value < 0)
        topic.vote_score = topic.upvote_count - topic.downvote_count
        topic = await self.repos.topics.update(topic)

        return VoteResult(
            topic_id=topic.id,
            user_vote=value,
            upvote_count=topic.upvote_count,
            downvote_count=topic.downvote_count,
            vote_score=topic.vote_score,
        )

    async def _get_reply(self, topic_id: str, reply_id: str) -> Reply:
        reply = await self.repos.replies.get_visible(reply_id)
        if reply is None or reply.topic_id != topic_id:
            raise NotFoundError("Reply not found")
        return reply

    async def create_reply(self, user: User, topic_id: str, data: ReplyCreate) -> Reply:
        topic = await self._get(topic_id)
        if topic.is_locked and not is_moderator(user):
            raise ForbiddenError("Topic is locked")

        depth = 0
        if data.parent_reply_id is not None:
            parent = await self.repos.replies.get_visible(data.parent_reply_id)
            if parent is None or parent.topic_id != topic.id:
                raise BadRequestError("Parent reply must belong to the same topic")
            if parent.depth >= MAX_REPLY_DEPTH:
                raise BadRequestError(f"Replies cannot nest deeper than {MAX_REPLY_DEPTH + 1} levels")
            depth = parent.depth + 1

        reply = await self.repos.replies.create(
            Reply(
                topic_id=topic.id,
                author_id=user.id,
                parent_reply_id=data.parent_reply_id,
                content=data.content,
                depth=depth,
            )
        )
        await self.repos.topics.adjust_reply_count(topic.id, 1)
        logger.info(f"Reply created: id={reply.id}, topic={topic.id}, author={user.id}, depth={depth}")
        return reply

    async def list_replies(self, topic_id: str, limit: int, offset: int) -> Tuple[List[Reply], int]:
        topic = await self._get(topic_id)
        return await self.repos.replies.list_for_topic(topic.id, limit, offset)

    async def update_reply(self, user: User, topic_id: str, reply_id: str, data: ReplyUpdate) -> Reply:
        """
        Edit a reply's content.

        Authors may edit within ``REPLY_EDIT_WINDOW`` of posting. Moderators may
        edit any reply at any time.
        """
        reply = await self._get_reply(topic_id, reply_id)
        if not is_moderator(user):
            if reply.author_id != user.id:
                raise ForbiddenError("You cannot edit this reply")
            if utc_now() - reply.created_at > REPLY_EDIT_WINDOW:
                raise ForbiddenError("Replies can only be edited within 15 minutes of posting")

        reply.content = data.content
        reply.edited_at = utc_now()
        return await self.repos.replies.update(reply)

    async def delete_reply(self, user: User, topic_id: str, reply_id: str) -> None:
        reply = await self._get_reply(topic_id, reply_id)
        if reply.author_id != user.id and not is_moderator(user):
            raise ForbiddenError("You cannot delete this reply")
        reply.is_deleted = True
        await self.repos.replies.update(reply)
        await self.repos.topics.adjust_reply_count(reply.topic_id, -1)
