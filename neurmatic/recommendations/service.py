"""Recommendation service.

Builds per-type candidate lists from the database, ranks them with
:mod:`neurmatic.recommendations.engine` and caches the merged list under
``recommendations:{user_id}:{types}``. Feedback on an item is stored and
drops every cached list of that user.
"""

from __future__ import annotations

import math
import time
from datetime import timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from neurmatic.core.cache import CacheStore
from neurmatic.core.database.base import utc_now
from neurmatic.core.database.entities.recommendations import RecommendationFeedback
from neurmatic.core.database.repositories.bundle import SqlRepoBundle
from neurmatic.core.errors import BadRequestError
from neurmatic.core.logging_config import get_logger
from neurmatic.core.monitoring import log_error, log_recommendations_generated

from . import engine
from .engine import Candidate, ContentItem, Recommendation

logger = get_logger(__name__)

RECOMMENDATION_KEY_PREFIX = "recommendations"
FEEDBACK_VALUES = ("like", "dislike", "not_interested", "clicked")
TRENDING_WINDOW = timedelta(days=7)
SLOW_GENERATION_MS = 200
SIMILAR_USERS_MIN_SHARED = 3
SIMILAR_USERS_LIMIT = 50
TRENDING_LIMIT = 20


def recommendation_cache_key(user_id: str, types: Iterable[str]) -> str:
    return f"{RECOMMENDATION_KEY_PREFIX}:{user_id}:{','.join(sorted(types))}"


def _filter_and_limit(
    recommendations: List[Recommendation], exclude_ids: Set[str], limit: int
) -> List[Recommendation]:
    return [rec for rec in recommendations if rec.id not in exclude_ids][:limit]


class RecommendationService:
    """Hybrid recommendations with caching and feedback."""

    def __init__(self, repos: SqlRepoBundle, cache: CacheStore, ttl_seconds: int) -> None:
        self.repos = repos
        self.data = repos.recommendation_data
        self.cache = cache
        self.ttl_seconds = ttl_seconds

    async def get_recommendations(
        self,
        user_id: str,
        types: Optional[Sequence[str]] = None,
        limit: int = 20,
        exclude_ids: Optional[Iterable[str]] = None,
        include_explanations: bool = True,
    ) -> List[Recommendation]:
        """
        Get personalized recommendations for a user.

        Args:
            user_id: The requesting user
            types: Item types to include (defaults to every type)
            limit: Maximum number of recommendations returned
            exclude_ids: Item ids to leave out of this response
            include_explanations: Whether to fill in the explanation text

        Returns:
            Recommendations sorted by relevance, highest first
        """
        requested = list(dict.fromkeys(types or engine.ITEM_TYPES))
        unknown = [item_type for item_type in requested if item_type not in engine.ITEM_TYPES]
        if unknown:
            raise BadRequestError(f"Unknown recommendation types: {', '.join(unknown)}")

        excluded = set(exclude_ids or ())
        key = recommendation_cache_key(user_id, requested)

        cached = await self.cache.get(key)
        if cached is not None:
            logger.debug(f"Recommendations cache hit: user={user_id}, types={requested}")
            recommendations = [Recommendation.from_dict(item) for item in cached]
            return self._present(_filter_and_limit(recommendations, excluded, limit), include_explanations)

        started = time.perf_counter()
        try:
            recommendations = await self._generate(user_id, requested)
        except Exception as e:
            logger.error(f"Failed to generate recommendations for user {user_id}: {e}", exc_info=True)
            log_error(
                "RecommendationError",
                str(e),
                {"operation": "get_recommendations", "user_id": user_id, "types": requested, "limit": limit},
            )
            raise

        await self.cache.set(key, [rec.to_dict() for rec in recommendations], ttl=self.ttl_seconds)

        duration_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"Generated recommendations: user={user_id}, types={requested}, "
            f"count={len(recommendations)}, duration_ms={duration_ms:.1f}"
        )
        if duration_ms > SLOW_GENERATION_MS:
            logger.warning(
                f"Recommendation generation exceeded {SLOW_GENERATION_MS}ms target: "
                f"user={user_id}, duration_ms={duration_ms:.1f}"
            )
        log_recommendations_generated(user_id, requested, len(recommendations), duration_ms)

        return self._present(_filter_and_limit(recommendations, excluded, limit), include_explanations)

    async def submit_feedback(self, user_id: str, item_type: str, item_id: str, feedback: str) -> RecommendationFeedback:
        """Store feedback on a recommended item and drop the user's cached recommendations."""
        if item_type not in engine.ITEM_TYPES:
            raise BadRequestError(f"Unknown item type: {item_type}")
        if feedback not in FEEDBACK_VALUES:
            raise BadRequestError(f"Unknown feedback: {feedback}")

        row = await self.repos.feedback.upsert(user_id, item_type, item_id, feedback)
        removed = await self.invalidate_user_recommendations(user_id)
        logger.info(
            f"Recommendation feedback recorded: user={user_id}, {item_type}={item_id}, "
            f"feedback={feedback}, invalidated={removed}"
        )
        return row

    async def invalidate_user_recommendations(self, user_id: str) -> int:
        return await self.cache.delete_pattern(f"{RECOMMENDATION_KEY_PREFIX}:{user_id}:*")

    @staticmethod
    def _present(recommendations: List[Recommendation], include_explanations: bool) -> List[Recommendation]:
        if include_explanations:
            return recommendations
        for rec in recommendations:
            rec.explanation = ""
        return recommendations

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    async def _generate(self, user_id: str, types: Sequence[str]) -> List[Recommendation]:
        similar_users = await self.data.find_similar_users(
            user_id, min_shared=SIMILAR_USERS_MIN_SHARED, limit=SIMILAR_USERS_LIMIT
        )
        similar_ids = [other_id for other_id, _ in similar_users]
        since = utc_now() - TRENDING_WINDOW

        builders = {
            "article": self._article_candidates,
            "forum_topic": self._topic_candidates,
            "job": self._job_candidates,
            "user": self._user_candidates,
        }

        recommendations: List[Recommendation] = []
        for item_type in types:
            candidate_lists, interacted = await builders[item_type](user_id, similar_ids, similar_users, since)
            negative = await self.repos.feedback.negative_item_ids(user_id, item_type)
            merged = engine.merge_candidates(*candidate_lists, exclude_ids=negative | interacted)
            top = engine.top_candidates(merged, engine.MAX_PER_TYPE)
            details = await self._load_details(item_type, [candidate.id for candidate in top])
            for candidate in top:
                data = details.get(candidate.id)
                if data is None:
                    continue
                recommendations.append(
                    Recommendation(
                        type=item_type,
                        id=candidate.id,
                        relevance_score=math.floor(candidate.score + 0.5),
                        explanation=engine.explain(candidate.sources),
                        data=data,
                    )
                )

        recommendations.sort(key=lambda rec: rec.relevance_score, reverse=True)
        return recommendations

    async def _article_candidates(
        self, user_id: str, similar_ids: List[str], similar_users: List[Tuple[str, float]], since
    ) -> Tuple[List[List[Candidate]], Set[str]]:
        interacted = await self.data.bookmarked_article_ids(user_id)
        collaborative = engine.score_collaborative(await self.data.bookmarks_by_users(similar_ids), similar_users)

        interests = await self.data.article_interest_tags(list(interacted))
        pool = await self.data.published_articles()
        content = engine.score_content_based(
            (ContentItem(id=a.id, tags=tuple(a.tags or []) + ((a.category,) if a.category else ())) for a in pool),
            interests,
        )
        trending = engine.score_trending([a.id for a in await self.data.trending_articles(since, TRENDING_LIMIT)])
        return [collaborative, content, trending], interacted

    async def _topic_candidates(
        self, user_id: str, similar_ids: List[str], similar_users: List[Tuple[str, float]], since
    ) -> Tuple[List[List[Candidate]], Set[str]]:
        interacted = await self.data.voted_topic_ids(user_id)
        upvoted = await self.data.voted_topic_ids(user_id, positive_only=True)
        collaborative = engine.score_collaborative(await self.data.upvotes_by_users(similar_ids), similar_users)

        interests = await self.data.topic_interest_tags(list(upvoted))
        pool = await self.data.open_topics()
        content = engine.score_content_based(
            (ContentItem(id=t.id, tags=tuple(t.tags or []) + (t.category,)) for t in pool), interests
        )
        trending = engine.score_trending([t.id for t in await self.data.trending_topics(since, TRENDING_LIMIT)])
        return [collaborative, content, trending], interacted

    async def _job_candidates(
        self, user_id: str, similar_ids: List[str], similar_users: List[Tuple[str, float]], since
    ) -> Tuple[List[List[Candidate]], Set[str]]:
        interacted = await self.data.applied_job_ids(user_id)
        collaborative = engine.score_collaborative(await self.data.applications_by_users(similar_ids), similar_users)

        interests = [skill.skill_name for skill in await self.repos.skills.list_for_user(user_id)]
        prefs = await self.repos.preferences.get_by_user_id(user_id)
        if prefs is not None:
            interests.extend(prefs.desired_skills or [])
        pool = await self.data.active_jobs()
        skill_names = await self.data.job_skill_names([job.id for job in pool])
        content = engine.score_content_based(
            (ContentItem(id=job.id, tags=tuple(skill_names.get(job.id, []))) for job in pool), interests
        )
        trending = engine.score_trending([j.id for j in await self.data.trending_jobs(since, TRENDING_LIMIT)])
        return [collaborative, content, trending], interacted

    async def _user_candidates(
        self, user_id: str, similar_ids: List[str], similar_users: List[Tuple[str, float]], since
    ) -> Tuple[List[List[Candidate]], Set[str]]:
        interacted = await self.data.followed_user_ids(user_id) | {user_id}
        follows = [pair for pair in await self.data.follows_by_users(similar_ids) if pair[0] != user_id]
        collaborative = engine.score_collaborative(follows, similar_users)

        own_skills = [skill.skill_name for skill in await self.repos.skills.list_for_user(user_id)]
        others = await self.repos.skills.list_users_with_skills(own_skills, exclude_user_id=user_id)
        # Score each member on the full set of their skills, not just the shared ones
        all_skills = await self.repos.skills.list_for_users(list(others))
        content = engine.score_content_based(
            (
                ContentItem(id=other_id, tags=tuple(skill.skill_name for skill in skills))
                for other_id, skills in all_skills.items()
            ),
            own_skills,
        )
        return [collaborative, content], interacted

    async def _load_details(self, item_type: str, ids: List[str]) -> Dict[str, Dict[str, Any]]:
        if not ids:
            return {}
        if item_type == "article":
            return {
                a.id: {"title": a.title, "slug": a.slug, "summary": a.summary, "category": a.category, "tags": a.tags}
                for a in await self.data.published_articles(ids=ids)
            }
        if item_type == "forum_topic":
            return {
                t.id: {"title": t.title, "slug": t.slug, "category": t.category, "type": t.type}
                for t in await self.data.open_topics(ids=ids)
            }
        if item_type == "job":
            return {
                j.id: {
                    "title": j.title,
                    "company_id": j.company_id,
                    "work_location": j.work_location,
                    "experience_level": j.experience_level,
                    "location": j.location,
                }
                for j in await self.data.active_jobs(ids=ids)
            }
        return {u.id: {"username": u.username, "role": u.role} for u in await self.data.active_users(ids)}
