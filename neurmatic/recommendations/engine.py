"""Hybrid recommendation ranking.

Three candidate generators feed one merged ranking per item type:

- collaborative (weight 0.5): what members with overlapping bookmarks engaged with
- content based (weight 0.3): tag/category/skill overlap with the member's interests
- trending (weight 0.2): position in the community's trending list

Each generator returns :class:`Candidate` rows already scaled by its weight,
so merging is a plain sum capped at 100. Nothing here touches the database.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

COLLABORATIVE_WEIGHT = 0.5
CONTENT_BASED_WEIGHT = 0.3
TRENDING_WEIGHT = 0.2

COLLABORATIVE = "collaborative"
CONTENT = "content"
TRENDING = "trending"

ITEM_TYPES = ("article", "forum_topic", "job", "user")

MAX_PER_TYPE = 20
MAX_SCORE = 100.0


@dataclass(frozen=True)
class Candidate:
    id: str
    score: float
    source: str


@dataclass
class ScoredCandidate:
    id: str
    score: float
    sources: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ContentItem:
    """An item offered to content-based scoring with its descriptive tags."""

    id: str
    tags: Tuple[str, ...]


@dataclass
class Recommendation:
    type: str
    id: str
    relevance_score: int
    explanation: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "id": self.id,
            "relevance_score": self.relevance_score,
            "explanation": self.explanation,
            "data": self.data,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Recommendation":
        return cls(
            type=data["type"],
            id=data["id"],
            relevance_score=data["relevance_score"],
            explanation=data["explanation"],
            data=dict(data.get("data") or {}),
        )


def score_collaborative(
    interactions: Iterable[Tuple[str, str]], similar_users: Sequence[Tuple[str, float]]
) -> List[Candidate]:
    """Score items by the similarity of the members who engaged with them.

    Args:
        interactions: ``(item_id, from_user_id)`` pairs
        similar_users: ``(user_id, similarity)`` pairs

    Returns:
        Candidates normalized by the best item and scaled by the collaborative weight
    """
    similarity = dict(similar_users)
    if not similarity:
        return []

    totals: "OrderedDict[str, float]" = OrderedDict()
    for item_id, from_user_id in interactions:
        weight = similarity.get(from_user_id)
        if weight is None:
            continue
        totals[item_id] = totals.get(item_id, 0.0) + weight

    if not totals:
        return []
    top = max(max(totals.values()), 1.0)
    return [
        Candidate(id=item_id, score=total / top * 100 * COLLABORATIVE_WEIGHT, source=COLLABORATIVE)
        for item_id, total in totals.items()
    ]


def score_content_based(candidates: Iterable[ContentItem], interests: Iterable[str]) -> List[Candidate]:
    """Score items by the share of their tags that match the member's interests.

    Items without tags or without any matching tag are dropped.
    """
    wanted = {interest.strip().lower() for interest in interests if interest and interest.strip()}
    if not wanted:
        return []

    scored: List[Candidate] = []
    for item in candidates:
        tags = {tag.strip().lower() for tag in item.tags if tag and tag.strip()}
        if not tags:
            continue
        overlap = len(tags & wanted)
        if overlap == 0:
            continue
        scored.append(Candidate(id=item.id, score=overlap / len(tags) * 100 * CONTENT_BASED_WEIGHT, source=CONTENT))
    return scored


def score_trending(item_ids: Sequence[str]) -> List[Candidate]:
    """Score items by their rank in a trending list (first is most popular)."""
    count = len(item_ids)
    return [
        Candidate(id=item_id, score=(count - index) / count * 100 * TRENDING_WEIGHT, source=TRENDING)
        for index, item_id in enumerate(item_ids)
    ]


def merge_candidates(
    *candidate_lists: Iterable[Candidate], exclude_ids: Optional[Iterable[str]] = None
) -> List[ScoredCandidate]:
    """Sum scores per item across generators, capped at 100.

    Excluded ids never appear in the result. Sources are listed in the order
    they were first seen.
    """
    excluded = set(exclude_ids or ())
    merged: "OrderedDict[str, ScoredCandidate]" = OrderedDict()
    for candidates in candidate_lists:
        for candidate in candidates:
            if candidate.id in excluded:
                continue
            existing = merged.get(candidate.id)
            if existing is None:
                merged[candidate.id] = ScoredCandidate(
                    id=candidate.id, score=candidate.score, sources=[candidate.source]
                )
                continue
            existing.score += candidate.score
            if candidate.source not in existing.sources:
                existing.sources.append(candidate.source)

    for scored in merged.values():
        scored.score = min(scored.score, MAX_SCORE)
    return list(merged.values())


def top_candidates(candidates: Iterable[ScoredCandidate], limit: int = MAX_PER_TYPE) -> List[ScoredCandidate]:
    return sorted(candidates, key=lambda candidate: candidate.score, reverse=True)[:limit]


def explain(sources: Sequence[str]) -> str:
    if COLLABORATIVE in sources:
        return "Because users with similar interests liked this"
    if TRENDING in sources:
        return "Trending in the community"
    if CONTENT in sources:
        return "Based on your interests and past activity"
    return "Recommended for you"
