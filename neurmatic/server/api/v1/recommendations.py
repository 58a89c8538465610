"""
Personalized recommendation endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Query, status

from neurmatic.core.models.io.recommendations import FeedbackCreate, FeedbackRead, RecommendationRead
from neurmatic.server.services.deps import CurrentUserDep, RecommendationDep

router = APIRouter(tags=["recommendations"])


def _split_csv(value: Optional[str]) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


@router.get(
    "",
    response_model=list[RecommendationRead],
    summary="Get Recommendations",
    description="Articles, forum topics, jobs and members ranked for the caller.",
    response_description="Recommendations, most relevant first.",
    responses={400: {"description": "Unknown recommendation type"}},
)
async def get_recommendations(
    user: CurrentUserDep,
    service: RecommendationDep,
    types: Optional[str] = Query(None, description="Comma separated: article, forum_topic, job, user"),
    limit: int = Query(20, ge=1, le=50),
    exclude_ids: Optional[str] = Query(None, description="Comma separated item ids to leave out"),
    explain: bool = Query(True, description="Include a human-readable explanation per item"),
) -> list[RecommendationRead]:
    """
    Get recommendations.

    Rankings blend collaborative signals (what similar members engaged with),
    content similarity with the caller's interests, and recent trends. Results
    are cached per user and type set until feedback is submitted.

    - **types**: Item types to include; all types when omitted.
    - **limit**: Maximum number of items.
    - **exclude_ids**: Items to skip in this response.
    - **explain**: Whether to include explanations.
    """
    recommendations = await service.get_recommendations(
        user.id,
        types=_split_csv(types) or None,
        limit=limit,
        exclude_ids=_split_csv(exclude_ids),
        include_explanations=explain,
    )
    return [RecommendationRead(**rec.to_dict()) for rec in recommendations]


@router.post(
    "/feedback",
    response_model=FeedbackRead,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Recommendation Feedback",
    description="Record feedback on a recommended item. Refreshes the caller's recommendations.",
)
async def submit_feedback(data: FeedbackCreate, user: CurrentUserDep, service: RecommendationDep) -> FeedbackRead:
    """
    Submit feedback.

    - **item_type**: `article`, `forum_topic`, `job` or `user`.
    - **feedback**: `like`, `dislike`, `not_interested` or `clicked`. Negative
      feedback keeps the item out of future recommendations.
    """
    row = await service.submit_feedback(user.id, data.item_type, data.item_id, data.feedback)
    return FeedbackRead.model_validate(row)
