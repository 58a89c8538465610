"""
Follow graph endpoints.
"""

from fastapi import APIRouter, Response, status

from neurmatic.core.models.io.social import FollowRead, FollowUserRead
from neurmatic.server.services.deps import CurrentUserDep, FollowServiceDep

router = APIRouter(tags=["follows"])


@router.post(
    "/{user_id}/follow",
    response_model=FollowRead,
    status_code=status.HTTP_201_CREATED,
    summary="Follow User",
    description="Follow another member. The followed member is notified.",
    responses={
        400: {"description": "Following oneself"},
        404: {"description": "User not found"},
        409: {"description": "Already following"},
    },
)
async def follow_user(user_id: str, user: CurrentUserDep, service: FollowServiceDep) -> FollowRead:
    return FollowRead.model_validate(await service.follow(user, user_id))


@router.delete(
    "/{user_id}/follow",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Unfollow User",
    responses={404: {"description": "Not following this user"}},
)
async def unfollow_user(user_id: str, user: CurrentUserDep, service: FollowServiceDep) -> Response:
    await service.unfollow(user, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{user_id}/followers", response_model=list[FollowUserRead], summary="List Followers")
async def list_followers(user_id: str, service: FollowServiceDep) -> list[FollowUserRead]:
    return await service.followers(user_id)


@router.get("/{user_id}/following", response_model=list[FollowUserRead], summary="List Following")
async def list_following(user_id: str, service: FollowServiceDep) -> list[FollowUserRead]:
    return await service.following(user_id)
