"""
Forum endpoints: topics, votes and replies.
"""

from typing import Optional

from fastapi import APIRouter, Query, Response, status

from neurmatic.core.models.io.common import Page
from neurmatic.core.models.io.forum import (
    ReplyCreate,
    ReplyRead,
    ReplyUpdate,
    TopicCreate,
    TopicRead,
    TopicStatusLiteral,
    TopicType,
    TopicUpdate,
    VoteRequest,
    VoteResult,
)
from neurmatic.server.services.deps import CurrentUserDep, ForumServiceDep, PaginationDep

router = APIRouter(tags=["forum"])


@router.post(
    "/topics",
    response_model=TopicRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Topic",
    response_description="The created topic.",
)
async def create_topic(data: TopicCreate, user: CurrentUserDep, service: ForumServiceDep) -> TopicRead:
    """
    Start a forum topic.

    - **title**: Topic title; the URL slug is derived from it and made unique.
    - **category**: Forum category.
    - **type**: `discussion`, `question`, `showcase` or `tutorial`.
    """
    return TopicRead.model_validate(await service.create(user, data))


@router.get(
    "/topics",
    response_model=Page[TopicRead],
    summary="List Topics",
    description="Topics, newest first, optionally filtered by category, type or status.",
)
async def list_topics(
    pagination: PaginationDep,
    service: ForumServiceDep,
    category: Optional[str] = None,
    topic_type: Optional[TopicType] = Query(None, alias="type"),
    status_filter: Optional[TopicStatusLiteral] = Query(None, alias="status"),
) -> Page[TopicRead]:
    items, total = await service.list(
        pagination.limit, pagination.offset, category=category, topic_type=topic_type, status=status_filter
    )
    return Page[TopicRead](
        items=[TopicRead.model_validate(topic) for topic in items],
        total=total,
        page=pagination.page,
        limit=pagination.limit,
    )


@router.get(
    "/topics/{topic_id}",
    response_model=TopicRead,
    summary="Get Topic",
    description="Get a topic and count the view.",
    responses={404: {"description": "Topic not found"}},
)
async def get_topic(topic_id: str, service: ForumServiceDep) -> TopicRead:
    return TopicRead.model_validate(await service.get(topic_id))


@router.put(
    "/topics/{topic_id}",
    response_model=TopicRead,
    summary="Update Topic",
    description="Authors may edit their unlocked topics. Moderators may edit any topic, including status and lock.",
    responses={403: {"description": "Not allowed to edit"}, 404: {"description": "Topic not found"}},
)
async def update_topic(topic_id: str, data: TopicUpdate, user: CurrentUserDep, service: ForumServiceDep) -> TopicRead:
    return TopicRead.model_validate(await service.update(user, topic_id, data))


@router.delete(
    "/topics/{topic_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Topic",
    description="Soft-delete a topic. Author, moderators and admins only.",
    responses={403: {"description": "Not allowed to delete"}, 404: {"description": "Topic not found"}},
)
async def delete_topic(topic_id: str, user: CurrentUserDep, service: ForumServiceDep) -> Response:
    await service.delete(user, topic_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/topics/{topic_id}/vote",
    response_model=VoteResult,
    summary="Vote on Topic",
    description="Upvote (1), downvote (-1) or clear (0) the caller's vote.",
    response_description="The caller's vote and the topic's updated counters.",
    responses={400: {"description": "Voting on one's own topic"}, 404: {"description": "Topic not found"}},
)
async def vote_topic(topic_id: str, data: VoteRequest, user: CurrentUserDep, service: ForumServiceDep) -> VoteResult:
    return await service.vote(user, topic_id, data.value)


@router.post(
    "/topics/{topic_id}/replies",
    response_model=ReplyRead,
    status_code=status.HTTP_201_CREATED,
    summary="Reply to Topic",
    response_description="The created reply.",
    responses={
        400: {"description": "Invalid parent reply or nesting too deep"},
        403: {"description": "Topic is locked"},
        404: {"description": "Topic not found"},
    },
)
async def create_reply(topic_id: str, data: ReplyCreate, user: CurrentUserDep, service: ForumServiceDep) -> ReplyRead:
    """
    Post a reply on a topic.

    - **content**: Reply body.
    - **parent_reply_id**: Reply being answered, for threaded replies up to three levels deep.

    Locked topics only accept replies from moderators and admins.
    """
    return ReplyRead.model_validate(await service.create_reply(user, topic_id, data))


@router.get(
    "/topics/{topic_id}/replies",
    response_model=Page[ReplyRead],
    summary="List Replies",
    description="Replies on a topic, oldest first.",
    responses={404: {"description": "Topic not found"}},
)
async def list_replies(topic_id: str, pagination: PaginationDep, service: ForumServiceDep) -> Page[ReplyRead]:
    items, total = await service.list_replies(topic_id, pagination.limit, pagination.offset)
    return Page[ReplyRead](
        items=[ReplyRead.model_validate(reply) for reply in items],
        total=total,
        page=pagination.page,
        limit=pagination.limit,
    )


@router.put(
    "/topics/{topic_id}/replies/{reply_id}",
    response_model=ReplyRead,
    summary="Edit Reply",
    description="Authors may edit within 15 minutes of posting. Moderators may edit any reply.",
    responses={403: {"description": "Not allowed to edit"}, 404: {"description": "Reply not found"}},
)
async def update_reply(
    topic_id: str, reply_id: str, data: ReplyUpdate, user: CurrentUserDep, service: ForumServiceDep
) -> ReplyRead:
    return ReplyRead.model_validate(await service.update_reply(user, topic_id, reply_id, data))


@router.delete(
    "/topics/{topic_id}/replies/{reply_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Reply",
    description="Soft-delete a reply. Author, moderators and admins only.",
    responses={403: {"description": "Not allowed to delete"}, 404: {"description": "Reply not found"}},
)
async def delete_reply(topic_id: str, reply_id: str, user: CurrentUserDep, service: ForumServiceDep) -> Response:
    await service.delete_reply(user, topic_id, reply_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
