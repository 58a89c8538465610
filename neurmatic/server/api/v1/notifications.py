"""
Notification inbox endpoints.
"""

from fastapi import APIRouter

from neurmatic.core.models.io.common import Page
from neurmatic.core.models.io.social import MarkAllReadResult, NotificationRead, UnreadCount
from neurmatic.server.services.deps import CurrentUserDep, NotificationServiceDep, PaginationDep

router = APIRouter(tags=["notifications"])


@router.get(
    "",
    response_model=Page[NotificationRead],
    summary="List Notifications",
    description="The caller's notifications, newest first.",
)
async def list_notifications(
    pagination: PaginationDep,
    user: CurrentUserDep,
    service: NotificationServiceDep,
    unread_only: bool = False,
) -> Page[NotificationRead]:
    items, total = await service.list(user, pagination.limit, pagination.offset, unread_only=unread_only)
    return Page[NotificationRead](
        items=[NotificationRead.model_validate(item) for item in items],
        total=total,
        page=pagination.page,
        limit=pagination.limit,
    )


@router.get("/unread-count", response_model=UnreadCount, summary="Unread Count")
async def unread_count(user: CurrentUserDep, service: NotificationServiceDep) -> UnreadCount:
    return UnreadCount(unread=await service.unread_count(user))


@router.post(
    "/read-all",
    response_model=MarkAllReadResult,
    summary="Mark All Read",
    response_description="Number of notifications marked read.",
)
async def mark_all_read(user: CurrentUserDep, service: NotificationServiceDep) -> MarkAllReadResult:
    return MarkAllReadResult(updated=await service.mark_all_read(user))


@router.post(
    "/{notification_id}/read",
    response_model=NotificationRead,
    summary="Mark Read",
    responses={404: {"description": "Notification not found"}},
)
async def mark_read(notification_id: str, user: CurrentUserDep, service: NotificationServiceDep) -> NotificationRead:
    return NotificationRead.model_validate(await service.mark_read(user, notification_id))
