# src/blogshive/api/v1/endpoints/notifications.py
"""Notification inbox endpoints."""

from fastapi import APIRouter, Body, Query

from blogshive.api.v1.dependencies import CurrentUserDep, NotificationsDep, SessionDep
from blogshive.schemas.notification import (
    MarkReadRequest,
    MarkReadResponse,
    NotificationItemResponse,
    NotificationPage,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=NotificationPage)
async def list_notifications(
    current_user: CurrentUserDep,
    db: SessionDep,
    notifications: NotificationsDep,
    limit: int | None = Query(None, ge=0, description="Page size, capped at 50"),
    cursor: str | None = Query(None, description="created_at of the last item already seen"),
) -> NotificationPage:
    """Return the current user's notifications, newest first."""
    return notifications.load_notifications(db, current_user.id, limit=limit, cursor=cursor)


@router.patch("/read-all", response_model=MarkReadResponse)
async def mark_all_read(
    current_user: CurrentUserDep,
    db: SessionDep,
    notifications: NotificationsDep,
    request: MarkReadRequest | None = Body(None),
) -> MarkReadResponse:
    """Mark every unread notification read, or only those listed in ``ids``."""
    ids = request.ids if request is not None else None
    modified = notifications.mark_notifications_read(db, current_user.id, ids)
    return MarkReadResponse(modified_count=modified)


@router.patch("/{notification_id}/read", response_model=NotificationItemResponse)
async def mark_one_read(
    notification_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    notifications: NotificationsDep,
) -> NotificationItemResponse:
    """Mark a single notification read."""
    item = notifications.mark_notification_read(db, current_user.id, notification_id)
    return NotificationItemResponse(item=item)
