"""Notification payload schemas.

``NotificationPayload`` is the transport-safe shape shared by the REST
endpoints and the WebSocket push: ids are strings, timestamps are ISO-8601
strings and absent relations are ``None``.
"""

from typing import Any

from pydantic import BaseModel, Field


class NotificationSender(BaseModel):
    """Display fields of the user who caused the notification."""

    id: str
    name: str | None = None
    username: str | None = None
    avatar: str | None = None


class NotificationPost(BaseModel):
    """Display fields of the post a notification refers to."""

    id: str
    title: str | None = None
    slug: str | None = None
    cover_image: str | None = None


class NotificationPayload(BaseModel):
    """Serialized notification."""

    id: str
    type: str
    message: str | None = None
    is_read: bool = False
    created_at: str
    updated_at: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    sender: NotificationSender | None = None
    post: NotificationPost | None = None
    recipient_id: str


class NotificationPage(BaseModel):
    """One page of a recipient's notifications, newest first."""

    items: list[NotificationPayload]
    unread_count: int
    next_cursor: str | None = None
    has_more: bool = False


class MarkReadRequest(BaseModel):
    """Optional restriction of a bulk mark-read to explicit ids."""

    ids: list[int] | None = None


class MarkReadResponse(BaseModel):
    """Number of notifications flipped to read."""

    modified_count: int


class NotificationItemResponse(BaseModel):
    """Single notification wrapper."""

    item: NotificationPayload
