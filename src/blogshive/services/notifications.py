"""Durable notifications plus real-time delivery through the connection manager."""
from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from blogshive.core.errors import NotFoundError
from blogshive.core.settings import settings
from blogshive.db.time import as_utc, isoformat_utc
from blogshive.models import Notification, NotificationType, Post, User
from blogshive.schemas.notification import (
    NotificationPage,
    NotificationPayload,
    NotificationPost,
    NotificationSender,
)
from blogshive.services.connections import ConnectionManager

logger = logging.getLogger(__name__)

__all__ = [
    "NotificationService",
    "clamp_limit",
    "serialize_notification",
]


def clamp_limit(limit: int | None) -> int:
    """Clamp a page size to [1, max]; missing or zero falls back to the default."""
    if not limit:
        return settings.notifications_default_limit
    return max(1, min(int(limit), settings.notifications_max_limit))


# An unencoded "+00:00" offset arrives from a query string as " 00:00".
_MANGLED_OFFSET = re.compile(r"(\d) (\d{2}:?\d{2})$")


def _parse_cursor(cursor: str | None) -> datetime | None:
    if not cursor:
        return None
    value = _MANGLED_OFFSET.sub(r"\1+\2", cursor.strip())
    try:
        return as_utc(datetime.fromisoformat(value))
    except ValueError:
        logger.debug("Ignoring unparsable notification cursor %r", cursor)
        return None


def serialize_notification(
    notification: Notification,
    sender: User | None = None,
    post: Post | None = None,
) -> NotificationPayload:
    """Merge a notification row with its sender and post into the wire payload."""
    sender_payload = None
    if sender is not None:
        sender_payload = NotificationSender(
            id=str(sender.id),
            name=sender.name,
            username=sender.username,
            avatar=sender.avatar,
        )
    post_payload = None
    if post is not None:
        post_payload = NotificationPost(
            id=str(post.id),
            title=post.title,
            slug=post.slug,
            cover_image=post.cover_image,
        )
    return NotificationPayload(
        id=str(notification.id),
        type=str(notification.type),
        message=notification.message,
        is_read=bool(notification.is_read),
        created_at=isoformat_utc(notification.created_at),
        updated_at=isoformat_utc(notification.updated_at),
        metadata=dict(notification.metadata_ or {}),
        sender=sender_payload,
        post=post_payload,
        recipient_id=str(notification.recipient_id),
    )


class NotificationService:
    """Create, list and acknowledge notifications.

    Every created notification is pushed to the recipient's registered sockets
    through ``connections``; delivery is fire-and-forget.
    """

    def __init__(self, connections: ConnectionManager) -> None:
        self.connections = connections

    def create_notification(
        self,
        db: Session,
        recipient_id: int | None,
        type: NotificationType | str | None,
        *,
        sender_id: int | None = None,
        post_id: int | None = None,
        message: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> NotificationPayload | None:
        """Persist a notification and dispatch it to the recipient.

        Returns:
            The serialized notification, or ``None`` when the sender is the
            recipient (nothing is written in that case).

        Raises:
            ValueError: If ``recipient_id`` or ``type`` is missing.
        """
        if not recipient_id or not type:
            raise ValueError("recipient_id and type are required")
        if sender_id is not None and sender_id == recipient_id:
            return None

        kind = NotificationType(type)
        notification = Notification(
            recipient_id=recipient_id,
            sender_id=sender_id,
            type=kind.value,
            post_id=post_id,
            message=message,
            metadata_=dict(metadata or {}),
        )
        db.add(notification)
        db.commit()
        db.refresh(notification)

        sender = db.get(User, sender_id) if sender_id is not None else None
        post = db.get(Post, post_id) if post_id is not None else None
        payload = serialize_notification(notification, sender, post)

        self.connections.dispatch(recipient_id, payload.model_dump(mode="json"))
        return payload

    def safe_create_notification(
        self,
        db: Session,
        recipient_id: int | None,
        type: NotificationType | str | None,
        **kwargs: Any,
    ) -> NotificationPayload | None:
        """Like ``create_notification`` but never raises."""
        try:
            return self.create_notification(db, recipient_id, type, **kwargs)
        except Exception:
            logger.exception("Failed to create %s notification for user %s", type, recipient_id)
            db.rollback()
            return None

    def load_notifications(
        self,
        db: Session,
        recipient_id: int,
        limit: int | None = None,
        cursor: str | None = None,
    ) -> NotificationPage:
        """Return one page of notifications, newest first."""
        page_size = clamp_limit(limit)
        query = db.query(Notification).filter(Notification.recipient_id == recipient_id)
        before = _parse_cursor(cursor)
        if before is not None:
            query = query.filter(Notification.created_at < before)

        rows = (
            query.order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(page_size)
            .all()
        )

        sender_ids = {row.sender_id for row in rows if row.sender_id is not None}
        post_ids = {row.post_id for row in rows if row.post_id is not None}
        senders = {u.id: u for u in db.query(User).filter(User.id.in_(sender_ids))} if sender_ids else {}
        posts = {p.id: p for p in db.query(Post).filter(Post.id.in_(post_ids))} if post_ids else {}

        items = [
            serialize_notification(row, senders.get(row.sender_id), posts.get(row.post_id))
            for row in rows
        ]

        unread_count = (
            db.query(func.count(Notification.id))
            .filter(Notification.recipient_id == recipient_id, Notification.is_read.is_(False))
            .scalar()
        ) or 0

        next_cursor = items[-1].created_at if len(items) == page_size else None
        return NotificationPage(
            items=items,
            unread_count=unread_count,
            next_cursor=next_cursor,
            has_more=next_cursor is not None,
        )

    def mark_notifications_read(
        self,
        db: Session,
        recipient_id: int,
        ids: list[int] | None = None,
    ) -> int:
        """Flip unread notifications to read, optionally only those in ``ids``."""
        query = db.query(Notification).filter(
            Notification.recipient_id == recipient_id,
            Notification.is_read.is_(False),
        )
        if ids:
            query = query.filter(Notification.id.in_(ids))
        modified = query.update({Notification.is_read: True}, synchronize_session="fetch")
        db.commit()
        return int(modified)

    def mark_notification_read(
        self,
        db: Session,
        recipient_id: int,
        notification_id: int,
    ) -> NotificationPayload:
        """Mark one of the recipient's notifications as read and return it."""
        notification = (
            db.query(Notification)
            .filter(Notification.id == notification_id, Notification.recipient_id == recipient_id)
            .first()
        )
        if notification is None:
            raise NotFoundError("Notification not found")

        if not notification.is_read:
            notification.is_read = True
            db.commit()
            db.refresh(notification)

        sender = db.get(User, notification.sender_id) if notification.sender_id else None
        post = db.get(Post, notification.post_id) if notification.post_id else None
        return serialize_notification(notification, sender, post)

    def delete_notifications_for_post(self, db: Session, post_id: int) -> int:
        """Remove every notification that points at ``post_id``."""
        deleted = (
            db.query(Notification)
            .filter(Notification.post_id == post_id)
            .delete(synchronize_session="fetch")
        )
        return int(deleted)
