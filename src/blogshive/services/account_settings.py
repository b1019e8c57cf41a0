"""Account settings and newsletter preferences.

Both rows are created lazily the first time a user reads or writes them.
Settings that mirror the account (email, username, display name, membership)
are written through to ``User`` so profiles stay consistent.
"""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from blogshive.core.errors import ValidationError
from blogshive.models import Newsletter, User, UserSettings
from blogshive.schemas.account_settings import SettingsResponse, SettingsUpdate

logger = logging.getLogger(__name__)

PREMIUM_MEMBERSHIP = "premium"

__all__ = [
    "is_premium_membership",
    "ensure_settings",
    "serialize_settings",
    "update_settings",
    "ensure_newsletter",
    "set_newsletter_subscription",
]


def is_premium_membership(membership: str | None, user: User | None = None) -> bool:
    """``"premium"`` in any case is premium; otherwise defer to the account flag."""
    if (membership or "").strip().lower() == PREMIUM_MEMBERSHIP:
        return True
    if user is not None:
        return bool(user.membership_status)
    return False


def ensure_settings(db: Session, user: User) -> UserSettings:
    """Return the user's settings row, creating it from the account if missing."""
    row = db.query(UserSettings).filter(UserSettings.user_id == user.id).first()
    if row is None:
        row = UserSettings(
            user_id=user.id,
            email=user.email,
            username=user.username,
            display_name=user.name,
            membership="Premium" if user.membership_status else "None",
        )
        db.add(row)
        db.commit()
        db.refresh(row)
    return row


def serialize_settings(row: UserSettings, user: User) -> SettingsResponse:
    return SettingsResponse(
        id=row.id,
        email=row.email,
        username=row.username,
        display_name=row.display_name,
        visibility=row.visibility,
        send_emails=row.send_emails,
        comment_setting=row.comment_setting,
        signature=row.signature,
        auto_save=row.auto_save,
        analytics_id=row.analytics_id,
        digest_frequency=row.digest_frequency,
        membership=row.membership,
        is_premium=is_premium_membership(row.membership, user),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _ensure_available(db: Session, user: User, column: Any, value: str, detail: str) -> None:
    taken = db.query(User.id).filter(column == value, User.id != user.id).first()
    if taken is not None:
        raise ValidationError(detail)


def update_settings(db: Session, user: User, data: SettingsUpdate) -> UserSettings:
    """Apply a partial update and mirror account fields onto ``user``.

    Raises:
        ValidationError: If the new username or email belongs to someone else.
    """
    updates = data.model_dump(exclude_unset=True, exclude_none=True, mode="json")
    row = ensure_settings(db, user)

    if "username" in updates:
        _ensure_available(db, user, User.username, updates["username"], "Username already taken")
    if "email" in updates:
        _ensure_available(db, user, User.email, updates["email"], "Email already in use")

    for key, value in updates.items():
        setattr(row, key, value)

    if "email" in updates:
        user.email = updates["email"]
    if "username" in updates:
        user.username = updates["username"]
    if "display_name" in updates:
        user.name = updates["display_name"]
    if "membership" in updates:
        user.membership_status = updates["membership"].strip().lower() == PREMIUM_MEMBERSHIP

    db.commit()
    db.refresh(row)
    logger.info("User %s updated settings: %s", user.id, ", ".join(sorted(updates)) or "nothing")
    return row


def ensure_newsletter(db: Session, user_id: int) -> Newsletter:
    """Return the user's newsletter row, creating an unsubscribed one if missing."""
    newsletter = db.query(Newsletter).filter(Newsletter.user_id == user_id).first()
    if newsletter is None:
        newsletter = Newsletter(user_id=user_id)
        db.add(newsletter)
        db.commit()
        db.refresh(newsletter)
    return newsletter


def set_newsletter_subscription(db: Session, user_id: int, subscribe: bool) -> Newsletter:
    newsletter = ensure_newsletter(db, user_id)
    newsletter.is_subscribed = subscribe
    db.commit()
    db.refresh(newsletter)
    return newsletter
