# src/blogshive/models/account_settings.py
"""Per-user account, publishing and newsletter preferences."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from blogshive.db.session import Base
from blogshive.db.time import utcnow


class DefaultVisibility(str, Enum):
    """Visibility preselected for new stories."""

    PUBLIC = "Public"
    UNLISTED = "Unlisted"
    PRIVATE = "Private"


class CommentSetting(str, Enum):
    """Who may respond to the user's stories by default."""

    EVERYONE = "Everyone"
    FOLLOWERS_ONLY = "Followers only"
    DISABLED = "Disabled"


class DigestFrequency(str, Enum):
    """How often the reading digest is sent."""

    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"


class UserSettings(Base):
    """One settings row per user, created lazily on first read.

    ``email``, ``username`` and ``display_name`` mirror the account; writes go
    through to ``User`` as well.
    """

    __tablename__ = "user_settings"
    __table_args__ = (
        CheckConstraint(
            "visibility IN ('Public', 'Unlisted', 'Private')",
            name="ck_user_settings_visibility",
        ),
        CheckConstraint(
            "comment_setting IN ('Everyone', 'Followers only', 'Disabled')",
            name="ck_user_settings_comment_setting",
        ),
        CheckConstraint(
            "digest_frequency IN ('Daily', 'Weekly', 'Monthly')",
            name="ck_user_settings_digest_frequency",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    username: Mapped[str] = mapped_column(String(64), nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(120), nullable=True)

    visibility: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=DefaultVisibility.PUBLIC.value,
    )
    send_emails: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    comment_setting: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=CommentSetting.EVERYONE.value,
    )
    signature: Mapped[str] = mapped_column(Text, nullable=False, default="Thank you for reading!")
    auto_save: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    analytics_id: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    digest_frequency: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=DigestFrequency.WEEKLY.value,
    )
    # Free-form label; "Premium" (any case) marks a paying member.
    membership: Mapped[str] = mapped_column(String(32), nullable=False, default="None")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )


class Newsletter(Base):
    """A user's newsletter: whether they receive it and how many subscribe to theirs."""

    __tablename__ = "newsletters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    subscribers_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_subscribed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )
