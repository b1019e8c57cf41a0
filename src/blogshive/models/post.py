# src/blogshive/models/post.py
"""SQLAlchemy model for stories and drafts."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from blogshive.db.session import Base
from blogshive.db.time import utcnow


class PostVisibility(str, Enum):
    """Who may see a published post."""

    PUBLIC = "PUBLIC"
    UNLISTED = "UNLISTED"
    PRIVATE = "PRIVATE"


class Post(Base):
    """A story written by a user.

    Drafts and published stories share the table; ``is_published`` tells them
    apart. The body is an ordered list of typed content blocks stored as JSON.
    """

    __tablename__ = "posts"
    __table_args__ = (
        CheckConstraint(
            "visibility IN ('PUBLIC', 'UNLISTED', 'PRIVATE')",
            name="ck_post_visibility",
        ),
        Index("ix_post_author_published", "author_id", "is_published"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    title: Mapped[str] = mapped_column(String(300), nullable=False)
    subtitle: Mapped[str | None] = mapped_column(String(500), nullable=True)
    # Derived from the title; collisions get a numeric suffix.
    slug: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)

    content: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    cover_image: Mapped[str | None] = mapped_column(Text, nullable=True)

    word_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reading_time: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    clap_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    response_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    allow_responses: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    visibility: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=PostVisibility.PUBLIC.value,
    )

    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )
