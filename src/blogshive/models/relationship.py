# src/blogshive/models/relationship.py
"""Directed follow/block edges between users."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    event,
)
from sqlalchemy.orm import Mapped, mapped_column

from blogshive.db.session import Base
from blogshive.db.time import utcnow


class RelationshipStatus(str, Enum):
    """State of a follower -> following edge."""

    FOLLOWING = "following"
    BLOCKED = "blocked"


class SelfRelationshipError(ValueError):
    """Raised when an edge would point from a user to themselves."""


class Relationship(Base):
    """One row per ordered pair of users.

    The unique (follower_id, following_id) pair means a user either follows or
    blocks another user, never both.
    """

    __tablename__ = "relationships"
    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_relationship_pair"),
        CheckConstraint("follower_id <> following_id", name="ck_relationship_not_self"),
        CheckConstraint(
            "status IN ('following', 'blocked')",
            name="ck_relationship_status",
        ),
        Index("ix_relationship_following_status", "following_id", "status"),
        Index("ix_relationship_follower_status", "follower_id", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    follower_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    following_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=RelationshipStatus.FOLLOWING.value,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )


@event.listens_for(Relationship, "before_insert")
@event.listens_for(Relationship, "before_update")
def _reject_self_relationship(mapper, connection, target: Relationship) -> None:  # type: ignore[no-untyped-def]
    if target.follower_id is not None and target.follower_id == target.following_id:
        raise SelfRelationshipError("Users cannot follow themselves")
