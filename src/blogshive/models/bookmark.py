# src/blogshive/models/bookmark.py
"""Per-user join rows for saved and hidden posts."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from blogshive.db.session import Base
from blogshive.db.time import utcnow


class SavedPost(Base):
    """A post bookmarked by a user for later reading."""

    __tablename__ = "saved_posts"
    __table_args__ = (UniqueConstraint("user_id", "post_id", name="uq_saved_post"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    saved_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class HiddenPost(Base):
    """A post the user asked to keep out of their feed."""

    __tablename__ = "hidden_posts"
    __table_args__ = (UniqueConstraint("user_id", "post_id", name="uq_hidden_post"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    hidden_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
