"""Saved (bookmarked) and hidden posts."""
from __future__ import annotations

from sqlalchemy.orm import Session

from blogshive.core.errors import NotFoundError
from blogshive.models import HiddenPost, Post, SavedPost
from blogshive.schemas.bookmark import SavedPostItem
from blogshive.services.posts import serialize_posts

__all__ = ["list_saved", "save_post", "remove_saved", "hide_post", "unhide_post"]


def list_saved(db: Session, user_id: int) -> list[SavedPostItem]:
    """The user's bookmarks, most recently saved first."""
    rows = (
        db.query(SavedPost, Post)
        .join(Post, Post.id == SavedPost.post_id)
        .filter(SavedPost.user_id == user_id)
        .order_by(SavedPost.saved_at.desc(), SavedPost.id.desc())
        .all()
    )
    posts = serialize_posts(db, [post for _, post in rows])
    return [
        SavedPostItem(id=saved.id, saved_at=saved.saved_at, post=post)
        for (saved, _), post in zip(rows, posts)
    ]


def save_post(db: Session, user_id: int, post_id: int) -> tuple[SavedPost, Post, bool]:
    """Bookmark a post; returns the row, the post and whether it was newly created."""
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")

    saved = (
        db.query(SavedPost)
        .filter(SavedPost.user_id == user_id, SavedPost.post_id == post_id)
        .first()
    )
    if saved is not None:
        return saved, post, False

    saved = SavedPost(user_id=user_id, post_id=post_id)
    db.add(saved)
    db.commit()
    db.refresh(saved)
    return saved, post, True


def remove_saved(db: Session, user_id: int, post_id: int) -> None:
    """Drop a bookmark; raises ``NotFoundError`` when there is none."""
    deleted = (
        db.query(SavedPost)
        .filter(SavedPost.user_id == user_id, SavedPost.post_id == post_id)
        .delete(synchronize_session="fetch")
    )
    if not deleted:
        raise NotFoundError("Saved post not found")
    db.commit()


def hide_post(db: Session, user_id: int, post_id: int) -> bool:
    """Keep a published post out of the user's feed; returns whether a row was created."""
    exists = (
        db.query(Post.id)
        .filter(Post.id == post_id, Post.is_published.is_(True))
        .first()
    )
    if exists is None:
        raise NotFoundError("Post not found")

    hidden = (
        db.query(HiddenPost)
        .filter(HiddenPost.user_id == user_id, HiddenPost.post_id == post_id)
        .first()
    )
    if hidden is not None:
        return False

    db.add(HiddenPost(user_id=user_id, post_id=post_id))
    db.commit()
    return True


def unhide_post(db: Session, user_id: int, post_id: int) -> None:
    """Show a hidden post again; raises ``NotFoundError`` when it was not hidden."""
    deleted = (
        db.query(HiddenPost)
        .filter(HiddenPost.user_id == user_id, HiddenPost.post_id == post_id)
        .delete(synchronize_session="fetch")
    )
    if not deleted:
        raise NotFoundError("Hidden post not found")
    db.commit()
