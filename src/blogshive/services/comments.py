"""Responses on posts and the reply tree built from them."""
from __future__ import annotations

import logging
from typing import Any, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from blogshive.core.errors import ForbiddenError, NotFoundError, ValidationError
from blogshive.models import Comment, NotificationType, Post, User
from blogshive.schemas.comment import CommentAuthor, CommentNode, CommentResponse

logger = logging.getLogger(__name__)

SNIPPET_LENGTH = 80

__all__ = [
    "build_thread",
    "serialize_comment",
    "refresh_response_count",
    "list_comments",
    "create_comment",
    "update_comment",
    "delete_comment",
]


def serialize_comment(comment: Comment, author: User | None) -> CommentResponse:
    """Merge a comment row with its author card."""
    return CommentResponse(
        id=comment.id,
        post_id=comment.post_id,
        parent_comment_id=comment.parent_comment_id,
        content=comment.content,
        likes_count=comment.likes_count,
        is_visible=comment.is_visible,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
        author=_author_card(author),
    )


def _author_card(author: User | None) -> CommentAuthor | None:
    if author is None:
        return None
    return CommentAuthor(id=author.id, username=author.username, name=author.name, avatar=author.avatar)


def build_thread(comments: Sequence[Comment], authors: dict[int, User]) -> list[CommentNode]:
    """Nest flat comments under their parents, keeping the input order.

    A comment whose parent is not in ``comments`` becomes a root.
    """
    nodes: dict[int, CommentNode] = {}
    for comment in comments:
        base = serialize_comment(comment, authors.get(comment.user_id))
        nodes[comment.id] = CommentNode(**base.model_dump())

    roots: list[CommentNode] = []
    for comment in comments:
        node = nodes[comment.id]
        parent = nodes.get(comment.parent_comment_id) if comment.parent_comment_id else None
        if parent is not None:
            parent.replies.append(node)
        else:
            roots.append(node)
    return roots


def refresh_response_count(db: Session, post_id: int) -> int:
    """Recount visible comments onto ``Post.response_count``; the caller commits."""
    count = (
        db.query(func.count(Comment.id))
        .filter(Comment.post_id == post_id, Comment.is_visible.is_(True))
        .scalar()
    ) or 0
    db.query(Post).filter(Post.id == post_id).update(
        {Post.response_count: count},
        synchronize_session="fetch",
    )
    return count


def _load_authors(db: Session, comments: Sequence[Comment]) -> dict[int, User]:
    user_ids = {comment.user_id for comment in comments}
    if not user_ids:
        return {}
    return {user.id: user for user in db.query(User).filter(User.id.in_(user_ids))}


def list_comments(db: Session, post_id: int) -> list[CommentNode]:
    """Visible comments of a post as a reply tree, oldest first."""
    rows = (
        db.query(Comment)
        .filter(Comment.post_id == post_id, Comment.is_visible.is_(True))
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )
    return build_thread(rows, _load_authors(db, rows))


def _snippet(content: str) -> str:
    if len(content) <= SNIPPET_LENGTH:
        return content
    return content[: SNIPPET_LENGTH - 1].rstrip() + "…"


def create_comment(
    db: Session,
    author: User,
    post_id: int,
    content: str,
    notifications: Any,
    parent_comment_id: int | None = None,
) -> CommentResponse:
    """Add a response, refresh the post's count and notify the people involved.

    The post author gets a ``comment`` notification; when replying, the parent
    comment's author also gets a ``reply`` notification.
    """
    text = (content or "").strip()
    if not text:
        raise ValidationError("Content is required")

    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    if not post.allow_responses:
        raise ForbiddenError("Responses are disabled for this post")

    parent: Comment | None = None
    if parent_comment_id is not None:
        parent = db.get(Comment, parent_comment_id)
        if parent is None or parent.post_id != post.id:
            raise ValidationError("Invalid parent comment")

    comment = Comment(
        post_id=post.id,
        user_id=author.id,
        content=text,
        parent_comment_id=parent.id if parent is not None else None,
    )
    db.add(comment)
    db.flush()
    refresh_response_count(db, post.id)
    db.commit()
    db.refresh(comment)

    metadata = {"post_id": str(post.id), "post_slug": post.slug, "comment_id": str(comment.id)}
    notifications.safe_create_notification(
        db,
        post.author_id,
        NotificationType.COMMENT,
        sender_id=author.id,
        post_id=post.id,
        message=f'{author.display_name} responded to "{post.title}": {_snippet(text)}',
        metadata=metadata,
    )
    if parent is not None and parent.user_id != post.author_id:
        notifications.safe_create_notification(
            db,
            parent.user_id,
            NotificationType.REPLY,
            sender_id=author.id,
            post_id=post.id,
            message=f"{author.display_name} replied to your response: {_snippet(text)}",
            metadata={**metadata, "parent_comment_id": str(parent.id)},
        )
    return serialize_comment(comment, author)


def _get_owned_comment(db: Session, comment_id: int, user: User, action: str) -> Comment:
    comment = db.get(Comment, comment_id)
    if comment is None:
        raise NotFoundError("Comment not found")
    if comment.user_id != user.id:
        raise ForbiddenError(f"Not authorized to {action} this comment")
    return comment


def update_comment(db: Session, comment_id: int, user: User, content: str) -> CommentResponse:
    """Replace the text of one of the user's comments."""
    comment = _get_owned_comment(db, comment_id, user, "edit")
    text = (content or "").strip()
    if not text:
        raise ValidationError("Content is required")
    comment.content = text
    db.commit()
    db.refresh(comment)
    return serialize_comment(comment, user)


def delete_comment(db: Session, comment_id: int, user: User) -> None:
    """Delete one of the user's comments; its replies are promoted to top level."""
    comment = _get_owned_comment(db, comment_id, user, "delete")
    post_id = comment.post_id
    db.delete(comment)
    db.flush()
    refresh_response_count(db, post_id)
    db.commit()
    logger.debug("User %s deleted comment %s on post %s", user.id, comment_id, post_id)
