"""Post persistence, feed queries and derived metrics."""
from __future__ import annotations

import logging
import math
import re
import unicodedata
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blogshive.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from blogshive.core.settings import settings
from blogshive.db.time import utcnow
from blogshive.models import (
    Comment,
    HiddenPost,
    Post,
    PostReport,
    PostVisibility,
    Relationship,
    RelationshipStatus,
    SavedPost,
    User,
)
from blogshive.models.report import REPORT_DETAILS_MAX_LENGTH, REPORT_REASON_MAX_LENGTH
from blogshive.schemas.post import ContentBlock, PostAuthor, PostCreate, PostResponse, PostUpdate
from blogshive.services import relationships

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_WHITESPACE = re.compile(r"\s+")

FEED_SORTS = ("recent", "popular")
FEED_SCOPES = ("for_you", "featured")

__all__ = [
    "FeedPage",
    "slugify",
    "ensure_unique_slug",
    "count_words",
    "estimate_reading_time",
    "normalize_content",
    "serialize_post",
    "serialize_posts",
    "find_post",
    "get_post_or_404",
    "get_visible_post",
    "create_post",
    "update_post",
    "delete_post",
    "clap_post",
    "report_post",
    "list_feed",
    "list_drafts",
    "list_author_posts",
]


@dataclass
class FeedPage:
    """A page of the post feed."""

    items: list[PostResponse]
    total: int
    page: int
    limit: int


def slugify(value: str) -> str:
    """Lowercase ASCII slug with runs of other characters collapsed to ``-``."""
    ascii_value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    return _NON_ALNUM.sub("-", ascii_value.lower()).strip("-")


def ensure_unique_slug(db: Session, title: str, exclude_id: int | None = None) -> str:
    """Return a slug for ``title`` not used by any post other than ``exclude_id``."""
    base = slugify(title) or slugify(str(int(utcnow().timestamp() * 1000)))
    candidate = base
    suffix = 1
    while True:
        query = db.query(Post.id).filter(Post.slug == candidate)
        if exclude_id is not None:
            query = query.filter(Post.id != exclude_id)
        if query.first() is None:
            return candidate
        candidate = f"{base}-{suffix}"
        suffix += 1


def count_words(blocks: Iterable[dict[str, Any]] | None) -> int:
    """Count whitespace-separated words in block text and list items."""
    total = 0
    for block in blocks or []:
        if not block:
            continue
        parts = []
        if isinstance(block.get("text"), str):
            parts.append(block["text"])
        for item in block.get("list_items") or []:
            if isinstance(item, str):
                parts.append(item)
        total += len([word for word in _WHITESPACE.split(" ".join(parts).strip()) if word])
    return total


def estimate_reading_time(word_count: int) -> int:
    """Minutes needed to read ``word_count`` words; never less than one."""
    if not word_count:
        return 1
    return max(1, math.ceil(word_count / settings.words_per_minute))


def normalize_content(blocks: Sequence[ContentBlock] | None) -> list[dict[str, Any]]:
    """Dump validated blocks to the JSON shape stored on the post."""
    return [block.model_dump(mode="json", exclude_none=True) for block in blocks or []]


def _author_card(author: User) -> PostAuthor:
    return PostAuthor(
        id=author.id,
        username=author.username,
        name=author.name,
        avatar=author.avatar,
        bio=author.bio,
        is_premium=bool(author.membership_status),
    )


def serialize_post(post: Post, author: User | None = None) -> PostResponse:
    """Convert a Post row and its author into the API schema."""
    response = PostResponse.model_validate(post)
    if author is not None:
        response.author = _author_card(author)
    return response


def serialize_posts(db: Session, posts: Sequence[Post]) -> list[PostResponse]:
    """Serialize posts, loading all their authors with one query."""
    author_ids = {post.author_id for post in posts}
    authors = {u.id: u for u in db.query(User).filter(User.id.in_(author_ids))} if author_ids else {}
    return [serialize_post(post, authors.get(post.author_id)) for post in posts]


def find_post(db: Session, id_or_slug: str | int) -> Post | None:
    """Look a post up by numeric id first, then by slug."""
    token = str(id_or_slug).strip()
    if token.isdigit():
        post = db.get(Post, int(token))
        if post is not None:
            return post
    return db.query(Post).filter(Post.slug == token).first()


def get_post_or_404(db: Session, id_or_slug: str | int) -> Post:
    """Like ``find_post`` but raise ``NotFoundError`` when missing."""
    post = find_post(db, id_or_slug)
    if post is None:
        raise NotFoundError("Post not found")
    return post


def get_visible_post(db: Session, id_or_slug: str | int, viewer: User | None) -> Post:
    """Return a post the viewer may read; drafts and private posts are the author's alone."""
    post = get_post_or_404(db, id_or_slug)
    is_author = viewer is not None and viewer.id == post.author_id
    if not is_author and (
        not post.is_published or post.visibility == PostVisibility.PRIVATE.value
    ):
        raise NotFoundError("Post not found")
    return post


def _require_author(post: Post, user: User, action: str) -> None:
    if post.author_id != user.id:
        raise ForbiddenError(f"Not authorized to {action} this post")


def create_post(db: Session, author: User, data: PostCreate) -> Post:
    """Persist a new draft or published post."""
    title = data.title.strip()
    if not title:
        raise ValidationError("Title is required")

    content = normalize_content(data.content)
    word_count = count_words(content)
    post = Post(
        author_id=author.id,
        title=title,
        subtitle=data.subtitle,
        slug=ensure_unique_slug(db, title),
        content=content,
        tags=_normalize_tags(data.tags),
        cover_image=data.cover_image,
        word_count=word_count,
        reading_time=estimate_reading_time(word_count),
        is_published=data.is_published,
        visibility=PostVisibility(data.visibility).value,
        allow_responses=data.allow_responses,
        published_at=utcnow() if data.is_published else None,
    )
    db.add(post)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("A post with this slug already exists") from exc
    db.refresh(post)
    logger.info("User %s created post %s (%s)", author.id, post.id, post.slug)
    return post


def _normalize_tags(tags: Iterable[str] | None) -> list[str]:
    seen: dict[str, None] = {}
    for tag in tags or []:
        token = tag.strip()
        if token:
            seen.setdefault(token, None)
    return list(seen)


def update_post(db: Session, post: Post, editor: User, data: PostUpdate) -> Post:
    """Apply a partial update; the slug follows the title and metrics follow the content."""
    _require_author(post, editor, "edit")
    updates = data.model_dump(exclude_unset=True)

    if updates.get("title") is not None:
        title = updates["title"].strip()
        if title != post.title:
            post.slug = ensure_unique_slug(db, title, exclude_id=post.id)
        post.title = title
    if "subtitle" in updates:
        post.subtitle = updates["subtitle"]
    if updates.get("content") is not None:
        post.content = normalize_content(data.content)
        post.word_count = count_words(post.content)
        post.reading_time = estimate_reading_time(post.word_count)
    if updates.get("tags") is not None:
        post.tags = _normalize_tags(updates["tags"])
    if "cover_image" in updates:
        post.cover_image = updates["cover_image"]
    if updates.get("visibility") is not None:
        post.visibility = PostVisibility(updates["visibility"]).value
    if updates.get("allow_responses") is not None:
        post.allow_responses = updates["allow_responses"]
    if updates.get("is_published") is not None:
        post.is_published = updates["is_published"]
        post.published_at = (post.published_at or utcnow()) if post.is_published else None

    db.commit()
    db.refresh(post)
    return post


def delete_post(db: Session, post: Post, editor: User, notifications: Any) -> None:
    """Delete a post with its comments, bookmarks and notifications."""
    _require_author(post, editor, "delete")
    post_id = post.id
    notifications.delete_notifications_for_post(db, post_id)
    db.query(Comment).filter(Comment.post_id == post_id).delete(synchronize_session="fetch")
    db.query(SavedPost).filter(SavedPost.post_id == post_id).delete(synchronize_session="fetch")
    db.query(HiddenPost).filter(HiddenPost.post_id == post_id).delete(synchronize_session="fetch")
    db.query(PostReport).filter(PostReport.post_id == post_id).delete(synchronize_session="fetch")
    db.delete(post)
    db.commit()
    logger.info("User %s deleted post %s", editor.id, post_id)


def clap_post(db: Session, post: Post, actor: User, notifications: Any) -> int:
    """Increment the clap counter and notify the author."""
    db.query(Post).filter(Post.id == post.id).update(
        {Post.clap_count: Post.clap_count + 1},
        synchronize_session=False,
    )
    db.commit()
    db.refresh(post)

    notifications.safe_create_notification(
        db,
        post.author_id,
        "like",
        sender_id=actor.id,
        post_id=post.id,
        message=f'{actor.display_name} clapped for your story "{post.title}"',
        metadata={"post_id": str(post.id), "post_slug": post.slug},
    )
    return post.clap_count


def report_post(
    db: Session,
    id_or_slug: str | int,
    reporter: User,
    reason: str,
    details: str | None = None,
) -> PostReport:
    """Record ``reporter``'s report on a post, replacing any earlier one.

    Raises:
        ValidationError: If ``reason`` is blank after trimming.
        NotFoundError: If the post does not exist.
    """
    reason = (reason or "").strip()[:REPORT_REASON_MAX_LENGTH]
    if not reason:
        raise ValidationError("A report reason is required")
    post = get_post_or_404(db, id_or_slug)
    details = (details or "").strip()[:REPORT_DETAILS_MAX_LENGTH] or None

    report = _find_report(db, post.id, reporter.id)
    if report is None:
        try:
            with db.begin_nested():
                report = PostReport(post_id=post.id, user_id=reporter.id, reason=reason, details=details)
                db.add(report)
        except IntegrityError:
            report = _find_report(db, post.id, reporter.id)
            if report is None:
                raise
    report.reason = reason
    report.details = details
    db.commit()
    logger.info("User %s reported post %s: %s", reporter.id, post.id, reason)
    return report


def _find_report(db: Session, post_id: int, user_id: int) -> PostReport | None:
    return (
        db.query(PostReport)
        .filter(PostReport.post_id == post_id, PostReport.user_id == user_id)
        .first()
    )


def _clamp_posts_limit(limit: int | None) -> int:
    if not limit:
        return settings.posts_page_size
    return max(1, min(int(limit), settings.posts_max_page_size))


def _viewer_topics(viewer: User | None) -> list[str]:
    if viewer is None:
        return []
    seen: dict[str, None] = {}
    for topic in viewer.topics or []:
        if isinstance(topic, str) and topic.strip():
            seen.setdefault(topic.strip().lower(), None)
    return list(seen)


def list_feed(
    db: Session,
    viewer: User | None,
    *,
    page: int | None = 1,
    limit: int | None = None,
    status: str = "published",
    author: str | None = None,
    sort: str = "recent",
    scope: str | None = None,
) -> FeedPage:
    """Build one page of the post feed for ``viewer``.

    ``status="draft"`` lists the viewer's own drafts. ``scope="featured"``
    limits the feed to authors the viewer follows; ``for_you`` ranks posts by
    overlap between their tags and the viewer's topics when the viewer has any.
    """
    page = max(1, int(page or 1))
    limit = _clamp_posts_limit(limit)
    skip = (page - 1) * limit
    empty = FeedPage(items=[], total=0, page=page, limit=limit)

    query = db.query(Post)
    drafts = status == "draft"
    if drafts:
        if viewer is None:
            return empty
        query = query.filter(Post.is_published.is_(False), Post.author_id == viewer.id)
    else:
        query = query.filter(Post.is_published.is_(True))

    if viewer is not None:
        hidden_ids = select(HiddenPost.post_id).where(HiddenPost.user_id == viewer.id)
        query = query.filter(Post.id.not_in(hidden_ids))

    selected_author: User | None = None
    if author:
        selected_author = db.query(User).filter(User.username == author).first()
        if selected_author is None:
            return empty
        query = query.filter(Post.author_id == selected_author.id)

    resolved_scope = "featured" if (scope or "").strip().lower() == "featured" else "for_you"
    if resolved_scope == "featured" and selected_author is None and not drafts:
        if viewer is None:
            return empty
        followed = select(Relationship.following_id).where(
            Relationship.follower_id == viewer.id,
            Relationship.status == RelationshipStatus.FOLLOWING.value,
        )
        query = query.filter(Post.author_id.in_(followed))

    viewer_is_author = (
        selected_author is not None and viewer is not None and selected_author.id == viewer.id
    )
    if not drafts and not viewer_is_author:
        conditions = [Post.visibility == PostVisibility.PUBLIC.value]
        if viewer is not None:
            conditions.append(Post.author_id == viewer.id)
        query = query.filter(or_(*conditions))

    topics = _viewer_topics(viewer)
    if resolved_scope == "for_you" and not drafts and topics and not author:
        candidates = query.order_by(Post.published_at.desc(), Post.updated_at.desc()).all()
        wanted = set(topics)
        ranked = sorted(
            candidates,
            key=lambda post: len(wanted & {str(tag).lower() for tag in post.tags or []}),
            reverse=True,
        )
        return FeedPage(
            items=serialize_posts(db, ranked[skip : skip + limit]),
            total=len(ranked),
            page=page,
            limit=limit,
        )

    if sort == "popular":
        ordering = (Post.clap_count.desc(), Post.response_count.desc(), Post.published_at.desc())
    else:
        ordering = (Post.published_at.desc(), Post.updated_at.desc())

    total = query.count()
    rows = query.order_by(*ordering, Post.id.desc()).offset(skip).limit(limit).all()
    return FeedPage(items=serialize_posts(db, rows), total=total, page=page, limit=limit)


def list_drafts(db: Session, viewer: User) -> list[PostResponse]:
    """The viewer's unpublished posts, most recently edited first."""
    rows = (
        db.query(Post)
        .filter(Post.author_id == viewer.id, Post.is_published.is_(False))
        .order_by(Post.updated_at.desc(), Post.id.desc())
        .all()
    )
    return serialize_posts(db, rows)


def list_author_posts(
    db: Session,
    username: str,
    viewer: User | None,
) -> tuple[PostAuthor, list[PostResponse]]:
    """Published posts of ``username`` that ``viewer`` may see.

    Followers also see unlisted posts; the author sees everything published.
    """
    author = db.query(User).filter(User.username == username).first()
    if author is None:
        raise NotFoundError("User not found")

    is_self = viewer is not None and viewer.id == author.id
    is_follower = False
    if viewer is not None and not is_self:
        viewer_blocked, author_blocked = relationships.is_blocked_between(db, viewer.id, author.id)
        if author_blocked:
            raise ForbiddenError("This user has blocked you.")
        if viewer_blocked:
            raise ForbiddenError("Unblock this user to view their stories.")
        edge = relationships.get_relationship_between(db, viewer.id, author.id)
        is_follower = edge is not None and edge.status == RelationshipStatus.FOLLOWING.value

    query = db.query(Post).filter(Post.author_id == author.id, Post.is_published.is_(True))
    if not is_self:
        if is_follower:
            query = query.filter(Post.visibility != PostVisibility.PRIVATE.value)
        else:
            query = query.filter(Post.visibility == PostVisibility.PUBLIC.value)

    rows = query.order_by(Post.published_at.desc(), Post.created_at.desc()).all()
    return _author_card(author), [serialize_post(post, author) for post in rows]
