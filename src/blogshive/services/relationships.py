"""Follow and block bookkeeping between users.

Each ordered pair of users has at most one ``Relationship`` row, whose status
is either ``following`` or ``blocked``. Writes go through ``_upsert_edge`` so
that two requests racing on the same pair converge on a single row.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blogshive.core.errors import ForbiddenError, ValidationError
from blogshive.core.settings import settings
from blogshive.models import Relationship, RelationshipStatus, User
from blogshive.schemas.common import PageInfo
from blogshive.schemas.relationship import FollowStats, RelationshipFlags
from blogshive.schemas.user import UserWithViewerFlags

logger = logging.getLogger(__name__)

SAME_ACCOUNT_DETAIL = "Operation not allowed on the same account"
YOU_BLOCKED_DETAIL = "You have blocked this user"

FOLLOWING = RelationshipStatus.FOLLOWING.value
BLOCKED = RelationshipStatus.BLOCKED.value

__all__ = [
    "FollowResult",
    "UnfollowResult",
    "UserPage",
    "follow",
    "unfollow",
    "block",
    "unblock",
    "get_follow_stats",
    "get_relationship_between",
    "get_relationship_status",
    "is_blocked_between",
    "list_followers",
    "list_following",
    "list_blocked",
    "remove_all_relationships_for_user",
]


@dataclass
class FollowResult:
    """Outcome of ``follow``; ``created`` is False when the edge already existed."""

    created: bool
    stats: FollowStats


@dataclass
class UnfollowResult:
    """Outcome of ``unfollow``."""

    removed: bool
    stats: FollowStats


@dataclass
class UserPage:
    """A page of users from a follower or following listing."""

    users: list[UserWithViewerFlags] = field(default_factory=list)
    pagination: PageInfo | None = None


def _ensure_distinct(actor: User, target: User) -> None:
    if actor.id == target.id:
        raise ValidationError(SAME_ACCOUNT_DETAIL)


def get_relationship_between(db: Session, follower_id: int, following_id: int) -> Relationship | None:
    """Return the directed edge ``follower_id -> following_id`` if any."""
    return (
        db.query(Relationship)
        .filter(
            Relationship.follower_id == follower_id,
            Relationship.following_id == following_id,
        )
        .first()
    )


def _upsert_edge(db: Session, follower_id: int, following_id: int, status: str) -> Relationship:
    """Insert the edge, or update its status when the pair already exists.

    The insert runs inside a SAVEPOINT so a concurrent duplicate only rolls
    back the nested transaction.
    """
    edge = get_relationship_between(db, follower_id, following_id)
    if edge is not None:
        edge.status = status
        db.flush()
        return edge

    try:
        with db.begin_nested():
            edge = Relationship(follower_id=follower_id, following_id=following_id, status=status)
            db.add(edge)
    except IntegrityError:
        logger.debug("Edge %s -> %s inserted concurrently; updating", follower_id, following_id)
        edge = get_relationship_between(db, follower_id, following_id)
        if edge is None:
            raise
        edge.status = status
        db.flush()
    return edge


def _delete_edge(db: Session, follower_id: int, following_id: int, status: str) -> bool:
    deleted = (
        db.query(Relationship)
        .filter(
            Relationship.follower_id == follower_id,
            Relationship.following_id == following_id,
            Relationship.status == status,
        )
        .delete(synchronize_session="fetch")
    )
    return bool(deleted)


def get_follow_stats(db: Session, user_id: int | None) -> FollowStats:
    """Count following-status edges into and out of ``user_id``."""
    if not user_id:
        return FollowStats()
    followers = (
        db.query(func.count(Relationship.id))
        .filter(Relationship.following_id == user_id, Relationship.status == FOLLOWING)
        .scalar()
    )
    following = (
        db.query(func.count(Relationship.id))
        .filter(Relationship.follower_id == user_id, Relationship.status == FOLLOWING)
        .scalar()
    )
    return FollowStats(followers=followers or 0, following=following or 0)


def follow(db: Session, actor: User, target: User) -> FollowResult:
    """Make ``actor`` follow ``target``.

    Raises:
        ValidationError: If ``actor`` is ``target``.
        ForbiddenError: If ``actor`` has blocked ``target``. A block in the
            other direction does not stop the follow.
    """
    _ensure_distinct(actor, target)

    existing = get_relationship_between(db, actor.id, target.id)
    if existing is not None and existing.status == BLOCKED:
        raise ForbiddenError(YOU_BLOCKED_DETAIL)

    if existing is not None and existing.status == FOLLOWING:
        return FollowResult(created=False, stats=get_follow_stats(db, target.id))

    _upsert_edge(db, actor.id, target.id, FOLLOWING)
    db.commit()
    logger.info("User %s followed user %s", actor.id, target.id)
    return FollowResult(created=True, stats=get_follow_stats(db, target.id))


def unfollow(db: Session, actor: User, target: User) -> UnfollowResult:
    """Remove the ``actor -> target`` following edge; a block edge is left alone."""
    _ensure_distinct(actor, target)
    removed = _delete_edge(db, actor.id, target.id, FOLLOWING)
    db.commit()
    return UnfollowResult(removed=removed, stats=get_follow_stats(db, target.id))


def block(db: Session, actor: User, target: User) -> Relationship:
    """Block ``target``, dropping follow edges in both directions first."""
    _ensure_distinct(actor, target)
    # The upsert replaces an outgoing follow edge in place.
    _delete_edge(db, target.id, actor.id, FOLLOWING)
    edge = _upsert_edge(db, actor.id, target.id, BLOCKED)
    db.commit()
    logger.info("User %s blocked user %s", actor.id, target.id)
    return edge


def unblock(db: Session, actor: User, target: User) -> bool:
    """Remove the ``actor -> target`` block; returns whether one existed."""
    _ensure_distinct(actor, target)
    removed = _delete_edge(db, actor.id, target.id, BLOCKED)
    db.commit()
    return removed


def is_blocked_between(db: Session, first_id: int, second_id: int) -> tuple[bool, bool]:
    """Return (first blocked second, second blocked first)."""
    rows = (
        db.query(Relationship.follower_id)
        .filter(
            Relationship.status == BLOCKED,
            or_(
                (Relationship.follower_id == first_id) & (Relationship.following_id == second_id),
                (Relationship.follower_id == second_id) & (Relationship.following_id == first_id),
            ),
        )
        .all()
    )
    blockers = {row[0] for row in rows}
    return first_id in blockers, second_id in blockers


def get_relationship_status(db: Session, viewer: User, target: User) -> RelationshipFlags:
    """Describe how ``viewer`` and ``target`` relate, in both directions."""
    if viewer.id == target.id:
        return RelationshipFlags(is_self=True)

    outgoing = get_relationship_between(db, viewer.id, target.id)
    incoming = get_relationship_between(db, target.id, viewer.id)
    return RelationshipFlags(
        is_following=outgoing is not None and outgoing.status == FOLLOWING,
        is_blocked=outgoing is not None and outgoing.status == BLOCKED,
        is_followed_by=incoming is not None and incoming.status == FOLLOWING,
        has_blocked_you=incoming is not None and incoming.status == BLOCKED,
    )


def _normalize_paging(page: int | None, limit: int | None) -> tuple[int, int]:
    page = max(1, int(page or 1))
    if not limit:
        limit = settings.relationships_page_size
    limit = max(1, min(int(limit), settings.relationships_max_page_size))
    return page, limit


def _viewer_flags(db: Session, viewer: User | None, user_ids: list[int]) -> tuple[set[int], set[int]]:
    """Return (ids the viewer follows, ids that follow the viewer) among ``user_ids``."""
    if viewer is None or not user_ids:
        return set(), set()
    followed = {
        row[0]
        for row in db.query(Relationship.following_id).filter(
            Relationship.follower_id == viewer.id,
            Relationship.status == FOLLOWING,
            Relationship.following_id.in_(user_ids),
        )
    }
    followers = {
        row[0]
        for row in db.query(Relationship.follower_id).filter(
            Relationship.following_id == viewer.id,
            Relationship.status == FOLLOWING,
            Relationship.follower_id.in_(user_ids),
        )
    }
    return followed, followers


def _list_edges(
    db: Session,
    target: User,
    *,
    incoming: bool,
    page: int | None,
    limit: int | None,
    viewer: User | None,
) -> UserPage:
    page, limit = _normalize_paging(page, limit)
    skip = (page - 1) * limit

    anchor = Relationship.following_id if incoming else Relationship.follower_id
    other = Relationship.follower_id if incoming else Relationship.following_id
    base = db.query(Relationship).filter(anchor == target.id, Relationship.status == FOLLOWING)

    total = base.with_entities(func.count(Relationship.id)).scalar() or 0
    rows = (
        db.query(User)
        .join(Relationship, other == User.id)
        .filter(anchor == target.id, Relationship.status == FOLLOWING)
        .order_by(Relationship.created_at.desc(), Relationship.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )

    followed, followers = _viewer_flags(db, viewer, [user.id for user in rows])
    users = []
    for user in rows:
        entry = UserWithViewerFlags.model_validate(user)
        if viewer is not None:
            entry.is_followed_by_viewer = user.id in followed
            entry.follows_viewer = user.id in followers
        users.append(entry)

    return UserPage(
        users=users,
        pagination=PageInfo(page=page, limit=limit, total=total, has_more=skip + len(rows) < total),
    )


def list_followers(
    db: Session,
    target: User,
    page: int | None = 1,
    limit: int | None = None,
    viewer: User | None = None,
) -> UserPage:
    """Users following ``target``, most recent first."""
    return _list_edges(db, target, incoming=True, page=page, limit=limit, viewer=viewer)


def list_following(
    db: Session,
    target: User,
    page: int | None = 1,
    limit: int | None = None,
    viewer: User | None = None,
) -> UserPage:
    """Users ``target`` follows, most recent first."""
    return _list_edges(db, target, incoming=False, page=page, limit=limit, viewer=viewer)


def list_blocked(db: Session, actor: User) -> list[User]:
    """Users ``actor`` has blocked, newest first."""
    return (
        db.query(User)
        .join(Relationship, Relationship.following_id == User.id)
        .filter(Relationship.follower_id == actor.id, Relationship.status == BLOCKED)
        .order_by(Relationship.created_at.desc(), Relationship.id.desc())
        .all()
    )


def remove_all_relationships_for_user(db: Session, user_id: int) -> int:
    """Delete every edge touching ``user_id``; the caller commits."""
    deleted = (
        db.query(Relationship)
        .filter(or_(Relationship.follower_id == user_id, Relationship.following_id == user_id))
        .delete(synchronize_session="fetch")
    )
    return int(deleted)
