"""Finding people: search, premium writers and follow suggestions."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from blogshive.models import Post, PostVisibility, Relationship, RelationshipStatus, User
from blogshive.schemas.discovery import PostHighlight, PremiumUser, SuggestedUser
from blogshive.schemas.user import UserSummary
from blogshive.services.relationships import get_follow_stats

logger = logging.getLogger(__name__)

SEARCH_DEFAULT_LIMIT = 10
SEARCH_MAX_LIMIT = 50
PREMIUM_DEFAULT_LIMIT = 3
PREMIUM_MAX_LIMIT = 10
SUGGESTIONS_DEFAULT_LIMIT = 6
SUGGESTIONS_MAX_LIMIT = 20
SHARED_TOPICS_SHOWN = 4

FOLLOWING = RelationshipStatus.FOLLOWING.value

__all__ = ["search_users", "get_premium_users", "get_suggested_users"]


def _clamp(limit: int | None, default: int, maximum: int) -> int:
    if not limit:
        return default
    return max(1, min(int(limit), maximum))


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def search_users(db: Session, query: str | None, limit: int | None = None) -> list[User]:
    """Case-insensitive substring match on username or display name.

    A blank query returns no users rather than everyone.
    """
    term = (query or "").strip()
    if not term:
        return []
    limit = _clamp(limit, SEARCH_DEFAULT_LIMIT, SEARCH_MAX_LIMIT)
    pattern = f"%{_escape_like(term)}%"
    return (
        db.query(User)
        .filter(or_(User.username.ilike(pattern, escape="\\"), User.name.ilike(pattern, escape="\\")))
        .order_by(User.username)
        .limit(limit)
        .all()
    )


def _top_post(db: Session, author_id: int) -> Post | None:
    return (
        db.query(Post)
        .filter(
            Post.author_id == author_id,
            Post.is_published.is_(True),
            Post.visibility == PostVisibility.PUBLIC.value,
        )
        .order_by(Post.clap_count.desc(), Post.response_count.desc(), Post.published_at.desc())
        .first()
    )


def get_premium_users(db: Session, limit: int | None = None) -> list[PremiumUser]:
    """A random sample of premium members, each with their most clapped story."""
    limit = _clamp(limit, PREMIUM_DEFAULT_LIMIT, PREMIUM_MAX_LIMIT)
    members = db.query(User).filter(User.membership_status.is_(True)).all()
    random.shuffle(members)

    result = []
    for member in members[:limit]:
        post = _top_post(db, member.id)
        highlight = None
        if post is not None:
            highlight = PostHighlight(
                title=post.title,
                subtitle=post.subtitle,
                slug=post.slug,
                clap_count=post.clap_count,
                response_count=post.response_count,
                published_at=post.published_at,
            )
        result.append(
            PremiumUser(
                user=UserSummary.model_validate(member),
                stats=get_follow_stats(db, member.id),
                highlight=highlight,
            )
        )
    return result


@dataclass
class _Candidate:
    user: User
    score: int
    shared_topics: list[str] = field(default_factory=list)


def _normalized_topics(user: User | None) -> list[str]:
    if user is None:
        return []
    seen: dict[str, None] = {}
    for topic in user.topics or []:
        if isinstance(topic, str) and topic.strip():
            seen.setdefault(topic.strip().lower(), None)
    return list(seen)


def get_suggested_users(db: Session, viewer: User | None, limit: int | None = None) -> list[SuggestedUser]:
    """Rank accounts the viewer does not follow yet.

    Shared topics weigh most, then accounts with many recent followers, and
    the newest accounts fill any remaining slots. The viewer and accounts
    they already follow are never suggested.
    """
    limit = _clamp(limit, SUGGESTIONS_DEFAULT_LIMIT, SUGGESTIONS_MAX_LIMIT)

    excluded: set[int] = set()
    if viewer is not None:
        excluded.add(viewer.id)
        excluded.update(
            row.following_id
            for row in db.query(Relationship.following_id).filter(
                Relationship.follower_id == viewer.id,
                Relationship.status == FOLLOWING,
            )
        )

    def eligible(query):  # type: ignore[no-untyped-def]
        if excluded:
            query = query.filter(User.id.notin_(excluded))
        return query

    candidates: dict[int, _Candidate] = {}

    topics = _normalized_topics(viewer)
    if topics:
        wanted = set(topics)
        for user in eligible(db.query(User)).order_by(User.created_at.desc()):
            shared = [topic for topic in _normalized_topics(user) if topic in wanted]
            if shared:
                candidates[user.id] = _Candidate(user, 300 + 25 * len(shared), shared)
                if len(candidates) >= limit * 8:
                    break

    popular = (
        db.query(Relationship.following_id, func.count(Relationship.id).label("followers"))
        .filter(Relationship.status == FOLLOWING)
        .group_by(Relationship.following_id)
        .order_by(func.count(Relationship.id).desc(), func.max(Relationship.created_at).desc())
    )
    if excluded:
        popular = popular.filter(Relationship.following_id.notin_(excluded))
    popular_ids = [row.following_id for row in popular.limit(limit * 4)]
    if popular_ids:
        popular_users = {u.id: u for u in db.query(User).filter(User.id.in_(popular_ids))}
        for index, user_id in enumerate(popular_ids):
            boost = max(10, 120 - index * 10)
            if user_id in candidates:
                candidates[user_id].score += boost
            elif user_id in popular_users:
                candidates[user_id] = _Candidate(popular_users[user_id], 200 + boost)

    if len(candidates) < limit:
        recent = eligible(db.query(User)).order_by(User.created_at.desc(), User.id.desc()).limit(limit * 6)
        for index, user in enumerate(recent):
            if user.id not in candidates:
                candidates[user.id] = _Candidate(user, 80 - index)

    ranked = sorted(candidates.values(), key=lambda c: c.score, reverse=True)[:limit]
    logger.debug("Suggesting %d of %d candidates", len(ranked), len(candidates))
    return [
        SuggestedUser(
            user=UserSummary.model_validate(c.user),
            stats=get_follow_stats(db, c.user.id),
            is_following=False,
            shared_topics=c.shared_topics[:SHARED_TOPICS_SHOWN],
        )
        for c in ranked
    ]
