# tests/services/test_relationships.py
"""Unit tests for follow/block bookkeeping."""

import pytest
from sqlalchemy.orm import Session

from blogshive.core.errors import ForbiddenError, ValidationError
from blogshive.models import Relationship, RelationshipStatus, SelfRelationshipError, User
from blogshive.services import relationships


def _statuses(db: Session) -> set[tuple[int, int, str]]:
    return {(edge.follower_id, edge.following_id, edge.status) for edge in db.query(Relationship).all()}


def test_follow_is_idempotent(db_session: Session, test_user: User, other_user: User) -> None:
    """Following twice leaves one edge and reports the second call as existing."""
    first = relationships.follow(db_session, test_user, other_user)
    second = relationships.follow(db_session, test_user, other_user)

    assert first.created is True
    assert second.created is False
    assert second.stats.followers == 1
    assert db_session.query(Relationship).count() == 1


def test_self_actions_write_nothing(db_session: Session, test_user: User) -> None:
    """follow/unfollow/block/unblock on yourself raise ValidationError."""
    for action in (relationships.follow, relationships.unfollow, relationships.block, relationships.unblock):
        with pytest.raises(ValidationError):
            action(db_session, test_user, test_user)
    assert db_session.query(Relationship).count() == 0


def test_block_replaces_follows(db_session: Session, test_user: User, other_user: User) -> None:
    """Blocking removes follow edges both ways and leaves only the block."""
    relationships.follow(db_session, test_user, other_user)
    relationships.follow(db_session, other_user, test_user)

    relationships.block(db_session, test_user, other_user)

    assert _statuses(db_session) == {(test_user.id, other_user.id, RelationshipStatus.BLOCKED.value)}
    assert relationships.get_follow_stats(db_session, test_user.id).model_dump() == {
        "followers": 0,
        "following": 0,
    }


def test_follow_rejected_only_for_blocker(db_session: Session, test_user: User, other_user: User) -> None:
    """The blocker cannot follow; the blocked user still can."""
    relationships.block(db_session, test_user, other_user)

    with pytest.raises(ForbiddenError, match="You have blocked this user"):
        relationships.follow(db_session, test_user, other_user)

    result = relationships.follow(db_session, other_user, test_user)
    assert result.created is True
    assert _statuses(db_session) == {
        (test_user.id, other_user.id, "blocked"),
        (other_user.id, test_user.id, "following"),
    }


def test_unfollow_leaves_block(db_session: Session, test_user: User, other_user: User) -> None:
    """Unfollowing does not remove a block edge."""
    relationships.block(db_session, test_user, other_user)

    result = relationships.unfollow(db_session, test_user, other_user)

    assert result.removed is False
    assert db_session.query(Relationship).count() == 1


def test_unblock_then_follow(db_session: Session, test_user: User, other_user: User) -> None:
    """After unblocking, following works again."""
    relationships.block(db_session, test_user, other_user)
    assert relationships.unblock(db_session, test_user, other_user) is True
    assert relationships.unblock(db_session, test_user, other_user) is False

    assert relationships.follow(db_session, test_user, other_user).created is True


def test_stats_match_edges(
    db_session: Session,
    test_user: User,
    other_user: User,
    third_user: User,
) -> None:
    """Stats reflect following-status edges only, immediately after writes."""
    relationships.follow(db_session, other_user, test_user)
    relationships.follow(db_session, third_user, test_user)
    relationships.follow(db_session, test_user, other_user)
    relationships.block(db_session, test_user, third_user)

    stats = relationships.get_follow_stats(db_session, test_user.id)
    assert stats.followers == 1
    assert stats.following == 1
    assert relationships.get_follow_stats(db_session, None).followers == 0


def test_relationship_status_both_directions(db_session: Session, test_user: User, other_user: User) -> None:
    """Status flags reflect outgoing and incoming edges."""
    relationships.block(db_session, other_user, test_user)

    flags = relationships.get_relationship_status(db_session, test_user, other_user)

    assert flags.has_blocked_you is True
    assert flags.is_blocked is False
    assert flags.is_following is False


def test_listing_clamps_limit(db_session: Session, test_user: User, other_user: User) -> None:
    """Oversized limits are clamped and pages start at one."""
    relationships.follow(db_session, other_user, test_user)

    page = relationships.list_followers(db_session, test_user, page=0, limit=500)

    assert page.pagination is not None
    assert page.pagination.page == 1
    assert page.pagination.limit == 50
    assert [user.username for user in page.users] == ["bob"]


def test_remove_all_relationships(
    db_session: Session,
    test_user: User,
    other_user: User,
    third_user: User,
) -> None:
    """Every edge touching the user is removed."""
    relationships.follow(db_session, other_user, test_user)
    relationships.block(db_session, test_user, third_user)
    relationships.follow(db_session, other_user, third_user)

    assert relationships.remove_all_relationships_for_user(db_session, test_user.id) == 2
    assert _statuses(db_session) == {(other_user.id, third_user.id, "following")}


def test_self_edge_rejected_by_model(db_session: Session, test_user: User) -> None:
    """The mapper hook refuses self-edges before they reach the database."""
    db_session.add(Relationship(follower_id=test_user.id, following_id=test_user.id))
    with pytest.raises(SelfRelationshipError):
        db_session.flush()
    db_session.rollback()


def test_concurrent_insert_converges_on_one_edge(
    db_session: Session,
    test_user: User,
    other_user: User,
    mocker,
) -> None:
    """When the lookup misses a row inserted concurrently, the upsert updates it."""
    relationships.follow(db_session, test_user, other_user)

    real_lookup = relationships.get_relationship_between
    misses = [None]

    def stale_lookup(db: Session, follower_id: int, following_id: int) -> Relationship | None:
        if misses:
            return misses.pop()
        return real_lookup(db, follower_id, following_id)

    lookup = mocker.patch.object(relationships, "get_relationship_between", side_effect=stale_lookup)

    edge = relationships.block(db_session, test_user, other_user)

    assert lookup.call_count == 2
    assert edge.status == RelationshipStatus.BLOCKED.value
    assert _statuses(db_session) == {(test_user.id, other_user.id, RelationshipStatus.BLOCKED.value)}
