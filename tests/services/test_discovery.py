"""Unit tests for user search, premium showcase and suggestions."""

from sqlalchemy.orm import Session

from blogshive.models import Relationship, User
from blogshive.services import discovery
from tests.conftest import make_post, make_user


def test_search_limit_is_clamped(db_session: Session) -> None:
    """Limits above the maximum are capped at 50."""
    for index in range(55):
        make_user(db_session, f"reader{index:02d}")

    assert len(discovery.search_users(db_session, "reader", 500)) == 50
    assert len(discovery.search_users(db_session, "reader")) == 10


def test_search_matches_underscore_literally(db_session: Session) -> None:
    """An underscore only matches an underscore."""
    make_user(db_session, "ab_c")
    make_user(db_session, "abxc")

    assert [user.username for user in discovery.search_users(db_session, "b_c")] == ["ab_c"]


def test_premium_highlight_prefers_responses_on_clap_ties(db_session: Session) -> None:
    """Clap ties are broken by response count."""
    member = make_user(db_session, "mira", membership_status=True)
    make_post(db_session, member, "Fewer responses", clap_count=3, response_count=1)
    make_post(db_session, member, "More responses", clap_count=3, response_count=4)

    [entry] = discovery.get_premium_users(db_session)

    assert entry.highlight is not None
    assert entry.highlight.title == "More responses"


def test_premium_shuffles_members(db_session: Session, mocker) -> None:
    """Members are sampled after a shuffle."""
    for index in range(4):
        make_user(db_session, f"member{index}", membership_status=True)
    shuffle = mocker.patch.object(discovery.random, "shuffle", side_effect=lambda items: items.reverse())

    entries = discovery.get_premium_users(db_session, 2)

    shuffle.assert_called_once()
    assert len(entries) == 2


def test_suggestions_combine_topic_and_popularity(
    db_session: Session,
    test_user: User,
    other_user: User,
    third_user: User,
) -> None:
    """A popular account that also shares a topic outranks a topic-only match."""
    fan = make_user(db_session, "fan")
    popular = make_user(db_session, "popular", topics=["python"])
    make_user(db_session, "niche", topics=["python", "rust"])
    db_session.add(Relationship(follower_id=fan.id, following_id=popular.id))
    db_session.flush()

    suggestions = discovery.get_suggested_users(db_session, test_user, 3)

    assert [s.user.username for s in suggestions][:2] == ["popular", "niche"]
    assert suggestions[0].stats.followers == 1


def test_suggestions_skip_followed_users(db_session: Session, test_user: User, other_user: User) -> None:
    """Accounts the viewer already follows are not suggested."""
    db_session.add(Relationship(follower_id=test_user.id, following_id=other_user.id))
    db_session.flush()

    suggestions = discovery.get_suggested_users(db_session, test_user)

    assert all(s.user.id not in {test_user.id, other_user.id} for s in suggestions)


def test_shared_topics_are_capped(db_session: Session) -> None:
    """At most four shared topics are reported."""
    topics = ["a", "b", "c", "d", "e"]
    viewer = make_user(db_session, "viewer", topics=topics)
    make_user(db_session, "twin", topics=[topic.upper() for topic in topics])

    [suggestion] = discovery.get_suggested_users(db_session, viewer, 1)

    assert suggestion.user.username == "twin"
    assert suggestion.shared_topics == ["a", "b", "c", "d"]
