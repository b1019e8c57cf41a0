# tests/services/test_posts.py
"""Unit tests for post helpers."""

import pytest
from sqlalchemy.orm import Session

from blogshive.core.errors import ConflictError, NotFoundError, ValidationError
from blogshive.models import Post, PostReport, User
from blogshive.schemas.post import ContentBlock, PostCreate
from blogshive.services import posts
from tests.conftest import make_post


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("Hello World", "hello-world"),
        ("  Déjà  vu!!  ", "deja-vu"),
        ("C++ & Rust: 2026", "c-rust-2026"),
        ("!!!", ""),
    ],
)
def test_slugify(title: str, expected: str) -> None:
    """Slugs are lowercase ASCII with dashes."""
    assert posts.slugify(title) == expected


def test_unique_slug_excludes_self(db_session: Session, test_user: User) -> None:
    """A post keeps its own slug when re-slugged with the same title."""
    post = make_post(db_session, test_user, "Taken", slug="taken")
    post.slug = "taken"
    db_session.flush()

    assert posts.ensure_unique_slug(db_session, "Taken", exclude_id=post.id) == "taken"
    assert posts.ensure_unique_slug(db_session, "Taken") == "taken-1"


def test_unique_slug_fallback_for_symbols(db_session: Session) -> None:
    """Titles without slug characters fall back to a timestamp."""
    slug = posts.ensure_unique_slug(db_session, "???")
    assert slug.isdigit()


def test_count_words_and_reading_time() -> None:
    """Words in text and list items count toward reading time."""
    blocks = posts.normalize_content(
        [
            ContentBlock(type="H1", text="Title here"),
            ContentBlock(type="OL", list_items=["one", "two three"]),
            ContentBlock(type="IMG", image={"url": "https://img.example/x.png"}),
        ]
    )

    assert posts.count_words(blocks) == 5
    assert posts.estimate_reading_time(0) == 1
    assert posts.estimate_reading_time(200) == 1
    assert posts.estimate_reading_time(201) == 2


def test_content_block_normalization() -> None:
    """Block types are upper-cased and empty fields dropped when stored."""
    block = ContentBlock(type=" code ", text="print()", code_language=" Python ")
    dumped = posts.normalize_content([block])[0]

    assert dumped["type"] == "CODE"
    assert dumped["code_language"] == "python"
    assert "image" not in dumped


def test_create_post_slug_race_is_conflict(db_session: Session, test_user: User, mocker) -> None:
    """A slug taken between the check and the insert surfaces as a conflict."""
    existing = make_post(db_session, test_user, "Raced")
    db_session.commit()
    mocker.patch.object(posts, "ensure_unique_slug", return_value=existing.slug)

    with pytest.raises(ConflictError):
        posts.create_post(db_session, test_user, PostCreate(title="Raced"))


def test_report_post_trims_and_truncates(db_session: Session, other_user: User, test_post: Post) -> None:
    """Reasons are trimmed and cut to 120 characters; blank details become None."""
    report = posts.report_post(db_session, test_post.slug, other_user, f"  {'r' * 130}  ", "  \n ")

    assert report.reason == "r" * 120
    assert report.details is None


def test_report_post_validates_before_lookup(db_session: Session, other_user: User) -> None:
    """A blank reason fails even for a missing post; a real reason then gets 404."""
    with pytest.raises(ValidationError):
        posts.report_post(db_session, "no-such-post", other_user, "   ")
    with pytest.raises(NotFoundError):
        posts.report_post(db_session, "no-such-post", other_user, "Spam")


def test_concurrent_report_converges_on_one_row(
    db_session: Session,
    other_user: User,
    test_post: Post,
    mocker,
) -> None:
    """When the lookup misses a report inserted concurrently, the upsert updates it."""
    posts.report_post(db_session, test_post.id, other_user, "Spam")

    real_lookup = posts._find_report
    misses = [None]

    def stale_lookup(db: Session, post_id: int, user_id: int) -> PostReport | None:
        if misses:
            return misses.pop()
        return real_lookup(db, post_id, user_id)

    lookup = mocker.patch.object(posts, "_find_report", side_effect=stale_lookup)

    report = posts.report_post(db_session, test_post.id, other_user, "Harassment", "Second look")

    assert lookup.call_count == 2
    assert report.reason == "Harassment"
    assert report.details == "Second look"
    assert db_session.query(PostReport).count() == 1
