# tests/v1/test_bookmarks.py
"""Tests for saved and hidden post endpoints."""

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from blogshive.models import HiddenPost, Post, SavedPost, User
from tests.conftest import make_post


class TestSavedPosts:
    """Test bookmarking posts."""

    def test_save_then_save_again(
        self,
        client: TestClient,
        db_session: Session,
        test_post: Post,
        other_auth_token: dict[str, str],
    ) -> None:
        """Test 201 on the first save and 200 afterwards."""
        first = client.post(f"/api/v1/saved/{test_post.id}", headers=other_auth_token)
        second = client.post(f"/api/v1/saved/{test_post.id}", headers=other_auth_token)

        assert first.status_code == status.HTTP_201_CREATED
        assert second.status_code == status.HTTP_200_OK
        assert first.json()["saved"] is True
        assert first.json()["post"]["id"] == test_post.id
        assert db_session.query(SavedPost).count() == 1

    def test_list_saved_newest_first(
        self,
        client: TestClient,
        db_session: Session,
        test_user: User,
        other_auth_token: dict[str, str],
    ) -> None:
        """Test the bookmark listing order."""
        older = make_post(db_session, test_user, "Older")
        newer = make_post(db_session, test_user, "Newer")
        client.post(f"/api/v1/saved/{older.id}", headers=other_auth_token)
        client.post(f"/api/v1/saved/{newer.id}", headers=other_auth_token)

        items = client.get("/api/v1/saved/", headers=other_auth_token).json()["items"]
        assert [item["post"]["title"] for item in items] == ["Newer", "Older"]
        assert items[0]["post"]["author"]["username"] == "alice"

    def test_remove_saved(
        self,
        client: TestClient,
        test_post: Post,
        other_auth_token: dict[str, str],
    ) -> None:
        """Test removing a bookmark and removing one that does not exist."""
        client.post(f"/api/v1/saved/{test_post.id}", headers=other_auth_token)

        removed = client.delete(f"/api/v1/saved/{test_post.id}", headers=other_auth_token)
        assert removed.json() == {"removed": True, "post_id": test_post.id}

        missing = client.delete(f"/api/v1/saved/{test_post.id}", headers=other_auth_token)
        assert missing.status_code == status.HTTP_404_NOT_FOUND

    def test_save_missing_post(self, client: TestClient, auth_token: dict[str, str]) -> None:
        """Test saving a post that does not exist."""
        response = client.post("/api/v1/saved/4242", headers=auth_token)
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestHiddenPosts:
    """Test hiding posts from the feed."""

    def test_hide_and_unhide(
        self,
        client: TestClient,
        db_session: Session,
        test_post: Post,
        other_auth_token: dict[str, str],
    ) -> None:
        """Test hiding twice and unhiding."""
        first = client.post(f"/api/v1/hidden/{test_post.id}", headers=other_auth_token)
        second = client.post(f"/api/v1/hidden/{test_post.id}", headers=other_auth_token)

        assert first.status_code == status.HTTP_201_CREATED
        assert second.status_code == status.HTTP_200_OK
        assert first.json() == {"hidden": True, "post_id": test_post.id}
        assert db_session.query(HiddenPost).count() == 1

        shown = client.delete(f"/api/v1/hidden/{test_post.id}", headers=other_auth_token)
        assert shown.json() == {"hidden": False, "post_id": test_post.id}
        again = client.delete(f"/api/v1/hidden/{test_post.id}", headers=other_auth_token)
        assert again.status_code == status.HTTP_404_NOT_FOUND

    def test_cannot_hide_draft(
        self,
        client: TestClient,
        db_session: Session,
        test_user: User,
        other_auth_token: dict[str, str],
    ) -> None:
        """Test that only published posts can be hidden."""
        draft = make_post(db_session, test_user, "Draft", is_published=False)
        response = client.post(f"/api/v1/hidden/{draft.id}", headers=other_auth_token)
        assert response.status_code == status.HTTP_404_NOT_FOUND
