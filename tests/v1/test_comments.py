# tests/v1/test_comments.py
"""Tests for comment endpoints."""

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from blogshive.models import Comment, Notification, Post, User


def _comment(client: TestClient, headers: dict[str, str], post: Post, content: str, parent: int | None = None) -> dict:
    body: dict = {"post_id": post.id, "content": content}
    if parent is not None:
        body["parent_comment_id"] = parent
    response = client.post("/api/v1/comments/", json=body, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


class TestComments:
    """Test responses and replies."""

    def test_create_comment_notifies_post_author(
        self,
        client: TestClient,
        db_session: Session,
        test_user: User,
        other_user: User,
        test_post: Post,
        other_auth_token: dict[str, str],
    ) -> None:
        """Test that responding trims content, bumps the count and notifies the author."""
        data = _comment(client, other_auth_token, test_post, "  Great read  ")

        assert data["content"] == "Great read"
        assert data["author"]["username"] == "bob"
        db_session.refresh(test_post)
        assert test_post.response_count == 1

        notification = db_session.query(Notification).one()
        assert notification.type == "comment"
        assert notification.recipient_id == test_user.id
        assert notification.post_id == test_post.id

    def test_reply_notifies_parent_author(
        self,
        client: TestClient,
        db_session: Session,
        other_user: User,
        third_user: User,
        test_post: Post,
        other_auth_token: dict[str, str],
        third_auth_token: dict[str, str],
    ) -> None:
        """Test that a reply notifies both the post author and the parent's author."""
        parent = _comment(client, other_auth_token, test_post, "First!")
        _comment(client, third_auth_token, test_post, "Agreed", parent=parent["id"])

        replies = db_session.query(Notification).filter(Notification.type == "reply").all()
        assert len(replies) == 1
        assert replies[0].recipient_id == other_user.id
        assert replies[0].sender_id == third_user.id
        assert db_session.query(Notification).filter(Notification.type == "comment").count() == 2

    def test_thread_is_nested_oldest_first(
        self,
        client: TestClient,
        test_post: Post,
        auth_token: dict[str, str],
        other_auth_token: dict[str, str],
    ) -> None:
        """Test that listing nests replies under their parents."""
        first = _comment(client, other_auth_token, test_post, "first")
        second = _comment(client, auth_token, test_post, "second")
        reply = _comment(client, auth_token, test_post, "reply", parent=first["id"])

        response = client.get("/api/v1/comments/", params={"post_id": test_post.id})

        assert response.status_code == status.HTTP_200_OK
        items = response.json()["items"]
        assert [item["id"] for item in items] == [first["id"], second["id"]]
        assert [item["id"] for item in items[0]["replies"]] == [reply["id"]]
        assert items[1]["replies"] == []

    def test_empty_content_rejected(
        self,
        client: TestClient,
        test_post: Post,
        auth_token: dict[str, str],
    ) -> None:
        """Test that whitespace-only content is a 400."""
        response = client.post(
            "/api/v1/comments/",
            json={"post_id": test_post.id, "content": "   "},
            headers=auth_token,
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Content is required"

    def test_comment_on_missing_post(self, client: TestClient, auth_token: dict[str, str]) -> None:
        """Test responding to a post that does not exist."""
        response = client.post(
            "/api/v1/comments/",
            json={"post_id": 999, "content": "hello"},
            headers=auth_token,
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_edit_and_delete_are_author_only(
        self,
        client: TestClient,
        db_session: Session,
        test_post: Post,
        auth_token: dict[str, str],
        other_auth_token: dict[str, str],
    ) -> None:
        """Test ownership checks and the response count after deletion."""
        comment = _comment(client, other_auth_token, test_post, "mine")

        forbidden = client.patch(
            f"/api/v1/comments/{comment['id']}",
            json={"content": "not yours"},
            headers=auth_token,
        )
        assert forbidden.status_code == status.HTTP_403_FORBIDDEN
        assert client.delete(f"/api/v1/comments/{comment['id']}", headers=auth_token).status_code == 403

        edited = client.patch(
            f"/api/v1/comments/{comment['id']}",
            json={"content": "edited"},
            headers=other_auth_token,
        )
        assert edited.json()["content"] == "edited"

        deleted = client.delete(f"/api/v1/comments/{comment['id']}", headers=other_auth_token)
        assert deleted.status_code == status.HTTP_200_OK
        assert db_session.query(Comment).count() == 0
        db_session.refresh(test_post)
        assert test_post.response_count == 0

    def test_delete_missing_comment(self, client: TestClient, auth_token: dict[str, str]) -> None:
        """Test deleting a comment that does not exist."""
        response = client.delete("/api/v1/comments/12345", headers=auth_token)
        assert response.status_code == status.HTTP_404_NOT_FOUND
