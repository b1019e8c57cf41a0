"""Tests for newsletter subscription endpoints."""

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from blogshive.models import Newsletter, User


class TestNewsletter:
    """Test reading and toggling the newsletter subscription."""

    def test_read_creates_unsubscribed(
        self,
        client: TestClient,
        db_session: Session,
        test_user: User,
        auth_token: dict[str, str],
    ) -> None:
        """Test that the first read returns an unsubscribed newsletter."""
        response = client.get("/api/v1/newsletter", headers=auth_token)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["is_subscribed"] is False
        assert data["subscribers_count"] == 0

        client.get("/api/v1/newsletter", headers=auth_token)
        assert db_session.query(Newsletter).filter(Newsletter.user_id == test_user.id).count() == 1

    def test_subscribe_and_unsubscribe(self, client: TestClient, auth_token: dict[str, str]) -> None:
        """Test toggling the subscription."""
        response = client.put("/api/v1/newsletter", json={"subscribe": True}, headers=auth_token)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["is_subscribed"] is True

        response = client.put("/api/v1/newsletter", json={"subscribe": False}, headers=auth_token)
        assert response.json()["is_subscribed"] is False

        assert client.get("/api/v1/newsletter", headers=auth_token).json()["is_subscribed"] is False

    def test_subscribe_must_be_boolean(self, client: TestClient, auth_token: dict[str, str]) -> None:
        """Test that a non-boolean flag is rejected."""
        response = client.put("/api/v1/newsletter", json={"subscribe": "yes"}, headers=auth_token)
        assert response.status_code == 422

        response = client.put("/api/v1/newsletter", json={}, headers=auth_token)
        assert response.status_code == 422

    def test_requires_auth(self, client: TestClient) -> None:
        """Test that the newsletter preference is private."""
        response = client.get("/api/v1/newsletter")
        assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)
