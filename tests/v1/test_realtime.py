# tests/v1/test_realtime.py
"""Tests for the notification WebSocket channel."""

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from blogshive.models import Notification, User
from blogshive.services import ConnectionManager


class TestRealtimeNotifications:
    """Test registration and pushes over the WebSocket."""

    def test_register_is_acknowledged(
        self,
        client: TestClient,
        connections: ConnectionManager,
        test_user: User,
    ) -> None:
        """Test that registering replies with the registered event."""
        with client.websocket_connect("/ws") as websocket:
            websocket.send_json({"event": "register", "data": str(test_user.id)})
            assert websocket.receive_json() == {
                "event": "registered",
                "data": {"user_id": str(test_user.id)},
            }
            assert len(connections.sockets_for(test_user.id)) == 1

        assert connections.sockets_for(test_user.id) == []
        assert connections.connection_count == 0

    def test_ping_and_unknown_frames(self, client: TestClient) -> None:
        """Test that malformed and unknown frames are ignored and ping is answered."""
        with client.websocket_connect("/ws") as websocket:
            websocket.send_text("{not json")
            websocket.send_json({"event": "subscribe", "data": "x"})
            websocket.send_text("ping")
            assert websocket.receive_text() == "pong"

    def test_follow_pushes_notification(
        self,
        client: TestClient,
        test_user: User,
        other_user: User,
        auth_token: dict[str, str],
    ) -> None:
        """Test that following a registered user pushes the new notification."""
        with client.websocket_connect("/ws") as websocket:
            websocket.send_json({"event": "register", "data": str(other_user.id)})
            websocket.receive_json()

            response = client.post(f"/api/v1/users/{other_user.id}/follow", headers=auth_token)
            assert response.status_code == 200

            frame = websocket.receive_json()

        assert frame["event"] == "notifications:new"
        assert frame["data"]["type"] == "follow"
        assert frame["data"]["message"] == "Alice Writer started following you"
        assert frame["data"]["sender"]["username"] == "alice"
        assert frame["data"]["recipient_id"] == str(other_user.id)

    def test_notification_persisted_without_sockets(
        self,
        client: TestClient,
        db_session: Session,
        test_user: User,
        other_user: User,
        auth_token: dict[str, str],
        other_auth_token: dict[str, str],
    ) -> None:
        """Test that a recipient with no sockets still finds the notification later."""
        client.post(f"/api/v1/users/{other_user.id}/follow", headers=auth_token)

        assert db_session.query(Notification).count() == 1
        listing = client.get("/api/v1/notifications/", headers=other_auth_token).json()
        assert listing["items"][0]["type"] == "follow"
