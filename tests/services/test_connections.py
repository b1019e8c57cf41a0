# tests/services/test_connections.py
"""Unit tests for the WebSocket connection registry."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from blogshive.services.connections import NEW_NOTIFICATION_EVENT, ConnectionManager


async def _connected(manager: ConnectionManager) -> tuple[AsyncMock, str]:
    websocket = AsyncMock()
    socket_id = await manager.connect(websocket)
    return websocket, socket_id


@pytest.mark.asyncio
async def test_connect_accepts_socket() -> None:
    """Connecting accepts the socket but leaves it unregistered."""
    manager = ConnectionManager()
    websocket, socket_id = await _connected(manager)

    websocket.accept.assert_awaited_once()
    assert manager.connection_count == 1
    assert manager.is_registered(socket_id) is False


@pytest.mark.asyncio
async def test_register_and_unregister() -> None:
    """Registered sockets are addressable until unregistered."""
    manager = ConnectionManager()
    websocket, socket_id = await _connected(manager)

    assert manager.register("7", socket_id) is True
    assert manager.sockets_for(7) == [websocket]

    manager.unregister(socket_id)
    assert manager.sockets_for("7") == []
    assert manager.connection_count == 0
    manager.unregister(socket_id)


@pytest.mark.asyncio
async def test_register_ignores_empty_user_id() -> None:
    """Empty user ids never create a bucket."""
    manager = ConnectionManager()
    _, socket_id = await _connected(manager)

    assert manager.register("", socket_id) is False
    assert manager.register(None, socket_id) is False
    assert manager.is_registered(socket_id) is False


@pytest.mark.asyncio
async def test_reregister_moves_socket() -> None:
    """A socket registered under a new user leaves its old bucket."""
    manager = ConnectionManager()
    websocket, socket_id = await _connected(manager)

    manager.register("1", socket_id)
    manager.register("2", socket_id)

    assert manager.sockets_for("1") == []
    assert manager.sockets_for("2") == [websocket]


@pytest.mark.asyncio
async def test_push_to_counts_successful_sends() -> None:
    """One failing socket does not stop delivery to the others."""
    manager = ConnectionManager()
    healthy, healthy_id = await _connected(manager)
    broken, broken_id = await _connected(manager)
    broken.send_json.side_effect = RuntimeError("socket closed")
    manager.register("5", healthy_id)
    manager.register("5", broken_id)

    delivered = await manager.push_to("5", "notifications:new", {"id": "1"})

    assert delivered == 1
    healthy.send_json.assert_awaited_once_with({"event": "notifications:new", "data": {"id": "1"}})


@pytest.mark.asyncio
async def test_push_to_unknown_user() -> None:
    """Pushing to a user without sockets delivers nothing."""
    manager = ConnectionManager()
    assert await manager.push_to("404", "notifications:new", {}) == 0


@pytest.mark.asyncio
async def test_dispatch_schedules_push() -> None:
    """Dispatch returns immediately and the push runs on the loop."""
    manager = ConnectionManager()
    websocket, socket_id = await _connected(manager)
    manager.register("9", socket_id)

    manager.dispatch(9, {"id": "3"})
    websocket.send_json.assert_not_awaited()

    await manager.drain()
    await asyncio.sleep(0)
    websocket.send_json.assert_awaited_once_with({"event": NEW_NOTIFICATION_EVENT, "data": {"id": "3"}})


def test_dispatch_without_loop_is_noop() -> None:
    """Dispatch outside an event loop drops the push quietly."""
    manager = ConnectionManager()
    manager._buckets["1"] = {"abc": AsyncMock()}
    manager.dispatch("1", {"id": "1"})
    assert manager._tasks == set()
