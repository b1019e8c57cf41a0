"""Process-local registry of WebSocket connections keyed by user id.

Each socket moves through connecting -> connected -> registered ->
disconnected. Only registered sockets are reachable by ``push_to``. The
registry lives on ``app.state`` and is shared by every request handled by
this process; there is no cross-process fan-out.
"""
from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)

NEW_NOTIFICATION_EVENT = "notifications:new"

__all__ = ["ConnectionManager", "NEW_NOTIFICATION_EVENT"]


class ConnectionManager:
    """Map user ids to the set of sockets currently registered for them."""

    def __init__(self) -> None:
        self._sockets: dict[str, WebSocket] = {}
        self._buckets: dict[str, dict[str, WebSocket]] = {}
        self._tasks: set[asyncio.Task[int]] = set()

    async def connect(self, websocket: WebSocket) -> str:
        """Accept ``websocket`` and return the id it is tracked under."""
        await websocket.accept()
        socket_id = uuid.uuid4().hex
        self._sockets[socket_id] = websocket
        logger.debug("Socket %s connected", socket_id)
        return socket_id

    def register(self, user_id: str | int | None, socket_id: str) -> bool:
        """Attach a connected socket to ``user_id``.

        Empty user ids are ignored. A socket that was registered under another
        user is moved.
        """
        key = str(user_id).strip() if user_id is not None else ""
        if not key:
            return False
        websocket = self._sockets.get(socket_id)
        if websocket is None:
            return False

        self._detach(socket_id)
        self._buckets.setdefault(key, {})[socket_id] = websocket
        logger.debug("Socket %s registered for user %s", socket_id, key)
        return True

    def unregister(self, socket_id: str) -> None:
        """Forget ``socket_id`` entirely. Unknown ids are a no-op."""
        self._sockets.pop(socket_id, None)
        user_id = self._detach(socket_id)
        if user_id is not None:
            logger.debug("Socket %s unregistered from user %s", socket_id, user_id)

    def _detach(self, socket_id: str) -> str | None:
        for user_id, bucket in list(self._buckets.items()):
            if socket_id in bucket:
                del bucket[socket_id]
                if not bucket:
                    del self._buckets[user_id]
                return user_id
        return None

    def sockets_for(self, user_id: str | int) -> list[WebSocket]:
        """Return the sockets registered for ``user_id``."""
        return list(self._buckets.get(str(user_id), {}).values())

    def is_registered(self, socket_id: str) -> bool:
        """Return True if ``socket_id`` is attached to some user."""
        return any(socket_id in bucket for bucket in self._buckets.values())

    @property
    def connection_count(self) -> int:
        """Number of open sockets, registered or not."""
        return len(self._sockets)

    async def push_to(self, user_id: str | int, event: str, payload: Any) -> int:
        """Send ``{"event", "data"}`` to every socket of ``user_id``.

        Each send is independent; failures are logged and skipped.

        Returns:
            Number of sockets the frame was delivered to.
        """
        message = {"event": event, "data": payload}
        delivered = 0
        for websocket in self.sockets_for(user_id):
            try:
                await websocket.send_json(message)
            except Exception:
                logger.warning("Failed to push %s to user %s", event, user_id, exc_info=True)
                continue
            delivered += 1
        return delivered

    def dispatch(self, user_id: str | int, payload: Any) -> None:
        """Schedule a ``notifications:new`` push and return immediately.

        Outside a running event loop there is nobody to deliver to, so the
        push is skipped.
        """
        if not self._buckets.get(str(user_id)):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop; dropping push for user %s", user_id)
            return
        task = loop.create_task(self.push_to(user_id, NEW_NOTIFICATION_EVENT, payload))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for in-flight pushes to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
