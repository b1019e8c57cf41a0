# src/blogshive/api/v1/endpoints/realtime.py
"""WebSocket channel used to push notifications to connected clients.

Clients send ``{"event": "register", "data": "<user id>"}`` once connected;
the server acknowledges with ``registered`` and from then on pushes
``notifications:new`` frames for that user. A plain ``ping`` text frame is
answered with ``pong``.
"""

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from blogshive.services.connections import ConnectionManager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])

REGISTER_EVENT = "register"
REGISTERED_EVENT = "registered"


@router.websocket("/ws")
async def notifications_socket(websocket: WebSocket) -> None:
    """Accept a socket and route its frames until it disconnects."""
    connections: ConnectionManager = websocket.app.state.connections
    socket_id = await connections.connect(websocket)
    try:
        while True:
            raw = await websocket.receive_text()
            if raw == "ping":
                await websocket.send_text("pong")
                continue

            try:
                frame = json.loads(raw)
            except ValueError:
                logger.debug("Ignoring malformed frame on socket %s", socket_id)
                continue
            if not isinstance(frame, dict) or frame.get("event") != REGISTER_EVENT:
                continue

            user_id = frame.get("data")
            if connections.register(user_id, socket_id):
                await websocket.send_json(
                    {"event": REGISTERED_EVENT, "data": {"user_id": str(user_id).strip()}}
                )
    except WebSocketDisconnect:
        pass
    finally:
        connections.unregister(socket_id)
