import logging
from typing import Dict, Optional, Set

from fastapi.websockets import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Open change-feed sockets per user; a user may have several tabs open."""

    def __init__(self):
        self.active_connections: Dict[str, Set[WebSocket]] = {}

    async def connect(self, user_id: str, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.setdefault(user_id, set()).add(websocket)
        logger.debug(f"Realtime client connected for user {user_id}")

    def disconnect(self, user_id: str, websocket: WebSocket):
        sockets = self.active_connections.get(user_id)
        if not sockets:
            return
        sockets.discard(websocket)
        if not sockets:
            del self.active_connections[user_id]

    async def send_to_user(self, message: dict, user_id: str):
        for websocket in list(self.active_connections.get(user_id, ())):
            try:
                await websocket.send_json(message)
            except Exception as e:
                logger.warning(f"Dropping realtime socket for user {user_id}: {e}")
                self.disconnect(user_id, websocket)

    async def broadcast(self, message: dict):
        for user_id in list(self.active_connections):
            await self.send_to_user(message, user_id)

    async def notify(self, message: dict, recipients: Optional[Set[str]] = None):
        """Send to the given users, or to everyone when recipients is None"""
        if recipients is None:
            await self.broadcast(message)
            return
        for user_id in recipients:
            await self.send_to_user(message, user_id)


manager = ConnectionManager()
