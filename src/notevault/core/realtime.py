"""WebSocket fan-out of note change events."""

import asyncio
import logging
from typing import Dict

from fastapi import WebSocket

from .redis_client import RedisClient

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks connected notification sockets on this instance."""

    def __init__(self):
        self.active_connections: Dict[str, WebSocket] = {}

    async def connect(self, connection_id: str, websocket: WebSocket):
        """Accept and register a new connection."""
        await websocket.accept()
        self.active_connections[connection_id] = websocket
        logger.debug(f"WebSocket connected: {connection_id}")

    def disconnect(self, connection_id: str):
        """Remove a connection."""
        self.active_connections.pop(connection_id, None)
        logger.debug(f"WebSocket disconnected: {connection_id}")

    async def broadcast(self, message: str):
        """Send a text frame to every connection, dropping the ones that fail."""
        disconnected = []
        for connection_id, websocket in list(self.active_connections.items()):
            try:
                await websocket.send_text(message)
            except Exception:
                disconnected.append(connection_id)

        for connection_id in disconnected:
            self.disconnect(connection_id)


manager = ConnectionManager()


def get_connection_manager() -> ConnectionManager:
    return manager


async def relay_notifications(redis_client: RedisClient, connections: ConnectionManager, channel: str) -> None:
    """Forward every message on the Redis channel to the local sockets."""
    logger.info(f"Relaying change events from Redis channel {channel}")
    try:
        async for payload in redis_client.listen(channel):
            await connections.broadcast(payload)
    except asyncio.CancelledError:
        raise
    except Exception as e:
        logger.error(f"Notification relay stopped: {e}")
