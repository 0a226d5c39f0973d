"""
Best-effort publication of note change events.

Events go to the Redis channel so every instance can relay them to its
sockets; without Redis they are broadcast to this instance's sockets only.
A failed publish is logged and dropped, it never reaches the caller.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..config import get_settings
from .realtime import ConnectionManager, get_connection_manager
from .redis_client import RedisClient, get_redis_client

logger = logging.getLogger(__name__)

ChangeAction = Literal["create", "update", "delete", "revert"]


class ChangeEvent(BaseModel):
    """A note change as seen by subscribers."""

    action: ChangeAction
    note_id: int
    user_id: int
    title: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version_id: Optional[int] = None  # revert only

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


class ChangeNotifier:
    """Publishes ``ChangeEvent``s after a successful commit."""

    def __init__(self, redis_client: RedisClient, connections: ConnectionManager, channel: str):
        self.redis_client = redis_client
        self.connections = connections
        self.channel = channel

    async def publish(self, event: ChangeEvent) -> None:
        await self._send(event.to_json())

    async def publish_client_message(self, data: Dict[str, Any]) -> None:
        """Re-broadcast a message sent by a socket client, stamped with server time."""
        message = dict(data)
        message["timestamp"] = datetime.now(timezone.utc).isoformat()
        await self._send(json.dumps(message, default=str))

    async def _send(self, payload: str) -> None:
        try:
            if not await self.redis_client.publish(self.channel, payload):
                await self.connections.broadcast(payload)
        except Exception as e:
            logger.warning(f"Failed to publish change event: {e}")


_notifier: Optional[ChangeNotifier] = None


def get_change_notifier() -> ChangeNotifier:
    """FastAPI dependency returning the process-wide notifier."""
    global _notifier
    if _notifier is None:
        _notifier = ChangeNotifier(
            get_redis_client(),
            get_connection_manager(),
            get_settings().notifications_channel,
        )
    return _notifier
