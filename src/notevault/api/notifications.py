"""WebSocket endpoint streaming note change events."""

import json
import logging
import uuid

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from ..core.notifier import ChangeNotifier, get_change_notifier
from ..core.realtime import ConnectionManager, get_connection_manager

router = APIRouter()
logger = logging.getLogger(__name__)


@router.websocket("/ws/notifications")
async def notifications_stream(
    websocket: WebSocket,
    connections: ConnectionManager = Depends(get_connection_manager),
    notifier: ChangeNotifier = Depends(get_change_notifier),
):
    """
    Change event stream.

    Every note create, update, delete and revert is pushed as a JSON text
    frame. JSON objects sent by the client are re-broadcast to everyone
    with a server timestamp added.
    """
    connection_id = f"notifications_{uuid.uuid4().hex}"
    await connections.connect(connection_id, websocket)

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                data = json.loads(raw)
            except json.JSONDecodeError:
                logger.debug(f"Ignoring non-JSON frame from {connection_id}")
                continue
            if isinstance(data, dict):
                await notifier.publish_client_message(data)

    except WebSocketDisconnect:
        connections.disconnect(connection_id)
    except Exception as e:
        logger.error(f"WebSocket error for {connection_id}: {e}")
        connections.disconnect(connection_id)
