"""Change events, their delivery paths and the Redis relay."""

import asyncio
import json

import pytest

from src.notevault.core.notifier import ChangeEvent, ChangeNotifier
from src.notevault.core.realtime import ConnectionManager, relay_notifications


class FakeRedisClient:
    def __init__(self, connected=True, messages=()):
        self.connected = connected
        self.published = []
        self.messages = list(messages)

    async def publish(self, channel, message):
        if not self.connected:
            return False
        self.published.append((channel, message))
        return True

    async def listen(self, channel):
        for message in self.messages:
            yield message


class FakeSocket:
    def __init__(self, broken=False):
        self.sent = []
        self.broken = broken
        self.accepted = False

    async def accept(self):
        self.accepted = True

    async def send_text(self, message):
        if self.broken:
            raise RuntimeError("socket closed")
        self.sent.append(message)


def test_event_json_uses_camel_case():
    event = ChangeEvent(action="revert", note_id=1, user_id=2, title="t", version_id=3)
    data = json.loads(event.to_json())

    assert data["action"] == "revert"
    assert data["noteId"] == 1
    assert data["userId"] == 2
    assert data["versionId"] == 3
    assert "timestamp" in data


def test_event_json_omits_version_unless_revert():
    data = json.loads(ChangeEvent(action="create", note_id=1, user_id=2, title="t").to_json())
    assert "versionId" not in data


@pytest.mark.asyncio
async def test_publish_goes_to_redis_when_connected():
    redis_client = FakeRedisClient(connected=True)
    connections = ConnectionManager()
    socket = FakeSocket()
    await connections.connect("a", socket)

    notifier = ChangeNotifier(redis_client, connections, "notes")
    await notifier.publish(ChangeEvent(action="update", note_id=1, user_id=2, title="t"))

    assert redis_client.published[0][0] == "notes"
    # the relay task delivers it, not the publisher
    assert socket.sent == []


@pytest.mark.asyncio
async def test_publish_falls_back_to_local_sockets():
    connections = ConnectionManager()
    socket = FakeSocket()
    await connections.connect("a", socket)

    notifier = ChangeNotifier(FakeRedisClient(connected=False), connections, "notes")
    await notifier.publish(ChangeEvent(action="delete", note_id=1, user_id=2, title="t"))

    assert json.loads(socket.sent[0])["action"] == "delete"


@pytest.mark.asyncio
async def test_publish_swallows_errors():
    class Exploding:
        async def publish(self, channel, message):
            raise ConnectionError("redis gone")

    notifier = ChangeNotifier(Exploding(), ConnectionManager(), "notes")
    await notifier.publish(ChangeEvent(action="create", note_id=1, user_id=2, title="t"))


@pytest.mark.asyncio
async def test_client_message_gets_server_timestamp():
    connections = ConnectionManager()
    socket = FakeSocket()
    await connections.connect("a", socket)

    notifier = ChangeNotifier(FakeRedisClient(connected=False), connections, "notes")
    await notifier.publish_client_message({"type": "noteChange", "noteId": 4})

    data = json.loads(socket.sent[0])
    assert data["type"] == "noteChange"
    assert "timestamp" in data


@pytest.mark.asyncio
async def test_broadcast_drops_broken_sockets():
    connections = ConnectionManager()
    good, bad = FakeSocket(), FakeSocket(broken=True)
    await connections.connect("good", good)
    await connections.connect("bad", bad)

    await connections.broadcast("hello")

    assert good.sent == ["hello"]
    assert set(connections.active_connections) == {"good"}


@pytest.mark.asyncio
async def test_relay_forwards_channel_messages():
    connections = ConnectionManager()
    socket = FakeSocket()
    await connections.connect("a", socket)

    await asyncio.wait_for(
        relay_notifications(FakeRedisClient(messages=["one", "two"]), connections, "notes"),
        timeout=1,
    )

    assert socket.sent == ["one", "two"]
