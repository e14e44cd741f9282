"""Unit tests for relaying chat messages to a WebSocket."""

import asyncio
from datetime import datetime
from uuid import uuid4

import pytest
from fastapi import WebSocketDisconnect

from hangout.domain.model import Message
from hangout.domain.value import InviteId, MessageId, UserId
from hangout.interface.api.routes.messages import relay_messages


class _Socket:
    """WebSocket stand-in: records sends, reads block until told to drop."""

    def __init__(self, fail_send: bool = False) -> None:
        self.fail_send = fail_send
        self.sent: list[dict] = []
        self.disconnected = asyncio.Event()

    async def send_json(self, data: dict) -> None:
        if self.fail_send:
            raise RuntimeError("client went away")
        self.sent.append(data)

    async def receive_text(self) -> str:
        await self.disconnected.wait()
        raise WebSocketDisconnect(code=1000)


def _message(text: str) -> Message:
    return Message(
        id=MessageId(uuid4()),
        invite_id=InviteId(uuid4()),
        sender_id=UserId(uuid4()),
        text=text,
        created_at=datetime.now(),
    )


class TestRelayMessages:
    """Tests for relay_messages."""

    @pytest.mark.asyncio
    async def test_forwards_until_client_disconnects(self):
        socket = _Socket()
        queue: asyncio.Queue[Message] = asyncio.Queue()
        await queue.put(_message("See you at ten"))

        relay = asyncio.create_task(relay_messages(socket, queue))
        await asyncio.sleep(0.01)
        socket.disconnected.set()
        await asyncio.wait_for(relay, timeout=1)

        assert [m["text"] for m in socket.sent] == ["See you at ten"]

    @pytest.mark.asyncio
    async def test_failed_send_stops_the_relay(self):
        """A send error ends the stream instead of leaving the read loop hanging."""
        socket = _Socket(fail_send=True)
        queue: asyncio.Queue[Message] = asyncio.Queue()
        await queue.put(_message("Hello"))

        # The client never disconnects, so only the send failure can end it
        await asyncio.wait_for(relay_messages(socket, queue), timeout=1)

        assert socket.sent == []
        assert not socket.disconnected.is_set()
