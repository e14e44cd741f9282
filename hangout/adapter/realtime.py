"""In-process push channel for invite chat threads.

Each open chat view holds exactly one subscription. Subscribing returns a
queue that receives every message published to the invite; leaving the
``subscribe`` context removes the queue so no listener outlives its view.
"""

import asyncio
from collections import defaultdict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import logfire

from hangout.domain.model import Message
from hangout.domain.value import InviteId


class MessageHub:
    """Fan-out of new chat messages to live subscribers."""

    def __init__(self, max_queue_size: int = 100) -> None:
        self.max_queue_size = max_queue_size
        self._subscribers: dict[InviteId, set[asyncio.Queue[Message]]] = (
            defaultdict(set)
        )

    @asynccontextmanager
    async def subscribe(
        self, invite_id: InviteId
    ) -> AsyncIterator[asyncio.Queue[Message]]:
        """Subscribe to an invite's thread for the duration of the context."""
        queue: asyncio.Queue[Message] = asyncio.Queue(maxsize=self.max_queue_size)
        self._subscribers[invite_id].add(queue)
        logfire.info(
            "Chat subscription opened",
            invite_id=str(invite_id),
            subscribers=len(self._subscribers[invite_id]),
        )
        try:
            yield queue
        finally:
            queues = self._subscribers.get(invite_id)
            if queues is not None:
                queues.discard(queue)
                if not queues:
                    del self._subscribers[invite_id]
            logfire.info(
                "Chat subscription closed",
                invite_id=str(invite_id),
                subscribers=self.subscriber_count(invite_id),
            )

    async def publish(self, message: Message) -> int:
        """Push a message to every subscriber of its invite.

        A subscriber whose queue is full misses the message.

        Returns:
            Number of subscribers the message was delivered to
        """
        delivered = 0
        for queue in list(self._subscribers.get(message.invite_id, ())):
            try:
                queue.put_nowait(message)
                delivered += 1
            except asyncio.QueueFull:
                logfire.warn(
                    "Chat subscriber queue full, message dropped",
                    invite_id=str(message.invite_id),
                    message_id=str(message.id),
                )
        return delivered

    def subscriber_count(self, invite_id: InviteId) -> int:
        return len(self._subscribers.get(invite_id, ()))


class MessageOutbox:
    """Messages written in one unit of work, held back until it commits.

    Subscribers only ever see messages a reload of the thread would show.
    """

    def __init__(self, message_hub: MessageHub) -> None:
        self.message_hub = message_hub
        self._pending: list[Message] = []

    def add(self, message: Message) -> None:
        self._pending.append(message)

    def discard(self) -> int:
        """Drop held messages after a rollback.

        Returns:
            Number of messages dropped
        """
        dropped = len(self._pending)
        self._pending = []
        return dropped

    async def flush(self) -> int:
        """Publish held messages once their write has committed.

        Returns:
            Number of deliveries across all messages
        """
        pending, self._pending = self._pending, []
        delivered = 0
        for message in pending:
            delivered += await self.message_hub.publish(message)
        return delivered
