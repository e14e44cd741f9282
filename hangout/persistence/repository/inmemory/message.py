"""In-memory message repository for testing."""

from hangout.domain.model.message import Message
from hangout.domain.repository.message import MessageRepository
from hangout.domain.value import InviteId, MessageId


class InMemoryMessageRepository(MessageRepository):
    """In-memory implementation of MessageRepository for testing."""

    def __init__(self) -> None:
        self._messages: dict[MessageId, Message] = {}

    async def save(self, message: Message) -> Message:
        """Save a message."""
        self._messages[message.id] = message
        return message

    async def find_by_invite(self, invite_id: InviteId) -> list[Message]:
        """Find all messages of an invite thread."""
        return [m for m in self._messages.values() if m.invite_id == invite_id]
