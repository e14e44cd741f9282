"""Message repository interface."""

from abc import ABC, abstractmethod

from hangout.domain.model.message import Message
from hangout.domain.value import InviteId


class MessageRepository(ABC):
    """Repository for invite chat messages."""

    @abstractmethod
    async def save(self, message: Message) -> Message:
        """Save a new message.

        Args:
            message: Message to save

        Returns:
            The saved message
        """
        pass

    @abstractmethod
    async def find_by_invite(self, invite_id: InviteId) -> list[Message]:
        """Find all messages of an invite thread.

        Args:
            invite_id: Invite whose thread to load

        Returns:
            Messages, unordered
        """
        pass
