"""Invite repository interface."""

from abc import ABC, abstractmethod

from hangout.domain.model.invite import Invite
from hangout.domain.value import InviteId, InviteStatus, UserId


class InviteRepository(ABC):
    """Repository for Invite entity.

    Queries are equality filters only; callers sort in Python.
    """

    @abstractmethod
    async def find_by_id(self, invite_id: InviteId) -> Invite | None:
        """Find an invite by ID.

        Args:
            invite_id: The invite's unique identifier

        Returns:
            The invite if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_sender(
        self, user_id: UserId, status: InviteStatus | None = None
    ) -> list[Invite]:
        """Find invites sent by a user.

        Args:
            user_id: The sender's ID
            status: Optional status filter

        Returns:
            List of invites, unordered
        """
        pass

    @abstractmethod
    async def find_by_recipient(
        self, user_id: UserId, status: InviteStatus | None = None
    ) -> list[Invite]:
        """Find invites received by a user.

        Args:
            user_id: The recipient's ID
            status: Optional status filter

        Returns:
            List of invites, unordered
        """
        pass

    @abstractmethod
    async def save(self, invite: Invite) -> Invite:
        """Save an invite (create or update).

        Args:
            invite: The invite to save

        Returns:
            The saved invite
        """
        pass
