"""In-memory invite repository for testing."""

from typing import Optional

from hangout.domain.model.invite import Invite
from hangout.domain.repository.invite import InviteRepository
from hangout.domain.value import InviteId, InviteStatus, UserId


class InMemoryInviteRepository(InviteRepository):
    """In-memory implementation of InviteRepository for testing."""

    def __init__(self) -> None:
        self._invites: dict[InviteId, Invite] = {}

    async def find_by_id(self, invite_id: InviteId) -> Optional[Invite]:
        """Find an invite by ID."""
        return self._invites.get(invite_id)

    async def find_by_sender(
        self, user_id: UserId, status: InviteStatus | None = None
    ) -> list[Invite]:
        """Find invites sent by a user."""
        return [
            invite
            for invite in self._invites.values()
            if invite.from_user_id == user_id
            and (status is None or invite.status == status)
        ]

    async def find_by_recipient(
        self, user_id: UserId, status: InviteStatus | None = None
    ) -> list[Invite]:
        """Find invites received by a user."""
        return [
            invite
            for invite in self._invites.values()
            if invite.to_user_id == user_id
            and (status is None or invite.status == status)
        ]

    async def save(self, invite: Invite) -> Invite:
        """Save or update an invite."""
        self._invites[invite.id] = invite
        return invite
