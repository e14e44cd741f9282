"""PostgreSQL implementation of Invite repository."""

from typing import Optional

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hangout.domain.model import Invite
from hangout.domain.repository import InviteRepository
from hangout.domain.value import InviteId, InviteStatus, UserId
from hangout.persistence.mappers import invite_to_dict, row_to_invite
from hangout.persistence.tables import invites_table


class PostgresInviteRepository(InviteRepository):
    """PostgreSQL implementation of InviteRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, invite_id: InviteId) -> Optional[Invite]:
        """Find an invite by ID.

        Args:
            invite_id: Invite ID to look up

        Returns:
            Invite if found, None otherwise
        """
        stmt = select(invites_table).where(invites_table.c.id == invite_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invite(dict(row)) if row else None

    async def find_by_sender(
        self, user_id: UserId, status: InviteStatus | None = None
    ) -> list[Invite]:
        """Find invites sent by a user."""
        stmt = select(invites_table).where(invites_table.c.from_user_id == user_id)
        if status is not None:
            stmt = stmt.where(invites_table.c.status == status.value)
        result = await self.session.execute(stmt)
        return [row_to_invite(dict(row)) for row in result.mappings()]

    async def find_by_recipient(
        self, user_id: UserId, status: InviteStatus | None = None
    ) -> list[Invite]:
        """Find invites received by a user."""
        stmt = select(invites_table).where(invites_table.c.to_user_id == user_id)
        if status is not None:
            stmt = stmt.where(invites_table.c.status == status.value)
        result = await self.session.execute(stmt)
        return [row_to_invite(dict(row)) for row in result.mappings()]

    async def save(self, invite: Invite) -> Invite:
        """Save an invite (create or update).

        Args:
            invite: Invite to save

        Returns:
            Saved invite
        """
        invite_dict = invite_to_dict(invite)

        existing = await self.session.execute(
            select(invites_table.c.id).where(invites_table.c.id == invite.id)
        )
        if existing.first():
            stmt = (
                update(invites_table)
                .where(invites_table.c.id == invite.id)
                .values(**invite_dict)
            )
        else:
            stmt = insert(invites_table).values(**invite_dict)
        await self.session.execute(stmt)
        await self.session.flush()
        return invite
