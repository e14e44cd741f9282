"""PostgreSQL implementation of Message repository."""

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from hangout.domain.model import Message
from hangout.domain.repository import MessageRepository
from hangout.domain.value import InviteId
from hangout.persistence.mappers import message_to_dict, row_to_message
from hangout.persistence.tables import messages_table


class PostgresMessageRepository(MessageRepository):
    """PostgreSQL implementation of MessageRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def save(self, message: Message) -> Message:
        """Insert a new message."""
        await self.session.execute(
            insert(messages_table).values(**message_to_dict(message))
        )
        await self.session.flush()
        return message

    async def find_by_invite(self, invite_id: InviteId) -> list[Message]:
        """Find all messages of an invite thread, oldest first."""
        stmt = (
            select(messages_table)
            .where(messages_table.c.invite_id == invite_id)
            .order_by(messages_table.c.created_at, messages_table.c.id)
        )
        result = await self.session.execute(stmt)
        return [row_to_message(dict(row)) for row in result.mappings()]
