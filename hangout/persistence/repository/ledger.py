"""PostgreSQL implementation of the balance ledger."""

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from hangout.domain.model import LedgerEntry
from hangout.domain.repository import LedgerRepository
from hangout.domain.value import UserId
from hangout.persistence.mappers import ledger_entry_to_dict, row_to_ledger_entry
from hangout.persistence.tables import ledger_entries_table


class PostgresLedgerRepository(LedgerRepository):
    """PostgreSQL implementation of LedgerRepository.

    Entries are only ever inserted. The unique constraint on
    (invite_id, entry_type, user_id) turns a replayed insert into a no-op.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def append(self, entry: LedgerEntry) -> bool:
        """Insert an entry unless its key already exists.

        Args:
            entry: Entry to append

        Returns:
            True if inserted, False if the key was taken
        """
        stmt = (
            insert(ledger_entries_table)
            .values(**ledger_entry_to_dict(entry))
            .on_conflict_do_nothing(constraint="uq_ledger_entry_key")
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0  # type: ignore[attr-defined]

    async def find_by_user(self, user_id: UserId) -> list[LedgerEntry]:
        """Find all entries of a user."""
        stmt = select(ledger_entries_table).where(
            ledger_entries_table.c.user_id == user_id
        )
        result = await self.session.execute(stmt)
        return [row_to_ledger_entry(dict(row)) for row in result.mappings()]

