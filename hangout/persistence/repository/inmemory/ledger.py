"""In-memory balance ledger for testing."""

from hangout.domain.model.ledger import LedgerEntry
from hangout.domain.repository.ledger import LedgerRepository
from hangout.domain.value import InviteId, LedgerEntryType, UserId


class InMemoryLedgerRepository(LedgerRepository):
    """In-memory implementation of LedgerRepository for testing."""

    def __init__(self) -> None:
        self._entries: dict[tuple[InviteId, LedgerEntryType, UserId], LedgerEntry] = {}

    async def append(self, entry: LedgerEntry) -> bool:
        """Append an entry unless its key already exists."""
        if entry.key in self._entries:
            return False
        self._entries[entry.key] = entry
        return True

    async def find_by_user(self, user_id: UserId) -> list[LedgerEntry]:
        """Find all entries of a user."""
        return [e for e in self._entries.values() if e.user_id == user_id]

