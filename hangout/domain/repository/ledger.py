"""Balance ledger repository interface."""

from abc import ABC, abstractmethod

from hangout.domain.model.ledger import LedgerEntry
from hangout.domain.value import UserId


class LedgerRepository(ABC):
    """Append-only store of balance ledger entries."""

    @abstractmethod
    async def append(self, entry: LedgerEntry) -> bool:
        """Append an entry unless one with the same key exists.

        The key is (invite_id, entry_type, user_id).

        Args:
            entry: Entry to append

        Returns:
            True if the entry was stored, False if it was a duplicate
        """
        pass

    @abstractmethod
    async def find_by_user(self, user_id: UserId) -> list[LedgerEntry]:
        """Find all entries of a user.

        Args:
            user_id: Owner of the entries

        Returns:
            Entries, unordered
        """
        pass

