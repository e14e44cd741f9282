"""In-memory repository implementations for testing."""

from .invite import InMemoryInviteRepository
from .ledger import InMemoryLedgerRepository
from .message import InMemoryMessageRepository
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryInviteRepository",
    "InMemoryLedgerRepository",
    "InMemoryMessageRepository",
    "InMemoryUserRepository",
]
