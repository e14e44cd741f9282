"""PostgreSQL repository implementations."""

from hangout.persistence.repository.invite import PostgresInviteRepository
from hangout.persistence.repository.ledger import PostgresLedgerRepository
from hangout.persistence.repository.message import PostgresMessageRepository
from hangout.persistence.repository.user import PostgresUserRepository

__all__ = [
    "PostgresInviteRepository",
    "PostgresLedgerRepository",
    "PostgresMessageRepository",
    "PostgresUserRepository",
]
