"""Repository interfaces for Hangout domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from hangout.domain.repository.invite import InviteRepository
from hangout.domain.repository.ledger import LedgerRepository
from hangout.domain.repository.message import MessageRepository
from hangout.domain.repository.user import UserRepository

__all__ = [
    "InviteRepository",
    "LedgerRepository",
    "MessageRepository",
    "UserRepository",
]
