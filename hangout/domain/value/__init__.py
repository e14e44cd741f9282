"""Domain value objects for Hangout."""

from hangout.domain.value.identifiers import (
    InviteId,
    LedgerEntryId,
    MessageId,
    UserId,
)
from hangout.domain.value.money import DEFAULT_FEES, FeeSchedule, to_money
from hangout.domain.value.types import (
    InviteAction,
    InviteRole,
    InviteStatus,
    LedgerEntryType,
    PaymentType,
    ProfileType,
    Username,
)

__all__ = [
    # Identifiers
    "UserId",
    "InviteId",
    "LedgerEntryId",
    "MessageId",
    # Types
    "InviteAction",
    "InviteRole",
    "InviteStatus",
    "LedgerEntryType",
    "PaymentType",
    "ProfileType",
    "Username",
    # Money
    "DEFAULT_FEES",
    "FeeSchedule",
    "to_money",
]
