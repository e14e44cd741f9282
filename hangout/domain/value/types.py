"""Domain value objects for Hangout.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

import re
from enum import Enum

from pydantic import field_validator

from hangout.domain.value.common import RootValueObject


class InviteStatus(str, Enum):
    """Lifecycle status of an invite."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"
    PAYMENT_DONE = "payment_done"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """Whether no further lifecycle action can apply."""
        return self in (
            InviteStatus.DECLINED,
            InviteStatus.CANCELLED,
            InviteStatus.COMPLETED,
        )


class InviteAction(str, Enum):
    """Actions that move an invite through its lifecycle."""

    ACCEPT = "accept"
    DECLINE = "decline"
    CANCEL = "cancel"
    START = "start"
    FINISH = "finish"
    MARK_PAYMENT_DONE = "mark_payment_done"
    CONFIRM_PAYMENT = "confirm_payment"


class InviteRole(str, Enum):
    """Role a user plays on a given invite."""

    SENDER = "sender"
    RECIPIENT = "recipient"


class ProfileType(str, Enum):
    """Profile visibility.

    Public profiles are discoverable pals and owe platform fees on earnings.
    """

    PUBLIC = "public"
    PRIVATE = "private"


class PaymentType(str, Enum):
    """Kind of pending payment line item."""

    INCENTIVE_PAYMENT = "incentive_payment"
    CANCELLATION_FEE = "cancellation_fee"
    PLATFORM_FEE = "platform_fee"


class LedgerEntryType(str, Enum):
    """Kind of balance ledger entry.

    Charges raise the pending balance, settlements lower it, and earnings
    raise total earnings.
    """

    CANCELLATION_FEE = "cancellation_fee"
    COMPENSATION_PLATFORM_FEE = "compensation_platform_fee"
    PLATFORM_FEE = "platform_fee"
    FEE_SETTLEMENT = "fee_settlement"
    PAL_COMPENSATION = "pal_compensation"
    INCENTIVE_EARNING = "incentive_earning"

    @property
    def is_charge(self) -> bool:
        return self in (
            LedgerEntryType.CANCELLATION_FEE,
            LedgerEntryType.COMPENSATION_PLATFORM_FEE,
            LedgerEntryType.PLATFORM_FEE,
        )

    @property
    def is_settlement(self) -> bool:
        return self is LedgerEntryType.FEE_SETTLEMENT

    @property
    def is_earning(self) -> bool:
        return self in (
            LedgerEntryType.PAL_COMPENSATION,
            LedgerEntryType.INCENTIVE_EARNING,
        )


class Username(RootValueObject[str]):
    """Public username chosen at profile setup.

    Must be 3-30 characters: letters, digits, dots, underscores, hyphens.
    """

    @field_validator("root")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Validate username format."""
        v = v.strip()
        if not re.match(r"^[A-Za-z0-9._-]{3,30}$", v):
            raise ValueError(
                "Username must be 3-30 characters of letters, digits, '.', '_' or '-'"
            )
        return v
