"""Invite entity.

An invite is a proposed paid meet-up: the sender offers an incentive, the
recipient (the "pal") is paid for attending. The invite carries its own
money snapshot and the settlement flags later payments flip.
"""

from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from pydantic import Field

from hangout.domain.error import ValidationError
from hangout.domain.model.common import DomainModel
from hangout.domain.value import (
    DEFAULT_FEES,
    FeeSchedule,
    InviteId,
    InviteRole,
    InviteStatus,
    UserId,
)
from hangout.domain.value.common import ValueObject
from hangout.domain.value.money import ZERO, to_money


class OutstandingFeesBreakdown(ValueObject):
    """Outstanding amounts folded into a payment, split by origin."""

    incentive_payments: Decimal = ZERO
    cancellation_fees: Decimal = ZERO
    platform_fees: Decimal = ZERO


class InviteDetails(ValueObject):
    """Sender-editable part of an invite."""

    title: str
    description: str
    meeting_location: str
    start_date: date
    start_time: str
    end_date: date
    end_time: str
    price: Decimal

    @property
    def starts_at(self) -> datetime:
        return datetime.combine(self.start_date, _parse_time(self.start_time))

    @property
    def ends_at(self) -> datetime:
        return datetime.combine(self.end_date, _parse_time(self.end_time))


def _parse_time(value: str) -> time:
    try:
        return time.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError(f"Invalid time: {value!r}")


def build_invite_details(
    title: str | None,
    description: str | None,
    meeting_location: str | None,
    start_date: date | None,
    start_time: str | None,
    end_date: date | None,
    end_time: str | None,
    price: Decimal | float | str | None,
) -> InviteDetails:
    """Validate raw form input into InviteDetails.

    Every field is required and the end must fall after the start.

    Raises:
        ValidationError: If a field is missing, the price is not positive,
            or the end is not after the start
    """
    fields = {
        "title": title,
        "description": description,
        "meeting_location": meeting_location,
        "start_date": start_date,
        "start_time": start_time,
        "end_date": end_date,
        "end_time": end_time,
        "price": price,
    }
    missing = [
        name
        for name, value in fields.items()
        if value is None or (isinstance(value, str) and not value.strip())
    ]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    amount = to_money(price)
    if amount <= ZERO:
        raise ValidationError("Price must be greater than zero")

    details = InviteDetails(
        title=title.strip(),
        description=description.strip(),
        meeting_location=meeting_location.strip(),
        start_date=start_date,
        start_time=start_time.strip(),
        end_date=end_date,
        end_time=end_time.strip(),
        price=amount,
    )
    if details.ends_at <= details.starts_at:
        raise ValidationError("End date and time must be after start date and time")
    return details


class Invite(DomainModel):
    """Invite entity.

    Business rules:
    - Status only moves along the lifecycle transition table
    - Declined, cancelled and completed invites are terminal; only their
      fee-settlement flags may still change
    - Price can only be edited while pending
    - Fee fields are None until the transition that sets them
    """

    id: InviteId
    from_user_id: UserId
    to_user_id: UserId
    from_username: Optional[str] = None
    to_username: Optional[str] = None

    title: str
    description: str = ""
    meeting_location: str = ""
    start_date: Optional[date] = None
    start_time: Optional[str] = None
    end_date: Optional[date] = None
    end_time: Optional[str] = None

    # Money
    price: Decimal = ZERO
    incentive_amount: Optional[Decimal] = None
    cancellation_fee: Optional[Decimal] = None
    pal_compensation: Optional[Decimal] = None
    platform_fee: Optional[Decimal] = None
    net_amount_to_pal: Optional[Decimal] = None
    total_paid_amount: Optional[Decimal] = None
    pending_fees_included: Optional[Decimal] = None
    outstanding_fees_breakdown: Optional[OutstandingFeesBreakdown] = None

    status: InviteStatus = InviteStatus.PENDING

    # Transition timestamps
    created_at: datetime = Field(default_factory=datetime.now)
    responded_at: Optional[datetime] = None
    accepted_at: Optional[datetime] = None
    declined_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    payment_done_at: Optional[datetime] = None
    payment_received_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    # Settlement flags
    payment_confirmed: bool = False
    cancellation_fee_paid: bool = False
    cancellation_fee_paid_at: Optional[datetime] = None
    cancellation_fee_paid_in_invite: Optional[InviteId] = None
    platform_fee_paid: bool = False
    platform_fee_paid_at: Optional[datetime] = None
    platform_fee_paid_by_pal: bool = False

    def role_of(self, user_id: UserId) -> InviteRole | None:
        """Role the user plays on this invite, or None for outsiders."""
        if user_id == self.from_user_id:
            return InviteRole.SENDER
        if user_id == self.to_user_id:
            return InviteRole.RECIPIENT
        return None

    @property
    def incentive(self) -> Decimal:
        """Incentive carried into payment, falling back to the price."""
        if self.incentive_amount is not None:
            return self.incentive_amount
        return self.price

    @property
    def earning_amount(self) -> Decimal:
        """Amount the platform fee of a pal earning is computed from."""
        for value in (self.incentive_amount, self.pal_compensation, self.price):
            if value is not None:
                return value
        return ZERO

    def effective_platform_fee(self, fees: FeeSchedule = DEFAULT_FEES) -> Decimal:
        """Recorded platform fee, or the flat rate on the earning amount."""
        if self.platform_fee is not None:
            return self.platform_fee
        return fees.platform_fee(self.earning_amount)

    @property
    def has_cancellation_fee(self) -> bool:
        return (
            self.status == InviteStatus.CANCELLED
            and self.cancellation_fee is not None
            and self.cancellation_fee > ZERO
        )

    @property
    def has_pal_compensation(self) -> bool:
        return (
            self.status == InviteStatus.CANCELLED
            and self.pal_compensation is not None
            and self.pal_compensation > ZERO
        )
