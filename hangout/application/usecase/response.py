"""Response models shared by several use cases."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from hangout.domain.model import Invite
from hangout.domain.model.lifecycle import available_actions
from hangout.domain.service import PendingPayment, Reconciliation
from hangout.domain.value import (
    InviteAction,
    InviteRole,
    InviteStatus,
    PaymentType,
    UserId,
)


class OutstandingFeesResponse(BaseModel):
    """Outstanding amounts folded into a payment."""

    incentive_payments: Decimal
    cancellation_fees: Decimal
    platform_fees: Decimal


class InviteResponse(BaseModel):
    """Invite as seen by one of its participants."""

    invite_id: str
    from_user_id: str
    to_user_id: str
    from_username: Optional[str]
    to_username: Optional[str]
    role: Optional[InviteRole]
    title: str
    description: str
    meeting_location: str
    start_date: Optional[date]
    start_time: Optional[str]
    end_date: Optional[date]
    end_time: Optional[str]
    price: Decimal
    incentive_amount: Optional[Decimal]
    cancellation_fee: Optional[Decimal]
    pal_compensation: Optional[Decimal]
    platform_fee: Optional[Decimal]
    net_amount_to_pal: Optional[Decimal]
    total_paid_amount: Optional[Decimal]
    pending_fees_included: Optional[Decimal]
    outstanding_fees_breakdown: Optional[OutstandingFeesResponse]
    status: InviteStatus
    created_at: datetime
    responded_at: Optional[datetime]
    accepted_at: Optional[datetime]
    declined_at: Optional[datetime]
    started_at: Optional[datetime]
    finished_at: Optional[datetime]
    payment_done_at: Optional[datetime]
    payment_received_at: Optional[datetime]
    completed_at: Optional[datetime]
    cancelled_at: Optional[datetime]
    payment_confirmed: bool
    cancellation_fee_paid: bool
    platform_fee_paid: bool
    available_actions: list[InviteAction]

    @classmethod
    def from_invite(cls, invite: Invite, viewer_id: UserId) -> "InviteResponse":
        """Build the response for a viewer, with the actions open to them."""
        data = invite.model_dump(exclude={"id", "outstanding_fees_breakdown"})
        breakdown = invite.outstanding_fees_breakdown
        return cls(
            invite_id=str(invite.id),
            **{
                **data,
                "from_user_id": str(invite.from_user_id),
                "to_user_id": str(invite.to_user_id),
            },
            role=invite.role_of(viewer_id),
            outstanding_fees_breakdown=(
                OutstandingFeesResponse(**breakdown.model_dump()) if breakdown else None
            ),
            available_actions=available_actions(invite, viewer_id),
        )


class PendingPaymentResponse(BaseModel):
    """Pending payment line item."""

    id: str
    type: PaymentType
    amount: Decimal
    description: str
    date: datetime
    status: Optional[InviteStatus]
    invite_id: str

    @classmethod
    def from_item(cls, item: PendingPayment) -> "PendingPaymentResponse":
        return cls(**{**item.model_dump(), "invite_id": str(item.invite_id)})


class ReconciliationResponse(BaseModel):
    """What a user owes and is owed."""

    incentive_payments_owed: Decimal
    cancellation_fees_owed: Decimal
    platform_fees_owed: Decimal
    total_owed: Decimal
    owed_to_user: Decimal
    net_balance: Decimal
    pending_payments: list[PendingPaymentResponse]
    degraded: bool

    @classmethod
    def from_reconciliation(cls, result: Reconciliation) -> "ReconciliationResponse":
        return cls(
            **result.model_dump(exclude={"pending_payments"}),
            pending_payments=[
                PendingPaymentResponse.from_item(p) for p in result.pending_payments
            ],
        )
