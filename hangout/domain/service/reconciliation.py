"""Ledger reconciliation engine.

Derives what a user owes and is owed from their full invite history. The
derivation is pure and re-run on demand; nothing here is maintained
incrementally. The profile balance summary, the pre-invite cost warning and
the pre-payment breakdown all go through ``ReconciliationService``.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime
from decimal import Decimal
from typing import Optional

import logfire
from pydantic import Field

from hangout.domain.error import NotFoundError
from hangout.domain.model import Invite, OutstandingFeesBreakdown
from hangout.domain.repository import InviteRepository, UserRepository
from hangout.domain.value import (
    DEFAULT_FEES,
    FeeSchedule,
    InviteId,
    InviteStatus,
    PaymentType,
    ProfileType,
    UserId,
)
from hangout.domain.value.common import ValueObject
from hangout.domain.value.money import ZERO, to_money

from .base import Service

INCENTIVE_ISSUED = (
    InviteStatus.FINISHED,
    InviteStatus.PAYMENT_DONE,
    InviteStatus.COMPLETED,
)
INCENTIVE_UNPAID = (InviteStatus.FINISHED, InviteStatus.PAYMENT_DONE)


class PendingPayment(ValueObject):
    """One outstanding amount, for display and for fee settlement."""

    id: str
    type: PaymentType
    amount: Decimal
    description: str
    date: datetime
    status: Optional[InviteStatus] = None
    invite_id: InviteId

    @property
    def is_fee(self) -> bool:
        return self.type != PaymentType.INCENTIVE_PAYMENT


class Reconciliation(ValueObject):
    """Result of reconciling a user's invite history."""

    incentive_payments_owed: Decimal = ZERO
    cancellation_fees_owed: Decimal = ZERO
    platform_fees_owed: Decimal = ZERO
    total_owed: Decimal = ZERO
    owed_to_user: Decimal = ZERO
    net_balance: Decimal = ZERO
    pending_payments: list[PendingPayment] = Field(default_factory=list)
    degraded: bool = False

    def oldest_first(self) -> list[PendingPayment]:
        """Pending payments in settlement order."""
        return sorted(self.pending_payments, key=lambda p: (p.date, p.id))

    def fees_breakdown(
        self, exclude: Optional[Invite] = None
    ) -> OutstandingFeesBreakdown:
        """Split of the outstanding amounts, minus one invite's own incentive."""
        incentives = self.incentive_payments_owed
        if exclude is not None and exclude.status in INCENTIVE_UNPAID:
            incentives = max(ZERO, incentives - to_money(exclude.price))
        return OutstandingFeesBreakdown(
            incentive_payments=incentives,
            cancellation_fees=self.cancellation_fees_owed,
            platform_fees=self.platform_fees_owed,
        )


class PaymentQuote(ValueObject):
    """Money figures of a payment for one finished invite."""

    incentive: Decimal
    platform_fee: Decimal
    net_amount_to_pal: Decimal
    pending_fees_included: Decimal
    total_paid_amount: Decimal


class InviteCostPreview(ValueObject):
    """Cost warning shown before a new invite is sent."""

    price: Decimal
    outstanding: Reconciliation
    total_with_outstanding: Decimal


def _earns_platform_fee(invite: Invite) -> bool:
    completed = invite.status == InviteStatus.COMPLETED and invite.payment_confirmed
    return (completed or invite.has_pal_compensation) and not invite.platform_fee_paid


def _describe(invite: Invite, kind: PaymentType) -> str:
    to_name = invite.to_username or str(invite.to_user_id)
    from_name = invite.from_username or str(invite.from_user_id)
    if kind == PaymentType.INCENTIVE_PAYMENT:
        return f'Incentive payment for "{invite.title}" to {to_name}'
    if kind == PaymentType.CANCELLATION_FEE:
        return f'Unpaid cancellation fee for "{invite.title}" to {to_name}'
    return f'Platform fee for "{invite.title}" from {from_name}'


def reconcile(
    sent: Iterable[Invite],
    received: Iterable[Invite],
    profile_type: ProfileType,
    fees: FeeSchedule = DEFAULT_FEES,
    now: Optional[datetime] = None,
) -> Reconciliation:
    """Compute what a user owes and is owed.

    Args:
        sent: Invites the user sent
        received: Invites the user received
        profile_type: The user's profile type; only public profiles owe
            platform fees
        fees: Fee schedule for the platform fee fallback
        now: Date given to items with no timestamp

    Returns:
        The reconciliation, pending payments most recent first
    """
    now = now or datetime.now()
    sent = list(sent)
    received = list(received)
    items: list[PendingPayment] = []

    issued = sum(
        (to_money(i.price) for i in sent if i.status in INCENTIVE_ISSUED), ZERO
    )
    confirmed = sum(
        (
            to_money(i.price)
            for i in sent
            if i.status == InviteStatus.COMPLETED and i.payment_confirmed
        ),
        ZERO,
    )
    incentive_owed = issued - confirmed

    for invite in sent:
        if invite.status in INCENTIVE_UNPAID:
            items.append(
                PendingPayment(
                    id=str(invite.id),
                    type=PaymentType.INCENTIVE_PAYMENT,
                    amount=to_money(invite.price),
                    description=_describe(invite, PaymentType.INCENTIVE_PAYMENT),
                    date=invite.finished_at or invite.payment_done_at or now,
                    status=invite.status,
                    invite_id=invite.id,
                )
            )

    cancellation_owed = ZERO
    for invite in sent:
        if not invite.has_cancellation_fee or invite.cancellation_fee_paid:
            continue
        fee = to_money(invite.cancellation_fee)
        cancellation_owed += fee
        items.append(
            PendingPayment(
                id=f"cancel_fee_{invite.id}",
                type=PaymentType.CANCELLATION_FEE,
                amount=fee,
                description=_describe(invite, PaymentType.CANCELLATION_FEE),
                date=invite.cancelled_at or now,
                invite_id=invite.id,
            )
        )

    platform_owed = ZERO
    if profile_type == ProfileType.PUBLIC:
        for invite in received:
            if not _earns_platform_fee(invite):
                continue
            fee = to_money(invite.effective_platform_fee(fees))
            if fee <= ZERO:
                continue
            platform_owed += fee
            if invite.status == InviteStatus.COMPLETED:
                date = invite.completed_at or now
            else:
                date = invite.cancelled_at or now
            items.append(
                PendingPayment(
                    id=f"platform_fee_{invite.id}",
                    type=PaymentType.PLATFORM_FEE,
                    amount=fee,
                    description=_describe(invite, PaymentType.PLATFORM_FEE),
                    date=date,
                    invite_id=invite.id,
                )
            )

    owed_to_user = sum(
        (to_money(i.price) for i in received if i.status in INCENTIVE_UNPAID), ZERO
    ) + sum(
        (
            to_money(i.pal_compensation)
            for i in received
            if i.has_pal_compensation and not i.cancellation_fee_paid
        ),
        ZERO,
    )

    total_owed = incentive_owed + cancellation_owed + platform_owed

    # Most recent first; id breaks ties so equal dates order deterministically
    items.sort(key=lambda p: p.id)
    items.sort(key=lambda p: p.date, reverse=True)

    return Reconciliation(
        incentive_payments_owed=to_money(incentive_owed),
        cancellation_fees_owed=to_money(cancellation_owed),
        platform_fees_owed=to_money(platform_owed),
        total_owed=to_money(total_owed),
        owed_to_user=to_money(owed_to_user),
        net_balance=to_money(owed_to_user - total_owed),
        pending_payments=items,
    )


def select_settled_items(
    items: Sequence[PendingPayment], amount: Decimal
) -> list[PendingPayment]:
    """Pick the fee items a settlement pays off.

    Walks fee items oldest first and takes each one the remaining amount
    covers in full. Stops at the first item it cannot cover; partial
    settlement of an item is not supported.

    Args:
        items: Pending payments, in any order
        amount: Amount being settled

    Returns:
        Items to mark paid, oldest first
    """
    remaining = to_money(amount)
    settled: list[PendingPayment] = []
    for item in sorted((i for i in items if i.is_fee), key=lambda p: (p.date, p.id)):
        if item.amount > remaining:
            break
        settled.append(item)
        remaining -= item.amount
    return settled


def quote_payment(
    invite: Invite, pending_fees: Decimal, fees: FeeSchedule = DEFAULT_FEES
) -> PaymentQuote:
    """Money figures for paying a finished invite.

    The sender's outstanding fees are folded into the payment.

    Args:
        invite: Invite being paid
        pending_fees: Sender's pending balance
        fees: Fee schedule

    Returns:
        The payment quote
    """
    incentive = to_money(invite.incentive)
    platform_fee = fees.platform_fee(incentive)
    pending = max(ZERO, to_money(pending_fees))
    return PaymentQuote(
        incentive=incentive,
        platform_fee=platform_fee,
        net_amount_to_pal=incentive - platform_fee,
        pending_fees_included=pending,
        total_paid_amount=incentive + pending,
    )


class ReconciliationService(Service):
    """Domain service that reconciles a user's invite history."""

    def __init__(
        self,
        invite_repository: InviteRepository,
        user_repository: UserRepository,
        fees: FeeSchedule,
    ) -> None:
        """Initialize reconciliation service.

        Args:
            invite_repository: Invite repository
            user_repository: User repository
            fees: Fee schedule
        """
        self.invite_repository = invite_repository
        self.user_repository = user_repository
        self.fees = fees

    async def reconcile_user(
        self, user_id: UserId, now: Optional[datetime] = None
    ) -> Reconciliation:
        """Reconcile a user's sent and received invites.

        Never raises on a failed load or a malformed record. Instead the
        result falls back to the user's cached pending balance with an
        empty breakdown and ``degraded`` set.

        Args:
            user_id: User to reconcile
            now: Date given to items with no timestamp

        Returns:
            The reconciliation

        Raises:
            NotFoundError: If the user does not exist
        """
        with logfire.span(
            "reconciliation_service.reconcile_user", user_id=str(user_id)
        ):
            user = await self.user_repository.find_by_id(user_id)
            if not user:
                logfire.warn("Reconciliation for unknown user", user_id=str(user_id))
                raise NotFoundError("User", str(user_id))

            try:
                sent = await self.invite_repository.find_by_sender(user_id)
                received = await self.invite_repository.find_by_recipient(user_id)
                result = reconcile(
                    sent, received, user.profile_type, fees=self.fees, now=now
                )
            except Exception as e:
                logfire.error(
                    "Reconciliation failed, using cached balance",
                    user_id=str(user_id),
                    error=str(e),
                )
                return Reconciliation(total_owed=user.pending_balance, degraded=True)

            logfire.info(
                "User reconciled",
                user_id=str(user_id),
                total_owed=str(result.total_owed),
                items=len(result.pending_payments),
            )
            return result

    async def preview_invite_cost(
        self, user_id: UserId, price: Decimal
    ) -> InviteCostPreview:
        """Cost warning for a new invite, with the sender's outstanding amounts."""
        with logfire.span(
            "reconciliation_service.preview_invite_cost", user_id=str(user_id)
        ):
            outstanding = await self.reconcile_user(user_id)
            amount = to_money(price)
            return InviteCostPreview(
                price=amount,
                outstanding=outstanding,
                total_with_outstanding=amount + outstanding.total_owed,
            )
