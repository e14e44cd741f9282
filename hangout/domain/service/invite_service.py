"""Invite domain service.

Runs the invite lifecycle. Every transition is looked up in the transition
table before anything is written, so an illegal call leaves the invite and
both parties' balances untouched.
"""

from datetime import datetime
from typing import Optional
from uuid import uuid4

import logfire

from hangout.domain.error import (
    BusinessRuleViolationError,
    InvalidTransitionError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from hangout.domain.model import Invite, InviteDetails
from hangout.domain.model.lifecycle import Transition, resolve_transition
from hangout.domain.repository import InviteRepository, UserRepository
from hangout.domain.value import (
    FeeSchedule,
    InviteAction,
    InviteId,
    InviteRole,
    InviteStatus,
    LedgerEntryType,
    PaymentType,
    ProfileType,
    UserId,
)
from hangout.domain.value.money import ZERO

from .balance_service import BalanceService
from .base import Service
from .reconciliation import (
    PendingPayment,
    ReconciliationService,
    quote_payment,
    select_settled_items,
)

# Status filter that groups every post-activity status together
FINISHED_GROUP = "finished"


class InviteService(Service):
    """Domain service for invite operations."""

    def __init__(
        self,
        invite_repository: InviteRepository,
        user_repository: UserRepository,
        balance_service: BalanceService,
        reconciliation_service: ReconciliationService,
        fees: FeeSchedule,
    ) -> None:
        """Initialize invite service.

        Args:
            invite_repository: Invite repository
            user_repository: User repository
            balance_service: Balance ledger service
            reconciliation_service: Reconciliation service
            fees: Fee schedule
        """
        self.invite_repository = invite_repository
        self.user_repository = user_repository
        self.balance_service = balance_service
        self.reconciliation_service = reconciliation_service
        self.fees = fees

    async def get_invite(self, invite_id: InviteId) -> Invite:
        """Get an invite by ID.

        Raises:
            NotFoundError: If the invite does not exist
        """
        invite = await self.invite_repository.find_by_id(invite_id)
        if not invite:
            logfire.warn("Invite not found", invite_id=str(invite_id))
            raise NotFoundError("Invite", str(invite_id))
        return invite

    async def fee_schedule_for(self, invite: Invite) -> FeeSchedule:
        """Fee schedule for an invite's money figures.

        Private profiles owe no platform fee, matching what reconciliation
        reports for them.
        """
        recipient = await self.user_repository.find_by_id(invite.to_user_id)
        if recipient is not None and recipient.profile_type == ProfileType.PRIVATE:
            return self.fees.model_copy(update={"platform_fee_rate": ZERO})
        return self.fees

    async def get_invite_for_participant(
        self, invite_id: InviteId, user_id: UserId
    ) -> Invite:
        """Get an invite the user takes part in.

        Raises:
            NotFoundError: If the invite does not exist
            NotAuthorizedError: If the user is neither sender nor recipient
        """
        invite = await self.get_invite(invite_id)
        if invite.role_of(user_id) is None:
            raise NotAuthorizedError("invite", str(invite_id), str(user_id), "view")
        return invite

    async def list_invites(
        self,
        user_id: UserId,
        role: Optional[InviteRole] = None,
        status: Optional[str] = None,
    ) -> list[Invite]:
        """List a user's invites, newest first.

        Args:
            user_id: User whose invites to list
            role: Only sent or only received invites; both when None
            status: A status value, or "finished" for finished, paid and
                completed invites together

        Returns:
            Matching invites

        Raises:
            ValidationError: If the status filter is unknown
        """
        with logfire.span(
            "invite_service.list_invites",
            user_id=str(user_id),
            role=role.value if role else None,
            status=status,
        ):
            if status is None:
                statuses = None
            elif status == FINISHED_GROUP:
                statuses = {
                    InviteStatus.FINISHED,
                    InviteStatus.PAYMENT_DONE,
                    InviteStatus.COMPLETED,
                }
            else:
                try:
                    statuses = {InviteStatus(status)}
                except ValueError:
                    raise ValidationError(f"Unknown status filter: {status}")

            invites: list[Invite] = []
            if role in (None, InviteRole.SENDER):
                invites.extend(await self.invite_repository.find_by_sender(user_id))
            if role in (None, InviteRole.RECIPIENT):
                invites.extend(await self.invite_repository.find_by_recipient(user_id))

            if statuses is not None:
                invites = [i for i in invites if i.status in statuses]
            invites.sort(key=lambda i: i.created_at, reverse=True)
            return invites

    async def create_invite(
        self, sender_id: UserId, recipient_id: UserId, details: InviteDetails
    ) -> Invite:
        """Send a new invite.

        Args:
            sender_id: User sending the invite
            recipient_id: Pal being invited
            details: Validated invite details

        Returns:
            The pending invite

        Raises:
            ValidationError: If the sender invites themselves
            NotFoundError: If either user does not exist
        """
        with logfire.span(
            "invite_service.create_invite",
            sender_id=str(sender_id),
            recipient_id=str(recipient_id),
        ):
            if sender_id == recipient_id:
                raise ValidationError("You cannot invite yourself")

            sender = await self.user_repository.find_by_id(sender_id)
            if not sender:
                raise NotFoundError("User", str(sender_id))
            recipient = await self.user_repository.find_by_id(recipient_id)
            if not recipient:
                logfire.warn("Invite to unknown user", recipient_id=str(recipient_id))
                raise NotFoundError("User", str(recipient_id))

            invite = Invite(
                id=InviteId(uuid4()),
                from_user_id=sender_id,
                to_user_id=recipient_id,
                from_username=sender.display_name,
                to_username=recipient.display_name,
                **details.model_dump(),
                incentive_amount=details.price,
                status=InviteStatus.PENDING,
                created_at=datetime.now(),
            )
            saved = await self.invite_repository.save(invite)
            logfire.info(
                "Invite created",
                invite_id=str(saved.id),
                sender_id=str(sender_id),
                recipient_id=str(recipient_id),
                price=str(saved.price),
            )
            return saved

    async def update_invite(
        self, invite_id: InviteId, actor_id: UserId, details: InviteDetails
    ) -> Invite:
        """Edit a pending invite.

        Raises:
            NotFoundError: If the invite does not exist
            NotAuthorizedError: If the actor is not the sender
            InvalidTransitionError: If the invite is no longer pending
        """
        with logfire.span(
            "invite_service.update_invite",
            invite_id=str(invite_id),
            actor_id=str(actor_id),
        ):
            invite = await self.get_invite(invite_id)
            if invite.role_of(actor_id) != InviteRole.SENDER:
                raise NotAuthorizedError(
                    "invite", str(invite_id), str(actor_id), "edit"
                )
            if invite.status != InviteStatus.PENDING:
                raise InvalidTransitionError(
                    str(invite_id), invite.status.value, "edit"
                )

            updated = invite.model_copy(
                update={**details.model_dump(), "incentive_amount": details.price}
            )
            saved = await self.invite_repository.save(updated)
            logfire.info("Invite updated", invite_id=str(invite_id))
            return saved

    async def accept(self, invite_id: InviteId, actor_id: UserId) -> Invite:
        """Recipient accepts a pending invite."""
        with logfire.span("invite_service.accept", invite_id=str(invite_id)):
            invite, transition = await self._resolve(
                invite_id, InviteAction.ACCEPT, actor_id
            )
            now = datetime.now()
            return await self._apply(
                invite, transition, accepted_at=now, responded_at=now
            )

    async def decline(self, invite_id: InviteId, actor_id: UserId) -> Invite:
        """Recipient declines a pending invite."""
        with logfire.span("invite_service.decline", invite_id=str(invite_id)):
            invite, transition = await self._resolve(
                invite_id, InviteAction.DECLINE, actor_id
            )
            now = datetime.now()
            return await self._apply(
                invite, transition, declined_at=now, responded_at=now
            )

    async def start(self, invite_id: InviteId, actor_id: UserId) -> Invite:
        """Either party starts an accepted invite."""
        with logfire.span("invite_service.start", invite_id=str(invite_id)):
            invite, transition = await self._resolve(
                invite_id, InviteAction.START, actor_id
            )
            return await self._apply(invite, transition, started_at=datetime.now())

    async def finish(
        self, invite_id: InviteId, actor_id: UserId, confirmed: bool = False
    ) -> Invite:
        """Either party finishes an activity in progress.

        Raises:
            ValidationError: If the actor did not explicitly confirm
        """
        with logfire.span("invite_service.finish", invite_id=str(invite_id)):
            invite, transition = await self._resolve(
                invite_id, InviteAction.FINISH, actor_id
            )
            if not confirmed:
                raise ValidationError("Finishing an activity must be confirmed")
            return await self._apply(invite, transition, finished_at=datetime.now())

    async def cancel(self, invite_id: InviteId, actor_id: UserId) -> Invite:
        """Sender cancels a pending or accepted invite.

        Cancelling an accepted invite charges the sender a cancellation fee
        and credits the pal a compensation, less the platform's cut. A
        pending invite is cancelled for free.
        """
        with logfire.span("invite_service.cancel", invite_id=str(invite_id)):
            invite, transition = await self._resolve(
                invite_id, InviteAction.CANCEL, actor_id
            )
            now = datetime.now()

            if invite.status != InviteStatus.ACCEPTED:
                return await self._apply(invite, transition, cancelled_at=now)

            fees = await self.fee_schedule_for(invite)
            fee = fees.cancellation_fee(invite.price)
            compensation = fees.pal_compensation(invite.price)
            platform_fee = fees.platform_fee(compensation)
            saved = await self._apply(
                invite,
                transition,
                cancelled_at=now,
                cancellation_fee=fee,
                pal_compensation=compensation,
                platform_fee=platform_fee,
            )

            await self.balance_service.record(
                invite.from_user_id, invite.id, LedgerEntryType.CANCELLATION_FEE, fee
            )
            await self.balance_service.record(
                invite.to_user_id,
                invite.id,
                LedgerEntryType.PAL_COMPENSATION,
                compensation - platform_fee,
            )
            await self.balance_service.record(
                invite.to_user_id,
                invite.id,
                LedgerEntryType.COMPENSATION_PLATFORM_FEE,
                platform_fee,
            )
            logfire.info(
                "Accepted invite cancelled with fee",
                invite_id=str(invite.id),
                cancellation_fee=str(fee),
                pal_compensation=str(compensation),
            )
            return saved

    async def mark_payment_done(self, invite_id: InviteId, actor_id: UserId) -> Invite:
        """Sender reports paying a finished invite.

        The sender's outstanding fees are folded into the payment and
        settled: the ledger records the settlement and the oldest unpaid
        fee items the settled amount fully covers are marked paid.
        """
        with logfire.span("invite_service.mark_payment_done", invite_id=str(invite_id)):
            invite, transition = await self._resolve(
                invite_id, InviteAction.MARK_PAYMENT_DONE, actor_id
            )
            now = datetime.now()
            sender_id = invite.from_user_id

            outstanding = await self.reconciliation_service.reconcile_user(
                sender_id, now=now
            )
            pending = await self.balance_service.pending_balance(sender_id)
            fees = await self.fee_schedule_for(invite)
            quote = quote_payment(invite, pending, fees)

            if outstanding.degraded and quote.pending_fees_included > ZERO:
                # Settling needs the fee items it pays off
                logfire.warn(
                    "Payment refused while fee items are unavailable",
                    invite_id=str(invite.id),
                    pending=str(quote.pending_fees_included),
                )
                raise BusinessRuleViolationError(
                    "Outstanding fees could not be loaded; try again shortly"
                )

            saved = await self._apply(
                invite,
                transition,
                payment_done_at=now,
                platform_fee=quote.platform_fee,
                net_amount_to_pal=quote.net_amount_to_pal,
                pending_fees_included=quote.pending_fees_included,
                total_paid_amount=quote.total_paid_amount,
                outstanding_fees_breakdown=outstanding.fees_breakdown(exclude=invite),
            )

            settled = quote.pending_fees_included
            if settled > ZERO:
                await self.balance_service.record(
                    sender_id, invite.id, LedgerEntryType.FEE_SETTLEMENT, settled
                )
                for item in select_settled_items(outstanding.pending_payments, settled):
                    await self._mark_fee_paid(item, invite.id, now)

            logfire.info(
                "Payment marked done",
                invite_id=str(invite.id),
                total_paid_amount=str(quote.total_paid_amount),
                pending_fees_included=str(settled),
            )
            return saved

    async def confirm_payment(self, invite_id: InviteId, actor_id: UserId) -> Invite:
        """Recipient confirms receiving payment.

        Credits the pal's earnings with the net amount and charges them the
        platform fee. Private profiles are credited the full incentive and
        charged nothing.
        """
        with logfire.span("invite_service.confirm_payment", invite_id=str(invite_id)):
            invite, transition = await self._resolve(
                invite_id, InviteAction.CONFIRM_PAYMENT, actor_id
            )
            now = datetime.now()

            fees = await self.fee_schedule_for(invite)
            recorded = (
                invite.net_amount_to_pal is not None
                and invite.platform_fee is not None
            )
            if recorded and fees.platform_fee_rate > ZERO:
                platform_fee = invite.platform_fee
                net = invite.net_amount_to_pal
            else:
                # Not marked paid yet, or the pal owes no platform fee
                quote = quote_payment(invite, ZERO, fees)
                platform_fee = quote.platform_fee
                net = quote.net_amount_to_pal

            saved = await self._apply(
                invite,
                transition,
                payment_confirmed=True,
                payment_received_at=now,
                completed_at=now,
                platform_fee=platform_fee,
                net_amount_to_pal=net,
            )

            await self.balance_service.record(
                invite.to_user_id, invite.id, LedgerEntryType.INCENTIVE_EARNING, net
            )
            await self.balance_service.record(
                invite.to_user_id, invite.id, LedgerEntryType.PLATFORM_FEE, platform_fee
            )
            logfire.info(
                "Payment confirmed",
                invite_id=str(invite.id),
                net_amount_to_pal=str(net),
                platform_fee=str(platform_fee),
            )
            return saved

    async def _resolve(
        self, invite_id: InviteId, action: InviteAction, actor_id: UserId
    ) -> tuple[Invite, Transition]:
        invite = await self.get_invite(invite_id)
        try:
            transition = resolve_transition(invite, action, actor_id)
        except (InvalidTransitionError, NotAuthorizedError) as e:
            logfire.warn(
                "Rejected invite transition",
                invite_id=str(invite_id),
                action=action.value,
                status=invite.status.value,
                actor_id=str(actor_id),
                error=str(e),
            )
            raise
        return invite, transition

    async def _apply(self, invite: Invite, transition: Transition, **updates) -> Invite:
        updated = invite.model_copy(update={"status": transition.target, **updates})
        saved = await self.invite_repository.save(updated)
        logfire.info(
            "Invite transitioned",
            invite_id=str(invite.id),
            action=transition.action.value,
            source=transition.source.value,
            target=transition.target.value,
        )
        return saved

    async def _mark_fee_paid(
        self, item: PendingPayment, paid_in: InviteId, now: datetime
    ) -> None:
        invite = await self.invite_repository.find_by_id(item.invite_id)
        if not invite:
            logfire.warn(
                "Settled fee for missing invite", invite_id=str(item.invite_id)
            )
            return

        if item.type == PaymentType.CANCELLATION_FEE:
            update = {
                "cancellation_fee_paid": True,
                "cancellation_fee_paid_at": now,
                "cancellation_fee_paid_in_invite": paid_in,
            }
        else:
            update = {
                "platform_fee_paid": True,
                "platform_fee_paid_at": now,
                "platform_fee_paid_by_pal": True,
            }
        await self.invite_repository.save(invite.model_copy(update=update))
        logfire.info(
            "Fee marked paid",
            invite_id=str(invite.id),
            fee_type=item.type.value,
            amount=str(item.amount),
            paid_in=str(paid_in),
        )
