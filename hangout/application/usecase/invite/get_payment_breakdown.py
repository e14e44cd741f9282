"""Pre-payment breakdown use case."""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel

from hangout.application.usecase.base import BaseUseCase
from hangout.application.usecase.response import ReconciliationResponse
from hangout.domain.error import InvalidTransitionError, NotAuthorizedError
from hangout.domain.model.lifecycle import TRANSITIONS
from hangout.domain.service import (
    BalanceService,
    InviteService,
    ReconciliationService,
)
from hangout.domain.service.reconciliation import quote_payment
from hangout.domain.value import InviteAction, InviteId, InviteRole, UserId


class GetPaymentBreakdownRequest(BaseModel):
    """Payment breakdown request."""

    invite_id: str
    user_id: str  # From authenticated user


class GetPaymentBreakdownResponse(BaseModel):
    """What marking this invite paid will settle."""

    invite_id: str
    incentive: Decimal
    platform_fee: Decimal
    net_amount_to_pal: Decimal
    pending_fees_included: Decimal
    total_paid_amount: Decimal
    outstanding: ReconciliationResponse


class GetPaymentBreakdownUseCase(BaseUseCase):
    """Use case for the breakdown shown before the sender marks payment done."""

    def __init__(
        self,
        invite_service: InviteService,
        balance_service: BalanceService,
        reconciliation_service: ReconciliationService,
    ) -> None:
        """Initialize payment breakdown use case.

        Args:
            invite_service: Invite domain service
            balance_service: Balance ledger service
            reconciliation_service: Reconciliation domain service
        """
        self.invite_service = invite_service
        self.balance_service = balance_service
        self.reconciliation_service = reconciliation_service

    async def execute(
        self, request: GetPaymentBreakdownRequest
    ) -> GetPaymentBreakdownResponse:
        """Quote the payment with the same figures mark-payment-done will record.

        Raises:
            NotFoundError: If the invite does not exist
            NotAuthorizedError: If the user is not the sender
            InvalidTransitionError: If the invite cannot be paid now
        """
        invite_id = InviteId(UUID(request.invite_id))
        user_id = UserId(UUID(request.user_id))
        invite = await self.invite_service.get_invite_for_participant(
            invite_id, user_id
        )
        if invite.role_of(user_id) != InviteRole.SENDER:
            raise NotAuthorizedError(
                "invite", str(invite_id), str(user_id), "view payment breakdown for"
            )
        if (invite.status, InviteAction.MARK_PAYMENT_DONE) not in TRANSITIONS:
            raise InvalidTransitionError(
                str(invite_id), invite.status.value, "pay"
            )

        outstanding = await self.reconciliation_service.reconcile_user(user_id)
        pending = await self.balance_service.pending_balance(user_id)
        fees = await self.invite_service.fee_schedule_for(invite)
        quote = quote_payment(invite, pending, fees)

        return GetPaymentBreakdownResponse(
            invite_id=str(invite.id),
            **quote.model_dump(),
            outstanding=ReconciliationResponse.from_reconciliation(outstanding),
        )
