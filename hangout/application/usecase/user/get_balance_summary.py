"""Profile balance summary use case."""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel

from hangout.application.usecase.base import BaseUseCase
from hangout.application.usecase.response import ReconciliationResponse
from hangout.domain.service import BalanceService, ReconciliationService
from hangout.domain.value import ProfileType, UserId


class GetBalanceSummaryRequest(BaseModel):
    """Balance summary request."""

    user_id: str  # From authenticated user


class GetBalanceSummaryResponse(BaseModel):
    """Balance figures shown on the user's profile."""

    user_id: str
    profile_type: ProfileType
    pending_balance: Decimal
    total_earnings: Decimal
    reconciliation: ReconciliationResponse


class GetBalanceSummaryUseCase(BaseUseCase):
    """Use case for the profile balance summary.

    Also re-synchronises the cached balances when they have drifted.
    """

    def __init__(
        self,
        balance_service: BalanceService,
        reconciliation_service: ReconciliationService,
    ) -> None:
        """Initialize balance summary use case.

        Args:
            balance_service: Balance ledger service
            reconciliation_service: Reconciliation domain service
        """
        self.balance_service = balance_service
        self.reconciliation_service = reconciliation_service

    async def execute(
        self, request: GetBalanceSummaryRequest
    ) -> GetBalanceSummaryResponse:
        """Execute balance summary flow.

        Steps:
        1. Refresh the cached balances from the ledger
        2. Reconcile the user's invite history

        Raises:
            NotFoundError: If the user does not exist
        """
        user_id = UserId(UUID(request.user_id))
        user = await self.balance_service.refresh_cached_balances(user_id)
        reconciliation = await self.reconciliation_service.reconcile_user(user_id)

        return GetBalanceSummaryResponse(
            user_id=str(user.id),
            profile_type=user.profile_type,
            pending_balance=user.pending_balance,
            total_earnings=user.total_earnings,
            reconciliation=ReconciliationResponse.from_reconciliation(reconciliation),
        )
