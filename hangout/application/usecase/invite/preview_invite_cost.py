"""Pre-invite cost warning use case."""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from hangout.application.usecase.base import BaseUseCase
from hangout.application.usecase.response import ReconciliationResponse
from hangout.domain.service import ReconciliationService
from hangout.domain.value import UserId


class PreviewInviteCostRequest(BaseModel):
    """Preview request for an invite about to be sent."""

    user_id: str  # From authenticated user
    price: Decimal = Field(gt=0)


class PreviewInviteCostResponse(BaseModel):
    """What sending the invite would add to what the user already owes."""

    price: Decimal
    total_with_outstanding: Decimal
    has_outstanding: bool
    outstanding: ReconciliationResponse


class PreviewInviteCostUseCase(BaseUseCase):
    """Use case for the cost warning shown before an invite is sent."""

    def __init__(self, reconciliation_service: ReconciliationService) -> None:
        """Initialize preview use case.

        Args:
            reconciliation_service: Reconciliation domain service
        """
        self.reconciliation_service = reconciliation_service

    async def execute(
        self, request: PreviewInviteCostRequest
    ) -> PreviewInviteCostResponse:
        """Reconcile the sender and add the new price on top."""
        preview = await self.reconciliation_service.preview_invite_cost(
            UserId(UUID(request.user_id)), request.price
        )
        return PreviewInviteCostResponse(
            price=preview.price,
            total_with_outstanding=preview.total_with_outstanding,
            has_outstanding=preview.outstanding.total_owed > 0,
            outstanding=ReconciliationResponse.from_reconciliation(
                preview.outstanding
            ),
        )
