"""Update invite use case."""

from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from hangout.application.usecase.base import BaseUseCase
from hangout.application.usecase.response import InviteResponse
from hangout.domain.model import build_invite_details
from hangout.domain.service import InviteService
from hangout.domain.value import InviteId, UserId


class UpdateInviteRequest(BaseModel):
    """Update invite request.

    Fields left out keep their current value.
    """

    invite_id: str
    user_id: str  # From authenticated user
    title: Optional[str] = None
    description: Optional[str] = None
    meeting_location: Optional[str] = None
    start_date: Optional[date] = None
    start_time: Optional[str] = None
    end_date: Optional[date] = None
    end_time: Optional[str] = None
    price: Optional[Decimal] = None


class UpdateInviteUseCase(BaseUseCase):
    """Use case for editing a pending invite."""

    def __init__(self, invite_service: InviteService) -> None:
        """Initialize update invite use case.

        Args:
            invite_service: Invite domain service
        """
        self.invite_service = invite_service

    async def execute(self, request: UpdateInviteRequest) -> InviteResponse:
        """Execute update invite flow.

        The merged fields go through the same validation as a new invite.

        Raises:
            NotFoundError: If the invite does not exist
            NotAuthorizedError: If the user is not the sender
            InvalidTransitionError: If the invite is no longer pending
            ValidationError: If the merged fields are invalid
        """
        invite_id = InviteId(UUID(request.invite_id))
        user_id = UserId(UUID(request.user_id))
        current = await self.invite_service.get_invite(invite_id)

        changes = request.model_dump(
            exclude={"invite_id", "user_id"}, exclude_none=True
        )
        merged = {
            "title": current.title,
            "description": current.description,
            "meeting_location": current.meeting_location,
            "start_date": current.start_date,
            "start_time": current.start_time,
            "end_date": current.end_date,
            "end_time": current.end_time,
            "price": current.price,
            **changes,
        }
        details = build_invite_details(**merged)

        invite = await self.invite_service.update_invite(invite_id, user_id, details)
        return InviteResponse.from_invite(invite, user_id)
