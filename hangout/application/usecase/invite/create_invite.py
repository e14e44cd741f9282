"""Create invite use case."""

from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from hangout.application.usecase.base import BaseUseCase
from hangout.application.usecase.response import InviteResponse
from hangout.domain.model import build_invite_details
from hangout.domain.service import InviteService, UserService
from hangout.domain.value import UserId, Username


class CreateInviteRequest(BaseModel):
    """Create invite request.

    Fields are optional here so that missing ones surface as one domain
    validation error listing all of them.
    """

    sender_id: str  # From authenticated user
    recipient_id: Optional[str] = None
    recipient_username: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    meeting_location: Optional[str] = None
    start_date: Optional[date] = None
    start_time: Optional[str] = None
    end_date: Optional[date] = None
    end_time: Optional[str] = None
    price: Optional[Decimal] = None


class CreateInviteUseCase(BaseUseCase):
    """Use case for sending an invite to a pal."""

    def __init__(
        self, invite_service: InviteService, user_service: UserService
    ) -> None:
        """Initialize create invite use case.

        Args:
            invite_service: Invite domain service
            user_service: User domain service
        """
        self.invite_service = invite_service
        self.user_service = user_service

    async def execute(self, request: CreateInviteRequest) -> InviteResponse:
        """Execute create invite flow.

        Steps:
        1. Validate the form fields
        2. Resolve the recipient by ID or username
        3. Create the pending invite

        Raises:
            ValidationError: If a field is missing or invalid
            NotFoundError: If the recipient does not exist
        """
        details = build_invite_details(
            title=request.title,
            description=request.description,
            meeting_location=request.meeting_location,
            start_date=request.start_date,
            start_time=request.start_time,
            end_date=request.end_date,
            end_time=request.end_time,
            price=request.price,
        )

        sender_id = UserId(UUID(request.sender_id))
        recipient_id = (
            UserId(UUID(request.recipient_id)) if request.recipient_id else None
        )
        recipient = await self.user_service.resolve_recipient(
            user_id=recipient_id,
            username=(
                Username(request.recipient_username)
                if request.recipient_username
                else None
            ),
        )

        invite = await self.invite_service.create_invite(
            sender_id, recipient.id, details
        )
        return InviteResponse.from_invite(invite, sender_id)
