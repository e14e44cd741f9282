"""Get invite use case."""

from uuid import UUID

from pydantic import BaseModel

from hangout.application.usecase.base import BaseUseCase
from hangout.application.usecase.response import InviteResponse
from hangout.domain.service import InviteService
from hangout.domain.value import InviteId, UserId


class GetInviteRequest(BaseModel):
    """Get invite request."""

    invite_id: str
    user_id: str  # From authenticated user


class GetInviteUseCase(BaseUseCase):
    """Use case for viewing one invite."""

    def __init__(self, invite_service: InviteService) -> None:
        """Initialize get invite use case.

        Args:
            invite_service: Invite domain service
        """
        self.invite_service = invite_service

    async def execute(self, request: GetInviteRequest) -> InviteResponse:
        """Load an invite the user takes part in."""
        user_id = UserId(UUID(request.user_id))
        invite = await self.invite_service.get_invite_for_participant(
            InviteId(UUID(request.invite_id)), user_id
        )
        return InviteResponse.from_invite(invite, user_id)
