"""List invites use case."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from hangout.application.usecase.base import BaseUseCase
from hangout.application.usecase.response import InviteResponse
from hangout.domain.service import InviteService
from hangout.domain.value import InviteRole, UserId


class ListInvitesRequest(BaseModel):
    """List invites request."""

    user_id: str  # From authenticated user
    role: Optional[InviteRole] = None
    status: Optional[str] = None  # Status value, or "finished" for all paid stages


class ListInvitesResponse(BaseModel):
    """List invites response."""

    invites: list[InviteResponse]


class ListInvitesUseCase(BaseUseCase):
    """Use case for listing sent and received invites."""

    def __init__(self, invite_service: InviteService) -> None:
        """Initialize list invites use case.

        Args:
            invite_service: Invite domain service
        """
        self.invite_service = invite_service

    async def execute(self, request: ListInvitesRequest) -> ListInvitesResponse:
        """List the user's invites, newest first."""
        user_id = UserId(UUID(request.user_id))
        invites = await self.invite_service.list_invites(
            user_id, role=request.role, status=request.status
        )
        return ListInvitesResponse(
            invites=[InviteResponse.from_invite(i, user_id) for i in invites]
        )
