"""Invite lifecycle transition use case."""

from uuid import UUID

from pydantic import BaseModel

from hangout.application.usecase.base import BaseUseCase
from hangout.application.usecase.response import InviteResponse
from hangout.domain.service import InviteService
from hangout.domain.value import InviteAction, InviteId, UserId


class TransitionInviteRequest(BaseModel):
    """Request to move an invite through its lifecycle."""

    invite_id: str
    user_id: str  # From authenticated user
    action: InviteAction
    confirmed: bool = False  # Explicit confirmation, required to finish


class TransitionInviteUseCase(BaseUseCase):
    """Use case for every invite lifecycle action."""

    def __init__(self, invite_service: InviteService) -> None:
        """Initialize transition use case.

        Args:
            invite_service: Invite domain service
        """
        self.invite_service = invite_service

    async def execute(self, request: TransitionInviteRequest) -> InviteResponse:
        """Apply the requested action.

        Raises:
            NotFoundError: If the invite does not exist
            NotAuthorizedError: If the user's role may not take the action
            InvalidTransitionError: If the action is illegal from the current status
            ValidationError: If finishing without confirmation
        """
        invite_id = InviteId(UUID(request.invite_id))
        user_id = UserId(UUID(request.user_id))
        service = self.invite_service

        if request.action == InviteAction.FINISH:
            invite = await service.finish(
                invite_id, user_id, confirmed=request.confirmed
            )
        else:
            handlers = {
                InviteAction.ACCEPT: service.accept,
                InviteAction.DECLINE: service.decline,
                InviteAction.CANCEL: service.cancel,
                InviteAction.START: service.start,
                InviteAction.MARK_PAYMENT_DONE: service.mark_payment_done,
                InviteAction.CONFIRM_PAYMENT: service.confirm_payment,
            }
            invite = await handlers[request.action](invite_id, user_id)

        return InviteResponse.from_invite(invite, user_id)
