"""List chat messages use case."""

from uuid import UUID

from pydantic import BaseModel

from hangout.application.usecase.base import BaseUseCase
from hangout.application.usecase.message.send_message import MessageResponse
from hangout.domain.service import MessageService
from hangout.domain.value import InviteId, UserId


class ListMessagesRequest(BaseModel):
    """List messages request."""

    invite_id: str
    user_id: str  # From authenticated user


class ListMessagesResponse(BaseModel):
    """Chat thread, oldest first."""

    messages: list[MessageResponse]


class ListMessagesUseCase(BaseUseCase):
    """Use case for loading an invite's chat thread."""

    def __init__(self, message_service: MessageService) -> None:
        """Initialize list messages use case.

        Args:
            message_service: Message domain service
        """
        self.message_service = message_service

    async def execute(self, request: ListMessagesRequest) -> ListMessagesResponse:
        """Load the thread of an invite the user takes part in."""
        messages = await self.message_service.list_messages(
            InviteId(UUID(request.invite_id)), UserId(UUID(request.user_id))
        )
        return ListMessagesResponse(
            messages=[MessageResponse.from_message(m) for m in messages]
        )
