"""Send chat message use case."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from hangout.application.usecase.base import BaseUseCase
from hangout.domain.model import Message
from hangout.domain.service import MessageService
from hangout.domain.value import InviteId, UserId


class MessageResponse(BaseModel):
    """Chat message."""

    message_id: str
    invite_id: str
    sender_id: str
    sender_username: Optional[str]
    text: str
    created_at: datetime

    @classmethod
    def from_message(cls, message: Message) -> "MessageResponse":
        return cls(
            message_id=str(message.id),
            invite_id=str(message.invite_id),
            sender_id=str(message.sender_id),
            sender_username=message.sender_username,
            text=message.text,
            created_at=message.created_at,
        )


class SendMessageRequest(BaseModel):
    """Send message request."""

    invite_id: str
    sender_id: str  # From authenticated user
    text: str


class SendMessageUseCase(BaseUseCase):
    """Use case for posting to an invite's chat thread."""

    def __init__(self, message_service: MessageService) -> None:
        """Initialize send message use case.

        Args:
            message_service: Message domain service
        """
        self.message_service = message_service

    async def execute(self, request: SendMessageRequest) -> MessageResponse:
        """Post the message and push it to live subscribers."""
        message = await self.message_service.send_message(
            InviteId(UUID(request.invite_id)),
            UserId(UUID(request.sender_id)),
            request.text,
        )
        return MessageResponse.from_message(message)
