"""Invite chat domain service."""

from datetime import datetime
from uuid import uuid4

import logfire

from hangout.adapter.realtime import MessageOutbox
from hangout.domain.error import ValidationError
from hangout.domain.model import Message
from hangout.domain.repository import MessageRepository, UserRepository
from hangout.domain.value import InviteId, MessageId, UserId

from .base import Service
from .invite_service import InviteService

MAX_MESSAGE_LENGTH = 2000


class MessageService(Service):
    """Domain service for the chat thread of an invite.

    Only the two participants of an invite may read or write its thread.
    """

    def __init__(
        self,
        message_repository: MessageRepository,
        user_repository: UserRepository,
        invite_service: InviteService,
        message_outbox: MessageOutbox,
    ) -> None:
        """Initialize message service.

        Args:
            message_repository: Message repository
            user_repository: User repository
            invite_service: Invite domain service
            message_outbox: Messages to push to live subscribers on commit
        """
        self.message_repository = message_repository
        self.user_repository = user_repository
        self.invite_service = invite_service
        self.message_outbox = message_outbox

    async def send_message(
        self, invite_id: InviteId, sender_id: UserId, text: str
    ) -> Message:
        """Post a message to an invite's thread.

        Live subscribers receive it once the surrounding write commits.

        Args:
            invite_id: Invite whose thread to post to
            sender_id: Participant sending the message
            text: Message text, trimmed before saving

        Returns:
            The saved message

        Raises:
            NotFoundError: If the invite does not exist
            NotAuthorizedError: If the sender is not a participant
            ValidationError: If the text is empty or too long
        """
        with logfire.span(
            "message_service.send_message",
            invite_id=str(invite_id),
            sender_id=str(sender_id),
        ):
            await self.invite_service.get_invite_for_participant(invite_id, sender_id)

            text = (text or "").strip()
            if not text:
                raise ValidationError("Message text cannot be empty")
            if len(text) > MAX_MESSAGE_LENGTH:
                raise ValidationError(
                    f"Message text cannot exceed {MAX_MESSAGE_LENGTH} characters"
                )

            sender = await self.user_repository.find_by_id(sender_id)
            message = Message(
                id=MessageId(uuid4()),
                invite_id=invite_id,
                sender_id=sender_id,
                sender_username=sender.display_name if sender else None,
                text=text,
                created_at=datetime.now(),
            )
            saved = await self.message_repository.save(message)
            self.message_outbox.add(saved)
            logfire.info(
                "Message sent", invite_id=str(invite_id), message_id=str(saved.id)
            )
            return saved

    async def list_messages(
        self, invite_id: InviteId, viewer_id: UserId
    ) -> list[Message]:
        """List an invite's thread, oldest first."""
        with logfire.span(
            "message_service.list_messages",
            invite_id=str(invite_id),
            viewer_id=str(viewer_id),
        ):
            await self.invite_service.get_invite_for_participant(invite_id, viewer_id)
            messages = await self.message_repository.find_by_invite(invite_id)
            messages.sort(key=lambda m: (m.created_at, str(m.id)))
            return messages
