"""Invite chat message."""

from datetime import datetime

from pydantic import Field

from hangout.domain.model.common import DomainModel
from hangout.domain.value import InviteId, MessageId, UserId


class Message(DomainModel):
    """Message in the chat thread of an invite."""

    id: MessageId
    invite_id: InviteId
    sender_id: UserId
    sender_username: str | None = None
    text: str = Field(min_length=1, max_length=2000)
    created_at: datetime = Field(default_factory=datetime.now)
