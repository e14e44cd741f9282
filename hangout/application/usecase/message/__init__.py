"""Chat message use cases."""

from hangout.application.usecase.message.list_messages import (
    ListMessagesRequest,
    ListMessagesResponse,
    ListMessagesUseCase,
)
from hangout.application.usecase.message.send_message import (
    MessageResponse,
    SendMessageRequest,
    SendMessageUseCase,
)

__all__ = [
    "ListMessagesRequest",
    "ListMessagesResponse",
    "ListMessagesUseCase",
    "MessageResponse",
    "SendMessageRequest",
    "SendMessageUseCase",
]
