"""Adapter DI providers."""

from dishka import Scope, provide

from hangout.adapter.realtime import MessageHub
from hangout.util.di.base import ProviderBase


class ProdAdapterProvider(ProviderBase):
    """Adapter provider - concrete, no mocks needed.

    The chat hub is APP-scoped: every request and WebSocket shares one set
    of subscriptions.
    """

    scope = Scope.APP

    @provide
    def get_message_hub(self) -> MessageHub:
        """Provide the chat message hub."""
        return MessageHub()
