"""Mock persistence providers for testing."""

from collections.abc import AsyncIterator

from dishka import Scope, provide

from hangout.adapter.realtime import MessageHub, MessageOutbox
from hangout.domain.repository import (
    InviteRepository,
    LedgerRepository,
    MessageRepository,
    UserRepository,
)
from hangout.persistence.repository.inmemory import (
    InMemoryInviteRepository,
    InMemoryLedgerRepository,
    InMemoryMessageRepository,
    InMemoryUserRepository,
)
from hangout.util.di.infrastructure.persistence import PersistenceProvider


class MockPersistenceProvider(PersistenceProvider):
    """Mock persistence provider using in-memory repositories.

    Uses APP scope so state survives across the requests of one test client.
    Each test builds its own container, so tests stay isolated.
    """

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_user_repository(self) -> UserRepository:
        """Provide in-memory user repository."""
        return InMemoryUserRepository()

    @provide(scope=Scope.APP)
    def get_invite_repository(self) -> InviteRepository:
        """Provide in-memory invite repository."""
        return InMemoryInviteRepository()

    @provide(scope=Scope.APP)
    def get_ledger_repository(self) -> LedgerRepository:
        """Provide in-memory ledger repository."""
        return InMemoryLedgerRepository()

    @provide(scope=Scope.APP)
    def get_message_repository(self) -> MessageRepository:
        """Provide in-memory message repository."""
        return InMemoryMessageRepository()

    @provide(scope=Scope.REQUEST)
    async def get_message_outbox(
        self, message_hub: MessageHub
    ) -> AsyncIterator[MessageOutbox]:
        """Provide a chat outbox flushed when the request scope closes.

        In-memory writes have no transaction, so closing the scope without an
        error stands in for the commit.
        """
        outbox = MessageOutbox(message_hub)
        error = yield outbox
        if error is None:
            await outbox.flush()
        else:
            outbox.discard()
