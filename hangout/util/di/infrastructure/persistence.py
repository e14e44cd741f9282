"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from hangout.adapter.realtime import MessageHub, MessageOutbox
from hangout.config import Settings
from hangout.domain.repository import (
    InviteRepository,
    LedgerRepository,
    MessageRepository,
    UserRepository,
)
from hangout.persistence.database import create_engine, create_session_factory
from hangout.persistence.repository import (
    PostgresInviteRepository,
    PostgresLedgerRepository,
    PostgresMessageRepository,
    PostgresUserRepository,
)
from hangout.util.di.base import ProviderBase
from hangout.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_engine(self, settings: Settings) -> AsyncEngine:
        """Provide database engine."""
        engine = create_engine(settings)
        instrument_sqlalchemy(engine)
        return engine

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    def get_message_outbox(self, message_hub: MessageHub) -> MessageOutbox:
        """Provide the request's chat outbox, flushed by the session."""
        return MessageOutbox(message_hub)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        message_outbox: MessageOutbox,
    ) -> AsyncIterator[AsyncSession]:
        """Provide database session for request scope.

        The session is committed at the end of the request if no exception
        occurred, or rolled back if one was raised. An invite transition and
        the ledger entries and fee flags it writes therefore land together.
        Chat messages held in the outbox are published only after the commit.
        """
        async with session_factory() as session:
            error = yield session
            if error is not None:
                dropped = message_outbox.discard()
                logfire.warn("Session rollback", error=str(error), unpublished=dropped)
                await session.rollback()
                return
            try:
                await session.commit()
                logfire.debug("Session committed")
            except Exception as e:
                dropped = message_outbox.discard()
                logfire.warn("Session rollback", error=str(e), unpublished=dropped)
                await session.rollback()
                raise

        await message_outbox.flush()

    @provide(scope=Scope.REQUEST)
    def get_user_repository(self, session: AsyncSession) -> UserRepository:
        """Provide User repository."""
        return PostgresUserRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_invite_repository(self, session: AsyncSession) -> InviteRepository:
        """Provide Invite repository."""
        return PostgresInviteRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_ledger_repository(self, session: AsyncSession) -> LedgerRepository:
        """Provide balance ledger repository."""
        return PostgresLedgerRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_message_repository(self, session: AsyncSession) -> MessageRepository:
        """Provide Message repository."""
        return PostgresMessageRepository(session)
