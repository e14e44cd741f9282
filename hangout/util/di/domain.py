"""Domain layer DI providers."""

from dishka import Scope, provide

from hangout.adapter.realtime import MessageOutbox
from hangout.config import AuthSettings
from hangout.domain.repository import (
    InviteRepository,
    LedgerRepository,
    MessageRepository,
    UserRepository,
)
from hangout.domain.service import (
    BalanceService,
    InviteService,
    JWTService,
    MessageService,
    ReconciliationService,
    UserService,
)
from hangout.domain.value import FeeSchedule
from hangout.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_user_service(self, user_repository: UserRepository) -> UserService:
        """Provide user domain service."""
        return UserService(user_repository=user_repository)

    @provide
    def get_balance_service(
        self,
        ledger_repository: LedgerRepository,
        user_repository: UserRepository,
        fees: FeeSchedule,
    ) -> BalanceService:
        """Provide balance ledger domain service."""
        return BalanceService(
            ledger_repository=ledger_repository,
            user_repository=user_repository,
            fees=fees,
        )

    @provide
    def get_reconciliation_service(
        self,
        invite_repository: InviteRepository,
        user_repository: UserRepository,
        fees: FeeSchedule,
    ) -> ReconciliationService:
        """Provide reconciliation domain service."""
        return ReconciliationService(
            invite_repository=invite_repository,
            user_repository=user_repository,
            fees=fees,
        )

    @provide
    def get_invite_service(
        self,
        invite_repository: InviteRepository,
        user_repository: UserRepository,
        balance_service: BalanceService,
        reconciliation_service: ReconciliationService,
        fees: FeeSchedule,
    ) -> InviteService:
        """Provide invite domain service."""
        return InviteService(
            invite_repository=invite_repository,
            user_repository=user_repository,
            balance_service=balance_service,
            reconciliation_service=reconciliation_service,
            fees=fees,
        )

    @provide
    def get_message_service(
        self,
        message_repository: MessageRepository,
        user_repository: UserRepository,
        invite_service: InviteService,
        message_outbox: MessageOutbox,
    ) -> MessageService:
        """Provide chat message domain service."""
        return MessageService(
            message_repository=message_repository,
            user_repository=user_repository,
            invite_service=invite_service,
            message_outbox=message_outbox,
        )
