"""Application layer DI providers."""

from dishka import Scope, provide

from hangout.application.usecase.invite import (
    CreateInviteUseCase,
    GetInviteUseCase,
    GetPaymentBreakdownUseCase,
    ListInvitesUseCase,
    PreviewInviteCostUseCase,
    TransitionInviteUseCase,
    UpdateInviteUseCase,
)
from hangout.application.usecase.message import (
    ListMessagesUseCase,
    SendMessageUseCase,
)
from hangout.application.usecase.user import (
    GetBalanceSummaryUseCase,
    ToggleFavoriteUseCase,
)
from hangout.domain.service import (
    BalanceService,
    InviteService,
    MessageService,
    ReconciliationService,
    UserService,
)
from hangout.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Invite use cases
    @provide(scope=Scope.REQUEST)
    def get_create_invite_use_case(
        self, invite_service: InviteService, user_service: UserService
    ) -> CreateInviteUseCase:
        """Provide create invite use case."""
        return CreateInviteUseCase(
            invite_service=invite_service, user_service=user_service
        )

    @provide(scope=Scope.REQUEST)
    def get_update_invite_use_case(
        self, invite_service: InviteService
    ) -> UpdateInviteUseCase:
        """Provide update invite use case."""
        return UpdateInviteUseCase(invite_service=invite_service)

    @provide(scope=Scope.REQUEST)
    def get_transition_invite_use_case(
        self, invite_service: InviteService
    ) -> TransitionInviteUseCase:
        """Provide invite lifecycle transition use case."""
        return TransitionInviteUseCase(invite_service=invite_service)

    @provide(scope=Scope.REQUEST)
    def get_get_invite_use_case(
        self, invite_service: InviteService
    ) -> GetInviteUseCase:
        """Provide get invite use case."""
        return GetInviteUseCase(invite_service=invite_service)

    @provide(scope=Scope.REQUEST)
    def get_list_invites_use_case(
        self, invite_service: InviteService
    ) -> ListInvitesUseCase:
        """Provide list invites use case."""
        return ListInvitesUseCase(invite_service=invite_service)

    @provide(scope=Scope.REQUEST)
    def get_preview_invite_cost_use_case(
        self, reconciliation_service: ReconciliationService
    ) -> PreviewInviteCostUseCase:
        """Provide pre-invite cost warning use case."""
        return PreviewInviteCostUseCase(reconciliation_service=reconciliation_service)

    @provide(scope=Scope.REQUEST)
    def get_payment_breakdown_use_case(
        self,
        invite_service: InviteService,
        balance_service: BalanceService,
        reconciliation_service: ReconciliationService,
    ) -> GetPaymentBreakdownUseCase:
        """Provide pre-payment breakdown use case."""
        return GetPaymentBreakdownUseCase(
            invite_service=invite_service,
            balance_service=balance_service,
            reconciliation_service=reconciliation_service,
        )

    # User use cases
    @provide(scope=Scope.REQUEST)
    def get_balance_summary_use_case(
        self,
        balance_service: BalanceService,
        reconciliation_service: ReconciliationService,
    ) -> GetBalanceSummaryUseCase:
        """Provide profile balance summary use case."""
        return GetBalanceSummaryUseCase(
            balance_service=balance_service,
            reconciliation_service=reconciliation_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_toggle_favorite_use_case(
        self, user_service: UserService
    ) -> ToggleFavoriteUseCase:
        """Provide toggle favorite use case."""
        return ToggleFavoriteUseCase(user_service=user_service)

    # Message use cases
    @provide(scope=Scope.REQUEST)
    def get_send_message_use_case(
        self, message_service: MessageService
    ) -> SendMessageUseCase:
        """Provide send message use case."""
        return SendMessageUseCase(message_service=message_service)

    @provide(scope=Scope.REQUEST)
    def get_list_messages_use_case(
        self, message_service: MessageService
    ) -> ListMessagesUseCase:
        """Provide list messages use case."""
        return ListMessagesUseCase(message_service=message_service)
