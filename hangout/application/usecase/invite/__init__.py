"""Invite use cases."""

from hangout.application.usecase.invite.create_invite import (
    CreateInviteRequest,
    CreateInviteUseCase,
)
from hangout.application.usecase.invite.get_invite import (
    GetInviteRequest,
    GetInviteUseCase,
)
from hangout.application.usecase.invite.get_payment_breakdown import (
    GetPaymentBreakdownRequest,
    GetPaymentBreakdownResponse,
    GetPaymentBreakdownUseCase,
)
from hangout.application.usecase.invite.list_invites import (
    ListInvitesRequest,
    ListInvitesResponse,
    ListInvitesUseCase,
)
from hangout.application.usecase.invite.preview_invite_cost import (
    PreviewInviteCostRequest,
    PreviewInviteCostResponse,
    PreviewInviteCostUseCase,
)
from hangout.application.usecase.invite.transition_invite import (
    TransitionInviteRequest,
    TransitionInviteUseCase,
)
from hangout.application.usecase.invite.update_invite import (
    UpdateInviteRequest,
    UpdateInviteUseCase,
)

__all__ = [
    "CreateInviteRequest",
    "CreateInviteUseCase",
    "GetInviteRequest",
    "GetInviteUseCase",
    "GetPaymentBreakdownRequest",
    "GetPaymentBreakdownResponse",
    "GetPaymentBreakdownUseCase",
    "ListInvitesRequest",
    "ListInvitesResponse",
    "ListInvitesUseCase",
    "PreviewInviteCostRequest",
    "PreviewInviteCostResponse",
    "PreviewInviteCostUseCase",
    "TransitionInviteRequest",
    "TransitionInviteUseCase",
    "UpdateInviteRequest",
    "UpdateInviteUseCase",
]
