"""Invite routes."""

from datetime import date
from decimal import Decimal
from typing import Optional

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, HTTPException, Query, status
from pydantic import BaseModel, Field

from hangout.application.usecase.invite import (
    CreateInviteRequest,
    CreateInviteUseCase,
    GetInviteRequest,
    GetInviteUseCase,
    GetPaymentBreakdownRequest,
    GetPaymentBreakdownResponse,
    GetPaymentBreakdownUseCase,
    ListInvitesRequest,
    ListInvitesResponse,
    ListInvitesUseCase,
    PreviewInviteCostRequest,
    PreviewInviteCostResponse,
    PreviewInviteCostUseCase,
    TransitionInviteRequest,
    TransitionInviteUseCase,
    UpdateInviteRequest,
    UpdateInviteUseCase,
)
from hangout.application.usecase.response import InviteResponse
from hangout.domain.error import DomainError
from hangout.domain.service import JWTService
from hangout.domain.value import InviteAction, InviteRole
from hangout.interface.api.errors import to_http_exception
from hangout.interface.api.routes.auth import require_user_id

router = APIRouter(prefix="/invites", tags=["invites"], route_class=DishkaRoute)


class InviteFormAPIRequest(BaseModel):
    """API request body for creating or editing an invite.

    Required fields are checked by the domain so that a missing one is
    reported together with the others.
    """

    recipient_id: Optional[str] = None
    recipient_username: Optional[str] = None
    title: Optional[str] = Field(None, max_length=300)
    description: Optional[str] = None
    meeting_location: Optional[str] = None
    start_date: Optional[date] = None
    start_time: Optional[str] = None
    end_date: Optional[date] = None
    end_time: Optional[str] = None
    price: Optional[Decimal] = None


class FinishInviteAPIRequest(BaseModel):
    """API request for finishing an activity."""

    confirmed: bool = False


def _unprocessable(error: ValueError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(error)
    )


@router.post("", response_model=InviteResponse, status_code=status.HTTP_201_CREATED)
async def create_invite(
    request: InviteFormAPIRequest,
    create_invite_use_case: FromDishka[CreateInviteUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> InviteResponse:
    """Send a new invite.

    Requires authentication.

    Raises:
        HTTPException: 401 if not authenticated, 422 on invalid fields,
            404 if the recipient does not exist
    """
    user_id = require_user_id(jwt_service, auth_token)
    try:
        return await create_invite_use_case.execute(
            CreateInviteRequest(sender_id=user_id, **request.model_dump())
        )
    except DomainError as e:
        raise to_http_exception(e)
    except ValueError as e:
        raise _unprocessable(e)


@router.get("", response_model=ListInvitesResponse)
async def list_invites(
    list_invites_use_case: FromDishka[ListInvitesUseCase],
    jwt_service: FromDishka[JWTService],
    role: Optional[InviteRole] = Query(default=None),
    status_filter: Optional[str] = Query(default=None, alias="status"),
    auth_token: str | None = Cookie(default=None),
) -> ListInvitesResponse:
    """List the user's sent and received invites, newest first.

    ``status=finished`` matches finished, paid and completed invites.
    """
    user_id = require_user_id(jwt_service, auth_token)
    try:
        return await list_invites_use_case.execute(
            ListInvitesRequest(user_id=user_id, role=role, status=status_filter)
        )
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/preview", response_model=PreviewInviteCostResponse)
async def preview_invite_cost(
    preview_use_case: FromDishka[PreviewInviteCostUseCase],
    jwt_service: FromDishka[JWTService],
    price: Decimal = Query(gt=0),
    auth_token: str | None = Cookie(default=None),
) -> PreviewInviteCostResponse:
    """Cost warning before sending an invite.

    Shows what the user already owes next to the new invite's price.
    """
    user_id = require_user_id(jwt_service, auth_token)
    try:
        return await preview_use_case.execute(
            PreviewInviteCostRequest(user_id=user_id, price=price)
        )
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/{invite_id}", response_model=InviteResponse)
async def get_invite(
    invite_id: str,
    get_invite_use_case: FromDishka[GetInviteUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> InviteResponse:
    """Get one invite the user takes part in."""
    user_id = require_user_id(jwt_service, auth_token)
    try:
        return await get_invite_use_case.execute(
            GetInviteRequest(invite_id=invite_id, user_id=user_id)
        )
    except DomainError as e:
        raise to_http_exception(e)
    except ValueError as e:
        raise _unprocessable(e)


@router.patch("/{invite_id}", response_model=InviteResponse)
async def update_invite(
    invite_id: str,
    request: InviteFormAPIRequest,
    update_invite_use_case: FromDishka[UpdateInviteUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> InviteResponse:
    """Edit a pending invite. Sender only."""
    user_id = require_user_id(jwt_service, auth_token)
    try:
        return await update_invite_use_case.execute(
            UpdateInviteRequest(
                invite_id=invite_id,
                user_id=user_id,
                **request.model_dump(
                    exclude={"recipient_id", "recipient_username"}
                ),
            )
        )
    except DomainError as e:
        raise to_http_exception(e)
    except ValueError as e:
        raise _unprocessable(e)


@router.get(
    "/{invite_id}/payment-breakdown", response_model=GetPaymentBreakdownResponse
)
async def get_payment_breakdown(
    invite_id: str,
    breakdown_use_case: FromDishka[GetPaymentBreakdownUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> GetPaymentBreakdownResponse:
    """Breakdown shown before the sender marks a finished invite paid."""
    user_id = require_user_id(jwt_service, auth_token)
    try:
        return await breakdown_use_case.execute(
            GetPaymentBreakdownRequest(invite_id=invite_id, user_id=user_id)
        )
    except DomainError as e:
        raise to_http_exception(e)
    except ValueError as e:
        raise _unprocessable(e)


async def _transition(
    use_case: TransitionInviteUseCase,
    jwt_service: JWTService,
    auth_token: str | None,
    invite_id: str,
    action: InviteAction,
    confirmed: bool = False,
) -> InviteResponse:
    user_id = require_user_id(jwt_service, auth_token)
    try:
        return await use_case.execute(
            TransitionInviteRequest(
                invite_id=invite_id,
                user_id=user_id,
                action=action,
                confirmed=confirmed,
            )
        )
    except DomainError as e:
        raise to_http_exception(e)
    except ValueError as e:
        raise _unprocessable(e)


@router.post("/{invite_id}/accept", response_model=InviteResponse)
async def accept_invite(
    invite_id: str,
    use_case: FromDishka[TransitionInviteUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> InviteResponse:
    """Accept a pending invite. Recipient only."""
    return await _transition(
        use_case, jwt_service, auth_token, invite_id, InviteAction.ACCEPT
    )


@router.post("/{invite_id}/decline", response_model=InviteResponse)
async def decline_invite(
    invite_id: str,
    use_case: FromDishka[TransitionInviteUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> InviteResponse:
    """Decline a pending invite. Recipient only."""
    return await _transition(
        use_case, jwt_service, auth_token, invite_id, InviteAction.DECLINE
    )


@router.post("/{invite_id}/cancel", response_model=InviteResponse)
async def cancel_invite(
    invite_id: str,
    use_case: FromDishka[TransitionInviteUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> InviteResponse:
    """Cancel a pending or accepted invite. Sender only.

    Cancelling an accepted invite charges a cancellation fee.
    """
    return await _transition(
        use_case, jwt_service, auth_token, invite_id, InviteAction.CANCEL
    )


@router.post("/{invite_id}/start", response_model=InviteResponse)
async def start_invite(
    invite_id: str,
    use_case: FromDishka[TransitionInviteUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> InviteResponse:
    """Start an accepted invite's activity."""
    return await _transition(
        use_case, jwt_service, auth_token, invite_id, InviteAction.START
    )


@router.post("/{invite_id}/finish", response_model=InviteResponse)
async def finish_invite(
    invite_id: str,
    use_case: FromDishka[TransitionInviteUseCase],
    jwt_service: FromDishka[JWTService],
    request: Optional[FinishInviteAPIRequest] = None,
    auth_token: str | None = Cookie(default=None),
) -> InviteResponse:
    """Finish an activity in progress. Needs ``{"confirmed": true}``."""
    return await _transition(
        use_case,
        jwt_service,
        auth_token,
        invite_id,
        InviteAction.FINISH,
        confirmed=request.confirmed if request else False,
    )


@router.post("/{invite_id}/payment-done", response_model=InviteResponse)
async def mark_payment_done(
    invite_id: str,
    use_case: FromDishka[TransitionInviteUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> InviteResponse:
    """Report paying a finished invite. Sender only.

    Outstanding fees are included in the payment and settled.
    """
    return await _transition(
        use_case, jwt_service, auth_token, invite_id, InviteAction.MARK_PAYMENT_DONE
    )


@router.post("/{invite_id}/confirm-payment", response_model=InviteResponse)
async def confirm_payment(
    invite_id: str,
    use_case: FromDishka[TransitionInviteUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> InviteResponse:
    """Confirm receiving payment. Recipient only."""
    return await _transition(
        use_case, jwt_service, auth_token, invite_id, InviteAction.CONFIRM_PAYMENT
    )
