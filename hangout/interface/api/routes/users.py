"""User profile routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, HTTPException, status

from hangout.application.usecase.user import (
    GetBalanceSummaryRequest,
    GetBalanceSummaryResponse,
    GetBalanceSummaryUseCase,
    ToggleFavoriteRequest,
    ToggleFavoriteResponse,
    ToggleFavoriteUseCase,
)
from hangout.domain.error import DomainError
from hangout.domain.service import JWTService
from hangout.interface.api.errors import to_http_exception
from hangout.interface.api.routes.auth import require_user_id

router = APIRouter(prefix="/users", tags=["users"], route_class=DishkaRoute)


@router.get("/me/balance", response_model=GetBalanceSummaryResponse)
async def get_my_balance(
    get_balance_summary_use_case: FromDishka[GetBalanceSummaryUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> GetBalanceSummaryResponse:
    """Get the current user's balances and outstanding items.

    Requires authentication.

    Returns:
        Cached pending balance and earnings, refreshed from the ledger when
        they drifted, plus the reconciliation of the user's invites

    Raises:
        HTTPException: 401 if not authenticated, 404 if the user has no profile

    Example:
        GET /users/me/balance

        Response:
        {
            "user_id": "123e4567-e89b-12d3-a456-426614174000",
            "profile_type": "public",
            "pending_balance": "15.00",
            "total_earnings": "47.50",
            "reconciliation": {"total_owed": "15.00", ...}
        }
    """
    user_id = require_user_id(jwt_service, auth_token)
    try:
        return await get_balance_summary_use_case.execute(
            GetBalanceSummaryRequest(user_id=user_id)
        )
    except DomainError as e:
        raise to_http_exception(e)


@router.post("/me/favorites/{pal_id}", response_model=ToggleFavoriteResponse)
async def toggle_favorite(
    pal_id: str,
    toggle_favorite_use_case: FromDishka[ToggleFavoriteUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> ToggleFavoriteResponse:
    """Add a pal to the current user's favorites, or remove them.

    Raises:
        HTTPException: 401 if not authenticated, 404 if the pal does not
            exist, 422 for the user's own ID or a malformed ID
    """
    user_id = require_user_id(jwt_service, auth_token)
    try:
        return await toggle_favorite_use_case.execute(
            ToggleFavoriteRequest(user_id=user_id, pal_id=pal_id)
        )
    except DomainError as e:
        raise to_http_exception(e)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        )
