"""User use cases."""

from hangout.application.usecase.user.get_balance_summary import (
    GetBalanceSummaryRequest,
    GetBalanceSummaryResponse,
    GetBalanceSummaryUseCase,
)
from hangout.application.usecase.user.toggle_favorite import (
    ToggleFavoriteRequest,
    ToggleFavoriteResponse,
    ToggleFavoriteUseCase,
)

__all__ = [
    "GetBalanceSummaryRequest",
    "GetBalanceSummaryResponse",
    "GetBalanceSummaryUseCase",
    "ToggleFavoriteRequest",
    "ToggleFavoriteResponse",
    "ToggleFavoriteUseCase",
]
