"""Toggle favorite pal use case."""

from uuid import UUID

from pydantic import BaseModel

from hangout.application.usecase.base import BaseUseCase
from hangout.domain.service import UserService
from hangout.domain.value import UserId


class ToggleFavoriteRequest(BaseModel):
    """Toggle favorite request."""

    user_id: str  # From authenticated user
    pal_id: str


class ToggleFavoriteResponse(BaseModel):
    """Favorites after the toggle."""

    pal_id: str
    is_favorite: bool
    favorites: list[str]


class ToggleFavoriteUseCase(BaseUseCase):
    """Use case for adding or removing a favorite pal."""

    def __init__(self, user_service: UserService) -> None:
        """Initialize toggle favorite use case.

        Args:
            user_service: User domain service
        """
        self.user_service = user_service

    async def execute(self, request: ToggleFavoriteRequest) -> ToggleFavoriteResponse:
        """Flip the pal's place in the user's favorites.

        Raises:
            NotFoundError: If the user or an added pal does not exist
            ValidationError: If the user favorites themselves
        """
        pal_id = UserId(UUID(request.pal_id))
        user = await self.user_service.toggle_favorite(
            UserId(UUID(request.user_id)), pal_id
        )
        return ToggleFavoriteResponse(
            pal_id=str(pal_id),
            is_favorite=pal_id in user.favorites,
            favorites=[str(f) for f in user.favorites],
        )
