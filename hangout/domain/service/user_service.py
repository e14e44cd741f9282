"""User domain service."""

import logfire

from hangout.domain.error import NotFoundError, ValidationError
from hangout.domain.model import User
from hangout.domain.repository import UserRepository
from hangout.domain.value import UserId, Username


class UserService:
    """Domain service for user operations."""

    def __init__(self, user_repository: UserRepository) -> None:
        """Initialize user service.

        Args:
            user_repository: User repository
        """
        self.user_repository = user_repository

    async def get_by_id(self, user_id: UserId) -> User:
        """Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User entity

        Raises:
            NotFoundError: If user not found
        """
        with logfire.span("user_service.get_by_id", user_id=str(user_id)):
            user = await self.user_repository.find_by_id(user_id)
            if not user:
                logfire.warn("User not found", user_id=str(user_id))
                raise NotFoundError("User", str(user_id))
            return user

    async def get_by_username(self, username: Username) -> User | None:
        """Get user by username.

        Args:
            username: Username

        Returns:
            User if found, None otherwise
        """
        with logfire.span("user_service.get_by_username", username=username.root):
            user = await self.user_repository.find_by_username(username)
            if not user:
                logfire.warn("User not found", username=username.root)
            return user

    async def resolve_recipient(
        self, user_id: UserId | None = None, username: Username | None = None
    ) -> User:
        """Find the pal an invite is addressed to, by ID or username.

        Raises:
            ValidationError: If neither ID nor username is given
            NotFoundError: If no such user exists
        """
        if user_id is not None:
            return await self.get_by_id(user_id)
        if username is None:
            raise ValidationError("An invite needs a recipient")
        user = await self.get_by_username(username)
        if not user:
            raise NotFoundError("User", username.root)
        return user

    async def toggle_favorite(self, user_id: UserId, pal_id: UserId) -> User:
        """Add a pal to the user's favorites, or remove them if already there.

        The returned user carries the list as written. If the write fails the
        error propagates and nothing is returned.

        Args:
            user_id: User whose favorites change
            pal_id: Pal to add or remove

        Returns:
            User with the updated favorites

        Raises:
            NotFoundError: If the user, or a pal being added, does not exist
            ValidationError: If the user favorites themselves
        """
        with logfire.span(
            "user_service.toggle_favorite", user_id=str(user_id), pal_id=str(pal_id)
        ):
            user = await self.get_by_id(user_id)
            if pal_id == user_id:
                raise ValidationError("You cannot add yourself to favorites")

            added = pal_id not in user.favorites
            if added:
                await self.get_by_id(pal_id)
                favorites = [*user.favorites, pal_id]
            else:
                favorites = [f for f in user.favorites if f != pal_id]

            await self.user_repository.set_favorites(user_id, favorites)
            logfire.info(
                "Favorite toggled",
                user_id=str(user_id),
                pal_id=str(pal_id),
                added=added,
            )
            return user.model_copy(update={"favorites": favorites})
