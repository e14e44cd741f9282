"""User repository interface."""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from hangout.domain.model.user import User
from hangout.domain.value import UserId, Username


class UserRepository(ABC):
    """Repository for User aggregate.

    Defines the contract for user persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_username(self, username: Username) -> Optional[User]:
        """Find a user by username.

        Args:
            username: The user's username

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, user: User) -> User:
        """Save a user (create or update).

        Args:
            user: The user to save

        Returns:
            The saved user
        """
        pass

    @abstractmethod
    async def adjust_balances(
        self,
        user_id: UserId,
        pending_delta: Decimal = Decimal("0"),
        earnings_delta: Decimal = Decimal("0"),
    ) -> None:
        """Atomically add deltas to the cached balances.

        The pending balance never goes below zero.

        Args:
            user_id: The user's unique identifier
            pending_delta: Signed change to the pending balance
            earnings_delta: Signed change to total earnings
        """
        pass

    @abstractmethod
    async def set_balances(
        self, user_id: UserId, pending_balance: Decimal, total_earnings: Decimal
    ) -> None:
        """Overwrite the cached balances with freshly computed values.

        Args:
            user_id: The user's unique identifier
            pending_balance: Recomputed pending balance
            total_earnings: Recomputed total earnings
        """
        pass

    @abstractmethod
    async def set_favorites(self, user_id: UserId, favorites: list[UserId]) -> None:
        """Replace the user's favorite pals.

        Args:
            user_id: The user's unique identifier
            favorites: Favorite pal IDs, in the order they were added
        """
        pass
