"""In-memory user repository for testing."""

from decimal import Decimal
from typing import Optional

from hangout.domain.model.user import User
from hangout.domain.repository.user import UserRepository
from hangout.domain.value import UserId, Username
from hangout.domain.value.money import ZERO, to_money


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing."""

    def __init__(self) -> None:
        self._users: dict[UserId, User] = {}

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        return self._users.get(user_id)

    async def find_by_username(self, username: Username) -> Optional[User]:
        """Find a user by username."""
        for user in self._users.values():
            if user.username == username:
                return user
        return None

    async def save(self, user: User) -> User:
        """Save or update a user."""
        self._users[user.id] = user
        return user

    async def adjust_balances(
        self,
        user_id: UserId,
        pending_delta: Decimal = Decimal("0"),
        earnings_delta: Decimal = Decimal("0"),
    ) -> None:
        """Add deltas to the cached balances (pending floored at zero)."""
        user = self._users.get(user_id)
        if user:
            self._users[user_id] = user.model_copy(
                update={
                    "pending_balance": max(
                        ZERO, to_money(user.pending_balance + pending_delta)
                    ),
                    "total_earnings": to_money(user.total_earnings + earnings_delta),
                }
            )

    async def set_balances(
        self, user_id: UserId, pending_balance: Decimal, total_earnings: Decimal
    ) -> None:
        """Overwrite the cached balances."""
        user = self._users.get(user_id)
        if user:
            self._users[user_id] = user.model_copy(
                update={
                    "pending_balance": pending_balance,
                    "total_earnings": total_earnings,
                }
            )

    async def set_favorites(self, user_id: UserId, favorites: list[UserId]) -> None:
        """Replace the user's favorites."""
        user = self._users.get(user_id)
        if user:
            self._users[user_id] = user.model_copy(
                update={"favorites": list(favorites)}
            )
