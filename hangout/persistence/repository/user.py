"""PostgreSQL implementation of User repository."""

from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hangout.domain.model import User
from hangout.domain.repository import UserRepository
from hangout.domain.value import UserId, Username
from hangout.persistence.mappers import row_to_user, user_to_dict
from hangout.persistence.tables import users_table


class PostgresUserRepository(UserRepository):
    """PostgreSQL implementation of UserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: User ID to look up

        Returns:
            User if found, None otherwise
        """
        stmt = select(users_table).where(users_table.c.id == user_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def find_by_username(self, username: Username) -> Optional[User]:
        """Find a user by username.

        Args:
            username: Username to search for

        Returns:
            User if found, None otherwise
        """
        stmt = select(users_table).where(users_table.c.username == username.root)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def save(self, user: User) -> User:
        """Save a user (create or update).

        Args:
            user: User to save

        Returns:
            Saved user
        """
        existing = await self.find_by_id(user.id)

        user_dict = user_to_dict(user)

        if existing:
            stmt = (
                users_table.update()
                .where(users_table.c.id == user.id)
                .values(**user_dict)
            )
        else:
            stmt = users_table.insert().values(**user_dict)
        await self.session.execute(stmt)

        await self.session.flush()
        return user

    async def adjust_balances(
        self,
        user_id: UserId,
        pending_delta: Decimal = Decimal("0"),
        earnings_delta: Decimal = Decimal("0"),
    ) -> None:
        """Atomically add deltas to the cached balances.

        A single UPDATE, so concurrent transitions cannot lose an update.
        The pending balance is floored at zero in SQL.

        Args:
            user_id: User ID to update
            pending_delta: Signed change to the pending balance
            earnings_delta: Signed change to total earnings
        """
        stmt = (
            users_table.update()
            .where(users_table.c.id == user_id)
            .values(
                pending_balance=func.greatest(
                    0, users_table.c.pending_balance + pending_delta
                ),
                total_earnings=users_table.c.total_earnings + earnings_delta,
                updated_at=func.now(),
            )
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def set_balances(
        self, user_id: UserId, pending_balance: Decimal, total_earnings: Decimal
    ) -> None:
        """Overwrite the cached balances.

        Args:
            user_id: User ID to update
            pending_balance: Recomputed pending balance
            total_earnings: Recomputed total earnings
        """
        stmt = (
            users_table.update()
            .where(users_table.c.id == user_id)
            .values(
                pending_balance=pending_balance,
                total_earnings=total_earnings,
                updated_at=func.now(),
            )
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def set_favorites(self, user_id: UserId, favorites: list[UserId]) -> None:
        """Replace the favorites column only.

        Args:
            user_id: User ID to update
            favorites: Favorite pal IDs
        """
        stmt = (
            users_table.update()
            .where(users_table.c.id == user_id)
            .values(favorites=list(favorites), updated_at=func.now())
        )
        await self.session.execute(stmt)
        await self.session.flush()
