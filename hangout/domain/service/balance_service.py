"""Balance ledger domain service.

The ledger is append-only. A user's pending balance is the sum of their
charges minus their settlements, floored at zero; total earnings is the sum
of their earning entries. The two balance columns on the user record are a
cache of these folds.
"""

from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal
from uuid import uuid4

import logfire

from hangout.domain.error import NotFoundError
from hangout.domain.model import LedgerEntry, User
from hangout.domain.repository import LedgerRepository, UserRepository
from hangout.domain.value import (
    FeeSchedule,
    InviteId,
    LedgerEntryId,
    LedgerEntryType,
    UserId,
)
from hangout.domain.value.money import ZERO, to_money

from .base import Service


def fold_pending_balance(entries: Iterable[LedgerEntry]) -> Decimal:
    """Charges minus settlements, never below zero."""
    total = ZERO
    for entry in entries:
        if entry.entry_type.is_charge:
            total += entry.amount
        elif entry.entry_type.is_settlement:
            total -= entry.amount
    return max(ZERO, to_money(total))


def fold_total_earnings(entries: Iterable[LedgerEntry]) -> Decimal:
    """Sum of earning entries."""
    return to_money(sum((e.amount for e in entries if e.entry_type.is_earning), ZERO))


class BalanceService(Service):
    """Domain service for ledger entries and cached user balances."""

    def __init__(
        self,
        ledger_repository: LedgerRepository,
        user_repository: UserRepository,
        fees: FeeSchedule,
    ) -> None:
        """Initialize balance service.

        Args:
            ledger_repository: Ledger repository
            user_repository: User repository
            fees: Fee schedule (provides the cache drift tolerance)
        """
        self.ledger_repository = ledger_repository
        self.user_repository = user_repository
        self.fees = fees

    async def record(
        self,
        user_id: UserId,
        invite_id: InviteId,
        entry_type: LedgerEntryType,
        amount: Decimal,
    ) -> bool:
        """Record one balance movement and adjust the cached balances.

        Replaying the same (invite, type, user) is a no-op, so a retried
        transition cannot double-charge or double-settle.

        Args:
            user_id: User whose balance moves
            invite_id: Invite that caused the movement
            entry_type: Kind of movement
            amount: Positive amount

        Returns:
            True if a new entry was recorded, False if skipped
        """
        amount = to_money(amount)
        with logfire.span(
            "balance_service.record",
            user_id=str(user_id),
            invite_id=str(invite_id),
            entry_type=entry_type.value,
            amount=str(amount),
        ):
            if amount <= ZERO:
                return False

            entry = LedgerEntry(
                id=LedgerEntryId(uuid4()),
                user_id=user_id,
                invite_id=invite_id,
                entry_type=entry_type,
                amount=amount,
                created_at=datetime.now(),
            )
            stored = await self.ledger_repository.append(entry)
            if not stored:
                logfire.warn(
                    "Duplicate ledger entry skipped",
                    user_id=str(user_id),
                    invite_id=str(invite_id),
                    entry_type=entry_type.value,
                )
                return False

            if entry_type.is_charge:
                await self.user_repository.adjust_balances(
                    user_id, pending_delta=amount
                )
            elif entry_type.is_settlement:
                await self.user_repository.adjust_balances(
                    user_id, pending_delta=-amount
                )
            else:
                await self.user_repository.adjust_balances(
                    user_id, earnings_delta=amount
                )

            logfire.info(
                "Ledger entry recorded",
                user_id=str(user_id),
                invite_id=str(invite_id),
                entry_type=entry_type.value,
                amount=str(amount),
            )
            return True

    async def pending_balance(self, user_id: UserId) -> Decimal:
        """Authoritative pending balance of a user."""
        entries = await self.ledger_repository.find_by_user(user_id)
        return fold_pending_balance(entries)

    async def total_earnings(self, user_id: UserId) -> Decimal:
        """Authoritative lifetime earnings of a user."""
        entries = await self.ledger_repository.find_by_user(user_id)
        return fold_total_earnings(entries)

    async def refresh_cached_balances(self, user_id: UserId) -> User:
        """Re-synchronise the cached balances with the ledger.

        The cache is written only when a value drifts by more than the
        configured tolerance.

        Args:
            user_id: User to refresh

        Returns:
            The user with up-to-date cached balances

        Raises:
            NotFoundError: If the user does not exist
        """
        with logfire.span(
            "balance_service.refresh_cached_balances", user_id=str(user_id)
        ):
            user = await self.user_repository.find_by_id(user_id)
            if not user:
                raise NotFoundError("User", str(user_id))

            entries = await self.ledger_repository.find_by_user(user_id)
            pending = fold_pending_balance(entries)
            earnings = fold_total_earnings(entries)

            tolerance = self.fees.balance_tolerance
            drifted = (
                abs(user.pending_balance - pending) > tolerance
                or abs(user.total_earnings - earnings) > tolerance
            )
            if not drifted:
                return user

            logfire.warn(
                "Cached balances drifted from ledger",
                user_id=str(user_id),
                cached_pending=str(user.pending_balance),
                ledger_pending=str(pending),
                cached_earnings=str(user.total_earnings),
                ledger_earnings=str(earnings),
            )
            await self.user_repository.set_balances(user_id, pending, earnings)
            return user.model_copy(
                update={"pending_balance": pending, "total_earnings": earnings}
            )
