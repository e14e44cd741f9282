"""Unit tests for BalanceService."""

from decimal import Decimal
from uuid import uuid4

import pytest

from hangout.domain.error import NotFoundError
from hangout.domain.repository import UserRepository
from hangout.domain.service import BalanceService
from hangout.domain.value import InviteId, LedgerEntryType, UserId
from tests.harness import create_env_fixture, make_user

unit_env = create_env_fixture()


class TestRecord:
    """Tests for record method."""

    @pytest.mark.asyncio
    async def test_charges_and_settlements_move_pending_balance(self, unit_env):
        balance_service = await unit_env.get(BalanceService)
        user_repo = await unit_env.get(UserRepository)
        user = await user_repo.save(make_user("payer"))
        invite_id = InviteId(uuid4())

        await balance_service.record(
            user.id, invite_id, LedgerEntryType.CANCELLATION_FEE, Decimal("20")
        )
        await balance_service.record(
            user.id, InviteId(uuid4()), LedgerEntryType.FEE_SETTLEMENT, Decimal("8")
        )

        assert await balance_service.pending_balance(user.id) == Decimal("12.00")
        cached = await user_repo.find_by_id(user.id)
        assert cached.pending_balance == Decimal("12.00")

    @pytest.mark.asyncio
    async def test_pending_balance_never_negative(self, unit_env):
        """Settling more than is owed floors the balance at zero."""
        balance_service = await unit_env.get(BalanceService)
        user_repo = await unit_env.get(UserRepository)
        user = await user_repo.save(make_user("payer"))

        await balance_service.record(
            user.id, InviteId(uuid4()), LedgerEntryType.FEE_SETTLEMENT, Decimal("5")
        )

        assert await balance_service.pending_balance(user.id) == Decimal("0.00")
        assert (await user_repo.find_by_id(user.id)).pending_balance == Decimal("0")

    @pytest.mark.asyncio
    async def test_duplicate_entry_is_skipped(self, unit_env):
        balance_service = await unit_env.get(BalanceService)
        user_repo = await unit_env.get(UserRepository)
        user = await user_repo.save(make_user("pal"))
        invite_id = InviteId(uuid4())

        first = await balance_service.record(
            user.id, invite_id, LedgerEntryType.INCENTIVE_EARNING, Decimal("47.50")
        )
        second = await balance_service.record(
            user.id, invite_id, LedgerEntryType.INCENTIVE_EARNING, Decimal("47.50")
        )

        assert first is True
        assert second is False
        assert (await user_repo.find_by_id(user.id)).total_earnings == Decimal("47.50")

    @pytest.mark.asyncio
    async def test_zero_amount_is_not_recorded(self, unit_env):
        balance_service = await unit_env.get(BalanceService)
        user_repo = await unit_env.get(UserRepository)
        user = await user_repo.save(make_user("pal"))

        recorded = await balance_service.record(
            user.id, InviteId(uuid4()), LedgerEntryType.PLATFORM_FEE, Decimal("0")
        )

        assert recorded is False


class TestRefreshCachedBalances:
    """Tests for refresh_cached_balances method."""

    @pytest.mark.asyncio
    async def test_drifted_cache_is_rewritten_from_ledger(self, unit_env):
        # Arrange
        balance_service = await unit_env.get(BalanceService)
        user_repo = await unit_env.get(UserRepository)
        user = await user_repo.save(make_user("pal"))
        await balance_service.record(
            user.id, InviteId(uuid4()), LedgerEntryType.PAL_COMPENSATION, Decimal("9")
        )
        await user_repo.set_balances(user.id, Decimal("3.00"), Decimal("100.00"))

        # Act
        refreshed = await balance_service.refresh_cached_balances(user.id)

        # Assert
        assert refreshed.pending_balance == Decimal("0.00")
        assert refreshed.total_earnings == Decimal("9.00")
        stored = await user_repo.find_by_id(user.id)
        assert stored.total_earnings == Decimal("9.00")

    @pytest.mark.asyncio
    async def test_drift_within_tolerance_is_left_alone(self, unit_env):
        balance_service = await unit_env.get(BalanceService)
        user_repo = await unit_env.get(UserRepository)
        user = await user_repo.save(make_user("pal"))
        await balance_service.record(
            user.id, InviteId(uuid4()), LedgerEntryType.PAL_COMPENSATION, Decimal("9")
        )
        await user_repo.set_balances(user.id, Decimal("0"), Decimal("9.01"))

        refreshed = await balance_service.refresh_cached_balances(user.id)

        assert refreshed.total_earnings == Decimal("9.01")

    @pytest.mark.asyncio
    async def test_unknown_user_fails(self, unit_env):
        balance_service = await unit_env.get(BalanceService)

        with pytest.raises(NotFoundError):
            await balance_service.refresh_cached_balances(UserId(uuid4()))
