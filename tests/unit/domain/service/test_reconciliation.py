"""Unit tests for the reconciliation engine."""

from datetime import datetime, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from hangout.domain.error import NotFoundError
from hangout.domain.model import Invite
from hangout.domain.repository import InviteRepository, UserRepository
from hangout.domain.service import ReconciliationService
from hangout.domain.service.reconciliation import (
    quote_payment,
    reconcile,
    select_settled_items,
)
from hangout.domain.value import (
    InviteId,
    InviteStatus,
    PaymentType,
    ProfileType,
    UserId,
)
from tests.harness import create_env_fixture, make_user

unit_env = create_env_fixture()

ME = UserId(uuid4())
OTHER = UserId(uuid4())
NOW = datetime(2025, 6, 1, 12, 0)


def _invite(sender=ME, recipient=OTHER, **fields) -> Invite:
    fields.setdefault("title", "Coffee")
    return Invite(
        id=InviteId(uuid4()), from_user_id=sender, to_user_id=recipient, **fields
    )


def _cancelled(price: str, fee: str, when: datetime, **fields) -> Invite:
    return _invite(
        price=Decimal(price),
        status=InviteStatus.CANCELLED,
        cancellation_fee=Decimal(fee),
        cancelled_at=when,
        **fields,
    )


class TestReconcile:
    """Tests for the pure reconcile function."""

    def test_nothing_owed_for_empty_history(self):
        result = reconcile([], [], ProfileType.PUBLIC, now=NOW)

        assert result.total_owed == Decimal("0.00")
        assert result.net_balance == Decimal("0.00")
        assert result.pending_payments == []

    def test_unpaid_incentives_and_fees_are_owed(self):
        """Finished incentives and unpaid cancellation fees add up."""
        sent = [
            _invite(
                price=Decimal("50"),
                status=InviteStatus.FINISHED,
                finished_at=NOW - timedelta(days=1),
            ),
            _cancelled("30", "15", NOW - timedelta(days=3)),
            _cancelled("10", "5", NOW - timedelta(days=2), cancellation_fee_paid=True),
            _invite(
                price=Decimal("40"),
                status=InviteStatus.COMPLETED,
                payment_confirmed=True,
            ),
        ]

        result = reconcile(sent, [], ProfileType.PRIVATE, now=NOW)

        assert result.incentive_payments_owed == Decimal("50.00")
        assert result.cancellation_fees_owed == Decimal("15.00")
        assert result.total_owed == Decimal("65.00")
        assert [p.type for p in result.pending_payments] == [
            PaymentType.INCENTIVE_PAYMENT,
            PaymentType.CANCELLATION_FEE,
        ]
        assert result.pending_payments[1].id == f"cancel_fee_{sent[1].id}"

    def test_platform_fee_falls_back_to_rate_on_incentive(self):
        """A completed earning with no recorded fee owes 5% of 40."""
        received = [
            _invite(
                sender=OTHER,
                recipient=ME,
                price=Decimal("40"),
                incentive_amount=Decimal("40"),
                status=InviteStatus.COMPLETED,
                payment_confirmed=True,
                completed_at=NOW,
            )
        ]

        result = reconcile([], received, ProfileType.PUBLIC, now=NOW)

        assert result.platform_fees_owed == Decimal("2.00")
        assert result.pending_payments[0].id == f"platform_fee_{received[0].id}"

    def test_private_profile_owes_no_platform_fee(self):
        received = [
            _invite(
                sender=OTHER,
                recipient=ME,
                price=Decimal("40"),
                status=InviteStatus.COMPLETED,
                payment_confirmed=True,
                platform_fee=Decimal("2.00"),
            )
        ]

        result = reconcile([], received, ProfileType.PRIVATE, now=NOW)

        assert result.platform_fees_owed == Decimal("0.00")
        assert result.pending_payments == []

    def test_owed_to_user_counts_unpaid_incentives_and_compensation(self):
        received = [
            _invite(
                sender=OTHER,
                recipient=ME,
                price=Decimal("25"),
                status=InviteStatus.PAYMENT_DONE,
            ),
            _cancelled(
                "100",
                "50",
                NOW,
                sender=OTHER,
                recipient=ME,
                pal_compensation=Decimal("30"),
                platform_fee=Decimal("1.50"),
            ),
        ]

        result = reconcile([], received, ProfileType.PUBLIC, now=NOW)

        assert result.owed_to_user == Decimal("55.00")
        assert result.platform_fees_owed == Decimal("1.50")
        assert result.net_balance == Decimal("53.50")

    def test_reconcile_is_idempotent(self):
        """Same inputs, same result: nothing is maintained between runs."""
        sent = [
            _cancelled("30", "15", NOW - timedelta(days=1)),
            _invite(price=Decimal("20"), status=InviteStatus.FINISHED),
        ]

        first = reconcile(sent, [], ProfileType.PUBLIC, now=NOW)
        second = reconcile(sent, [], ProfileType.PUBLIC, now=NOW)

        assert first == second

    def test_pending_payments_most_recent_first(self):
        older = _cancelled("10", "5", NOW - timedelta(days=5))
        newer = _cancelled("20", "10", NOW - timedelta(days=1))

        result = reconcile([older, newer], [], ProfileType.PUBLIC, now=NOW)

        assert [p.invite_id for p in result.pending_payments] == [newer.id, older.id]
        assert [p.invite_id for p in result.oldest_first()] == [older.id, newer.id]


class TestSelectSettledItems:
    """Tests for select_settled_items."""

    def test_settles_oldest_fee_items_fully_covered(self):
        """Fees 20 (older) and 30 (newer) with 25 settled: only the 20 is paid."""
        older = _cancelled("40", "20", NOW - timedelta(days=2))
        newer = _cancelled("60", "30", NOW - timedelta(days=1))
        result = reconcile([older, newer], [], ProfileType.PUBLIC, now=NOW)

        settled = select_settled_items(result.pending_payments, Decimal("25"))

        assert [item.invite_id for item in settled] == [older.id]

    def test_stops_at_first_uncovered_item(self):
        """A cheaper later item is not paid before an uncovered older one."""
        oldest = _cancelled("60", "30", NOW - timedelta(days=3))
        later = _cancelled("10", "5", NOW - timedelta(days=1))
        result = reconcile([oldest, later], [], ProfileType.PUBLIC, now=NOW)

        assert select_settled_items(result.pending_payments, Decimal("20")) == []

    def test_incentive_items_are_never_settled(self):
        finished = _invite(price=Decimal("10"), status=InviteStatus.FINISHED)
        result = reconcile([finished], [], ProfileType.PUBLIC, now=NOW)

        assert select_settled_items(result.pending_payments, Decimal("100")) == []


class TestQuotePayment:
    """Tests for quote_payment."""

    def test_quote_folds_pending_fees_into_total(self):
        invite = _invite(price=Decimal("50"), incentive_amount=Decimal("50"))

        quote = quote_payment(invite, Decimal("15"))

        assert quote.platform_fee == Decimal("2.50")
        assert quote.net_amount_to_pal == Decimal("47.50")
        assert quote.pending_fees_included == Decimal("15.00")
        assert quote.total_paid_amount == Decimal("65.00")

    def test_incentive_falls_back_to_price(self):
        quote = quote_payment(_invite(price=Decimal("20")), Decimal("0"))

        assert quote.incentive == Decimal("20.00")
        assert quote.net_amount_to_pal == Decimal("19.00")


class _FailingInviteRepository(InviteRepository):
    """Invite repository whose reads always fail."""

    async def find_by_id(self, invite_id):
        raise RuntimeError("database unavailable")

    async def find_by_sender(self, user_id, status=None):
        raise RuntimeError("database unavailable")

    async def find_by_recipient(self, user_id, status=None):
        raise RuntimeError("database unavailable")

    async def save(self, invite):
        raise RuntimeError("database unavailable")


class TestReconciliationService:
    """Tests for ReconciliationService."""

    @pytest.mark.asyncio
    async def test_unknown_user_fails(self, unit_env):
        service = await unit_env.get(ReconciliationService)

        with pytest.raises(NotFoundError):
            await service.reconcile_user(UserId(uuid4()))

    @pytest.mark.asyncio
    async def test_failed_load_falls_back_to_cached_balance(self, unit_env):
        """Reconciliation never raises on a failed load; it degrades."""
        # Arrange
        user_repo = await unit_env.get(UserRepository)
        service = await unit_env.get(ReconciliationService)
        user = make_user("owes").model_copy(
            update={"pending_balance": Decimal("12.00")}
        )
        await user_repo.save(user)
        degraded_service = ReconciliationService(
            _FailingInviteRepository(), user_repo, service.fees
        )

        # Act
        result = await degraded_service.reconcile_user(user.id)

        # Assert
        assert result.degraded is True
        assert result.total_owed == Decimal("12.00")
        assert result.pending_payments == []

    @pytest.mark.asyncio
    async def test_preview_adds_outstanding_to_price(self, unit_env):
        user_repo = await unit_env.get(UserRepository)
        invite_repo = await unit_env.get(InviteRepository)
        service = await unit_env.get(ReconciliationService)
        user = await user_repo.save(make_user("sender"))
        await invite_repo.save(_cancelled("30", "15", NOW, sender=user.id))

        preview = await service.preview_invite_cost(user.id, Decimal("50"))

        assert preview.price == Decimal("50.00")
        assert preview.outstanding.total_owed == Decimal("15.00")
        assert preview.total_with_outstanding == Decimal("65.00")
