"""Unit tests for InviteService."""

from decimal import Decimal
from uuid import uuid4

import pytest

from hangout.domain.error import (
    BusinessRuleViolationError,
    InvalidTransitionError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from hangout.domain.repository import (
    InviteRepository,
    LedgerRepository,
    UserRepository,
)
from hangout.domain.service import (
    BalanceService,
    InviteService,
    ReconciliationService,
)
from hangout.domain.value import (
    InviteRole,
    InviteStatus,
    LedgerEntryType,
    ProfileType,
    UserId,
)
from tests.harness import create_env_fixture, make_details, make_user

# Unit test fixture - everything mocked, no database needed
unit_env = create_env_fixture()


async def _users(unit_env, profile_type: ProfileType = ProfileType.PUBLIC):
    user_repo = await unit_env.get(UserRepository)
    sender = await user_repo.save(make_user("sender"))
    pal = await user_repo.save(make_user("pal", profile_type=profile_type))
    return sender, pal


async def _finished_invite(invite_service, sender, pal, price="50"):
    invite = await invite_service.create_invite(
        sender.id, pal.id, make_details(price)
    )
    await invite_service.accept(invite.id, pal.id)
    await invite_service.start(invite.id, sender.id)
    return await invite_service.finish(invite.id, pal.id, confirmed=True)


class TestCreateInvite:
    """Tests for create_invite method."""

    @pytest.mark.asyncio
    async def test_create_invite_is_pending_with_incentive(self, unit_env):
        """New invites start pending with the incentive set to the price."""
        # Arrange
        invite_service = await unit_env.get(InviteService)
        sender, pal = await _users(unit_env)

        # Act
        invite = await invite_service.create_invite(
            sender.id, pal.id, make_details("42.5")
        )

        # Assert
        assert invite.status == InviteStatus.PENDING
        assert invite.price == Decimal("42.50")
        assert invite.incentive_amount == Decimal("42.50")
        assert invite.from_username == "sender"
        assert invite.to_username == "pal"
        assert invite.cancellation_fee is None

    @pytest.mark.asyncio
    async def test_create_invite_to_self_fails(self, unit_env):
        invite_service = await unit_env.get(InviteService)
        sender, _ = await _users(unit_env)

        with pytest.raises(ValidationError):
            await invite_service.create_invite(sender.id, sender.id, make_details())

    @pytest.mark.asyncio
    async def test_create_invite_to_unknown_user_fails(self, unit_env):
        invite_service = await unit_env.get(InviteService)
        sender, _ = await _users(unit_env)

        with pytest.raises(NotFoundError):
            await invite_service.create_invite(
                sender.id, UserId(uuid4()), make_details()
            )


class TestUpdateInvite:
    """Tests for update_invite method."""

    @pytest.mark.asyncio
    async def test_sender_edits_pending_invite(self, unit_env):
        invite_service = await unit_env.get(InviteService)
        sender, pal = await _users(unit_env)
        invite = await invite_service.create_invite(sender.id, pal.id, make_details())

        updated = await invite_service.update_invite(
            invite.id, sender.id, make_details("80", title="Dinner")
        )

        assert updated.title == "Dinner"
        assert updated.price == Decimal("80.00")
        assert updated.incentive_amount == Decimal("80.00")

    @pytest.mark.asyncio
    async def test_recipient_cannot_edit(self, unit_env):
        invite_service = await unit_env.get(InviteService)
        sender, pal = await _users(unit_env)
        invite = await invite_service.create_invite(sender.id, pal.id, make_details())

        with pytest.raises(NotAuthorizedError):
            await invite_service.update_invite(invite.id, pal.id, make_details("80"))

    @pytest.mark.asyncio
    async def test_accepted_invite_cannot_be_edited(self, unit_env):
        invite_service = await unit_env.get(InviteService)
        sender, pal = await _users(unit_env)
        invite = await invite_service.create_invite(sender.id, pal.id, make_details())
        await invite_service.accept(invite.id, pal.id)

        with pytest.raises(InvalidTransitionError):
            await invite_service.update_invite(
                invite.id, sender.id, make_details("80")
            )


class TestCancel:
    """Tests for cancel method."""

    @pytest.mark.asyncio
    async def test_cancel_pending_is_free(self, unit_env):
        """Cancelling before acceptance charges nothing."""
        invite_service = await unit_env.get(InviteService)
        ledger_repo = await unit_env.get(LedgerRepository)
        sender, pal = await _users(unit_env)
        invite = await invite_service.create_invite(sender.id, pal.id, make_details())

        cancelled = await invite_service.cancel(invite.id, sender.id)

        assert cancelled.status == InviteStatus.CANCELLED
        assert cancelled.cancelled_at is not None
        assert cancelled.cancellation_fee is None
        assert await ledger_repo.find_by_user(sender.id) == []
        assert await ledger_repo.find_by_user(pal.id) == []

    @pytest.mark.asyncio
    async def test_cancel_accepted_charges_fee_and_compensates_pal(self, unit_env):
        """Price 100: fee 50 to sender, pal compensated 30 less 1.50 platform fee."""
        # Arrange
        invite_service = await unit_env.get(InviteService)
        user_repo = await unit_env.get(UserRepository)
        sender, pal = await _users(unit_env)
        invite = await invite_service.create_invite(
            sender.id, pal.id, make_details("100")
        )
        await invite_service.accept(invite.id, pal.id)

        # Act
        cancelled = await invite_service.cancel(invite.id, sender.id)

        # Assert
        assert cancelled.cancellation_fee == Decimal("50.00")
        assert cancelled.pal_compensation == Decimal("30.00")
        assert cancelled.platform_fee == Decimal("1.50")

        sender_after = await user_repo.find_by_id(sender.id)
        pal_after = await user_repo.find_by_id(pal.id)
        assert sender_after.pending_balance == Decimal("50.00")
        assert pal_after.total_earnings == Decimal("28.50")
        assert pal_after.pending_balance == Decimal("1.50")

    @pytest.mark.asyncio
    async def test_cancel_accepted_private_pal_owes_no_platform_fee(self, unit_env):
        """A private pal keeps the full 30 compensation and owes nothing."""
        invite_service = await unit_env.get(InviteService)
        user_repo = await unit_env.get(UserRepository)
        sender, pal = await _users(unit_env, ProfileType.PRIVATE)
        invite = await invite_service.create_invite(
            sender.id, pal.id, make_details("100")
        )
        await invite_service.accept(invite.id, pal.id)

        cancelled = await invite_service.cancel(invite.id, sender.id)

        assert cancelled.platform_fee == Decimal("0.00")
        pal_after = await user_repo.find_by_id(pal.id)
        assert pal_after.total_earnings == Decimal("30.00")
        assert pal_after.pending_balance == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_recipient_cannot_cancel(self, unit_env):
        invite_service = await unit_env.get(InviteService)
        sender, pal = await _users(unit_env)
        invite = await invite_service.create_invite(sender.id, pal.id, make_details())

        with pytest.raises(NotAuthorizedError):
            await invite_service.cancel(invite.id, pal.id)

    @pytest.mark.asyncio
    async def test_cancel_in_progress_fails_without_side_effects(self, unit_env):
        """A rejected transition leaves the invite and balances untouched."""
        invite_service = await unit_env.get(InviteService)
        user_repo = await unit_env.get(UserRepository)
        sender, pal = await _users(unit_env)
        invite = await invite_service.create_invite(sender.id, pal.id, make_details())
        await invite_service.accept(invite.id, pal.id)
        await invite_service.start(invite.id, pal.id)

        with pytest.raises(InvalidTransitionError):
            await invite_service.cancel(invite.id, sender.id)

        stored = await invite_service.get_invite(invite.id)
        assert stored.status == InviteStatus.IN_PROGRESS
        assert (await user_repo.find_by_id(sender.id)).pending_balance == Decimal("0")


class TestFinish:
    """Tests for finish method."""

    @pytest.mark.asyncio
    async def test_finish_requires_confirmation(self, unit_env):
        invite_service = await unit_env.get(InviteService)
        sender, pal = await _users(unit_env)
        invite = await invite_service.create_invite(sender.id, pal.id, make_details())
        await invite_service.accept(invite.id, pal.id)
        await invite_service.start(invite.id, sender.id)

        with pytest.raises(ValidationError):
            await invite_service.finish(invite.id, sender.id)

        stored = await invite_service.get_invite(invite.id)
        assert stored.status == InviteStatus.IN_PROGRESS


class TestPayment:
    """Tests for mark_payment_done and confirm_payment."""

    @pytest.mark.asyncio
    async def test_payment_without_outstanding_fees(self, unit_env):
        """Price 50 with nothing owed: 2.50 platform fee, 47.50 to the pal."""
        # Arrange
        invite_service = await unit_env.get(InviteService)
        user_repo = await unit_env.get(UserRepository)
        sender, pal = await _users(unit_env)
        invite = await _finished_invite(invite_service, sender, pal, "50")

        # Act
        paid = await invite_service.mark_payment_done(invite.id, sender.id)
        completed = await invite_service.confirm_payment(invite.id, pal.id)

        # Assert
        assert paid.status == InviteStatus.PAYMENT_DONE
        assert paid.platform_fee == Decimal("2.50")
        assert paid.net_amount_to_pal == Decimal("47.50")
        assert paid.pending_fees_included == Decimal("0.00")
        assert paid.total_paid_amount == Decimal("50.00")

        assert completed.status == InviteStatus.COMPLETED
        assert completed.payment_confirmed is True
        assert completed.completed_at is not None

        pal_after = await user_repo.find_by_id(pal.id)
        assert pal_after.total_earnings == Decimal("47.50")
        assert pal_after.pending_balance == Decimal("2.50")

    @pytest.mark.asyncio
    async def test_outstanding_cancellation_fee_rolls_into_next_payment(
        self, unit_env
    ):
        """A 15.00 cancellation fee is paid off with the next invite's payment."""
        # Arrange
        invite_service = await unit_env.get(InviteService)
        balance_service = await unit_env.get(BalanceService)
        sender, pal = await _users(unit_env)

        first = await invite_service.create_invite(
            sender.id, pal.id, make_details("30")
        )
        await invite_service.accept(first.id, pal.id)
        await invite_service.cancel(first.id, sender.id)
        assert await balance_service.pending_balance(sender.id) == Decimal("15.00")

        second = await _finished_invite(invite_service, sender, pal, "50")

        # Act
        paid = await invite_service.mark_payment_done(second.id, sender.id)

        # Assert
        assert paid.pending_fees_included == Decimal("15.00")
        assert paid.total_paid_amount == Decimal("65.00")
        assert paid.net_amount_to_pal == Decimal("47.50")
        assert paid.outstanding_fees_breakdown.cancellation_fees == Decimal("15.00")
        assert paid.outstanding_fees_breakdown.incentive_payments == Decimal("0.00")

        assert await balance_service.pending_balance(sender.id) == Decimal("0.00")
        settled = await invite_service.get_invite(first.id)
        assert settled.cancellation_fee_paid is True
        assert settled.cancellation_fee_paid_in_invite == second.id

    @pytest.mark.asyncio
    async def test_payment_refused_while_fee_items_unavailable(
        self, unit_env, monkeypatch
    ):
        """Fees are not settled when the items they would pay off cannot load."""
        invite_service = await unit_env.get(InviteService)
        balance_service = await unit_env.get(BalanceService)
        invite_repo = await unit_env.get(InviteRepository)
        sender, pal = await _users(unit_env)

        first = await invite_service.create_invite(
            sender.id, pal.id, make_details("30")
        )
        await invite_service.accept(first.id, pal.id)
        await invite_service.cancel(first.id, sender.id)
        second = await _finished_invite(invite_service, sender, pal, "50")

        async def unavailable(user_id):
            raise ConnectionError("invite store unavailable")

        monkeypatch.setattr(invite_repo, "find_by_sender", unavailable)

        with pytest.raises(BusinessRuleViolationError):
            await invite_service.mark_payment_done(second.id, sender.id)

        monkeypatch.undo()
        unchanged = await invite_service.get_invite(second.id)
        assert unchanged.status == InviteStatus.FINISHED
        assert unchanged.payment_done_at is None
        assert await balance_service.pending_balance(sender.id) == Decimal("15.00")
        cancelled = await invite_service.get_invite(first.id)
        assert cancelled.cancellation_fee_paid is False

    @pytest.mark.asyncio
    async def test_confirm_without_payment_done_uses_quote(self, unit_env):
        """Pal may confirm straight from finished."""
        invite_service = await unit_env.get(InviteService)
        user_repo = await unit_env.get(UserRepository)
        sender, pal = await _users(unit_env)
        invite = await _finished_invite(invite_service, sender, pal, "20")

        completed = await invite_service.confirm_payment(invite.id, pal.id)

        assert completed.platform_fee == Decimal("1.00")
        assert completed.net_amount_to_pal == Decimal("19.00")
        pal_after = await user_repo.find_by_id(pal.id)
        assert pal_after.total_earnings == Decimal("19.00")

    @pytest.mark.asyncio
    async def test_confirm_twice_does_not_double_credit(self, unit_env):
        """Ledger entries are keyed per invite so a replay records nothing."""
        invite_service = await unit_env.get(InviteService)
        balance_service = await unit_env.get(BalanceService)
        sender, pal = await _users(unit_env)
        invite = await _finished_invite(invite_service, sender, pal, "50")
        await invite_service.confirm_payment(invite.id, pal.id)

        recorded = await balance_service.record(
            pal.id, invite.id, LedgerEntryType.INCENTIVE_EARNING, Decimal("47.50")
        )

        assert recorded is False
        assert await balance_service.total_earnings(pal.id) == Decimal("47.50")

    @pytest.mark.asyncio
    async def test_sender_cannot_confirm_payment(self, unit_env):
        invite_service = await unit_env.get(InviteService)
        sender, pal = await _users(unit_env)
        invite = await _finished_invite(invite_service, sender, pal)

        with pytest.raises(NotAuthorizedError):
            await invite_service.confirm_payment(invite.id, sender.id)

    @pytest.mark.asyncio
    async def test_private_pal_is_never_charged_platform_fee(self, unit_env):
        """Ledger, reconciliation and the next payment agree for private pals."""
        # Arrange
        invite_service = await unit_env.get(InviteService)
        reconciliation_service = await unit_env.get(ReconciliationService)
        balance_service = await unit_env.get(BalanceService)
        sender, pal = await _users(unit_env, ProfileType.PRIVATE)
        invite = await _finished_invite(invite_service, sender, pal, "50")

        # Act
        paid = await invite_service.mark_payment_done(invite.id, sender.id)
        completed = await invite_service.confirm_payment(invite.id, pal.id)

        # Assert
        assert paid.platform_fee == Decimal("0.00")
        assert paid.net_amount_to_pal == Decimal("50.00")
        assert completed.platform_fee == Decimal("0.00")
        assert await balance_service.total_earnings(pal.id) == Decimal("50.00")

        reconciled = await reconciliation_service.reconcile_user(pal.id)
        pending = await balance_service.pending_balance(pal.id)
        assert reconciled.total_owed == Decimal("0.00")
        assert pending == reconciled.total_owed

        # The pal's own next payment carries nothing extra
        preview = await reconciliation_service.preview_invite_cost(
            pal.id, Decimal("10")
        )
        own = await _finished_invite(invite_service, pal, sender, "10")
        own_paid = await invite_service.mark_payment_done(own.id, pal.id)

        assert preview.total_with_outstanding == Decimal("10.00")
        assert own_paid.pending_fees_included == Decimal("0.00")
        assert own_paid.total_paid_amount == preview.total_with_outstanding

    @pytest.mark.asyncio
    async def test_pal_turning_private_before_confirming_is_not_charged(
        self, unit_env
    ):
        invite_service = await unit_env.get(InviteService)
        user_repo = await unit_env.get(UserRepository)
        balance_service = await unit_env.get(BalanceService)
        sender, pal = await _users(unit_env)
        invite = await _finished_invite(invite_service, sender, pal, "50")
        await invite_service.mark_payment_done(invite.id, sender.id)
        now_private = pal.model_copy(update={"profile_type": ProfileType.PRIVATE})
        await user_repo.save(now_private)

        completed = await invite_service.confirm_payment(invite.id, pal.id)

        assert completed.platform_fee == Decimal("0.00")
        assert completed.net_amount_to_pal == Decimal("50.00")
        assert await balance_service.pending_balance(pal.id) == Decimal("0.00")


class TestListInvites:
    """Tests for list_invites method."""

    @pytest.mark.asyncio
    async def test_list_by_role_and_finished_group(self, unit_env):
        invite_service = await unit_env.get(InviteService)
        sender, pal = await _users(unit_env)
        pending = await invite_service.create_invite(
            sender.id, pal.id, make_details()
        )
        finished = await _finished_invite(invite_service, sender, pal)
        await invite_service.mark_payment_done(finished.id, sender.id)

        sent = await invite_service.list_invites(sender.id, role=InviteRole.SENDER)
        received = await invite_service.list_invites(
            sender.id, role=InviteRole.RECIPIENT
        )
        done = await invite_service.list_invites(pal.id, status="finished")

        assert {i.id for i in sent} == {pending.id, finished.id}
        assert received == []
        assert [i.id for i in done] == [finished.id]

    @pytest.mark.asyncio
    async def test_unknown_status_filter_fails(self, unit_env):
        invite_service = await unit_env.get(InviteService)
        sender, _ = await _users(unit_env)

        with pytest.raises(ValidationError):
            await invite_service.list_invites(sender.id, status="archived")

    @pytest.mark.asyncio
    async def test_outsider_cannot_view_invite(self, unit_env):
        invite_service = await unit_env.get(InviteService)
        invite_repo = await unit_env.get(InviteRepository)
        sender, pal = await _users(unit_env)
        invite = await invite_service.create_invite(sender.id, pal.id, make_details())
        assert await invite_repo.find_by_id(invite.id) is not None

        with pytest.raises(NotAuthorizedError):
            await invite_service.get_invite_for_participant(
                invite.id, UserId(uuid4())
            )
