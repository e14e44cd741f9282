"""Unit tests for the invite lifecycle transition table."""

from itertools import product
from uuid import uuid4

import pytest

from hangout.domain.error import InvalidTransitionError, NotAuthorizedError
from hangout.domain.model import Invite
from hangout.domain.model.lifecycle import available_actions, resolve_transition
from hangout.domain.value import (
    InviteAction,
    InviteId,
    InviteRole,
    InviteStatus,
    UserId,
)

SENDER = UserId(uuid4())
RECIPIENT = UserId(uuid4())
OUTSIDER = UserId(uuid4())

ACTORS = {InviteRole.SENDER: SENDER, InviteRole.RECIPIENT: RECIPIENT}

# (source, action) -> (target, roles allowed)
LEGAL = {
    (InviteStatus.PENDING, InviteAction.ACCEPT): (
        InviteStatus.ACCEPTED,
        {InviteRole.RECIPIENT},
    ),
    (InviteStatus.PENDING, InviteAction.DECLINE): (
        InviteStatus.DECLINED,
        {InviteRole.RECIPIENT},
    ),
    (InviteStatus.PENDING, InviteAction.CANCEL): (
        InviteStatus.CANCELLED,
        {InviteRole.SENDER},
    ),
    (InviteStatus.ACCEPTED, InviteAction.CANCEL): (
        InviteStatus.CANCELLED,
        {InviteRole.SENDER},
    ),
    (InviteStatus.ACCEPTED, InviteAction.START): (
        InviteStatus.IN_PROGRESS,
        {InviteRole.SENDER, InviteRole.RECIPIENT},
    ),
    (InviteStatus.IN_PROGRESS, InviteAction.FINISH): (
        InviteStatus.FINISHED,
        {InviteRole.SENDER, InviteRole.RECIPIENT},
    ),
    (InviteStatus.FINISHED, InviteAction.MARK_PAYMENT_DONE): (
        InviteStatus.PAYMENT_DONE,
        {InviteRole.SENDER},
    ),
    (InviteStatus.FINISHED, InviteAction.CONFIRM_PAYMENT): (
        InviteStatus.COMPLETED,
        {InviteRole.RECIPIENT},
    ),
    (InviteStatus.PAYMENT_DONE, InviteAction.CONFIRM_PAYMENT): (
        InviteStatus.COMPLETED,
        {InviteRole.RECIPIENT},
    ),
}


def _invite(status: InviteStatus) -> Invite:
    return Invite(
        id=InviteId(uuid4()),
        from_user_id=SENDER,
        to_user_id=RECIPIENT,
        title="Coffee",
        status=status,
    )


class TestResolveTransition:
    """Tests for resolve_transition over the full status/action/role grid."""

    @pytest.mark.parametrize(
        "status,action,role", list(product(InviteStatus, InviteAction, InviteRole))
    )
    def test_grid(self, status, action, role):
        """Only rows of the table succeed, and only for their roles."""
        invite = _invite(status)
        legal = LEGAL.get((status, action))

        if legal is not None and role in legal[1]:
            transition = resolve_transition(invite, action, ACTORS[role])
            assert transition.target == legal[0]
        else:
            with pytest.raises((InvalidTransitionError, NotAuthorizedError)):
                resolve_transition(invite, action, ACTORS[role])

    def test_wrong_role_is_not_authorized(self):
        """Sender accepting their own invite is an authorization error."""
        with pytest.raises(NotAuthorizedError):
            resolve_transition(
                _invite(InviteStatus.PENDING), InviteAction.ACCEPT, SENDER
            )

    def test_illegal_move_is_invalid_transition(self):
        """Recipient accepting twice is a state error, not an auth error."""
        with pytest.raises(InvalidTransitionError) as exc_info:
            resolve_transition(
                _invite(InviteStatus.ACCEPTED), InviteAction.ACCEPT, RECIPIENT
            )
        assert exc_info.value.status == "accepted"
        assert exc_info.value.action == "accept"

    @pytest.mark.parametrize("action", list(InviteAction))
    def test_outsider_is_always_rejected(self, action):
        """Non-participants cannot trigger any action."""
        for status in InviteStatus:
            with pytest.raises(NotAuthorizedError):
                resolve_transition(_invite(status), action, OUTSIDER)

    @pytest.mark.parametrize(
        "status",
        [InviteStatus.DECLINED, InviteStatus.CANCELLED, InviteStatus.COMPLETED],
    )
    def test_terminal_status_has_no_actions(self, status):
        """Terminal invites accept no further lifecycle actions."""
        assert status.is_terminal
        invite = _invite(status)
        assert available_actions(invite, SENDER) == []
        assert available_actions(invite, RECIPIENT) == []


class TestAvailableActions:
    """Tests for available_actions."""

    def test_pending_recipient_can_accept_or_decline(self):
        invite = _invite(InviteStatus.PENDING)
        assert set(available_actions(invite, RECIPIENT)) == {
            InviteAction.ACCEPT,
            InviteAction.DECLINE,
        }

    def test_pending_sender_can_only_cancel(self):
        invite = _invite(InviteStatus.PENDING)
        assert available_actions(invite, SENDER) == [InviteAction.CANCEL]

    def test_finished_actions_split_by_role(self):
        invite = _invite(InviteStatus.FINISHED)
        assert available_actions(invite, SENDER) == [InviteAction.MARK_PAYMENT_DONE]
        assert available_actions(invite, RECIPIENT) == [InviteAction.CONFIRM_PAYMENT]

    def test_outsider_has_no_actions(self):
        assert available_actions(_invite(InviteStatus.ACCEPTED), OUTSIDER) == []
