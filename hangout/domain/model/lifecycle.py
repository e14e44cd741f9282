"""Invite lifecycle transition table.

Every legal move is a row keyed by (current status, action). A row names
the target status and the roles allowed to trigger it. Anything not in the
table is rejected.
"""

from dataclasses import dataclass

from hangout.domain.error import InvalidTransitionError, NotAuthorizedError
from hangout.domain.model.invite import Invite
from hangout.domain.value import InviteAction, InviteRole, InviteStatus, UserId

SENDER_ONLY = frozenset({InviteRole.SENDER})
RECIPIENT_ONLY = frozenset({InviteRole.RECIPIENT})
EITHER_PARTY = frozenset({InviteRole.SENDER, InviteRole.RECIPIENT})


@dataclass(frozen=True)
class Transition:
    """One row of the transition table."""

    source: InviteStatus
    action: InviteAction
    target: InviteStatus
    roles: frozenset[InviteRole]


TRANSITIONS: dict[tuple[InviteStatus, InviteAction], Transition] = {
    (t.source, t.action): t
    for t in (
        Transition(
            InviteStatus.PENDING,
            InviteAction.ACCEPT,
            InviteStatus.ACCEPTED,
            RECIPIENT_ONLY,
        ),
        Transition(
            InviteStatus.PENDING,
            InviteAction.DECLINE,
            InviteStatus.DECLINED,
            RECIPIENT_ONLY,
        ),
        Transition(
            InviteStatus.PENDING,
            InviteAction.CANCEL,
            InviteStatus.CANCELLED,
            SENDER_ONLY,
        ),
        Transition(
            InviteStatus.ACCEPTED,
            InviteAction.CANCEL,
            InviteStatus.CANCELLED,
            SENDER_ONLY,
        ),
        Transition(
            InviteStatus.ACCEPTED,
            InviteAction.START,
            InviteStatus.IN_PROGRESS,
            EITHER_PARTY,
        ),
        Transition(
            InviteStatus.IN_PROGRESS,
            InviteAction.FINISH,
            InviteStatus.FINISHED,
            EITHER_PARTY,
        ),
        Transition(
            InviteStatus.FINISHED,
            InviteAction.MARK_PAYMENT_DONE,
            InviteStatus.PAYMENT_DONE,
            SENDER_ONLY,
        ),
        Transition(
            InviteStatus.FINISHED,
            InviteAction.CONFIRM_PAYMENT,
            InviteStatus.COMPLETED,
            RECIPIENT_ONLY,
        ),
        Transition(
            InviteStatus.PAYMENT_DONE,
            InviteAction.CONFIRM_PAYMENT,
            InviteStatus.COMPLETED,
            RECIPIENT_ONLY,
        ),
    )
}


def resolve_transition(
    invite: Invite, action: InviteAction, actor_id: UserId
) -> Transition:
    """Look up the transition an actor may apply to an invite.

    Role is checked first so outsiders learn nothing about invite state.

    Args:
        invite: Invite in its current state
        action: Requested action
        actor_id: User requesting the action

    Returns:
        The matching transition

    Raises:
        NotAuthorizedError: If the actor is not a participant or their role
            may not perform the action
        InvalidTransitionError: If the action is not legal from the current status
    """
    role = invite.role_of(actor_id)
    if role is None:
        raise NotAuthorizedError("invite", str(invite.id), str(actor_id), action.value)

    allowed_roles = {
        t.roles for (_, a), t in TRANSITIONS.items() if a == action
    }
    if not any(role in roles for roles in allowed_roles):
        raise NotAuthorizedError("invite", str(invite.id), str(actor_id), action.value)

    transition = TRANSITIONS.get((invite.status, action))
    if transition is None:
        raise InvalidTransitionError(str(invite.id), invite.status.value, action.value)
    if role not in transition.roles:
        raise NotAuthorizedError("invite", str(invite.id), str(actor_id), action.value)
    return transition


def available_actions(invite: Invite, actor_id: UserId) -> list[InviteAction]:
    """Actions the user may currently take on the invite."""
    role = invite.role_of(actor_id)
    if role is None:
        return []
    return [
        t.action
        for (source, _), t in TRANSITIONS.items()
        if source == invite.status and role in t.roles
    ]
