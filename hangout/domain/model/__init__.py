"""Domain model entities for Hangout."""

from hangout.domain.model.invite import (
    Invite,
    InviteDetails,
    OutstandingFeesBreakdown,
    build_invite_details,
)
from hangout.domain.model.ledger import LedgerEntry
from hangout.domain.model.message import Message
from hangout.domain.model.user import User

__all__ = [
    "User",
    "Invite",
    "InviteDetails",
    "OutstandingFeesBreakdown",
    "LedgerEntry",
    "Message",
    "build_invite_details",
]
