"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.

Invite rows written before a field existed come back with NULLs; the
invite mapper fills in the defaults the domain expects.
"""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from hangout.domain.model import (
    Invite,
    LedgerEntry,
    Message,
    OutstandingFeesBreakdown,
    User,
)
from hangout.domain.value import (
    InviteId,
    InviteStatus,
    LedgerEntryId,
    LedgerEntryType,
    MessageId,
    ProfileType,
    UserId,
    Username,
)
from hangout.domain.value.money import money_or_none, to_money

INVITE_TIMESTAMPS = (
    "responded_at",
    "accepted_at",
    "declined_at",
    "started_at",
    "finished_at",
    "payment_done_at",
    "payment_received_at",
    "completed_at",
    "cancelled_at",
    "cancellation_fee_paid_at",
    "platform_fee_paid_at",
)

INVITE_FLAGS = (
    "payment_confirmed",
    "cancellation_fee_paid",
    "platform_fee_paid",
    "platform_fee_paid_by_pal",
)

INVITE_OPTIONAL_MONEY = (
    "cancellation_fee",
    "pal_compensation",
    "platform_fee",
    "net_amount_to_pal",
    "total_paid_amount",
    "pending_fees_included",
)


def _uuid(value: Any) -> Optional[UUID]:
    if value is None:
        return None
    return UUID(value) if isinstance(value, str) else value


def _local(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are compared with naive local ``datetime.now()`` values."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def row_to_user(row: Dict[str, Any]) -> User:
    """Convert database row to User domain model.

    Args:
        row: Database row as dict

    Returns:
        User domain model
    """
    return User(
        id=UserId(_uuid(row["id"])),
        username=Username(row["username"]) if row.get("username") else None,
        email=row.get("email"),
        profile_type=ProfileType(row.get("profile_type") or ProfileType.PUBLIC.value),
        country=row.get("country"),
        city=row.get("city"),
        favorites=[UserId(_uuid(f)) for f in row.get("favorites") or []],
        pending_balance=max(to_money(0), to_money(row.get("pending_balance"))),
        total_earnings=to_money(row.get("total_earnings")),
        created_at=_local(row["created_at"]),
        updated_at=_local(row["updated_at"]),
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to database dict.

    Args:
        user: User domain model

    Returns:
        Dict suitable for database insertion/update
    """
    data = user.model_dump()
    data["username"] = user.username.root if user.username else None
    data["profile_type"] = user.profile_type.value
    return data


def row_to_invite(row: Dict[str, Any]) -> Invite:
    """Convert database row to Invite domain model.

    Missing price reads as 0, a missing incentive falls back to the price,
    missing flags read as False.

    Args:
        row: Database row as dict

    Returns:
        Invite domain model
    """
    price = to_money(row.get("price"))
    incentive = money_or_none(row.get("incentive_amount"))
    breakdown = row.get("outstanding_fees_breakdown")

    data: Dict[str, Any] = {
        "id": InviteId(_uuid(row["id"])),
        "from_user_id": UserId(_uuid(row["from_user_id"])),
        "to_user_id": UserId(_uuid(row["to_user_id"])),
        "from_username": row.get("from_username"),
        "to_username": row.get("to_username"),
        "title": row.get("title") or "",
        "description": row.get("description") or "",
        "meeting_location": row.get("meeting_location") or "",
        "start_date": row.get("start_date"),
        "start_time": row.get("start_time"),
        "end_date": row.get("end_date"),
        "end_time": row.get("end_time"),
        "price": price,
        "incentive_amount": incentive if incentive is not None else price,
        "outstanding_fees_breakdown": (
            OutstandingFeesBreakdown(
                **{k: to_money(v) for k, v in breakdown.items()}
            )
            if breakdown
            else None
        ),
        "status": InviteStatus(row.get("status") or InviteStatus.PENDING.value),
        "created_at": _local(row.get("created_at")) or datetime.now(),
        "cancellation_fee_paid_in_invite": (
            InviteId(_uuid(row["cancellation_fee_paid_in_invite"]))
            if row.get("cancellation_fee_paid_in_invite")
            else None
        ),
    }
    for name in INVITE_OPTIONAL_MONEY:
        data[name] = money_or_none(row.get(name))
    for name in INVITE_TIMESTAMPS:
        data[name] = _local(row.get(name))
    for name in INVITE_FLAGS:
        data[name] = bool(row.get(name))
    return Invite(**data)


def invite_to_dict(invite: Invite) -> Dict[str, Any]:
    """Convert Invite domain model to database dict.

    Args:
        invite: Invite domain model

    Returns:
        Dict suitable for database insertion/update
    """
    data = invite.model_dump()
    data["status"] = invite.status.value
    breakdown = invite.outstanding_fees_breakdown
    if breakdown is not None:
        data["outstanding_fees_breakdown"] = breakdown.model_dump(mode="json")
    return data


def row_to_ledger_entry(row: Dict[str, Any]) -> LedgerEntry:
    """Convert database row to LedgerEntry domain model."""
    return LedgerEntry(
        id=LedgerEntryId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        invite_id=InviteId(_uuid(row["invite_id"])),
        entry_type=LedgerEntryType(row["entry_type"]),
        amount=to_money(row["amount"]),
        created_at=_local(row["created_at"]),
    )


def ledger_entry_to_dict(entry: LedgerEntry) -> Dict[str, Any]:
    """Convert LedgerEntry domain model to database dict."""
    data = entry.model_dump()
    data["entry_type"] = entry.entry_type.value
    return data


def row_to_message(row: Dict[str, Any]) -> Message:
    """Convert database row to Message domain model."""
    return Message(
        id=MessageId(_uuid(row["id"])),
        invite_id=InviteId(_uuid(row["invite_id"])),
        sender_id=UserId(_uuid(row["sender_id"])),
        sender_username=row.get("sender_username"),
        text=row["text"],
        created_at=_local(row["created_at"]),
    )


def message_to_dict(message: Message) -> Dict[str, Any]:
    """Convert Message domain model to database dict."""
    return message.model_dump()
