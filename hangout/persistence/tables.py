"""SQLAlchemy table definitions for Hangout.

These table definitions are used with SQLAlchemy Core and the mappers in
``hangout.persistence.mappers``. They match the schema defined in Alembic
migrations.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    ForeignKey,
    Index,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

MONEY = Numeric(12, 2)

# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("username", String(30), nullable=True),
    Column("email", String(255), nullable=True),
    Column("profile_type", String(20), nullable=False, server_default="public"),
    Column("country", String(100), nullable=True),
    Column("city", String(100), nullable=True),
    Column("favorites", ARRAY(UUID), nullable=False, server_default="{}"),
    # Cache of the ledger folds; see ledger_entries
    Column("pending_balance", MONEY, nullable=False, server_default="0"),
    Column("total_earnings", MONEY, nullable=False, server_default="0"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint("pending_balance >= 0", name="check_pending_balance"),
    CheckConstraint(
        "profile_type IN ('public', 'private')", name="check_profile_type"
    ),
)

Index("idx_users_username", users_table.c.username, unique=True)

# ============================================================================
# INVITES TABLE
# ============================================================================
invites_table = Table(
    "invites",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("from_user_id", UUID, ForeignKey("users.id"), nullable=False),
    Column("to_user_id", UUID, ForeignKey("users.id"), nullable=False),
    Column("from_username", String(30), nullable=True),
    Column("to_username", String(30), nullable=True),
    Column("title", String(300), nullable=False),
    Column("description", Text, nullable=False, server_default=""),
    Column("meeting_location", Text, nullable=False, server_default=""),
    Column("start_date", Date, nullable=True),
    Column("start_time", String(8), nullable=True),
    Column("end_date", Date, nullable=True),
    Column("end_time", String(8), nullable=True),
    # Money
    Column("price", MONEY, nullable=True),
    Column("incentive_amount", MONEY, nullable=True),
    Column("cancellation_fee", MONEY, nullable=True),
    Column("pal_compensation", MONEY, nullable=True),
    Column("platform_fee", MONEY, nullable=True),
    Column("net_amount_to_pal", MONEY, nullable=True),
    Column("total_paid_amount", MONEY, nullable=True),
    Column("pending_fees_included", MONEY, nullable=True),
    Column("outstanding_fees_breakdown", JSONB, nullable=True),
    Column("status", String(20), nullable=False, server_default="pending"),
    # Transition timestamps
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("responded_at", TIMESTAMP(timezone=True), nullable=True),
    Column("accepted_at", TIMESTAMP(timezone=True), nullable=True),
    Column("declined_at", TIMESTAMP(timezone=True), nullable=True),
    Column("started_at", TIMESTAMP(timezone=True), nullable=True),
    Column("finished_at", TIMESTAMP(timezone=True), nullable=True),
    Column("payment_done_at", TIMESTAMP(timezone=True), nullable=True),
    Column("payment_received_at", TIMESTAMP(timezone=True), nullable=True),
    Column("completed_at", TIMESTAMP(timezone=True), nullable=True),
    Column("cancelled_at", TIMESTAMP(timezone=True), nullable=True),
    # Settlement flags
    Column("payment_confirmed", Boolean, nullable=True),
    Column("cancellation_fee_paid", Boolean, nullable=True),
    Column("cancellation_fee_paid_at", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "cancellation_fee_paid_in_invite",
        UUID,
        ForeignKey("invites.id"),
        nullable=True,
    ),
    Column("platform_fee_paid", Boolean, nullable=True),
    Column("platform_fee_paid_at", TIMESTAMP(timezone=True), nullable=True),
    Column("platform_fee_paid_by_pal", Boolean, nullable=True),
    CheckConstraint(
        "status IN ('pending', 'accepted', 'declined', 'in_progress', 'finished', "
        "'payment_done', 'completed', 'cancelled')",
        name="check_invite_status",
    ),
    CheckConstraint("from_user_id <> to_user_id", name="check_not_self_invite"),
)

Index("idx_invites_from_user", invites_table.c.from_user_id)
Index("idx_invites_to_user", invites_table.c.to_user_id)

# ============================================================================
# LEDGER ENTRIES TABLE (append-only)
# ============================================================================
ledger_entries_table = Table(
    "ledger_entries",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("user_id", UUID, ForeignKey("users.id"), nullable=False),
    Column("invite_id", UUID, ForeignKey("invites.id"), nullable=False),
    Column("entry_type", String(40), nullable=False),
    Column("amount", MONEY, nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint(
        "invite_id", "entry_type", "user_id", name="uq_ledger_entry_key"
    ),
    CheckConstraint("amount >= 0", name="check_ledger_amount"),
)

Index("idx_ledger_entries_user", ledger_entries_table.c.user_id)

# ============================================================================
# MESSAGES TABLE
# ============================================================================
messages_table = Table(
    "messages",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "invite_id",
        UUID,
        ForeignKey("invites.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("sender_id", UUID, ForeignKey("users.id"), nullable=False),
    Column("sender_username", String(30), nullable=True),
    Column("text", Text, nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint("length(text) > 0", name="check_message_text"),
)

Index(
    "idx_messages_invite_created",
    messages_table.c.invite_id,
    messages_table.c.created_at,
)
