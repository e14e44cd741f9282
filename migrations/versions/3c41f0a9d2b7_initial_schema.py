"""initial_schema

Create the Hangout schema:
- Users (profile plus cached balances)
- Invites (lifecycle status, money snapshot, settlement flags)
- Ledger entries (append-only, one row per invite/type/user)
- Messages (per-invite chat threads)

Revision ID: 3c41f0a9d2b7
Revises:
Create Date: 2026-10-19 10:12:41.318204

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c41f0a9d2b7"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MONEY = sa.Numeric(12, 2)


def _timestamp(name: str, nullable: bool = True) -> sa.Column:
    if nullable:
        return sa.Column(name, postgresql.TIMESTAMP(timezone=True), nullable=True)
    return sa.Column(
        name,
        postgresql.TIMESTAMP(timezone=True),
        nullable=False,
        server_default=sa.text("NOW()"),
    )


def upgrade() -> None:
    """Upgrade schema."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    op.create_table(
        "users",
        sa.Column(
            "id",
            postgresql.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("username", sa.String(length=30), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column(
            "profile_type",
            sa.String(length=20),
            server_default="public",
            nullable=False,
        ),
        sa.Column("country", sa.String(length=100), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column(
            "favorites",
            postgresql.ARRAY(postgresql.UUID()),
            server_default="{}",
            nullable=False,
        ),
        sa.Column("pending_balance", MONEY, server_default="0", nullable=False),
        sa.Column("total_earnings", MONEY, server_default="0", nullable=False),
        _timestamp("created_at", nullable=False),
        _timestamp("updated_at", nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("pending_balance >= 0", name="check_pending_balance"),
        sa.CheckConstraint(
            "profile_type IN ('public', 'private')", name="check_profile_type"
        ),
    )
    op.create_index("idx_users_username", "users", ["username"], unique=True)

    op.create_table(
        "invites",
        sa.Column(
            "id",
            postgresql.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("from_user_id", postgresql.UUID(), nullable=False),
        sa.Column("to_user_id", postgresql.UUID(), nullable=False),
        sa.Column("from_username", sa.String(length=30), nullable=True),
        sa.Column("to_username", sa.String(length=30), nullable=True),
        sa.Column("title", sa.String(length=300), nullable=False),
        sa.Column("description", sa.Text(), server_default="", nullable=False),
        sa.Column("meeting_location", sa.Text(), server_default="", nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("start_time", sa.String(length=8), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("end_time", sa.String(length=8), nullable=True),
        sa.Column("price", MONEY, nullable=True),
        sa.Column("incentive_amount", MONEY, nullable=True),
        sa.Column("cancellation_fee", MONEY, nullable=True),
        sa.Column("pal_compensation", MONEY, nullable=True),
        sa.Column("platform_fee", MONEY, nullable=True),
        sa.Column("net_amount_to_pal", MONEY, nullable=True),
        sa.Column("total_paid_amount", MONEY, nullable=True),
        sa.Column("pending_fees_included", MONEY, nullable=True),
        sa.Column(
            "outstanding_fees_breakdown",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=True,
        ),
        sa.Column(
            "status", sa.String(length=20), server_default="pending", nullable=False
        ),
        _timestamp("created_at", nullable=False),
        _timestamp("responded_at"),
        _timestamp("accepted_at"),
        _timestamp("declined_at"),
        _timestamp("started_at"),
        _timestamp("finished_at"),
        _timestamp("payment_done_at"),
        _timestamp("payment_received_at"),
        _timestamp("completed_at"),
        _timestamp("cancelled_at"),
        sa.Column("payment_confirmed", sa.Boolean(), nullable=True),
        sa.Column("cancellation_fee_paid", sa.Boolean(), nullable=True),
        _timestamp("cancellation_fee_paid_at"),
        sa.Column(
            "cancellation_fee_paid_in_invite", postgresql.UUID(), nullable=True
        ),
        sa.Column("platform_fee_paid", sa.Boolean(), nullable=True),
        _timestamp("platform_fee_paid_at"),
        sa.Column("platform_fee_paid_by_pal", sa.Boolean(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["from_user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["to_user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["cancellation_fee_paid_in_invite"], ["invites.id"]),
        sa.CheckConstraint(
            "status IN ('pending', 'accepted', 'declined', 'in_progress', "
            "'finished', 'payment_done', 'completed', 'cancelled')",
            name="check_invite_status",
        ),
        sa.CheckConstraint("from_user_id <> to_user_id", name="check_not_self_invite"),
    )
    op.create_index("idx_invites_from_user", "invites", ["from_user_id"])
    op.create_index("idx_invites_to_user", "invites", ["to_user_id"])

    op.create_table(
        "ledger_entries",
        sa.Column(
            "id",
            postgresql.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("user_id", postgresql.UUID(), nullable=False),
        sa.Column("invite_id", postgresql.UUID(), nullable=False),
        sa.Column("entry_type", sa.String(length=40), nullable=False),
        sa.Column("amount", MONEY, nullable=False),
        _timestamp("created_at", nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["invite_id"], ["invites.id"]),
        sa.UniqueConstraint(
            "invite_id", "entry_type", "user_id", name="uq_ledger_entry_key"
        ),
        sa.CheckConstraint("amount >= 0", name="check_ledger_amount"),
    )
    op.create_index("idx_ledger_entries_user", "ledger_entries", ["user_id"])

    op.create_table(
        "messages",
        sa.Column(
            "id",
            postgresql.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("invite_id", postgresql.UUID(), nullable=False),
        sa.Column("sender_id", postgresql.UUID(), nullable=False),
        sa.Column("sender_username", sa.String(length=30), nullable=True),
        sa.Column("text", sa.Text(), nullable=False),
        _timestamp("created_at", nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["invite_id"], ["invites.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["sender_id"], ["users.id"]),
        sa.CheckConstraint("length(text) > 0", name="check_message_text"),
    )
    op.create_index(
        "idx_messages_invite_created", "messages", ["invite_id", "created_at"]
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_messages_invite_created", table_name="messages")
    op.drop_table("messages")
    op.drop_index("idx_ledger_entries_user", table_name="ledger_entries")
    op.drop_table("ledger_entries")
    op.drop_index("idx_invites_to_user", table_name="invites")
    op.drop_index("idx_invites_from_user", table_name="invites")
    op.drop_table("invites")
    op.drop_index("idx_users_username", table_name="users")
    op.drop_table("users")
