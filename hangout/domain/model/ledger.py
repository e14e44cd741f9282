"""Balance ledger entry.

Append-only record of one balance movement caused by one invite. A user's
pending balance and total earnings are folds over their entries.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from hangout.domain.model.common import DomainModel
from hangout.domain.value import InviteId, LedgerEntryId, LedgerEntryType, UserId


class LedgerEntry(DomainModel):
    """Ledger entry.

    At most one entry exists per (invite, entry type, user), which makes each
    lifecycle side effect idempotent.
    """

    id: LedgerEntryId
    user_id: UserId
    invite_id: InviteId
    entry_type: LedgerEntryType
    amount: Decimal = Field(ge=0)
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def key(self) -> tuple[InviteId, LedgerEntryType, UserId]:
        return (self.invite_id, self.entry_type, self.user_id)
