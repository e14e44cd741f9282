"""User aggregate root.

Credentials and email verification belong to the external identity
provider; this record holds the profile and the cached balances.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from hangout.domain.model.common import DomainModel
from hangout.domain.value import ProfileType, UserId, Username
from hangout.domain.value.money import ZERO


class User(DomainModel):
    """User profile.

    ``pending_balance`` and ``total_earnings`` are a denormalised cache of the
    balance ledger. The ledger is authoritative.
    """

    id: UserId
    username: Optional[Username] = None
    email: Optional[str] = None
    profile_type: ProfileType = ProfileType.PUBLIC
    country: Optional[str] = None
    city: Optional[str] = None
    favorites: list[UserId] = Field(default_factory=list)
    pending_balance: Decimal = Field(default=ZERO, ge=0)
    total_earnings: Decimal = ZERO
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def display_name(self) -> str:
        return self.username.root if self.username else str(self.id)
