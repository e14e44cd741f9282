"""Money helpers and the fee schedule.

All amounts are ``Decimal`` rounded to cents. Fees are computed from the
incentive with the rates in ``FeeSchedule``.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from pydantic import Field

from hangout.domain.value.common import ValueObject

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Any) -> Decimal:
    """Coerce a stored number to a cent-rounded Decimal.

    None and unparseable values count as zero, matching how older records
    without money fields are read.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value))
        except InvalidOperation:
            return ZERO
    if not amount.is_finite():
        return ZERO
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def money_or_none(value: Any) -> Decimal | None:
    """Like ``to_money`` but keeps absence distinguishable from zero."""
    if value is None:
        return None
    return to_money(value)


class FeeSchedule(ValueObject):
    """Rates applied by the invite lifecycle and the reconciliation engine."""

    platform_fee_rate: Decimal = Field(default=Decimal("0.05"), ge=0, le=1)
    cancellation_fee_rate: Decimal = Field(default=Decimal("0.5"), ge=0, le=1)
    pal_compensation_rate: Decimal = Field(default=Decimal("0.3"), ge=0, le=1)
    balance_tolerance: Decimal = Field(default=CENT, ge=0)

    def platform_fee(self, amount: Decimal) -> Decimal:
        return to_money(amount * self.platform_fee_rate)

    def cancellation_fee(self, price: Decimal) -> Decimal:
        return to_money(price * self.cancellation_fee_rate)

    def pal_compensation(self, price: Decimal) -> Decimal:
        return to_money(price * self.pal_compensation_rate)


DEFAULT_FEES = FeeSchedule()
