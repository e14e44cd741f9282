"""Domain services."""

from .balance_service import BalanceService
from .base import Service
from .invite_service import InviteService
from .jwt_service import JWTService
from .message_service import MessageService
from .reconciliation import (
    InviteCostPreview,
    PaymentQuote,
    PendingPayment,
    Reconciliation,
    ReconciliationService,
)
from .user_service import UserService

__all__ = [
    "BalanceService",
    "InviteCostPreview",
    "InviteService",
    "JWTService",
    "MessageService",
    "PaymentQuote",
    "PendingPayment",
    "Reconciliation",
    "ReconciliationService",
    "Service",
    "UserService",
]
