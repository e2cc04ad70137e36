"""
CRM - Payment model (settlement of a sale)
"""

from enum import Enum
from typing import Optional
from datetime import datetime
from pydantic import BaseModel


class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit_card"
    BANK_TRANSFER = "bank_transfer"
    CASH = "cash"
    CHECK = "check"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


PAYMENT_METHODS = [m.value for m in PaymentMethod]
PAYMENT_STATUSES = [s.value for s in PaymentStatus]


class PaymentCreate(BaseModel):
    saleID: Optional[str] = None
    customerID: Optional[str] = None
    amount: Optional[float] = None
    paymentMethod: Optional[str] = None
    status: Optional[str] = PaymentStatus.PENDING.value
    paymentDate: Optional[datetime] = None


class PaymentUpdate(BaseModel):
    amount: Optional[float] = None
    paymentMethod: Optional[PaymentMethod] = None
    status: Optional[PaymentStatus] = None


def validate_payment_create(data: PaymentCreate) -> Optional[str]:
    if not data.saleID:
        return "Validation error: saleID is required"
    if not data.customerID:
        return "Validation error: customerID is required"
    if not data.amount or data.amount <= 0:
        return "Validation error: amount must be a positive number"
    if data.paymentMethod not in PAYMENT_METHODS:
        return "Validation error: paymentMethod is required (credit_card, bank_transfer, cash, or check)"
    if data.status not in PAYMENT_STATUSES:
        return "Validation error: status must be pending, completed, or failed"
    return None
