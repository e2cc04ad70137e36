"""
CRM - Sale model

agentID is the authenticated caller at creation and never changes afterwards.
"""

from enum import Enum
from typing import Optional
from datetime import datetime
from pydantic import BaseModel


class SaleStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


SALE_STATUSES = [s.value for s in SaleStatus]


class SaleCreate(BaseModel):
    customerID: Optional[str] = None
    amount: Optional[float] = None
    status: Optional[str] = SaleStatus.PENDING.value
    description: Optional[str] = None
    date: Optional[datetime] = None


class SaleUpdate(BaseModel):
    amount: Optional[float] = None
    status: Optional[SaleStatus] = None
    description: Optional[str] = None
    date: Optional[datetime] = None


class SaleResponse(BaseModel):
    id: str
    agentID: str
    customerID: str
    amount: float
    status: SaleStatus = SaleStatus.PENDING
    description: Optional[str] = None
    date: str = ""
    createdAt: str = ""


def validate_sale_create(data: SaleCreate) -> Optional[str]:
    if not data.customerID:
        return "Validation error: customerID is required"
    if not data.amount or data.amount <= 0:
        return "Validation error: amount must be a positive number"
    if data.status not in SALE_STATUSES:
        return "Validation error: status must be pending, completed, or cancelled"
    return None
