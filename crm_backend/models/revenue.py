"""
CRM - Revenue model

Reporting record booked against a sale. Not authoritative over the sale.
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel


class RevenueCreate(BaseModel):
    saleID: Optional[str] = None
    amount: Optional[float] = None
    source: Optional[str] = None
    category: Optional[str] = None
    date: Optional[datetime] = None


class RevenueUpdate(BaseModel):
    amount: Optional[float] = None
    source: Optional[str] = None
    category: Optional[str] = None


def validate_revenue_create(data: RevenueCreate) -> Optional[str]:
    if not data.saleID:
        return "Validation error: saleID is required"
    if not data.amount or data.amount <= 0:
        return "Validation error: amount must be a positive number"
    if not data.source or not data.source.strip():
        return "Validation error: source is required"
    return None
