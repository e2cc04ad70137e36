"""
CRM - Performance snapshot of an agent for a period
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel


class PerformancePeriod(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class PerformanceCreate(BaseModel):
    userID: Optional[str] = None
    totalSales: float = 0
    totalRevenue: float = 0
    targetAchievement: float = 0
    conversionRate: float = 0
    period: PerformancePeriod = PerformancePeriod.DAILY


class PerformanceUpdate(BaseModel):
    totalSales: Optional[float] = None
    totalRevenue: Optional[float] = None
    targetAchievement: Optional[float] = None
    conversionRate: Optional[float] = None
    period: Optional[PerformancePeriod] = None
