"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  CRM - Target model                                                          ║
║                                                                              ║
║  RULES:                                                                      ║
║  1. targetAmount > 0                                                         ║
║  2. endDate strictly after startDate                                         ║
║  3. status: in_progress -> completed | failed, both terminal                 ║
║  4. status is set by the caller, never derived from achieved                 ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

from enum import Enum
from typing import Optional, Dict, List
from datetime import datetime
from pydantic import BaseModel

from crm_backend.config import to_utc


class TargetPeriod(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class TargetStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


TARGET_PERIODS = [p.value for p in TargetPeriod]
TARGET_STATUSES = [s.value for s in TargetStatus]

VALID_TARGET_TRANSITIONS: Dict[str, List[str]] = {
    TargetStatus.IN_PROGRESS.value: [TargetStatus.COMPLETED.value, TargetStatus.FAILED.value],
    TargetStatus.COMPLETED.value: [],
    TargetStatus.FAILED.value: [],
}


class TargetCreate(BaseModel):
    userID: Optional[str] = None
    targetAmount: Optional[float] = None
    period: Optional[str] = None
    startDate: Optional[datetime] = None
    endDate: Optional[datetime] = None
    achieved: float = 0
    status: Optional[str] = TargetStatus.IN_PROGRESS.value


class TargetUpdate(BaseModel):
    targetAmount: Optional[float] = None
    period: Optional[TargetPeriod] = None
    startDate: Optional[datetime] = None
    endDate: Optional[datetime] = None
    achieved: Optional[float] = None
    status: Optional[TargetStatus] = None


def validate_target_create(data: TargetCreate) -> Optional[str]:
    """Checked in this order, first failure wins."""
    if not data.targetAmount or data.targetAmount <= 0:
        return "Validation error: targetAmount must be a positive number"
    if data.period not in TARGET_PERIODS:
        return "Validation error: period is required (monthly, quarterly, or yearly)"
    if not data.startDate:
        return "Validation error: startDate is required"
    if not data.endDate:
        return "Validation error: endDate is required"
    if not is_date_order_valid(data.startDate, data.endDate):
        return "Validation error: endDate must be after startDate"
    if data.status not in TARGET_STATUSES:
        return "Validation error: status must be in_progress, completed, or failed"
    return None


def is_date_order_valid(start: Optional[datetime], end: Optional[datetime]) -> bool:
    if start is None or end is None:
        return False
    return to_utc(end) > to_utc(start)


def validate_target_transition(current: str, new: str) -> Optional[str]:
    if current == new:
        return None
    if new not in VALID_TARGET_TRANSITIONS.get(current, []):
        return f"Validation error: target status cannot change from {current} to {new}"
    return None
