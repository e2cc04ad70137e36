"""
CRM - Audit log entry
"""

from typing import Optional, Any
from pydantic import BaseModel


class AuditLogCreate(BaseModel):
    action: Optional[str] = None
    entityType: Optional[str] = None
    entityID: Optional[str] = None
    changes: Optional[Any] = None
    ipAddress: Optional[str] = None


def validate_audit_log_create(data: AuditLogCreate) -> Optional[str]:
    if not data.action:
        return "Validation error: action is required"
    if not data.entityType:
        return "Validation error: entityType is required"
    return None
