"""
CRM - Routes Audit logs
Entries are immutable: create, read, delete. Reading needs manager or admin.
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request

from crm_backend.config import db
from crm_backend.routes.auth import get_current_user
from crm_backend.models import AuditLogCreate, validate_audit_log_create
from crm_backend.services.activity_logger import log_activity, get_activity_logs
from crm_backend.services.permissions import require_admin, require_manager_or_admin

router = APIRouter(prefix="/auditlogs", tags=["Audit logs"])


@router.post("", status_code=201)
async def create_audit_log(data: AuditLogCreate, request: Request, user: dict = Depends(get_current_user)):
    error = validate_audit_log_create(data)
    if error:
        raise HTTPException(status_code=400, detail=error)

    entry = await log_activity(
        user=user,
        action=data.action,
        entity_type=data.entityType,
        entity_id=data.entityID,
        changes=data.changes,
        ip_address=data.ipAddress or (request.client.host if request.client else None)
    )
    if entry is None:
        raise HTTPException(status_code=500, detail="Audit log could not be recorded")
    return entry


@router.get("")
async def list_audit_logs(
    userID: Optional[str] = None,
    entityType: Optional[str] = None,
    action: Optional[str] = None,
    limit: int = 100,
    skip: int = 0,
    user: dict = Depends(require_manager_or_admin())
):
    return await get_activity_logs(
        user_id=userID,
        entity_type=entityType,
        action=action,
        limit=max(1, min(limit, 1000)),
        skip=max(0, skip)
    )


@router.get("/{log_id}")
async def get_audit_log(log_id: str, user: dict = Depends(require_manager_or_admin())):
    entry = await db.auditlogs.find_one({"id": log_id}, {"_id": 0})
    if not entry:
        raise HTTPException(status_code=404, detail="Audit log not found")
    return entry


@router.delete("/{log_id}")
async def delete_audit_log(log_id: str, user: dict = Depends(require_admin())):
    result = await db.auditlogs.delete_one({"id": log_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Audit log not found")
    return {"message": "Audit log deleted"}
