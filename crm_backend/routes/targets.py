"""
CRM - Routes Targets

Creation checks run in a fixed order (see validate_target_create).
Status only leaves in_progress, and only when the caller says so.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException

from crm_backend.config import db, now_iso, new_id, to_utc, parse_iso
from crm_backend.routes.auth import get_current_user
from crm_backend.models import (
    TargetCreate,
    TargetUpdate,
    validate_target_create,
    validate_target_transition,
    is_date_order_valid,
)

logger = logging.getLogger("targets")

router = APIRouter(prefix="/targets", tags=["Targets"])


async def _get_or_404(target_id: str) -> dict:
    target = await db.targets.find_one({"id": target_id}, {"_id": 0})
    if not target:
        raise HTTPException(status_code=404, detail="Target not found")
    return target


@router.post("", status_code=201)
async def create_target(data: TargetCreate, user: dict = Depends(get_current_user)):
    error = validate_target_create(data)
    if error:
        raise HTTPException(status_code=400, detail=error)

    target = {
        "id": new_id(),
        "userID": data.userID or user["id"],
        "targetAmount": data.targetAmount,
        "period": data.period,
        "startDate": to_utc(data.startDate).isoformat(),
        "endDate": to_utc(data.endDate).isoformat(),
        "achieved": data.achieved,
        "status": data.status,
        "createdAt": now_iso(),
    }
    await db.targets.insert_one(target)
    target.pop("_id", None)
    return target


@router.get("")
async def list_targets(userID: str = None, status: str = None, user: dict = Depends(get_current_user)):
    query = {}
    if userID:
        query["userID"] = userID
    if status:
        query["status"] = status
    return await db.targets.find(query, {"_id": 0}).sort("startDate", -1).to_list(1000)


@router.get("/{target_id}")
async def get_target(target_id: str, user: dict = Depends(get_current_user)):
    return await _get_or_404(target_id)


@router.put("/{target_id}")
async def update_target(target_id: str, data: TargetUpdate, user: dict = Depends(get_current_user)):
    target = await _get_or_404(target_id)

    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    if "targetAmount" in changes and changes["targetAmount"] <= 0:
        raise HTTPException(status_code=400, detail="Validation error: targetAmount must be a positive number")

    start = changes.get("startDate") or parse_iso(target.get("startDate"))
    end = changes.get("endDate") or parse_iso(target.get("endDate"))
    if ("startDate" in changes or "endDate" in changes) and not is_date_order_valid(start, end):
        raise HTTPException(status_code=400, detail="Validation error: endDate must be after startDate")

    if "status" in changes:
        changes["status"] = changes["status"].value
        error = validate_target_transition(target.get("status", "in_progress"), changes["status"])
        if error:
            raise HTTPException(status_code=400, detail=error)
    if "period" in changes:
        changes["period"] = changes["period"].value
    for key in ("startDate", "endDate"):
        if key in changes:
            changes[key] = to_utc(changes[key]).isoformat()

    if changes:
        changes["updatedAt"] = now_iso()
        await db.targets.update_one({"id": target_id}, {"$set": changes})
        if "status" in changes and changes["status"] != target.get("status"):
            logger.info(f"Target {target_id} status {target.get('status')} -> {changes['status']}")

    return await _get_or_404(target_id)


@router.delete("/{target_id}")
async def delete_target(target_id: str, user: dict = Depends(get_current_user)):
    result = await db.targets.delete_one({"id": target_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Target not found")
    return {"message": "Target deleted"}
