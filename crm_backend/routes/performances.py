"""
CRM - Routes Performances
Reading needs a valid token; writing needs manager or admin.
"""

from fastapi import APIRouter, Depends, HTTPException

from crm_backend.config import db, now_iso, new_id
from crm_backend.routes.auth import get_current_user
from crm_backend.models import PerformanceCreate, PerformanceUpdate
from crm_backend.services.permissions import require_manager_or_admin

router = APIRouter(prefix="/performances", tags=["Performances"])


async def _get_or_404(performance_id: str) -> dict:
    performance = await db.performances.find_one({"id": performance_id}, {"_id": 0})
    if not performance:
        raise HTTPException(status_code=404, detail="Performance not found")
    return performance


@router.post("", status_code=201)
async def create_performance(data: PerformanceCreate, user: dict = Depends(require_manager_or_admin())):
    performance = {
        "id": new_id(),
        "userID": data.userID or user["id"],
        "totalSales": data.totalSales,
        "totalRevenue": data.totalRevenue,
        "targetAchievement": data.targetAchievement,
        "conversionRate": data.conversionRate,
        "period": data.period.value,
        "date": now_iso(),
    }
    await db.performances.insert_one(performance)
    performance.pop("_id", None)
    return performance


@router.get("")
async def list_performances(userID: str = None, period: str = None, user: dict = Depends(get_current_user)):
    query = {}
    if userID:
        query["userID"] = userID
    if period:
        query["period"] = period
    return await db.performances.find(query, {"_id": 0}).sort("date", -1).to_list(1000)


@router.get("/{performance_id}")
async def get_performance(performance_id: str, user: dict = Depends(get_current_user)):
    return await _get_or_404(performance_id)


@router.put("/{performance_id}")
async def update_performance(
    performance_id: str,
    data: PerformanceUpdate,
    user: dict = Depends(require_manager_or_admin())
):
    await _get_or_404(performance_id)

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if "period" in changes:
        changes["period"] = changes["period"].value

    if changes:
        await db.performances.update_one({"id": performance_id}, {"$set": changes})
    return await _get_or_404(performance_id)


@router.delete("/{performance_id}")
async def delete_performance(performance_id: str, user: dict = Depends(require_manager_or_admin())):
    result = await db.performances.delete_one({"id": performance_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Performance not found")
    return {"message": "Performance deleted"}
