"""
CRM - Routes Revenues
"""

from fastapi import APIRouter, Depends, HTTPException

from crm_backend.config import db, now_iso, new_id, to_utc
from crm_backend.routes.auth import get_current_user
from crm_backend.models import RevenueCreate, RevenueUpdate, validate_revenue_create

router = APIRouter(prefix="/revenues", tags=["Revenues"], dependencies=[Depends(get_current_user)])


async def _get_or_404(revenue_id: str) -> dict:
    revenue = await db.revenues.find_one({"id": revenue_id}, {"_id": 0})
    if not revenue:
        raise HTTPException(status_code=404, detail="Revenue not found")
    return revenue


@router.post("", status_code=201)
async def create_revenue(data: RevenueCreate):
    error = validate_revenue_create(data)
    if error:
        raise HTTPException(status_code=400, detail=error)

    revenue = {
        "id": new_id(),
        "saleID": data.saleID,
        "amount": data.amount,
        "source": data.source.strip(),
        "category": data.category,
        "date": to_utc(data.date).isoformat() if data.date else now_iso(),
    }
    await db.revenues.insert_one(revenue)
    revenue.pop("_id", None)
    return revenue


@router.get("")
async def list_revenues(saleID: str = None, category: str = None):
    query = {}
    if saleID:
        query["saleID"] = saleID
    if category:
        query["category"] = category
    return await db.revenues.find(query, {"_id": 0}).sort("date", -1).to_list(1000)


@router.get("/{revenue_id}")
async def get_revenue(revenue_id: str):
    return await _get_or_404(revenue_id)


@router.put("/{revenue_id}")
async def update_revenue(revenue_id: str, data: RevenueUpdate):
    await _get_or_404(revenue_id)

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if "amount" in changes and changes["amount"] <= 0:
        raise HTTPException(status_code=400, detail="Validation error: amount must be a positive number")
    if "source" in changes and not changes["source"].strip():
        raise HTTPException(status_code=400, detail="Validation error: source is required")

    if changes:
        await db.revenues.update_one({"id": revenue_id}, {"$set": changes})
    return await _get_or_404(revenue_id)


@router.delete("/{revenue_id}")
async def delete_revenue(revenue_id: str):
    result = await db.revenues.delete_one({"id": revenue_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Revenue not found")
    return {"message": "Revenue deleted"}
