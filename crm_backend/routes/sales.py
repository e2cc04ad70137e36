"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  CRM - Routes Sales                                                          ║
║                                                                              ║
║  RULES:                                                                      ║
║  1. agentID = caller at creation, immutable afterwards                       ║
║  2. an agent may only sell to a customer they own                            ║
║  3. same list/get/update/delete ownership as customers                       ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request

from crm_backend.config import db, now_iso, new_id, to_utc
from crm_backend.routes.auth import get_current_user
from crm_backend.models import (
    SaleCreate,
    SaleUpdate,
    SaleResponse,
    validate_sale_create,
)
from crm_backend.services.activity_logger import log_activity
from crm_backend.services.ownership import CustomerRef, SaleRef
from crm_backend.services.permissions import build_owner_filter, can_access_owned

logger = logging.getLogger("sales")

router = APIRouter(prefix="/sales", tags=["Sales"])


@router.post("", response_model=SaleResponse, status_code=201)
async def create_sale(data: SaleCreate, user: dict = Depends(get_current_user)):
    error = validate_sale_create(data)
    if error:
        raise HTTPException(status_code=400, detail=error)

    customer = await CustomerRef(data.customerID).resolve()
    if not can_access_owned(user, customer, "agentID"):
        logger.warning(
            f"[SALE_DENIED] user={user.get('email')} customer={data.customerID} "
            f"owner={customer.get('agentID')}"
        )
        raise HTTPException(
            status_code=403,
            detail="Access denied. You can only create sales for your own customers."
        )

    now = now_iso()
    sale = {
        "id": new_id(),
        "agentID": user["id"],
        "customerID": data.customerID,
        "amount": data.amount,
        "status": data.status,
        "description": data.description,
        "date": to_utc(data.date).isoformat() if data.date else now,
        "createdAt": now,
    }

    await db.sales.insert_one(sale)
    sale.pop("_id", None)
    return sale


@router.get("", response_model=List[SaleResponse])
async def list_sales(user: dict = Depends(get_current_user)):
    query = build_owner_filter(user, "agentID")
    return await db.sales.find(query, {"_id": 0}).sort("date", -1).to_list(1000)


@router.get("/{sale_id}", response_model=SaleResponse)
async def get_sale(sale_id: str, user: dict = Depends(get_current_user)):
    return await SaleRef(sale_id).resolve_for(user, "view")


@router.put("/{sale_id}", response_model=SaleResponse)
async def update_sale(sale_id: str, data: SaleUpdate, user: dict = Depends(get_current_user)):
    await SaleRef(sale_id).resolve_for(user, "update")

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if "amount" in changes and changes["amount"] <= 0:
        raise HTTPException(status_code=400, detail="Validation error: amount must be a positive number")
    if "status" in changes:
        changes["status"] = changes["status"].value
    if "date" in changes:
        changes["date"] = to_utc(changes["date"]).isoformat()

    if changes:
        changes["updatedAt"] = now_iso()
        await db.sales.update_one({"id": sale_id}, {"$set": changes})

    return await SaleRef(sale_id).resolve()


@router.delete("/{sale_id}")
async def delete_sale(sale_id: str, request: Request, user: dict = Depends(get_current_user)):
    await SaleRef(sale_id).resolve_for(user, "delete")

    result = await db.sales.delete_one({"id": sale_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Sale not found")

    await log_activity(
        user=user,
        action="delete",
        entity_type="sale",
        entity_id=sale_id,
        ip_address=request.client.host if request.client else None
    )
    return {"message": "Sale deleted"}
