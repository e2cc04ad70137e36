"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  CRM - Routes Customers                                                      ║
║                                                                              ║
║  Ownership: an agent sees and changes only customers whose agentID is        ║
║  their own id; an admin sees and changes everything.                         ║
║  Lists are filtered in the store query, never after the fetch.               ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request

from crm_backend.config import db, now_iso, new_id, normalize_email
from crm_backend.routes.auth import get_current_user
from crm_backend.models import (
    CustomerCreate,
    CustomerUpdate,
    CustomerResponse,
    validate_customer_create,
    validate_customer_update,
)
from crm_backend.services.activity_logger import log_activity
from crm_backend.services.ownership import CustomerRef
from crm_backend.services.permissions import build_owner_filter

logger = logging.getLogger("customers")

router = APIRouter(prefix="/customers", tags=["Customers"])


@router.post("", response_model=CustomerResponse, status_code=201)
async def create_customer(data: CustomerCreate, user: dict = Depends(get_current_user)):
    """The owner is always the caller, whatever the body says"""
    error = validate_customer_create(data)
    if error:
        raise HTTPException(status_code=400, detail=error)

    now = now_iso()
    customer = {
        "id": new_id(),
        "agentID": user["id"],
        "name": data.name.strip(),
        "email": normalize_email(data.email),
        "phoneNumber": data.phoneNumber,
        "cardReference": data.cardReference,
        "dateAdded": now,
        "createdAt": now,
    }

    await db.customers.insert_one(customer)
    customer.pop("_id", None)
    return customer


@router.get("", response_model=List[CustomerResponse])
async def list_customers(user: dict = Depends(get_current_user)):
    query = build_owner_filter(user, "agentID")
    return await db.customers.find(query, {"_id": 0}).sort("createdAt", -1).to_list(1000)


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(customer_id: str, user: dict = Depends(get_current_user)):
    return await CustomerRef(customer_id).resolve_for(user, "view")


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(customer_id: str, data: CustomerUpdate, user: dict = Depends(get_current_user)):
    """Only the fields present in the body are applied"""
    await CustomerRef(customer_id).resolve_for(user, "update")

    changes = data.model_dump(exclude_unset=True)
    error = validate_customer_update(changes)
    if error:
        raise HTTPException(status_code=400, detail=error)
    if changes.get("email"):
        changes["email"] = normalize_email(changes["email"])

    if changes:
        changes["updatedAt"] = now_iso()
        await db.customers.update_one({"id": customer_id}, {"$set": changes})

    return await CustomerRef(customer_id).resolve()


@router.delete("/{customer_id}")
async def delete_customer(customer_id: str, request: Request, user: dict = Depends(get_current_user)):
    """Sales referencing the customer are left untouched"""
    await CustomerRef(customer_id).resolve_for(user, "delete")

    result = await db.customers.delete_one({"id": customer_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Customer not found")

    await log_activity(
        user=user,
        action="delete",
        entity_type="customer",
        entity_id=customer_id,
        ip_address=request.client.host if request.client else None
    )
    return {"message": "Customer deleted"}
