"""
CRM - Routes Payments
"""

from fastapi import APIRouter, Depends, HTTPException

from crm_backend.config import db, now_iso, new_id, to_utc
from crm_backend.routes.auth import get_current_user
from crm_backend.models import PaymentCreate, PaymentUpdate, validate_payment_create

router = APIRouter(prefix="/payments", tags=["Payments"], dependencies=[Depends(get_current_user)])


async def _get_or_404(payment_id: str) -> dict:
    payment = await db.payments.find_one({"id": payment_id}, {"_id": 0})
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    return payment


@router.post("", status_code=201)
async def create_payment(data: PaymentCreate):
    error = validate_payment_create(data)
    if error:
        raise HTTPException(status_code=400, detail=error)

    payment = {
        "id": new_id(),
        "saleID": data.saleID,
        "customerID": data.customerID,
        "amount": data.amount,
        "paymentMethod": data.paymentMethod,
        "status": data.status,
        "paymentDate": to_utc(data.paymentDate).isoformat() if data.paymentDate else now_iso(),
    }
    await db.payments.insert_one(payment)
    payment.pop("_id", None)
    return payment


@router.get("")
async def list_payments(saleID: str = None, customerID: str = None):
    query = {}
    if saleID:
        query["saleID"] = saleID
    if customerID:
        query["customerID"] = customerID
    return await db.payments.find(query, {"_id": 0}).sort("paymentDate", -1).to_list(1000)


@router.get("/{payment_id}")
async def get_payment(payment_id: str):
    return await _get_or_404(payment_id)


@router.put("/{payment_id}")
async def update_payment(payment_id: str, data: PaymentUpdate):
    await _get_or_404(payment_id)

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if "amount" in changes and changes["amount"] <= 0:
        raise HTTPException(status_code=400, detail="Validation error: amount must be a positive number")
    for key in ("paymentMethod", "status"):
        if key in changes:
            changes[key] = changes[key].value

    if changes:
        await db.payments.update_one({"id": payment_id}, {"$set": changes})
    return await _get_or_404(payment_id)


@router.delete("/{payment_id}")
async def delete_payment(payment_id: str):
    result = await db.payments.delete_one({"id": payment_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Payment not found")
    return {"message": "Payment deleted"}
