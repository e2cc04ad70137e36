"""
CRM - Routes Settings (caller's own settings only)
"""

from fastapi import APIRouter, Depends

from crm_backend.routes.auth import get_current_user
from crm_backend.models import SettingsUpdate
from crm_backend.services.settings import get_user_settings, update_user_settings, reset_user_settings

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("")
async def get_settings(user: dict = Depends(get_current_user)):
    return await get_user_settings(user["id"])


@router.put("")
async def update_settings(data: SettingsUpdate, user: dict = Depends(get_current_user)):
    return await update_user_settings(user["id"], data.model_dump(mode="json", exclude_none=True))


@router.post("/reset")
async def reset_settings(user: dict = Depends(get_current_user)):
    return await reset_user_settings(user["id"])
