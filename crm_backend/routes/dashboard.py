"""
CRM - Routes Dashboard
Read-only aggregates; see services/dashboard.py for the window and trend rules.
"""

from typing import Optional
from fastapi import APIRouter, Depends

from crm_backend.routes.auth import get_current_user
from crm_backend.services.dashboard import build_admin_dashboard, build_agent_dashboard, build_summary
from crm_backend.services.permissions import require_manager_or_admin, require_agent_or_admin

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/admin")
async def admin_dashboard(period: Optional[str] = None, user: dict = Depends(require_manager_or_admin())):
    return await build_admin_dashboard(period)


@router.get("/agent")
async def agent_dashboard(period: Optional[str] = None, user: dict = Depends(require_agent_or_admin())):
    return await build_agent_dashboard(user, period)


@router.get("/summary")
async def summary(user: dict = Depends(get_current_user)):
    return await build_summary()
