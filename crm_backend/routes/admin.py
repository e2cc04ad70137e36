"""
CRM - Routes Admin
Agent management. Every route requires the admin role.

Admin accounts cannot be modified or deleted here; that goes through
/users. This also means an admin can never delete themselves here.
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request

from crm_backend.config import (
    db,
    now_iso,
    hash_password,
    is_valid_email_format,
    normalize_email,
    ROLE_ADMIN,
    ROLE_AGENT,
)
from crm_backend.models import AgentCreate, AgentUpdate, UserResponse
from crm_backend.services.activity_logger import log_activity
from crm_backend.services.dashboard import get_agent_stats
from crm_backend.routes.auth import get_current_user
from crm_backend.services.ownership import AgentRef
from crm_backend.services.permissions import require_admin
from crm_backend.services.users import (
    USER_PROJECTION,
    MIN_PASSWORD_LENGTH,
    create_user_record,
    email_taken,
)

logger = logging.getLogger("admin")

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin())])


@router.post("/agents", status_code=201)
async def create_agent(data: AgentCreate, request: Request, user: dict = Depends(get_current_user)):
    agent = await create_user_record(
        data,
        role=ROLE_AGENT,
        first_placeholder="Agent",
        last_placeholder="User",
        duplicate_detail="User with this email already exists",
        created_by=user["id"],
    )

    await log_activity(
        user=user,
        action="create",
        entity_type="agent",
        entity_id=agent["id"],
        changes={"email": agent["email"]},
        ip_address=request.client.host if request.client else None
    )
    return {"message": "Agent created successfully", "agent": UserResponse(**agent).model_dump()}


@router.get("/agents", response_model=List[UserResponse])
async def list_agents():
    return await db.users.find({"role": ROLE_AGENT}, USER_PROJECTION).to_list(1000)


@router.get("/users", response_model=List[UserResponse])
async def list_all_users():
    return await db.users.find({}, USER_PROJECTION).to_list(1000)


@router.get("/agents/{agent_id}", response_model=UserResponse)
async def get_agent(agent_id: str):
    return await AgentRef(agent_id).resolve()


@router.put("/agents/{agent_id}")
async def update_agent(agent_id: str, data: AgentUpdate, request: Request, user: dict = Depends(get_current_user)):
    agent = await AgentRef(agent_id).resolve()

    if agent.get("role") == ROLE_ADMIN:
        raise HTTPException(status_code=403, detail="Cannot modify admin users through this endpoint")

    update_data = {}
    if data.name:
        update_data["name"] = data.name
    if data.phoneNumber:
        update_data["phoneNumber"] = data.phoneNumber
    if data.email:
        if not is_valid_email_format(data.email.strip()):
            raise HTTPException(status_code=400, detail="Validation error: please provide a valid email address")
        if await email_taken(data.email, exclude_id=agent_id):
            raise HTTPException(status_code=400, detail="Email already exists")
        update_data["email"] = normalize_email(data.email)
    if data.password and len(data.password) >= MIN_PASSWORD_LENGTH:
        update_data["password"] = await hash_password(data.password)

    update_data["updatedAt"] = now_iso()
    await db.users.update_one({"id": agent_id}, {"$set": update_data})

    await log_activity(
        user=user,
        action="update",
        entity_type="agent",
        entity_id=agent_id,
        changes={k: v for k, v in update_data.items() if k not in ("password", "updatedAt")},
        ip_address=request.client.host if request.client else None
    )

    updated = await AgentRef(agent_id).resolve()
    return {"message": "Agent updated successfully", "agent": UserResponse(**updated).model_dump()}


@router.delete("/agents/{agent_id}")
async def delete_agent(agent_id: str, request: Request, user: dict = Depends(get_current_user)):
    agent = await AgentRef(agent_id).resolve()

    if agent.get("role") == ROLE_ADMIN:
        raise HTTPException(status_code=403, detail="Cannot delete admin users")

    await db.users.delete_one({"id": agent_id})
    logger.info(f"Agent {agent_id} deleted by {user['email']}")

    await log_activity(
        user=user,
        action="delete",
        entity_type="agent",
        entity_id=agent_id,
        ip_address=request.client.host if request.client else None
    )
    return {"message": "Agent deleted successfully"}


@router.get("/agents/{agent_id}/stats")
async def agent_stats(agent_id: str):
    agent = await AgentRef(agent_id).resolve()
    return {
        "agent": UserResponse(**agent).model_dump(),
        "stats": await get_agent_stats(agent_id),
    }
