"""
CRM - Routes Auth
Login / Register / Profile / User CRUD.
Every protected route resolves its user through get_current_user.
"""

import logging
from typing import Optional, List

import jwt
from fastapi import APIRouter, HTTPException, Depends, Request
from fastapi.security import APIKeyHeader

from crm_backend.config import (
    db,
    now_iso,
    hash_password,
    verify_password,
    create_access_token,
    decode_access_token,
    is_valid_email_format,
    normalize_email,
    ALLOW_PUBLIC_REGISTRATION,
    VALID_ROLES,
    ROLE_ADMIN,
    ROLE_AGENT,
)
from crm_backend.models import (
    UserLogin,
    UserCreate,
    UserUpdate,
    ProfileUpdate,
    PasswordChange,
    UserResponse,
    public_user,
)
from crm_backend.services.activity_logger import log_activity
from crm_backend.services.ownership import UserRef
from crm_backend.services.permissions import require_admin
from crm_backend.services.users import (
    USER_PROJECTION,
    MIN_PASSWORD_LENGTH,
    create_user_record,
    resolve_role,
    email_taken,
    apply_name_changes,
)

logger = logging.getLogger("auth")

router = APIRouter(prefix="/users", tags=["Users"])

# Raw header: both "Bearer <token>" and a bare token are accepted
authorization_header = APIKeyHeader(name="Authorization", auto_error=False)


# ==================== HELPERS ====================

def extract_token(header_value: Optional[str]) -> Optional[str]:
    if not header_value:
        return None
    token = header_value.strip()
    if token.startswith("Bearer "):
        token = token[len("Bearer "):].strip()
    return token or None


def _unauthenticated(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Depends(authorization_header)
):
    """Resolves the bearer token to exactly one user, attached to request.state."""
    token = extract_token(authorization)
    if not token:
        raise _unauthenticated("No token, authorization denied")

    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError:
        raise _unauthenticated("Token is not valid")

    user_id = payload.get("userId")
    if not user_id:
        raise _unauthenticated("Token is not valid")

    user = await db.users.find_one({"id": user_id}, USER_PROJECTION)
    if not user:
        raise _unauthenticated("User not found")

    request.state.user = user
    return user


def _client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


def _token_response(user: dict) -> dict:
    return {"token": create_access_token(user), "user": public_user(user)}


# ==================== LOGIN / REGISTER ====================

@router.post("/login")
async def login(data: UserLogin, request: Request):
    user = await db.users.find_one({"email": normalize_email(data.email)}, {"_id": 0})

    if not user or not await verify_password(data.password, user.get("password")):
        logger.info(f"Failed login for {data.email}")
        raise HTTPException(status_code=400, detail="Invalid credentials")

    logger.info(f"Login: {user['email']} role={user.get('role')}")

    await log_activity(
        user=user,
        action="login",
        entity_type="user",
        entity_id=user["id"],
        ip_address=_client_ip(request)
    )

    return _token_response(user)


@router.post("/register")
async def register(data: UserCreate):
    """Public sign-up. Cannot grant admin."""
    if not ALLOW_PUBLIC_REGISTRATION:
        raise HTTPException(status_code=403, detail="Public registration is disabled")

    role = resolve_role(data.role)
    if role == ROLE_ADMIN:
        role = ROLE_AGENT

    user = await create_user_record(data, role=role)
    return _token_response(user)


# ==================== PROFILE ====================

@router.get("/profile", response_model=UserResponse)
async def get_profile(user: dict = Depends(get_current_user)):
    return await UserRef(user["id"]).resolve()


@router.put("/profile", response_model=UserResponse)
async def update_profile(data: ProfileUpdate, user: dict = Depends(get_current_user)):
    await UserRef(user["id"]).resolve()

    update_data = {}
    apply_name_changes(data, update_data)
    if data.phoneNumber:
        update_data["phoneNumber"] = data.phoneNumber
    if data.email:
        if not is_valid_email_format(data.email.strip()):
            raise HTTPException(status_code=400, detail="Validation error: please provide a valid email address")
        if await email_taken(data.email, exclude_id=user["id"]):
            raise HTTPException(status_code=400, detail="Email already exists")
        update_data["email"] = normalize_email(data.email)

    update_data["updatedAt"] = now_iso()
    await db.users.update_one({"id": user["id"]}, {"$set": update_data})
    return await UserRef(user["id"]).resolve()


@router.put("/change-password")
async def change_password(data: PasswordChange, user: dict = Depends(get_current_user)):
    if not data.oldPassword or not data.newPassword:
        raise HTTPException(status_code=400, detail="Old password and new password are required")
    if len(data.newPassword) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Validation error: password must be at least {MIN_PASSWORD_LENGTH} characters"
        )

    stored = await db.users.find_one({"id": user["id"]}, {"_id": 0, "password": 1})
    if not stored:
        raise HTTPException(status_code=404, detail="User not found")

    if not await verify_password(data.oldPassword, stored.get("password")):
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    await db.users.update_one(
        {"id": user["id"]},
        {"$set": {"password": await hash_password(data.newPassword), "updatedAt": now_iso()}}
    )
    return {"message": "Password changed successfully"}


# ==================== USER CRUD (admin) ====================

@router.get("", response_model=List[UserResponse])
async def list_users(user: dict = Depends(require_admin())):
    return await db.users.find({}, USER_PROJECTION).sort("createdAt", -1).to_list(1000)


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(data: UserCreate, request: Request, user: dict = Depends(require_admin())):
    new_user = await create_user_record(
        data,
        role=resolve_role(data.role),
        duplicate_detail="User with this email already exists",
        created_by=user["id"],
    )

    await log_activity(
        user=user,
        action="create",
        entity_type="user",
        entity_id=new_user["id"],
        changes={"email": new_user["email"], "role": new_user["role"]},
        ip_address=_client_ip(request)
    )
    return new_user


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, user: dict = Depends(get_current_user)):
    return await UserRef(user_id).resolve()


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(user_id: str, data: UserUpdate, request: Request, user: dict = Depends(require_admin())):
    await UserRef(user_id).resolve()

    update_data = {}
    apply_name_changes(data, update_data)
    if data.phoneNumber:
        update_data["phoneNumber"] = data.phoneNumber
    if data.email:
        if not is_valid_email_format(data.email.strip()):
            raise HTTPException(status_code=400, detail="Validation error: please provide a valid email address")
        if await email_taken(data.email, exclude_id=user_id):
            raise HTTPException(status_code=400, detail="Email already exists")
        update_data["email"] = normalize_email(data.email)
    if data.role and data.role in VALID_ROLES:
        update_data["role"] = data.role

    update_data["updatedAt"] = now_iso()
    await db.users.update_one({"id": user_id}, {"$set": update_data})

    await log_activity(
        user=user,
        action="update",
        entity_type="user",
        entity_id=user_id,
        changes={k: v for k, v in update_data.items() if k != "updatedAt"},
        ip_address=_client_ip(request)
    )
    return await UserRef(user_id).resolve()


@router.delete("/{user_id}")
async def delete_user(user_id: str, request: Request, user: dict = Depends(require_admin())):
    if user_id == user["id"]:
        raise HTTPException(status_code=400, detail="Cannot delete your own account")

    result = await db.users.delete_one({"id": user_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="User not found")

    logger.info(f"User {user_id} deleted by {user['email']}")

    await log_activity(
        user=user,
        action="delete",
        entity_type="user",
        entity_id=user_id,
        ip_address=_client_ip(request)
    )
    return {"message": "User deleted successfully"}
