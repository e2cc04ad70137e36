"""
CRM - User records
Shared by registration, admin user management and agent management.
"""

import logging
from typing import Optional
from fastapi import HTTPException

from crm_backend.config import (
    db,
    new_id,
    now_iso,
    hash_password,
    is_valid_email_format,
    normalize_email,
    VALID_ROLES,
    ROLE_AGENT,
)
from crm_backend.services.names import name_input_from, normalize_name

logger = logging.getLogger("users")

MIN_PASSWORD_LENGTH = 6

USER_PROJECTION = {"_id": 0, "password": 0}


def resolve_role(role: Optional[str]) -> str:
    """Unknown or missing roles become agent"""
    return role if role in VALID_ROLES else ROLE_AGENT


def validate_credentials(email: Optional[str], password: Optional[str]) -> Optional[str]:
    if not email or not email.strip():
        return "Validation error: email is required"
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        return f"Validation error: password must be at least {MIN_PASSWORD_LENGTH} characters"
    if not is_valid_email_format(email.strip()):
        return "Validation error: please provide a valid email address"
    return None


async def email_taken(email: str, exclude_id: Optional[str] = None) -> bool:
    query = {"email": normalize_email(email)}
    if exclude_id:
        query["id"] = {"$ne": exclude_id}
    return await db.users.find_one(query, {"_id": 0, "id": 1}) is not None


async def create_user_record(
    data,
    role: str,
    first_placeholder: str = "User",
    last_placeholder: str = "User",
    duplicate_detail: str = "User already exists",
    created_by: Optional[str] = None,
) -> dict:
    """
    Validates, hashes and inserts a user. Returns the stored user without
    its password hash.
    """
    error = validate_credentials(data.email, data.password)
    if error:
        raise HTTPException(status_code=400, detail=error)

    if await email_taken(data.email):
        raise HTTPException(status_code=400, detail=duplicate_detail)

    name = normalize_name(
        name_input_from(data.name, data.firstName, data.lastName),
        first_placeholder,
        last_placeholder,
    )

    user = {
        "id": new_id(),
        "firstName": name.first_name,
        "lastName": name.last_name,
        "name": name.display_name,
        "email": normalize_email(data.email),
        "password": await hash_password(data.password),
        "role": role,
        "phoneNumber": data.phoneNumber,
        "status": "active",
        "createdAt": now_iso(),
        "createdBy": created_by,
    }

    await db.users.insert_one(user)
    logger.info(f"User created: {user['email']} role={role}")

    user.pop("_id", None)
    user.pop("password", None)
    return user


def apply_name_changes(data, update_data: dict) -> None:
    """Copies whichever name fields were sent; never blanks the others"""
    if data.firstName:
        update_data["firstName"] = data.firstName
    if data.lastName:
        update_data["lastName"] = data.lastName
    if data.name:
        update_data["name"] = data.name
