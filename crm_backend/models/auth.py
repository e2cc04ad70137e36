"""
CRM - Models Auth & Users
Roles: admin, manager, agent. The role is the whole authorization scope.
"""

from typing import Optional
from pydantic import BaseModel


class UserLogin(BaseModel):
    email: str
    password: str


class UserCreate(BaseModel):
    """Registration and admin user creation. Name as `name` or firstName/lastName."""
    name: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None
    phoneNumber: Optional[str] = None


class UserUpdate(BaseModel):
    """Admin edit of any user"""
    name: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    phoneNumber: Optional[str] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[str] = None
    phoneNumber: Optional[str] = None


class PasswordChange(BaseModel):
    oldPassword: Optional[str] = None
    newPassword: Optional[str] = None


class AgentCreate(BaseModel):
    name: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    phoneNumber: Optional[str] = None


class AgentUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phoneNumber: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    id: str
    firstName: str
    lastName: str
    name: str = ""
    email: str
    role: str = "agent"
    phoneNumber: Optional[str] = None
    status: str = "active"
    createdAt: str = ""


def public_user(user: dict) -> dict:
    """The {id, name, email, role} summary returned with a token."""
    first = user.get("firstName", "")
    last = user.get("lastName", "")
    return {
        "id": user["id"],
        "name": user.get("name") or f"{first} {last}".strip(),
        "email": user["email"],
        "role": user.get("role", "agent"),
    }
