"""
CRM - Customer model

RULE: a customer created through the API belongs to its creating agent (agentID).
The owner is set server side, never taken from the request body.
"""

from typing import Optional
from pydantic import BaseModel

from crm_backend.config import is_valid_email_format


class CustomerCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phoneNumber: Optional[str] = None
    cardReference: Optional[str] = None


class CustomerUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phoneNumber: Optional[str] = None
    cardReference: Optional[str] = None


class CustomerResponse(BaseModel):
    id: str
    agentID: Optional[str] = None
    name: str
    email: str
    phoneNumber: Optional[str] = None
    cardReference: Optional[str] = None
    dateAdded: str = ""
    createdAt: str = ""


def validate_customer_create(data: CustomerCreate) -> Optional[str]:
    """First failing rule as a message, None when valid"""
    if not data.name or not data.name.strip():
        return "Validation error: name is required"
    if not data.email or not data.email.strip():
        return "Validation error: email is required"
    if not is_valid_email_format(data.email):
        return "Validation error: please provide a valid email address"
    return None


def validate_customer_update(changes: dict) -> Optional[str]:
    if "name" in changes and (not changes["name"] or not changes["name"].strip()):
        return "Validation error: name cannot be empty"
    if "email" in changes and not is_valid_email_format(changes["email"]):
        return "Validation error: please provide a valid email address"
    return None
