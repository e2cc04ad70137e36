"""
CRM - Record references

Cross-collection links are bare ID fields. Each referenced entity gets one
reference type and one resolution path, so "exists?" and "yours?" are
answered in a single place. Existence is always checked before ownership:
404 wins over 403.
"""

from dataclasses import dataclass
from typing import ClassVar, Optional
from fastapi import HTTPException

from crm_backend.config import db
from crm_backend.services.permissions import can_access_owned


@dataclass(frozen=True)
class RecordRef:
    collection: ClassVar[str]
    label: ClassVar[str]
    plural: ClassVar[str]
    owner_field: ClassVar[Optional[str]] = None
    projection: ClassVar[dict] = {"_id": 0}

    id: str

    async def fetch(self) -> Optional[dict]:
        return await db[self.collection].find_one({"id": self.id}, self.projection)

    async def resolve(self) -> dict:
        record = await self.fetch()
        if not record:
            raise HTTPException(status_code=404, detail=f"{self.label} not found")
        return record

    async def resolve_for(self, user: dict, action: str = "view") -> dict:
        """Resolve, then require the caller to own the record (admins own everything)."""
        record = await self.resolve()
        if self.owner_field and not can_access_owned(user, record, self.owner_field):
            raise HTTPException(
                status_code=403,
                detail=f"Access denied. You can only {action} your own {self.plural}."
            )
        return record


@dataclass(frozen=True)
class UserRef(RecordRef):
    collection: ClassVar[str] = "users"
    label: ClassVar[str] = "User"
    plural: ClassVar[str] = "users"
    projection: ClassVar[dict] = {"_id": 0, "password": 0}


@dataclass(frozen=True)
class CustomerRef(RecordRef):
    collection: ClassVar[str] = "customers"
    label: ClassVar[str] = "Customer"
    plural: ClassVar[str] = "customers"
    owner_field: ClassVar[Optional[str]] = "agentID"


@dataclass(frozen=True)
class SaleRef(RecordRef):
    collection: ClassVar[str] = "sales"
    label: ClassVar[str] = "Sale"
    plural: ClassVar[str] = "sales"
    owner_field: ClassVar[Optional[str]] = "agentID"


@dataclass(frozen=True)
class AgentRef(UserRef):
    label: ClassVar[str] = "Agent"
    plural: ClassVar[str] = "agents"
