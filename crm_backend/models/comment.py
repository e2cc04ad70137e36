"""
CRM - Comment attached to any record through (entityType, entityID)
"""

from typing import Optional
from pydantic import BaseModel


class CommentCreate(BaseModel):
    entityType: Optional[str] = None
    entityID: Optional[str] = None
    content: Optional[str] = None


class CommentUpdate(BaseModel):
    content: Optional[str] = None


def validate_comment_create(data: CommentCreate) -> Optional[str]:
    if not data.entityType:
        return "Validation error: entityType is required"
    if not data.entityID:
        return "Validation error: entityID is required"
    if not data.content or not data.content.strip():
        return "Validation error: content is required"
    return None
