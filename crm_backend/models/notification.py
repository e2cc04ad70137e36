"""
CRM - Notification addressed to one user
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel


class NotificationType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class NotificationCreate(BaseModel):
    userID: Optional[str] = None
    title: Optional[str] = None
    message: Optional[str] = None
    type: NotificationType = NotificationType.INFO
    link: Optional[str] = None


def validate_notification_create(data: NotificationCreate) -> Optional[str]:
    if not data.title:
        return "Validation error: title is required"
    if not data.message:
        return "Validation error: message is required"
    return None
