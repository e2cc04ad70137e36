"""
CRM - Per-user settings (one document per user)
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class NotificationSettings(BaseModel):
    emailNotifications: Optional[bool] = None
    pushNotifications: Optional[bool] = None
    salesAlerts: Optional[bool] = None
    targetAlerts: Optional[bool] = None
    systemUpdates: Optional[bool] = None


class PrivacySettings(BaseModel):
    showEmail: Optional[bool] = None
    showPhone: Optional[bool] = None
    showPerformance: Optional[bool] = None


class DisplaySettings(BaseModel):
    theme: Optional[Theme] = None
    language: Optional[str] = None
    currency: Optional[str] = None
    dateFormat: Optional[str] = None


class SettingsUpdate(BaseModel):
    notifications: Optional[NotificationSettings] = None
    privacy: Optional[PrivacySettings] = None
    display: Optional[DisplaySettings] = None
