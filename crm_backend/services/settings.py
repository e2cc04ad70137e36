"""
CRM - User settings service

Collection: settings (one document per user, keyed by userID)
Sections: notifications, privacy, display. Updates merge into the stored
section; missing documents are created from defaults on first read.
"""

import copy
import logging
from typing import Dict, Any

from pymongo import ReturnDocument

from crm_backend.config import db, now_iso, new_id

logger = logging.getLogger("settings")


DEFAULT_SETTINGS: Dict[str, Dict[str, Any]] = {
    "notifications": {
        "emailNotifications": True,
        "pushNotifications": True,
        "salesAlerts": True,
        "targetAlerts": True,
        "systemUpdates": True,
    },
    "privacy": {
        "showEmail": True,
        "showPhone": False,
        "showPerformance": True,
    },
    "display": {
        "theme": "light",
        "language": "en",
        "currency": "USD",
        "dateFormat": "MM/DD/YYYY",
    },
}

SECTIONS = list(DEFAULT_SETTINGS.keys())


def default_settings_doc(user_id: str) -> Dict[str, Any]:
    doc = copy.deepcopy(DEFAULT_SETTINGS)
    doc["id"] = new_id()
    doc["userID"] = user_id
    doc["updatedAt"] = now_iso()
    return doc


async def get_user_settings(user_id: str) -> Dict[str, Any]:
    """Returns the user's settings, creating the defaults if none exist"""
    defaults = default_settings_doc(user_id)
    defaults.pop("userID")
    doc = await db.settings.find_one_and_update(
        {"userID": user_id},
        {"$setOnInsert": defaults},
        projection={"_id": 0},
        upsert=True,
        return_document=ReturnDocument.AFTER
    )
    if doc.get("id") == defaults["id"]:
        logger.info(f"Default settings created for user {user_id}")
    return doc


async def update_user_settings(user_id: str, changes: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    """Merges each given section into the stored one"""
    current = await get_user_settings(user_id)

    update_data = {}
    for section in SECTIONS:
        values = changes.get(section)
        if values:
            update_data[section] = {**current.get(section, {}), **values}
    update_data["updatedAt"] = now_iso()

    await db.settings.update_one({"userID": user_id}, {"$set": update_data})
    return await db.settings.find_one({"userID": user_id}, {"_id": 0})


async def reset_user_settings(user_id: str) -> Dict[str, Any]:
    await db.settings.delete_one({"userID": user_id})
    return await get_user_settings(user_id)
