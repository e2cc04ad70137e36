"""
Activity journal (auditlogs collection)
"""

import logging
from typing import Optional
from pymongo.errors import PyMongoError

from crm_backend.config import db, now_iso, new_id

logger = logging.getLogger("activity")


async def log_activity(
    user: dict,
    action: str,
    entity_type: str,
    entity_id: Optional[str] = None,
    changes: Optional[dict] = None,
    ip_address: Optional[str] = None
) -> Optional[dict]:
    """
    Records an entry in the audit trail.

    Actions: login, create, update, delete
    Entity types: user, agent, customer, sale
    A failed write is logged and swallowed; the caller's request still succeeds.
    """
    log_entry = {
        "id": new_id(),
        "userID": user.get("id", "system"),
        "action": action,
        "entityType": entity_type,
        "entityID": entity_id,
        "changes": changes or {},
        "ipAddress": ip_address,
        "timestamp": now_iso()
    }

    try:
        await db.auditlogs.insert_one(log_entry)
    except PyMongoError as e:
        logger.error(f"Audit log write failed for {action} {entity_type}/{entity_id}: {e}")
        return None

    log_entry.pop("_id", None)
    return log_entry


async def get_activity_logs(
    user_id: Optional[str] = None,
    entity_type: Optional[str] = None,
    action: Optional[str] = None,
    limit: int = 100,
    skip: int = 0
) -> list:
    """Audit entries, newest first, with optional filters"""
    query = {}

    if user_id:
        query["userID"] = user_id
    if entity_type:
        query["entityType"] = entity_type
    if action:
        query["action"] = action

    return await db.auditlogs.find(query, {"_id": 0}) \
        .sort("timestamp", -1) \
        .skip(skip) \
        .limit(limit) \
        .to_list(limit)
