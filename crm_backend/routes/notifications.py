"""
CRM - Routes Notifications
Every operation is scoped to the caller's own notifications.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException
from pymongo import ReturnDocument

from crm_backend.config import db, now_iso, new_id
from crm_backend.routes.auth import get_current_user
from crm_backend.models import NotificationCreate, validate_notification_create

logger = logging.getLogger("notifications")

router = APIRouter(prefix="/notifications", tags=["Notifications"])

LIST_LIMIT = 50


@router.get("")
async def list_notifications(unreadOnly: bool = False, user: dict = Depends(get_current_user)):
    query = {"userID": user["id"]}
    if unreadOnly:
        query["isRead"] = False
    return await db.notifications.find(query, {"_id": 0}) \
        .sort("createdAt", -1) \
        .to_list(LIST_LIMIT)


@router.get("/unread-count")
async def unread_count(user: dict = Depends(get_current_user)):
    count = await db.notifications.count_documents({"userID": user["id"], "isRead": False})
    return {"count": count}


@router.post("", status_code=201)
async def create_notification(data: NotificationCreate, user: dict = Depends(get_current_user)):
    error = validate_notification_create(data)
    if error:
        raise HTTPException(status_code=400, detail=error)

    notification = {
        "id": new_id(),
        "userID": data.userID or user["id"],
        "title": data.title,
        "message": data.message,
        "type": data.type.value,
        "link": data.link,
        "isRead": False,
        "createdAt": now_iso(),
    }
    await db.notifications.insert_one(notification)
    notification.pop("_id", None)
    return notification


@router.put("/mark-all-read")
async def mark_all_read(user: dict = Depends(get_current_user)):
    result = await db.notifications.update_many(
        {"userID": user["id"], "isRead": False},
        {"$set": {"isRead": True, "readAt": now_iso()}}
    )
    return {"message": "All notifications marked as read", "updated": result.modified_count}


@router.put("/{notification_id}/read")
async def mark_read(notification_id: str, user: dict = Depends(get_current_user)):
    notification = await db.notifications.find_one_and_update(
        {"id": notification_id, "userID": user["id"]},
        {"$set": {"isRead": True, "readAt": now_iso()}},
        projection={"_id": 0},
        return_document=ReturnDocument.AFTER
    )
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    return notification


@router.delete("")
async def clear_notifications(user: dict = Depends(get_current_user)):
    result = await db.notifications.delete_many({"userID": user["id"]})
    logger.info(f"Cleared {result.deleted_count} notifications for user {user['id']}")
    return {"message": "Notifications cleared", "deleted": result.deleted_count}


@router.delete("/{notification_id}")
async def delete_notification(notification_id: str, user: dict = Depends(get_current_user)):
    result = await db.notifications.delete_one({"id": notification_id, "userID": user["id"]})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"message": "Notification deleted"}
