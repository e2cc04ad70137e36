"""
CRM - Routes Comments
A comment's author is always the caller.
"""

from fastapi import APIRouter, Depends, HTTPException

from crm_backend.config import db, now_iso, new_id
from crm_backend.routes.auth import get_current_user
from crm_backend.models import CommentCreate, CommentUpdate, validate_comment_create

router = APIRouter(prefix="/comments", tags=["Comments"])


async def _get_or_404(comment_id: str) -> dict:
    comment = await db.comments.find_one({"id": comment_id}, {"_id": 0})
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")
    return comment


@router.post("", status_code=201)
async def create_comment(data: CommentCreate, user: dict = Depends(get_current_user)):
    error = validate_comment_create(data)
    if error:
        raise HTTPException(status_code=400, detail=error)

    comment = {
        "id": new_id(),
        "userID": user["id"],
        "entityType": data.entityType,
        "entityID": data.entityID,
        "content": data.content.strip(),
        "createdAt": now_iso(),
    }
    await db.comments.insert_one(comment)
    comment.pop("_id", None)
    return comment


@router.get("")
async def list_comments(entityType: str = None, entityID: str = None, user: dict = Depends(get_current_user)):
    query = {}
    if entityType:
        query["entityType"] = entityType
    if entityID:
        query["entityID"] = entityID
    return await db.comments.find(query, {"_id": 0}).sort("createdAt", -1).to_list(1000)


@router.get("/{comment_id}")
async def get_comment(comment_id: str, user: dict = Depends(get_current_user)):
    return await _get_or_404(comment_id)


@router.put("/{comment_id}")
async def update_comment(comment_id: str, data: CommentUpdate, user: dict = Depends(get_current_user)):
    await _get_or_404(comment_id)

    if data.content is not None:
        if not data.content.strip():
            raise HTTPException(status_code=400, detail="Validation error: content is required")
        await db.comments.update_one(
            {"id": comment_id},
            {"$set": {"content": data.content.strip(), "updatedAt": now_iso()}}
        )
    return await _get_or_404(comment_id)


@router.delete("/{comment_id}")
async def delete_comment(comment_id: str, user: dict = Depends(get_current_user)):
    result = await db.comments.delete_one({"id": comment_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Comment not found")
    return {"message": "Comment deleted"}
