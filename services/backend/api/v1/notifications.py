"""Notifications API - resident inbox"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_access_core
from domain.models.notification import NotificationRead
from infrastructure.container import AccessCore

router = APIRouter()


@router.get("/{user_id}", response_model=List[NotificationRead])
async def list_notifications(
    user_id: str,
    limit: int = 10,
    core: AccessCore = Depends(get_access_core),
):
    """Most recent notifications first"""
    return await core.notification_store.list_recent(user_id, limit=limit)


@router.patch("/{notification_id}/read", status_code=204)
async def mark_notification_read(
    notification_id: UUID,
    core: AccessCore = Depends(get_access_core),
):
    if not await core.notification_store.mark_read(notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")


@router.delete("/user/{user_id}")
async def delete_all_notifications(user_id: str, core: AccessCore = Depends(get_access_core)):
    deleted = await core.notification_store.delete_all(user_id)
    return {"deleted": deleted}


@router.delete("/{notification_id}", status_code=204)
async def delete_notification(
    notification_id: UUID,
    core: AccessCore = Depends(get_access_core),
):
    if not await core.notification_store.delete(notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")
