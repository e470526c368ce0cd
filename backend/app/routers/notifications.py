"""Notifications router: the signed-in user's inbox."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_current_user
from app.errors import service_errors
from app.models.profile import Profile
from app.schemas.social import NotificationResponse
from app.services.notification_service import notification_service

router = APIRouter()


@router.get("")
async def list_notifications(
    is_read: bool | None = Query(None),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    notifications, unread = await notification_service.list_for_user(db, user.id, is_read, limit)
    return {
        "notifications": [NotificationResponse.model_validate(n) for n in notifications],
        "unread_count": unread,
    }


@router.put("/read-all")
async def mark_all_read(db: AsyncSession = Depends(get_db), user: Profile = Depends(get_current_user)):
    updated = await notification_service.mark_all_read(db, user.id)
    return {"ok": True, "updated": updated}


@router.put("/{notification_id}/read")
async def mark_read(
    notification_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    with service_errors():
        await notification_service.mark_read(db, user.id, notification_id)
    return {"ok": True}
