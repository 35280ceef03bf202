"""
Notification endpoints for the Ticketing Service.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ticketing.api.dependencies import get_current_user
from ticketing.db.database import get_db
from ticketing.models.user import User
from ticketing.schemas.notification import NotificationResponse
from ticketing.services.notification_service import notification_service

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("")
async def get_notifications(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get the 50 most recent notifications."""
    notifications = await notification_service.get_notifications(db, current_user)
    return {"success": True, "data": [NotificationResponse.model_validate(n) for n in notifications]}


@router.get("/unread-count")
async def get_unread_count(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    count = await notification_service.get_unread_count(db, current_user)
    return {"success": True, "data": {"count": count}}


@router.put("/read-all")
async def mark_all_as_read(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    await notification_service.mark_all_as_read(db, current_user)
    return {"success": True, "message": "All notifications marked as read"}


@router.put("/{notification_id}/read")
async def mark_as_read(
    notification_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    notification = await notification_service.mark_as_read(db, current_user, notification_id)
    return {
        "success": True,
        "message": "Notification marked as read",
        "data": NotificationResponse.model_validate(notification),
    }
