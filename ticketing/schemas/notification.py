"""
Pydantic schemas for notifications.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ticketing.models.notification import NotificationType


class NotificationResponse(BaseModel):
    id: int
    user_id: int
    message: str
    type: NotificationType
    read: bool
    related_event_id: Optional[int] = None
    related_booking_id: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True
