"""
Analytics API endpoints for organizers.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ticketing.api.dependencies import get_current_organizer
from ticketing.core.exceptions import TicketingError
from ticketing.db.database import get_db
from ticketing.models.user import User
from ticketing.services.analytics_service import analytics_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/dashboard")
async def get_dashboard(
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db),
):
    """Get dashboard statistics across the organizer's events."""
    try:
        data = await analytics_service.get_dashboard(db, current_user)
        return {"success": True, "data": data}
    except Exception as e:
        logger.error(f"Error getting dashboard stats: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch dashboard stats"
        )


@router.get("/events/{event_id}")
async def get_event_analytics(
    event_id: int,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db),
):
    """Get sales and check-in analytics for one event."""
    try:
        data = await analytics_service.get_event_analytics(db, current_user, event_id)
        return {"success": True, "data": data}
    except TicketingError:
        raise
    except Exception as e:
        logger.error(f"Error getting analytics for event {event_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch event analytics"
        )
