"""
Event endpoints for the Ticketing Service.
Public browsing plus organizer-only management.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ticketing.api.dependencies import get_current_organizer
from ticketing.db.database import get_db
from ticketing.models.event import EventCategory, EventStatus
from ticketing.models.user import User
from ticketing.schemas.event import EventCreate, EventUpdate
from ticketing.services.event_service import event_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])


@router.get("/organizer/my-events")
async def get_organizer_events(
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db),
):
    """Get the current organizer's events, newest first."""
    events = await event_service.get_organizer_events(db, current_user)
    return {"success": True, "data": events}


@router.get("")
async def list_events(
    search: Optional[str] = Query(None, max_length=200, description="Search name, description and venue"),
    category: Optional[EventCategory] = Query(None),
    date_from: Optional[date] = Query(None, alias="dateFrom", description="Earliest event date (inclusive)"),
    date_to: Optional[date] = Query(None, alias="dateTo", description="Latest event date (inclusive)"),
    price_min: Optional[float] = Query(None, alias="priceMin", ge=0),
    price_max: Optional[float] = Query(None, alias="priceMax", ge=0),
    status_filter: Optional[EventStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(20, ge=1, le=100, description="Number of items per page"),
    sort_by: str = Query("date", alias="sortBy", pattern="^(date|name|price)$"),
    sort_order: str = Query("asc", alias="sortOrder", pattern="^(asc|desc)$"),
    db: Session = Depends(get_db),
):
    """
    List events with filtering, sorting and pagination.

    Returns:
        Events enriched with min/max ticket price and pagination metadata
    """
    events, pagination = await event_service.list_events(
        db,
        search=search,
        category=category,
        date_from=date_from,
        date_to=date_to,
        price_min=price_min,
        price_max=price_max,
        status=status_filter,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return {"success": True, "data": events, "pagination": pagination}


@router.get("/{event_id}")
async def get_event(event_id: int, db: Session = Depends(get_db)):
    event = await event_service.get_event(db, event_id)
    return {"success": True, "data": event}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_event(
    event_data: EventCreate,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db),
):
    """Create an event owned by the current organizer."""
    event = await event_service.create_event(db, current_user, event_data)
    return {"success": True, "message": "Event created successfully", "data": event}


@router.put("/{event_id}")
async def update_event(
    event_id: int,
    event_data: EventUpdate,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db),
):
    """
    Update an event the current organizer owns.
    Attendees with completed bookings are notified.
    """
    event = await event_service.update_event(db, current_user, event_id, event_data)
    return {"success": True, "message": "Event updated successfully", "data": event}


@router.delete("/{event_id}")
async def delete_event(
    event_id: int,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db),
):
    await event_service.delete_event(db, current_user, event_id)
    return {"success": True, "message": "Event deleted successfully"}
