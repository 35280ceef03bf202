"""
Booking API endpoints for the Ticketing Service.
Handles booking creation, payment confirmation, rosters, check-in and payment webhooks.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from ticketing.api.dependencies import get_booking_service, get_current_organizer, get_current_user
from ticketing.core.exceptions import PaymentGatewayError, TicketingError
from ticketing.db.database import get_db
from ticketing.models.booking import PaymentStatus
from ticketing.models.user import User
from ticketing.schemas.booking import (
    AttendeeInfo, AttendeeResponse, BookingCreate, BookingResponse, MyBookingResponse, PaymentConfirm
)
from ticketing.services.booking_service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post("/webhook")
async def payment_webhook(
    request: Request,
    db: Session = Depends(get_db),
    bookings: BookingService = Depends(get_booking_service),
):
    """
    Receive payment provider webhooks.
    The raw body is required for signature verification.
    """
    payload = await request.body()
    signature = request.headers.get("stripe-signature")

    try:
        await bookings.handle_webhook(db, payload, signature)
    except PaymentGatewayError as e:
        logger.warning(f"Rejected payment webhook: {e.message}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Webhook Error: {e.message}")

    return {"received": True}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    bookings: BookingService = Depends(get_booking_service),
):
    """
    Create a booking for an event ticket.

    Args:
        booking_data: Booking creation data
        current_user: Authenticated attendee
        db: Database session
        bookings: Booking service

    Returns:
        Booking details with checkout URL, or a mock payment flag

    Raises:
        HTTPException: If booking creation fails unexpectedly
    """
    try:
        result = await bookings.create_booking(db, current_user, booking_data)
    except TicketingError:
        raise
    except Exception as e:
        logger.error(f"Booking creation failed: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create booking")

    data = {
        "booking": BookingResponse.model_validate(result.booking),
        "checkout_url": result.checkout_url,
    }
    if result.mock_payment:
        data["mock_payment"] = True
    return {"success": True, "message": result.message, "data": data}


@router.post("/{booking_id}/confirm")
async def confirm_payment(
    booking_id: int,
    payment: Optional[PaymentConfirm] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    bookings: BookingService = Depends(get_booking_service),
):
    """Confirm payment of a pending booking. Safe to call more than once."""
    transaction_id = payment.transaction_id if payment else None
    try:
        booking, completed = await bookings.confirm_payment(db, current_user, booking_id, transaction_id)
    except TicketingError:
        raise
    except Exception as e:
        logger.error(f"Payment confirmation failed for booking {booking_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to confirm payment")

    message = "Payment confirmed" if completed else "Payment already completed"
    return {"success": True, "message": message, "data": BookingResponse.model_validate(booking)}


@router.get("/my-bookings")
async def get_my_bookings(
    payment_status: Optional[PaymentStatus] = Query(None, alias="status", description="Filter by payment status"),
    upcoming: Optional[bool] = Query(None, description="true for upcoming events, false for past events"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    bookings: BookingService = Depends(get_booking_service),
):
    """Get the current user's bookings with event and ticket details."""
    results = await bookings.get_my_bookings(db, current_user, payment_status, upcoming)
    return {"success": True, "data": [MyBookingResponse.model_validate(b) for b in results]}


@router.get("/event/{event_id}/attendees")
async def get_event_attendees(
    event_id: int,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db),
    bookings: BookingService = Depends(get_booking_service),
):
    """Get the paid attendee roster of an event the organizer owns."""
    results = await bookings.get_event_attendees(db, current_user, event_id)
    attendees = [
        AttendeeResponse(
            id=b.id,
            attendee=AttendeeInfo.model_validate(b.attendee) if b.attendee else None,
            ticket_type=b.ticket.ticket_type if b.ticket else None,
            quantity=b.quantity,
            total_amount=b.total_amount,
            booking_date=b.booking_date,
            payment_status=b.payment_status,
            check_in_status=b.check_in_status,
        )
        for b in results
    ]
    return {"success": True, "data": attendees}


@router.put("/checkin/{booking_id}")
async def check_in_attendee(
    booking_id: int,
    current_user: User = Depends(get_current_organizer),
    db: Session = Depends(get_db),
    bookings: BookingService = Depends(get_booking_service),
):
    """Toggle check-in for a paid booking."""
    booking, message = await bookings.check_in_attendee(db, current_user, booking_id)
    return {"success": True, "message": message, "data": BookingResponse.model_validate(booking)}
