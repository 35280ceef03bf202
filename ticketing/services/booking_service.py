"""
Booking service for the Ticketing Service.
Implements the booking and payment lifecycle: creation, checkout, confirmation,
webhook finalization, attendee rosters and check-in.
"""

import logging
import time
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ticketing.core.config import config
from ticketing.core.exceptions import (
    ConflictError, NotFoundError, PaymentGatewayError, PermissionDeniedError, ValidationError
)
from ticketing.db.repositories import BookingRepository, TicketRepository
from ticketing.models import (
    Booking, CheckInStatus, Event, EventStatus, NotificationType, PaymentStatus, Ticket, User
)
from ticketing.schemas.booking import BookingCreate
from ticketing.services.event_service import get_owned_event
from ticketing.services.notification_service import NotificationService, notification_service
from ticketing.services.payment_gateway import (
    CheckoutRequest, CheckoutSession, MockPaymentGateway, PaymentGateway, build_payment_gateway
)

logger = logging.getLogger(__name__)

DEFAULT_CLIENT_URL = "http://localhost:5173"
CHECKOUT_COMPLETED = "checkout.session.completed"


@dataclass
class BookingResult:
    """Outcome of a booking request."""
    booking: Booking
    message: str
    checkout_url: Optional[str] = None
    mock_payment: bool = False


class BookingService:
    """
    Booking service for the ticket purchase lifecycle.

    Sold counts are incremented with a conditional update and booking
    completion only succeeds from pending, so the webhook and the client
    confirm can race without double counting.
    """

    def __init__(
        self,
        payment_gateway: Optional[PaymentGateway] = None,
        notifications: NotificationService = notification_service,
        client_url: str = DEFAULT_CLIENT_URL,
    ):
        self.payment_gateway = payment_gateway
        self.fallback_gateway = MockPaymentGateway()
        self.notifications = notifications
        self.client_url = client_url
        self._initialized = payment_gateway is not None

    async def initialize(self):
        """Select the payment gateway from configuration."""
        if self._initialized:
            return

        payment_config = await config.get_payment_config()
        self.payment_gateway = build_payment_gateway(payment_config)
        self.client_url = payment_config["client_url"]
        self._initialized = True
        logger.info("Booking service initialized")

    async def create_booking(self, session: Session, attendee: User, booking_data: BookingCreate) -> BookingResult:
        """
        Create a booking for a published event's active ticket.

        Free bookings complete immediately. Paid bookings stay pending until
        the gateway checkout is confirmed; if the gateway fails the booking
        falls back to mock payment mode.

        Args:
            session: Database session
            attendee: Booking user
            booking_data: Validated booking request

        Returns:
            Booking result with checkout details

        Raises:
            NotFoundError: If the event or ticket does not exist
            ValidationError: If the event is not published or too few tickets remain
            ConflictError: If a free booking loses the race for the last tickets
        """
        event = session.get(Event, booking_data.event_id)
        if event is None:
            raise NotFoundError("Event not found")
        if event.status != EventStatus.PUBLISHED:
            raise ValidationError("Event is not available for booking")

        ticket = session.get(Ticket, booking_data.ticket_id)
        if ticket is None or not ticket.is_active or ticket.event_id != event.id:
            raise NotFoundError("Ticket not found")

        remaining = ticket.remaining_quantity
        if booking_data.quantity > remaining:
            raise ValidationError(f"Only {remaining} tickets available")

        total_amount = Decimal(str(ticket.price)) * booking_data.quantity
        booking = Booking(
            attendee_id=attendee.id,
            event_id=event.id,
            ticket_id=ticket.id,
            quantity=booking_data.quantity,
            total_amount=total_amount,
            payment_status=PaymentStatus.PENDING,
        )

        if total_amount == 0:
            return await self._book_free(session, booking, event)

        session.add(booking)
        session.flush()

        checkout = await self._create_checkout(booking, event, ticket)
        booking.transaction_id = checkout.session_id
        session.commit()
        session.refresh(booking)

        if checkout.is_mock:
            logger.info(f"Booking {booking.id} created in mock payment mode")
            return BookingResult(
                booking=booking,
                message="Booking created (mock payment mode)",
                checkout_url=None,
                mock_payment=True,
            )

        logger.info(f"Booking {booking.id} created, awaiting checkout {checkout.session_id}")
        return BookingResult(
            booking=booking,
            message="Booking created, proceed to payment",
            checkout_url=checkout.url,
        )

    async def _book_free(self, session: Session, booking: Booking, event: Event) -> BookingResult:
        booking.payment_status = PaymentStatus.COMPLETED
        booking.transaction_id = f"FREE_{int(time.time() * 1000)}"
        session.add(booking)

        if not TicketRepository(session).increment_sold(booking.ticket_id, booking.quantity):
            session.rollback()
            raise ConflictError("Tickets sold out")

        session.commit()
        session.refresh(booking)
        logger.info(f"Free booking {booking.id} completed for event {event.id}")
        await self._notify_confirmed(session, booking, event)

        return BookingResult(booking=booking, message="Free ticket booked successfully", checkout_url=None)

    async def _create_checkout(self, booking: Booking, event: Event, ticket: Ticket) -> CheckoutSession:
        unit_amount = int((Decimal(str(ticket.price)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        request = CheckoutRequest(
            booking_id=booking.id,
            event_id=event.id,
            ticket_id=ticket.id,
            quantity=booking.quantity,
            unit_amount=unit_amount,
            product_name=f"{event.event_name} - {ticket.ticket_type}",
            description=ticket.description or f"Ticket for {event.event_name}",
            success_url=(
                f"{self.client_url}/booking/success"
                f"?session_id={{CHECKOUT_SESSION_ID}}&booking_id={booking.id}"
            ),
            cancel_url=f"{self.client_url}/booking/cancel?booking_id={booking.id}",
        )

        try:
            return await self.payment_gateway.create_checkout_session(request)
        except PaymentGatewayError as e:
            logger.warning(f"Payment gateway unavailable for booking {booking.id}, using mock payment: {e.message}")
            return await self.fallback_gateway.create_checkout_session(request)

    def _complete_booking(self, session: Session, booking: Booking, transaction_id: Optional[str]) -> bool:
        """
        Complete a pending booking and count its tickets as sold in one transaction.

        Returns:
            True if this call completed the booking, False if it was no longer pending

        Raises:
            ConflictError: If the ticket no longer has enough remaining quantity
        """
        if not BookingRepository(session).mark_completed(booking.id, transaction_id):
            session.rollback()
            return False

        if not TicketRepository(session).increment_sold(booking.ticket_id, booking.quantity):
            session.rollback()
            raise ConflictError("Tickets sold out")

        session.commit()
        session.refresh(booking)
        return True

    async def confirm_payment(
        self, session: Session, attendee: User, booking_id: int, transaction_id: Optional[str] = None
    ) -> Tuple[Booking, bool]:
        """
        Confirm payment of a booking.

        Confirming an already completed booking is a no-op.

        Returns:
            The booking and whether this call completed it

        Raises:
            NotFoundError: If the booking does not exist
            PermissionDeniedError: If the booking belongs to another attendee
            ValidationError: If the booking failed or was refunded
            ConflictError: If the ticket sold out before confirmation
        """
        booking = session.get(Booking, booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        if booking.attendee_id != attendee.id:
            raise PermissionDeniedError("Not authorized to confirm this booking")

        if booking.payment_status == PaymentStatus.COMPLETED:
            return booking, False
        if booking.payment_status != PaymentStatus.PENDING:
            raise ValidationError(f"Cannot confirm a {booking.payment_status.value} booking")

        completed = self._complete_booking(session, booking, transaction_id)
        if not completed:
            session.refresh(booking)
            return booking, False

        logger.info(f"Payment confirmed for booking {booking.id}")
        await self._notify_confirmed(session, booking, booking.event)
        return booking, True

    async def handle_webhook(self, session: Session, payload: bytes, signature: Optional[str]) -> None:
        """
        Handle a verified payment webhook.

        Raises:
            PaymentGatewayError: If the event cannot be verified
        """
        webhook_event = await self.payment_gateway.construct_webhook_event(payload, signature)
        if webhook_event.type != CHECKOUT_COMPLETED:
            logger.info(f"Ignoring webhook event {webhook_event.type}")
            return

        metadata = webhook_event.data.get("metadata") or {}
        try:
            booking_id = int(metadata.get("booking_id"))
        except (TypeError, ValueError):
            logger.warning("Checkout completed webhook without a valid booking_id")
            return

        booking = session.get(Booking, booking_id)
        if booking is None or booking.payment_status != PaymentStatus.PENDING:
            logger.info(f"Webhook for booking {booking_id} ignored, booking not pending")
            return

        try:
            completed = self._complete_booking(session, booking, webhook_event.data.get("payment_intent"))
        except ConflictError:
            BookingRepository(session).mark_failed(booking_id)
            session.commit()
            logger.error(f"Booking {booking_id} paid but tickets sold out, marked failed")
            return

        if completed:
            logger.info(f"Booking {booking_id} completed by webhook")
            await self._notify_confirmed(session, booking, booking.event)

    async def _notify_confirmed(self, session: Session, booking: Booking, event: Event) -> None:
        await self.notifications.create_notification(
            session,
            user_id=booking.attendee_id,
            message=f"Your booking for {event.event_name} is confirmed",
            notification_type=NotificationType.BOOKING_CONFIRMED,
            related_event_id=event.id,
            related_booking_id=booking.id,
        )

    async def get_my_bookings(
        self,
        session: Session,
        attendee: User,
        payment_status: Optional[PaymentStatus] = None,
        upcoming: Optional[bool] = None,
    ) -> List[Booking]:
        """Get the attendee's bookings, newest first."""
        return BookingRepository(session).get_for_attendee(attendee.id, payment_status, upcoming)

    async def get_event_attendees(self, session: Session, organizer: User, event_id: int) -> List[Booking]:
        """Get completed bookings of an event the organizer owns."""
        get_owned_event(session, event_id, organizer, "view attendees")
        return BookingRepository(session).get_completed_for_event(event_id)

    async def check_in_attendee(self, session: Session, organizer: User, booking_id: int) -> Tuple[Booking, str]:
        """
        Toggle the check-in status of a paid booking.

        Returns:
            The booking and a message describing the new state

        Raises:
            NotFoundError: If the booking does not exist
            PermissionDeniedError: If the organizer does not own the event
            ValidationError: If the booking is not paid
        """
        booking = session.get(Booking, booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        if booking.event.organizer_id != organizer.id:
            raise PermissionDeniedError("Not authorized to check in attendees")
        if booking.payment_status != PaymentStatus.COMPLETED:
            raise ValidationError("Cannot check in unpaid booking")

        if booking.check_in_status == CheckInStatus.CHECKED_IN:
            booking.check_in_status = CheckInStatus.NOT_CHECKED_IN
            message = "Attendee check-in reversed"
        else:
            booking.check_in_status = CheckInStatus.CHECKED_IN
            message = "Attendee checked in"

        session.commit()
        session.refresh(booking)
        logger.info(f"Booking {booking.id} check-in status set to {booking.check_in_status.value}")
        return booking, message


# Global booking service instance
booking_service = BookingService()
