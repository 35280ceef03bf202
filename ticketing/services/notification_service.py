"""
Notification Service for the Ticketing Service.
Records in-app notifications. Creation is best-effort and never fails the caller.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ticketing.core.exceptions import NotFoundError
from ticketing.db.repositories import BookingRepository, NotificationRepository
from ticketing.models import Event, Notification, NotificationType, User

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Notification service for creating and reading in-app notifications.
    Write paths run after the triggering operation has committed.
    """

    async def create_notification(
        self,
        session: Session,
        user_id: int,
        message: str,
        notification_type: NotificationType = NotificationType.GENERAL,
        related_event_id: Optional[int] = None,
        related_booking_id: Optional[int] = None,
    ) -> Optional[Notification]:
        """
        Create a notification, logging instead of raising on failure.

        The write runs in its own session bound to the caller's engine.

        Returns:
            Created notification or None if it could not be stored
        """
        notification_session = Session(bind=session.get_bind(), expire_on_commit=False)
        try:
            notification = Notification(
                user_id=user_id,
                message=message[:500],
                type=notification_type,
                related_event_id=related_event_id,
                related_booking_id=related_booking_id,
            )
            notification_session.add(notification)
            notification_session.commit()
            return notification
        except Exception as e:
            notification_session.rollback()
            logger.error(f"Failed to create notification for user {user_id}: {e}")
            return None
        finally:
            notification_session.close()

    async def notify_event_attendees(self, session: Session, event: Event, cancelled: bool) -> int:
        """
        Notify every distinct attendee with a completed booking about an event change.

        Args:
            session: Database session
            event: Updated event
            cancelled: Whether this update cancelled the event

        Returns:
            Number of notifications created
        """
        try:
            attendee_ids = BookingRepository(session).get_attendee_ids(event.id)
        except Exception as e:
            logger.error(f"Failed to load attendees of event {event.id} for notification: {e}")
            return 0

        if cancelled:
            message = f"The event {event.event_name} has been cancelled"
            notification_type = NotificationType.EVENT_CANCELLED
        else:
            message = f"{event.event_name} has been updated. Check the latest details."
            notification_type = NotificationType.EVENT_UPDATED

        created = 0
        for attendee_id in attendee_ids:
            notification = await self.create_notification(
                session,
                user_id=attendee_id,
                message=message,
                notification_type=notification_type,
                related_event_id=event.id,
            )
            if notification is not None:
                created += 1

        logger.info(f"Sent {created} {notification_type.value} notifications for event {event.id}")
        return created

    async def get_notifications(self, session: Session, user: User) -> List[Notification]:
        """Get the user's 50 most recent notifications."""
        return NotificationRepository(session).get_latest_for_user(user.id, limit=50)

    async def get_unread_count(self, session: Session, user: User) -> int:
        return NotificationRepository(session).count_unread(user.id)

    async def mark_as_read(self, session: Session, user: User, notification_id: int) -> Notification:
        """
        Mark one of the user's notifications as read.

        Raises:
            NotFoundError: If the notification does not exist or belongs to someone else
        """
        repo = NotificationRepository(session)
        notification = repo.get_by_id(notification_id)
        if notification is None or notification.user_id != user.id:
            raise NotFoundError("Notification not found")
        return repo.update(notification, read=True)

    async def mark_all_as_read(self, session: Session, user: User) -> int:
        updated = NotificationRepository(session).mark_all_read(user.id)
        logger.info(f"Marked {updated} notifications as read for user {user.id}")
        return updated


# Global notification service instance
notification_service = NotificationService()
