# ============================================================================
# app/services/notification/notifier.py
# Booking event notifications, injected into the committer and status workflow
# ============================================================================
"""
Notifiers receive booking events after the database commit succeeded.

A notifier is constructed by whoever wires the application (the FastAPI
dependency, the Celery task, a test) and passed in explicitly.
"""
from abc import ABC, abstractmethod
from typing import Optional
import logging

from app.config.settings import Settings
from app.models.booking import Booking
from app.services.email.email_service import (
    EmailService,
    booking_status_to_customer,
    new_booking_to_salon,
)
from app.utils.time_window import to_local

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Receives booking lifecycle events"""

    @abstractmethod
    def booking_created(self, booking: Booking) -> None:
        ...

    @abstractmethod
    def booking_status_changed(self, booking: Booking, previous_status: str) -> None:
        ...

    @abstractmethod
    def booking_reminder(self, booking: Booking) -> bool:
        """Send a reminder; True when it was actually delivered"""


class LoggingNotifier(Notifier):
    """Writes events to the log only (development / email disabled)"""

    def booking_created(self, booking: Booking) -> None:
        logger.info(f"Booking {booking.id} created for stylist {booking.stylist_id} at {booking.starts_at}")

    def booking_status_changed(self, booking: Booking, previous_status: str) -> None:
        logger.info(f"Booking {booking.id} status {previous_status} -> {booking.status}")

    def booking_reminder(self, booking: Booking) -> bool:
        logger.info(f"Reminder due for booking {booking.id} at {booking.starts_at}")
        return True


class EmailNotifier(Notifier):
    """Emails the salon about new bookings and the customer about status changes"""

    def __init__(self, email_service: EmailService, settings: Settings):
        self.email_service = email_service
        self.settings = settings

    def _local_date_time(self, booking: Booking):
        local = to_local(booking.starts_at, booking.salon.timezone)
        return local.strftime("%d.%m.%Y"), local.strftime("%H:%M")

    def _customer_email(self, booking: Booking) -> Optional[str]:
        if booking.customer is None:
            return None
        return booking.customer.email

    def booking_created(self, booking: Booking) -> None:
        salon = booking.salon
        if not salon.email:
            logger.info(f"Salon {salon.id} has no email, skipping new-booking mail for {booking.id}")
            return

        date, time = self._local_date_time(booking)
        html, text = new_booking_to_salon(
            salon_name=salon.name,
            service_title=booking.service.title,
            price=booking.service.formatted_price,
            date=date,
            time=time,
            stylist=booking.stylist.display_name if booking.stylist else None,
            note=booking.note,
            manage_url=f"{self.settings.APP_PUBLIC_URL}/admin/today?s={salon.id}",
        )
        self.email_service.send_email(
            to_email=salon.email,
            subject=f"New booking: {booking.service.title} on {date} at {time}",
            html_content=html,
            plain_text=text,
        )

    def booking_status_changed(self, booking: Booking, previous_status: str) -> None:
        to_email = self._customer_email(booking)
        if not to_email:
            logger.info(f"Booking {booking.id} has no customer email, skipping status mail")
            return

        date, time = self._local_date_time(booking)
        html, text = booking_status_to_customer(
            status=booking.status,
            service_title=booking.service.title,
            date=date,
            time=time,
            salon_name=booking.salon.name,
        )
        self.email_service.send_email(
            to_email=to_email,
            subject=f"{booking.salon.name}: your appointment on {date}",
            html_content=html,
            plain_text=text,
        )

    def booking_reminder(self, booking: Booking) -> bool:
        to_email = self._customer_email(booking)
        if not to_email:
            logger.info(f"[reminder] skip, no customer email {booking.id}")
            return False

        date, time = self._local_date_time(booking)
        html, text = booking_status_to_customer(
            status="confirmed",
            service_title=booking.service.title,
            date=date,
            time=time,
            salon_name=booking.salon.name,
        )
        return self.email_service.send_email(
            to_email=to_email,
            subject=f"Reminder: your appointment tomorrow at {time}",
            html_content=html,
            plain_text=text,
        )


def build_notifier(settings: Settings) -> Notifier:
    """Pick the notifier implementation for the current configuration"""
    if settings.EMAIL_ENABLED:
        return EmailNotifier(EmailService(settings), settings)
    return LoggingNotifier()


def notify_safely(callback, *args) -> None:
    """Run a notifier callback; delivery problems never undo a committed booking"""
    try:
        callback(*args)
    except Exception as e:
        logger.error(f"Notification {getattr(callback, '__name__', callback)} failed: {e}", exc_info=True)
