# ============================================================================
# app/services/booking/booking_status_service.py
# Booking lifecycle state machine
# ============================================================================
"""
Booking status workflow.

    requested -> confirmed | declined
    confirmed -> cancelled

declined and cancelled are terminal. Status changes never touch times or the
assigned stylist; a cancelled booking stops occupying its stylist at once.
"""
from typing import Dict, FrozenSet, Optional
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from app.core.errors import InvalidTransitionError, NotFoundError, ValidationError, MSG_INVALID, STATUS_BAD_REQUEST
from app.models.booking import Booking, BookingStatus
from app.services.notification.notifier import Notifier, notify_safely

logger = logging.getLogger(__name__)

TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.REQUESTED: frozenset({BookingStatus.CONFIRMED, BookingStatus.DECLINED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.CANCELLED}),
    BookingStatus.DECLINED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}

# Statuses whose reason is stored on the booking
REASON_STATUSES = {BookingStatus.DECLINED, BookingStatus.CANCELLED}


def parse_status(value) -> BookingStatus:
    """Coerce a raw status value, 400-class ValidationError when unknown"""
    try:
        return BookingStatus(value)
    except ValueError:
        raise ValidationError("status", MSG_INVALID, status_code=STATUS_BAD_REQUEST)


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return target in TRANSITIONS[current]


def is_terminal(status: BookingStatus) -> bool:
    return not TRANSITIONS[status]


class BookingStatusService:
    """Applies staff actions to bookings"""

    @staticmethod
    def update_booking_status(
            db: Session,
            booking_id: UUID,
            salon_id: UUID,
            new_status,
            reason: Optional[str] = None,
            notifier: Optional[Notifier] = None
    ) -> Booking:
        target = parse_status(new_status)

        booking = db.query(Booking).filter(
            Booking.id == booking_id,
            Booking.salon_id == salon_id
        ).with_for_update().first()

        if not booking:
            db.rollback()
            raise NotFoundError("booking_id", "booking not found")

        current = BookingStatus(booking.status)
        if not can_transition(current, target):
            db.rollback()
            raise InvalidTransitionError(current.value, target.value)

        booking.status = target.value
        if target in REASON_STATUSES and reason:
            booking.cancellation_reason = reason

        db.commit()
        db.refresh(booking)

        logger.info(f"Booking {booking.id} status {current.value} -> {target.value}")

        if notifier is not None:
            notify_safely(notifier.booking_status_changed, booking, current.value)

        return booking
