# ============================================================================
# app/services/booking/booking_service.py
# Commit-time validation and insert of new bookings
# ============================================================================
"""Service for creating bookings"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional, Union
from uuid import UUID
import logging

import pytz
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from app.config.settings import get_settings
from app.core.errors import (
    BookingEngineError,
    ConcurrencyError,
    ConflictError,
    NotFoundError,
    ValidationError,
    MSG_CUSTOMER_NOT_FOUND,
    MSG_NO_ACTIVE_STYLIST,
    MSG_NO_FREE_STYLIST,
    MSG_NOT_IN_FUTURE,
    MSG_NOTE_TOO_LONG,
    MSG_OFF_GRID,
    MSG_OUTSIDE_WORK_HOURS,
    MSG_OVERLAPS_BOOKING,
    MSG_SERVICE_INACTIVE,
    MSG_SERVICE_NOT_FOUND,
    MSG_STYLIST_ABSENT,
    STATUS_UNPROCESSABLE,
)
from app.models.booking import Booking, BookingStatus
from app.models.service import Service
from app.models.stylist import Stylist
from app.models.user import User
from app.services.availability.availability_service import AvailabilityService
from app.services.notification.notifier import Notifier, notify_safely
from app.services.roster.roster_service import RosterService
from app.utils.time_window import (
    add_minutes,
    ensure_utc,
    intervals_overlap,
    local_date_of,
    parse_instant,
)

logger = logging.getLogger(__name__)

# PostgreSQL serialization_failure / deadlock_detected
RETRYABLE_PGCODES = {"40001", "40P01"}

# PostgreSQL exclusion_violation raised by bookings_no_overlap_per_stylist
EXCLUSION_VIOLATION_PGCODE = "23P01"
OVERLAP_CONSTRAINT = "bookings_no_overlap_per_stylist"


@dataclass
class BookingRequest:
    salon_id: UUID
    service_id: UUID
    starts_at: Union[str, datetime]
    stylist_id: Optional[UUID] = None
    customer_id: Optional[UUID] = None
    note: Optional[str] = None


class BookingService:
    """Handles booking creation"""

    @staticmethod
    def create_booking(
            db: Session,
            request: BookingRequest,
            now: Optional[datetime] = None,
            notifier: Optional[Notifier] = None
    ) -> Booking:
        """
        Validate a booking request against current data and insert it.

        Validation is fail-fast and raises field-attributed errors. The
        candidate stylist row is locked before its overlap check so that the
        check and the insert form one transaction; a concurrent commit that
        still slips through surfaces as the same "overlaps existing booking"
        conflict.
        """
        settings = get_settings()
        now = ensure_utc(now) if now else datetime.now(pytz.UTC)

        # 1. Service must exist in the salon and be active
        service = db.query(Service).filter(
            Service.id == request.service_id,
            Service.salon_id == request.salon_id
        ).first()
        if not service:
            raise NotFoundError("service_id", MSG_SERVICE_NOT_FOUND, status_code=STATUS_UNPROCESSABLE)
        if not service.active:
            raise ValidationError("service_id", MSG_SERVICE_INACTIVE)

        # 2. Start must parse and lie in the future
        timezone = AvailabilityService.get_salon_timezone(db, request.salon_id)
        starts_at = parse_instant(request.starts_at, timezone, field="starts_at")
        if starts_at <= now:
            raise ValidationError("starts_at", MSG_NOT_IN_FUTURE)

        # 3. End includes the turnover buffer
        ends_at = add_minutes(starts_at, AvailabilityService.slot_length(service))
        local_day = local_date_of(starts_at, timezone)

        # 4. Candidate stylists
        explicit = request.stylist_id is not None
        try:
            candidates = BookingService._candidate_stylists(db, request.salon_id, request.stylist_id)
        except NotFoundError as e:
            raise NotFoundError(e.field, e.message, status_code=STATUS_UNPROCESSABLE)

        if not candidates:
            raise NotFoundError("stylist_id", MSG_NO_ACTIVE_STYLIST, status_code=STATUS_UNPROCESSABLE)

        # Customer reference and note
        if request.customer_id is not None and db.get(User, request.customer_id) is None:
            raise NotFoundError("customer_id", MSG_CUSTOMER_NOT_FOUND, status_code=STATUS_UNPROCESSABLE)

        if request.note is not None and len(request.note) > settings.BOOKING_NOTE_MAX_LENGTH:
            raise ValidationError("note", MSG_NOTE_TOO_LONG)

        try:
            # 5. First stylist passing all checks wins
            chosen = None
            for stylist in candidates:
                BookingService._lock_stylist(db, stylist.id)
                failure = BookingService.check_stylist_free(
                    db, stylist.id, request.salon_id, local_day, starts_at, ends_at, timezone
                )
                if failure is None:
                    chosen = stylist
                    break
                if explicit:
                    raise ConflictError("starts_at", failure)
                logger.debug(f"Stylist {stylist.id} rejected for {starts_at.isoformat()}: {failure}")

            if chosen is None:
                raise ConflictError("starts_at", MSG_NO_FREE_STYLIST)

            # 6. Insert
            booking = Booking(
                salon_id=request.salon_id,
                service_id=service.id,
                stylist_id=chosen.id,
                customer_id=request.customer_id,
                starts_at=starts_at,
                ends_at=ends_at,
                status=BookingStatus.REQUESTED.value,
                note=request.note,
                reminder_sent=False,
            )
            db.add(booking)
            db.commit()

        except BookingEngineError:
            db.rollback()
            raise
        except IntegrityError as e:
            db.rollback()
            if not BookingService._is_overlap_violation(e):
                logger.error(f"IntegrityError while creating booking: {e}")
                raise
            logger.info(f"Overlap constraint hit while creating booking (slot taken): {e}")
            raise ConcurrencyError() from e
        except OperationalError as e:
            db.rollback()
            if getattr(e.orig, "pgcode", None) in RETRYABLE_PGCODES:
                logger.info(f"Serialization failure while creating booking: {e}")
                raise ConcurrencyError() from e
            raise

        db.refresh(booking)
        logger.info(
            f"Created booking {booking.id}: salon={request.salon_id} stylist={chosen.id} "
            f"service={service.id} starts_at={starts_at.isoformat()} (stylist {'explicit' if explicit else 'resolved'})"
        )

        if notifier is not None:
            notify_safely(notifier.booking_created, booking)

        return booking

    @staticmethod
    def _candidate_stylists(db: Session, salon_id: UUID, stylist_id: Optional[UUID]) -> List[Stylist]:
        if stylist_id is not None:
            return [RosterService.get_active_stylist(db, salon_id, stylist_id)]
        return RosterService.list_active_stylists(db, salon_id)

    @staticmethod
    def _is_overlap_violation(error: IntegrityError) -> bool:
        orig = error.orig
        if getattr(orig, "pgcode", None) == EXCLUSION_VIOLATION_PGCODE:
            return True
        diag = getattr(orig, "diag", None)
        return getattr(diag, "constraint_name", None) == OVERLAP_CONSTRAINT

    @staticmethod
    def _lock_stylist(db: Session, stylist_id: UUID) -> None:
        """Row lock serializing concurrent commits for one stylist (no-op on SQLite)"""
        db.query(Stylist.id).filter(Stylist.id == stylist_id).with_for_update().first()

    @staticmethod
    def check_stylist_free(
            db: Session,
            stylist_id: UUID,
            salon_id: UUID,
            local_day: date,
            starts_at: datetime,
            ends_at: datetime,
            timezone: str
    ) -> Optional[str]:
        """
        Check one stylist for [starts_at, ends_at).

        Returns None when the range is bookable, otherwise the field message
        of the first failing check: work hours, absence, existing booking.
        """
        settings = get_settings()
        roster = RosterService.resolve_roster(db, salon_id, local_day, stylist_id)
        rules = roster[0].rules if roster else []

        step_seconds = settings.SLOT_STEP_MINUTES * 60
        containing = []
        for rule in rules:
            window_start, window_end = AvailabilityService.rule_window(local_day, rule, timezone)
            if window_start >= window_end:
                continue
            if window_start <= starts_at and ends_at <= window_end:
                containing.append(window_start)

        if not containing:
            return MSG_OUTSIDE_WORK_HOURS

        # Only starts the slot scanner can produce are accepted
        if not any((starts_at - w).total_seconds() % step_seconds == 0 for w in containing):
            return MSG_OFF_GRID

        absences = AvailabilityService.load_absences(db, [stylist_id], starts_at, ends_at)
        if any(intervals_overlap(starts_at, ends_at, a, b) for a, b in absences.get(stylist_id, [])):
            return MSG_STYLIST_ABSENT

        bookings = AvailabilityService.load_occupying_bookings(db, [stylist_id], starts_at, ends_at)
        if any(intervals_overlap(starts_at, ends_at, a, b) for a, b in bookings.get(stylist_id, [])):
            return MSG_OVERLAPS_BOOKING

        return None
