# ===== app/services/availability/availability_service.py =====
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union
from datetime import date, datetime
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from app.config.settings import get_settings
from app.core.errors import NotFoundError
from app.models.salon import Salon
from app.models.service import Service
from app.models.availability import WorkHourRule, Absence
from app.models.booking import Booking, BookingStatus
from app.services.roster.roster_service import RosterService
from app.utils.time_window import (
    add_minutes,
    ensure_utc,
    intervals_overlap,
    local_day_bounds,
    parse_date,
    time_of_day_to_instant,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Slot:
    """A bookable [start, end) interval for one stylist, end includes the buffer"""
    start: datetime
    end: datetime
    stylist_id: UUID

    def to_dict(self) -> Dict[str, str]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "stylist_id": str(self.stylist_id),
        }


Interval = Tuple[datetime, datetime]


class AvailabilityService:
    """Computes free slots from work-hour rules, absences and occupying bookings"""

    @staticmethod
    def get_salon_timezone(db: Session, salon_id: UUID) -> str:
        salon = db.query(Salon).filter(Salon.id == salon_id).first()
        if salon and salon.timezone:
            return salon.timezone
        return get_settings().SALON_TIMEZONE

    @staticmethod
    def slot_length(service: Service) -> int:
        """Minutes a booking of this service blocks its stylist"""
        return service.duration_min + get_settings().BOOKING_BUFFER_MINUTES

    @staticmethod
    def rule_window(on_date: date, rule: WorkHourRule, timezone: str) -> Interval:
        return (
            time_of_day_to_instant(on_date, rule.start_time, timezone),
            time_of_day_to_instant(on_date, rule.end_time, timezone),
        )

    @staticmethod
    def load_absences(
            db: Session,
            stylist_ids: Sequence[UUID],
            range_start: datetime,
            range_end: datetime
    ) -> Dict[UUID, List[Interval]]:
        """Absence intervals intersecting [range_start, range_end), grouped by stylist"""
        if not stylist_ids:
            return {}

        absences = db.query(Absence).filter(
            Absence.stylist_id.in_(list(stylist_ids)),
            Absence.starts_at < range_end,
            Absence.ends_at > range_start
        ).all()

        grouped: Dict[UUID, List[Interval]] = {}
        for absence in absences:
            grouped.setdefault(absence.stylist_id, []).append(
                (ensure_utc(absence.starts_at), ensure_utc(absence.ends_at))
            )
        return grouped

    @staticmethod
    def load_occupying_bookings(
            db: Session,
            stylist_ids: Sequence[UUID],
            range_start: datetime,
            range_end: datetime
    ) -> Dict[UUID, List[Interval]]:
        """Non-cancelled booking intervals intersecting [range_start, range_end), grouped by stylist"""
        if not stylist_ids:
            return {}

        bookings = db.query(Booking).filter(
            Booking.stylist_id.in_(list(stylist_ids)),
            Booking.status != BookingStatus.CANCELLED.value,
            Booking.starts_at < range_end,
            Booking.ends_at > range_start
        ).all()

        grouped: Dict[UUID, List[Interval]] = {}
        for booking in bookings:
            grouped.setdefault(booking.stylist_id, []).append(
                (ensure_utc(booking.starts_at), ensure_utc(booking.ends_at))
            )
        return grouped

    @staticmethod
    def iterate_candidates(
            window_start: datetime,
            window_end: datetime,
            length_minutes: int,
            step_minutes: int
    ) -> Iterator[Interval]:
        """Walk a window in fixed steps yielding candidates that end inside it"""
        current = window_start
        while add_minutes(current, length_minutes) <= window_end:
            yield current, add_minutes(current, length_minutes)
            current = add_minutes(current, step_minutes)

    @staticmethod
    def find_slots(
            db: Session,
            salon_id: UUID,
            service_id: UUID,
            on_date: Union[str, date],
            stylist_id: Optional[UUID] = None
    ) -> List[Slot]:
        """
        Generate every bookable slot for a service on a salon-local date.

        An empty list is a normal outcome: unknown/inactive service, no
        eligible stylist, no rule that weekday, or a fully booked day.
        """
        settings = get_settings()
        day = parse_date(on_date)

        service = db.query(Service).filter(
            Service.id == service_id,
            Service.salon_id == salon_id
        ).first()

        if not service or not service.active:
            logger.info(f"No slots: service {service_id} missing or inactive in salon {salon_id}")
            return []

        try:
            roster = RosterService.resolve_roster(db, salon_id, day, stylist_id)
        except NotFoundError:
            logger.info(f"No slots: stylist {stylist_id} not bookable in salon {salon_id}")
            return []

        roster = [entry for entry in roster if entry.rules]
        if not roster:
            return []

        timezone = AvailabilityService.get_salon_timezone(db, salon_id)
        day_start, day_end = local_day_bounds(day, timezone)
        stylist_ids = [entry.stylist_id for entry in roster]

        absences = AvailabilityService.load_absences(db, stylist_ids, day_start, day_end)
        bookings = AvailabilityService.load_occupying_bookings(db, stylist_ids, day_start, day_end)

        length = AvailabilityService.slot_length(service)
        slots: Dict[Tuple[UUID, datetime], Slot] = {}

        for entry in roster:
            blocked = absences.get(entry.stylist_id, []) + bookings.get(entry.stylist_id, [])
            windows = []

            for rule in entry.rules:
                window = AvailabilityService.rule_window(day, rule, timezone)
                if window[0] >= window[1]:
                    logger.warning(f"Skipping work-hour rule {rule.id}: start is not before end")
                    continue
                # Identical windows of the same stylist are walked once
                if window not in windows:
                    windows.append(window)

            for window_start, window_end in windows:
                for start, end in AvailabilityService.iterate_candidates(
                        window_start, window_end, length, settings.SLOT_STEP_MINUTES
                ):
                    if any(intervals_overlap(start, end, b_start, b_end) for b_start, b_end in blocked):
                        continue
                    # Overlapping rules can yield the same start twice
                    slots.setdefault((entry.stylist_id, start), Slot(start, end, entry.stylist_id))

        result = sorted(slots.values(), key=lambda s: (s.start, str(s.stylist_id)))

        logger.info(
            f"Found {len(result)} slots for service {service_id} on {day.isoformat()} "
            f"across {len(roster)} stylists"
        )
        return result
