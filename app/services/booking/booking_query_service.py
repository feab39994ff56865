# ============================================================================
# app/services/booking/booking_query_service.py
# Pure business logic - no FastAPI dependencies, fully testable
# ============================================================================
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional, Dict, Any
from uuid import UUID

from app.config.settings import get_settings
from app.core.errors import NotFoundError, ValidationError, STATUS_BAD_REQUEST
from app.models.booking import Booking
from app.services.availability.availability_service import AvailabilityService
from app.services.booking.booking_status_service import parse_status
from app.utils.time_window import ensure_utc, local_day_bounds

SCOPES = ("me", "salon")
DEFAULT_LIMIT = 50
MAX_LIMIT = 100


class BookingQueryService:
    """Service layer for booking listings."""

    @staticmethod
    def list_bookings(
            db: Session,
            scope: str,
            salon_id: Optional[UUID] = None,
            customer_id: Optional[UUID] = None,
            from_date: Optional[date] = None,
            to_date: Optional[date] = None,
            status: Optional[str] = None,
            limit: int = DEFAULT_LIMIT,
            offset: int = 0
    ) -> Dict[str, Any]:
        """
        Paginated bookings ordered by start ascending.

        ``scope="salon"`` lists one salon's bookings, ``scope="me"`` the
        customer's own. ``from_date``/``to_date`` are inclusive salon-local
        days.
        """
        if scope not in SCOPES:
            raise ValidationError("scope", "must be me or salon", status_code=STATUS_BAD_REQUEST)
        if scope == "salon" and salon_id is None:
            raise ValidationError("salon_id", "required for scope=salon", status_code=STATUS_BAD_REQUEST)
        if scope == "me" and customer_id is None:
            raise ValidationError("customer_id", "required for scope=me", status_code=STATUS_BAD_REQUEST)

        limit = min(MAX_LIMIT, max(1, limit))
        offset = max(0, offset)

        query = db.query(Booking)
        if scope == "salon":
            query = query.filter(Booking.salon_id == salon_id)
        else:
            query = query.filter(Booking.customer_id == customer_id)
            if salon_id is not None:
                query = query.filter(Booking.salon_id == salon_id)

        if from_date or to_date:
            if salon_id is not None:
                timezone = AvailabilityService.get_salon_timezone(db, salon_id)
            else:
                timezone = get_settings().SALON_TIMEZONE

            if from_date:
                query = query.filter(Booking.starts_at >= local_day_bounds(from_date, timezone)[0])
            if to_date:
                query = query.filter(Booking.starts_at < local_day_bounds(to_date, timezone)[1])

        if status:
            query = query.filter(Booking.status == parse_status(status).value)

        query = query.order_by(Booking.starts_at.asc(), Booking.id.asc())
        total = query.count()
        bookings = query.offset(offset).limit(limit).all()

        return {
            "scope": scope,
            "total": total,
            "page": {
                "limit": limit,
                "offset": offset,
            },
            "filters": {
                "salon_id": str(salon_id) if salon_id else None,
                "from": from_date.isoformat() if from_date else None,
                "to": to_date.isoformat() if to_date else None,
                "status": status,
            },
            "bookings": [serialize_booking(b) for b in bookings],
        }

    @staticmethod
    def get_booking(db: Session, booking_id: UUID, salon_id: UUID) -> Booking:
        booking = db.query(Booking).filter(
            Booking.id == booking_id,
            Booking.salon_id == salon_id
        ).first()

        if not booking:
            raise NotFoundError("booking_id", "booking not found")
        return booking


def serialize_booking(booking: Booking, detailed: bool = False) -> Dict[str, Any]:
    """Convert Booking model to dictionary."""
    base = {
        "id": str(booking.id),
        "salon_id": str(booking.salon_id),
        "service_id": str(booking.service_id),
        "stylist_id": str(booking.stylist_id) if booking.stylist_id else None,
        "customer_id": str(booking.customer_id) if booking.customer_id else None,
        "starts_at": ensure_utc(booking.starts_at).isoformat(),
        "ends_at": ensure_utc(booking.ends_at).isoformat(),
        "status": booking.status,
        "note": booking.note,
    }

    if detailed:
        base.update({
            "service": booking.service.to_dict() if booking.service else None,
            "stylist": booking.stylist.to_dict() if booking.stylist else None,
            "reminder_sent": booking.reminder_sent,
            "cancellation_reason": booking.cancellation_reason,
            "created_at": ensure_utc(booking.created_at).isoformat() if booking.created_at else None,
            "updated_at": ensure_utc(booking.updated_at).isoformat() if booking.updated_at else None,
        })

    return base
