# ============================================================================
# FILE: app/api/v1/public/salons.py
# Customer-facing endpoints: browse salons, query slots, request bookings
# ============================================================================
from fastapi import APIRouter, Depends, Query, Path
from sqlalchemy.orm import Session
from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID
import logging

from app.api.dependencies import get_customer_id, get_notifier, parse_uuid
from app.config.database import get_db
from app.core.errors import FormatError, ValidationError, STATUS_BAD_REQUEST
from app.services.availability.availability_service import AvailabilityService
from app.services.booking.booking_query_service import serialize_booking
from app.services.booking.booking_service import BookingRequest, BookingService
from app.services.notification.notifier import Notifier
from app.services.salon.catalog_service import SalonService
from app.utils.time_window import parse_date

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/salons", tags=["public-salons"])


class BookingCreate(BaseModel):
    """Request model for a booking request"""
    service_id: UUID
    stylist_id: Optional[UUID] = None
    starts_at: str = Field(..., description="ISO-8601 instant; naive values are salon-local")
    note: Optional[str] = None


@router.get("")
async def list_salons(db: Session = Depends(get_db)):
    """List all salons with their active services"""
    salons = SalonService.list_salons(db)
    return {
        "total": len(salons),
        "salons": [salon.to_dict() for salon in salons]
    }


@router.get("/by-slug/{slug}")
async def get_salon_by_slug(
        slug: str = Path(..., description="URL slug of the salon"),
        db: Session = Depends(get_db)
):
    return SalonService.get_salon_by_slug(db, slug).to_dict(include_details=True)


@router.get("/{salon_id}")
async def get_salon(
        salon_id: UUID = Path(..., description="The salon ID"),
        db: Session = Depends(get_db)
):
    return SalonService.get_salon(db, salon_id).to_dict(include_details=True)


@router.get("/{salon_id}/slots")
async def get_slots(
        salon_id: UUID = Path(..., description="The salon ID"),
        service_id: Optional[str] = Query(None, description="Service to book"),
        date: Optional[str] = Query(None, description="Salon-local day, YYYY-MM-DD"),
        stylist_id: Optional[str] = Query(None, description="Restrict to one stylist"),
        db: Session = Depends(get_db)
):
    """
    Free slots for a service on one day, ordered by start then stylist.
    An empty list means nothing is bookable.
    """
    if not service_id:
        raise ValidationError("service_id", "required", status_code=STATUS_BAD_REQUEST)
    if not date:
        raise ValidationError("date", "required", status_code=STATUS_BAD_REQUEST)

    service_uuid = parse_uuid(service_id, "service_id")
    stylist_uuid = parse_uuid(stylist_id, "stylist_id")
    try:
        on_date = parse_date(date)
    except FormatError as e:
        raise FormatError(e.field, e.message, status_code=STATUS_BAD_REQUEST)

    slots = AvailabilityService.find_slots(db, salon_id, service_uuid, on_date, stylist_id=stylist_uuid)
    return [slot.to_dict() for slot in slots]


@router.post("/{salon_id}/bookings", status_code=201)
async def create_booking(
        payload: BookingCreate,
        salon_id: UUID = Path(..., description="The salon ID"),
        customer_id: Optional[UUID] = Depends(get_customer_id),
        notifier: Notifier = Depends(get_notifier),
        db: Session = Depends(get_db)
):
    """Request a booking; the salon confirms or declines it later"""
    booking = BookingService.create_booking(
        db,
        BookingRequest(
            salon_id=salon_id,
            service_id=payload.service_id,
            starts_at=payload.starts_at,
            stylist_id=payload.stylist_id,
            customer_id=customer_id,
            note=payload.note,
        ),
        notifier=notifier,
    )
    return serialize_booking(booking)
