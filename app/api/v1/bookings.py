# ============================================================================
# FILE: app/api/v1/bookings.py
# Booking listings and the staff status workflow - thin HTTP layer
# ============================================================================
from fastapi import APIRouter, Depends, Query, Path
from sqlalchemy.orm import Session
from pydantic import BaseModel
from typing import Optional
from uuid import UUID

from app.api.dependencies import get_customer_id, get_notifier
from app.config.database import get_db
from app.core.errors import FormatError, STATUS_BAD_REQUEST
from app.services.booking.booking_query_service import (
    BookingQueryService,
    DEFAULT_LIMIT,
    serialize_booking,
)
from app.services.booking.booking_status_service import BookingStatusService
from app.services.notification.notifier import Notifier
from app.utils.time_window import parse_date

router = APIRouter(prefix="/bookings", tags=["bookings"])


class BookingStatusUpdate(BaseModel):
    """Request model for a status change"""
    status: str
    reason: Optional[str] = None


def _query_date(value: Optional[str], field: str):
    if not value:
        return None
    try:
        return parse_date(value, field=field)
    except FormatError as e:
        raise FormatError(e.field, e.message, status_code=STATUS_BAD_REQUEST)


@router.get("")
async def list_bookings(
        scope: str = Query("me", description="me (own bookings) or salon"),
        salon_id: Optional[UUID] = Query(None, description="Required for scope=salon"),
        from_date: Optional[str] = Query(None, alias="from", description="First salon-local day, YYYY-MM-DD"),
        to_date: Optional[str] = Query(None, alias="to", description="Last salon-local day, YYYY-MM-DD"),
        status: Optional[str] = Query(None, description="requested, confirmed, declined or cancelled"),
        limit: int = Query(DEFAULT_LIMIT, description="Clamped to 1..100"),
        offset: int = Query(0, description="Number of records to skip"),
        customer_id: Optional[UUID] = Depends(get_customer_id),
        db: Session = Depends(get_db)
):
    return BookingQueryService.list_bookings(
        db=db,
        scope=scope,
        salon_id=salon_id,
        customer_id=customer_id,
        from_date=_query_date(from_date, "from"),
        to_date=_query_date(to_date, "to"),
        status=status,
        limit=limit,
        offset=offset
    )


@router.get("/{booking_id}")
async def get_booking(
        booking_id: UUID = Path(..., description="The booking ID"),
        salon_id: UUID = Query(..., description="Salon the booking belongs to"),
        db: Session = Depends(get_db)
):
    booking = BookingQueryService.get_booking(db, booking_id, salon_id)
    return serialize_booking(booking, detailed=True)


@router.patch("/{booking_id}")
async def update_booking_status(
        payload: BookingStatusUpdate,
        booking_id: UUID = Path(..., description="The booking ID"),
        salon_id: UUID = Query(..., description="Salon the booking belongs to"),
        notifier: Notifier = Depends(get_notifier),
        db: Session = Depends(get_db)
):
    """
    Confirm, decline or cancel a booking.
    Illegal transitions (including repeating the current status) are a 409.
    """
    booking = BookingStatusService.update_booking_status(
        db,
        booking_id=booking_id,
        salon_id=salon_id,
        new_status=payload.status,
        reason=payload.reason,
        notifier=notifier
    )
    return serialize_booking(booking, detailed=True)
