# app/models/__init__.py
from .base import Base
from .user import User, UserRole
from .salon import Salon
from .service import Service
from .stylist import Stylist
from .availability import WorkHourRule, Absence
from .booking import Booking, BookingStatus

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Salon",
    "Service",
    "Stylist",
    "WorkHourRule",
    "Absence",
    "Booking",
    "BookingStatus",
]
