"""
Booking engine error taxonomy.

Every validation or conflict outcome of the engine is raised as one of these
typed errors. Each carries the request field it belongs to, so the HTTP layer
can map it 1:1 onto a structured ``{"message", "errors": {field: [..]}}``
body and the UI can highlight the right control.
"""
from __future__ import annotations

from typing import Dict, List, Optional

# ---------------------------------------------------------------------------
# Field messages shared by the scanner, committer and HTTP layer
# ---------------------------------------------------------------------------

MSG_INVALID = "invalid"
MSG_SERVICE_NOT_FOUND = "service not found"
MSG_SERVICE_INACTIVE = "service inactive"
MSG_STYLIST_NOT_FOUND = "stylist not found"
MSG_CUSTOMER_NOT_FOUND = "customer not found"
MSG_NO_ACTIVE_STYLIST = "no active stylist in salon"
MSG_NOT_IN_FUTURE = "must be in the future"
MSG_OUTSIDE_WORK_HOURS = "outside work hours"
MSG_OFF_GRID = "not a bookable slot start"
MSG_STYLIST_ABSENT = "stylist absent"
MSG_OVERLAPS_BOOKING = "overlaps existing booking"
MSG_NO_FREE_STYLIST = "no free stylist at this time"
MSG_NOTE_TOO_LONG = "too long"

STATUS_BAD_REQUEST = 400
STATUS_NOT_FOUND = 404
STATUS_CONFLICT = 409
STATUS_UNPROCESSABLE = 422


class BookingEngineError(Exception):
    """Base class for field-attributed engine errors."""

    status_code: int = STATUS_UNPROCESSABLE
    summary: str = "Validation failed"

    def __init__(self, field: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    @property
    def errors(self) -> Dict[str, List[str]]:
        return {self.field: [self.message]}

    def to_dict(self) -> dict:
        return {"message": self.summary, "errors": self.errors}


class ValidationError(BookingEngineError):
    """Malformed input shape or out-of-range value."""


class FormatError(ValidationError):
    """Unparsable date, time or instant string."""

    def __init__(self, field: str, message: str = MSG_INVALID, status_code: Optional[int] = None):
        super().__init__(field, message, status_code)


class NotFoundError(BookingEngineError):
    """Referenced salon, service, stylist or booking does not exist under the claimed parent."""

    status_code = STATUS_NOT_FOUND
    summary = "Not found"


class ConflictError(BookingEngineError):
    """Time range fails work-hours containment or overlaps an absence or booking."""


class ConcurrencyError(ConflictError):
    """A concurrent commit won the race for the same stylist and time range."""

    def __init__(self, field: str = "starts_at", message: str = MSG_OVERLAPS_BOOKING):
        super().__init__(field, message)


class InvalidTransitionError(BookingEngineError):
    """Booking status change not allowed by the workflow."""

    status_code = STATUS_CONFLICT
    summary = "Invalid status transition"

    def __init__(self, current: str, requested: str):
        super().__init__("status", f"cannot change from {current} to {requested}")
        self.current = current
        self.requested = requested
