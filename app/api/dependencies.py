# ============================================================================
# FILE: app/api/dependencies.py
# Request-scoped dependencies: caller identity and notifier
# ============================================================================
from typing import Optional
from uuid import UUID

from fastapi import Header

from app.config.settings import get_settings
from app.core.errors import FormatError, STATUS_BAD_REQUEST
from app.services.notification.notifier import Notifier, build_notifier


def parse_uuid(value: Optional[str], field: str, status_code: int = STATUS_BAD_REQUEST) -> Optional[UUID]:
    """Parse an optional UUID string, raising a field error when malformed"""
    if value is None or value == "":
        return None
    try:
        return UUID(str(value))
    except ValueError:
        raise FormatError(field, status_code=status_code)


async def get_customer_id(
        x_customer_id: Optional[str] = Header(None, alias="X-Customer-Id")
) -> Optional[UUID]:
    """
    Identify the calling customer.

    Authentication lives in front of this service; it forwards the
    authenticated user's id in the ``X-Customer-Id`` header.
    """
    return parse_uuid(x_customer_id, "customer_id")


def get_notifier() -> Notifier:
    """Build the notifier for the current configuration"""
    return build_notifier(get_settings())
