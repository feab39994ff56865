# ============================================================================
# app/services/reminder/reminder_service.py
# Day-ahead reminders for confirmed bookings
# ============================================================================
from datetime import datetime, timedelta
from typing import Dict, Optional
import logging

import pytz
from sqlalchemy.orm import Session

from app.config.settings import get_settings
from app.models.booking import Booking, BookingStatus
from app.services.notification.notifier import Notifier
from app.utils.time_window import ensure_utc

logger = logging.getLogger(__name__)


class ReminderService:
    """Finds confirmed bookings starting 24-25h ahead and reminds their customers"""

    @staticmethod
    def due_bookings(db: Session, now: datetime):
        settings = get_settings()
        window_start = now + timedelta(hours=settings.REMINDER_WINDOW_START_HOURS)
        window_end = now + timedelta(hours=settings.REMINDER_WINDOW_END_HOURS)

        return db.query(Booking).filter(
            Booking.status == BookingStatus.CONFIRMED.value,
            Booking.reminder_sent.is_(False),
            Booking.starts_at > window_start,
            Booking.starts_at < window_end
        ).order_by(Booking.starts_at.asc()).all()

    @staticmethod
    def run(db: Session, notifier: Notifier, now: Optional[datetime] = None) -> Dict[str, int]:
        """
        Send reminders and flag the bookings as reminded.

        A failed delivery leaves ``reminder_sent`` untouched so the next tick
        retries it while the booking is still inside the window.
        """
        now = ensure_utc(now) if now else datetime.now(pytz.UTC)
        bookings = ReminderService.due_bookings(db, now)
        logger.info(f"[reminder] job tick {now.isoformat()}: {len(bookings)} due")

        stats = {"due": len(bookings), "sent": 0, "skipped": 0, "failed": 0}

        for booking in bookings:
            try:
                delivered = notifier.booking_reminder(booking)
            except Exception as e:
                logger.warning(f"[reminder] mail failed {booking.id}: {e}")
                stats["failed"] += 1
                continue

            if not delivered:
                stats["skipped"] += 1
                continue

            booking.reminder_sent = True
            db.commit()
            stats["sent"] += 1
            logger.info(f"[reminder] sent {booking.id}")

        return stats
