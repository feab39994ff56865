# ===== app/tasks/reminder_tasks.py =====
import logging

from app.config.celery_config import celery_app
from app.config.database import SessionLocal
from app.config.settings import get_settings
from app.services.notification.notifier import build_notifier
from app.services.reminder.reminder_service import ReminderService

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3)
def send_booking_reminders(self):
    """Periodic task: remind customers of confirmed bookings starting in 24-25h"""
    db = SessionLocal()
    try:
        notifier = build_notifier(get_settings())
        stats = ReminderService.run(db, notifier)
        logger.info(f"[reminder] finished: {stats}")
        return {"status": "success", **stats}

    except Exception as exc:
        logger.error(f"[reminder] job failed: {exc}")
        db.rollback()

        # Retry with exponential backoff: 1min, 2min, 4min
        raise self.retry(
            exc=exc,
            countdown=60 * (2 ** self.request.retries)
        )
    finally:
        db.close()
