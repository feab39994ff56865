# app/config/celery_config.py
"""Celery application factory and beat schedule"""
from celery import Celery
from celery.schedules import crontab

from app.config.settings import get_settings


def create_celery_app() -> Celery:
    """Create and configure the Celery app"""
    settings = get_settings()

    app = Celery(
        "salonbook",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
        include=["app.tasks.reminder_tasks"],
    )

    app.conf.update(
        task_serializer=settings.CELERY_TASK_SERIALIZER,
        result_serializer="json",
        accept_content=["json"],
        timezone="UTC",
        enable_utc=True,
        task_acks_late=True,
        worker_prefetch_multiplier=1,
        beat_schedule={
            # Five minutes past every hour, matching the 24-25h reminder window
            "send-booking-reminders": {
                "task": "app.tasks.reminder_tasks.send_booking_reminders",
                "schedule": crontab(minute=5),
            },
        },
    )

    return app


celery_app = create_celery_app()
