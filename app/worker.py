"""
Celery worker entry point
Runs the periodic booking reminder job (start beat with `celery -A app.worker beat`)
"""
import logging
from celery.signals import worker_ready, worker_shutdown

from app.config.celery_config import celery_app
from app.utils.my_logging import setup_logging

# Setup logging first
setup_logging()
logger = logging.getLogger(__name__)


@worker_ready.connect
def worker_ready_handler(sender=None, **kwargs):
    """Handle worker startup"""
    logger.info("Celery worker ready")
    logger.info(f"Registered tasks: {list(celery_app.tasks.keys())}")


@worker_shutdown.connect
def worker_shutdown_handler(sender=None, **kwargs):
    """Handle worker shutdown"""
    logger.info("Celery worker shutting down...")


if __name__ == "__main__":
    # Run worker directly, with embedded beat for the reminder schedule
    celery_app.start([
        'worker',
        '--beat',
        '--loglevel=info',
        '--concurrency=2',
        '--max-tasks-per-child=1000'
    ])
