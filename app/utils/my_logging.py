# app/utils/my_logging.py
"""Logging configuration"""
import logging
import sys
from contextvars import ContextVar

from app.config.settings import get_settings

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="-")


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current request context"""
    _correlation_id.set(correlation_id)


def get_correlation_id() -> str:
    return _correlation_id.get()


class CorrelationIdFilter(logging.Filter):
    """Injects correlation_id into every log record"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = _correlation_id.get()
        return True


def setup_logging(verbose=True):
    """Configure application logging"""
    settings = get_settings()

    if verbose:
        level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    else:
        level = logging.WARNING

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(correlation_id)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[handler]
    )

    if not verbose:
        # Silence noisy loggers
        noisy_loggers = [
            "sqlalchemy",
            "sqlalchemy.engine",
            "sqlalchemy.pool",
            "celery",
            "uvicorn",
            "uvicorn.access",
        ]
        for name in noisy_loggers:
            logger = logging.getLogger(name)
            logger.setLevel(logging.ERROR)
            logger.propagate = False
