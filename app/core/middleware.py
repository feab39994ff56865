# app/core/middleware.py
"""Custom middleware for request handling"""
import uuid
import time
import logging
from starlette.requests import Request

from app.utils.my_logging import set_correlation_id

logger = logging.getLogger(__name__)


async def correlation_id_middleware(request: Request, call_next):
    """Add correlation ID to all requests for tracing"""
    correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
    request.state.correlation_id = correlation_id
    set_correlation_id(correlation_id)

    response = await call_next(request)
    response.headers["X-Correlation-ID"] = correlation_id
    return response


async def request_logging_middleware(request: Request, call_next):
    """Log API requests with status and duration"""
    if not request.url.path.startswith("/api/"):
        return await call_next(request)

    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time

    logger.info(
        f"{request.method} {request.url.path} {response.status_code} in {round(duration * 1000, 2)}ms",
        extra={
            "method": request.method,
            "url": str(request.url),
            "status_code": response.status_code,
            "duration_ms": round(duration * 1000, 2),
            "client": request.client.host if request.client else "unknown",
        }
    )

    return response
