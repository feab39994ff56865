# app/core/exception_handlers.py
"""Map engine errors and request validation failures to JSON responses"""
import logging
from typing import Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.errors import BookingEngineError, STATUS_BAD_REQUEST, STATUS_UNPROCESSABLE

logger = logging.getLogger(__name__)


async def booking_engine_error_handler(request: Request, exc: BookingEngineError):
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """
    Same ``{message, errors}`` shape as engine errors.

    Malformed query, path or header parameters are a 400; invalid request
    bodies are a 422.
    """
    errors: Dict[str, List[str]] = {}
    in_body = False

    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] == "body":
            in_body = True
        field = loc[-1] if loc else "request"
        errors.setdefault(field, []).append(error.get("msg", "invalid"))

    status_code = STATUS_UNPROCESSABLE if in_body else STATUS_BAD_REQUEST
    return JSONResponse(
        status_code=status_code,
        content={"message": "Validation failed", "errors": errors},
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BookingEngineError, booking_engine_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
