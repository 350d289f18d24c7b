"""Render service and request validation errors as JSON responses with their status code."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.exceptions import StoreError, ValidationError, WorkoutLogError

logger = logging.getLogger(__name__)


async def workout_log_error_handler(request: Request, exc: WorkoutLogError) -> JSONResponse:
    """{"detail": message, "code": error kind}"""
    if isinstance(exc, StoreError):
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies/params share the ValidationError shape, plus per-field errors."""
    errors = []
    for error in exc.errors():
        loc = ".".join(str(x) for x in error["loc"])
        errors.append({
            "field": loc,
            "message": error["msg"],
            "type": error["type"],
        })

    return JSONResponse(
        status_code=422,
        content={
            "detail": "Request validation failed",
            "code": ValidationError.__name__,
            "errors": errors,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(WorkoutLogError, workout_log_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
