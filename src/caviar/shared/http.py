"""HTTP rendering of application errors.

Every error leaves the API as ``{"error": {"code": ..., "message": ...}}``
with the status code of its kind.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from caviar.config import get_settings
from caviar.shared.errors import HTTP_STATUS, AppError, ErrorKind, format_validation_messages

logger = structlog.get_logger(__name__)


def error_response(kind: ErrorKind, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=HTTP_STATUS[kind],
        content={"error": {"code": kind.value, "message": message}},
    )


async def app_error_handler(request: Request, exc: AppError):
    if exc.kind == ErrorKind.INTERNAL:
        logger.error(
            "Request failed",
            path=request.url.path,
            error=str(exc),
            cause=repr(exc.cause) if exc.cause else None,
        )
        # Storage details stay in the logs
        if get_settings().is_production:
            return error_response(exc.kind, "internal server error")
    return error_response(exc.kind, exc.message)


async def validation_error_handler(_request: Request, exc: ValidationError):
    return error_response(ErrorKind.INVALID_INPUT, format_validation_messages(exc))


async def not_found_handler(_request: Request, exc: ObjectNotFoundError):
    return error_response(ErrorKind.NOT_FOUND, str(exc) or "not found")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
