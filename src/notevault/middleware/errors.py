"""Exception handlers mapping errors to ``ErrorResponse`` bodies."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..config import get_settings
from ..core.exceptions import InternalError, NoteVaultError, ValidationError
from ..core.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "Server error"


def _error_response(status_code: int, error: str, message: str, details=None) -> JSONResponse:
    body = ErrorResponse(error=error, message=message, details=details)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


async def notevault_error_handler(request: Request, exc: NoteVaultError) -> JSONResponse:
    message = exc.message
    details = exc.details
    if isinstance(exc, InternalError):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        if get_settings().is_production:
            message, details = GENERIC_SERVER_ERROR, None
    elif exc.status_code >= 400:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.error}: {exc.message}")
    return _error_response(exc.status_code, exc.error, message, details)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = jsonable_encoder(exc.errors())
    first = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        ValidationError.__name__,
        first,
        {"errors": errors},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        InternalError.__name__,
        GENERIC_SERVER_ERROR,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NoteVaultError, notevault_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
