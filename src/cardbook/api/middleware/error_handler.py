"""Global error handling.

Every failure leaves the API in the same JSON shape:
``{error_code, message, user_message, suggestion, retry_allowed}``.
Catalog entries live in ``cardbook.core.errors``.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from cardbook.config import settings
from cardbook.core.errors import get_error
from cardbook.core.exceptions import CardbookError

logger = logging.getLogger(__name__)


def _error_body(error_code: str, message: str | None = None) -> dict:
    entry = get_error(error_code)
    return {
        "error_code": error_code,
        "message": message or entry["message"],
        "user_message": entry["user_message"],
        "suggestion": entry["suggestion"],
        "retry_allowed": entry["retry_allowed"],
    }


async def handle_cardbook_error(request: Request, exc: CardbookError) -> JSONResponse:
    """Handle exceptions raised by the parsing, ingestion and analysis layers.

    Args:
        request: The incoming request
        exc: The domain exception

    Returns:
        JSONResponse with error details from catalog
    """
    # Row details can contain merchant names; keep them out of non-debug logs.
    extra = {
        "error_code": exc.error_code,
        "error_type": type(exc).__name__,
        "path": request.url.path,
        "method": request.method,
    }
    if settings.debug:
        extra["details"] = exc.details

    if exc.http_status >= 500:
        logger.error(f"Request failed: {exc.error_code}", extra=extra)
    else:
        logger.warning(f"Request rejected: {exc.error_code}", extra=extra)

    return JSONResponse(status_code=exc.http_status, content=_error_body(exc.error_code))


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request payload validation errors.

    Args:
        request: The incoming request
        exc: The validation error

    Returns:
        JSONResponse listing the offending fields
    """
    errors = exc.errors()
    error_messages = []
    for error in errors:
        field = ".".join(str(x) for x in error.get("loc", []))
        error_messages.append(f"{field}: {error.get('msg', 'Invalid value')}")

    logger.warning(
        f"Validation error on {request.url.path}",
        extra={"error_code": "VAL_001", "path": request.url.path, "method": request.method},
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("VAL_001", " | ".join(error_messages)),
    )


async def handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    """Handle integrity errors that escaped the services' own conflict handling."""
    # Do not log str(exc): it includes SQL and bound parameters.
    log = logger.exception if settings.debug else logger.error
    log(
        f"Database integrity error on {request.url.path}",
        extra={"path": request.url.path, "method": request.method},
    )

    error_msg = str(exc.orig if exc.orig is not None else exc).lower()
    if "unique" in error_msg or "duplicate" in error_msg:
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=_error_body("DB_002"))

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=_error_body("DB_001")
    )


async def handle_generic_error(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without exposing internals."""
    log = logger.exception if settings.debug else logger.error
    log(
        f"Unexpected error on {request.url.path}",
        extra={
            "error_type": type(exc).__name__,
            "path": request.url.path,
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=_error_body("SYS_001")
    )
