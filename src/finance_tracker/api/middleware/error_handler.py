"""Global error handling.

Every exception that reaches the API boundary is converted into the same
JSON envelope with an HTTP status taken from the exception or the catalog.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from finance_tracker.config import settings
from finance_tracker.core.errors import build_error_body
from finance_tracker.core.exceptions import (
    FinanceTrackerError,
    UnauthenticatedError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _field_errors_body(field_errors: list[tuple[str, str]]) -> dict:
    body = build_error_body(
        "VAL_001",
        message=" | ".join(f"{field}: {msg}" for field, msg in field_errors),
    )
    body["errors"] = [{"field": field, "message": msg} for field, msg in field_errors]
    return body


async def handle_app_error(request: Request, exc: FinanceTrackerError) -> JSONResponse:
    """Handle domain exceptions raised by services and the auth gate.

    Args:
        request: The incoming request
        exc: The domain exception

    Returns:
        JSONResponse with error details from catalog
    """
    extra = {"error_code": exc.error_code, "path": request.url.path, "method": request.method}
    if settings.debug:
        extra["details"] = exc.details

    if isinstance(exc, ValidationError):
        logger.warning(f"Validation error on {request.url.path}", extra=extra)
        return JSONResponse(
            status_code=exc.http_status,
            content=_field_errors_body(list(exc.field_errors.items())),
        )

    if exc.http_status >= 500:
        logger.error(f"Request failed: {exc.error_code}", extra=extra)
    else:
        logger.info(f"Request rejected: {exc.error_code}", extra=extra)

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthenticatedError) else None
    return JSONResponse(
        status_code=exc.http_status,
        content=build_error_body(exc.error_code),
        headers=headers,
    )


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic request validation errors.

    Args:
        request: The incoming request
        exc: The validation error

    Returns:
        JSONResponse with one entry per invalid field
    """
    field_errors = []
    for error in exc.errors():
        # Drop the "body"/"query" prefix; clients care about the field name.
        loc = [str(x) for x in error.get("loc", [])]
        if len(loc) > 1 and loc[0] in ("body", "query", "path"):
            loc = loc[1:]
        field_errors.append((".".join(loc), error.get("msg", "Invalid value")))

    extra = {"path": request.url.path, "method": request.method}
    if settings.debug:
        extra["errors"] = exc.errors()
    logger.warning(f"Validation error on {request.url.path}", extra=extra)

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_field_errors_body(field_errors),
    )


async def handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    """Handle database integrity errors.

    A unique violation here means two requests raced past the service-level
    duplicate check (e.g. the same email signing up twice).

    Args:
        request: The incoming request
        exc: The integrity error

    Returns:
        JSONResponse with error details
    """
    # Do not log str(exc): it can include SQL + bound parameters.
    log = logger.exception if settings.debug else logger.error
    log(
        f"Database integrity error on {request.url.path}",
        extra={"path": request.url.path, "method": request.method},
    )

    error_msg = str(exc).lower()
    if "unique" in error_msg or "duplicate" in error_msg:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=build_error_body("DB_002"),
        )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=build_error_body("DB_001"),
    )


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Wrap framework HTTP errors (unknown route, wrong method) in the envelope."""
    body = build_error_body(f"HTTP_{exc.status_code}", message=str(exc.detail))
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        body["user_message"] = "Route not found."
        body["suggestion"] = "Check the URL and try again."
    return JSONResponse(
        status_code=exc.status_code,
        content=body,
        headers=getattr(exc, "headers", None),
    )


async def handle_generic_error(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions.

    Args:
        request: The incoming request
        exc: The unexpected exception

    Returns:
        JSONResponse with generic error message
    """
    extra = {
        "error_type": type(exc).__name__,
        "path": request.url.path,
        "method": request.method,
    }
    # The traceback stays server side; log formatters pass it through filter_pii.
    logger.error(f"Unexpected error on {request.url.path}", extra=extra, exc_info=exc)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=build_error_body("SYS_001"),
    )
