"""
Global Exception Handlers

Registers exception handlers that render every API failure through the
standard ErrorResponse body, with OAuth provider failures mapped to 400.
"""

import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models.errors import ErrorResponse, ValidationErrorResponse, ValidationErrorItem
from wechat_auth.auth.errors import OAuthError

# Configure logging
logger = logging.getLogger(__name__)


def add_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(OAuthError, oauth_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info("Exception handlers registered")


async def oauth_exception_handler(request: Request, exc: OAuthError) -> JSONResponse:
    """
    Handle provider failures raised by the OAuth layer.

    Args:
        request: Request that caused exception
        exc: OAuth error

    Returns:
        400 error response carrying the provider reason
    """
    log_exception(request, exc, status.HTTP_400_BAD_REQUEST)

    error_response = ErrorResponse(
        message=exc.reason,
        error_code="OAUTH_ERROR",
        details={"provider_error": exc.error_code} if exc.error_code else None,
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_response.model_dump(mode="json")
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """
    Handle HTTP exceptions with standardized format.
    """
    log_exception(request, exc, exc.status_code)

    error_response = ErrorResponse(
        message=str(exc.detail),
        error_code=f"HTTP_{exc.status_code}",
        details=getattr(exc, "details", None),
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response.model_dump(mode="json"),
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request validation errors with per-field details.

    Args:
        request: Request that caused exception
        exc: Validation exception

    Returns:
        Detailed validation error response
    """
    log_exception(request, exc, status.HTTP_422_UNPROCESSABLE_ENTITY)

    validation_errors = ValidationErrorItem.from_errors(exc.errors())

    error_response = ValidationErrorResponse(
        message="Request validation error",
        error_code="VALIDATION_ERROR",
        validation_errors=validation_errors,
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response.model_dump(mode="json")
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle all unhandled exceptions with a sanitized error response.
    """
    log_exception(request, exc, status.HTTP_500_INTERNAL_SERVER_ERROR, include_traceback=True)

    error_response = ErrorResponse(
        message="An unexpected error occurred",
        error_code="INTERNAL_SERVER_ERROR",
        details={"type": exc.__class__.__name__},
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump(mode="json")
    )


def log_exception(
    request: Request,
    exc: Exception,
    status_code: int,
    include_traceback: bool = False
) -> None:
    """
    Log exception with request context and severity derived from the status.

    Query strings are left out because callback URLs carry authorization
    codes.
    """
    if status_code >= 500:
        log_level = logging.ERROR
    elif status_code >= 400:
        log_level = logging.WARNING
    else:
        log_level = logging.INFO

    error_message = f"Exception during request to {request.method} {request.url.path}"
    error_details = {
        "status_code": status_code,
        "error_type": exc.__class__.__name__,
        "error_message": str(exc),
        "client_host": request.client.host if request.client else "unknown"
    }

    if include_traceback:
        error_details["traceback"] = traceback.format_exc()

    logger.log(log_level, error_message, extra={"error_details": error_details})
