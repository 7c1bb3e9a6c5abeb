"""FastAPI exception handlers for Bookmark AI errors.

This module provides exception handlers that map BookmarkAIError subclasses
to appropriate HTTP status codes with a standardized response format.

Response Format:
    {
        "error": "ErrorClassName",
        "code": "ERROR_CODE",
        "detail": "Human-readable error message",
        "details": {...}  # Optional additional context
    }

Usage:
    from api.errors import register_exception_handlers

    app = FastAPI()
    register_exception_handlers(app)
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from bookmark_ai.errors import (
    AccountError,
    AnalysisError,
    AnalysisSetupError,
    APIKeyNotFoundError,
    AuthenticationError,
    AuthError,
    BookmarkAIError,
    CategoryError,
    CategoryTreeNotFoundError,
    CategoryTreeParseError,
    ConfigurationError,
    EmailAlreadyRegisteredError,
    EngineCallError,
    ErrorCode,
    InvalidCategoryTreeError,
    MalformedResponseError,
    RegistrationDisabledError,
    UserNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


# HTTP status code mapping for error types, most specific first
ERROR_STATUS_CODES: dict[type[BookmarkAIError], int] = {
    # Category errors -> 400 (bad submitted tree) / 404 (no tree stored)
    CategoryTreeParseError: 400,
    InvalidCategoryTreeError: 400,
    CategoryTreeNotFoundError: 404,
    CategoryError: 400,
    # Analysis errors
    EngineCallError: 502,  # Bad Gateway - upstream engine failed
    MalformedResponseError: 500,
    AnalysisSetupError: 500,
    AnalysisError: 500,
    # Auth errors
    RegistrationDisabledError: 403,
    AuthenticationError: 401,
    AuthError: 401,
    # Account errors
    EmailAlreadyRegisteredError: 409,
    UserNotFoundError: 404,
    APIKeyNotFoundError: 404,
    AccountError: 404,
    # Validation errors -> 400 (client error)
    ValidationError: 400,
    # Configuration errors -> 500 (server configuration issues)
    ConfigurationError: 500,
    # Base error -> 500
    BookmarkAIError: 500,
}

# Map specific error codes to HTTP status codes (overrides class-based mapping)
ERROR_CODE_STATUS_CODES: dict[ErrorCode, int] = {
    # 400 Bad Request
    ErrorCode.VAL_INVALID_INPUT: 400,
    ErrorCode.CAT_PARSE_FAILED: 400,
    ErrorCode.CAT_INVALID_STRUCTURE: 400,
    # 401 Unauthorized
    ErrorCode.AUTH_MISSING_CREDENTIALS: 401,
    ErrorCode.AUTH_INVALID_CREDENTIALS: 401,
    ErrorCode.AUTH_ACCOUNT_INACTIVE: 401,
    # 403 Forbidden
    ErrorCode.AUTH_REGISTRATION_DISABLED: 403,
    # 404 Not Found
    ErrorCode.CAT_NOT_FOUND: 404,
    ErrorCode.ACC_USER_NOT_FOUND: 404,
    ErrorCode.ACC_KEY_NOT_FOUND: 404,
    # 409 Conflict
    ErrorCode.ACC_EMAIL_EXISTS: 409,
    # 500 Internal Server Error
    ErrorCode.CFG_INVALID: 500,
    ErrorCode.CFG_MISSING: 500,
    ErrorCode.CLS_SETUP_FAILED: 500,
    ErrorCode.CLS_MALFORMED_RESPONSE: 500,
    # 502 Bad Gateway
    ErrorCode.CLS_ENGINE_FAILED: 502,
}


def get_status_code_for_error(error: BookmarkAIError) -> int:
    """Determine the appropriate HTTP status code for an error.

    First checks if the error's code has a specific status mapping,
    then falls back to the error class hierarchy.

    Args:
        error: The Bookmark AI error instance.

    Returns:
        HTTP status code (400-599).
    """
    if error.code in ERROR_CODE_STATUS_CODES:
        return ERROR_CODE_STATUS_CODES[error.code]

    for error_class, status_code in ERROR_STATUS_CODES.items():
        if isinstance(error, error_class):
            return status_code

    return 500


def build_error_response(error: BookmarkAIError) -> dict[str, Any]:
    """Build a standardized error response dictionary.

    Args:
        error: The Bookmark AI error instance.

    Returns:
        Dictionary with error, code, detail, and optional details fields.
    """
    return error.to_dict()


async def bookmark_ai_error_handler(request: Request, exc: BookmarkAIError) -> JSONResponse:
    """Handle BookmarkAIError and subclasses.

    Args:
        request: The FastAPI request object.
        exc: The error that was raised.

    Returns:
        JSONResponse with appropriate status code and error body.
    """
    status_code = get_status_code_for_error(exc)
    response_body = build_error_response(exc)

    if status_code >= 500:
        logger.error(
            "Server error: %s (code=%s, status=%d)",
            exc.message,
            exc.code.value,
            status_code,
            exc_info=exc.cause if exc.cause else exc,
        )
    else:
        logger.warning(
            "Client error: %s (code=%s, status=%d)",
            exc.message,
            exc.code.value,
            status_code,
        )

    headers = {"WWW-Authenticate": "ApiKey"} if status_code == 401 else None
    return JSONResponse(status_code=status_code, content=response_body, headers=headers)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle malformed request bodies as 400 Bad Request.

    Args:
        request: The FastAPI request object.
        exc: The pydantic validation error raised by FastAPI.

    Returns:
        JSONResponse with 400 status and the offending fields.
    """
    errors = exc.errors()
    fields = [".".join(str(part) for part in err.get("loc", ()) if part != "body") for err in errors]
    first = errors[0].get("msg", "Invalid request") if errors else "Invalid request"

    logger.debug(
        "Request validation error on %s %s: %s",
        request.method,
        request.url.path,
        fields,
    )

    response_body = {
        "error": "ValidationError",
        "code": ErrorCode.VAL_INVALID_INPUT.value,
        "detail": f"Invalid request: {first}",
        "details": {"fields": [f for f in fields if f]},
    }
    return JSONResponse(status_code=400, content=response_body)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions with a generic error response.

    Logs the full exception and returns a safe error message.

    Args:
        request: The FastAPI request object.
        exc: The unexpected exception.

    Returns:
        JSONResponse with 500 status and generic error message.
    """
    logger.exception(
        "Unexpected error handling %s %s: %s",
        request.method,
        request.url.path,
        str(exc),
    )

    response_body = {
        "error": "InternalError",
        "code": "INTERNAL_ERROR",
        "detail": "An unexpected error occurred. Please try again later.",
    }

    return JSONResponse(status_code=500, content=response_body)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all Bookmark AI exception handlers with a FastAPI app.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(BookmarkAIError, bookmark_ai_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.debug("Registered Bookmark AI exception handlers")


# Export all public symbols
__all__ = [
    "register_exception_handlers",
    "bookmark_ai_error_handler",
    "request_validation_error_handler",
    "generic_exception_handler",
    "get_status_code_for_error",
    "build_error_response",
    "ERROR_STATUS_CODES",
    "ERROR_CODE_STATUS_CODES",
]
