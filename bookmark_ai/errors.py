"""Unified exception hierarchy for Bookmark AI.

This module provides a consistent error handling system across the API, the
analysis pipeline, and the database layer. All Bookmark AI exceptions inherit
from BookmarkAIError, enabling consistent handling at the request boundary.

Exception Hierarchy:
    BookmarkAIError (base)
    ├── ConfigurationError - Configuration and settings issues
    ├── ValidationError - Input validation failures
    ├── CategoryError - Category tree issues
    │   ├── CategoryTreeParseError - YAML/JSON text could not be parsed
    │   ├── InvalidCategoryTreeError - Parsed value is not a valid tree
    │   └── CategoryTreeNotFoundError - User has no stored tree
    ├── AnalysisError - Bookmark classification failures
    │   ├── AnalysisSetupError - Candidate categories could not be built
    │   ├── EngineCallError - Reasoning engine call failed
    │   └── MalformedResponseError - Engine output could not be decoded
    ├── AuthError - Authentication and registration issues
    │   ├── AuthenticationError - Missing/invalid credentials
    │   └── RegistrationDisabledError - Sign-up turned off
    └── AccountError - User and API key lookups
        ├── UserNotFoundError
        ├── EmailAlreadyRegisteredError
        └── APIKeyNotFoundError

Usage:
    from bookmark_ai.errors import MalformedResponseError

    try:
        analysis = await analyzer.analyze(url, tree)
    except MalformedResponseError as e:
        logger.error("Bad engine output: %s (code: %s)", e.message, e.code)
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standard error codes for Bookmark AI errors.

    These codes can be used to programmatically identify error types
    and are included in API error responses.
    """

    # Configuration errors (CFG_*)
    CFG_INVALID = "CFG_INVALID"
    CFG_MISSING = "CFG_MISSING"

    # Validation errors (VAL_*)
    VAL_INVALID_INPUT = "VAL_INVALID_INPUT"

    # Category errors (CAT_*)
    CAT_PARSE_FAILED = "CAT_PARSE_FAILED"
    CAT_INVALID_STRUCTURE = "CAT_INVALID_STRUCTURE"
    CAT_NOT_FOUND = "CAT_NOT_FOUND"

    # Classification errors (CLS_*)
    CLS_SETUP_FAILED = "CLS_SETUP_FAILED"
    CLS_ENGINE_FAILED = "CLS_ENGINE_FAILED"
    CLS_MALFORMED_RESPONSE = "CLS_MALFORMED_RESPONSE"

    # Authentication errors (AUTH_*)
    AUTH_MISSING_CREDENTIALS = "AUTH_MISSING_CREDENTIALS"
    AUTH_INVALID_CREDENTIALS = "AUTH_INVALID_CREDENTIALS"
    AUTH_ACCOUNT_INACTIVE = "AUTH_ACCOUNT_INACTIVE"
    AUTH_REGISTRATION_DISABLED = "AUTH_REGISTRATION_DISABLED"

    # Account errors (ACC_*)
    ACC_USER_NOT_FOUND = "ACC_USER_NOT_FOUND"
    ACC_EMAIL_EXISTS = "ACC_EMAIL_EXISTS"
    ACC_KEY_NOT_FOUND = "ACC_KEY_NOT_FOUND"

    # Generic errors
    UNKNOWN = "UNKNOWN"


class BookmarkAIError(Exception):
    """Base exception for all Bookmark AI errors.

    Attributes:
        message: Human-readable error message.
        code: Machine-readable error code from ErrorCode enum.
        details: Optional additional context about the error.
        cause: Optional original exception that caused this error.
    """

    default_message: str = "An error occurred"
    default_code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(
        self,
        message: str | None = None,
        *,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize a Bookmark AI error.

        Args:
            message: Human-readable error message.
            code: Error code for programmatic handling.
            details: Additional context as key-value pairs.
            cause: Original exception that caused this error.
        """
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.details = details or {}
        self.cause = cause

        super().__init__(self.message)

        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        """Return human-readable representation."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        parts = [f"{self.__class__.__name__}({self.message!r}"]
        if self.code != self.default_code:
            parts.append(f", code={self.code.value!r}")
        if self.details:
            parts.append(f", details={self.details!r}")
        if self.cause:
            parts.append(f", cause={self.cause!r}")
        parts.append(")")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses.

        Returns:
            Dictionary with error, code, and detail fields.
        """
        result: dict[str, Any] = {
            "error": self.__class__.__name__,
            "code": self.code.value,
            "detail": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# Configuration Errors


class ConfigurationError(BookmarkAIError):
    """Raised for configuration and settings issues.

    Examples:
        - Missing ANTHROPIC_API_KEY
        - Invalid configuration values
    """

    default_message = "Configuration error"
    default_code = ErrorCode.CFG_INVALID

    def __init__(
        self,
        message: str | None = None,
        *,
        config_key: str | None = None,
        config_path: str | None = None,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize a configuration error.

        Args:
            message: Human-readable error message.
            config_key: The configuration key that caused the error.
            config_path: Path to the configuration file.
            code: Error code for programmatic handling.
            details: Additional context as key-value pairs.
            cause: Original exception that caused this error.
        """
        details = details or {}
        if config_key:
            details["config_key"] = config_key
        if config_path:
            details["config_path"] = config_path
        super().__init__(message, code=code, details=details, cause=cause)


# Validation Errors


class ValidationError(BookmarkAIError):
    """Raised when request input fails validation."""

    default_message = "Validation failed"
    default_code = ErrorCode.VAL_INVALID_INPUT

    def __init__(
        self,
        message: str | None = None,
        *,
        field: str | None = None,
        value: Any = None,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize a validation error.

        Args:
            message: Human-readable error message.
            field: Name of the field that failed validation.
            value: The offending value (stringified and truncated).
            code: Error code for programmatic handling.
            details: Additional context as key-value pairs.
            cause: Original exception that caused this error.
        """
        details = details or {}
        if field:
            details["field"] = field
        if value is not None:
            value_str = str(value)
            details["value"] = value_str[:100] + "..." if len(value_str) > 100 else value_str
        super().__init__(message, code=code, details=details, cause=cause)


# Category Errors


class CategoryError(BookmarkAIError):
    """Base class for category tree errors."""

    default_message = "Category tree error"
    default_code = ErrorCode.CAT_INVALID_STRUCTURE


class CategoryTreeParseError(CategoryError):
    """Raised when submitted tree text is not valid YAML/JSON."""

    default_message = "Invalid YAML/JSON format"
    default_code = ErrorCode.CAT_PARSE_FAILED


class InvalidCategoryTreeError(CategoryError):
    """Raised when a value does not have the shape of a category tree."""

    default_message = (
        "Invalid category tree structure. "
        "Must be a nested object with string arrays as leaf nodes."
    )
    default_code = ErrorCode.CAT_INVALID_STRUCTURE


class CategoryTreeNotFoundError(CategoryError):
    """Raised when a user has no stored category tree."""

    default_message = "Category tree not found"
    default_code = ErrorCode.CAT_NOT_FOUND


# Analysis Errors


class AnalysisError(BookmarkAIError):
    """Base class for bookmark classification errors.

    None of these are retried; they surface to the caller as server faults.
    """

    default_message = "Bookmark analysis failed"
    default_code = ErrorCode.CLS_ENGINE_FAILED

    def __init__(
        self,
        message: str | None = None,
        *,
        url: str | None = None,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize an analysis error.

        Args:
            message: Human-readable error message.
            url: The bookmark URL being analyzed.
            code: Error code for programmatic handling.
            details: Additional context as key-value pairs.
            cause: Original exception that caused this error.
        """
        details = details or {}
        if url:
            details["url"] = url
        super().__init__(message, code=code, details=details, cause=cause)


class AnalysisSetupError(AnalysisError):
    """Raised when the candidate category list cannot be built."""

    default_message = "Failed to extract categories"
    default_code = ErrorCode.CLS_SETUP_FAILED


class EngineCallError(AnalysisError):
    """Raised when the reasoning engine call fails (network, auth, rate limit)."""

    default_message = "Failed to call reasoning engine"
    default_code = ErrorCode.CLS_ENGINE_FAILED


class MalformedResponseError(AnalysisError):
    """Raised when the engine response cannot be decoded into a result.

    The ``reason`` detail is one of ``no_text``, ``no_json``, ``invalid_json``
    or ``not_an_object``.
    """

    default_message = "Malformed reasoning engine response"
    default_code = ErrorCode.CLS_MALFORMED_RESPONSE

    def __init__(
        self,
        message: str | None = None,
        *,
        reason: str | None = None,
        response_text: str | None = None,
        url: str | None = None,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize a malformed response error.

        Args:
            message: Human-readable error message.
            reason: Short machine-readable failure reason.
            response_text: The raw engine text. Kept on the error for logging,
                never added to details, which reach API clients.
            url: The bookmark URL being analyzed.
            code: Error code for programmatic handling.
            details: Additional context as key-value pairs.
            cause: Original exception that caused this error.
        """
        details = details or {}
        if reason:
            details["reason"] = reason
        super().__init__(message, url=url, code=code, details=details, cause=cause)
        self.response_text = response_text

    @property
    def reason(self) -> str | None:
        """Short failure reason, if one was recorded."""
        return self.details.get("reason")


# Authentication Errors


class AuthError(BookmarkAIError):
    """Base class for authentication errors."""

    default_message = "Unauthorized"
    default_code = ErrorCode.AUTH_INVALID_CREDENTIALS


class AuthenticationError(AuthError):
    """Raised when request credentials are missing or invalid."""

    default_message = "Invalid or missing credentials"
    default_code = ErrorCode.AUTH_INVALID_CREDENTIALS


class RegistrationDisabledError(AuthError):
    """Raised when new account registration is turned off."""

    default_message = "Registration is currently disabled. Please contact an administrator."
    default_code = ErrorCode.AUTH_REGISTRATION_DISABLED


# Account Errors


class AccountError(BookmarkAIError):
    """Base class for user and API key lookup errors."""

    default_message = "Account error"
    default_code = ErrorCode.ACC_USER_NOT_FOUND


class UserNotFoundError(AccountError):
    """Raised when a user does not exist."""

    default_message = "User not found"
    default_code = ErrorCode.ACC_USER_NOT_FOUND


class EmailAlreadyRegisteredError(AccountError):
    """Raised when registering an email that already has an account."""

    default_message = "Email already registered"
    default_code = ErrorCode.ACC_EMAIL_EXISTS


class APIKeyNotFoundError(AccountError):
    """Raised when an API key does not exist or belongs to another user."""

    default_message = "API key not found"
    default_code = ErrorCode.ACC_KEY_NOT_FOUND


# Convenience functions for common error scenarios


def category_tree_not_found(user_id: str) -> CategoryTreeNotFoundError:
    """Create a CategoryTreeNotFoundError for a user without a tree.

    Args:
        user_id: ID of the user whose tree is missing.

    Returns:
        CategoryTreeNotFoundError with the user ID in details.
    """
    return CategoryTreeNotFoundError(details={"user_id": user_id})


def missing_credentials() -> AuthenticationError:
    """Create an AuthenticationError for a request without credentials."""
    return AuthenticationError(
        "Missing authentication credentials",
        code=ErrorCode.AUTH_MISSING_CREDENTIALS,
    )


def account_inactive() -> AuthenticationError:
    """Create an AuthenticationError for a deactivated account."""
    return AuthenticationError(
        "Account is deactivated",
        code=ErrorCode.AUTH_ACCOUNT_INACTIVE,
    )


__all__ = [
    # Error codes
    "ErrorCode",
    # Base exception
    "BookmarkAIError",
    # Configuration errors
    "ConfigurationError",
    # Validation errors
    "ValidationError",
    # Category errors
    "CategoryError",
    "CategoryTreeParseError",
    "InvalidCategoryTreeError",
    "CategoryTreeNotFoundError",
    # Analysis errors
    "AnalysisError",
    "AnalysisSetupError",
    "EngineCallError",
    "MalformedResponseError",
    # Auth errors
    "AuthError",
    "AuthenticationError",
    "RegistrationDisabledError",
    # Account errors
    "AccountError",
    "UserNotFoundError",
    "EmailAlreadyRegisteredError",
    "APIKeyNotFoundError",
    # Convenience functions
    "category_tree_not_found",
    "missing_credentials",
    "account_inactive",
]
