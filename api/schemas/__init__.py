"""Pydantic schemas for API requests and responses.

All schemas include OpenAPI metadata for automatic documentation generation.
Wire field names are camelCase aliases; Python attributes are snake_case.

    from api.schemas import AnalyzeBookmarkRequest
"""

from __future__ import annotations

# Account, auth and API key models
from api.schemas.accounts import (
    APIKeyCreateRequest,
    APIKeyCreateResponse,
    APIKeyInfo,
    APIKeyListResponse,
    RegisterRequest,
    RegisterResponse,
    UserResponse,
    UserSettingsResponse,
    UserSettingsUpdate,
    UserUpdateRequest,
)

# Bookmark models
from api.schemas.bookmarks import AnalyzeBookmarkRequest, AnalyzeBookmarkResponse

# Category models
from api.schemas.categories import (
    CategoryCandidatesResponse,
    CategoryTreeResponse,
    CategoryTreeUpdateRequest,
)

# System models
from api.schemas.system import ErrorResponse, HealthResponse

__all__ = [
    # Accounts
    "APIKeyCreateRequest",
    "APIKeyCreateResponse",
    "APIKeyInfo",
    "APIKeyListResponse",
    "RegisterRequest",
    "RegisterResponse",
    "UserResponse",
    "UserSettingsResponse",
    "UserSettingsUpdate",
    "UserUpdateRequest",
    # Bookmarks
    "AnalyzeBookmarkRequest",
    "AnalyzeBookmarkResponse",
    # Categories
    "CategoryCandidatesResponse",
    "CategoryTreeResponse",
    "CategoryTreeUpdateRequest",
    # System
    "ErrorResponse",
    "HealthResponse",
]
