"""Shared dependencies for API endpoints.

Provides the database, the authenticated user, and the analyzer. Tests swap
any of these through ``app.dependency_overrides``.
"""

import logging

from fastapi import Depends, Header

from bookmark_ai.analysis import BookmarkAnalyzer, get_analyzer
from bookmark_ai.db import BookmarkDB, User, get_db
from bookmark_ai.errors import AuthenticationError, account_inactive, missing_credentials
from bookmark_ai.security import hash_api_key, is_valid_api_key_format

logger = logging.getLogger(__name__)


def get_database() -> BookmarkDB:
    """Get the shared database instance."""
    return get_db()


def get_bookmark_analyzer() -> BookmarkAnalyzer:
    """Get the shared analyzer (raises ConfigurationError without an API key)."""
    return get_analyzer()


def get_current_user(
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
    db: BookmarkDB = Depends(get_database),
) -> User:
    """Resolve the X-API-Key header to an active user.

    Raises:
        AuthenticationError: If the key is missing, malformed, unknown,
            revoked, or expired, or its account is deactivated.
    """
    if not x_api_key:
        raise missing_credentials()
    if not is_valid_api_key_format(x_api_key):
        raise AuthenticationError("Invalid API key format")

    record = db.get_api_key_by_hash(hash_api_key(x_api_key))
    if record is None or not record.is_active or record.is_expired():
        raise AuthenticationError("Invalid or expired API key")

    user = db.get_user(record.user_id)
    if user is None:
        raise AuthenticationError("Invalid or expired API key")
    if not user.is_active:
        raise account_inactive()

    db.touch_api_key(record.id)
    return user
