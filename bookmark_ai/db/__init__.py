"""Bookmark AI Database Management - SQLite storage for accounts and category trees.

Manages ~/.bookmark_ai/bookmark_ai.db which stores:
- Users with integration settings
- API keys (SHA-256 hashes only)
- One category tree per user

Usage:
    from bookmark_ai.db import get_db

    db = get_db()
    db.init_schema()
    record = db.get_category(user.id)
"""

import threading
from pathlib import Path

from bookmark_ai.categories import CategoryTree
from bookmark_ai.db.api_keys import APIKeyMixin
from bookmark_ai.db.categories import CategoryMixin
from bookmark_ai.db.core import BookmarkDBBase
from bookmark_ai.db.models import (
    BOOKMARK_AI_DB_PATH,
    APIKey,
    CategoryRecord,
    User,
    UserSettings,
    _convert_timestamp,
    utcnow,
)
from bookmark_ai.db.schema import CURRENT_SCHEMA_VERSION, EXPECTED_INDICES, SCHEMA_SQL
from bookmark_ai.db.users import UserMixin
from bookmark_ai.security import GeneratedAPIKey


class BookmarkDB(BookmarkDBBase, UserMixin, APIKeyMixin, CategoryMixin):
    """Manager for the Bookmark AI SQLite database.

    Composed from focused mixin classes:
    - BookmarkDBBase: Connection management, schema init
    - UserMixin: Account CRUD
    - APIKeyMixin: Key issue, lookup, revocation
    - CategoryMixin: Category tree storage
    """

    def register_user(
        self,
        email: str,
        tree: CategoryTree,
        full_name: str | None = None,
        key_name: str | None = None,
    ) -> tuple[User, GeneratedAPIKey]:
        """Create an account with its starter tree and first API key.

        All three rows are written in one transaction; if any write fails
        none of them remain.

        Raises:
            EmailAlreadyRegisteredError: If the email is already taken.
        """
        with self.connection():
            user = self.create_user(email, full_name=full_name)
            self.save_category_tree(user.id, tree)
            generated, _ = self.create_api_key(user.id, name=key_name)
        return user, generated


# Singleton instance
_db: BookmarkDB | None = None
_db_lock = threading.Lock()


def get_db(db_path: Path | None = None) -> BookmarkDB:
    """Get or create the singleton database instance."""
    global _db
    if _db is None:
        with _db_lock:
            if _db is None:  # Double-check after acquiring lock
                if db_path is None:
                    from bookmark_ai.config import get_config

                    db_path = Path(get_config().database.path).expanduser()
                _db = BookmarkDB(db_path)
    return _db


def reset_db() -> None:
    """Reset the singleton database instance (closes any open connections)."""
    global _db
    with _db_lock:
        if _db is not None:
            _db.close()
        _db = None


__all__ = [
    # Main class and singletons
    "BookmarkDB",
    "get_db",
    "reset_db",
    # Data models
    "APIKey",
    "CategoryRecord",
    "User",
    "UserSettings",
    "utcnow",
    # Constants
    "BOOKMARK_AI_DB_PATH",
    "SCHEMA_SQL",
    "EXPECTED_INDICES",
    "CURRENT_SCHEMA_VERSION",
    # Internal (used by tests)
    "_convert_timestamp",
]
