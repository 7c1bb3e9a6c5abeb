"""User CRUD operations mixin."""

from __future__ import annotations

import logging
import sqlite3
from typing import TYPE_CHECKING

from bookmark_ai.db.models import User, UserSettings, utcnow
from bookmark_ai.errors import EmailAlreadyRegisteredError, UserNotFoundError
from bookmark_ai.security import generate_id

if TYPE_CHECKING:
    from bookmark_ai.db.core import BookmarkDBBase

logger = logging.getLogger(__name__)

_USER_COLUMNS = "id, email, full_name, settings_json, is_active, created_at, updated_at"


class UserMixin:
    """Mixin providing user CRUD operations."""

    def create_user(
        self: BookmarkDBBase,
        email: str,
        full_name: str | None = None,
        settings: UserSettings | None = None,
    ) -> User:
        """Create a new account.

        Raises:
            EmailAlreadyRegisteredError: If the email is already taken.
        """
        now = utcnow()
        user = User(
            id=generate_id(),
            email=email.strip().lower(),
            full_name=full_name,
            settings=settings or UserSettings(),
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        try:
            with self.connection() as conn:
                conn.execute(
                    f"INSERT INTO users ({_USER_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
                    (
                        user.id,
                        user.email,
                        user.full_name,
                        user.settings.to_json(),
                        user.is_active,
                        now,
                        now,
                    ),
                )
        except sqlite3.IntegrityError as e:
            raise EmailAlreadyRegisteredError(
                details={"email": user.email}, cause=e
            ) from e
        logger.info("Created user %s", user.id)
        return user

    def get_user(self: BookmarkDBBase, user_id: str) -> User | None:
        """Get a user by ID."""
        with self.connection() as conn:
            row = conn.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE id = ?", (user_id,)
            ).fetchone()
        return User.from_row(row) if row else None

    def get_user_by_email(self: BookmarkDBBase, email: str) -> User | None:
        """Get a user by email (case-insensitive)."""
        with self.connection() as conn:
            row = conn.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE email = ?",
                (email.strip().lower(),),
            ).fetchone()
        return User.from_row(row) if row else None

    def update_user(
        self: BookmarkDBBase,
        user_id: str,
        full_name: str | None = None,
        settings: UserSettings | None = None,
    ) -> User:
        """Update profile fields; ``None`` leaves a field unchanged.

        Raises:
            UserNotFoundError: If the user does not exist.
        """
        updates: list[str] = []
        params: list[object] = []
        if full_name is not None:
            updates.append("full_name = ?")
            params.append(full_name)
        if settings is not None:
            updates.append("settings_json = ?")
            params.append(settings.to_json())

        with self.connection() as conn:
            if updates:
                updates.append("updated_at = ?")
                params.extend([utcnow(), user_id])
                conn.execute(
                    f"UPDATE users SET {', '.join(updates)} WHERE id = ?", params
                )
            row = conn.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE id = ?", (user_id,)
            ).fetchone()

        if row is None:
            raise UserNotFoundError(details={"user_id": user_id})
        return User.from_row(row)

    def delete_user(self: BookmarkDBBase, user_id: str) -> bool:
        """Delete a user along with their keys and category tree.

        Returns:
            True if a user was deleted.
        """
        with self.connection() as conn:
            cursor = conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
        deleted = cursor.rowcount > 0
        if deleted:
            logger.info("Deleted user %s", user_id)
        return deleted
