"""API key storage mixin."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from bookmark_ai.db.models import APIKey, utcnow
from bookmark_ai.security import GeneratedAPIKey, generate_api_key, generate_id

if TYPE_CHECKING:
    from bookmark_ai.db.core import BookmarkDBBase

_API_KEY_COLUMNS = (
    "id, user_id, key_hash, key_prefix, name, is_active,"
    " expires_at, last_used_at, created_at"
)


class APIKeyMixin:
    """Mixin providing API key issue, lookup and revocation."""

    def create_api_key(
        self: BookmarkDBBase,
        user_id: str,
        name: str | None = None,
        expires_at: datetime | None = None,
    ) -> tuple[GeneratedAPIKey, APIKey]:
        """Issue a new key for a user.

        Returns:
            The generated key (plaintext, shown once) and its stored record.
        """
        generated = generate_api_key()
        record = APIKey(
            id=generate_id(),
            user_id=user_id,
            key_hash=generated.key_hash,
            key_prefix=generated.prefix,
            name=name,
            is_active=True,
            expires_at=expires_at,
            created_at=utcnow(),
        )
        with self.connection() as conn:
            conn.execute(
                """
                INSERT INTO api_keys
                (id, user_id, key_hash, key_prefix, name, is_active, expires_at, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.id,
                    record.user_id,
                    record.key_hash,
                    record.key_prefix,
                    record.name,
                    record.is_active,
                    record.expires_at,
                    record.created_at,
                ),
            )
        return generated, record

    def get_api_key_by_hash(self: BookmarkDBBase, key_hash: str) -> APIKey | None:
        """Look up a key record by hash (active or not)."""
        with self.connection() as conn:
            row = conn.execute(
                f"SELECT {_API_KEY_COLUMNS} FROM api_keys WHERE key_hash = ?", (key_hash,)
            ).fetchone()
        return APIKey.from_row(row) if row else None

    def list_api_keys(self: BookmarkDBBase, user_id: str) -> list[APIKey]:
        """All keys for a user, newest first."""
        with self.connection() as conn:
            rows = conn.execute(
                f"SELECT {_API_KEY_COLUMNS} FROM api_keys WHERE user_id = ?"
                " ORDER BY created_at DESC",
                (user_id,),
            ).fetchall()
        return [APIKey.from_row(row) for row in rows]

    def touch_api_key(self: BookmarkDBBase, key_id: str) -> None:
        """Record that a key was just used."""
        with self.connection() as conn:
            conn.execute(
                "UPDATE api_keys SET last_used_at = ? WHERE id = ?", (utcnow(), key_id)
            )

    def delete_api_key(self: BookmarkDBBase, user_id: str, key_id: str) -> bool:
        """Delete a key owned by ``user_id``.

        Returns:
            True if a key was deleted, False if none matched.
        """
        with self.connection() as conn:
            cursor = conn.execute(
                "DELETE FROM api_keys WHERE id = ? AND user_id = ?", (key_id, user_id)
            )
        return cursor.rowcount > 0
