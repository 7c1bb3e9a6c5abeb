"""Category tree storage mixin."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from bookmark_ai.categories import CategoryTree
from bookmark_ai.db.models import CategoryRecord, utcnow

if TYPE_CHECKING:
    from bookmark_ai.db.core import BookmarkDBBase

logger = logging.getLogger(__name__)


class CategoryMixin:
    """Mixin providing per-user category tree storage (one tree per user)."""

    def get_category(self: BookmarkDBBase, user_id: str) -> CategoryRecord | None:
        """Get the user's stored tree, or None if they have never saved one."""
        with self.connection() as conn:
            row = conn.execute(
                "SELECT user_id, category_tree, created_at, updated_at"
                " FROM categories WHERE user_id = ?",
                (user_id,),
            ).fetchone()
        return CategoryRecord.from_row(row) if row else None

    def save_category_tree(
        self: BookmarkDBBase,
        user_id: str,
        tree: CategoryTree | dict[str, Any],
    ) -> CategoryRecord:
        """Replace (or create) the user's tree.

        The tree is stored as given; callers validate first.
        """
        raw = tree.to_raw() if isinstance(tree, CategoryTree) else tree
        now = utcnow()
        with self.connection() as conn:
            conn.execute(
                """
                INSERT INTO categories (user_id, category_tree, created_at, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    category_tree = excluded.category_tree,
                    updated_at = excluded.updated_at
                """,
                (user_id, json.dumps(raw), now, now),
            )
            row = conn.execute(
                "SELECT user_id, category_tree, created_at, updated_at"
                " FROM categories WHERE user_id = ?",
                (user_id,),
            ).fetchone()
        logger.debug("Saved category tree for user %s", user_id)
        return CategoryRecord.from_row(row)

    def delete_category(self: BookmarkDBBase, user_id: str) -> bool:
        """Delete the user's tree. Returns True if one existed."""
        with self.connection() as conn:
            cursor = conn.execute("DELETE FROM categories WHERE user_id = ?", (user_id,))
        return cursor.rowcount > 0
