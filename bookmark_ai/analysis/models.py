"""Result type for bookmark classification."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Sentinel category for non-article bookmarks that fit no candidate path.
OTHER_CATEGORY = "Other"


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def _as_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


@dataclass
class BookmarkAnalysis:
    """Classification of a single bookmark.

    Attributes:
        is_article: True for articles and blog posts.
        content_type: Free-form kind of page ("article", "tool", "repository", ...).
        title: Page title, either supplied by the caller or extracted by the engine.
        summary: One or two sentence description of the page.
        categories: Free-form tags suggested by the engine (not validated).
        matched_category: Best candidate path, "Other", or None for articles.
    """

    is_article: bool
    content_type: str
    title: str
    summary: str
    categories: list[str] = field(default_factory=list)
    matched_category: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> BookmarkAnalysis:
        """Build from the decoded engine JSON (camelCase keys).

        Missing or mistyped fields fall back to empty values; a missing
        ``isArticle`` counts as not an article.
        """
        raw_categories = payload.get("categories") or []
        if not isinstance(raw_categories, list):
            raw_categories = [raw_categories]
        matched = payload.get("matchedCategory")
        return cls(
            is_article=_as_bool(payload.get("isArticle", False)),
            content_type=_as_str(payload.get("contentType"), "unknown"),
            title=_as_str(payload.get("title")),
            summary=_as_str(payload.get("summary")),
            categories=[_as_str(c) for c in raw_categories if c is not None],
            matched_category=_as_str(matched) or None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase shape returned by the API."""
        return {
            "isArticle": self.is_article,
            "contentType": self.content_type,
            "title": self.title,
            "summary": self.summary,
            "categories": list(self.categories),
            "matchedCategory": self.matched_category or "",
        }
