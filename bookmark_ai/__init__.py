"""Bookmark AI - LLM-assisted bookmark analysis and categorization.

Classifies bookmarked URLs with Claude, matches them against a per-user
category tree, and forwards results to read-later and task integrations.
"""

from bookmark_ai.categories import (
    Branch,
    CategoryTree,
    Leaf,
    flatten_categories,
    format_key,
    validate_category_tree,
)

__version__ = "1.0.0"

__all__ = [
    "Branch",
    "CategoryTree",
    "Leaf",
    "flatten_categories",
    "format_key",
    "validate_category_tree",
]
