"""Category tree handling for bookmark classification.

A category tree is a user's hierarchical taxonomy: named groups (branches)
that hold either more groups or lists of item labels (leaves). This package
parses submitted trees, validates their shape, and flattens them into the
slash-delimited candidate paths offered to the classifier.

Usage:
    from bookmark_ai.categories import load_category_tree, flatten_categories

    tree = load_category_tree("Work:\\n  Docs: []\\nArchive: []")
    flatten_categories(tree)  # ["Work", "Work/Docs", "Archive"]
"""

from bookmark_ai.categories.flattener import (
    RESERVED_ROOT_SUFFIX,
    flatten_categories,
    format_key,
)
from bookmark_ai.categories.models import (
    Branch,
    CategoryNode,
    CategoryTree,
    Leaf,
    default_category_tree,
)
from bookmark_ai.categories.parser import load_category_tree, parse_category_tree_text
from bookmark_ai.categories.validator import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_NODES,
    validate_category_tree,
)

__all__ = [
    # Model
    "Branch",
    "Leaf",
    "CategoryNode",
    "CategoryTree",
    "default_category_tree",
    # Validation
    "validate_category_tree",
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_MAX_NODES",
    # Parsing
    "parse_category_tree_text",
    "load_category_tree",
    # Flattening
    "flatten_categories",
    "format_key",
    "RESERVED_ROOT_SUFFIX",
]
