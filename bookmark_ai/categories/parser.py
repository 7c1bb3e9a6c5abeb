"""Parse submitted category tree text.

Trees may be submitted as an already-decoded JSON object or as text. Text is
always parsed as YAML: YAML is a superset of JSON, so JSON text parses to the
same value.
"""

from __future__ import annotations

import logging
from typing import Any

import yaml

from bookmark_ai.categories.models import CategoryTree
from bookmark_ai.categories.validator import DEFAULT_MAX_DEPTH, DEFAULT_MAX_NODES
from bookmark_ai.errors import CategoryTreeParseError

logger = logging.getLogger(__name__)


def parse_category_tree_text(text: str) -> Any:
    """Parse YAML or JSON text into a plain Python value.

    The result is not validated; pass it to ``validate_category_tree``.

    Raises:
        CategoryTreeParseError: If the text is not valid YAML.
    """
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        logger.debug("Category tree text failed to parse: %s", e)
        raise CategoryTreeParseError(f"Invalid YAML/JSON format: {e}", cause=e) from e


def load_category_tree(
    value: Any,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_nodes: int = DEFAULT_MAX_NODES,
) -> CategoryTree:
    """Turn a submitted tree (object or YAML/JSON text) into a CategoryTree.

    Args:
        value: Decoded object, or text to parse as YAML.
        max_depth: Deepest nesting accepted.
        max_nodes: Largest node count accepted.

    Returns:
        The validated tree.

    Raises:
        CategoryTreeParseError: If text could not be parsed.
        InvalidCategoryTreeError: If the parsed value is not a valid tree.
    """
    raw = parse_category_tree_text(value) if isinstance(value, str) else value
    return CategoryTree.from_raw(raw, max_depth=max_depth, max_nodes=max_nodes)
