"""Structural validation of untrusted category trees.

Submitted trees come from user-supplied YAML or JSON, so nothing about their
shape can be assumed. ``validate_category_tree`` is a pure predicate: it
never raises, and it walks the value with an explicit stack so adversarial
nesting (including self-referencing YAML anchors) cannot exhaust the
interpreter stack.
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)

# Observed trees are at most ~5 levels deep; these ceilings only stop abuse.
DEFAULT_MAX_DEPTH = 64
DEFAULT_MAX_NODES = 10_000


def validate_category_tree(
    candidate: Any,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_nodes: int = DEFAULT_MAX_NODES,
) -> bool:
    """Check that a value has the shape of a category tree.

    A valid tree is a dict whose keys are strings and whose values are either
    nested valid dicts (branches) or lists of strings (leaves). Empty dicts
    and empty lists are accepted at any depth.

    Args:
        candidate: Arbitrary deserialized value.
        max_depth: Maximum number of nested key levels (the root's keys are level 1).
        max_nodes: Maximum number of keys across the whole tree.

    Returns:
        True if the value is a well-formed tree within the limits.
    """
    if not isinstance(candidate, dict):
        return False

    stack: list[tuple[dict[Any, Any], int]] = [(candidate, 1)]
    node_count = 0

    while stack:
        node, depth = stack.pop()
        if depth > max_depth:
            logger.debug("Category tree rejected: deeper than %d levels", max_depth)
            return False

        for label, value in node.items():
            node_count += 1
            if node_count > max_nodes:
                logger.debug("Category tree rejected: more than %d nodes", max_nodes)
                return False
            if not isinstance(label, str):
                return False
            if isinstance(value, list):
                if not all(isinstance(item, str) for item in value):
                    return False
            elif isinstance(value, dict):
                stack.append((value, depth + 1))
            else:
                return False

    return True
