"""Flatten category trees into classifier candidate paths."""

from __future__ import annotations

from typing import Any

from bookmark_ai.categories.models import Branch, CategoryNode, CategoryTree

# Legacy exports wrap the whole tree in a "<Name>_Bookmarks" root key.
RESERVED_ROOT_SUFFIX = "_Bookmarks"


def format_key(key: str) -> str:
    """Turn a raw tree key into a display label ("Reading_List" -> "Reading List")."""
    return key.replace("_", " ")


def flatten_categories(tree: CategoryTree | dict[str, Any]) -> list[str]:
    """List every category path in the tree, parents before children.

    Paths join formatted labels with "/". Order follows the tree's own key
    order. A top-level key ending in ``_Bookmarks`` is not emitted; its
    children are flattened as if they sat at the root.

    Args:
        tree: A CategoryTree, or a raw dict that will be converted first.

    Returns:
        Candidate paths, e.g. ``["Work", "Work/Docs", "Archive"]``.

    Raises:
        InvalidCategoryTreeError: If a raw dict is not a valid tree.
    """
    if not isinstance(tree, Branch):
        tree = CategoryTree.from_raw(tree)

    paths: list[str] = []
    for label, node in tree.children.items():
        if label.endswith(RESERVED_ROOT_SUFFIX):
            if isinstance(node, Branch):
                _collect_children(node, "", paths)
            continue
        _collect(label, node, "", paths)
    return paths


def _collect(label: str, node: CategoryNode, prefix: str, paths: list[str]) -> None:
    formatted = format_key(label)
    path = f"{prefix}/{formatted}" if prefix else formatted
    paths.append(path)
    if isinstance(node, Branch):
        _collect_children(node, path, paths)


def _collect_children(branch: Branch, prefix: str, paths: list[str]) -> None:
    for label, child in branch.children.items():
        _collect(label, child, prefix, paths)
