"""Category tree data model.

A tree is a tagged union of two node kinds:

    Branch(children)  ordered mapping of label -> Branch | Leaf
    Leaf(items)       ordered list of item labels (strings)

The root of every tree is a Branch. Trees travel over the wire and sit in the
database in their raw JSON shape (nested dicts with string-list leaves);
``Branch.from_raw`` and ``Branch.to_raw`` convert between the two.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from bookmark_ai.categories.validator import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_NODES,
    validate_category_tree,
)
from bookmark_ai.errors import InvalidCategoryTreeError


@dataclass
class Leaf:
    """A category holding item labels and no subcategories."""

    items: list[str] = field(default_factory=list)

    def to_raw(self) -> list[str]:
        return list(self.items)


@dataclass
class Branch:
    """A category group whose children are further categories."""

    children: dict[str, CategoryNode] = field(default_factory=dict)

    @classmethod
    def from_raw(
        cls,
        raw: Any,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_nodes: int = DEFAULT_MAX_NODES,
    ) -> Branch:
        """Build a tree from its raw JSON shape.

        Args:
            raw: Deserialized value (possibly untrusted).
            max_depth: Deepest nesting accepted.
            max_nodes: Largest node count accepted.

        Returns:
            The root Branch.

        Raises:
            InvalidCategoryTreeError: If ``raw`` is not a valid tree.
        """
        if not validate_category_tree(raw, max_depth=max_depth, max_nodes=max_nodes):
            raise InvalidCategoryTreeError()
        return _branch_from_raw(raw)

    def to_raw(self) -> dict[str, Any]:
        """Convert back to nested dicts and string lists, preserving key order."""
        return {label: child.to_raw() for label, child in self.children.items()}


CategoryNode = Union[Branch, Leaf]

# The root of a category tree is always a branch.
CategoryTree = Branch


def _branch_from_raw(raw: dict[str, Any]) -> Branch:
    children: dict[str, CategoryNode] = {}
    for label, value in raw.items():
        if isinstance(value, list):
            children[label] = Leaf(list(value))
        else:
            children[label] = _branch_from_raw(value)
    return Branch(children)


def default_category_tree() -> CategoryTree:
    """Starter taxonomy seeded into every new account."""
    return CategoryTree.from_raw(
        {
            "Personal": {
                "Reading_List": [],
                "Learning": {
                    "Programming": [],
                    "Design": [],
                    "Business": [],
                },
                "Tools": [],
                "Inspiration": [],
            },
            "Work": {
                "Documentation": [],
                "Resources": [],
                "Projects": [],
            },
            "Archive": [],
        }
    )
