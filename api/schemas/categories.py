"""Category tree models.

Trees travel as nested JSON objects whose leaves are string arrays. A tree
may also be submitted as YAML or JSON text.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

_EXAMPLE_TREE: dict[str, Any] = {
    "Personal": {
        "Reading_List": [],
        "Learning": {"Programming": [], "Design": []},
    },
    "Work": {"Documentation": [], "Projects": []},
    "Archive": [],
}


class CategoryTreeUpdateRequest(BaseModel):
    """Replace the caller's category tree.

    Example:
        ```json
        {"categoryTree": "Work:\\n  Docs: []\\nArchive: []\\n"}
        ```
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"categoryTree": _EXAMPLE_TREE}},
    )

    # Any JSON value is accepted here so shape errors get the tree error message.
    category_tree: Any = Field(
        ...,
        alias="categoryTree",
        description="Tree as a JSON object, or as YAML/JSON text",
    )


class CategoryTreeResponse(BaseModel):
    """The caller's stored category tree."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "categoryTree": _EXAMPLE_TREE,
                "updatedAt": "2024-01-15T10:30:00",
            }
        },
    )

    category_tree: dict[str, Any] = Field(
        ...,
        alias="categoryTree",
        description="Nested object; branches are objects, leaves are string arrays",
    )
    updated_at: datetime | None = Field(
        default=None,
        alias="updatedAt",
        description="When the tree was last replaced (UTC)",
    )


class CategoryCandidatesResponse(BaseModel):
    """Flattened category paths offered to the classifier."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "categories": [
                    "Personal",
                    "Personal/Reading List",
                    "Personal/Learning",
                    "Personal/Learning/Programming",
                    "Archive",
                ]
            }
        }
    )

    categories: list[str] = Field(
        ...,
        description="Slash-separated display paths, parents before children",
    )
