"""Bookmark analysis models."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AnalyzeBookmarkRequest(BaseModel):
    """Classify one bookmark.

    Example:
        ```json
        {
            "url": "https://github.com/psf/requests",
            "title": "psf/requests: A simple, yet elegant, HTTP library.",
            "createTodoistTask": false
        }
        ```
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "url": "https://github.com/psf/requests",
                "title": "psf/requests: A simple, yet elegant, HTTP library.",
                "createTodoistTask": False,
            }
        },
    )

    url: str = Field(
        ...,
        description="Absolute http(s) URL of the bookmarked page",
        examples=["https://github.com/psf/requests"],
        max_length=4096,
    )
    title: str | None = Field(
        default=None,
        description="Page title if known; when omitted the page is fetched",
    )
    create_todoist_task: bool = Field(
        default=False,
        alias="createTodoistTask",
        description="Also create a Todoist task (requires a stored Todoist token)",
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Require an absolute http or https URL."""
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("Invalid URL")
        return v


class AnalyzeBookmarkResponse(BaseModel):
    """Classification result plus any integration outcomes.

    Nothing is stored; the result is computed per request.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "url": "https://github.com/psf/requests",
                "isArticle": False,
                "contentType": "repository",
                "title": "psf/requests",
                "summary": "The requests HTTP library for Python.",
                "categories": ["python", "http", "library"],
                "matchedCategory": "Personal/Learning/Programming",
                "analyzedAt": "2024-01-15T10:30:00Z",
            }
        },
    )

    url: str = Field(..., description="The analyzed URL, as submitted")
    is_article: bool = Field(..., alias="isArticle", description="True for articles/blog posts")
    content_type: str = Field(
        ...,
        alias="contentType",
        description="Kind of page",
        examples=["article", "tool", "documentation", "repository"],
    )
    title: str = Field(..., description="Page title")
    summary: str = Field(..., description="One or two sentence summary")
    categories: list[str] = Field(default_factory=list, description="Free-form tags")
    matched_category: str = Field(
        default="",
        alias="matchedCategory",
        description="Best category path, 'Other', or empty for articles",
    )
    instapaper: dict[str, Any] | None = Field(
        default=None,
        description="Instapaper save outcome, present when attempted",
        examples=[{"saved": True, "bookmarkId": 123456}],
    )
    todoist: dict[str, Any] | None = Field(
        default=None,
        description="Todoist task outcome, present when attempted",
        examples=[{"created": False, "error": "Invalid Todoist API token"}],
    )
    analyzed_at: datetime = Field(..., alias="analyzedAt", description="Analysis time (UTC)")
