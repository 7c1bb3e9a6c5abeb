"""Result types shared by the third-party integrations.

Integration calls never raise; every outcome, including network failures,
comes back as one of these.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class IntegrationResult:
    """Outcome of one integration call.

    Attributes:
        success: Whether the remote service accepted the request.
        error: Error message if it did not.
    """

    success: bool
    error: str | None = None

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if not self.success and not self.error:
            msg = "success=False requires error message"
            raise ValueError(msg)


@dataclass
class InstapaperResult(IntegrationResult):
    """Result of saving a URL to Instapaper.

    Attributes:
        bookmark_id: Instapaper bookmark ID when a new bookmark was created.
    """

    bookmark_id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase shape returned by the API."""
        data: dict[str, Any] = {"saved": self.success}
        if self.bookmark_id is not None:
            data["bookmarkId"] = self.bookmark_id
        if self.error:
            data["error"] = self.error
        return data


@dataclass
class TodoistResult(IntegrationResult):
    """Result of creating a Todoist task.

    Attributes:
        task_id: ID of the created task.
    """

    task_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase shape returned by the API."""
        data: dict[str, Any] = {"created": self.success}
        if self.task_id is not None:
            data["taskId"] = self.task_id
        if self.error:
            data["error"] = self.error
        return data
