"""Todoist REST API client for bookmark follow-up tasks."""

from __future__ import annotations

import logging

import requests

from integrations.results import TodoistResult

logger = logging.getLogger(__name__)

TODOIST_TASKS_URL = "https://api.todoist.com/rest/v2/tasks"


def format_task_content(title: str, url: str, summary: str) -> str:
    """Task body: title, URL, blank line, summary."""
    return f"{title}\n{url}\n\n{summary}"


def create_todoist_task(
    title: str,
    url: str,
    summary: str,
    api_token: str,
    *,
    endpoint: str = TODOIST_TASKS_URL,
    timeout: float = 10.0,
    session: requests.Session | None = None,
) -> TodoistResult:
    """Create a Todoist task for a bookmark.

    Args:
        title: Page title (first line of the task).
        url: Bookmark URL.
        summary: Analysis summary.
        api_token: Todoist API token.
        endpoint: Override for the tasks endpoint.
        timeout: Request timeout in seconds.
        session: Optional requests session to reuse.

    Returns:
        TodoistResult with the new task ID on success.
    """
    http = session or requests
    logger.info("Creating Todoist task: %s", title)
    try:
        response = http.post(
            endpoint,
            json={"content": format_task_content(title, url, summary)},
            headers={"Authorization": f"Bearer {api_token}"},
            timeout=timeout,
        )
    except requests.RequestException as e:
        logger.error("Error creating Todoist task: %s", e)
        return TodoistResult(success=False, error=str(e) or "Unknown error")

    if response.status_code == 200:
        try:
            body = response.json()
        except ValueError as e:
            return TodoistResult(success=False, error=f"Invalid Todoist response: {e}")
        if not isinstance(body, dict):
            logger.warning("Todoist returned a non-object body: %.200r", body)
            return TodoistResult(success=False, error="Invalid Todoist response")
        task_id = body.get("id")
        return TodoistResult(success=True, task_id=str(task_id) if task_id is not None else None)
    if response.status_code == 403:
        error = "Invalid Todoist API token"
    elif response.status_code == 400:
        error = "Invalid request parameters"
    else:
        error = f"Unexpected status: {response.status_code} - {response.text}"
    logger.warning("Todoist task creation failed: %s", error)
    return TodoistResult(success=False, error=error)
