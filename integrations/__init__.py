"""Third-party services bookmarks can be forwarded to.

Usage:
    from integrations import create_todoist_task, save_to_instapaper

    result = save_to_instapaper(url, title, username, password)
    if not result.success:
        print(result.error)
"""

from integrations.instapaper import INSTAPAPER_ADD_URL, save_to_instapaper
from integrations.results import InstapaperResult, IntegrationResult, TodoistResult
from integrations.todoist import TODOIST_TASKS_URL, create_todoist_task, format_task_content

__all__ = [
    "INSTAPAPER_ADD_URL",
    "TODOIST_TASKS_URL",
    "InstapaperResult",
    "IntegrationResult",
    "TodoistResult",
    "create_todoist_task",
    "format_task_content",
    "save_to_instapaper",
]
