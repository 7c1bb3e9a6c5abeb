"""Service-layer orchestration for bookmark endpoints."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime

from api.schemas import AnalyzeBookmarkResponse
from bookmark_ai.analysis import BookmarkAnalysis, BookmarkAnalyzer
from bookmark_ai.config import BookmarkAIConfig
from bookmark_ai.db import BookmarkDB, User
from bookmark_ai.errors import category_tree_not_found
from integrations import (
    InstapaperResult,
    TodoistResult,
    create_todoist_task,
    save_to_instapaper,
)

logger = logging.getLogger(__name__)


async def forward_to_integrations(
    user: User,
    url: str,
    analysis: BookmarkAnalysis,
    create_task: bool,
    config: BookmarkAIConfig,
) -> tuple[InstapaperResult | None, TodoistResult | None]:
    """Send an analyzed bookmark to the user's configured services.

    Articles go to Instapaper when the user has an Instapaper username.
    A Todoist task is created only when requested and a token is stored.
    Failures come back as results; nothing here raises.
    """
    settings = user.settings
    integrations = config.integrations

    instapaper: InstapaperResult | None = None
    if analysis.is_article and settings.instapaper_enabled:
        try:
            instapaper = await asyncio.to_thread(
                save_to_instapaper,
                url,
                analysis.title,
                settings.instapaper_username or "",
                settings.instapaper_password or "",
                endpoint=integrations.instapaper_url,
                timeout=integrations.timeout_seconds,
            )
        except Exception as e:
            logger.exception("Instapaper save failed for %s", url)
            instapaper = InstapaperResult(success=False, error=str(e) or type(e).__name__)

    todoist: TodoistResult | None = None
    if create_task and settings.todoist_enabled:
        try:
            todoist = await asyncio.to_thread(
                create_todoist_task,
                analysis.title,
                url,
                analysis.summary,
                settings.todoist_api_token or "",
                endpoint=integrations.todoist_url,
                timeout=integrations.timeout_seconds,
            )
        except Exception as e:
            logger.exception("Todoist task creation failed for %s", url)
            todoist = TodoistResult(success=False, error=str(e) or type(e).__name__)

    return instapaper, todoist


async def analyze_for_user(
    db: BookmarkDB,
    analyzer: BookmarkAnalyzer,
    user: User,
    url: str,
    title: str | None,
    create_task: bool,
    config: BookmarkAIConfig,
) -> AnalyzeBookmarkResponse:
    """Classify a bookmark against the user's tree and run integrations.

    Raises:
        CategoryTreeNotFoundError: If the user has no stored tree.
        AnalysisError: If classification fails.
    """
    record = await asyncio.to_thread(db.get_category, user.id)
    if record is None:
        raise category_tree_not_found(user.id)

    # Raw stored shape: a corrupt tree surfaces as an analysis setup error.
    analysis = await analyzer.analyze(url, record.category_tree, title=title)
    logger.info(
        "Analyzed %s for user %s: article=%s matched=%s",
        url,
        user.id,
        analysis.is_article,
        analysis.matched_category,
    )

    instapaper, todoist = await forward_to_integrations(user, url, analysis, create_task, config)

    return AnalyzeBookmarkResponse(
        url=url,
        is_article=analysis.is_article,
        content_type=analysis.content_type,
        title=analysis.title,
        summary=analysis.summary,
        categories=analysis.categories,
        matched_category=analysis.matched_category or "",
        instapaper=instapaper.to_dict() if instapaper else None,
        todoist=todoist.to_dict() if todoist else None,
        analyzed_at=datetime.now(UTC),
    )
